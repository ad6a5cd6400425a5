# ABOUTME: Exceptions raised by a usage statistics run.
# ABOUTME: All derive from RuntimeError so the CLI reports them uniformly.

from __future__ import annotations


class UsageStatsError(RuntimeError):
    """Base class for errors surfaced to the caller of a run."""


class DirectoryNotFoundError(UsageStatsError):
    """The log directory does not exist or is not a directory."""


class NoLogFilesFoundError(UsageStatsError):
    """Discovery found no *.log or *.log.<n> files."""


class MalformedFileNameError(UsageStatsError):
    """A log file name does not carry an identity."""


class ReportWriteError(UsageStatsError):
    """A report file could not be written."""
