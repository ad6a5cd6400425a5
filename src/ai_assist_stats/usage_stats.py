# ABOUTME: Aggregates per-user assist tool usage from a directory of IDE logs.
# ABOUTME: Streams each log file line by line into user -> bucket -> counts.

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path
from typing import Iterable, Optional

from .attribution import IdentityExtractor, underscore_identity
from .behaviors import BehaviorClassifier, BehaviorTag
from .errors import DirectoryNotFoundError, MalformedFileNameError, NoLogFilesFoundError
from .windows import WindowSpec

logger = logging.getLogger(__name__)

LOG_FILE_RE = re.compile(r".*\.log(\.\d+)?")
_DATE_TOKEN_RE = re.compile(r"\d{4}-\d{2}-\d{2}")


@dataclass
class DailyStats:
    """Counts for one (user, bucket) pair."""

    total_records: int = 0
    primary_code: int = 0
    primary_query: int = 0
    secondary_code: int = 0
    secondary_query: int = 0

    def increment(self, tag: BehaviorTag, by: int = 1) -> None:
        setattr(self, tag.value, getattr(self, tag.value) + by)

    def count(self, tag: BehaviorTag) -> int:
        return int(getattr(self, tag.value))

    def merge(self, other: DailyStats) -> None:
        for tag in BehaviorTag:
            self.increment(tag, other.count(tag))

    @property
    def primary_total(self) -> int:
        return self.primary_code + self.primary_query

    @property
    def secondary_total(self) -> int:
        return self.secondary_code + self.secondary_query


UserStats = dict[date, DailyStats]
Aggregate = dict[str, UserStats]


def _parse_log_date(token: str) -> Optional[date]:
    if not _DATE_TOKEN_RE.fullmatch(token):
        return None
    try:
        return datetime.strptime(token, "%Y-%m-%d").date()
    except ValueError:
        return None


def process_line(
    line: str,
    user_stats: UserStats,
    window: WindowSpec,
    classifier: BehaviorClassifier,
) -> bool:
    """Count one log line into ``user_stats``.

    Lines without a leading ``yyyy-MM-dd`` token followed by a space, and
    lines dated outside the window, are skipped.

    Returns:
        True if the line was counted.
    """
    parts = line.split(" ", 1)
    if len(parts) < 2:
        return False

    log_date = _parse_log_date(parts[0])
    if log_date is None or not window.contains(log_date):
        return False

    stats = user_stats.setdefault(window.bucket_for(log_date), DailyStats())
    stats.increment(BehaviorTag.TOTAL_RECORDS)
    for tag in classifier.classify(line):
        stats.increment(tag)
    return True


def process_lines(
    lines: Iterable[str],
    window: WindowSpec,
    classifier: BehaviorClassifier,
    user_stats: Optional[UserStats] = None,
) -> UserStats:
    """Run ``process_line`` over a stream of lines."""
    if user_stats is None:
        user_stats = {}
    for raw_line in lines:
        process_line(raw_line.rstrip("\r\n"), user_stats, window, classifier)
    return user_stats


def merge_user_stats(target: UserStats, source: UserStats) -> None:
    """Add every count of ``source`` into ``target``."""
    for bucket, stats in source.items():
        target.setdefault(bucket, DailyStats()).merge(stats)


def discover_log_files(log_dir: Path) -> list[Path]:
    """Find *.log and rotated *.log.<n> files below ``log_dir``.

    Raises:
        DirectoryNotFoundError: ``log_dir`` is missing or not a directory.
        NoLogFilesFoundError: Nothing matched.
    """
    if not log_dir.exists():
        raise DirectoryNotFoundError(f"Log directory does not exist: {log_dir}")
    if not log_dir.is_dir():
        raise DirectoryNotFoundError(f"Log path is not a directory: {log_dir}")

    files = sorted(
        p for p in log_dir.rglob("*") if p.is_file() and LOG_FILE_RE.fullmatch(p.name)
    )
    if not files:
        raise NoLogFilesFoundError(f"No log files found in log directory: {log_dir}")
    return files


@dataclass
class UsageRun:
    """Outcome of one aggregation run."""

    window: WindowSpec
    aggregate: Aggregate = field(default_factory=dict)
    files_processed: list[Path] = field(default_factory=list)
    files_skipped: list[Path] = field(default_factory=list)


def run_usage(
    log_dir: Path,
    window: WindowSpec,
    classifier: Optional[BehaviorClassifier] = None,
    extract_identity: IdentityExtractor = underscore_identity,
) -> UsageRun:
    """Aggregate every log file under ``log_dir`` for ``window``.

    Files whose names carry no identity, and files that fail to read, are
    logged and skipped. A file is merged into its user's stats only once it
    has been read completely.
    """
    if classifier is None:
        classifier = BehaviorClassifier()
    log_dir = log_dir.expanduser()
    run = UsageRun(window=window)

    for log_file in discover_log_files(log_dir):
        try:
            identity = extract_identity(log_file.name)
        except MalformedFileNameError as e:
            logger.warning("Skipping %s: %s", log_file, e)
            run.files_skipped.append(log_file)
            continue

        logger.info("Processing %s (user: %s)", log_file.name, identity)
        user_stats = run.aggregate.setdefault(identity, {})
        try:
            with log_file.open("r", encoding="utf-8", errors="replace") as f:
                file_stats = process_lines(f, window, classifier)
        except OSError as e:
            logger.warning("Failed to read %s: %s", log_file, e)
            run.files_skipped.append(log_file)
            continue

        merge_user_stats(user_stats, file_stats)
        run.files_processed.append(log_file)

    return run


def collect_usage(
    log_dir: Path,
    window: WindowSpec,
    classifier: Optional[BehaviorClassifier] = None,
    extract_identity: IdentityExtractor = underscore_identity,
) -> Aggregate:
    """Return user -> bucket -> DailyStats for all logs under ``log_dir``."""
    return run_usage(log_dir, window, classifier, extract_identity).aggregate
