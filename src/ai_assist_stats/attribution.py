# ABOUTME: Derives the user identity a log file belongs to from its file name.
# ABOUTME: Log files are named <prefix>_<identity>_<suffix>.log[.<n>].

from __future__ import annotations

from typing import Callable

from .errors import MalformedFileNameError

IDENTITY_DELIMITER = "_"

# Takes a bare file name, returns the identity or raises MalformedFileNameError.
IdentityExtractor = Callable[[str], str]


def underscore_identity(file_name: str) -> str:
    """Return the text between the last two underscores of ``file_name``.

    ``app_alice_2024.log`` -> ``alice``. The identity is not validated.

    Raises:
        MalformedFileNameError: Fewer than two underscores in the name.
    """
    last = file_name.rfind(IDENTITY_DELIMITER)
    if last == -1:
        raise MalformedFileNameError(f"No identity delimiter in log file name: {file_name}")
    previous = file_name.rfind(IDENTITY_DELIMITER, 0, last)
    if previous == -1:
        raise MalformedFileNameError(
            f"Expected <prefix>_<identity>_<suffix> log file name, got: {file_name}"
        )
    return file_name[previous + 1 : last]
