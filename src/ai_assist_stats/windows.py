# ABOUTME: Reporting window arithmetic for daily and monthly statistics.
# ABOUTME: Decides which log dates are counted and the 7 buckets a report shows.

from __future__ import annotations

import calendar
import re
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Optional

BUCKET_COUNT = 7
DAILY_LOOKBACK_DAYS = 7
MONTHLY_LOOKBACK_MONTHS = 6


class Mode(Enum):
    DAILY = "daily"
    MONTHLY = "monthly"


def _add_months(d: date, months: int) -> date:
    """Shift ``d`` by whole months, clamping the day to the target month."""
    index = d.year * 12 + (d.month - 1) + months
    year, month = divmod(index, 12)
    month += 1
    day = min(d.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def first_of_month(d: date) -> date:
    return d.replace(day=1)


def last_of_month(d: date) -> date:
    return d.replace(day=calendar.monthrange(d.year, d.month)[1])


def in_window(candidate: date, reference: date, mode: Mode) -> bool:
    """Check whether ``candidate`` falls in the reporting range.

    DAILY: the 7 days ending at ``reference`` (the day 7 days back is excluded).
    MONTHLY: after the first day of the month 6 months back, up to the end
    of the reference month.
    """
    if mode is Mode.DAILY:
        return reference - timedelta(days=DAILY_LOOKBACK_DAYS) < candidate <= reference
    lower = first_of_month(_add_months(reference, -MONTHLY_LOOKBACK_MONTHS))
    return lower < candidate <= last_of_month(reference)


def bucket_for(candidate: date, mode: Mode) -> date:
    """Truncate a log date to its bucket key."""
    if mode is Mode.MONTHLY:
        return first_of_month(candidate)
    return candidate


def bucket_sequence(reference: date, mode: Mode) -> list[date]:
    """Return the 7 report buckets, oldest first, without gaps."""
    if mode is Mode.DAILY:
        return [reference - timedelta(days=i) for i in range(BUCKET_COUNT - 1, -1, -1)]
    start = first_of_month(reference)
    return [_add_months(start, -i) for i in range(BUCKET_COUNT - 1, -1, -1)]


@dataclass(frozen=True)
class WindowSpec:
    """Reference date plus mode, fixed for one run."""

    reference_date: date
    mode: Mode = Mode.DAILY

    def contains(self, candidate: date) -> bool:
        return in_window(candidate, self.reference_date, self.mode)

    def bucket_for(self, candidate: date) -> date:
        return bucket_for(candidate, self.mode)

    def bucket_sequence(self) -> list[date]:
        return bucket_sequence(self.reference_date, self.mode)

    def label(self, bucket: date) -> str:
        """Format a bucket the way reports print it."""
        if self.mode is Mode.MONTHLY:
            return bucket.strftime("%Y-%m")
        return bucket.strftime("%Y-%m-%d")

    @property
    def report_suffix(self) -> str:
        return self.mode.value


_MONTH_RE = re.compile(r"\d{6}")
_DAY_RE = re.compile(r"\d{8}")
_ISO_DAY_RE = re.compile(r"\d{4}-\d{2}-\d{2}")


def parse_reference(text: str, mode: Optional[Mode] = None) -> WindowSpec:
    """Parse a reference date argument into a WindowSpec.

    Formats:
    - ``yyyyMM``: monthly report, reference is the first day of that month
    - ``yyyyMMdd`` or ``yyyy-MM-dd``: daily report

    Args:
        text: The date argument as typed by the user.
        mode: Forces the mode regardless of the format, if given.

    Raises:
        ValueError: The text matches none of the formats or is not a real date.
    """
    value = text.strip()
    try:
        if _MONTH_RE.fullmatch(value):
            parsed = datetime.strptime(value, "%Y%m").date()
            inferred = Mode.MONTHLY
        elif _DAY_RE.fullmatch(value):
            parsed = datetime.strptime(value, "%Y%m%d").date()
            inferred = Mode.DAILY
        elif _ISO_DAY_RE.fullmatch(value):
            parsed = datetime.strptime(value, "%Y-%m-%d").date()
            inferred = Mode.DAILY
        else:
            raise ValueError("unrecognized format")
    except ValueError as e:
        raise ValueError(
            f"Invalid reference date {text!r}: expected yyyyMM, yyyyMMdd or yyyy-MM-dd"
        ) from e
    return WindowSpec(reference_date=parsed, mode=mode or inferred)
