# ABOUTME: Renders an aggregate as a plain text report and an xlsx workbook.
# ABOUTME: Every user gets one row per report bucket, zero-filled when absent.

from __future__ import annotations

from pathlib import Path

from openpyxl import Workbook

from .config import DEFAULT_SECONDARY_QUERY_DIVISOR
from .errors import ReportWriteError
from .usage_stats import Aggregate, DailyStats
from .windows import WindowSpec

REPORT_BASENAME = "analysis_report"
SHEET_TITLE = "Log Analysis Report"
SHEET_HEADERS = [
    "No.",
    "Name",
    "Date/Month",
    "Total Records",
    "Primary Total",
    "Primary Code",
    "Primary Query",
    "Secondary Code",
    "Secondary Query",
]


def report_path(output_dir: Path, window: WindowSpec, extension: str) -> Path:
    return output_dir / f"{REPORT_BASENAME}_{window.report_suffix}.{extension}"


def report_rows(aggregate: Aggregate, window: WindowSpec) -> list[tuple[str, str, DailyStats]]:
    """Flatten the aggregate into (user, bucket label, stats) rows.

    Users are sorted by identity, buckets follow the window's sequence.
    """
    rows: list[tuple[str, str, DailyStats]] = []
    buckets = window.bucket_sequence()
    for user in sorted(aggregate):
        user_stats = aggregate[user]
        for bucket in buckets:
            rows.append((user, window.label(bucket), user_stats.get(bucket, DailyStats())))
    return rows


def format_stats_line(label: str, stats: DailyStats) -> str:
    return (
        f"{label} total_records: {stats.total_records}"
        f" primary_total: {stats.primary_total}"
        f" primary_code: {stats.primary_code}"
        f" primary_query: {stats.primary_query}"
        f" secondary_code: {stats.secondary_code}"
        f" secondary_query: {stats.secondary_query}"
    )


def write_text_report(output_dir: Path, aggregate: Aggregate, window: WindowSpec) -> Path:
    path = report_path(output_dir, window, "txt")
    lines: list[str] = []
    current_user = None
    for user, label, stats in report_rows(aggregate, window):
        if user != current_user:
            if current_user is not None:
                lines.append("")
            lines.append(user)
            current_user = user
        lines.append(format_stats_line(label, stats))
    if lines:
        lines.append("")

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("\n".join(lines) + ("\n" if lines else ""), encoding="utf-8")
    except OSError as e:
        raise ReportWriteError(f"Failed to write text report {path}: {e}") from e
    return path


def write_xlsx_report(
    output_dir: Path,
    aggregate: Aggregate,
    window: WindowSpec,
    secondary_query_divisor: int = DEFAULT_SECONDARY_QUERY_DIVISOR,
) -> Path:
    """Write the spreadsheet report.

    The secondary tool logs each chat request several times, so its query
    column is divided by ``secondary_query_divisor``. The factor was measured,
    not derived, and only applies to this sheet; the aggregate keeps raw counts.
    """
    if secondary_query_divisor <= 0:
        raise ValueError(f"secondary_query_divisor must be positive, got {secondary_query_divisor}")

    path = report_path(output_dir, window, "xlsx")
    wb = Workbook()
    ws = wb.active
    ws.title = SHEET_TITLE
    ws.append(SHEET_HEADERS)
    for index, (user, label, stats) in enumerate(report_rows(aggregate, window), start=1):
        ws.append(
            [
                index,
                user,
                label,
                stats.total_records,
                stats.primary_total,
                stats.primary_code,
                stats.primary_query,
                stats.secondary_code,
                stats.secondary_query // secondary_query_divisor,
            ]
        )

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        wb.save(path)
    except OSError as e:
        raise ReportWriteError(f"Failed to write spreadsheet report {path}: {e}") from e
    return path
