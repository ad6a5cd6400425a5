# ABOUTME: CLI entry point for ai-assist-stats usage analysis tool.
# ABOUTME: Provides analyze command for daily/monthly reports and markers listing.

from __future__ import annotations

import argparse
import logging
import sys
from datetime import date
from importlib import metadata
from pathlib import Path
from typing import Optional

from .behaviors import BehaviorClassifier, rules_with_overrides
from .config import StatsConfig, load_config, resolve_log_dir, resolve_output_dir
from .reports import report_rows, write_text_report, write_xlsx_report
from .usage_stats import run_usage
from .windows import Mode, WindowSpec, parse_reference


def _version() -> str:
    try:
        return metadata.version("ai-assist-stats")
    except metadata.PackageNotFoundError:
        return "0.0.0"


def _load_config(ns: argparse.Namespace) -> StatsConfig:
    config_path = Path(ns.config).expanduser() if ns.config else None
    return load_config(config_path)


def _resolve_window(date_arg: Optional[str], mode_arg: Optional[str]) -> WindowSpec:
    """Build the run's window from --date and --mode.

    Without --date the window ends today; without --mode the date format
    decides (yyyyMM is monthly).
    """
    mode = Mode(mode_arg) if mode_arg else None
    if date_arg is None:
        return WindowSpec(reference_date=date.today(), mode=mode or Mode.DAILY)
    return parse_reference(date_arg, mode)


def _cmd_analyze(ns: argparse.Namespace) -> int:
    """Aggregate the log directory and write the reports."""
    config = _load_config(ns)
    try:
        window = _resolve_window(ns.date, ns.mode)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    log_dir = resolve_log_dir(ns.log_dir, config)
    output_dir = resolve_output_dir(ns.output_dir, config, log_dir)
    classifier = BehaviorClassifier(rules_with_overrides(config.markers))

    run = run_usage(log_dir, window, classifier)

    if ns.verbose:
        print(f"log_dir: {log_dir}")
        print(f"reference_date: {window.reference_date.isoformat()}")
        print(f"mode: {window.mode.value}")
        print(f"files_processed: {len(run.files_processed)}")
        print(f"files_skipped: {len(run.files_skipped)}")
        for skipped in run.files_skipped:
            print(f"  - {skipped}")

    txt_path = write_text_report(output_dir, run.aggregate, window)
    print(f"text: {txt_path}")
    if not ns.no_xlsx:
        xlsx_path = write_xlsx_report(
            output_dir,
            run.aggregate,
            window,
            secondary_query_divisor=config.secondary_query_divisor,
        )
        print(f"xlsx: {xlsx_path}")
    if ns.plot:
        from .plotting import bucket_series, plot_usage_png

        out_png = Path(ns.plot).expanduser()
        plot_usage_png(
            bucket_series(run.aggregate, window),
            out_png,
            title=f"AI assist usage ({window.mode.value}, ending {window.label(window.reference_date)})",
        )
        print(f"plot: {out_png}")

    print()
    print(
        f"{'user':<16} {'bucket':<12} {'records':>8} {'primary':>8} {'p.code':>8} "
        f"{'p.query':>8} {'s.code':>8} {'s.query':>8}"
    )
    print("-" * 84)
    for user, label, stats in report_rows(run.aggregate, window):
        print(
            f"{user:<16} {label:<12} {stats.total_records:>8} {stats.primary_total:>8} "
            f"{stats.primary_code:>8} {stats.primary_query:>8} "
            f"{stats.secondary_code:>8} {stats.secondary_query:>8}"
        )

    return 0


def _cmd_markers(ns: argparse.Namespace) -> int:
    """Print the marker rules the classifier would use."""
    config = _load_config(ns)
    classifier = BehaviorClassifier(rules_with_overrides(config.markers))
    for rule in classifier.rules:
        print(f"{rule.tag.value}: {rule.marker}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ai-assist-stats",
        description="Per-user AI assist usage statistics from IDE logs.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {_version()}")

    sub = parser.add_subparsers(dest="cmd", required=True)

    analyze = sub.add_parser(
        "analyze",
        help="Count code/query actions per user over the last 7 days or 7 months.",
    )
    analyze.add_argument(
        "--date",
        default=None,
        help="Reference date: yyyyMMdd or yyyy-MM-dd (daily), yyyyMM (monthly). Default: today.",
    )
    analyze.add_argument(
        "--mode",
        choices=[m.value for m in Mode],
        default=None,
        help="Force daily or monthly buckets regardless of the --date format.",
    )
    analyze.add_argument(
        "--log-dir",
        default=None,
        help="Directory searched recursively for *.log and *.log.<n> files. "
             "Can also be set via AI_ASSIST_STATS_LOG_DIR env var.",
    )
    analyze.add_argument(
        "--output-dir",
        default=None,
        help="Directory for the reports (default: the log directory).",
    )
    analyze.add_argument(
        "--config",
        default=None,
        help="Path to config file (default: ~/.config/ai-assist-stats/config.toml).",
    )
    analyze.add_argument(
        "--no-xlsx",
        action="store_true",
        help="Skip the spreadsheet report.",
    )
    analyze.add_argument(
        "--plot",
        default=None,
        help="Also write a PNG bar chart of actions per bucket to this path.",
    )
    analyze.add_argument(
        "--verbose",
        action="store_true",
        help="Show detailed output.",
    )
    analyze.set_defaults(func=_cmd_analyze)

    markers = sub.add_parser("markers", help="List the active log markers per behavior.")
    markers.add_argument(
        "--config",
        default=None,
        help="Path to config file (default: ~/.config/ai-assist-stats/config.toml).",
    )
    markers.set_defaults(func=_cmd_markers)

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    ns = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.INFO if getattr(ns, "verbose", False) else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        rc = int(ns.func(ns))
    except RuntimeError as e:
        print(str(e), file=sys.stderr)
        raise SystemExit(2) from e
    raise SystemExit(rc)
