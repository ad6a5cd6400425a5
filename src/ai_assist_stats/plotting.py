from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402

from .behaviors import BehaviorTag  # noqa: E402
from .usage_stats import Aggregate, DailyStats  # noqa: E402
from .windows import WindowSpec  # noqa: E402

SERIES_STYLE: list[tuple[BehaviorTag, str, str]] = [
    (BehaviorTag.PRIMARY_CODE, "primary code", "#2563eb"),
    (BehaviorTag.PRIMARY_QUERY, "primary query", "#93c5fd"),
    (BehaviorTag.SECONDARY_CODE, "secondary code", "#111827"),
    (BehaviorTag.SECONDARY_QUERY, "secondary query", "#9ca3af"),
]


@dataclass(frozen=True)
class BucketSeries:
    labels: list[str]
    counts: dict[BehaviorTag, list[int]]
    users: int


def bucket_series(aggregate: Aggregate, window: WindowSpec) -> BucketSeries:
    """Sum every user's counts per report bucket."""
    buckets = window.bucket_sequence()
    totals = [DailyStats() for _ in buckets]
    for user_stats in aggregate.values():
        for i, bucket in enumerate(buckets):
            stats = user_stats.get(bucket)
            if stats is not None:
                totals[i].merge(stats)
    return BucketSeries(
        labels=[window.label(b) for b in buckets],
        counts={tag: [t.count(tag) for t in totals] for tag in BehaviorTag},
        users=len(aggregate),
    )


def plot_usage_png(
    series: BucketSeries,
    output_png: Path,
    title: str,
    dpi: int = 160,
) -> None:
    output_png = output_png.expanduser().resolve()
    output_png.parent.mkdir(parents=True, exist_ok=True)

    x = list(range(len(series.labels)))
    fig, ax = plt.subplots(nrows=1, ncols=1, figsize=(12, 4.5))
    fig.suptitle(title, fontsize=14, fontweight="semibold")

    bottom = [0] * len(x)
    for tag, label, color in SERIES_STYLE:
        values = series.counts[tag]
        ax.bar(x, values, bottom=bottom, color=color, width=0.6, label=label)
        bottom = [b + v for b, v in zip(bottom, values)]

    ax.set_xticks(x)
    ax.set_xticklabels(series.labels)
    ax.set_ylabel("actions")
    ax.grid(True, axis="y", alpha=0.25)
    ax.legend(loc="upper left", fontsize=9, frameon=False)

    total_records = sum(series.counts[BehaviorTag.TOTAL_RECORDS])
    fig.text(
        0.5,
        0.02,
        f"users: {series.users}  log records: {total_records}",
        ha="center",
        fontsize=9,
        color="#555",
    )

    fig.tight_layout(rect=(0, 0.04, 1, 0.92))
    fig.savefig(output_png, dpi=dpi)
    plt.close(fig)
