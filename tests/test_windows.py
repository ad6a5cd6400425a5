# ABOUTME: Tests for windows module.
# ABOUTME: Tests window inclusion, bucket truncation, bucket sequences and date parsing.

from __future__ import annotations

from datetime import date, timedelta

import pytest


class TestInWindowDaily:
    """Tests for in_window in daily mode."""

    def test_reference_date_included(self) -> None:
        """in_window includes the reference date itself."""
        from ai_assist_stats.windows import Mode, in_window

        assert in_window(date(2025, 3, 4), date(2025, 3, 4), Mode.DAILY) is True

    def test_seven_days_back_excluded(self) -> None:
        """in_window excludes the day exactly 7 days before the reference."""
        from ai_assist_stats.windows import Mode, in_window

        assert in_window(date(2025, 2, 25), date(2025, 3, 4), Mode.DAILY) is False

    def test_six_days_back_included(self) -> None:
        """in_window includes the oldest bucket day."""
        from ai_assist_stats.windows import Mode, in_window

        assert in_window(date(2025, 2, 26), date(2025, 3, 4), Mode.DAILY) is True

    def test_future_date_excluded(self) -> None:
        """in_window excludes dates after the reference."""
        from ai_assist_stats.windows import Mode, in_window

        assert in_window(date(2025, 3, 5), date(2025, 3, 4), Mode.DAILY) is False

    def test_matches_bucket_sequence(self) -> None:
        """Exactly the dates of the daily bucket sequence are in the window."""
        from ai_assist_stats.windows import Mode, bucket_sequence, in_window

        reference = date(2024, 3, 2)
        buckets = set(bucket_sequence(reference, Mode.DAILY))
        for offset in range(-20, 20):
            d = reference + timedelta(days=offset)
            assert in_window(d, reference, Mode.DAILY) is (d in buckets)


class TestInWindowMonthly:
    """Tests for in_window in monthly mode."""

    def test_includes_date_two_months_back(self) -> None:
        """in_window includes a January date for a mid-March reference."""
        from ai_assist_stats.windows import Mode, in_window

        assert in_window(date(2025, 1, 10), date(2025, 3, 15), Mode.MONTHLY) is True

    def test_includes_end_of_reference_month(self) -> None:
        """in_window includes the last day of the reference month."""
        from ai_assist_stats.windows import Mode, in_window

        assert in_window(date(2025, 3, 31), date(2025, 3, 15), Mode.MONTHLY) is True
        assert in_window(date(2025, 4, 1), date(2025, 3, 15), Mode.MONTHLY) is False

    def test_lower_bound_is_strict(self) -> None:
        """in_window excludes the first day of the month six months back."""
        from ai_assist_stats.windows import Mode, in_window

        assert in_window(date(2024, 9, 1), date(2025, 3, 15), Mode.MONTHLY) is False
        assert in_window(date(2024, 9, 2), date(2025, 3, 15), Mode.MONTHLY) is True
        assert in_window(date(2024, 8, 31), date(2025, 3, 15), Mode.MONTHLY) is False

    def test_reference_at_end_of_month(self) -> None:
        """in_window handles a reference date on a 31st."""
        from ai_assist_stats.windows import Mode, in_window

        assert in_window(date(2024, 9, 15), date(2025, 3, 31), Mode.MONTHLY) is True
        assert in_window(date(2024, 8, 31), date(2025, 3, 31), Mode.MONTHLY) is False


class TestBucketFor:
    """Tests for bucket_for function."""

    def test_daily_keeps_date(self) -> None:
        """bucket_for leaves the date alone in daily mode."""
        from ai_assist_stats.windows import Mode, bucket_for

        assert bucket_for(date(2025, 3, 4), Mode.DAILY) == date(2025, 3, 4)

    def test_monthly_truncates_to_first(self) -> None:
        """bucket_for moves every day of a month to day 1."""
        from ai_assist_stats.windows import Mode, bucket_for

        for day in range(1, 29):
            assert bucket_for(date(2025, 2, day), Mode.MONTHLY) == date(2025, 2, 1)


class TestBucketSequence:
    """Tests for bucket_sequence function."""

    def test_daily_sequence(self) -> None:
        """bucket_sequence returns the 7 days ending at the reference."""
        from ai_assist_stats.windows import Mode, bucket_sequence

        result = bucket_sequence(date(2025, 3, 4), Mode.DAILY)

        assert result == [date(2025, 2, 26) + timedelta(days=i) for i in range(7)]

    def test_monthly_sequence_crosses_year(self) -> None:
        """bucket_sequence returns month starts across a year boundary."""
        from ai_assist_stats.windows import Mode, bucket_sequence

        result = bucket_sequence(date(2025, 3, 15), Mode.MONTHLY)

        assert result == [
            date(2024, 9, 1),
            date(2024, 10, 1),
            date(2024, 11, 1),
            date(2024, 12, 1),
            date(2025, 1, 1),
            date(2025, 2, 1),
            date(2025, 3, 1),
        ]

    @pytest.mark.parametrize("mode_value", ["daily", "monthly"])
    def test_seven_strictly_increasing(self, mode_value: str) -> None:
        """bucket_sequence always has 7 strictly increasing entries."""
        from ai_assist_stats.windows import Mode, bucket_sequence

        for reference in (date(2024, 1, 1), date(2024, 2, 29), date(2025, 12, 31)):
            result = bucket_sequence(reference, Mode(mode_value))
            assert len(result) == 7
            assert all(a < b for a, b in zip(result, result[1:]))


class TestWindowSpec:
    """Tests for WindowSpec."""

    def test_labels(self) -> None:
        """label prints days for daily and months for monthly windows."""
        from ai_assist_stats.windows import Mode, WindowSpec

        assert WindowSpec(date(2025, 3, 4)).label(date(2025, 3, 4)) == "2025-03-04"
        assert WindowSpec(date(2025, 3, 4), Mode.MONTHLY).label(date(2025, 3, 1)) == "2025-03"

    def test_report_suffix(self) -> None:
        """report_suffix names the mode."""
        from ai_assist_stats.windows import Mode, WindowSpec

        assert WindowSpec(date(2025, 3, 4)).report_suffix == "daily"
        assert WindowSpec(date(2025, 3, 4), Mode.MONTHLY).report_suffix == "monthly"


class TestParseReference:
    """Tests for parse_reference function."""

    def test_month_argument_is_monthly(self) -> None:
        """parse_reference turns yyyyMM into a monthly window on day 1."""
        from ai_assist_stats.windows import Mode, parse_reference

        result = parse_reference("202503")

        assert result.reference_date == date(2025, 3, 1)
        assert result.mode is Mode.MONTHLY

    def test_day_arguments_are_daily(self) -> None:
        """parse_reference accepts yyyyMMdd and yyyy-MM-dd as daily."""
        from ai_assist_stats.windows import Mode, parse_reference

        for text in ("20250304", "2025-03-04"):
            result = parse_reference(text)
            assert result.reference_date == date(2025, 3, 4)
            assert result.mode is Mode.DAILY

    def test_mode_override(self) -> None:
        """parse_reference uses an explicit mode over the inferred one."""
        from ai_assist_stats.windows import Mode, parse_reference

        result = parse_reference("2025-03-15", Mode.MONTHLY)

        assert result.reference_date == date(2025, 3, 15)
        assert result.mode is Mode.MONTHLY

    @pytest.mark.parametrize("text", ["", "2025", "2025-3-4", "20251301", "20250230", "March"])
    def test_rejects_bad_input(self, text: str) -> None:
        """parse_reference raises ValueError for unusable dates."""
        from ai_assist_stats.windows import parse_reference

        with pytest.raises(ValueError):
            parse_reference(text)
