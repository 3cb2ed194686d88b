"""Tests for the rolling window catalog."""
from datetime import date, datetime, timedelta, timezone

import pytest

from adsync.sync.windows import DEFAULT_WINDOW_DAYS, Window, build_windows, window_key


class TestBuildWindows:
    def test_default_catalog_keys_in_order(self, run_at):
        windows = build_windows(run_at)
        assert [w.key for w in windows] == [
            "last_7d", "last_14d", "last_30d", "last_60d", "last_90d",
        ]

    def test_until_is_reference_calendar_date(self, run_at):
        windows = build_windows(run_at)
        assert {w.until for w in windows} == {date(2026, 3, 15)}

    def test_since_is_until_minus_days(self, run_at):
        windows = build_windows(run_at)
        since = {w.key: w.since for w in windows}
        assert since["last_7d"] == date(2026, 3, 8)
        assert since["last_14d"] == date(2026, 3, 1)
        assert since["last_30d"] == date(2026, 2, 13)
        assert since["last_90d"] == date(2025, 12, 15)

    def test_time_of_day_ignored(self):
        """Late-evening and early-morning instants on the same day give the same windows."""
        early = datetime(2026, 3, 15, 0, 0, 1, tzinfo=timezone.utc)
        late = datetime(2026, 3, 15, 23, 59, 59, tzinfo=timezone.utc)
        assert build_windows(early) == build_windows(late)

    @pytest.mark.parametrize("reference", [
        datetime(2024, 2, 29, 12, 0),
        datetime(2025, 1, 1, 0, 0),
        datetime(2026, 12, 31, 23, 59),
    ])
    def test_window_invariants_hold_for_any_reference(self, reference):
        windows = build_windows(reference)
        assert len({w.key for w in windows}) == len(DEFAULT_WINDOW_DAYS)
        for days, window in zip(DEFAULT_WINDOW_DAYS, windows):
            assert window.until == reference.date()
            assert window.since == reference.date() - timedelta(days=days)
            assert window.since < window.until

    def test_custom_day_counts(self, run_at):
        windows = build_windows(run_at, window_days=[3, 1])
        assert [w.key for w in windows] == ["last_3d", "last_1d"]
        assert windows[1].since == date(2026, 3, 14)

    def test_empty_catalog(self, run_at):
        assert build_windows(run_at, window_days=[]) == []

    def test_duplicate_days_rejected(self, run_at):
        with pytest.raises(ValueError, match="Duplicate"):
            build_windows(run_at, window_days=[7, 14, 7])

    @pytest.mark.parametrize("bad", [0, -7])
    def test_non_positive_days_rejected(self, run_at, bad):
        with pytest.raises(ValueError, match="positive"):
            build_windows(run_at, window_days=[7, bad])

    def test_deterministic(self, run_at):
        assert build_windows(run_at) == build_windows(run_at)


class TestWindow:
    def test_time_range_wire_format(self):
        w = Window(key="last_7d", since=date(2026, 3, 8), until=date(2026, 3, 15))
        assert w.time_range() == {"since": "2026-03-08", "until": "2026-03-15"}

    def test_window_is_immutable(self):
        w = Window(key="last_7d", since=date(2026, 3, 8), until=date(2026, 3, 15))
        with pytest.raises(AttributeError):
            w.key = "other"

    def test_window_key_format(self):
        assert window_key(30) == "last_30d"
