"""Unit tests for the report statistics (pure functions, no database)."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from datetime import date, datetime
from types import SimpleNamespace
from smartpark.errors import ValidationError
from smartpark.services import report_stats


def session(id, entry_time, duration=None, status=None):
    return SimpleNamespace(id=id, entry_time=entry_time, duration=duration,
                           status=status or ("active" if duration is None else "completed"))


def payment(amount, method, when):
    return SimpleNamespace(amount_paid=amount, payment_method=method, payment_date=when)


class TestWindows:
    def test_day_window_covers_whole_day(self):
        start, end = report_stats.day_window(date(2024, 3, 15))
        assert start == datetime(2024, 3, 15, 0, 0, 0)
        assert end == datetime(2024, 3, 15, 23, 59, 59, 999000)

    def test_month_window_is_zero_based(self):
        start, end = report_stats.month_window(2024, 1)
        assert start == datetime(2024, 2, 1)
        assert end == datetime(2024, 2, 29, 23, 59, 59, 999000)

    def test_december_window(self):
        start, end = report_stats.month_window(2023, 11)
        assert start == datetime(2023, 12, 1)
        assert end.date() == date(2023, 12, 31)

    @pytest.mark.parametrize("month_index", [-1, 12])
    def test_month_index_out_of_range(self, month_index):
        with pytest.raises(ValidationError):
            report_stats.month_window(2024, month_index)

    def test_period_keys(self):
        assert report_stats.daily_period_key(date(2024, 3, 5)) == "2024-03-05"
        assert report_stats.monthly_period_key(2024, 0) == "2024-01"


class TestDailyStats:
    def test_scenario_three_sessions(self):
        day = datetime(2024, 3, 15)
        records = [
            session(1, day.replace(hour=8, minute=5), duration=60),
            session(2, day.replace(hour=8, minute=40)),
            session(3, day.replace(hour=14), duration=30),
        ]
        payments = [
            payment(3000, "cash", day.replace(hour=9)),
            payment(2000, "card", day.replace(hour=15)),
        ]
        data = report_stats.compute_daily_stats(records, payments, total_slots=4)

        assert data["total_cars_parked"] == 3
        assert data["total_revenue"] == 5000
        assert data["total_duration"] == 90          # open session counts as 0
        assert data["payment_methods"] == {"cash": 3000, "mobile_money": 0, "card": 2000}
        assert data["peak_hours"] == [{"hour": 8, "count": 2}, {"hour": 14, "count": 1}]
        assert data["slot_utilization"] == {"total_slots": 4, "average_occupancy": 25.0, "peak_occupancy": 2}
        assert data["record_ids"] == [1, 2, 3]

    def test_peak_hours_capped_at_five_and_sorted(self):
        day = datetime(2024, 3, 15)
        hours = [6, 7, 7, 8, 9, 9, 9, 10, 11, 12, 12]
        records = [session(i, day.replace(hour=h), duration=10) for i, h in enumerate(hours)]
        peaks = report_stats.compute_daily_stats(records, [], total_slots=0)["peak_hours"]

        assert len(peaks) == 5
        assert [p["count"] for p in peaks] == sorted((p["count"] for p in peaks), reverse=True)
        assert len({p["hour"] for p in peaks}) == 5
        assert peaks[0] == {"hour": 9, "count": 3}

    def test_peak_hour_ties_keep_first_seen_order(self):
        day = datetime(2024, 3, 15)
        records = [session(1, day.replace(hour=17)), session(2, day.replace(hour=9))]
        peaks = report_stats.top_peak_hours(report_stats.hourly_counts(records))
        assert [p["hour"] for p in peaks] == [17, 9]

    def test_zero_slots_never_divides(self):
        records = [session(1, datetime(2024, 3, 15, 10))]
        util = report_stats.compute_daily_stats(records, [], total_slots=0)["slot_utilization"]
        assert util["average_occupancy"] == 0
        assert util["peak_occupancy"] == 1

    def test_empty_day(self):
        data = report_stats.compute_daily_stats([], [], total_slots=10)
        assert data["total_cars_parked"] == 0
        assert data["total_revenue"] == 0
        assert data["peak_hours"] == []
        assert data["slot_utilization"]["peak_occupancy"] == 0

    def test_unknown_method_counts_in_total_only(self):
        when = datetime(2024, 3, 15, 12)
        payments = [payment(1000, "cash", when), payment(700, "voucher", when)]
        data = report_stats.compute_daily_stats([], payments, total_slots=1)

        assert data["total_revenue"] == 1700
        assert sum(data["payment_methods"].values()) == 1000
        assert "voucher" not in data["payment_methods"]
        assert report_stats.count_unrecognized_methods(payments) == 1


class TestMonthlyStats:
    def test_leap_february_has_29_days(self):
        start, end = report_stats.month_window(2024, 1)
        data = report_stats.compute_monthly_stats([], [], start, end)

        assert len(data["daily_stats"]) == 29
        assert all(v == {"cars": 0, "revenue": 0, "duration": 0} for v in data["daily_stats"].values())
        assert "slot_utilization" not in data
        assert "peak_hours" not in data

    def test_sessions_and_payments_bucketed_by_own_day(self):
        start, end = report_stats.month_window(2024, 2)
        records = [
            session(1, datetime(2024, 3, 1, 9), duration=45),
            session(2, datetime(2024, 3, 1, 18)),
            session(3, datetime(2024, 3, 31, 23, 30), duration=20),
        ]
        payments = [payment(500, "mobile_money", datetime(2024, 3, 2, 0, 10))]
        stats = report_stats.compute_monthly_stats(records, payments, start, end)["daily_stats"]

        assert stats["2024-03-01"] == {"cars": 2, "revenue": 0, "duration": 45}
        assert stats["2024-03-02"] == {"cars": 0, "revenue": 500, "duration": 0}
        assert stats["2024-03-31"]["cars"] == 1

    def test_out_of_window_rows_ignored(self):
        start, end = report_stats.month_window(2024, 2)
        stray = [session(1, datetime(2024, 4, 1, 0, 0), duration=10)]
        stats = report_stats.daily_breakdown(stray, [], start, end)
        assert sum(v["cars"] for v in stats.values()) == 0

    def test_summary_keeps_last_week(self):
        start, end = report_stats.month_window(2024, 1)
        data = report_stats.compute_monthly_stats([], [], start, end)
        summary = report_stats.build_summary(data)

        assert list(summary["daily_stats"]) == [f"2024-02-{d}" for d in range(23, 30)]
        assert "peak_hours" not in summary


class TestSummary:
    def test_daily_summary_has_top_three_peaks(self):
        day = datetime(2024, 3, 15)
        records = [session(i, day.replace(hour=h)) for i, h in enumerate([1, 2, 2, 3, 3, 3, 4])]
        data = report_stats.compute_daily_stats(records, [], total_slots=5)
        summary = report_stats.build_summary(data)

        assert [p["hour"] for p in summary["peak_hours"]] == [3, 2, 1]
        assert "record_ids" not in summary
