# smartpark/services/report_stats.py
"""
Report statistics: pure functions over already-fetched rows.

Sessions need: id, entry_time, duration (minutes or None), status.
Payments need: amount_paid, payment_method, payment_date.

Nothing here touches the database, so the figures can be tested with plain
objects and recomputed deterministically from the same inputs.
"""

import calendar
from datetime import date, datetime, time, timedelta
from typing import Iterable, Optional

from smartpark.models.payment import PAYMENT_METHODS
from smartpark.errors import ValidationError

END_OF_DAY = time(23, 59, 59, 999000)
PEAK_HOURS_LIMIT = 5


# ── Windows ──────────────────────────────────────────────────────────────────

def day_window(day: date) -> tuple[datetime, datetime]:
    """Midnight to 23:59:59.999 of one calendar day, local time."""
    return datetime.combine(day, time.min), datetime.combine(day, END_OF_DAY)


def month_window(year: int, month_index: int) -> tuple[datetime, datetime]:
    """First to last instant of a month. month_index is zero-based (0 = January)."""
    if not 0 <= month_index <= 11:
        raise ValidationError("Month must be between 0 (January) and 11 (December)")
    if not 1 <= year <= 9999:
        raise ValidationError("Year is out of range")
    month = month_index + 1
    last_day = calendar.monthrange(year, month)[1]
    return (
        datetime(year, month, 1),
        datetime.combine(date(year, month, last_day), END_OF_DAY),
    )


def daily_period_key(day: date) -> str:
    return day.isoformat()


def monthly_period_key(year: int, month_index: int) -> str:
    return f"{year:04d}-{month_index + 1:02d}"


# ── Shared totals ────────────────────────────────────────────────────────────

def payment_breakdown(payments: Iterable) -> dict:
    """Per-method revenue for the three known methods. Other methods are left out."""
    breakdown = {method: 0 for method in PAYMENT_METHODS}
    for payment in payments:
        if payment.payment_method in breakdown:
            breakdown[payment.payment_method] += payment.amount_paid
    return breakdown


def count_unrecognized_methods(payments: Iterable) -> int:
    return sum(1 for p in payments if p.payment_method not in PAYMENT_METHODS)


def compute_totals(records: list, payments: list) -> dict:
    """Totals shared by daily and monthly reports. Open sessions add 0 minutes."""
    return {
        "total_cars_parked": len(records),
        "total_revenue": sum(p.amount_paid for p in payments),
        "total_duration": sum(r.duration or 0 for r in records),
    }


# ── Daily ────────────────────────────────────────────────────────────────────

def hourly_counts(records: Iterable) -> dict:
    """Sessions per hour of entry. Keys keep first-seen order."""
    counts = {}
    for record in records:
        hour = record.entry_time.hour
        counts[hour] = counts.get(hour, 0) + 1
    return counts


def top_peak_hours(counts: dict, limit: int = PEAK_HOURS_LIMIT) -> list[dict]:
    # sorted() is stable, so equal counts keep first-seen order
    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return [{"hour": hour, "count": count} for hour, count in ranked[:limit]]


def slot_utilization(records: Iterable, total_slots: int, counts: dict) -> dict:
    active = sum(1 for r in records if r.status == "active")
    return {
        "total_slots": total_slots,
        "average_occupancy": (active / total_slots) * 100 if total_slots > 0 else 0,
        "peak_occupancy": max(counts.values(), default=0),
    }


def compute_daily_stats(records: list, payments: list, total_slots: int) -> dict:
    """Full data block of a daily report."""
    methods = payment_breakdown(payments)
    counts = hourly_counts(records)
    data = compute_totals(records, payments)
    data.update({
        "payment_methods": methods,
        "slot_utilization": slot_utilization(records, total_slots, counts),
        "peak_hours": top_peak_hours(counts),
        "record_ids": [r.id for r in records],
    })
    return data


# ── Monthly ──────────────────────────────────────────────────────────────────

def seed_days(start: datetime, end: datetime) -> dict:
    """One empty bucket per calendar day in [start, end], keyed YYYY-MM-DD."""
    buckets = {}
    day = start.date()
    while day <= end.date():
        buckets[day.isoformat()] = {"cars": 0, "revenue": 0, "duration": 0}
        day += timedelta(days=1)
    return buckets


def daily_breakdown(records: Iterable, payments: Iterable, start: datetime, end: datetime) -> dict:
    buckets = seed_days(start, end)
    for record in records:
        bucket = buckets.get(record.entry_time.date().isoformat())
        if bucket is None:
            continue
        bucket["cars"] += 1
        bucket["duration"] += record.duration or 0
    for payment in payments:
        bucket = buckets.get(payment.payment_date.date().isoformat())
        if bucket is None:
            continue
        bucket["revenue"] += payment.amount_paid
    return buckets


def compute_monthly_stats(records: list, payments: list, start: datetime, end: datetime) -> dict:
    """Full data block of a monthly report. No peak-hour or slot figures."""
    methods = payment_breakdown(payments)
    data = compute_totals(records, payments)
    data.update({
        "payment_methods": methods,
        "daily_stats": daily_breakdown(records, payments, start, end),
        "record_ids": [r.id for r in records],
    })
    return data


def last_days(daily_stats: dict, n: int = 7) -> dict:
    """The final n entries of a daily_stats mapping (most recent week)."""
    return dict(list(daily_stats.items())[-n:])


def build_summary(data: dict, peak_limit: Optional[int] = 3) -> dict:
    """Summary echoed next to a freshly generated report."""
    summary = {
        "total_cars_parked": data["total_cars_parked"],
        "total_revenue": data["total_revenue"],
        "total_duration": data["total_duration"],
        "payment_methods": data["payment_methods"],
    }
    if "peak_hours" in data:
        summary["peak_hours"] = data["peak_hours"][:peak_limit]
    if "daily_stats" in data:
        summary["daily_stats"] = last_days(data["daily_stats"])
    return summary
