# smartpark/services/report_service.py
"""
Daily + monthly activity reports.

How it works:
  - generate_* reads parking records (by entry_time) and payments (by payment_date)
    inside the period window, computes the data block via report_stats, and
    upserts one Report row per (report_type, period_key)
  - Regeneration overwrites data/window/generated_by; what happens to an existing
    signature is decided by settings.REPORT_SIGNED_REGENERATION (keep | reset | block)
  - sign_report attaches a signature and moves the report to "signed"

Reads and the upsert are not wrapped in one transaction: two concurrent
generations of the same period both write and the later one wins.
"""

from datetime import date, datetime
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from smartpark.config import settings
from smartpark.errors import ConflictError, NotFoundError, ValidationError
from smartpark.models.parking_record import ParkingRecord
from smartpark.models.parking_slot import ParkingSlot
from smartpark.models.payment import Payment
from smartpark.models.report import Report, REPORT_TYPES
from smartpark.services import report_stats
from smartpark.utils.pagination import paginate
from smartpark.utils.logger import get_logger

logger = get_logger(__name__)

SIGNED_REGENERATION_POLICIES = ("keep", "reset", "block")
PRINT_SAMPLE_LIMIT = 10


# ── Record store reads ───────────────────────────────────────────────────────

def fetch_records(db: Session, start: datetime, end: datetime) -> list:
    return (
        db.query(ParkingRecord)
        .filter(ParkingRecord.entry_time >= start, ParkingRecord.entry_time <= end)
        .order_by(ParkingRecord.entry_time.asc(), ParkingRecord.id.asc())
        .all()
    )


def fetch_payments(db: Session, start: datetime, end: datetime) -> list:
    payments = (
        db.query(Payment)
        .filter(Payment.payment_date >= start, Payment.payment_date <= end)
        .order_by(Payment.payment_date.asc(), Payment.id.asc())
        .all()
    )
    unrecognized = report_stats.count_unrecognized_methods(payments)
    if unrecognized:
        logger.warning(
            f"[Reports] {unrecognized} payment(s) between {start} and {end} use an unknown "
            f"method: counted in total revenue, left out of the method breakdown"
        )
    return payments


def count_active_slots(db: Session) -> int:
    return db.query(ParkingSlot).filter(ParkingSlot.is_active == True).count()  # noqa: E712


# ── Upsert ───────────────────────────────────────────────────────────────────

def _apply_signed_policy(report: Report):
    """Decide what regeneration does to an already signed report."""
    if report.status != "signed":
        return
    policy = settings.REPORT_SIGNED_REGENERATION
    if policy == "block":
        raise ConflictError(f"Report {report.id} is signed and cannot be regenerated")
    if policy == "reset":
        logger.info(f"[Reports] Clearing signature of report {report.id} on regeneration")
        report.signature = None
        report.status = "generated"


def _find_by_period(db: Session, report_type: str, period_key: str) -> Optional[Report]:
    return (
        db.query(Report)
        .filter(Report.report_type == report_type, Report.period_key == period_key)
        .first()
    )


def _overwrite(report: Report, report_date, start, end, data, user):
    report.report_date = report_date
    report.start_date = start
    report.end_date = end
    report.generated_by_id = user.id
    report.data = data


def upsert_report(db: Session, report_type: str, period_key: str, report_date: datetime,
                  start: datetime, end: datetime, data: dict, user) -> Report:
    """Insert or overwrite the single report of a period."""
    if settings.REPORT_SIGNED_REGENERATION not in SIGNED_REGENERATION_POLICIES:
        raise ValueError(f"Unknown REPORT_SIGNED_REGENERATION policy: {settings.REPORT_SIGNED_REGENERATION}")

    report = _find_by_period(db, report_type, period_key)
    created = report is None
    if created:
        report = Report(report_type=report_type, period_key=period_key, status="generated")
        db.add(report)
    else:
        _apply_signed_policy(report)
    _overwrite(report, report_date, start, end, data, user)

    try:
        db.commit()
    except IntegrityError:
        # Lost an insert race for the same period: overwrite the row that won
        db.rollback()
        logger.warning(f"[Reports] Concurrent insert for {report_type} {period_key}, updating instead")
        report = _find_by_period(db, report_type, period_key)
        if report is None:
            raise
        created = False
        _apply_signed_policy(report)
        _overwrite(report, report_date, start, end, data, user)
        db.commit()

    db.refresh(report)
    logger.info(
        f"[Reports] {'Created' if created else 'Updated'} {report_type} report {period_key} "
        f"(id={report.id}, cars={data['total_cars_parked']}, revenue={data['total_revenue']})"
    )
    return report


# ── Generation ───────────────────────────────────────────────────────────────

def generate_daily(db: Session, day: Optional[date], user):
    """
    Build or refresh the daily report of `day` (today when None).
    Returns (report, sample records, summary).
    """
    day = day or date.today()
    start, end = report_stats.day_window(day)

    records = fetch_records(db, start, end)
    payments = fetch_payments(db, start, end)
    data = report_stats.compute_daily_stats(records, payments, count_active_slots(db))

    report = upsert_report(db, "daily", report_stats.daily_period_key(day),
                           start, start, end, data, user)
    return report, records[:settings.REPORT_SAMPLE_LIMIT], report_stats.build_summary(data)


def generate_monthly(db: Session, year: int, month_index: int, user):
    """
    Build or refresh the monthly report. month_index is zero-based.
    Returns (report, summary).
    """
    start, end = report_stats.month_window(year, month_index)

    records = fetch_records(db, start, end)
    payments = fetch_payments(db, start, end)
    data = report_stats.compute_monthly_stats(records, payments, start, end)

    report = upsert_report(db, "monthly", report_stats.monthly_period_key(year, month_index),
                           start, start, end, data, user)
    return report, report_stats.build_summary(data)


# ── Lookup, signing, listing ─────────────────────────────────────────────────

def get_report(db: Session, report_id: int) -> Report:
    report = db.query(Report).filter(Report.id == report_id).first()
    if not report:
        raise NotFoundError("Report not found")
    return report


def sign_report(db: Session, report_id: int, signed_by: Optional[str],
                signature_data: Optional[str], position: Optional[str] = None) -> Report:
    """Attach (or replace) the signature. Always moves the report to "signed"."""
    if not (signed_by or "").strip() or not (signature_data or "").strip():
        raise ValidationError("Signed by name and signature data are required")

    report = get_report(db, report_id)
    report.signature = {
        "signed_by": signed_by.strip(),
        "signed_at": datetime.now().isoformat(),
        "signature_data": signature_data,
        "position": (position or "").strip() or settings.DEFAULT_SIGNER_POSITION,
    }
    report.status = "signed"
    db.commit()
    db.refresh(report)
    logger.info(f"[Reports] Report {report.id} signed by {report.signature['signed_by']}")
    return report


def list_reports(db: Session, report_type: Optional[str] = None, page: int = 1, limit: int = 20) -> dict:
    q = db.query(Report)
    if report_type:
        if report_type not in REPORT_TYPES:
            raise ValidationError(f"Unknown report type '{report_type}'")
        q = q.filter(Report.report_type == report_type)
    q = q.order_by(Report.report_date.desc(), Report.id.desc())
    reports, total, total_pages = paginate(q, page, limit)
    return {"reports": reports, "total_pages": total_pages, "current_page": page, "total": total}


def download_filename(report: Report) -> str:
    return f"{report.report_type}-report-{report.report_date.date().isoformat()}.json"


def download_report(db: Session, report_id: int):
    """Returns (report, suggested filename) for a verbatim JSON export."""
    report = get_report(db, report_id)
    return report, download_filename(report)


def sample_records(db: Session, report: Report, limit: int = PRINT_SAMPLE_LIMIT) -> list:
    """First `limit` records referenced by a report, in report order."""
    ids = (report.data or {}).get("record_ids", [])[:limit]
    if not ids:
        return []
    by_id = {r.id: r for r in db.query(ParkingRecord).filter(ParkingRecord.id.in_(ids)).all()}
    return [by_id[i] for i in ids if i in by_id]
