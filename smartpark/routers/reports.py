# smartpark/routers/reports.py
"""Daily / monthly activity reports: generate, list, sign, download, print."""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import HTMLResponse, JSONResponse
from sqlalchemy.orm import Session

from smartpark.database import get_db
from smartpark.models.user import User
from smartpark.routers.auth import get_current_user
from smartpark.schemas.report import (
    DailyReportResponse, MonthlyReportResponse, ReportOut, ReportPage, SignReportRequest,
)
from smartpark.services import report_service
from smartpark.services.report_renderer import render_report

router = APIRouter()


@router.get("/reports/daily", response_model=DailyReportResponse, summary="Generate daily activity report")
def daily_report(
    day: Optional[date] = Query(None, alias="date"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Builds (or refreshes) the report of one calendar day. Defaults to today."""
    report, records, summary = report_service.generate_daily(db, day, current_user)
    return {"report": report, "records": records, "summary": summary}


@router.get("/reports/monthly", response_model=MonthlyReportResponse, summary="Generate monthly activity report")
def monthly_report(
    year: Optional[int] = None,
    month: Optional[int] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """`month` is zero-based (0 = January). Both default to the current month."""
    today = date.today()
    year = today.year if year is None else year
    month = today.month - 1 if month is None else month
    report, summary = report_service.generate_monthly(db, year, month, current_user)
    return {"report": report, "summary": summary}


@router.get("/reports", response_model=ReportPage, summary="List reports")
def list_reports(
    report_type: Optional[str] = Query(None, alias="type"),
    page: int = 1,
    limit: int = 20,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return report_service.list_reports(db, report_type, page, limit)


@router.post("/reports/{report_id}/sign", response_model=ReportOut, summary="Sign a report")
def sign_report(
    report_id: int,
    body: SignReportRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return report_service.sign_report(db, report_id, body.signed_by, body.signature_data, body.position)


@router.get("/reports/{report_id}/download", summary="Download report as JSON")
def download_report(
    report_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    report, filename = report_service.download_report(db, report_id)
    return JSONResponse(
        content=ReportOut.model_validate(report).model_dump(mode="json"),
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/reports/{report_id}/print", response_class=HTMLResponse, summary="Printable report document")
def print_report(
    report_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    report = report_service.get_report(db, report_id)
    return HTMLResponse(render_report(report, report_service.sample_records(db, report)))
