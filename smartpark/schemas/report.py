# smartpark/schemas/report.py
from pydantic import BaseModel
from datetime import datetime
from typing import Any, Optional

from smartpark.schemas.parking_record import ParkingRecordOut
from smartpark.schemas.user import UserOut


class SignReportRequest(BaseModel):
    signed_by: Optional[str] = None
    signature_data: Optional[str] = None     # base64 image or textual attestation
    position: Optional[str] = None


class ReportOut(BaseModel):
    id: int
    report_type: str
    period_key: str
    report_date: datetime
    start_date: datetime
    end_date: datetime
    generated_by: Optional[UserOut]
    data: dict[str, Any]
    signature: Optional[dict[str, Any]]
    status: str
    notes: Optional[str]
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    class Config:
        from_attributes = True


class DailyReportResponse(BaseModel):
    report: ReportOut
    records: list[ParkingRecordOut]
    summary: dict[str, Any]


class MonthlyReportResponse(BaseModel):
    report: ReportOut
    summary: dict[str, Any]


class ReportPage(BaseModel):
    reports: list[ReportOut]
    total_pages: int
    current_page: int
    total: int
