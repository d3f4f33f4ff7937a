# smartpark/routers/parking_records.py
"""Parking records: car entry, car exit, corrections and the record log."""

from typing import Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from smartpark.database import get_db
from smartpark.models.parking_record import ParkingRecord
from smartpark.models.user import User
from smartpark.routers.auth import get_current_user
from smartpark.schemas.parking_record import (
    ParkingEntryCreate, ParkingExit, ParkingRecordOut, ParkingRecordUpdate,
)
from smartpark.services import parking_service
from smartpark.utils.pagination import paginate

router = APIRouter()


@router.post("/parking-records", response_model=ParkingRecordOut, status_code=status.HTTP_201_CREATED,
             summary="Register a car entry")
def create_entry(body: ParkingEntryCreate, db: Session = Depends(get_db),
                 current_user: User = Depends(get_current_user)):
    return parking_service.record_entry(db, **body.model_dump())


@router.put("/parking-records/{record_id}/exit", response_model=ParkingRecordOut, summary="Register a car exit")
def register_exit(record_id: int, body: Optional[ParkingExit] = None, db: Session = Depends(get_db),
                  current_user: User = Depends(get_current_user)):
    """Closes the record: duration in minutes and the fee per started hour."""
    return parking_service.record_exit(db, record_id, body.exit_time if body else None)


@router.get("/parking-records", summary="Parking record log")
def list_records(
    status: Optional[str] = None,
    page: int = 1,
    limit: int = 50,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Newest entries first. Filter by status (active | completed)."""
    q = db.query(ParkingRecord)
    if status:
        q = q.filter(ParkingRecord.status == status)
    q = q.order_by(ParkingRecord.entry_time.desc(), ParkingRecord.id.desc())
    records, total, total_pages = paginate(q, page, limit)
    return {"records": [ParkingRecordOut.model_validate(r) for r in records],
            "total_pages": total_pages, "current_page": page, "total": total}


@router.get("/parking-records/{record_id}", response_model=ParkingRecordOut, summary="Get a parking record")
def get_record(record_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return parking_service.get_record(db, record_id)


@router.put("/parking-records/{record_id}", response_model=ParkingRecordOut, summary="Edit a parking record")
def update_record(record_id: int, body: ParkingRecordUpdate, db: Session = Depends(get_db),
                  current_user: User = Depends(get_current_user)):
    """Corrects entry/exit times, notes or slot. Duration and fee are recomputed."""
    return parking_service.update_record(db, record_id, **body.model_dump())
