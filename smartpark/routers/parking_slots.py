# smartpark/routers/parking_slots.py
"""Parking slots: list, create and a live occupancy summary."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from smartpark.database import get_db
from smartpark.errors import ConflictError, ValidationError
from smartpark.models.parking_slot import ParkingSlot
from smartpark.models.user import User
from smartpark.routers.auth import get_current_user, require_admin
from smartpark.schemas.parking_slot import ParkingSlotCreate, ParkingSlotOut

router = APIRouter()


@router.get("/parking-slots", summary="List active parking slots")
def list_slots(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    slots = (
        db.query(ParkingSlot)
        .filter(ParkingSlot.is_active == True)  # noqa: E712
        .order_by(ParkingSlot.slot_number)
        .all()
    )
    return {"slots": [ParkingSlotOut.model_validate(s) for s in slots]}


@router.post("/parking-slots", response_model=ParkingSlotOut, status_code=status.HTTP_201_CREATED,
             summary="Add a parking slot (admin)")
def create_slot(body: ParkingSlotCreate, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    slot_number = body.slot_number.strip().upper()
    if not slot_number:
        raise ValidationError("Slot number is required")
    if db.query(ParkingSlot).filter(ParkingSlot.slot_number == slot_number).first():
        raise ConflictError(f"Slot {slot_number} already exists")
    slot = ParkingSlot(slot_number=slot_number, location=body.location,
                       slot_status="available", is_active=True)
    db.add(slot)
    db.commit()
    db.refresh(slot)
    return slot


@router.get("/parking-slots/stats/summary", summary="Slot occupancy summary")
def slot_summary(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    slots = db.query(ParkingSlot).filter(ParkingSlot.is_active == True).all()  # noqa: E712
    total = len(slots)
    occupied = sum(1 for s in slots if s.slot_status == "occupied")
    return {
        "total_slots": total,
        "occupied_slots": occupied,
        "available_slots": total - occupied,
        "occupancy_rate": round(occupied / total * 100, 1) if total else 0,
    }
