# smartpark/schemas/parking_slot.py
from pydantic import BaseModel
from typing import Optional


class ParkingSlotCreate(BaseModel):
    slot_number: str
    location: Optional[str] = None


class ParkingSlotBrief(BaseModel):
    id: int
    slot_number: str
    location: Optional[str]

    class Config:
        from_attributes = True


class ParkingSlotOut(ParkingSlotBrief):
    slot_status: str
    is_active: bool
