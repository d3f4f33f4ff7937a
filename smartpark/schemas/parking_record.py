# smartpark/schemas/parking_record.py
from pydantic import BaseModel
from datetime import datetime
from typing import Optional

from smartpark.schemas.car import CarBrief
from smartpark.schemas.parking_slot import ParkingSlotBrief


class ParkingEntryCreate(BaseModel):
    plate_number: str
    driver_name: str
    slot_number: str
    phone_number: Optional[str] = None
    car_model: Optional[str] = None
    car_color: Optional[str] = None
    notes: Optional[str] = None
    entry_time: Optional[datetime] = None    # defaults to now


class ParkingExit(BaseModel):
    exit_time: Optional[datetime] = None     # defaults to now


class ParkingRecordOut(BaseModel):
    id: int
    car: Optional[CarBrief]
    parking_slot: Optional[ParkingSlotBrief]
    entry_time: datetime
    exit_time: Optional[datetime]
    duration: Optional[int]          # minutes
    total_amount: Optional[float]
    status: str
    notes: Optional[str]

    class Config:
        from_attributes = True


class ParkingRecordUpdate(BaseModel):
    entry_time: Optional[datetime] = None        # keeps the current value
    exit_time: Optional[datetime] = None         # null reopens the session
    notes: Optional[str] = None
    parking_slot_id: Optional[int] = None        # keeps the current slot
