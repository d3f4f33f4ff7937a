# smartpark/schemas/car.py
from pydantic import BaseModel
from datetime import datetime
from typing import Optional


class CarUpdate(BaseModel):
    driver_name: Optional[str] = None
    phone_number: Optional[str] = None
    car_model: Optional[str] = None
    car_color: Optional[str] = None


class CarBrief(BaseModel):
    id: int
    plate_number: str
    driver_name: str
    phone_number: Optional[str]

    class Config:
        from_attributes = True


class CarOut(CarBrief):
    car_model: Optional[str]
    car_color: Optional[str]
    created_at: Optional[datetime]
    updated_at: Optional[datetime]
