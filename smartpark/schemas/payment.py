# smartpark/schemas/payment.py
from pydantic import BaseModel, Field
from datetime import datetime
from typing import Literal, Optional


class PaymentCreate(BaseModel):
    parking_record_id: int
    amount_paid: float = Field(ge=0)
    payment_method: Literal["cash", "mobile_money", "card"]
    payment_date: Optional[datetime] = None  # defaults to now


class PaymentOut(BaseModel):
    id: int
    parking_record_id: int
    amount_paid: float
    payment_method: str
    payment_date: datetime

    class Config:
        from_attributes = True
