# smartpark/models/payment.py
"""Payments settling a parking record. Summed into report revenue by payment_date."""

from datetime import datetime

from sqlalchemy import Column, Integer, String, DateTime, Float, ForeignKey
from smartpark.database import Base

PAYMENT_METHODS = ("cash", "mobile_money", "card")


class Payment(Base):
    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    parking_record_id = Column(Integer, ForeignKey("parking_records.id"), nullable=False, index=True)
    amount_paid = Column(Float, nullable=False)
    payment_method = Column(String(20), nullable=False)   # cash | mobile_money | card
    payment_date = Column(DateTime, nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.now)

    def __repr__(self):
        return f"<Payment {self.id} amount={self.amount_paid} method={self.payment_method}>"
