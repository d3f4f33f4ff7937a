# smartpark/models/parking_record.py
"""
Parking sessions: one row per car stay.
exit_time, duration (minutes) and total_amount stay NULL while the car is parked.
"""

from datetime import datetime

from sqlalchemy import Column, Integer, String, DateTime, Float, Text, ForeignKey
from sqlalchemy.orm import relationship
from smartpark.database import Base


class ParkingRecord(Base):
    __tablename__ = "parking_records"

    id = Column(Integer, primary_key=True, autoincrement=True)
    car_id = Column(Integer, ForeignKey("cars.id"), nullable=False, index=True)
    parking_slot_id = Column(Integer, ForeignKey("parking_slots.id"), nullable=False)
    entry_time = Column(DateTime, nullable=False, index=True)
    exit_time = Column(DateTime)
    duration = Column(Integer)                  # minutes (set on exit)
    total_amount = Column(Float)                # fee (set on exit)
    status = Column(String(20), default="active", nullable=False, index=True)  # active | completed
    notes = Column(Text)
    created_at = Column(DateTime, default=datetime.now)

    car = relationship("Car", lazy="joined")
    parking_slot = relationship("ParkingSlot", lazy="joined")

    def __repr__(self):
        return f"<ParkingRecord {self.id} car={self.car_id} status={self.status}>"
