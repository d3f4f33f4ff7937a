# smartpark/models/parking_slot.py
"""
Physical parking slots. Active slots form the denominator of the
slot-utilization figures in daily reports.
"""

from sqlalchemy import Column, Integer, String, Boolean
from smartpark.database import Base


class ParkingSlot(Base):
    __tablename__ = "parking_slots"

    id = Column(Integer, primary_key=True, autoincrement=True)
    slot_number = Column(String(20), unique=True, nullable=False, index=True)
    location = Column(String(200))
    slot_status = Column(String(20), default="available", nullable=False)  # available | occupied
    is_active = Column(Boolean, default=True, nullable=False)

    def __repr__(self):
        return f"<ParkingSlot {self.slot_number} status={self.slot_status}>"
