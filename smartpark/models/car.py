# smartpark/models/car.py
"""
Cars known to the lot, keyed by plate number.
Created automatically on first entry; details are editable afterwards.
"""

from datetime import datetime

from sqlalchemy import Column, Integer, String, Boolean, DateTime
from smartpark.database import Base


class Car(Base):
    __tablename__ = "cars"

    id = Column(Integer, primary_key=True, autoincrement=True)
    plate_number = Column(String(50), unique=True, nullable=False, index=True)  # always upper-case
    driver_name = Column(String(200), nullable=False)
    phone_number = Column(String(50))
    car_model = Column(String(100))
    car_color = Column(String(50))
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)

    def __repr__(self):
        return f"<Car {self.plate_number} driver={self.driver_name}>"
