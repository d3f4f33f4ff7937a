"""Row builders for tests. Timestamps are naive local datetimes, as stored."""

from datetime import datetime, timedelta

from smartpark.models.car import Car
from smartpark.models.parking_record import ParkingRecord
from smartpark.models.parking_slot import ParkingSlot
from smartpark.models.payment import Payment

TEST_PASSWORD = "correct-horse-battery"


def add_slot(db, slot_number="A1", is_active=True, slot_status="available"):
    slot = ParkingSlot(slot_number=slot_number, location="Level 1", slot_status=slot_status, is_active=is_active)
    db.add(slot)
    db.commit()
    return slot


def add_record(db, slot, entry_time: datetime, duration=None, plate=None):
    """Completed record when duration (minutes) is given, active otherwise."""
    plate = plate or f"RAB{db.query(Car).count() + 100}A"
    car = Car(plate_number=plate, driver_name=f"Driver {plate}", phone_number="+250788000000")
    db.add(car)
    db.flush()
    record = ParkingRecord(
        car_id=car.id,
        parking_slot_id=slot.id,
        entry_time=entry_time,
        exit_time=None if duration is None else entry_time + timedelta(minutes=duration),
        duration=duration,
        status="active" if duration is None else "completed",
    )
    db.add(record)
    db.commit()
    return record


def add_payment(db, record, amount, method, when: datetime):
    payment = Payment(parking_record_id=record.id, amount_paid=amount, payment_method=method, payment_date=when)
    db.add(payment)
    db.commit()
    return payment
