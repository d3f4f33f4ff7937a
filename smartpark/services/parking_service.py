# smartpark/services/parking_service.py
"""
Car entry / exit and payments, the records that reports aggregate.

How it works:
  - record_entry upserts the car by plate, occupies a free slot and opens an
    "active" parking record
  - record_exit closes the record: duration in whole minutes, fee per started
    hour (minimum one hour), slot released
  - update_record corrects times, notes or slot afterwards and recomputes
    duration and fee
  - record_payment stores a payment against an existing record
"""

import math
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from smartpark.config import settings
from smartpark.errors import ConflictError, NotFoundError, ValidationError
from smartpark.models.car import Car
from smartpark.models.parking_record import ParkingRecord
from smartpark.models.parking_slot import ParkingSlot
from smartpark.models.payment import Payment
from smartpark.utils.logger import get_logger

logger = get_logger(__name__)


def normalize_plate(plate_number: str) -> str:
    return (plate_number or "").strip().upper()


def lookup_car_by_plate(db: Session, plate_number: str) -> Optional[Car]:
    """Find an active car by plate number. Returns None if not found."""
    return (
        db.query(Car)
        .filter(Car.plate_number == normalize_plate(plate_number), Car.is_active == True)  # noqa: E712
        .first()
    )


def to_local_naive(value: Optional[datetime]) -> Optional[datetime]:
    """Timestamps are stored as naive local time; convert aware inputs."""
    if value is not None and value.tzinfo is not None:
        return value.astimezone().replace(tzinfo=None)
    return value


def parking_fee(duration_minutes: int) -> float:
    hours = max(1, math.ceil(duration_minutes / 60))
    return float(hours * settings.HOURLY_RATE)


def _upsert_car(db: Session, plate: str, driver_name: str, phone_number=None,
                car_model=None, car_color=None) -> Car:
    car = db.query(Car).filter(Car.plate_number == plate).first()
    if car is None:
        car = Car(plate_number=plate, driver_name=driver_name, phone_number=phone_number,
                  car_model=car_model, car_color=car_color, is_active=True)
        db.add(car)
        db.flush()
        return car
    car.is_active = True
    car.driver_name = driver_name or car.driver_name
    car.phone_number = phone_number or car.phone_number
    car.car_model = car_model or car.car_model
    car.car_color = car_color or car.car_color
    return car


def record_entry(db: Session, plate_number: str, driver_name: str, slot_number: str,
                 phone_number: Optional[str] = None, car_model: Optional[str] = None,
                 car_color: Optional[str] = None, notes: Optional[str] = None,
                 entry_time: Optional[datetime] = None) -> ParkingRecord:
    plate = normalize_plate(plate_number)
    slot_number = (slot_number or "").strip().upper()
    if not plate or not (driver_name or "").strip() or not slot_number:
        raise ValidationError("Plate number, driver name and slot number are required")

    slot = (
        db.query(ParkingSlot)
        .filter(ParkingSlot.slot_number == slot_number, ParkingSlot.is_active == True)  # noqa: E712
        .first()
    )
    if not slot:
        raise NotFoundError(f"Parking slot {slot_number} not found")
    if slot.slot_status == "occupied":
        raise ConflictError(f"Parking slot {slot_number} is already occupied")

    open_record = (
        db.query(ParkingRecord)
        .join(Car, ParkingRecord.car_id == Car.id)
        .filter(Car.plate_number == plate, ParkingRecord.status == "active")
        .first()
    )
    if open_record:
        raise ConflictError(f"Car {plate} is already parked (record {open_record.id})")

    car = _upsert_car(db, plate, driver_name.strip(), phone_number, car_model, car_color)
    record = ParkingRecord(
        car_id=car.id,
        parking_slot_id=slot.id,
        entry_time=to_local_naive(entry_time) or datetime.now(),
        status="active",
        notes=notes,
    )
    slot.slot_status = "occupied"
    db.add(record)
    db.commit()
    db.refresh(record)
    logger.info(f"[Entry] Plate={plate} | Slot={slot.slot_number} | Record={record.id}")
    return record


def get_record(db: Session, record_id: int) -> ParkingRecord:
    record = db.query(ParkingRecord).filter(ParkingRecord.id == record_id).first()
    if not record:
        raise NotFoundError("Parking record not found")
    return record


def _close(record: ParkingRecord, exit_time: datetime):
    record.exit_time = exit_time
    record.duration = int((exit_time - record.entry_time).total_seconds() // 60)
    record.total_amount = parking_fee(record.duration)
    record.status = "completed"


def record_exit(db: Session, record_id: int, exit_time: Optional[datetime] = None) -> ParkingRecord:
    record = get_record(db, record_id)
    if record.status != "active":
        raise ConflictError("Parking record is already completed")

    exit_time = to_local_naive(exit_time) or datetime.now()
    if exit_time < record.entry_time:
        raise ValidationError("Exit time cannot be before entry time")

    _close(record, exit_time)
    if record.parking_slot:
        record.parking_slot.slot_status = "available"
    db.commit()
    db.refresh(record)
    logger.info(
        f"[Exit] Record={record.id} parked for {record.duration} min | "
        f"Amount={record.total_amount} {settings.CURRENCY}"
    )
    return record


def update_record(db: Session, record_id: int, entry_time: Optional[datetime] = None,
                  exit_time: Optional[datetime] = None, notes: Optional[str] = None,
                  parking_slot_id: Optional[int] = None) -> ParkingRecord:
    """
    Correct a record after the fact. `entry_time` and `parking_slot_id` keep
    their current value when omitted; `exit_time` and `notes` are replaced, so
    a missing exit time reopens the session.
    """
    record = get_record(db, record_id)
    entry_time = to_local_naive(entry_time) or record.entry_time
    exit_time = to_local_naive(exit_time)
    if exit_time is not None and exit_time < entry_time:
        raise ValidationError("Exit time cannot be before entry time")

    old_slot = record.parking_slot
    new_slot = old_slot
    if parking_slot_id is not None and parking_slot_id != record.parking_slot_id:
        new_slot = (
            db.query(ParkingSlot)
            .filter(ParkingSlot.id == parking_slot_id, ParkingSlot.is_active == True)  # noqa: E712
            .first()
        )
        if not new_slot:
            raise NotFoundError("Parking slot not found")
        if new_slot.slot_status == "occupied":
            raise ConflictError(f"Parking slot {new_slot.slot_number} is already occupied")

    was_active = record.status == "active"
    now_active = exit_time is None
    if now_active and not was_active:
        if new_slot is old_slot and old_slot.slot_status == "occupied":
            raise ConflictError(f"Parking slot {old_slot.slot_number} is already occupied")
        open_record = (
            db.query(ParkingRecord)
            .filter(ParkingRecord.car_id == record.car_id, ParkingRecord.status == "active",
                    ParkingRecord.id != record.id)
            .first()
        )
        if open_record:
            raise ConflictError(f"Car is already parked (record {open_record.id})")

    if was_active and old_slot:
        old_slot.slot_status = "available"
    if now_active:
        new_slot.slot_status = "occupied"

    record.parking_slot = new_slot
    record.entry_time = entry_time
    record.notes = notes
    if now_active:
        record.exit_time = None
        record.duration = None
        record.total_amount = None
        record.status = "active"
    else:
        _close(record, exit_time)
    db.commit()
    db.refresh(record)
    logger.info(
        f"[Edit] Record={record.id} | Slot={new_slot.slot_number} | Status={record.status} | "
        f"Duration={record.duration}"
    )
    return record


def record_payment(db: Session, parking_record_id: int, amount_paid: float, payment_method: str,
                   payment_date: Optional[datetime] = None) -> Payment:
    get_record(db, parking_record_id)
    payment = Payment(
        parking_record_id=parking_record_id,
        amount_paid=amount_paid,
        payment_method=payment_method,
        payment_date=to_local_naive(payment_date) or datetime.now(),
    )
    db.add(payment)
    db.commit()
    db.refresh(payment)
    logger.info(f"[Payment] Record={parking_record_id} | {amount_paid} {settings.CURRENCY} via {payment_method}")
    return payment
