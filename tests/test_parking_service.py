"""Unit tests for car entry / exit and payments."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock
from smartpark.errors import ConflictError, NotFoundError, ValidationError
from smartpark.models.car import Car
from smartpark.services import parking_service
from factories import add_slot


class TestParkingFee:
    @pytest.mark.parametrize("minutes,expected", [(0, 500.0), (59, 500.0), (60, 500.0), (61, 1000.0), (180, 1500.0)])
    def test_fee_per_started_hour(self, minutes, expected):
        assert parking_service.parking_fee(minutes) == expected


class TestEntry:
    def test_entry_creates_car_and_occupies_slot(self, db):
        slot = add_slot(db, "B2")
        record = parking_service.record_entry(db, "rab123c", "Alice", "b2", phone_number="+250788111111")

        assert record.status == "active"
        assert record.car.plate_number == "RAB123C"
        assert record.parking_slot.slot_status == "occupied"
        db.refresh(slot)
        assert slot.slot_status == "occupied"

    def test_existing_car_is_reused(self, db):
        add_slot(db, "B1")
        add_slot(db, "B2")
        first = parking_service.record_entry(db, "RAB123C", "Alice", "B1")
        parking_service.record_exit(db, first.id, first.entry_time + timedelta(minutes=30))
        second = parking_service.record_entry(db, "RAB123C", "Alice B.", "B2")

        assert second.car_id == first.car_id
        assert db.query(Car).count() == 1
        assert second.car.driver_name == "Alice B."

    def test_occupied_slot_rejected(self, db):
        add_slot(db, "B1")
        parking_service.record_entry(db, "RAB001A", "Alice", "B1")
        with pytest.raises(ConflictError):
            parking_service.record_entry(db, "RAB002A", "Bob", "B1")

    def test_car_already_parked_rejected(self, db):
        add_slot(db, "B1")
        add_slot(db, "B2")
        parking_service.record_entry(db, "RAB001A", "Alice", "B1")
        with pytest.raises(ConflictError):
            parking_service.record_entry(db, "rab001a", "Alice", "B2")

    def test_unknown_slot(self, db):
        with pytest.raises(NotFoundError):
            parking_service.record_entry(db, "RAB001A", "Alice", "Z9")

    def test_missing_fields(self):
        db = MagicMock()
        with pytest.raises(ValidationError):
            parking_service.record_entry(db, "", "Alice", "B1")
        db.commit.assert_not_called()


class TestExit:
    def test_exit_sets_duration_fee_and_frees_slot(self, db):
        add_slot(db, "C1")
        entry = datetime(2024, 3, 15, 8, 0)
        record = parking_service.record_entry(db, "RAC555B", "Carol", "C1", entry_time=entry)
        record = parking_service.record_exit(db, record.id, entry + timedelta(minutes=95))

        assert record.status == "completed"
        assert record.duration == 95
        assert record.total_amount == 1000.0
        assert record.parking_slot.slot_status == "available"

    def test_double_exit_rejected(self, db):
        add_slot(db, "C1")
        record = parking_service.record_entry(db, "RAC555B", "Carol", "C1")
        parking_service.record_exit(db, record.id)
        with pytest.raises(ConflictError):
            parking_service.record_exit(db, record.id)

    def test_exit_before_entry_rejected(self, db):
        add_slot(db, "C1")
        entry = datetime(2024, 3, 15, 8, 0)
        record = parking_service.record_entry(db, "RAC555B", "Carol", "C1", entry_time=entry)
        with pytest.raises(ValidationError):
            parking_service.record_exit(db, record.id, entry - timedelta(minutes=1))

    def test_unknown_record(self):
        db = MagicMock()
        db.query.return_value.filter.return_value.first.return_value = None
        with pytest.raises(NotFoundError):
            parking_service.record_exit(db, 42)


class TestPayment:
    def test_payment_recorded(self, db):
        add_slot(db, "D1")
        record = parking_service.record_entry(db, "RAD777D", "Dan", "D1")
        payment = parking_service.record_payment(db, record.id, 1500, "mobile_money")

        assert payment.id is not None
        assert payment.payment_method == "mobile_money"
        assert payment.payment_date is not None

    def test_payment_for_unknown_record(self, db):
        with pytest.raises(NotFoundError):
            parking_service.record_payment(db, 999, 100, "cash")


class TestTimestamps:
    def test_aware_input_stored_as_naive_local(self):
        aware = datetime(2024, 3, 15, 8, 0, tzinfo=timezone.utc)
        naive = parking_service.to_local_naive(aware)
        assert naive.tzinfo is None
        assert naive == aware.astimezone().replace(tzinfo=None)

    def test_naive_input_untouched(self):
        value = datetime(2024, 3, 15, 8, 0)
        assert parking_service.to_local_naive(value) is value


class TestUpdateRecord:
    def _completed(self, db, slot_number="E1"):
        add_slot(db, slot_number)
        entry = datetime(2024, 3, 15, 8, 0)
        record = parking_service.record_entry(db, "RAE100E", "Eve", slot_number, entry_time=entry)
        return parking_service.record_exit(db, record.id, entry + timedelta(minutes=30))

    def test_edited_exit_recomputes_duration_and_fee(self, db):
        record = self._completed(db)
        record = parking_service.update_record(db, record.id, exit_time=datetime(2024, 3, 15, 10, 15),
                                               notes="gate clock was late")

        assert record.status == "completed"
        assert record.duration == 135
        assert record.total_amount == 1500.0
        assert record.notes == "gate clock was late"

    def test_edited_entry_recomputes_duration(self, db):
        record = self._completed(db)
        record = parking_service.update_record(db, record.id, entry_time=datetime(2024, 3, 15, 7, 0),
                                               exit_time=record.exit_time)
        assert record.duration == 90
        assert record.total_amount == 1000.0

    def test_clearing_exit_reopens_record(self, db):
        record = self._completed(db)
        record = parking_service.update_record(db, record.id, exit_time=None)

        assert record.status == "active"
        assert record.exit_time is None
        assert record.duration is None
        assert record.total_amount is None
        assert record.parking_slot.slot_status == "occupied"

    def test_reopen_into_taken_slot_rejected(self, db):
        record = self._completed(db)
        parking_service.record_entry(db, "RAE200E", "Frank", "E1")
        with pytest.raises(ConflictError):
            parking_service.update_record(db, record.id, exit_time=None)

    def test_slot_swap_moves_occupancy(self, db):
        old = add_slot(db, "F1")
        new = add_slot(db, "F2")
        record = parking_service.record_entry(db, "RAF300F", "Gina", "F1")

        record = parking_service.update_record(db, record.id, parking_slot_id=new.id)

        assert record.parking_slot_id == new.id
        db.refresh(old)
        db.refresh(new)
        assert old.slot_status == "available"
        assert new.slot_status == "occupied"

    def test_swap_to_occupied_slot_rejected(self, db):
        add_slot(db, "F1")
        taken = add_slot(db, "F2")
        record = parking_service.record_entry(db, "RAF300F", "Gina", "F1")
        parking_service.record_entry(db, "RAF400F", "Hugo", "F2")

        with pytest.raises(ConflictError):
            parking_service.update_record(db, record.id, parking_slot_id=taken.id)

    def test_exit_before_entry_rejected(self, db):
        record = self._completed(db)
        with pytest.raises(ValidationError):
            parking_service.update_record(db, record.id, exit_time=datetime(2024, 3, 15, 7, 59))

    def test_aware_times_are_stored_naive(self, db):
        record = self._completed(db)
        aware_exit = datetime(2024, 3, 15, 9, 0, tzinfo=timezone.utc)
        record = parking_service.update_record(db, record.id, entry_time=datetime(2024, 3, 14, 0, 0),
                                               exit_time=aware_exit)
        assert record.exit_time.tzinfo is None
        assert record.exit_time == aware_exit.astimezone().replace(tzinfo=None)

    def test_unknown_record(self):
        db = MagicMock()
        db.query.return_value.filter.return_value.first.return_value = None
        with pytest.raises(NotFoundError):
            parking_service.update_record(db, 42, exit_time=None)
        db.commit.assert_not_called()
