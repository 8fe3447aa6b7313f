"""
Unit tests for the shift lifecycle service.

ShiftService runs against in-memory fakes of the store and doctor directory,
so these tests cover ordering of checks, rollback behaviour and per-doctor
write serialization without a database.
"""

import threading
import pytest
from datetime import time

from services.shift_service import ShiftService
from shared_types.shift_errors import (
    DoctorNotFound,
    InvalidTimeSlot,
    ShiftConflict,
    ShiftNotFound,
    ShiftServiceError,
)
from tests.fakes import InMemoryShiftStore, InMemoryShiftUnitOfWork
from utils.keyed_lock import KeyedLock


@pytest.fixture
def service(uow) -> ShiftService:
    return ShiftService(uow, write_locks=KeyedLock())


class TestCreateShift:
    """Test shift creation."""

    def test_create_shift_success(self, service, uow):
        """A valid shift is persisted with an id and audit timestamps."""
        shift = service.create_shift(1, time(9, 0), time(17, 0), "101")

        assert shift.id is not None
        assert shift.doctor_id == 1
        assert shift.start_time == time(9, 0)
        assert shift.end_time == time(17, 0)
        assert shift.room == "101"
        assert shift.created_at is not None
        assert shift.created_at == shift.updated_at
        assert uow.shifts.exists_by_id(shift.id)
        assert uow.commits == 1
        assert uow.rollbacks == 0

    def test_invalid_time_slot_persists_nothing(self, service, uow):
        """start=10:00, end=09:00 is rejected before any conflict query."""
        with pytest.raises(ShiftServiceError) as exc_info:
            service.create_shift(1, time(10, 0), time(9, 0), "101")

        assert exc_info.value.error == InvalidTimeSlot(start_time=time(10, 0), end_time=time(9, 0))
        assert uow.shifts.rows == {}
        assert uow.shifts.overlap_queries == []
        assert uow.rollbacks == 1
        assert uow.commits == 0

    def test_equal_bounds_rejected(self, service):
        with pytest.raises(ShiftServiceError) as exc_info:
            service.create_shift(1, time(9, 0), time(9, 0), "101")
        assert isinstance(exc_info.value.error, InvalidTimeSlot)

    def test_unknown_doctor_rejected(self, service, uow):
        with pytest.raises(ShiftServiceError) as exc_info:
            service.create_shift(99, time(9, 0), time(10, 0), "101")

        assert exc_info.value.error == DoctorNotFound(doctor_id=99)
        assert uow.shifts.rows == {}

    def test_missing_doctor_reported_before_bad_slot(self, service):
        """Existence checks come before shape checks."""
        with pytest.raises(ShiftServiceError) as exc_info:
            service.create_shift(99, time(10, 0), time(9, 0), "101")
        assert isinstance(exc_info.value.error, DoctorNotFound)

    def test_bad_slot_reported_before_conflict(self, service, uow):
        """Shape checks come before conflict checks."""
        uow.shifts.add(1, time(8, 0), time(12, 0))

        with pytest.raises(ShiftServiceError) as exc_info:
            service.create_shift(1, time(11, 0), time(9, 0), "101")
        assert isinstance(exc_info.value.error, InvalidTimeSlot)

    def test_overlapping_shift_rejected(self, service, uow):
        """Given D1 has 13:00-15:00, adding 14:00-16:00 names the existing interval."""
        uow.shifts.add(1, time(13, 0), time(15, 0))

        with pytest.raises(ShiftServiceError) as exc_info:
            service.create_shift(1, time(14, 0), time(16, 0), "102")

        error = exc_info.value.error
        assert error == ShiftConflict(doctor_id=1, conflict_start=time(13, 0), conflict_end=time(15, 0))
        assert error.message == "Shift conflict: Doctor 1 already has a shift from 13:00 to 15:00"
        assert len(uow.shifts.rows) == 1
        assert uow.doctors.locked == [1]

    def test_conflict_reports_earliest_overlap(self, service, uow):
        uow.shifts.add(1, time(14, 0), time(15, 0))
        uow.shifts.add(1, time(10, 0), time(11, 0))

        with pytest.raises(ShiftServiceError) as exc_info:
            service.create_shift(1, time(9, 0), time(16, 0), "101")

        assert exc_info.value.error.conflict_start == time(10, 0)

    def test_contained_shift_rejected(self, service, uow):
        uow.shifts.add(1, time(10, 0), time(14, 0))

        with pytest.raises(ShiftServiceError) as exc_info:
            service.create_shift(1, time(12, 0), time(13, 0), "101")
        assert isinstance(exc_info.value.error, ShiftConflict)

    def test_back_to_back_shift_allowed(self, service, uow):
        uow.shifts.add(1, time(9, 0), time(12, 0))

        shift = service.create_shift(1, time(12, 0), time(15, 0), "101")

        assert shift.id is not None
        assert len(uow.shifts.rows) == 2

    def test_same_interval_for_other_doctor_allowed(self, service, uow):
        """D2 may take the exact interval D1 already has."""
        uow.shifts.add(1, time(13, 0), time(15, 0))

        shift = service.create_shift(2, time(13, 0), time(15, 0), "101")

        assert shift.doctor_id == 2
        assert len(uow.shifts.rows) == 2


class TestGetAndListShifts:
    """Test shift reads."""

    def test_get_shift(self, service, uow):
        existing = uow.shifts.add(1, time(9, 0), time(10, 0))
        assert service.get_shift(existing.id).id == existing.id

    def test_get_missing_shift(self, service):
        with pytest.raises(ShiftServiceError) as exc_info:
            service.get_shift(42)
        assert exc_info.value.error == ShiftNotFound(shift_id=42)

    def test_list_all(self, service, uow):
        uow.shifts.add(1, time(9, 0), time(10, 0))
        uow.shifts.add(2, time(9, 0), time(10, 0))
        assert len(service.list_shifts()) == 2

    def test_list_empty(self, service):
        assert service.list_shifts() == []
        assert service.list_shifts(doctor_id=1) == []

    def test_list_by_doctor(self, service, uow):
        uow.shifts.add(1, time(13, 0), time(14, 0))
        uow.shifts.add(1, time(9, 0), time(10, 0))
        uow.shifts.add(2, time(9, 0), time(10, 0))

        shifts = service.list_shifts(doctor_id=1)

        assert [shift.start_time for shift in shifts] == [time(9, 0), time(13, 0)]

    def test_list_by_room(self, service, uow):
        uow.shifts.add(1, time(9, 0), time(10, 0), room="A")
        uow.shifts.add(2, time(9, 0), time(10, 0), room="B")

        shifts = service.list_shifts(room="B")

        assert [shift.doctor_id for shift in shifts] == [2]

    def test_list_by_doctor_and_room(self, service, uow):
        uow.shifts.add(1, time(9, 0), time(10, 0), room="A")
        uow.shifts.add(1, time(11, 0), time(12, 0), room="B")

        shifts = service.list_shifts(doctor_id=1, room="B")

        assert [shift.start_time for shift in shifts] == [time(11, 0)]


class TestUpdateShift:
    """Test shift updates."""

    def test_update_shift_success(self, service, uow):
        """Moving 09:00-12:00 to 08:00-11:00 with no other shifts succeeds."""
        existing = uow.shifts.add(1, time(9, 0), time(12, 0))

        updated = service.update_shift(existing.id, 1, time(8, 0), time(11, 0), "202")

        assert updated.id == existing.id
        stored = uow.shifts.find_by_id(existing.id)
        assert stored.start_time == time(8, 0)
        assert stored.end_time == time(11, 0)
        assert stored.room == "202"
        assert stored.updated_at is not None
        assert uow.commits == 1

    def test_update_to_unchanged_interval_does_not_conflict_with_itself(self, service, uow):
        existing = uow.shifts.add(1, time(9, 0), time(12, 0))

        updated = service.update_shift(existing.id, 1, time(9, 0), time(12, 0), "101")

        assert updated.start_time == time(9, 0)
        assert uow.shifts.overlap_queries == [(1, existing.id)]

    def test_update_missing_shift(self, service):
        with pytest.raises(ShiftServiceError) as exc_info:
            service.update_shift(42, 1, time(9, 0), time(10, 0), "101")
        assert exc_info.value.error == ShiftNotFound(shift_id=42)

    def test_missing_shift_reported_before_missing_doctor(self, service):
        with pytest.raises(ShiftServiceError) as exc_info:
            service.update_shift(42, 99, time(10, 0), time(9, 0), "101")
        assert isinstance(exc_info.value.error, ShiftNotFound)

    def test_update_unknown_doctor(self, service, uow):
        existing = uow.shifts.add(1, time(9, 0), time(12, 0))

        with pytest.raises(ShiftServiceError) as exc_info:
            service.update_shift(existing.id, 99, time(9, 0), time(12, 0), "101")
        assert exc_info.value.error == DoctorNotFound(doctor_id=99)

    def test_invalid_slot_leaves_stored_shift_untouched(self, service, uow):
        existing = uow.shifts.add(1, time(9, 0), time(12, 0))

        with pytest.raises(ShiftServiceError) as exc_info:
            service.update_shift(existing.id, 1, time(12, 0), time(9, 0), "999")

        assert isinstance(exc_info.value.error, InvalidTimeSlot)
        stored = uow.shifts.find_by_id(existing.id)
        assert (stored.start_time, stored.end_time, stored.room) == (time(9, 0), time(12, 0), "101")
        assert uow.rollbacks == 1
        assert uow.commits == 0

    def test_update_into_other_shift_conflicts(self, service, uow):
        uow.shifts.add(1, time(13, 0), time(15, 0))
        moving = uow.shifts.add(1, time(9, 0), time(12, 0))

        with pytest.raises(ShiftServiceError) as exc_info:
            service.update_shift(moving.id, 1, time(11, 0), time(14, 0), "101")

        assert exc_info.value.error == ShiftConflict(
            doctor_id=1, conflict_start=time(13, 0), conflict_end=time(15, 0)
        )
        assert uow.shifts.find_by_id(moving.id).end_time == time(12, 0)

    def test_reassign_to_other_doctor_checks_new_doctor(self, service, uow):
        uow.shifts.add(2, time(9, 0), time(12, 0))
        moving = uow.shifts.add(1, time(9, 0), time(12, 0))

        with pytest.raises(ShiftServiceError) as exc_info:
            service.update_shift(moving.id, 2, time(10, 0), time(11, 0), "101")

        assert exc_info.value.error.doctor_id == 2


class TestDeleteShift:
    """Test shift deletion."""

    def test_delete_shift(self, service, uow):
        existing = uow.shifts.add(1, time(9, 0), time(12, 0))

        service.delete_shift(existing.id)

        assert not uow.shifts.exists_by_id(existing.id)
        assert uow.commits == 1

    def test_delete_missing_shift(self, service, uow):
        with pytest.raises(ShiftServiceError) as exc_info:
            service.delete_shift(42)
        assert exc_info.value.error == ShiftNotFound(shift_id=42)
        assert uow.rollbacks == 1

    def test_get_after_delete(self, service, uow):
        existing = uow.shifts.add(1, time(9, 0), time(12, 0))
        service.delete_shift(existing.id)

        with pytest.raises(ShiftServiceError) as exc_info:
            service.get_shift(existing.id)
        assert isinstance(exc_info.value.error, ShiftNotFound)


class TestUnexpectedStoreErrors:
    """Store failures are not shift errors."""

    def test_store_error_propagates_unclassified(self, service, uow):
        def broken_save(shift):
            raise RuntimeError("connection lost")
        uow.shifts.save = broken_save

        with pytest.raises(RuntimeError, match="connection lost"):
            service.create_shift(1, time(9, 0), time(10, 0), "101")
        assert uow.rollbacks == 1


class TestConcurrentWrites:
    """Test per-doctor serialization of the check-then-write sequence."""

    def test_concurrent_overlapping_creates_only_one_succeeds(self):
        """Two threads booking overlapping slots for one doctor cannot both win."""
        store = InMemoryShiftStore(candidate_delay=0.05)
        locks = KeyedLock()
        start_barrier = threading.Barrier(2)
        outcomes = []

        def book(start, end):
            service = ShiftService(InMemoryShiftUnitOfWork(store, doctor_ids={1}), write_locks=locks)
            start_barrier.wait()
            try:
                service.create_shift(1, start, end, "101")
                outcomes.append("created")
            except ShiftServiceError as e:
                outcomes.append(type(e.error).__name__)

        threads = [
            threading.Thread(target=book, args=(time(9, 0), time(12, 0))),
            threading.Thread(target=book, args=(time(10, 0), time(13, 0))),
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=5)

        assert sorted(outcomes) == ["ShiftConflict", "created"]
        assert len(store.rows) == 1
        assert locks.active_keys() == 0

    def test_different_doctors_are_not_serialized_against_each_other(self):
        store = InMemoryShiftStore()
        locks = KeyedLock()
        service = ShiftService(InMemoryShiftUnitOfWork(store, doctor_ids={1, 2}), write_locks=locks)

        with locks.hold(1):
            # Doctor 1's lock is held; doctor 2 can still book
            shift = service.create_shift(2, time(9, 0), time(10, 0), "101")

        assert shift.doctor_id == 2
