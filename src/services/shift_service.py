"""
Shift service for the shift lifecycle.

Creates, reads, lists, updates and deletes doctor shifts while enforcing:
- the referenced doctor exists,
- end time is strictly after start time,
- no two shifts of the same doctor overlap.

Checks always run in that order, so a request that is wrong in several ways
gets a deterministic error: a missing doctor is reported before a bad time
slot, which is reported before a scheduling conflict.

Writes for one doctor are serialized (KeyedLock in-process, plus a row lock
on the doctor inside the transaction) so two concurrent requests cannot both
pass the conflict check and then both insert overlapping shifts.
"""

import logging
from contextlib import contextmanager
from datetime import time
from typing import Generator, List, Optional

from models import Shift
from services.conflict_detection_service import ConflictDetectionService
from services.shift_store import ShiftUnitOfWork
from shared_types.shift_errors import (
    DoctorNotFound,
    ShiftConflict,
    ShiftNotFound,
    ShiftServiceError,
)
from utils.datetime_utils import format_time_of_day, utc_now
from utils.keyed_lock import KeyedLock
from utils.shift_validators import validate_time_slot

logger = logging.getLogger(__name__)

# Shared by every ShiftService in this process
_doctor_write_locks = KeyedLock()


class ShiftService:
    """
    Service class for shift lifecycle operations.

    Holds no state between calls beyond its unit of work; every operation
    reads fresh from the store.
    """

    def __init__(self, uow: ShiftUnitOfWork, write_locks: Optional[KeyedLock] = None):
        self.uow = uow
        self.write_locks = write_locks if write_locks is not None else _doctor_write_locks

    def create_shift(
        self,
        doctor_id: int,
        start_time: time,
        end_time: time,
        room: str
    ) -> Shift:
        """
        Create a new shift.

        Args:
            doctor_id: Doctor working the shift
            start_time: Shift start time
            end_time: Shift end time (strictly after start_time)
            room: Room label

        Returns:
            The persisted shift with id and audit timestamps set

        Raises:
            ShiftServiceError: DoctorNotFound, InvalidTimeSlot or ShiftConflict
        """
        logger.info(f"Creating new shift for doctor ID: {doctor_id} in room: {room}")

        with self.write_locks.hold(doctor_id), self._transaction():
            self._require_doctor(doctor_id)
            self._validate_slot(start_time, end_time)
            self._ensure_no_conflicts(doctor_id, start_time, end_time)

            now = utc_now()
            shift = Shift(
                doctor_id=doctor_id,
                start_time=start_time,
                end_time=end_time,
                room=room,
                created_at=now,
                updated_at=now,
            )
            saved = self.uow.shifts.save(shift)
            self.uow.commit()

        logger.info(f"Shift created successfully with ID: {saved.id}")
        return saved

    def get_shift(self, shift_id: int) -> Shift:
        """
        Get a shift by ID.

        Raises:
            ShiftServiceError: ShiftNotFound if no shift has this id
        """
        logger.info(f"Fetching shift with ID: {shift_id}")
        return self._require_shift(shift_id)

    def list_shifts(self, doctor_id: Optional[int] = None, room: Optional[str] = None) -> List[Shift]:
        """
        List shifts, optionally filtered by doctor and/or room.

        Returns an empty list when nothing matches; a doctor id that does not
        exist is not an error here.
        """
        if doctor_id is not None:
            logger.info(f"Fetching shifts for doctor ID: {doctor_id}")
            shifts = self.uow.shifts.find_by_doctor(doctor_id)
            if room is not None:
                shifts = [shift for shift in shifts if shift.room == room]
            return shifts
        if room is not None:
            logger.info(f"Fetching shifts in room: {room}")
            return self.uow.shifts.find_by_room(room)
        logger.info("Fetching all shifts")
        return self.uow.shifts.find_all()

    def update_shift(
        self,
        shift_id: int,
        doctor_id: int,
        start_time: time,
        end_time: time,
        room: str
    ) -> Shift:
        """
        Update an existing shift.

        The new bounds are validated and conflict-checked against the doctor's
        other shifts; the shift's own previous interval is excluded. Nothing is
        persisted unless every check passes.

        Raises:
            ShiftServiceError: ShiftNotFound, DoctorNotFound, InvalidTimeSlot or ShiftConflict
        """
        logger.info(f"Updating shift with ID: {shift_id}")

        with self.write_locks.hold(doctor_id), self._transaction():
            shift = self._require_shift(shift_id)
            self._require_doctor(doctor_id)

            shift.doctor_id = doctor_id
            shift.start_time = start_time
            shift.end_time = end_time
            shift.room = room

            self._validate_slot(start_time, end_time)
            self._ensure_no_conflicts(doctor_id, start_time, end_time, exclude_shift_id=shift_id)

            shift.updated_at = utc_now()
            updated = self.uow.shifts.save(shift)
            self.uow.commit()

        logger.info(f"Shift updated successfully with ID: {updated.id}")
        return updated

    def delete_shift(self, shift_id: int) -> None:
        """
        Delete a shift.

        Raises:
            ShiftServiceError: ShiftNotFound if no shift has this id
        """
        logger.info(f"Deleting shift with ID: {shift_id}")

        with self._transaction():
            if not self.uow.shifts.exists_by_id(shift_id):
                raise ShiftServiceError(ShiftNotFound(shift_id=shift_id))
            self.uow.shifts.delete_by_id(shift_id)
            self.uow.commit()

        logger.info(f"Shift deleted successfully with ID: {shift_id}")

    @contextmanager
    def _transaction(self) -> Generator[None, None, None]:
        """Roll back the unit of work if the block raises."""
        try:
            yield
        except ShiftServiceError:
            self.uow.rollback()
            raise
        except Exception as e:
            logger.exception(f"Shift transaction failed: {e}")
            self.uow.rollback()
            raise

    def _require_shift(self, shift_id: int) -> Shift:
        shift = self.uow.shifts.find_by_id(shift_id)
        if shift is None:
            raise ShiftServiceError(ShiftNotFound(shift_id=shift_id))
        return shift

    def _require_doctor(self, doctor_id: int) -> None:
        if not self.uow.doctors.exists(doctor_id):
            logger.warning(f"Doctor not found: {doctor_id}")
            raise ShiftServiceError(DoctorNotFound(doctor_id=doctor_id))

    @staticmethod
    def _validate_slot(start_time: time, end_time: time) -> None:
        try:
            validate_time_slot(start_time, end_time)
        except ShiftServiceError:
            logger.warning(f"Invalid time slot: start_time={start_time}, end_time={end_time}")
            raise

    def _ensure_no_conflicts(
        self,
        doctor_id: int,
        start_time: time,
        end_time: time,
        exclude_shift_id: Optional[int] = None
    ) -> None:
        """Lock the doctor's schedule, then reject the interval if it overlaps another shift."""
        self.uow.doctors.lock_schedule(doctor_id)
        conflicts = ConflictDetectionService.find_conflicts(
            self.uow.shifts, doctor_id, start_time, end_time, exclude_shift_id
        )
        if conflicts:
            first_conflict = conflicts[0]
            logger.warning(
                f"Shift conflict detected for doctor ID: {doctor_id}. Conflicting shift: "
                f"{format_time_of_day(first_conflict.start_time)} - {format_time_of_day(first_conflict.end_time)} "
                f"({len(conflicts)} conflict(s) in total)"
            )
            raise ShiftServiceError(ShiftConflict(
                doctor_id=doctor_id,
                conflict_start=first_conflict.start_time,
                conflict_end=first_conflict.end_time,
            ))
