"""
Persistence boundary for shift scheduling.

ShiftService and the conflict detection engine depend only on the small
capability interfaces defined here (ShiftStore, DoctorDirectory and the
ShiftUnitOfWork that bundles them with commit/rollback). The SQLAlchemy
implementations below are what the API wires in; tests substitute in-memory
fakes.
"""

import logging
from typing import List, Optional, Protocol

from sqlalchemy import select
from sqlalchemy.orm import Session

from models import Doctor, Shift

logger = logging.getLogger(__name__)


class ShiftStore(Protocol):
    """Durable shift records keyed by id."""

    def save(self, shift: Shift) -> Shift:
        """Insert or update a shift; assigns the id on insert."""
        ...

    def find_by_id(self, shift_id: int) -> Optional[Shift]:
        ...

    def find_all(self) -> List[Shift]:
        ...

    def find_by_doctor(self, doctor_id: int) -> List[Shift]:
        ...

    def find_by_room(self, room: str) -> List[Shift]:
        ...

    def find_overlap_candidates(self, doctor_id: int, exclude_id: Optional[int] = None) -> List[Shift]:
        """All shifts for the doctor, minus exclude_id, ordered by start time then id."""
        ...

    def delete_by_id(self, shift_id: int) -> None:
        ...

    def exists_by_id(self, shift_id: int) -> bool:
        ...


class DoctorDirectory(Protocol):
    """Answers questions about doctors owned by the doctor registry."""

    def exists(self, doctor_id: int) -> bool:
        ...

    def lock_schedule(self, doctor_id: int) -> None:
        """Serialize shift writers for this doctor until the transaction ends."""
        ...


class ShiftUnitOfWork(Protocol):
    """One transaction's view of the shift store and doctor directory."""

    shifts: ShiftStore
    doctors: DoctorDirectory

    def commit(self) -> None:
        ...

    def rollback(self) -> None:
        ...


class SqlAlchemyShiftStore:
    """ShiftStore backed by a SQLAlchemy session."""

    def __init__(self, db: Session):
        self.db = db

    def save(self, shift: Shift) -> Shift:
        self.db.add(shift)
        self.db.flush()
        return shift

    def find_by_id(self, shift_id: int) -> Optional[Shift]:
        return self.db.get(Shift, shift_id)

    def find_all(self) -> List[Shift]:
        return list(self.db.scalars(select(Shift).order_by(Shift.id)).all())

    def find_by_doctor(self, doctor_id: int) -> List[Shift]:
        query = select(Shift).where(Shift.doctor_id == doctor_id).order_by(Shift.start_time, Shift.id)
        return list(self.db.scalars(query).all())

    def find_by_room(self, room: str) -> List[Shift]:
        query = select(Shift).where(Shift.room == room).order_by(Shift.start_time, Shift.id)
        return list(self.db.scalars(query).all())

    def find_overlap_candidates(self, doctor_id: int, exclude_id: Optional[int] = None) -> List[Shift]:
        query = select(Shift).where(Shift.doctor_id == doctor_id)
        if exclude_id is not None:
            query = query.where(Shift.id != exclude_id)
        query = query.order_by(Shift.start_time, Shift.id)
        return list(self.db.scalars(query).all())

    def delete_by_id(self, shift_id: int) -> None:
        shift = self.db.get(Shift, shift_id)
        if shift is not None:
            self.db.delete(shift)
            self.db.flush()

    def exists_by_id(self, shift_id: int) -> bool:
        return self.db.scalar(select(Shift.id).where(Shift.id == shift_id)) is not None


class SqlAlchemyDoctorDirectory:
    """DoctorDirectory backed by the doctors table."""

    def __init__(self, db: Session):
        self.db = db

    def exists(self, doctor_id: int) -> bool:
        return self.db.scalar(select(Doctor.id).where(Doctor.id == doctor_id)) is not None

    def lock_schedule(self, doctor_id: int) -> None:
        # Row lock on the doctor; SQLite ignores FOR UPDATE and serializes writers itself
        self.db.execute(select(Doctor.id).where(Doctor.id == doctor_id).with_for_update())


class SqlAlchemyShiftUnitOfWork:
    """ShiftUnitOfWork over a single SQLAlchemy session."""

    def __init__(self, db: Session):
        self.db = db
        self.shifts = SqlAlchemyShiftStore(db)
        self.doctors = SqlAlchemyDoctorDirectory(db)

    def commit(self) -> None:
        self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()
