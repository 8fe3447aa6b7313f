"""
Shared error types for shift scheduling.

The scheduling core reports exactly four expected failure kinds. Each is a
frozen dataclass and ShiftError is their closed union, so the API boundary can
map every variant to a status code in one place. ShiftServiceError is the
single exception type that carries a variant out of ShiftService.

Anything else raised during a shift operation (database connectivity,
integrity violations) is not a ShiftError and propagates unchanged.
"""

from dataclasses import dataclass
from datetime import time
from typing import Optional, Union

from utils.datetime_utils import format_time_of_day


@dataclass(frozen=True)
class InvalidTimeSlot:
    """The shift's end time is not strictly after its start time."""
    start_time: Optional[time]
    end_time: Optional[time]

    @property
    def message(self) -> str:
        return (
            f"End time ({format_time_of_day(self.end_time)}) must be strictly after "
            f"start time ({format_time_of_day(self.start_time)})"
        )


@dataclass(frozen=True)
class DoctorNotFound:
    """The referenced doctor does not exist."""
    doctor_id: int

    @property
    def message(self) -> str:
        return f"Doctor not found with id: {self.doctor_id}"


@dataclass(frozen=True)
class ShiftNotFound:
    """The referenced shift does not exist."""
    shift_id: int

    @property
    def message(self) -> str:
        return f"Shift not found with id: {self.shift_id}"


@dataclass(frozen=True)
class ShiftConflict:
    """
    The candidate interval overlaps an existing shift of the same doctor.

    Carries the first conflicting interval (in store order) for diagnostics.
    """
    doctor_id: int
    conflict_start: time
    conflict_end: time

    @property
    def message(self) -> str:
        return (
            f"Shift conflict: Doctor {self.doctor_id} already has a shift from "
            f"{format_time_of_day(self.conflict_start)} to {format_time_of_day(self.conflict_end)}"
        )


ShiftError = Union[InvalidTimeSlot, DoctorNotFound, ShiftNotFound, ShiftConflict]


class ShiftServiceError(Exception):
    """Raised by ShiftService with exactly one ShiftError variant attached."""

    def __init__(self, error: ShiftError):
        super().__init__(error.message)
        self.error = error
