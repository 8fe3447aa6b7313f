"""
Shift field validation utilities.

Provides the time-slot validity check shared by shift creation and update,
and the field validators (room label, time-of-day bounds) used by the request models.
"""

from datetime import time
from typing import Optional

from core.constants import MAX_ROOM_LENGTH
from shared_types.shift_errors import InvalidTimeSlot, ShiftServiceError


def is_valid_time_slot(start_time: Optional[time], end_time: Optional[time]) -> bool:
    """Return True iff both bounds are present and start is strictly before end."""
    if start_time is None or end_time is None:
        return False
    return start_time < end_time


def validate_time_slot(start_time: Optional[time], end_time: Optional[time]) -> None:
    """
    Validate a shift's time slot.

    Pure check with no I/O. Equal bounds and inverted bounds are both invalid.

    Args:
        start_time: Shift start time
        end_time: Shift end time

    Raises:
        ShiftServiceError: Carrying InvalidTimeSlot if end is not strictly after start
    """
    if not is_valid_time_slot(start_time, end_time):
        raise ShiftServiceError(InvalidTimeSlot(start_time=start_time, end_time=end_time))


def validate_room_field(v: str) -> str:
    """
    Validate and normalize a room label.

    Args:
        v: Room label from the request

    Returns:
        Label with surrounding whitespace removed

    Raises:
        ValueError: If the label is blank or longer than MAX_ROOM_LENGTH
    """
    v = v.strip()
    if not v:
        raise ValueError('Room is required')
    if len(v) > MAX_ROOM_LENGTH:
        raise ValueError(f'Room must be between 1 and {MAX_ROOM_LENGTH} characters')
    return v


def validate_time_of_day_field(v: time) -> time:
    """
    Validate a shift bound from the request.

    Shift bounds are plain local times of day; a value carrying a UTC offset
    (e.g. "09:00Z") cannot be compared with stored bounds.

    Raises:
        ValueError: If the time carries a timezone
    """
    if v.tzinfo is not None:
        raise ValueError('Time must not include a timezone offset')
    return v
