"""
Shared type definitions for the shift scheduler backend.

This module contains dataclasses and types that are used across services and
the API layer.
"""

from shared_types.shift_errors import (
    DoctorNotFound,
    InvalidTimeSlot,
    ShiftConflict,
    ShiftError,
    ShiftNotFound,
    ShiftServiceError,
)

__all__ = [
    "DoctorNotFound",
    "InvalidTimeSlot",
    "ShiftConflict",
    "ShiftError",
    "ShiftNotFound",
    "ShiftServiceError",
]
