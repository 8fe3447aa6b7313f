"""
Services package for shared business logic.

This package contains service classes that encapsulate business logic
shared across multiple API endpoints.
"""

from .conflict_detection_service import ConflictDetectionService
from .doctor_service import DoctorService
from .shift_service import ShiftService
from .shift_store import SqlAlchemyShiftUnitOfWork

__all__ = [
    "ConflictDetectionService",
    "DoctorService",
    "ShiftService",
    "SqlAlchemyShiftUnitOfWork",
]
