"""
Conflict detection for doctor shifts.

Decides whether a candidate time-of-day interval overlaps any stored shift of
the same doctor. Intervals are half-open, [start, end), so back-to-back shifts
never conflict.
"""

import logging
from datetime import time
from typing import List, Optional

from models import Shift
from services.shift_store import ShiftStore

logger = logging.getLogger(__name__)


class ConflictDetectionService:
    """
    Service class for shift overlap detection.

    The overlap predicate is a pure function; find_conflicts applies it to
    the overlap candidates returned by the store and never mutates anything.
    """

    @staticmethod
    def intervals_overlap(
        start1: time,
        end1: time,
        start2: time,
        end2: time
    ) -> bool:
        """
        Check if two half-open time intervals overlap.

        Equivalent to max(start1, start2) < min(end1, end2). Symmetric in its
        two intervals; touching endpoints (end1 == start2) do not overlap.
        """
        return start1 < end2 and start2 < end1

    @staticmethod
    def find_conflicts(
        store: ShiftStore,
        doctor_id: int,
        start_time: time,
        end_time: time,
        exclude_shift_id: Optional[int] = None
    ) -> List[Shift]:
        """
        Find every stored shift of a doctor that overlaps a candidate interval.

        Args:
            store: Shift store to query
            doctor_id: Doctor whose schedule is checked
            start_time: Candidate start time
            end_time: Candidate end time
            exclude_shift_id: Shift to leave out (the shift being updated), or None

        Returns:
            Conflicting shifts in store order (start time, then id); empty if none
        """
        logger.debug(
            f"Checking for conflicting shifts for doctor {doctor_id} "
            f"between {start_time} and {end_time} (excluding {exclude_shift_id})"
        )
        candidates = store.find_overlap_candidates(doctor_id, exclude_shift_id)
        conflicts = [
            shift for shift in candidates
            if ConflictDetectionService.intervals_overlap(
                shift.start_time, shift.end_time,
                start_time, end_time
            )
        ]
        if not conflicts:
            logger.debug(f"No conflicting shifts found for doctor {doctor_id}")
        return conflicts
