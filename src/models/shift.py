"""
Shift model for doctor work assignments.

A shift is a time-of-day interval (no date component) assigned to one doctor,
with a room label carried for display. Shifts behave as daily templates, so
two shifts are compared on wall-clock time only.
"""

from datetime import time, datetime

from sqlalchemy import String, Time, DateTime, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship

from core.constants import MAX_ROOM_LENGTH
from core.database import Base


class Shift(Base):
    """
    Model for a doctor's shift.

    For a fixed doctor, no two persisted shifts may overlap on the half-open
    interval [start_time, end_time). Back-to-back shifts (one ends exactly when
    the next starts) are allowed. The constraint is enforced by ShiftService,
    not by the database.
    """

    __tablename__ = "shifts"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    """Unique identifier for the shift, assigned on insert."""

    doctor_id: Mapped[int] = mapped_column(ForeignKey("doctors.id"), nullable=False)
    """Reference to the doctor working the shift."""

    start_time: Mapped[time] = mapped_column(Time, nullable=False)
    """Start time of the shift (inclusive)."""

    end_time: Mapped[time] = mapped_column(Time, nullable=False)
    """End time of the shift (exclusive). Must be strictly after start_time."""

    room: Mapped[str] = mapped_column(String(MAX_ROOM_LENGTH), nullable=False)
    """Room label for display; not unique."""

    # Metadata
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    """Timestamp when the shift was created."""

    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    """Timestamp when the shift was last updated."""

    # Relationships
    doctor = relationship("Doctor", back_populates="shifts")
    """Relationship to the Doctor entity."""

    # The overlap-candidate query filters by doctor and orders by start time
    __table_args__ = (
        Index('idx_shifts_doctor_start', 'doctor_id', 'start_time'),
        Index('idx_shifts_room', 'room'),
    )

    def __repr__(self) -> str:
        return f"<Shift(id={self.id}, doctor_id={self.doctor_id}, {self.start_time}-{self.end_time}, room={self.room!r})>"
