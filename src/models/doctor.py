"""
Doctor model.

Doctors are owned by the doctor registry; shifts only hold a foreign key to
them. The scheduling core needs nothing from a doctor beyond its existence.
"""

from datetime import datetime

from sqlalchemy import String, DateTime
from sqlalchemy.orm import Mapped, mapped_column, relationship

from core.constants import MAX_STRING_LENGTH
from core.database import Base


class Doctor(Base):
    """Model for a doctor who can be assigned shifts."""

    __tablename__ = "doctors"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    full_name: Mapped[str] = mapped_column(String(MAX_STRING_LENGTH), nullable=False)
    license_number: Mapped[str] = mapped_column(String(MAX_STRING_LENGTH), unique=True, nullable=False)
    specialization: Mapped[str] = mapped_column(String(MAX_STRING_LENGTH), nullable=False)

    # Metadata
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    # Relationships
    shifts = relationship("Shift", back_populates="doctor")

    def __repr__(self) -> str:
        return f"<Doctor(id={self.id}, full_name={self.full_name!r}, license_number={self.license_number!r})>"
