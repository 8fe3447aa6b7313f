"""
Doctor service for the doctor registry.

Registers doctors and looks them up. Shift scheduling only relies on a doctor
existing; profile fields are stored for display.
"""

import logging
from typing import List

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from models import Doctor

logger = logging.getLogger(__name__)


class DoctorService:
    """Service class for doctor registry operations."""

    @staticmethod
    def create_doctor(
        db: Session,
        full_name: str,
        license_number: str,
        specialization: str
    ) -> Doctor:
        """
        Register a new doctor.

        Args:
            db: Database session
            full_name: Doctor's full name
            license_number: Medical licence number, unique across doctors
            specialization: Specialization label

        Returns:
            The persisted doctor

        Raises:
            HTTPException: 409 if the licence number is already registered
        """
        logger.info(f"Creating new doctor with license number: {license_number}")

        existing = db.scalar(select(Doctor.id).where(Doctor.license_number == license_number))
        if existing is not None:
            logger.warning(f"Duplicate license number: {license_number}")
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Doctor with license number {license_number} already exists"
            )

        doctor = Doctor(
            full_name=full_name,
            license_number=license_number,
            specialization=specialization,
        )
        try:
            db.add(doctor)
            db.commit()
        except IntegrityError as e:
            # Lost a race with a concurrent registration of the same licence
            logger.warning(f"Doctor registration conflict: {e}")
            db.rollback()
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Doctor with license number {license_number} already exists"
            )

        logger.info(f"Doctor created successfully with ID: {doctor.id}")
        return doctor

    @staticmethod
    def get_doctor(db: Session, doctor_id: int) -> Doctor:
        """
        Get a doctor by ID.

        Raises:
            HTTPException: 404 if the doctor does not exist
        """
        doctor = db.get(Doctor, doctor_id)
        if doctor is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Doctor not found with id: {doctor_id}"
            )
        return doctor

    @staticmethod
    def list_doctors(db: Session) -> List[Doctor]:
        """List all doctors ordered by ID."""
        return list(db.scalars(select(Doctor).order_by(Doctor.id)).all())
