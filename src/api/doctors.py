"""
Doctor registry API endpoints.

Registers doctors and looks them up so shifts have a doctor to reference.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, status
from pydantic import Field, field_validator
from sqlalchemy.orm import Session

from api.responses import CamelModel, DoctorResponse, ErrorResponse
from core.constants import MAX_STRING_LENGTH
from core.database import get_db
from services import DoctorService

logger = logging.getLogger(__name__)

router = APIRouter()


class DoctorRequest(CamelModel):
    """Request model for registering a doctor."""
    full_name: str = Field(..., max_length=MAX_STRING_LENGTH)
    license_number: str = Field(..., max_length=MAX_STRING_LENGTH)
    specialization: str = Field(..., max_length=MAX_STRING_LENGTH)

    @field_validator('full_name', 'license_number', 'specialization')
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError('Field is required')
        return v


@router.post("/doctors",
             response_model=DoctorResponse,
             status_code=status.HTTP_201_CREATED,
             summary="Register a doctor",
             responses={409: {"model": ErrorResponse, "description": "License number already registered"}})
def create_doctor(
    request: DoctorRequest,
    db: Session = Depends(get_db)
) -> DoctorResponse:
    """Register a new doctor. License numbers are unique."""
    doctor = DoctorService.create_doctor(
        db,
        full_name=request.full_name,
        license_number=request.license_number,
        specialization=request.specialization,
    )
    return DoctorResponse.model_validate(doctor)


@router.get("/doctors/{doctor_id}",
            response_model=DoctorResponse,
            summary="Get doctor by ID",
            responses={404: {"model": ErrorResponse, "description": "Doctor not found"}})
def get_doctor(
    doctor_id: int,
    db: Session = Depends(get_db)
) -> DoctorResponse:
    """Retrieve a doctor by ID."""
    return DoctorResponse.model_validate(DoctorService.get_doctor(db, doctor_id))


@router.get("/doctors",
            response_model=List[DoctorResponse],
            summary="List doctors")
def list_doctors(db: Session = Depends(get_db)) -> List[DoctorResponse]:
    """Retrieve all doctors."""
    return [DoctorResponse.model_validate(doctor) for doctor in DoctorService.list_doctors(db)]
