"""
Shift API endpoints.

Provides shift management functionality including:
- Creating and updating shifts (time-slot validation and conflict detection)
- Retrieving a shift or listing shifts by doctor and/or room
- Deleting shifts

Failures raised by ShiftService (ShiftServiceError) are not caught here; the
exception handler registered in main.py maps them to 400/404/409 responses.
"""

import logging
from datetime import time
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from pydantic import field_validator
from sqlalchemy.orm import Session

from api.responses import CamelModel, ShiftResponse, ErrorResponse
from core.database import get_db
from services import ShiftService, SqlAlchemyShiftUnitOfWork
from utils.shift_validators import validate_room_field, validate_time_of_day_field

logger = logging.getLogger(__name__)

router = APIRouter()


# Request Models

class ShiftRequest(CamelModel):
    """Request model for creating or updating a shift."""
    doctor_id: int
    start_time: time  # Format: "HH:MM" or "HH:MM:SS"
    end_time: time    # Must be strictly after start_time
    room: str

    @field_validator('room')
    @classmethod
    def validate_room(cls, v: str) -> str:
        return validate_room_field(v)

    @field_validator('start_time', 'end_time')
    @classmethod
    def validate_bounds(cls, v: time) -> time:
        return validate_time_of_day_field(v)


def get_shift_service(db: Session = Depends(get_db)) -> ShiftService:
    """FastAPI dependency building a ShiftService over the request's session."""
    return ShiftService(SqlAlchemyShiftUnitOfWork(db))


_ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Invalid request data or invalid time slot"},
    404: {"model": ErrorResponse, "description": "Shift or doctor not found"},
    409: {"model": ErrorResponse, "description": "Shift conflicts with an existing shift for this doctor"},
}


@router.post("/shifts",
             response_model=ShiftResponse,
             status_code=status.HTTP_201_CREATED,
             summary="Create a new shift",
             responses=_ERROR_RESPONSES)
def create_shift(
    request: ShiftRequest,
    service: ShiftService = Depends(get_shift_service)
) -> ShiftResponse:
    """Create a new shift for a doctor. endTime must be strictly after startTime."""
    shift = service.create_shift(
        doctor_id=request.doctor_id,
        start_time=request.start_time,
        end_time=request.end_time,
        room=request.room,
    )
    return ShiftResponse.model_validate(shift)


@router.get("/shifts/{shift_id}",
            response_model=ShiftResponse,
            summary="Get shift by ID",
            responses={404: _ERROR_RESPONSES[404]})
def get_shift(
    shift_id: int,
    service: ShiftService = Depends(get_shift_service)
) -> ShiftResponse:
    """Retrieve shift details by its ID."""
    return ShiftResponse.model_validate(service.get_shift(shift_id))


@router.get("/shifts",
            response_model=List[ShiftResponse],
            summary="List shifts")
def list_shifts(
    doctor_id: Optional[int] = Query(None, alias="doctorId", description="Filter by doctor ID"),
    room: Optional[str] = Query(None, description="Filter by room"),
    service: ShiftService = Depends(get_shift_service)
) -> List[ShiftResponse]:
    """Retrieve all shifts, optionally filtered by doctor and/or room."""
    shifts = service.list_shifts(doctor_id=doctor_id, room=room)
    return [ShiftResponse.model_validate(shift) for shift in shifts]


@router.put("/shifts/{shift_id}",
            response_model=ShiftResponse,
            summary="Update shift",
            responses=_ERROR_RESPONSES)
def update_shift(
    shift_id: int,
    request: ShiftRequest,
    service: ShiftService = Depends(get_shift_service)
) -> ShiftResponse:
    """Update an existing shift. endTime must be strictly after startTime."""
    shift = service.update_shift(
        shift_id=shift_id,
        doctor_id=request.doctor_id,
        start_time=request.start_time,
        end_time=request.end_time,
        room=request.room,
    )
    return ShiftResponse.model_validate(shift)


@router.delete("/shifts/{shift_id}",
               status_code=status.HTTP_204_NO_CONTENT,
               summary="Delete shift",
               responses={404: _ERROR_RESPONSES[404]})
def delete_shift(
    shift_id: int,
    service: ShiftService = Depends(get_shift_service)
) -> Response:
    """Remove a shift."""
    service.delete_shift(shift_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
