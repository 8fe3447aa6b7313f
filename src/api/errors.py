"""
Error mapping for the API boundary.

Turns ShiftError variants, HTTPExceptions and payload validation failures into
the common error body: {status, error, message, path, timestamp[, errors]}.
"""

from http import HTTPStatus
from typing import Any, Dict, Optional, Sequence, assert_never

from fastapi import status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from api.responses import ErrorResponse
from shared_types.shift_errors import (
    DoctorNotFound,
    InvalidTimeSlot,
    ShiftConflict,
    ShiftError,
    ShiftNotFound,
)
from utils.datetime_utils import utc_now


def shift_error_status(error: ShiftError) -> int:
    """Map each ShiftError variant to its HTTP status code."""
    if isinstance(error, InvalidTimeSlot):
        return status.HTTP_400_BAD_REQUEST
    if isinstance(error, DoctorNotFound):
        return status.HTTP_404_NOT_FOUND
    if isinstance(error, ShiftNotFound):
        return status.HTTP_404_NOT_FOUND
    if isinstance(error, ShiftConflict):
        return status.HTTP_409_CONFLICT
    assert_never(error)


def build_error_response(
    status_code: int,
    message: str,
    path: Optional[str] = None,
    errors: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    """Build a JSONResponse carrying the common error body."""
    body = ErrorResponse(
        status=status_code,
        error=HTTPStatus(status_code).phrase,
        message=message,
        path=path,
        timestamp=utc_now(),
        errors=errors,
    )
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(body.model_dump(exclude_none=True)),
    )


def validation_errors_to_fields(errors: Sequence[Any]) -> Dict[str, str]:
    """
    Flatten FastAPI/pydantic validation errors into a field -> message map.

    The location prefix ("body", "query", "path") is dropped, so a missing
    body field "startTime" is reported under "startTime".
    """
    fields: Dict[str, str] = {}
    for error in errors:
        location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        field = ".".join(location) or "request"
        message = str(error.get("msg", "Invalid value"))
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        fields.setdefault(field, message)
    return fields
