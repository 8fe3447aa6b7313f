"""
Shared response models for API endpoints.

This module contains Pydantic response models that are shared across
multiple API endpoints to ensure consistency and reduce duplication.
JSON keys are camelCase; Python attributes stay snake_case.
"""

from datetime import datetime, time
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from utils.datetime_utils import ensure_utc


class CamelModel(BaseModel):
    """Base model serializing to camelCase and accepting either spelling on input."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ShiftResponse(CamelModel):
    """Response model for a shift."""
    id: int
    doctor_id: int
    start_time: time
    end_time: time
    room: str
    created_at: datetime
    updated_at: datetime

    @field_validator('created_at', 'updated_at')
    @classmethod
    def normalize_timestamps(cls, v: datetime) -> datetime:
        return ensure_utc(v)


class DoctorResponse(CamelModel):
    """Response model for a doctor."""
    id: int
    full_name: str
    license_number: str
    specialization: str
    created_at: datetime
    updated_at: datetime

    @field_validator('created_at', 'updated_at')
    @classmethod
    def normalize_timestamps(cls, v: datetime) -> datetime:
        return ensure_utc(v)


class ErrorResponse(BaseModel):
    """Response model for API errors."""
    status: int
    error: str  # HTTP reason phrase, e.g. "Conflict"
    message: str
    path: Optional[str] = None
    timestamp: datetime
    errors: Optional[Dict[str, str]] = None  # Field -> message, payload validation only
