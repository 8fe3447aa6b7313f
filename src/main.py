# pyright: reportMissingTypeStubs=false
"""
Shift Scheduler Backend API

A FastAPI application for booking doctor shifts inside a clinical
scheduling service.

Features:
- Shift create/read/update/delete with time-slot validation
- Per-doctor conflict detection (no overlapping shifts)
- Doctor registry
- SQLAlchemy ORM persistence
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from api import doctors, shifts
from api.errors import build_error_response, shift_error_status, validation_errors_to_fields
from core.config import LOG_LEVEL
from core.constants import API_V1_PREFIX, CORS_ORIGINS
from core.database import create_tables
from shared_types.shift_errors import ShiftServiceError

# Configure logging
logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler()],
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager for startup and shutdown events."""
    logger.info("🚀 Starting Shift Scheduler Backend API")

    create_tables()

    yield

    logger.info("🛑 Shutting down Shift Scheduler Backend API")


# Create FastAPI application
app = FastAPI(
    title="Shift Scheduler Backend",
    description="Doctor shift scheduling with conflict validation",
    version="1.0.0",
    docs_url="/docs",  # Swagger UI
    redoc_url="/redoc",  # ReDoc
    lifespan=lifespan,
)

# CORS middleware for frontend integration
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

# Include API routers
app.include_router(
    shifts.router,
    prefix=API_V1_PREFIX,
    tags=["shifts"],
    responses={
        500: {"description": "Internal server error"},
    },
)
app.include_router(
    doctors.router,
    prefix=API_V1_PREFIX,
    tags=["doctors"],
    responses={
        500: {"description": "Internal server error"},
    },
)


@app.get(
    "/",
    summary="Root endpoint",
    description="Returns basic API information",
)
async def root() -> dict[str, str]:
    """Get API information."""
    return {
        "message": "Shift Scheduler Backend API",
        "version": "1.0.0",
        "status": "running"
    }


@app.get(
    "/health",
    summary="Health check",
    description="Returns the health status of the API",
)
async def health_check() -> dict[str, str]:
    """Check if the API is healthy and responding."""
    return {"status": "healthy"}


# Exception handlers
@app.exception_handler(ShiftServiceError)
async def shift_service_error_handler(request: Request, exc: ShiftServiceError) -> JSONResponse:
    """Map shift errors to 400/404/409 responses."""
    return build_error_response(
        status_code=shift_error_status(exc.error),
        message=exc.error.message,
        path=request.url.path,
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render HTTPExceptions with the common error body."""
    return build_error_response(
        status_code=exc.status_code,
        message=str(exc.detail),
        path=request.url.path,
    )


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed payloads as 400 with a per-field errors map."""
    logger.warning(f"Request validation failed for {request.url.path}: {exc.errors()}")
    return build_error_response(
        status_code=400,
        message="Validation failed",
        path=request.url.path,
        errors=validation_errors_to_fields(exc.errors()),
    )


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Handle store-level failures that are not scheduling errors."""
    logger.exception(f"Database error: {exc}")
    return build_error_response(
        status_code=500,
        message="Internal server error",
        path=request.url.path,
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions globally."""
    logger.exception(f"Unhandled exception: {exc}")
    return build_error_response(
        status_code=500,
        message="Internal server error",
        path=request.url.path,
    )
