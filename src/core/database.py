# pyright: reportMissingTypeStubs=false
"""
Database configuration and session management.

This module sets up SQLAlchemy database connection, session management,
and provides dependency injection for database sessions in FastAPI routes.
"""

import logging
from typing import Any, Dict, Generator

from fastapi import HTTPException
from sqlalchemy import create_engine, event
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from core.config import DATABASE_URL, SQL_ECHO
from core.constants import DB_POOL_RECYCLE_SECONDS

logger = logging.getLogger(__name__)


def _engine_options(database_url: str) -> Dict[str, Any]:
    """Build engine keyword arguments for the configured backend."""
    options: Dict[str, Any] = {
        "pool_pre_ping": True,  # Verify connections before use
        "echo": SQL_ECHO,
        "future": True,         # Use SQLAlchemy 2.0 style
    }
    if database_url.startswith("sqlite"):
        # FastAPI runs sync endpoints in a threadpool
        options["connect_args"] = {"check_same_thread": False}
    else:
        options["pool_recycle"] = DB_POOL_RECYCLE_SECONDS
    return options


# Create SQLAlchemy engine with optimized settings
engine = create_engine(DATABASE_URL, **_engine_options(DATABASE_URL))

# Create configured SessionLocal class
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
    expire_on_commit=False,  # Don't expire objects after commit
)

# Create Base class for declarative models
class Base(DeclarativeBase):
    """Base class for all database models."""
    pass


# SQLAlchemy event listeners to fill created_at and updated_at when the caller left them unset
@event.listens_for(Base, "before_insert", propagate=True)  # type: ignore
def receive_before_insert(mapper, connection, target):  # type: ignore
    """Set created_at and updated_at on insert if they are still empty."""
    # Import here to avoid circular import
    from utils.datetime_utils import utc_now
    now = utc_now()
    for column_name in ("created_at", "updated_at"):
        if column_name in mapper.columns and getattr(target, column_name, None) is None:  # type: ignore
            setattr(target, column_name, now)


@event.listens_for(Base, "before_update", propagate=True)  # type: ignore
def receive_before_update(mapper, connection, target):  # type: ignore
    """Refresh updated_at on update unless the caller already changed it."""
    from sqlalchemy import inspect as sa_inspect
    from utils.datetime_utils import utc_now
    if "updated_at" not in mapper.columns:  # type: ignore
        return
    if sa_inspect(target).attrs.updated_at.history.has_changes():  # type: ignore
        return
    setattr(target, "updated_at", utc_now())


def get_db() -> Generator[Session, None, None]:
    """
    FastAPI dependency to provide database sessions.

    Yields a database session that is automatically closed after the request.
    Handles cleanup even if an exception occurs during request processing.

    Yields:
        Session: SQLAlchemy database session

    Example:
        ```python
        @router.get("/shifts")
        def list_shifts(db: Session = Depends(get_db)):
            return db.query(Shift).all()
        ```
    """
    db = SessionLocal()
    try:
        yield db
    except SQLAlchemyError as e:
        logger.exception(f"Database error: {e}")
        db.rollback()
        raise
    except HTTPException:
        # Don't log HTTPExceptions as errors - they're expected business logic
        db.rollback()
        raise
    except Exception:
        # Business rejections (e.g. shift conflicts) are logged by the service layer
        db.rollback()
        raise
    finally:
        db.close()


def create_tables() -> None:
    """
    Create all database tables defined in SQLAlchemy models.

    Safe to call multiple times - will not recreate existing tables.
    """
    # Register every model on Base.metadata before creating
    import models  # noqa: F401
    try:
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables created successfully")
    except SQLAlchemyError as e:
        logger.exception(f"Failed to create database tables: {e}")
        raise
