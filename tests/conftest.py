"""
Test configuration and shared fixtures for the Shift Scheduler test suite.

Uses an in-memory SQLite database per test, so every test starts from an
empty schema and no external database server is needed.
"""

import os

# Keep the application engine off the on-disk default during tests
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from datetime import time
from typing import Generator

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from core.database import Base, get_db
from models import Doctor, Shift
from tests.fakes import InMemoryShiftUnitOfWork


@pytest.fixture(scope="function")
def db_engine():
    """
    Create an in-memory SQLite engine with the full schema.

    StaticPool keeps a single connection, so every session created by a test
    (including the ones handed to API requests) sees the same database.
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )
    Base.metadata.create_all(bind=engine)

    yield engine

    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def session_factory(db_engine):
    """Session factory configured like the application's SessionLocal."""
    return sessionmaker(
        bind=db_engine,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )


@pytest.fixture(scope="function")
def db_session(session_factory) -> Generator[Session, None, None]:
    """Provide a database session for a test."""
    session = session_factory()
    yield session
    session.close()


@pytest.fixture(scope="function")
def client(session_factory) -> Generator[TestClient, None, None]:
    """
    TestClient whose requests use the test database.

    Each request gets its own session, like get_db does in production.
    """
    from main import app

    def override_get_db():
        session = session_factory()
        try:
            yield session
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def create_doctor(db_session: Session, full_name: str = "Dr. Test", license_number: str = "LIC-001",
                  specialization: str = "Cardiology") -> Doctor:
    """Insert a doctor directly."""
    doctor = Doctor(full_name=full_name, license_number=license_number, specialization=specialization)
    db_session.add(doctor)
    db_session.commit()
    return doctor


def create_shift(db_session: Session, doctor: Doctor, start_time: time, end_time: time,
                 room: str = "101") -> Shift:
    """Insert a shift directly, bypassing ShiftService checks."""
    shift = Shift(doctor_id=doctor.id, start_time=start_time, end_time=end_time, room=room)
    db_session.add(shift)
    db_session.commit()
    return shift


@pytest.fixture
def doctor(db_session) -> Doctor:
    """A registered doctor (D1)."""
    return create_doctor(db_session, full_name="Dr. One", license_number="LIC-D1")


@pytest.fixture
def other_doctor(db_session) -> Doctor:
    """A second registered doctor (D2)."""
    return create_doctor(db_session, full_name="Dr. Two", license_number="LIC-D2")


@pytest.fixture
def uow() -> InMemoryShiftUnitOfWork:
    """In-memory unit of work with doctors 1 and 2 registered."""
    return InMemoryShiftUnitOfWork(doctor_ids={1, 2})
