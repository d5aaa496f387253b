# tests/conftest.py
import os

# Point the app at throwaway settings before anything from mindcare is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["CLINIC_TIMEZONE"] = "UTC"
os.environ.pop("REDIS_URL", None)

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from mindcare.database import Base, get_db
from mindcare.models import documents  # noqa: F401  registers the documents table
from mindcare.services.entity_store import EntityStore


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    yield engine
    engine.dispose()


@pytest.fixture
def tables(engine):
    Base.metadata.create_all(engine)
    yield
    Base.metadata.drop_all(engine)


@pytest.fixture
def db_session(engine, tables):
    """A session on a fresh in-memory database."""
    SessionLocal = sessionmaker(bind=engine, autoflush=False)
    session = SessionLocal()

    yield session

    session.close()


@pytest.fixture
def store(db_session):
    return EntityStore(db_session)


@pytest.fixture
def client(db_session):
    from mindcare.main import app

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def booking():
    return {
        "doctorId": "doc-1",
        "patientId": "pat-1",
        "patientName": "Alex Rivera",
        "doctorName": "Dr. Sarah Johnson",
        "date": "2025-06-01",
        "time": "10:00",
        "duration": 60,
        "type": "Initial Consultation",
    }
