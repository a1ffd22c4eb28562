"""
Pytest configuration and fixtures.
"""

import os
from datetime import date
import pytest

from carefit.db.database import Base, Database

# Import models to register with Base.metadata
from carefit.models import measurement, user  # noqa: F401


# Use test database URL from env, or default to SQLite in-memory
TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")


@pytest.fixture(scope="function")
def test_database():
    """Create a test database with the same construction path as the app."""
    database = Database.from_url(TEST_DATABASE_URL)

    # Create all tables
    Base.metadata.create_all(bind=database.engine)

    yield database

    # Drop all tables after test
    Base.metadata.drop_all(bind=database.engine)
    database.dispose()


@pytest.fixture(scope="function")
def test_db(test_database):
    """Create a test database session."""
    session = test_database.session()

    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def override_get_db(test_db):
    """Override get_db dependency for FastAPI."""

    def _get_db():
        try:
            yield test_db
        finally:
            pass  # Don't close, we'll handle it in fixture

    return _get_db


@pytest.fixture
def client(override_get_db):
    """TestClient with the database dependency pointed at the test session."""
    from fastapi.testclient import TestClient
    from carefit.db.database import get_db
    from carefit.main import app

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def user_payload():
    """Domain-shaped user input."""
    return {
        "lastName": "Tanaka",
        "firstName": "Hanako",
        "gender": "female",
        "birthDate": date(1942, 6, 15),
        "medicalHistory": ["Hypertension", "Diabetes"],
    }


@pytest.fixture
def sample_user(test_db, user_payload):
    """A stored user record."""
    from carefit.services.user_service import UserService

    return UserService(test_db).create(user_payload)


@pytest.fixture
def measurement_payload(sample_user):
    """Domain-shaped measurement input for sample_user."""
    return {
        "userId": sample_user["id"],
        "measurementDate": date(2024, 4, 1),
        "height": 148.0,
        "weight": 60.5,
        "tug": {"first": 12.4, "second": 11.8, "best": 11.8},
        "walkingSpeed": {"first": 6.2, "second": 5.9, "best": 5.9},
        "fr": {"first": 22.0, "second": 25.5, "best": 25.5},
        "cs10": 8,
        "bi": 85,
        "notes": "Used a cane",
    }
