"""
Pytest configuration and fixtures for testing.

This file provides reusable test fixtures for:
- An in-memory database behind the Database gateway
- Upload storage in a temporary directory
- FastAPI test client
"""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool

from jobboard.core.config import Settings
from jobboard.core.database import Database
from jobboard.core.storage import LocalStorage
from main import create_app


# Use in-memory SQLite for testing (fast, isolated)
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"

# Small limit so size tests stay fast
TEST_MAX_UPLOAD_SIZE = 1024


@pytest.fixture
def test_settings():
    return Settings(
        DATABASE_URL=SQLALCHEMY_TEST_DATABASE_URL,
        FRONTEND_ORIGIN=["http://localhost:5173"],
        _env_file=None,
    )


@pytest.fixture
def database():
    """
    Fresh in-memory database for each test.
    """
    db = Database(
        SQLALCHEMY_TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    db.connect()
    db.create_schema()
    yield db
    db.dispose()


@pytest.fixture
def storage(tmp_path):
    return LocalStorage(base_dir=str(tmp_path / "uploads"), max_bytes=TEST_MAX_UPLOAD_SIZE)


@pytest.fixture
def app(test_settings, database, storage):
    return create_app(app_settings=test_settings, database=database, storage=storage)


@pytest.fixture
def client(app):
    """
    FastAPI test client wired to the test database and storage.
    """
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def sample_job_data():
    """Sample job form data for testing"""
    return {
        "title": "Senior Python Developer",
        "companyName": "Amazon",
        "location": "Seattle, WA",
        "jobType": "Full-time",
        "experience": "5+ years",
        "salaryRange": "$150k - $180k",
        "description": "Build and operate backend services in Python.",
        "requirements": "Python, PostgreSQL, FastAPI",
        "responsibilities": "Design APIs and own their uptime",
        "applicationDeadline": "2030-01-31T00:00:00+00:00",
    }


@pytest.fixture
def minimal_job_data():
    """Only the required fields"""
    return {
        "title": "QA Engineer",
        "companyName": "Unknown Corp",
        "location": "Remote",
        "jobType": "Contract",
        "description": "Write and maintain automated tests.",
    }
