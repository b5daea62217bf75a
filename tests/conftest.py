"""Test configuration and fixtures"""

import pytest
import tempfile
import shutil
import os
from pathlib import Path

import jwt
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from civictrack.core.config import Settings
from civictrack.core.security import RequestContext
from civictrack.models import Base
from civictrack.storage.database import reset_database_globals
from civictrack.storage.migrations import initialize_database
from civictrack.storage.submission_validator import NewIssue
from civictrack.models import IssueCategory, IssuePriority

TEST_JWT_SECRET = "test-secret-with-enough-bytes-for-hs256"
ADMIN_ID = "admin-user-1"
RESIDENT_ID = "resident-user-1"


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test isolation"""
    temp_dir = tempfile.mkdtemp()
    original_cwd = os.getcwd()
    os.chdir(temp_dir)

    yield Path(temp_dir)

    os.chdir(original_cwd)
    shutil.rmtree(temp_dir, ignore_errors=True)


@pytest.fixture
def clean_data_dir(temp_dir):
    """Ensure clean .civictrack directory for each test"""
    data_dir = temp_dir / ".civictrack"
    if data_dir.exists():
        shutil.rmtree(data_dir)
    return data_dir


@pytest.fixture
def empty_database(temp_dir):
    """Create an empty SQLite database file"""
    data_dir = temp_dir / ".civictrack"
    data_dir.mkdir(exist_ok=True)

    db_path = data_dir / "database.db"
    db_path.touch()

    return db_path


@pytest.fixture
def test_engine(temp_dir):
    """Create a test database engine"""
    data_dir = temp_dir / ".civictrack"
    data_dir.mkdir(exist_ok=True)

    engine = create_engine(f"sqlite:///{data_dir}/database.db", connect_args={"check_same_thread": False})

    yield engine

    engine.dispose()


@pytest.fixture
def test_session(test_engine):
    """Create a test database session"""
    Base.metadata.create_all(bind=test_engine)

    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)
    session = SessionLocal()

    yield session

    session.close()
    Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def temp_db(temp_dir):
    """Migrated database in a temporary working directory"""
    data_dir = temp_dir / ".civictrack"
    data_dir.mkdir(exist_ok=True)
    (data_dir / "config.json").write_text('{"tracking_prefix": "TST", "source_id": "local"}')

    reset_database_globals()
    initialize_database()

    try:
        yield temp_dir
    finally:
        reset_database_globals()


@pytest.fixture
def admin_context(temp_db):
    """Request context of an identity holding the admin role"""
    from civictrack.storage.role_service import role_service

    role_service.grant_role(ADMIN_ID)
    return RequestContext(identity_id=ADMIN_ID, email="admin@example.org")


@pytest.fixture
def resident_context():
    return RequestContext(identity_id=RESIDENT_ID, email="resident@example.org")


@pytest.fixture
def make_record():
    """Factory for validated records ready for the store"""
    def _make(**overrides):
        fields = dict(
            title="Pothole",
            description="Large pothole",
            category=IssueCategory.ROAD_TRANSPORTATION,
            priority=IssuePriority.MEDIUM,
            location="Main St at 3rd Ave",
        )
        fields.update(overrides)
        return NewIssue(**fields)
    return _make


@pytest.fixture
def test_settings():
    return Settings(CIVICTRACK_JWT_SECRET=TEST_JWT_SECRET)


def make_token(identity_id: str, email: str = None, secret: str = TEST_JWT_SECRET, **claims) -> str:
    payload = {"sub": identity_id, "email": email or f"{identity_id}@example.org"}
    payload.update(claims)
    return jwt.encode(payload, secret, algorithm="HS256")


def auth_header(identity_id: str) -> dict:
    return {"Authorization": f"Bearer {make_token(identity_id)}"}
