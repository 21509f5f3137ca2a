"""Shared fixtures for hydration platform tests"""
import pytest
from datetime import datetime
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.db import get_db
from app.db.database import Base
from app.main import app
from app.models import User, IntakeEvent


# ============================================================================
# Database Fixtures
# ============================================================================

@pytest.fixture
def db_engine():
    """Fresh in-memory SQLite database per test"""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(db_engine):
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(db_session):
    """FastAPI test client bound to the test session"""
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


# ============================================================================
# Domain Fixtures
# ============================================================================

@pytest.fixture
def reference_now():
    """Fixed 'now' used for day-window tests (naive UTC)"""
    return datetime(2026, 3, 10, 18, 0, 0)


@pytest.fixture
def athletic_male(db_session):
    """70 kg athletic male: 15% body fat, 59.5 kg lean body mass"""
    user = User(
        name="Test User",
        email="test@example.com",
        weight_kg=70.0,
        sex="male",
        body_type="athletic",
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def add_event(db_session):
    """Factory for persisted intake events"""
    def _add(user, event_type, timestamp, **fields):
        event = IntakeEvent(user_id=user.id, event_type=event_type, timestamp=timestamp, **fields)
        db_session.add(event)
        db_session.commit()
        return event
    return _add
