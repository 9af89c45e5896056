"""Pytest configuration and shared fixtures."""

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from detailhub.auth import hash_api_token
from detailhub.database import Database
from detailhub.main import create_app
from detailhub.models import Booking, Detailer

DETAILER_TOKEN = "test-detailer-token"
OTHER_TOKEN = "other-detailer-token"


def complete_profile_fields() -> dict:
    """Model column values that pass every onboarding check."""
    return {
        "business_name": "Shine Mobile Detailing",
        "description": "Full-service mobile detailing across Austin.",
        "services": [{"name": "Full Detail", "price": 199}],
        "business_hours": [{"day": day, "open": "08:00", "close": "18:00"} for day in range(7)],
        "images": ["portfolio/1.jpg"],
        "address": "100 Congress Ave",
        "city": "Austin",
        "state": "TX",
        "zip_code": "78701",
        "email": "owner@shine.example",
        "phone": "+15125550100",
        "instagram": "@shinemobile",
    }


@pytest.fixture
def database():
    db = Database("sqlite://", log_slow_queries=False)
    db.create_all()
    yield db
    db.dispose()


@pytest.fixture
def db_session(database):
    session = database.session()
    yield session
    session.close()


@pytest.fixture
def detailer(db_session) -> Detailer:
    detailer = Detailer(
        api_token_hash=hash_api_token(DETAILER_TOKEN),
        twilio_phone_number="+15125550199",
        sms_enabled=True,
        **complete_profile_fields(),
    )
    db_session.add(detailer)
    db_session.commit()
    db_session.refresh(detailer)
    return detailer


@pytest.fixture
def other_detailer(db_session) -> Detailer:
    detailer = Detailer(
        api_token_hash=hash_api_token(OTHER_TOKEN),
        business_name="Other Detail Co",
    )
    db_session.add(detailer)
    db_session.commit()
    db_session.refresh(detailer)
    return detailer


@pytest.fixture
def client(database):
    app = create_app(database)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_headers() -> dict:
    return {"Authorization": f"Bearer {DETAILER_TOKEN}"}


@pytest.fixture
def other_auth_headers() -> dict:
    return {"Authorization": f"Bearer {OTHER_TOKEN}"}


@pytest.fixture
def add_completed_booking(db_session, detailer):
    """Factory fixture: record a completed booking for a customer phone."""

    def _add(phone: str, completed_at: datetime = None, status: str = "completed") -> Booking:
        completed_at = completed_at or naive_utc_now() - timedelta(days=30)
        booking = Booking(
            detailer_id=detailer.id,
            customer_phone=phone,
            service_name="Full Detail",
            scheduled_at=completed_at,
            status=status,
            completed_at=completed_at if status == "completed" else None,
        )
        db_session.add(booking)
        db_session.commit()
        return booking

    return _add


def naive_utc_now() -> datetime:
    """Current UTC time without tzinfo, as stored in DateTime columns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)
