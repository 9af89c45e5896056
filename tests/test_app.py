"""Application wiring: health checks, security headers, database handle."""

from detailhub.auth import generate_api_token
from detailhub.database import Database
from detailhub.models import Detailer


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


def test_database_health(client):
    response = client.get("/health/db")
    assert response.status_code == 200
    assert response.json()["database"]["connected"] is True


def test_security_headers_on_api_responses(client):
    response = client.get("/")
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["X-Frame-Options"] == "DENY"
    assert "no-store" in response.headers["Cache-Control"]


def test_health_is_excluded_from_security_headers(client):
    response = client.get("/health")
    assert "X-Frame-Options" not in response.headers


def test_validation_errors_are_json(client, detailer, auth_headers):
    response = client.patch("/detailers/me", headers=auth_headers, json={"phone": "1"})
    assert response.status_code == 422
    detail = response.json()["detail"]
    assert detail[0]["loc"][-1] == "phone"


def test_database_sessions_are_independent():
    database = Database("sqlite://", log_slow_queries=False)
    database.create_all()
    assert database.ping() is True
    first, second = database.session(), database.session()
    assert first is not second
    first.close()
    second.close()
    database.dispose()


def test_generated_api_token_authenticates(client, db_session):
    token, token_hash = generate_api_token()
    assert token != token_hash
    db_session.add(Detailer(business_name="Fresh Start", api_token_hash=token_hash))
    db_session.commit()

    response = client.get("/detailers/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 200
    assert response.json()["businessName"] == "Fresh Start"
