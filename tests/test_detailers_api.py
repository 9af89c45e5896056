"""API tests for detailer profile, onboarding completion and public search."""

from detailhub.models import Detailer
from tests.conftest import complete_profile_fields


def test_requires_bearer_token(client):
    response = client.get("/detailers/me")
    assert response.status_code == 401


def test_rejects_unknown_token(client, detailer):
    response = client.get("/detailers/me", headers={"Authorization": "Bearer nope"})
    assert response.status_code == 401


def test_get_profile_includes_display_phone_and_completion(client, detailer, auth_headers):
    response = client.get("/detailers/me", headers=auth_headers)
    assert response.status_code == 200
    body = response.json()
    assert body["businessName"] == "Shine Mobile Detailing"
    assert body["phone"] == "+15125550100"
    assert body["phoneDisplay"] == "(512) 555-0100"
    assert body["completion"]["percentage"] == 100
    assert body["completion"]["isComplete"] is True


def test_profile_completion_endpoint(client, other_detailer, other_auth_headers):
    response = client.get("/detailers/me/profile-completion", headers=other_auth_headers)
    assert response.status_code == 200
    body = response.json()
    assert body["checks"]["businessName"] is True
    assert body["checks"]["images"] is False
    assert body["percentage"] == 13
    assert body["isComplete"] is False
    assert body["missing"][0] == "description"
    assert body["message"] == "Next step: Write a short description of your business"


def test_update_profile_normalizes_phone_numbers(client, other_detailer, other_auth_headers):
    response = client.patch(
        "/detailers/me",
        headers=other_auth_headers,
        json={"phone": "(512) 555-0142", "twilioPhoneNumber": "512.555.0143", "state": "tx"},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["phone"] == "+15125550142"
    assert body["twilioPhoneNumber"] == "+15125550143"
    assert body["state"] == "TX"


def test_update_profile_rejects_invalid_phone(client, other_detailer, other_auth_headers):
    response = client.patch("/detailers/me", headers=other_auth_headers, json={"phone": "12"})
    assert response.status_code == 422


def test_update_profile_rejects_unknown_fields(client, other_detailer, other_auth_headers):
    response = client.patch("/detailers/me", headers=other_auth_headers, json={"plan": "gold"})
    assert response.status_code == 422


def test_completing_profile_through_updates(client, other_detailer, other_auth_headers):
    fields = complete_profile_fields()
    payload = {
        "businessName": fields["business_name"],
        "description": fields["description"],
        "services": fields["services"],
        "businessHours": fields["business_hours"],
        "images": fields["images"],
        "address": fields["address"],
        "city": fields["city"],
        "state": fields["state"],
        "zipCode": fields["zip_code"],
        "email": fields["email"],
        "phone": "512-555-0177",
        "website": "https://other.example",
    }
    response = client.patch("/detailers/me", headers=other_auth_headers, json=payload)
    assert response.status_code == 200
    assert response.json()["completion"]["percentage"] == 100

    # Clearing a field drops the profile below 100%
    response = client.patch("/detailers/me", headers=other_auth_headers, json={"website": ""})
    assert response.json()["website"] is None
    assert response.json()["completion"]["percentage"] == 88


def test_duplicate_twilio_number_is_rejected(client, detailer, other_detailer, other_auth_headers):
    response = client.patch(
        "/detailers/me",
        headers=other_auth_headers,
        json={"twilioPhoneNumber": detailer.twilio_phone_number},
    )
    assert response.status_code == 400


def test_search_hides_incomplete_profiles(client, detailer, other_detailer):
    response = client.get("/detailers/search")
    assert response.status_code == 200
    names = [d["businessName"] for d in response.json()]
    assert names == ["Shine Mobile Detailing"]


def test_search_filters(client, db_session, detailer):
    db_session.add(
        Detailer(**{**complete_profile_fields(), "business_name": "Dallas Gloss", "city": "Dallas"})
    )
    db_session.commit()

    assert len(client.get("/detailers/search").json()) == 2
    dallas = client.get("/detailers/search", params={"city": "dallas"}).json()
    assert [d["businessName"] for d in dallas] == ["Dallas Gloss"]
    by_name = client.get("/detailers/search", params={"q": "shine"}).json()
    assert [d["businessName"] for d in by_name] == ["Shine Mobile Detailing"]
    assert client.get("/detailers/search", params={"state": "CA"}).json() == []


def test_search_hides_inactive_detailers(client, db_session, detailer):
    detailer.is_active = False
    db_session.commit()
    assert client.get("/detailers/search").json() == []


def test_public_profile(client, detailer, other_detailer):
    response = client.get(f"/detailers/{detailer.id}/public")
    assert response.status_code == 200
    body = response.json()
    assert body["phoneDisplay"] == "(512) 555-0100"
    assert "email" not in body

    assert client.get(f"/detailers/{other_detailer.id}/public").status_code == 404
    assert client.get("/detailers/9999/public").status_code == 404
