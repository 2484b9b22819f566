import pytest

from app.api import deps
from app.api.api_v1.endpoints import availability, bookings, contact, messages, reviews, studios
from app.services.availability_service import AvailabilityUnavailableError
from conftest import make_studio, make_user

API = "/api/v1"

MONDAY_ONLY = {"monday": {"open": "10:00", "close": "12:00", "isOpen": True}}


def returning(value):
    async def _fake(*args, **kwargs):
        return value
    return _fake


def raising(error):
    async def _fake(*args, **kwargs):
        raise error
    return _fake


@pytest.mark.asyncio
async def test_root(client):
    response = await client.get("/")
    assert response.status_code == 200
    assert "Where2Tattoo" in response.json()["message"]


@pytest.mark.asyncio
async def test_protected_route_requires_token(client):
    response = await client.get(f"{API}/bookings/me")
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_customer_cannot_manage_a_studio(client, login, customer):
    login(customer)
    response = await client.get(f"{API}/studios/me")
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_owner_without_studio_gets_404(client, login, owner, monkeypatch):
    login(owner)
    monkeypatch.setattr(deps, "get_studio_by_owner", returning(None))
    response = await client.get(f"{API}/dashboard/stats")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_owner_reads_own_studio(client, login, owner, monkeypatch):
    login(owner)
    studio = make_studio(owner_id=owner["id"])
    monkeypatch.setattr(deps, "get_studio_by_owner", returning(studio))

    response = await client.get(f"{API}/studios/me")

    assert response.status_code == 200
    assert response.json()["id"] == studio["id"]
    assert response.json()["priceRange"] == {"min": 0, "max": 100}


@pytest.mark.asyncio
async def test_default_opening_hours_when_unset(client, login, owner, monkeypatch):
    login(owner)
    monkeypatch.setattr(deps, "get_studio_by_owner", returning(make_studio(owner_id=owner["id"])))

    response = await client.get(f"{API}/studios/me/opening-hours")

    assert response.status_code == 200
    assert response.json()["saturday"]["isOpen"] is False
    assert response.json()["monday"] == {"open": "09:00", "close": "17:00", "isOpen": True}


@pytest.mark.asyncio
async def test_list_studios_passes_filters(client, monkeypatch):
    seen = {}

    async def fake_search(**kwargs):
        seen.update(kwargs)
        return [make_studio()]

    monkeypatch.setattr(studios, "search_studios", fake_search)

    response = await client.get(f"{API}/studios/", params={"style": "fine-line", "city": "all", "sort": "price-low"})

    assert response.status_code == 200
    assert len(response.json()) == 1
    assert seen["style"] == "fine-line"
    assert seen["sort"].value == "price-low"


@pytest.mark.asyncio
async def test_availability_for_artist(client, monkeypatch):
    studio = make_studio(openingHours=MONDAY_ONLY)
    monkeypatch.setattr(availability, "get_studio_by_id", returning(studio))
    monkeypatch.setattr(availability, "get_availability", returning({
        "studioId": studio["id"], "artistId": "artist-1", "date": "2024-11-25",
        "slots": ["11:00"], "takenSlots": ["10:00"], "isClosed": False, "isFullyBooked": False,
    }))

    response = await client.get(
        f"{API}/availability/{studio['id']}", params={"artistId": "artist-1", "date": "2024-11-25"}
    )

    assert response.status_code == 200
    assert response.json()["slots"] == ["11:00"]


@pytest.mark.asyncio
async def test_availability_unknown_studio(client, monkeypatch):
    monkeypatch.setattr(availability, "get_studio_by_id", returning(None))
    response = await client.get(
        f"{API}/availability/missing", params={"artistId": "artist-1", "date": "2024-11-25"}
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_availability_fail_closed_is_503(client, monkeypatch):
    monkeypatch.setattr(availability, "get_studio_by_id", returning(make_studio()))
    monkeypatch.setattr(availability, "get_availability", raising(AvailabilityUnavailableError("down")))
    response = await client.get(
        f"{API}/availability/s1", params={"artistId": "artist-1", "date": "2024-11-25"}
    )
    assert response.status_code == 503


@pytest.mark.asyncio
async def test_availability_rejects_bad_date(client):
    response = await client.get(f"{API}/availability/s1", params={"artistId": "a", "date": "25/11/2024"})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_disabled_dates(client, monkeypatch):
    monkeypatch.setattr(availability, "get_studio_by_id", returning(make_studio(openingHours=MONDAY_ONLY)))
    response = await client.get(f"{API}/availability/s1/disabled-dates", params={"year": 2024, "month": 13})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_booking_for_taken_slot_is_rejected(client, login, customer, monkeypatch):
    login(customer)
    studio = make_studio()
    monkeypatch.setattr(bookings, "get_studio_by_id", returning(studio))
    monkeypatch.setattr(bookings, "get_artist_by_id", returning({"id": "artist-1", "studioId": studio["id"]}))
    monkeypatch.setattr(bookings, "create_booking", raising(ValueError("This time slot is not available")))

    response = await client.post(f"{API}/bookings/", json={
        "studioId": studio["id"], "artistId": "artist-1", "date": "2030-01-07", "time": "10:00",
        "customerName": "Casey", "customerEmail": "casey@example.com", "customerPhone": "555-0100",
    })

    assert response.status_code == 400
    assert response.json()["detail"] == "This time slot is not available"


@pytest.mark.asyncio
async def test_cancel_someone_elses_booking_is_forbidden(client, login, customer, monkeypatch):
    login(customer)
    monkeypatch.setattr(bookings, "get_booking_by_id", returning({"id": "b1", "customerId": "someone-else"}))
    response = await client.post(f"{API}/bookings/b1/cancel")
    assert response.status_code == 403


@pytest.mark.asyncio
@pytest.mark.parametrize("error, expected", [
    (LookupError("Booking not found"), 404),
    (PermissionError("You can only review your own bookings"), 403),
    (ValueError("Only completed bookings can be reviewed"), 400),
])
async def test_review_errors_map_to_status_codes(client, login, customer, monkeypatch, error, expected):
    login(customer)
    monkeypatch.setattr(reviews, "create_review", raising(error))
    response = await client.post(f"{API}/reviews/", json={"bookingId": "b1", "rating": 5, "comment": "Great"})
    assert response.status_code == expected


@pytest.mark.asyncio
async def test_contact_request_needs_no_account(client, fake_db, monkeypatch):
    studio = make_studio()
    monkeypatch.setattr(contact, "get_studio_by_id", returning(studio))

    response = await client.post(f"{API}/contact/", json={
        "studioId": studio["id"], "name": "Sam", "email": "sam@example.com", "message": "Walk-ins?",
    })

    assert response.status_code == 200
    assert response.json()["isRead"] is False
    assert len(fake_db.contact_requests.documents) == 1


@pytest.mark.asyncio
async def test_outsider_cannot_read_conversation(client, login, customer, monkeypatch):
    login(customer)
    monkeypatch.setattr(messages, "get_conversation_by_id", returning({
        "id": "c1", "customerId": make_user()["id"], "studioId": "studio-1",
    }))
    response = await client.get(f"{API}/messages/conversations/c1/messages")
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_owner_cannot_message_own_studio(client, login, owner, monkeypatch):
    login(owner)
    monkeypatch.setattr(messages, "get_studio_by_id", returning(make_studio(owner_id=owner["id"])))
    response = await client.post(f"{API}/messages/conversations", json={"studioId": "s1"})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_admin_role_cannot_self_register(client):
    response = await client.post(f"{API}/auth/register", json={
        "email": "root@example.com", "password": "secret123", "fullName": "Root", "role": "admin",
    })
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_studio_owner_cannot_request_booking(client, login, owner, monkeypatch):
    login(owner)
    called = []

    async def fake_create(*args, **kwargs):
        called.append(args)

    monkeypatch.setattr(bookings, "create_booking", fake_create)

    response = await client.post(f"{API}/bookings/", json={
        "studioId": "s1", "artistId": "artist-1", "date": "2030-01-07", "time": "10:00",
        "customerName": "Olive", "customerEmail": "olive@example.com", "customerPhone": "555-0101",
    })

    assert response.status_code == 403
    assert called == []
