from datetime import datetime, time, timedelta

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from barbershop.api import deps
from barbershop.api.routes import bookings
from barbershop.config import get_settings
from barbershop.db import models
from barbershop.db.session import get_db
from barbershop.services import booking_service, slot_grid
from tests.fakes import RecordingNotifier


def next_monday_at(hour: int, minute: int = 0) -> str:
    today = slot_grid.local_now().date()
    monday = today + timedelta(days=7 - today.weekday())
    return datetime.combine(monday, time(hour, minute)).isoformat()


def booking(name: str, when: str, **extra) -> dict:
    payload = {"customer_name": name, "phone_number": "+13065550100", "appointment_time": when}
    payload.update(extra)
    return payload


@pytest.fixture()
def api_client(session_factory):
    notifier = RecordingNotifier()

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    test_app = FastAPI()
    test_app.include_router(bookings.router, prefix="/api/v1")
    test_app.dependency_overrides[get_db] = override_get_db
    test_app.dependency_overrides[deps.get_notifier] = lambda: notifier
    test_app.dependency_overrides[deps.get_current_user] = lambda: models.User(id=1, name="Admin")

    with TestClient(test_app) as client:
        yield client, session_factory, notifier

    test_app.dependency_overrides.clear()


def test_single_booking_returns_created(api_client):
    client, _, notifier = api_client

    response = client.post(
        "/api/v1/bookings", json=booking("Ada", next_monday_at(10, 5), email="ada@example.com")
    )

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["booking"]["status"] == "pending"
    assert body["booking"]["payment_status"] == "unpaid"
    assert body["booking"]["appointment_time"] == next_monday_at(10)
    assert body["email_sent"] is True
    assert body["admin_notified"] is True
    assert len(notifier.summaries) == 1


def test_bulk_booking_with_rejections_returns_multi_status(api_client):
    client, _, _ = api_client

    response = client.post(
        "/api/v1/bookings",
        json=[
            booking("First", next_monday_at(10)),
            booking("Second", next_monday_at(10)),
            {"customer_name": "Nobody"},
        ],
    )

    assert response.status_code == 207
    body = response.json()
    assert [item["customer_name"] for item in body["bookings"]] == ["First"]
    assert [(item["index"], item["kind"]) for item in body["conflicts"]] == [
        (1, "conflict"),
        (2, "validation"),
    ]
    assert body["conflicts"][0]["conflicts_with"] == 0
    assert body["conflicts"][1]["fields"] == ["phone_number", "appointment_time"]
    assert body["summary"] == {
        "total": 3,
        "successful": 1,
        "failed": 2,
        "emails_sent": 0,
        "admin_notified": True,
    }


def test_bulk_booking_fully_admitted(api_client):
    client, SessionLocal, _ = api_client

    response = client.post(
        "/api/v1/bookings",
        json=[booking("A", next_monday_at(9)), booking("B", next_monday_at(9, 30), pay_now=True)],
    )

    assert response.status_code == 201
    body = response.json()
    assert body["summary"]["successful"] == 2
    assert body["summary"]["failed"] == 0
    assert [item["payment_status"] for item in body["bookings"]] == ["unpaid", "paid"]
    with SessionLocal() as db:
        assert db.query(models.Booking).count() == 2


def test_all_invalid_returns_bad_request(api_client):
    client, SessionLocal, notifier = api_client
    one_minute_ago = (slot_grid.local_now() - timedelta(minutes=1)).isoformat()

    response = client.post("/api/v1/bookings", json=booking("Late", one_minute_ago))

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["errors"][0]["message"] == "Appointment time cannot be in the past"
    assert notifier.summaries == []
    with SessionLocal() as db:
        assert db.query(models.Booking).count() == 0


def test_all_conflicting_returns_conflict(api_client):
    client, _, _ = api_client
    assert client.post("/api/v1/bookings", json=booking("A", next_monday_at(11))).status_code == 201

    response = client.post(
        "/api/v1/bookings",
        json=[booking("B", next_monday_at(11, 10)), booking("C", "garbage")],
    )

    assert response.status_code == 409
    body = response.json()
    assert body["message"] == "All time slots unavailable"
    assert [item["index"] for item in body["conflicts"]] == [0, 1]


def test_unknown_notification_provider_still_admits_booking(api_client, monkeypatch):
    client, SessionLocal, _ = api_client
    client.app.dependency_overrides.pop(deps.get_notifier)
    misconfigured = get_settings().model_copy(update={"notification_provider": "smtp"})
    monkeypatch.setattr(deps, "get_settings", lambda: misconfigured)

    response = client.post(
        "/api/v1/bookings", json=booking("Ada", next_monday_at(10), email="ada@example.com")
    )

    assert response.status_code == 201
    body = response.json()
    assert body["email_sent"] is False
    assert body["admin_notified"] is False
    assert body["email_details"]["admin_email"]["reason"] == "Notifier unavailable"
    with SessionLocal() as db:
        assert db.query(models.Booking).count() == 1


@pytest.mark.parametrize("payload", [[], "hello", 42])
def test_body_must_be_object_or_list(api_client, payload):
    client, _, _ = api_client

    response = client.post("/api/v1/bookings", json=payload)

    assert response.status_code == 400


def test_persistence_error_maps_to_service_unavailable(api_client, monkeypatch):
    client, _, _ = api_client

    def broken(*_args, **_kwargs):
        raise booking_service.PersistenceError("Could not check slot availability")

    monkeypatch.setattr(booking_service.availability_service, "find_occupied_instants", broken)

    response = client.post("/api/v1/bookings", json=booking("A", next_monday_at(12)))

    assert response.status_code == 503
    assert response.json()["detail"] == "Could not check slot availability"


def test_list_bookings_latest_first(api_client):
    client, _, _ = api_client
    client.post("/api/v1/bookings", json=[booking("Early", next_monday_at(9)), booking("Late", next_monday_at(15))])

    response = client.get("/api/v1/bookings")

    assert response.status_code == 200
    assert [item["customer_name"] for item in response.json()] == ["Late", "Early"]
