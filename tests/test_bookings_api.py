"""
Tests for the booking HTTP surface under /api.
"""

from __future__ import annotations

from cpr_booking.infrastructure.store.memory_store import MemoryBookingStore


def _intake_payload(**overrides):
    payload = {
        "email": "ana@example.com",
        "service": "CPR Training",
        "date": "April 14, 2030",
        "time": "2:00 PM",
        "clientName": "Ana Ruiz",
        "phone": "555-123-4567",
        "participants": 2,
        "sessionId": "cs_test_api",
    }
    payload.update(overrides)
    return payload


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_save_and_list_bookings(client):
    resp = client.post("/api/bookings", json={"email": "ana@example.com", "clientName": "Ana Ruiz"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["message"] == "Booking saved successfully"
    assert body["booking"]["clientName"] == "Ana Ruiz"

    listing = client.get("/api/bookings").json()
    assert listing["success"] is True
    assert [b["id"] for b in listing["bookings"]] == [body["booking"]["id"]]


def test_save_booking_requires_email(client):
    resp = client.post("/api/bookings", json={"clientName": "Ana Ruiz"})
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Missing required email field"


def test_save_booking_with_session_id_upserts(client, store):
    client.post("/api/bookings", json={"email": "ana@example.com", "sessionId": "cs_1", "participants": 1})
    resp = client.post("/api/bookings", json={"email": "ana@example.com", "sessionId": "cs_1", "participants": 3})

    assert resp.json()["message"] == "Booking updated successfully"
    assert len(store.list()) == 1
    assert store.list()[0].participants == 3


def test_get_booking(client, store):
    record = store.create({"email": "ana@example.com"})
    assert client.get(f"/api/bookings/{record.id}").json()["id"] == record.id
    assert client.get("/api/bookings/missing").status_code == 404


def test_status_update(client, store):
    record = store.create({"email": "ana@example.com"})

    resp = client.patch(f"/api/bookings/{record.id}", json={"status": "completed"})
    assert resp.status_code == 200
    assert resp.json()["status"] == "completed"

    resp = client.patch(f"/api/bookings/{record.id}", json={"status": "upcoming"})
    assert resp.json()["status"] == "upcoming"


def test_invalid_status_leaves_record_unchanged(client, store):
    record = store.create({"email": "ana@example.com"})

    resp = client.patch(f"/api/bookings/{record.id}", json={"status": "archived"})
    assert resp.status_code == 400
    assert "Invalid status" in resp.json()["detail"]
    assert store.get(record.id).status.value == "upcoming"


def test_status_update_unknown_booking(client):
    resp = client.patch("/api/bookings/missing", json={"status": "canceled"})
    assert resp.status_code == 404


def test_reschedule(client, store):
    record = store.create({"email": "ana@example.com", "status": "canceled"})

    resp = client.patch(f"/api/bookings/{record.id}/reschedule", json={"date": "2030-05-01", "time": "10:00 AM"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["date"] == "2030-05-01"
    assert body["time"] == "10:00 AM"
    assert body["status"] == "upcoming"

    assert client.patch(f"/api/bookings/{record.id}/reschedule", json={"date": "2030-05-01"}).status_code == 400
    assert client.patch("/api/bookings/missing/reschedule", json={"date": "2030-05-01", "time": "10:00 AM"}).status_code == 404


def test_intake_success(client, store):
    resp = client.post("/api/bookings/intake", json=_intake_payload())
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["created"] is True
    assert body["booking"]["phone"] == "+15551234567"
    assert body["simplybookResponse"]["status"] == "booked"
    assert len(store.list()) == 1


def test_intake_missing_fields(client, store):
    resp = client.post("/api/bookings/intake", json=_intake_payload(date=None, time=""))
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Missing required fields: date, time"
    assert store.list() == []


def test_intake_remote_rejection_still_succeeds(make_client, rejecting_scheduler, store):
    client = make_client(rejecting_scheduler)
    resp = client.post("/api/bookings/intake", json=_intake_payload())

    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["simplybookResponse"]["status"] == "rejected"
    assert body["simplybookResponse"]["error"]["message"] == "Selected unit id is not available"
    assert len(store.list()) == 1


def test_intake_save_failure_returns_500(make_client, monkeypatch, store):
    def broken(self, session_id, fields, defaults=None):
        raise RuntimeError("store unavailable")

    monkeypatch.setattr(MemoryBookingStore, "upsert_by_session_id", broken)
    client = make_client()
    resp = client.post("/api/bookings/intake", json=_intake_payload())

    assert resp.status_code == 500
    body = resp.json()
    assert body["success"] is False
    assert body["error"] == "Failed to process booking"
    assert body["simplybookResponse"]["status"] == "booked"
    assert "booking" not in body
