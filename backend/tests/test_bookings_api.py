"""Booking API integration tests."""

from __future__ import annotations

from typing import Any

import pytest
from httpx import AsyncClient

from bookit.services import booking_service

pytestmark = pytest.mark.asyncio


def _payload(context: dict[str, Any], **overrides: object) -> dict[str, object]:
    payload: dict[str, object] = {
        "experienceId": context["experience_id"],
        "slotId": context["small_slot_id"],
        "userName": "Asha Rao",
        "userEmail": "Asha@Example.com",
        "userPhone": "+91 98765 43210",
        "numberOfPeople": 2,
    }
    payload.update(overrides)
    return payload


async def test_create_booking_with_promo(app_context: dict[str, Any]) -> None:
    client: AsyncClient = app_context["client"]

    response = await client.post(
        "/api/v1/bookings", json=_payload(app_context, promoCode=" save10 ")
    )
    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Booking created successfully"
    booking = body["data"]
    assert booking["user_email"] == "asha@example.com"
    assert booking["user_phone"] == "+919876543210"
    assert booking["number_of_people"] == 2
    assert booking["total_price"] == "2000.00"
    assert booking["discount_amount"] == "200.00"
    assert booking["final_price"] == "1800.00"
    assert booking["promo_code"] == "save10"

    detail = await client.get(f"/api/v1/experiences/{app_context['experience_id']}")
    slots = [slot for day in detail.json()["data"]["slots"].values() for slot in day]
    small = next(slot for slot in slots if slot["id"] == app_context["small_slot_id"])
    assert small["available_capacity"] == 1


async def test_snake_case_payload_is_accepted(app_context: dict[str, Any]) -> None:
    client: AsyncClient = app_context["client"]
    response = await client.post(
        "/api/v1/bookings",
        json={
            "experience_id": app_context["experience_id"],
            "slot_id": app_context["large_slot_id"],
            "user_name": "Ravi",
            "user_email": "ravi@example.com",
            "number_of_people": 1,
        },
    )
    assert response.status_code == 201
    assert response.json()["data"]["final_price"] == "1000.00"


async def test_insufficient_capacity_is_conflict(app_context: dict[str, Any]) -> None:
    client: AsyncClient = app_context["client"]
    response = await client.post(
        "/api/v1/bookings", json=_payload(app_context, numberOfPeople=4)
    )
    assert response.status_code == 409
    body = response.json()
    assert body["success"] is False
    assert body["kind"] == "Conflict"
    assert body["message"] == "Only 3 spots available. Please reduce number of people."
    assert body["detail"]["available_capacity"] == 3


async def test_unknown_slot_is_not_found(app_context: dict[str, Any]) -> None:
    client: AsyncClient = app_context["client"]
    response = await client.post(
        "/api/v1/bookings", json=_payload(app_context, slotId=9999)
    )
    assert response.status_code == 404
    assert response.json()["kind"] == "NotFound"
    assert response.json()["message"] == "Slot not found"


@pytest.mark.parametrize(
    ("overrides", "field"),
    [
        ({"userName": " A "}, "userName"),
        ({"userEmail": "not-an-email"}, "userEmail"),
        ({"numberOfPeople": 0}, "numberOfPeople"),
        ({"userPhone": "call me"}, "userPhone"),
        ({"slotId": "abc"}, "slotId"),
    ],
)
async def test_malformed_requests_fail_validation(
    app_context: dict[str, Any], overrides: dict[str, object], field: str
) -> None:
    client: AsyncClient = app_context["client"]
    response = await client.post("/api/v1/bookings", json=_payload(app_context, **overrides))
    assert response.status_code == 400
    body = response.json()
    assert body["kind"] == "ValidationFailed"
    assert body["message"] == "Validation failed"
    assert any(error["field"] == field for error in body["detail"])


async def test_internal_failure_is_generic(
    app_context: dict[str, Any], monkeypatch: pytest.MonkeyPatch
) -> None:
    def _explode(slot: object, number_of_people: int) -> None:
        raise RuntimeError("disk on fire at /var/lib/postgresql")

    monkeypatch.setattr(booking_service, "_consume_capacity", _explode)
    client: AsyncClient = app_context["client"]

    response = await client.post("/api/v1/bookings", json=_payload(app_context))
    assert response.status_code == 500
    body = response.json()
    assert body == {
        "success": False,
        "kind": "Internal",
        "message": "Failed to create booking",
    }


async def test_bookings_by_email(app_context: dict[str, Any]) -> None:
    client: AsyncClient = app_context["client"]
    created = await client.post("/api/v1/bookings", json=_payload(app_context))
    assert created.status_code == 201

    response = await client.get("/api/v1/bookings/user/asha@example.com")
    assert response.status_code == 200
    body = response.json()
    assert body["count"] == 1
    summary = body["data"][0]
    assert summary["id"] == created.json()["data"]["id"]
    assert summary["experience_title"] == "Kayaking"
    assert summary["location"] == "Udupi"
    assert summary["time_slot"] == "09:00:00"

    empty = await client.get("/api/v1/bookings/user/nobody@example.com")
    assert empty.json() == {"success": True, "count": 0, "data": []}
