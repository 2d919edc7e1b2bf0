"""API tests for grooming appointments and stays."""

from __future__ import annotations

from typing import Any

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio


async def _book(client: AsyncClient, context: dict[str, Any], **overrides: Any) -> dict[str, Any]:
    body = {
        "client_id": str(context["client_id"]),
        "pet_id": str(context["pet_id"]),
        "service_type": "bath_grooming",
        "grooming_style": "hygienic",
        "start_at": "2024-03-05T13:00:00Z",
        "addon_ids": [str(context["hydration_id"])],
    }
    body.update(overrides)
    response = await client.post("/api/v1/grooming/appointments", json=body)
    assert response.status_code == 201, response.text
    return response.json()


async def test_book_and_fetch_appointment(app_context: dict[str, Any]) -> None:
    client = app_context["client"]
    created = await _book(client, app_context, notes="First visit")

    assert created["price"] == "95.00"
    assert created["status"] == "scheduled"
    assert created["workflow_stage"] == "waiting"
    assert created["payment_status"] == "pending"
    assert created["charge_date"] == "2024-03-05"
    assert created["external_event_id"] == "evt-123"

    fetched = await client.get(f"/api/v1/grooming/appointments/{created['id']}")
    assert fetched.status_code == 200
    assert fetched.json()["addon_ids"] == [str(app_context["hydration_id"])]
    assert len(app_context["notifier"].created) == 1


async def test_missing_style_is_unprocessable(app_context: dict[str, Any]) -> None:
    client = app_context["client"]
    response = await client.post(
        "/api/v1/grooming/appointments",
        json={
            "client_id": str(app_context["client_id"]),
            "pet_id": str(app_context["pet_id"]),
            "service_type": "bath_grooming",
            "start_at": "2024-03-05T13:00:00Z",
        },
    )

    assert response.status_code == 422
    assert response.json()["code"] == "ValidationError"


async def test_unknown_appointment_is_not_found(app_context: dict[str, Any]) -> None:
    client = app_context["client"]
    response = await client.get(
        f"/api/v1/grooming/appointments/{app_context['client_id']}"
    )

    assert response.status_code == 404


async def test_workflow_done_then_cancel_is_conflict(app_context: dict[str, Any]) -> None:
    client = app_context["client"]
    created = await _book(client, app_context)
    base = f"/api/v1/grooming/appointments/{created['id']}"

    done = await client.patch(f"{base}/workflow", json={"stage": "done"})
    assert done.status_code == 200
    assert done.json()["status"] == "ready"
    assert done.json()["awaiting_payment"] is True

    completed = await client.patch(f"{base}/status", json={"status": "completed"})
    assert completed.status_code == 200

    cancelled = await client.post(f"{base}/cancel")
    assert cancelled.status_code == 409
    payload = cancelled.json()
    assert payload["code"] == "ConflictError"
    assert payload["details"] == {"status": "completed"}


async def test_skipping_a_status_is_conflict(app_context: dict[str, Any]) -> None:
    client = app_context["client"]
    created = await _book(client, app_context)

    response = await client.patch(
        f"/api/v1/grooming/appointments/{created['id']}/status",
        json={"status": "ready"},
    )

    assert response.status_code == 409
    assert response.json()["details"] == {"current": "scheduled", "requested": "ready"}


async def test_cancel_retracts_calendar_event(app_context: dict[str, Any]) -> None:
    client = app_context["client"]
    created = await _book(client, app_context)

    response = await client.post(
        f"/api/v1/grooming/appointments/{created['id']}/cancel"
    )

    assert response.status_code == 200
    assert response.json()["status"] == "cancelled"
    assert app_context["notifier"].deleted == ["evt-123"]

    moved = await client.patch(
        f"/api/v1/grooming/appointments/{created['id']}/charge-date",
        json={"charge_date": "2024-03-06"},
    )
    assert moved.status_code == 409


async def test_book_stay_with_plan(app_context: dict[str, Any]) -> None:
    client = app_context["client"]
    sold = await client.post(
        "/api/v1/plans",
        json={
            "client_id": str(app_context["client_id"]),
            "pet_id": str(app_context["pet_id"]),
            "plan_definition_id": str(app_context["daycare_plan_definition_id"]),
        },
    )
    assert sold.status_code == 201

    response = await client.post(
        "/api/v1/stays",
        json={
            "client_id": str(app_context["client_id"]),
            "pet_id": str(app_context["pet_id"]),
            "check_in": "2024-01-01T10:00:00Z",
            "check_out": "2024-01-04T10:00:00Z",
            "is_daycare": True,
        },
    )
    assert response.status_code == 201
    stay = response.json()
    assert stay["total_price"] == "0.00"
    assert stay["payment_status"] == "exempt"
    assert stay["units_redeemed"] == 3
    assert stay["client_plan_id"] == sold.json()["id"]

    plans = await client.get(f"/api/v1/pets/{app_context['pet_id']}/plans")
    assert plans.json()[0]["used_units"] == 3

    cancelled = await client.post(f"/api/v1/stays/{stay['id']}/cancel")
    assert cancelled.status_code == 200
    plans = await client.get(f"/api/v1/pets/{app_context['pet_id']}/plans")
    assert plans.json()[0]["used_units"] == 0


async def test_stay_status_walks_forward(app_context: dict[str, Any]) -> None:
    client = app_context["client"]
    response = await client.post(
        "/api/v1/stays",
        json={
            "client_id": str(app_context["client_id"]),
            "pet_id": str(app_context["pet_id"]),
            "check_in": "2024-01-01T10:00:00Z",
            "check_out": "2024-01-02T10:00:00Z",
        },
    )
    stay_id = response.json()["id"]

    for status in ("checked_in", "staying", "checked_out"):
        moved = await client.patch(
            f"/api/v1/stays/{stay_id}/status", json={"status": status}
        )
        assert moved.status_code == 200
        assert moved.json()["status"] == status

    fetched = await client.get(f"/api/v1/stays/{stay_id}")
    assert fetched.json()["total_price"] == "70.00"
