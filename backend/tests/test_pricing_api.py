"""API tests for price quotes and plan sales."""

from __future__ import annotations

from decimal import Decimal
from typing import Any

import pytest

from petcare.db.session import get_sessionmaker
from petcare.models import CoatType, GroomingServiceType, PriceRule

pytestmark = pytest.mark.asyncio


async def test_grooming_quote_uses_breed_rule(app_context: dict[str, Any], db_url: str) -> None:
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        session.add(
            PriceRule(
                service_type=GroomingServiceType.BATH_GROOMING,
                breed="poodle",
                coat_type=CoatType.LONG,
                price=Decimal("90.00"),
            )
        )
        await session.commit()

    client = app_context["client"]
    response = await client.post(
        "/api/v1/quotes/grooming",
        json={
            "pet_id": str(app_context["pet_id"]),
            "service_type": "bath_grooming",
            "addon_ids": [str(app_context["hydration_id"])],
            "logistics_choice": "company_company",
        },
    )

    assert response.status_code == 200
    assert response.json() == {
        "base_price": "90.00",
        "addons_total": "25.00",
        "logistics_surcharge": "25.00",
        "total": "140.00",
    }


async def test_grooming_quote_falls_back_to_formula(app_context: dict[str, Any]) -> None:
    client = app_context["client"]
    response = await client.post(
        "/api/v1/quotes/grooming",
        json={"pet_id": str(app_context["other_pet_id"]), "service_type": "bath"},
    )

    assert response.status_code == 200
    assert response.json()["total"] == "64.00"


async def test_grooming_quote_for_unknown_pet(app_context: dict[str, Any]) -> None:
    client = app_context["client"]
    response = await client.post(
        "/api/v1/quotes/grooming",
        json={"pet_id": str(app_context["client_id"]), "service_type": "bath"},
    )

    assert response.status_code == 404
    assert response.json()["code"] == "NotFoundError"


async def test_stay_quote(app_context: dict[str, Any]) -> None:
    client = app_context["client"]
    response = await client.post(
        "/api/v1/quotes/stay",
        json={
            "pet_id": str(app_context["pet_id"]),
            "check_in": "2024-01-01T10:00:00Z",
            "check_out": "2024-01-04T10:00:00Z",
        },
    )

    assert response.status_code == 200
    assert response.json() == {"days": 3, "daily_rate": "70.00", "total": "210.00"}


async def test_stay_quote_rejects_reversed_dates(app_context: dict[str, Any]) -> None:
    client = app_context["client"]
    response = await client.post(
        "/api/v1/quotes/stay",
        json={
            "pet_id": str(app_context["pet_id"]),
            "check_in": "2024-01-04T10:00:00Z",
            "check_out": "2024-01-01T10:00:00Z",
        },
    )

    assert response.status_code == 422


async def test_sell_plan_and_list_it(app_context: dict[str, Any]) -> None:
    client = app_context["client"]
    definitions = await client.get("/api/v1/plans/definitions")
    assert definitions.status_code == 200
    names = {item["name"] for item in definitions.json()}
    assert names == {"4 baths", "5 daycare days"}

    response = await client.post(
        "/api/v1/plans",
        json={
            "client_id": str(app_context["client_id"]),
            "pet_id": str(app_context["pet_id"]),
            "plan_definition_id": str(app_context["daycare_plan_definition_id"]),
        },
    )
    assert response.status_code == 201
    plan = response.json()
    assert plan["service_type"] == "daycare"
    assert plan["total_units"] == 5
    assert plan["remaining_units"] == 5

    listing = await client.get(
        f"/api/v1/pets/{app_context['pet_id']}/plans", params={"usable_only": True}
    )
    assert listing.status_code == 200
    assert [item["id"] for item in listing.json()] == [plan["id"]]
