"""Health endpoint smoke test."""

import pytest

from petcare.core.timezone import business_today


@pytest.mark.asyncio
async def test_healthcheck_returns_ok(app_context) -> None:
    response = await app_context["client"].get("/api/v1/health")
    assert response.status_code == 200
    payload = response.json()
    assert payload["status"] == "ok"
    assert payload["service"] == "Pet Care Operations API"
    assert payload["business_date"] == business_today().isoformat()
    assert payload["business_timezone"] == "UTC"
