"""Outbound calendar webhook used to mirror bookings on an external calendar."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Protocol

import httpx

from petcare.core.config import get_settings
from petcare.core.exceptions import ExternalServiceError

logger = logging.getLogger(__name__)

_EVENT_ID_KEYS = ("google_id", "googleId", "event_id", "eventId")


class CalendarWebhookError(ExternalServiceError):
    """Raised when the calendar webhook cannot be reached or rejects a call."""


@dataclass(slots=True)
class CalendarEventPayload:
    """Human readable description of a booking for the external calendar."""

    pet_name: str
    client_name: str
    service: str
    start_date: str
    end_date: str
    price: Decimal | None = None
    pet_size: str | None = None
    hair_type: str | None = None
    grooming_type: str | None = None
    transport_logistics: str | None = None
    additional_services: list[str] = field(default_factory=list)
    observations: str | None = None

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {
            "action": "create",
            "pet_name": self.pet_name,
            "client_name": self.client_name,
            "service": self.service,
            "start_date": self.start_date,
            "end_date": self.end_date,
        }
        if self.price is not None:
            body["price"] = float(self.price)
        optional = {
            "pet_size": self.pet_size,
            "hair_type": self.hair_type,
            "grooming_type": self.grooming_type,
            "transport_logistics": self.transport_logistics,
            "observations": self.observations,
        }
        body.update({key: value for key, value in optional.items() if value})
        if self.additional_services:
            body["additional_services"] = ", ".join(self.additional_services)
        return body


class CalendarNotifier(Protocol):
    async def create_event(self, payload: CalendarEventPayload) -> str | None: ...

    async def delete_event(self, external_id: str) -> None: ...


class NullCalendarNotifier:
    """Notifier used when no webhook is configured."""

    async def create_event(self, payload: CalendarEventPayload) -> str | None:
        logger.debug("Calendar webhook not configured; skipping %s", payload.service)
        return None

    async def delete_event(self, external_id: str) -> None:
        logger.debug("Calendar webhook not configured; not deleting %s", external_id)


class CalendarWebhookClient:
    """Posts JSON to ``<base_url>/create`` and ``<base_url>/delete``."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not base_url:
            raise CalendarWebhookError("Calendar webhook URL is not configured")
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    async def _post(self, path: str, body: dict[str, Any]) -> httpx.Response:
        url = f"{self._base_url}/{path}"
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport
            ) as client:
                response = await client.post(url, json=body)
        except httpx.HTTPError as exc:
            raise CalendarWebhookError(f"Calendar webhook unreachable: {exc}") from exc
        if response.is_error:
            raise CalendarWebhookError(
                f"Calendar webhook answered HTTP {response.status_code}",
                details={"path": path, "status_code": response.status_code},
            )
        return response

    async def create_event(self, payload: CalendarEventPayload) -> str | None:
        response = await self._post("create", payload.to_dict())
        try:
            data = response.json()
        except ValueError:
            # Plain-text acknowledgements carry no event id.
            return None
        if not isinstance(data, dict):
            return None
        for key in _EVENT_ID_KEYS:
            value = data.get(key)
            if value:
                return str(value)
        return None

    async def delete_event(self, external_id: str) -> None:
        await self._post(
            "delete", {"action": "delete", "google_event_id": external_id}
        )


def build_calendar_notifier() -> CalendarNotifier:
    """Return the webhook client when configured, otherwise a no-op notifier."""

    settings = get_settings()
    if not settings.calendar_webhook_url:
        return NullCalendarNotifier()
    return CalendarWebhookClient(
        settings.calendar_webhook_url,
        timeout=settings.calendar_webhook_timeout_seconds,
    )
