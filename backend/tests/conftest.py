"""Test fixtures for the pet-care booking backend."""
from __future__ import annotations

import functools
import os
from collections.abc import AsyncIterator, Awaitable, Callable
from datetime import timedelta
from decimal import Decimal

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./test.db")
os.environ.setdefault("BUSINESS_TIMEZONE", "UTC")
os.environ.pop("CALENDAR_WEBHOOK_URL", None)

from petcare.api import deps
from petcare.core.config import get_settings
from petcare.core.timezone import utcnow
from petcare.db.base import Base
from petcare.db.session import dispose_engine, get_sessionmaker
from petcare.integrations.calendar_webhook import (
    CalendarEventPayload,
    CalendarWebhookError,
)
from petcare.main import app
from petcare.models import (
    BoardingRate,
    Client,
    ClientPlan,
    CoatType,
    LogisticsChoice,
    LogisticsFee,
    Pet,
    PlanDefinition,
    PlanServiceType,
    ServiceAddon,
    SizeCategory,
)


class RecordingNotifier:
    """In-memory calendar notifier that remembers every call."""

    def __init__(self, *, event_id: str | None = "evt-123", fail: bool = False) -> None:
        self.event_id = event_id
        self.fail = fail
        self.created: list[CalendarEventPayload] = []
        self.deleted: list[str] = []

    async def create_event(self, payload: CalendarEventPayload) -> str | None:
        self.created.append(payload)
        if self.fail:
            raise CalendarWebhookError("Calendar webhook unreachable")
        return self.event_id

    async def delete_event(self, external_id: str) -> None:
        self.deleted.append(external_id)
        if self.fail:
            raise CalendarWebhookError("Calendar webhook unreachable")


@pytest.fixture(scope="session")
def db_url(tmp_path_factory: pytest.TempPathFactory) -> str:
    """Provide a temporary SQLite database URL for the test session."""
    db_path = tmp_path_factory.mktemp("db") / "test.db"
    return f"sqlite+aiosqlite:///{db_path}"


@pytest_asyncio.fixture()
async def reset_database(db_url: str) -> AsyncIterator[None]:
    """Drop and recreate the database schema for an isolated test."""
    os.environ["DATABASE_URL"] = db_url
    get_settings.cache_clear()
    get_settings()

    await dispose_engine(db_url)
    engine = create_async_engine(db_url, future=True)
    async with engine.begin() as connection:
        await connection.run_sync(Base.metadata.drop_all)
        await connection.run_sync(Base.metadata.create_all)
    await engine.dispose()
    yield
    await dispose_engine(db_url)


@pytest.fixture()
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest_asyncio.fixture()
async def catalog_setup(reset_database: None, db_url: str) -> dict[str, object]:
    """Seed a client with a small poodle, add-ons, logistics fees, rates and plans."""
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        client = Client(name="Ana Souza", phone="+55 11 91234-5678", email="ana@example.com")
        session.add(client)
        await session.flush()

        pet = Pet(
            client_id=client.id,
            name="Bolt",
            breed="Poodle",
            size=SizeCategory.SMALL,
            coat_type=CoatType.LONG,
        )
        other_pet = Pet(
            client_id=client.id,
            name="Mel",
            breed="Labrador",
            size=SizeCategory.LARGE,
            coat_type=CoatType.SHORT,
        )
        session.add_all([pet, other_pet])

        hydration = ServiceAddon(name="Hydration", price=Decimal("25.00"))
        nail_trim = ServiceAddon(name="Nail trim", price=Decimal("10.00"))
        retired = ServiceAddon(name="Perfume", price=Decimal("5.00"), active=False)
        pickup = ServiceAddon(name="Pickup and delivery", price=Decimal("25.00"))
        session.add_all([hydration, nail_trim, retired, pickup])
        await session.flush()

        session.add(
            LogisticsFee(
                logistics_choice=LogisticsChoice.COMPANY_COMPANY, addon_id=pickup.id
            )
        )
        session.add_all(
            [
                BoardingRate(size=SizeCategory.SMALL, daily_rate=Decimal("70.00")),
                BoardingRate(size=SizeCategory.MEDIUM, daily_rate=Decimal("85.00")),
            ]
        )

        grooming_plan = PlanDefinition(
            name="4 baths",
            service_type=PlanServiceType.GROOMING,
            total_units=4,
            price=Decimal("160.00"),
            validity_days=90,
            included_addons=[{"addon_id": str(nail_trim.id), "quantity": 4}],
        )
        daycare_plan = PlanDefinition(
            name="5 daycare days",
            service_type=PlanServiceType.DAYCARE,
            total_units=5,
            price=Decimal("320.00"),
            validity_days=60,
            included_addons=[],
        )
        session.add_all([grooming_plan, daycare_plan])
        await session.commit()

        return {
            "client_id": client.id,
            "pet_id": pet.id,
            "other_pet_id": other_pet.id,
            "hydration_id": hydration.id,
            "nail_trim_id": nail_trim.id,
            "retired_addon_id": retired.id,
            "pickup_addon_id": pickup.id,
            "grooming_plan_definition_id": grooming_plan.id,
            "daycare_plan_definition_id": daycare_plan.id,
        }


async def _add_client_plan(
    db_url: str,
    setup: dict[str, object],
    *,
    service_type: PlanServiceType,
    total_units: int,
    used_units: int = 0,
    expires_in: timedelta = timedelta(days=30),
) -> ClientPlan:
    """Store a plan directly, bypassing the sale flow, for ledger scenarios."""
    definition_key = (
        "grooming_plan_definition_id"
        if service_type == PlanServiceType.GROOMING
        else "daycare_plan_definition_id"
    )
    now = utcnow()
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        plan = ClientPlan(
            client_id=setup["client_id"],
            pet_id=setup["pet_id"],
            plan_definition_id=setup[definition_key],
            service_type=service_type,
            total_units=total_units,
            used_units=used_units,
            price_paid=Decimal("0.00"),
            purchased_at=now - timedelta(days=1),
            expires_at=now + expires_in,
            active=True,
        )
        session.add(plan)
        await session.commit()
        await session.refresh(plan)
        return plan


@pytest.fixture()
def make_client_plan(
    catalog_setup: dict[str, object], db_url: str
) -> Callable[..., Awaitable[ClientPlan]]:
    """Factory storing plans for the seeded pet."""
    return functools.partial(_add_client_plan, db_url, catalog_setup)


@pytest_asyncio.fixture()
async def app_context(
    catalog_setup: dict[str, object], notifier: RecordingNotifier
) -> AsyncIterator[dict[str, object]]:
    """Yield an async client wired to the seeded catalog and a recording notifier."""
    app.dependency_overrides[deps.get_calendar_notifier] = lambda: notifier
    context = dict(catalog_setup)
    context["notifier"] = notifier
    transport = ASGITransport(app=app)
    try:
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            context["client"] = client
            yield context
    finally:
        app.dependency_overrides.pop(deps.get_calendar_notifier, None)
