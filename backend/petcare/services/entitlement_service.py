"""Prepaid plan ledger: purchase, lookup, redemption and reversal of units.

``redeem`` and ``revert`` run inside the caller's transaction and never commit,
so a booking and the units it consumes are persisted (or rolled back) together.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timedelta
from typing import Final

from sqlalchemy import case, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from petcare.core.exceptions import ConflictError, NotFoundError, ValidationError
from petcare.core.timezone import coerce_utc, utcnow
from petcare.models import ClientPlan, PlanServiceType
from petcare.services import catalog_service, directory_service

logger = logging.getLogger(__name__)

_MAX_REDEEM_ATTEMPTS: Final = 3


def is_plan_usable(plan: ClientPlan, now: datetime) -> bool:
    """True while the plan is active, unexpired and has units left."""

    return (
        plan.active
        and coerce_utc(plan.expires_at) > coerce_utc(now)
        and plan.total_units - plan.used_units > 0
    )


async def _load_plan(session: AsyncSession, client_plan_id: uuid.UUID) -> ClientPlan:
    result = await session.execute(
        select(ClientPlan)
        .where(ClientPlan.id == client_plan_id)
        .execution_options(populate_existing=True)
    )
    plan = result.scalar_one_or_none()
    if plan is None:
        raise NotFoundError("Client plan not found")
    return plan


async def get_plan(session: AsyncSession, *, client_plan_id: uuid.UUID) -> ClientPlan:
    return await _load_plan(session, client_plan_id)


async def find_applicable_plan(
    session: AsyncSession,
    *,
    pet_id: uuid.UUID,
    service_type: PlanServiceType,
    now: datetime | None = None,
) -> ClientPlan | None:
    """Return the plan a new booking should draw from, if any.

    When several plans qualify the one expiring first is used, then the oldest
    purchase, then the lowest id.
    """

    moment = coerce_utc(now or utcnow())
    stmt = (
        select(ClientPlan)
        .where(
            ClientPlan.pet_id == pet_id,
            ClientPlan.service_type == service_type,
            ClientPlan.active.is_(True),
            ClientPlan.expires_at > moment,
            ClientPlan.used_units < ClientPlan.total_units,
        )
        .order_by(ClientPlan.expires_at, ClientPlan.purchased_at, ClientPlan.id)
        .limit(1)
    )
    result = await session.execute(stmt)
    return result.scalars().first()


async def redeem(
    session: AsyncSession,
    *,
    client_plan_id: uuid.UUID,
    units: int,
) -> ClientPlan:
    """Consume ``units`` from a plan with a compare-and-swap update.

    The UPDATE only matches while ``used_units`` still holds the value read
    just before it; a lost race is re-read and retried a bounded number of
    times.
    """

    if units <= 0:
        raise ValidationError("Units to redeem must be positive")

    for attempt in range(1, _MAX_REDEEM_ATTEMPTS + 1):
        plan = await _load_plan(session, client_plan_id)
        observed = plan.used_units
        if observed + units > plan.total_units:
            logger.info(
                "Plan %s has %s unit(s) left; %s requested",
                plan.id,
                plan.total_units - observed,
                units,
            )
            raise ConflictError(
                "Insufficient plan balance",
                details={
                    "client_plan_id": str(plan.id),
                    "remaining_units": plan.total_units - observed,
                    "requested_units": units,
                },
            )

        result = await session.execute(
            update(ClientPlan)
            .where(
                ClientPlan.id == plan.id,
                ClientPlan.used_units == observed,
            )
            .values(used_units=observed + units)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 1:
            await session.refresh(plan)
            return plan
        logger.warning(
            "Plan %s changed during redemption (attempt %s/%s)",
            plan.id,
            attempt,
            _MAX_REDEEM_ATTEMPTS,
        )

    raise ConflictError("Plan balance changed concurrently; please retry")


async def revert(
    session: AsyncSession,
    *,
    client_plan_id: uuid.UUID,
    units: int,
) -> ClientPlan:
    """Give ``units`` back to a plan; the counter never drops below zero."""

    if units < 0:
        raise ValidationError("Units to revert cannot be negative")
    plan = await _load_plan(session, client_plan_id)
    if units == 0:
        return plan

    await session.execute(
        update(ClientPlan)
        .where(ClientPlan.id == plan.id)
        .values(
            used_units=case(
                (ClientPlan.used_units > units, ClientPlan.used_units - units),
                else_=0,
            )
        )
        .execution_options(synchronize_session=False)
    )
    await session.refresh(plan)
    return plan


async def purchase_plan(
    session: AsyncSession,
    *,
    client_id: uuid.UUID,
    pet_id: uuid.UUID,
    plan_definition_id: uuid.UUID,
    now: datetime | None = None,
) -> ClientPlan:
    """Sell a plan to a client for one of their pets."""

    client, pet = await directory_service.get_client_and_pet(
        session, client_id=client_id, pet_id=pet_id
    )
    definition = await catalog_service.get_plan_definition(session, plan_definition_id)
    if definition.total_units <= 0:
        raise ValidationError("Plan definition must include at least one unit")

    purchased_at = coerce_utc(now or utcnow())
    existing = await find_applicable_plan(
        session,
        pet_id=pet.id,
        service_type=definition.service_type,
        now=purchased_at,
    )
    if existing is not None:
        logger.info(
            "Pet %s already holds usable %s plan %s; the earliest expiring is used first",
            pet.id,
            definition.service_type.value,
            existing.id,
        )

    plan = ClientPlan(
        client_id=client.id,
        pet_id=pet.id,
        plan_definition_id=definition.id,
        service_type=definition.service_type,
        total_units=definition.total_units,
        used_units=0,
        price_paid=definition.price,
        purchased_at=purchased_at,
        expires_at=purchased_at + timedelta(days=definition.validity_days),
        active=True,
    )
    session.add(plan)
    directory_service.touch_last_purchase(client, purchased_at)
    await session.commit()
    await session.refresh(plan)
    logger.info("Sold plan %s (%s) for pet %s", plan.id, definition.name, pet.id)
    return plan


async def list_pet_plans(
    session: AsyncSession,
    *,
    pet_id: uuid.UUID,
    usable_only: bool = False,
    now: datetime | None = None,
) -> list[ClientPlan]:
    result = await session.execute(
        select(ClientPlan)
        .where(ClientPlan.pet_id == pet_id)
        .order_by(ClientPlan.expires_at, ClientPlan.purchased_at)
    )
    plans = list(result.scalars().all())
    if usable_only:
        moment = now or utcnow()
        plans = [plan for plan in plans if is_plan_usable(plan, moment)]
    return plans
