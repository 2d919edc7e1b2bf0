"""Read access to the pricing catalog."""

from __future__ import annotations

import uuid
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from petcare.core.exceptions import NotFoundError
from petcare.models import (
    BoardingRate,
    LogisticsChoice,
    LogisticsFee,
    PlanDefinition,
    PriceRule,
    ServiceAddon,
    SizeCategory,
)


@dataclass(slots=True)
class CatalogSnapshot:
    """In-memory view of the catalog rows the pricing resolver needs."""

    price_rules: list[PriceRule] = field(default_factory=list)
    addons: dict[uuid.UUID, ServiceAddon] = field(default_factory=dict)
    logistics_fees: dict[LogisticsChoice, uuid.UUID] = field(default_factory=dict)
    boarding_rates: dict[SizeCategory, Decimal] = field(default_factory=dict)

    @property
    def logistics_addon_ids(self) -> set[uuid.UUID]:
        return set(self.logistics_fees.values())


def _as_uuid(value: uuid.UUID | str) -> uuid.UUID:
    return value if isinstance(value, uuid.UUID) else uuid.UUID(str(value))


async def load_snapshot(session: AsyncSession) -> CatalogSnapshot:
    """Load active price rules, add-ons, logistics map and boarding rates."""

    rules_result = await session.execute(
        select(PriceRule)
        .where(PriceRule.active.is_(True))
        .order_by(PriceRule.created_at, PriceRule.id)
    )
    addons_result = await session.execute(select(ServiceAddon))
    fees_result = await session.execute(select(LogisticsFee))
    rates_result = await session.execute(select(BoardingRate))

    return CatalogSnapshot(
        price_rules=list(rules_result.scalars().all()),
        addons={addon.id: addon for addon in addons_result.scalars().all()},
        logistics_fees={
            fee.logistics_choice: fee.addon_id for fee in fees_result.scalars().all()
        },
        boarding_rates={
            rate.size: rate.daily_rate for rate in rates_result.scalars().all()
        },
    )


async def get_active_addons(
    session: AsyncSession, addon_ids: Sequence[uuid.UUID]
) -> list[ServiceAddon]:
    """Return the requested active add-ons, failing if any id is unknown."""

    if not addon_ids:
        return []
    unique_ids = list(dict.fromkeys(addon_ids))
    result = await session.execute(
        select(ServiceAddon).where(
            ServiceAddon.id.in_(unique_ids),
            ServiceAddon.active.is_(True),
        )
    )
    addons = {addon.id: addon for addon in result.scalars().all()}
    missing = [str(addon_id) for addon_id in unique_ids if addon_id not in addons]
    if missing:
        raise NotFoundError("Add-on not available", details={"addon_ids": missing})
    return [addons[addon_id] for addon_id in unique_ids]


async def addon_name_map(
    session: AsyncSession, addon_ids: Iterable[uuid.UUID | str]
) -> dict[uuid.UUID, str]:
    """Map add-on ids to names, including inactive add-ons still on old bookings."""

    ids = {_as_uuid(addon_id) for addon_id in addon_ids}
    if not ids:
        return {}
    result = await session.execute(
        select(ServiceAddon.id, ServiceAddon.name).where(ServiceAddon.id.in_(ids))
    )
    return {row.id: row.name for row in result}


async def addon_names(
    session: AsyncSession, addon_ids: Sequence[uuid.UUID | str]
) -> list[str]:
    """Names of the given add-ons in request order, skipping unknown ids."""

    names = await addon_name_map(session, addon_ids)
    ordered = (_as_uuid(addon_id) for addon_id in addon_ids)
    return [names[addon_id] for addon_id in ordered if addon_id in names]


async def plan_addon_names(
    session: AsyncSession, plan_definition_id: uuid.UUID
) -> list[str]:
    """Names of the add-ons bundled with a plan, in the order the plan lists them."""

    definition = await session.get(PlanDefinition, plan_definition_id)
    if definition is None:
        return []
    addon_ids = [
        entry["addon_id"]
        for entry in definition.included_addons
        if entry.get("addon_id")
    ]
    return await addon_names(session, addon_ids)


async def get_plan_definition(
    session: AsyncSession, plan_definition_id: uuid.UUID
) -> PlanDefinition:
    definition = await session.get(PlanDefinition, plan_definition_id)
    if definition is None or not definition.active:
        raise NotFoundError("Plan definition not available")
    return definition


async def list_plan_definitions(session: AsyncSession) -> list[PlanDefinition]:
    result = await session.execute(
        select(PlanDefinition)
        .where(PlanDefinition.active.is_(True))
        .order_by(PlanDefinition.service_type, PlanDefinition.total_units)
    )
    return list(result.scalars().all())
