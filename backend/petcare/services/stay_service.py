"""Boarding and daycare stay booking and lifecycle."""

from __future__ import annotations

import logging
import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import Final

from sqlalchemy.ext.asyncio import AsyncSession

from petcare.core.exceptions import ConflictError, NotFoundError, ValidationError
from petcare.core.timezone import coerce_utc, local_date
from petcare.integrations.calendar_webhook import CalendarNotifier
from petcare.models import PaymentStatus, PlanServiceType, Stay, StayStatus
from petcare.services import (
    calendar_sync_service,
    catalog_service,
    directory_service,
    entitlement_service,
    pricing_service,
)

logger = logging.getLogger(__name__)

_ALLOWED_STATUS_TRANSITIONS: dict[StayStatus, set[StayStatus]] = {
    StayStatus.RESERVED: {StayStatus.CHECKED_IN},
    StayStatus.CHECKED_IN: {StayStatus.STAYING},
    StayStatus.STAYING: {StayStatus.CHECKED_OUT},
    StayStatus.CHECKED_OUT: set(),
    StayStatus.CANCELLED: set(),
}

TERMINAL_STATUSES: Final = frozenset({StayStatus.CHECKED_OUT, StayStatus.CANCELLED})


def _validate_status_transition(current: StayStatus, new: StayStatus) -> None:
    if current == new:
        return
    allowed = _ALLOWED_STATUS_TRANSITIONS.get(current, set())
    if new not in allowed:
        raise ConflictError(
            f"Cannot transition stay from {current.value} to {new.value}",
            details={"current": current.value, "requested": new.value},
        )


async def get_stay(session: AsyncSession, *, stay_id: uuid.UUID) -> Stay:
    stay = await session.get(Stay, stay_id)
    if stay is None:
        raise NotFoundError("Stay not found")
    return stay


async def book_stay(
    session: AsyncSession,
    *,
    client_id: uuid.UUID,
    pet_id: uuid.UUID,
    check_in: datetime,
    check_out: datetime,
    is_daycare: bool = False,
    charge_date: date | None = None,
    notes: str | None = None,
    use_plan: bool = True,
    notifier: CalendarNotifier | None = None,
    now: datetime | None = None,
) -> Stay:
    """Price and persist a stay; a usable daycare plan covers it in full.

    A plan-funded stay consumes one unit per billable day and is committed
    together with the redemption.
    """

    start = coerce_utc(check_in)
    end = coerce_utc(check_out)
    if end < start:
        raise ValidationError("Check-out cannot be before check-in")

    client, pet = await directory_service.get_client_and_pet(
        session, client_id=client_id, pet_id=pet_id
    )
    snapshot = await catalog_service.load_snapshot(session)
    quote = pricing_service.resolve_stay_price(
        snapshot, pet=pet, check_in=start, check_out=end
    )

    plan = None
    if use_plan:
        plan = await entitlement_service.find_applicable_plan(
            session,
            pet_id=pet.id,
            service_type=PlanServiceType.DAYCARE,
            now=now,
        )
    if plan is not None:
        try:
            await entitlement_service.redeem(
                session, client_plan_id=plan.id, units=quote.days
            )
        except ConflictError:
            await session.rollback()
            raise

    stay = Stay(
        client_id=client.id,
        pet_id=pet.id,
        check_in=start,
        check_out=end,
        daily_rate=quote.daily_rate,
        total_price=Decimal("0.00") if plan is not None else quote.total,
        is_daycare=is_daycare,
        status=StayStatus.RESERVED,
        payment_status=(
            PaymentStatus.EXEMPT if plan is not None else PaymentStatus.PENDING
        ),
        is_plan_usage=plan is not None,
        client_plan_id=plan.id if plan is not None else None,
        units_redeemed=quote.days if plan is not None else 0,
        charge_date=charge_date or local_date(end),
        notes=notes,
    )
    session.add(stay)
    await session.commit()
    await session.refresh(stay)
    logger.info(
        "Booked %s stay %s for pet %s (%s day(s), plan=%s)",
        "daycare" if is_daycare else "boarding",
        stay.id,
        pet.id,
        quote.days,
        stay.client_plan_id,
    )

    if notifier is not None:
        await calendar_sync_service.publish_booking(session, stay, notifier=notifier)
    return stay


async def cancel_stay(
    session: AsyncSession,
    *,
    stay_id: uuid.UUID,
    notifier: CalendarNotifier | None = None,
) -> Stay:
    stay = await get_stay(session, stay_id=stay_id)
    if stay.status in TERMINAL_STATUSES:
        raise ConflictError(
            f"Cannot cancel a {stay.status.value} stay",
            details={"status": stay.status.value},
        )

    stay.status = StayStatus.CANCELLED
    if stay.is_plan_usage and stay.client_plan_id is not None and stay.units_redeemed > 0:
        await entitlement_service.revert(
            session, client_plan_id=stay.client_plan_id, units=stay.units_redeemed
        )
    await session.commit()
    await session.refresh(stay)
    logger.info("Cancelled stay %s", stay.id)

    if notifier is not None:
        await calendar_sync_service.retract_booking(stay, notifier=notifier)
    return stay


async def update_status(
    session: AsyncSession,
    *,
    stay_id: uuid.UUID,
    new_status: StayStatus,
    notifier: CalendarNotifier | None = None,
) -> Stay:
    if new_status == StayStatus.CANCELLED:
        return await cancel_stay(session, stay_id=stay_id, notifier=notifier)

    stay = await get_stay(session, stay_id=stay_id)
    _validate_status_transition(stay.status, new_status)
    if stay.status == new_status:
        return stay
    stay.status = new_status
    await session.commit()
    await session.refresh(stay)
    return stay


async def update_charge_date(
    session: AsyncSession,
    *,
    stay_id: uuid.UUID,
    charge_date: date,
) -> Stay:
    stay = await get_stay(session, stay_id=stay_id)
    if stay.status == StayStatus.CANCELLED:
        raise ConflictError("Cannot change the charge date of a cancelled stay")
    stay.charge_date = charge_date
    await session.commit()
    await session.refresh(stay)
    return stay
