"""Booking and lifecycle management for grooming appointments."""

from __future__ import annotations

import logging
import uuid
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Final, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from petcare.core.exceptions import ConflictError, NotFoundError, ValidationError
from petcare.core.timezone import coerce_utc, local_date
from petcare.integrations.calendar_webhook import CalendarNotifier
from petcare.models import (
    SETTLED_PAYMENT_STATUSES,
    GroomingAppointment,
    GroomingAppointmentStatus,
    GroomingServiceType,
    GroomingStyle,
    LogisticsChoice,
    PaymentStatus,
    PlanServiceType,
    WorkflowStage,
)
from petcare.services import (
    calendar_sync_service,
    catalog_service,
    directory_service,
    entitlement_service,
    pricing_service,
)

logger = logging.getLogger(__name__)

DEFAULT_DURATION: Final = timedelta(minutes=60)
GROOMING_UNITS_PER_VISIT: Final = 1

_ALLOWED_STATUS_TRANSITIONS: dict[
    GroomingAppointmentStatus, set[GroomingAppointmentStatus]
] = {
    GroomingAppointmentStatus.SCHEDULED: {GroomingAppointmentStatus.IN_SERVICE},
    GroomingAppointmentStatus.IN_SERVICE: {GroomingAppointmentStatus.READY},
    GroomingAppointmentStatus.READY: {GroomingAppointmentStatus.COMPLETED},
    GroomingAppointmentStatus.COMPLETED: set(),
    GroomingAppointmentStatus.CANCELLED: set(),
}

TERMINAL_STATUSES: Final = frozenset(
    {GroomingAppointmentStatus.COMPLETED, GroomingAppointmentStatus.CANCELLED}
)

# Statuses that reaching the ``done`` stage moves forward to ``ready``.
_BEFORE_READY: Final = frozenset(
    {GroomingAppointmentStatus.SCHEDULED, GroomingAppointmentStatus.IN_SERVICE}
)


def _validate_style(
    service_type: GroomingServiceType, grooming_style: GroomingStyle | None
) -> None:
    if service_type == GroomingServiceType.BATH_GROOMING and grooming_style is None:
        raise ValidationError("Bath + grooming requires a grooming style")
    if service_type == GroomingServiceType.BATH and grooming_style is not None:
        raise ValidationError("A bath-only appointment takes no grooming style")


def _validate_status_transition(
    current: GroomingAppointmentStatus, new: GroomingAppointmentStatus
) -> None:
    if current == new:
        return
    allowed = _ALLOWED_STATUS_TRANSITIONS.get(current, set())
    if new not in allowed:
        raise ConflictError(
            f"Cannot transition appointment from {current.value} to {new.value}",
            details={"current": current.value, "requested": new.value},
        )


async def get_appointment(
    session: AsyncSession, *, appointment_id: uuid.UUID
) -> GroomingAppointment:
    appointment = await session.get(GroomingAppointment, appointment_id)
    if appointment is None:
        raise NotFoundError("Grooming appointment not found")
    return appointment


async def book_grooming(
    session: AsyncSession,
    *,
    client_id: uuid.UUID,
    pet_id: uuid.UUID,
    service_type: GroomingServiceType,
    start_at: datetime,
    end_at: datetime | None = None,
    grooming_style: GroomingStyle | None = None,
    addon_ids: Sequence[uuid.UUID] = (),
    logistics_choice: LogisticsChoice = LogisticsChoice.OWNER_OWNER,
    charge_date: date | None = None,
    notes: str | None = None,
    use_plan: bool = True,
    notifier: CalendarNotifier | None = None,
    now: datetime | None = None,
) -> GroomingAppointment:
    """Price and persist a grooming appointment, drawing on a plan when one applies.

    The appointment and the plan redemption commit together. The calendar is
    notified only after the commit.
    """

    _validate_style(service_type, grooming_style)
    start = coerce_utc(start_at)
    end = coerce_utc(end_at) if end_at is not None else start + DEFAULT_DURATION
    if end <= start:
        raise ValidationError("Appointment end must be after its start")

    client, pet = await directory_service.get_client_and_pet(
        session, client_id=client_id, pet_id=pet_id
    )
    addons = await catalog_service.get_active_addons(session, addon_ids)
    snapshot = await catalog_service.load_snapshot(session)
    breakdown = pricing_service.resolve_grooming_price(
        snapshot,
        service_type=service_type,
        pet=pet,
        addon_ids=[addon.id for addon in addons],
        logistics_choice=logistics_choice,
    )

    plan = None
    if use_plan:
        plan = await entitlement_service.find_applicable_plan(
            session,
            pet_id=pet.id,
            service_type=PlanServiceType.GROOMING,
            now=now,
        )
    if plan is not None:
        try:
            await entitlement_service.redeem(
                session, client_plan_id=plan.id, units=GROOMING_UNITS_PER_VISIT
            )
        except ConflictError:
            await session.rollback()
            raise

    appointment = GroomingAppointment(
        client_id=client.id,
        pet_id=pet.id,
        service_type=service_type,
        grooming_style=grooming_style,
        start_at=start,
        end_at=end,
        price=Decimal("0.00") if plan is not None else breakdown.total,
        addon_ids=[str(addon.id) for addon in addons],
        logistics_choice=logistics_choice,
        status=GroomingAppointmentStatus.SCHEDULED,
        workflow_stage=WorkflowStage.WAITING,
        payment_status=(
            PaymentStatus.EXEMPT if plan is not None else PaymentStatus.PENDING
        ),
        is_plan_usage=plan is not None,
        client_plan_id=plan.id if plan is not None else None,
        units_redeemed=GROOMING_UNITS_PER_VISIT if plan is not None else 0,
        charge_date=charge_date or local_date(start),
        notes=notes,
    )
    session.add(appointment)
    await session.commit()
    await session.refresh(appointment)
    logger.info(
        "Booked grooming appointment %s for pet %s (%s, plan=%s)",
        appointment.id,
        pet.id,
        service_type.value,
        appointment.client_plan_id,
    )

    if notifier is not None:
        await calendar_sync_service.publish_booking(
            session, appointment, notifier=notifier
        )
    return appointment


async def cancel_appointment(
    session: AsyncSession,
    *,
    appointment_id: uuid.UUID,
    notifier: CalendarNotifier | None = None,
) -> GroomingAppointment:
    """Cancel a non-terminal appointment and give back the units it consumed."""

    appointment = await get_appointment(session, appointment_id=appointment_id)
    if appointment.status in TERMINAL_STATUSES:
        raise ConflictError(
            f"Cannot cancel a {appointment.status.value} appointment",
            details={"status": appointment.status.value},
        )

    appointment.status = GroomingAppointmentStatus.CANCELLED
    appointment.awaiting_payment = False
    if (
        appointment.is_plan_usage
        and appointment.client_plan_id is not None
        and appointment.units_redeemed > 0
    ):
        await entitlement_service.revert(
            session,
            client_plan_id=appointment.client_plan_id,
            units=appointment.units_redeemed,
        )
    await session.commit()
    await session.refresh(appointment)
    logger.info("Cancelled grooming appointment %s", appointment.id)

    if notifier is not None:
        await calendar_sync_service.retract_booking(appointment, notifier=notifier)
    return appointment


async def update_status(
    session: AsyncSession,
    *,
    appointment_id: uuid.UUID,
    new_status: GroomingAppointmentStatus,
    notifier: CalendarNotifier | None = None,
) -> GroomingAppointment:
    if new_status == GroomingAppointmentStatus.CANCELLED:
        return await cancel_appointment(
            session, appointment_id=appointment_id, notifier=notifier
        )

    appointment = await get_appointment(session, appointment_id=appointment_id)
    _validate_status_transition(appointment.status, new_status)
    if appointment.status == new_status:
        return appointment
    appointment.status = new_status
    await session.commit()
    await session.refresh(appointment)
    return appointment


async def set_workflow_stage(
    session: AsyncSession,
    *,
    appointment_id: uuid.UUID,
    stage: WorkflowStage,
) -> GroomingAppointment:
    """Move the pet between grooming-room stages.

    Stages may be set in any order until ``done``. Reaching ``done`` marks the
    appointment ready for pickup and flags it for the cash register when unpaid.
    """

    appointment = await get_appointment(session, appointment_id=appointment_id)
    if appointment.workflow_stage == stage:
        return appointment
    if appointment.workflow_stage == WorkflowStage.DONE:
        raise ConflictError("Workflow is already done for this appointment")
    if appointment.status in TERMINAL_STATUSES:
        raise ConflictError(
            f"Cannot change the workflow of a {appointment.status.value} appointment"
        )

    appointment.workflow_stage = stage
    if stage == WorkflowStage.DONE:
        if appointment.status in _BEFORE_READY:
            appointment.status = GroomingAppointmentStatus.READY
        if appointment.payment_status not in SETTLED_PAYMENT_STATUSES:
            appointment.awaiting_payment = True
    await session.commit()
    await session.refresh(appointment)
    return appointment


async def update_charge_date(
    session: AsyncSession,
    *,
    appointment_id: uuid.UUID,
    charge_date: date,
) -> GroomingAppointment:
    """Move the appointment's charge to another cash-register day."""

    appointment = await get_appointment(session, appointment_id=appointment_id)
    if appointment.status == GroomingAppointmentStatus.CANCELLED:
        raise ConflictError("Cannot change the charge date of a cancelled appointment")
    appointment.charge_date = charge_date
    await session.commit()
    await session.refresh(appointment)
    return appointment