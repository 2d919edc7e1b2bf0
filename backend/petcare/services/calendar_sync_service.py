"""Mirror bookings on the external calendar after they are committed.

Calendar calls happen outside the booking transaction: a failed call is logged
and never undoes the booking, and the event id the calendar hands back is
written in a separate best-effort commit.
"""

from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from petcare.core.timezone import coerce_utc
from petcare.integrations.calendar_webhook import CalendarEventPayload, CalendarNotifier
from petcare.models import GroomingAppointment, Stay
from petcare.services import catalog_service, directory_service, entitlement_service
from petcare.services.booking_labels import (
    COAT_LABELS,
    LOGISTICS_LABELS,
    SERVICE_LABELS,
    SIZE_LABELS,
    STYLE_LABELS,
)

logger = logging.getLogger(__name__)


async def _plan_addons(
    session: AsyncSession, booking: GroomingAppointment | Stay
) -> list[str]:
    if not booking.is_plan_usage or booking.client_plan_id is None:
        return []
    plan = await entitlement_service.get_plan(
        session, client_plan_id=booking.client_plan_id
    )
    names = await catalog_service.plan_addon_names(session, plan.plan_definition_id)
    return [f"{name} (plan)" for name in names]


async def build_grooming_payload(
    session: AsyncSession, appointment: GroomingAppointment
) -> CalendarEventPayload:
    client = await directory_service.get_client(session, client_id=appointment.client_id)
    pet = await directory_service.get_pet(session, pet_id=appointment.pet_id)
    addons = await catalog_service.addon_names(session, appointment.addon_ids or [])
    addons += await _plan_addons(session, appointment)
    return CalendarEventPayload(
        pet_name=pet.name,
        client_name=client.name,
        service=SERVICE_LABELS[appointment.service_type],
        start_date=coerce_utc(appointment.start_at).isoformat(),
        end_date=coerce_utc(appointment.end_at).isoformat(),
        price=appointment.price,
        pet_size=SIZE_LABELS[pet.size] if pet.size else None,
        hair_type=COAT_LABELS[pet.coat_type] if pet.coat_type else None,
        grooming_type=(
            STYLE_LABELS[appointment.grooming_style]
            if appointment.grooming_style
            else None
        ),
        transport_logistics=LOGISTICS_LABELS[appointment.logistics_choice],
        additional_services=addons,
        observations=appointment.notes,
    )


async def build_stay_payload(session: AsyncSession, stay: Stay) -> CalendarEventPayload:
    client = await directory_service.get_client(session, client_id=stay.client_id)
    pet = await directory_service.get_pet(session, pet_id=stay.pet_id)
    return CalendarEventPayload(
        pet_name=pet.name,
        client_name=client.name,
        service="Daycare" if stay.is_daycare else "Boarding",
        start_date=coerce_utc(stay.check_in).isoformat(),
        end_date=coerce_utc(stay.check_out).isoformat(),
        price=stay.total_price,
        pet_size=SIZE_LABELS[pet.size] if pet.size else None,
        additional_services=await _plan_addons(session, stay),
        observations=stay.notes,
    )


async def publish_booking(
    session: AsyncSession,
    booking: GroomingAppointment | Stay,
    *,
    notifier: CalendarNotifier,
) -> str | None:
    """Create the calendar event for a committed booking and store its id."""

    if isinstance(booking, GroomingAppointment):
        payload = await build_grooming_payload(session, booking)
    else:
        payload = await build_stay_payload(session, booking)

    try:
        external_id = await notifier.create_event(payload)
    except Exception as exc:  # the booking is already committed
        logger.warning(
            "Calendar sync failed for %s %s; booking kept: %s",
            type(booking).__name__,
            booking.id,
            exc,
            exc_info=True,
        )
        return None

    if not external_id:
        return None

    booking.external_event_id = external_id
    try:
        await session.commit()
    except SQLAlchemyError:
        await session.rollback()
        logger.exception(
            "Could not store calendar event %s on %s %s",
            external_id,
            type(booking).__name__,
            booking.id,
        )
        return None
    return external_id


async def retract_booking(
    booking: GroomingAppointment | Stay,
    *,
    notifier: CalendarNotifier,
) -> bool:
    """Delete the calendar event of a cancelled booking, if it has one."""

    if not booking.external_event_id:
        return False
    try:
        await notifier.delete_event(booking.external_event_id)
    except Exception as exc:
        logger.warning(
            "Calendar event %s for %s %s could not be removed: %s",
            booking.external_event_id,
            type(booking).__name__,
            booking.id,
            exc,
            exc_info=True,
        )
        return False
    return True
