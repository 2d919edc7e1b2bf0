"""Cash register: what is owed on a given day and how it gets settled.

The pending-charge list is rebuilt from the bookings on every call; nothing
about it is cached or stored.
"""

from __future__ import annotations

import enum
import logging
import uuid
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Final

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from petcare.core.exceptions import ConflictError, ValidationError
from petcare.core.timezone import business_today, coerce_utc, utcnow
from petcare.models import (
    SETTLED_PAYMENT_STATUSES,
    GroomingAppointment,
    GroomingAppointmentStatus,
    PaymentMethod,
    PaymentStatus,
    Stay,
    StayStatus,
)
from petcare.services import (
    catalog_service,
    directory_service,
    grooming_booking_service,
    pricing_service,
    stay_service,
)
from petcare.services.booking_labels import grooming_description, stay_description

logger = logging.getLogger(__name__)

_MONEY_PLACES: Final = Decimal("0.01")

TERMINAL_COMPLETE_STATUSES: Final[frozenset[str]] = frozenset(
    {GroomingAppointmentStatus.COMPLETED.value, StayStatus.CHECKED_OUT.value}
)


class ChargeKind(str, enum.Enum):
    """Booking kinds that reach the cash register."""

    GROOMING = "grooming"
    STAY = "stay"


@dataclass(slots=True)
class PendingChargeItem:
    """One line of the cash register for a day."""

    kind: ChargeKind
    booking_id: uuid.UUID
    client_id: uuid.UUID
    client_name: str
    pet_name: str
    description: str
    price: Decimal
    service_status: str
    payment_status: PaymentStatus
    payment_method: PaymentMethod | None
    is_paid: bool
    is_plan_usage: bool
    awaiting_payment: bool
    scheduled_at: datetime
    charge_date: date

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "booking_id": str(self.booking_id),
            "client_id": str(self.client_id),
            "client_name": self.client_name,
            "pet_name": self.pet_name,
            "description": self.description,
            "price": f"{self.price:.2f}",
            "service_status": self.service_status,
            "payment_status": self.payment_status.value,
            "payment_method": self.payment_method.value if self.payment_method else None,
            "is_paid": self.is_paid,
            "is_plan_usage": self.is_plan_usage,
            "awaiting_payment": self.awaiting_payment,
            "scheduled_at": self.scheduled_at.isoformat(),
            "charge_date": self.charge_date.isoformat(),
        }


@dataclass(slots=True)
class ChargeSummary:
    """Day totals shown above the cash register list."""

    pending_total: Decimal
    received_total: Decimal
    pending_count: int
    paid_count: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "pending_total": f"{self.pending_total:.2f}",
            "received_total": f"{self.received_total:.2f}",
            "pending_count": self.pending_count,
            "paid_count": self.paid_count,
        }


def _to_money(value: Decimal | float | str) -> Decimal:
    return Decimal(value).quantize(_MONEY_PLACES, rounding=ROUND_HALF_UP)


def _sort_key(item: PendingChargeItem) -> tuple[bool, bool, datetime, str]:
    return (
        item.is_paid,
        item.service_status not in TERMINAL_COMPLETE_STATUSES,
        item.scheduled_at,
        str(item.booking_id),
    )


def charge_is_early(charge_date: date, *, now: datetime | None = None) -> bool:
    """A charge is paid early when its day is still ahead in business time."""

    return charge_date > business_today(now)


def _grooming_item(
    appointment: GroomingAppointment, addon_names: dict[uuid.UUID, str]
) -> PendingChargeItem:
    names = [
        addon_names[uuid.UUID(str(addon_id))]
        for addon_id in appointment.addon_ids or []
        if uuid.UUID(str(addon_id)) in addon_names
    ]
    return PendingChargeItem(
        kind=ChargeKind.GROOMING,
        booking_id=appointment.id,
        client_id=appointment.client_id,
        client_name=appointment.client.name,
        pet_name=appointment.pet.name,
        description=grooming_description(
            appointment.service_type, appointment.grooming_style, names
        ),
        price=_to_money(appointment.price),
        service_status=appointment.status.value,
        payment_status=appointment.payment_status,
        payment_method=appointment.payment_method,
        is_paid=appointment.payment_status in SETTLED_PAYMENT_STATUSES,
        is_plan_usage=appointment.is_plan_usage,
        awaiting_payment=appointment.awaiting_payment,
        scheduled_at=coerce_utc(appointment.start_at),
        charge_date=appointment.charge_date,
    )


def _stay_item(stay: Stay) -> PendingChargeItem:
    days = pricing_service.count_stay_days(stay.check_in, stay.check_out)
    return PendingChargeItem(
        kind=ChargeKind.STAY,
        booking_id=stay.id,
        client_id=stay.client_id,
        client_name=stay.client.name,
        pet_name=stay.pet.name,
        description=stay_description(stay.is_daycare, days),
        price=_to_money(stay.total_price),
        service_status=stay.status.value,
        payment_status=stay.payment_status,
        payment_method=stay.payment_method,
        is_paid=stay.payment_status in SETTLED_PAYMENT_STATUSES,
        is_plan_usage=stay.is_plan_usage,
        awaiting_payment=(
            stay.status == StayStatus.CHECKED_OUT
            and stay.payment_status not in SETTLED_PAYMENT_STATUSES
        ),
        scheduled_at=coerce_utc(stay.check_in),
        charge_date=stay.charge_date,
    )


async def list_pending_charges(
    session: AsyncSession, *, target_date: date
) -> list[PendingChargeItem]:
    """Every non-cancelled booking charged on ``target_date``.

    Unpaid items come first; among them, finished services lead so the desk
    sees who is waiting to pay. Ties fall back to the scheduled time.
    """

    appointments_result = await session.execute(
        select(GroomingAppointment)
        .options(
            selectinload(GroomingAppointment.client),
            selectinload(GroomingAppointment.pet),
        )
        .where(
            GroomingAppointment.charge_date == target_date,
            GroomingAppointment.status != GroomingAppointmentStatus.CANCELLED,
        )
    )
    appointments = list(appointments_result.scalars().all())

    stays_result = await session.execute(
        select(Stay)
        .options(selectinload(Stay.client), selectinload(Stay.pet))
        .where(
            Stay.charge_date == target_date,
            Stay.status != StayStatus.CANCELLED,
        )
    )
    stays = list(stays_result.scalars().all())

    addon_names = await catalog_service.addon_name_map(
        session,
        (
            addon_id
            for appointment in appointments
            for addon_id in appointment.addon_ids or []
        ),
    )
    items = [_grooming_item(appointment, addon_names) for appointment in appointments]
    items.extend(_stay_item(stay) for stay in stays)
    items.sort(key=_sort_key)
    return items


def summarize_charges(items: Iterable[PendingChargeItem]) -> ChargeSummary:
    pending_total = Decimal("0.00")
    received_total = Decimal("0.00")
    pending_count = 0
    paid_count = 0
    for item in items:
        if item.is_paid:
            paid_count += 1
            if not item.is_plan_usage:
                received_total += item.price
        else:
            pending_count += 1
            pending_total += item.price
    return ChargeSummary(
        pending_total=_to_money(pending_total),
        received_total=_to_money(received_total),
        pending_count=pending_count,
        paid_count=paid_count,
    )


async def confirm_payment(
    session: AsyncSession,
    *,
    kind: ChargeKind,
    booking_id: uuid.UUID,
    amount: Decimal,
    method: PaymentMethod,
    is_early_payment: bool | None = None,
    now: datetime | None = None,
) -> GroomingAppointment | Stay:
    """Settle a booking at the cash register.

    The booking moves straight to its completed status and the settled amount
    replaces the stored price. Plan-funded bookings are closed out but keep
    their exempt status and zero price.
    """

    if amount < 0:
        raise ValidationError("Settled amount cannot be negative")

    booking: GroomingAppointment | Stay
    if kind == ChargeKind.GROOMING:
        booking = await grooming_booking_service.get_appointment(
            session, appointment_id=booking_id
        )
        cancelled = booking.status == GroomingAppointmentStatus.CANCELLED
        complete = GroomingAppointmentStatus.COMPLETED
    else:
        booking = await stay_service.get_stay(session, stay_id=booking_id)
        cancelled = booking.status == StayStatus.CANCELLED
        complete = StayStatus.CHECKED_OUT

    if cancelled:
        raise ConflictError("Cannot settle a cancelled booking")
    if booking.is_plan_usage:
        if booking.status == complete:
            raise ConflictError("Booking is already settled")
    elif booking.payment_status in SETTLED_PAYMENT_STATUSES:
        raise ConflictError(
            "Booking is already settled",
            details={"payment_status": booking.payment_status.value},
        )

    moment = coerce_utc(now or utcnow())
    early = (
        is_early_payment
        if is_early_payment is not None
        else charge_is_early(booking.charge_date, now=moment)
    )

    booking.status = complete
    if isinstance(booking, GroomingAppointment):
        booking.awaiting_payment = False
    if not booking.is_plan_usage:
        booking.payment_status = PaymentStatus.PAID_EARLY if early else PaymentStatus.PAID
        booking.payment_method = method
        booking.paid_at = moment
        if isinstance(booking, GroomingAppointment):
            booking.price = _to_money(amount)
        else:
            booking.total_price = _to_money(amount)

    client = await directory_service.get_client(session, client_id=booking.client_id)
    directory_service.touch_last_purchase(client, moment)
    await session.commit()
    await session.refresh(booking)
    logger.info(
        "Settled %s %s: %s via %s%s",
        kind.value,
        booking.id,
        "plan" if booking.is_plan_usage else _to_money(amount),
        method.value,
        " (early)" if early and not booking.is_plan_usage else "",
    )
    return booking
