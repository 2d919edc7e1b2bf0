"""Cash register: the day's charges and their settlement."""

from __future__ import annotations

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from petcare.api import deps
from petcare.core.timezone import business_today
from petcare.models import GroomingAppointment
from petcare.schemas.cash_register import (
    CashRegisterDayRead,
    ChargeSummaryRead,
    PaymentConfirm,
    PaymentConfirmRead,
    PendingChargeRead,
)
from petcare.services import reconciliation_service

router = APIRouter()


@router.get(
    "/cash-register",
    response_model=CashRegisterDayRead,
    summary="List charges for a day",
)
async def list_day(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    target_date: date | None = None,
) -> CashRegisterDayRead:
    day = target_date or business_today()
    items = await reconciliation_service.list_pending_charges(session, target_date=day)
    summary = reconciliation_service.summarize_charges(items)
    return CashRegisterDayRead(
        target_date=day,
        summary=ChargeSummaryRead.model_validate(summary),
        items=[PendingChargeRead.model_validate(item) for item in items],
    )


@router.post(
    "/cash-register/payments",
    response_model=PaymentConfirmRead,
    summary="Confirm a payment",
)
async def confirm_payment(
    payload: PaymentConfirm,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> PaymentConfirmRead:
    booking = await reconciliation_service.confirm_payment(
        session,
        kind=payload.kind,
        booking_id=payload.booking_id,
        amount=payload.amount,
        method=payload.method,
        is_early_payment=payload.is_early_payment,
    )
    amount = (
        booking.price
        if isinstance(booking, GroomingAppointment)
        else booking.total_price
    )
    return PaymentConfirmRead(
        kind=payload.kind,
        booking_id=booking.id,
        status=booking.status.value,
        payment_status=booking.payment_status,
        payment_method=booking.payment_method,
        paid_at=booking.paid_at,
        amount=amount,
    )
