"""Cash register schemas."""

from __future__ import annotations

import uuid
from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from petcare.models import PaymentMethod, PaymentStatus
from petcare.services.reconciliation_service import ChargeKind


class PendingChargeRead(BaseModel):
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

    model_config = ConfigDict(from_attributes=True)


class ChargeSummaryRead(BaseModel):
    pending_total: Decimal
    received_total: Decimal
    pending_count: int
    paid_count: int

    model_config = ConfigDict(from_attributes=True)


class CashRegisterDayRead(BaseModel):
    """All charges of one day plus its totals."""

    target_date: date
    summary: ChargeSummaryRead
    items: list[PendingChargeRead]


class PaymentConfirm(BaseModel):
    """Settlement entered at the cash register."""

    kind: ChargeKind
    booking_id: uuid.UUID
    amount: Decimal = Field(ge=Decimal("0"))
    method: PaymentMethod
    is_early_payment: bool | None = None


class PaymentConfirmRead(BaseModel):
    kind: ChargeKind
    booking_id: uuid.UUID
    status: str
    payment_status: PaymentStatus
    payment_method: PaymentMethod | None
    paid_at: datetime | None
    amount: Decimal
