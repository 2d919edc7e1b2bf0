"""Pydantic schemas for boarding and daycare stays."""

from __future__ import annotations

import uuid
from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from petcare.models import PaymentMethod, PaymentStatus, StayStatus


class StayCreate(BaseModel):
    client_id: uuid.UUID
    pet_id: uuid.UUID
    check_in: datetime
    check_out: datetime
    is_daycare: bool = False
    charge_date: date | None = None
    notes: str | None = Field(default=None, max_length=1024)
    use_plan: bool = True

    @model_validator(mode="after")
    def _check_order(self) -> "StayCreate":
        if self.check_out < self.check_in:
            raise ValueError("check_out cannot be before check_in")
        return self


class StayStatusUpdate(BaseModel):
    status: StayStatus


class StayRead(BaseModel):
    id: uuid.UUID
    client_id: uuid.UUID
    pet_id: uuid.UUID
    check_in: datetime
    check_out: datetime
    daily_rate: Decimal
    total_price: Decimal
    is_daycare: bool
    status: StayStatus
    payment_status: PaymentStatus
    payment_method: PaymentMethod | None
    paid_at: datetime | None
    is_plan_usage: bool
    client_plan_id: uuid.UUID | None
    units_redeemed: int
    charge_date: date
    notes: str | None
    external_event_id: str | None

    model_config = ConfigDict(from_attributes=True)
