"""Pydantic schemas for grooming endpoints."""

from __future__ import annotations

import uuid
from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from petcare.models import (
    GroomingAppointmentStatus,
    GroomingServiceType,
    GroomingStyle,
    LogisticsChoice,
    PaymentMethod,
    PaymentStatus,
    WorkflowStage,
)


class GroomingAppointmentCreate(BaseModel):
    """Payload to book a grooming appointment."""

    client_id: uuid.UUID
    pet_id: uuid.UUID
    service_type: GroomingServiceType
    grooming_style: GroomingStyle | None = None
    start_at: datetime
    end_at: datetime | None = None
    addon_ids: list[uuid.UUID] = Field(default_factory=list)
    logistics_choice: LogisticsChoice = LogisticsChoice.OWNER_OWNER
    charge_date: date | None = None
    notes: str | None = Field(default=None, max_length=1024)
    use_plan: bool = True


class GroomingAppointmentStatusUpdate(BaseModel):
    status: GroomingAppointmentStatus


class WorkflowStageUpdate(BaseModel):
    stage: WorkflowStage


class ChargeDateUpdate(BaseModel):
    """Move a booking's charge to another cash-register day."""

    charge_date: date


class GroomingAppointmentRead(BaseModel):
    id: uuid.UUID
    client_id: uuid.UUID
    pet_id: uuid.UUID
    service_type: GroomingServiceType
    grooming_style: GroomingStyle | None
    start_at: datetime
    end_at: datetime
    price: Decimal
    addon_ids: list[uuid.UUID]
    logistics_choice: LogisticsChoice
    status: GroomingAppointmentStatus
    workflow_stage: WorkflowStage
    awaiting_payment: bool
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
