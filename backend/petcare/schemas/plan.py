"""Schemas for plan definitions and purchased client plans."""

from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict

from petcare.models import PlanServiceType


class PlanDefinitionRead(BaseModel):
    id: uuid.UUID
    name: str
    service_type: PlanServiceType
    total_units: int
    price: Decimal
    validity_days: int
    included_addons: list[dict[str, Any]]

    model_config = ConfigDict(from_attributes=True)


class ClientPlanPurchase(BaseModel):
    """Payload to sell a plan to a client for one of their pets."""

    client_id: uuid.UUID
    pet_id: uuid.UUID
    plan_definition_id: uuid.UUID


class ClientPlanRead(BaseModel):
    id: uuid.UUID
    client_id: uuid.UUID
    pet_id: uuid.UUID
    plan_definition_id: uuid.UUID
    service_type: PlanServiceType
    total_units: int
    used_units: int
    remaining_units: int
    price_paid: Decimal
    purchased_at: datetime
    expires_at: datetime
    active: bool

    model_config = ConfigDict(from_attributes=True)
