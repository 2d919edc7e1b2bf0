"""Pricing schema definitions."""

from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from petcare.models import GroomingServiceType, LogisticsChoice


class GroomingQuoteRequest(BaseModel):
    """Input payload for pricing a grooming service for a pet."""

    pet_id: uuid.UUID
    service_type: GroomingServiceType
    addon_ids: list[uuid.UUID] = Field(default_factory=list)
    logistics_choice: LogisticsChoice | None = None


class GroomingQuoteRead(BaseModel):
    """Price breakdown of a grooming service."""

    base_price: Decimal
    addons_total: Decimal
    logistics_surcharge: Decimal
    total: Decimal

    model_config = ConfigDict(from_attributes=True)


class StayQuoteRequest(BaseModel):
    pet_id: uuid.UUID
    check_in: datetime
    check_out: datetime

    @model_validator(mode="after")
    def _check_order(self) -> "StayQuoteRequest":
        if self.check_out < self.check_in:
            raise ValueError("check_out cannot be before check_in")
        return self


class StayQuoteRead(BaseModel):
    days: int
    daily_rate: Decimal
    total: Decimal

    model_config = ConfigDict(from_attributes=True)
