"""Client plan (prepaid entitlement) model."""

from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    Numeric,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from petcare.db.base import Base
from petcare.models.catalog import PlanServiceType
from petcare.models.mixins import TimestampMixin

if TYPE_CHECKING:  # pragma: no cover - typing only imports
    from petcare.models import Client, Pet, PlanDefinition


class ClientPlan(TimestampMixin, Base):
    """A purchased plan instance whose units are consumed by bookings.

    ``used_units`` only moves through the entitlement ledger; the check
    constraint keeps it within ``[0, total_units]`` even if a writer forgets.
    """

    __tablename__ = "client_plans"
    __table_args__ = (
        CheckConstraint(
            "used_units >= 0 AND used_units <= total_units",
            name="used_units_within_total",
        ),
        Index("ix_client_plans_pet_service", "pet_id", "service_type"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True, default=uuid.uuid4, unique=True
    )
    client_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("clients.id", ondelete="CASCADE"), nullable=False
    )
    pet_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("pets.id", ondelete="CASCADE"), nullable=False
    )
    plan_definition_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("plan_definitions.id", ondelete="RESTRICT"), nullable=False
    )
    service_type: Mapped[PlanServiceType] = mapped_column(
        Enum(PlanServiceType), nullable=False
    )
    total_units: Mapped[int] = mapped_column(Integer, nullable=False)
    used_units: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    price_paid: Mapped[Decimal] = mapped_column(
        Numeric(10, 2), nullable=False, default=Decimal("0.00")
    )
    purchased_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )
    expires_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )
    active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    client: Mapped["Client"] = relationship("Client")
    pet: Mapped["Pet"] = relationship("Pet")
    plan_definition: Mapped["PlanDefinition"] = relationship("PlanDefinition")

    @property
    def remaining_units(self) -> int:
        return max(self.total_units - self.used_units, 0)


__all__ = ["ClientPlan"]
