"""Boarding and daycare stay models."""

from __future__ import annotations

import enum
import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, Date, DateTime, Enum, ForeignKey, Index, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from petcare.db.base import Base
from petcare.models.mixins import TimestampMixin
from petcare.models.payment import PaymentMethod, PaymentStatus

if TYPE_CHECKING:  # pragma: no cover - typing only imports
    from petcare.models import Client, ClientPlan, Pet


class StayStatus(str, enum.Enum):
    """Lifecycle states for boarding and daycare stays."""

    RESERVED = "reserved"
    CHECKED_IN = "checked_in"
    STAYING = "staying"
    CHECKED_OUT = "checked_out"
    CANCELLED = "cancelled"


class Stay(TimestampMixin, Base):
    """A boarding (overnight) or daycare booking for a pet."""

    __tablename__ = "stays"
    __table_args__ = (
        Index("ix_stays_check_in", "check_in"),
        Index("ix_stays_charge_date", "charge_date"),
        Index("ix_stays_client_plan", "client_plan_id"),
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
    check_in: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    check_out: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    daily_rate: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    total_price: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False, default=Decimal("0.00")
    )
    is_daycare: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    status: Mapped[StayStatus] = mapped_column(
        Enum(StayStatus), nullable=False, default=StayStatus.RESERVED
    )
    payment_status: Mapped[PaymentStatus] = mapped_column(
        Enum(PaymentStatus), nullable=False, default=PaymentStatus.PENDING
    )
    payment_method: Mapped[PaymentMethod | None] = mapped_column(
        Enum(PaymentMethod), nullable=True
    )
    paid_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    is_plan_usage: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )
    client_plan_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("client_plans.id", ondelete="SET NULL"), nullable=True
    )
    units_redeemed: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    charge_date: Mapped[date] = mapped_column(Date(), nullable=False)
    notes: Mapped[str | None] = mapped_column(String(1024))
    external_event_id: Mapped[str | None] = mapped_column(String(255))

    client: Mapped["Client"] = relationship("Client")
    pet: Mapped["Pet"] = relationship("Pet")
    client_plan: Mapped["ClientPlan | None"] = relationship("ClientPlan")


__all__ = ["Stay", "StayStatus"]
