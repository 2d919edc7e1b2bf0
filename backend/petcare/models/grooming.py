"""Grooming domain models."""

from __future__ import annotations

import enum
import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from petcare.db.base import Base
from petcare.models.catalog import JSONB_TYPE, GroomingServiceType, LogisticsChoice
from petcare.models.mixins import TimestampMixin
from petcare.models.payment import PaymentMethod, PaymentStatus

if TYPE_CHECKING:  # pragma: no cover - typing only imports
    from petcare.models import Client, ClientPlan, Pet


class GroomingStyle(str, enum.Enum):
    """Clip styles offered with a bath + grooming service."""

    BABY = "baby"
    HYGIENIC = "hygienic"
    BREED_STANDARD = "breed_standard"
    SCISSORS = "scissors"
    MACHINE = "machine"


class GroomingAppointmentStatus(str, enum.Enum):
    """Lifecycle states for grooming appointments."""

    SCHEDULED = "scheduled"
    IN_SERVICE = "in_service"
    READY = "ready"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class WorkflowStage(str, enum.Enum):
    """Physical progress of the pet through the grooming room."""

    WAITING = "waiting"
    BATHING = "bathing"
    DRYING = "drying"
    GROOMING = "grooming"
    DONE = "done"


class GroomingAppointment(TimestampMixin, Base):
    """Scheduled grooming appointment for a pet."""

    __tablename__ = "grooming_appointments"
    __table_args__ = (
        Index("ix_grooming_appointments_start_at", "start_at"),
        Index("ix_grooming_appointments_charge_date", "charge_date"),
        Index("ix_grooming_appointments_client_plan", "client_plan_id"),
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
    service_type: Mapped[GroomingServiceType] = mapped_column(
        Enum(GroomingServiceType), nullable=False
    )
    grooming_style: Mapped[GroomingStyle | None] = mapped_column(
        Enum(GroomingStyle), nullable=True
    )
    start_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    price: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False, default=Decimal("0.00")
    )
    addon_ids: Mapped[list[Any]] = mapped_column(
        JSONB_TYPE, default=list, nullable=False
    )
    logistics_choice: Mapped[LogisticsChoice] = mapped_column(
        Enum(LogisticsChoice), nullable=False, default=LogisticsChoice.OWNER_OWNER
    )
    status: Mapped[GroomingAppointmentStatus] = mapped_column(
        Enum(GroomingAppointmentStatus),
        nullable=False,
        default=GroomingAppointmentStatus.SCHEDULED,
    )
    workflow_stage: Mapped[WorkflowStage] = mapped_column(
        Enum(WorkflowStage), nullable=False, default=WorkflowStage.WAITING
    )
    awaiting_payment: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
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


__all__ = [
    "GroomingAppointment",
    "GroomingAppointmentStatus",
    "GroomingStyle",
    "WorkflowStage",
]
