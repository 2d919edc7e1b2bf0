"""Read-only catalog tables: price rules, add-ons, boarding rates and plans."""

from __future__ import annotations

import enum
import uuid
from decimal import Decimal
from typing import Any

from sqlalchemy import (
    Boolean,
    Enum,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.types import JSON

from petcare.db.base import Base
from petcare.models.mixins import TimestampMixin
from petcare.models.pet import CoatType, SizeCategory

JSONB_TYPE = JSONB().with_variant(JSON(), "sqlite")


class GroomingServiceType(str, enum.Enum):
    """Grooming services offered at the counter."""

    BATH = "bath"
    BATH_GROOMING = "bath_grooming"


class PlanServiceType(str, enum.Enum):
    """Which kind of booking a prepaid plan can fund."""

    GROOMING = "grooming"
    DAYCARE = "daycare"


class LogisticsChoice(str, enum.Enum):
    """Who brings the pet in and who takes it home.

    The first half names the party doing the drop-off, the second the party
    doing the return trip.
    """

    OWNER_OWNER = "owner_owner"
    OWNER_COMPANY = "owner_company"
    COMPANY_OWNER = "company_owner"
    COMPANY_COMPANY = "company_company"


class PriceRule(TimestampMixin, Base):
    """Grooming price for a pet profile at some level of specificity."""

    __tablename__ = "price_rules"
    __table_args__ = (Index("ix_price_rules_service_type", "service_type"),)

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    service_type: Mapped[GroomingServiceType] = mapped_column(
        Enum(GroomingServiceType), nullable=False
    )
    breed: Mapped[str | None] = mapped_column(String(120))
    size: Mapped[SizeCategory | None] = mapped_column(Enum(SizeCategory))
    coat_type: Mapped[CoatType | None] = mapped_column(Enum(CoatType))
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)


class ServiceAddon(TimestampMixin, Base):
    """Optional extra sold alongside a grooming appointment."""

    __tablename__ = "service_addons"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    price: Mapped[Decimal] = mapped_column(
        Numeric(10, 2), nullable=False, default=Decimal("0.00")
    )
    active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)


class LogisticsFee(TimestampMixin, Base):
    """Maps a pickup/delivery combination to the add-on that prices it."""

    __tablename__ = "logistics_fees"
    __table_args__ = (
        UniqueConstraint("logistics_choice", name="uq_logistics_fees_choice"),
    )

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    logistics_choice: Mapped[LogisticsChoice] = mapped_column(
        Enum(LogisticsChoice), nullable=False
    )
    addon_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("service_addons.id", ondelete="CASCADE"), nullable=False
    )

    addon: Mapped["ServiceAddon"] = relationship("ServiceAddon")


class BoardingRate(TimestampMixin, Base):
    """Daily boarding/daycare rate for a size category."""

    __tablename__ = "boarding_rates"
    __table_args__ = (UniqueConstraint("size", name="uq_boarding_rates_size"),)

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    size: Mapped[SizeCategory] = mapped_column(Enum(SizeCategory), nullable=False)
    daily_rate: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)


class PlanDefinition(TimestampMixin, Base):
    """A prepaid bundle of service units offered for sale."""

    __tablename__ = "plan_definitions"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    service_type: Mapped[PlanServiceType] = mapped_column(
        Enum(PlanServiceType), nullable=False
    )
    total_units: Mapped[int] = mapped_column(Integer, nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    validity_days: Mapped[int] = mapped_column(Integer, nullable=False, default=90)
    included_addons: Mapped[list[dict[str, Any]]] = mapped_column(
        JSONB_TYPE, default=list, nullable=False
    )
    active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)


__all__ = [
    "BoardingRate",
    "GroomingServiceType",
    "LogisticsChoice",
    "LogisticsFee",
    "PlanDefinition",
    "PlanServiceType",
    "PriceRule",
    "ServiceAddon",
]
