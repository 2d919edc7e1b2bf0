"""Pet profile model."""

from __future__ import annotations

import enum
import uuid
from typing import TYPE_CHECKING

from sqlalchemy import Enum, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from petcare.db.base import Base
from petcare.models.mixins import TimestampMixin

if TYPE_CHECKING:
    from petcare.models import Client


class SizeCategory(str, enum.Enum):
    """Size buckets that drive pricing tiers and boarding rates."""

    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"


class CoatType(str, enum.Enum):
    """Coat length buckets used by grooming price rules."""

    SHORT = "short"
    MEDIUM = "medium"
    LONG = "long"


class Pet(TimestampMixin, Base):
    """Represents a pet registered by a client."""

    __tablename__ = "pets"
    __table_args__ = (Index("ix_pets_client_id", "client_id"),)

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True, default=uuid.uuid4, unique=True
    )
    client_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("clients.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    species: Mapped[str] = mapped_column(String(64), nullable=False, default="dog")
    breed: Mapped[str | None] = mapped_column(String(120))
    size: Mapped[SizeCategory | None] = mapped_column(
        Enum(SizeCategory), nullable=True
    )
    coat_type: Mapped[CoatType | None] = mapped_column(Enum(CoatType), nullable=True)

    client: Mapped["Client"] = relationship("Client", back_populates="pets")


__all__ = ["CoatType", "Pet", "SizeCategory"]
