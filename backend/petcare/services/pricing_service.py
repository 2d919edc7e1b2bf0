"""Pricing engine for grooming appointments and boarding/daycare stays.

Resolution never fails: an unmatched pet profile falls back to a formula and a
missing boarding rate falls back to the medium rate and then a fixed default.
"""

from __future__ import annotations

import math
import uuid
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Final

from sqlalchemy.ext.asyncio import AsyncSession

from petcare.core.timezone import coerce_utc
from petcare.models import (
    CoatType,
    GroomingServiceType,
    LogisticsChoice,
    Pet,
    PriceRule,
    SizeCategory,
)
from petcare.services import catalog_service, directory_service
from petcare.services.catalog_service import CatalogSnapshot

MONEY_PLACES: Final = Decimal("0.01")
_WHOLE_UNIT: Final = Decimal("1")

FALLBACK_BASE_VALUES: Final[dict[GroomingServiceType, Decimal]] = {
    GroomingServiceType.BATH: Decimal("40"),
    GroomingServiceType.BATH_GROOMING: Decimal("70"),
}
SIZE_MULTIPLIERS: Final[dict[SizeCategory, Decimal]] = {
    SizeCategory.SMALL: Decimal("1.0"),
    SizeCategory.MEDIUM: Decimal("1.3"),
    SizeCategory.LARGE: Decimal("1.6"),
}
DEFAULT_DAILY_RATE: Final = Decimal("80.00")
_SECONDS_PER_DAY: Final = 24 * 60 * 60


@dataclass(slots=True)
class PriceBreakdown:
    """Price components of a grooming appointment."""

    base_price: Decimal
    addons_total: Decimal
    logistics_surcharge: Decimal
    total: Decimal

    def to_dict(self) -> dict[str, Any]:
        return {
            "base_price": _to_str(self.base_price),
            "addons_total": _to_str(self.addons_total),
            "logistics_surcharge": _to_str(self.logistics_surcharge),
            "total": _to_str(self.total),
        }


@dataclass(slots=True)
class StayQuote:
    """Price of a boarding or daycare stay."""

    days: int
    daily_rate: Decimal
    total: Decimal

    def to_dict(self) -> dict[str, Any]:
        return {
            "days": self.days,
            "daily_rate": _to_str(self.daily_rate),
            "total": _to_str(self.total),
        }


def _to_money(value: Decimal | float | str) -> Decimal:
    return Decimal(value).quantize(MONEY_PLACES, rounding=ROUND_HALF_UP)


def _to_str(value: Decimal) -> str:
    return f"{value.quantize(MONEY_PLACES, rounding=ROUND_HALF_UP):.2f}"


def _same_breed(rule_breed: str | None, pet_breed: str | None) -> bool:
    if not rule_breed or not pet_breed:
        return False
    return rule_breed.strip().casefold() == pet_breed.strip().casefold()


def _matches_breed_coat(
    rule: PriceRule, breed: str | None, coat_type: CoatType | None
) -> bool:
    return (
        _same_breed(rule.breed, breed)
        and rule.coat_type is not None
        and rule.coat_type == coat_type
    )


def _matches_size_coat(
    rule: PriceRule, size: SizeCategory | None, coat_type: CoatType | None
) -> bool:
    return (
        not rule.breed
        and rule.size is not None
        and rule.size == size
        and rule.coat_type is not None
        and rule.coat_type == coat_type
    )


def _matches_size(rule: PriceRule, size: SizeCategory | None) -> bool:
    return (
        not rule.breed
        and rule.coat_type is None
        and rule.size is not None
        and rule.size == size
    )


def fallback_base_price(
    service_type: GroomingServiceType, size: SizeCategory | None
) -> Decimal:
    """Formula price used when no catalog rule matches the pet."""

    multiplier = SIZE_MULTIPLIERS[size or SizeCategory.MEDIUM]
    raw = FALLBACK_BASE_VALUES[service_type] * multiplier
    return _to_money(raw.quantize(_WHOLE_UNIT, rounding=ROUND_HALF_UP))


def resolve_base_price(
    rules: Iterable[PriceRule],
    *,
    service_type: GroomingServiceType,
    breed: str | None,
    size: SizeCategory | None,
    coat_type: CoatType | None,
) -> Decimal:
    """Pick the most specific matching rule; the first match in a tier wins."""

    candidates = [
        rule
        for rule in rules
        if rule.active is not False and rule.service_type == service_type
    ]
    tiers = (
        lambda rule: _matches_breed_coat(rule, breed, coat_type),
        lambda rule: _matches_size_coat(rule, size, coat_type),
        lambda rule: _matches_size(rule, size),
    )
    for matches in tiers:
        for rule in candidates:
            if matches(rule):
                return _to_money(rule.price)
    return fallback_base_price(service_type, size)


def resolve_grooming_price(
    snapshot: CatalogSnapshot,
    *,
    service_type: GroomingServiceType,
    pet: Pet,
    addon_ids: Sequence[uuid.UUID] = (),
    logistics_choice: LogisticsChoice | None = None,
) -> PriceBreakdown:
    base_price = resolve_base_price(
        snapshot.price_rules,
        service_type=service_type,
        breed=pet.breed,
        size=pet.size,
        coat_type=pet.coat_type,
    )

    logistics_ids = snapshot.logistics_addon_ids
    addons_total = Decimal("0.00")
    for addon_id in dict.fromkeys(addon_ids):
        addon = snapshot.addons.get(addon_id)
        if addon is None or not addon.active or addon_id in logistics_ids:
            continue
        addons_total += _to_money(addon.price)

    logistics_surcharge = Decimal("0.00")
    if logistics_choice is not None:
        fee_addon_id = snapshot.logistics_fees.get(logistics_choice)
        fee_addon = snapshot.addons.get(fee_addon_id) if fee_addon_id else None
        if fee_addon is not None and fee_addon.active:
            logistics_surcharge = _to_money(fee_addon.price)

    total = max(base_price + addons_total + logistics_surcharge, Decimal("0.00"))
    return PriceBreakdown(
        base_price=base_price,
        addons_total=_to_money(addons_total),
        logistics_surcharge=logistics_surcharge,
        total=_to_money(total),
    )


def count_stay_days(check_in: datetime, check_out: datetime) -> int:
    """Billable days between check-in and check-out, never less than one."""

    elapsed = (coerce_utc(check_out) - coerce_utc(check_in)).total_seconds()
    return max(1, math.ceil(elapsed / _SECONDS_PER_DAY))


def resolve_daily_rate(snapshot: CatalogSnapshot, size: SizeCategory | None) -> Decimal:
    rates = snapshot.boarding_rates
    if size is not None and size in rates:
        return _to_money(rates[size])
    if SizeCategory.MEDIUM in rates:
        return _to_money(rates[SizeCategory.MEDIUM])
    return DEFAULT_DAILY_RATE


def resolve_stay_price(
    snapshot: CatalogSnapshot,
    *,
    pet: Pet,
    check_in: datetime,
    check_out: datetime,
) -> StayQuote:
    days = count_stay_days(check_in, check_out)
    daily_rate = resolve_daily_rate(snapshot, pet.size)
    return StayQuote(days=days, daily_rate=daily_rate, total=_to_money(daily_rate * days))


async def quote_grooming(
    session: AsyncSession,
    *,
    pet_id: uuid.UUID,
    service_type: GroomingServiceType,
    addon_ids: Sequence[uuid.UUID] = (),
    logistics_choice: LogisticsChoice | None = None,
) -> PriceBreakdown:
    """Price a grooming service for a stored pet against the stored catalog."""

    pet = await directory_service.get_pet(session, pet_id=pet_id)
    snapshot = await catalog_service.load_snapshot(session)
    return resolve_grooming_price(
        snapshot,
        service_type=service_type,
        pet=pet,
        addon_ids=addon_ids,
        logistics_choice=logistics_choice,
    )


async def quote_stay(
    session: AsyncSession,
    *,
    pet_id: uuid.UUID,
    check_in: datetime,
    check_out: datetime,
) -> StayQuote:
    pet = await directory_service.get_pet(session, pet_id=pet_id)
    snapshot = await catalog_service.load_snapshot(session)
    return resolve_stay_price(snapshot, pet=pet, check_in=check_in, check_out=check_out)
