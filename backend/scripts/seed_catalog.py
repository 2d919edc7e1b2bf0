"""Seed a default pricing catalog: size rules, add-ons, logistics fees, rates and plans."""

from __future__ import annotations

import asyncio
from decimal import Decimal

from sqlalchemy import select

from petcare.db.session import get_sessionmaker
from petcare.models import (
    BoardingRate,
    GroomingServiceType,
    LogisticsChoice,
    LogisticsFee,
    PlanDefinition,
    PlanServiceType,
    PriceRule,
    ServiceAddon,
    SizeCategory,
)

SIZE_PRICES: dict[GroomingServiceType, dict[SizeCategory, Decimal]] = {
    GroomingServiceType.BATH: {
        SizeCategory.SMALL: Decimal("45.00"),
        SizeCategory.MEDIUM: Decimal("55.00"),
        SizeCategory.LARGE: Decimal("70.00"),
    },
    GroomingServiceType.BATH_GROOMING: {
        SizeCategory.SMALL: Decimal("75.00"),
        SizeCategory.MEDIUM: Decimal("95.00"),
        SizeCategory.LARGE: Decimal("120.00"),
    },
}

ADDONS: dict[str, Decimal] = {
    "Hydration": Decimal("25.00"),
    "Teeth brushing": Decimal("15.00"),
    "Nail trim": Decimal("10.00"),
}

LOGISTICS_ADDONS: dict[LogisticsChoice, tuple[str, Decimal]] = {
    LogisticsChoice.OWNER_COMPANY: ("Home delivery", Decimal("15.00")),
    LogisticsChoice.COMPANY_OWNER: ("Home pickup", Decimal("15.00")),
    LogisticsChoice.COMPANY_COMPANY: ("Pickup and delivery", Decimal("25.00")),
}

BOARDING_RATES: dict[SizeCategory, Decimal] = {
    SizeCategory.SMALL: Decimal("70.00"),
    SizeCategory.MEDIUM: Decimal("80.00"),
    SizeCategory.LARGE: Decimal("95.00"),
}

PLANS: list[tuple[str, PlanServiceType, int, Decimal]] = [
    ("4 baths", PlanServiceType.GROOMING, 4, Decimal("160.00")),
    ("8 baths", PlanServiceType.GROOMING, 8, Decimal("300.00")),
    ("10 daycare days", PlanServiceType.DAYCARE, 10, Decimal("650.00")),
]


async def seed_catalog() -> None:
    sessionmaker = get_sessionmaker()
    async with sessionmaker() as session:
        created = 0

        existing_rules = (await session.execute(select(PriceRule))).scalars().all()
        seen_rules = {
            (rule.service_type, rule.size)
            for rule in existing_rules
            if not rule.breed and rule.coat_type is None
        }
        for service_type, prices in SIZE_PRICES.items():
            for size, price in prices.items():
                if (service_type, size) in seen_rules:
                    continue
                session.add(PriceRule(service_type=service_type, size=size, price=price))
                created += 1

        addons_by_name = {
            addon.name: addon
            for addon in (await session.execute(select(ServiceAddon))).scalars().all()
        }
        for name, price in ADDONS.items():
            if name not in addons_by_name:
                addon = ServiceAddon(name=name, price=price)
                session.add(addon)
                addons_by_name[name] = addon
                created += 1

        fees = {
            fee.logistics_choice
            for fee in (await session.execute(select(LogisticsFee))).scalars().all()
        }
        for choice, (name, price) in LOGISTICS_ADDONS.items():
            addon = addons_by_name.get(name)
            if addon is None:
                addon = ServiceAddon(name=name, price=price)
                session.add(addon)
                addons_by_name[name] = addon
                created += 1
            if choice not in fees:
                await session.flush()
                session.add(LogisticsFee(logistics_choice=choice, addon_id=addon.id))
                created += 1

        rates = {
            rate.size
            for rate in (await session.execute(select(BoardingRate))).scalars().all()
        }
        for size, daily_rate in BOARDING_RATES.items():
            if size not in rates:
                session.add(BoardingRate(size=size, daily_rate=daily_rate))
                created += 1

        plan_names = {
            plan.name
            for plan in (await session.execute(select(PlanDefinition))).scalars().all()
        }
        for name, service_type, units, price in PLANS:
            if name not in plan_names:
                session.add(
                    PlanDefinition(
                        name=name,
                        service_type=service_type,
                        total_units=units,
                        price=price,
                        validity_days=90,
                        included_addons=[],
                    )
                )
                created += 1

        if created:
            await session.commit()

        print(f"Seeded {created} catalog row(s).")


def main() -> None:
    asyncio.run(seed_catalog())


if __name__ == "__main__":
    main()
