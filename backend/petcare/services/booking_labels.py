"""Display labels for bookings (calendar events and cash register lines)."""

from __future__ import annotations

from collections.abc import Sequence

from petcare.models import (
    CoatType,
    GroomingServiceType,
    GroomingStyle,
    LogisticsChoice,
    SizeCategory,
)

SERVICE_LABELS: dict[GroomingServiceType, str] = {
    GroomingServiceType.BATH: "Bath",
    GroomingServiceType.BATH_GROOMING: "Bath + Grooming",
}

STYLE_LABELS: dict[GroomingStyle, str] = {
    GroomingStyle.BABY: "Baby clip",
    GroomingStyle.HYGIENIC: "Hygienic trim",
    GroomingStyle.BREED_STANDARD: "Breed standard",
    GroomingStyle.SCISSORS: "Scissor cut",
    GroomingStyle.MACHINE: "Machine cut",
}

LOGISTICS_LABELS: dict[LogisticsChoice, str] = {
    LogisticsChoice.OWNER_OWNER: "Owner drops off and picks up",
    LogisticsChoice.OWNER_COMPANY: "Owner drops off, we deliver home",
    LogisticsChoice.COMPANY_OWNER: "We pick up, owner collects",
    LogisticsChoice.COMPANY_COMPANY: "We pick up and deliver home",
}

SIZE_LABELS: dict[SizeCategory, str] = {
    SizeCategory.SMALL: "Small",
    SizeCategory.MEDIUM: "Medium",
    SizeCategory.LARGE: "Large",
}

COAT_LABELS: dict[CoatType, str] = {
    CoatType.SHORT: "Short",
    CoatType.MEDIUM: "Medium",
    CoatType.LONG: "Long",
}


def grooming_description(
    service_type: GroomingServiceType,
    style: GroomingStyle | None,
    addon_names: Sequence[str] = (),
) -> str:
    label = SERVICE_LABELS[service_type]
    if style is not None:
        label = f"{label} ({STYLE_LABELS[style]})"
    if addon_names:
        label = f"{label} + {', '.join(addon_names)}"
    return label


def stay_description(is_daycare: bool, days: int) -> str:
    kind = "Daycare" if is_daycare else "Boarding"
    unit = "day" if days == 1 else "days"
    return f"{kind} ({days} {unit})"
