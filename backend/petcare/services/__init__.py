"""Service layer exports."""
from petcare.services import (
    catalog_service,
    directory_service,
    pricing_service,
    entitlement_service,
    calendar_sync_service,
    grooming_booking_service,
    stay_service,
    reconciliation_service,
)

__all__ = [
    "calendar_sync_service",
    "catalog_service",
    "directory_service",
    "entitlement_service",
    "grooming_booking_service",
    "pricing_service",
    "reconciliation_service",
    "stay_service",
]
