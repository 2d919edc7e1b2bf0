"""ORM models package export."""

from petcare.models.catalog import (
    BoardingRate,
    GroomingServiceType,
    LogisticsChoice,
    LogisticsFee,
    PlanDefinition,
    PlanServiceType,
    PriceRule,
    ServiceAddon,
)
from petcare.models.client import Client
from petcare.models.grooming import (
    GroomingAppointment,
    GroomingAppointmentStatus,
    GroomingStyle,
    WorkflowStage,
)
from petcare.models.payment import (
    SETTLED_PAYMENT_STATUSES,
    PaymentMethod,
    PaymentStatus,
)
from petcare.models.pet import CoatType, Pet, SizeCategory
from petcare.models.plan import ClientPlan
from petcare.models.stay import Stay, StayStatus

__all__ = [
    "BoardingRate",
    "Client",
    "ClientPlan",
    "CoatType",
    "GroomingAppointment",
    "GroomingAppointmentStatus",
    "GroomingServiceType",
    "GroomingStyle",
    "LogisticsChoice",
    "LogisticsFee",
    "PaymentMethod",
    "PaymentStatus",
    "Pet",
    "PlanDefinition",
    "PlanServiceType",
    "PriceRule",
    "SETTLED_PAYMENT_STATUSES",
    "ServiceAddon",
    "SizeCategory",
    "Stay",
    "StayStatus",
    "WorkflowStage",
]
