"""Schema exports."""

from petcare.schemas.cash_register import (
    CashRegisterDayRead,
    ChargeSummaryRead,
    PaymentConfirm,
    PaymentConfirmRead,
    PendingChargeRead,
)
from petcare.schemas.grooming import (
    ChargeDateUpdate,
    GroomingAppointmentCreate,
    GroomingAppointmentRead,
    GroomingAppointmentStatusUpdate,
    WorkflowStageUpdate,
)
from petcare.schemas.plan import ClientPlanPurchase, ClientPlanRead, PlanDefinitionRead
from petcare.schemas.pricing import (
    GroomingQuoteRead,
    GroomingQuoteRequest,
    StayQuoteRead,
    StayQuoteRequest,
)
from petcare.schemas.stay import StayCreate, StayRead, StayStatusUpdate

__all__ = [
    "CashRegisterDayRead",
    "ChargeDateUpdate",
    "ChargeSummaryRead",
    "ClientPlanPurchase",
    "ClientPlanRead",
    "GroomingAppointmentCreate",
    "GroomingAppointmentRead",
    "GroomingAppointmentStatusUpdate",
    "GroomingQuoteRead",
    "GroomingQuoteRequest",
    "PaymentConfirm",
    "PaymentConfirmRead",
    "PendingChargeRead",
    "PlanDefinitionRead",
    "StayCreate",
    "StayQuoteRead",
    "StayQuoteRequest",
    "StayRead",
    "StayStatusUpdate",
    "WorkflowStageUpdate",
]
