"""Payment enumerations shared by grooming appointments and stays."""

from __future__ import annotations

import enum


class PaymentStatus(str, enum.Enum):
    """Settlement state of a booking's charge."""

    PENDING = "pending"
    PAID = "paid"
    PAID_EARLY = "paid_early"
    EXEMPT = "exempt"


SETTLED_PAYMENT_STATUSES = frozenset(
    {PaymentStatus.PAID, PaymentStatus.PAID_EARLY, PaymentStatus.EXEMPT}
)


class PaymentMethod(str, enum.Enum):
    """Tender types accepted at the cash register."""

    CASH = "cash"
    PIX = "pix"
    CREDIT = "credit"
    DEBIT = "debit"


__all__ = ["PaymentMethod", "PaymentStatus", "SETTLED_PAYMENT_STATUSES"]
