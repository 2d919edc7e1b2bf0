"""Domain exceptions raised by the booking, ledger and reconciliation services.

Each error carries a human readable ``message`` and a stable ``code`` so the
API layer can surface a specific response per error kind. They subclass
``ValueError`` so callers that only care about "bad input" can keep catching
that.
"""

from __future__ import annotations

from typing import Any


class DomainError(ValueError):
    """Base exception for all domain-specific errors."""

    status_code: int = 400

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}
        super().__init__(message)

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"detail": self.message, "code": self.code}
        if self.details:
            payload["details"] = self.details
        return payload


class ValidationError(DomainError):
    """Missing required field or an invalid combination of values."""

    status_code = 422


class NotFoundError(DomainError):
    """A referenced client, pet, plan, add-on or booking does not exist."""

    status_code = 404


class ConflictError(DomainError):
    """Insufficient plan balance or an illegal state transition."""

    status_code = 409


class ExternalServiceError(DomainError):
    """The calendar notifier was unreachable or answered with an error."""

    status_code = 502


__all__ = [
    "ConflictError",
    "DomainError",
    "ExternalServiceError",
    "NotFoundError",
    "ValidationError",
]
