"""Translate domain errors into JSON responses."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from petcare.core.exceptions import DomainError, ExternalServiceError

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(DomainError)
    async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
        if isinstance(exc, ExternalServiceError):
            logger.warning("%s %s failed upstream: %s", request.method, request.url.path, exc)
        return JSONResponse(
            jsonable_encoder(exc.to_payload()),
            status_code=exc.status_code,
        )


__all__ = ["register_error_handlers"]
