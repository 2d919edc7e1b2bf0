"""Health check endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from petcare.api import deps
from petcare.core.config import get_settings
from petcare.core.timezone import business_today, utcnow

router = APIRouter()


@router.get("", summary="Service health status")
async def healthcheck(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> dict[str, str]:
    """Report database reachability and the business day the cash register uses."""
    settings = get_settings()
    await session.execute(text("SELECT 1"))
    return {
        "status": "ok",
        "service": settings.app_name,
        "environment": settings.app_env,
        "timestamp": utcnow().isoformat(),
        "business_date": business_today().isoformat(),
        "business_timezone": settings.business_timezone,
    }
