"""Price quotes for grooming services and stays."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from petcare.api import deps
from petcare.schemas.pricing import (
    GroomingQuoteRead,
    GroomingQuoteRequest,
    StayQuoteRead,
    StayQuoteRequest,
)
from petcare.services import pricing_service

router = APIRouter()


@router.post(
    "/quotes/grooming",
    response_model=GroomingQuoteRead,
    summary="Quote a grooming service",
)
async def quote_grooming(
    payload: GroomingQuoteRequest,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> GroomingQuoteRead:
    breakdown = await pricing_service.quote_grooming(
        session,
        pet_id=payload.pet_id,
        service_type=payload.service_type,
        addon_ids=payload.addon_ids,
        logistics_choice=payload.logistics_choice,
    )
    return GroomingQuoteRead.model_validate(breakdown)


@router.post(
    "/quotes/stay",
    response_model=StayQuoteRead,
    summary="Quote a boarding or daycare stay",
)
async def quote_stay(
    payload: StayQuoteRequest,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> StayQuoteRead:
    quote = await pricing_service.quote_stay(
        session,
        pet_id=payload.pet_id,
        check_in=payload.check_in,
        check_out=payload.check_out,
    )
    return StayQuoteRead.model_validate(quote)
