"""Boarding and daycare stay API."""

from __future__ import annotations

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from petcare.api import deps
from petcare.integrations.calendar_webhook import CalendarNotifier
from petcare.schemas.grooming import ChargeDateUpdate
from petcare.schemas.stay import StayCreate, StayRead, StayStatusUpdate
from petcare.services import stay_service

router = APIRouter()


@router.post(
    "/stays",
    response_model=StayRead,
    status_code=status.HTTP_201_CREATED,
    summary="Book a stay",
)
async def create_stay(
    payload: StayCreate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    notifier: Annotated[CalendarNotifier, Depends(deps.get_calendar_notifier)],
) -> StayRead:
    stay = await stay_service.book_stay(
        session,
        client_id=payload.client_id,
        pet_id=payload.pet_id,
        check_in=payload.check_in,
        check_out=payload.check_out,
        is_daycare=payload.is_daycare,
        charge_date=payload.charge_date,
        notes=payload.notes,
        use_plan=payload.use_plan,
        notifier=notifier,
    )
    return StayRead.model_validate(stay)


@router.get("/stays/{stay_id}", response_model=StayRead, summary="Get a stay")
async def get_stay(
    stay_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> StayRead:
    stay = await stay_service.get_stay(session, stay_id=stay_id)
    return StayRead.model_validate(stay)


@router.patch(
    "/stays/{stay_id}/status",
    response_model=StayRead,
    summary="Advance stay status",
)
async def update_status(
    stay_id: uuid.UUID,
    payload: StayStatusUpdate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    notifier: Annotated[CalendarNotifier, Depends(deps.get_calendar_notifier)],
) -> StayRead:
    stay = await stay_service.update_status(
        session, stay_id=stay_id, new_status=payload.status, notifier=notifier
    )
    return StayRead.model_validate(stay)


@router.patch(
    "/stays/{stay_id}/charge-date",
    response_model=StayRead,
    summary="Move stay charge to another day",
)
async def update_charge_date(
    stay_id: uuid.UUID,
    payload: ChargeDateUpdate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> StayRead:
    stay = await stay_service.update_charge_date(
        session, stay_id=stay_id, charge_date=payload.charge_date
    )
    return StayRead.model_validate(stay)


@router.post("/stays/{stay_id}/cancel", response_model=StayRead, summary="Cancel a stay")
async def cancel(
    stay_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    notifier: Annotated[CalendarNotifier, Depends(deps.get_calendar_notifier)],
) -> StayRead:
    stay = await stay_service.cancel_stay(session, stay_id=stay_id, notifier=notifier)
    return StayRead.model_validate(stay)
