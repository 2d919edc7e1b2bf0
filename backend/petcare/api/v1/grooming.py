"""Grooming appointment booking and lifecycle API."""

from __future__ import annotations

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from petcare.api import deps
from petcare.integrations.calendar_webhook import CalendarNotifier
from petcare.schemas.grooming import (
    ChargeDateUpdate,
    GroomingAppointmentCreate,
    GroomingAppointmentRead,
    GroomingAppointmentStatusUpdate,
    WorkflowStageUpdate,
)
from petcare.services import grooming_booking_service

router = APIRouter()


@router.post(
    "/appointments",
    response_model=GroomingAppointmentRead,
    status_code=status.HTTP_201_CREATED,
    summary="Book grooming appointment",
)
async def create_appointment(
    payload: GroomingAppointmentCreate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    notifier: Annotated[CalendarNotifier, Depends(deps.get_calendar_notifier)],
) -> GroomingAppointmentRead:
    appointment = await grooming_booking_service.book_grooming(
        session,
        client_id=payload.client_id,
        pet_id=payload.pet_id,
        service_type=payload.service_type,
        grooming_style=payload.grooming_style,
        start_at=payload.start_at,
        end_at=payload.end_at,
        addon_ids=payload.addon_ids,
        logistics_choice=payload.logistics_choice,
        charge_date=payload.charge_date,
        notes=payload.notes,
        use_plan=payload.use_plan,
        notifier=notifier,
    )
    return GroomingAppointmentRead.model_validate(appointment)


@router.get(
    "/appointments/{appointment_id}",
    response_model=GroomingAppointmentRead,
    summary="Get grooming appointment",
)
async def get_appointment(
    appointment_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> GroomingAppointmentRead:
    appointment = await grooming_booking_service.get_appointment(
        session, appointment_id=appointment_id
    )
    return GroomingAppointmentRead.model_validate(appointment)


@router.patch(
    "/appointments/{appointment_id}/status",
    response_model=GroomingAppointmentRead,
    summary="Advance grooming appointment status",
)
async def update_status(
    appointment_id: uuid.UUID,
    payload: GroomingAppointmentStatusUpdate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    notifier: Annotated[CalendarNotifier, Depends(deps.get_calendar_notifier)],
) -> GroomingAppointmentRead:
    appointment = await grooming_booking_service.update_status(
        session,
        appointment_id=appointment_id,
        new_status=payload.status,
        notifier=notifier,
    )
    return GroomingAppointmentRead.model_validate(appointment)


@router.patch(
    "/appointments/{appointment_id}/workflow",
    response_model=GroomingAppointmentRead,
    summary="Set grooming workflow stage",
)
async def update_workflow_stage(
    appointment_id: uuid.UUID,
    payload: WorkflowStageUpdate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> GroomingAppointmentRead:
    appointment = await grooming_booking_service.set_workflow_stage(
        session, appointment_id=appointment_id, stage=payload.stage
    )
    return GroomingAppointmentRead.model_validate(appointment)


@router.patch(
    "/appointments/{appointment_id}/charge-date",
    response_model=GroomingAppointmentRead,
    summary="Move grooming charge to another day",
)
async def update_charge_date(
    appointment_id: uuid.UUID,
    payload: ChargeDateUpdate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> GroomingAppointmentRead:
    appointment = await grooming_booking_service.update_charge_date(
        session, appointment_id=appointment_id, charge_date=payload.charge_date
    )
    return GroomingAppointmentRead.model_validate(appointment)


@router.post(
    "/appointments/{appointment_id}/cancel",
    response_model=GroomingAppointmentRead,
    summary="Cancel grooming appointment",
)
async def cancel(
    appointment_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    notifier: Annotated[CalendarNotifier, Depends(deps.get_calendar_notifier)],
) -> GroomingAppointmentRead:
    appointment = await grooming_booking_service.cancel_appointment(
        session, appointment_id=appointment_id, notifier=notifier
    )
    return GroomingAppointmentRead.model_validate(appointment)
