"""Plan catalog and plan sales."""

from __future__ import annotations

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from petcare.api import deps
from petcare.schemas.plan import ClientPlanPurchase, ClientPlanRead, PlanDefinitionRead
from petcare.services import catalog_service, directory_service, entitlement_service

router = APIRouter()


@router.get(
    "/plans/definitions",
    response_model=list[PlanDefinitionRead],
    summary="List plans on sale",
)
async def list_definitions(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> list[PlanDefinitionRead]:
    definitions = await catalog_service.list_plan_definitions(session)
    return [PlanDefinitionRead.model_validate(item) for item in definitions]


@router.post(
    "/plans",
    response_model=ClientPlanRead,
    status_code=status.HTTP_201_CREATED,
    summary="Sell a plan",
)
async def purchase_plan(
    payload: ClientPlanPurchase,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> ClientPlanRead:
    plan = await entitlement_service.purchase_plan(
        session,
        client_id=payload.client_id,
        pet_id=payload.pet_id,
        plan_definition_id=payload.plan_definition_id,
    )
    return ClientPlanRead.model_validate(plan)


@router.get(
    "/pets/{pet_id}/plans",
    response_model=list[ClientPlanRead],
    summary="List a pet's plans",
)
async def list_pet_plans(
    pet_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    usable_only: bool = False,
) -> list[ClientPlanRead]:
    await directory_service.get_pet(session, pet_id=pet_id)
    plans = await entitlement_service.list_pet_plans(
        session, pet_id=pet_id, usable_only=usable_only
    )
    return [ClientPlanRead.model_validate(plan) for plan in plans]
