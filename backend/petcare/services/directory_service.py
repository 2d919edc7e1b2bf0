"""Client and pet lookups used by the booking services."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from petcare.core.exceptions import NotFoundError, ValidationError
from petcare.core.timezone import coerce_utc
from petcare.models import Client, Pet


async def get_client(session: AsyncSession, *, client_id: uuid.UUID) -> Client:
    client = await session.get(Client, client_id)
    if client is None:
        raise NotFoundError("Client not found")
    return client


async def get_pet(session: AsyncSession, *, pet_id: uuid.UUID) -> Pet:
    pet = await session.get(Pet, pet_id)
    if pet is None:
        raise NotFoundError("Pet not found")
    return pet


async def get_client_and_pet(
    session: AsyncSession,
    *,
    client_id: uuid.UUID,
    pet_id: uuid.UUID,
) -> tuple[Client, Pet]:
    """Load a client and one of their pets, rejecting mismatched owners."""

    client = await get_client(session, client_id=client_id)
    pet = await get_pet(session, pet_id=pet_id)
    if pet.client_id != client.id:
        raise ValidationError("Pet does not belong to the specified client")
    return client, pet


def touch_last_purchase(client: Client, moment: datetime) -> None:
    """Record a purchase on the client without letting the timestamp go backwards."""

    current = client.last_purchase_at
    if current is None or coerce_utc(current) <= coerce_utc(moment):
        client.last_purchase_at = moment
