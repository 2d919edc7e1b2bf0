"""Common API dependencies."""

from __future__ import annotations

from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession

from petcare.db.session import get_session
from petcare.integrations.calendar_webhook import (
    CalendarNotifier,
    build_calendar_notifier,
)


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Provide an async database session."""
    async for session in get_session():
        yield session


def get_calendar_notifier() -> CalendarNotifier:
    """Calendar notifier for booking create/cancel; overridden in tests."""
    return build_calendar_notifier()
