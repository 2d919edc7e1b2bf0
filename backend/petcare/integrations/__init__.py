"""Integration shortcuts."""

from .calendar_webhook import (
    CalendarEventPayload,
    CalendarNotifier,
    CalendarWebhookClient,
    CalendarWebhookError,
    NullCalendarNotifier,
    build_calendar_notifier,
)

__all__ = [
    "CalendarEventPayload",
    "CalendarNotifier",
    "CalendarWebhookClient",
    "CalendarWebhookError",
    "NullCalendarNotifier",
    "build_calendar_notifier",
]
