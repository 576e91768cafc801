"""Notification dispatchers for committed domain events."""

from eventcraft.infrastructure.notifications.dispatcher import (
    CompositeDispatcher,
    LoggingDispatcher,
    NotificationDispatcher,
    WebhookDispatcher,
    close_dispatcher,
    dispatch_safely,
)

__all__ = [
    "NotificationDispatcher",
    "LoggingDispatcher",
    "WebhookDispatcher",
    "CompositeDispatcher",
    "dispatch_safely",
    "close_dispatcher",
]
