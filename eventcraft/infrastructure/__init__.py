"""Infrastructure layer for eventcraft.

This module provides the I/O side of the system: the transactional
store with its repositories, and notification dispatch.

Exports:
    Storage:
        - Database: Transactional entity store
        - JsonStorage: Low-level JSON snapshot I/O
        - TemplateRepository, MemberRepository, EventRepository

    Notifications:
        - NotificationDispatcher: Dispatcher protocol
        - LoggingDispatcher / WebhookDispatcher / CompositeDispatcher
        - dispatch_safely: Fire-and-forget helper
        - close_dispatcher: Release held connections
"""

from eventcraft.infrastructure.notifications import (
    CompositeDispatcher,
    LoggingDispatcher,
    NotificationDispatcher,
    WebhookDispatcher,
    close_dispatcher,
    dispatch_safely,
)
from eventcraft.infrastructure.storage import (
    Database,
    EventRepository,
    JsonStorage,
    MemberRepository,
    Session,
    StorageError,
    TemplateRepository,
)

__all__ = [
    # Storage
    "Database",
    "Session",
    "StorageError",
    "JsonStorage",
    "TemplateRepository",
    "MemberRepository",
    "EventRepository",
    # Notifications
    "NotificationDispatcher",
    "LoggingDispatcher",
    "WebhookDispatcher",
    "CompositeDispatcher",
    "dispatch_safely",
    "close_dispatcher",
]
