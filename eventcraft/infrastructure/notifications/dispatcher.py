"""Notification dispatch for domain events.

The core hands a committed domain event to a dispatcher and forgets it.
Delivery, retries and channel selection belong to the dispatcher; a
failing dispatcher never fails the operation that emitted the event.
"""

import logging
from typing import Protocol

import httpx

from eventcraft.domain.shared import DomainEvent

logger = logging.getLogger(__name__)


class NotificationDispatcher(Protocol):
    """Anything that can accept a domain event."""

    def dispatch(self, event: DomainEvent) -> None: ...


class LoggingDispatcher:
    """Writes every event to the log. The default dispatcher."""

    def dispatch(self, event: DomainEvent) -> None:
        logger.info(f"{event.name}: {event.model_dump_json()}")


class WebhookDispatcher:
    """POSTs each event as JSON to a webhook URL.

    A client passed in stays owned by the caller; one created here is
    closed by ``close``.
    """

    def __init__(self, url: str, timeout: float = 5.0, client: httpx.Client | None = None) -> None:
        self.url = url
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=timeout)

    def dispatch(self, event: DomainEvent) -> None:
        payload = {"type": event.name, **event.model_dump(mode="json")}
        response = self._client.post(self.url, json=payload)
        response.raise_for_status()

    def close(self) -> None:
        if self._owns_client:
            self._client.close()


class CompositeDispatcher:
    """Fans an event out to several dispatchers.

    Each dispatcher is isolated from the others' failures.
    """

    def __init__(self, dispatchers: list[NotificationDispatcher]) -> None:
        self.dispatchers = dispatchers

    def dispatch(self, event: DomainEvent) -> None:
        for dispatcher in self.dispatchers:
            dispatch_safely(dispatcher, event)

    def close(self) -> None:
        for dispatcher in self.dispatchers:
            close_dispatcher(dispatcher)


def dispatch_safely(dispatcher: NotificationDispatcher | None, event: DomainEvent) -> None:
    """Hand ``event`` to ``dispatcher``, logging instead of raising on failure."""
    if dispatcher is None:
        return
    try:
        dispatcher.dispatch(event)
    except Exception as e:
        logger.warning(f"Dispatch of {event.name} failed: {e.__class__.__name__}: {e}")


def close_dispatcher(dispatcher: NotificationDispatcher | None) -> None:
    """Release whatever ``dispatcher`` holds open, if it holds anything."""
    close = getattr(dispatcher, "close", None)
    if close is not None:
        close()
