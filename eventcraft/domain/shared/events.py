"""Base domain event infrastructure.

Domain events are immutable records of something that happened: an event
was instantiated from a template, a task was completed. They are handed to
the notification dispatcher after the owning transaction commits.

All events are pure data structures - no I/O, no side effects.
"""

from datetime import UTC, datetime
from uuid import uuid4

from pydantic import BaseModel, Field


class DomainEvent(BaseModel):
    """Base class for all domain events.

    Each event has a unique ID and a UTC timestamp.
    """

    event_id: str = Field(default_factory=lambda: str(uuid4()))
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))

    model_config = {"frozen": True}

    @property
    def name(self) -> str:
        """Return the event type name, e.g. ``TaskCompleted``."""
        return type(self).__name__
