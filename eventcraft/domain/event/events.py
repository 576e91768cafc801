"""Event domain events."""

from eventcraft.domain.shared import DomainEvent


class EventInstantiated(DomainEvent):
    """Event raised when a template has been cloned into a new event.

    Emitted only after the instantiation transaction committed.
    """

    event_ref: str
    template_id: str
    created_by: str
    module_count: int
    task_count: int


class EventDeleted(DomainEvent):
    """Event raised when an event and all its children were removed."""

    event_ref: str
    deleted_by: str
