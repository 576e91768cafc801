"""Task domain events.

Immutable records of task state changes, handed to the notification
dispatcher once the owning transaction commits.
"""

from eventcraft.domain.shared import DomainEvent


class TaskStatusChanged(DomainEvent):
    """Event raised whenever a task moves to a different status."""

    event_ref: str
    task_id: str
    task_name: str
    from_status: str
    to_status: str
    changed_by: str


class TaskCompleted(DomainEvent):
    """Event raised when a task is completed.

    Dependents of the task may now be startable.
    """

    event_ref: str
    task_id: str
    task_name: str
    completed_by: str
    unblocked_task_ids: list[str] = []


class TaskReassigned(DomainEvent):
    """Event raised when a manager changes a task's assignee."""

    event_ref: str
    task_id: str
    previous_assignee: str | None = None
    new_assignee: str | None = None
    reassigned_by: str


class TaskDeleted(DomainEvent):
    """Event raised when a task is removed from its event."""

    event_ref: str
    task_id: str
    deleted_by: str
