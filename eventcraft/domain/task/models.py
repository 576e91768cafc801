"""Task domain models.

Task instances live inside an event. Their dependency edges point at
other tasks of the same event, carried over from the template graph.
"""

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, Field

from eventcraft.domain.template.models import Priority


class TaskStatus(str, Enum):
    """Status of a task instance."""

    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    BLOCKED = "BLOCKED"
    CANCELLED = "CANCELLED"

    @property
    def is_terminal(self) -> bool:
        return self in (TaskStatus.COMPLETED, TaskStatus.CANCELLED)


class Task(BaseModel):
    """A live task belonging to one module of one event.

    Rows are immutable; services derive the next version with ``model_copy``.
    """

    model_config = {"frozen": True}

    id: str
    event_id: str
    module_id: str
    name: str
    description: str | None = None
    priority: Priority = Priority.MEDIUM
    estimated_hours: float = 0
    actual_hours: float = 0
    notes: str | None = None
    order: int = 0
    due_date: date | None = None
    status: TaskStatus = TaskStatus.PENDING
    assigned_to: str | None = None
    dependency_ids: tuple[str, ...] = ()
    completed_at: datetime | None = None
    updated_at: datetime | None = None


# Task fields an update may set back to None
CLEARABLE_FIELDS = frozenset({"notes", "assigned_to", "description", "due_date"})


class TaskUpdate(BaseModel):
    """Field changes requested for a task.

    Only the fields the caller actually set are applied; see
    ``changed_fields``. Unknown fields are rejected.
    """

    status: TaskStatus | None = None
    actual_hours: float | None = Field(default=None, ge=0)
    notes: str | None = None
    assigned_to: str | None = None
    name: str | None = Field(default=None, min_length=1)
    description: str | None = None
    priority: Priority | None = None
    estimated_hours: float | None = Field(default=None, ge=0)
    due_date: date | None = None

    model_config = {"extra": "forbid"}

    def changed_fields(self, task: Task) -> dict:
        """Return the explicitly set fields whose value differs from ``task``."""
        requested = self.model_dump(exclude_unset=True)
        return {
            key: value
            for key, value in requested.items()
            if (value is not None or key in CLEARABLE_FIELDS) and getattr(task, key) != value
        }
