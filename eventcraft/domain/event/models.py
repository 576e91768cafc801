"""Event domain models.

``Event`` and ``Module`` are stored rows. ``EventGraph`` is the read
model assembled from them: the event with its modules and their tasks,
both in ascending order index.
"""

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, Field

from eventcraft.domain.task.models import Task
from eventcraft.domain.template.models import EventType, ModuleCategory


class EventStatus(str, Enum):
    """Lifecycle status of an event."""

    PLANNING = "PLANNING"
    CONFIRMED = "CONFIRMED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


# Events may only be deleted before work starts
DELETABLE_EVENT_STATES = frozenset({EventStatus.PLANNING, EventStatus.CONFIRMED})


class Event(BaseModel):
    """A live event, created from at most one template."""

    model_config = {"frozen": True}

    id: str
    name: str
    description: str | None = None
    event_type: EventType = EventType.CUSTOM
    status: EventStatus = EventStatus.PLANNING
    start_date: date
    end_date: date
    venue: str | None = None
    budget: float | None = None
    guest_count: int | None = None
    organization_id: str
    client_id: str
    manager_id: str
    template_id: str | None = None
    created_at: datetime | None = None


class Module(BaseModel):
    """A module instance owned by an event."""

    model_config = {"frozen": True}

    id: str
    event_id: str
    name: str
    description: str | None = None
    category: ModuleCategory
    budget: float | None = None
    estimated_days: int | None = None
    order: int = 0


class ModuleGraph(BaseModel):
    """A module with its tasks in ascending order."""

    module: Module
    tasks: list[Task] = Field(default_factory=list)


class EventGraph(BaseModel):
    """An event with its modules and tasks, fully resolved."""

    event: Event
    modules: list[ModuleGraph] = Field(default_factory=list)

    def all_tasks(self) -> list[Task]:
        """Every task of the event, module by module."""
        return [task for module in self.modules for task in module.tasks]

    def tasks_by_id(self) -> dict[str, Task]:
        return {task.id: task for task in self.all_tasks()}

    def find_task(self, task_id: str) -> Task | None:
        return self.tasks_by_id().get(task_id)

    def dependencies_of(self, task: Task) -> list[Task]:
        """Resolved dependency tasks of ``task``."""
        lookup = self.tasks_by_id()
        return [lookup[dep_id] for dep_id in task.dependency_ids if dep_id in lookup]

    def dependents_of(self, task_id: str) -> list[Task]:
        """Tasks that list ``task_id`` as a dependency."""
        return [task for task in self.all_tasks() if task_id in task.dependency_ids]

    def edge_count(self) -> int:
        return sum(len(task.dependency_ids) for task in self.all_tasks())
