"""Template domain models.

A Template is the immutable blueprint of an event: ordered modules, each
holding ordered tasks that may depend on other tasks of the same template.
Uses Pydantic for serialization compatibility with the rest of the codebase.
"""

from enum import Enum

from pydantic import BaseModel, Field


class EventType(str, Enum):
    """Kind of event a template targets."""

    WEDDING = "WEDDING"
    BIRTHDAY = "BIRTHDAY"
    CORPORATE = "CORPORATE"
    ANNIVERSARY = "ANNIVERSARY"
    CUSTOM = "CUSTOM"


class ModuleCategory(str, Enum):
    """Service area a module covers."""

    VENUE = "VENUE"
    FOOD = "FOOD"
    DECORATION = "DECORATION"
    LIGHTING = "LIGHTING"
    PHOTOGRAPHY = "PHOTOGRAPHY"
    TRANSPORTATION = "TRANSPORTATION"
    COMMUNICATIONS = "COMMUNICATIONS"
    GIFTS = "GIFTS"
    SECURITY = "SECURITY"
    ENTERTAINMENT = "ENTERTAINMENT"


class Priority(str, Enum):
    """Task priority."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class TaskBlueprint(BaseModel):
    """A task inside a module blueprint.

    ``dependency_ids`` lists other TaskBlueprint ids of the same template
    that must complete before this task may start.
    """

    model_config = {"frozen": True}

    id: str
    name: str
    description: str | None = None
    priority: Priority = Priority.MEDIUM
    estimated_hours: float = Field(default=0, ge=0)
    order: int = Field(default=0, ge=0)
    dependency_ids: tuple[str, ...] = ()


class ModuleBlueprint(BaseModel):
    """A module inside a template, grouping tasks of one service area."""

    model_config = {"frozen": True}

    id: str
    name: str
    description: str | None = None
    category: ModuleCategory
    order: int = 0
    required: bool = False
    budget: float | None = None
    estimated_days: int | None = None
    tasks: tuple[TaskBlueprint, ...] = ()

    def ordered_tasks(self) -> list[TaskBlueprint]:
        """Tasks in ascending order index."""
        return sorted(self.tasks, key=lambda t: t.order)


class Template(BaseModel):
    """A reusable event blueprint.

    Public templates have no owning organization; private ones are only
    visible inside ``organization_id``.
    """

    model_config = {"frozen": True}

    id: str
    name: str
    description: str | None = None
    event_type: EventType = EventType.CUSTOM
    region: str | None = None
    is_public: bool = False
    organization_id: str | None = None
    modules: tuple[ModuleBlueprint, ...] = ()

    def ordered_modules(self) -> list[ModuleBlueprint]:
        """Modules in ascending order index."""
        return sorted(self.modules, key=lambda m: m.order)

    def all_tasks(self) -> list[TaskBlueprint]:
        """Every task blueprint across all modules."""
        return [task for module in self.modules for task in module.tasks]


class TemplateStats(BaseModel):
    """Listing view of a template with derived statistics."""

    template: Template
    total_modules: int
    total_tasks: int
    estimated_duration: int
    usage_count: int = 0
