"""Event domain - live events, their modules and progress.

Key Types:
    EventStatus - Event lifecycle enumeration
    Event - Event row
    Module - Module instance row
    EventGraph / ModuleGraph - Resolved read model
    ProgressSummary - Event and per-module completion figures

Progress Functions:
    module_progress - Percentage for one module
    event_progress - Percentage over all tasks of an event
    summarize_progress - Full progress view
"""

from .events import EventDeleted, EventInstantiated
from .models import (
    DELETABLE_EVENT_STATES,
    Event,
    EventGraph,
    EventStatus,
    Module,
    ModuleGraph,
)
from .progress import (
    ModuleProgress,
    ProgressSummary,
    event_progress,
    module_progress,
    percent,
    summarize_progress,
)

__all__ = [
    # Models
    "EventStatus",
    "DELETABLE_EVENT_STATES",
    "Event",
    "Module",
    "ModuleGraph",
    "EventGraph",
    # Progress
    "ModuleProgress",
    "ProgressSummary",
    "percent",
    "module_progress",
    "event_progress",
    "summarize_progress",
    # Events
    "EventInstantiated",
    "EventDeleted",
]
