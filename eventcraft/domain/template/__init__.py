"""Template domain - immutable event blueprints.

Key Types:
    Template - Reusable blueprint of modules and tasks
    ModuleBlueprint - Ordered group of task blueprints
    TaskBlueprint - Task with in-template dependency references
    TemplateStats - Listing view with derived counts

Functions:
    validate_template - Authoring checks (unique ids, resolvable, acyclic)
    find_cycle - DFS cycle search over a dependency map
    template_stats - Derived counts for listing views
"""

from .events import TemplateSaved
from .models import (
    EventType,
    ModuleBlueprint,
    ModuleCategory,
    Priority,
    TaskBlueprint,
    Template,
    TemplateStats,
)
from .validation import find_cycle, template_stats, validate_template

__all__ = [
    # Models
    "EventType",
    "ModuleCategory",
    "Priority",
    "Template",
    "ModuleBlueprint",
    "TaskBlueprint",
    "TemplateStats",
    # Validation
    "validate_template",
    "find_cycle",
    "template_stats",
    # Events
    "TemplateSaved",
]
