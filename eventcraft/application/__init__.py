"""Application layer for eventcraft.

Services that orchestrate the domain against the store. Every service
returns a Result and runs its reads and writes in one transaction.

Exports:
    Instantiation:
        - instantiate: Clone a template into a live event
        - EventParams / Customizations / ModuleOverride: Input models
        - IdentityMapper: Blueprint-to-instance id tables

    Tasks:
        - transition: Status and field updates
        - delete_task: Remove an unstarted, undepended task
        - task_detail / TaskDetail: Task with computed schedule fields

    Templates:
        - save_template / get_template / list_templates

    Events:
        - event_summary / EventSummary: Graph plus progress
        - delete_event: Remove an unstarted event
"""

from eventcraft.application.event_service import EventSummary, delete_event, event_summary
from eventcraft.application.identity_mapper import IdentityMapper, IdentityTable, new_id
from eventcraft.application.instantiation_service import (
    Customizations,
    EventParams,
    ModuleOverride,
    instantiate,
)
from eventcraft.application.task_service import TaskDetail, delete_task, task_detail, transition
from eventcraft.application.template_service import (
    get_template,
    list_templates,
    parse_template,
    save_template,
)

__all__ = [
    # Instantiation
    "instantiate",
    "EventParams",
    "Customizations",
    "ModuleOverride",
    "IdentityMapper",
    "IdentityTable",
    "new_id",
    # Tasks
    "transition",
    "delete_task",
    "task_detail",
    "TaskDetail",
    # Templates
    "save_template",
    "get_template",
    "list_templates",
    "parse_template",
    # Events
    "event_summary",
    "delete_event",
    "EventSummary",
]
