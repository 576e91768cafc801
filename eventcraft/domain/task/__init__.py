"""Task domain - live task instances and their status state machine.

All exports are pure (no I/O, no side effects).

Key Types:
    TaskStatus - Task state enumeration
    Task - Task instance with same-event dependency edges
    TaskUpdate - Requested field changes

State Machine:
    ALLOWED_TRANSITIONS - Status transition table
    can_start - All dependencies completed?
    unmet_dependencies - Dependencies still outstanding
    check_transition - Validate a status change
    apply_transition - Apply a validated status change
    check_deletable - Validate a deletion

Domain Events:
    TaskStatusChanged - Status moved
    TaskCompleted - Task finished
    TaskReassigned - Assignee changed
    TaskDeleted - Task removed
"""

from .events import TaskCompleted, TaskDeleted, TaskReassigned, TaskStatusChanged
from .models import Task, TaskStatus, TaskUpdate
from .state_machine import (
    ALLOWED_TRANSITIONS,
    UNDELETABLE_STATES,
    WORK_STATES,
    apply_transition,
    can_start,
    check_deletable,
    check_transition,
    started_dependents,
    unmet_dependencies,
)

__all__ = [
    # Models
    "TaskStatus",
    "Task",
    "TaskUpdate",
    # State machine
    "ALLOWED_TRANSITIONS",
    "WORK_STATES",
    "UNDELETABLE_STATES",
    "can_start",
    "unmet_dependencies",
    "started_dependents",
    "check_transition",
    "apply_transition",
    "check_deletable",
    # Events
    "TaskStatusChanged",
    "TaskCompleted",
    "TaskReassigned",
    "TaskDeleted",
]
