"""Dependency-aware task status state machine.

All functions in this module are pure - no I/O, no side effects.
The caller supplies the tasks of the owning event as a lookup so the
prerequisite rule can be evaluated.

States:
    PENDING -> IN_PROGRESS -> COMPLETED
    PENDING / IN_PROGRESS -> BLOCKED
    PENDING / IN_PROGRESS / BLOCKED -> CANCELLED
    COMPLETED and CANCELLED are terminal.
"""

from collections.abc import Iterable, Mapping
from datetime import datetime

from eventcraft.domain.shared import (
    DependencyNotSatisfied,
    Err,
    HasDependents,
    InvalidState,
    Ok,
    PlanningError,
    Result,
)

from .models import Task, TaskStatus

ALLOWED_TRANSITIONS: dict[TaskStatus, frozenset[TaskStatus]] = {
    TaskStatus.PENDING: frozenset(
        {TaskStatus.IN_PROGRESS, TaskStatus.COMPLETED, TaskStatus.BLOCKED, TaskStatus.CANCELLED}
    ),
    TaskStatus.IN_PROGRESS: frozenset(
        {TaskStatus.COMPLETED, TaskStatus.BLOCKED, TaskStatus.CANCELLED, TaskStatus.PENDING}
    ),
    TaskStatus.BLOCKED: frozenset(
        {TaskStatus.PENDING, TaskStatus.IN_PROGRESS, TaskStatus.CANCELLED}
    ),
    TaskStatus.COMPLETED: frozenset(),
    TaskStatus.CANCELLED: frozenset(),
}

# Entering these states means work has begun, so prerequisites must be done
WORK_STATES = frozenset({TaskStatus.IN_PROGRESS, TaskStatus.COMPLETED})

# Statuses that forbid deletion
UNDELETABLE_STATES = frozenset({TaskStatus.IN_PROGRESS, TaskStatus.COMPLETED})


def unmet_dependencies(task: Task, tasks_by_id: Mapping[str, Task]) -> list[Task]:
    """Return dependencies of ``task`` that are not COMPLETED.

    Args:
        task: The task whose prerequisites to check
        tasks_by_id: Every task of the owning event keyed by id

    Returns:
        Unfinished dependency tasks, in dependency order. A dependency id
        missing from the lookup counts as unmet.
    """
    unmet = []
    for dep_id in task.dependency_ids:
        dep = tasks_by_id.get(dep_id)
        if dep is None or dep.status != TaskStatus.COMPLETED:
            unmet.append(dep or Task(id=dep_id, event_id=task.event_id, module_id="", name=dep_id))
    return unmet


def can_start(task: Task, tasks_by_id: Mapping[str, Task]) -> bool:
    """True when every dependency of ``task`` is COMPLETED."""
    return not unmet_dependencies(task, tasks_by_id)


def started_dependents(task: Task, tasks: Iterable[Task]) -> list[Task]:
    """Dependents of ``task`` that have already entered work."""
    return [
        other
        for other in tasks
        if task.id in other.dependency_ids and other.status in WORK_STATES
    ]


def check_transition(
    task: Task,
    target: TaskStatus,
    tasks_by_id: Mapping[str, Task],
    allow_reopen: bool = False,
) -> Result[None, PlanningError]:
    """Validate a requested status change.

    Args:
        task: Task being changed
        target: Requested status
        tasks_by_id: Every task of the owning event keyed by id
        allow_reopen: Permit COMPLETED -> PENDING (administrators only)

    Returns:
        Ok(None) if the change may be applied, Err otherwise
    """
    if target == task.status:
        return Ok(None)

    if task.status == TaskStatus.COMPLETED and target == TaskStatus.PENDING and allow_reopen:
        started = started_dependents(task, tasks_by_id.values())
        if started:
            return Err(
                InvalidState(
                    f"Cannot reopen '{task.name}': dependent tasks already started",
                    task_id=task.id,
                    started_dependents=[t.id for t in started],
                )
            )
        return Ok(None)

    if target not in ALLOWED_TRANSITIONS[task.status]:
        return Err(
            InvalidState(
                f"Invalid transition: {task.status.value} -> {target.value}",
                task_id=task.id,
                from_status=task.status.value,
                to_status=target.value,
            )
        )

    if target in WORK_STATES:
        unmet = unmet_dependencies(task, tasks_by_id)
        if unmet:
            return Err(
                DependencyNotSatisfied(
                    task.id,
                    [{"id": dep.id, "name": dep.name, "status": dep.status.value} for dep in unmet],
                )
            )

    return Ok(None)


def apply_transition(task: Task, target: TaskStatus, now: datetime) -> Task:
    """Return a copy of ``task`` in ``target`` status.

    ``completed_at`` is stamped on entering COMPLETED and cleared on
    leaving it. Call ``check_transition`` first.
    """
    if target == task.status:
        return task
    completed_at = now if target == TaskStatus.COMPLETED else None
    return task.model_copy(
        update={"status": target, "completed_at": completed_at, "updated_at": now}
    )


def check_deletable(task: Task, tasks: Iterable[Task]) -> Result[None, PlanningError]:
    """Validate that ``task`` may be deleted from its event.

    Fails with HasDependents while any other task lists it as a
    dependency, and with InvalidState once work has begun on it.
    """
    dependents = [other for other in tasks if task.id in other.dependency_ids and other.id != task.id]
    if dependents:
        return Err(
            HasDependents(
                "Cannot delete task that has dependent tasks",
                task_id=task.id,
                dependents=[{"id": t.id, "name": t.name} for t in dependents],
            )
        )
    if task.status in UNDELETABLE_STATES:
        return Err(
            InvalidState(
                "Cannot delete task that is in progress or completed",
                task_id=task.id,
                status=task.status.value,
            )
        )
    return Ok(None)
