"""Task application service.

Applies status transitions and field updates to task instances. Every
operation reads what it checks and writes what it changes inside one
store transaction, so a dependency cannot change between the
``can_start`` check and the status write.
"""

import logging
from collections.abc import Callable
from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from eventcraft.application.support import persistence_guarded, to_validation_error, utcnow
from eventcraft.domain.access import can_manage_event, can_view_task, check_field_updates
from eventcraft.domain.event import EventStatus
from eventcraft.domain.shared import (
    DomainEvent,
    Err,
    Forbidden,
    InvalidState,
    NotFound,
    Ok,
    PlanningError,
    Result,
)
from eventcraft.domain.task import (
    Task,
    TaskCompleted,
    TaskDeleted,
    TaskReassigned,
    TaskStatus,
    TaskStatusChanged,
    TaskUpdate,
    apply_transition,
    can_start,
    check_deletable,
    check_transition,
)
from eventcraft.infrastructure.notifications import NotificationDispatcher, dispatch_safely
from eventcraft.infrastructure.storage import Database, EventRepository, MemberRepository

logger = logging.getLogger(__name__)


class TaskDetail(BaseModel):
    """A task with the computed fields detail views need."""

    task: Task
    can_start: bool
    is_overdue: bool
    days_until_due: int | None = None
    dependencies: list[Task] = Field(default_factory=list)
    dependents: list[Task] = Field(default_factory=list)
    blocked_dependents: list[Task] = Field(default_factory=list)


def _parse_update(
    requested_status: TaskStatus | str | None,
    field_updates: TaskUpdate | dict[str, Any] | None,
) -> Result[TaskUpdate, PlanningError]:
    if isinstance(field_updates, TaskUpdate):
        raw = field_updates.model_dump(exclude_unset=True)
    else:
        raw = dict(field_updates or {})
    if requested_status is not None:
        raw["status"] = requested_status
    try:
        return Ok(TaskUpdate.model_validate(raw))
    except PydanticValidationError as e:
        return Err(to_validation_error("Invalid task update", e))


@persistence_guarded
def transition(
    db: Database,
    task_id: str,
    requested_status: TaskStatus | str | None,
    field_updates: TaskUpdate | dict[str, Any] | None,
    actor_id: str,
    dispatcher: NotificationDispatcher | None = None,
    clock: Callable[[], datetime] = utcnow,
) -> Result[Task, PlanningError]:
    """Change a task's status and/or fields on behalf of an actor.

    Args:
        db: The store.
        task_id: Task to change.
        requested_status: New status, or None to leave it.
        field_updates: Other field changes (actual_hours, notes, assigned_to, ...).
        actor_id: Member performing the change.
        dispatcher: Receives the resulting domain events after commit.
        clock: Source of completion/update timestamps.

    Returns:
        Ok(Task) with the stored task, or Err(PlanningError). Rejections
        leave the task untouched and are safe to retry later.
    """
    update_result = _parse_update(requested_status, field_updates)
    if isinstance(update_result, Err):
        return update_result
    update = update_result.value
    emitted: list[DomainEvent] = []

    with db.transaction() as session:
        members = MemberRepository(session)
        events = EventRepository(session)

        actor_result = members.get(actor_id)
        if isinstance(actor_result, Err):
            return actor_result
        actor = actor_result.value

        task_result = events.get_task(task_id)
        if isinstance(task_result, Err):
            return task_result
        task = task_result.value

        event_result = events.get(task.event_id)
        if isinstance(event_result, Err):
            return event_result
        event = event_result.value

        if not can_view_task(actor, event, task):
            return Err(NotFound("Task not found or not accessible", task_id=task_id))

        if event.status == EventStatus.CANCELLED:
            return Err(
                InvalidState("Cannot update tasks of a cancelled event", event_id=event.id, task_id=task_id)
            )

        changes = update.changed_fields(task)
        allowed = check_field_updates(actor, task, changes)
        if isinstance(allowed, Err):
            return allowed

        if "assigned_to" in changes:
            new_assignee = changes["assigned_to"]
            if new_assignee is not None and not members.in_organization(new_assignee, event.organization_id):
                return Err(
                    NotFound(
                        "Assigned user not found or not in the same organization",
                        assigned_to=new_assignee,
                    )
                )
            emitted.append(
                TaskReassigned(
                    event_ref=event.id,
                    task_id=task.id,
                    previous_assignee=task.assigned_to,
                    new_assignee=new_assignee,
                    reassigned_by=actor.id,
                )
            )

        now = clock()
        updated = task
        tasks_by_id = {t.id: t for t in events.tasks_of_event(event.id)}

        target = changes.pop("status", None)
        if target is not None:
            checked = check_transition(task, target, tasks_by_id, allow_reopen=actor.is_admin)
            if isinstance(checked, Err):
                logger.info(f"Rejected {task.id} {task.status.value} -> {target.value}: {checked.error.code}")
                return checked
            updated = apply_transition(updated, target, now)
            emitted.append(
                TaskStatusChanged(
                    event_ref=event.id,
                    task_id=task.id,
                    task_name=task.name,
                    from_status=task.status.value,
                    to_status=target.value,
                    changed_by=actor.id,
                )
            )

        if changes:
            updated = updated.model_copy(update={**changes, "updated_at": now})

        if updated is task:
            return Ok(task)

        events.save_task(updated)

        if target == TaskStatus.COMPLETED:
            tasks_by_id[updated.id] = updated
            unblocked = [
                t.id
                for t in tasks_by_id.values()
                if updated.id in t.dependency_ids
                and t.status == TaskStatus.PENDING
                and can_start(t, tasks_by_id)
            ]
            emitted.append(
                TaskCompleted(
                    event_ref=event.id,
                    task_id=updated.id,
                    task_name=updated.name,
                    completed_by=actor.id,
                    unblocked_task_ids=unblocked,
                )
            )

    if target is not None:
        logger.info(f"Task {task.id} {task.status.value} -> {updated.status.value} by {actor.id}")
    for domain_event in emitted:
        dispatch_safely(dispatcher, domain_event)
    return Ok(updated)


@persistence_guarded
def delete_task(
    db: Database,
    task_id: str,
    actor_id: str,
    dispatcher: NotificationDispatcher | None = None,
) -> Result[Task, PlanningError]:
    """Delete a task that nothing depends on and no one has started.

    Returns:
        Ok(Task) with the deleted task, or Err(PlanningError).
    """
    with db.transaction() as session:
        events = EventRepository(session)

        actor_result = MemberRepository(session).get(actor_id)
        if isinstance(actor_result, Err):
            return actor_result
        actor = actor_result.value
        if not actor.is_manager:
            return Err(Forbidden("Only managers and administrators can delete tasks", actor_id=actor.id))

        task_result = events.get_task(task_id)
        if isinstance(task_result, Err):
            return task_result
        task = task_result.value

        event_result = events.get(task.event_id)
        if isinstance(event_result, Err) or not can_manage_event(actor, event_result.value):
            return Err(NotFound("Task not found or not accessible", task_id=task_id))

        checked = check_deletable(task, events.tasks_of_event(task.event_id))
        if isinstance(checked, Err):
            return checked

        events.delete_task(task.id)

    logger.info(f"Deleted task {task.id} from event {task.event_id}")
    dispatch_safely(dispatcher, TaskDeleted(event_ref=task.event_id, task_id=task.id, deleted_by=actor.id))
    return Ok(task)


def task_detail(
    db: Database,
    task_id: str,
    actor_id: str,
    today: date | None = None,
) -> Result[TaskDetail, PlanningError]:
    """Load a task with its dependency context and schedule flags."""
    today = today or utcnow().date()

    with db.transaction() as session:
        events = EventRepository(session)

        actor_result = MemberRepository(session).get(actor_id)
        if isinstance(actor_result, Err):
            return actor_result

        task_result = events.get_task(task_id)
        if isinstance(task_result, Err):
            return task_result
        task = task_result.value

        event_result = events.get(task.event_id)
        if isinstance(event_result, Err) or not can_view_task(actor_result.value, event_result.value, task):
            return Err(NotFound("Task not found or not accessible", task_id=task_id))

        siblings = events.tasks_of_event(task.event_id)

    tasks_by_id = {t.id: t for t in siblings}
    dependents = [t for t in siblings if task.id in t.dependency_ids]
    return Ok(
        TaskDetail(
            task=task,
            can_start=can_start(task, tasks_by_id),
            is_overdue=(
                task.due_date is not None
                and task.due_date < today
                and task.status != TaskStatus.COMPLETED
            ),
            days_until_due=(task.due_date - today).days if task.due_date else None,
            dependencies=[tasks_by_id[d] for d in task.dependency_ids if d in tasks_by_id],
            dependents=dependents,
            blocked_dependents=[t for t in dependents if t.status == TaskStatus.PENDING],
        )
    )
