"""Role-based access rules.

Pure predicates over members, templates and events, plus the field
allow-list that limits what a non-manager may change on a task. Adding a
constrained role is a one-line change to ``FIELD_ALLOW_LIST``.
"""

from collections.abc import Iterable

from eventcraft.domain.event.models import Event
from eventcraft.domain.shared import Err, Forbidden, Ok, Result
from eventcraft.domain.task.models import Task
from eventcraft.domain.template.models import Template

from .models import Member, Role

# Fields an assignee may change on their own task
ASSIGNEE_FIELDS = frozenset({"status", "actual_hours", "notes"})

# None means unrestricted, empty means read-only
FIELD_ALLOW_LIST: dict[Role, frozenset[str] | None] = {
    Role.ADMINISTRATOR: None,
    Role.MANAGER: None,
    Role.VENDOR: ASSIGNEE_FIELDS,
    Role.CLIENT: frozenset(),
}


def can_view_template(member: Member, template: Template) -> bool:
    """Administrators see all; others see public and own-organization templates."""
    if member.is_admin or template.is_public:
        return True
    return template.organization_id is not None and template.organization_id == member.organization_id


def can_view_event(member: Member, event: Event, tasks: Iterable[Task] = ()) -> bool:
    """Whether ``member`` may read ``event`` at all.

    Vendors see events they manage or hold a task in; pass the event's
    tasks for the second check.
    """
    if member.is_admin:
        return True
    if member.role == Role.CLIENT:
        return event.client_id == member.id
    if event.manager_id == member.id:
        return True
    if member.role == Role.VENDOR:
        return any(task.assigned_to == member.id for task in tasks)
    return event.organization_id == member.organization_id


def can_manage_event(member: Member, event: Event) -> bool:
    """Whether ``member`` may change or delete ``event`` and its structure."""
    if member.is_admin:
        return True
    return member.role == Role.MANAGER and (
        event.manager_id == member.id or event.organization_id == member.organization_id
    )


def can_view_task(member: Member, event: Event, task: Task) -> bool:
    """Whether ``member`` may see ``task`` of ``event``."""
    if member.role == Role.VENDOR:
        return task.assigned_to == member.id or event.manager_id == member.id
    return can_view_event(member, event)


def check_field_updates(
    member: Member,
    task: Task,
    fields: Iterable[str],
) -> Result[None, Forbidden]:
    """Apply the per-role allow-list to the fields being changed.

    Args:
        member: The acting member
        task: The task being changed
        fields: Names of the fields whose value would change

    Returns:
        Ok(None) if permitted, Err(Forbidden) naming the rejected fields
    """
    fields = set(fields)
    allowed = FIELD_ALLOW_LIST.get(member.role, frozenset())
    if allowed is None or not fields:
        return Ok(None)
    if not allowed:
        return Err(
            Forbidden(
                f"{member.role.value.capitalize()} members cannot change tasks",
                task_id=task.id,
                fields=sorted(fields),
            )
        )

    if task.assigned_to != member.id:
        return Err(
            Forbidden(
                "Only the assignee or a manager can update this task",
                task_id=task.id,
                fields=sorted(fields),
            )
        )

    if "assigned_to" in fields:
        return Err(Forbidden("Only managers can reassign tasks", task_id=task.id))

    rejected = sorted(fields - allowed)
    if rejected:
        return Err(
            Forbidden(
                "You can only update status, actual hours, and notes",
                task_id=task.id,
                forbidden_fields=rejected,
                allowed_fields=sorted(allowed),
            )
        )
    return Ok(None)
