"""Access domain - roles, members and the rules that bind them."""

from .models import Member, Role
from .policy import (
    ASSIGNEE_FIELDS,
    FIELD_ALLOW_LIST,
    can_manage_event,
    can_view_event,
    can_view_task,
    can_view_template,
    check_field_updates,
)

__all__ = [
    "Role",
    "Member",
    "ASSIGNEE_FIELDS",
    "FIELD_ALLOW_LIST",
    "can_view_template",
    "can_view_event",
    "can_manage_event",
    "can_view_task",
    "check_field_updates",
]
