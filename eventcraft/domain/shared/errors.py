"""Error taxonomy for planning operations.

Every expected failure is a ``PlanningError`` subclass. Services return
them inside ``Err`` rather than raising; the instantiation unit of work
raises them internally so the store rolls back.

Each error carries a stable ``code`` for callers (HTTP status mapping, CLI
exit messages) and a ``details`` dict with enough context to build an
actionable message: which dependency is unmet, which field is forbidden.
"""

from typing import Any


class PlanningError(Exception):
    """Base class for all planning errors."""

    code = "internal_error"

    def __init__(self, message: str, **details: Any) -> None:
        self.message = message
        self.details = details
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Serialize for API responses."""
        return {"error": self.code, "message": self.message, "details": self.details}


class ValidationError(PlanningError):
    """Malformed or missing input. No mutation was attempted."""

    code = "validation_error"


class NotFound(PlanningError):
    """Template, event, task or member not visible to the actor."""

    code = "not_found"


class Forbidden(PlanningError):
    """Role or ownership constraint violated."""

    code = "forbidden"


class DependencyNotSatisfied(PlanningError):
    """A task was started before all of its dependencies completed."""

    code = "dependency_not_satisfied"

    def __init__(self, task_id: str, unmet: list[dict[str, str]]) -> None:
        names = ", ".join(dep["name"] for dep in unmet)
        super().__init__(
            f"Cannot start task until all dependencies are completed (waiting on: {names})",
            task_id=task_id,
            unmet_dependencies=unmet,
        )
        self.unmet = unmet


class InvalidState(PlanningError):
    """Illegal transition or deletion given the current state."""

    code = "invalid_state"


class HasDependents(PlanningError):
    """Deletion blocked because other tasks still depend on this one."""

    code = "has_dependents"


class InstantiationFailed(PlanningError):
    """Any failure during the atomic clone. Nothing was persisted."""

    code = "instantiation_failed"


class InternalError(PlanningError):
    """Opaque persistence failure outside instantiation."""

    code = "internal_error"
