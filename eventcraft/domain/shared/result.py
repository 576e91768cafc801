"""Result type for service operations.

Every application service in eventcraft returns a Result: either ``Ok``
carrying the value, or ``Err`` carrying a ``PlanningError``. Expected
failures (a dependency not yet complete, a template the actor cannot see)
never surface as raised exceptions at the service boundary.

Example usage:
    >>> result = transition(db, task_id, TaskStatus.IN_PROGRESS, {}, actor_id)
    >>> if isinstance(result, Ok):
    ...     print(result.value.status)
    ... else:
    ...     print(result.error.code)
"""

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Successful outcome carrying ``value``."""

    value: T


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """Failed outcome carrying ``error``."""

    error: E


# TypeVar aliases don't work with | syntax at runtime
Result = Union[Ok[T], Err[E]]  # noqa: UP007
