"""Shared domain kernel for eventcraft.

This package provides common building blocks used across domain modules:

- Result type for explicit error handling
- The planning error taxonomy
- Base domain event infrastructure

Example usage:
    >>> from eventcraft.domain.shared import Ok, Err, NotFound, Result
    >>>
    >>> def find_template(template_id: str) -> Result[dict, NotFound]:
    ...     if template_id == "missing":
    ...         return Err(NotFound("Template not found", template_id=template_id))
    ...     return Ok({"id": template_id})
"""

from eventcraft.domain.shared.errors import (
    DependencyNotSatisfied,
    Forbidden,
    HasDependents,
    InstantiationFailed,
    InternalError,
    InvalidState,
    NotFound,
    PlanningError,
    ValidationError,
)
from eventcraft.domain.shared.events import DomainEvent
from eventcraft.domain.shared.result import Err, Ok, Result

__all__ = [
    # Result
    "Ok",
    "Err",
    "Result",
    # Errors
    "PlanningError",
    "ValidationError",
    "NotFound",
    "Forbidden",
    "DependencyNotSatisfied",
    "InvalidState",
    "HasDependents",
    "InstantiationFailed",
    "InternalError",
    # Domain events
    "DomainEvent",
]
