"""Helpers shared by the application services."""

import functools
import logging
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any, ParamSpec, TypeVar

from pydantic import ValidationError as PydanticValidationError

from eventcraft.domain.shared import Err, InternalError, ValidationError
from eventcraft.infrastructure.storage import StorageError

logger = logging.getLogger(__name__)

P = ParamSpec("P")
R = TypeVar("R")


def utcnow() -> datetime:
    return datetime.now(UTC)


def to_validation_error(message: str, exc: PydanticValidationError) -> ValidationError:
    """Convert a pydantic failure into a domain ValidationError with a field map."""
    fields: dict[str, Any] = {}
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"]) or "__root__"
        fields[location] = error["msg"]
    return ValidationError(message, fields=fields)


def persistence_guarded(func: Callable[P, R]) -> Callable[P, R]:
    """Report a failed commit as Err(InternalError) instead of raising.

    The transaction has already been rolled back when the error reaches
    this wrapper, so callers see either the committed result or nothing.
    """

    @functools.wraps(func)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        try:
            return func(*args, **kwargs)
        except StorageError as e:
            logger.error(f"{func.__name__} failed to persist: {e}")
            return Err(InternalError("Failed to persist changes"))  # type: ignore[return-value]

    return wrapper
