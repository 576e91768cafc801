"""Request/Response schemas for the eventcraft API.

These Pydantic models define the API contract for request and response
bodies. Where a domain model already matches the contract it is used
directly.
"""

from typing import Any

from pydantic import BaseModel, Field

from eventcraft.application import Customizations, EventParams, EventSummary, TaskDetail
from eventcraft.domain.task import Task, TaskUpdate
from eventcraft.domain.template import TemplateStats


# =============================================================================
# Template Schemas
# =============================================================================


class ApplyTemplateRequest(EventParams):
    """Request to create an event from a template."""

    customizations: Customizations = Field(default_factory=Customizations)


class TemplateListResponse(BaseModel):
    templates: list[TemplateStats]


# =============================================================================
# Event / Task Schemas
# =============================================================================


class UpdateTaskRequest(TaskUpdate):
    """Request to change a task. Every field is optional."""


class DeletedResponse(BaseModel):
    deleted: str


class ErrorDetail(BaseModel):
    error: str
    message: str
    details: dict[str, Any] = Field(default_factory=dict)


class ErrorResponse(BaseModel):
    """Body of every 4xx/5xx response."""

    detail: ErrorDetail


__all__ = [
    "ApplyTemplateRequest",
    "TemplateListResponse",
    "UpdateTaskRequest",
    "DeletedResponse",
    "ErrorDetail",
    "ErrorResponse",
    "EventSummary",
    "TaskDetail",
    "Task",
]
