"""FastAPI routes for eventcraft.

Routes are thin: they read the acting member from the X-Actor-Id header,
call an application service, and map its Result onto an HTTP response.
The store and dispatcher are attached to ``app.state`` by ``create_app``.
"""

import logging
from typing import Optional, TypeVar

from fastapi import APIRouter, Depends, FastAPI, Header, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from eventcraft import __version__
from eventcraft.application import (
    EventSummary,
    TaskDetail,
    delete_event,
    delete_task,
    event_summary,
    instantiate,
    list_templates,
    task_detail,
    transition,
)
from eventcraft.domain.event import EventGraph
from eventcraft.domain.shared import Err, PlanningError, Result
from eventcraft.domain.task import Task
from eventcraft.domain.template import EventType
from eventcraft.infrastructure.notifications import LoggingDispatcher, NotificationDispatcher
from eventcraft.infrastructure.storage import Database
from eventcraft.interfaces.api.schemas import (
    ApplyTemplateRequest,
    DeletedResponse,
    ErrorDetail,
    ErrorResponse,
    TemplateListResponse,
    UpdateTaskRequest,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Error code -> HTTP status
STATUS_CODES = {
    "validation_error": 400,
    "dependency_not_satisfied": 400,
    "invalid_state": 400,
    "has_dependents": 400,
    "forbidden": 403,
    "not_found": 404,
    "instantiation_failed": 500,
    "internal_error": 500,
}

router = APIRouter(
    prefix="/api",
    responses={status: {"model": ErrorResponse} for status in sorted(set(STATUS_CODES.values()))},
)


# =============================================================================
# Dependencies
# =============================================================================


def get_db(request: Request) -> Database:
    return request.app.state.db


def get_dispatcher(request: Request) -> NotificationDispatcher:
    return request.app.state.dispatcher


def get_actor_id(x_actor_id: Optional[str] = Header(None)) -> str:
    """The acting member, taken from the X-Actor-Id header."""
    if not x_actor_id:
        raise HTTPException(
            status_code=400,
            detail={"error": "validation_error", "message": "X-Actor-Id header is required", "details": {}},
        )
    return x_actor_id


def unwrap(result: Result[T, PlanningError]) -> T:
    """Return the Ok value or raise the mapped HTTPException."""
    if isinstance(result, Err):
        error = result.error
        status_code = STATUS_CODES.get(error.code, 500)
        if status_code >= 500:
            logger.error(f"{error.code}: {error.message}")
        raise HTTPException(status_code=status_code, detail=error.to_dict())
    return result.value


# =============================================================================
# Templates
# =============================================================================


@router.get("/templates", response_model=TemplateListResponse)
def get_templates(
    event_type: Optional[EventType] = None,
    region: Optional[str] = None,
    db: Database = Depends(get_db),
    actor_id: str = Depends(get_actor_id),
):
    """List templates visible to the actor, with statistics."""
    listing = unwrap(list_templates(db, actor_id, event_type=event_type, region=region))
    return TemplateListResponse(templates=listing)


@router.post("/templates/{template_id}/apply", response_model=EventGraph, status_code=201)
def apply_template(
    template_id: str,
    req: ApplyTemplateRequest,
    db: Database = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
    actor_id: str = Depends(get_actor_id),
):
    """Create an event from a template."""
    params = req.model_dump(exclude={"customizations"})
    return unwrap(instantiate(db, template_id, params, req.customizations, actor_id, dispatcher))


# =============================================================================
# Events
# =============================================================================


@router.get("/events/{event_id}", response_model=EventSummary)
def get_event(
    event_id: str,
    db: Database = Depends(get_db),
    actor_id: str = Depends(get_actor_id),
):
    return unwrap(event_summary(db, event_id, actor_id))


@router.delete("/events/{event_id}", response_model=DeletedResponse)
def remove_event(
    event_id: str,
    db: Database = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
    actor_id: str = Depends(get_actor_id),
):
    event = unwrap(delete_event(db, event_id, actor_id, dispatcher))
    return DeletedResponse(deleted=event.id)


# =============================================================================
# Tasks
# =============================================================================


@router.get("/tasks/{task_id}", response_model=TaskDetail)
def get_task(
    task_id: str,
    db: Database = Depends(get_db),
    actor_id: str = Depends(get_actor_id),
):
    return unwrap(task_detail(db, task_id, actor_id))


@router.put("/tasks/{task_id}", response_model=Task)
def update_task(
    task_id: str,
    req: UpdateTaskRequest,
    db: Database = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
    actor_id: str = Depends(get_actor_id),
):
    """Change a task's status and/or fields."""
    return unwrap(transition(db, task_id, None, req, actor_id, dispatcher))


@router.delete("/tasks/{task_id}", response_model=DeletedResponse)
def remove_task(
    task_id: str,
    db: Database = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
    actor_id: str = Depends(get_actor_id),
):
    task = unwrap(delete_task(db, task_id, actor_id, dispatcher))
    return DeletedResponse(deleted=task.id)


# =============================================================================
# App Factory
# =============================================================================


def create_app(
    db: Optional[Database] = None,
    dispatcher: Optional[NotificationDispatcher] = None,
) -> FastAPI:
    """Create the FastAPI application around a store."""
    app = FastAPI(
        title="eventcraft",
        description="Template-driven event planning",
        version=__version__,
    )
    app.state.db = db or Database()
    app.state.dispatcher = dispatcher or LoggingDispatcher()

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        fields = {".".join(str(part) for part in e["loc"]): e["msg"] for e in exc.errors()}
        body = ErrorResponse(
            detail=ErrorDetail(error="validation_error", message="Invalid request", details={"fields": fields})
        )
        return JSONResponse(status_code=400, content=body.model_dump())

    app.include_router(router)

    @app.get("/")
    def root():
        return {"name": "eventcraft", "version": __version__}

    return app
