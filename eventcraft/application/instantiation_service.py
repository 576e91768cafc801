"""Template instantiation service.

Clones a template blueprint into a live event inside one store
transaction. Either the whole graph (event, modules, tasks and their
dependency edges) becomes visible, or nothing does.

Cloning runs in two passes: every task is created first so it has a real
identity, then dependency edges are resolved through the identity mapper.
Edges may point forward in iteration order or into another module, which
a single pass could not resolve.
"""

import logging
from collections.abc import Callable
from datetime import date, datetime, timedelta
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError

from eventcraft.application.identity_mapper import IdentityMapper, new_id
from eventcraft.application.support import to_validation_error, utcnow
from eventcraft.domain.access import Role, can_view_template
from eventcraft.domain.access.models import Member
from eventcraft.domain.event import Event, EventGraph, EventInstantiated, EventStatus, Module
from eventcraft.domain.shared import (
    Err,
    Forbidden,
    InstantiationFailed,
    NotFound,
    Ok,
    PlanningError,
    Result,
    ValidationError,
)
from eventcraft.domain.task import Task, TaskStatus
from eventcraft.domain.template import ModuleBlueprint, TaskBlueprint, Template
from eventcraft.infrastructure.notifications import NotificationDispatcher, dispatch_safely
from eventcraft.infrastructure.storage import (
    Database,
    EventRepository,
    MemberRepository,
    Session,
    TemplateRepository,
)

logger = logging.getLogger(__name__)


class EventParams(BaseModel):
    """Caller-supplied fields of the event being created."""

    name: str = Field(min_length=1)
    description: str | None = None
    client_id: str = Field(min_length=1)
    start_date: date
    end_date: date
    venue: str = Field(min_length=1)
    budget: float | None = Field(default=None, gt=0)
    guest_count: int | None = Field(default=None, gt=0)

    @field_validator("name", "venue", "client_id")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value

    @model_validator(mode="after")
    def _dates_in_order(self) -> "EventParams":
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class ModuleOverride(BaseModel):
    """Per-module replacement values. ``None`` keeps the blueprint value."""

    name: str | None = None
    description: str | None = None
    budget: float | None = None
    estimated_days: int | None = None


class Customizations(BaseModel):
    """Optional reshaping of the template for one event."""

    exclude_module_ids: list[str] = Field(default_factory=list)
    module_overrides: dict[str, ModuleOverride] = Field(default_factory=dict)


def parse_event_params(raw: EventParams | dict[str, Any]) -> Result[EventParams, ValidationError]:
    """Validate raw event parameters before anything is written."""
    if isinstance(raw, EventParams):
        return Ok(raw)
    try:
        return Ok(EventParams.model_validate(raw))
    except PydanticValidationError as e:
        return Err(to_validation_error("Invalid event parameters", e))


def parse_customizations(
    raw: Customizations | dict[str, Any] | None,
) -> Result[Customizations, ValidationError]:
    if raw is None:
        return Ok(Customizations())
    if isinstance(raw, Customizations):
        return Ok(raw)
    try:
        return Ok(Customizations.model_validate(raw))
    except PydanticValidationError as e:
        return Err(to_validation_error("Invalid customizations", e))


def _pick(override: Any, blueprint: Any) -> Any:
    return blueprint if override is None else override


def due_date_for(start_date: date, blueprint: TaskBlueprint) -> date:
    """A task is due ``order`` days after the event starts."""
    return start_date + timedelta(days=blueprint.order)


def _check_preconditions(
    session: Session,
    template_id: str,
    params: EventParams,
    customizations: Customizations,
    actor_id: str,
) -> Result[tuple[Member, Template], PlanningError]:
    members = MemberRepository(session)

    actor_result = members.get(actor_id)
    if isinstance(actor_result, Err):
        return actor_result
    actor = actor_result.value

    if not actor.is_manager:
        return Err(Forbidden("Only managers and administrators can apply templates", actor_id=actor.id))

    template_result = TemplateRepository(session).get(template_id)
    if isinstance(template_result, Err):
        return template_result
    template = template_result.value
    if not can_view_template(actor, template):
        return Err(NotFound("Template not found or not accessible", template_id=template_id))

    client_result = members.get(params.client_id)
    if (
        isinstance(client_result, Err)
        or client_result.value.role != Role.CLIENT
        or client_result.value.organization_id != actor.organization_id
    ):
        return Err(NotFound("Client not found or not accessible", client_id=params.client_id))

    excluded = set(customizations.exclude_module_ids)
    required = [m.id for m in template.modules if m.required and m.id in excluded]
    if required:
        return Err(
            ValidationError(
                "Required modules cannot be excluded",
                required_module_ids=required,
            )
        )

    return Ok((actor, template))


def _create_module(
    events: EventRepository,
    event: Event,
    blueprint: ModuleBlueprint,
    override: ModuleOverride,
    mapper: IdentityMapper,
) -> Module:
    module = Module(
        id=mapper.modules.allocate(blueprint.id),
        event_id=event.id,
        name=_pick(override.name, blueprint.name),
        description=_pick(override.description, blueprint.description),
        category=blueprint.category,
        budget=_pick(override.budget, blueprint.budget),
        estimated_days=_pick(override.estimated_days, blueprint.estimated_days),
        order=blueprint.order,
    )
    events.add_module(module)
    return module


def _clone(
    session: Session,
    template: Template,
    params: EventParams,
    customizations: Customizations,
    actor: Member,
    mapper: IdentityMapper,
    id_factory: Callable[[], str],
    now: datetime,
) -> EventGraph:
    """Write the event graph into ``session``. Raises on any failure."""
    events = EventRepository(session)

    event = Event(
        id=id_factory(),
        name=params.name,
        description=params.description,
        event_type=template.event_type,
        status=EventStatus.PLANNING,
        start_date=params.start_date,
        end_date=params.end_date,
        venue=params.venue,
        budget=params.budget,
        guest_count=params.guest_count,
        organization_id=actor.organization_id or "",
        client_id=params.client_id,
        manager_id=actor.id,
        template_id=template.id,
        created_at=now,
    )
    events.add_event(event)

    excluded = set(customizations.exclude_module_ids)
    skipped_tasks = {
        task.id for module in template.modules if module.id in excluded for task in module.tasks
    }

    # Pass 1: nodes
    created: list[tuple[TaskBlueprint, Task]] = []
    for blueprint in template.ordered_modules():
        if blueprint.id in excluded:
            continue
        override = customizations.module_overrides.get(blueprint.id) or ModuleOverride()
        module = _create_module(events, event, blueprint, override, mapper)

        for task_blueprint in blueprint.ordered_tasks():
            task = Task(
                id=mapper.tasks.allocate(task_blueprint.id),
                event_id=event.id,
                module_id=module.id,
                name=task_blueprint.name,
                description=task_blueprint.description,
                priority=task_blueprint.priority,
                estimated_hours=task_blueprint.estimated_hours,
                order=task_blueprint.order,
                due_date=due_date_for(params.start_date, task_blueprint),
                status=TaskStatus.PENDING,
                updated_at=now,
            )
            events.save_task(task)
            created.append((task_blueprint, task))

    # Pass 2: edges
    for task_blueprint, task in created:
        dependency_ids = []
        for blueprint_dep in task_blueprint.dependency_ids:
            if blueprint_dep in skipped_tasks:
                logger.debug(f"Dropping dependency {blueprint_dep} of {task_blueprint.id}: module excluded")
                continue
            instance_dep = mapper.tasks.resolve(blueprint_dep)
            if instance_dep is None:
                raise InstantiationFailed(
                    f"Task '{task_blueprint.name}' depends on a task that is not in the template",
                    blueprint_task_id=task_blueprint.id,
                    dependency_id=blueprint_dep,
                )
            dependency_ids.append(instance_dep)
        if dependency_ids:
            events.save_task(task.model_copy(update={"dependency_ids": tuple(dependency_ids)}))

    graph = events.load_graph(event.id)
    if isinstance(graph, Err):
        raise InstantiationFailed("Created event could not be read back", event_id=event.id)
    return graph.value


def instantiate(
    db: Database,
    template_id: str,
    params: EventParams | dict[str, Any],
    customizations: Customizations | dict[str, Any] | None,
    actor_id: str,
    dispatcher: NotificationDispatcher | None = None,
    id_factory: Callable[[], str] = new_id,
    clock: Callable[[], datetime] = utcnow,
) -> Result[EventGraph, PlanningError]:
    """Create an event from a template.

    All input is validated before the first write. Once writing starts,
    any failure rolls the whole transaction back and is reported as a
    single InstantiationFailed.

    Args:
        db: The store to write into.
        template_id: Template to clone.
        params: Event fields (name, dates, venue, client, ...).
        customizations: Modules to exclude and per-module overrides.
        actor_id: Member applying the template.
        dispatcher: Receives EventInstantiated after commit.
        id_factory: Instance id generator.
        clock: Source of the creation timestamp.

    Returns:
        Ok(EventGraph) with instance ids throughout, or Err(PlanningError).
    """
    params_result = parse_event_params(params)
    if isinstance(params_result, Err):
        return params_result
    custom_result = parse_customizations(customizations)
    if isinstance(custom_result, Err):
        return custom_result
    event_params, custom = params_result.value, custom_result.value

    try:
        with db.transaction() as session:
            checked = _check_preconditions(session, template_id, event_params, custom, actor_id)
            if isinstance(checked, Err):
                return checked
            actor, template = checked.value

            logger.info(f"Instantiating template {template.id} for {actor.id}")
            mapper = IdentityMapper(id_factory)
            graph = _clone(session, template, event_params, custom, actor, mapper, id_factory, clock())
    except PlanningError as e:
        logger.warning(f"Instantiation of template {template_id} rolled back: {e.message}")
        return Err(
            InstantiationFailed(
                "Failed to apply template",
                template_id=template_id,
                reason=e.message,
            )
        )
    except Exception:
        logger.exception(f"Instantiation of template {template_id} rolled back")
        return Err(InstantiationFailed("Failed to apply template", template_id=template_id))

    tasks = graph.all_tasks()
    logger.info(
        f"Created event {graph.event.id} from template {template_id}: "
        f"{len(graph.modules)} modules, {len(tasks)} tasks, {graph.edge_count()} dependencies"
    )
    dispatch_safely(
        dispatcher,
        EventInstantiated(
            event_ref=graph.event.id,
            template_id=template_id,
            created_by=actor_id,
            module_count=len(graph.modules),
            task_count=len(tasks),
        ),
    )
    return Ok(graph)
