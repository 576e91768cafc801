"""Template authoring and discovery."""

import logging
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from eventcraft.application.support import persistence_guarded, to_validation_error
from eventcraft.domain.access import can_view_template
from eventcraft.domain.shared import Err, Forbidden, NotFound, Ok, PlanningError, Result
from eventcraft.domain.template import (
    EventType,
    Template,
    TemplateSaved,
    TemplateStats,
    template_stats,
    validate_template,
)
from eventcraft.infrastructure.notifications import NotificationDispatcher, dispatch_safely
from eventcraft.infrastructure.storage import Database, MemberRepository, TemplateRepository

logger = logging.getLogger(__name__)


def parse_template(raw: Template | dict[str, Any]) -> Result[Template, PlanningError]:
    """Build a Template from raw data and run the authoring checks."""
    if isinstance(raw, Template):
        template = raw
    else:
        try:
            template = Template.model_validate(raw)
        except PydanticValidationError as e:
            return Err(to_validation_error("Invalid template", e))
    return validate_template(template)


@persistence_guarded
def save_template(
    db: Database,
    raw: Template | dict[str, Any],
    actor_id: str,
    dispatcher: NotificationDispatcher | None = None,
) -> Result[Template, PlanningError]:
    """Create or replace a template.

    Managers save into their own organization; only administrators may
    publish public templates. Saving a template never touches events
    already created from it.
    """
    parsed = parse_template(raw)
    if isinstance(parsed, Err):
        return parsed
    template = parsed.value

    with db.transaction() as session:
        actor_result = MemberRepository(session).get(actor_id)
        if isinstance(actor_result, Err):
            return actor_result
        actor = actor_result.value

        if not actor.is_manager:
            return Err(Forbidden("Only managers and administrators can save templates", actor_id=actor.id))
        if template.is_public and not actor.is_admin:
            return Err(Forbidden("Only administrators can publish public templates", actor_id=actor.id))

        templates = TemplateRepository(session)
        existing = templates.get(template.id)
        if isinstance(existing, Ok):
            if not can_view_template(actor, existing.value):
                return Err(NotFound("Template not found or not accessible", template_id=template.id))
            if not actor.is_admin and existing.value.organization_id != actor.organization_id:
                return Err(
                    Forbidden("Only administrators can change public templates", template_id=template.id)
                )

        if template.is_public:
            template = template.model_copy(update={"organization_id": None})
        elif template.organization_id is None or not actor.is_admin:
            template = template.model_copy(update={"organization_id": actor.organization_id})

        templates.save(template)

    logger.info(f"Saved template {template.id} ({len(template.all_tasks())} tasks) by {actor.id}")
    dispatch_safely(
        dispatcher,
        TemplateSaved(
            template_id=template.id,
            template_name=template.name,
            saved_by=actor.id,
            module_count=len(template.modules),
            task_count=len(template.all_tasks()),
        ),
    )
    return Ok(template)


def get_template(db: Database, template_id: str, actor_id: str) -> Result[Template, PlanningError]:
    with db.transaction() as session:
        actor_result = MemberRepository(session).get(actor_id)
        if isinstance(actor_result, Err):
            return actor_result
        result = TemplateRepository(session).get(template_id)
        if isinstance(result, Err):
            return result
        if not can_view_template(actor_result.value, result.value):
            return Err(NotFound("Template not found or not accessible", template_id=template_id))
        return result


def list_templates(
    db: Database,
    actor_id: str,
    event_type: EventType | None = None,
    region: str | None = None,
) -> Result[list[TemplateStats], PlanningError]:
    """List templates visible to the actor with derived statistics.

    Public templates come first, then by name.
    """
    with db.transaction() as session:
        actor_result = MemberRepository(session).get(actor_id)
        if isinstance(actor_result, Err):
            return actor_result
        actor = actor_result.value

        templates = TemplateRepository(session)
        listing = []
        for template in templates.list_all():
            if not can_view_template(actor, template):
                continue
            if event_type is not None and template.event_type != event_type:
                continue
            if region is not None and template.region != region:
                continue
            listing.append(template_stats(template, templates.usage_count(template.id)))

    return Ok(listing)
