"""Event read model and lifecycle."""

import logging

from pydantic import BaseModel

from eventcraft.application.support import persistence_guarded
from eventcraft.domain.access import can_manage_event, can_view_event
from eventcraft.domain.event import (
    DELETABLE_EVENT_STATES,
    Event,
    EventDeleted,
    EventGraph,
    ProgressSummary,
    summarize_progress,
)
from eventcraft.domain.shared import Err, Forbidden, InvalidState, NotFound, Ok, PlanningError, Result
from eventcraft.infrastructure.notifications import NotificationDispatcher, dispatch_safely
from eventcraft.infrastructure.storage import Database, EventRepository, MemberRepository

logger = logging.getLogger(__name__)


class EventSummary(BaseModel):
    """An event graph together with its progress figures."""

    graph: EventGraph
    progress: ProgressSummary


def event_summary(db: Database, event_id: str, actor_id: str) -> Result[EventSummary, PlanningError]:
    """Load an event with its modules, tasks and progress.

    Progress is computed from the statuses read in the same transaction,
    so it always agrees with the tasks returned alongside it.
    """
    with db.transaction() as session:
        actor_result = MemberRepository(session).get(actor_id)
        if isinstance(actor_result, Err):
            return actor_result

        graph_result = EventRepository(session).load_graph(event_id)
        if isinstance(graph_result, Err):
            return graph_result
        graph = graph_result.value

    if not can_view_event(actor_result.value, graph.event, graph.all_tasks()):
        return Err(NotFound("Event not found or not accessible", event_id=event_id))
    return Ok(EventSummary(graph=graph, progress=summarize_progress(graph)))


@persistence_guarded
def delete_event(
    db: Database,
    event_id: str,
    actor_id: str,
    dispatcher: NotificationDispatcher | None = None,
) -> Result[Event, PlanningError]:
    """Delete an event with all of its modules and tasks.

    Only events that have not started (PLANNING or CONFIRMED) can be
    deleted.
    """
    with db.transaction() as session:
        events = EventRepository(session)

        actor_result = MemberRepository(session).get(actor_id)
        if isinstance(actor_result, Err):
            return actor_result
        actor = actor_result.value
        if not actor.is_manager:
            return Err(Forbidden("Only managers and administrators can delete events", actor_id=actor.id))

        event_result = events.get(event_id)
        if isinstance(event_result, Err):
            return event_result
        event = event_result.value
        if not can_manage_event(actor, event):
            return Err(NotFound("Event not found or not accessible", event_id=event_id))

        if event.status not in DELETABLE_EVENT_STATES:
            return Err(
                InvalidState(
                    "Cannot delete events that are in progress or completed",
                    event_id=event.id,
                    status=event.status.value,
                )
            )

        events.delete_event(event.id)

    logger.info(f"Deleted event {event.id} by {actor.id}")
    dispatch_safely(dispatcher, EventDeleted(event_ref=event.id, deleted_by=actor.id))
    return Ok(event)
