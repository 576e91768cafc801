"""Repository implementations for domain aggregates.

Repositories are thin typed views over a ``Session``. Lookups return
Result types so services can propagate NotFound without raising.
"""

from eventcraft.domain.access.models import Member
from eventcraft.domain.event.models import Event, EventGraph, Module, ModuleGraph
from eventcraft.domain.shared import Err, NotFound, Ok, Result
from eventcraft.domain.task.models import Task
from eventcraft.domain.template.models import Template
from eventcraft.infrastructure.storage.database import Session


class TemplateRepository:
    """Repository for template blueprints."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, template_id: str) -> Result[Template, NotFound]:
        template = self._session.get("templates", template_id)
        if template is None:
            return Err(NotFound("Template not found or not accessible", template_id=template_id))
        return Ok(template)

    def save(self, template: Template) -> None:
        self._session.put("templates", template)

    def list_all(self) -> list[Template]:
        return sorted(self._session.rows("templates"), key=lambda t: (not t.is_public, t.name))

    def usage_count(self, template_id: str) -> int:
        """Number of events created from the template."""
        return sum(1 for event in self._session.rows("events") if event.template_id == template_id)


class MemberRepository:
    """Repository for members supplied by the identity collaborator."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, member_id: str) -> Result[Member, NotFound]:
        member = self._session.get("members", member_id)
        if member is None:
            return Err(NotFound("Member not found", member_id=member_id))
        return Ok(member)

    def save(self, member: Member) -> None:
        self._session.put("members", member)

    def list_all(self) -> list[Member]:
        return sorted(self._session.rows("members"), key=lambda m: m.id)

    def in_organization(self, member_id: str, organization_id: str) -> bool:
        member = self._session.get("members", member_id)
        return member is not None and member.organization_id == organization_id


class EventRepository:
    """Repository for events, their modules and tasks.

    Rows are stored flat; ``load_graph`` assembles the ordered read model.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, event_id: str) -> Result[Event, NotFound]:
        event = self._session.get("events", event_id)
        if event is None:
            return Err(NotFound("Event not found or not accessible", event_id=event_id))
        return Ok(event)

    def get_task(self, task_id: str) -> Result[Task, NotFound]:
        task = self._session.get("tasks", task_id)
        if task is None:
            return Err(NotFound("Task not found or not accessible", task_id=task_id))
        return Ok(task)

    def add_event(self, event: Event) -> None:
        self._session.put("events", event)

    def add_module(self, module: Module) -> None:
        self._session.put("modules", module)

    def save_task(self, task: Task) -> None:
        self._session.put("tasks", task)

    def delete_task(self, task_id: str) -> None:
        self._session.delete("tasks", task_id)

    def tasks_of_event(self, event_id: str) -> list[Task]:
        return [task for task in self._session.rows("tasks") if task.event_id == event_id]

    def load_graph(self, event_id: str) -> Result[EventGraph, NotFound]:
        """Assemble an event with its modules and tasks in order."""
        result = self.get(event_id)
        if isinstance(result, Err):
            return result

        modules = sorted(
            (m for m in self._session.rows("modules") if m.event_id == event_id),
            key=lambda m: m.order,
        )
        tasks = self.tasks_of_event(event_id)
        graphs = [
            ModuleGraph(
                module=module,
                tasks=sorted((t for t in tasks if t.module_id == module.id), key=lambda t: t.order),
            )
            for module in modules
        ]
        return Ok(EventGraph(event=result.value, modules=graphs))

    def delete_event(self, event_id: str) -> None:
        """Delete an event together with its modules and tasks."""
        for task in self.tasks_of_event(event_id):
            self._session.delete("tasks", task.id)
        for module in self._session.rows("modules"):
            if module.event_id == event_id:
                self._session.delete("modules", module.id)
        self._session.delete("events", event_id)
