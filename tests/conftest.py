"""Shared fixtures: an in-memory store seeded with members and a wedding template."""

import itertools
from datetime import UTC, datetime

import pytest

from eventcraft.application import instantiate
from eventcraft.domain.access import Member, Role
from eventcraft.domain.template import (
    EventType,
    ModuleBlueprint,
    ModuleCategory,
    TaskBlueprint,
    Template,
)
from eventcraft.infrastructure.storage import Database, MemberRepository, TemplateRepository

MEMBERS = [
    Member(id="admin", name="Ada Admin", role=Role.ADMINISTRATOR, organization_id="org-1"),
    Member(id="mgr", name="Mia Manager", role=Role.MANAGER, organization_id="org-1"),
    Member(id="vendor", name="Vic Vendor", role=Role.VENDOR, organization_id="org-1"),
    Member(id="vendor-2", name="Val Vendor", role=Role.VENDOR, organization_id="org-1"),
    Member(id="client", name="Cal Client", role=Role.CLIENT, organization_id="org-1"),
    Member(id="outsider", name="Oz Outsider", role=Role.MANAGER, organization_id="org-2"),
    Member(id="client-2", name="Cy Client", role=Role.CLIENT, organization_id="org-2"),
]


class RecordingDispatcher:
    """Collects dispatched domain events."""

    def __init__(self):
        self.events = []

    def dispatch(self, event):
        self.events.append(event)

    def names(self):
        return [e.name for e in self.events]


@pytest.fixture
def wedding_template():
    """Venue(A) -> Catering(B -> C), Photography(D -> A)."""
    return Template(
        id="tpl-wedding",
        name="Wedding",
        event_type=EventType.WEDDING,
        is_public=True,
        modules=[
            ModuleBlueprint(
                id="m-venue",
                name="Venue",
                category=ModuleCategory.VENUE,
                order=0,
                required=True,
                estimated_days=3,
                tasks=[TaskBlueprint(id="t-a", name="Book venue", order=0, estimated_hours=4)],
            ),
            ModuleBlueprint(
                id="m-catering",
                name="Catering",
                category=ModuleCategory.FOOD,
                order=1,
                budget=5000,
                estimated_days=5,
                tasks=[
                    TaskBlueprint(id="t-c", name="Tasting", order=3, dependency_ids=["t-b"]),
                    TaskBlueprint(id="t-b", name="Choose caterer", order=2, dependency_ids=["t-a"]),
                ],
            ),
            ModuleBlueprint(
                id="m-photo",
                name="Photography",
                category=ModuleCategory.PHOTOGRAPHY,
                order=2,
                estimated_days=1,
                tasks=[TaskBlueprint(id="t-d", name="Hire photographer", order=1, dependency_ids=["t-a"])],
            ),
        ],
    )


@pytest.fixture
def db(wedding_template):
    database = Database()
    with database.transaction() as session:
        members = MemberRepository(session)
        for member in MEMBERS:
            members.save(member)
        TemplateRepository(session).save(wedding_template)
    return database


@pytest.fixture
def ids():
    """Deterministic instance id factory."""
    counter = itertools.count(1)
    return lambda: f"id-{next(counter)}"


@pytest.fixture
def clock():
    return lambda: datetime(2024, 1, 1, 9, 0, tzinfo=UTC)


@pytest.fixture
def dispatcher():
    return RecordingDispatcher()


@pytest.fixture
def event_params():
    return {
        "name": "Ana & Ben",
        "client_id": "client",
        "start_date": "2024-01-01",
        "end_date": "2024-01-02",
        "venue": "Grand Hall",
        "budget": 20000,
        "guest_count": 120,
    }


@pytest.fixture
def wedding_event(db, event_params, ids, clock):
    """The wedding template applied by the manager."""
    result = instantiate(db, "tpl-wedding", event_params, None, "mgr", id_factory=ids, clock=clock)
    return result.value


@pytest.fixture
def tasks(wedding_event):
    """Instance tasks of the wedding event keyed by name."""
    return {task.name: task for task in wedding_event.all_tasks()}
