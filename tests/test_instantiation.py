"""Tests for template instantiation."""

from datetime import date

import pytest

from eventcraft.application import instantiate, list_templates, transition
from eventcraft.domain.event import EventStatus
from eventcraft.domain.shared import Err, Ok
from eventcraft.domain.task import TaskStatus, can_start
from eventcraft.domain.template import ModuleBlueprint, ModuleCategory, TaskBlueprint, Template
from eventcraft.infrastructure.storage import TemplateRepository


def _row_counts(db):
    return {table: db.count(table) for table in ("events", "modules", "tasks")}


class TestInstantiate:
    """Tests for instantiate() on a valid template."""

    def test_graph_is_complete(self, wedding_event, wedding_template):
        assert len(wedding_event.modules) == len(wedding_template.modules)
        assert len(wedding_event.all_tasks()) == len(wedding_template.all_tasks())
        blueprint_edges = sum(len(t.dependency_ids) for t in wedding_template.all_tasks())
        assert wedding_event.edge_count() == blueprint_edges

    def test_event_fields(self, wedding_event):
        event = wedding_event.event
        assert event.status == EventStatus.PLANNING
        assert event.manager_id == "mgr"
        assert event.client_id == "client"
        assert event.organization_id == "org-1"
        assert event.template_id == "tpl-wedding"
        assert event.guest_count == 120

    def test_ids_are_rekeyed(self, wedding_event, wedding_template):
        blueprint_ids = {t.id for t in wedding_template.all_tasks()}
        for task in wedding_event.all_tasks():
            assert task.id not in blueprint_ids
            assert not set(task.dependency_ids) & blueprint_ids

    def test_edges_point_at_instances(self, tasks):
        assert tasks["Choose caterer"].dependency_ids == (tasks["Book venue"].id,)
        assert tasks["Tasting"].dependency_ids == (tasks["Choose caterer"].id,)
        assert tasks["Hire photographer"].dependency_ids == (tasks["Book venue"].id,)

    def test_all_tasks_start_pending_and_unassigned(self, wedding_event):
        for task in wedding_event.all_tasks():
            assert task.status == TaskStatus.PENDING
            assert task.assigned_to is None
            assert task.actual_hours == 0

    def test_modules_and_tasks_are_ordered(self, wedding_event):
        assert [m.module.name for m in wedding_event.modules] == ["Venue", "Catering", "Photography"]
        catering = wedding_event.modules[1]
        assert [t.name for t in catering.tasks] == ["Choose caterer", "Tasting"]

    @pytest.mark.parametrize("order", [0, 1, 7, 45])
    def test_due_date_is_start_plus_order(self, db, event_params, order):
        template = Template(
            id="tpl-due",
            name="Due",
            is_public=True,
            modules=[
                ModuleBlueprint(
                    id="m",
                    name="M",
                    category=ModuleCategory.VENUE,
                    tasks=[TaskBlueprint(id="t", name="T", order=order)],
                )
            ],
        )
        with db.transaction() as session:
            TemplateRepository(session).save(template)

        graph = instantiate(db, "tpl-due", event_params, None, "mgr").value
        start = date(2024, 1, 1)
        assert (graph.all_tasks()[0].due_date - start).days == order

    def test_wedding_example(self, db, wedding_event, tasks, clock):
        a, b = tasks["Book venue"], tasks["Choose caterer"]
        assert a.due_date == date(2024, 1, 1)
        assert b.due_date == date(2024, 1, 3)
        assert b.status == TaskStatus.PENDING
        assert not can_start(b, wedding_event.tasks_by_id())

        assert isinstance(transition(db, a.id, "COMPLETED", None, "mgr", clock=clock), Ok)
        result = transition(db, b.id, "IN_PROGRESS", None, "mgr", clock=clock)
        assert isinstance(result, Ok)
        assert result.value.status == TaskStatus.IN_PROGRESS

    def test_emits_event_instantiated(self, db, event_params, dispatcher):
        graph = instantiate(db, "tpl-wedding", event_params, None, "mgr", dispatcher=dispatcher).value
        assert dispatcher.names() == ["EventInstantiated"]
        assert dispatcher.events[0].event_ref == graph.event.id
        assert dispatcher.events[0].task_count == 4

    def test_usage_count_grows(self, db, event_params):
        instantiate(db, "tpl-wedding", event_params, None, "mgr")
        instantiate(db, "tpl-wedding", event_params, None, "mgr")
        stats = list_templates(db, "mgr").value
        assert stats[0].usage_count == 2


class TestCustomizations:
    """Tests for module exclusion and overrides."""

    def test_excluding_module_drops_its_tasks_and_edges(self, db, event_params):
        custom = {"exclude_module_ids": ["m-catering"]}
        graph = instantiate(db, "tpl-wedding", event_params, custom, "mgr").value

        names = {t.name for t in graph.all_tasks()}
        assert names == {"Book venue", "Hire photographer"}
        assert [m.module.name for m in graph.modules] == ["Venue", "Photography"]
        lookup = graph.tasks_by_id()
        for task in graph.all_tasks():
            assert all(dep in lookup for dep in task.dependency_ids)

    def test_edges_into_excluded_module_are_dropped(self, db, event_params):
        template = Template(
            id="tpl-x",
            name="X",
            is_public=True,
            modules=[
                ModuleBlueprint(
                    id="m1", name="M1", category=ModuleCategory.VENUE, tasks=[TaskBlueprint(id="a", name="A")]
                ),
                ModuleBlueprint(
                    id="m2",
                    name="M2",
                    category=ModuleCategory.FOOD,
                    tasks=[TaskBlueprint(id="b", name="B", dependency_ids=["a"])],
                ),
            ],
        )
        with db.transaction() as session:
            TemplateRepository(session).save(template)

        graph = instantiate(db, "tpl-x", event_params, {"exclude_module_ids": ["m1"]}, "mgr").value
        (task,) = graph.all_tasks()
        assert task.name == "B"
        assert task.dependency_ids == ()

    def test_unknown_exclusions_are_ignored(self, db, event_params):
        graph = instantiate(db, "tpl-wedding", event_params, {"exclude_module_ids": ["nope"]}, "mgr").value
        assert len(graph.modules) == 3

    def test_cannot_exclude_required_module(self, db, event_params):
        result = instantiate(db, "tpl-wedding", event_params, {"exclude_module_ids": ["m-venue"]}, "mgr")
        assert isinstance(result, Err)
        assert result.error.code == "validation_error"
        assert result.error.details["required_module_ids"] == ["m-venue"]
        assert db.count("events") == 0

    def test_overrides_replace_only_given_fields(self, db, event_params):
        custom = {"module_overrides": {"m-catering": {"name": "Buffet", "budget": 800}}}
        graph = instantiate(db, "tpl-wedding", event_params, custom, "mgr").value
        catering = graph.modules[1].module
        assert catering.name == "Buffet"
        assert catering.budget == 800
        assert catering.estimated_days == 5


class TestAtomicity:
    """A failure during cloning leaves no rows behind."""

    def test_dangling_dependency_rolls_back(self, db, event_params):
        broken = Template(
            id="tpl-broken",
            name="Broken",
            is_public=True,
            modules=[
                ModuleBlueprint(
                    id="m",
                    name="M",
                    category=ModuleCategory.VENUE,
                    tasks=[
                        TaskBlueprint(id="a", name="A"),
                        TaskBlueprint(id="b", name="B", dependency_ids=["ghost"]),
                    ],
                )
            ],
        )
        # Bypass save_template so the malformed blueprint reaches the store
        with db.transaction() as session:
            session.put("templates", broken)
        before = _row_counts(db)

        result = instantiate(db, "tpl-broken", event_params, None, "mgr")

        assert isinstance(result, Err)
        assert result.error.code == "instantiation_failed"
        assert _row_counts(db) == before

    def test_unexpected_error_rolls_back(self, db, event_params):
        calls = {"n": 0}

        def flaky_ids():
            calls["n"] += 1
            if calls["n"] == 4:
                raise RuntimeError("id service down")
            return f"id-{calls['n']}"

        result = instantiate(db, "tpl-wedding", event_params, None, "mgr", id_factory=flaky_ids)

        assert isinstance(result, Err)
        assert result.error.code == "instantiation_failed"
        assert "id service" not in result.error.message
        assert _row_counts(db) == {"events": 0, "modules": 0, "tasks": 0}


class TestPreconditions:
    """Input and access checks run before anything is written."""

    @pytest.mark.parametrize(
        "field,value",
        [
            ("name", "   "),
            ("venue", ""),
            ("end_date", "2023-12-31"),
            ("budget", -5),
            ("guest_count", 0),
        ],
    )
    def test_invalid_params(self, db, event_params, field, value):
        event_params[field] = value
        result = instantiate(db, "tpl-wedding", event_params, None, "mgr")
        assert isinstance(result, Err)
        assert result.error.code == "validation_error"
        assert db.count("events") == 0

    def test_missing_field(self, db, event_params):
        del event_params["start_date"]
        result = instantiate(db, "tpl-wedding", event_params, None, "mgr")
        assert result.error.details["fields"]["start_date"]

    def test_vendor_cannot_apply(self, db, event_params):
        result = instantiate(db, "tpl-wedding", event_params, None, "vendor")
        assert result.error.code == "forbidden"

    def test_unknown_template(self, db, event_params):
        result = instantiate(db, "tpl-missing", event_params, None, "mgr")
        assert result.error.code == "not_found"

    def test_private_template_of_other_organization(self, db, event_params):
        private = Template(id="tpl-private", name="Private", organization_id="org-2")
        with db.transaction() as session:
            TemplateRepository(session).save(private)

        result = instantiate(db, "tpl-private", event_params, None, "mgr")
        assert result.error.code == "not_found"

    def test_client_must_be_in_same_organization(self, db, event_params):
        event_params["client_id"] = "client-2"
        result = instantiate(db, "tpl-wedding", event_params, None, "mgr")
        assert result.error.code == "not_found"

    def test_client_must_have_client_role(self, db, event_params):
        event_params["client_id"] = "vendor"
        result = instantiate(db, "tpl-wedding", event_params, None, "mgr")
        assert result.error.code == "not_found"
