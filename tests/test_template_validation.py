"""Tests for template authoring checks and listing stats."""

from eventcraft.domain.shared import Err, Ok
from eventcraft.domain.template import (
    ModuleBlueprint,
    ModuleCategory,
    TaskBlueprint,
    Template,
    find_cycle,
    template_stats,
    validate_template,
)


def _template(*tasks, extra_modules=()):
    return Template(
        id="tpl",
        name="T",
        modules=[
            ModuleBlueprint(id="m1", name="M1", category=ModuleCategory.VENUE, tasks=list(tasks)),
            *extra_modules,
        ],
    )


class TestFindCycle:
    """Tests for find_cycle()."""

    def test_acyclic_graph(self):
        assert find_cycle({"a": [], "b": ["a"], "c": ["a", "b"]}) is None

    def test_two_node_cycle(self):
        cycle = find_cycle({"a": ["b"], "b": ["a"]})
        assert cycle is not None
        assert cycle[0] == cycle[-1]
        assert set(cycle) == {"a", "b"}

    def test_longer_cycle_reports_path(self):
        cycle = find_cycle({"a": ["b"], "b": ["c"], "c": ["a"], "d": ["a"]})
        assert cycle is not None
        assert set(cycle[:-1]) == {"a", "b", "c"}

    def test_diamond_is_not_a_cycle(self):
        assert find_cycle({"a": [], "b": ["a"], "c": ["a"], "d": ["b", "c"]}) is None


class TestValidateTemplate:
    """Tests for validate_template()."""

    def test_valid_template(self, wedding_template):
        assert isinstance(validate_template(wedding_template), Ok)

    def test_rejects_cycle(self):
        template = _template(
            TaskBlueprint(id="a", name="A", dependency_ids=["b"]),
            TaskBlueprint(id="b", name="B", dependency_ids=["a"]),
        )
        result = validate_template(template)
        assert isinstance(result, Err)
        assert result.error.code == "validation_error"
        assert "cycle" in result.error.message

    def test_rejects_self_dependency(self):
        result = validate_template(_template(TaskBlueprint(id="a", name="A", dependency_ids=["a"])))
        assert isinstance(result, Err)
        assert "itself" in result.error.message

    def test_rejects_unknown_dependency(self):
        result = validate_template(_template(TaskBlueprint(id="a", name="A", dependency_ids=["ghost"])))
        assert isinstance(result, Err)
        assert result.error.details["unknown_dependency_ids"] == ["ghost"]

    def test_rejects_duplicate_task_ids_across_modules(self):
        other = ModuleBlueprint(
            id="m2", name="M2", category=ModuleCategory.FOOD, tasks=[TaskBlueprint(id="a", name="A2")]
        )
        result = validate_template(_template(TaskBlueprint(id="a", name="A"), extra_modules=[other]))
        assert isinstance(result, Err)
        assert result.error.details["duplicate_task_ids"] == ["a"]

    def test_rejects_duplicate_module_ids(self):
        twin = ModuleBlueprint(id="m1", name="Twin", category=ModuleCategory.FOOD)
        result = validate_template(_template(extra_modules=[twin]))
        assert isinstance(result, Err)
        assert result.error.details["duplicate_module_ids"] == ["m1"]

    def test_cross_module_dependency_is_valid(self):
        other = ModuleBlueprint(
            id="m2",
            name="M2",
            category=ModuleCategory.FOOD,
            tasks=[TaskBlueprint(id="b", name="B", dependency_ids=["a"])],
        )
        assert isinstance(validate_template(_template(TaskBlueprint(id="a", name="A"), extra_modules=[other])), Ok)


class TestTemplateStats:
    """Tests for template_stats()."""

    def test_counts(self, wedding_template):
        stats = template_stats(wedding_template, usage_count=2)
        assert stats.total_modules == 3
        assert stats.total_tasks == 4
        assert stats.estimated_duration == 9
        assert stats.usage_count == 2
