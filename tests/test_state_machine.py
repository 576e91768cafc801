"""Tests for the pure task state machine."""

from datetime import UTC, datetime

import pytest

from eventcraft.domain.shared import Err, Ok
from eventcraft.domain.task import (
    ALLOWED_TRANSITIONS,
    Task,
    TaskStatus,
    TaskUpdate,
    apply_transition,
    can_start,
    check_deletable,
    check_transition,
    unmet_dependencies,
)

NOW = datetime(2024, 1, 5, tzinfo=UTC)


def _task(task_id, status=TaskStatus.PENDING, deps=()):
    return Task(id=task_id, event_id="e", module_id="m", name=task_id.upper(), status=status, dependency_ids=list(deps))


def _lookup(*tasks):
    return {t.id: t for t in tasks}


class TestCanStart:
    """Tests for can_start() and unmet_dependencies()."""

    def test_no_dependencies(self):
        assert can_start(_task("a"), {})

    def test_all_dependencies_completed(self):
        a = _task("a", TaskStatus.COMPLETED)
        b = _task("b", TaskStatus.COMPLETED)
        assert can_start(_task("c", deps=["a", "b"]), _lookup(a, b))

    @pytest.mark.parametrize(
        "status", [TaskStatus.PENDING, TaskStatus.IN_PROGRESS, TaskStatus.BLOCKED, TaskStatus.CANCELLED]
    )
    def test_unfinished_dependency_blocks(self, status):
        a = _task("a", status)
        c = _task("c", deps=["a"])
        assert not can_start(c, _lookup(a))
        assert [t.id for t in unmet_dependencies(c, _lookup(a))] == ["a"]

    def test_missing_dependency_counts_as_unmet(self):
        assert not can_start(_task("c", deps=["ghost"]), {})


class TestCheckTransition:
    """Tests for check_transition()."""

    def test_start_with_unmet_dependency(self):
        a = _task("a")
        b = _task("b", deps=["a"])
        result = check_transition(b, TaskStatus.IN_PROGRESS, _lookup(a, b))
        assert isinstance(result, Err)
        assert result.error.code == "dependency_not_satisfied"
        assert result.error.unmet == [{"id": "a", "name": "A", "status": "PENDING"}]
        assert "A" in result.error.message

    def test_complete_with_unmet_dependency(self):
        a = _task("a", TaskStatus.IN_PROGRESS)
        b = _task("b", deps=["a"])
        result = check_transition(b, TaskStatus.COMPLETED, _lookup(a, b))
        assert result.error.code == "dependency_not_satisfied"

    def test_block_and_cancel_ignore_dependencies(self):
        a = _task("a")
        b = _task("b", deps=["a"])
        assert isinstance(check_transition(b, TaskStatus.BLOCKED, _lookup(a, b)), Ok)
        assert isinstance(check_transition(b, TaskStatus.CANCELLED, _lookup(a, b)), Ok)

    def test_same_status_is_noop(self):
        done = _task("a", TaskStatus.COMPLETED)
        assert isinstance(check_transition(done, TaskStatus.COMPLETED, _lookup(done)), Ok)

    @pytest.mark.parametrize("terminal", [TaskStatus.COMPLETED, TaskStatus.CANCELLED])
    @pytest.mark.parametrize("target", [TaskStatus.PENDING, TaskStatus.IN_PROGRESS, TaskStatus.BLOCKED])
    def test_terminal_states_are_final(self, terminal, target):
        task = _task("a", terminal)
        result = check_transition(task, target, _lookup(task))
        assert result.error.code == "invalid_state"

    def test_table_has_no_exits_from_terminal_states(self):
        assert ALLOWED_TRANSITIONS[TaskStatus.COMPLETED] == frozenset()
        assert ALLOWED_TRANSITIONS[TaskStatus.CANCELLED] == frozenset()

    def test_blocked_cannot_complete_directly(self):
        task = _task("a", TaskStatus.BLOCKED)
        assert check_transition(task, TaskStatus.COMPLETED, _lookup(task)).error.code == "invalid_state"

    def test_admin_reopen(self):
        done = _task("a", TaskStatus.COMPLETED)
        assert isinstance(check_transition(done, TaskStatus.PENDING, _lookup(done), allow_reopen=True), Ok)

    def test_reopen_refused_once_dependent_started(self):
        done = _task("a", TaskStatus.COMPLETED)
        started = _task("b", TaskStatus.IN_PROGRESS, deps=["a"])
        result = check_transition(done, TaskStatus.PENDING, _lookup(done, started), allow_reopen=True)
        assert result.error.code == "invalid_state"
        assert result.error.details["started_dependents"] == ["b"]


class TestApplyTransition:
    """Tests for apply_transition()."""

    def test_completion_stamps_completed_at(self):
        done = apply_transition(_task("a", TaskStatus.IN_PROGRESS), TaskStatus.COMPLETED, NOW)
        assert done.status == TaskStatus.COMPLETED
        assert done.completed_at == NOW
        assert done.updated_at == NOW

    def test_reopen_clears_completed_at(self):
        done = apply_transition(_task("a", TaskStatus.IN_PROGRESS), TaskStatus.COMPLETED, NOW)
        reopened = apply_transition(done, TaskStatus.PENDING, NOW)
        assert reopened.completed_at is None

    def test_input_task_is_untouched(self):
        task = _task("a")
        apply_transition(task, TaskStatus.IN_PROGRESS, NOW)
        assert task.status == TaskStatus.PENDING


class TestCheckDeletable:
    """Tests for check_deletable()."""

    def test_task_with_dependents(self):
        a = _task("a")
        b = _task("b", deps=["a"])
        result = check_deletable(a, [a, b])
        assert result.error.code == "has_dependents"
        assert result.error.details["dependents"] == [{"id": "b", "name": "B"}]

    @pytest.mark.parametrize("status", [TaskStatus.IN_PROGRESS, TaskStatus.COMPLETED])
    def test_started_task(self, status):
        task = _task("a", status)
        assert check_deletable(task, [task]).error.code == "invalid_state"

    @pytest.mark.parametrize("status", [TaskStatus.PENDING, TaskStatus.BLOCKED, TaskStatus.CANCELLED])
    def test_deletable(self, status):
        task = _task("a", status)
        assert isinstance(check_deletable(task, [task]), Ok)


class TestTaskUpdate:
    """Tests for TaskUpdate.changed_fields()."""

    def test_only_explicit_and_different_fields(self):
        task = _task("a").model_copy(update={"notes": "same"})
        update = TaskUpdate(notes="same", actual_hours=2)
        assert update.changed_fields(task) == {"actual_hours": 2}

    def test_explicit_none_counts(self):
        task = _task("a").model_copy(update={"assigned_to": "vendor"})
        assert TaskUpdate(assigned_to=None).changed_fields(task) == {"assigned_to": None}

    def test_unknown_fields_rejected(self):
        with pytest.raises(ValueError):
            TaskUpdate(event_id="other")
