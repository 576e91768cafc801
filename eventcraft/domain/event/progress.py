"""Progress aggregation.

Pure read-time computations over current task statuses. Percentages are
never stored, so there is nothing to invalidate on status writes.
"""

from pydantic import BaseModel, Field

from eventcraft.domain.task.models import Task, TaskStatus

from .models import EventGraph, ModuleGraph


class ModuleProgress(BaseModel):
    """Progress figures for one module."""

    module_id: str
    name: str
    progress: int
    task_count: int
    completed_task_count: int


class ProgressSummary(BaseModel):
    """Progress figures for an event and each of its modules."""

    progress: int
    task_count: int
    completed_task_count: int
    modules: list[ModuleProgress] = Field(default_factory=list)


def percent(completed: int, total: int) -> int:
    """Round ``100 * completed / total`` half-up, 0 when total is 0.

    Integer arithmetic keeps 12.5 -> 13 exact.
    """
    if total <= 0:
        return 0
    return (200 * completed + total) // (2 * total)


def _completed(tasks: list[Task]) -> int:
    return sum(1 for task in tasks if task.status == TaskStatus.COMPLETED)


def module_progress(module: ModuleGraph) -> int:
    """Completion percentage of a module's tasks."""
    return percent(_completed(module.tasks), len(module.tasks))


def event_progress(graph: EventGraph) -> int:
    """Completion percentage over all tasks of the event.

    Counted over tasks, not averaged over modules, so modules with more
    tasks weigh more.
    """
    tasks = graph.all_tasks()
    return percent(_completed(tasks), len(tasks))


def summarize_progress(graph: EventGraph) -> ProgressSummary:
    """Build the event and per-module progress view."""
    tasks = graph.all_tasks()
    return ProgressSummary(
        progress=event_progress(graph),
        task_count=len(tasks),
        completed_task_count=_completed(tasks),
        modules=[
            ModuleProgress(
                module_id=module.module.id,
                name=module.module.name,
                progress=module_progress(module),
                task_count=len(module.tasks),
                completed_task_count=_completed(module.tasks),
            )
            for module in graph.modules
        ],
    )
