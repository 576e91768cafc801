"""Template authoring checks.

Pure functions run when a template is saved. A template that passes
``validate_template`` has unique ids, only in-template dependency
references, and an acyclic dependency graph, so every task it produces
can eventually be started.
"""

from eventcraft.domain.shared import Err, Ok, Result, ValidationError

from .models import Template, TemplateStats

# DFS colours
_WHITE, _GREY, _BLACK = 0, 1, 2


def find_cycle(edges: dict[str, list[str]]) -> list[str] | None:
    """Find a dependency cycle using depth-first search.

    Args:
        edges: Map of task id -> ids it depends on

    Returns:
        The cycle as a list of ids (first id repeated at the end),
        or None if the graph is acyclic
    """
    colour = {node: _WHITE for node in edges}
    stack: list[str] = []

    def visit(node: str) -> list[str] | None:
        colour[node] = _GREY
        stack.append(node)
        for dep in edges.get(node, []):
            state = colour.get(dep, _BLACK)
            if state == _GREY:
                return stack[stack.index(dep):] + [dep]
            if state == _WHITE:
                cycle = visit(dep)
                if cycle:
                    return cycle
        stack.pop()
        colour[node] = _BLACK
        return None

    for node in edges:
        if colour[node] == _WHITE:
            cycle = visit(node)
            if cycle:
                return cycle
    return None


def validate_template(template: Template) -> Result[Template, ValidationError]:
    """Check the structural invariants of a template blueprint.

    Args:
        template: The template to check

    Returns:
        Ok(template) if valid, or Err(ValidationError) describing the
        first problem found
    """
    module_ids = [m.id for m in template.modules]
    duplicates = {mid for mid in module_ids if module_ids.count(mid) > 1}
    if duplicates:
        return Err(
            ValidationError(
                "Module ids must be unique within a template",
                duplicate_module_ids=sorted(duplicates),
            )
        )

    task_ids = [t.id for t in template.all_tasks()]
    duplicates = {tid for tid in task_ids if task_ids.count(tid) > 1}
    if duplicates:
        return Err(
            ValidationError(
                "Task ids must be unique within a template",
                duplicate_task_ids=sorted(duplicates),
            )
        )

    known = set(task_ids)
    edges: dict[str, list[str]] = {}
    for task in template.all_tasks():
        if task.id in task.dependency_ids:
            return Err(ValidationError(f"Task '{task.name}' depends on itself", task_id=task.id))
        unknown = [dep for dep in task.dependency_ids if dep not in known]
        if unknown:
            return Err(
                ValidationError(
                    f"Task '{task.name}' depends on tasks outside this template",
                    task_id=task.id,
                    unknown_dependency_ids=unknown,
                )
            )
        edges[task.id] = list(task.dependency_ids)

    cycle = find_cycle(edges)
    if cycle:
        return Err(
            ValidationError(
                "Task dependencies form a cycle: " + " -> ".join(cycle),
                cycle=cycle,
            )
        )

    return Ok(template)


def template_stats(template: Template, usage_count: int = 0) -> TemplateStats:
    """Summarize a template for listing views."""
    return TemplateStats(
        template=template,
        total_modules=len(template.modules),
        total_tasks=len(template.all_tasks()),
        estimated_duration=sum(m.estimated_days or 0 for m in template.modules),
        usage_count=usage_count,
    )
