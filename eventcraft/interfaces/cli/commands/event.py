"""Event CLI commands.

Commands for the event lifecycle: applying a template, showing an event
with its progress, and deleting an event that has not started.
"""

from typing import Optional

import typer

from eventcraft.application import delete_event, event_summary, instantiate
from eventcraft.domain.event import EventGraph, ProgressSummary
from eventcraft.interfaces.cli.common import (
    ActorOption,
    DataOption,
    get_dispatcher,
    open_store,
    print_header,
    print_info,
    print_separator,
    print_success,
    require_actor,
    status_marker,
    unwrap,
)

app = typer.Typer(help="Event commands")


def print_event(graph: EventGraph, progress: Optional[ProgressSummary] = None) -> None:
    """Print an event with its modules and tasks."""
    event = graph.event
    print_header(f"EVENT: {event.name}")
    typer.echo(f"ID:     {event.id}")
    typer.echo(f"Status: {event.status.value}")
    typer.echo(f"Dates:  {event.start_date} - {event.end_date}")
    if event.venue:
        typer.echo(f"Venue:  {event.venue}")
    if progress is not None:
        typer.echo(
            f"Progress: {progress.progress}% "
            f"({progress.completed_task_count}/{progress.task_count} tasks)"
        )

    module_progress = {m.module_id: m for m in progress.modules} if progress else {}
    for module in graph.modules:
        suffix = ""
        if module.module.id in module_progress:
            suffix = f" - {module_progress[module.module.id].progress}%"
        typer.echo(f"\n## {module.module.name} [{module.module.category.value}]{suffix}")
        for task in module.tasks:
            due = f" (due {task.due_date})" if task.due_date else ""
            typer.echo(f"  {status_marker(task.status)} {task.name}{due}  {task.id}")
            for dep in graph.dependencies_of(task):
                typer.echo(f"        after: {dep.name}")
    print_separator()


@app.command("apply")
def apply(
    template_id: str = typer.Argument(..., help="Template to apply"),
    name: str = typer.Option(..., "--name", "-n", help="Event name"),
    client: str = typer.Option(..., "--client", "-c", help="Client member ID"),
    start: str = typer.Option(..., "--start", help="Start date (YYYY-MM-DD)"),
    end: str = typer.Option(..., "--end", help="End date (YYYY-MM-DD)"),
    venue: str = typer.Option(..., "--venue", help="Venue"),
    budget: Optional[float] = typer.Option(None, "--budget", help="Total budget"),
    guests: Optional[int] = typer.Option(None, "--guests", help="Guest count"),
    description: Optional[str] = typer.Option(None, "--description", help="Event description"),
    exclude: Optional[list[str]] = typer.Option(
        None, "--exclude", "-x", help="Template module ID to leave out (repeatable)"
    ),
    data: DataOption = None,
    actor: ActorOption = "",
) -> None:
    """Create an event from a template."""
    actor_id = require_actor(actor)
    db = open_store(data)
    params = {
        "name": name,
        "description": description,
        "client_id": client,
        "start_date": start,
        "end_date": end,
        "venue": venue,
        "budget": budget,
        "guest_count": guests,
    }
    with get_dispatcher() as dispatcher:
        graph = unwrap(
            instantiate(
                db,
                template_id,
                params,
                {"exclude_module_ids": exclude or []},
                actor_id,
                dispatcher=dispatcher,
            )
        )
    print_success(
        f"Created event '{graph.event.name}' ({graph.event.id}): "
        f"{len(graph.modules)} modules, {len(graph.all_tasks())} tasks"
    )


@app.command("show")
def show(
    event_id: str = typer.Argument(..., help="Event ID"),
    data: DataOption = None,
    actor: ActorOption = "",
) -> None:
    """Show an event with its tasks and progress."""
    actor_id = require_actor(actor)
    db = open_store(data)
    summary = unwrap(event_summary(db, event_id, actor_id))
    print_event(summary.graph, summary.progress)


@app.command("delete")
def delete(
    event_id: str = typer.Argument(..., help="Event ID"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
    data: DataOption = None,
    actor: ActorOption = "",
) -> None:
    """Delete an event with all of its modules and tasks."""
    actor_id = require_actor(actor)
    if not yes and not typer.confirm(f"Delete event {event_id} and all of its tasks?"):
        print_info("Aborted.")
        raise typer.Exit()
    db = open_store(data)
    with get_dispatcher() as dispatcher:
        event = unwrap(delete_event(db, event_id, actor_id, dispatcher))
    print_success(f"Deleted event '{event.name}'")
