"""Task CLI commands.

Commands for working a task: moving it through its status lifecycle,
recording hours and notes, reassigning it, and deleting it.
"""

from typing import Any, Optional

import typer

from eventcraft.application import delete_task, task_detail, transition
from eventcraft.domain.task import TaskStatus
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

app = typer.Typer(help="Task commands")


@app.command("transition")
def transition_cmd(
    task_id: str = typer.Argument(..., help="Task ID"),
    status: Optional[TaskStatus] = typer.Argument(None, help="New status"),
    hours: Optional[float] = typer.Option(None, "--hours", help="Actual hours spent"),
    notes: Optional[str] = typer.Option(None, "--notes", help="Replace task notes"),
    assign: Optional[str] = typer.Option(None, "--assign", help="Reassign to member ID"),
    data: DataOption = None,
    actor: ActorOption = "",
) -> None:
    """Change a task's status and/or fields."""
    actor_id = require_actor(actor)
    updates: dict[str, Any] = {}
    if hours is not None:
        updates["actual_hours"] = hours
    if notes is not None:
        updates["notes"] = notes
    if assign is not None:
        updates["assigned_to"] = assign

    db = open_store(data)
    with get_dispatcher() as dispatcher:
        task = unwrap(transition(db, task_id, status, updates, actor_id, dispatcher))
    print_success(f"{status_marker(task.status)} {task.name} is {task.status.value}")


@app.command("show")
def show(
    task_id: str = typer.Argument(..., help="Task ID"),
    data: DataOption = None,
    actor: ActorOption = "",
) -> None:
    """Show a task with its dependencies and dependents."""
    actor_id = require_actor(actor)
    db = open_store(data)
    detail = unwrap(task_detail(db, task_id, actor_id))
    task = detail.task

    print_header(f"TASK: {task.name}")
    typer.echo(f"ID:       {task.id}")
    typer.echo(f"Status:   {task.status.value}")
    typer.echo(f"Priority: {task.priority.value}")
    if task.assigned_to:
        typer.echo(f"Assignee: {task.assigned_to}")
    if task.due_date:
        overdue = " OVERDUE" if detail.is_overdue else ""
        typer.echo(f"Due:      {task.due_date} ({detail.days_until_due} days){overdue}")
    typer.echo(f"Hours:    {task.actual_hours:g} / {task.estimated_hours:g} estimated")
    if task.notes:
        typer.echo(f"Notes:    {task.notes}")

    if detail.dependencies:
        typer.echo("\n## Depends on")
        for dep in detail.dependencies:
            typer.echo(f"  {status_marker(dep.status)} {dep.name}")
    if detail.dependents:
        typer.echo("\n## Required by")
        for dep in detail.dependents:
            typer.echo(f"  {status_marker(dep.status)} {dep.name}")

    typer.echo("")
    if detail.can_start:
        print_info("Ready to start.")
    else:
        print_info("Waiting on dependencies.")
    print_separator()


@app.command("delete")
def delete(
    task_id: str = typer.Argument(..., help="Task ID"),
    data: DataOption = None,
    actor: ActorOption = "",
) -> None:
    """Delete a task nothing depends on."""
    actor_id = require_actor(actor)
    db = open_store(data)
    with get_dispatcher() as dispatcher:
        task = unwrap(delete_task(db, task_id, actor_id, dispatcher))
    print_success(f"Deleted task '{task.name}'")
