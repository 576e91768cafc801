"""Template CLI commands.

Commands for authoring and discovering templates: importing a template
from a JSON file, validating one without saving, and listing what the
acting member can see.
"""

import json
from pathlib import Path
from typing import Any, Optional

import typer

from eventcraft.application import list_templates, parse_template, save_template
from eventcraft.domain.template import EventType
from eventcraft.interfaces.cli.common import (
    ActorOption,
    DataOption,
    get_dispatcher,
    open_store,
    print_error,
    print_header,
    print_success,
    require_actor,
    unwrap,
)

app = typer.Typer(help="Template commands")


def _read_template_file(path: Path) -> dict[str, Any]:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        print_error(f"File not found: {path}")
    except json.JSONDecodeError as e:
        print_error(f"Invalid JSON in {path}: {e}")
    raise typer.Exit(1)


@app.command("import")
def import_template(
    file: Path = typer.Argument(..., help="Template JSON file"),
    data: DataOption = None,
    actor: ActorOption = "",
) -> None:
    """Validate and save a template from a JSON file."""
    actor_id = require_actor(actor)
    raw = _read_template_file(file)
    db = open_store(data)
    with get_dispatcher() as dispatcher:
        template = unwrap(save_template(db, raw, actor_id, dispatcher))
    print_success(
        f"Saved template '{template.name}' ({template.id}): "
        f"{len(template.modules)} modules, {len(template.all_tasks())} tasks"
    )


@app.command("validate")
def validate(file: Path = typer.Argument(..., help="Template JSON file")) -> None:
    """Check a template file without saving it."""
    template = unwrap(parse_template(_read_template_file(file)))
    print_success(f"Template '{template.name}' is valid ({len(template.all_tasks())} tasks, no cycles)")


@app.command("list")
def list_cmd(
    event_type: Optional[EventType] = typer.Option(None, "--type", "-t", help="Filter by event type"),
    region: Optional[str] = typer.Option(None, "--region", "-r", help="Filter by region"),
    data: DataOption = None,
    actor: ActorOption = "",
) -> None:
    """List templates visible to the acting member."""
    actor_id = require_actor(actor)
    db = open_store(data)
    listing = unwrap(list_templates(db, actor_id, event_type=event_type, region=region))

    if not listing:
        typer.echo("No templates found.")
        return

    print_header("TEMPLATES")
    for stats in listing:
        template = stats.template
        visibility = "public" if template.is_public else "private"
        typer.echo(f"{template.id}  {template.name} [{template.event_type.value}, {visibility}]")
        typer.echo(
            f"    {stats.total_modules} modules, {stats.total_tasks} tasks, "
            f"~{stats.estimated_duration} days, used {stats.usage_count} times"
        )
