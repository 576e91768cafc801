"""CLI interface for eventcraft using Typer.

This module provides the command-line interface for eventcraft, the
template-driven event planning engine.

Usage:
    eventcraft template import wedding.json -a mgr-1
    eventcraft event apply tpl-wedding -a mgr-1 --name ... --client ...
    eventcraft event show <event-id> -a mgr-1
    eventcraft task transition <task-id> IN_PROGRESS -a vendor-1

The CLI is structured as:
- app: Main Typer application
- commands/: Individual command groups (template, event, task, member)
- common.py: Shared utilities for CLI commands
- main.py: Entry point that runs the app
"""

from typing import Optional

import typer

from eventcraft import __version__
from eventcraft.config import configure_logging, load_settings
from eventcraft.interfaces.cli.commands import event, member, task, template

# Create the main Typer application
app = typer.Typer(
    name="eventcraft",
    help="Template-driven event planning",
    add_completion=False,
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"eventcraft version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="Log level (or set EVENTCRAFT_LOG_LEVEL env var)",
        envvar="EVENTCRAFT_LOG_LEVEL",
    ),
) -> None:
    """eventcraft - Template-driven event planning.

    Turn reusable event templates into live task plans and work them
    through a dependency-aware status lifecycle.
    """
    configure_logging(log_level or load_settings().log_level)


# =============================================================================
# Register Command Groups
# =============================================================================

app.add_typer(template.app, name="template")
app.add_typer(event.app, name="event")
app.add_typer(task.app, name="task")
app.add_typer(member.app, name="member")


__all__ = ["app"]
