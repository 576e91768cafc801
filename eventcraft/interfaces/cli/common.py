"""Shared utilities for eventcraft CLI commands.

This module provides common utilities used across CLI commands:
- Store and dispatcher setup from settings
- Reusable --data / --actor options
- Formatted output helpers (error, success, info)
- Result unwrapping with a red error and exit code 1
"""

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Annotated, Any, Optional, TypeVar

import typer

from eventcraft.config import build_dispatcher, get_config_dir, load_settings, open_database
from eventcraft.domain.shared import Err, PlanningError, Result
from eventcraft.infrastructure.notifications import NotificationDispatcher, close_dispatcher
from eventcraft.infrastructure.storage import Database

T = TypeVar("T")

DEFAULT_DATA_FILE = "eventcraft.json"

# Reusable options for CLI commands
# Usage: def my_command(data: DataOption = None, actor: ActorOption = "") -> None:
DataOption = Annotated[Optional[Path], typer.Option(
    "--data", "-d",
    help="Store snapshot file (or set EVENTCRAFT_DATA_FILE env var)",
    envvar="EVENTCRAFT_DATA_FILE",
)]

ActorOption = Annotated[str, typer.Option(
    "--actor", "-a",
    help="Acting member ID (or set EVENTCRAFT_ACTOR env var)",
    envvar="EVENTCRAFT_ACTOR",
)]


def resolve_data_file(explicit: Optional[Path] = None) -> Path:
    """Pick the snapshot file.

    Resolution order:
    1. Explicit --data option (or EVENTCRAFT_DATA_FILE)
    2. data_file from config.json
    3. eventcraft.json in the config directory
    """
    if explicit:
        return explicit
    settings = load_settings()
    if settings.data_file:
        return settings.data_file
    return get_config_dir() / DEFAULT_DATA_FILE


def open_store(data: Optional[Path] = None) -> Database:
    """Open the store or exit with an error."""
    settings = load_settings().model_copy(update={"data_file": resolve_data_file(data)})
    result = open_database(settings)
    if isinstance(result, Err):
        print_error(result.error)
        raise typer.Exit(1)
    return result.value


@contextmanager
def get_dispatcher() -> Iterator[NotificationDispatcher]:
    """Dispatcher for one command, closed when the command finishes."""
    dispatcher = build_dispatcher(load_settings())
    try:
        yield dispatcher
    finally:
        close_dispatcher(dispatcher)


def require_actor(actor: str) -> str:
    """Return the actor ID, exiting if none was given."""
    if actor:
        return actor
    print_error("No acting member specified.")
    typer.echo("Use -a/--actor or set EVENTCRAFT_ACTOR=<member-id>")
    raise typer.Exit(1)


def unwrap(result: Result[T, PlanningError]) -> T:
    """Return the Ok value, or print the error and exit 1."""
    if isinstance(result, Err):
        error = result.error
        print_error(error.message)
        for key, value in error.details.items():
            typer.echo(f"  {key}: {value}", err=True)
        raise typer.Exit(1)
    return result.value


def print_error(msg: str) -> None:
    """Print a formatted error message.

    Args:
        msg: Error message to display
    """
    typer.echo(typer.style(f"Error: {msg}", fg=typer.colors.RED), err=True)


def print_success(msg: str) -> None:
    """Print a formatted success message.

    Args:
        msg: Success message to display
    """
    typer.echo(typer.style(msg, fg=typer.colors.GREEN))


def print_info(msg: str) -> None:
    typer.echo(typer.style(msg, fg=typer.colors.BLUE))


def print_separator(char: str = "=", width: int = 60) -> None:
    typer.echo(char * width)


def print_header(title: str, width: int = 60) -> None:
    """Print a formatted header with separators."""
    print_separator("=", width)
    typer.echo(title)
    print_separator("=", width)


def status_marker(status: Any) -> str:
    """Checkbox-style marker for a task status."""
    value = getattr(status, "value", status)
    return {
        "COMPLETED": "[x]",
        "PENDING": "[ ]",
        "IN_PROGRESS": "[~]",
        "BLOCKED": "[!]",
        "CANCELLED": "[-]",
    }.get(value, f"[{value}]")


__all__ = [
    "DataOption",
    "ActorOption",
    "resolve_data_file",
    "open_store",
    "get_dispatcher",
    "require_actor",
    "unwrap",
    "print_error",
    "print_success",
    "print_info",
    "print_separator",
    "print_header",
    "status_marker",
]
