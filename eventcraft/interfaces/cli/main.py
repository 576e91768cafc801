"""Entry point for the eventcraft CLI.

Usage:
    python -m eventcraft.interfaces.cli.main

Or via installed entry point:
    eventcraft <command>
"""

from eventcraft.interfaces.cli import app


def main() -> None:
    """Run the eventcraft CLI application."""
    app()


if __name__ == "__main__":
    main()
