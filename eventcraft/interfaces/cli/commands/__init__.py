"""CLI command groups for eventcraft."""

from eventcraft.interfaces.cli.commands import event, member, task, template

__all__ = ["event", "member", "task", "template"]
