"""Member CLI commands.

Members normally come from the identity provider. These commands seed the
local store so the other commands have actors to act as.
"""

from typing import Optional

import typer

from eventcraft.domain.access import Member, Role
from eventcraft.infrastructure.storage import MemberRepository
from eventcraft.interfaces.cli.common import DataOption, open_store, print_success

app = typer.Typer(help="Member commands")


@app.command("add")
def add(
    member_id: str = typer.Argument(..., help="Member ID"),
    name: str = typer.Option(..., "--name", "-n", help="Display name"),
    role: Role = typer.Option(..., "--role", "-r", help="Member role"),
    organization: Optional[str] = typer.Option(None, "--org", "-o", help="Organization ID"),
    data: DataOption = None,
) -> None:
    """Add or replace a member."""
    db = open_store(data)
    member = Member(id=member_id, name=name, role=role, organization_id=organization)
    with db.transaction() as session:
        MemberRepository(session).save(member)
    print_success(f"Saved {member.role.value.lower()} '{member.name}' ({member.id})")


@app.command("list")
def list_cmd(data: DataOption = None) -> None:
    """List members."""
    db = open_store(data)
    with db.transaction() as session:
        members = MemberRepository(session).list_all()
    if not members:
        typer.echo("No members found.")
        return
    for member in members:
        org = f" @ {member.organization_id}" if member.organization_id else ""
        typer.echo(f"{member.id}  {member.name} [{member.role.value}]{org}")
