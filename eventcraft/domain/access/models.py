"""Access domain models.

Members are supplied by the identity collaborator; eventcraft only reads
their role and organization.
"""

from enum import Enum

from pydantic import BaseModel


class Role(str, Enum):
    """Role of a member within its organization."""

    ADMINISTRATOR = "ADMINISTRATOR"
    MANAGER = "MANAGER"
    VENDOR = "VENDOR"
    CLIENT = "CLIENT"


class Member(BaseModel):
    """A user of the system; the acting member is the Actor."""

    model_config = {"frozen": True}

    id: str
    name: str
    role: Role
    organization_id: str | None = None

    @property
    def is_manager(self) -> bool:
        """Managers and administrators may force changes."""
        return self.role in (Role.ADMINISTRATOR, Role.MANAGER)

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMINISTRATOR
