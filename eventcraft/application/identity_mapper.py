"""Blueprint-to-instance identity mapping.

Used for the lifetime of one instantiation run, then discarded. Module
and task identities live in separate tables so the two id spaces can
never collide.
"""

from collections.abc import Callable
from uuid import uuid4


def new_id() -> str:
    """Default instance id factory."""
    return uuid4().hex


class IdentityTable:
    """Write-once map from blueprint id to freshly minted instance id.

    ``allocate`` is idempotent: asking twice for the same blueprint id
    returns the same instance id.
    """

    def __init__(self, id_factory: Callable[[], str] = new_id) -> None:
        self._id_factory = id_factory
        self._ids: dict[str, str] = {}

    def allocate(self, blueprint_id: str) -> str:
        instance_id = self._ids.get(blueprint_id)
        if instance_id is None:
            instance_id = self._id_factory()
            self._ids[blueprint_id] = instance_id
        return instance_id

    def resolve(self, blueprint_id: str) -> str | None:
        """Instance id for ``blueprint_id``, or None if never allocated."""
        return self._ids.get(blueprint_id)

    def __contains__(self, blueprint_id: object) -> bool:
        return blueprint_id in self._ids

    def __len__(self) -> int:
        return len(self._ids)


class IdentityMapper:
    """The two identity tables of one instantiation run."""

    def __init__(self, id_factory: Callable[[], str] = new_id) -> None:
        self.modules = IdentityTable(id_factory)
        self.tasks = IdentityTable(id_factory)
