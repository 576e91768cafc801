"""Transactional entity store.

``Database`` keeps one table per entity type and hands out ``Session``
objects through ``transaction()``. A session works on a private copy of
the tables; the copy replaces the committed tables only when the block
exits cleanly, so a failed unit of work leaves no trace. The store lock
is held for the whole unit of work, which makes read-then-write checks
(such as "are all dependencies completed?") atomic.

When a snapshot path is configured every commit is also written to disk
through ``JsonStorage``.
"""

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from pydantic import BaseModel

from eventcraft.domain.access.models import Member
from eventcraft.domain.event.models import Event, Module
from eventcraft.domain.shared.result import Err, Ok, Result
from eventcraft.domain.task.models import Task
from eventcraft.domain.template.models import Template
from eventcraft.infrastructure.storage.json_storage import JsonStorage

logger = logging.getLogger(__name__)

TABLE_MODELS: dict[str, type[BaseModel]] = {
    "templates": Template,
    "members": Member,
    "events": Event,
    "modules": Module,
    "tasks": Task,
}


class StorageError(Exception):
    """Raised when a commit cannot be persisted."""


class Session:
    """One unit of work against the store.

    Rows are immutable pydantic models; updates replace the row.
    """

    def __init__(self, tables: dict[str, dict[str, BaseModel]]) -> None:
        self._tables = tables
        self.dirty = False

    def get(self, table: str, row_id: str) -> Any | None:
        return self._tables[table].get(row_id)

    def put(self, table: str, row: BaseModel) -> None:
        self._tables[table][row.id] = row  # type: ignore[attr-defined]
        self.dirty = True

    def delete(self, table: str, row_id: str) -> None:
        self._tables[table].pop(row_id, None)
        self.dirty = True

    def rows(self, table: str) -> list[Any]:
        return list(self._tables[table].values())

    def count(self, table: str) -> int:
        return len(self._tables[table])


class Database:
    """In-memory relational store with all-or-nothing transactions.

    Example:
        db = Database()
        with db.transaction() as session:
            session.put("members", member)
    """

    def __init__(self, path: Path | None = None, storage: JsonStorage | None = None) -> None:
        """Initialize an empty store.

        Args:
            path: Optional JSON snapshot file written on every commit.
            storage: JsonStorage instance to use. Creates new one if not provided.
        """
        self._path = path
        self._storage = storage or JsonStorage()
        self._tables: dict[str, dict[str, BaseModel]] = {name: {} for name in TABLE_MODELS}
        self._lock = threading.RLock()

    @classmethod
    def open(cls, path: Path, storage: JsonStorage | None = None) -> Result["Database", str]:
        """Open a store backed by a snapshot file.

        A missing file yields an empty store that will create it on the
        first commit.
        """
        db = cls(path=path, storage=storage)
        if not path.exists():
            return Ok(db)

        result = db._storage.load_json(path)
        if isinstance(result, Err):
            return result

        try:
            for name, model in TABLE_MODELS.items():
                for raw in result.value.get(name, []):
                    row = model.model_validate(raw)
                    db._tables[name][row.id] = row  # type: ignore[attr-defined]
        except Exception as e:
            return Err(f"Invalid snapshot data in {path}: {e}")

        logger.info(f"Loaded snapshot {path}")
        return Ok(db)

    @contextmanager
    def transaction(self) -> Iterator[Session]:
        """Open a unit of work.

        Commits when the block exits normally; any exception discards
        every change made in the block and propagates.
        """
        with self._lock:
            staged = {name: dict(rows) for name, rows in self._tables.items()}
            session = Session(staged)
            try:
                yield session
            except Exception:
                logger.debug("Transaction rolled back")
                raise

            if not session.dirty:
                return
            if self._path is not None:
                result = self._storage.save_json(self._path, self._snapshot(staged))
                if isinstance(result, Err):
                    logger.error(f"Commit failed: {result.error}")
                    raise StorageError(result.error)
            self._tables = staged

    def count(self, table: str) -> int:
        """Committed row count of ``table``."""
        with self._lock:
            return len(self._tables[table])

    @staticmethod
    def _snapshot(tables: dict[str, dict[str, BaseModel]]) -> dict[str, list[dict[str, Any]]]:
        return {
            name: [row.model_dump(mode="json") for row in rows.values()]
            for name, rows in tables.items()
        }
