"""Storage infrastructure for eventcraft.

Provides the transactional store and repository views over it,
using Result monads for explicit error handling.
"""

from eventcraft.infrastructure.storage.database import (
    TABLE_MODELS,
    Database,
    Session,
    StorageError,
)
from eventcraft.infrastructure.storage.json_storage import JsonStorage
from eventcraft.infrastructure.storage.repositories import (
    EventRepository,
    MemberRepository,
    TemplateRepository,
)

__all__ = [
    "JsonStorage",
    "Database",
    "Session",
    "StorageError",
    "TABLE_MODELS",
    "TemplateRepository",
    "MemberRepository",
    "EventRepository",
]
