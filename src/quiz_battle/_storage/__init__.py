# Area: Storage
"""
Store implementations.

This package contains:
- SQLite schema, connection helpers and repository base class
- The SQLite durable battle store
- In-memory durable, presence, quiz and attempt stores
"""

from .database import BaseRepository, get_connection, init_database, SCHEMA_PATH
from .sqlite_store import SqliteBattleStore
from .memory import (
    InMemoryBattleStore,
    InMemoryPresenceStore,
    InMemoryQuizSource,
    InMemoryAttemptSink,
)

__all__ = [
    "BaseRepository",
    "get_connection",
    "init_database",
    "SCHEMA_PATH",
    "SqliteBattleStore",
    "InMemoryBattleStore",
    "InMemoryPresenceStore",
    "InMemoryQuizSource",
    "InMemoryAttemptSink",
]
