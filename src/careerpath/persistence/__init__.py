"""Durable key/value storage for cache entries, streaks and preferences."""

from __future__ import annotations

import logging
import sqlite3
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Dict, Optional, Protocol, TypeVar


logger = logging.getLogger(__name__)

T = TypeVar("T")


class DurableStore(Protocol):
    """String key/value store; any call may raise on quota or unavailability."""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def remove(self, key: str) -> None:
        ...


class MemoryStore:
    """Dict-backed store, used for tests and ephemeral sessions."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._data)


class SqliteStore:
    """Simple SQLite-backed key/value store."""

    def __init__(self, db_path: Path | str):
        self._use_uri = False
        if isinstance(db_path, str) and db_path.startswith("file:"):
            self.db_path: Path | str = db_path
            self._use_uri = True
        else:
            self.db_path = Path(db_path)
        self._ensure_schema()

    def _connect(self) -> sqlite3.Connection:
        if isinstance(self.db_path, Path):
            try:
                self.db_path.parent.mkdir(parents=True, exist_ok=True)
                conn = sqlite3.connect(self.db_path)
            except (OSError, sqlite3.OperationalError):
                fallback_dir = Path(tempfile.gettempdir()) / "careerpath-runtime"
                fallback_dir.mkdir(parents=True, exist_ok=True)
                fallback = fallback_dir / "careerpath.sqlite"
                logger.warning("Cannot open %s; falling back to %s", self.db_path, fallback)
                conn = sqlite3.connect(fallback)
                self.db_path = fallback
                self._create_schema(conn)
        else:
            conn = sqlite3.connect(self.db_path, uri=self._use_uri)
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_schema(self) -> None:
        with self._connect() as conn:
            self._create_schema(conn)

    def _create_schema(self, conn: sqlite3.Connection) -> None:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS kv_entries (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
            """
        )

    def get(self, key: str) -> Optional[str]:
        with self._connect() as conn:
            row = conn.execute("SELECT value FROM kv_entries WHERE key = ?", (key,)).fetchone()
        return row["value"] if row else None

    def set(self, key: str, value: str) -> None:
        now = datetime.now(timezone.utc).isoformat()
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO kv_entries (key, value, updated_at) VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at
                """,
                (key, value, now),
            )

    def remove(self, key: str) -> None:
        with self._connect() as conn:
            conn.execute("DELETE FROM kv_entries WHERE key = ?", (key,))


def best_effort(action: Callable[[], T], description: str, *, default: T) -> T:
    """Run a storage side effect, logging and discarding any failure."""

    try:
        return action()
    except Exception as exc:  # noqa: BLE001
        logger.warning("Storage %s failed: %s", description, exc)
        return default


class SafeStore:
    """Wrapper that turns every failure of the inner store into a logged miss/no-op."""

    def __init__(self, inner: DurableStore):
        self.inner = inner

    def get(self, key: str) -> Optional[str]:
        return best_effort(lambda: self.inner.get(key), f"read of {key!r}", default=None)

    def set(self, key: str, value: str) -> bool:
        def _write() -> bool:
            self.inner.set(key, value)
            return True

        return best_effort(_write, f"write of {key!r}", default=False)

    def remove(self, key: str) -> bool:
        def _delete() -> bool:
            self.inner.remove(key)
            return True

        return best_effort(_delete, f"removal of {key!r}", default=False)


__all__ = [
    "DurableStore",
    "MemoryStore",
    "SafeStore",
    "SqliteStore",
    "best_effort",
]
