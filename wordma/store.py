"""SQLite-backed persistence store for Wordma.

This module owns the single database handle used by a Wordma process. The
handle is opened lazily on first use and reused until the store is closed.
All operations are coroutines; the blocking sqlite3 calls run on one
dedicated worker thread, so statements from a process are applied in the
order they were awaited and never in parallel.

Key components:
- Store: lazily opened database handle with execute/query helpers.
- ExecuteResult: affected row count and generated identifier of a statement.
- MIGRATIONS: ordered schema scripts applied through ``PRAGMA user_version``.
"""

from __future__ import annotations

import asyncio
import functools
import logging
import os
import sqlite3
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Any, TypeVar

from .errors import StoreUnavailable

log = logging.getLogger(__name__)

T = TypeVar("T")

_NOW = "(strftime('%Y-%m-%d %H:%M:%f', 'now'))"

# Index + 1 is the schema version each script brings the database to.
MIGRATIONS: tuple[str, ...] = (
    f"""
    CREATE TABLE IF NOT EXISTS site (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name TEXT NOT NULL UNIQUE,
        description TEXT,
        created_at TIMESTAMP DEFAULT {_NOW}
    );
    CREATE TABLE IF NOT EXISTS settings (
        key TEXT PRIMARY KEY,
        value TEXT
    );
    CREATE TABLE IF NOT EXISTS article (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        title TEXT NOT NULL,
        content TEXT,
        type TEXT NOT NULL DEFAULT 'markdown' CHECK (type IN ('richtext', 'markdown')),
        summary TEXT,
        cover TEXT,
        status TEXT NOT NULL DEFAULT 'draft' CHECK (status IN ('published', 'draft')),
        created_at TIMESTAMP DEFAULT {_NOW},
        updated_at TIMESTAMP DEFAULT {_NOW}
    );
    INSERT INTO article (title, content, type, summary, status)
    SELECT 'Welcome to Wordma',
           '# Hello Wordma' || char(10) || char(10) || 'This is a sample Markdown article. Start writing here!',
           'markdown',
           'A short summary of the first article',
           'published'
    WHERE NOT EXISTS (SELECT 1 FROM article);
    """,
    """
    ALTER TABLE site ADD COLUMN path TEXT;
    CREATE UNIQUE INDEX IF NOT EXISTS site_path_unique ON site (path);
    """,
)

SCHEMA_VERSION = len(MIGRATIONS)


@dataclass
class ExecuteResult:
    """Outcome of an insert or update statement.

    Attributes:
        rows_affected: Number of rows changed by the statement.
        last_insert_id: Identifier generated by an insert, None otherwise.
    """

    rows_affected: int
    last_insert_id: int | None = None


def migrate(conn: sqlite3.Connection) -> int:
    """Apply pending schema migrations and return the resulting version."""
    version = conn.execute("PRAGMA user_version").fetchone()[0]
    for target, script in enumerate(MIGRATIONS[version:], start=version + 1):
        log.debug("Migrating database schema to version %d", target)
        conn.executescript(f"BEGIN;\n{script}\nPRAGMA user_version = {target};\nCOMMIT;")
    return max(version, SCHEMA_VERSION)


class Store:
    """Lazily opened handle on the Wordma database file.

    The store is constructed explicitly and passed to the registry and the
    navigation guard, so tests can point each one at a throwaway file.

    Attributes:
        path: Location of the SQLite database file.
    """

    def __init__(self, path: str | os.PathLike[str]):
        self.path = Path(path)
        self._conn: sqlite3.Connection | None = None
        self._executor: ThreadPoolExecutor | None = None

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    async def connect(self) -> None:
        """Open (or create) the database file and bring its schema up to date.

        Raises:
            StoreUnavailable: If the file cannot be opened, created or migrated.
        """
        await self._run(self._connection)

    async def execute(self, sql: str, params: Sequence[Any] = ()) -> ExecuteResult:
        """Run an insert, update or delete statement with bound parameters.

        Args:
            sql: Statement using ``?`` placeholders.
            params: Values bound positionally to the placeholders.

        Returns:
            ExecuteResult with the affected row count and, for inserts,
            the generated identifier.

        Raises:
            StoreUnavailable: If the database cannot be opened.
            sqlite3.IntegrityError: If the statement violates a constraint.
        """
        return await self._run(self._execute, sql, tuple(params))

    async def query(
        self,
        sql: str,
        params: Sequence[Any] = (),
        factory: Callable[[sqlite3.Row], T] | None = None,
    ) -> list[Any]:
        """Run a select statement and return its rows in order.

        Args:
            sql: Statement using ``?`` placeholders.
            params: Values bound positionally to the placeholders.
            factory: Optional callable mapping each ``sqlite3.Row`` to a record.

        Returns:
            List of rows (or records built by ``factory``); empty when nothing
            matches.
        """
        rows = await self._run(self._query, sql, tuple(params))
        if factory is None:
            return rows
        return [factory(row) for row in rows]

    def close(self) -> None:
        """Close the connection and stop the worker thread."""
        executor = self._executor
        if executor is None:
            return
        executor.submit(self._close).result()
        executor.shutdown(wait=True)
        self._executor = None

    async def __aenter__(self) -> Store:
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.close()

    async def _run(self, func: Callable[..., T], *args: Any) -> T:
        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=1, thread_name_prefix="wordma-store"
            )
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._executor, functools.partial(func, *args))

    # The methods below only run on the worker thread.

    def _connection(self) -> sqlite3.Connection:
        if self._conn is not None:
            return self._conn
        conn = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(self.path, check_same_thread=False)
            conn.row_factory = sqlite3.Row
            version = migrate(conn)
        except (OSError, sqlite3.Error) as exc:
            if conn is not None:
                conn.close()
            raise StoreUnavailable(self.path, str(exc)) from exc
        log.debug("Opened database %s (schema version %d)", self.path, version)
        self._conn = conn
        return conn

    def _execute(self, sql: str, params: tuple[Any, ...]) -> ExecuteResult:
        conn = self._connection()
        try:
            cursor = conn.execute(sql, params)
            conn.commit()
        except sqlite3.Error:
            conn.rollback()
            raise
        last_id = cursor.lastrowid if sql.lstrip().upper().startswith("INSERT") else None
        return ExecuteResult(rows_affected=cursor.rowcount, last_insert_id=last_id)

    def _query(self, sql: str, params: tuple[Any, ...]) -> list[sqlite3.Row]:
        return self._connection().execute(sql, params).fetchall()

    def _close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None
