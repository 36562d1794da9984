"""
SQLite record store for guilds.

``GuildStore`` owns one sqlite connection for the lifetime of the
process: it is opened by the application lifespan, handed to the
``GuildService`` and closed on shutdown.  The store applies the schema
through the same small migration table used elsewhere in the codebase,
seeds the example guilds and exposes one method per SQL statement.

Failures are reported through the exceptions in ``core.exceptions``:
a violated ``UNIQUE`` constraint on ``name`` becomes ``ConflictError``
(recognised by the sqlite extended error code, not by message text) and
any other sqlite failure becomes ``StoreError``.  ``update_guild`` and
``delete_guild`` return whether a row was affected so callers can tell
a miss from a success.
"""

import logging
import os
import sqlite3
from pathlib import Path
from typing import List, Optional

from .config import settings
from .exceptions import ConflictError, StoreError

logger = logging.getLogger(__name__)

MIGRATIONS: list[tuple[int, str]] = [
    (
        1,
        """
        CREATE TABLE IF NOT EXISTS guilds (
            guild_id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL UNIQUE,
            level INTEGER DEFAULT 1,
            created_at DATETIME DEFAULT CURRENT_TIMESTAMP
        );
        """,
    ),
]

EXAMPLE_GUILDS: list[tuple[str, int]] = [
    ("Knights of Valor", 5),
    ("Mystic Weavers", 3),
    ("Iron Legion", 4),
]


def get_database_path(database_url: Optional[str] = None) -> str:
    """Compute the path to the SQLite database file.

    ``:memory:`` and absolute paths are used as is; relative paths are
    resolved against the project root (the directory that contains the
    ``guild_manager_api`` package).
    """
    db_url = database_url or settings.database_url
    if db_url == ":memory:" or os.path.isabs(db_url):
        return db_url
    base_dir = Path(__file__).resolve().parent.parent.parent.parent
    return str((base_dir / db_url).resolve())


def _is_unique_violation(exc: sqlite3.IntegrityError) -> bool:
    return getattr(exc, "sqlite_errorcode", None) == sqlite3.SQLITE_CONSTRAINT_UNIQUE


class GuildStore:
    """Single-table persistent store for guild rows."""

    def __init__(self, database_url: Optional[str] = None) -> None:
        self.path = get_database_path(database_url)
        self._conn: Optional[sqlite3.Connection] = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def open(self) -> None:
        if self._conn is not None:
            return
        try:
            # The connection is created in the lifespan task and used by
            # request handlers, which may run on another thread.
            conn = sqlite3.connect(self.path, check_same_thread=False)
        except sqlite3.Error as exc:
            raise StoreError("Failed to open database", details=str(exc)) from exc
        conn.row_factory = sqlite3.Row
        self._conn = conn
        logger.info("Connected to the SQLite database at %s", self.path)

    def close(self) -> None:
        if self._conn is None:
            return
        self._conn.close()
        self._conn = None
        logger.info("Database connection closed.")

    @property
    def connection(self) -> sqlite3.Connection:
        if self._conn is None:
            raise StoreError("Database connection is not open")
        return self._conn

    def init_db(self, seed: bool = True) -> None:
        """Apply pending migrations and optionally seed example guilds.

        Seeding uses ``INSERT OR IGNORE`` so repeated starts never
        duplicate the example rows.
        """
        conn = self.connection
        try:
            with conn:
                conn.execute(
                    "CREATE TABLE IF NOT EXISTS migrations (version INTEGER PRIMARY KEY)"
                )
                row = conn.execute("SELECT MAX(version) AS version FROM migrations").fetchone()
                current_version = row["version"] if row and row["version"] is not None else 0
                for version, sql in MIGRATIONS:
                    if version > current_version:
                        conn.execute(sql)
                        conn.execute("INSERT INTO migrations (version) VALUES (?)", (version,))
                        current_version = version
                logger.info("Table 'guilds' checked/created (schema version %s).", current_version)
                if seed:
                    conn.executemany(
                        "INSERT OR IGNORE INTO guilds (name, level) VALUES (?, ?)",
                        EXAMPLE_GUILDS,
                    )
        except sqlite3.Error as exc:
            raise StoreError("Failed to initialise database", details=str(exc)) from exc

    # ------------------------------------------------------------------
    # Primitives
    # ------------------------------------------------------------------
    def list_guilds(self) -> List[sqlite3.Row]:
        try:
            return self.connection.execute(
                "SELECT guild_id, name, level FROM guilds ORDER BY name"
            ).fetchall()
        except sqlite3.Error as exc:
            raise StoreError("Failed to retrieve guilds", details=str(exc)) from exc

    def get_guild(self, guild_id: int) -> Optional[sqlite3.Row]:
        try:
            return self.connection.execute(
                "SELECT guild_id, name, level FROM guilds WHERE guild_id = ?",
                (guild_id,),
            ).fetchone()
        except sqlite3.Error as exc:
            raise StoreError("Failed to retrieve guild", details=str(exc)) from exc

    def insert_guild(self, name: str, level: int) -> int:
        """Insert a guild and return its new identifier."""
        conn = self.connection
        try:
            with conn:
                cursor = conn.execute(
                    "INSERT INTO guilds (name, level) VALUES (?, ?)",
                    (name, level),
                )
        except sqlite3.IntegrityError as exc:
            if _is_unique_violation(exc):
                raise ConflictError("Guild name already exists", details=str(exc)) from exc
            raise StoreError("Failed to create guild", details=str(exc)) from exc
        except sqlite3.Error as exc:
            raise StoreError("Failed to create guild", details=str(exc)) from exc
        return cursor.lastrowid

    def update_guild(self, guild_id: int, name: str, level: Optional[int] = None) -> bool:
        """Rename a guild and, when ``level`` is given, change its level.

        Returns ``False`` when no row has ``guild_id``.
        """
        if level is not None:
            sql = "UPDATE guilds SET name = ?, level = ? WHERE guild_id = ?"
            params: tuple = (name, level, guild_id)
        else:
            sql = "UPDATE guilds SET name = ? WHERE guild_id = ?"
            params = (name, guild_id)
        conn = self.connection
        try:
            with conn:
                cursor = conn.execute(sql, params)
        except sqlite3.IntegrityError as exc:
            if _is_unique_violation(exc):
                raise ConflictError("Guild name already exists", details=str(exc)) from exc
            raise StoreError("Failed to update guild", details=str(exc)) from exc
        except sqlite3.Error as exc:
            raise StoreError("Failed to update guild", details=str(exc)) from exc
        return cursor.rowcount > 0

    def delete_guild(self, guild_id: int) -> bool:
        """Delete a guild; returns ``False`` when no row has ``guild_id``."""
        conn = self.connection
        try:
            with conn:
                cursor = conn.execute("DELETE FROM guilds WHERE guild_id = ?", (guild_id,))
        except sqlite3.Error as exc:
            raise StoreError("Failed to delete guild", details=str(exc)) from exc
        return cursor.rowcount > 0
