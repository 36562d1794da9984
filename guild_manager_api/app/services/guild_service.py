"""
Service layer for guilds.

``GuildService`` wraps a ``GuildStore`` and applies the guild rules on
top of its single-statement primitives: identifiers must be positive
integers, misses become ``NotFoundError`` and an updated guild is
always re-read from the store before it is returned.  Name and level
normalisation happens earlier, in the ``GuildCreate``/``GuildUpdate``
schemas, so the payloads received here are already clean.
"""

from __future__ import annotations

import logging
import sqlite3
from typing import Any, List

from guild_manager_api.app.core.db import GuildStore
from guild_manager_api.app.core.exceptions import GuildManagerError, NotFoundError, ValidationError
from guild_manager_api.app.schemas.guild import SQLITE_MAX_INT, GuildCreate, GuildRead, GuildUpdate

logger = logging.getLogger(__name__)


class GuildService:
    """Service class for managing guilds."""

    def __init__(self, store: GuildStore) -> None:
        self.store = store

    async def list_guilds(self) -> List[GuildRead]:
        """Return all guilds ordered by name."""
        rows = self.store.list_guilds()
        logger.info("Returning %s guilds.", len(rows))
        return [self._row_to_guild_read(row) for row in rows]

    async def create_guild(self, data: GuildCreate) -> GuildRead:
        """Insert a new guild and return it with its assigned ``id``.

        Raises ``ConflictError`` (from the store) when the name is taken.
        """
        try:
            guild_id = self.store.insert_guild(data.name, data.level)
        except GuildManagerError as exc:
            logger.error("Error creating guild '%s': %s", data.name, exc.message)
            raise
        logger.info("Created guild with ID: %s", guild_id)
        return GuildRead(id=guild_id, name=data.name, level=data.level)

    async def update_guild(self, guild_id: Any, data: GuildUpdate) -> GuildRead:
        """Rename a guild and optionally change its level.

        When ``data.level`` is ``None`` only the name is written and the
        stored level is kept.
        """
        guild_id = self._check_id(guild_id)
        if data.level is None:
            logger.info("Guild %s - updating only name.", guild_id)
        try:
            updated = self.store.update_guild(guild_id, data.name, data.level)
        except GuildManagerError as exc:
            logger.error("Error updating guild %s to name '%s': %s", guild_id, data.name, exc.message)
            raise
        if not updated:
            logger.info("Guild %s not found.", guild_id)
            raise NotFoundError(f"Guild with ID {guild_id} not found.")
        row = self.store.get_guild(guild_id)
        if row is None:
            # Deleted by another request between the two statements.
            raise NotFoundError(f"Guild with ID {guild_id} not found.")
        logger.info("Guild %s updated successfully.", guild_id)
        return self._row_to_guild_read(row)

    async def delete_guild(self, guild_id: Any) -> None:
        """Permanently delete a guild."""
        guild_id = self._check_id(guild_id)
        if not self.store.delete_guild(guild_id):
            logger.info("Guild %s not found.", guild_id)
            raise NotFoundError(f"Guild with ID {guild_id} not found.")
        logger.info("Guild %s deleted successfully.", guild_id)

    @staticmethod
    def _check_id(guild_id: Any) -> int:
        if isinstance(guild_id, bool) or not isinstance(guild_id, int):
            raise ValidationError("Invalid Guild ID provided.")
        if guild_id < 1 or guild_id > SQLITE_MAX_INT:
            raise ValidationError("Invalid Guild ID provided.")
        return guild_id

    @staticmethod
    def _row_to_guild_read(row: sqlite3.Row) -> GuildRead:
        """Convert a database row to a ``GuildRead`` schema instance."""
        return GuildRead(id=row["guild_id"], name=row["name"], level=row["level"])
