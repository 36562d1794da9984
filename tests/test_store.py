# tests/test_store.py
import sqlite3

import pytest

from guild_manager_api.app.core.db import EXAMPLE_GUILDS, GuildStore, get_database_path
from guild_manager_api.app.core.exceptions import ConflictError, StoreError


def test_relative_database_path_resolves_to_project_root():
    path = get_database_path("guilds.db")
    assert path.endswith("guilds.db")
    assert "guild_manager_api" not in path


def test_absolute_and_memory_paths_are_kept(tmp_path):
    absolute = str(tmp_path / "x.db")
    assert get_database_path(absolute) == absolute
    assert get_database_path(":memory:") == ":memory:"


def test_seeding_is_idempotent(db_path):
    store = GuildStore(db_path)
    store.open()
    try:
        store.init_db(seed=True)
        store.init_db(seed=True)
        assert len(store.list_guilds()) == len(EXAMPLE_GUILDS)
    finally:
        store.close()

    # A restart on the same file does not duplicate rows either.
    store = GuildStore(db_path)
    store.open()
    try:
        store.init_db(seed=True)
        names = [row["name"] for row in store.list_guilds()]
    finally:
        store.close()
    assert names == ["Iron Legion", "Knights of Valor", "Mystic Weavers"]


def test_schema_has_expected_columns(store):
    columns = {
        row["name"]: row
        for row in store.connection.execute("PRAGMA table_info(guilds)").fetchall()
    }
    assert set(columns) == {"guild_id", "name", "level", "created_at"}
    assert columns["guild_id"]["pk"] == 1
    assert columns["name"]["notnull"] == 1


def test_insert_sets_defaults(store):
    guild_id = store.insert_guild("Iron Legion", 4)
    row = store.connection.execute(
        "SELECT level, created_at FROM guilds WHERE guild_id = ?", (guild_id,)
    ).fetchone()
    assert row["level"] == 4
    assert row["created_at"] is not None


def test_list_is_ordered_by_name(store):
    for name in ("b", "C", "a"):
        store.insert_guild(name, 1)
    # sqlite's default BINARY collation: uppercase sorts first
    assert [row["name"] for row in store.list_guilds()] == ["C", "a", "b"]


def test_duplicate_name_raises_conflict(store):
    store.insert_guild("Mystic Weavers", 3)
    with pytest.raises(ConflictError):
        store.insert_guild("Mystic Weavers", 1)
    assert len(store.list_guilds()) == 1


def test_names_are_case_sensitive(store):
    store.insert_guild("Mystic Weavers", 3)
    store.insert_guild("mystic weavers", 3)
    assert len(store.list_guilds()) == 2


def test_rename_onto_existing_name_raises_conflict(store):
    store.insert_guild("A", 1)
    other = store.insert_guild("B", 1)
    with pytest.raises(ConflictError):
        store.update_guild(other, "A")
    assert store.get_guild(other)["name"] == "B"


def test_update_and_delete_report_misses(store):
    assert store.update_guild(42, "Nobody") is False
    assert store.delete_guild(42) is False


def test_update_without_level_keeps_level(store):
    guild_id = store.insert_guild("A", 7)
    assert store.update_guild(guild_id, "B") is True
    row = store.get_guild(guild_id)
    assert (row["name"], row["level"]) == ("B", 7)


def test_closed_store_raises_store_error(db_path):
    store = GuildStore(db_path)
    with pytest.raises(StoreError):
        store.list_guilds()


def test_sqlite_failures_become_store_errors(store):
    store.connection.execute("DROP TABLE guilds")
    with pytest.raises(StoreError) as excinfo:
        store.list_guilds()
    assert isinstance(excinfo.value.__cause__, sqlite3.Error)
