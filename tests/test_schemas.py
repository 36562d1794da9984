# tests/test_schemas.py
import pytest
from pydantic import ValidationError as SchemaError

from guild_manager_api.app.schemas.guild import GuildCreate, GuildUpdate, resolve_level


@pytest.mark.parametrize("name", [None, "", "   ", 42, ["x"]])
def test_create_rejects_bad_names(name):
    with pytest.raises(SchemaError) as excinfo:
        GuildCreate(name=name)
    assert "Guild name is required" in str(excinfo.value)


def test_create_requires_name_field():
    with pytest.raises(SchemaError) as excinfo:
        GuildCreate.model_validate({"level": 3})
    assert excinfo.value.errors()[0]["type"] == "missing"


@pytest.mark.parametrize(
    "level, expected",
    [
        (None, 1),
        (5, 5),
        ("5", 5),
        (2.9, 2),
        (1, 1),
        (0, 1),
        (0.5, 1),
        (-4, 1),
        ("abc", 1),
        (True, 1),
        (float("inf"), 1),
        ({"n": 1}, 1),
    ],
)
def test_create_level_falls_back_to_one(level, expected):
    assert GuildCreate(name="A", level=level).level == expected


def test_create_level_omitted():
    assert GuildCreate.model_validate({"name": "A"}).level == 1


@pytest.mark.parametrize("level, expected", [(3, 3), ("4", 4), (7.8, 7), (None, None)])
def test_update_accepts_positive_levels(level, expected):
    assert GuildUpdate(name="A", level=level).level == expected


def test_update_level_omitted_is_none():
    assert GuildUpdate.model_validate({"name": "A"}).level is None


@pytest.mark.parametrize("level", ["not-a-number", 0, 0.5, -1, True, "", [3]])
def test_update_rejects_present_but_invalid_level(level):
    with pytest.raises(SchemaError) as excinfo:
        GuildUpdate(name="A", level=level)
    assert "level must be a positive number" in str(excinfo.value)


def test_update_trims_name():
    assert GuildUpdate(name="  B ").name == "B"


def test_resolve_level():
    assert resolve_level(" 2.5 ") == 2.5
    assert resolve_level(False) is None
    assert resolve_level("nan") is None
