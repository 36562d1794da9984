# tests/test_client.py
import requests

from guild_manager_client import GuildListViewModel, GuildManagerAPI, main


def _seed(api, *guilds):
    for name, level in guilds:
        _, error = api.create_guild(name, level)
        assert error is None


def test_api_round_trip(api):
    created, error = api.create_guild("Knights of Valor", 5)
    assert error is None
    assert created == {"id": 1, "name": "Knights of Valor", "level": 5}

    guilds, error = api.list_guilds()
    assert (guilds, error) == ([created], None)

    deleted, error = api.delete_guild(1)
    assert (deleted, error) == (True, None)


def test_api_reports_server_error_message(api):
    _seed(api, ("A", 1))
    data, error = api.create_guild("A")
    assert data is None
    assert error == {"status_code": 409, "message": "Guild name already exists"}


def test_api_transport_failure():
    class BrokenSession:
        def request(self, **kwargs):
            raise requests.ConnectionError("connection refused")

    api = GuildManagerAPI(base_url="http://nowhere", session=BrokenSession())
    guilds, error = api.list_guilds()
    assert guilds == []
    assert error["status_code"] is None
    assert "connection refused" in error["message"]


def test_load_replaces_state(view, api):
    view.guilds = [{"id": 99, "name": "stale", "level": 1}]
    _seed(api, ("B", 2), ("A", 1))
    assert view.load() is True
    assert [g["name"] for g in view.guilds] == ["A", "B"]
    assert view.error is None
    assert view.is_loading is False


def test_failed_load_keeps_last_good_list(view, api, client):
    _seed(api, ("A", 1))
    view.load()
    before = list(view.guilds)
    client.app.state.guild_service.store.connection.execute("DROP TABLE guilds")
    assert view.load() is False
    assert view.guilds == before
    assert view.error.startswith("Failed to load guilds: HTTP error! status: 500")


def test_create_appends_returned_record(view):
    view.load()
    view.new_guild_name = "Iron Legion"
    assert view.create() is True
    assert view.guilds == [{"id": 1, "name": "Iron Legion", "level": 1}]
    assert view.new_guild_name == ""
    assert view.is_creating is False


def test_create_empty_name_is_rejected_locally(view):
    assert view.create("   ") is False
    assert view.error == "Guild name cannot be empty."
    assert view.guilds == []


def test_create_duplicate_keeps_list(view, api):
    _seed(api, ("A", 1))
    view.load()
    before = list(view.guilds)
    assert view.create("A") is False
    assert view.guilds == before
    assert view.error == "Failed to create guild: HTTP error! status: 409 - Guild name already exists"


def test_edit_flow_replaces_matching_record(view, api):
    _seed(api, ("A", 1), ("B", 2))
    view.load()
    target = next(g for g in view.guilds if g["name"] == "B")
    view.start_edit(target)
    assert view.edit_form == {"name": "B", "level": "2"}
    view.change_edit_field("name", "  Bee ")
    view.change_edit_field("level", "7")
    assert view.save_edit() is True
    assert view.editing_guild_id is None
    assert {g["id"]: (g["name"], g["level"]) for g in view.guilds} == {
        1: ("A", 1),
        target["id"]: ("Bee", 7),
    }


def test_edit_validates_locally(view, api):
    _seed(api, ("A", 1))
    view.load()
    view.start_edit(view.guilds[0])
    view.change_edit_field("level", "zero")
    assert view.save_edit() is False
    assert view.error == "Level must be a positive number."
    view.change_edit_field("level", "2")
    view.change_edit_field("name", " ")
    assert view.save_edit() is False
    assert view.error == "Guild name cannot be empty."
    assert view.editing_guild_id == 1


def test_cancel_edit_resets_form(view):
    view.start_edit({"id": 3, "name": "X", "level": 2})
    view.cancel_edit()
    assert view.editing_guild_id is None
    assert view.edit_form == {"name": "", "level": ""}


def test_update_without_level_keeps_level(view, api):
    _seed(api, ("A", 6))
    view.load()
    assert view.update(1, "Renamed") is True
    assert view.guilds == [{"id": 1, "name": "Renamed", "level": 6}]


def test_update_conflict_keeps_list(view, api):
    _seed(api, ("A", 1), ("B", 1))
    view.load()
    before = list(view.guilds)
    assert view.update(2, "A") is False
    assert view.guilds == before
    assert "409" in view.error


def test_delete_removes_matching_record(view, api):
    _seed(api, ("A", 1), ("B", 1))
    view.load()
    assert view.delete(1) is True
    assert view.guilds == [{"id": 2, "name": "B", "level": 1}]


def test_delete_missing_keeps_list(view, api):
    _seed(api, ("A", 1))
    view.load()
    assert view.delete(999) is False
    assert view.guilds == [{"id": 1, "name": "A", "level": 1}]
    assert view.error == "Failed to delete guild: HTTP error! status: 404 - Guild with ID 999 not found."


def test_delete_can_be_cancelled(view, api):
    _seed(api, ("A", 1))
    view.load()
    assert view.delete(1, confirm=lambda guild_id: False) is False
    assert view.error is None
    assert len(view.guilds) == 1
    assert api.list_guilds()[0] != []


def test_cli_list_and_create(api, capsys):
    assert main(["create", "Mystic Weavers", "--level", "3"], api=api) == 0
    assert main(["list"], api=api) == 0
    out = capsys.readouterr().out
    assert "Created:" in out
    assert "Mystic Weavers (Level: 3)" in out


def test_cli_reports_errors(api, capsys):
    assert main(["delete", "5", "--yes"], api=api) == 1
    assert "Guild with ID 5 not found." in capsys.readouterr().err


def test_cli_update_and_delete(api, capsys):
    _seed(api, ("A", 2))
    assert main(["update", "1", "B"], api=api) == 0
    assert main(["delete", "1", "-y"], api=api) == 0
    assert api.list_guilds() == ([], None)


def test_view_model_uses_injected_api():
    api = GuildManagerAPI(base_url="http://example.test/")
    view = GuildListViewModel(api)
    assert view.api.base_url == "http://example.test"
    assert isinstance(api.session, requests.Session)
