# tests/conftest.py
import pytest
from fastapi.testclient import TestClient

from guild_manager_api.app.core.config import Settings
from guild_manager_api.app.core.db import GuildStore
from guild_manager_api.app.main import create_app
from guild_manager_api.app.services.guild_service import GuildService
from guild_manager_client import GuildListViewModel, GuildManagerAPI


@pytest.fixture
def db_path(tmp_path):
    """A fresh sqlite file per test."""
    return str(tmp_path / "guilds.db")


@pytest.fixture
def app_settings(db_path):
    """Settings pointing at the temporary database, without example rows."""
    return Settings(database_url=db_path, seed_examples=False, cors_origins=["*"])


@pytest.fixture
def store(db_path):
    store = GuildStore(db_path)
    store.open()
    store.init_db(seed=False)
    yield store
    store.close()


@pytest.fixture
def service(store):
    return GuildService(store)


@pytest.fixture
def client(app_settings):
    """TestClient with the lifespan running, so the store is open."""
    with TestClient(create_app(app_settings)) as test_client:
        yield test_client


@pytest.fixture
def api(client):
    """Guild API client whose HTTP session is the in-process TestClient."""
    return GuildManagerAPI(base_url="http://testserver", session=client)


@pytest.fixture
def view(api):
    return GuildListViewModel(api)
