"""Pytest fixtures for API tests."""

from contextlib import ExitStack
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from blacklist_registry.api import dependencies
from blacklist_registry.api.main import create_app
from blacklist_registry.config import RegistrySettings, set_settings
from blacklist_registry.exceptions import StoreUnavailable


@pytest.fixture
def api_settings():
    """Settings for API tests, isolated from any local .env file."""
    settings = RegistrySettings(store_backend="memory", _env_file=None)
    set_settings(settings)
    yield settings
    set_settings(None)


@pytest.fixture
def client_for(api_settings):
    """Build a test client serving the given store."""
    with ExitStack() as stack:

        def _client(store):
            app = create_app()

            async def override_get_store():
                return store

            stack.enter_context(patch.object(dependencies, "_store", store))
            app.dependency_overrides[dependencies.get_store] = override_get_store
            app.dependency_overrides[dependencies.get_registry_settings] = lambda: api_settings
            return stack.enter_context(TestClient(app))

        yield _client


@pytest.fixture
def client(client_for, store):
    """Test client over the sample registry."""
    return client_for(store)


@pytest.fixture
def unavailable_store():
    """Store whose every call fails as if the database were down."""
    store = MagicMock()
    store.startup = AsyncMock()
    store.shutdown = AsyncMock()
    failure = StoreUnavailable("Unable to connect to MongoDB at mongodb://localhost:27017")
    store.list_all = AsyncMock(side_effect=failure)
    store.get = AsyncMock(side_effect=failure)
    store.append = AsyncMock(side_effect=failure)
    store.update = AsyncMock(side_effect=failure)
    return store
