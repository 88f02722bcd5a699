"""Pytest configuration and shared fixtures"""

import os
from unittest.mock import Mock

import httpx
import pytest
from fakes import BASE_URL, FakeApi

from taskboard_client.config import Config
from taskboard_client.consts import ACCESS_TOKEN_KEY, REFRESH_TOKEN_KEY
from taskboard_client.session import SessionClient
from taskboard_client.store import MemoryCredentialStore

# Configure pytest-asyncio
pytest_plugins = ("pytest_asyncio",)


@pytest.fixture
def fake_api():
    """Default fake API: refresh succeeds with access token new123"""
    return FakeApi()


@pytest.fixture
def http_client(fake_api):
    """httpx AsyncClient routed to the fake API"""
    return httpx.AsyncClient(transport=httpx.MockTransport(fake_api.handler))


@pytest.fixture
def config(tmp_path):
    """Config fixture pointing at the fake API"""
    return Config(
        base_url=BASE_URL,
        credentials_file=str(tmp_path / "credentials.json"),
        log_level="DEBUG",
    )


@pytest.fixture
def store():
    """Store holding an expired access token and a valid refresh token"""
    return MemoryCredentialStore({ACCESS_TOKEN_KEY: "expired", REFRESH_TOKEN_KEY: "r1"})


@pytest.fixture
def logout_trigger():
    """Mock logout trigger"""
    return Mock()


@pytest.fixture
def session(config, store, http_client, logout_trigger):
    """SessionClient wired to the fake API, memory store and mock logout"""
    return SessionClient(
        config=config,
        store=store,
        http_client=http_client,
        logout_trigger=logout_trigger,
    )


@pytest.fixture
def clean_env():
    """Fixture that temporarily clears TASKBOARD_* environment variables.

    This ensures Config tests see the true defaults without interference
    from environment variables that might be set in the user's shell.
    """
    taskboard_vars = {
        key: value for key, value in os.environ.items() if key.startswith("TASKBOARD_")
    }

    for key in taskboard_vars:
        os.environ.pop(key, None)

    try:
        yield
    finally:
        for key, value in taskboard_vars.items():
            os.environ[key] = value


@pytest.fixture
def clean_config(clean_env):
    """Fixture that provides a Config instance with clean environment."""
    return Config()
