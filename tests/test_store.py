"""Tests for credential stores"""

import json
import os

import pytest

from taskboard_client.consts import ACCESS_TOKEN_KEY, REFRESH_TOKEN_KEY
from taskboard_client.exceptions import ConfigError
from taskboard_client.models import CredentialPair
from taskboard_client.store import (
    FileCredentialStore,
    MemoryCredentialStore,
    clear_credentials,
    read_credentials,
    write_credentials,
)


@pytest.fixture(params=["memory", "file"])
def any_store(request, tmp_path):
    """Each store implementation, empty"""
    if request.param == "memory":
        return MemoryCredentialStore()
    return FileCredentialStore(tmp_path / "creds" / "credentials.json")


class TestStoreContract:
    """Behavior shared by every store"""

    def test_set_then_get(self, any_store):
        any_store.set(ACCESS_TOKEN_KEY, "abc")
        assert any_store.get(ACCESS_TOKEN_KEY) == "abc"

    def test_remove_then_get(self, any_store):
        any_store.set(ACCESS_TOKEN_KEY, "abc")
        any_store.remove(ACCESS_TOKEN_KEY)
        assert any_store.get(ACCESS_TOKEN_KEY) is None

    def test_missing_key(self, any_store):
        assert any_store.get("nope") is None
        any_store.remove("nope")  # not an error

    def test_set_overwrites(self, any_store):
        any_store.set(REFRESH_TOKEN_KEY, "r1")
        any_store.set(REFRESH_TOKEN_KEY, "r2")
        assert any_store.get(REFRESH_TOKEN_KEY) == "r2"


class TestFileCredentialStore:
    """Test JSON file persistence"""

    def test_values_survive_new_instance(self, tmp_path):
        """Test that a second store on the same path sees earlier writes"""
        path = tmp_path / "credentials.json"
        FileCredentialStore(path).set(ACCESS_TOKEN_KEY, "abc")

        assert FileCredentialStore(path).get(ACCESS_TOKEN_KEY) == "abc"
        assert json.loads(path.read_text()) == {ACCESS_TOKEN_KEY: "abc"}

    def test_file_is_private(self, tmp_path):
        path = tmp_path / "credentials.json"
        FileCredentialStore(path).set(ACCESS_TOKEN_KEY, "abc")

        assert os.stat(path).st_mode & 0o777 == 0o600
        assert [p.name for p in tmp_path.iterdir()] == ["credentials.json"]

    def test_home_directory_expanded(self, tmp_path, monkeypatch):
        monkeypatch.setenv("HOME", str(tmp_path))
        store = FileCredentialStore("~/credentials.json")
        assert store.path == tmp_path / "credentials.json"

    def test_corrupt_file_raises_config_error(self, tmp_path):
        """Test that invalid JSON is reported with a suggestion"""
        path = tmp_path / "credentials.json"
        path.write_text("{not json")

        with pytest.raises(ConfigError) as exc_info:
            FileCredentialStore(path).get(ACCESS_TOKEN_KEY)

        assert "Invalid JSON" in exc_info.value.message
        assert exc_info.value.context["credentials_path"] == str(path)
        assert exc_info.value.suggestions

    def test_non_object_file_raises_config_error(self, tmp_path):
        path = tmp_path / "credentials.json"
        path.write_text('["token"]')

        with pytest.raises(ConfigError):
            FileCredentialStore(path).get(ACCESS_TOKEN_KEY)

    def test_non_string_values_ignored(self, tmp_path):
        path = tmp_path / "credentials.json"
        path.write_text(json.dumps({ACCESS_TOKEN_KEY: 42, REFRESH_TOKEN_KEY: "r1"}))

        store = FileCredentialStore(path)

        assert store.get(ACCESS_TOKEN_KEY) is None
        assert store.get(REFRESH_TOKEN_KEY) == "r1"


class TestCredentialHelpers:
    """Test read/write/clear helpers"""

    def test_read_empty_store(self):
        assert read_credentials(MemoryCredentialStore()) is None

    def test_write_then_read(self):
        store = MemoryCredentialStore()
        write_credentials(store, CredentialPair(access="a1", refresh="r1"))

        assert read_credentials(store) == CredentialPair(access="a1", refresh="r1")

    def test_write_without_refresh_keeps_stored_refresh(self):
        store = MemoryCredentialStore({REFRESH_TOKEN_KEY: "r1"})
        write_credentials(store, CredentialPair(access="a2"))

        assert read_credentials(store) == CredentialPair(access="a2", refresh="r1")

    def test_write_keep_refresh(self):
        store = MemoryCredentialStore({REFRESH_TOKEN_KEY: "r1"})
        write_credentials(
            store, CredentialPair(access="a2", refresh="r2"), keep_refresh=True
        )

        assert store.get(REFRESH_TOKEN_KEY) == "r1"

    def test_clear_reports_whether_anything_was_stored(self):
        store = MemoryCredentialStore({ACCESS_TOKEN_KEY: "a1", REFRESH_TOKEN_KEY: "r1"})

        assert clear_credentials(store) is True
        assert clear_credentials(store) is False
        assert read_credentials(store) is None
