"""Tests for ForcedLogout"""

from unittest.mock import Mock

from taskboard_client.consts import ACCESS_TOKEN_KEY, REFRESH_TOKEN_KEY
from taskboard_client.logout import ForcedLogout
from taskboard_client.store import MemoryCredentialStore


class TestForcedLogout:
    def test_clears_and_navigates(self):
        store = MemoryCredentialStore({ACCESS_TOKEN_KEY: "a", REFRESH_TOKEN_KEY: "r"})
        navigate = Mock()

        ForcedLogout(store, "/signin", navigate).force_logout()

        assert store.get(ACCESS_TOKEN_KEY) is None
        assert store.get(REFRESH_TOKEN_KEY) is None
        navigate.assert_called_once_with("/signin")

    def test_without_navigation_callback(self, caplog):
        store = MemoryCredentialStore({ACCESS_TOKEN_KEY: "a"})

        ForcedLogout(store).force_logout()

        assert store.get(ACCESS_TOKEN_KEY) is None
        assert "redirecting to /login" in caplog.text
