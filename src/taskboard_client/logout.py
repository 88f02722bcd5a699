"""Forced logout handling."""

import logging
from collections.abc import Callable

from .protocols import CredentialStore
from .store import clear_credentials

logger = logging.getLogger("taskboard-client.logout")


class ForcedLogout:
    """Logout trigger that clears credentials and navigates to the login page.

    Navigation belongs to the UI, so it is delegated to ``navigate``, which
    receives the login path. Without a callback the logout is only logged.
    """

    def __init__(
        self,
        store: CredentialStore,
        login_path: str = "/login",
        navigate: Callable[[str], None] | None = None,
    ):
        self.store = store
        self.login_path = login_path
        self.navigate = navigate

    def force_logout(self) -> None:
        clear_credentials(self.store)
        logger.warning(f"Session ended, redirecting to {self.login_path}")
        if self.navigate is not None:
            self.navigate(self.login_path)
