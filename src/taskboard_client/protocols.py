"""Protocol definitions for dependency injection and interface contracts."""

from typing import Protocol


class CredentialStore(Protocol):
    """Protocol for key/value credential storage."""

    def get(self, key: str) -> str | None:
        """Return the stored value, or None when the key is absent."""
        ...

    def set(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""
        ...

    def remove(self, key: str) -> None:
        """Delete ``key``; a missing key is not an error."""
        ...


class LogoutTrigger(Protocol):
    """Protocol for forced-logout handlers."""

    def force_logout(self) -> None:
        """Clear credentials and send the UI to the unauthenticated entry point."""
        ...
