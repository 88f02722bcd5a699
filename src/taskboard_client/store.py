"""Credential storage backends."""

import json
import logging
import os
import tempfile
from pathlib import Path

from .consts import ACCESS_TOKEN_KEY, REFRESH_TOKEN_KEY
from .exceptions import ConfigError
from .models import CredentialPair
from .protocols import CredentialStore

logger = logging.getLogger("taskboard-client.store")


class MemoryCredentialStore:
    """Credential store living only as long as the process."""

    def __init__(self, initial: dict[str, str] | None = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)


class FileCredentialStore:
    """Credential store persisted as a JSON object on disk.

    Values survive process restarts the way browser local storage survives
    page reloads. Every write rewrites the whole file through a temporary
    file and ``os.replace`` so a crash never leaves half-written JSON.
    """

    def __init__(self, path: str | os.PathLike):
        """Initialize FileCredentialStore.

        Args:
            path: Location of the JSON file. ``~`` is expanded. The file and
                its parent directory are created on first write.
        """
        self.path = Path(os.path.expanduser(path))

    def get(self, key: str) -> str | None:
        return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self._save(data)

    def remove(self, key: str) -> None:
        data = self._load()
        if key in data:
            del data[key]
            self._save(data)

    def _load(self) -> dict[str, str]:
        """Read the stored mapping; a missing file is an empty store.

        Raises:
            ConfigError: If the file cannot be read or does not hold a JSON object.
        """
        try:
            with open(self.path) as f:
                data = json.load(f)
        except FileNotFoundError:
            return {}
        except PermissionError as e:
            raise ConfigError(
                f"Credentials file not readable: {self.path}",
                suggestions=["Check file permissions"],
                context={"credentials_path": str(self.path)},
            ) from e
        except json.JSONDecodeError as e:
            raise ConfigError(
                f"Invalid JSON in credentials file: {self.path}",
                errors=[f"JSON error: {e.msg}"],
                suggestions=[
                    "Delete the credentials file and sign in again",
                ],
                context={"credentials_path": str(self.path)},
            ) from e

        if not isinstance(data, dict):
            raise ConfigError(
                f"Credentials file does not hold a JSON object: {self.path}",
                suggestions=["Delete the credentials file and sign in again"],
                context={"credentials_path": str(self.path)},
            )
        return {k: v for k, v in data.items() if isinstance(v, str)}

    def _save(self, data: dict[str, str]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                dir=self.path.parent, prefix=".credentials-", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w") as f:
                    json.dump(data, f)
                os.chmod(tmp_path, 0o600)
                os.replace(tmp_path, self.path)
            except BaseException:
                os.unlink(tmp_path)
                raise
        except PermissionError as e:
            raise ConfigError(
                f"Credentials file not writable: {self.path}",
                suggestions=["Check directory permissions"],
                context={"credentials_path": str(self.path)},
            ) from e
        logger.debug(f"Wrote {len(data)} credential entries to {self.path}")


def read_credentials(store: CredentialStore) -> CredentialPair | None:
    """Return the stored pair, or None when no access credential is stored."""
    access = store.get(ACCESS_TOKEN_KEY)
    if not access:
        return None
    return CredentialPair(access=access, refresh=store.get(REFRESH_TOKEN_KEY) or None)


def write_credentials(
    store: CredentialStore, credentials: CredentialPair, *, keep_refresh: bool = False
) -> None:
    """Persist ``credentials``.

    With ``keep_refresh`` or no refresh credential in the pair, the stored
    refresh credential is left untouched.
    """
    store.set(ACCESS_TOKEN_KEY, credentials.access)
    if credentials.refresh and not keep_refresh:
        store.set(REFRESH_TOKEN_KEY, credentials.refresh)


def clear_credentials(store: CredentialStore) -> bool:
    """Remove both credentials; returns True when anything was stored."""
    had_any = bool(store.get(ACCESS_TOKEN_KEY) or store.get(REFRESH_TOKEN_KEY))
    store.remove(ACCESS_TOKEN_KEY)
    store.remove(REFRESH_TOKEN_KEY)
    return had_any
