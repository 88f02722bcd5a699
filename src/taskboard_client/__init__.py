"""Taskboard Client Package

Authenticated session client for the task management API: bearer credentials
on every call, single-flight credential refresh on 401 with one retry, and a
forced logout when the session cannot be renewed.
"""

from .config import Config, get_config, setup_logging
from .consts import PACKAGE_VERSION
from .exceptions import (
    AuthenticationError,
    ConfigError,
    RefreshError,
    TaskboardClientError,
)
from .logout import ForcedLogout
from .models import CredentialPair, RefreshResult, RequestDescriptor, Response
from .refresh import RefreshCoordinator
from .session import SessionClient, get_client
from .store import FileCredentialStore, MemoryCredentialStore

__version__ = PACKAGE_VERSION

__all__ = [
    "__version__",
    "get_config",
    "get_client",
    "setup_logging",
    "Config",
    "SessionClient",
    "RefreshCoordinator",
    "ForcedLogout",
    "FileCredentialStore",
    "MemoryCredentialStore",
    "CredentialPair",
    "RefreshResult",
    "RequestDescriptor",
    "Response",
    "TaskboardClientError",
    "ConfigError",
    "AuthenticationError",
    "RefreshError",
]
