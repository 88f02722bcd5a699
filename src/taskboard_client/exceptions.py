"""Taskboard client custom exceptions.

Exception Design Principles:
1. Use these custom exceptions only when additional useful context can be provided
2. Transport and HTTP errors stay as httpx exceptions; the session client never
   wraps them
3. Split on domain of actionable information:
   - Recoverable by user reconfiguration outside session (ConfigError)
   - Recoverable only by signing in again (AuthenticationError, RefreshError)
"""


class TaskboardClientError(Exception):
    """Base exception for all taskboard client errors.

    Provides rich context and actionable suggestions beyond standard exceptions.
    All taskboard client custom exceptions inherit from this base class.
    """

    def __init__(
        self,
        message: str,  # the error message
        *,
        errors: list[str] = None,  # detailed list of errors (if available)
        suggestions: list[str] = None,  # remedial actions
        context: dict = None,  # additional detailed context
    ):
        """Initialize TaskboardClientError.

        Args:
            message: Primary error message for users
            errors: List of specific error details
            suggestions: List of actionable suggestions for resolution
            context: Additional context information as key-value pairs
        """
        super().__init__(message)
        self.message = message
        self.errors = errors or []
        self.suggestions = suggestions or []
        self.context = context or {}


class ConfigError(TaskboardClientError):
    """Application configuration errors - recoverable by user reconfiguration.

    Covers setup issues that prevent the client from working but can be
    resolved outside the current session:
    - Unreadable or corrupt credentials file
    - File system permission issues for the credentials directory

    Does NOT include runtime HTTP errors (401, 404, 5xx) - those remain
    httpx responses or exceptions.
    """

    pass


class AuthenticationError(TaskboardClientError):
    """Sign-in rejected or answered with an unusable payload.

    Raised by SessionClient.login(). The user has to try again with other
    credentials; nothing is stored.
    """

    pass


class RefreshError(TaskboardClientError):
    """Refresh of the access credential failed - terminal for the session.

    Never raised to callers of SessionClient.send(). The coordinator records
    it as the failure reason of a RefreshResult, the session is cleared and
    the caller receives the original 401 response.
    """

    pass
