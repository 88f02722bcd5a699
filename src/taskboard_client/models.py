from typing import Any, Literal

import httpx
from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator

from .consts import BEARER_SCHEME
from .exceptions import RefreshError, TaskboardClientError

# =============================================================================
# UNIFIED RESPONSE MODEL
# =============================================================================
# Outcome summary handed to UI collaborators


class Response(BaseModel):
    """Unified outcome type for UI collaborators reacting to client calls."""

    status: Literal["success", "error"] = Field(
        ..., description="Response status indicating outcome"
    )
    message: str = Field(..., description="Human-readable summary of the response")
    data: Any | None = Field(
        None,
        description="Response payload - opaque task, project or statistics data",
    )
    errors: list[str] = Field(
        default_factory=list, description="List of error messages"
    )
    suggestions: list[str] = Field(
        default_factory=list, description="Actionable suggestions for the user"
    )
    metadata: dict[str, Any] | None = Field(
        None, description="Additional context and domain-specific information"
    )

    @classmethod
    def from_error(cls, error: Exception) -> "Response":
        """Create Response from any Exception, with potentially helpful info for recovery.

        Args:
            error: Any Exception instance

        Returns:
            Response object with error details
        """
        if isinstance(error, TaskboardClientError):
            return cls(
                status="error",
                message=error.message,
                errors=error.errors,
                suggestions=error.suggestions,
                metadata={**error.context, "exception_type": type(error).__name__},
            )
        elif isinstance(error, httpx.HTTPStatusError):
            status_code = error.response.status_code
            if status_code >= 500:
                message = f"Server error ({status_code}): {str(error)}"
                suggestions = []
            elif status_code == 401:
                message = f"Session expired ({status_code}): {str(error)}"
                suggestions = ["Sign in again"]
            elif status_code == 403:
                message = f"Permission denied ({status_code}): {str(error)}"
                suggestions = ["Check that your account may access this resource"]
            elif status_code == 404:
                message = f"Resource not found ({status_code}): {str(error)}"
                suggestions = ["Check the API base URL configuration"]
            else:
                message = f"HTTP error ({status_code}): {str(error)}"
                suggestions = ["Check the request and try again"]

            return cls(
                status="error",
                message=message,
                errors=[str(error)],
                suggestions=suggestions,
                metadata={
                    "exception_type": type(error).__name__,
                    "status_code": status_code,
                    "url": str(error.response.url),
                },
            )
        elif isinstance(error, httpx.RequestError):
            metadata = {"exception_type": type(error).__name__}
            try:
                metadata["url"] = str(error.request.url)
            except RuntimeError:
                # request was never attached to the error
                pass

            return cls(
                status="error",
                message=f"Network error: {str(error)}",
                errors=[str(error)],
                suggestions=[
                    "Check your internet connection",
                    "Verify the API base URL is correct",
                    "Try again - this may be a temporary network issue",
                ],
                metadata=metadata,
            )
        else:
            return cls(
                status="error",
                message=f"Unexpected error: {str(error)}",
                errors=[str(error)],
                suggestions=["Try again - this may be a temporary issue"],
                metadata={"exception_type": type(error).__name__},
            )


# =============================================================================
# CREDENTIAL MODELS
# =============================================================================


class CredentialPair(BaseModel):
    """Access credential plus the optional refresh credential that renews it."""

    model_config = ConfigDict(frozen=True)

    access: str = Field(..., min_length=1, description="Short-lived bearer token")
    refresh: str | None = Field(
        None, description="Longer-lived token exchanged for a new access token"
    )

    def __repr__(self) -> str:
        # never leak token values into logs or tracebacks
        refresh = "set" if self.refresh else None
        return f"CredentialPair(access='***', refresh={refresh!r})"

    __str__ = __repr__


class RefreshPayload(BaseModel):
    """Body returned by the token and refresh endpoints."""

    model_config = ConfigDict(extra="ignore")

    access: str = Field(..., min_length=1)
    refresh: str | None = Field(None, min_length=1)


class RefreshResult(BaseModel):
    """Outcome of one refresh flight, shared by every caller attached to it."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    credentials: CredentialPair | None = None
    error: RefreshError | None = None

    @computed_field
    @property
    def ok(self) -> bool:
        return self.credentials is not None

    @classmethod
    def success(cls, credentials: CredentialPair) -> "RefreshResult":
        return cls(credentials=credentials)

    @classmethod
    def failure(cls, error: RefreshError) -> "RefreshResult":
        return cls(error=error)


# =============================================================================
# REQUEST DESCRIPTOR
# =============================================================================


class RequestDescriptor(BaseModel):
    """Immutable description of one logical API request.

    ``retried`` flips to True exactly once, on the copy produced by
    ``as_retry``; the descriptor the caller built is never modified.

    The payload is one of: a JSON ``body``; form fields in ``data``, with
    ``files`` for a multipart upload; or raw ``content``. File parts must be
    bytes (or ``(filename, bytes, content_type)`` tuples), not open files, so
    the retry sends the same upload again.
    """

    model_config = ConfigDict(frozen=True)

    method: str = Field(..., min_length=1)
    url: str = Field(..., min_length=1)
    headers: dict[str, str] = Field(default_factory=dict)
    body: Any | None = Field(None, description="JSON-serializable request body")
    data: dict[str, Any] | None = Field(None, description="Form fields")
    files: dict[str, Any] | None = Field(None, description="Multipart file parts")
    content: bytes | str | None = Field(None, description="Raw request body")
    params: dict[str, Any] | None = None
    retried: bool = False

    @model_validator(mode="after")
    def check_single_payload_kind(self) -> "RequestDescriptor":
        kinds = [
            self.body is not None,
            self.data is not None or self.files is not None,
            self.content is not None,
        ]
        if sum(kinds) > 1:
            raise ValueError("Use only one of body, data/files or content")
        return self

    def with_authorization(self, access: str | None) -> "RequestDescriptor":
        """Copy of this descriptor carrying ``access`` as its bearer credential.

        Any Authorization header already present is replaced; with no access
        credential the header is dropped.
        """
        headers = {
            name: value
            for name, value in self.headers.items()
            if name.lower() != "authorization"
        }
        if access:
            headers["Authorization"] = f"{BEARER_SCHEME} {access}"
        return self.model_copy(update={"headers": headers})

    def as_retry(self, access: str) -> "RequestDescriptor":
        """Copy marked as retried and carrying the refreshed credential."""
        retry = self.with_authorization(access)
        return retry.model_copy(update={"retried": True})
