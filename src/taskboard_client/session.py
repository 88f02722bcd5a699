"""Session client - authenticated requests with transparent credential refresh."""

import logging
from collections.abc import Callable
from functools import cache
from typing import Any

import httpx

from .config import Config, get_config
from .consts import ACCESS_TOKEN_KEY, REFRESH_TOKEN_KEY, UNAUTHORIZED_STATUS, USER_AGENT
from .exceptions import AuthenticationError
from .logout import ForcedLogout
from .models import CredentialPair, RefreshPayload, RefreshResult, RequestDescriptor
from .protocols import CredentialStore, LogoutTrigger
from .refresh import RefreshCoordinator
from .store import (
    FileCredentialStore,
    clear_credentials,
    read_credentials,
    write_credentials,
)

logger = logging.getLogger("taskboard-client.session")


class SessionClient:
    """Task API client with bearer authentication.

    Responsibilities:
    - Attach the stored access credential to every request
    - On a 401, refresh through the coordinator and retry exactly once
    - End the session when the credential cannot be refreshed

    Every outcome reaches the caller: responses are returned as received and
    transport errors propagate as httpx exceptions.
    """

    def __init__(
        self,
        config: Config | None = None,
        store: CredentialStore | None = None,
        http_client: httpx.AsyncClient | None = None,
        logout_trigger: LogoutTrigger | None = None,
        coordinator: RefreshCoordinator | None = None,
        navigate: Callable[[str], None] | None = None,
    ):
        """Initialize SessionClient.

        Args:
            config: Config instance. If None, uses get_config().
            store: Credential store. If None, uses the configured credentials file.
            http_client: HTTP client. If None, creates (and owns) a new one.
            logout_trigger: Forced-logout handler. If None, creates ForcedLogout.
            coordinator: Refresh coordinator. If None, creates one sharing the
                HTTP client and store.
            navigate: Called with config.login_path by the default ForcedLogout
                to send the UI to the login page. Ignored when logout_trigger
                is given.
        """
        self.config = config or get_config()
        self.store = store or FileCredentialStore(self.config.credentials_file)

        self._owns_http_client = http_client is None
        self.http_client = http_client or httpx.AsyncClient(
            headers={"User-Agent": USER_AGENT},
            timeout=self.config.timeout_seconds,
            follow_redirects=True,
        )

        self.logout_trigger = logout_trigger or ForcedLogout(
            self.store, self.config.login_path, navigate
        )
        self.coordinator = coordinator or RefreshCoordinator(
            self.config, self.http_client, self.store
        )
        self._ended_by: RefreshResult | None = None

        logger.info(f"Session client created for {self.config.base_url}")

    async def __aenter__(self) -> "SessionClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the HTTP client if this session created it."""
        if self._owns_http_client:
            await self.http_client.aclose()

    @property
    def is_authenticated(self) -> bool:
        """True while the store holds a non-empty access credential."""
        return bool(self.store.get(ACCESS_TOKEN_KEY))

    @property
    def credentials(self) -> CredentialPair | None:
        return read_credentials(self.store)

    async def send(self, descriptor: RequestDescriptor) -> httpx.Response:
        """Send a request with the current credential, refreshing it once on 401.

        Args:
            descriptor: The logical request. It is never modified; the retry
                is sent from a copy marked as retried.

        Returns:
            The response of the original request, or of its single retry. When
            the credential cannot be refreshed the original 401 response is
            returned after the session is ended.

        Raises:
            httpx.RequestError: For network errors, timeouts, DNS failures.
        """
        if self.coordinator.pending:
            # don't go out with a credential that is being replaced
            await self.coordinator.wait()

        epoch = self.coordinator.epoch
        access = self.store.get(ACCESS_TOKEN_KEY)
        response = await self._submit(descriptor.with_authorization(access))

        if response.status_code != UNAUTHORIZED_STATUS or descriptor.retried:
            return response

        logger.info(f"{descriptor.method} {descriptor.url} unauthorized")
        result = await self.coordinator.obtain_new_credential(
            stale_access=access, sent_epoch=epoch
        )

        if not result.ok:
            self._end_session(result)
            return response

        return await self._submit(descriptor.as_retry(result.credentials.access))

    async def request(
        self,
        method: str,
        url: str,
        *,
        json: Any = None,
        data: dict[str, Any] | None = None,
        files: dict[str, Any] | None = None,
        content: bytes | str | None = None,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        """Build a descriptor for ``url`` (absolute, or relative to base_url) and send it.

        Send at most one payload kind: ``json``, form ``data`` (with ``files``
        for multipart), or raw ``content``.
        """
        descriptor = RequestDescriptor(
            method=method.upper(),
            url=self._absolute_url(url),
            headers=headers or {},
            body=json,
            data=data,
            files=files,
            content=content,
            params=params,
        )
        return await self.send(descriptor)

    async def get_json(self, url: str, **kwargs) -> Any:
        """Get JSON from URL with authentication.

        Args:
            url: URL to fetch, absolute or relative to base_url.
            **kwargs: Additional arguments for request().

        Returns:
            Parsed JSON data.

        Raises:
            httpx.HTTPStatusError: For HTTP 4xx/5xx responses, including a
                401 that survived the refresh.
            httpx.RequestError: For network errors, timeouts, DNS failures.
        """
        response = await self.request("GET", url, **kwargs)
        response.raise_for_status()
        return response.json()

    async def post_json(self, url: str, **kwargs) -> Any:
        """Post JSON to URL with authentication.

        Raises:
            httpx.HTTPStatusError: For HTTP 4xx/5xx responses.
            httpx.RequestError: For network errors, timeouts, DNS failures.
        """
        response = await self.request("POST", url, **kwargs)
        response.raise_for_status()
        return response.json()

    async def put_json(self, url: str, **kwargs) -> Any:
        """Put JSON to URL with authentication; same errors as post_json()."""
        response = await self.request("PUT", url, **kwargs)
        response.raise_for_status()
        return response.json()

    async def delete(self, url: str, **kwargs) -> httpx.Response:
        """Delete the resource at URL; raises httpx.HTTPStatusError on 4xx/5xx."""
        response = await self.request("DELETE", url, **kwargs)
        response.raise_for_status()
        return response

    async def login(self, username: str, password: str) -> CredentialPair:
        """Exchange username and password for a credential pair and store it.

        Raises:
            AuthenticationError: If the server rejects the sign-in or its
                response carries no access token.
            httpx.RequestError: For network errors, timeouts, DNS failures.
        """
        logger.debug(f"Signing in as {username}")
        context = {"token_url": self.config.token_url, "username": username}

        try:
            response = await self.http_client.post(
                self.config.token_url,
                json={"username": username, "password": password},
            )
            response.raise_for_status()
            payload = RefreshPayload.model_validate(response.json())

        except httpx.HTTPStatusError as e:
            raise AuthenticationError(
                f"Sign-in rejected ({e.response.status_code})",
                errors=[str(e)],
                suggestions=["Check your username and password"],
                context={**context, "status_code": e.response.status_code},
            ) from e
        except ValueError as e:
            raise AuthenticationError(
                "Token endpoint returned a response without access token",
                errors=[str(e)],
                suggestions=["This may indicate an API change"],
                context=context,
            ) from e

        credentials = CredentialPair(access=payload.access, refresh=payload.refresh)
        write_credentials(self.store, credentials)
        if credentials.refresh is None:
            self.store.remove(REFRESH_TOKEN_KEY)

        logger.info(f"Signed in as {username}")
        return credentials

    def logout(self) -> None:
        """End the session at the user's request."""
        if clear_credentials(self.store):
            logger.info("Signed out")

    def _end_session(self, failure: RefreshResult) -> None:
        # requests rejected by the same expiry share one failure result
        if failure is self._ended_by:
            logger.debug("Session already ended for this failure")
            return
        self._ended_by = failure
        clear_credentials(self.store)
        self.logout_trigger.force_logout()

    async def _submit(self, descriptor: RequestDescriptor) -> httpx.Response:
        logger.debug(
            f"{descriptor.method} {descriptor.url}"
            + (" (retry)" if descriptor.retried else "")
        )
        return await self.http_client.request(
            descriptor.method,
            descriptor.url,
            headers=descriptor.headers,
            json=descriptor.body,
            data=descriptor.data,
            files=descriptor.files,
            content=descriptor.content,
            params=descriptor.params,
        )

    def _absolute_url(self, url: str) -> str:
        if url.startswith(("http://", "https://")):
            return url
        return f"{self.config.base_url.rstrip('/')}/{url.lstrip('/')}"


@cache
def get_client() -> SessionClient:
    """Get a cached SessionClient instance with default configuration.

    Raises:
        No exceptions raised directly.
        May propagate exceptions from Config() initialization via get_config().
    """
    return SessionClient()
