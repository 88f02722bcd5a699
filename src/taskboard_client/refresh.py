"""Single-flight refresh of the access credential."""

import asyncio
import logging

import httpx
from pydantic import ValidationError

from .config import Config
from .consts import ACCESS_TOKEN_KEY, REFRESH_TOKEN_KEY
from .exceptions import RefreshError
from .models import CredentialPair, RefreshPayload, RefreshResult
from .protocols import CredentialStore
from .store import write_credentials

logger = logging.getLogger("taskboard-client.refresh")

# caller did not say which credential its rejected request carried
_UNKNOWN = object()


class RefreshCoordinator:
    """Refresh coordinator.

    Responsibilities:
    - Keep at most one refresh request in flight
    - Hand the outcome of that flight to every caller that asked during it
    - Persist the renewed credentials

    A refresh failure of any kind (network error, non-2xx, malformed body or
    no refresh credential) is terminal for the flight. The refresh call is
    never retried. Requests that were already out when a failure settled share
    that failure, so one expiry yields one failure however many requests saw it.
    """

    def __init__(
        self, config: Config, http_client: httpx.AsyncClient, store: CredentialStore
    ):
        """Initialize RefreshCoordinator.

        Args:
            config: Config instance with the refresh endpoint and rotation policy.
            http_client: HTTP client (for refresh requests only)
            store: Credential store read before and written after each refresh.
        """
        self.config = config
        self.http_client = http_client
        self.store = store
        self._flight: asyncio.Task[RefreshResult] | None = None
        self._epoch = 0
        self._last_result: RefreshResult | None = None

    @property
    def pending(self) -> bool:
        """Whether a refresh request is currently in flight."""
        return self._flight is not None

    @property
    def epoch(self) -> int:
        """Number of refresh outcomes settled so far.

        A request that records the epoch before it is sent can tell whether
        its expiry was already settled by the time its 401 arrived.
        """
        return self._epoch

    async def wait(self) -> None:
        """Wait for the pending flight, if any, without affecting it."""
        flight = self._flight
        if flight is not None:
            await asyncio.shield(flight)

    async def obtain_new_credential(
        self,
        stale_access: str | None | object = _UNKNOWN,
        sent_epoch: int | None = None,
    ) -> RefreshResult:
        """Get a renewed credential pair, sharing any refresh already in flight.

        Args:
            stale_access: Access credential the caller's rejected request
                carried, None if it was sent without one. When the store now
                holds a different one, the expiry was already handled and no
                request is made.
            sent_epoch: ``epoch`` observed before the rejected request was
                sent. If a failure settled since then, the caller shares that
                failure instead of producing a new one.

        Returns:
            RefreshResult with the new credentials, or the terminal failure.
            Callers of one flight, or of one settled failure, receive the
            identical result.
        """
        flight = self._flight
        if flight is None:
            current = self.store.get(ACCESS_TOKEN_KEY)
            if stale_access is not _UNKNOWN and current and current != stale_access:
                logger.debug("Access credential already renewed, skipping refresh")
                return RefreshResult.success(
                    CredentialPair(
                        access=current, refresh=self.store.get(REFRESH_TOKEN_KEY)
                    )
                )

            last = self._last_result
            if (
                sent_epoch is not None
                and sent_epoch < self._epoch
                and last is not None
                and not last.ok
            ):
                logger.debug("Sharing failure settled while request was pending")
                return last

            refresh_token = self.store.get(REFRESH_TOKEN_KEY)
            if not refresh_token:
                return self._fail(
                    RefreshError(
                        "No refresh credential available",
                        suggestions=["Sign in again"],
                    )
                )

            flight = asyncio.create_task(self._refresh(refresh_token))
            flight.add_done_callback(self._end_flight)
            self._flight = flight
        else:
            logger.debug("Joining pending refresh")

        # a cancelled caller must not cancel the flight other callers share
        return await asyncio.shield(flight)

    def _end_flight(self, flight: asyncio.Task) -> None:
        if self._flight is flight:
            self._flight = None

    async def _refresh(self, refresh_token: str) -> RefreshResult:
        """Exchange the refresh credential for a new access credential."""
        logger.debug("Refreshing access credential")
        context = {"refresh_url": self.config.refresh_url}

        try:
            response = await self.http_client.post(
                self.config.refresh_url, json={"refresh": refresh_token}
            )
            response.raise_for_status()
            payload = RefreshPayload.model_validate(response.json())

        except httpx.HTTPStatusError as e:
            return self._fail(
                RefreshError(
                    f"Refresh rejected ({e.response.status_code})",
                    errors=[str(e)],
                    suggestions=["Sign in again"],
                    context={**context, "status_code": e.response.status_code},
                )
            )
        except httpx.RequestError as e:
            return self._fail(
                RefreshError(
                    f"Refresh request failed: {e}",
                    errors=[str(e)],
                    suggestions=["Check your internet connection", "Sign in again"],
                    context=context,
                )
            )
        except ValidationError as e:
            return self._fail(
                RefreshError(
                    "Refresh endpoint returned a response without access token",
                    errors=[err["msg"] for err in e.errors()],
                    suggestions=["This may indicate an API change"],
                    context=context,
                )
            )
        except ValueError as e:
            return self._fail(
                RefreshError(
                    "Refresh endpoint returned invalid JSON",
                    errors=[str(e)],
                    suggestions=["This may indicate an API change"],
                    context=context,
                )
            )

        rotate = self.config.rotate_refresh_credential and payload.refresh is not None
        credentials = CredentialPair(
            access=payload.access,
            refresh=payload.refresh if rotate else refresh_token,
        )
        write_credentials(self.store, credentials, keep_refresh=not rotate)

        logger.info(
            "Access credential refreshed"
            + (" (refresh credential rotated)" if rotate else "")
        )
        return self._settle(RefreshResult.success(credentials))

    def _fail(self, error: RefreshError) -> RefreshResult:
        logger.warning(f"Refresh failed: {error.message}")
        return self._settle(RefreshResult.failure(error))

    def _settle(self, result: RefreshResult) -> RefreshResult:
        self._last_result = result
        self._epoch += 1
        return result
