"""Process-wide OAuth credential provider.

The provider holds the single shared credential. Readers take snapshots via
`current`/`access_token`; the value is only ever replaced by one assignment
inside `refresh` (or the initial load), serialized by a lock.
"""

import asyncio
import json
from typing import Any

import httpx

from gdrive_mcp.auth.credentials import Credentials, OAuthClient
from gdrive_mcp.auth.errors import (
    AuthMissingError,
    CredentialError,
    CredentialRefreshError,
    CredentialStoreError,
    OAuthClientConfigError,
)
from gdrive_mcp.auth.store import CredentialStore
from gdrive_mcp.config.models.auth import AuthConfig
from gdrive_mcp.observability.logging import get_logger
from gdrive_mcp.observability.metrics import CREDENTIAL_REFRESHES

logger = get_logger(__name__)


def resolve_oauth_client(config: AuthConfig) -> OAuthClient | None:
    """Find OAuth client keys in settings or the keys file.

    Returns:
        The client, or None when neither source is available
    """
    if config.client_id and config.client_secret:
        return OAuthClient(
            client_id=config.client_id,
            client_secret=config.client_secret,
            token_uri=config.token_uri,
        )

    keys_path = config.oauth_keys_path.expanduser()
    if not keys_path.exists():
        logger.warning("oauth_client_not_configured", keys_path=str(keys_path))
        return None

    try:
        data = json.loads(keys_path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise OAuthClientConfigError(f"Cannot read OAuth keys file {keys_path}: {e}") from e
    return OAuthClient.from_keys_file(data, default_token_uri=config.token_uri)


class CredentialProvider:
    """Supplies the shared Google credential in quiet or strict mode."""

    def __init__(
        self,
        store: CredentialStore,
        oauth_client: OAuthClient | None,
        refresh_margin_seconds: float = 300.0,
        http_client: httpx.AsyncClient | None = None,
        timeout_seconds: float = 30.0,
    ) -> None:
        """Initialize the provider.

        Args:
            store: Persistence for the credential record
            oauth_client: Client identity for refresh grants (None disables refresh)
            refresh_margin_seconds: Refresh tokens expiring within this window
            http_client: Client for the token endpoint (created lazily if omitted)
            timeout_seconds: Token endpoint timeout
        """
        self._store = store
        self._oauth_client = oauth_client
        self._margin = refresh_margin_seconds
        self._client = http_client
        self._timeout = timeout_seconds
        self._current: Credentials | None = None
        self._refresh_lock = asyncio.Lock()

    @property
    def current(self) -> Credentials | None:
        """Latest credential snapshot."""
        return self._current

    @property
    def access_token(self) -> str | None:
        credentials = self._current
        return credentials.access_token if credentials else None

    @property
    def refresh_margin_seconds(self) -> float:
        return self._margin

    async def load_quietly(self) -> Credentials | None:
        """Best-effort acquisition that never raises.

        Loads the stored credential and refreshes it if it already expired.

        Returns:
            A valid credential, or None if none could be obtained
        """
        try:
            credentials = await self._ensure_loaded()
            if credentials is None:
                logger.debug("credentials_not_found", path=str(self._store.path))
                return None
            if not credentials.is_valid() and credentials.can_refresh:
                credentials = await self.refresh(min_validity_seconds=self._margin)
        except CredentialError as e:
            logger.warning("credentials_unavailable", error=str(e))
            return None
        except Exception as e:
            logger.exception("credentials_quiet_load_failed", error=str(e))
            return None

        return credentials if credentials.is_valid() else None

    async def get_valid_credentials(self) -> Credentials:
        """Strict acquisition: return a usable credential or raise.

        A token inside the refresh margin is renewed; if that fails while the
        token is still valid, the current token is returned.

        Raises:
            AuthMissingError: If no unexpired credential can be obtained
        """
        try:
            credentials = await self._ensure_loaded()
        except CredentialStoreError as e:
            raise AuthMissingError(str(e)) from e

        if credentials is None:
            raise AuthMissingError(
                f"No stored credentials at {self._store.path}; authorize the server first"
            )

        if not credentials.expires_within(self._margin):
            return credentials

        if credentials.can_refresh:
            try:
                return await self.refresh(min_validity_seconds=self._margin)
            except AuthMissingError as e:
                if not credentials.is_valid():
                    raise
                logger.warning("credential_refresh_failed", error=str(e), fallback="current")
                return credentials

        if not credentials.is_valid():
            raise AuthMissingError("Access token expired and no refresh token is available")
        return credentials

    async def refresh(self, *, min_validity_seconds: float | None = None) -> Credentials:
        """Refresh the credential through the OAuth token endpoint.

        Args:
            min_validity_seconds: Skip the network call when the current token
                stays valid at least this long (None forces a refresh)

        Returns:
            The credential now in effect

        Raises:
            AuthMissingError: If there is nothing to refresh or no OAuth client
            CredentialRefreshError: If the token endpoint fails
        """
        async with self._refresh_lock:
            credentials = await self._ensure_loaded()
            if credentials is None or not credentials.can_refresh:
                raise AuthMissingError("No refresh token available")

            # Another waiter may have refreshed while we held the lock
            if min_validity_seconds is not None and not credentials.expires_within(
                min_validity_seconds
            ):
                return credentials

            if self._oauth_client is None:
                raise AuthMissingError("OAuth client keys are not configured; cannot refresh")

            token_response = await self._request_token(
                self._oauth_client, credentials.refresh_token or ""
            )
            refreshed = credentials.refreshed(token_response)

            try:
                await asyncio.to_thread(self._store.save, refreshed)
            except CredentialStoreError as e:
                logger.warning("credentials_persist_failed", error=str(e))

            self._current = refreshed
            CREDENTIAL_REFRESHES.labels(outcome="success").inc()
            logger.info("credentials_refreshed", expiry_date=refreshed.expiry_date)
            return refreshed

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _ensure_loaded(self) -> Credentials | None:
        if self._current is None:
            loaded = await asyncio.to_thread(self._store.load)
            if self._current is None and loaded is not None:
                self._current = loaded
                logger.info("credentials_loaded", path=str(self._store.path))
        return self._current

    async def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
        return self._client

    async def _request_token(
        self, oauth_client: OAuthClient, refresh_token: str
    ) -> dict[str, Any]:
        data = {
            "grant_type": "refresh_token",
            "refresh_token": refresh_token,
            "client_id": oauth_client.client_id,
            "client_secret": oauth_client.client_secret,
        }

        client = await self._ensure_client()
        try:
            response = await client.post(oauth_client.token_uri, data=data)
        except httpx.HTTPError as e:
            CREDENTIAL_REFRESHES.labels(outcome="error").inc()
            raise CredentialRefreshError(f"Token endpoint unreachable: {e}") from e

        try:
            payload = response.json()
        except ValueError:
            payload = {}

        if response.status_code != 200 or "access_token" not in payload:
            CREDENTIAL_REFRESHES.labels(outcome="rejected").inc()
            reason = (
                payload.get("error_description") or payload.get("error") or response.reason_phrase
            )
            raise CredentialRefreshError(
                f"Token refresh failed ({response.status_code}): {reason}"
            )

        return payload
