"""Background task that keeps the shared credential fresh."""

import asyncio

from gdrive_mcp.auth.errors import AuthMissingError, CredentialError, CredentialRefreshError
from gdrive_mcp.auth.provider import CredentialProvider
from gdrive_mcp.observability.logging import get_logger

logger = get_logger(__name__)


class CredentialRefresher:
    """Periodically renews the credential before it expires.

    Runs independently of request handling; failures are logged and the
    loop keeps going.
    """

    def __init__(self, provider: CredentialProvider, interval_seconds: float) -> None:
        self._provider = provider
        self._interval = interval_seconds
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._run(), name="credential-refresh")
        logger.info("credential_refresh_started", interval_seconds=self._interval)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("credential_refresh_stopped")

    async def refresh_once(self) -> bool:
        """Refresh if the token would expire before the next tick.

        Returns:
            True when a valid credential is in place afterwards
        """
        min_validity = self._interval + self._provider.refresh_margin_seconds
        try:
            await self._provider.refresh(min_validity_seconds=min_validity)
        except CredentialRefreshError as e:
            logger.warning("credential_refresh_failed", error=str(e))
            return False
        except AuthMissingError as e:
            logger.info("credential_refresh_skipped", reason=str(e))
            return False
        except CredentialError as e:
            logger.warning("credential_refresh_failed", error=str(e))
            return False
        except Exception as e:
            logger.exception("credential_refresh_crashed", error=str(e))
            return False
        return True

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            await self.refresh_once()
