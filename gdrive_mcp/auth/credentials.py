"""OAuth credential and client models."""

import time
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from gdrive_mcp.auth.errors import OAuthClientConfigError


def now_ms() -> int:
    return int(time.time() * 1000)


class Credentials(BaseModel):
    """An OAuth token record as persisted between runs.

    Instances are immutable; a refresh produces a new instance.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    access_token: str | None = None
    refresh_token: str | None = None
    token_type: str = "Bearer"
    scope: str | None = None
    expiry_date: int | None = Field(
        default=None,
        description="Access token expiry as epoch milliseconds",
    )

    @property
    def can_refresh(self) -> bool:
        return bool(self.refresh_token)

    def expires_within(self, seconds: float, now: int | None = None) -> bool:
        """Whether the access token is missing or expires in the next `seconds`.

        A token without a recorded expiry is trusted until a refresh replaces it.
        """
        if not self.access_token:
            return True
        if self.expiry_date is None:
            return False
        current = now_ms() if now is None else now
        return self.expiry_date - current <= seconds * 1000

    def is_valid(self, now: int | None = None) -> bool:
        return not self.expires_within(0, now=now)

    def refreshed(self, token_response: dict[str, Any], now: int | None = None) -> "Credentials":
        """Build the credential that results from a token endpoint response."""
        current = now_ms() if now is None else now
        update: dict[str, Any] = {"access_token": token_response["access_token"]}
        if "expires_in" in token_response:
            update["expiry_date"] = current + int(token_response["expires_in"]) * 1000
        if token_response.get("refresh_token"):
            update["refresh_token"] = token_response["refresh_token"]
        if token_response.get("scope"):
            update["scope"] = token_response["scope"]
        if token_response.get("token_type"):
            update["token_type"] = token_response["token_type"]
        return self.model_copy(update=update)


class OAuthClient(BaseModel):
    """OAuth client identity used for the refresh grant."""

    model_config = ConfigDict(frozen=True)

    client_id: str
    client_secret: str
    token_uri: str

    @classmethod
    def from_keys_file(cls, data: dict[str, Any], default_token_uri: str) -> "OAuthClient":
        """Parse a Google Cloud client keys document.

        Accepts the `installed` and `web` application shapes as well as a
        flat mapping.
        """
        section = data.get("installed") or data.get("web") or data
        try:
            return cls(
                client_id=section["client_id"],
                client_secret=section["client_secret"],
                token_uri=section.get("token_uri") or default_token_uri,
            )
        except (KeyError, TypeError) as e:
            raise OAuthClientConfigError(f"OAuth keys file is missing {e}") from None
