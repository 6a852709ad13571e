"""Google OAuth credential configuration models."""

from pathlib import Path

from pydantic import BaseModel, Field

GOOGLE_TOKEN_URI = "https://oauth2.googleapis.com/token"


class AuthConfig(BaseModel):
    """Where credentials live and how often they are refreshed."""

    credentials_path: Path = Field(
        default=Path(".gdrive-server-credentials.json"),
        description="Persisted OAuth credential record",
    )
    oauth_keys_path: Path = Field(
        default=Path("gcp-oauth.keys.json"),
        description="OAuth client keys file downloaded from Google Cloud",
    )
    client_id: str | None = Field(
        default=None,
        description="OAuth client id; overrides the keys file",
    )
    client_secret: str | None = Field(
        default=None,
        description="OAuth client secret; overrides the keys file",
    )
    token_uri: str = Field(default=GOOGLE_TOKEN_URI, description="OAuth token endpoint")
    refresh_interval_seconds: float = Field(
        default=45 * 60,
        gt=0,
        description="Period of the background refresh task",
    )
    refresh_margin_seconds: float = Field(
        default=5 * 60,
        ge=0,
        description="Refresh tokens that expire within this window",
    )
