"""HTTP/SSE server configuration models."""

from pydantic import BaseModel, Field, field_validator


class APIConfig(BaseModel):
    """Configuration for the HTTP/SSE server."""

    host: str = Field(default="0.0.0.0", description="Bind address")
    port: int = Field(default=3000, ge=1, le=65535, description="Port number")
    api_key: str | None = Field(
        default=None,
        description="Shared secret required on every request; unset disables the gate",
    )
    cors_origins: list[str] = Field(
        default=["*"],
        description="Allowed CORS origins",
    )
    cors_allow_credentials: bool = Field(
        default=True,
        description="Allow credentials in CORS",
    )
    max_sessions: int = Field(
        default=100,
        ge=1,
        description="Maximum number of concurrently open SSE sessions",
    )
    message_path: str = Field(
        default="/message",
        description="Path announced to clients for posting messages",
    )
    sse_ping_seconds: int = Field(
        default=15,
        ge=1,
        description="Interval between SSE keep-alive pings",
    )
    request_timeout_seconds: float | None = Field(
        default=120.0,
        gt=0,
        description="Upper bound for handling one JSON-RPC message",
    )

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v: str | list[str]) -> list[str]:
        """Parse CORS origins from string or list."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    @field_validator("api_key", mode="before")
    @classmethod
    def empty_api_key_is_unset(cls, v: str | None) -> str | None:
        """Treat an empty key as no key."""
        if isinstance(v, str) and not v.strip():
            return None
        return v
