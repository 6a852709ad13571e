"""Google OAuth credential lifecycle."""

from gdrive_mcp.auth.credentials import Credentials, OAuthClient
from gdrive_mcp.auth.errors import (
    AuthMissingError,
    CredentialError,
    CredentialRefreshError,
    CredentialStoreError,
)
from gdrive_mcp.auth.provider import CredentialProvider, resolve_oauth_client
from gdrive_mcp.auth.refresh import CredentialRefresher
from gdrive_mcp.auth.store import CredentialStore

__all__ = [
    "AuthMissingError",
    "CredentialError",
    "CredentialProvider",
    "CredentialRefreshError",
    "CredentialRefresher",
    "CredentialStore",
    "CredentialStoreError",
    "Credentials",
    "OAuthClient",
    "resolve_oauth_client",
]
