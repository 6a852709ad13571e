"""Credential errors."""


class CredentialError(Exception):
    """Base class for credential problems."""


class AuthMissingError(CredentialError):
    """No usable credential where one is required."""


class CredentialStoreError(CredentialError):
    """The persisted credential record could not be read or written."""


class OAuthClientConfigError(CredentialError):
    """OAuth client id/secret are not configured."""


class CredentialRefreshError(AuthMissingError):
    """The token endpoint refused or failed to refresh the credential."""
