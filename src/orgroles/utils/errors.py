"""Exception hierarchy for orgroles."""

from typing import Optional


class OrgRolesError(Exception):
    """Base exception for orgroles errors."""

    def __init__(self, message: str, cause: Optional[Exception] = None):
        super().__init__(message)
        self.cause = cause


class ConfigError(OrgRolesError):
    """Missing configuration, missing session or expired tokens."""

    pass


class ScopeResolutionError(ConfigError):
    """The search scope could not be derived from the current user."""

    pass


class TransportError(OrgRolesError):
    """Connection, authentication or HTTP failure talking to the API."""

    def __init__(
        self,
        message: str,
        cause: Optional[Exception] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message, cause)
        self.status_code = status_code


class ResolutionError(OrgRolesError):
    """Role lookup failed for a single account."""

    def __init__(self, message: str, account_id: str = "", cause: Optional[Exception] = None):
        super().__init__(message, cause)
        self.account_id = account_id
