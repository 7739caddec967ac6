"""Error taxonomy shared by the core and platform layers."""

from __future__ import annotations

from enum import Enum


class AuthorizationCategory(str, Enum):
    """Machine-checkable reason attached to an ``AuthorizationError``."""

    ACCESS_DENIED = "access_denied"
    INVALID_CREDENTIAL = "invalid_credential"
    NOT_CONFIGURED = "not_configured"
    UNKNOWN = "unknown"


class ReplayError(Exception):
    """Base exception for recoverable replay failures.

    Carries a human-readable ``message`` and, where available, a
    machine-checkable ``category``.
    """

    default_category = "error"

    def __init__(self, message: str, *, category: str | None = None):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category

    def to_dict(self) -> dict[str, str]:
        return {"message": self.message, "category": self.category}


class ConfigurationError(ReplayError):
    """Raised when the SDK cannot be configured with the developer token."""

    default_category = "configuration"


class AuthorizationError(ReplayError):
    """Raised when user consent could not be obtained."""

    def __init__(
        self,
        message: str,
        *,
        category: AuthorizationCategory = AuthorizationCategory.UNKNOWN,
        sdk_code: str | None = None,
    ):
        super().__init__(
            f"Authorization failed ({category.value}): {message}",
            category=category.value,
        )
        self.reason = message
        self.authorization_category = category
        self.sdk_code = sdk_code


class FetchError(ReplayError):
    """Raised for non-success HTTP responses or transport failures."""

    default_category = "fetch"

    def __init__(
        self,
        detail: str,
        *,
        status_code: int | None = None,
        retry_after: float | None = None,
    ):
        if status_code is None:
            message = f"Apple Music request failed: {detail}"
        else:
            message = f"Apple Music API error {status_code}: {detail}"
        super().__init__(message)
        self.detail = detail
        self.status_code = status_code
        self.retry_after = retry_after


class AggregationCancelledError(FetchError):
    """Raised when the caller cancels an in-flight aggregation."""

    default_category = "cancelled"

    def __init__(self, detail: str = "aggregation cancelled by caller", *, gathered: int = 0):
        super().__init__(detail)
        self.gathered = gathered


class SessionStateError(RuntimeError):
    """Raised on a session transition that breaks the caller contract.

    This is a programming error, not a runtime condition to recover from.
    """
