"""Custom exception hierarchy for billing-cli.

All exceptions that cross layer boundaries must inherit from
:class:`BillingError`.  Raw ``requests`` exceptions must NEVER propagate
beyond the infrastructure layer — they are caught there and re-raised as
:class:`ApiError`.

Hierarchy
---------
BillingError
├── InvalidArgumentsError
├── ConfigError
├── ApiError
│   └── CardFetchError
│       └── DefaultCardRefreshError
└── EnvironmentError
"""

from __future__ import annotations


class BillingError(Exception):
    """Base exception for all billing-cli errors.

    Every user-visible error condition maps to a subclass of this
    exception so that the CLI error boundary can render a clean message
    instead of a stack trace.
    """

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint: str | None = hint
        """Optional actionable guidance shown below the error message."""


# --- Command line ----------------------------------------------------------

class InvalidArgumentsError(BillingError):
    """Raised when a subcommand receives the wrong number of arguments."""


# --- Configuration ---------------------------------------------------------

class ConfigError(BillingError):
    """Raised when config files are unreadable or no token is available."""


# --- Remote API ------------------------------------------------------------

class ApiError(BillingError):
    """Raised when the billing API rejects a request or cannot be reached."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        code: str | None = None,
        hint: str | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.status_code: int | None = status_code
        self.code: str | None = code


class CardFetchError(ApiError):
    """Raised when the card list cannot be fetched.

    Handlers catch this at the call site and report it without going
    through the error boundary.
    """


class DefaultCardRefreshError(CardFetchError):
    """Raised when a default card was removed but the list could not be
    fetched again to learn the new default.

    The account has already changed, so this is reported as a failure.
    """


# --- Environment / tooling -------------------------------------------------

class EnvironmentError(BillingError):
    """Raised when a required runtime dependency is not available."""
