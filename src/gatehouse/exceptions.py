"""Exception hierarchy for gatehouse.

All exceptions inherit from :class:`GatehouseError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`gatehouse.exit_codes`.
The CLI entry point in :func:`gatehouse.app.main` catches ``GatehouseError``
and exits with the matching code.

Strategies never raise the auth errors below to the host: the OAuth redirect
strategy catches them and reports a :class:`~gatehouse.results.Failure`
instead. Collaborators (the OAuth client, user loaders) raise them, and the
strategy uses them to carry the failure message.

Subclass hierarchy::

    GatehouseError (exit 1)
    +-- ConfigError                 (exit 2)
    +-- AuthError                   (exit 3)
    |   +-- StateMismatchError      (exit 3)
    |   +-- BadVerificationCodeError (exit 3)
    +-- ProviderError               (exit 6)
    +-- StrategyError               (exit 10)
"""

from gatehouse.exit_codes import (
    EXIT_AUTH_FAILURE,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_PROVIDER_ERROR,
    EXIT_STRATEGY_ERROR,
)


class GatehouseError(Exception):
    """Base exception for all gatehouse errors.

    Args:
        message: Human-readable error description.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        self.message = message
        if exit_code is not None:
            self.exit_code = exit_code


class ConfigError(GatehouseError):
    """Raised for configuration problems (unreadable file, invalid values, bad credential sources)."""

    exit_code = EXIT_INVALID_USAGE


class AuthError(GatehouseError):
    """Raised when an authentication attempt is rejected."""

    exit_code = EXIT_AUTH_FAILURE


class StateMismatchError(AuthError):
    """The ``state`` returned by the provider does not match the one stored in the session."""

    def __init__(self, message: str = "State mismatch"):
        super().__init__(message)


class BadVerificationCodeError(AuthError):
    """The provider rejected the authorization code as invalid or expired."""


class ProviderError(GatehouseError):
    """Raised on transport failures or unexpected responses from the identity provider."""

    exit_code = EXIT_PROVIDER_ERROR


class StrategyError(GatehouseError):
    """Raised when a strategy is unknown or cannot be loaded."""

    exit_code = EXIT_STRATEGY_ERROR
