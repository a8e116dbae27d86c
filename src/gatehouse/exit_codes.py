"""Numeric process exit codes for the ``gatehouse`` command line.

Each constant maps to an error category and is referenced by the
corresponding :class:`~gatehouse.exceptions.GatehouseError` subclass, so
shell wrappers can tell failure classes apart without parsing stderr.
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or an invalid configuration."""

EXIT_AUTH_FAILURE = 3
"""Authentication failed (state mismatch, rejected authorization code)."""

EXIT_PROVIDER_ERROR = 6
"""The identity provider could not be reached or answered with an error."""

EXIT_STRATEGY_ERROR = 10
"""A strategy could not be found or failed to load."""
