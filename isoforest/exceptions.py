"""Errors raised by the isolation forest."""


class IsolationForestError(Exception):
    """Base class for every error raised by this package."""


class InvalidConfiguration(IsolationForestError, ValueError):
    """The forest was configured with values it cannot be built from."""


class InvalidState(IsolationForestError, RuntimeError):
    """A query was issued against a forest that has not been built yet."""
