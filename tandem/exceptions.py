"""Exception hierarchy shared across Tandem components."""


class TandemError(Exception):
    """Base class for errors raised by Tandem itself."""


class ConfigurationError(TandemError, ValueError):
    """Unknown phase name, malformed chain, or invalid settings.

    Fatal: raised immediately and never retried.
    """


class PersistenceError(TandemError):
    """A document could not be written, read or listed."""

    def __init__(self, message: str, path: str = ""):
        super().__init__(message)
        self.path = path


class MessageValidationError(TandemError, ValueError):
    """A coordination message request is missing a required field."""
