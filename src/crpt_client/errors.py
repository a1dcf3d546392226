"""Exception hierarchy for the document registration client."""


class CrptApiError(Exception):
    """Base class for all client errors."""


class ConfigurationError(CrptApiError, ValueError):
    """Raised when the quota or client configuration is invalid."""


class InterruptedWait(CrptApiError):
    """
    Raised when a caller blocked in the admission gate is cancelled.

    The caller was never admitted, so the admitted count is unchanged.
    """


class EncodingError(CrptApiError):
    """Raised when a document cannot be serialized to a request body."""


class TransportError(CrptApiError):
    """Raised on connection, timeout or protocol failures."""

    def __init__(self, message: str, url: str | None = None) -> None:
        self.url = url
        super().__init__(message)
