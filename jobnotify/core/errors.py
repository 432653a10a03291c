"""Error taxonomy for notification delivery."""

__all__ = [
    "NotificationError",
    "ValidationError",
    "EndpointParseError",
    "TransportError",
    "ProtocolError",
    "TooManyRedirectsError",
    "SerializationError",
    "invalid_destination",
]


class NotificationError(Exception):
    """Base class for every error raised while formatting or sending."""


class ValidationError(NotificationError, ValueError):
    """Destination does not match the transport's address grammar.

    Raised before any I/O is attempted.
    """


class EndpointParseError(NotificationError, ValueError):
    """String could not be parsed into a hostname/port pair."""


class TransportError(NotificationError):
    """I/O failure while connecting, writing or reading.

    The underlying exception is chained unmodified as ``__cause__``. The
    message names the operation and destination, followed by the
    underlying error.
    """


class ProtocolError(NotificationError):
    """Request cannot be issued under the HTTP rules (bad scheme, bad proxy, ...)."""


class TooManyRedirectsError(ProtocolError):
    """Redirect chain exceeded the configured number of hops.

    Attributes:
        history: URLs visited, in order, before giving up.
    """

    def __init__(self, message: str, history: list[str]) -> None:
        super().__init__(message)
        self.history = history


class SerializationError(NotificationError):
    """Job state could not be encoded into the requested format."""


def invalid_destination(destination: str | None, expected_format: str) -> ValidationError:
    """Build the user-facing error for a destination that failed validation.

    Args:
        destination: Value supplied by the user (may be None or blank).
        expected_format: Address shape the transport expects.

    Returns:
        Error naming the offending value, when there is one.
    """
    prefix = "" if destination is None or not destination.strip() else f"Invalid URL '{destination}'. "
    return ValidationError(f"{prefix}Use {expected_format} for endpoint URL")
