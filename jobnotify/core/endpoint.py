"""Parsing of ``host:port`` destinations for socket transports."""

import re
from dataclasses import dataclass

from jobnotify.core.errors import EndpointParseError, invalid_destination

__all__ = ["Endpoint", "parse_endpoint", "validate_endpoint", "ENDPOINT_FORMAT", "MAX_PORT"]

MAX_PORT = 65535
ENDPOINT_FORMAT = "hostname:port"

# [scheme://][userinfo@]host:port[/anything]
_AUTHORITY_RE = re.compile(
    r"""
    ^(?:[A-Za-z][A-Za-z0-9+.\-]*://)?
    (?:[^@/]*@)?
    (?P<host>\[[^\]\s]*\]|[^:/\[\]\s]*)
    (?::(?P<port>[^/]*))?
    (?:/.*)?$
    """,
    re.VERBOSE | re.DOTALL,
)


@dataclass(slots=True, frozen=True)
class Endpoint:
    """Resolved hostname/port pair used by the UDP and TCP transports.

    Attributes:
        hostname: Host name or IP literal (IPv6 without brackets).
        port: Port number in [0, 65535].
    """

    hostname: str
    port: int

    def __str__(self) -> str:
        host = f"[{self.hostname}]" if ":" in self.hostname else self.hostname
        return f"{host}:{self.port}"


def parse_endpoint(value: str | None) -> Endpoint:
    """Parse a ``host:port`` string, tolerating a full URL around it.

    Scheme, userinfo and path are accepted and discarded, so
    ``tcp://user@host:9000/x`` parses to ``Endpoint("host", 9000)``.

    Args:
        value: String to parse.

    Returns:
        The parsed endpoint.

    Raises:
        EndpointParseError: If the string is blank, has no port, or the
            host or port are malformed.
    """
    if value is None or not value.strip():
        raise EndpointParseError("Endpoint is empty")

    match = _AUTHORITY_RE.match(value.strip())
    if match is None:
        raise EndpointParseError(f"Cannot parse endpoint '{value}'")

    host = match.group("host")
    port_raw = match.group("port")

    if host.startswith("["):
        host = host[1:-1]
    if not host:
        raise EndpointParseError(f"Missing hostname in '{value}'")
    if port_raw is None:
        raise EndpointParseError(f"Missing port in '{value}'")
    if not port_raw.isascii() or not port_raw.isdigit():
        raise EndpointParseError(f"Port must be a non-negative integer in '{value}'")

    port = int(port_raw)
    if port > MAX_PORT:
        raise EndpointParseError(f"Port {port} out of range in '{value}'")

    return Endpoint(hostname=host, port=port)


def validate_endpoint(destination: str | None, expected_format: str = ENDPOINT_FORMAT) -> None:
    """Check that a destination parses as ``host:port``.

    Raises:
        ValidationError: If parsing fails.
    """
    try:
        parse_endpoint(destination)
    except EndpointParseError as e:
        raise invalid_destination(destination, expected_format) from e
