"""Transport port definition (interface and DTOs)."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Protocol

__all__ = ["TransportKind", "SendRequest", "ProxyConfig", "TransportPort", "content_type"]


def content_type(content_is_json: bool) -> str:
    """Return the HTTP Content-Type header value for a payload flavour."""
    return f"application/{'json' if content_is_json else 'xml'};charset=UTF-8"


class TransportKind(str, Enum):
    """Closed set of wire transports a notification can travel on."""

    UDP = "UDP"
    TCP = "TCP"
    HTTP = "HTTP"

    @classmethod
    def from_name(cls, name: str) -> TransportKind:
        """Parse a transport name case-insensitively.

        Raises:
            ValueError: If the name is not a known transport.
        """
        try:
            return cls(name.strip().upper())
        except ValueError as e:
            allowed = ", ".join(k.value for k in cls)
            raise ValueError(f"Unknown transport '{name}' (expected one of: {allowed})") from e


@dataclass(slots=True, frozen=True)
class SendRequest:
    """Single delivery attempt handed to exactly one transport.

    Attributes:
        destination: Address string, interpreted by the transport.
        payload: Raw bytes to deliver.
        timeout_ms: Connect/read timeout in milliseconds (TCP and HTTP only).
        content_is_json: Selects the HTTP Content-Type (JSON vs XML).
    """

    destination: str
    payload: bytes
    timeout_ms: int
    content_is_json: bool = True

    @property
    def timeout_sec(self) -> float | None:
        """Timeout in seconds; ``None`` (no timeout) when timeout_ms is 0 or less."""
        if self.timeout_ms <= 0:
            return None
        return self.timeout_ms / 1_000.0

    def with_destination(self, destination: str) -> SendRequest:
        """Return a copy aimed at another destination (used for redirect hops)."""
        return replace(self, destination=destination)


@dataclass(slots=True, frozen=True)
class ProxyConfig:
    """HTTP proxy to route requests through.

    ``None`` in place of a ProxyConfig means a direct connection.
    """

    host: str
    port: int = 80

    @property
    def url(self) -> str:
        return f"http://{self.host}:{self.port}"


class TransportPort(Protocol):
    """Capabilities shared by every transport strategy."""

    kind: TransportKind
    expected_format: str

    def validate(self, destination: str | None, /) -> None:
        """Check the destination grammar without doing any I/O.

        Raises:
            ValidationError: If the destination is malformed or empty.
        """
        ...

    async def send(self, request: SendRequest, proxy: ProxyConfig | None = None, /) -> None:
        """Deliver the payload once.

        Raises:
            TransportError: On any I/O failure.
            ProtocolError: On HTTP-level misuse (HTTP transport only).
        """
        ...
