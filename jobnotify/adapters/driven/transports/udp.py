"""Datagram (UDP) transport: one fire-and-forget packet per notification."""

import asyncio
import logging

from jobnotify.core.endpoint import ENDPOINT_FORMAT, parse_endpoint, validate_endpoint
from jobnotify.core.errors import TransportError
from jobnotify.ports.transport import ProxyConfig, SendRequest, TransportKind

__all__ = ["UdpTransport", "MAX_DATAGRAM_SIZE"]

logger = logging.getLogger(__name__)

# Largest UDP payload that fits in a single IPv4 datagram
MAX_DATAGRAM_SIZE = 65_507


class _DatagramSender(asyncio.DatagramProtocol):
    """Collects send errors and signals when the socket is closed."""

    def __init__(self) -> None:
        self.error: Exception | None = None
        self.closed: asyncio.Future[None] = asyncio.get_running_loop().create_future()

    def error_received(self, exc: Exception) -> None:
        self.error = exc

    def connection_lost(self, exc: Exception | None) -> None:
        if not self.closed.done():
            self.closed.set_result(None)


class UdpTransport:
    """Sends the whole payload as a single datagram.

    No acknowledgment, no timeout and no retry. A new socket is opened for
    every call and closed before returning.
    """

    kind = TransportKind.UDP
    expected_format = ENDPOINT_FORMAT

    def validate(self, destination: str | None, /) -> None:
        validate_endpoint(destination, self.expected_format)

    async def send(self, request: SendRequest, proxy: ProxyConfig | None = None, /) -> None:
        """Send one datagram to the destination endpoint.

        Args:
            request: Delivery request; timeout is ignored.
            proxy: Ignored, datagrams are never proxied.

        Raises:
            TransportError: If the payload is too large for one datagram or
                the socket cannot be opened or written.
        """
        endpoint = parse_endpoint(request.destination)
        size = len(request.payload)
        if size > MAX_DATAGRAM_SIZE:
            raise TransportError(
                f"Payload of {size} bytes exceeds the {MAX_DATAGRAM_SIZE} byte datagram limit"
            )

        loop = asyncio.get_running_loop()
        try:
            transport, protocol = await loop.create_datagram_endpoint(
                _DatagramSender,
                remote_addr=(endpoint.hostname, endpoint.port),
            )
        except OSError as e:
            raise TransportError(f"UDP socket to {endpoint} failed: {e}") from e

        try:
            transport.sendto(request.payload)
        finally:
            transport.close()
            await protocol.closed

        if protocol.error is not None:
            raise TransportError(f"UDP send to {endpoint} failed: {protocol.error}") from protocol.error

        logger.debug(f"Sent {size} byte datagram to {endpoint}")
