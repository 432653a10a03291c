"""Stream (TCP) transport: raw payload over a fresh connection."""

import asyncio
import logging

from jobnotify.core.endpoint import ENDPOINT_FORMAT, parse_endpoint, validate_endpoint
from jobnotify.core.errors import TransportError
from jobnotify.ports.transport import ProxyConfig, SendRequest, TransportKind

__all__ = ["TcpTransport"]

logger = logging.getLogger(__name__)


class TcpTransport:
    """Connects, writes the whole payload, flushes and closes.

    The request timeout bounds both the connect and the flush. The
    connection is closed on every exit path.
    """

    kind = TransportKind.TCP
    expected_format = ENDPOINT_FORMAT

    def validate(self, destination: str | None, /) -> None:
        validate_endpoint(destination, self.expected_format)

    async def send(self, request: SendRequest, proxy: ProxyConfig | None = None, /) -> None:
        """Write the payload to the destination endpoint.

        Args:
            request: Delivery request.
            proxy: Ignored, raw streams are never proxied.

        Raises:
            TransportError: On connect, write or timeout failure.
        """
        endpoint = parse_endpoint(request.destination)
        timeout = request.timeout_sec

        try:
            _, writer = await asyncio.wait_for(
                asyncio.open_connection(endpoint.hostname, endpoint.port),
                timeout,
            )
        except (OSError, asyncio.TimeoutError) as e:
            raise TransportError(f"TCP connect to {endpoint} failed: {e!r}") from e

        try:
            writer.write(request.payload)
            await asyncio.wait_for(writer.drain(), timeout)
        except (OSError, asyncio.TimeoutError) as e:
            raise TransportError(f"TCP write to {endpoint} failed: {e!r}") from e
        finally:
            writer.close()
            try:
                await writer.wait_closed()
            except OSError as e:
                logger.debug(f"Error while closing connection to {endpoint}: {e}")

        logger.debug(f"Sent {len(request.payload)} bytes over TCP to {endpoint}")
