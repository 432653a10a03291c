"""Transport dispatcher: validates a destination, then hands off to a strategy."""

import logging
from collections.abc import Mapping

from jobnotify.ports.transport import ProxyConfig, SendRequest, TransportKind, TransportPort

__all__ = ["Dispatcher"]

logger = logging.getLogger(__name__)


class Dispatcher:
    """Routes notifications to the strategy registered for a transport kind.

    Strategies are injected so the core stays independent of the socket and
    HTTP adapters.
    """

    def __init__(self, transports: Mapping[TransportKind, TransportPort]) -> None:
        """Initialize dispatcher.

        Args:
            transports: One strategy per supported transport kind.

        Raises:
            ValueError: If a transport kind has no strategy.
        """
        missing = [kind.value for kind in TransportKind if kind not in transports]
        if missing:
            raise ValueError(f"No strategy registered for: {', '.join(missing)}")
        self._transports = dict(transports)

    def get_transport(self, kind: TransportKind) -> TransportPort:
        return self._transports[TransportKind(kind)]

    def validate(self, kind: TransportKind, destination: str | None) -> None:
        """Check a destination against the transport's address grammar.

        Callable on its own, before a notification is queued.

        Raises:
            ValidationError: If the destination is malformed or empty.
        """
        self.get_transport(kind).validate(destination)

    async def send(
        self,
        kind: TransportKind,
        destination: str,
        payload: bytes,
        timeout_ms: int,
        content_is_json: bool,
        proxy: ProxyConfig | None = None,
    ) -> None:
        """Validate the destination and deliver the payload once.

        No retry: a failed attempt is final.

        Args:
            kind: Transport to use.
            destination: Address string for that transport.
            payload: Bytes to deliver.
            timeout_ms: Per-attempt timeout (TCP and HTTP).
            content_is_json: JSON vs XML content type (HTTP).
            proxy: HTTP proxy, None for direct connections.

        Raises:
            ValidationError: Before any I/O, if the destination is malformed.
            TransportError: On I/O failure.
            ProtocolError: On HTTP-level misuse.
        """
        transport = self.get_transport(kind)
        transport.validate(destination)

        request = SendRequest(
            destination=destination,
            payload=payload,
            timeout_ms=timeout_ms,
            content_is_json=content_is_json,
        )
        logger.debug(f"Dispatching {len(payload)} bytes via {transport.kind.value} to {destination}")
        await transport.send(request, proxy)
