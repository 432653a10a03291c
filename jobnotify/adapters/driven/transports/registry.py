"""Concrete transport strategies keyed by transport kind."""

from jobnotify.adapters.driven.transports.http import MAX_REDIRECTS, HttpTransport
from jobnotify.adapters.driven.transports.tcp import TcpTransport
from jobnotify.adapters.driven.transports.udp import UdpTransport
from jobnotify.ports.transport import TransportKind, TransportPort

__all__ = ["build_transports"]


def build_transports(max_redirects: int = MAX_REDIRECTS) -> dict[TransportKind, TransportPort]:
    """Create one strategy per transport kind.

    Args:
        max_redirects: Redirect hops the HTTP transport may follow.

    Returns:
        Mapping covering every TransportKind.
    """
    return {
        TransportKind.UDP: UdpTransport(),
        TransportKind.TCP: TcpTransport(),
        TransportKind.HTTP: HttpTransport(max_redirects=max_redirects),
    }
