"""Tests for the transport dispatcher."""

from unittest.mock import AsyncMock, Mock

import pytest

from jobnotify.adapters.driven.transports.registry import build_transports
from jobnotify.core.dispatch import Dispatcher
from jobnotify.core.errors import ValidationError
from jobnotify.ports.transport import ProxyConfig, SendRequest, TransportKind

__all__ = []


def make_fake_transports() -> dict[TransportKind, Mock]:
    """Create one mocked strategy per transport kind."""
    transports = {}
    for kind in TransportKind:
        transport = Mock()
        transport.kind = kind
        transport.send = AsyncMock()
        transports[kind] = transport
    return transports


def test_dispatcher_requires_every_transport_kind() -> None:
    """Dispatcher should refuse an incomplete registry."""
    transports = make_fake_transports()
    del transports[TransportKind.UDP]

    with pytest.raises(ValueError, match="UDP"):
        Dispatcher(transports)


def test_get_transport_accepts_kind_names() -> None:
    """Lookup should work with the enum or its value."""
    transports = make_fake_transports()
    dispatcher = Dispatcher(transports)

    assert dispatcher.get_transport(TransportKind.TCP) is transports[TransportKind.TCP]
    assert dispatcher.get_transport("HTTP") is transports[TransportKind.HTTP]


@pytest.mark.asyncio
async def test_send_validates_then_delegates() -> None:
    """send() should validate the destination and pass a SendRequest on."""
    transports = make_fake_transports()
    dispatcher = Dispatcher(transports)
    proxy = ProxyConfig(host="proxy.local", port=3128)

    await dispatcher.send(TransportKind.HTTP, "http://x/y", b"Hello", 1500, False, proxy=proxy)

    http = transports[TransportKind.HTTP]
    http.validate.assert_called_once_with("http://x/y")
    http.send.assert_awaited_once_with(
        SendRequest(destination="http://x/y", payload=b"Hello", timeout_ms=1500, content_is_json=False),
        proxy,
    )
    transports[TransportKind.TCP].send.assert_not_awaited()


@pytest.mark.asyncio
async def test_send_does_no_io_when_validation_fails() -> None:
    """A destination failing validation should never reach the transport."""
    dispatcher = Dispatcher(build_transports())
    tcp = dispatcher.get_transport(TransportKind.TCP)
    tcp.send = AsyncMock()

    with pytest.raises(ValidationError, match="Invalid URL 'no-port-here'"):
        await dispatcher.send(TransportKind.TCP, "no-port-here", b"x", 1000, True)

    tcp.send.assert_not_awaited()


@pytest.mark.parametrize(
    ("kind", "destination", "expected"),
    [
        (TransportKind.UDP, "", "Use hostname:port for endpoint URL"),
        (TransportKind.TCP, "bad", "Invalid URL 'bad'. Use hostname:port for endpoint URL"),
        (TransportKind.HTTP, " ", "Use http://hostname:port/path for endpoint URL"),
        (
            TransportKind.HTTP,
            "not a url",
            "Invalid URL 'not a url'. Use http://hostname:port/path for endpoint URL",
        ),
    ],
)
def test_validate_messages_per_transport(kind: TransportKind, destination: str, expected: str) -> None:
    """Validation messages should name the value and the transport's format."""
    dispatcher = Dispatcher(build_transports())

    with pytest.raises(ValidationError) as exc_info:
        dispatcher.validate(kind, destination)

    assert str(exc_info.value) == expected


def test_sendrequest_redirect_copy_keeps_payload_and_timeout() -> None:
    """with_destination() should only change the destination."""
    request = SendRequest(destination="http://a/", payload=b"p", timeout_ms=10, content_is_json=False)

    hop = request.with_destination("http://b/")

    assert hop == SendRequest(destination="http://b/", payload=b"p", timeout_ms=10, content_is_json=False)
    assert request.destination == "http://a/"


def test_sendrequest_zero_timeout_means_no_timeout() -> None:
    """A non-positive timeout should disable the timeout."""
    assert SendRequest("h:1", b"", 0).timeout_sec is None
    assert SendRequest("h:1", b"", 2500).timeout_sec == 2.5


def test_transport_kind_from_name() -> None:
    """Transport names should parse case-insensitively."""
    assert TransportKind.from_name(" udp ") is TransportKind.UDP

    with pytest.raises(ValueError, match="Unknown transport 'smtp'"):
        TransportKind.from_name("smtp")
