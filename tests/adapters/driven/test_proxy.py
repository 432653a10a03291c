"""Tests for HTTP proxy resolution."""

import pytest

from jobnotify.adapters.driven.transports.proxy import parse_proxy_url, resolve_proxy
from jobnotify.core.errors import ProtocolError
from jobnotify.ports.transport import ProxyConfig

__all__ = []


def test_configured_proxy_wins_over_environment() -> None:
    """Explicit configuration should take precedence over http_proxy."""
    configured = ProxyConfig(host="corp-proxy", port=8080)

    proxy = resolve_proxy(configured, environ={"http_proxy": "http://other:3128"})

    assert proxy is configured


def test_proxy_from_environment() -> None:
    """http_proxy should be used when nothing is configured."""
    proxy = resolve_proxy(None, environ={"http_proxy": "http://proxy.local:3128"})

    assert proxy == ProxyConfig(host="proxy.local", port=3128)
    assert proxy.url == "http://proxy.local:3128"


def test_proxy_from_upper_case_environment() -> None:
    """HTTP_PROXY should be honoured too."""
    proxy = resolve_proxy(None, environ={"HTTP_PROXY": "http://proxy.local:3128"})

    assert proxy == ProxyConfig(host="proxy.local", port=3128)


def test_proxy_port_defaults_to_80() -> None:
    """A proxy URL without a port should use port 80."""
    assert parse_proxy_url("http://proxy.local") == ProxyConfig(host="proxy.local", port=80)
    assert parse_proxy_url("https://proxy.local/") == ProxyConfig(host="proxy.local", port=80)


def test_no_proxy_means_direct_connection() -> None:
    """Without configuration or environment there is no proxy."""
    assert resolve_proxy(None, environ={}) is None
    assert resolve_proxy(None, environ={"http_proxy": ""}) is None


def test_resolve_proxy_reads_process_environment(monkeypatch) -> None:
    """Without an explicit mapping, os.environ is consulted."""
    monkeypatch.delenv("HTTP_PROXY", raising=False)
    monkeypatch.setenv("http_proxy", "http://envproxy:8888")

    assert resolve_proxy() == ProxyConfig(host="envproxy", port=8888)


@pytest.mark.parametrize("raw", ["socks5://proxy.local:1080", "ftp://proxy.local", "proxy.local:3128"])
def test_non_http_proxy_is_protocol_error(raw: str) -> None:
    """Proxy URLs must be http(s)."""
    with pytest.raises(ProtocolError):
        resolve_proxy(None, environ={"http_proxy": raw})
