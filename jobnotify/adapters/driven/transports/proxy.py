"""HTTP proxy resolution, done once at the application boundary."""

import logging
import os
from collections.abc import Mapping

from yarl import URL

from jobnotify.core.errors import ProtocolError
from jobnotify.ports.transport import ProxyConfig

__all__ = ["resolve_proxy", "parse_proxy_url", "DEFAULT_PROXY_PORT"]

logger = logging.getLogger(__name__)

DEFAULT_PROXY_PORT = 80
PROXY_ENV_VARS = ("http_proxy", "HTTP_PROXY")


def parse_proxy_url(raw: str) -> ProxyConfig:
    """Turn an ``http_proxy``-style URL into a ProxyConfig.

    Args:
        raw: Proxy URL, e.g. ``http://proxy.local:3128``.

    Returns:
        Proxy host and port (port 80 when the URL has none).

    Raises:
        ProtocolError: If the URL is malformed or not http(s).
    """
    try:
        url = URL(raw.strip())
    except (ValueError, TypeError) as e:
        raise ProtocolError(f"Malformed proxy url: {raw}") from e

    if url.scheme not in ("http", "https"):
        raise ProtocolError(f"Not an http(s) url: {raw}")
    if not url.host:
        raise ProtocolError(f"Malformed proxy url: {raw}")

    return ProxyConfig(host=url.host, port=url.explicit_port or DEFAULT_PROXY_PORT)


def resolve_proxy(
    configured: ProxyConfig | None = None,
    environ: Mapping[str, str] | None = None,
) -> ProxyConfig | None:
    """Pick the proxy for HTTP notifications.

    Precedence:
    1. Explicit configuration from the hosting environment.
    2. ``http_proxy`` (or ``HTTP_PROXY``) environment variable.
    3. No proxy (direct connection).

    Args:
        configured: Explicitly configured proxy, if any.
        environ: Environment to read; defaults to ``os.environ``.

    Returns:
        The proxy to use, or None for a direct connection.

    Raises:
        ProtocolError: If the environment variable holds a bad proxy URL.
    """
    if configured is not None:
        logger.debug(f"Using configured proxy {configured.url}")
        return configured

    env = os.environ if environ is None else environ
    for name in PROXY_ENV_VARS:
        raw = env.get(name)
        if raw:
            proxy = parse_proxy_url(raw)
            logger.debug(f"Using proxy {proxy.url} from ${name}")
            return proxy

    return None
