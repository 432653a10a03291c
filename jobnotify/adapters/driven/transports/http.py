"""HTTP(S) transport: POST with basic auth, proxying and 307 redirect chasing."""

import asyncio
import base64
import logging

import aiohttp
from aiohttp import ClientTimeout
from yarl import URL

from jobnotify.core.errors import (
    ProtocolError,
    TooManyRedirectsError,
    TransportError,
    invalid_destination,
)
from jobnotify.ports.transport import ProxyConfig, SendRequest, TransportKind, content_type

__all__ = ["HttpTransport", "HTTP_URL_FORMAT", "MAX_REDIRECTS"]

logger = logging.getLogger(__name__)

HTTP_URL_FORMAT = "http://hostname:port/path"
MAX_REDIRECTS = 10
TEMPORARY_REDIRECT = 307
FIRST_FAILING_HTTP_CODE = 400
ALLOWED_SCHEMES = ("http", "https")
# Only Content-Type, Authorization and the framing headers go on the wire
SKIP_AUTO_HEADERS = ("Accept", "Accept-Encoding", "User-Agent")

# Low-level failures surfaced as TransportError
TRANSPORT_ERRORS = (
    aiohttp.ClientError,  # Connection refused, DNS failed, server disconnect, ...
    asyncio.TimeoutError,  # Connect or read timeout elapsed
    OSError,  # Socket level error
)


class HttpTransport:
    """POSTs the payload and follows temporary redirects.

    Features:
    - Content-Type chosen from the payload format (JSON or XML, UTF-8).
    - Credentials embedded in the URL sent as ``Authorization: Basic``.
      The userinfo is encoded as written: ``user:pass``, or ``user`` alone
      when the URL carries no password.
    - Optional HTTP proxy.
    - Fixed Content-Length body, no chunked transfer.
    - 307 responses followed in a bounded loop, same payload each hop.

    Every status other than 307 (4xx and 5xx included) ends the call
    successfully; the status is logged, never returned.

    Each hop opens its own connection and gets a fresh timeout budget;
    there is no end-to-end deadline across a redirect chain.
    """

    kind = TransportKind.HTTP
    expected_format = HTTP_URL_FORMAT

    def __init__(self, max_redirects: int = MAX_REDIRECTS) -> None:
        """Initialize HTTP transport.

        Args:
            max_redirects: Number of 307 hops followed before giving up.
        """
        self.max_redirects = max_redirects

    def validate(self, destination: str | None, /) -> None:
        """Check that the destination looks like a URL.

        Destinations containing ``$`` are unresolved placeholders from the
        calling environment and are not validated.

        Raises:
            ValidationError: If the destination is blank or not a URL.
        """
        if destination is not None and "$" in destination:
            return
        if destination is None or not destination.strip():
            raise invalid_destination(destination, self.expected_format)
        try:
            url = URL(destination.strip())
        except (ValueError, TypeError) as e:
            raise invalid_destination(destination, self.expected_format) from e
        if not url.scheme or not url.host:
            raise invalid_destination(destination, self.expected_format)

    async def send(self, request: SendRequest, proxy: ProxyConfig | None = None, /) -> None:
        """POST the payload, chasing 307 redirects.

        Args:
            request: Delivery request.
            proxy: HTTP proxy to go through, None for a direct connection.

        Raises:
            ProtocolError: If a URL is not http(s) or a 307 has no usable Location.
            TooManyRedirectsError: If more than max_redirects hops are needed.
            TransportError: On connection, write or timeout failure.
        """
        current = request
        history: list[str] = []

        for _ in range(self.max_redirects + 1):
            history.append(current.destination)
            location = await self._post_once(current, proxy)
            if location is None:
                return
            logger.info(f"Following temporary redirect from {current.destination} to {location}")
            current = current.with_destination(location)

        raise TooManyRedirectsError(
            f"Gave up on {request.destination} after {self.max_redirects} redirects",
            history,
        )

    async def _post_once(self, req: SendRequest, proxy: ProxyConfig | None) -> str | None:
        """Single HTTP POST (one hop).

        Args:
            req: Delivery request for this hop.
            proxy: Proxy to use, if any.

        Returns:
            Absolute redirect target for a 307 response, None otherwise.
        """
        url = _parse_target(req.destination)
        headers = {"Content-Type": content_type(req.content_is_json)}
        authorization = _authorization_from_url(url)
        if authorization is not None:
            headers["Authorization"] = authorization
            url = url.with_user(None)

        timeout = ClientTimeout(total=None, sock_connect=req.timeout_sec, sock_read=req.timeout_sec)
        connector = aiohttp.TCPConnector(force_close=True)

        logger.debug(
            f"POST {url} ({len(req.payload)} bytes, {headers['Content-Type']}, "
            f"proxy={proxy.url if proxy else '<direct>'})"
        )
        try:
            async with aiohttp.ClientSession(
                connector=connector,
                timeout=timeout,
                skip_auto_headers=SKIP_AUTO_HEADERS,
            ) as session:
                async with session.post(
                    url,
                    data=req.payload,
                    headers=headers,
                    proxy=proxy.url if proxy else None,
                    allow_redirects=False,
                ) as resp:
                    return _redirect_target(url, resp)
        except TRANSPORT_ERRORS as e:
            raise TransportError(f"HTTP POST to {url} failed: {e!r}") from e


def _parse_target(destination: str) -> URL:
    try:
        url = URL(destination)
    except (ValueError, TypeError) as e:
        raise ProtocolError(f"Not an http(s) url: {destination}") from e
    if url.scheme not in ALLOWED_SCHEMES or not url.host:
        raise ProtocolError(f"Not an http(s) url: {destination}")
    return url


def _authorization_from_url(url: URL) -> str | None:
    if url.user is None:
        return None
    userinfo = url.user if url.password is None else f"{url.user}:{url.password}"
    return "Basic " + base64.b64encode(userinfo.encode("utf-8")).decode("ascii")


def _redirect_target(url: URL, resp: aiohttp.ClientResponse) -> str | None:
    if resp.status != TEMPORARY_REDIRECT:
        if resp.status >= FIRST_FAILING_HTTP_CODE:
            logger.warning(f"Notification to {url} answered {resp.status}; not treated as a failure")
        else:
            logger.info(f"Notification to {url} answered {resp.status}")
        return None

    location = resp.headers.get("Location")
    if not location:
        raise ProtocolError(f"{url} answered {TEMPORARY_REDIRECT} without a Location header")
    try:
        return str(url.join(URL(location)))
    except (ValueError, TypeError) as e:
        raise ProtocolError(
            f"{url} answered {TEMPORARY_REDIRECT} with an unusable Location: {location}"
        ) from e
