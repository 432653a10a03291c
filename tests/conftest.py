"""Shared fixtures: recording HTTP listeners and a sample job state."""

import asyncio
from collections.abc import AsyncIterator, Awaitable, Callable
from dataclasses import dataclass

import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer

from jobnotify.ports.job_state import BuildState, JobState, Phase, ScmState

__all__ = []


@dataclass
class RecordedRequest:
    """What a listener observed for one incoming request."""

    method: str
    url: str
    path: str
    body: bytes
    headers: dict[str, str]


StartListener = Callable[..., Awaitable[TestServer]]


@pytest_asyncio.fixture
async def http_listener() -> AsyncIterator[StartListener]:
    """Start recording HTTP servers on demand; all are closed at teardown.

    Yields:
        Coroutine function ``start(path, requests, status=200, location=None, delay=0)``
        that starts a server answering ``path`` and appending every request
        to ``requests``. The answer is held back for ``delay`` seconds.
    """
    servers: list[TestServer] = []

    async def start(
        path: str,
        requests: list[RecordedRequest],
        status: int = 200,
        location: str | None = None,
        delay: float = 0,
    ) -> TestServer:
        async def handler(request: web.Request) -> web.Response:
            requests.append(
                RecordedRequest(
                    method=request.method,
                    url=str(request.url),
                    path=request.path,
                    body=await request.read(),
                    headers=dict(request.headers),
                )
            )
            if delay:
                await asyncio.sleep(delay)
            headers = {"Location": location} if location is not None else {}
            return web.Response(status=status, headers=headers)

        app = web.Application()
        app.router.add_route("*", path, handler)
        server = TestServer(app, host="127.0.0.1")
        await server.start_server()
        servers.append(server)
        return server

    yield start

    for server in servers:
        await server.close()


@pytest.fixture
def job_state() -> JobState:
    """Completed build of a sample job."""
    return JobState(
        name="backend",
        display_name="Backend Ünit",
        url="job/backend/",
        build=BuildState(
            number=42,
            queue_id=7,
            phase=Phase.COMPLETED,
            status="SUCCESS",
            timestamp=1_700_000_000_000,
            duration=1234,
            url="job/backend/42/",
            full_url="http://ci.example/job/backend/42/",
            parameters={"BRANCH": "main"},
            artifacts={"app.jar": {"archive": "http://ci.example/job/backend/42/artifact/app.jar"}},
            scm=ScmState(branch="main", commit="abc123", culprits=["fred"]),
        ),
    )
