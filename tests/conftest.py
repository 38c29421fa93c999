import asyncio
import dataclasses
import json
import logging
import re
from typing import Any, Awaitable, Callable, Dict, List, Tuple

import aiohttp.test_utils
import aiohttp.web
import pytest

from kubetype.clients.auth import APIContext
from kubetype.structs import objects, resources
from kubetype.structs.configuration import ClientSettings
from kubetype.structs.credentials import ConnectionInfo
from kubetype.structs.references import Resource

Handler = Callable[[aiohttp.web.Request], Awaitable[aiohttp.web.StreamResponse]]


@pytest.fixture(autouse=True)
def _caplog_all_levels(caplog):
    caplog.set_level(0)


@pytest.fixture()
def logger():
    return logging.getLogger('kubetype.tests')


@pytest.fixture()
def settings():
    return ClientSettings()


@pytest.fixture(params=[True, False], ids=['namespaced', 'cluster'])
def resource(request):
    """ The resource used in the tests. Served by the fake API, so it does not matter. """
    return Resource('kopf.dev', 'v1', 'kopfexamples', 'KopfExample',
                    objects.SpecifiedObject, namespaced=request.param)


@pytest.fixture()
def namespace(resource):
    return 'ns1' if resource.namespaced else None


@pytest.fixture()
def pods():
    return resources.PODS


#
# A fake API server: real HTTP, but with the responses prepared by the tests.
#

@dataclasses.dataclass(frozen=True)
class FakeRequest:
    method: str
    path: str
    query: Dict[str, str]
    headers: Dict[str, str]
    data: Any


class FakeAPI:
    """
    A fake API server with the responses registered per method & path.

    All requests are recorded, including the unexpected ones,
    which are responded with HTTP 404 and a ``Status`` payload.
    """

    def __init__(self) -> None:
        super().__init__()
        self.url = ''
        self.requests: List[FakeRequest] = []
        self.handlers: Dict[Tuple[str, str], Handler] = {}
        self.closing = asyncio.Event()

    def add(self, method: str, path: str, handler: Handler) -> None:
        self.handlers[(method.upper(), path.split('?')[0])] = handler

    def add_json(self, method: str, path: str, data: Any, *, status: int = 200) -> None:
        async def handler(request: aiohttp.web.Request) -> aiohttp.web.StreamResponse:
            return aiohttp.web.json_response(data, status=status)
        self.add(method, path, handler)

    def add_text(self, method: str, path: str, text: str, *, status: int = 200) -> None:
        async def handler(request: aiohttp.web.Request) -> aiohttp.web.StreamResponse:
            return aiohttp.web.Response(text=text, status=status)
        self.add(method, path, handler)

    def add_stream(self, path: str, events: List[Any], *, hang: bool = False) -> None:
        """
        Serve the events as JSON lines, one per line (or raw bytes as they are).

        If hanging, the stream is not closed server-side after the events:
        only the client can close it (or the fixture at the end of the test).
        """
        async def handler(request: aiohttp.web.Request) -> aiohttp.web.StreamResponse:
            response = aiohttp.web.StreamResponse()
            response.content_type = 'application/json'
            await response.prepare(request)
            for event in events:
                line = event if isinstance(event, bytes) else json.dumps(event).encode('utf-8')
                await response.write(line + b'\n')
            while hang and not self.closing.is_set():
                transport = request.transport
                if transport is None or transport.is_closing():
                    break
                await asyncio.sleep(0.01)
            return response
        self.add('GET', path, handler)

    async def handle(self, request: aiohttp.web.Request) -> aiohttp.web.StreamResponse:
        raw = await request.read()
        self.requests.append(FakeRequest(
            method=request.method.upper(),
            path=request.path,
            query=dict(request.query),
            headers=dict(request.headers),
            data=json.loads(raw) if raw else None,
        ))
        handler = self.handlers.get((request.method.upper(), request.path))
        if handler is None:
            return aiohttp.web.json_response({
                'kind': 'Status', 'apiVersion': 'v1', 'status': 'Failure',
                'message': f'{request.path} not found', 'reason': 'NotFound', 'code': 404,
            }, status=404)
        return await handler(request)


@pytest.fixture()
async def fake_api():
    api = FakeAPI()
    app = aiohttp.web.Application()
    app.router.add_route('*', '/{tail:.*}', api.handle)
    server = aiohttp.test_utils.TestServer(app)
    await server.start_server()
    api.url = str(server.make_url('/'))
    try:
        yield api
    finally:
        api.closing.set()
        await server.close()


@pytest.fixture()
async def context(fake_api):
    context = APIContext(ConnectionInfo(server=fake_api.url))
    try:
        yield context
    finally:
        await context.close()


#
# Helpers for the logging checks.
#

@pytest.fixture()
def assert_logs(caplog):
    """
    A function to assert the logs are present (by pattern).

    The listed message patterns MUST be present, in the order specified.
    Some other log messages can also be present, but they are ignored.
    """
    def assert_logs_fn(patterns, prohibited=[], strict=False):
        __traceback_hide__ = True
        remaining_patterns = list(patterns)
        for message in caplog.messages:
            # The expected pattern is at position 0.
            # Looking-ahead: if one of the following patterns matches, while the
            # 0th does not, then the log message is missing, and we fail the test.
            for idx, pattern in enumerate(remaining_patterns):
                m = re.search(pattern, message)
                if m:
                    if idx == 0:
                        remaining_patterns[:1] = []
                        break  # out of `remaining_patterns` cycle
                    else:
                        skipped_patterns = remaining_patterns[:idx]
                        raise AssertionError(f"Few patterns were skipped: {skipped_patterns!r}")
                elif strict:
                    raise AssertionError(f"Unexpected log message: {message!r}")

            # Check that the prohibited patterns do not appear in any message.
            for pattern in prohibited:
                m = re.search(pattern, message)
                if m:
                    raise AssertionError(f"Prohibited log pattern found: {message!r} ~ {pattern!r}")

        # If all patterns have been matched in order, we are done.
        # if some are left, but the messages are over, then we fail.
        if remaining_patterns:
            raise AssertionError(f"Few patterns were missed: {remaining_patterns!r}")

    return assert_logs_fn
