"""
The low-level HTTP executor of the API calls: regular and streaming.

This is the only module that touches the HTTP client library directly.
Its exceptions never escape from here: they are converted to our own
:mod:`kubetype.clients.errors` and chained to the original ones.

There are no retries here: every call is one HTTP roundtrip, and the errors
are escalated to the caller immediately.
"""
import asyncio
import enum
import json
import logging
from typing import TYPE_CHECKING, Any, AsyncIterator, Collection, Mapping, Optional, Union

import aiohttp

from kubetype.clients import auth, errors
from kubetype.helpers import typedefs
from kubetype.structs import configuration

logger = logging.getLogger(__name__)


# An end-of-stream marker sent from the transport to the relay, and from the relay to the caller.
# See: https://www.python.org/dev/peps/pep-0484/#support-for-singleton-types-in-unions
class EOS(enum.Enum):
    token = enum.auto()


# What the transport puts into the frames queue: a JSON line, a failure, or the end.
Frame = Union[bytes, errors.APIConnectionError, EOS]

if TYPE_CHECKING:
    FramesQueue = asyncio.Queue[Frame]
else:
    FramesQueue = asyncio.Queue


@auth.authenticated
async def request(
        method: str,
        url: str,  # relative to the server/api root.
        *,
        settings: configuration.ClientSettings,
        payload: Optional[object] = None,
        headers: Optional[Mapping[str, str]] = None,
        timeout: Optional[aiohttp.ClientTimeout] = None,
        expected: Optional[Collection[int]] = None,
        context: Optional[auth.APIContext] = None,  # injected by the decorator
        logger: typedefs.Logger = logger,
) -> aiohttp.ClientResponse:
    if context is None:  # for type-checking!
        raise RuntimeError("API instance is not injected by the decorator.")

    if '://' not in url:
        url = context.server.rstrip('/') + '/' + url.lstrip('/')

    if timeout is None:
        timeout = aiohttp.ClientTimeout(
            total=settings.networking.request_timeout,
            sock_connect=settings.networking.connect_timeout,
        )

    what = f"{method.upper()} {url}"
    logger.debug(f"Requesting: {what}")
    try:
        response = await context.session.request(
            method=method,
            url=url,
            json=payload,
            headers=headers,
            timeout=timeout,
        )
    except (aiohttp.ClientConnectionError, asyncio.TimeoutError) as e:
        logger.debug(f"Request failed: {what} -> {e!r}")
        raise errors.APIConnectionError(f"Cannot connect to the API: {e!r}") from e

    await errors.check_response(response, expected=expected)  # but do not parse it!
    return response


async def execute(
        method: str,
        url: str,  # relative to the server/api root.
        *,
        settings: configuration.ClientSettings,
        payload: Optional[object] = None,
        expected: Optional[Collection[int]] = None,
        headers: Optional[Mapping[str, str]] = None,
        timeout: Optional[aiohttp.ClientTimeout] = None,
        context: Optional[auth.APIContext] = None,
        logger: typedefs.Logger = logger,
) -> Any:
    """
    Perform one regular request and return the JSON-decoded response body.

    The bodies of the successful responses are decoded even if they are not
    declared as JSON, since some proxies can break the content types.
    An empty body is returned as ``None``.
    """
    response = await request(
        method=method,
        url=url,
        payload=payload,
        expected=expected,
        headers=headers,
        timeout=timeout,
        settings=settings,
        context=context,
        logger=logger,
    )
    async with response:
        try:
            data = await response.read()
        except (aiohttp.ClientConnectionError, aiohttp.ClientPayloadError, asyncio.TimeoutError) as e:
            raise errors.APIConnectionError(f"Cannot read the response: {e!r}") from e

    if not data.strip():
        return None
    try:
        return json.loads(data.decode('utf-8'))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise errors.DecodeError(f"Response is not a valid JSON document: {e}", shape='JSON') from e


async def stream_into(
        url: str,  # relative to the server/api root.
        *,
        frames: FramesQueue,
        settings: configuration.ClientSettings,
        stopper: Optional[typedefs.Future] = None,
        context: Optional[auth.APIContext] = None,
        logger: typedefs.Logger = logger,
) -> typedefs.Task:
    """
    Open a streaming request and pump its JSON lines into a queue.

    The connection is established before returning, so that the connection
    and HTTP errors are raised here, directly to the caller. The reading
    is then done in a background task ("the pump"), which is returned.

    The pump puts ``EOS.token`` into the queue when the server closes the stream,
    or when the stopper is set (the response is then closed client-side).
    If the connection breaks mid-stream, or the reading fails for any other
    reason, an `APIConnectionError` is put instead of ``EOS.token`` (chained
    to the original error). If the pump is cancelled, nothing more is put at all.
    """
    connect_timeout = (
        settings.watching.connect_timeout if settings.watching.connect_timeout is not None else
        settings.networking.connect_timeout if settings.networking.connect_timeout is not None else
        settings.networking.request_timeout
    )
    response = await request(
        method='get',
        url=url,
        timeout=aiohttp.ClientTimeout(
            total=settings.watching.client_timeout,
            sock_connect=connect_timeout,
        ),
        expected=[200],
        settings=settings,
        context=context,
        logger=logger,
    )
    return asyncio.create_task(
        _pump(response=response, frames=frames, stopper=stopper, logger=logger),
        name=f"streaming of {url}",
    )


async def _pump(
        *,
        response: aiohttp.ClientResponse,
        frames: FramesQueue,
        stopper: Optional[typedefs.Future],
        logger: typedefs.Logger,
) -> None:
    end: Frame = EOS.token
    response_close_callback = lambda _: response.close()  # to remove the positional arg.
    if stopper is not None:
        stopper.add_done_callback(response_close_callback)
    try:
        async with response:
            async for line in iter_jsonlines(response.content):
                await frames.put(line)
    except (aiohttp.ClientConnectionError, aiohttp.ClientPayloadError, asyncio.TimeoutError) as e:
        if stopper is not None and stopper.done():
            pass  # closed by the consumer: a regular end of the stream.
        else:
            logger.debug(f"Streaming is broken: {e!r}")
            failure = errors.APIConnectionError(f"The stream is broken: {e!r}")
            failure.__cause__ = e
            end = failure
    except Exception as e:
        # The relay waits for the frames until the end: it must get one in any case.
        logger.error(f"Streaming has failed unexpectedly: {e!r}")
        failure = errors.APIConnectionError(f"The stream has failed: {e!r}")
        failure.__cause__ = e
        end = failure
    finally:
        if stopper is not None:
            stopper.remove_done_callback(response_close_callback)

    # Not reached if cancelled: nobody is waiting for the frames anymore.
    await frames.put(end)


async def iter_jsonlines(
        content: aiohttp.StreamReader,
        chunk_size: int = 1024 * 1024,
) -> AsyncIterator[bytes]:
    """
    Iterate line by line over the response's content.

    Usage::

        async for line in iter_jsonlines(response.content):
            pass

    This is an equivalent of::

        async for line in response.content:
            pass

    Except that the aiohttp's line iteration fails if the accumulated buffer
    length is above 2**17 bytes, i.e. 128 KB (`aiohttp.streams.DEFAULT_LIMIT`
    for the buffer's low-watermark, multiplied by 2 for the high-watermark).
    Secrets, config maps and other objects can be much longer, up to MBs.

    The empty lines (e.g. keep-alive newlines) are skipped.
    """

    # Minimize the memory footprint by keeping at most 2 copies of a yielded line in memory
    # (in the buffer and as a yielded value), and at most 1 copy of other lines (in the buffer).
    buffer = b''
    async for data in content.iter_chunked(chunk_size):
        buffer += data
        del data

        start = 0
        index = buffer.find(b'\n', start)
        while index >= 0:
            line = buffer[start:index].rstrip(b'\r')
            if line:
                yield line
            del line
            start = index + 1
            index = buffer.find(b'\n', start)

        if start > 0:
            buffer = buffer[start:]

    if buffer.strip():
        yield buffer
