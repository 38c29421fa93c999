"""
Watching the resources and relaying the typed watch-events to the callers.

The transport (:func:`kubetype.clients.api.stream_into`) pumps the raw JSON
lines of the watch-stream into an internal queue. A relay task peels them
into the raw events (:mod:`kubetype.clients.framing`), wraps them into
the typed events, and puts them into the caller's queue in the same order.

The events are decoded lazily: only when (and if) the consumer asks for it.
This keeps the relay fast and simple, and also keeps the decoding failures
bound to the events that caused them: a broken event does not break the stream
and does not affect the events after it.

The end of the stream is signalled with ``EOS.token`` in the caller's queue.
There is no other way to detect the end: no special event types.

The ``ERROR`` events do not stop the relay: the server decides whether
to continue the stream or to close it (and usually, it closes it).
"""
import asyncio
import contextlib
import logging
from typing import TYPE_CHECKING, Any, AsyncIterator, Generic, Optional, TypeVar, Union

import pydantic

from kubetype.clients import api, auth, errors, framing
from kubetype.clients.api import EOS
from kubetype.helpers import typedefs
from kubetype.structs import configuration, objects, references, selectors

logger = logging.getLogger(__name__)

_ObjectT = TypeVar('_ObjectT', bound=objects.Object)

# What the relay puts into the caller's queue: the typed events, then the end-of-stream marker.
if TYPE_CHECKING:
    WatchQueue = asyncio.Queue[Union["WatchEvent[Any]", EOS]]
else:
    WatchQueue = asyncio.Queue

_UNDECODED = object()


class WatchEvent(Generic[_ObjectT]):
    """
    A typed watch-event: the event type and the lazily decoded object.

    The decoding is attempted only once. Its result is remembered, be that
    an object or an error: the repeated calls return the same object
    or raise the same exception instance.
    """

    def __init__(
            self,
            *,
            resource: references.Resource[_ObjectT],
            frame: Optional[framing.RawFrame] = None,
            failure: Optional[errors.MalformedFrame] = None,
    ) -> None:
        super().__init__()
        if (frame is None) == (failure is None):
            raise errors.InvalidArgumentError("Either a frame or a failure must be provided.")
        self._resource = resource
        self._frame = frame
        self._result: object = _UNDECODED if failure is None else failure

    def __repr__(self) -> str:
        return f'<{self.__class__.__name__} {self.type} {self._resource!r}>'

    @property
    def resource(self) -> references.Resource[_ObjectT]:
        return self._resource

    @property
    def type(self) -> Optional[str]:
        """
        The declared event type: ``ADDED``, ``MODIFIED``, ``DELETED``, ``ERROR``.

        It is ``None`` only for the malformed frames with the type unreadable.
        """
        if self._frame is not None:
            return self._frame.type
        elif isinstance(self._result, errors.MalformedFrame):
            return self._result.type
        else:
            return None

    def decode(self) -> _ObjectT:
        """
        Decode the event's object into the resource's typed object.

        For the ``ERROR`` events, raise the error reported by the server instead.
        """
        if self._result is _UNDECODED:
            try:
                with errors.attributing('watch', self._resource.kind):
                    self._result = self._decode()
            except errors.ClientError as e:
                self._result = e
        if isinstance(self._result, BaseException):
            # The same instance is re-raised each time: do not let its traceback grow.
            raise self._result.with_traceback(None)
        return self._result  # type: ignore[return-value]

    def _decode(self) -> _ObjectT:
        assert self._frame is not None  # it is either a frame or a failure.
        if self._frame.type == 'ERROR':
            try:
                status = objects.Status.model_validate(self._frame.payload)
            except pydantic.ValidationError as e:
                raise errors.DecodeError("failed to decode Status", shape='Status') from e
            raise errors.make_error(status.to_raw() or None, status=status.code or 500)

        return self._resource.decode(self._frame.payload)


@auth.authenticated
async def watch_objs(
        *,
        resource: references.Resource[_ObjectT],
        namespace: references.Namespace = None,
        options: Optional[selectors.WatchOptions] = None,
        events: Optional[WatchQueue],
        stopper: Optional[typedefs.Future] = None,
        settings: configuration.ClientSettings,
        context: Optional[auth.APIContext] = None,  # injected by the decorator
        logger: typedefs.Logger = logger,
) -> typedefs.Task:
    """
    Start watching the objects of a resource and relaying them to the queue.

    The connection is established before returning: the connection & HTTP
    errors are raised here directly, and then, nothing is put into the queue.
    Once connected, the relay task is started and returned. It puts
    the typed events into the queue as they arrive, and ``EOS.token``
    when the stream is over.

    If the connection breaks in the middle of the stream, the relay puts
    ``EOS.token`` and fails with :class:`errors.APIConnectionError`,
    which can be seen when the returned task is awaited.

    To stop watching, either set the stopper future (the stream is closed
    and ``EOS.token`` is put as usually), or cancel the returned task
    (nothing more is put into the queue).
    """
    with errors.attributing('watch', resource.kind):
        if events is None:
            raise errors.InvalidArgumentError("The events queue is required for watching.")

        options = options if options is not None else selectors.WatchOptions()
        params = selectors.watch_params(options)
        if options.timeout_seconds is None and settings.watching.server_timeout is not None:
            params['timeoutSeconds'] = str(int(settings.watching.server_timeout))
        url = resource.get_url(namespace=namespace, params=params)

        where = f'in {namespace!r}' if namespace else 'cluster-wide'
        logger.debug(f"Starting the watch-stream for {resource!r} {where}.")

        # The internal stopper closes the response when either the caller's stopper is set,
        # or when the relay exits for any reason, including the cancellation.
        closer: typedefs.Future = asyncio.get_running_loop().create_future()
        closer_callback = lambda _: closer.done() or closer.set_result(None)
        if stopper is not None:
            stopper.add_done_callback(closer_callback)

        frames: api.FramesQueue = asyncio.Queue(maxsize=settings.watching.frames_limit)
        try:
            pump = await api.stream_into(
                url,
                frames=frames,
                stopper=closer,
                settings=settings,
                context=context,
                logger=logger,
            )
        except BaseException:
            if stopper is not None:
                stopper.remove_done_callback(closer_callback)
            closer.cancel()
            raise

    def stop_transport(_: Any = None) -> None:
        if stopper is not None:
            stopper.remove_done_callback(closer_callback)
        if not closer.done():
            closer.set_result(None)
        pump.cancel()

    async def relay() -> None:
        try:
            with errors.attributing('watch', resource.kind):
                await _relay(resource=resource, frames=frames, events=events)
        finally:
            stop_transport()
            with contextlib.suppress(asyncio.CancelledError):
                await pump
            logger.debug(f"Stopped the watch-stream for {resource!r} {where}.")

    # A task cancelled before its first step never runs the relay's cleanup: stop it anyway.
    task = asyncio.create_task(relay(), name=f"watch-relay for {resource!r} {where}")
    task.add_done_callback(stop_transport)
    return task


async def _relay(
        *,
        resource: references.Resource[_ObjectT],
        frames: api.FramesQueue,
        events: WatchQueue,
) -> None:
    while True:
        frame = await frames.get()
        if frame is EOS.token:
            await events.put(EOS.token)
            break
        elif isinstance(frame, errors.APIConnectionError):
            await events.put(EOS.token)
            raise frame
        else:
            await events.put(_make_event(resource, frame))


def _make_event(resource: references.Resource[_ObjectT], line: bytes) -> WatchEvent[_ObjectT]:
    try:
        with errors.attributing('watch', resource.kind):
            frame = framing.decode_frame(line)
    except errors.MalformedFrame as e:
        logger.debug(f"Relaying a malformed frame of {resource!r}: {e}")
        return WatchEvent(resource=resource, failure=e)
    else:
        return WatchEvent(resource=resource, frame=frame)


async def iter_events(events: WatchQueue) -> AsyncIterator["WatchEvent[Any]"]:
    """
    Iterate over the events of a queue until the end of the stream.

    Usage::

        queue = asyncio.Queue()
        task = await watch_objs(resource=resources.PODS, events=queue, settings=settings)
        async for event in iter_events(queue):
            print(event.type, event.decode().name)
    """
    while True:
        event = await events.get()
        if event is EOS.token:
            break
        yield event


async def streaming_watch(
        *,
        resource: references.Resource[_ObjectT],
        namespace: references.Namespace = None,
        options: Optional[selectors.WatchOptions] = None,
        settings: configuration.ClientSettings,
        context: Optional[auth.APIContext] = None,
        logger: typedefs.Logger = logger,
) -> AsyncIterator[WatchEvent[_ObjectT]]:
    """
    Stream the typed events of a resource as an async generator.

    The queue and the stopper are owned by the generator. When the consumer
    leaves the generator early (by ``break`` or an error), the stream is closed,
    and the relay task is cancelled and awaited. If the connection breaks
    mid-stream, :class:`errors.APIConnectionError` is raised from the generator.
    """
    events: WatchQueue = asyncio.Queue()
    stopper: typedefs.Future = asyncio.get_running_loop().create_future()
    relay = await watch_objs(
        resource=resource,
        namespace=namespace,
        options=options,
        events=events,
        stopper=stopper,
        settings=settings,
        context=context,
        logger=logger,
    )
    exhausted = False
    try:
        async for event in iter_events(events):
            yield event
        exhausted = True
    finally:
        stopper.set_result(None)
        if not exhausted:
            relay.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await relay  # re-raises the mid-stream failures, if any.
