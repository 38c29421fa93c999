"""
K8s API errors.

The underlying client library (now, ``aiohttp``) can be replaced in the future.
We cannot rely on embedding its exceptions all over the code and in the users'
``except:`` clauses. Hence, we have our own hierarchy of exceptions.

The original errors of the client library are chained as the causes of our own
specialised errors -- for better explainability of errors in the stack traces.

Some selected reasons of K8s API errors are made into their own classes,
so that they could be intercepted and handled by the callers (e.g. "not found").
All other reasons are raised as the base error class and are indistinguishable
from each other (except via the exception's fields).

Unlike the underlying client library's errors, the K8s API errors contain more
information about the reasons -- as provided by K8s API in its response bodies
(or in the ``ERROR`` events of the watch-streams), not guessed only by HTTP
statuses alone.
"""
import collections.abc
import contextlib
import json
from typing import Collection, Iterator, Optional, Type

import aiohttp

from kubetype.structs import bodies


class ClientError(Exception):
    """
    The base for all errors of the client, remote or local.

    The errors are annotated with the operation and the resource kind
    while they escape from the API calls (see :func:`attributing`),
    so that the messages say what has failed, not only why.
    """
    operation: Optional[str] = None
    kind: Optional[str] = None

    def __str__(self) -> str:
        text = super().__str__()
        if self.operation is not None and self.kind is not None:
            return f"failed to {self.operation} {self.kind}: {text}"
        return text


class InvalidArgumentError(ClientError, ValueError):
    """ A misuse of the API detected before any I/O happens. """


class APIConnectionError(ClientError, ConnectionError):
    """ The transport failed to establish or to maintain the connection. """


class DecodeError(ClientError):
    """
    The payload does not match the expected schema.

    The ``shape`` is what was attempted: a resource kind (e.g. ``"Pod"``),
    or ``"Status"`` for the error payloads.
    """

    def __init__(self, message: str, *, shape: str) -> None:
        super().__init__(message)
        self.shape = shape


class MalformedFrame(DecodeError):
    """
    A frame of the watch-stream cannot be split into an event type and object.

    The ``type`` is the declared event type if it could be read at all.
    """

    def __init__(self, message: str, *, type: Optional[str] = None) -> None:
        super().__init__(message, shape='WatchEvent')
        self.type = type


class APIError(ClientError):
    """
    An error reported by the API: either by an HTTP status, or in the stream.
    """

    def __init__(
            self,
            payload: Optional[bodies.RawStatus],
            *,
            status: int,
    ) -> None:
        message = payload.get('message') if payload else None
        super().__init__(message or f"API responded with HTTP {status}")
        self._status = status
        self._payload = payload

    @property
    def status(self) -> int:
        return self._status

    @property
    def payload(self) -> Optional[bodies.RawStatus]:
        return self._payload

    @property
    def code(self) -> Optional[int]:
        return self._payload.get('code') if self._payload else None

    @property
    def reason(self) -> Optional[str]:
        return self._payload.get('reason') if self._payload else None

    @property
    def message(self) -> Optional[str]:
        return self._payload.get('message') if self._payload else None

    @property
    def details(self) -> Optional[bodies.RawStatusDetails]:
        return self._payload.get('details') if self._payload else None


class APIUnauthorizedError(APIError):
    pass


class APIForbiddenError(APIError):
    pass


class APINotFoundError(APIError):
    pass


class APIConflictError(APIError):
    pass


class APIGoneError(APIError):
    """ Usually, "410 Gone": the requested resource version is too old. """


def make_error(
        payload: Optional[bodies.RawStatus],
        *,
        status: int,
) -> APIError:
    cls: Type[APIError] = (
        APIUnauthorizedError if status == 401 else
        APIForbiddenError if status == 403 else
        APINotFoundError if status == 404 else
        APIConflictError if status == 409 else
        APIGoneError if status == 410 else
        APIError
    )
    return cls(payload, status=status)


def is_not_found(exc: BaseException) -> bool:
    """
    Check if the error, or any error it was raised from, is a "not found" one.
    """
    cause: Optional[BaseException] = exc
    while cause is not None:
        if isinstance(cause, APINotFoundError):
            return True
        cause = cause.__cause__
    return False


@contextlib.contextmanager
def attributing(operation: str, kind: str) -> Iterator[None]:
    """
    Annotate the escaping client errors with the operation and the kind.

    The errors keep their classes, so that the callers can intercept them
    as usually; only their messages become more descriptive.
    The innermost annotation wins if the calls are nested.
    """
    try:
        yield
    except ClientError as e:
        if e.operation is None:
            e.operation = operation
            e.kind = kind
        raise


async def check_response(
        response: aiohttp.ClientResponse,
        *,
        expected: Optional[Collection[int]] = None,
) -> None:
    """
    Check for specialised K8s errors, and raise with extended information.
    """
    unexpected = expected is not None and response.status not in expected
    if response.status >= 400 or unexpected:

        # Read the response's body before it is released.
        payload: Optional[bodies.RawStatus]
        try:
            payload = await response.json(content_type=None)
        except (json.JSONDecodeError, UnicodeDecodeError, aiohttp.ClientError):
            payload = None

        # Better be safe: who knows which sensitive information can be dumped unless kind==Status.
        if not isinstance(payload, collections.abc.Mapping) or payload.get('kind') != 'Status':
            payload = None

        response.release()
        raise make_error(payload, status=response.status)
