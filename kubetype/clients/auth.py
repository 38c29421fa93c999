import base64
import contextlib
import functools
import os
import ssl
import tempfile
from contextvars import ContextVar
from typing import Any, AsyncIterator, Callable, Dict, Optional, TypeVar, Union, cast

import aiohttp

from kubetype.clients import errors
from kubetype.helpers import versions
from kubetype.structs import credentials

# The API context of the current task (and its sub-tasks): see `connected()`.
# Used by the client wrappers when the context is not passed explicitly.
context_var: ContextVar["APIContext"] = ContextVar('context_var')

# A typevar to show that we return a function with the same signature as given.
_F = TypeVar('_F', bound=Callable[..., Any])


def authenticated(fn: _F) -> _F:
    """
    A decorator to inject the current API context into a requesting routine.

    If the context is explicitly passed, it is used as is. Otherwise, the one
    installed by `connected()` for the current task is used.
    """
    @functools.wraps(fn)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        if kwargs.get('context') is None:
            try:
                kwargs['context'] = context_var.get()
            except LookupError:
                raise errors.InvalidArgumentError(
                    "The API context is neither passed nor installed. "
                    "Use `async with kubetype.connected(...)` or pass `context=`.") from None
        return await fn(*args, **kwargs)
    return cast(_F, wrapper)


@contextlib.asynccontextmanager
async def connected(
        info: Optional[credentials.ConnectionInfo] = None,
) -> AsyncIterator["APIContext"]:
    """
    Connect to the API for the duration of the block.

    If the connection info is not provided, it is detected from the environment
    (see :func:`kubetype.clients.login.login`).
    """
    if info is None:
        from kubetype.clients import login  # to avoid circular imports
        info = login.login()
    context = APIContext(info)
    token = context_var.set(context)
    try:
        yield context
    finally:
        context_var.reset(token)
        await context.close()


class APIContext:
    """
    A container for an aiohttp session and the contextual info of the server.

    The container is constructed once per connection, and then re-used
    by all API calls of that connection, streaming and non-streaming.
    """

    # The main contained object used by the API methods.
    session: aiohttp.ClientSession

    # Contextual information for URL building.
    server: str
    default_namespace: Optional[str]

    def __init__(
            self,
            info: credentials.ConnectionInfo,
    ) -> None:
        super().__init__()
        self.session = self.make_aiohttp_session(info)
        self.server = info.server
        self.default_namespace = info.default_namespace

    def make_aiohttp_session(self, info: credentials.ConnectionInfo) -> aiohttp.ClientSession:

        # Some SSL data are not accepted directly, so we have to use temp files.
        # Do not even create temporary files if there is no need. It can be a readonly filesystem.
        with contextlib.ExitStack() as stack:

            cert_path: Optional[str]
            if info.certificate_path:
                cert_path = info.certificate_path
            elif info.certificate_data:
                cert_file = stack.enter_context(tempfile.NamedTemporaryFile(buffering=0))
                cert_file.write(decode_to_pem(info.certificate_data).encode('ascii'))
                cert_path = cert_file.name
            else:
                cert_path = None

            pkey_path: Optional[str]
            if info.private_key_path:
                pkey_path = info.private_key_path
            elif info.private_key_data:
                pkey_file = stack.enter_context(tempfile.NamedTemporaryFile(buffering=0))
                pkey_file.write(decode_to_pem(info.private_key_data).encode('ascii'))
                pkey_path = pkey_file.name
            else:
                pkey_path = None

            # The SSL part (both client certificate auth and CA verification).
            context = ssl.create_default_context(
                purpose=ssl.Purpose.SERVER_AUTH,
                cafile=os.path.expanduser(info.ca_path) if info.ca_path else None,
                cadata=decode_to_pem(info.ca_data) if info.ca_data else None,
            )
            if cert_path and pkey_path:
                context.load_cert_chain(certfile=cert_path, keyfile=pkey_path)

        if info.insecure:
            context.check_hostname = False
            context.verify_mode = ssl.CERT_NONE

        # The token auth part.
        headers: Dict[str, str] = {}
        if info.scheme and info.token:
            headers['Authorization'] = f'{info.scheme} {info.token}'
        elif info.scheme:
            headers['Authorization'] = f'{info.scheme}'
        elif info.token:
            headers['Authorization'] = f'Bearer {info.token}'

        # The basic auth part.
        auth: Optional[aiohttp.BasicAuth]
        if info.username and info.password:
            auth = aiohttp.BasicAuth(info.username, info.password)
        else:
            auth = None

        # It is a good practice to self-identify a bit.
        headers['User-Agent'] = f'kubetype/{versions.version or "unknown"}'

        return aiohttp.ClientSession(
            connector=aiohttp.TCPConnector(
                limit=0,
                ssl=context,
            ),
            headers=headers,
            auth=auth,
        )

    async def close(self) -> None:
        await self.session.close()


def decode_to_pem(data: Union[str, bytes]) -> str:
    if isinstance(data, str) and data.startswith('-----BEGIN '):
        return data
    elif isinstance(data, bytes) and data.startswith(b'-----BEGIN '):
        return data.decode('ascii')
    else:
        return base64.b64decode(data).decode('ascii')
