"""
All configuration flags, options, settings to fine-tune the client.

All settings are grouped semantically just for convenience
(instead of a flat mega-object with all the values in it).

Some of the settings are flags, some are scalars, some are optional,
some are not (but all of them have reasonable defaults).

The settings are passed explicitly to every API call (usually by
:class:`kubetype.Client`, which keeps one instance for all its calls).
"""
import dataclasses
from typing import Optional


@dataclasses.dataclass
class NetworkingSettings:

    request_timeout: Optional[float] = 5 * 60  # == aiohttp.client.DEFAULT_TIMEOUT
    """
    A timeout for the regular (non-streaming) API requests, in seconds.
    If ``None``, the requests can last forever.
    """

    connect_timeout: Optional[float] = None
    """
    A timeout for establishing the TCP/TLS connection, in seconds.
    If ``None``, only the overall ``request_timeout`` is applied.
    """


@dataclasses.dataclass
class WatchingSettings:

    server_timeout: Optional[float] = None
    """
    The maximum duration of one streaming request, as requested from the server
    (``timeoutSeconds=``). Explicit ``WatchOptions.timeout_seconds`` win.
    If ``None``, then obey the server-side timeouts (they seem to be random).
    """

    client_timeout: Optional[float] = None
    """
    An HTTP/HTTPS session timeout to use in watch requests.
    If ``None``, the watch-stream lasts until the server or the caller closes it.
    """

    connect_timeout: Optional[float] = None
    """
    An HTTP/HTTPS connection timeout to use in watch requests.
    Falls back to ``networking.connect_timeout``, then to ``networking.request_timeout``.
    """

    frames_limit: int = 1
    """
    How many raw transport frames can be pulled from the stream ahead of
    the relay, which is the only consumer of them. ``0`` means unlimited.

    Keep it low: the transport does not read further from the socket while
    the relay is busy, so a slow consumer slows down the stream instead of
    accumulating the frames in memory.
    """


@dataclasses.dataclass
class ClientSettings:
    networking: NetworkingSettings = dataclasses.field(default_factory=NetworkingSettings)
    watching: WatchingSettings = dataclasses.field(default_factory=WatchingSettings)
