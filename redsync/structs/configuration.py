"""
All configuration flags, options, settings to fine-tune the client.

All settings are grouped semantically just for convenience
(instead of a flat mega-object with all the values in it).

Some of the settings are flags, some are scalars, some are optional,
some are not (but all of them have reasonable defaults).
"""
import dataclasses
from typing import Optional


@dataclasses.dataclass
class NetworkingSettings:

    request_timeout: Optional[float] = 5 * 60  # == aiohttp.client.DEFAULT_TIMEOUT
    """
    A timeout for the whole request, in seconds, including the reading
    of the response's body. BMCs are known to be slow, so it is generous.

    This is the only timeout in the request/response cycle: the core
    itself neither retries nor cancels the requests on its own.
    """

    connect_timeout: Optional[float] = None
    """
    A timeout for establishing the connection to the server, in seconds.
    If not set, the overall request timeout is used.
    """


@dataclasses.dataclass
class FetchingSettings:

    max_concurrency: int = 1
    """
    How many members of a collection can be fetched at the same time.

    The default is 1, i.e. the members are fetched one by one, in order.
    Higher values speed up the fetching of large collections, but can
    overload the embedded web servers of some BMCs.

    The order of the resulting resources and the reporting of failures
    do not depend on this setting.
    """

    def __post_init__(self) -> None:
        if self.max_concurrency < 1:
            raise ValueError(f"Concurrency must be a positive integer, got {self.max_concurrency!r}.")


@dataclasses.dataclass
class ClientSettings:
    networking: NetworkingSettings = dataclasses.field(default_factory=NetworkingSettings)
    fetching: FetchingSettings = dataclasses.field(default_factory=FetchingSettings)
