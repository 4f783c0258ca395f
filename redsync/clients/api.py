import logging
from typing import Mapping, Optional

import aiohttp
from typing_extensions import Protocol

from redsync.clients import auth, errors
from redsync.helpers import typedefs
from redsync.structs import configuration


class RemoteClient(Protocol):
    """
    The only two operations the resource models need from the transport.

    Both operations are single request/response calls: no retries, no caching.
    Any failure (network, authentication, or an error status) is raised.
    """

    async def get(self, uri: str) -> bytes: ...

    async def patch(self, uri: str, payload: bytes) -> None: ...


async def request(
        method: str,
        url: str,  # relative to the server root, or absolute.
        *,
        context: auth.APIContext,
        settings: configuration.ClientSettings,
        payload: Optional[bytes] = None,
        headers: Optional[Mapping[str, str]] = None,
        timeout: Optional[aiohttp.ClientTimeout] = None,
        logger: typedefs.Logger,
) -> aiohttp.ClientResponse:

    if '://' not in url:
        url = context.server.rstrip('/') + '/' + url.lstrip('/')

    if timeout is None:
        timeout = aiohttp.ClientTimeout(
            total=settings.networking.request_timeout,
            sock_connect=settings.networking.connect_timeout,
        )

    what = f"{method.upper()} {url}"
    try:
        logger.debug(f"Requesting: {what}")
        response = await context.session.request(
            method=method,
            url=url,
            data=payload,
            headers=headers,
            timeout=timeout,
        )
        await errors.check_response(response)  # but do not parse it!
    except (aiohttp.ClientConnectionError, errors.APIError) as e:
        logger.debug(f"Request failed: {what} -> {e!r}")
        raise
    return response


async def get(
        url: str,
        *,
        context: auth.APIContext,
        settings: configuration.ClientSettings,
        headers: Optional[Mapping[str, str]] = None,
        timeout: Optional[aiohttp.ClientTimeout] = None,
        logger: typedefs.Logger,
) -> bytes:
    response = await request(
        method='get',
        url=url,
        headers=headers,
        timeout=timeout,
        context=context,
        settings=settings,
        logger=logger,
    )
    async with response:
        return await response.read()


async def patch(
        url: str,
        *,
        context: auth.APIContext,
        settings: configuration.ClientSettings,
        payload: bytes,
        headers: Optional[Mapping[str, str]] = None,
        timeout: Optional[aiohttp.ClientTimeout] = None,
        logger: typedefs.Logger,
) -> None:
    response = await request(
        method='patch',
        url=url,
        payload=payload,
        headers={'Content-Type': 'application/json', **(headers or {})},
        timeout=timeout,
        context=context,
        settings=settings,
        logger=logger,
    )
    async with response:
        pass  # the response body (if any) is not used: the next fetch is the source of truth.


class APIClient:
    """
    The aiohttp-based implementation of `RemoteClient` for one server.

    The client does not own the context: whoever has created the context
    (and its HTTP session) is responsible for closing it.
    """

    def __init__(
            self,
            context: auth.APIContext,
            *,
            settings: Optional[configuration.ClientSettings] = None,
            logger: Optional[typedefs.Logger] = None,
    ) -> None:
        super().__init__()
        self.context = context
        self.settings = settings if settings is not None else configuration.ClientSettings()
        self.logger = logger if logger is not None else logging.getLogger(__name__)

    async def get(self, uri: str) -> bytes:
        return await get(uri, context=self.context, settings=self.settings, logger=self.logger)

    async def patch(self, uri: str, payload: bytes) -> None:
        await patch(uri, payload=payload, context=self.context, settings=self.settings, logger=self.logger)
