import ssl
from types import TracebackType
from typing import Dict, Optional, Type

import aiohttp

from redsync.helpers import versions
from redsync.structs import credentials


class APIContext:
    """
    An aiohttp session bound to one Redfish server with its credentials.

    One context serves all the requests to that server, so the connections
    are pooled. It must be closed when done, or used as a context manager.
    The session belongs to the event loop where the context was created.
    """

    session: aiohttp.ClientSession
    server: str  # the base URL for the relative URIs

    def __init__(
            self,
            info: credentials.ConnectionInfo,
    ) -> None:
        super().__init__()

        # The SSL part (CA verification only: BMCs rarely use the client certificates).
        context = ssl.create_default_context(cafile=info.ca_path)
        if info.insecure:
            context.check_hostname = False
            context.verify_mode = ssl.CERT_NONE

        # The token auth part: a session token issued by the Redfish SessionService.
        headers: Dict[str, str] = {}
        if info.token:
            headers['X-Auth-Token'] = info.token

        # HTTP basic auth: accepted by most BMCs without a session.
        auth: Optional[aiohttp.BasicAuth]
        if info.username and info.password:
            auth = aiohttp.BasicAuth(info.username, info.password)
        elif info.username or info.password:
            raise credentials.LoginError("Both username & password are needed for the basic auth.")
        else:
            auth = None

        headers['User-Agent'] = f'redsync/{versions.version or "unknown"}'
        headers['Accept'] = 'application/json'

        self.session = aiohttp.ClientSession(
            connector=aiohttp.TCPConnector(
                limit=0,
                ssl=context,
            ),
            headers=headers,
            auth=auth,
        )

        self.server = info.server

    async def close(self) -> None:
        await self.session.close()

    async def __aenter__(self) -> "APIContext":
        return self

    async def __aexit__(
            self,
            exc_type: Optional[Type[BaseException]],
            exc_val: Optional[BaseException],
            exc_tb: Optional[TracebackType],
    ) -> None:
        await self.close()
