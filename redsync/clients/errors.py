"""
Redfish API errors, as raised by the client for the HTTP error statuses.

The errors of ``aiohttp`` are not exposed for the HTTP statuses: they are
chained as the causes of our own errors. The connectivity & SSL errors
are not about the Redfish API, so they are escalated as they are.

A Redfish service explains its errors in the response body
(``{"error": {"code": ..., "message": ..., "@Message.ExtendedInfo": [...]}}``),
which is exposed via the properties of the errors when it is well-formed.
"""
import collections.abc
import json
from typing import Collection, Mapping, Optional, Type

import aiohttp

from redsync.structs import bodies


class APIError(Exception):

    def __init__(
            self,
            payload: Optional[bodies.RawError],
            *,
            status: int,
    ) -> None:
        details = payload.get('error') if payload else None
        message = details.get('message') if details else None
        super().__init__(message or f"HTTP {status}", payload)
        self._status = status
        self._payload = payload
        self._details = details

    @property
    def status(self) -> int:
        return self._status

    @property
    def code(self) -> Optional[str]:
        return self._details.get('code') if self._details else None

    @property
    def message(self) -> Optional[str]:
        return self._details.get('message') if self._details else None

    @property
    def extended_info(self) -> Collection[bodies.RawMessage]:
        return self._details.get('@Message.ExtendedInfo', []) if self._details else []


class APIUnauthorizedError(APIError):
    pass


class APIForbiddenError(APIError):
    pass


class APINotFoundError(APIError):
    pass


class APIMethodNotAllowedError(APIError):
    pass


class APIConflictError(APIError):
    pass


class APIPreconditionFailedError(APIError):
    pass


class APIServerError(APIError):
    pass


ERRORS_BY_STATUS: Mapping[int, Type[APIError]] = {
    401: APIUnauthorizedError,
    403: APIForbiddenError,
    404: APINotFoundError,
    405: APIMethodNotAllowedError,
    409: APIConflictError,
    412: APIPreconditionFailedError,
}


async def check_response(
        response: aiohttp.ClientResponse,
) -> None:
    """
    Check for specialised Redfish errors, and raise with extended information.
    """
    if response.status >= 400:

        # Read the response's body before it is closed by raise_for_status().
        payload: Optional[bodies.RawError]
        try:
            payload = await response.json(content_type=None)
        except (json.JSONDecodeError, UnicodeDecodeError, aiohttp.ClientConnectionError):
            payload = None

        # Only the well-formed error envelopes are kept; the rest is not informative.
        if not isinstance(payload, collections.abc.Mapping) or \
                not isinstance(payload.get('error'), collections.abc.Mapping):
            payload = None

        cls = ERRORS_BY_STATUS.get(response.status, APIServerError if response.status >= 500 else APIError)

        try:
            response.raise_for_status()
        except aiohttp.ClientResponseError as e:
            raise cls(payload, status=response.status) from e
