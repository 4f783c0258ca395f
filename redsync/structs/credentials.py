"""
The connection & credentials of one Redfish server (usually, a BMC).

Only what goes into an HTTP session is supported, no Redfish login flows:

* The server's base URL (scheme, host & port).
* Disabled SSL verification, or a custom certificate authority.
* HTTP ``Authorization: Basic username:password``.
* HTTP ``X-Auth-Token: token`` of an already established Redfish session.

.. seealso::
    :mod:`redsync.clients.logins` and :mod:`redsync.clients.auth`.
"""
import dataclasses
from typing import Optional


class LoginError(Exception):
    """ Raised when the client cannot login to the API. """


@dataclasses.dataclass(frozen=True)
class ConnectionInfo:
    """
    A single endpoint with specific credentials and connection flags to use.
    """
    server: str  # e.g. "https://bmc.example.com:443"
    ca_path: Optional[str] = None
    insecure: Optional[bool] = None
    username: Optional[str] = None
    password: Optional[str] = None
    token: Optional[str] = None
