"""
Rudimentary ways of getting the connection credentials.

redsync is not an authentication library, and avoids bringing too much logic
for proper authentication (e.g. the Redfish SessionService's login/logout).
The credentials are either given explicitly (e.g. via the CLI options),
or read from a minimalistic YAML file of this form:

.. code-block:: yaml

    server: https://bmc.example.com
    username: admin
    password: secret
    insecure: true
"""
import os
from typing import Any, Mapping, Optional

import yaml

from redsync.structs import credentials

KNOWN_KEYS = frozenset({'server', 'username', 'password', 'token', 'insecure', 'ca_path'})


def login_with_config(path: str) -> credentials.ConnectionInfo:
    """
    Read the connection info from a YAML file.

    As prescribed: if the file is absent or non-deserialisable, then fail.
    """
    with open(os.path.expanduser(path), encoding='utf-8') as f:
        config = yaml.safe_load(f.read()) or {}

    if not isinstance(config, Mapping):
        raise credentials.LoginError(f"The config root must be a mapping in {path}.")
    unknown = set(config) - KNOWN_KEYS
    if unknown:
        raise credentials.LoginError(f"Unknown keys in {path}: {', '.join(sorted(unknown))}.")
    return login_with_values(**config)


def login_with_values(
        *,
        server: Optional[str] = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
        token: Optional[str] = None,
        insecure: Optional[bool] = None,
        ca_path: Optional[str] = None,
        **_: Any,
) -> credentials.ConnectionInfo:
    if not server:
        raise credentials.LoginError("The server is not specified.")
    if '://' not in server:
        server = f'https://{server}'
    if insecure is not None and not isinstance(insecure, bool):
        raise credentials.LoginError(f"The insecure flag must be a boolean, got {insecure!r}.")
    return credentials.ConnectionInfo(
        server=server.rstrip('/'),
        username=username or None,
        password=password or None,
        token=token or None,
        insecure=insecure,
        ca_path=os.path.expanduser(ca_path) if ca_path else None,
    )
