"""
The main redsync module for all the exported functions & classes.
"""
# isort: skip_file

# Unlike all other places, where we import other modules and refer
# the functions via the modules, this is the library's top-level interface,
# as it is seen by the users. So, we export the individual functions.

from redsync.clients.api import (
    RemoteClient,
    APIClient,
)
from redsync.clients.auth import (
    APIContext,
)
from redsync.clients.errors import (
    APIError,
    APIUnauthorizedError,
    APIForbiddenError,
    APINotFoundError,
    APIMethodNotAllowedError,
    APIConflictError,
    APIPreconditionFailedError,
    APIServerError,
)
from redsync.clients.logins import (
    login_with_config,
    login_with_values,
)
from redsync.engines.loggers import (
    LogFormat,
    ResourceLogger,
    configure as configure_logging,
)
from redsync.helpers.typedefs import (
    Logger,
)
from redsync.helpers.versions import (
    version as __version__,
)
from redsync.models.collections import (
    CollectionError,
    CollectionResult,
    fetch_all,
)
from redsync.models.common import (
    Link,
    IndicatorLED,
    PhysicalContext,
    State,
    Health,
    RedundancyMode,
    LocationType,
    Status,
    PartLocation,
    Placement,
    Location,
)
from redsync.models.decoding import (
    DecodeError,
    ShapeError,
    decode,
    encode,
    wire,
)
from redsync.models.entities import (
    Entity,
    Member,
)
from redsync.models.power import (
    InputType,
    LineInputVoltageType,
    PowerLimitException,
    PowerSupplyType,
    InputRange,
    PowerLimit,
    PowerMetric,
    Redundancy,
    PowerControl,
    PowerSupply,
    Voltage,
    Power,
    get_power,
    list_referenced_powers,
)
from redsync.structs.configuration import (
    ClientSettings,
    NetworkingSettings,
    FetchingSettings,
)
from redsync.structs.credentials import (
    LoginError,
    ConnectionInfo,
)
from redsync.structs.diffs import (
    Diff,
    DiffItem,
    DiffOperation,
)
from redsync.structs.patches import (
    Patch,
)

__all__ = [
    'RemoteClient', 'APIClient', 'APIContext',
    'APIError',
    'APIUnauthorizedError',
    'APIForbiddenError',
    'APINotFoundError',
    'APIMethodNotAllowedError',
    'APIConflictError',
    'APIPreconditionFailedError',
    'APIServerError',
    'login_with_config', 'login_with_values',
    'LogFormat', 'ResourceLogger', 'configure_logging',
    'Logger',
    'CollectionError', 'CollectionResult', 'fetch_all',
    'Link', 'IndicatorLED', 'PhysicalContext', 'State', 'Health',
    'RedundancyMode', 'LocationType',
    'Status', 'PartLocation', 'Placement', 'Location',
    'DecodeError', 'ShapeError', 'decode', 'encode', 'wire',
    'Entity', 'Member',
    'InputType', 'LineInputVoltageType', 'PowerLimitException', 'PowerSupplyType',
    'InputRange', 'PowerLimit', 'PowerMetric',
    'Redundancy', 'PowerControl', 'PowerSupply', 'Voltage', 'Power',
    'get_power', 'list_referenced_powers',
    'ClientSettings', 'NetworkingSettings', 'FetchingSettings',
    'LoginError', 'ConnectionInfo',
    'Diff', 'DiffItem', 'DiffOperation',
    'Patch',
]
