"""
The common vocabulary of the Redfish resources: enums and small structures.

The enums are ``str``-based, so they compare equal to their wire values.
The values unknown to this vocabulary are kept as plain strings when decoded.
"""
import dataclasses
import enum
from typing import Any, Dict, List, Optional

from redsync.models.decoding import Link, wire

__all__ = [
    'Link',
    'IndicatorLED', 'PhysicalContext', 'State', 'Health', 'RedundancyMode', 'LocationType',
    'Status', 'PartLocation', 'Placement', 'Location',
]


class IndicatorLED(str, enum.Enum):
    UNKNOWN = 'Unknown'
    LIT = 'Lit'
    BLINKING = 'Blinking'
    OFF = 'Off'


class PhysicalContext(str, enum.Enum):
    ROOM = 'Room'
    INTAKE = 'Intake'
    EXHAUST = 'Exhaust'
    LIQUID_INLET = 'LiquidInlet'
    LIQUID_OUTLET = 'LiquidOutlet'
    FRONT = 'Front'
    BACK = 'Back'
    UPPER = 'Upper'
    LOWER = 'Lower'
    CPU = 'CPU'
    CPU_SUBSYSTEM = 'CPUSubsystem'
    GPU = 'GPU'
    GPU_SUBSYSTEM = 'GPUSubsystem'
    FPGA = 'FPGA'
    ACCELERATOR = 'Accelerator'
    ASIC = 'ASIC'
    BACKPLANE = 'Backplane'
    SYSTEM_BOARD = 'SystemBoard'
    POWER_SUPPLY = 'PowerSupply'
    POWER_SUBSYSTEM = 'PowerSubsystem'
    VOLTAGE_REGULATOR = 'VoltageRegulator'
    RECTIFIER = 'Rectifier'
    STORAGE_DEVICE = 'StorageDevice'
    NETWORKING_DEVICE = 'NetworkingDevice'
    COMPUTE_BAY = 'ComputeBay'
    STORAGE_BAY = 'StorageBay'
    NETWORK_BAY = 'NetworkBay'
    EXPANSION_BAY = 'ExpansionBay'
    POWER_SUPPLY_BAY = 'PowerSupplyBay'
    MEMORY = 'Memory'
    MEMORY_SUBSYSTEM = 'MemorySubsystem'
    CHASSIS = 'Chassis'
    FAN = 'Fan'
    COOLING_SUBSYSTEM = 'CoolingSubsystem'
    MOTOR = 'Motor'
    TRANSFORMER = 'Transformer'
    ACMAINS_INPUT = 'ACMainsInput'
    AC_UTILITY_INPUT = 'ACUtilityInput'
    DC_BUS = 'DCBus'
    STANDBY_CONVERTER = 'StandbyConverter'


class State(str, enum.Enum):
    ENABLED = 'Enabled'
    DISABLED = 'Disabled'
    STANDBY_OFFLINE = 'StandbyOffline'
    STANDBY_SPARE = 'StandbySpare'
    IN_TEST = 'InTest'
    STARTING = 'Starting'
    ABSENT = 'Absent'
    UNAVAILABLE_OFFLINE = 'UnavailableOffline'
    DEFERRING = 'Deferring'
    QUIESCED = 'Quiesced'
    UPDATING = 'Updating'


class Health(str, enum.Enum):
    OK = 'OK'
    WARNING = 'Warning'
    CRITICAL = 'Critical'


class RedundancyMode(str, enum.Enum):
    FAILOVER = 'Failover'
    N_PLUS_M = 'N+m'
    SPARING = 'Sparing'
    SHARING = 'Sharing'
    NOT_REDUNDANT = 'NotRedundant'


class LocationType(str, enum.Enum):
    SLOT = 'Slot'
    BAY = 'Bay'
    CONNECTOR = 'Connector'
    SOCKET = 'Socket'


@dataclasses.dataclass
class Status:
    health: Optional[Health] = wire('Health', default=None)
    health_rollup: Optional[Health] = wire('HealthRollup', default=None)
    state: Optional[State] = wire('State', default=None)


@dataclasses.dataclass
class PartLocation:
    location_ordinal_value: int = wire('LocationOrdinalValue', default=0)
    location_type: Optional[LocationType] = wire('LocationType', default=None)
    orientation: str = wire('Orientation', default='')
    reference: str = wire('Reference', default='')
    service_label: str = wire('ServiceLabel', default='')


@dataclasses.dataclass
class Placement:
    rack: str = wire('Rack', default='')
    rack_offset: int = wire('RackOffset', default=0)
    rack_offset_units: str = wire('RackOffsetUnits', default='')
    row: str = wire('Row', default='')


@dataclasses.dataclass
class Location:
    """ The physical location of a device: in a chassis, in a rack, on a site. """
    part_location: PartLocation = wire('PartLocation', default_factory=PartLocation)
    placement: Placement = wire('Placement', default_factory=Placement)
    info: str = wire('Info', default='')
    info_format: str = wire('InfoFormat', default='')
    oem: Dict[str, Any] = wire('Oem', default_factory=dict)
    contacts: List[Dict[str, Any]] = wire('Contacts', default_factory=list)
