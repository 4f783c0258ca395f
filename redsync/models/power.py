"""
The power subsystem of a chassis: power control, supplies, voltages, redundancy.

The ``Power`` resource itself is read-only. Some of its array members can be
changed: the power limits of the power controls, the indicator LEDs of the
power supplies, and the redundancy modes. The members are updated with their
own URIs (``@odata.id``), as the server advertises them.
"""
import dataclasses
import enum
from typing import Any, ClassVar, Dict, FrozenSet, List, Optional

from redsync.clients import api
from redsync.helpers import typedefs
from redsync.models import collections, common, entities
from redsync.models.decoding import Link, wire
from redsync.structs import configuration


class InputType(str, enum.Enum):
    AC = 'AC'
    DC = 'DC'


class LineInputVoltageType(str, enum.Enum):
    UNKNOWN = 'Unknown'
    AC_LOW_LINE = 'ACLowLine'  # 100-127V AC
    AC_MID_LINE = 'ACMidLine'  # 200-240V AC
    AC_HIGH_LINE = 'ACHighLine'  # 277V AC
    DC_NEG_48V = 'DCNeg48V'
    DC_380V = 'DC380V'
    AC_120V = 'AC120V'
    AC_240V = 'AC240V'
    AC_277V = 'AC277V'
    AC_AND_DC_WIDE_RANGE = 'ACandDCWideRange'
    AC_WIDE_RANGE = 'ACWideRange'
    DC_240V = 'DC240V'


class PowerLimitException(str, enum.Enum):
    NO_ACTION = 'NoAction'
    HARD_POWER_OFF = 'HardPowerOff'
    LOG_EVENT_ONLY = 'LogEventOnly'
    OEM = 'Oem'


class PowerSupplyType(str, enum.Enum):
    UNKNOWN = 'Unknown'
    AC = 'AC'
    DC = 'DC'
    AC_OR_DC = 'ACorDC'


@dataclasses.dataclass
class InputRange:
    """ An input range that a power supply is able to utilise. """
    input_type: Optional[InputType] = wire('InputType', default=None)
    maximum_frequency_hz: float = wire('MaximumFrequencyHz', default=0.0)
    maximum_voltage: float = wire('MaximumVoltage', default=0.0)
    minimum_frequency_hz: float = wire('MinimumFrequencyHz', default=0.0)
    minimum_voltage: float = wire('MinimumVoltage', default=0.0)
    output_wattage: float = wire('OutputWattage', default=0.0)


@dataclasses.dataclass
class PowerLimit:
    """
    The power capping of a chassis.

    ``LimitInWatts`` set to ``None`` (JSON ``null``) disables the capping.
    """
    correction_in_ms: int = wire('CorrectionInMs', default=0)
    limit_exception: Optional[PowerLimitException] = wire('LimitException', default=None)
    limit_in_watts: Optional[float] = wire('LimitInWatts', default=None)


@dataclasses.dataclass
class PowerMetric:
    average_consumed_watts: float = wire('AverageConsumedWatts', default=0.0)
    interval_in_min: float = wire('IntervalInMin', default=0.0)  # integer by schema, but floats are seen too.
    max_consumed_watts: float = wire('MaxConsumedWatts', default=0.0)
    min_consumed_watts: float = wire('MinConsumedWatts', default=0.0)


@dataclasses.dataclass
class Redundancy(entities.Member):
    writable: ClassVar[FrozenSet[str]] = frozenset({'Mode', 'RedundancyEnabled'})

    max_num_supported: int = wire('MaxNumSupported', default=0)
    min_num_needed: int = wire('MinNumNeeded', default=0)
    mode: Optional[common.RedundancyMode] = wire('Mode', default=None)
    redundancy_enabled: bool = wire('RedundancyEnabled', default=False)
    redundancy_set: List[Link] = wire('RedundancySet', default_factory=list)
    redundancy_set_count: int = wire('RedundancySet@odata.count', default=0)
    status: common.Status = wire('Status', default_factory=common.Status)


@dataclasses.dataclass
class PowerControl(entities.Member):
    writable: ClassVar[FrozenSet[str]] = frozenset({'PowerLimit'})

    physical_context: Optional[common.PhysicalContext] = wire('PhysicalContext', default=None)
    power_allocated_watts: float = wire('PowerAllocatedWatts', default=0.0)
    power_available_watts: float = wire('PowerAvailableWatts', default=0.0)
    power_capacity_watts: float = wire('PowerCapacityWatts', default=0.0)
    power_consumed_watts: float = wire('PowerConsumedWatts', default=0.0)
    power_limit: PowerLimit = wire('PowerLimit', default_factory=PowerLimit)
    power_metrics: PowerMetric = wire('PowerMetrics', default_factory=PowerMetric)
    power_requested_watts: float = wire('PowerRequestedWatts', default=0.0)
    status: common.Status = wire('Status', default_factory=common.Status)


@dataclasses.dataclass
class PowerSupply(entities.Member):
    writable: ClassVar[FrozenSet[str]] = frozenset({'IndicatorLED'})

    assembly: Link = wire('Assembly', default=Link(''))
    efficiency_percent: float = wire('EfficiencyPercent', default=0.0)
    firmware_version: str = wire('FirmwareVersion', default='')
    hot_pluggable: bool = wire('HotPluggable', default=False)
    indicator_led: Optional[common.IndicatorLED] = wire('IndicatorLED', default=None)
    input_ranges: List[InputRange] = wire('InputRanges', default_factory=list)
    last_power_output_watts: float = wire('LastPowerOutputWatts', default=0.0)
    line_input_voltage: float = wire('LineInputVoltage', default=0.0)
    line_input_voltage_type: Optional[LineInputVoltageType] = wire('LineInputVoltageType', default=None)
    location: common.Location = wire('Location', default_factory=common.Location)
    manufacturer: str = wire('Manufacturer', default='')
    model: str = wire('Model', default='')
    part_number: str = wire('PartNumber', default='')
    power_capacity_watts: float = wire('PowerCapacityWatts', default=0.0)
    power_input_watts: float = wire('PowerInputWatts', default=0.0)
    power_output_watts: float = wire('PowerOutputWatts', default=0.0)
    power_supply_type: Optional[PowerSupplyType] = wire('PowerSupplyType', default=None)
    redundancy: List[Redundancy] = wire('Redundancy', default_factory=list)
    redundancy_count: int = wire('Redundancy@odata.count', default=0)
    serial_number: str = wire('SerialNumber', default='')
    spare_part_number: str = wire('SparePartNumber', default='')
    status: common.Status = wire('Status', default_factory=common.Status)


@dataclasses.dataclass
class Voltage(entities.Member):
    lower_threshold_critical: float = wire('LowerThresholdCritical', default=0.0)
    lower_threshold_fatal: float = wire('LowerThresholdFatal', default=0.0)
    lower_threshold_non_critical: float = wire('LowerThresholdNonCritical', default=0.0)
    max_reading_range: float = wire('MaxReadingRange', default=0.0)
    min_reading_range: float = wire('MinReadingRange', default=0.0)
    physical_context: Optional[common.PhysicalContext] = wire('PhysicalContext', default=None)
    reading_volts: float = wire('ReadingVolts', default=0.0)
    sensor_number: int = wire('SensorNumber', default=0)
    status: common.Status = wire('Status', default_factory=common.Status)
    upper_threshold_critical: float = wire('UpperThresholdCritical', default=0.0)
    upper_threshold_fatal: float = wire('UpperThresholdFatal', default=0.0)
    upper_threshold_non_critical: float = wire('UpperThresholdNonCritical', default=0.0)


@dataclasses.dataclass
class Power(entities.Entity):
    """
    The power metrics & control of a chassis, as one resource.

    Usually found at ``/redfish/v1/Chassis/{id}/Power``.
    """
    odata_context: str = wire('@odata.context', default='')
    odata_type: str = wire('@odata.type', default='')
    description: str = wire('Description', default='')
    indicator_led: Optional[common.IndicatorLED] = wire('IndicatorLED', default=None)
    power_control: List[PowerControl] = wire('PowerControl', default_factory=list)
    power_control_count: int = wire('PowerControl@odata.count', default=0)
    power_supplies: List[PowerSupply] = wire('PowerSupplies', default_factory=list)
    power_supplies_count: int = wire('PowerSupplies@odata.count', default=0)
    redundancy: List[Redundancy] = wire('Redundancy', default_factory=list)
    redundancy_count: int = wire('Redundancy@odata.count', default=0)
    voltages: List[Voltage] = wire('Voltages', default_factory=list)
    voltages_count: int = wire('Voltages@odata.count', default=0)
    oem: Dict[str, Any] = wire('Oem', default_factory=dict)


async def get_power(
        uri: str,
        *,
        client: api.RemoteClient,
        logger: Optional[typedefs.Logger] = None,
) -> Power:
    return await Power.fetch(uri, client=client, logger=logger)


async def list_referenced_powers(
        link: Optional[str],
        *,
        client: api.RemoteClient,
        settings: Optional[configuration.ClientSettings] = None,
        logger: Optional[typedefs.Logger] = None,
) -> "collections.CollectionResult[Power]":
    """ Get all the power resources of a collection, tolerating the failed ones. """
    return await collections.fetch_all(Power, link, client=client, settings=settings, logger=logger)
