import asyncio
import copy
import dataclasses
import io
import json
import logging
import re
import sys
from typing import Dict, List, Mapping, Optional, Union

import aiohttp.test_utils
import aiohttp.web
import pytest

from redsync.clients.api import APIClient
from redsync.clients.auth import APIContext
from redsync.engines.loggers import TextFormatter, configure
from redsync.structs.configuration import ClientSettings
from redsync.structs.credentials import ConnectionInfo


# Make all tests in this directory and below asyncio-compatible by default.
# Due to how pytest-async checks for these markers, they should be added as early as possible.
@pytest.hookimpl(hookwrapper=True)
def pytest_pycollect_makeitem(collector, name, obj):
    if collector.funcnamefilter(name) and asyncio.iscoroutinefunction(obj):
        pytest.mark.asyncio(obj)
    yield


@pytest.fixture()
def settings():
    return ClientSettings()


@pytest.fixture()
def logger():
    return logging.getLogger('redsync.tests')


#
# In-memory fakes of the remote side, for everything above the client layer.
#

@dataclasses.dataclass(frozen=True)
class Patched:
    uri: str
    payload: bytes

    @property
    def data(self):
        return json.loads(self.payload)


class FakeClient:
    """
    An in-memory `RemoteClient` with the documents served by their URIs.

    A document can be an exception instance: it is raised when requested.
    All the requests are remembered for assertions.
    """

    def __init__(self, documents: Optional[Dict[str, Union[bytes, str, dict, BaseException]]] = None):
        super().__init__()
        self.documents = dict(documents or {})
        self.gets: List[str] = []
        self.patches: List[Patched] = []
        self.patch_error: Optional[Exception] = None

    def add(self, uri, document):
        self.documents[uri] = document

    async def get(self, uri: str) -> bytes:
        self.gets.append(uri)
        document = self.documents[uri]
        if isinstance(document, BaseException):
            raise document
        elif isinstance(document, dict):
            return json.dumps(document).encode('utf-8')
        elif isinstance(document, str):
            return document.encode('utf-8')
        else:
            return document

    async def patch(self, uri: str, payload: bytes) -> None:
        self.patches.append(Patched(uri=uri, payload=payload))
        if self.patch_error is not None:
            raise self.patch_error


@pytest.fixture()
def fake_client():
    return FakeClient()


#
# A local HTTP server for the client-layer tests: no external calls are made.
#

@dataclasses.dataclass(frozen=True)
class Recorded:
    method: str
    path: str
    headers: Mapping[str, str]  # case-insensitive
    body: bytes

    @property
    def data(self):
        return json.loads(self.body)


class FakeServer:
    """
    A catch-all handler with the responses pre-defined per method & path.

    Unknown paths respond with HTTP 599, so that they are easy to notice.
    """

    def __init__(self) -> None:
        super().__init__()
        self.url = ''
        self.responses: Dict[tuple, dict] = {}
        self.requests: List[Recorded] = []

    def add(self, method, path, *, status=200, json=None, body=None, headers=None):
        self.responses[(method.upper(), path)] = dict(status=status, json=json, body=body, headers=headers)

    async def handle(self, request: aiohttp.web.Request) -> aiohttp.web.StreamResponse:
        body = await request.read()
        self.requests.append(Recorded(method=request.method, path=request.path,
                                      headers=request.headers.copy(), body=body))
        canned = self.responses.get((request.method.upper(), request.path))
        if canned is None:
            return aiohttp.web.Response(status=599, text='no such fake route')
        elif canned['json'] is not None:
            return aiohttp.web.json_response(canned['json'], status=canned['status'], headers=canned['headers'])
        else:
            return aiohttp.web.Response(status=canned['status'], body=canned['body'], headers=canned['headers'])


@pytest.fixture()
async def fake_server():
    server = FakeServer()
    app = aiohttp.web.Application()
    app.router.add_route('*', '/{tail:.*}', server.handle)
    test_server = aiohttp.test_utils.TestServer(app)
    await test_server.start_server()
    try:
        server.url = str(test_server.make_url('')).rstrip('/')
        yield server
    finally:
        await test_server.close()


@pytest.fixture()
def connection_info(fake_server):
    return ConnectionInfo(server=fake_server.url)


@pytest.fixture()
async def api_context(connection_info):
    context = APIContext(connection_info)
    async with context:
        yield context


@pytest.fixture()
def api_client(api_context, settings, logger):
    return APIClient(api_context, settings=settings, logger=logger)


#
# Helpers for the logging checks.
#

@pytest.fixture()
def logstream(caplog):
    """ Prefixing is done at the final output. We have to intercept it. """

    logger = logging.getLogger()
    handlers = list(logger.handlers)

    # Setup all log levels of sub-libraries. A side-effect: the handlers are also added.
    configure(verbose=True)

    # Remove any stream handlers added in the step above. But keep the caplog's handlers.
    for handler in list(logger.handlers):
        if isinstance(handler, logging.StreamHandler) and handler.stream is sys.stderr:
            logger.removeHandler(handler)

    # Inject our stream-intercepting handler.
    stream = io.StringIO()
    handler = logging.StreamHandler(stream)
    formatter = TextFormatter('prefix %(message)s', prefixing=True)
    handler.setFormatter(formatter)
    logger.addHandler(handler)

    try:
        with caplog.at_level(logging.DEBUG):
            yield stream
    finally:
        logger.removeHandler(handler)
        logger.handlers[:] = handlers  # undo `configure()`


@pytest.fixture()
def assert_logs(caplog):
    """
    A function to assert the logs are present (by pattern).

    The listed message patterns MUST be present, in the order specified.
    Some other log messages can also be present, but they are ignored.
    """
    def assert_logs_fn(patterns, prohibited=[], strict=False):
        __traceback_hide__ = True
        remaining_patterns = list(patterns)
        for message in caplog.messages:
            for idx, pattern in enumerate(remaining_patterns):
                m = re.search(pattern, message)
                if m:
                    if idx == 0:
                        remaining_patterns[:1] = []
                        break  # out of `remaining_patterns` cycle
                    else:
                        skipped_patterns = remaining_patterns[:idx]
                        raise AssertionError(f"Few patterns were skipped: {skipped_patterns!r}")
                elif strict:
                    raise AssertionError(f"Unexpected log message: {message!r}")

            for pattern in prohibited:
                m = re.search(pattern, message)
                if m:
                    raise AssertionError(f"Prohibited log pattern found: {message!r} ~ {pattern!r}")

        if remaining_patterns:
            raise AssertionError(f"Few patterns were missed: {remaining_patterns!r}")

    return assert_logs_fn


#
# Sample Redfish documents.
#

POWER_URI = '/redfish/v1/Chassis/1/Power'

POWER = {
    '@odata.context': '/redfish/v1/$metadata#Power.Power',
    '@odata.id': POWER_URI,
    '@odata.type': '#Power.v1_5_2.Power',
    'Id': 'Power',
    'Name': 'Power',
    'Description': 'Power metrics of the chassis',
    'PowerControl': [
        {
            '@odata.id': f'{POWER_URI}#/PowerControl/0',
            'MemberId': '0',
            'Name': 'System Power Control',
            'PhysicalContext': 'Intake',
            'PowerAllocatedWatts': 800,
            'PowerAvailableWatts': 0,
            'PowerCapacityWatts': 800,
            'PowerConsumedWatts': 224,
            'PowerLimit': {
                'CorrectionInMs': 50,
                'LimitException': 'LogEventOnly',
                'LimitInWatts': 500,
            },
            'PowerMetrics': {
                'AverageConsumedWatts': 221,
                'IntervalInMin': 30.5,
                'MaxConsumedWatts': 252,
                'MinConsumedWatts': 208,
            },
            'PowerRequestedWatts': 800,
            'Status': {'Health': 'OK', 'State': 'Enabled'},
        },
    ],
    'PowerControl@odata.count': 1,
    'PowerSupplies': [
        {
            '@odata.id': f'{POWER_URI}#/PowerSupplies/0',
            'MemberId': '0',
            'Name': 'Power Supply Bay 1',
            'Assembly': {'@odata.id': '/redfish/v1/Chassis/1/Assembly'},
            'EfficiencyPercent': 94,
            'FirmwareVersion': '1.00',
            'HotPluggable': True,
            'IndicatorLED': 'Off',
            'InputRanges': [
                {
                    'InputType': 'AC',
                    'MaximumFrequencyHz': 63,
                    'MaximumVoltage': 264,
                    'MinimumFrequencyHz': 47,
                    'MinimumVoltage': 90,
                    'OutputWattage': 800,
                },
            ],
            'LastPowerOutputWatts': 325,
            'LineInputVoltage': 120,
            'LineInputVoltageType': 'ACLowLine',
            'Location': {'PartLocation': {'LocationType': 'Bay', 'LocationOrdinalValue': 1}},
            'Manufacturer': 'ManufacturerName',
            'Model': '499253-B21',
            'PartNumber': '0000001A3A',
            'PowerCapacityWatts': 800,
            'PowerSupplyType': 'AC',
            'SerialNumber': '1z0000001',
            'SparePartNumber': '0000001A3A',
            'Status': {'Health': 'OK', 'State': 'Enabled'},
            'Redundancy': [],
        },
        {
            '@odata.id': f'{POWER_URI}#/PowerSupplies/1',
            'MemberId': '1',
            'Name': 'Power Supply Bay 2',
            'IndicatorLED': 'Lit',
            'PowerSupplyType': 'AC',
            'Status': {'Health': 'Warning', 'State': 'Enabled'},
        },
    ],
    'PowerSupplies@odata.count': 2,
    'Redundancy': [
        {
            '@odata.id': f'{POWER_URI}#/Redundancy/0',
            'MemberId': '0',
            'Name': 'PowerSupply Redundancy Group 1',
            'Mode': 'Failover',
            'MaxNumSupported': 2,
            'MinNumNeeded': 1,
            'RedundancyEnabled': True,
            'RedundancySet': [
                {'@odata.id': f'{POWER_URI}#/PowerSupplies/0'},
                {'@odata.id': f'{POWER_URI}#/PowerSupplies/1'},
            ],
            'RedundancySet@odata.count': 2,
            'Status': {'Health': 'OK', 'State': 'Enabled'},
        },
    ],
    'Redundancy@odata.count': 1,
    'Voltages': [
        {
            '@odata.id': f'{POWER_URI}#/Voltages/0',
            'MemberId': '0',
            'Name': 'VRM1 Voltage',
            'LowerThresholdCritical': 11,
            'LowerThresholdFatal': 10,
            'LowerThresholdNonCritical': 11.5,
            'MaxReadingRange': 20,
            'MinReadingRange': 0,
            'PhysicalContext': 'VoltageRegulator',
            'ReadingVolts': 12,
            'SensorNumber': 11,
            'Status': {'Health': 'OK', 'State': 'Enabled'},
            'UpperThresholdCritical': 13,
            'UpperThresholdFatal': 15,
            'UpperThresholdNonCritical': 12.5,
        },
    ],
    'Voltages@odata.count': 1,
    'Oem': {'Vendor': {'Anything': ['goes', 1, None]}},
}


@pytest.fixture()
def power_body():
    return copy.deepcopy(POWER)


@pytest.fixture()
def power_raw(power_body):
    return json.dumps(power_body).encode('utf-8')


@pytest.fixture()
def numeric_power_body(power_body):
    """ The same document, but with integer member ids, as some firmware sends them. """
    for array in ['PowerControl', 'PowerSupplies', 'Redundancy', 'Voltages']:
        for member in power_body[array]:
            member['MemberId'] = int(member['MemberId'])
    return power_body
