import json
import logging

import pytest

from redsync.engines.loggers import LogFormat, ResourceJsonFormatter, ResourceLogger, \
                                    TextFormatter, configure, get_severity, make_formatter

POWER_REF = {'uri': '/redfish/v1/Chassis/1/Power', 'type': 'Power'}


def make_record(**extra):
    record = logging.LogRecord('redsync.resources', logging.INFO, __file__, 1, "hello", (), None)
    for key, val in extra.items():
        setattr(record, key, val)
    return record


@pytest.mark.parametrize('log_format, log_prefix, cls, prefixing', [
    (LogFormat.FULL, False, TextFormatter, False),
    (LogFormat.FULL, True, TextFormatter, True),
    (LogFormat.FULL, None, TextFormatter, True),
    (LogFormat.PLAIN, True, TextFormatter, True),
    (LogFormat.JSON, False, ResourceJsonFormatter, False),
    (LogFormat.JSON, True, ResourceJsonFormatter, True),
    (LogFormat.JSON, None, ResourceJsonFormatter, False),
    ('%(message)s', False, TextFormatter, False),
    ('%(message)s', None, TextFormatter, True),
])
def test_formatter_selection(log_format, log_prefix, cls, prefixing):
    formatter = make_formatter(log_format=log_format, log_prefix=log_prefix)
    assert type(formatter) is cls
    assert formatter.prefixing is prefixing


def test_unsupported_format():
    with pytest.raises(ValueError, match=r"Unsupported log format"):
        make_formatter(log_format=123)


def test_prefixing_with_uri():
    formatter = TextFormatter('%(message)s', prefixing=True)
    record = make_record(resource_ref=POWER_REF)
    assert formatter.format(record) == "[/redfish/v1/Chassis/1/Power] hello"
    assert record.msg == "hello"  # intact for other handlers


def test_prefixing_with_type_only():
    formatter = TextFormatter('%(message)s', prefixing=True)
    record = make_record(resource_ref={'uri': None, 'type': 'Power'})
    assert formatter.format(record) == "[Power] hello"


def test_no_prefixing_without_reference():
    formatter = TextFormatter('%(message)s', prefixing=True)
    assert formatter.format(make_record()) == "hello"


def test_no_prefixing_when_disabled():
    formatter = TextFormatter('%(message)s')
    assert formatter.format(make_record(resource_ref=POWER_REF)) == "hello"


def test_json_with_reference():
    formatter = ResourceJsonFormatter()
    data = json.loads(formatter.format(make_record(resource_ref=POWER_REF)))
    assert data['message'] == 'hello'
    assert data['resource'] == POWER_REF
    assert data['severity'] == 'info'
    assert 'timestamp' in data
    assert 'resource_ref' not in data


def test_json_without_reference():
    formatter = ResourceJsonFormatter()
    data = json.loads(formatter.format(make_record()))
    assert 'resource' not in data


def test_json_with_custom_refkey():
    formatter = ResourceJsonFormatter(refkey='redfish')
    data = json.loads(formatter.format(make_record(resource_ref=POWER_REF)))
    assert data['redfish'] == POWER_REF


def test_json_with_prefixing():
    formatter = ResourceJsonFormatter(prefixing=True)
    data = json.loads(formatter.format(make_record(resource_ref=POWER_REF)))
    assert data['message'] == "[/redfish/v1/Chassis/1/Power] hello"


@pytest.mark.parametrize('level, severity', [
    (logging.DEBUG, 'debug'),
    (logging.INFO, 'info'),
    (logging.WARNING, 'warn'),
    (logging.ERROR, 'error'),
    (logging.CRITICAL, 'fatal'),
])
def test_severities(level, severity):
    assert get_severity(level) == severity

    record = make_record()
    record.levelno = level
    data = json.loads(ResourceJsonFormatter().format(record))
    assert data['severity'] == severity


def test_resource_logger_carries_the_reference(caplog):
    caplog.set_level(logging.DEBUG)
    logger = ResourceLogger(uri='/redfish/v1/Chassis/1/Power', kind='Power')
    logger.info("hello", extra={'more': 'info'})
    assert len(caplog.records) == 1
    record = caplog.records[0]
    assert record.name == 'redsync.resources'
    assert record.resource_ref == POWER_REF
    assert record.more == 'info'


def test_resource_logger_with_empty_uri(caplog):
    caplog.set_level(logging.DEBUG)
    ResourceLogger(uri='').debug("hello")
    assert caplog.records[0].resource_ref == {'uri': None, 'type': None}


def test_logstream_prefixes_the_messages(logstream):
    ResourceLogger(uri='/x', kind='Power').info("hello")
    logging.getLogger('redsync.other').info("world")
    assert logstream.getvalue() == "prefix [/x] hello\nprefix world\n"


@pytest.mark.parametrize('kwargs, level', [
    (dict(), logging.INFO),
    (dict(verbose=True), logging.DEBUG),
    (dict(debug=True), logging.DEBUG),
    (dict(quiet=True), logging.WARNING),
])
def test_configure_levels(kwargs, level):
    root = logging.getLogger()
    handlers, old_level = list(root.handlers), root.level
    try:
        configure(**kwargs)
        assert root.level == level
        assert len(root.handlers) == len(handlers) + 1
        assert logging.getLogger('aiohttp').propagate is bool(kwargs.get('debug'))
    finally:
        root.handlers[:] = handlers
        root.setLevel(old_level)
        logging.getLogger('aiohttp').propagate = True
        logging.getLogger('aiohttp').handlers[:] = []
        logging.getLogger('asyncio').propagate = True
        logging.getLogger('asyncio').handlers[:] = []
