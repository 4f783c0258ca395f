import functools
import logging

import click.testing
import pytest

from redsync.cli import CLIControls, main


@pytest.fixture(autouse=True)
def restore_logging():
    # Every command configures the logging, and adds a handler to the root logger.
    logger = logging.getLogger()
    handlers = list(logger.handlers)
    level = logger.level
    try:
        yield
    finally:
        logger.handlers[:] = handlers
        logger.setLevel(level)


@pytest.fixture()
def runner():
    runner = click.testing.CliRunner()
    return runner


@pytest.fixture()
def controls(fake_client):
    return CLIControls(client=fake_client)


@pytest.fixture()
def invoke(runner, controls):
    return functools.partial(runner.invoke, main, obj=controls)


@pytest.fixture()
def power_served(fake_client, power_raw):
    fake_client.add('/redfish/v1/Chassis/1/Power', power_raw)
