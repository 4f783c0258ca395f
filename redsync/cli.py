import asyncio
import copy
import dataclasses
import functools
import json
from typing import Any, Awaitable, Callable, Optional, TypeVar

import aiohttp
import click

from redsync.clients import api, auth, errors, logins
from redsync.engines import loggers
from redsync.models import common, decoding, power
from redsync.structs import configuration, credentials

_T = TypeVar('_T')


@dataclasses.dataclass()
class CLIControls:
    """ Controls which are impossible to pass via CLI. """
    client: Optional[api.RemoteClient] = None
    settings: Optional[configuration.ClientSettings] = None


@dataclasses.dataclass(frozen=True)
class Connection:
    """ The connection-related options as given on CLI, not yet logged in. """
    info: Optional[credentials.ConnectionInfo]
    settings: configuration.ClientSettings


class LogFormatParamType(click.Choice):

    def __init__(self) -> None:
        super().__init__(choices=[v.name.lower() for v in loggers.LogFormat])

    def convert(self, value: Any, param: Any, ctx: Any) -> loggers.LogFormat:
        name: str = super().convert(value, param, ctx)
        return loggers.LogFormat[name.upper()]


def logging_options(fn: Callable[..., Any]) -> Callable[..., Any]:
    """ A decorator to configure logging in all commands the same way."""
    @click.option('-v', '--verbose', is_flag=True)
    @click.option('-d', '--debug', is_flag=True)
    @click.option('-q', '--quiet', is_flag=True)
    @click.option('--log-format', type=LogFormatParamType(), default='full')
    @click.option('--log-refkey', type=str)
    @click.option('--log-prefix/--no-log-prefix', default=None)
    @functools.wraps(fn)  # to preserve other opts/args
    def wrapper(verbose: bool, quiet: bool, debug: bool,
                log_format: loggers.LogFormat = loggers.LogFormat.FULL,
                log_prefix: Optional[bool] = False,
                log_refkey: Optional[str] = None,
                *args: Any, **kwargs: Any) -> Any:
        loggers.configure(debug=debug, verbose=verbose, quiet=quiet,
                          log_format=log_format, log_refkey=log_refkey, log_prefix=log_prefix)
        return fn(*args, **kwargs)

    return wrapper


def connection_options(fn: Callable[..., Any]) -> Callable[..., Any]:
    """ A decorator to collect the server & credentials in all commands the same way."""
    @click.option('-s', '--server', type=str)
    @click.option('-u', '--username', type=str)
    @click.option('-p', '--password', type=str)
    @click.option('--token', type=str)
    @click.option('--insecure', is_flag=True, default=None)
    @click.option('--ca-path', type=click.Path(exists=True, dir_okay=False))
    @click.option('-c', '--config', 'config_path', type=click.Path(exists=True, dir_okay=False))
    @click.option('--timeout', type=float)
    @click.option('--concurrency', type=click.IntRange(min=1))
    @click.make_pass_decorator(CLIControls, ensure=True)
    @functools.wraps(fn)  # to preserve other opts/args
    def wrapper(__controls: CLIControls,
                server: Optional[str], username: Optional[str], password: Optional[str],
                token: Optional[str], insecure: Optional[bool], ca_path: Optional[str],
                config_path: Optional[str], timeout: Optional[float], concurrency: Optional[int],
                *args: Any, **kwargs: Any) -> Any:
        # The injected settings are shared with the caller, so they are only a template.
        settings = copy.deepcopy(__controls.settings) if __controls.settings is not None else configuration.ClientSettings()
        if timeout is not None:
            settings.networking.request_timeout = timeout
        if concurrency is not None:
            settings.fetching.max_concurrency = concurrency

        explicit = dict(server=server, username=username, password=password,
                        token=token, insecure=insecure, ca_path=ca_path)
        try:
            info: Optional[credentials.ConnectionInfo]
            if config_path:
                base = logins.login_with_config(config_path)
                info = logins.login_with_values(**dict(
                    dataclasses.asdict(base),
                    **{key: val for key, val in explicit.items() if val is not None},
                ))
            elif server:
                info = logins.login_with_values(**explicit)
            else:
                info = None
        except credentials.LoginError as e:
            raise click.UsageError(str(e)) from e

        connection = Connection(info=info, settings=settings)
        return fn(__controls, connection, *args, **kwargs)

    return wrapper


def run(
        controls: CLIControls,
        connection: Connection,
        fn: Callable[[api.RemoteClient, configuration.ClientSettings], Awaitable[_T]],
) -> _T:
    """ Run an async command with either the injected client, or a real one. """
    return asyncio.run(_run(controls, connection, fn))


async def _run(
        controls: CLIControls,
        connection: Connection,
        fn: Callable[[api.RemoteClient, configuration.ClientSettings], Awaitable[_T]],
) -> _T:
    try:
        if controls.client is not None:
            return await fn(controls.client, connection.settings)
        if connection.info is None:
            raise click.UsageError("The server is not specified: use --server or --config.")
        async with auth.APIContext(connection.info) as context:
            client = api.APIClient(context, settings=connection.settings)
            return await fn(client, connection.settings)
    except credentials.LoginError as e:
        raise click.UsageError(str(e)) from e
    except errors.APIError as e:
        raise click.ClickException(f"HTTP {e.status}: {e.message or e.code or 'no details'}") from e
    except (decoding.DecodeError, aiohttp.ClientError) as e:
        raise click.ClickException(str(e) or repr(e)) from e


def echo_json(value: Any) -> None:
    click.echo(json.dumps(decoding.encode(value), indent=2, sort_keys=False))


@click.version_option(prog_name='redsync', package_name='redsync')
@click.group(name='redsync', context_settings=dict(
    auto_envvar_prefix='REDSYNC',
))
def main() -> None:
    pass


@main.command('power')
@logging_options
@connection_options
@click.argument('uri')
def power_cmd(__controls: CLIControls, connection: Connection, uri: str) -> None:
    """ Show the power metrics & controls of a chassis. """
    async def fn(client: api.RemoteClient, settings: configuration.ClientSettings) -> power.Power:
        return await power.get_power(uri, client=client)

    echo_json(run(__controls, connection, fn))


@main.command('powers')
@logging_options
@connection_options
@click.argument('uri')
def powers_cmd(__controls: CLIControls, connection: Connection, uri: str) -> None:
    """ Show all the power resources of a collection, even if some have failed. """
    async def fn(client: api.RemoteClient, settings: configuration.ClientSettings) -> Any:
        return await power.list_referenced_powers(uri, client=client, settings=settings)

    result = run(__controls, connection, fn)
    echo_json(list(result))
    for failed_uri, exc in result.failures.items():
        click.echo(f"Failed: {failed_uri}: {exc}", err=True)
    if result.failures:
        raise click.exceptions.Exit(1)


@main.command('psu-led')
@logging_options
@connection_options
@click.argument('uri')
@click.argument('index', type=click.IntRange(min=0))
@click.argument('state', type=click.Choice([v.value for v in common.IndicatorLED]))
def psu_led(__controls: CLIControls, connection: Connection, uri: str, index: int, state: str) -> None:
    """ Set the indicator LED of a power supply (by its index in the power resource). """
    async def fn(client: api.RemoteClient, settings: configuration.ClientSettings) -> None:
        resource = await power.get_power(uri, client=client)
        if index >= len(resource.power_supplies):
            raise click.BadParameter(f"There are only {len(resource.power_supplies)} power supplies.",
                                     param_hint='INDEX')
        supply = resource.power_supplies[index]
        supply.indicator_led = common.IndicatorLED(state)
        await supply.update()

    run(__controls, connection, fn)


@main.command('power-limit')
@logging_options
@connection_options
@click.argument('uri')
@click.argument('index', type=click.IntRange(min=0))
@click.argument('watts', type=click.FloatRange(min=0))
@click.option('--exception', 'limit_exception',
              type=click.Choice([v.value for v in power.PowerLimitException]))
def power_limit(
        __controls: CLIControls,
        connection: Connection,
        uri: str,
        index: int,
        watts: float,
        limit_exception: Optional[str],
) -> None:
    """ Set the power limit of a power control (by its index in the power resource). """
    async def fn(client: api.RemoteClient, settings: configuration.ClientSettings) -> None:
        resource = await power.get_power(uri, client=client)
        if index >= len(resource.power_control):
            raise click.BadParameter(f"There are only {len(resource.power_control)} power controls.",
                                     param_hint='INDEX')
        control = resource.power_control[index]
        control.power_limit.limit_in_watts = watts
        if limit_exception is not None:
            control.power_limit.limit_exception = power.PowerLimitException(limit_exception)
        await control.update()

    run(__controls, connection, fn)
