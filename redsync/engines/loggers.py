"""
Per-resource logging: the log records carry the reference to the resource.

Everything logged via a `ResourceLogger` has the resource's URI and type
attached to the log record (as ``resource_ref``). The text formatters can
prefix the messages with that URI; the JSON formatters put the reference
into a separate field for the log parsers.
"""
import copy
import enum
import logging
from typing import Any, Dict, Iterable, MutableMapping, Optional, Tuple

from pythonjsonlogger.core import RESERVED_ATTRS
from pythonjsonlogger.json import JsonFormatter

REF_ATTR = 'resource_ref'
DEFAULT_JSON_REFKEY = 'resource'
NOISY_LOGGERS = ('asyncio', 'aiohttp')

_SEVERITIES: Tuple[Tuple[int, str], ...] = (
    (logging.DEBUG, 'debug'),
    (logging.INFO, 'info'),
    (logging.WARNING, 'warn'),
    (logging.ERROR, 'error'),
)


class LogFormat(enum.Enum):
    """ Log formats, as specified on CLI. """
    PLAIN = '%(message)s'
    FULL = '%(asctime)s %(levelname)-7.7s %(name)s: %(message)s'
    JSON = enum.auto()


def get_ref(record: logging.LogRecord) -> Optional[Dict[str, Optional[str]]]:
    return getattr(record, REF_ATTR, None)


def get_severity(levelno: int) -> str:
    for threshold, severity in _SEVERITIES:
        if levelno <= threshold:
            return severity
    return 'fatal'


class ResourceFormatter(logging.Formatter):
    """
    A formatter that optionally prefixes the messages with the resource's URI.

    Resources without a URI (e.g. not fetched yet) are prefixed with their type.
    The original record remains intact, since other handlers can format it too.
    """
    prefixing: bool = False

    def format(self, record: logging.LogRecord) -> str:
        ref = get_ref(record) if self.prefixing else None
        if ref:
            label = ref.get('uri') or ref.get('type')
            if label:
                record = copy.copy(record)
                record.msg = f"[{label}] {record.msg}"
        return super().format(record)


class TextFormatter(ResourceFormatter):
    def __init__(self, fmt: Optional[str] = None, *, prefixing: bool = False) -> None:
        super().__init__(fmt)
        self.prefixing = prefixing


class ResourceJsonFormatter(ResourceFormatter, JsonFormatter):
    def __init__(
            self,
            *args: Any,
            refkey: Optional[str] = None,
            prefixing: bool = False,
            **kwargs: Any,
    ) -> None:
        reserved: Iterable[str] = kwargs.pop('reserved_attrs', RESERVED_ATTRS)
        kwargs.update(reserved_attrs=set(reserved) | {REF_ATTR})
        kwargs.setdefault('timestamp', True)
        super().__init__(*args, **kwargs)
        self.refkey: str = refkey or DEFAULT_JSON_REFKEY
        self.prefixing = prefixing

    def add_fields(
            self,
            log_record: MutableMapping[str, Any],
            record: logging.LogRecord,
            message_dict: MutableMapping[str, Any],
    ) -> None:
        super().add_fields(log_record, record, message_dict)
        ref = get_ref(record)
        if ref is not None:
            log_record[self.refkey] = ref
        log_record.setdefault('severity', get_severity(record.levelno))


class ResourceLogger(logging.LoggerAdapter):
    """
    A logger/adapter to carry the resource identifiers for formatting.

    Constructed for each individual resource being fetched or updated.
    Only the URI and the type of the resource are carried, not the resource.
    """

    def __init__(self, *, uri: Optional[str], kind: Optional[str] = None) -> None:
        ref = {'uri': uri or None, 'type': kind or None}
        super().__init__(logging.getLogger('redsync.resources'), {REF_ATTR: ref})

    def process(
            self,
            msg: str,
            kwargs: MutableMapping[str, Any],
    ) -> Tuple[str, MutableMapping[str, Any]]:
        # The stdlib adapter replaces the call's extras; both are kept here.
        kwargs['extra'] = {**self.extra, **kwargs.get('extra', {})}
        return msg, kwargs


def make_formatter(
        log_format: Any = LogFormat.FULL,
        log_prefix: Optional[bool] = None,
        log_refkey: Optional[str] = None,
) -> ResourceFormatter:
    """
    Build a formatter for a log format: a known one, or a custom %-style string.

    The prefixes are on by default for the text formats, and off for JSON,
    where the reference goes to its own field anyway.
    """
    if log_format is LogFormat.JSON:
        return ResourceJsonFormatter(refkey=log_refkey, prefixing=bool(log_prefix))
    elif isinstance(log_format, LogFormat):
        fmt = log_format.value
    elif isinstance(log_format, str):
        fmt = log_format
    else:
        raise ValueError(f"Unsupported log format: {log_format!r}")
    return TextFormatter(fmt, prefixing=log_prefix is None or log_prefix)


def configure(
        debug: Optional[bool] = None,
        verbose: Optional[bool] = None,
        quiet: Optional[bool] = None,
        log_format: Any = LogFormat.FULL,
        log_prefix: Optional[bool] = None,
        log_refkey: Optional[str] = None,
) -> None:
    """ Set up the root logger for the command-line usage. """
    level = logging.DEBUG if debug or verbose else logging.WARNING if quiet else logging.INFO
    handler = logging.StreamHandler()
    handler.setFormatter(make_formatter(log_format=log_format, log_prefix=log_prefix, log_refkey=log_refkey))
    root = logging.getLogger()
    root.addHandler(handler)
    root.setLevel(level)

    # The libraries' own logs are only seen in the debug mode.
    for name in NOISY_LOGGERS:
        noisy = logging.getLogger(name)
        noisy.propagate = bool(debug)
        if not debug:
            noisy.handlers[:] = [logging.NullHandler()]
