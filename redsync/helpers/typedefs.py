"""
Type aliases that differ between the type-checkers and the runtime.

``logging.LoggerAdapter`` is generic in the type stubs, but cannot be
subscripted at runtime on the older Pythons.
"""
import logging
from typing import TYPE_CHECKING, Any, Union

if TYPE_CHECKING:
    LoggerAdapter = logging.LoggerAdapter[Any]
else:
    LoggerAdapter = logging.LoggerAdapter

# Any of the stdlib loggers or adapters, incl. the per-resource ones.
Logger = Union[logging.Logger, LoggerAdapter]
