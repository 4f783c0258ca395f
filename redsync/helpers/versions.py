"""
Detecting the package's own version.

The version is determined only once at startup when the code is loaded.
"""
import importlib.metadata
from typing import Optional

version: Optional[str] = None

try:
    version = importlib.metadata.version('redsync')
except importlib.metadata.PackageNotFoundError:
    pass  # running from the source tree, not installed.
