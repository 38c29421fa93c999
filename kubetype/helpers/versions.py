"""
Detecting the client's own version.

The codebase does not contain the version directly: it is taken from
the installed package's metadata. The version is determined only once
at startup when the code is loaded.
"""
import importlib.metadata
from typing import Optional

version: Optional[str] = None

try:
    name, *_ = __name__.split('.')  # usually "kubetype", unless renamed/forked.
    version = importlib.metadata.version(name)
except importlib.metadata.PackageNotFoundError:
    pass  # running from the sources, not installed.
