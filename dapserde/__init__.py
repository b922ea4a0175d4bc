"""dapserde - Structural serialization engine for protocol message types."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("dapserde")
except PackageNotFoundError:
    __version__ = "(local)"
