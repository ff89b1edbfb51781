"""sessionline: persistent animated status line for command-line tools."""

from importlib import metadata

try:
    __version__ = metadata.version("sessionline")
except metadata.PackageNotFoundError:  # pragma: no cover
    __version__ = "0.0.0"

__all__ = ["__version__"]
