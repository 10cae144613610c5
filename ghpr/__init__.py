"""Turn a local commit into a named branch ready for a pull request."""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("ghpr")
except PackageNotFoundError:
    # Fallback for development mode
    __version__ = "0.0.0-dev"
