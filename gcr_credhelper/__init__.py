"""gcr-credhelper: credential helper with GCR access token resolution."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("gcr-credhelper")
except PackageNotFoundError:
    __version__ = "dev"
