"""sandboxfs - File management tools confined to a single sandbox root."""

from importlib.metadata import PackageNotFoundError, version

# Read version from package metadata (pyproject.toml)
try:
    __version__ = version("sandboxfs")
except PackageNotFoundError:
    # Fallback for development environments where package isn't installed
    __version__ = "0.0.0.dev"

from sandboxfs.config import ServerConfig
from sandboxfs.tools.filesystem import FileSystemTools
from sandboxfs.tools.registry import ToolRegistry

__all__ = ["FileSystemTools", "ServerConfig", "ToolRegistry", "__version__"]
