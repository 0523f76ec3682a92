"""Tool implementations for sandboxfs."""

from sandboxfs.tools.filesystem import FileSystemTools
from sandboxfs.tools.registry import ToolRegistry, ToolSpec
from sandboxfs.tools.toolset import Toolset

__all__ = ["FileSystemTools", "ToolRegistry", "ToolSpec", "Toolset"]
