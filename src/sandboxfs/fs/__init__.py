"""Sandboxed filesystem layer: path resolution, traversal, operations, archives."""

from sandboxfs.fs.archive import ArchivePipeline, ArchiveResult, extracted_name
from sandboxfs.fs.operations import (
    DirectoryEntry,
    ExistenceInfo,
    FileInfo,
    FileOperations,
    parse_mode,
    supports_permissions,
)
from sandboxfs.fs.paths import SandboxPathResolver
from sandboxfs.fs.patterns import compile_pattern, matches
from sandboxfs.fs.walker import (
    DirectoryNode,
    ErrorNode,
    FileNode,
    TreeNode,
    TreeWalker,
    TruncatedNode,
    tree_to_json,
)

__all__ = [
    "ArchivePipeline",
    "ArchiveResult",
    "DirectoryEntry",
    "DirectoryNode",
    "ErrorNode",
    "ExistenceInfo",
    "FileInfo",
    "FileNode",
    "FileOperations",
    "SandboxPathResolver",
    "TreeNode",
    "TreeWalker",
    "TruncatedNode",
    "compile_pattern",
    "extracted_name",
    "matches",
    "parse_mode",
    "supports_permissions",
    "tree_to_json",
]
