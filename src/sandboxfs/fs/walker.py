"""Directory tree traversal for exploration and file search.

Both walks skip hidden entries (names starting with ``.``) and the names in
:data:`IGNORED_NAMES`. Entries are visited in name order so results are
stable across platforms. Symlinked directories are reported as files and
never descended into.

A directory that cannot be read does not abort the walk: ``explore`` records
an :class:`ErrorNode` for that subtree and ``search`` simply contributes no
matches from it.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from sandboxfs.exceptions import InvalidArgumentError, NotADirectoryPathError, PathNotFoundError
from sandboxfs.fs.oserrors import translate_os_error
from sandboxfs.fs.paths import SandboxPathResolver
from sandboxfs.fs.patterns import compile_pattern, matches

logger = logging.getLogger(__name__)

IGNORED_NAMES = frozenset({"node_modules"})

FILE_MARKER = "file"
TRUNCATED_MARKER = "..."
ERROR_PREFIX = "Error: "
DIRECTORY_SUFFIX = "/"

DEFAULT_EXPLORE_DEPTH = 2


@dataclass(frozen=True)
class FileNode:
    """Leaf for a non-directory entry."""


@dataclass(frozen=True)
class TruncatedNode:
    """Leaf marking that the depth limit stopped the walk here."""


@dataclass(frozen=True)
class ErrorNode:
    """Leaf for a directory that could not be read."""

    message: str


@dataclass(frozen=True)
class DirectoryNode:
    """Branch holding the visible children of a directory.

    Keys are entry names, with ``/`` appended for directories.
    """

    children: dict[str, "TreeNode"] = field(default_factory=dict)


TreeNode = DirectoryNode | FileNode | TruncatedNode | ErrorNode


def is_ignored(name: str) -> bool:
    """Return True for hidden names and names on the ignore list."""
    return name.startswith(".") or name in IGNORED_NAMES


def tree_to_json(node: TreeNode) -> dict | str:
    """Render a tree as plain JSON-compatible data.

    Directories become nested dicts; leaves become ``"file"``, ``"..."`` or
    ``"Error: <message>"``.
    """
    if isinstance(node, DirectoryNode):
        return {name: tree_to_json(child) for name, child in node.children.items()}
    if isinstance(node, FileNode):
        return FILE_MARKER
    if isinstance(node, TruncatedNode):
        return TRUNCATED_MARKER
    return f"{ERROR_PREFIX}{node.message}"


def _visible_entries(directory: Path) -> list[os.DirEntry]:
    with os.scandir(directory) as it:
        entries = [entry for entry in it if not is_ignored(entry.name)]
    return sorted(entries, key=lambda entry: entry.name)


class TreeWalker:
    """Walk the sandbox tree.

    Example:
        >>> walker = TreeWalker(SandboxPathResolver(Path("/srv/projects")))
        >>> tree_to_json(walker.explore(max_depth=1))
        {'api/': '...', 'README.md': 'file'}
        >>> walker.search("*.md")
        ['README.md', 'api/docs/index.md']
    """

    def __init__(self, resolver: SandboxPathResolver):
        self._resolver = resolver

    def explore(self, path: str = ".", max_depth: int = DEFAULT_EXPLORE_DEPTH) -> TreeNode:
        """Build the nested structure below ``path``.

        The starting directory is always listed. A directory found at
        depth ``d`` (the starting directory's children are at depth 1) is
        listed only while ``d < max_depth``; otherwise it is replaced by the
        truncation marker. With ``max_depth == 0`` every top-level entry is
        reported as truncated.

        Raises:
            InvalidArgumentError: If ``max_depth`` is negative
            OutOfSandboxError: If ``path`` escapes the sandbox
        """
        if max_depth < 0:
            raise InvalidArgumentError(f"Depth must be zero or positive, got: {max_depth}")

        start = self._resolver.resolve(path)
        return self._explore(start, 0, max_depth)

    def _explore(self, directory: Path, depth: int, max_depth: int) -> TreeNode:
        try:
            entries = _visible_entries(directory)
        except OSError as e:
            error = translate_os_error(e, self._resolver.to_relative(directory))
            logger.debug(f"Unreadable directory during explore: {directory} ({error})")
            return ErrorNode(str(error))

        children: dict[str, TreeNode] = {}
        for entry in entries:
            is_dir = entry.is_dir(follow_symlinks=False)
            key = entry.name + DIRECTORY_SUFFIX if is_dir else entry.name
            if depth >= max_depth:
                children[key] = TruncatedNode()
            elif is_dir:
                if depth + 1 >= max_depth:
                    children[key] = TruncatedNode()
                else:
                    children[key] = self._explore(Path(entry.path), depth + 1, max_depth)
            else:
                children[key] = FileNode()
        return DirectoryNode(children)

    def search(self, pattern: str, path: str = ".") -> list[str]:
        """Find files whose name matches ``pattern`` anywhere below ``path``.

        Directories are always descended into and never reported
        themselves. Unreadable subdirectories are skipped, so the result may
        be partial.

        Returns:
            Sandbox-relative paths of matching files, depth-first in name order

        Raises:
            InvalidArgumentError: If the pattern is empty
            PathNotFoundError: If ``path`` does not exist
            NotADirectoryPathError: If ``path`` is not a directory
        """
        compile_pattern(pattern)

        start = self._resolver.resolve(path)
        if not start.exists():
            raise PathNotFoundError(f"Path not found: {path}")
        if not start.is_dir():
            raise NotADirectoryPathError(f"Path is not a directory: {path}")

        results: list[str] = []
        self._search(start, pattern, results)
        return results

    def _search(self, directory: Path, pattern: str, results: list[str]) -> None:
        try:
            entries = _visible_entries(directory)
        except OSError as e:
            logger.debug(f"Skipping unreadable directory during search: {directory} ({e})")
            return

        for entry in entries:
            if entry.is_dir(follow_symlinks=False):
                self._search(Path(entry.path), pattern, results)
            elif matches(entry.name, pattern):
                results.append(self._resolver.to_relative(Path(entry.path)))
