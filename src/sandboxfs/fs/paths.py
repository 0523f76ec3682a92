"""Sandbox path resolution.

Every filesystem operation goes through :class:`SandboxPathResolver` before
touching the OS. The resolver joins the caller-supplied path onto the sandbox
root, normalizes ``.`` and ``..`` lexically, and rejects anything that lands
outside the root.
"""

import logging
import os
from pathlib import Path

from sandboxfs.exceptions import OutOfSandboxError

logger = logging.getLogger(__name__)


def _is_within(candidate: str, root: str) -> bool:
    """Return True if ``candidate`` equals ``root`` or lies beneath it.

    Both arguments must already be normalized absolute paths. The separator
    boundary keeps ``/srv/root2`` from matching ``/srv/root``.
    """
    if os.path.normcase(candidate) == os.path.normcase(root):
        return True
    prefix = root if root.endswith(os.sep) else root + os.sep
    return os.path.normcase(candidate).startswith(os.path.normcase(prefix))


class SandboxPathResolver:
    """Resolve caller paths to absolute paths confined to a sandbox root.

    Example:
        >>> resolver = SandboxPathResolver(Path("/srv/projects"))
        >>> resolver.resolve("app/src/../README.md")
        PosixPath('/srv/projects/app/README.md')
        >>> resolver.resolve("../etc/passwd")
        Traceback (most recent call last):
        ...
        sandboxfs.exceptions.OutOfSandboxError: Path resolves outside the sandbox root: ../etc/passwd
    """

    def __init__(self, root: Path):
        self._root = Path(os.path.normpath(os.path.abspath(root)))
        self._real_root = os.path.realpath(self._root)

    @property
    def root(self) -> Path:
        """Absolute sandbox root."""
        return self._root

    def resolve(self, relative_path: str | None) -> Path:
        """Resolve ``relative_path`` against the sandbox root.

        Empty paths and ``"."`` resolve to the root itself. Absolute paths are
        accepted only when they already point inside the root.

        Args:
            relative_path: Path relative to the sandbox root

        Returns:
            Normalized absolute path inside the sandbox

        Raises:
            OutOfSandboxError: If the path (or the real target of a symlink
                along it) lies outside the sandbox root
        """
        requested = relative_path or "."
        joined = os.path.join(str(self._root), requested)
        normalized = os.path.normpath(joined)

        if not _is_within(normalized, str(self._root)):
            logger.warning(f"Path outside sandbox: {requested} -> {normalized}")
            raise OutOfSandboxError(requested, normalized)

        # A symlink inside the root may still point elsewhere
        real = os.path.realpath(normalized)
        if not _is_within(real, self._real_root):
            logger.warning(f"Symlink target outside sandbox: {requested} -> {real}")
            raise OutOfSandboxError(requested, real)

        logger.debug(f"Path resolved: {requested} -> {normalized}")
        return Path(normalized)

    def to_relative(self, path: Path) -> str:
        """Express an absolute sandbox path relative to the root.

        Paths are reported with forward slashes regardless of platform.
        The root itself is reported as ``"."``.
        """
        return Path(path).relative_to(self._root).as_posix()
