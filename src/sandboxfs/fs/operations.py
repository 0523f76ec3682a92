"""Single-entry filesystem operations confined to the sandbox.

Each method resolves its path arguments through the sandbox resolver, checks
its preconditions, then performs one primary OS action. OS failures are
re-raised as :mod:`sandboxfs.exceptions` types.

Copy, move and rename check the destination before acting. The check and the
action are not atomic: another process may create the destination in between.
No locking is attempted.
"""

import errno
import logging
import os
import re
import shutil
import stat
from dataclasses import asdict, dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import Literal

from sandboxfs.exceptions import (
    DestinationExistsError,
    InvalidArgumentError,
    NotADirectoryPathError,
    NotAFilePathError,
    PathNotFoundError,
    UnsupportedOperationError,
)
from sandboxfs.fs.oserrors import os_errors
from sandboxfs.fs.paths import SandboxPathResolver

logger = logging.getLogger(__name__)

EntryKind = Literal["file", "directory"]

_OCTAL_MODE = re.compile(r"^0?[0-7]{3}$|^[0-7]{4}$")


@dataclass(frozen=True)
class DirectoryEntry:
    """One entry of a directory listing."""

    name: str
    kind: EntryKind
    path: str

    def to_dict(self) -> dict:
        return {"name": self.name, "type": self.kind, "path": self.path}


@dataclass(frozen=True)
class ExistenceInfo:
    """Result of an existence probe. ``kind`` is None when absent."""

    exists: bool
    kind: Literal["file", "directory", "other"] | None = None

    def to_dict(self) -> dict:
        return {"exists": self.exists, "type": self.kind}


@dataclass(frozen=True)
class FileInfo:
    """Snapshot of OS metadata for one entry.

    ``permissions`` holds the low three octal digits of the mode, e.g. ``"644"``.
    """

    size: int
    created: datetime
    modified: datetime
    accessed: datetime
    is_directory: bool
    is_file: bool
    permissions: str

    def to_dict(self) -> dict:
        data = asdict(self)
        for key in ("created", "modified", "accessed"):
            data[key] = data[key].isoformat()
        return data


def _timestamp(value: float) -> datetime:
    return datetime.fromtimestamp(value, tz=UTC)


def parse_mode(mode: str) -> int:
    """Parse an octal permission string such as ``"755"`` or ``"0755"``.

    Raises:
        InvalidArgumentError: If ``mode`` is not three or four octal digits
    """
    if not isinstance(mode, str) or not _OCTAL_MODE.match(mode.strip()):
        raise InvalidArgumentError(f"Invalid octal mode: {mode!r}")
    return int(mode.strip(), 8)


def supports_permissions() -> bool:
    """Return True when the platform honours POSIX permission bits."""
    return os.name == "posix"


class FileOperations:
    """Filesystem operations on sandbox-relative paths.

    Example:
        >>> ops = FileOperations(SandboxPathResolver(Path("/srv/projects")))
        >>> ops.write_text("notes.txt", "hello")
        5
        >>> ops.read_text("notes.txt")
        'hello'
    """

    def __init__(self, resolver: SandboxPathResolver):
        self._resolver = resolver

    @property
    def resolver(self) -> SandboxPathResolver:
        return self._resolver

    def read_text(self, path: str) -> str:
        """Read a whole file as UTF-8 text.

        Line endings are returned exactly as stored. Bytes that are not valid
        UTF-8 are replaced with U+FFFD.
        """
        target = self._resolver.resolve(path)
        self._require_file(target, path)
        with os_errors(path), open(target, encoding="utf-8", errors="replace", newline="") as f:
            return f.read()

    def write_text(self, path: str, content: str) -> int:
        """Write ``content`` as UTF-8, creating or replacing the file.

        Parent directories are not created.

        Returns:
            Number of bytes written
        """
        target = self._resolver.resolve(path)
        data = content.encode("utf-8")
        with os_errors(path), open(target, "wb") as f:
            f.write(data)
        logger.info(f"Wrote {len(data)} bytes to {path}")
        return len(data)

    def list_directory(self, path: str = ".") -> list[DirectoryEntry]:
        """List one level of a directory, hidden entries included."""
        target = self._resolver.resolve(path)
        self._require_directory(target, path)

        entries = []
        with os_errors(path), os.scandir(target) as it:
            for entry in it:
                kind: EntryKind = "directory" if entry.is_dir(follow_symlinks=False) else "file"
                entries.append(
                    DirectoryEntry(
                        name=entry.name,
                        kind=kind,
                        path=self._resolver.to_relative(Path(entry.path)),
                    )
                )
        return sorted(entries, key=lambda e: e.name)

    def create_directory(self, path: str, recursive: bool = True) -> Path:
        """Create a directory.

        With ``recursive`` missing parents are created and an existing
        directory is not an error. Without it the parent must exist and the
        directory must not.
        """
        target = self._resolver.resolve(path)
        with os_errors(path):
            target.mkdir(parents=recursive, exist_ok=recursive)
        logger.info(f"Created directory {path} (recursive={recursive})")
        return target

    def copy_file(self, source: str, destination: str, overwrite: bool = False) -> None:
        """Copy a file byte for byte."""
        src = self._resolver.resolve(source)
        dst = self._resolver.resolve(destination)
        self._require_file(src, source)
        self._ensure_destination_free(dst, destination, overwrite)
        with os_errors(destination):
            shutil.copyfile(src, dst)
        logger.info(f"Copied {source} -> {destination}")

    def move(self, source: str, destination: str, overwrite: bool = False) -> None:
        """Move a file or directory.

        Uses an atomic rename when source and destination share a volume and
        falls back to copy-and-delete otherwise. The fallback never replaces
        an existing directory, even with ``overwrite``.
        """
        src = self._resolver.resolve(source)
        dst = self._resolver.resolve(destination)
        if not os.path.lexists(src):
            raise PathNotFoundError(f"Source not found: {source}")
        self._ensure_destination_free(dst, destination, overwrite)

        with os_errors(source):
            try:
                os.replace(src, dst)
            except OSError as e:
                if e.errno != errno.EXDEV:
                    raise
                # shutil.move would nest the source inside an existing directory
                if dst.is_dir() and not dst.is_symlink():
                    raise DestinationExistsError(
                        f"Destination is an existing directory: {destination}"
                    ) from e
                logger.debug(f"Cross-device move, copying instead: {source} -> {destination}")
                shutil.move(src, dst)
        logger.info(f"Moved {source} -> {destination}")

    def delete_file(self, path: str) -> None:
        """Delete a single file (or symlink). Directories are refused."""
        target = self._resolver.resolve(path)
        if not os.path.lexists(target):
            raise PathNotFoundError(f"File not found: {path}")
        if target.is_dir() and not target.is_symlink():
            raise NotAFilePathError(f"Path is a directory, not a file: {path}")
        with os_errors(path):
            target.unlink()
        logger.info(f"Deleted file {path}")

    def delete_directory(self, path: str, recursive: bool = False) -> None:
        """Delete a directory.

        Without ``recursive`` the directory must be empty. With it the
        contents are removed first; entries that disappear concurrently are
        ignored.
        """
        target = self._resolver.resolve(path)
        if target == self._resolver.root:
            raise InvalidArgumentError("Refusing to delete the sandbox root")
        if not os.path.lexists(target):
            raise PathNotFoundError(f"Directory not found: {path}")
        if target.is_symlink() or not target.is_dir():
            raise NotADirectoryPathError(f"Path is not a directory: {path}")

        with os_errors(path):
            if recursive:
                shutil.rmtree(target, onexc=_ignore_missing)
            else:
                target.rmdir()
        logger.info(f"Deleted directory {path} (recursive={recursive})")

    def exists(self, path: str) -> ExistenceInfo:
        """Probe a path. A missing path is a result, not an error."""
        target = self._resolver.resolve(path)
        try:
            st = target.stat()
        except FileNotFoundError:
            return ExistenceInfo(exists=False)
        except OSError:
            # Unreadable parent or a symlink loop
            if os.path.lexists(target):
                return ExistenceInfo(exists=True, kind="other")
            return ExistenceInfo(exists=False)

        if stat.S_ISDIR(st.st_mode):
            return ExistenceInfo(exists=True, kind="directory")
        if stat.S_ISREG(st.st_mode):
            return ExistenceInfo(exists=True, kind="file")
        return ExistenceInfo(exists=True, kind="other")

    def get_info(self, path: str) -> FileInfo:
        """Return size, timestamps, kind and permission bits for a path."""
        target = self._resolver.resolve(path)
        with os_errors(path):
            st = target.stat()

        created = getattr(st, "st_birthtime", None) or st.st_ctime
        return FileInfo(
            size=st.st_size,
            created=_timestamp(created),
            modified=_timestamp(st.st_mtime),
            accessed=_timestamp(st.st_atime),
            is_directory=stat.S_ISDIR(st.st_mode),
            is_file=stat.S_ISREG(st.st_mode),
            permissions=format(stat.S_IMODE(st.st_mode) & 0o777, "03o"),
        )

    def rename(self, source: str, new_name: str) -> str:
        """Rename an entry in place, keeping it in the same directory.

        Returns:
            Sandbox-relative path of the renamed entry
        """
        if not new_name or new_name in (".", "..") or "/" in new_name or os.sep in new_name:
            raise InvalidArgumentError(f"New name must be a plain file name: {new_name!r}")

        src = self._resolver.resolve(source)
        if src == self._resolver.root:
            raise InvalidArgumentError("Refusing to rename the sandbox root")
        if not os.path.lexists(src):
            raise PathNotFoundError(f"Source not found: {source}")

        destination = self._resolver.to_relative(src.parent / new_name)
        dst = self._resolver.resolve(destination)
        self._ensure_destination_free(dst, destination, overwrite=False)

        with os_errors(source):
            os.rename(src, dst)
        logger.info(f"Renamed {source} -> {destination}")
        return destination

    def change_permissions(self, path: str, mode: str) -> int:
        """Apply an octal permission mode such as ``"0755"``.

        Returns:
            The numeric mode that was applied

        Raises:
            InvalidArgumentError: If ``mode`` is not valid octal
            UnsupportedOperationError: On platforms without POSIX permissions
        """
        numeric = parse_mode(mode)
        target = self._resolver.resolve(path)
        if not supports_permissions():
            raise UnsupportedOperationError(
                f"Permission bits are not supported on this platform ({os.name})"
            )
        with os_errors(path):
            os.chmod(target, numeric)
        logger.info(f"Changed permissions of {path} to {oct(numeric)}")
        return numeric

    def _require_file(self, target: Path, path: str) -> None:
        if not target.exists():
            raise PathNotFoundError(f"File not found: {path}")
        if not target.is_file():
            raise NotAFilePathError(f"Path is not a file: {path}")

    def _require_directory(self, target: Path, path: str) -> None:
        if not target.exists():
            raise PathNotFoundError(f"Path not found: {path}")
        if not target.is_dir():
            raise NotADirectoryPathError(f"Path is not a directory: {path}")

    def _ensure_destination_free(self, target: Path, path: str, overwrite: bool) -> None:
        """Raise unless ``target`` is absent or may be overwritten.

        "Not found" is the success path; any other stat failure propagates.
        """
        if overwrite:
            return
        try:
            with os_errors(path):
                target.lstat()
        except PathNotFoundError:
            return
        raise DestinationExistsError(f"Destination already exists: {path}")


def _ignore_missing(function, path, exc: BaseException) -> None:
    if isinstance(exc, FileNotFoundError):
        return
    raise exc
