"""Translation of OS errors into the sandboxfs exception hierarchy."""

import errno
import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sandboxfs.exceptions import (
    AlreadyExistsError,
    DirectoryNotEmptyError,
    IOFailureError,
    NotADirectoryPathError,
    NotAFilePathError,
    PathNotFoundError,
    SandboxFSError,
)

logger = logging.getLogger(__name__)


def translate_os_error(error: OSError, path: str) -> SandboxFSError:
    """Map an OSError onto the matching sandboxfs exception.

    Args:
        error: Error raised by the OS call
        path: Caller-facing (sandbox-relative) path to mention in the message

    Returns:
        Exception instance ready to be raised
    """
    if isinstance(error, FileNotFoundError):
        return PathNotFoundError(f"No such file or directory: {path}")
    if isinstance(error, FileExistsError):
        return AlreadyExistsError(f"Already exists: {path}")
    if isinstance(error, NotADirectoryError):
        return NotADirectoryPathError(f"Not a directory: {path}")
    if isinstance(error, IsADirectoryError):
        return NotAFilePathError(f"Is a directory: {path}")
    if error.errno == errno.ENOTEMPTY:
        return DirectoryNotEmptyError(f"Directory not empty: {path}")
    if isinstance(error, PermissionError):
        return IOFailureError(f"Permission denied: {path}", original_error=error)
    reason = error.strerror or str(error)
    return IOFailureError(f"{reason}: {path}", original_error=error)


@contextmanager
def os_errors(path: str) -> Iterator[None]:
    """Re-raise any OSError inside the block as a sandboxfs exception.

    Example:
        >>> with os_errors("docs/readme.md"):
        ...     target.unlink()
    """
    try:
        yield
    except OSError as e:
        translated = translate_os_error(e, path)
        logger.debug(f"{type(e).__name__} on {path} -> {translated.error_code}")
        raise translated from e
