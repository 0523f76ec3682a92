"""Custom exceptions for sandboxed filesystem errors.

This module provides a hierarchy of exception classes used by the filesystem
layer. Every class carries a machine-readable ``error_code`` that the tool
layer copies into the error response envelope.
"""


class SandboxFSError(Exception):
    """Base exception for all sandboxfs errors.

    This is the root of the exception hierarchy. All custom sandboxfs
    exceptions should inherit from this class.
    """

    error_code = "error"


class PathNotFoundError(SandboxFSError):
    """Raised when a path does not exist inside the sandbox."""

    error_code = "not_found"


class AlreadyExistsError(SandboxFSError):
    """Raised when an entry is created over one that already exists."""

    error_code = "already_exists"


class DestinationExistsError(AlreadyExistsError):
    """Raised by copy/move when the destination exists and overwrite is off."""

    error_code = "destination_exists"


class NotADirectoryPathError(SandboxFSError):
    """Raised when a directory operation targets something else."""

    error_code = "not_a_directory"


class NotAFilePathError(SandboxFSError):
    """Raised when a file operation targets something else."""

    error_code = "not_a_file"


class DirectoryNotEmptyError(SandboxFSError):
    """Raised when a non-recursive delete hits a directory with contents."""

    error_code = "directory_not_empty"


class OutOfSandboxError(SandboxFSError):
    """Raised when a path resolves outside the sandbox root.

    Attributes:
        path: Path as supplied by the caller
        resolved: Normalized absolute path that failed the containment check
    """

    error_code = "out_of_sandbox"

    def __init__(self, path: str, resolved: str | None = None):
        """Initialize OutOfSandboxError.

        Args:
            path: Path as supplied by the caller
            resolved: Normalized absolute path, if it was computed
        """
        self.path = path
        self.resolved = resolved
        super().__init__(f"Path resolves outside the sandbox root: {path}")


class InvalidArgumentError(SandboxFSError):
    """Raised for malformed arguments (bad octal mode, empty pattern, ...)."""

    error_code = "invalid_argument"


class UnsupportedOperationError(SandboxFSError):
    """Raised when the platform cannot perform the requested operation."""

    error_code = "unsupported"


class IOFailureError(SandboxFSError):
    """Generic OS-level failure.

    Attributes:
        original_error: Underlying OSError (optional)
    """

    error_code = "io_failure"

    def __init__(self, message: str, original_error: OSError | None = None):
        """Initialize IOFailureError.

        Args:
            message: Error message
            original_error: Underlying OSError
        """
        self.original_error = original_error
        super().__init__(message)


class ConfigurationError(SandboxFSError):
    """Raised when server configuration is invalid."""

    error_code = "configuration_error"


class ToolNotFoundError(SandboxFSError):
    """Raised when a caller asks for a tool that is not registered."""

    error_code = "tool_not_found"

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown tool: {name}")


class ToolExecutionError(SandboxFSError):
    """Raised by the registry when a tool returns a failure envelope.

    Attributes:
        tool: Tool name
        code: Machine-readable error code from the failure envelope
    """

    error_code = "tool_execution_failed"

    def __init__(self, tool: str, code: str, message: str):
        self.tool = tool
        self.code = code
        super().__init__(message)
