"""Base class for sandboxfs toolsets.

This module provides the abstract base class for creating toolsets. Toolsets
encapsulate related tools with shared dependencies, avoiding global state and
enabling dependency injection for testing.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any

from sandboxfs.config import ServerConfig
from sandboxfs.exceptions import SandboxFSError
from sandboxfs.utils.responses import create_error_response, create_success_response


class Toolset(ABC):
    """Base class for toolsets.

    Each toolset receives a ServerConfig instance with all necessary
    configuration, making it easy to point at a temporary root in tests.

    Example:
        >>> class MyTools(Toolset):
        ...     def get_tools(self):
        ...         return [self.my_tool]
        ...
        ...     async def my_tool(self, arg: str) -> dict:
        ...         return self._create_success_response(
        ...             result=f"Processed: {arg}",
        ...             message="Tool executed successfully"
        ...         )
    """

    def __init__(self, config: ServerConfig):
        """Initialize toolset with configuration.

        Args:
            config: Server configuration holding the sandbox root
        """
        self.config = config

    @abstractmethod
    def get_tools(self) -> list[Callable]:
        """Get list of tool functions.

        Tools are async callables whose type hints and docstrings describe
        them to the caller. The tool name is the function name.

        Returns:
            List of callable tool functions
        """
        pass

    def _create_success_response(self, result: Any, message: str = "") -> dict:
        """Create standardized success response.

        Args:
            result: Tool execution result
            message: Optional success message for logging/display

        Returns:
            Structured response dict with success=True
        """
        return create_success_response(result, message)

    def _create_error_response(self, error: str, message: str) -> dict:
        """Create standardized error response.

        Args:
            error: Machine-readable error code (e.g., "not_found")
            message: Human-friendly error message

        Returns:
            Structured response dict with success=False
        """
        return create_error_response(error, message)

    def _failure(self, action: str, error: SandboxFSError) -> dict:
        """Wrap a sandboxfs error as ``Failed to <action>: <cause>``."""
        return self._create_error_response(
            error=error.error_code, message=f"Failed to {action}: {error}"
        )
