"""MCP stdio server wiring.

Registers every tool from the registry with FastMCP. Tool handlers return
the text payload; failures raise so the transport marks the result as an
error.
"""

import inspect
import logging
from collections.abc import Awaitable, Callable

from mcp.server.fastmcp import FastMCP

from sandboxfs.config import ServerConfig
from sandboxfs.tools.filesystem import FileSystemTools
from sandboxfs.tools.registry import ToolRegistry, ToolSpec

logger = logging.getLogger(__name__)


def build_registry(config: ServerConfig) -> ToolRegistry:
    """Create the registry holding every tool the server exposes."""
    return ToolRegistry([FileSystemTools(config)])


def _handler_for(registry: ToolRegistry, spec: ToolSpec) -> Callable[..., Awaitable[str]]:
    async def handler(**arguments) -> str:
        return await registry.call_text(spec.name, arguments)

    handler.__name__ = spec.name
    handler.__doc__ = spec.description
    # FastMCP derives the input schema from the signature
    handler.__signature__ = inspect.signature(spec.function).replace(return_annotation=str)
    return handler


def build_server(config: ServerConfig, registry: ToolRegistry | None = None) -> FastMCP:
    """Create a FastMCP server exposing the registry's tools."""
    registry = registry or build_registry(config)
    server = FastMCP(config.server_name)
    for spec in registry.list_tools():
        server.add_tool(_handler_for(registry, spec), name=spec.name, description=spec.description)
    return server


def run_server(config: ServerConfig) -> None:
    """Serve over stdio until the client disconnects."""
    server = build_server(config)
    logger.info(f"{config.server_name} running on stdio")
    logger.info(f"Base directory: {config.root}")
    server.run(transport="stdio")
