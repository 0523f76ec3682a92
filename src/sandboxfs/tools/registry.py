"""Tool registry: name lookup, argument validation and dispatch.

The registry is the only thing a transport needs. It maps an incoming tool
name and argument record onto one toolset coroutine and returns either the
response envelope (:meth:`ToolRegistry.call`) or the rendered text payload
(:meth:`ToolRegistry.call_text`).
"""

import inspect
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError, create_model

from sandboxfs.exceptions import ToolExecutionError, ToolNotFoundError
from sandboxfs.tools.toolset import Toolset
from sandboxfs.utils.responses import create_error_response, render_text

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ToolSpec:
    """A registered tool: its callable, description and argument model."""

    name: str
    description: str
    function: Callable
    arguments_model: type[BaseModel]

    def input_schema(self) -> dict:
        """JSON schema of the tool's arguments."""
        return self.arguments_model.model_json_schema()


def _describe(function: Callable) -> str:
    """First paragraph of the docstring, joined onto one line."""
    doc = inspect.getdoc(function) or ""
    return " ".join(doc.split("\n\n")[0].split())


def _arguments_model(name: str, function: Callable) -> type[BaseModel]:
    fields: dict[str, Any] = {}
    for param in inspect.signature(function).parameters.values():
        default = ... if param.default is inspect.Parameter.empty else param.default
        fields[param.name] = (param.annotation, default)
    return create_model(
        f"{name}_arguments",
        __config__=ConfigDict(extra="forbid", coerce_numbers_to_str=True),
        **fields,
    )


class ToolRegistry:
    """Registry of tools collected from one or more toolsets.

    Example:
        >>> registry = ToolRegistry([FileSystemTools(config)])
        >>> await registry.call_text("read_file", {"path": "README.md"})
        '# Projects...'
    """

    def __init__(self, toolsets: list[Toolset]):
        self._tools: dict[str, ToolSpec] = {}
        for toolset in toolsets:
            for function in toolset.get_tools():
                name = function.__name__
                if name in self._tools:
                    raise ValueError(f"Duplicate tool name: {name}")
                self._tools[name] = ToolSpec(
                    name=name,
                    description=_describe(function),
                    function=function,
                    arguments_model=_arguments_model(name, function),
                )
        logger.debug(f"Registered {len(self._tools)} tools")

    def list_tools(self) -> list[ToolSpec]:
        """Return the registered tools in registration order."""
        return list(self._tools.values())

    def get(self, name: str) -> ToolSpec:
        """Look up a tool by name.

        Raises:
            ToolNotFoundError: If no tool has that name
        """
        try:
            return self._tools[name]
        except KeyError:
            raise ToolNotFoundError(name) from None

    async def call(self, name: str, arguments: dict[str, Any] | None = None) -> dict:
        """Validate ``arguments`` and run the tool.

        Arguments set to None are treated as omitted, so tool defaults apply.

        Returns:
            The tool's response envelope; invalid arguments yield an
            ``invalid_argument`` error envelope

        Raises:
            ToolNotFoundError: If no tool has that name
        """
        spec = self.get(name)
        provided = {key: value for key, value in (arguments or {}).items() if value is not None}

        try:
            validated = spec.arguments_model.model_validate(provided)
        except ValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(part) for part in err['loc']) or 'arguments'}: {err['msg']}"
                for err in e.errors()
            )
            logger.warning(f"Invalid arguments for {name}: {problems}")
            return create_error_response(
                error="invalid_argument",
                message=f"Failed to call {name}: invalid arguments ({problems})",
            )

        kwargs = {field: getattr(validated, field) for field in type(validated).model_fields}
        logger.debug(f"Calling tool {name} with {sorted(kwargs)}")
        response = await spec.function(**kwargs)
        if not response.get("success"):
            logger.info(f"Tool {name} failed: {response.get('message')}")
        return response

    async def call_text(self, name: str, arguments: dict[str, Any] | None = None) -> str:
        """Run the tool and return its text payload.

        Raises:
            ToolNotFoundError: If no tool has that name
            ToolExecutionError: If the tool reports a failure
        """
        response = await self.call(name, arguments)
        if not response.get("success"):
            raise ToolExecutionError(name, response.get("error", "error"), response["message"])
        return render_text(response)
