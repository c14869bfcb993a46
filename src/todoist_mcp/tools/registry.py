"""
Tool registry.

Maps tool name to its description, pydantic input model and handler. The
registry is the single source both ``tools/list`` and argument validation
read from, so a tool's published schema is exactly what its arguments are
checked against.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Iterator, Type

from pydantic import BaseModel

from todoist_mcp.settings import Settings

Handler = Callable[[Any, "ToolContext"], Awaitable[str]]


@dataclass(frozen=True)
class ToolContext:
    """Per-process collaborators handed to every handler."""

    client: Any
    settings: Settings


@dataclass(frozen=True)
class Tool:
    name: str
    description: str
    input_model: Type[BaseModel]
    handler: Handler
    annotations: dict[str, Any] = field(default_factory=dict)

    def definition(self) -> dict[str, Any]:
        """ToolDefinition as published by ``tools/list``."""
        definition: dict[str, Any] = {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_model.model_json_schema(),
        }
        if self.annotations:
            definition["annotations"] = dict(self.annotations)
        return definition


class ToolRegistry:
    """
    Ordered collection of tools.

    Usage:
        registry = ToolRegistry()

        @registry.tool(name="get_projects", input_model=EmptyInput)
        async def get_projects(params, ctx):
            ...
    """

    def __init__(self) -> None:
        self._tools: dict[str, Tool] = {}

    def register(self, tool: Tool) -> Tool:
        if tool.name in self._tools:
            raise ValueError(f"Tool {tool.name!r} is already registered")
        self._tools[tool.name] = tool
        return tool

    def tool(
        self,
        *,
        name: str,
        input_model: Type[BaseModel],
        description: str | None = None,
        annotations: dict[str, Any] | None = None,
    ) -> Callable[[Handler], Handler]:
        """
        Decorator registering an async handler.

        The description defaults to the first paragraph of the handler's
        docstring.
        """

        def decorator(fn: Handler) -> Handler:
            doc = (fn.__doc__ or "").strip().split("\n\n")[0]
            self.register(
                Tool(
                    name=name,
                    description=description or " ".join(doc.split()),
                    input_model=input_model,
                    handler=fn,
                    annotations=annotations or {},
                )
            )
            return fn

        return decorator

    def get(self, name: str) -> Tool | None:
        return self._tools.get(name)

    def names(self) -> list[str]:
        return list(self._tools)

    def list_definitions(self) -> list[dict[str, Any]]:
        """Every tool exactly once, in registration order."""
        return [t.definition() for t in self._tools.values()]

    def __iter__(self) -> Iterator[Tool]:
        return iter(self._tools.values())

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, name: object) -> bool:
        return name in self._tools
