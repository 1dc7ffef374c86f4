"""Expose catalog tools to the language model as callable bindings."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from mcp import types

from mcp_console._types import CapabilityCatalog, ToolDescriptor

ToolCaller = Callable[[str, dict[str, Any]], Awaitable[types.CallToolResult]]


@dataclass(frozen=True)
class ToolBinding:
    """One tool the model may call, with an executor that forwards to the service."""

    name: str
    description: str
    parameters: dict[str, Any]
    invoke: Callable[[dict[str, Any]], Awaitable[types.CallToolResult]]

    def to_openai(self) -> dict[str, Any]:
        """Render as an OpenAI chat-completions function tool."""
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.parameters or {"type": "object", "properties": {}},
            },
        }


def _bind(tool: ToolDescriptor, call_tool: ToolCaller) -> ToolBinding:
    async def invoke(arguments: dict[str, Any]) -> types.CallToolResult:
        return await call_tool(tool.name, arguments)

    return ToolBinding(
        name=tool.name,
        description=tool.description or "",
        parameters=tool.input_schema,
        invoke=invoke,
    )


def build_toolset(catalog: CapabilityCatalog, call_tool: ToolCaller) -> tuple[ToolBinding, ...]:
    """Build the immutable binding list for one catalog snapshot."""
    return tuple(_bind(tool, call_tool) for tool in catalog.tools)
