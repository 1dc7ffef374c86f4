"""Per-session context shared by the dispatch loop and the prompt relay."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol

from mcp import types

from mcp_console._types import CapabilityCatalog
from mcp_console.catalog import CatalogSource
from mcp_console.config import OutputConfig
from mcp_console.llm import LanguageModel
from mcp_console.operator import Operator
from mcp_console.relay import PromptRelay
from mcp_console.toolset import ToolBinding, build_toolset


class McpSession(CatalogSource, Protocol):
    """The subset of ``mcp.ClientSession`` the console drives."""

    async def call_tool(
        self, name: str, arguments: dict[str, Any] | None = None
    ) -> types.CallToolResult: ...

    async def read_resource(self, uri: Any) -> types.ReadResourceResult: ...

    async def get_prompt(
        self, name: str, arguments: dict[str, str] | None = None
    ) -> types.GetPromptResult: ...


@dataclass(frozen=True)
class ConsoleContext:
    """Everything one interactive session needs, fixed at startup."""

    session: McpSession
    catalog: CapabilityCatalog
    toolset: tuple[ToolBinding, ...]
    llm: LanguageModel
    operator: Operator
    relay: PromptRelay
    output: OutputConfig

    @classmethod
    def build(
        cls,
        session: McpSession,
        catalog: CapabilityCatalog,
        *,
        llm: LanguageModel,
        operator: Operator,
        relay: PromptRelay,
        output: OutputConfig,
    ) -> ConsoleContext:
        return cls(
            session=session,
            catalog=catalog,
            toolset=build_toolset(catalog, session.call_tool),
            llm=llm,
            operator=operator,
            relay=relay,
            output=output,
        )
