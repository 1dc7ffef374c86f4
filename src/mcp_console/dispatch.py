"""Interactive main menu and the tool, resource, prompt and query flows."""

from __future__ import annotations

import json
import logging
from enum import StrEnum

from mcp_console._types import PromptDescriptor, ToolDescriptor
from mcp_console._utils import first_text, uri_placeholders
from mcp_console.operator import Choice
from mcp_console.session import ConsoleContext

logger = logging.getLogger("mcp_console.dispatch")


class MenuOption(StrEnum):
    """Main menu entries, in display order."""

    QUERY = "Query"
    TOOLS = "Tools"
    RESOURCES = "Resources"
    PROMPTS = "Prompts"


class DispatchLoop:
    """Main menu state machine. Every flow returns to the main menu."""

    def __init__(self, ctx: ConsoleContext) -> None:
        self._ctx = ctx
        self._flows = {
            MenuOption.QUERY: self.query_flow,
            MenuOption.TOOLS: self.tool_flow,
            MenuOption.RESOURCES: self.resource_flow,
            MenuOption.PROMPTS: self.prompt_flow,
        }

    async def run(self) -> None:
        """Loop until the process is stopped."""
        while True:
            await self.run_once()

    async def run_once(self) -> None:
        option = await self._ctx.operator.select(
            "What would you like to do",
            [Choice(label=o.value, value=o.value) for o in MenuOption],
        )
        if option is None:
            return
        logger.debug("Menu: %s", option)
        await self._flows[MenuOption(option)]()

    # -- Tools ---------------------------------------------------------------

    async def tool_flow(self) -> None:
        ctx = self._ctx
        name = await ctx.operator.select(
            "Select a tool",
            [
                Choice(label=t.display_name, value=t.name, description=t.description)
                for t in ctx.catalog.tools
            ],
        )
        tool = ctx.catalog.find_tool(name)
        if tool is None:
            ctx.operator.echo("Tool not found.", err=True)
            return
        await self._invoke_tool(tool)

    async def _invoke_tool(self, tool: ToolDescriptor) -> None:
        ctx = self._ctx
        args: dict[str, str] = {}
        for key, schema in tool.properties.items():
            kind = schema.get("type", "any") if isinstance(schema, dict) else "any"
            args[key] = await ctx.operator.text(f"Enter value for {key} ({kind}):")

        result = await ctx.session.call_tool(tool.name, args)
        text = first_text(result.content)
        ctx.operator.echo(text if text is not None else "No text content returned.")

    # -- Resources -----------------------------------------------------------

    async def resource_flow(self) -> None:
        ctx = self._ctx
        choices = [
            Choice(label=r.name, value=r.uri, description=r.description)
            for r in ctx.catalog.resources
        ] + [
            Choice(label=t.name, value=t.uri_template, description=t.description)
            for t in ctx.catalog.resource_templates
        ]
        selected = await ctx.operator.select("Select a resource", choices)
        uri = ctx.catalog.find_resource(selected)
        if uri is None:
            ctx.operator.echo("Resource not found.", err=True)
            return
        await self._read_resource(uri)

    async def _read_resource(self, uri: str) -> None:
        ctx = self._ctx
        final_uri = uri
        for token in uri_placeholders(uri):
            value = await ctx.operator.text(f"Enter value for {token[1:-1]}:")
            final_uri = final_uri.replace(token, value, 1)

        logger.debug("Reading resource %s", final_uri)
        result = await ctx.session.read_resource(final_uri)
        text = getattr(result.contents[0], "text", None)
        # Non-JSON content is not handled here and surfaces to the caller.
        ctx.operator.echo(json.dumps(json.loads(text), indent=2))

    # -- Prompts -------------------------------------------------------------

    async def prompt_flow(self) -> None:
        ctx = self._ctx
        name = await ctx.operator.select(
            "Select a prompt",
            [
                Choice(label=p.name, value=p.name, description=p.description)
                for p in ctx.catalog.prompts
            ],
        )
        prompt = ctx.catalog.find_prompt(name)
        if prompt is None:
            ctx.operator.echo("Prompt not found.", err=True)
            return
        await self._run_prompt(prompt)

    async def _run_prompt(self, prompt: PromptDescriptor) -> None:
        ctx = self._ctx
        args: dict[str, str] = {}
        for arg in prompt.arguments:
            args[arg.name] = await ctx.operator.text(f"Enter value for {arg.name}:")

        response = await ctx.session.get_prompt(prompt.name, args)
        logger.debug("get_prompt %s response:\n%s", prompt.name, response.model_dump_json(indent=2))

        for message in response.messages:
            ai_text = await ctx.relay.run_message(message)
            if not ai_text:
                continue
            ctx.operator.echo(f"output ai: {ai_text}")
            await ctx.relay.save_user_from_output(ctx, ai_text)

    # -- Query ---------------------------------------------------------------

    async def query_flow(self) -> None:
        ctx = self._ctx
        query = await ctx.operator.text("Enter your query")
        generation = await ctx.llm.generate_with_tools(query, ctx.toolset)

        text = generation.text
        if not text and generation.tool_results:
            text = first_text(generation.tool_results[0].result.content) or ""
        ctx.operator.echo(text or "No text generated.")
