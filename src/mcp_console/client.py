"""Connect to the MCP server over stdio and assemble the console session."""

from __future__ import annotations

import logging
import os
from contextlib import AsyncExitStack

from mcp import ClientSession, StdioServerParameters, types
from mcp.client.stdio import stdio_client

from mcp_console import __version__
from mcp_console.catalog import fetch_catalog
from mcp_console.config import Settings
from mcp_console.dispatch import DispatchLoop
from mcp_console.llm import LanguageModel
from mcp_console.operator import ClickOperator, Operator
from mcp_console.relay import PromptRelay
from mcp_console.session import ConsoleContext

logger = logging.getLogger("mcp_console.client")


class McpConnection:
    """Context manager that launches the server and yields a ready ConsoleContext.

    The sampling callback is registered before ``initialize`` so the server
    sees the client's sampling capability.

    Usage::

        async with McpConnection(settings) as ctx:
            await DispatchLoop(ctx).run()
    """

    def __init__(
        self,
        settings: Settings,
        *,
        operator: Operator | None = None,
        llm: LanguageModel | None = None,
    ) -> None:
        self._settings = settings
        self._operator = operator or ClickOperator()
        self._llm = llm or LanguageModel(settings.model)
        self._stack: AsyncExitStack | None = None

    def _server_params(self) -> StdioServerParameters:
        server = self._settings.server
        env = None
        if server.env:
            env = {**os.environ, **server.env}
        return StdioServerParameters(
            command=server.command,
            args=server.args,
            env=env,
            cwd=server.cwd,
        )

    async def __aenter__(self) -> ConsoleContext:
        settings = self._settings
        relay = PromptRelay(self._operator, self._llm)

        client_info = types.Implementation(name=settings.client_name, version=__version__)

        self._stack = AsyncExitStack()
        try:
            params = self._server_params()
            if settings.server.stderr == "ignore":
                errlog = self._stack.enter_context(open(os.devnull, "w"))
                transport = stdio_client(params, errlog=errlog)
            else:
                transport = stdio_client(params)
            read, write = await self._stack.enter_async_context(transport)

            session = await self._stack.enter_async_context(
                ClientSession(
                    read,
                    write,
                    sampling_callback=relay.sampling_callback,
                    client_info=client_info,
                )
            )
            init = await session.initialize()
            logger.info(
                "Connected to %s %s", init.serverInfo.name, init.serverInfo.version or ""
            )

            catalog = await fetch_catalog(session)
        except BaseException:
            await self._stack.aclose()
            raise

        return ConsoleContext.build(
            session,
            catalog,
            llm=self._llm,
            operator=self._operator,
            relay=relay,
            output=settings.output,
        )

    async def __aexit__(self, *exc: object) -> None:
        if self._stack is not None:
            await self._stack.aclose()
            self._stack = None


async def run_console(settings: Settings) -> None:
    """Connect, then hand control to the main menu until the process stops."""
    async with McpConnection(settings) as ctx:
        ctx.operator.echo("You are connected!")
        await DispatchLoop(ctx).run()
