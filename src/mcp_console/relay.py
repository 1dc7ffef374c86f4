"""Run service-supplied prompts through the language model.

Used two ways: as the MCP sampling callback for server-initiated
``sampling/createMessage`` requests, and by the prompt flow, which also
extracts a user record from each output and saves it via ``create-user``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from mcp import types

from mcp_console._utils import (
    append_user_record,
    first_text,
    parse_json_object,
    write_latest_output,
)
from mcp_console.extraction import extract_user
from mcp_console.llm import LanguageModel
from mcp_console.operator import Operator

if TYPE_CHECKING:
    from mcp_console.session import ConsoleContext

logger = logging.getLogger("mcp_console.relay")

CREATE_USER_TOOL = "create-user"


class PromptRelay:
    def __init__(self, operator: Operator, llm: LanguageModel) -> None:
        self._operator = operator
        self._llm = llm

    async def run_message(self, message: types.PromptMessage | types.SamplingMessage) -> str | None:
        """Show a text message, ask for a go-ahead, and return the model's reply.

        Returns None for non-text content or when the operator declines.
        """
        content = message.content
        if not isinstance(content, types.TextContent):
            logger.debug("Skipping %s content", getattr(content, "type", "unknown"))
            return None

        self._operator.echo(content.text)
        run = await self._operator.confirm("Would you like to run the above prompt", default=True)
        if not run:
            return None

        return await self._llm.generate(content.text)

    async def sampling_callback(
        self,
        context: Any,
        params: types.CreateMessageRequestParams,
    ) -> types.CreateMessageResult:
        """Answer a server-initiated createMessage request with one combined reply."""
        texts: list[str] = []
        for message in params.messages:
            text = await self.run_message(message)
            if text is not None:
                texts.append(text)

        logger.info(
            "Sampling request: %d messages, %d answered", len(params.messages), len(texts)
        )
        return types.CreateMessageResult(
            role="assistant",
            model=self._llm.model_name,
            stopReason="endTurn",
            content=types.TextContent(type="text", text="\n".join(texts)),
        )

    async def save_user_from_output(self, ctx: ConsoleContext, text: str) -> bool:
        """Extract a user from model output and persist it through ``create-user``.

        Returns True when the record was appended to the local log.
        """
        operator = ctx.operator
        write_latest_output(ctx.output.latest_output, text)

        user = extract_user(text)
        if user is None:
            operator.echo("AI output did not contain a valid user payload.")
            return False

        tool = ctx.catalog.find_tool(CREATE_USER_TOOL)
        if tool is None:
            operator.echo(f"Tool not found: {CREATE_USER_TOOL}")
            return False

        logger.debug("Calling %s with %s", tool.name, user.as_arguments())
        result = await ctx.session.call_tool(tool.name, user.as_arguments())

        response_text = first_text(result.content)
        if response_text is None:
            operator.echo("Create-user: no response text")
        else:
            operator.echo(response_text)

        if parse_json_object(response_text) is None:
            logger.debug("create-user response is not a JSON object, not saving")
            return False

        append_user_record(ctx.output.user_records, user)
        return True
