"""Language-model access over an OpenAI-compatible chat-completions API."""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from mcp import types
from openai import AsyncOpenAI

from mcp_console.config import ModelConfig
from mcp_console.toolset import ToolBinding

logger = logging.getLogger("mcp_console.llm")


@dataclass
class ToolResult:
    """Outcome of one model-requested tool call."""

    name: str
    arguments: dict[str, Any]
    result: types.CallToolResult


@dataclass
class Generation:
    text: str = ""
    tool_results: list[ToolResult] = field(default_factory=list)


class LanguageModel:
    """Single-step text generation, optionally with tool calling.

    The underlying client is created on first use, so a missing API key only
    fails the call that needs the provider.
    """

    def __init__(self, config: ModelConfig, *, client: AsyncOpenAI | None = None) -> None:
        self._config = config
        self._client = client

    @property
    def model_name(self) -> str:
        return self._config.name

    def _get_client(self) -> AsyncOpenAI:
        if self._client is None:
            self._client = AsyncOpenAI(
                api_key=os.environ.get(self._config.api_key_env),
                base_url=self._config.base_url,
            )
        return self._client

    async def generate(self, prompt: str) -> str:
        """Send ``prompt`` verbatim with no tool access and return the text."""
        generation = await self.generate_with_tools(prompt, ())
        return generation.text

    async def generate_with_tools(
        self, prompt: str, tools: Sequence[ToolBinding]
    ) -> Generation:
        """Let the model answer or call tools; tool calls are executed once, not looped."""
        request: dict[str, Any] = {
            "model": self._config.name,
            "messages": [{"role": "user", "content": prompt}],
        }
        if tools:
            request["tools"] = [t.to_openai() for t in tools]

        logger.debug("-> %s (%d tools) %s", self._config.name, len(tools), prompt[:200])
        response = await self._get_client().chat.completions.create(**request)
        message = response.choices[0].message

        generation = Generation(text=message.content or "")
        bindings = {t.name: t for t in tools}
        for call in message.tool_calls or []:
            binding = bindings.get(call.function.name)
            if binding is None:
                logger.warning("Model requested unknown tool %r, skipping", call.function.name)
                continue
            arguments = json.loads(call.function.arguments or "{}")
            logger.debug("   tool call %s %s", binding.name, arguments)
            result = await binding.invoke(arguments)
            generation.tool_results.append(
                ToolResult(name=binding.name, arguments=arguments, result=result)
            )

        logger.debug(
            "<- %d chars, %d tool results", len(generation.text), len(generation.tool_results)
        )
        return generation
