"""Shared test fixtures for mcp-console."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from pathlib import Path
from types import SimpleNamespace
from typing import Any

import pytest
from mcp import types

from mcp_console.catalog import fetch_catalog
from mcp_console.config import ModelConfig, OutputConfig
from mcp_console.llm import LanguageModel
from mcp_console.operator import Choice, Operator
from mcp_console.relay import PromptRelay
from mcp_console.session import ConsoleContext

MOCK_SERVER = Path(__file__).parent / "mock_server.py"


def text_result(text: str, **kwargs: Any) -> types.CallToolResult:
    return types.CallToolResult(content=[types.TextContent(type="text", text=text)], **kwargs)


class FakeSession:
    """In-memory stand-in for ``mcp.ClientSession``."""

    def __init__(
        self,
        *,
        tools: Sequence[types.Tool] = (),
        prompts: Sequence[types.Prompt] = (),
        resources: Sequence[types.Resource] = (),
        templates: Sequence[types.ResourceTemplate] = (),
    ) -> None:
        self.tools = list(tools)
        self.prompts = list(prompts)
        self.resources = list(resources)
        self.templates = list(templates)
        self.tool_handlers: dict[str, Callable[[dict[str, Any]], types.CallToolResult]] = {}
        self.resource_texts: dict[str, str] = {}
        self.prompt_messages: dict[str, list[types.PromptMessage]] = {}
        self.calls: list[tuple[str, Any]] = []

    async def list_tools(self) -> types.ListToolsResult:
        self.calls.append(("list_tools", None))
        return types.ListToolsResult(tools=self.tools)

    async def list_prompts(self) -> types.ListPromptsResult:
        self.calls.append(("list_prompts", None))
        return types.ListPromptsResult(prompts=self.prompts)

    async def list_resources(self) -> types.ListResourcesResult:
        self.calls.append(("list_resources", None))
        return types.ListResourcesResult(resources=self.resources)

    async def list_resource_templates(self) -> types.ListResourceTemplatesResult:
        self.calls.append(("list_resource_templates", None))
        return types.ListResourceTemplatesResult(resourceTemplates=self.templates)

    async def call_tool(
        self, name: str, arguments: dict[str, Any] | None = None
    ) -> types.CallToolResult:
        self.calls.append(("call_tool", (name, arguments)))
        return self.tool_handlers[name](arguments or {})

    async def read_resource(self, uri: Any) -> types.ReadResourceResult:
        self.calls.append(("read_resource", str(uri)))
        return types.ReadResourceResult(
            contents=[
                types.TextResourceContents(
                    uri=str(uri), mimeType="application/json", text=self.resource_texts[str(uri)]
                )
            ]
        )

    async def get_prompt(
        self, name: str, arguments: dict[str, str] | None = None
    ) -> types.GetPromptResult:
        self.calls.append(("get_prompt", (name, arguments)))
        return types.GetPromptResult(messages=self.prompt_messages[name])

    def calls_to(self, method: str) -> list[Any]:
        return [args for name, args in self.calls if name == method]


class ScriptedOperator(Operator):
    """Answers prompts from a fixed script and records everything shown."""

    def __init__(self, answers: Sequence[Any] = ()) -> None:
        self.answers = list(answers)
        self.prompts: list[str] = []
        self.menus: list[list[Choice]] = []
        self.output: list[str] = []

    def _next(self, message: str) -> Any:
        self.prompts.append(message)
        if not self.answers:
            raise AssertionError(f"No scripted answer for prompt: {message!r}")
        return self.answers.pop(0)

    async def select(self, message: str, choices: Sequence[Choice]) -> str | None:
        self.menus.append(list(choices))
        if not choices:
            return None
        answer = self._next(message)
        assert answer in [c.value for c in choices], f"{answer!r} not offered for {message!r}"
        return str(answer)

    async def text(self, message: str) -> str:
        return str(self._next(message))

    async def confirm(self, message: str, *, default: bool = True) -> bool:
        return bool(self._next(message))

    def echo(self, message: str = "", *, err: bool = False) -> None:
        self.output.append(message)

    @property
    def transcript(self) -> str:
        return "\n".join(self.output)


class FakeCompletions:
    """Mimics ``AsyncOpenAI().chat.completions`` with canned replies."""

    def __init__(self) -> None:
        self.replies: list[SimpleNamespace] = []
        self.requests: list[dict[str, Any]] = []

    def queue_text(self, text: str | None) -> None:
        self.replies.append(_completion(content=text))

    def queue_tool_call(self, name: str, arguments: str, text: str | None = None) -> None:
        call = SimpleNamespace(
            id=f"call_{len(self.replies)}",
            type="function",
            function=SimpleNamespace(name=name, arguments=arguments),
        )
        self.replies.append(_completion(content=text, tool_calls=[call]))

    async def create(self, **kwargs: Any) -> SimpleNamespace:
        self.requests.append(kwargs)
        return self.replies.pop(0)


def _completion(
    content: str | None, tool_calls: list[SimpleNamespace] | None = None
) -> SimpleNamespace:
    message = SimpleNamespace(content=content, tool_calls=tool_calls)
    return SimpleNamespace(choices=[SimpleNamespace(message=message)])


@pytest.fixture
def completions() -> FakeCompletions:
    return FakeCompletions()


@pytest.fixture
def llm(completions: FakeCompletions) -> LanguageModel:
    client = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    return LanguageModel(ModelConfig(name="test-model"), client=client)  # type: ignore[arg-type]


@pytest.fixture
def output_config(tmp_path: Path) -> OutputConfig:
    return OutputConfig(
        latest_output=tmp_path / "data" / "ai-latest-output.txt",
        user_records=tmp_path / "data" / "users.json",
    )


@pytest.fixture
def create_user_tool() -> types.Tool:
    return types.Tool(
        name="create-user",
        description="Create a new user in the database",
        inputSchema={
            "type": "object",
            "properties": {
                "name": {"type": "string"},
                "email": {"type": "string"},
                "address": {"type": "string"},
                "phone": {"type": "string"},
            },
            "required": ["name", "email"],
        },
    )


@pytest.fixture
def make_context(
    llm: LanguageModel, output_config: OutputConfig
) -> Callable[..., Any]:
    async def _make(session: FakeSession, operator: ScriptedOperator) -> ConsoleContext:
        catalog = await fetch_catalog(session)
        session.calls.clear()
        return ConsoleContext.build(
            session,
            catalog,
            llm=llm,
            operator=operator,
            relay=PromptRelay(operator, llm),
            output=output_config,
        )

    return _make
