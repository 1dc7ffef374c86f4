"""Operator-facing prompts and output."""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass

import click


@dataclass(frozen=True)
class Choice:
    """One entry in a single-select menu."""

    label: str
    value: str
    description: str | None = None


class Operator(ABC):
    """The human at the terminal. Every prompt suspends the caller."""

    @abstractmethod
    async def select(self, message: str, choices: Sequence[Choice]) -> str | None:
        """Return the chosen value, or None when there is nothing to choose."""

    @abstractmethod
    async def text(self, message: str) -> str:
        """Free-text input."""

    @abstractmethod
    async def confirm(self, message: str, *, default: bool = True) -> bool:
        """Yes/no question."""

    @abstractmethod
    def echo(self, message: str = "", *, err: bool = False) -> None:
        """Show output to the operator."""


class ClickOperator(Operator):
    """Terminal prompts via click, run off the event loop thread."""

    async def select(self, message: str, choices: Sequence[Choice]) -> str | None:
        if not choices:
            click.echo(f"{message}: (none available)")
            return None
        return await asyncio.to_thread(self._select, message, list(choices))

    @staticmethod
    def _select(message: str, choices: list[Choice]) -> str:
        click.echo(message)
        for i, choice in enumerate(choices, 1):
            line = f"  {i}. {choice.label}"
            if choice.label != choice.value:
                line += f" [{choice.value}]"
            if choice.description:
                line += f" - {choice.description}"
            click.echo(line)
        values = [c.value for c in choices]
        answer: str = click.prompt(
            "Choice",
            type=click.Choice(values + [str(i) for i in range(1, len(values) + 1)]),
            show_choices=False,
        )
        if answer in values:
            return answer
        return values[int(answer) - 1]

    async def text(self, message: str) -> str:
        value: str = await asyncio.to_thread(
            click.prompt, message, default="", show_default=False
        )
        return value

    async def confirm(self, message: str, *, default: bool = True) -> bool:
        answer: bool = await asyncio.to_thread(click.confirm, message, default=default)
        return answer

    def echo(self, message: str = "", *, err: bool = False) -> None:
        click.echo(message, err=err)
