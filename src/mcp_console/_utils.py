"""Shared helpers: content rendering and local output files."""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from mcp_console._types import UserRecord

logger = logging.getLogger("mcp_console.utils")

_PLACEHOLDER = re.compile(r"\{([^}]+)\}")


def first_text(content: Sequence[Any]) -> str | None:
    """Text of the first content item, if it carries text."""
    if not content:
        return None
    text = getattr(content[0], "text", None)
    return text if isinstance(text, str) else None


def uri_placeholders(uri: str) -> list[str]:
    """``{param}`` placeholder tokens in order of appearance, braces included."""
    return [m.group(0) for m in _PLACEHOLDER.finditer(uri)]


def parse_json_object(text: str | None) -> dict[str, Any] | None:
    """Parse text as a JSON object. Return None for anything else."""
    if not text:
        return None
    try:
        value = json.loads(text)
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None
    return value if isinstance(value, dict) else None


def write_latest_output(path: Path, text: str) -> None:
    """Overwrite ``path`` with the raw model output."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    logger.debug("Wrote %d chars to %s", len(text), path)


def append_user_record(path: Path, record: UserRecord) -> None:
    """Append one record's JSON to the log. The file is a stream of objects, not an array."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("a", encoding="utf-8") as fh:
        fh.write(record.to_json() + "\n")
    logger.info("Appended user %s to %s", record.email, path)
