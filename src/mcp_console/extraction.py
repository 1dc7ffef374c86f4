"""Best-effort extraction of a user record from language-model output.

Model output is not guaranteed to follow any one format. Sometimes it is a
(possibly fenced) JSON object, sometimes prose with bold ``**Label:**``
markers. Every entry point here returns ``None`` instead of raising when no
usable record is found; callers decide what to do next.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any

from pydantic import ValidationError

from mcp_console._types import UserRecord

logger = logging.getLogger("mcp_console.extraction")

_LEADING_JSON_FENCE = re.compile(r"^```json", re.IGNORECASE)
_LEADING_FENCE = re.compile(r"^```")
_TRAILING_FENCE = re.compile(r"```\Z")
_TRAILING_NOTE = re.compile(r"\s*\([^)]*\)\s*\Z")

_ADDRESS_PARTS = ("street", "city", "state")

# "Phone Number" must be tried before "Phone".
_LABELS: dict[str, tuple[str, ...]] = {
    "name": ("Name",),
    "email": ("Email",),
    "address": ("Address",),
    "phone": ("Phone Number", "Phone"),
}


def strip_code_fence(text: str) -> str:
    """Remove a leading and a trailing Markdown fence, independently of each other."""
    cleaned = text.strip()
    cleaned = _LEADING_JSON_FENCE.sub("", cleaned, count=1)
    cleaned = _LEADING_FENCE.sub("", cleaned, count=1)
    cleaned = _TRAILING_FENCE.sub("", cleaned, count=1)
    return cleaned.strip()


def _as_text(value: Any) -> str | None:
    """Render a scalar JSON value as a string; empty and non-scalar values are absent."""
    if value is None or isinstance(value, bool | dict | list):
        return None
    text = value if isinstance(value, str) else str(value)
    return text or None


def _normalize_name(obj: dict[str, Any]) -> str | None:
    if obj.get("name") is not None:
        return _as_text(obj["name"])
    first = _as_text(obj.get("firstName"))
    last = _as_text(obj.get("lastName"))
    if first and last:
        return f"{first} {last}"
    return None


def _normalize_address(value: Any) -> str | None:
    if isinstance(value, dict):
        zip_code = value.get("zip")
        if zip_code is None:
            zip_code = value.get("zipCode")
        parts = [_as_text(value.get(key)) for key in _ADDRESS_PARTS]
        parts.append(_as_text(zip_code))
        return ", ".join(p for p in parts if p) or None
    return _as_text(value)


def _build_record(
    name: str | None, email: str | None, address: str | None, phone: str | None
) -> UserRecord | None:
    if not name or not email:
        return None
    try:
        return UserRecord(name=name, email=email, address=address or None, phone=phone or None)
    except ValidationError as exc:
        logger.debug("Discarding invalid user payload: %s", exc)
        return None


def parse_user_json(text: str) -> UserRecord | None:
    """Parse a JSON (optionally fenced) user object."""
    cleaned = strip_code_fence(text)
    try:
        obj = json.loads(cleaned)
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None
    if not isinstance(obj, dict):
        return None

    phone = obj.get("phone")
    if phone is None:
        phone = obj.get("phoneNumber")

    return _build_record(
        name=_normalize_name(obj),
        email=_as_text(obj.get("email")),
        address=_normalize_address(obj.get("address")),
        phone=_as_text(phone),
    )


def _labeled_value(text: str, label: str) -> str | None:
    pattern = re.compile(rf"\*\*{re.escape(label)}:\*\*\s*(.+)", re.IGNORECASE)
    match = pattern.search(text)
    if match is None:
        return None
    return _TRAILING_NOTE.sub("", match.group(1).strip()).strip()


def parse_user_labeled(text: str) -> UserRecord | None:
    """Parse ``**Label:** value`` lines, dropping trailing ``(notes)``."""
    fields: dict[str, str | None] = {}
    for field, labels in _LABELS.items():
        value = None
        for label in labels:
            value = _labeled_value(text, label)
            if value is not None:
                break
        fields[field] = value
    return _build_record(**fields)


def extract_user(text: str) -> UserRecord | None:
    """Try JSON first, then labeled free text."""
    record = parse_user_json(text)
    if record is not None:
        logger.debug("Extracted user from JSON payload")
        return record
    record = parse_user_labeled(text)
    if record is not None:
        logger.debug("Extracted user from labeled text")
    return record
