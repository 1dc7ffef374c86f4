"""Fetch the connected service's capabilities into an immutable catalog."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Protocol

from mcp import types
from pydantic import TypeAdapter

from mcp_console._types import (
    CapabilityCatalog,
    CapabilityDescriptor,
    PromptDescriptor,
    ResourceDescriptor,
    ResourceTemplateDescriptor,
    ToolDescriptor,
)

logger = logging.getLogger("mcp_console.catalog")

_DESCRIPTOR: TypeAdapter[CapabilityDescriptor] = TypeAdapter(CapabilityDescriptor)
_SDK_TYPES = (types.Tool, types.Resource, types.ResourceTemplate, types.Prompt)


class CatalogSource(Protocol):
    """The four listing calls of an MCP client session."""

    async def list_tools(self) -> types.ListToolsResult: ...

    async def list_prompts(self) -> types.ListPromptsResult: ...

    async def list_resources(self) -> types.ListResourcesResult: ...

    async def list_resource_templates(self) -> types.ListResourceTemplatesResult: ...


def describe(item: Any) -> CapabilityDescriptor:
    """Convert an SDK tool/prompt/resource/template into its descriptor.

    Schema shape is validated here, once per session.
    """
    if not isinstance(item, _SDK_TYPES):
        raise ValueError(f"Unsupported capability type: {type(item).__name__}")

    data: dict[str, Any] = {"name": item.name, "description": item.description}
    if isinstance(item, types.Tool):
        annotations = item.annotations
        data["kind"] = "tool"
        data["title"] = getattr(item, "title", None) or (annotations.title if annotations else None)
        data["input_schema"] = item.inputSchema or {}
    elif isinstance(item, types.Resource):
        data["kind"] = "resource"
        data["uri"] = str(item.uri)
    elif isinstance(item, types.ResourceTemplate):
        data["kind"] = "resource_template"
        data["uri_template"] = item.uriTemplate
    else:
        data["kind"] = "prompt"
        data["arguments"] = [
            {"name": a.name, "description": a.description, "required": bool(a.required)}
            for a in item.arguments or []
        ]
    return _DESCRIPTOR.validate_python(data)


async def fetch_catalog(source: CatalogSource) -> CapabilityCatalog:
    """Issue all four listing calls concurrently and wait for every one of them."""
    tools, prompts, resources, templates = await asyncio.gather(
        source.list_tools(),
        source.list_prompts(),
        source.list_resources(),
        source.list_resource_templates(),
    )

    tool_items = [describe(t) for t in tools.tools]
    prompt_items = [describe(p) for p in prompts.prompts]
    resource_items = [describe(r) for r in resources.resources]
    template_items = [describe(t) for t in templates.resourceTemplates]

    catalog = CapabilityCatalog(
        tools=tuple(t for t in tool_items if isinstance(t, ToolDescriptor)),
        prompts=tuple(p for p in prompt_items if isinstance(p, PromptDescriptor)),
        resources=tuple(r for r in resource_items if isinstance(r, ResourceDescriptor)),
        resource_templates=tuple(
            t for t in template_items if isinstance(t, ResourceTemplateDescriptor)
        ),
    )
    logger.info("Catalog: %s", catalog.summary)
    return catalog
