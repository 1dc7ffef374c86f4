"""Data models for capability descriptors and extracted user records."""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class UserRecord(BaseModel):
    """A user extracted from language-model output.

    ``name`` and ``email`` are always non-empty. ``address`` and ``phone`` are
    either a non-empty string or absent.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    email: str = Field(min_length=1)
    address: str | None = Field(default=None, min_length=1)
    phone: str | None = Field(default=None, min_length=1)

    def as_arguments(self) -> dict[str, str]:
        """Tool-call arguments with absent fields omitted."""
        return self.model_dump(exclude_none=True)

    def to_json(self) -> str:
        return self.model_dump_json(indent=2, exclude_none=True)


# ---------------------------------------------------------------------------
# Capability descriptors
# ---------------------------------------------------------------------------


class _Descriptor(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    description: str | None = None


class ToolDescriptor(_Descriptor):
    kind: Literal["tool"] = "tool"
    title: str | None = None
    input_schema: dict[str, Any] = Field(default_factory=dict)

    @field_validator("input_schema")
    @classmethod
    def _check_properties(cls, value: dict[str, Any]) -> dict[str, Any]:
        properties = value.get("properties")
        if properties is not None and not isinstance(properties, dict):
            raise ValueError(
                f"inputSchema.properties must be an object, got {type(properties).__name__}"
            )
        return value

    @property
    def display_name(self) -> str:
        return self.title or self.name

    @property
    def properties(self) -> dict[str, Any]:
        """Declared input properties in schema order."""
        return self.input_schema.get("properties") or {}


class ResourceDescriptor(_Descriptor):
    kind: Literal["resource"] = "resource"
    uri: str


class ResourceTemplateDescriptor(_Descriptor):
    kind: Literal["resource_template"] = "resource_template"
    uri_template: str


class PromptArgumentSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    description: str | None = None
    required: bool = False


class PromptDescriptor(_Descriptor):
    kind: Literal["prompt"] = "prompt"
    arguments: tuple[PromptArgumentSpec, ...] = ()


CapabilityDescriptor = Annotated[
    ToolDescriptor | ResourceDescriptor | ResourceTemplateDescriptor | PromptDescriptor,
    Field(discriminator="kind"),
]


class CapabilityCatalog(BaseModel):
    """Snapshot of everything the connected service declared at startup."""

    model_config = ConfigDict(frozen=True)

    tools: tuple[ToolDescriptor, ...] = ()
    prompts: tuple[PromptDescriptor, ...] = ()
    resources: tuple[ResourceDescriptor, ...] = ()
    resource_templates: tuple[ResourceTemplateDescriptor, ...] = ()

    def find_tool(self, name: str | None) -> ToolDescriptor | None:
        return next((t for t in self.tools if t.name == name), None)

    def find_prompt(self, name: str | None) -> PromptDescriptor | None:
        return next((p for p in self.prompts if p.name == name), None)

    def find_resource(self, uri: str | None) -> str | None:
        """Resolve a menu value to a resource URI or a template's URI template."""
        for resource in self.resources:
            if resource.uri == uri:
                return resource.uri
        for template in self.resource_templates:
            if template.uri_template == uri:
                return template.uri_template
        return None

    @property
    def summary(self) -> str:
        """One-line summary for console logging."""
        return (
            f"{len(self.tools)} tools, {len(self.prompts)} prompts, "
            f"{len(self.resources)} resources, {len(self.resource_templates)} templates"
        )
