"""YAML settings for the console: server launch, model access, output files."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Literal

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, model_validator

logger = logging.getLogger("mcp_console.config")

SETTINGS_FORMAT_VERSION = "1.0"
DEFAULT_CONFIG_PATH = Path("mcp-console.yaml")


class ServerConfig(BaseModel):
    """How to launch the MCP server subprocess."""

    command: str = "node"
    args: list[str] = Field(default_factory=lambda: ["build/server.js"])
    env: dict[str, str] | None = None
    cwd: str | None = None
    stderr: Literal["ignore", "inherit"] = "ignore"


class ModelConfig(BaseModel):
    name: str = "gemini-2.0-flash"
    base_url: str = "https://generativelanguage.googleapis.com/v1beta/openai/"
    api_key_env: str = "GEMINI_API_KEY"


class OutputConfig(BaseModel):
    latest_output: Path = Path("src/data/ai-latest-output.txt")
    user_records: Path = Path("src/data/users.json")


class Settings(BaseModel):
    schema_version: str = SETTINGS_FORMAT_VERSION
    client_name: str = "mcp-console"
    server: ServerConfig = Field(default_factory=ServerConfig)
    model: ModelConfig = Field(default_factory=ModelConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)

    @model_validator(mode="after")
    def _check_schema_version(self) -> Settings:
        expected_major = SETTINGS_FORMAT_VERSION.split(".")[0]
        actual_major = self.schema_version.split(".")[0]
        if actual_major != expected_major:
            raise ValueError(
                f"Incompatible settings schema version '{self.schema_version}' "
                f"(expected {expected_major}.x). "
                f"Update mcp-console or fix the schema_version field."
            )
        return self


def load_settings(path: Path | None = None) -> Settings:
    """Load settings from ``path``, or from ./mcp-console.yaml when it exists.

    Also loads a ``.env`` file into the process environment so the model API
    key can live there.
    """
    load_dotenv()

    if path is None:
        if not DEFAULT_CONFIG_PATH.exists():
            logger.debug("No %s found, using defaults", DEFAULT_CONFIG_PATH)
            return Settings()
        path = DEFAULT_CONFIG_PATH

    raw = yaml.safe_load(path.read_text())
    if raw is None:
        return Settings()
    if not isinstance(raw, dict):
        raise ValueError(f"Settings file must be a YAML mapping, got {type(raw).__name__}")
    logger.debug("Loaded settings from %s", path)
    return Settings.model_validate(raw)
