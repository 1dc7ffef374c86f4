"""mcp-console: interactive MCP client with model-assisted user intake."""

from importlib.metadata import version

__version__ = version("mcp-console")

from mcp_console._types import CapabilityCatalog, UserRecord  # noqa: E402
from mcp_console.client import McpConnection, run_console  # noqa: E402
from mcp_console.extraction import extract_user, parse_user_json, parse_user_labeled  # noqa: E402

__all__ = [
    "CapabilityCatalog",
    "McpConnection",
    "UserRecord",
    "__version__",
    "extract_user",
    "parse_user_json",
    "parse_user_labeled",
    "run_console",
]
