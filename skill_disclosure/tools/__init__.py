"""Tool invocation layer: MCP server connections and name-based routing."""

from skill_disclosure.tools.mcp_client import McpClientService, RegisteredTool
from skill_disclosure.tools.router import ToolRouter

__all__ = [
    "McpClientService",
    "RegisteredTool",
    "ToolRouter",
]
