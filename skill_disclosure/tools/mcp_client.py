"""MCP (Model Context Protocol) client service.

Launches the configured stdio MCP servers, registers the tools they expose,
and routes tool calls from the chat model to the server that owns each tool.
"""
from __future__ import annotations

import logging
from contextlib import AsyncExitStack
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from mcp import ClientSession, StdioServerParameters
from mcp.client.stdio import stdio_client

from skill_disclosure.config import McpServerEntry


logger = logging.getLogger(__name__)


@dataclass
class RegisteredTool:
    """A tool exposed by a connected MCP server."""
    server_name: str
    name: str
    description: str = ""
    input_schema: Dict[str, Any] = field(default_factory=dict)

    def to_openai_tool(self) -> Dict[str, Any]:
        """Function-tool schema accepted by ``BaseChatModel.bind_tools``."""
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.input_schema or {"type": "object", "properties": {}},
            },
        }


class McpClientService:
    """Connections to MCP tool servers.

    Use as an async context manager so every server process is shut down:

        ```python
        async with McpClientService(config.mcp_servers) as mcp:
            tools = mcp.get_available_tools()
            result = await mcp.execute_tool("list_skills", {})
        ```
    """

    def __init__(self, servers: List[McpServerEntry]):
        self._servers = list(servers)
        self._sessions: Dict[str, ClientSession] = {}
        self._tools: Dict[str, RegisteredTool] = {}
        self._stack = AsyncExitStack()
        self._initialized = False

    async def __aenter__(self) -> "McpClientService":
        await self.initialize()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def initialize(self) -> None:
        """Connect to every enabled server. Servers that fail are logged and skipped."""
        if self._initialized:
            return

        for server in self._servers:
            if not server.enabled:
                continue
            try:
                await self._connect(server)
            except Exception as e:
                logger.error("Failed to connect to MCP server %s: %s", server.name, e)

        self._initialized = True

    async def _connect(self, server: McpServerEntry) -> None:
        logger.info("Connecting to MCP server: %s", server.name)

        params = StdioServerParameters(
            command=server.command,
            args=server.args,
            env=server.env or None,
        )

        # Per-server stack so a failed handshake only tears down its own process
        server_stack = AsyncExitStack()
        try:
            read, write = await server_stack.enter_async_context(stdio_client(params))
            session = await server_stack.enter_async_context(ClientSession(read, write))
            await session.initialize()
            tools_result = await session.list_tools()
        except BaseException:
            await server_stack.aclose()
            raise

        self._stack.push_async_callback(server_stack.aclose)
        self._sessions[server.name] = session

        for tool in tools_result.tools:
            if tool.name in self._tools:
                logger.warning(
                    "Tool %s from %s shadows the one from %s",
                    tool.name,
                    server.name,
                    self._tools[tool.name].server_name,
                )
            self._tools[tool.name] = RegisteredTool(
                server_name=server.name,
                name=tool.name,
                description=tool.description or "",
                input_schema=tool.inputSchema or {},
            )
            logger.debug("Registered tool: %s", tool.name)

        logger.info("Connected to %s with %d tools", server.name, len(tools_result.tools))

    def get_available_tools(self) -> List[Dict[str, Any]]:
        return [tool.to_openai_tool() for tool in self._tools.values()]

    def has_tool(self, name: str) -> bool:
        return name in self._tools

    def get_connected_server_names(self) -> List[str]:
        return list(self._sessions.keys())

    async def execute_tool(self, name: str, arguments: Optional[Dict[str, Any]] = None) -> str:
        """Call a tool by name.

        Args:
            name: Tool name as advertised by its server
            arguments: Tool arguments

        Returns:
            Text parts of the result joined by newlines, or an ``Error: ...``
            message. Errors are returned, not raised, so the model can react.
        """
        tool = self._tools.get(name)
        if tool is None:
            return f"Error: Tool '{name}' not found in any connected MCP server."

        session = self._sessions.get(tool.server_name)
        if session is None:
            return f"Error: MCP server '{tool.server_name}' not connected."

        try:
            result = await session.call_tool(name, arguments or {})
        except Exception as e:
            logger.warning("MCP tool %s failed: %s", name, e)
            return f"Error executing tool '{name}': {e}"

        text = "\n".join(
            item.text for item in result.content if getattr(item, "type", None) == "text"
        )
        if result.isError:
            return f"Error executing tool '{name}': {text}"
        return text

    async def aclose(self) -> None:
        await self._stack.aclose()
        self._sessions.clear()
        self._tools.clear()
        self._initialized = False
