"""Routes tool calls by name to in-process LangChain tools or MCP servers."""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from langchain_core.tools import BaseTool
from langchain_core.utils.function_calling import convert_to_openai_tool

from skill_disclosure.tools.mcp_client import McpClientService


logger = logging.getLogger(__name__)


class ToolRouter:
    """The name -> result function the executor calls.

    Local tools win over MCP tools with the same name.
    """

    def __init__(
        self,
        local_tools: Optional[List[BaseTool]] = None,
        mcp: Optional[McpClientService] = None,
    ):
        self._local: Dict[str, BaseTool] = {t.name: t for t in (local_tools or [])}
        self._mcp = mcp

    @property
    def tool_names(self) -> List[str]:
        names = list(self._local)
        if self._mcp is not None:
            names += [
                t["function"]["name"]
                for t in self._mcp.get_available_tools()
                if t["function"]["name"] not in self._local
            ]
        return names

    def get_available_tools(self) -> List[Dict[str, Any]]:
        tools = [convert_to_openai_tool(t) for t in self._local.values()]
        if self._mcp is not None:
            tools += [
                t for t in self._mcp.get_available_tools()
                if t["function"]["name"] not in self._local
            ]
        return tools

    async def execute_tool(self, name: str, arguments: Optional[Dict[str, Any]] = None) -> str:
        arguments = arguments or {}

        local = self._local.get(name)
        if local is not None:
            try:
                result = await local.ainvoke(arguments)
            except Exception as e:
                logger.warning("Tool %s failed: %s", name, e)
                return f"Error executing tool '{name}': {e}"
            return str(result)

        if self._mcp is not None and self._mcp.has_tool(name):
            return await self._mcp.execute_tool(name, arguments)

        return f"Error: Tool '{name}' not found."
