"""Graph nodes for the skill execution state machine."""
from typing import Any, Dict, List, Optional, Protocol
import json
import logging

from langchain_core.messages import AIMessage, ToolMessage
from langchain_core.language_models import BaseChatModel

from skill_disclosure.graph.state import ExecutorState, ToolCallRecord


logger = logging.getLogger(__name__)

RECORD_RESULT_LIMIT = 200


class ToolInvoker(Protocol):
    """Anything that can advertise tools and run them by name."""

    def get_available_tools(self) -> List[Dict[str, Any]]: ...

    async def execute_tool(self, name: str, arguments: Optional[Dict[str, Any]] = None) -> str: ...


def _truncate(text: str, limit: int = RECORD_RESULT_LIMIT) -> str:
    return text if len(text) <= limit else text[:limit] + "..."


async def llm_generation_node(
    state: ExecutorState,
    llm: BaseChatModel,
    tool_invoker: ToolInvoker,
) -> Dict:
    """Call the chat model with the conversation so far.

    Args:
        state: Current executor state
        llm: LangChain chat model
        tool_invoker: Source of the tool schemas bound to the model

    Returns:
        State update with the AI response and the incremented turn count
    """
    turn = state.get("turn_count", 0) + 1

    tools = tool_invoker.get_available_tools()
    llm_with_tools = llm.bind_tools(tools) if tools else llm

    logger.debug("Turn %d: calling model with %d tool(s) bound", turn, len(tools))
    response = await llm_with_tools.ainvoke(state.get("messages", []))

    if logger.isEnabledFor(logging.DEBUG):
        tc = getattr(response, "tool_calls", None)
        logger.debug("Turn %d: model requested %d tool call(s)", turn, len(tc) if tc else 0)

    return {
        "messages": [response],
        "turn_count": turn,
    }


def should_continue(state: ExecutorState) -> str:
    """Determine next action in the graph.

    Args:
        state: Current executor state

    Returns:
        "tools" if the model asked for tools and turns remain, otherwise "end"
    """
    messages = state.get("messages", [])
    if not messages:
        return "end"

    last_message = messages[-1]
    if not (isinstance(last_message, AIMessage) and last_message.tool_calls):
        return "end"

    if state.get("turn_count", 0) >= state.get("max_turns", 0):
        logger.info("Maximum turns (%d) reached with tool calls pending", state.get("max_turns", 0))
        return "end"

    return "tools"


async def tool_execution_node(state: ExecutorState, tool_invoker: ToolInvoker) -> Dict:
    """Execute tool calls from the last AI message.

    Args:
        state: Current executor state with tool calls in last message
        tool_invoker: Routes each call by tool name

    Returns:
        State update with ToolMessage results and tool call records
    """
    messages = state.get("messages", [])
    last_message = messages[-1] if messages else None

    if not isinstance(last_message, AIMessage) or not last_message.tool_calls:
        return {"messages": [], "tool_calls": []}

    tool_messages = []
    records = []
    for tool_call in last_message.tool_calls:
        tool_name = tool_call["name"]
        tool_args = tool_call.get("args") or {}
        tool_id = tool_call["id"]

        logger.debug("Executing tool: %s", tool_name)
        result = await tool_invoker.execute_tool(tool_name, tool_args)

        tool_messages.append(
            ToolMessage(
                content=result,
                tool_call_id=tool_id,
                name=tool_name,
            )
        )
        records.append(
            ToolCallRecord(
                tool_name=tool_name,
                arguments=json.dumps(tool_args, ensure_ascii=False),
                result=_truncate(result),
            )
        )

    return {
        "messages": tool_messages,
        "tool_calls": records,
    }
