"""State definitions for the skill execution graph."""
from dataclasses import dataclass
from typing import TypedDict, List, Annotated
from langchain_core.messages import BaseMessage
import operator


@dataclass
class ToolCallRecord:
    """One tool invocation made while executing a skill."""
    tool_name: str
    arguments: str
    result: str


class ExecutorState(TypedDict):
    """State schema for executing one skill with a chat model.

    Attributes:
        messages: Conversation history, starting with the skill system prompt
        tool_calls: Record of every tool call routed during execution
        turn_count: Number of model calls made so far
        max_turns: Model call budget; the loop stops once it is spent
    """
    # Conversation history - append-only
    messages: Annotated[List[BaseMessage], operator.add]

    # Tool call log - append-only
    tool_calls: Annotated[List[ToolCallRecord], operator.add]

    turn_count: int
    max_turns: int
