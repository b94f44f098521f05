"""Graph package for the LangGraph skill execution loop."""

from skill_disclosure.graph.state import ExecutorState, ToolCallRecord
from skill_disclosure.graph.nodes import (
    ToolInvoker,
    llm_generation_node,
    tool_execution_node,
    should_continue,
)
from skill_disclosure.graph.builder import create_executor_graph

__all__ = [
    # State
    "ExecutorState",
    "ToolCallRecord",
    # Nodes
    "ToolInvoker",
    "llm_generation_node",
    "tool_execution_node",
    "should_continue",
    # Graph builder
    "create_executor_graph",
]
