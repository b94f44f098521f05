"""LangGraph graph builder for the skill execution loop.

Graph structure:
```
START -> generate --(tool calls, turns left)--> tools -> generate
             |
             +--(final answer or turn budget spent)--> END
```
"""
from langgraph.graph import StateGraph, END
from langchain_core.language_models import BaseChatModel

from skill_disclosure.graph.state import ExecutorState
from skill_disclosure.graph.nodes import (
    ToolInvoker,
    llm_generation_node,
    tool_execution_node,
    should_continue,
)


def create_executor_graph(llm: BaseChatModel, tool_invoker: ToolInvoker):
    """Create the model/tool loop used to execute a skill.

    Args:
        llm: LangChain chat model (any tool-calling compatible model)
        tool_invoker: Provides tool schemas and executes tool calls by name

    Returns:
        Compiled LangGraph graph
    """
    workflow = StateGraph(ExecutorState)

    async def generate(state: ExecutorState):
        return await llm_generation_node(state, llm, tool_invoker)

    async def tools(state: ExecutorState):
        return await tool_execution_node(state, tool_invoker)

    workflow.add_node("generate", generate)
    workflow.add_node("tools", tools)

    workflow.set_entry_point("generate")

    workflow.add_conditional_edges(
        "generate",
        should_continue,
        {
            "tools": "tools",
            "end": END
        }
    )

    # After executing tools, generate again with the results
    workflow.add_edge("tools", "generate")

    return workflow.compile()
