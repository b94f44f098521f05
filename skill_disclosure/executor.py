"""Skill executor: runs a loaded skill's instructions through a chat model.

Flow: user input -> model (with skill instructions) -> tool calls -> tool
servers -> results -> model -> final response, bounded by a turn budget.
"""
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage

from skill_disclosure.config import ModelConfig
from skill_disclosure.graph.builder import create_executor_graph
from skill_disclosure.graph.nodes import ToolInvoker
from skill_disclosure.graph.state import ToolCallRecord
from skill_disclosure.skills.formatting import build_system_prompt
from skill_disclosure.skills.loader import SkillLoader
from skill_disclosure.skills.models import SkillDefinition


logger = logging.getLogger(__name__)

DEFAULT_MAX_TURNS = 10


@dataclass
class SkillExecutionResult:
    """Outcome of executing a skill."""
    response: str
    turn_count: int = 0
    tool_calls: List[ToolCallRecord] = field(default_factory=list)
    success: bool = False
    error: Optional[str] = None


def create_chat_model(config: ModelConfig) -> BaseChatModel:
    """Build an OpenAI-compatible chat model from settings.

    Any other LangChain chat model can be handed to SkillExecutor directly.
    """
    from langchain_openai import ChatOpenAI

    return ChatOpenAI(
        model=config.model,
        base_url=config.base_url,
        api_key=config.api_key,
        max_tokens=config.max_tokens,
        temperature=config.temperature,
    )


def _message_text(message: BaseMessage) -> str:
    content = message.content
    if isinstance(content, str):
        return content
    parts = []
    for block in content:
        if isinstance(block, str):
            parts.append(block)
        elif isinstance(block, dict) and block.get("type") == "text":
            parts.append(block.get("text", ""))
    return "".join(parts)


class SkillExecutor:
    """Executes skills with a chat model and a tool invoker.

    Example:
        ```python
        from langchain_openai import ChatOpenAI

        executor = SkillExecutor(ChatOpenAI(model="gpt-4o"), ToolRouter(mcp=mcp))
        result = await executor.execute(skill, "Review this pull request")
        print(result.response)
        ```
    """

    def __init__(self, llm: BaseChatModel, tool_invoker: ToolInvoker):
        """Initialize executor.

        Args:
            llm: LangChain chat model (pre-configured)
            tool_invoker: Routes the model's tool calls, e.g. a ToolRouter
        """
        self.llm = llm
        self.tool_invoker = tool_invoker
        self.graph = create_executor_graph(llm, tool_invoker)

    async def execute(
        self,
        skill: SkillDefinition,
        user_input: str,
        max_turns: int = DEFAULT_MAX_TURNS,
    ) -> SkillExecutionResult:
        """Execute a fully loaded skill with the given user input.

        Args:
            skill: Skill returned by SkillLoader.load()
            user_input: The user's request
            max_turns: Maximum number of model calls

        Returns:
            SkillExecutionResult; failures are reported in it, not raised
        """
        if not skill.is_fully_loaded or skill.instructions is None:
            return SkillExecutionResult(
                response="",
                error=f"Skill '{skill.id}' is not fully loaded",
            )

        initial_state = {
            "messages": [
                SystemMessage(content=build_system_prompt(skill)),
                HumanMessage(content=user_input),
            ],
            "tool_calls": [],
            "turn_count": 0,
            "max_turns": max_turns,
        }
        # generate + tools per turn, plus slack for the final answer
        config = {"recursion_limit": 2 * max_turns + 5}

        try:
            final_state = await self.graph.ainvoke(initial_state, config=config)
        except Exception as e:
            logger.error("Execution of skill '%s' failed: %s", skill.id, e)
            return SkillExecutionResult(response="", error=str(e))

        turn_count = final_state.get("turn_count", 0)
        tool_calls = list(final_state.get("tool_calls", []))
        last_message = final_state["messages"][-1]

        if isinstance(last_message, AIMessage) and last_message.tool_calls:
            return SkillExecutionResult(
                response="Execution stopped: maximum turns reached.",
                turn_count=turn_count,
                tool_calls=tool_calls,
                error="Maximum turns exceeded",
            )

        return SkillExecutionResult(
            response=_message_text(last_message),
            turn_count=turn_count,
            tool_calls=tool_calls,
            success=True,
        )

    async def execute_by_id(
        self,
        loader: SkillLoader,
        skill_id: str,
        user_input: str,
        max_turns: int = DEFAULT_MAX_TURNS,
    ) -> SkillExecutionResult:
        """Load a skill from the catalog, then execute it."""
        skill = await loader.load(skill_id)
        if skill is None:
            return SkillExecutionResult(response="", error=f"Skill '{skill_id}' not found")
        return await self.execute(skill, user_input, max_turns=max_turns)
