"""Tests for the skill execution loop.

These tests verify:
1. The skill's instructions reach the model as the system prompt
2. Tool calls are routed by name and recorded
3. The turn budget stops a model that keeps asking for tools
4. Failures come back in the result instead of being raised
"""
from __future__ import annotations

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest
from langchain_core.messages import AIMessage, HumanMessage, SystemMessage

from skill_disclosure.config import SkillsConfig
from skill_disclosure.executor import SkillExecutor
from skill_disclosure.graph.nodes import should_continue, tool_execution_node
from skill_disclosure.skills.loader import SkillLoader
from skill_disclosure.skills.models import SkillDefinition


# =============================================================================
# Test Fixtures
# =============================================================================

class FakeInvoker:
    """Echo tool server recording every call."""

    def __init__(self, tools=None):
        self.tools = tools if tools is not None else [
            {"type": "function", "function": {"name": "echo", "description": "Echo text", "parameters": {}}}
        ]
        self.calls = []

    def get_available_tools(self):
        return self.tools

    async def execute_tool(self, name, arguments=None):
        self.calls.append((name, arguments))
        return f"echo: {(arguments or {}).get('text', '')}"


def _tool_call(call_id: str, text: str = "hi") -> dict:
    return {"name": "echo", "args": {"text": text}, "id": call_id}


@pytest.fixture
def mock_llm():
    """Create a mock chat model for testing."""
    mock = MagicMock()
    mock.ainvoke = AsyncMock(return_value=AIMessage(content="Test response"))
    mock.bind_tools.return_value = mock
    return mock


@pytest.fixture
def skill(tmp_path: Path) -> SkillDefinition:
    return SkillDefinition(
        id="greeter",
        name="Greeter",
        description="Greets people",
        file_path=tmp_path / "greeter" / "SKILL.md",
        base_directory=tmp_path / "greeter",
        instructions="Always greet politely.",
        is_fully_loaded=True,
    )


# =============================================================================
# Executor
# =============================================================================

@pytest.mark.asyncio
async def test_direct_answer(mock_llm, skill) -> None:
    invoker = FakeInvoker()
    executor = SkillExecutor(mock_llm, invoker)

    result = await executor.execute(skill, "Hello")

    assert result.success is True
    assert result.response == "Test response"
    assert result.turn_count == 1
    assert result.tool_calls == []
    assert result.error is None

    mock_llm.bind_tools.assert_called_once_with(invoker.tools)
    messages = mock_llm.ainvoke.await_args.args[0]
    assert isinstance(messages[0], SystemMessage)
    assert "Always greet politely." in messages[0].content
    assert isinstance(messages[1], HumanMessage)
    assert messages[1].content == "Hello"


@pytest.mark.asyncio
async def test_tool_round_trip(mock_llm, skill) -> None:
    mock_llm.ainvoke.side_effect = [
        AIMessage(content="", tool_calls=[_tool_call("call-1", "hi")]),
        AIMessage(content="Done"),
    ]
    invoker = FakeInvoker()
    executor = SkillExecutor(mock_llm, invoker)

    result = await executor.execute(skill, "Say hi")

    assert result.success is True
    assert result.response == "Done"
    assert result.turn_count == 2
    assert invoker.calls == [("echo", {"text": "hi"})]
    assert len(result.tool_calls) == 1
    record = result.tool_calls[0]
    assert record.tool_name == "echo"
    assert record.arguments == '{"text": "hi"}'
    assert record.result == "echo: hi"

    # The second model call sees the tool result
    second_messages = mock_llm.ainvoke.await_args_list[1].args[0]
    assert second_messages[-1].content == "echo: hi"
    assert second_messages[-1].tool_call_id == "call-1"


@pytest.mark.asyncio
async def test_turn_budget_stops_tool_loop(mock_llm, skill) -> None:
    mock_llm.ainvoke.return_value = AIMessage(content="", tool_calls=[_tool_call("call-n")])
    invoker = FakeInvoker()
    executor = SkillExecutor(mock_llm, invoker)

    result = await executor.execute(skill, "Loop forever", max_turns=3)

    assert result.success is False
    assert result.error == "Maximum turns exceeded"
    assert result.turn_count == 3
    assert mock_llm.ainvoke.await_count == 3
    # Tool calls of the final turn are not executed
    assert len(invoker.calls) == 2
    assert len(result.tool_calls) == 2


@pytest.mark.asyncio
async def test_no_tools_skips_binding(mock_llm, skill) -> None:
    executor = SkillExecutor(mock_llm, FakeInvoker(tools=[]))

    result = await executor.execute(skill, "Hello")

    assert result.success is True
    mock_llm.bind_tools.assert_not_called()


@pytest.mark.asyncio
async def test_model_failure_is_reported(mock_llm, skill) -> None:
    mock_llm.ainvoke.side_effect = RuntimeError("rate limited")
    executor = SkillExecutor(mock_llm, FakeInvoker())

    result = await executor.execute(skill, "Hello")

    assert result.success is False
    assert result.error == "rate limited"
    assert result.response == ""


@pytest.mark.asyncio
async def test_metadata_only_skill_is_rejected(mock_llm, skill) -> None:
    skill.is_fully_loaded = False
    skill.instructions = None
    executor = SkillExecutor(mock_llm, FakeInvoker())

    result = await executor.execute(skill, "Hello")

    assert result.success is False
    assert result.error == "Skill 'greeter' is not fully loaded"
    mock_llm.ainvoke.assert_not_awaited()


@pytest.mark.asyncio
async def test_list_content_blocks_are_joined(mock_llm, skill) -> None:
    mock_llm.ainvoke.return_value = AIMessage(
        content=[{"type": "text", "text": "Hello, "}, {"type": "text", "text": "friend"}]
    )
    executor = SkillExecutor(mock_llm, FakeInvoker())

    result = await executor.execute(skill, "Hello")

    assert result.response == "Hello, friend"


@pytest.mark.asyncio
async def test_execute_by_id(mock_llm, tmp_path: Path) -> None:
    skill_dir = tmp_path / "skills" / "greeter"
    skill_dir.mkdir(parents=True)
    (skill_dir / "SKILL.md").write_text(
        "---\nname: Greeter\ndescription: Greets people\n---\n\nGreet in French.\n",
        encoding="utf-8",
    )
    loader = SkillLoader(SkillsConfig(base_path=str(tmp_path / "skills")))
    executor = SkillExecutor(mock_llm, FakeInvoker())

    result = await executor.execute_by_id(loader, "greeter", "Hello")
    assert result.success is True
    assert "Greet in French." in mock_llm.ainvoke.await_args.args[0][0].content

    missing = await executor.execute_by_id(loader, "ghost", "Hello")
    assert missing.success is False
    assert missing.error == "Skill 'ghost' not found"


# =============================================================================
# Nodes
# =============================================================================

def test_should_continue() -> None:
    with_tools = AIMessage(content="", tool_calls=[_tool_call("1")])

    assert should_continue({"messages": [], "turn_count": 0, "max_turns": 5}) == "end"
    assert should_continue({"messages": [AIMessage(content="done")], "turn_count": 1, "max_turns": 5}) == "end"
    assert should_continue({"messages": [with_tools], "turn_count": 1, "max_turns": 5}) == "tools"
    assert should_continue({"messages": [with_tools], "turn_count": 5, "max_turns": 5}) == "end"


@pytest.mark.asyncio
async def test_tool_results_are_truncated_in_records() -> None:
    class LongInvoker(FakeInvoker):
        async def execute_tool(self, name, arguments=None):
            return "x" * 500

    state = {
        "messages": [AIMessage(content="", tool_calls=[_tool_call("1")])],
        "tool_calls": [],
        "turn_count": 1,
        "max_turns": 5,
    }

    update = await tool_execution_node(state, LongInvoker())

    assert update["messages"][0].content == "x" * 500
    assert update["tool_calls"][0].result == "x" * 200 + "..."
