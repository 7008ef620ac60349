"""Shared test fixtures for agentloop.

Provides a scripted terminal, scripted inference, a recording LLM
transport, and a workspace-bound tool context.
"""

from __future__ import annotations

from typing import Any

import pytest

from agentloop.models.conversation import (
    AssistantTurn,
    Conversation,
    TextSegment,
    ToolUseSegment,
)
from agentloop.toolkit.definitions import ToolContext, build_registry
from agentloop.toolkit.executor import ToolDispatcher


# ------------------------------------------------------------------
# Fakes
# ------------------------------------------------------------------


class ScriptedTerminal:
    """Terminal that replays input lines and confirmation answers."""

    def __init__(self, lines: list[str] | None = None, answers: list[str] | None = None):
        self.lines = list(lines or [])
        self.answers = list(answers or [])
        self.written: list[tuple[str, str]] = []
        self.traces: list[tuple[str, str]] = []
        self.confirmations: list[str] = []
        self.reads = 0

    def read_line(self) -> tuple[str, bool]:
        self.reads += 1
        if not self.lines:
            return "", False
        return self.lines.pop(0), True

    def write_line(self, label: str, text: str) -> None:
        self.written.append((label, text))

    def confirm(self, command: str) -> bool:
        self.confirmations.append(command)
        if not self.answers:
            return False
        return self.answers.pop(0).strip().lower() == "yes"

    def trace(self, tool_name: str, arguments: str) -> None:
        self.traces.append((tool_name, arguments))


class ScriptedInference:
    """Inference stand-in returning canned assistant turns in order.

    Records a snapshot of the conversation and the allow_tools flag for
    every call.
    """

    def __init__(self, turns: list[AssistantTurn]):
        self.turns = list(turns)
        self.calls: list[tuple[tuple, bool]] = []

    def infer(self, conversation: Conversation, *, allow_tools: bool = True) -> AssistantTurn:
        self.calls.append((conversation.turns, allow_tools))
        if not self.turns:
            raise AssertionError("ScriptedInference ran out of turns")
        return self.turns.pop(0)


class FailingInference:
    """Inference stand-in that always raises ``exc``."""

    def __init__(self, exc: Exception):
        self.exc = exc
        self.calls = 0

    def infer(self, conversation: Conversation, *, allow_tools: bool = True) -> AssistantTurn:
        self.calls += 1
        raise self.exc


class RecordingLLMClient:
    """LLMClient that records chat() kwargs and returns canned responses."""

    def __init__(self, responses: list[dict]):
        self.responses = list(responses)
        self.calls: list[dict[str, Any]] = []
        self.closed = False

    def chat(self, messages, **kwargs) -> dict:
        self.calls.append({"messages": messages, **kwargs})
        return self.responses.pop(0)

    def close(self) -> None:
        self.closed = True


# ------------------------------------------------------------------
# Turn builders
# ------------------------------------------------------------------


def text_turn(*texts: str) -> AssistantTurn:
    """Assistant turn holding only text segments."""
    return AssistantTurn([TextSegment(t) for t in texts])


def tool_turn(*calls: tuple[str, str, Any], text: str | None = None) -> AssistantTurn:
    """Assistant turn with optional leading text and (id, name, args) tool uses."""
    segments: list = [TextSegment(text)] if text else []
    segments.extend(ToolUseSegment(cid, name, args) for cid, name, args in calls)
    return AssistantTurn(segments)


# ------------------------------------------------------------------
# Fixtures
# ------------------------------------------------------------------


@pytest.fixture
def terminal() -> ScriptedTerminal:
    return ScriptedTerminal()


@pytest.fixture
def workspace(tmp_path):
    """Empty workspace directory."""
    ws = tmp_path / "workspace"
    ws.mkdir()
    return ws


@pytest.fixture
def tool_context(workspace, terminal) -> ToolContext:
    return ToolContext(workspace=workspace, confirm=terminal.confirm, command_timeout=10.0)


@pytest.fixture
def registry(tool_context):
    return build_registry(tool_context)


@pytest.fixture
def dispatcher(registry, terminal) -> ToolDispatcher:
    return ToolDispatcher(registry, on_trace=terminal.trace)
