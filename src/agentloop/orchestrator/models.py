"""Orchestrator state and result types."""

from __future__ import annotations

import enum
from dataclasses import dataclass


class OrchestratorState(str, enum.Enum):
    """States of the conversation loop.

    ``AWAITING_TOOL_RESULTS`` is transient: tool dispatch is synchronous
    within one assistant turn.
    """

    AWAITING_USER_INPUT = "awaiting_user_input"
    AWAITING_INFERENCE = "awaiting_inference"
    AWAITING_TOOL_RESULTS = "awaiting_tool_results"
    STOPPED = "stopped"


@dataclass(frozen=True)
class SessionResult:
    """Summary of a finished session.

    Frozen: the result is immutable once the run completes.

    Attributes:
        state: Final state (STOPPED after a clean end of input).
        turns: Number of turns in the conversation.
        inference_calls: Number of calls made to the oracle.
        tool_calls: Number of tool invocations dispatched.
        tool_errors: How many of those came back with is_error.
        forced_text_replies: Times the round cap forced a text-only reply.
    """

    state: OrchestratorState
    turns: int = 0
    inference_calls: int = 0
    tool_calls: int = 0
    tool_errors: int = 0
    forced_text_replies: int = 0
