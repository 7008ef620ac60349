"""Conversation orchestrator: the turn-by-turn agent loop.

Reads operator input, sends the conversation to the oracle, renders its
text, dispatches any requested tools, and feeds the results back before
the operator speaks again:

    read line -> infer -> render text -> dispatch tools -> infer -> ...

The loop is strictly sequential. Recoverable tool failures arrive as
ToolResult values; inference failures propagate and end the session.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol

from agentloop.exceptions import ToolRoundLimitError
from agentloop.models.config import AgentConfig, RoundLimitAction
from agentloop.models.conversation import (
    AssistantTurn,
    Conversation,
    ToolResultTurn,
    UserTurn,
)
from agentloop.orchestrator.models import OrchestratorState, SessionResult

if TYPE_CHECKING:
    from collections.abc import Callable

    from agentloop.models.conversation import Turn
    from agentloop.terminal import Terminal
    from agentloop.toolkit.executor import ToolDispatcher

logger = logging.getLogger(__name__)


class Inference(Protocol):
    """Anything that turns a conversation into the next assistant turn."""

    def infer(self, conversation: Conversation, *, allow_tools: bool = True) -> AssistantTurn:
        ...


class Orchestrator:
    """Owns the conversation and drives the user/oracle/tool state machine.

    The conversation alternates
    ``UserTurn -> AssistantTurn -> (ToolResultTurn -> AssistantTurn)*``
    and each ToolResultTurn answers every tool use of the assistant turn
    before it, in order.

    Consecutive tool rounds are capped by ``config.max_tool_rounds``; at
    the cap ``config.round_limit_action`` either forces one text-only
    reply or aborts with ``ToolRoundLimitError``.

    Usage::

        orch = Orchestrator(inference, dispatcher, terminal, config=config)
        result = orch.run()
        print(f"{result.turns} turns, {result.tool_calls} tool calls")
    """

    def __init__(
        self,
        inference: Inference,
        dispatcher: ToolDispatcher,
        terminal: Terminal,
        config: AgentConfig | None = None,
        *,
        assistant_label: str = "Assistant",
        on_turn: Callable[[Turn], None] | None = None,
    ) -> None:
        self._inference = inference
        self._dispatcher = dispatcher
        self._terminal = terminal
        self._config = config or AgentConfig()
        self._assistant_label = assistant_label
        self._on_turn = on_turn
        self._conversation = Conversation()
        self._state = OrchestratorState.AWAITING_USER_INPUT

        self._inference_calls = 0
        self._tool_calls = 0
        self._tool_errors = 0
        self._forced = 0

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def state(self) -> OrchestratorState:
        """Return the current orchestrator state."""
        return self._state

    @property
    def conversation(self) -> Conversation:
        return self._conversation

    def run(self) -> SessionResult:
        """Run the loop until the operator's input ends.

        Returns:
            SessionResult once end of input is reached.

        Raises:
            LLMClientError: Inference failed (also httpx.HTTPError).
            ToolRoundLimitError: The round cap was hit with the abort
                action, or the oracle ignored a text-only request.
        """
        rounds = 0
        self._state = OrchestratorState.AWAITING_USER_INPUT
        try:
            while True:
                if self._state == OrchestratorState.AWAITING_USER_INPUT:
                    text, has_more = self._terminal.read_line()
                    if not has_more:
                        logger.info("End of input; session finished")
                        break
                    if not text.strip():
                        continue
                    self._append(UserTurn(text))
                    rounds = 0
                    self._state = OrchestratorState.AWAITING_INFERENCE

                allow_tools = True
                if self._round_cap_reached(rounds):
                    allow_tools = self._on_round_cap(rounds)

                turn = self._infer(allow_tools=allow_tools)
                self._append(turn)
                self._render(turn)

                if not turn.has_tool_use:
                    self._state = OrchestratorState.AWAITING_USER_INPUT
                    continue

                if not allow_tools:
                    raise ToolRoundLimitError(
                        rounds, "the model requested tools after they were disabled"
                    )

                self._state = OrchestratorState.AWAITING_TOOL_RESULTS
                self._append(self._run_tools(turn))
                rounds += 1
                self._state = OrchestratorState.AWAITING_INFERENCE
        finally:
            self._state = OrchestratorState.STOPPED

        return SessionResult(
            state=self._state,
            turns=len(self._conversation),
            inference_calls=self._inference_calls,
            tool_calls=self._tool_calls,
            tool_errors=self._tool_errors,
            forced_text_replies=self._forced,
        )

    # ------------------------------------------------------------------
    # Internal methods
    # ------------------------------------------------------------------

    def _round_cap_reached(self, rounds: int) -> bool:
        cap = self._config.max_tool_rounds
        return cap is not None and rounds >= cap

    def _on_round_cap(self, rounds: int) -> bool:
        """Apply the round-limit action. Returns whether tools stay enabled."""
        if self._config.round_limit_action == RoundLimitAction.ABORT:
            raise ToolRoundLimitError(rounds)
        logger.warning(
            "Tool round cap (%d) reached; requesting a text-only reply", rounds
        )
        self._forced += 1
        return False

    def _infer(self, *, allow_tools: bool) -> AssistantTurn:
        self._inference_calls += 1
        return self._inference.infer(self._conversation, allow_tools=allow_tools)

    def _render(self, turn: AssistantTurn) -> None:
        for text in turn.texts:
            self._terminal.write_line(self._assistant_label, text)

    def _run_tools(self, turn: AssistantTurn) -> ToolResultTurn:
        results = self._dispatcher.dispatch_all(turn.tool_uses)
        self._tool_calls += len(results)
        self._tool_errors += sum(1 for r in results if r.is_error)
        return ToolResultTurn([r.to_entry() for r in results])

    def _append(self, turn: Turn) -> None:
        self._conversation.append(turn)
        if self._on_turn is not None:
            try:
                self._on_turn(turn)
            except Exception:
                logger.debug("on_turn callback error", exc_info=True)
