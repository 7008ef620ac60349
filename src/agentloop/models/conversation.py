"""Conversation data model.

Frozen dataclasses for turns and segments, plus the append-only
``Conversation`` that enforces turn ordering:

    UserTurn -> AssistantTurn -> (ToolResultTurn -> AssistantTurn)* -> UserTurn ...

A ToolResultTurn must follow an AssistantTurn that requested at least one
tool, and must answer every request exactly once, in order.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Union

from agentloop.exceptions import ConversationOrderError

if TYPE_CHECKING:
    from collections.abc import Iterator

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Segments
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TextSegment:
    """Free text produced by the assistant."""

    text: str


@dataclass(frozen=True)
class ToolUseSegment:
    """A tool invocation requested by the assistant.

    Attributes:
        invocation_id: Identifier the matching result must carry.
        tool_name: Name of the requested tool.
        raw_arguments: Arguments exactly as the oracle sent them, usually a
            dict; a JSON string when the provider could not decode them.
    """

    invocation_id: str
    tool_name: str
    raw_arguments: Any = field(default_factory=dict)


Segment = Union[TextSegment, ToolUseSegment]


# ---------------------------------------------------------------------------
# Turns
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class UserTurn:
    """One line of operator input."""

    text: str


@dataclass(frozen=True)
class AssistantTurn:
    """One reply from the oracle: ordered text and tool-use segments."""

    segments: tuple[Segment, ...] = ()

    def __post_init__(self) -> None:
        # Accept any sequence but store an immutable tuple.
        object.__setattr__(self, "segments", tuple(self.segments))

    @property
    def texts(self) -> list[str]:
        """Text of every TextSegment, in order."""
        return [s.text for s in self.segments if isinstance(s, TextSegment)]

    @property
    def tool_uses(self) -> list[ToolUseSegment]:
        """Every ToolUseSegment, in order."""
        return [s for s in self.segments if isinstance(s, ToolUseSegment)]

    @property
    def has_tool_use(self) -> bool:
        return any(isinstance(s, ToolUseSegment) for s in self.segments)


@dataclass(frozen=True)
class ToolResultEntry:
    """Outcome of one tool invocation, correlated by invocation_id."""

    invocation_id: str
    output: str
    is_error: bool = False


@dataclass(frozen=True)
class ToolResultTurn:
    """Results for every tool use of the preceding assistant turn."""

    results: tuple[ToolResultEntry, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "results", tuple(self.results))


Turn = Union[UserTurn, AssistantTurn, ToolResultTurn]


# ---------------------------------------------------------------------------
# Conversation
# ---------------------------------------------------------------------------


class Conversation:
    """Append-only, ordered sequence of turns.

    Turns are never modified, removed, or reordered. Every append is checked
    against the previous turn; an out-of-order append raises
    ``ConversationOrderError`` and leaves the conversation unchanged.

    Usage::

        conv = Conversation()
        conv.append(UserTurn("hi"))
        conv.append(AssistantTurn([TextSegment("hello")]))
    """

    def __init__(self) -> None:
        self._turns: list[Turn] = []

    @property
    def turns(self) -> tuple[Turn, ...]:
        """Snapshot of all turns in order."""
        return tuple(self._turns)

    @property
    def last(self) -> Turn | None:
        return self._turns[-1] if self._turns else None

    def __len__(self) -> int:
        return len(self._turns)

    def __iter__(self) -> Iterator[Turn]:
        return iter(tuple(self._turns))

    def __getitem__(self, index: int) -> Turn:
        return self._turns[index]

    def append(self, turn: Turn) -> Turn:
        """Append a turn after checking the ordering rules.

        Args:
            turn: The UserTurn, AssistantTurn, or ToolResultTurn to add.

        Returns:
            The appended turn.

        Raises:
            ConversationOrderError: If the turn may not follow the last one.
            TypeError: If ``turn`` is not a Turn.
        """
        if isinstance(turn, UserTurn):
            self._check_user(turn)
        elif isinstance(turn, AssistantTurn):
            self._check_assistant(turn)
        elif isinstance(turn, ToolResultTurn):
            self._check_tool_results(turn)
        else:
            raise TypeError(f"Expected a Turn, got {type(turn).__name__}")
        self._turns.append(turn)
        logger.debug("Appended %s (turn %d)", type(turn).__name__, len(self._turns))
        return turn

    # ------------------------------------------------------------------
    # Ordering checks
    # ------------------------------------------------------------------

    def _check_user(self, turn: UserTurn) -> None:
        last = self.last
        if isinstance(last, UserTurn):
            raise ConversationOrderError("Two consecutive user turns")
        if isinstance(last, AssistantTurn) and last.has_tool_use:
            raise ConversationOrderError(
                "User turn cannot follow an assistant turn with pending tool uses"
            )
        if isinstance(last, ToolResultTurn):
            raise ConversationOrderError(
                "User turn cannot follow a tool result turn; the assistant must reply first"
            )

    def _check_assistant(self, turn: AssistantTurn) -> None:
        last = self.last
        if last is None or isinstance(last, AssistantTurn):
            raise ConversationOrderError(
                "Assistant turn must follow a user turn or a tool result turn"
            )

    def _check_tool_results(self, turn: ToolResultTurn) -> None:
        last = self.last
        if not isinstance(last, AssistantTurn) or not last.has_tool_use:
            raise ConversationOrderError(
                "Tool result turn must follow an assistant turn with tool uses"
            )
        expected = [u.invocation_id for u in last.tool_uses]
        actual = [r.invocation_id for r in turn.results]
        if expected != actual:
            raise ConversationOrderError(
                f"Tool results {actual} do not match tool uses {expected}"
            )
