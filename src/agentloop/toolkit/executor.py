"""ToolDispatcher: dispatches tool invocations to registered handlers.

Provides a single ``dispatch()`` method that looks up the tool by name,
invokes it with the raw arguments, and returns a structured ``ToolResult``.
Every outcome is a value: nothing derived from Exception escapes.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from agentloop.toolkit.models import ToolResult

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from agentloop.models.conversation import ToolUseSegment
    from agentloop.toolkit.registry import ToolRegistry

logger = logging.getLogger(__name__)

TOOL_NOT_FOUND = "tool not found"


def format_arguments(raw_arguments: Any) -> str:
    """Render raw arguments compactly for the operator trace."""
    if isinstance(raw_arguments, (str, bytes)):
        return raw_arguments.decode() if isinstance(raw_arguments, bytes) else raw_arguments
    try:
        return json.dumps(raw_arguments, separators=(",", ":"), ensure_ascii=False)
    except (TypeError, ValueError):
        return repr(raw_arguments)


class ToolDispatcher:
    """Dispatches tool calls to registry handlers and returns structured results.

    Usage::

        dispatcher = ToolDispatcher(registry, on_trace=terminal.trace)
        result = dispatcher.dispatch("toolu_1", "read_file", {"path": "a.txt"})
        if result.is_error:
            print(result.output)
    """

    def __init__(
        self,
        registry: ToolRegistry,
        on_trace: Callable[[str, str], None] | None = None,
    ) -> None:
        """Initialize the dispatcher.

        Args:
            registry: Tools available for dispatch.
            on_trace: Called as ``on_trace(tool_name, arguments_text)``
                before each handler runs, for operator visibility.
        """
        self._registry = registry
        self._on_trace = on_trace

    @property
    def registry(self) -> ToolRegistry:
        return self._registry

    def dispatch(self, invocation_id: str, tool_name: str, raw_arguments: Any) -> ToolResult:
        """Execute one tool invocation.

        Args:
            invocation_id: ID correlating the result with its request.
            tool_name: Name of the tool to execute.
            raw_arguments: Arguments as sent by the oracle.

        Returns:
            ToolResult; ``is_error`` is set for unknown tools and failures.
        """
        tool = self._registry.get(tool_name)
        if tool is None:
            logger.info("Unknown tool requested: %s", tool_name)
            return ToolResult(
                invocation_id=invocation_id,
                tool_name=tool_name,
                output=TOOL_NOT_FOUND,
                is_error=True,
            )

        args_text = format_arguments(raw_arguments)
        logger.info("Dispatching %s(%s)", tool_name, args_text)
        self._trace(tool_name, args_text)

        try:
            outcome = tool.invoke(raw_arguments)
        except Exception as exc:
            logger.debug("Tool %s failed: %s", tool_name, exc, exc_info=True)
            return ToolResult(
                invocation_id=invocation_id,
                tool_name=tool_name,
                output=f"{type(exc).__name__}: {exc}",
                is_error=True,
            )

        if not outcome.ok:
            logger.debug("Tool %s returned error: %s", tool_name, outcome.output)
        return ToolResult(
            invocation_id=invocation_id,
            tool_name=tool_name,
            output=outcome.output,
            is_error=not outcome.ok,
        )

    def dispatch_all(self, tool_uses: Iterable[ToolUseSegment]) -> list[ToolResult]:
        """Dispatch tool uses sequentially, one result per use, order preserved."""
        return [
            self.dispatch(use.invocation_id, use.tool_name, use.raw_arguments)
            for use in tool_uses
        ]

    def _trace(self, tool_name: str, args_text: str) -> None:
        if self._on_trace is None:
            return
        try:
            self._on_trace(tool_name, args_text)
        except Exception:
            logger.debug("on_trace callback error", exc_info=True)
