"""Terminal I/O adapter.

Line-oriented operator input and label-prefixed output on a Rich console.
Rich auto-detects TTY and degrades gracefully when piped (no ANSI codes).
"""

from __future__ import annotations

import logging
import sys
from typing import IO, Protocol, runtime_checkable

from rich.console import Console
from rich.text import Text

from agentloop.toolkit.guardrail import CONFIRM_PROMPT

logger = logging.getLogger(__name__)

USER_LABEL = "You"
TOOL_LABEL = "tool"

_LABEL_STYLES = {
    USER_LABEL: "bold bright_blue",
    TOOL_LABEL: "bold bright_green",
}
_DEFAULT_LABEL_STYLE = "bold bright_yellow"


@runtime_checkable
class Terminal(Protocol):
    """What the orchestrator and tools need from the operator's terminal."""

    def read_line(self) -> tuple[str, bool]:
        """Block for one line. Returns (text, has_more); has_more is False at end of input."""
        ...

    def write_line(self, label: str, text: str) -> None:
        """Render ``text`` prefixed with ``label``."""
        ...

    def confirm(self, command: str) -> bool:
        """Ask whether ``command`` may run. True only for an explicit "yes"."""
        ...

    def trace(self, tool_name: str, arguments: str) -> None:
        """Show an advisory line for a tool about to run."""
        ...


class RichTerminal:
    """Terminal backed by a Rich console and a text input stream.

    Usage::

        terminal = RichTerminal()
        text, has_more = terminal.read_line()
        terminal.write_line("Assistant", "Hello!")
    """

    def __init__(
        self,
        console: Console | None = None,
        input_stream: IO[str] | None = None,
        assistant_label: str = "Assistant",
    ) -> None:
        self._console = console or Console(stderr=False)
        self._input = input_stream
        self.assistant_label = assistant_label

    @property
    def console(self) -> Console:
        return self._console

    def _stream(self) -> IO[str]:
        # Resolved per call so a replaced sys.stdin is honoured.
        return self._input if self._input is not None else sys.stdin

    def _readline(self) -> str | None:
        line = self._stream().readline()
        if line == "":
            return None
        return line.rstrip("\r\n")

    def _label(self, label: str) -> Text:
        return Text(label, style=_LABEL_STYLES.get(label, _DEFAULT_LABEL_STYLE))

    def banner(self, model: str) -> None:
        self._console.print(Text.assemble("Chat with ", (model, "bold"), " (use 'ctrl-c' to quit)"))

    def read_line(self) -> tuple[str, bool]:
        self._console.print(Text.assemble(self._label(USER_LABEL), ": "), end="")
        line = self._readline()
        if line is None:
            self._console.print()
            return "", False
        return line, True

    def write_line(self, label: str, text: str) -> None:
        self._console.print(Text.assemble(self._label(label), ": ", text))

    def confirm(self, command: str) -> bool:
        self._console.print(Text.assemble(("Executing command:", "bold bright_green"), " ", command))
        self._console.print(Text(CONFIRM_PROMPT, style="bright_yellow"), end="")
        answer = self._readline()
        if answer is None:
            self._console.print()
            return False
        return answer.strip().lower() == "yes"

    def trace(self, tool_name: str, arguments: str) -> None:
        self._console.print(Text.assemble(self._label(TOOL_LABEL), ": ", f"{tool_name}({arguments})"))

    def show_command_output(self, output: str) -> None:
        self._console.print(Text.assemble(("Command output:", "bold bright_green"), " ", output))

    def error(self, message: str) -> None:
        self._console.print(Text.assemble(("Error:", "bold red"), " ", message))
