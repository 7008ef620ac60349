"""Command-execution guardrail and runner.

``check_command`` rejects commands before anything runs; ``run_command``
asks the operator for confirmation and executes through bash in the
workspace directory.
"""

from __future__ import annotations

import logging
import re
import subprocess
from typing import TYPE_CHECKING

from agentloop.exceptions import (
    CommandCancelledError,
    GuardrailError,
    ToolExecutionError,
)

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

logger = logging.getLogger(__name__)

MAX_COMMAND_LENGTH = 256

# Matched case-insensitively as substrings, except entries in
# _WHOLE_WORD_OPERATIONS which must stand alone as a word.
DISALLOWED_OPERATIONS: tuple[str, ...] = (
    "rm ",
    "shutdown",
    "reboot",
    "kill ",
    "passwd",
    "chown",
    "chmod",
    "sudo",
    "su",
)

_WHOLE_WORD_OPERATIONS = frozenset({"su"})

CONFIRM_PROMPT = "Are you sure you want to execute this command? (yes/no): "


def _contains_operation(lowered: str, op: str) -> bool:
    if op in _WHOLE_WORD_OPERATIONS:
        return re.search(rf"\b{re.escape(op)}\b", lowered) is not None
    return op in lowered


def check_command(command: str) -> None:
    """Raise GuardrailError if ``command`` may not run.

    Checks run in a fixed order and the first failing check decides the
    message.
    """
    if not command:
        raise GuardrailError("command cannot be empty")

    lowered = command.lower()
    for op in DISALLOWED_OPERATIONS:
        if _contains_operation(lowered, op):
            raise GuardrailError(f'command contains disallowed operation: "{op}"')

    if "cd " in lowered:
        raise GuardrailError("changing directories is not allowed")

    if len(command) > MAX_COMMAND_LENGTH:
        raise GuardrailError("command too long")

    if "/" in lowered or ".." in lowered:
        raise GuardrailError(
            "command cannot access files outside the current working directory"
        )


def run_command(
    command: str,
    *,
    cwd: Path,
    confirm: Callable[[str], bool],
    timeout: float | None = None,
    on_output: Callable[[str], None] | None = None,
) -> str:
    """Check, confirm, and execute a shell command.

    Args:
        command: The command line to run with ``bash -c``.
        cwd: Working directory for the process.
        confirm: Asks the operator; returns True only for an explicit "yes".
        timeout: Seconds before the process is killed.
        on_output: Receives the captured output for display.

    Returns:
        Combined stdout/stderr on exit status 0.

    Raises:
        GuardrailError: The command failed a check; nothing ran.
        CommandCancelledError: The operator did not confirm; nothing ran.
        ToolExecutionError: Non-zero exit, timeout, or bash unavailable.
    """
    check_command(command)

    if not confirm(command):
        logger.info("Command declined by operator: %s", command)
        raise CommandCancelledError()

    logger.info("Executing command: %s", command)
    try:
        proc = subprocess.run(
            ["bash", "-c", command],
            cwd=str(cwd),
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            errors="replace",
            timeout=timeout,
        )
    except subprocess.TimeoutExpired as exc:
        partial = exc.output or ""
        if isinstance(partial, bytes):
            partial = partial.decode(errors="replace")
        raise ToolExecutionError(
            f"command execution failed: timed out after {timeout}s\nOutput: {partial}"
        ) from exc
    except OSError as exc:
        raise ToolExecutionError(f"command execution failed: {exc}") from exc

    output = proc.stdout or ""
    if on_output is not None:
        on_output(output)

    if proc.returncode != 0:
        raise ToolExecutionError(
            f"command execution failed: exit status {proc.returncode}\nOutput: {output}"
        )
    return output
