"""Hand-crafted definitions for the built-in workspace tools.

Each tool definition pairs a clear, action-oriented description and a
hand-written JSON Schema (what the oracle sees) with a pydantic model
(what validates the raw arguments) and a handler bound to a
``ToolContext``.  Handlers raise ``ToolError`` subclasses on failure.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Optional

import httpx
from pydantic import BaseModel

from agentloop.exceptions import ToolArgumentError, ToolExecutionError
from agentloop.toolkit.guardrail import run_command
from agentloop.toolkit.models import ToolDefinition
from agentloop.toolkit.registry import ToolRegistry
from agentloop.toolkit.web import fetch_url

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ToolContext:
    """Everything the built-in handlers need from the session.

    Attributes:
        workspace: Directory relative paths resolve against and commands
            run in.
        confirm: Asks the operator whether to run a command.
        http_client: Client used by fetch_url; None builds one per call.
        command_timeout: Seconds before a shell command is killed.
        fetch_timeout: Timeout for the per-call fetch client.
        on_command_output: Receives captured command output for display.
    """

    workspace: Path
    confirm: Callable[[str], bool]
    http_client: httpx.Client | None = None
    command_timeout: float | None = 60.0
    fetch_timeout: float = 30.0
    on_command_output: Callable[[str], None] | None = None

    def resolve(self, path: str) -> Path:
        return self.workspace / path


# ---------------------------------------------------------------------------
# Argument models
# ---------------------------------------------------------------------------


class ReadFileInput(BaseModel):
    path: str


class ListFilesInput(BaseModel):
    path: str = ""
    recursive: bool = False


class EditFileInput(BaseModel):
    path: str
    old_str: str
    new_str: str


class CommandExecutionInput(BaseModel):
    command: str


class FetchUrlInput(BaseModel):
    url: str


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------


def _handle_read_file(ctx: ToolContext, args: ReadFileInput) -> str:
    target = ctx.resolve(args.path)
    try:
        return target.read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        raise ToolExecutionError(f"failed to read {args.path}: {exc.strerror or exc}") from exc


def _handle_list_files(ctx: ToolContext, args: ListFilesInput) -> str:
    rel = args.path or "."
    root = ctx.resolve(rel)
    if not root.is_dir():
        raise ToolExecutionError(f"not a directory: {rel}")

    entries: list[str] = []
    try:
        if args.recursive:
            for dirpath, dirnames, filenames in os.walk(root):
                dirnames.sort()
                base = Path(dirpath).relative_to(root)
                for name in dirnames:
                    entries.append((base / name).as_posix() + "/")
                for name in sorted(filenames):
                    entries.append((base / name).as_posix())
            entries.sort()
        else:
            with os.scandir(root) as it:
                for entry in it:
                    entries.append(entry.name + "/" if entry.is_dir() else entry.name)
            entries.sort()
    except OSError as exc:
        raise ToolExecutionError(f"failed to list {rel}: {exc.strerror or exc}") from exc

    return json.dumps(entries)


def _handle_edit_file(ctx: ToolContext, args: EditFileInput) -> str:
    if not args.path or args.old_str == args.new_str:
        raise ToolArgumentError("invalid input parameters")

    target = ctx.resolve(args.path)
    if not target.exists():
        if args.old_str != "":
            raise ToolExecutionError(f"file not found: {args.path}")
        return _create_file(target, args.path, args.new_str)

    if args.old_str == "":
        raise ToolArgumentError("old_str must not be empty when editing an existing file")

    try:
        old_content = target.read_text(encoding="utf-8")
    except OSError as exc:
        raise ToolExecutionError(f"failed to read {args.path}: {exc.strerror or exc}") from exc

    if args.old_str not in old_content:
        raise ToolExecutionError("old_str not found in file")

    new_content = old_content.replace(args.old_str, args.new_str)
    try:
        target.write_text(new_content, encoding="utf-8")
    except OSError as exc:
        raise ToolExecutionError(f"failed to write {args.path}: {exc.strerror or exc}") from exc
    return "OK"


def _create_file(target: Path, display_path: str, content: str) -> str:
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise ToolExecutionError(f"failed to create directory: {exc.strerror or exc}") from exc
    try:
        target.write_text(content, encoding="utf-8")
    except OSError as exc:
        raise ToolExecutionError(f"failed to create file: {exc.strerror or exc}") from exc
    logger.info("Created %s", target)
    return f"Successfully created file {display_path}"


def _handle_command_execution(ctx: ToolContext, args: CommandExecutionInput) -> str:
    return run_command(
        args.command,
        cwd=ctx.workspace,
        confirm=ctx.confirm,
        timeout=ctx.command_timeout,
        on_output=ctx.on_command_output,
    )


def _handle_fetch_url(ctx: ToolContext, args: FetchUrlInput) -> str:
    if ctx.http_client is not None:
        return fetch_url(args.url, client=ctx.http_client)
    with httpx.Client(timeout=ctx.fetch_timeout, follow_redirects=True) as client:
        return fetch_url(args.url, client=client)


# ---------------------------------------------------------------------------
# Definitions
# ---------------------------------------------------------------------------


def get_all_tools(ctx: ToolContext) -> list[ToolDefinition]:
    """Build definitions for the five built-in tools.

    Each call returns fresh handlers bound to ``ctx``; no module-level
    references to any session are stored.

    Args:
        ctx: Session resources the handlers use.

    Returns:
        Tool definitions in registration order.
    """
    return [
        ToolDefinition(
            name="read_file",
            description=(
                "Read the contents of a given relative file path. Use this when "
                "you want to see what's inside a file. Do not use this with "
                "directory names."
            ),
            parameters={
                "type": "object",
                "properties": {
                    "path": {
                        "type": "string",
                        "description": "The relative path of a file in the working directory.",
                    },
                },
                "required": ["path"],
            },
            handler=lambda args: _handle_read_file(ctx, args),
            args_model=ReadFileInput,
        ),
        ToolDefinition(
            name="list_files",
            description=(
                "List files and directories at a given relative path. If no path "
                "is provided, lists files in the current directory. Directories "
                "end with '/'."
            ),
            parameters={
                "type": "object",
                "properties": {
                    "path": {
                        "type": "string",
                        "description": (
                            "Optional relative path to list files from. Defaults "
                            "to current directory if not provided."
                        ),
                    },
                    "recursive": {
                        "type": "boolean",
                        "description": "List the whole tree below path instead of its immediate entries.",
                    },
                },
            },
            handler=lambda args: _handle_list_files(ctx, args),
            args_model=ListFilesInput,
        ),
        ToolDefinition(
            name="edit_file",
            description=(
                "Make edits to a text file.\n\n"
                "Replaces 'old_str' with 'new_str' in the given file. 'old_str' "
                "and 'new_str' MUST be different from each other.\n\n"
                "If the file specified with path doesn't exist, it will be created."
            ),
            parameters={
                "type": "object",
                "properties": {
                    "path": {
                        "type": "string",
                        "description": "The path to the file",
                    },
                    "old_str": {
                        "type": "string",
                        "description": (
                            "Text to search for - must match exactly and must "
                            "only have one match exactly"
                        ),
                    },
                    "new_str": {
                        "type": "string",
                        "description": "Text to replace old_str with",
                    },
                },
                "required": ["path", "old_str", "new_str"],
            },
            handler=lambda args: _handle_edit_file(ctx, args),
            args_model=EditFileInput,
        ),
        ToolDefinition(
            name="command_execution",
            description=(
                "Execute commands in Bash. You can execute commands only in the "
                "current working directory. The operator must confirm every command."
            ),
            parameters={
                "type": "object",
                "properties": {
                    "command": {
                        "type": "string",
                        "description": "The command which should be executed.",
                    },
                },
                "required": ["command"],
            },
            handler=lambda args: _handle_command_execution(ctx, args),
            args_model=CommandExecutionInput,
        ),
        ToolDefinition(
            name="fetch_url",
            description=(
                "Fetch the contents of a URL. Use this to retrieve data from the "
                "web. Returns the visible text of the page."
            ),
            parameters={
                "type": "object",
                "properties": {
                    "url": {
                        "type": "string",
                        "description": "The url that should be fetched.",
                    },
                },
                "required": ["url"],
            },
            handler=lambda args: _handle_fetch_url(ctx, args),
            args_model=FetchUrlInput,
        ),
    ]


def build_registry(ctx: ToolContext, only: Optional[list[str]] = None) -> ToolRegistry:
    """Build a registry of the built-in tools.

    Args:
        ctx: Session resources the handlers use.
        only: Restrict the registry to these tool names (registration
            order is kept).

    Raises:
        ValueError: If ``only`` names an unknown tool.
    """
    tools = get_all_tools(ctx)
    if only is not None:
        known = {t.name for t in tools}
        unknown = [name for name in only if name not in known]
        if unknown:
            raise ValueError(
                f"Unknown tool(s): {', '.join(unknown)}. Valid: {', '.join(sorted(known))}"
            )
        tools = [t for t in tools if t.name in only]
    return ToolRegistry(tools)
