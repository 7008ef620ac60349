"""Agent toolkit: tool definitions, registry, and dispatcher.

Provides the built-in workspace tools (read_file, list_files, edit_file,
command_execution, fetch_url), the immutable ToolRegistry, and the
ToolDispatcher that turns every invocation into a ToolResult value.
"""

from agentloop.toolkit.definitions import ToolContext, build_registry, get_all_tools
from agentloop.toolkit.executor import TOOL_NOT_FOUND, ToolDispatcher
from agentloop.toolkit.guardrail import (
    DISALLOWED_OPERATIONS,
    MAX_COMMAND_LENGTH,
    check_command,
    run_command,
)
from agentloop.toolkit.models import ToolDefinition, ToolOutcome, ToolResult
from agentloop.toolkit.registry import ToolRegistry
from agentloop.toolkit.web import extract_text_from_html, fetch_url

__all__ = [
    "ToolDefinition",
    "ToolOutcome",
    "ToolResult",
    "ToolRegistry",
    "ToolDispatcher",
    "ToolContext",
    "TOOL_NOT_FOUND",
    "get_all_tools",
    "build_registry",
    "check_command",
    "run_command",
    "DISALLOWED_OPERATIONS",
    "MAX_COMMAND_LENGTH",
    "fetch_url",
    "extract_text_from_html",
]
