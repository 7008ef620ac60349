"""Rich formatting helpers for the agentloop CLI.

Provides functions that format SDK data structures for terminal display.
Rich auto-detects TTY and degrades gracefully when piped (no ANSI codes).
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape
from rich.table import Table

if TYPE_CHECKING:
    from agentloop.orchestrator.models import SessionResult
    from agentloop.toolkit.registry import ToolRegistry


def get_console() -> Console:
    """Create a Rich Console that auto-detects TTY for graceful pipe degradation."""
    return Console(stderr=False)


def format_tools(registry: ToolRegistry, console: Console) -> None:
    """Display registered tools in a compact table."""
    if not len(registry):
        console.print("[dim]No tools.[/dim]")
        return

    table = Table(show_header=True, header_style="bold", box=None, pad_edge=False)
    table.add_column("Name", style="green")
    table.add_column("Parameters", style="cyan")
    table.add_column("Description")

    for tool in registry:
        props = tool.parameters.get("properties", {})
        required = set(tool.parameters.get("required", []))
        params = ", ".join(
            name if name in required else f"[{name}]" for name in props
        )
        summary = tool.description.strip().splitlines()[0]
        table.add_row(tool.name, escape(params), escape(summary))

    console.print(table)


def format_tool_schemas(registry: ToolRegistry, provider: str, console: Console) -> None:
    """Print the tool schemas exactly as they are sent to the provider."""
    console.print_json(json.dumps(registry.schemas(provider)))


def format_session_summary(result: SessionResult, console: Console) -> None:
    """Display the counters of a finished session."""
    console.print(
        f"[dim]{result.turns} turns, {result.inference_calls} model calls, "
        f"{result.tool_calls} tool calls ({result.tool_errors} failed)[/dim]"
    )
    if result.forced_text_replies:
        console.print(
            f"[yellow]Tool round cap forced {result.forced_text_replies} "
            f"text-only repl{'y' if result.forced_text_replies == 1 else 'ies'}[/yellow]"
        )


def format_error(message: str, console: Console) -> None:
    """Display an error message."""
    console.print(f"[red]Error:[/red] {escape(message)}", highlight=False)
