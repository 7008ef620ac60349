"""agentloop tools -- list the built-in tools."""

from __future__ import annotations

from pathlib import Path

import click

from agentloop.cli.formatting import format_error, format_tool_schemas, format_tools, get_console
from agentloop.models.config import Provider


@click.command()
@click.option("--schema", is_flag=True, help="Print the JSON schemas sent to the model.")
@click.option(
    "--provider",
    default=Provider.ANTHROPIC.value,
    type=click.Choice([p.value for p in Provider], case_sensitive=False),
    help="Schema format used with --schema.",
)
def tools(schema: bool, provider: str) -> None:
    """Show the tools the model may call."""
    from agentloop.toolkit.definitions import ToolContext, build_registry

    console = get_console()
    try:
        # Listing never runs a handler; commands would be declined.
        registry = build_registry(ToolContext(workspace=Path.cwd(), confirm=lambda _command: False))
        if schema:
            format_tool_schemas(registry, provider, console)
        else:
            format_tools(registry, console)
    except SystemExit:
        raise
    except Exception as e:
        format_error(str(e), console)
        raise SystemExit(1) from None
