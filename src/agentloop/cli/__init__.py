"""agentloop CLI -- interactive terminal agent.

This module is NEVER imported from agentloop/__init__.py.
It is only loaded via the ``agentloop`` entry point defined in pyproject.toml.
"""

from __future__ import annotations

import logging

import click
from rich.console import Console
from rich.logging import RichHandler

_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


def configure_logging(level: str) -> None:
    """Send agentloop log records to stderr through Rich."""
    handler = RichHandler(console=Console(stderr=True), show_path=False)
    handler.setFormatter(logging.Formatter("%(message)s"))
    root = logging.getLogger("agentloop")
    root.handlers[:] = [handler]
    root.setLevel(level.upper())
    root.propagate = False


@click.group()
@click.option(
    "--log-level",
    default="WARNING",
    envvar="AGENTLOOP_LOG_LEVEL",
    type=click.Choice(_LOG_LEVELS, case_sensitive=False),
    help="Log level for diagnostics on stderr.",
)
@click.pass_context
def cli(ctx: click.Context, log_level: str) -> None:
    """agentloop: chat with an LLM that can read, edit, and run things in your workspace."""
    ctx.ensure_object(dict)
    ctx.obj["log_level"] = log_level
    configure_logging(log_level)


# Register subcommands after cli group is defined
from agentloop.cli.commands.chat import chat  # noqa: E402
from agentloop.cli.commands.tools import tools  # noqa: E402

cli.add_command(chat)
cli.add_command(tools)
