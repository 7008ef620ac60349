"""agentloop chat -- run an interactive session."""

from __future__ import annotations

from pathlib import Path

import click
import httpx
from pydantic import ValidationError

from agentloop.cli.formatting import format_error, format_session_summary, get_console
from agentloop.models.config import AgentConfig, Provider, RoundLimitAction


@click.command()
@click.option(
    "--provider",
    default=Provider.ANTHROPIC.value,
    envvar="AGENTLOOP_PROVIDER",
    type=click.Choice([p.value for p in Provider], case_sensitive=False),
    help="Inference API wire format.",
)
@click.option("--model", default=None, envvar="AGENTLOOP_MODEL", help="Model name (provider default if omitted).")
@click.option("--max-tokens", default=1024, type=int, envvar="AGENTLOOP_MAX_TOKENS", help="Output token budget per reply.")
@click.option("--api-key", default=None, envvar="AGENTLOOP_API_KEY", help="API key (else ANTHROPIC_API_KEY / OPENAI_API_KEY).")
@click.option("--base-url", default=None, envvar="AGENTLOOP_BASE_URL", help="API base URL override.")
@click.option("--timeout", "request_timeout", default=120.0, type=float, envvar="AGENTLOOP_TIMEOUT", help="Inference request timeout in seconds.")
@click.option("--max-retries", default=1, type=int, envvar="AGENTLOOP_MAX_RETRIES", help="Attempts per inference request (1 = no retry).")
@click.option(
    "--max-tool-rounds",
    default=25,
    type=int,
    envvar="AGENTLOOP_MAX_TOOL_ROUNDS",
    help="Consecutive tool rounds before the cap applies (0 = unlimited).",
)
@click.option(
    "--on-round-limit",
    "round_limit_action",
    default=RoundLimitAction.FORCE_TEXT.value,
    envvar="AGENTLOOP_ON_ROUND_LIMIT",
    type=click.Choice([a.value for a in RoundLimitAction], case_sensitive=False),
    help="Force a text-only reply or abort when the cap is reached.",
)
@click.option("--system", "system_prompt", default=None, envvar="AGENTLOOP_SYSTEM_PROMPT", help="Optional system prompt.")
@click.option(
    "--workspace",
    default=".",
    envvar="AGENTLOOP_WORKSPACE",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Directory the tools operate in.",
)
@click.option("--command-timeout", default=60.0, type=float, envvar="AGENTLOOP_COMMAND_TIMEOUT", help="Shell command timeout in seconds.")
@click.option("--tool", "only_tools", multiple=True, help="Enable only this tool (repeatable).")
@click.option("--summary", is_flag=True, help="Print session counters on exit.")
def chat(
    provider: str,
    model: str | None,
    max_tokens: int,
    api_key: str | None,
    base_url: str | None,
    request_timeout: float,
    max_retries: int,
    max_tool_rounds: int,
    round_limit_action: str,
    system_prompt: str | None,
    workspace: Path,
    command_timeout: float,
    only_tools: tuple[str, ...],
    summary: bool,
) -> None:
    """Chat with the model; it may call tools in the workspace."""
    from agentloop.llm.inference import InferenceClient
    from agentloop.orchestrator import Orchestrator
    from agentloop.terminal import RichTerminal
    from agentloop.toolkit.definitions import ToolContext, build_registry
    from agentloop.toolkit.executor import ToolDispatcher

    console = get_console()
    try:
        config = AgentConfig(
            provider=provider,
            model=model,
            max_tokens=max_tokens,
            api_key=api_key,
            base_url=base_url,
            request_timeout=request_timeout,
            max_retries=max_retries,
            max_tool_rounds=max_tool_rounds or None,
            round_limit_action=round_limit_action,
            system_prompt=system_prompt,
            workspace=workspace,
            command_timeout=command_timeout,
        )
    except ValidationError as e:
        format_error(f"Invalid configuration: {e}", console)
        raise SystemExit(1) from None

    terminal = RichTerminal(console)
    try:
        with httpx.Client(timeout=config.fetch_timeout, follow_redirects=True) as http:
            ctx = ToolContext(
                workspace=config.workspace,
                confirm=terminal.confirm,
                http_client=http,
                command_timeout=config.command_timeout,
                fetch_timeout=config.fetch_timeout,
                on_command_output=terminal.show_command_output,
            )
            registry = build_registry(ctx, only=list(only_tools) or None)
            inference = InferenceClient.from_config(config, registry)
            try:
                orchestrator = Orchestrator(
                    inference,
                    ToolDispatcher(registry, on_trace=terminal.trace),
                    terminal,
                    config,
                    assistant_label=terminal.assistant_label,
                )
                terminal.banner(config.resolved_model)
                result = orchestrator.run()
            finally:
                inference.close()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        console.print()
        raise SystemExit(130) from None
    except Exception as e:
        format_error(str(e), console)
        raise SystemExit(1) from None

    if summary:
        format_session_summary(result, console)
