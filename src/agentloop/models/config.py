"""Configuration models for agentloop.

AgentConfig is built once at startup and passed explicitly to the
orchestrator, the tool builders, and the inference client. Nothing in
agentloop reads configuration from module-level state.
"""

from __future__ import annotations

import enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class Provider(str, enum.Enum):
    """Wire format spoken by the inference backend."""

    ANTHROPIC = "anthropic"
    OPENAI = "openai"


class RoundLimitAction(str, enum.Enum):
    """What to do when the oracle keeps requesting tools past the cap.

    - ``FORCE_TEXT``: ask once more with tools disabled, then return to
      the operator.
    - ``ABORT``: end the session with ``ToolRoundLimitError``.
    """

    FORCE_TEXT = "force_text"
    ABORT = "abort"


DEFAULT_MODELS: dict[Provider, str] = {
    Provider.ANTHROPIC: "claude-3-5-haiku-latest",
    Provider.OPENAI: "gpt-4o-mini",
}


class AgentConfig(BaseModel):
    """Per-session configuration."""

    model_config = {"frozen": True}

    provider: Provider = Provider.ANTHROPIC
    model: Optional[str] = None  # None = provider default
    max_tokens: int = Field(default=1024, gt=0)
    api_key: Optional[str] = None  # None = read from environment
    base_url: Optional[str] = None
    request_timeout: float = Field(default=120.0, gt=0)
    max_retries: int = Field(default=1, ge=1)  # 1 = single attempt, no retry
    max_tool_rounds: Optional[int] = Field(default=25, ge=1)  # None = unlimited
    round_limit_action: RoundLimitAction = RoundLimitAction.FORCE_TEXT
    system_prompt: Optional[str] = None
    workspace: Path = Field(default_factory=Path.cwd)
    command_timeout: float = Field(default=60.0, gt=0)
    fetch_timeout: float = Field(default=30.0, gt=0)

    @field_validator("workspace")
    @classmethod
    def _workspace_is_dir(cls, value: Path) -> Path:
        value = Path(value).expanduser()
        if not value.is_dir():
            raise ValueError(f"workspace is not a directory: {value}")
        return value.resolve()

    @property
    def resolved_model(self) -> str:
        """The configured model, or the provider's default."""
        return self.model or DEFAULT_MODELS[self.provider]
