"""Data models: conversation turns and session configuration."""

from agentloop.models.config import (
    DEFAULT_MODELS,
    AgentConfig,
    Provider,
    RoundLimitAction,
)
from agentloop.models.conversation import (
    AssistantTurn,
    Conversation,
    Segment,
    TextSegment,
    ToolResultEntry,
    ToolResultTurn,
    ToolUseSegment,
    Turn,
    UserTurn,
)

__all__ = [
    "AgentConfig",
    "Provider",
    "RoundLimitAction",
    "DEFAULT_MODELS",
    "Conversation",
    "Turn",
    "UserTurn",
    "AssistantTurn",
    "ToolResultTurn",
    "Segment",
    "TextSegment",
    "ToolUseSegment",
    "ToolResultEntry",
]
