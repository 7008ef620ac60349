"""agentloop: a terminal agent that lets an LLM use local tools.

The orchestrator reads operator input, asks the model for a reply, runs
any tools the reply requests, and feeds the results back until the model
answers in plain text.
"""

from agentloop._version import __version__

# Configuration
from agentloop.models.config import AgentConfig, Provider, RoundLimitAction

# Conversation model
from agentloop.models.conversation import (
    AssistantTurn,
    Conversation,
    TextSegment,
    ToolResultEntry,
    ToolResultTurn,
    ToolUseSegment,
    Turn,
    UserTurn,
)

# Toolkit
from agentloop.toolkit import (
    ToolContext,
    ToolDefinition,
    ToolDispatcher,
    ToolOutcome,
    ToolRegistry,
    ToolResult,
    build_registry,
    get_all_tools,
)

# Inference
from agentloop.llm import (
    AnthropicClient,
    InferenceClient,
    LLMClient,
    OpenAIClient,
)

# Orchestrator
from agentloop.orchestrator import Orchestrator, OrchestratorState, SessionResult

# Terminal
from agentloop.terminal import RichTerminal, Terminal

# Exceptions
from agentloop.exceptions import (
    AgentError,
    CommandCancelledError,
    ConversationOrderError,
    DuplicateToolError,
    GuardrailError,
    ToolArgumentError,
    ToolError,
    ToolExecutionError,
    ToolRoundLimitError,
)

__all__ = [
    "__version__",
    # Configuration
    "AgentConfig",
    "Provider",
    "RoundLimitAction",
    # Conversation
    "Conversation",
    "Turn",
    "UserTurn",
    "AssistantTurn",
    "ToolResultTurn",
    "TextSegment",
    "ToolUseSegment",
    "ToolResultEntry",
    # Toolkit
    "ToolDefinition",
    "ToolOutcome",
    "ToolResult",
    "ToolRegistry",
    "ToolDispatcher",
    "ToolContext",
    "get_all_tools",
    "build_registry",
    # Inference
    "LLMClient",
    "AnthropicClient",
    "OpenAIClient",
    "InferenceClient",
    # Orchestrator
    "Orchestrator",
    "OrchestratorState",
    "SessionResult",
    # Terminal
    "Terminal",
    "RichTerminal",
    # Exceptions
    "AgentError",
    "ConversationOrderError",
    "DuplicateToolError",
    "ToolError",
    "ToolArgumentError",
    "GuardrailError",
    "CommandCancelledError",
    "ToolExecutionError",
    "ToolRoundLimitError",
]
