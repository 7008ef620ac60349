"""agentloop exception hierarchy.

All agentloop-specific exceptions inherit from AgentError.

Tool handlers raise ``ToolError`` subclasses internally; those never leave
the tool boundary (see ``ToolDefinition.invoke``) and reach the conversation
as error results instead.
"""


class AgentError(Exception):
    """Base exception for all agentloop errors."""


class ConversationOrderError(AgentError):
    """Raised when appending a turn would break the conversation ordering."""


class DuplicateToolError(AgentError):
    """Raised when two tools with the same name are registered."""

    def __init__(self, tool_name: str) -> None:
        self.tool_name = tool_name
        super().__init__(f"Tool already registered: {tool_name}")


class ToolError(AgentError):
    """Base exception for failures inside a tool handler."""


class ToolArgumentError(ToolError):
    """Raised when raw tool arguments fail schema validation.

    Named ToolArgumentError (not ValidationError) to avoid
    collision with pydantic.ValidationError.
    """


class GuardrailError(ToolError):
    """Raised when a command is rejected before execution."""


class CommandCancelledError(ToolError):
    """Raised when the operator declines to run a command."""

    def __init__(self) -> None:
        super().__init__("command execution cancelled by user")


class ToolExecutionError(ToolError):
    """Raised when a tool's side effect fails (I/O, process, network)."""


class ToolRoundLimitError(AgentError):
    """Raised when the oracle keeps requesting tools past the round cap."""

    def __init__(self, max_rounds: int, detail: str = "") -> None:
        self.max_rounds = max_rounds
        msg = f"Tool-use round limit reached ({max_rounds} rounds)"
        if detail:
            msg += f": {detail}"
        super().__init__(msg)
