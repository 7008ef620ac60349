"""Toolkit data models for agent tool definitions.

Frozen dataclasses for tool definitions, handler outcomes, and dispatch
results.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ValidationError

from agentloop.exceptions import ToolArgumentError, ToolError
from agentloop.models.conversation import ToolResultEntry

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ToolOutcome:
    """Value returned across the tool handler boundary.

    Attributes:
        ok: Whether the handler succeeded.
        output: Handler output on success, failure message otherwise.
    """

    ok: bool
    output: str

    @classmethod
    def success(cls, output: str) -> ToolOutcome:
        return cls(ok=True, output=output)

    @classmethod
    def failure(cls, message: str) -> ToolOutcome:
        return cls(ok=False, output=message)


@dataclass(frozen=True)
class ToolDefinition:
    """A single tool definition for LLM consumption.

    Attributes:
        name: Tool name (e.g. "read_file").
        description: Human-readable description of when/why to use this tool.
        parameters: JSON Schema dict describing tool parameters.
        handler: Callable receiving the validated arguments model and
            returning the output string. Raises ToolError on failure.
        args_model: Pydantic model that validates raw arguments.
    """

    name: str
    description: str
    parameters: dict
    handler: Callable[[Any], object]
    args_model: type[BaseModel] | None = None

    def validate(self, raw_arguments: Any) -> Any:
        """Turn raw oracle arguments into the handler's typed arguments.

        Args:
            raw_arguments: A dict, a JSON string, or None.

        Returns:
            An ``args_model`` instance, or the raw dict when no model is set.

        Raises:
            ToolArgumentError: If the arguments do not match the schema.
        """
        if self.args_model is None:
            if isinstance(raw_arguments, (str, bytes)):
                try:
                    return json.loads(raw_arguments or "{}")
                except json.JSONDecodeError as exc:
                    raise ToolArgumentError(f"invalid arguments for {self.name}: {exc}") from exc
            return raw_arguments or {}
        try:
            if isinstance(raw_arguments, (str, bytes)):
                return self.args_model.model_validate_json(raw_arguments or "{}")
            return self.args_model.model_validate(raw_arguments or {})
        except ValidationError as exc:
            problems = "; ".join(
                f"{'.'.join(str(p) for p in err['loc']) or 'arguments'}: {err['msg']}"
                for err in exc.errors()
            )
            raise ToolArgumentError(f"invalid arguments for {self.name}: {problems}") from exc

    def invoke(self, raw_arguments: Any) -> ToolOutcome:
        """Validate arguments and run the handler.

        ToolError failures come back as ``ToolOutcome.failure``; nothing
        in the ToolError family escapes this method.
        """
        try:
            args = self.validate(raw_arguments)
            output = self.handler(args)
        except ToolError as exc:
            return ToolOutcome.failure(str(exc))
        return ToolOutcome.success("" if output is None else str(output))

    def to_openai(self) -> dict:
        """Convert to OpenAI function-calling format.

        Returns:
            Dict with "type": "function" and nested "function" object.
        """
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.parameters,
            },
        }

    def to_anthropic(self) -> dict:
        """Convert to Anthropic tool-use format.

        Returns:
            Dict with "name", "description", and "input_schema".
        """
        return {
            "name": self.name,
            "description": self.description,
            "input_schema": self.parameters,
        }


@dataclass(frozen=True)
class ToolResult:
    """Structured result from dispatching one tool invocation.

    Attributes:
        invocation_id: ID of the tool use this result answers.
        tool_name: Name of the requested tool.
        output: Handler output, or the error message when ``is_error``.
        is_error: Whether the invocation failed.
    """

    invocation_id: str
    tool_name: str
    output: str = ""
    is_error: bool = False

    @property
    def success(self) -> bool:
        return not self.is_error

    def to_entry(self) -> ToolResultEntry:
        """Convert to the conversation's ToolResultEntry."""
        return ToolResultEntry(
            invocation_id=self.invocation_id,
            output=self.output,
            is_error=self.is_error,
        )
