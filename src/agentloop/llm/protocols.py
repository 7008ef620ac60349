"""LLM client protocol.

Defines the pluggable transport interface used by the inference adapter.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class LLMClient(Protocol):
    """Protocol for pluggable LLM transports.

    Any object with chat() and close() methods matching this signature works.
    The built-in AnthropicClient and OpenAIClient implement this protocol.
    ``messages`` and ``tools`` are already in the provider's wire format;
    the return value is the provider's raw response dict.
    """

    def chat(
        self,
        messages: list[dict[str, Any]],
        *,
        model: str | None = None,
        max_tokens: int | None = None,
        tools: list[dict] | None = None,
        tool_choice: dict | str | None = None,
        system: str | None = None,
        **kwargs: Any,
    ) -> dict:
        """Send messages, return response dict."""
        ...

    def close(self) -> None:
        """Release underlying resources."""
        ...
