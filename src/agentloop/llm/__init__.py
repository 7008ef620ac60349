"""LLM client infrastructure for agentloop.

Provides httpx clients for the Anthropic and OpenAI chat APIs, the
pluggable LLMClient protocol, per-provider wire codecs, and the
InferenceClient adapter the orchestrator calls once per assistant turn.
"""

from agentloop.llm.client import AnthropicClient, OpenAIClient
from agentloop.llm.codecs import AnthropicCodec, MessageCodec, OpenAICodec, get_codec
from agentloop.llm.errors import (
    LLMAuthError,
    LLMClientError,
    LLMConfigError,
    LLMRateLimitError,
    LLMResponseError,
)
from agentloop.llm.inference import InferenceClient
from agentloop.llm.protocols import LLMClient

__all__ = [
    "AnthropicClient",
    "OpenAIClient",
    "LLMClient",
    "InferenceClient",
    "MessageCodec",
    "AnthropicCodec",
    "OpenAICodec",
    "get_codec",
    "LLMClientError",
    "LLMConfigError",
    "LLMRateLimitError",
    "LLMAuthError",
    "LLMResponseError",
]
