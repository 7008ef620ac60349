"""Inference adapter: one conversation in, one assistant turn out.

``InferenceClient`` owns no conversation state. Each ``infer()`` call
encodes the whole conversation, attaches every registered tool schema
and the fixed output budget, performs exactly one ``chat()`` call on the
transport, and decodes the reply.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from agentloop.llm.client import AnthropicClient, OpenAIClient
from agentloop.llm.codecs import get_codec
from agentloop.models.config import Provider

if TYPE_CHECKING:
    from agentloop.llm.codecs import MessageCodec
    from agentloop.llm.protocols import LLMClient
    from agentloop.models.config import AgentConfig
    from agentloop.models.conversation import AssistantTurn, Conversation
    from agentloop.toolkit.registry import ToolRegistry

logger = logging.getLogger(__name__)


class InferenceClient:
    """Translate the conversation for a provider and call it once per turn.

    Usage::

        inference = InferenceClient(client, registry, model="claude-3-5-haiku-latest")
        turn = inference.infer(conversation)
    """

    def __init__(
        self,
        client: LLMClient,
        registry: ToolRegistry,
        *,
        model: str,
        max_tokens: int = 1024,
        codec: MessageCodec | None = None,
        system_prompt: str | None = None,
    ) -> None:
        self._client = client
        self._registry = registry
        self._model = model
        self._max_tokens = max_tokens
        self._codec = codec or get_codec(Provider.ANTHROPIC)
        self._system_prompt = system_prompt
        self._tools = registry.schemas(self._codec.provider)

    @classmethod
    def from_config(
        cls,
        config: AgentConfig,
        registry: ToolRegistry,
        client: LLMClient | None = None,
    ) -> InferenceClient:
        """Build the adapter (and, unless given, the transport) from config.

        Raises:
            LLMConfigError: If no API key is configured or in the environment.
        """
        if client is None:
            client_cls = OpenAIClient if config.provider == Provider.OPENAI else AnthropicClient
            client = client_cls(
                api_key=config.api_key,
                base_url=config.base_url,
                default_model=config.resolved_model,
                timeout=config.request_timeout,
                max_retries=config.max_retries,
            )
        return cls(
            client,
            registry,
            model=config.resolved_model,
            max_tokens=config.max_tokens,
            codec=get_codec(config.provider),
            system_prompt=config.system_prompt,
        )

    @property
    def model(self) -> str:
        return self._model

    @property
    def client(self) -> LLMClient:
        return self._client

    def infer(self, conversation: Conversation, *, allow_tools: bool = True) -> AssistantTurn:
        """Request the next assistant turn.

        Args:
            conversation: Full conversation so far; not modified.
            allow_tools: When False the oracle is told not to request tools.
                Schemas are still sent since earlier turns may reference them.

        Returns:
            The decoded AssistantTurn.

        Raises:
            LLMClientError: Transport, auth, rate-limit or format failures.
            httpx.HTTPError: Other HTTP failures.
        """
        messages = self._codec.encode(conversation)
        kwargs: dict = {}
        if self._tools:
            kwargs["tools"] = self._tools
            if not allow_tools:
                kwargs["tool_choice"] = self._codec.tool_choice_none
        logger.debug(
            "Inference: %d messages, %d tools, allow_tools=%s",
            len(messages), len(self._tools), allow_tools,
        )
        response = self._client.chat(
            messages,
            model=self._model,
            max_tokens=self._max_tokens,
            system=self._system_prompt,
            **kwargs,
        )
        return self._codec.decode(response)

    def close(self) -> None:
        self._client.close()
