"""Built-in httpx clients for the Anthropic and OpenAI chat APIs.

Both clients are sync, read configuration from constructor arguments or
environment variables, and share one request path with optional tenacity
retry. Retry is off by default (``max_retries=1`` is a single attempt);
raising it enables exponential backoff for transient errors.
"""

from __future__ import annotations

import logging
import os
from typing import Any, ClassVar

import httpx
import tenacity

from agentloop.llm.errors import (
    LLMAuthError,
    LLMConfigError,
    LLMRateLimitError,
    LLMResponseError,
)

logger = logging.getLogger(__name__)

_RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504, 529}
_AUTH_ERROR_STATUS_CODES = {401, 403}

ANTHROPIC_VERSION = "2023-06-01"


def _is_retryable(exc: BaseException) -> bool:
    """Check if an exception is retryable.

    Retryable: 429, 500, 502, 503, 504, 529, connection errors.
    Not retryable: 401, 403, 400, other client errors.
    """
    if isinstance(exc, LLMAuthError):
        return False
    if isinstance(exc, LLMRateLimitError):
        return True
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code in _RETRYABLE_STATUS_CODES
    return isinstance(exc, (httpx.ConnectError, httpx.ConnectTimeout))


class _HTTPChatClient:
    """Shared request/retry/error handling for the provider clients."""

    api_key_env: ClassVar[str]
    base_url_env: ClassVar[str]
    default_base_url: ClassVar[str]
    endpoint: ClassVar[str]
    required_key: ClassVar[str]

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        default_model: str = "",
        timeout: float = 120.0,
        max_retries: int = 1,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            api_key: API key. Falls back to the provider's env var.
            base_url: API base URL. Falls back to the provider's base-URL
                env var, then to the public endpoint.
            default_model: Default model for chat requests.
            timeout: Request timeout in seconds.
            max_retries: Maximum attempts per request (1 = no retry).
            transport: Optional httpx transport (used by tests).

        Raises:
            LLMConfigError: If no API key is provided or found in environment.
        """
        self._api_key = api_key or os.environ.get(self.api_key_env, "")
        if not self._api_key:
            raise LLMConfigError(
                f"No API key provided. Pass api_key= or set {self.api_key_env} "
                "environment variable.",
                env_var=self.api_key_env,
            )
        self._base_url = (
            base_url or os.environ.get(self.base_url_env) or self.default_base_url
        ).rstrip("/")
        self._default_model = default_model
        self._timeout = timeout
        self._max_retries = max_retries
        self._client = httpx.Client(
            timeout=timeout,
            headers=self._headers(),
            transport=transport,
        )

    def _headers(self) -> dict[str, str]:
        raise NotImplementedError

    def _build_payload(
        self,
        messages: list[dict[str, Any]],
        *,
        model: str | None,
        max_tokens: int | None,
        tools: list[dict] | None,
        tool_choice: dict | str | None,
        system: str | None,
        **kwargs: Any,
    ) -> dict[str, Any]:
        raise NotImplementedError

    @property
    def default_model(self) -> str:
        return self._default_model

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
        """Send a chat request, retrying transient failures if enabled.

        Uses tenacity.Retrying programmatically (not as decorator) so that
        max_retries is configurable per-instance.

        Returns:
            The provider's full response dict.

        Raises:
            LLMAuthError: On 401/403 (no retry).
            LLMRateLimitError: On 429 after all attempts.
            LLMResponseError: On unexpected response format.
            httpx.HTTPError: On other HTTP or transport errors.
        """
        payload = self._build_payload(
            messages,
            model=model,
            max_tokens=max_tokens,
            tools=tools,
            tool_choice=tool_choice,
            system=system,
            **kwargs,
        )
        retryer = tenacity.Retrying(
            retry=tenacity.retry_if_exception(_is_retryable),
            wait=(
                tenacity.wait_exponential(multiplier=1, min=1, max=30)
                + tenacity.wait_random(0, 2)
            ),
            stop=tenacity.stop_after_attempt(self._max_retries),
            before_sleep=tenacity.before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )
        return retryer(self._post, payload)

    def _post(self, payload: dict[str, Any]) -> dict:
        """Execute a single request (no retry)."""
        response = self._client.post(f"{self._base_url}{self.endpoint}", json=payload)

        # Check for auth errors before raise_for_status
        if response.status_code in _AUTH_ERROR_STATUS_CODES:
            raise LLMAuthError(
                f"Authentication failed: HTTP {response.status_code} - "
                f"{response.text}",
                status_code=response.status_code,
            )

        if response.status_code == 429:
            retry_after_raw = response.headers.get("Retry-After")
            retry_after: float | None = None
            if retry_after_raw is not None:
                try:
                    retry_after = float(retry_after_raw)
                except (ValueError, TypeError):
                    pass
            raise LLMRateLimitError(
                f"Rate limited: HTTP 429 - {response.text}",
                retry_after=retry_after,
            )

        response.raise_for_status()

        try:
            data = response.json()
        except ValueError as exc:
            raise LLMResponseError(
                f"Response is not JSON: {response.text[:200]}",
                status_code=response.status_code,
            ) from exc
        if not isinstance(data, dict) or self.required_key not in data:
            raise LLMResponseError(
                f"Unexpected response format: missing '{self.required_key}' key. "
                f"Response: {data}"
            )
        return data

    def close(self) -> None:
        """Close the underlying httpx client."""
        self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, *args: object) -> None:
        self.close()


class AnthropicClient(_HTTPChatClient):
    """Sync httpx client for the Anthropic Messages API.

    Usage::

        with AnthropicClient(api_key="sk-ant-...") as client:
            response = client.chat(
                [{"role": "user", "content": [{"type": "text", "text": "Hi"}]}],
                max_tokens=1024,
            )
    """

    api_key_env = "ANTHROPIC_API_KEY"
    base_url_env = "ANTHROPIC_BASE_URL"
    default_base_url = "https://api.anthropic.com"
    endpoint = "/v1/messages"
    required_key = "content"

    def __init__(self, *args: Any, default_model: str = "claude-3-5-haiku-latest", **kwargs: Any) -> None:
        super().__init__(*args, default_model=default_model, **kwargs)

    def _headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "x-api-key": self._api_key,
            "anthropic-version": ANTHROPIC_VERSION,
        }

    def _build_payload(
        self,
        messages,
        *,
        model,
        max_tokens,
        tools,
        tool_choice,
        system,
        **kwargs,
    ):
        # max_tokens is mandatory for the Messages API.
        payload: dict[str, Any] = {
            "model": model or self._default_model,
            "max_tokens": max_tokens if max_tokens is not None else 1024,
            "messages": messages,
        }
        if system:
            payload["system"] = system
        if tools:
            payload["tools"] = tools
        if tool_choice is not None:
            payload["tool_choice"] = tool_choice
        payload.update(kwargs)
        return payload


class OpenAIClient(_HTTPChatClient):
    """Sync httpx client for OpenAI-compatible chat completions.

    Usage::

        with OpenAIClient(api_key="sk-...") as client:
            response = client.chat([{"role": "user", "content": "Hello"}])
    """

    api_key_env = "OPENAI_API_KEY"
    base_url_env = "OPENAI_BASE_URL"
    default_base_url = "https://api.openai.com/v1"
    endpoint = "/chat/completions"
    required_key = "choices"

    def __init__(self, *args: Any, default_model: str = "gpt-4o-mini", **kwargs: Any) -> None:
        super().__init__(*args, default_model=default_model, **kwargs)

    def _headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self._api_key}",
        }

    def _build_payload(
        self,
        messages,
        *,
        model,
        max_tokens,
        tools,
        tool_choice,
        system,
        **kwargs,
    ):
        if system:
            messages = [{"role": "system", "content": system}, *messages]
        payload: dict[str, Any] = {
            "model": model or self._default_model,
            "messages": messages,
        }
        if max_tokens is not None:
            payload["max_tokens"] = max_tokens
        if tools:
            payload["tools"] = tools
        if tool_choice is not None:
            payload["tool_choice"] = tool_choice
        payload.update(kwargs)
        return payload
