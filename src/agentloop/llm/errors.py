"""Errors raised while talking to the inference backend.

Every one of them is fatal to a session: the orchestrator lets them
propagate and the CLI prints them. They share the AgentError root.
"""

from __future__ import annotations

from agentloop.exceptions import AgentError


class LLMClientError(AgentError):
    """Base for inference transport and format failures.

    Attributes:
        status_code: HTTP status behind the failure, when there was one.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class LLMConfigError(LLMClientError):
    """The client cannot be built, usually because no API key is set.

    Attributes:
        env_var: Environment variable that would have supplied the value.
    """

    def __init__(self, message: str, env_var: str | None = None) -> None:
        self.env_var = env_var
        super().__init__(message)


class LLMRateLimitError(LLMClientError):
    """HTTP 429 from the backend.

    Attributes:
        retry_after: Seconds from the Retry-After header, or None.
    """

    def __init__(self, message: str = "Rate limited", retry_after: float | None = None) -> None:
        self.retry_after = retry_after
        if retry_after is not None:
            message = f"{message} (retry after {retry_after}s)"
        super().__init__(message, status_code=429)


class LLMAuthError(LLMClientError):
    """The API key was rejected (401/403). Never retried."""


class LLMResponseError(LLMClientError):
    """The backend answered, but not with a message we can decode."""
