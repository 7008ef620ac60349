"""Wire-format codecs between the Conversation and provider payloads.

A codec encodes the full conversation into provider messages, names the
provider's "no tools this time" tool_choice, and decodes one response
into an AssistantTurn.  Codecs hold no state.
"""

from __future__ import annotations

import json
import logging
import uuid
from typing import Any, Protocol

from agentloop.llm.errors import LLMResponseError
from agentloop.models.config import Provider
from agentloop.models.conversation import (
    AssistantTurn,
    Conversation,
    Segment,
    TextSegment,
    ToolResultTurn,
    ToolUseSegment,
    Turn,
    UserTurn,
)

logger = logging.getLogger(__name__)

# Sent in place of an assistant turn with no text and no tool uses; both
# providers reject an empty assistant message.
EMPTY_REPLY_PLACEHOLDER = "(no response)"


class MessageCodec(Protocol):
    """Translate conversations and responses for one provider."""

    provider: Provider
    tool_choice_none: dict | str

    def encode(self, conversation: Conversation) -> list[dict[str, Any]]:
        ...

    def decode(self, response: dict) -> AssistantTurn:
        ...


class AnthropicCodec:
    """Anthropic Messages API content blocks."""

    provider = Provider.ANTHROPIC
    tool_choice_none: dict = {"type": "none"}

    def encode(self, conversation: Conversation) -> list[dict[str, Any]]:
        return [self._encode_turn(turn) for turn in conversation]

    def _encode_turn(self, turn: Turn) -> dict[str, Any]:
        if isinstance(turn, UserTurn):
            return {"role": "user", "content": [{"type": "text", "text": turn.text}]}
        if isinstance(turn, AssistantTurn):
            blocks: list[dict[str, Any]] = []
            for seg in turn.segments:
                if isinstance(seg, TextSegment):
                    if seg.text:
                        blocks.append({"type": "text", "text": seg.text})
                else:
                    blocks.append({
                        "type": "tool_use",
                        "id": seg.invocation_id,
                        "name": seg.tool_name,
                        "input": _as_object(seg.raw_arguments),
                    })
            if not blocks:
                blocks.append({"type": "text", "text": EMPTY_REPLY_PLACEHOLDER})
            return {"role": "assistant", "content": blocks}
        if isinstance(turn, ToolResultTurn):
            return {
                "role": "user",
                "content": [
                    {
                        "type": "tool_result",
                        "tool_use_id": r.invocation_id,
                        "content": r.output,
                        "is_error": r.is_error,
                    }
                    for r in turn.results
                ],
            }
        raise TypeError(f"Cannot encode {type(turn).__name__}")

    def decode(self, response: dict) -> AssistantTurn:
        content = response.get("content")
        if not isinstance(content, list):
            raise LLMResponseError(f"Cannot decode response: 'content' is not a list. Response: {response}")

        segments: list[Segment] = []
        for block in content:
            if not isinstance(block, dict):
                continue
            kind = block.get("type")
            if kind == "text":
                segments.append(TextSegment(block.get("text", "")))
            elif kind == "tool_use":
                segments.append(ToolUseSegment(
                    invocation_id=block.get("id") or f"toolu_{uuid.uuid4().hex[:12]}",
                    tool_name=block.get("name", ""),
                    raw_arguments=block.get("input") or {},
                ))
            else:
                logger.debug("Ignoring content block of type %r", kind)
        return AssistantTurn(segments)


class OpenAICodec:
    """OpenAI chat-completions messages with function tool calls."""

    provider = Provider.OPENAI
    tool_choice_none = "none"

    def encode(self, conversation: Conversation) -> list[dict[str, Any]]:
        messages: list[dict[str, Any]] = []
        for turn in conversation:
            messages.extend(self._encode_turn(turn))
        return messages

    def _encode_turn(self, turn: Turn) -> list[dict[str, Any]]:
        if isinstance(turn, UserTurn):
            return [{"role": "user", "content": turn.text}]
        if isinstance(turn, AssistantTurn):
            text = "\n".join(turn.texts)
            uses = turn.tool_uses
            if not text and not uses:
                text = EMPTY_REPLY_PLACEHOLDER
            msg: dict[str, Any] = {"role": "assistant", "content": text or None}
            if uses:
                msg["tool_calls"] = [
                    {
                        "id": u.invocation_id,
                        "type": "function",
                        "function": {
                            "name": u.tool_name,
                            "arguments": _as_json(u.raw_arguments),
                        },
                    }
                    for u in uses
                ]
            return [msg]
        if isinstance(turn, ToolResultTurn):
            return [
                {
                    "role": "tool",
                    "tool_call_id": r.invocation_id,
                    "content": f"Error: {r.output}" if r.is_error else r.output,
                }
                for r in turn.results
            ]
        raise TypeError(f"Cannot encode {type(turn).__name__}")

    def decode(self, response: dict) -> AssistantTurn:
        try:
            message = response["choices"][0]["message"]
        except (KeyError, IndexError, TypeError) as exc:
            raise LLMResponseError(
                f"Cannot decode response: {exc}. Response: {response}"
            ) from exc

        segments: list[Segment] = []
        content = message.get("content")
        if content:
            segments.append(TextSegment(content))
        for raw in message.get("tool_calls") or []:
            func = raw.get("function") if isinstance(raw, dict) else None
            if not isinstance(func, dict):
                raise LLMResponseError(f"Cannot decode tool call: {raw!r}")
            call_id = raw.get("id") or f"call_{uuid.uuid4().hex[:8]}"
            name = func.get("name", "")
            arguments = func.get("arguments") or "{}"
            try:
                decoded = json.loads(arguments)
            except (json.JSONDecodeError, TypeError):
                # Keep the raw string; the tool's validation reports it.
                logger.warning("Malformed JSON in tool call arguments for %s", name)
                decoded = arguments
            segments.append(ToolUseSegment(invocation_id=call_id, tool_name=name, raw_arguments=decoded))
        return AssistantTurn(segments)


def _as_object(raw: Any) -> Any:
    if isinstance(raw, str):
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            return {}
    return raw if raw is not None else {}


def _as_json(raw: Any) -> str:
    if isinstance(raw, str):
        return raw
    return json.dumps(raw if raw is not None else {})


def get_codec(provider: Provider | str) -> MessageCodec:
    """Return the codec for ``provider``."""
    provider = Provider(provider)
    if provider == Provider.OPENAI:
        return OpenAICodec()
    return AnthropicCodec()
