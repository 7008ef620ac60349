"""ToolRegistry: the fixed, ordered set of tools a session exposes."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from agentloop.exceptions import DuplicateToolError
from agentloop.models.config import Provider

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from agentloop.toolkit.models import ToolDefinition

logger = logging.getLogger(__name__)


class ToolRegistry:
    """Ordered, immutable collection of tool definitions.

    Built once at startup. Names are unique; a duplicate raises
    ``DuplicateToolError`` at construction. A lookup miss returns None,
    the dispatcher decides what a miss means.

    Usage::

        registry = ToolRegistry([read_file_tool, list_files_tool])
        tool = registry.get("read_file")
    """

    def __init__(self, tools: Iterable[ToolDefinition] = ()) -> None:
        ordered: list[ToolDefinition] = []
        by_name: dict[str, ToolDefinition] = {}
        for tool in tools:
            if tool.name in by_name:
                raise DuplicateToolError(tool.name)
            by_name[tool.name] = tool
            ordered.append(tool)
        self._tools: tuple[ToolDefinition, ...] = tuple(ordered)
        self._by_name = by_name
        logger.debug("Registered %d tools: %s", len(ordered), ", ".join(by_name))

    def get(self, name: str) -> ToolDefinition | None:
        """Return the tool called ``name``, or None."""
        return self._by_name.get(name)

    def names(self) -> list[str]:
        """Tool names in registration order."""
        return [t.name for t in self._tools]

    def schemas(self, provider: Provider | str = Provider.ANTHROPIC) -> list[dict]:
        """Tool schemas in the given provider's format, in registration order."""
        provider = Provider(provider)
        if provider == Provider.OPENAI:
            return [t.to_openai() for t in self._tools]
        return [t.to_anthropic() for t in self._tools]

    def __iter__(self) -> Iterator[ToolDefinition]:
        return iter(self._tools)

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name
