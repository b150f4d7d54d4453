"""Tool registry: format tools for the model and dispatch its tool calls."""

import asyncio
import json
import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, replace
from typing import Any

from llm_contracts.clients import get_field
from llm_contracts.exceptions import (
    InvalidSignatureError,
    MalformedResponseError,
    UnknownToolError,
)
from llm_contracts.tools.tool import ToolDefinition, stringify_result

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ToolCallRequest:
    """A tool call requested by the model.

    Args:
        id: Provider-assigned call identifier.
        name: Name of the requested tool.
        raw_arguments: JSON-encoded arguments, as sent by the model.
    """

    id: str
    name: str
    raw_arguments: str = "{}"

    @classmethod
    def from_tool_call(cls, tool_call: Any) -> "ToolCallRequest":
        """Build a request from a provider tool-call object or dict.

        Reads ``id``, ``function.name`` and ``function.arguments``; arguments
        that are already decoded are re-encoded as JSON.
        """
        function = get_field(tool_call, "function")
        arguments = get_field(function, "arguments")
        if arguments is None:
            arguments = ""
        elif not isinstance(arguments, str):
            arguments = json.dumps(arguments)

        return cls(
            id=str(get_field(tool_call, "id") or ""),
            name=str(get_field(function, "name") or ""),
            raw_arguments=arguments,
        )


@dataclass(frozen=True)
class ToolCallResult:
    """Stringified outcome of one tool call, correlated by ``id``."""

    id: str
    name: str
    content: str

    def to_message(self) -> dict[str, Any]:
        """Return the ``role: tool`` chat message for this result."""
        return {
            "role": "tool",
            "tool_call_id": self.id,
            "name": self.name,
            "content": self.content,
        }


class ToolRegistry:
    """Immutable, name-keyed set of tools.

    Args:
        tools: Mapping of name to tool, or a sequence of tools. With a
            mapping the key is the tool name shown to the model.
        isolate_failures: When ``False`` (default) the first failing call
            aborts the whole ``dispatch`` batch. When ``True`` each failure
            becomes an ``Error: ...`` result and sibling calls are kept.

    Raises:
        InvalidSignatureError: If two tools share a name
    """

    def __init__(
        self,
        tools: Mapping[str, ToolDefinition] | Iterable[ToolDefinition],
        isolate_failures: bool = False,
    ) -> None:
        if isinstance(tools, Mapping):
            definitions = [
                tool if tool.name == name else replace(tool, name=name)
                for name, tool in tools.items()
            ]
        else:
            definitions = list(tools)

        registry: dict[str, ToolDefinition] = {}
        for tool in definitions:
            if tool.name in registry:
                raise InvalidSignatureError(f"Duplicate tool name: {tool.name}")
            registry[tool.name] = tool

        self._tools = registry
        self.isolate_failures = isolate_failures

    @property
    def names(self) -> list[str]:
        """Registered tool names, in registration order."""
        return list(self._tools)

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    def get(self, name: str) -> ToolDefinition:
        """Look up a tool by name.

        Raises:
            UnknownToolError: If no tool has that name
        """
        try:
            return self._tools[name]
        except KeyError:
            raise UnknownToolError(
                f"No tool named '{name}' is registered", tool_name=name
            ) from None

    def format_tools(self) -> list[dict[str, Any]]:
        """Describe every tool in the chat protocol's tool-list format."""
        return [tool.to_litellm_schema() for tool in self._tools.values()]

    async def dispatch(
        self, requests: Sequence[ToolCallRequest]
    ) -> list[ToolCallResult]:
        """Run a batch of tool calls concurrently.

        Without failure isolation the whole batch still runs to completion;
        then the first failure in request order is raised.

        Args:
            requests: Tool calls requested by the model

        Returns:
            One result per request, in request order

        Raises:
            UnknownToolError: For an unregistered tool, unless failures are
                isolated
            MalformedResponseError: For undecodable arguments, unless
                failures are isolated
            ResponseValidationError: For arguments that do not match the
                tool's argument type, unless failures are isolated
        """
        logger.debug(
            "Dispatching %d tool calls (isolate_failures=%s)",
            len(requests),
            self.isolate_failures,
        )
        if self.isolate_failures:
            return list(
                await asyncio.gather(*(self._run_isolated(r) for r in requests))
            )

        # Every call settles before the first failure, in request order, is raised.
        outcomes = await asyncio.gather(
            *(self._run(request) for request in requests), return_exceptions=True
        )
        results: list[ToolCallResult] = []
        for outcome in outcomes:
            if isinstance(outcome, BaseException):
                raise outcome
            results.append(outcome)
        return results

    async def handle_tool_calls(self, tool_calls: Iterable[Any]) -> list[dict[str, Any]]:
        """Dispatch provider tool-call objects and return ``role: tool`` messages."""
        requests = [ToolCallRequest.from_tool_call(call) for call in tool_calls]
        results = await self.dispatch(requests)
        return [result.to_message() for result in results]

    async def _run(self, request: ToolCallRequest) -> ToolCallResult:
        tool = self.get(request.name)
        result = await tool.call(_decode_arguments(request))
        return ToolCallResult(
            id=request.id, name=request.name, content=stringify_result(result)
        )

    async def _run_isolated(self, request: ToolCallRequest) -> ToolCallResult:
        try:
            return await self._run(request)
        except Exception as e:
            logger.warning(
                "Tool call %s (%s) failed: %s", request.id, request.name, e
            )
            return ToolCallResult(
                id=request.id,
                name=request.name,
                content=f"Error: {type(e).__name__}: {e}",
            )


def is_tool_call_requested(message: Any) -> bool:
    """Check whether an assistant message asks for at least one tool call."""
    return bool(get_field(message, "tool_calls"))


def format_tools(
    tools: ToolRegistry | Mapping[str, ToolDefinition] | Iterable[ToolDefinition],
) -> list[dict[str, Any]]:
    """Format tools for the model; accepts a registry or anything it accepts."""
    return _as_registry(tools).format_tools()


async def handle_tool_calls(
    tools: ToolRegistry | Mapping[str, ToolDefinition] | Iterable[ToolDefinition],
    tool_calls: Iterable[Any],
) -> list[dict[str, Any]]:
    """Dispatch provider tool calls against ``tools`` and return tool messages."""
    return await _as_registry(tools).handle_tool_calls(tool_calls)


def _as_registry(
    tools: ToolRegistry | Mapping[str, ToolDefinition] | Iterable[ToolDefinition],
) -> ToolRegistry:
    return tools if isinstance(tools, ToolRegistry) else ToolRegistry(tools)


def _decode_arguments(request: ToolCallRequest) -> Any:
    if not request.raw_arguments.strip():
        return {}
    try:
        return json.loads(request.raw_arguments)
    except json.JSONDecodeError as e:
        raise MalformedResponseError(
            f"Failed to parse arguments for tool '{request.name}': {e}",
            response_text=request.raw_arguments,
        ) from e
