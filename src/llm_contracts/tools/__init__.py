"""Tool helpers for model tool-calling flows."""

from .registry import (
    ToolCallRequest,
    ToolCallResult,
    ToolRegistry,
    format_tools,
    handle_tool_calls,
    is_tool_call_requested,
)
from .tool import ToolDefinition, make_tool, stringify_result

__all__ = [
    "ToolCallRequest",
    "ToolCallResult",
    "ToolDefinition",
    "ToolRegistry",
    "format_tools",
    "handle_tool_calls",
    "is_tool_call_requested",
    "make_tool",
    "stringify_result",
]
