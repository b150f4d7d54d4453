"""Tool definitions: a compiled contract bundled with its implementation.

Provides the ``ToolDefinition`` frozen dataclass, ``make_tool`` to compile a
signature and pair it with a handler, and ``stringify_result`` to turn any
handler return value into tool-message content.
"""

import inspect
import json
import math
from collections.abc import Callable
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from pydantic_core import to_json

from llm_contracts.contracts import (
    FunctionContract,
    FunctionSignature,
    compile_tool_contract,
)
from llm_contracts.exceptions import InvalidSignatureError

SCHEMA_REMINDER = "Responses will match schema: "


@dataclass(frozen=True)
class ToolDefinition:
    """Immutable tool definition pairing a contract with an executable handler.

    Args:
        name: Tool name, unique within a registry.
        contract: Compiled tool contract (zero or one argument).
        implementation: Sync or async callable taking the unwrapped argument
            (or nothing, for zero-argument tools).
    """

    name: str
    contract: FunctionContract
    implementation: Callable[..., Any]

    @property
    def description(self) -> str:
        """Contract description followed by a reminder of the response schema."""
        reminder = SCHEMA_REMINDER + json.dumps(self.contract.return_schema)
        return f"{self.contract.description}\n\n{reminder}"

    def to_litellm_schema(self) -> dict[str, Any]:
        """Convert to the OpenAI-format dict expected by LiteLLM.

        Returns:
            A tool definition dict with ``type`` and ``function`` keys;
            ``parameters`` is left out for zero-argument tools.
        """
        function: dict[str, Any] = {
            "name": self.name,
            "description": self.description,
        }
        if self.contract.input_schema is not None:
            function["parameters"] = self.contract.input_schema
        return {"type": "function", "function": function}

    async def call(self, arguments: Any) -> Any:
        """Validate decoded arguments and run the implementation.

        Args:
            arguments: Decoded JSON arguments from the model

        Returns:
            Whatever the implementation returns, awaited if needed
        """
        if self.contract.argument_adapter is None:
            result = self.implementation()
        else:
            result = self.implementation(self.contract.prepare_argument(arguments))

        if inspect.isawaitable(result):
            result = await result
        return result


def make_tool(
    signature: FunctionSignature | Callable[..., Any],
    implementation: Callable[..., Any] | None = None,
    name: str | None = None,
    strict: bool = False,
) -> ToolDefinition:
    """Compile a tool signature and pair it with its implementation.

    Args:
        signature: Explicit signature, or an annotated function to derive one
            from
        implementation: Callable run when the model requests the tool;
            defaults to ``signature`` itself when that is a function
        name: Tool name; defaults to the signature's name, then the
            implementation's ``__name__``
        strict: Validate arguments in pydantic strict mode

    Returns:
        The tool definition

    Raises:
        InvalidSignatureError: If the signature is invalid for a tool, there
            is no implementation, or no name can be determined
    """
    if implementation is None:
        if isinstance(signature, FunctionSignature):
            raise InvalidSignatureError(
                "An implementation is required for an explicit signature",
                signature=signature,
            )
        implementation = signature

    contract = compile_tool_contract(signature, strict=strict)
    tool_name = name or contract.name or getattr(implementation, "__name__", None)
    if not tool_name or tool_name == "<lambda>":
        raise InvalidSignatureError(
            "Tool name required - pass name= or use a named function",
            signature=signature,
        )
    return ToolDefinition(name=tool_name, contract=contract, implementation=implementation)


def stringify_result(value: Any) -> str:
    """Render a tool result as message content.

    Strings pass through untouched, numbers use their decimal text form and
    everything else is JSON-encoded.
    """
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return to_json(value).decode()
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return _float_text(value)
    return to_json(value).decode()


def _float_text(value: float) -> str:
    """Plain decimal digits; exponent form only below 1e-6 or from 1e21 up."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    magnitude = abs(value)
    if value.is_integer() and magnitude < 1e21:
        return str(int(value))
    if 1e-6 <= magnitude < 1e21:
        return format(Decimal(repr(value)), "f")
    return repr(value)
