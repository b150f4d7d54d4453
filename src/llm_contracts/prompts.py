"""System prompt construction for model-invoked functions."""

import json
from collections.abc import Callable
from typing import Any, Protocol, runtime_checkable

SystemPromptFunction = Callable[[str, Any, Any], str]


@runtime_checkable
class PromptBuilder(Protocol):
    """Strategy that renders the system instruction for one function."""

    def build(
        self,
        description: str,
        input_schema: dict[str, Any] | None,
        output_schema: dict[str, Any],
    ) -> str:
        """Render the system prompt from a contract's description and schemas."""
        ...


class DefaultPromptBuilder:
    """Fixed template embedding the description and both schemas as JSON."""

    template = (
        "Your job is to generate an output for a function. "
        "The function is described as:\n"
        "{description}\n"
        "\n"
        "The user will provide input that matches the following schema:\n"
        "{input_schema}\n"
        "\n"
        "You MUST respond in a JSON format. Your response must match the "
        "following JSONSchema definition:\n"
        "{output_schema}\n"
    )

    def build(
        self,
        description: str,
        input_schema: dict[str, Any] | None,
        output_schema: dict[str, Any],
    ) -> str:
        return self.template.format(
            description=description,
            input_schema=json.dumps(input_schema, indent=2),
            output_schema=json.dumps(output_schema, indent=2),
        )


class CallablePromptBuilder:
    """Adapt a plain ``(description, input_schema, output_schema) -> str`` function."""

    def __init__(self, function: SystemPromptFunction) -> None:
        self.function = function

    def build(
        self,
        description: str,
        input_schema: dict[str, Any] | None,
        output_schema: dict[str, Any],
    ) -> str:
        return self.function(description, input_schema, output_schema)


def resolve_prompt_builder(
    override: PromptBuilder | SystemPromptFunction | None,
) -> PromptBuilder:
    """Pick the prompt builder to use, falling back to the default template.

    Args:
        override: A builder object, a plain prompt function, or ``None``

    Returns:
        A ``PromptBuilder`` instance

    Raises:
        TypeError: If ``override`` is neither a builder nor callable
    """
    if override is None:
        return DefaultPromptBuilder()
    if isinstance(override, PromptBuilder):
        return override
    if callable(override):
        return CallablePromptBuilder(override)
    raise TypeError(
        f"Prompt override must be a PromptBuilder or a callable, got {type(override).__name__}"
    )
