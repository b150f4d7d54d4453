"""Run model-invoked functions: prompt, call the model, validate the reply."""

import json
import logging
from collections.abc import Callable
from dataclasses import dataclass
from functools import update_wrapper
from typing import Any

from pydantic_core import to_json

from llm_contracts.clients import ChatClient, first_message, get_field
from llm_contracts.contracts import (
    FunctionContract,
    FunctionSignature,
    compile_function,
)
from llm_contracts.exceptions import MalformedResponseError
from llm_contracts.prompts import (
    PromptBuilder,
    SystemPromptFunction,
    resolve_prompt_builder,
)
from llm_contracts.schema import ResponseMode, build_response_format

logger = logging.getLogger(__name__)


@dataclass
class AiOptions:
    """Construction-time options for model-invoked functions.

    Args:
        client: Chat client used to reach the model.
        model: Model name passed with every request.
        prompt_builder: Optional override for the system prompt, either a
            ``PromptBuilder`` or a plain ``(description, input_schema,
            output_schema) -> str`` function.
        client_supports_json_schema: Send the output schema as a
            schema-constrained ``response_format`` instead of plain JSON mode.
        strict: Validate replies in pydantic strict mode.
    """

    client: ChatClient
    model: str
    prompt_builder: PromptBuilder | SystemPromptFunction | None = None
    client_supports_json_schema: bool = False
    strict: bool = False


class InvocationRunner:
    """Executes one contract call against a chat model."""

    def __init__(self, options: AiOptions) -> None:
        """Initialize the runner.

        Args:
            options: Client, model and prompt configuration

        Raises:
            ValueError: If client or model is missing
        """
        if options.client is None:
            raise ValueError("Client is required")
        if not options.model:
            raise ValueError("Model is required")

        self.options = options
        self.prompt_builder = resolve_prompt_builder(options.prompt_builder)
        self.response_mode = (
            ResponseMode.JSON_SCHEMA
            if options.client_supports_json_schema
            else ResponseMode.JSON_OBJECT
        )

    def system_prompt(self, contract: FunctionContract) -> str:
        """Render the system prompt for a contract."""
        return self.prompt_builder.build(
            contract.description, contract.input_schema, contract.output_schema
        )

    def build_messages(
        self, contract: FunctionContract, argument: Any
    ) -> list[dict[str, Any]]:
        """Build the system and user messages for one call."""
        return [
            {"role": "system", "content": self.system_prompt(contract)},
            {"role": "user", "content": to_json(argument).decode()},
        ]

    def response_format(self, contract: FunctionContract) -> dict[str, Any]:
        """Build the ``response_format`` parameter for a contract."""
        return build_response_format(
            contract.output_schema, self.response_mode, name=contract.name
        )

    async def invoke(self, contract: FunctionContract, argument: Any) -> Any:
        """Call the model once and return its reply as the declared type.

        Args:
            contract: Compiled function contract
            argument: The single function argument

        Returns:
            The validated, unwrapped reply

        Raises:
            MalformedResponseError: If the reply is empty or not valid JSON
            ResponseValidationError: If the reply does not match the contract
        """
        logger.debug(
            "Invoking %s on %s (%s mode)",
            contract.name or "<anonymous>",
            self.options.model,
            self.response_mode.value,
        )
        response = await self.options.client.create(
            model=self.options.model,
            messages=self.build_messages(contract, argument),
            response_format=self.response_format(contract),
        )

        content = _extract_content(response)
        try:
            decoded = json.loads(content)
        except json.JSONDecodeError as e:
            raise MalformedResponseError(
                f"The model's reply is not valid JSON: {e}", response_text=content
            ) from e

        return contract.validate_and_unwrap(decoded)


class AiFunction:
    """Awaitable callable that delegates a declared function to the model.

    Example::

        ai = make_ai(AiOptions(client=LiteLLMChatClient(), model="gpt-4o-mini"))

        actors_for_vibe = ai(
            FunctionSignature(
                args=(str,),
                returns=list[str],
                description="Return famous actors that match the provided vibe",
            )
        )
        names = await actors_for_vibe("villain")
    """

    def __init__(self, contract: FunctionContract, runner: InvocationRunner) -> None:
        self.contract = contract
        self.runner = runner

    async def __call__(self, argument: Any) -> Any:
        return await self.runner.invoke(self.contract, argument)

    def __repr__(self) -> str:
        return f"AiFunction(name={self.contract.name!r}, model={self.runner.options.model!r})"


def make_ai(
    options: AiOptions,
) -> Callable[[FunctionSignature | Callable[..., Any]], AiFunction]:
    """Create a factory that turns signatures into model-backed functions.

    The returned factory compiles each signature once, when it is applied,
    so declaration errors surface immediately.

    Args:
        options: Client, model and prompt configuration

    Returns:
        A factory accepting a ``FunctionSignature`` or a stub function
    """
    runner = InvocationRunner(options)

    def ai(signature: FunctionSignature | Callable[..., Any]) -> AiFunction:
        contract = compile_function(signature, strict=options.strict)
        function = AiFunction(contract, runner)
        if not isinstance(signature, FunctionSignature):
            update_wrapper(function, signature)
        return function

    return ai


def _extract_content(response: Any) -> str:
    if not get_field(response, "choices"):
        raise MalformedResponseError("The model returned no choices")

    content = get_field(first_message(response), "content")
    if not content:
        raise MalformedResponseError(
            "The model returned an empty reply", response_text=content
        )
    return str(content)
