"""Compile typed function signatures into wire-ready contracts.

A contract pairs a trimmed input/output JSON schema with the validation step
that turns a model's decoded JSON back into the declared Python type. The
chat protocol only accepts objects at the top level, so non-object types are
wrapped in a single-key model (``result`` for return values, ``input`` for
tool arguments) and unwrapped again after validation.
"""

import inspect
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, get_type_hints

from pydantic import BaseModel, TypeAdapter, ValidationError, create_model
from pydantic_core import to_json

from llm_contracts.exceptions import InvalidSignatureError, ResponseValidationError
from llm_contracts.schema import (
    TrimmedJsonSchema,
    generate_json_schema,
    is_object_schema,
    trimmed_schema_for,
)

logger = logging.getLogger(__name__)

RESULT_KEY = "result"
INPUT_KEY = "input"

# Annotations that say nothing about the shape of a value.
_UNKNOWN_TYPES = (None, Any, object, inspect.Signature.empty)


@dataclass(frozen=True)
class FunctionSignature:
    """Declared shape of a function: argument types, return type, description.

    Args:
        args: Argument types, in order.
        returns: Return type. ``None`` means the return type was not declared.
        description: Natural-language description of what the function does.
        name: Optional function name, used for tools.
    """

    args: tuple[Any, ...] = ()
    returns: Any = None
    description: str | None = None
    name: str | None = None

    @classmethod
    def from_callable(cls, fn: Callable[..., Any]) -> "FunctionSignature":
        """Derive a signature from a stub function's annotations and docstring.

        Unannotated parameters are recorded as ``Any``; an absent return
        annotation is recorded as ``None``.

        Raises:
            InvalidSignatureError: If the function takes ``*args`` or ``**kwargs``
        """
        signature = inspect.signature(fn)
        hints = get_type_hints(fn)

        args = []
        for parameter in signature.parameters.values():
            if parameter.kind in (
                inspect.Parameter.VAR_POSITIONAL,
                inspect.Parameter.VAR_KEYWORD,
            ):
                raise InvalidSignatureError(
                    f"Variadic parameter '{parameter.name}' is not supported - "
                    "for multiple inputs, use an input object",
                    signature=fn,
                )
            args.append(hints.get(parameter.name, Any))

        return cls(
            args=tuple(args),
            returns=hints.get("return"),
            description=inspect.getdoc(fn),
            name=getattr(fn, "__name__", None),
        )


@dataclass(frozen=True)
class FunctionContract:
    """Compiled contract for one declared function.

    Attributes:
        description: What the function does, as shown to the model
        input_schema: Trimmed schema of the argument, or ``None`` for a
            zero-argument tool
        output_schema: Trimmed schema of the (possibly wrapped) return type
        output_is_wrapped: Whether replies arrive as ``{"result": ...}``
        argument_is_wrapped: Whether tool arguments arrive as ``{"input": ...}``
        return_schema: Trimmed schema of the declared return type, unwrapped
        output_adapter: Validator for the effective output type
        argument_adapter: Validator for the effective tool argument type
        name: Function name, if the signature carried one
        strict: Whether validation runs in pydantic strict mode
    """

    description: str
    input_schema: TrimmedJsonSchema | None
    output_schema: TrimmedJsonSchema
    output_is_wrapped: bool
    return_schema: dict[str, Any]
    output_adapter: TypeAdapter[Any] = field(repr=False, compare=False)
    argument_adapter: TypeAdapter[Any] | None = field(
        default=None, repr=False, compare=False
    )
    argument_is_wrapped: bool = False
    name: str | None = None
    strict: bool = False

    def validate_and_unwrap(self, raw: Any) -> Any:
        """Validate a decoded reply and strip the ``result`` wrapper if present.

        Args:
            raw: Decoded JSON value returned by the model

        Returns:
            The value typed as the declared return type

        Raises:
            ResponseValidationError: If ``raw`` does not match the effective
                output type
        """
        parsed = _validate(self.output_adapter, raw, self.strict, "reply")
        return getattr(parsed, RESULT_KEY) if self.output_is_wrapped else parsed

    def prepare_argument(self, raw: Any) -> Any:
        """Validate decoded tool-call arguments and strip the ``input`` wrapper.

        Returns ``None`` for zero-argument tools.

        Raises:
            ResponseValidationError: If ``raw`` does not match the argument type
        """
        if self.argument_adapter is None:
            return None
        parsed = _validate(self.argument_adapter, raw, self.strict, "arguments")
        return getattr(parsed, INPUT_KEY) if self.argument_is_wrapped else parsed


def compile_function(
    signature: FunctionSignature | Callable[..., Any], strict: bool = False
) -> FunctionContract:
    """Compile a model-invocable function: exactly one argument.

    Args:
        signature: Explicit signature, or a stub function to derive one from
        strict: Validate replies in pydantic strict mode

    Returns:
        The compiled contract

    Raises:
        InvalidSignatureError: On wrong argument count, missing description or
            missing return type
        SchemaError: If a type cannot be reduced to a JSON schema type
    """
    signature = _as_signature(signature)
    if len(signature.args) != 1:
        raise InvalidSignatureError(
            "single argument required - the function must have exactly one "
            "argument; for multiple inputs, use an input object",
            signature=signature,
        )
    description, returns = _check_description_and_return(signature)

    output_type, output_is_wrapped = _effective_type(returns, RESULT_KEY)
    output_schema = trimmed_schema_for(output_type)

    contract = FunctionContract(
        description=description,
        input_schema=trimmed_schema_for(signature.args[0]),
        output_schema=output_schema,
        output_is_wrapped=output_is_wrapped,
        return_schema=_unwrapped_schema(output_schema, output_is_wrapped),
        output_adapter=TypeAdapter(output_type),
        name=signature.name,
        strict=strict,
    )
    logger.debug(
        "Compiled function contract %s (output wrapped: %s)",
        signature.name or "<anonymous>",
        output_is_wrapped,
    )
    return contract


def compile_tool_contract(
    signature: FunctionSignature | Callable[..., Any], strict: bool = False
) -> FunctionContract:
    """Compile a tool contract: zero or one argument.

    A non-object argument type is wired as ``{"input": <type>}``.

    Raises:
        InvalidSignatureError: On more than one argument, missing description
            or missing return type
        SchemaError: If a type cannot be reduced to a JSON schema type
    """
    signature = _as_signature(signature)
    if len(signature.args) > 1:
        raise InvalidSignatureError(
            "single argument required - a tool must have zero arguments or one "
            "argument; for multiple inputs, use an input object",
            signature=signature,
        )
    description, returns = _check_description_and_return(signature)

    output_type, output_is_wrapped = _effective_type(returns, RESULT_KEY)
    output_schema = trimmed_schema_for(output_type)

    input_schema: TrimmedJsonSchema | None = None
    argument_adapter: TypeAdapter[Any] | None = None
    argument_is_wrapped = False
    if signature.args:
        argument_type, argument_is_wrapped = _effective_type(
            signature.args[0], INPUT_KEY
        )
        input_schema = trimmed_schema_for(argument_type)
        argument_adapter = TypeAdapter(argument_type)

    return FunctionContract(
        description=description,
        input_schema=input_schema,
        output_schema=output_schema,
        output_is_wrapped=output_is_wrapped,
        return_schema=_unwrapped_schema(output_schema, output_is_wrapped),
        output_adapter=TypeAdapter(output_type),
        argument_adapter=argument_adapter,
        argument_is_wrapped=argument_is_wrapped,
        name=signature.name,
        strict=strict,
    )


def _as_signature(signature: FunctionSignature | Callable[..., Any]) -> FunctionSignature:
    if isinstance(signature, FunctionSignature):
        return signature
    if callable(signature):
        return FunctionSignature.from_callable(signature)
    raise InvalidSignatureError(
        f"Expected a FunctionSignature or a function, got {type(signature).__name__}",
        signature=signature,
    )


def _check_description_and_return(signature: FunctionSignature) -> tuple[str, Any]:
    if not signature.description or not signature.description.strip():
        raise InvalidSignatureError(
            "description required - it is the implementation that gets passed "
            "to the model",
            signature=signature,
        )
    if any(signature.returns is unknown for unknown in _UNKNOWN_TYPES):
        raise InvalidSignatureError(
            "return type required - it is the output shape passed to the model",
            signature=signature,
        )
    return signature.description.strip(), signature.returns


def _effective_type(tp: Any, key: str) -> tuple[Any, bool]:
    """Return the wire type for ``tp`` and whether it had to be wrapped."""
    if is_object_schema(generate_json_schema(tp)):
        return tp, False
    model_name = "Result" if key == RESULT_KEY else "Input"
    wrapper: type[BaseModel] = create_model(model_name, **{key: (tp, ...)})  # type: ignore[call-overload]
    return wrapper, True


def _unwrapped_schema(
    output_schema: TrimmedJsonSchema, output_is_wrapped: bool
) -> dict[str, Any]:
    if not output_is_wrapped:
        return dict(output_schema)
    return output_schema["properties"][RESULT_KEY]


def _validate(adapter: TypeAdapter[Any], raw: Any, strict: bool, what: str) -> Any:
    # Inputs are decoded JSON; strict mode must accept JSON forms of enums,
    # dates and UUIDs.
    try:
        return adapter.validate_json(to_json(raw), strict=strict)
    except ValidationError as e:
        raise ResponseValidationError(
            f"The model's {what} did not match the declared schema: {e}",
            response_data=raw,
            validation_errors=e.errors(include_url=False),
        ) from e
