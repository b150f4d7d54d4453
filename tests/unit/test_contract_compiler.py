"""Unit tests for the contract compiler."""

from dataclasses import FrozenInstanceError
from datetime import date
from enum import Enum
from typing import Any

import pytest
from pydantic import BaseModel
from typing_extensions import TypedDict

from llm_contracts.contracts.compiler import (
    FunctionSignature,
    compile_function,
    compile_tool_contract,
)
from llm_contracts.exceptions import (
    InvalidSignatureError,
    ResponseValidationError,
    SchemaError,
)
from llm_contracts.schema import trimmed_schema_for


class PersonDetails(BaseModel):
    name: str
    age: int
    location: str


class Weather(TypedDict):
    temperature: float
    description: str


class ContactQuery(BaseModel):
    name: str


class Color(Enum):
    RED = "red"
    BLUE = "blue"


class Paint(BaseModel):
    color: Color
    when: date


def _signature(**overrides: Any) -> FunctionSignature:
    values: dict[str, Any] = {
        "args": (str,),
        "returns": str,
        "description": "Sample description",
    }
    values.update(overrides)
    return FunctionSignature(**values)


@pytest.mark.unit
class TestCompileFunctionPreconditions:
    """Structural checks on model-invocable signatures."""

    def test_requires_description(self) -> None:
        with pytest.raises(InvalidSignatureError, match="description required"):
            compile_function(_signature(description=None))

    def test_blank_description_is_rejected(self) -> None:
        with pytest.raises(InvalidSignatureError, match="description required"):
            compile_function(_signature(description="   "))

    def test_requires_return_type(self) -> None:
        with pytest.raises(InvalidSignatureError, match="return type required"):
            compile_function(_signature(returns=None))

    @pytest.mark.parametrize("unknown", [Any, object])
    def test_unknown_return_type_is_rejected(self, unknown: Any) -> None:
        with pytest.raises(InvalidSignatureError, match="return type required"):
            compile_function(_signature(returns=unknown))

    def test_requires_an_argument(self) -> None:
        with pytest.raises(InvalidSignatureError, match="single argument required"):
            compile_function(_signature(args=()))

    def test_rejects_two_arguments(self) -> None:
        with pytest.raises(InvalidSignatureError, match="single argument required"):
            compile_function(_signature(args=(str, int)))

    def test_error_carries_signature(self) -> None:
        signature = _signature(description=None)

        with pytest.raises(InvalidSignatureError) as exc_info:
            compile_function(signature)

        assert exc_info.value.signature is signature

    def test_argument_count_is_checked_first(self) -> None:
        with pytest.raises(InvalidSignatureError, match="single argument required"):
            compile_function(_signature(args=(), description=None, returns=None))

    def test_untyped_argument_raises_schema_error(self) -> None:
        with pytest.raises(SchemaError):
            compile_function(_signature(args=(Any,)))


@pytest.mark.unit
class TestCompileFunctionSchemas:
    """Schema emission and the result wrapper."""

    def test_primitive_return_is_wrapped_in_result_object(self) -> None:
        contract = compile_function(_signature())

        assert contract.output_is_wrapped is True
        assert contract.output_schema == {
            "type": "object",
            "properties": {"result": {"type": "string"}},
            "required": ["result"],
        }
        assert contract.input_schema == {"type": "string"}

    def test_array_return_is_wrapped(self) -> None:
        contract = compile_function(_signature(returns=list[str]))

        assert contract.output_is_wrapped is True
        assert contract.output_schema["properties"]["result"] == {
            "type": "array",
            "items": {"type": "string"},
        }

    def test_object_return_is_not_wrapped(self) -> None:
        contract = compile_function(_signature(returns=PersonDetails))

        assert contract.output_is_wrapped is False
        assert contract.output_schema == trimmed_schema_for(PersonDetails)

    def test_typed_dict_return_is_not_wrapped(self) -> None:
        contract = compile_function(_signature(returns=Weather))

        assert contract.output_is_wrapped is False
        assert contract.output_schema["required"] == ["temperature", "description"]

    def test_free_form_mapping_return_is_wrapped(self) -> None:
        contract = compile_function(_signature(returns=dict[str, int]))

        assert contract.output_is_wrapped is True

    def test_optional_return_is_wrapped(self) -> None:
        contract = compile_function(_signature(returns=int | None))

        assert contract.output_is_wrapped is True
        assert "anyOf" in contract.output_schema["properties"]["result"]

    def test_return_schema_is_unwrapped(self) -> None:
        contract = compile_function(_signature(returns=int))

        assert contract.return_schema == {"type": "integer"}

    def test_description_is_stripped(self) -> None:
        contract = compile_function(_signature(description="  Reverse it.\n"))

        assert contract.description == "Reverse it."

    def test_contract_is_immutable(self) -> None:
        contract = compile_function(_signature())

        with pytest.raises(FrozenInstanceError):
            contract.description = "changed"  # type: ignore[misc]


@pytest.mark.unit
class TestValidateAndUnwrap:
    """Validating model replies against the effective output type."""

    def test_unwraps_primitive(self) -> None:
        contract = compile_function(_signature())

        assert contract.validate_and_unwrap({"result": "Se7en"}) == "Se7en"

    def test_unwraps_array(self) -> None:
        contract = compile_function(_signature(returns=list[str]))

        assert contract.validate_and_unwrap({"result": ["a", "b"]}) == ["a", "b"]

    def test_object_returned_as_model(self) -> None:
        contract = compile_function(_signature(returns=PersonDetails))

        result = contract.validate_and_unwrap(
            {"name": "George", "age": 30, "location": "New York City"}
        )

        assert result == PersonDetails(
            name="George", age=30, location="New York City"
        )

    def test_typed_dict_returned_unchanged(self) -> None:
        contract = compile_function(_signature(returns=Weather))
        raw = {"temperature": 72.0, "description": "Sunny"}

        assert contract.validate_and_unwrap(raw) == raw

    def test_missing_wrapper_raises(self) -> None:
        contract = compile_function(_signature())

        with pytest.raises(ResponseValidationError) as exc_info:
            contract.validate_and_unwrap("Se7en")

        assert exc_info.value.response_data == "Se7en"

    def test_mismatch_reports_field_path(self) -> None:
        contract = compile_function(_signature(returns=PersonDetails))

        with pytest.raises(ResponseValidationError) as exc_info:
            contract.validate_and_unwrap({"name": "George", "location": "NYC"})

        errors = exc_info.value.validation_errors
        assert len(errors) == 1
        assert errors[0]["loc"] == ("age",)
        assert errors[0]["type"] == "missing"

    def test_nested_mismatch_path_includes_wrapper_key(self) -> None:
        contract = compile_function(_signature(returns=list[int]))

        with pytest.raises(ResponseValidationError) as exc_info:
            contract.validate_and_unwrap({"result": [1, "two"]})

        assert exc_info.value.validation_errors[0]["loc"] == ("result", 1)

    def test_lax_mode_accepts_numeric_strings(self) -> None:
        contract = compile_function(_signature(returns=int))

        assert contract.validate_and_unwrap({"result": "7"}) == 7

    def test_strict_mode_rejects_numeric_strings(self) -> None:
        contract = compile_function(_signature(returns=int), strict=True)

        with pytest.raises(ResponseValidationError):
            contract.validate_and_unwrap({"result": "7"})

    def test_strict_mode_accepts_json_enum_and_date(self) -> None:
        contract = compile_function(_signature(returns=Paint), strict=True)

        result = contract.validate_and_unwrap({"color": "red", "when": "2024-01-01"})

        assert result == Paint(color=Color.RED, when=date(2024, 1, 1))

    def test_strict_mode_accepts_wrapped_enum(self) -> None:
        contract = compile_function(_signature(returns=Color), strict=True)

        assert contract.validate_and_unwrap({"result": "red"}) is Color.RED

    def test_strict_tool_argument_accepts_json_enum_and_date(self) -> None:
        contract = compile_tool_contract(
            _signature(args=(Paint,), returns=str), strict=True
        )

        argument = contract.prepare_argument({"color": "blue", "when": "2024-02-29"})

        assert argument == Paint(color=Color.BLUE, when=date(2024, 2, 29))

    def test_strict_mode_still_rejects_unknown_enum_value(self) -> None:
        contract = compile_function(_signature(returns=Color), strict=True)

        with pytest.raises(ResponseValidationError):
            contract.validate_and_unwrap({"result": "green"})

    def test_round_trip_matches_unwrapped_type(self) -> None:
        """Accepted values validate independently against the declared type."""
        from pydantic import TypeAdapter

        contract = compile_function(_signature(returns=list[str]))
        value = contract.validate_and_unwrap({"result": ["x", "y"]})

        assert TypeAdapter(list[str]).validate_python(value) == value


@pytest.mark.unit
class TestFromCallable:
    """Deriving signatures from stub functions."""

    def test_reads_annotations_and_docstring(self) -> None:
        def pop_culture_reference(number: int) -> str:
            """Return a movie title with this number in it."""

        signature = FunctionSignature.from_callable(pop_culture_reference)

        assert signature.args == (int,)
        assert signature.returns is str
        assert signature.description == "Return a movie title with this number in it."
        assert signature.name == "pop_culture_reference"

    def test_missing_return_annotation(self) -> None:
        def no_return(text: str):  # type: ignore[no-untyped-def]
            """Does something."""

        assert FunctionSignature.from_callable(no_return).returns is None

    def test_unannotated_parameter_is_any(self) -> None:
        def untyped(text) -> str:  # type: ignore[no-untyped-def]
            """Does something."""
            return ""

        assert FunctionSignature.from_callable(untyped).args == (Any,)

    def test_variadic_parameters_rejected(self) -> None:
        def variadic(*texts: str) -> str:
            """Does something."""
            return ""

        with pytest.raises(InvalidSignatureError, match="Variadic"):
            FunctionSignature.from_callable(variadic)

    def test_compile_accepts_stub_function(self) -> None:
        def famous_actors(vibe: str) -> list[str]:
            """Return a list of famous actors that match the user provided vibe."""

        contract = compile_function(famous_actors)

        assert contract.name == "famous_actors"
        assert contract.output_is_wrapped is True

    def test_stub_without_docstring_is_rejected(self) -> None:
        def undocumented(text: str) -> str:
            return text

        with pytest.raises(InvalidSignatureError, match="description required"):
            compile_function(undocumented)

    def test_non_callable_is_rejected(self) -> None:
        with pytest.raises(InvalidSignatureError):
            compile_function("not a signature")  # type: ignore[arg-type]


@pytest.mark.unit
class TestCompileToolContract:
    """Tool contracts allow zero or one argument and wrap primitive input."""

    def test_zero_arguments(self) -> None:
        contract = compile_tool_contract(
            FunctionSignature(returns=Weather, description="Gets the weather")
        )

        assert contract.input_schema is None
        assert contract.argument_adapter is None
        assert contract.prepare_argument({}) is None

    def test_two_arguments_rejected(self) -> None:
        with pytest.raises(InvalidSignatureError, match="single argument required"):
            compile_tool_contract(_signature(args=(str, str)))

    def test_primitive_argument_is_wrapped_in_input_object(self) -> None:
        contract = compile_tool_contract(_signature())

        assert contract.argument_is_wrapped is True
        assert contract.input_schema == {
            "type": "object",
            "properties": {"input": {"type": "string"}},
            "required": ["input"],
        }
        assert contract.prepare_argument({"input": "hello"}) == "hello"

    def test_object_argument_is_not_wrapped(self) -> None:
        contract = compile_tool_contract(_signature(args=(ContactQuery,)))

        assert contract.argument_is_wrapped is False
        assert contract.input_schema == {
            "type": "object",
            "properties": {"name": {"type": "string"}},
            "required": ["name"],
        }
        assert contract.prepare_argument({"name": "Alice"}) == ContactQuery(
            name="Alice"
        )

    def test_bad_arguments_raise_validation_error(self) -> None:
        contract = compile_tool_contract(_signature())

        with pytest.raises(ResponseValidationError, match="arguments"):
            contract.prepare_argument({"text": "hello"})
