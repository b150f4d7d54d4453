"""Typed function contracts."""

from .compiler import (
    INPUT_KEY,
    RESULT_KEY,
    FunctionContract,
    FunctionSignature,
    compile_function,
    compile_tool_contract,
)

__all__ = [
    "INPUT_KEY",
    "RESULT_KEY",
    "FunctionContract",
    "FunctionSignature",
    "compile_function",
    "compile_tool_contract",
]
