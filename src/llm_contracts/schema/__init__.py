"""Schema generation and trimming for typed function contracts.

This module provides:
- JSON Schema generation from Python types via pydantic
- Trimming of generated schemas to the minimal wire shape
- ``response_format`` construction for JSON-mode completions
"""

from .response_format import (
    ResponseMode,
    build_response_format,
    generate_schema_name,
)
from .trimmer import (
    TrimmedJsonSchema,
    generate_json_schema,
    is_object_schema,
    trim_generated_json_schema,
    trimmed_schema_for,
)

__all__ = [
    # Response format
    "ResponseMode",
    "build_response_format",
    "generate_schema_name",
    # Trimmer
    "TrimmedJsonSchema",
    "generate_json_schema",
    "is_object_schema",
    "trim_generated_json_schema",
    "trimmed_schema_for",
]
