"""Response-format parameters for JSON-mode chat completions."""

import re
from enum import Enum
from typing import Any
from uuid import uuid4


class ResponseMode(Enum):
    """How strongly the chat client is asked to constrain its output."""

    JSON_OBJECT = "json_object"
    JSON_SCHEMA = "json_schema"


def build_response_format(
    output_schema: dict[str, Any],
    mode: ResponseMode = ResponseMode.JSON_OBJECT,
    name: str | None = None,
) -> dict[str, Any]:
    """Build the ``response_format`` request parameter.

    Args:
        output_schema: Trimmed schema the reply must match
        mode: Plain JSON-object mode, or schema-constrained generation
        name: Optional schema name for schema-constrained mode

    Returns:
        ``{"type": "json_object"}`` or an OpenAI-style ``json_schema`` block
    """
    if mode is ResponseMode.JSON_OBJECT:
        return {"type": "json_object"}

    return {
        "type": "json_schema",
        "json_schema": {
            "name": name or generate_schema_name(output_schema),
            "schema": output_schema,
        },
    }


def generate_schema_name(schema_dict: dict[str, Any]) -> str:
    """Generate a name for a schema.

    Args:
        schema_dict: JSON schema dictionary

    Returns:
        Schema name accepted by the OpenAI API (``[a-zA-Z0-9_-]``, max 64)
    """
    if "description" in schema_dict:
        name = re.sub(r"[\s-]+", "_", schema_dict["description"].strip())
        name = "".join(c for c in name if c.isalnum() or c == "_")[:64]
        if name:
            return name

    return f"schema_{uuid4().hex[:8]}"
