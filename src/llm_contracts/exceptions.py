"""Custom exceptions for the llm-contracts package."""

from typing import Any


class LLMContractsException(Exception):
    """Base exception for llm-contracts.

    All custom exceptions in this package should inherit from this base class.
    """

    pass


class InvalidSignatureError(LLMContractsException):
    """Raised when a function or tool declaration is structurally invalid.

    This exception is raised when:
    - The description is missing or blank
    - The return type is missing or cannot be known
    - The argument count is wrong for the kind of contract
    - Two tools in one registry share a name

    Attributes:
        signature: The offending signature, if available
    """

    def __init__(self, message: str, signature: Any | None = None):
        super().__init__(message)
        self.signature = signature


class SchemaError(LLMContractsException):
    """Raised when a declared type cannot be reduced to a JSON Schema type.

    Attributes:
        schema: The generated schema that could not be trimmed
    """

    def __init__(self, message: str, schema: dict[str, Any] | None = None):
        super().__init__(message)
        self.schema = schema


class MalformedResponseError(LLMContractsException):
    """Raised when a model reply (or tool-call argument string) is not valid JSON.

    Attributes:
        response_text: The text that failed to parse
    """

    def __init__(self, message: str, response_text: str | None = None):
        super().__init__(message)
        self.response_text = response_text


class ResponseValidationError(LLMContractsException):
    """Raised when decoded JSON does not match the declared type.

    Attributes:
        response_data: The decoded JSON value that failed validation
        validation_errors: Pydantic error details (``loc``, ``msg``, ``type``)
    """

    def __init__(
        self,
        message: str,
        response_data: Any | None = None,
        validation_errors: list[dict[str, Any]] | None = None,
    ):
        super().__init__(message)
        self.response_data = response_data
        self.validation_errors = validation_errors or []


class UnknownToolError(LLMContractsException):
    """Raised when a tool call names a tool that is not registered.

    Attributes:
        tool_name: The requested tool name
    """

    def __init__(self, message: str, tool_name: str | None = None):
        super().__init__(message)
        self.tool_name = tool_name


class ConfigurationException(LLMContractsException):
    """Raised when configuration errors occur.

    This exception is raised when:
    - Required configuration is missing
    - Environment setup is incorrect

    Attributes:
        config_key: The configuration key that caused the error
    """

    def __init__(self, message: str, config_key: str | None = None):
        super().__init__(message)
        self.config_key = config_key
