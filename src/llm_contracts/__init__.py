"""llm-contracts - typed function contracts for JSON-speaking language models."""

__version__ = "0.1.0"

# Chat client boundary
from .clients import ChatClient, LiteLLMChatClient

# Contracts
from .contracts import (
    FunctionContract,
    FunctionSignature,
    compile_function,
    compile_tool_contract,
)

# Custom exceptions
from .exceptions import (
    ConfigurationException,
    InvalidSignatureError,
    LLMContractsException,
    MalformedResponseError,
    ResponseValidationError,
    SchemaError,
    UnknownToolError,
)

# Model-invoked functions
from .invocation import AiFunction, AiOptions, InvocationRunner, make_ai

# Prompts
from .prompts import DefaultPromptBuilder, PromptBuilder

# Tool helpers
from .tools import (
    ToolCallRequest,
    ToolCallResult,
    ToolDefinition,
    ToolRegistry,
    format_tools,
    handle_tool_calls,
    is_tool_call_requested,
    make_tool,
)

# Configuration utilities
from .utils import (
    create_ai,
    create_litellm_client,
    get_available_providers,
    get_default_model,
    load_environment,
)

__all__ = [
    "__version__",
    "ChatClient",
    "LiteLLMChatClient",
    "FunctionContract",
    "FunctionSignature",
    "compile_function",
    "compile_tool_contract",
    "AiFunction",
    "AiOptions",
    "InvocationRunner",
    "make_ai",
    "DefaultPromptBuilder",
    "PromptBuilder",
    "ToolCallRequest",
    "ToolCallResult",
    "ToolDefinition",
    "ToolRegistry",
    "format_tools",
    "handle_tool_calls",
    "is_tool_call_requested",
    "make_tool",
    "load_environment",
    "create_ai",
    "create_litellm_client",
    "get_available_providers",
    "get_default_model",
    # Exceptions
    "LLMContractsException",
    "ConfigurationException",
    "InvalidSignatureError",
    "MalformedResponseError",
    "ResponseValidationError",
    "SchemaError",
    "UnknownToolError",
]
