"""Configuration utilities for environment-based setup."""

import os
from collections.abc import Callable
from typing import Any

from dotenv import load_dotenv

from llm_contracts.clients import LiteLLMChatClient
from llm_contracts.contracts import FunctionSignature
from llm_contracts.exceptions import ConfigurationException
from llm_contracts.invocation import AiFunction, AiOptions, make_ai
from llm_contracts.prompts import PromptBuilder, SystemPromptFunction

DEFAULT_MODEL = "gpt-3.5-turbo-1106"
MODEL_ENV_VAR = "LLM_CONTRACTS_MODEL"


def load_environment() -> None:
    """Load environment variables from .env file if it exists."""
    load_dotenv()


def get_default_model() -> str:
    """Get the model used when none is passed explicitly.

    Returns:
        ``LLM_CONTRACTS_MODEL`` from the environment, else the built-in default
    """
    load_environment()
    return os.getenv(MODEL_ENV_VAR) or DEFAULT_MODEL


def get_available_providers() -> dict[str, bool]:
    """Check which providers have API keys available.

    Returns:
        Dictionary mapping provider names to availability status
    """
    load_environment()

    return {
        "openai": os.getenv("OPENAI_API_KEY") is not None,
        "anthropic": os.getenv("ANTHROPIC_API_KEY") is not None,
    }


def create_litellm_client(
    model: str | None = None,
    api_key: str | None = None,
    max_tokens: int = 1000,
) -> LiteLLMChatClient:
    """Create a LiteLLM chat client with environment-based configuration.

    Args:
        model: Model name used to infer which API key to read
        api_key: API key (if None, inferred from model and environment)
        max_tokens: Maximum tokens for response

    Returns:
        Configured LiteLLMChatClient

    Raises:
        ConfigurationException: If no API key is found and cannot be inferred
    """
    load_environment()
    model = model or get_default_model()

    env_var = None
    if api_key is None:
        # Try to infer API key based on model name
        if model.startswith("gpt") or model.startswith("openai/"):
            env_var = "OPENAI_API_KEY"
        elif model.startswith("claude") or model.startswith("anthropic/"):
            env_var = "ANTHROPIC_API_KEY"
        if env_var is not None:
            api_key = os.getenv(env_var)

    if api_key is None:
        raise ConfigurationException(
            f"API key not found for model '{model}'. Set appropriate environment "
            "variable or pass api_key parameter.",
            config_key=env_var,
        )

    return LiteLLMChatClient(api_key=api_key, max_tokens=max_tokens)


def create_ai(
    model: str | None = None,
    api_key: str | None = None,
    max_tokens: int = 1000,
    prompt_builder: PromptBuilder | SystemPromptFunction | None = None,
    client_supports_json_schema: bool = False,
    strict: bool = False,
) -> Callable[[FunctionSignature | Callable[..., Any]], AiFunction]:
    """Create a model-backed function factory from environment configuration.

    Args:
        model: Model name (default: ``get_default_model()``)
        api_key: API key (if None, inferred from model and environment)
        max_tokens: Maximum tokens for response
        prompt_builder: Optional system prompt override
        client_supports_json_schema: Use schema-constrained response format
        strict: Validate replies in pydantic strict mode

    Returns:
        Factory turning signatures into ``AiFunction`` objects

    Raises:
        ConfigurationException: If no API key is found
    """
    model = model or get_default_model()
    client = create_litellm_client(model=model, api_key=api_key, max_tokens=max_tokens)
    return make_ai(
        AiOptions(
            client=client,
            model=model,
            prompt_builder=prompt_builder,
            client_supports_json_schema=client_supports_json_schema,
            strict=strict,
        )
    )
