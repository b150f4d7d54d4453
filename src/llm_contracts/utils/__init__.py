"""Configuration utilities."""

from .config import (
    create_ai,
    create_litellm_client,
    get_available_providers,
    get_default_model,
    load_environment,
)

__all__ = [
    "load_environment",
    "create_ai",
    "create_litellm_client",
    "get_available_providers",
    "get_default_model",
]
