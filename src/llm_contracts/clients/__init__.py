"""Chat client boundary for model calls."""

from .litellm_client import ChatClient, LiteLLMChatClient
from .responses import first_message, get_field

__all__ = ["ChatClient", "LiteLLMChatClient", "first_message", "get_field"]
