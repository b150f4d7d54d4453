"""Chat-completion client boundary.

The contract layer needs one operation from a model provider: send a list of
messages with an optional ``response_format`` and get back an OpenAI-shaped
response (``response.choices[0].message.content``). ``LiteLLMChatClient``
provides it for every provider LiteLLM supports.
"""

import logging
from typing import Any, Protocol

from litellm import acompletion

logger = logging.getLogger(__name__)


class ChatClient(Protocol):
    """Anything that can create a chat completion asynchronously."""

    async def create(
        self,
        *,
        model: str,
        messages: list[dict[str, Any]],
        response_format: dict[str, Any] | None = None,
        **kwargs: Any,
    ) -> Any:
        """Create a chat completion and return the provider response."""
        ...


class LiteLLMChatClient:
    """Chat client backed by ``litellm.acompletion``."""

    def __init__(
        self,
        api_key: str | None = None,
        max_tokens: int | None = None,
        **defaults: Any,
    ) -> None:
        """Initialize the client.

        Args:
            api_key: API key forwarded to the provider; LiteLLM reads the
                provider's environment variable when omitted
            max_tokens: Maximum tokens per response
            **defaults: Extra keyword arguments sent with every request
        """
        self.api_key = api_key
        self.max_tokens = max_tokens
        self.defaults = defaults

    async def create(
        self,
        *,
        model: str,
        messages: list[dict[str, Any]],
        response_format: dict[str, Any] | None = None,
        **kwargs: Any,
    ) -> Any:
        request: dict[str, Any] = {**self.defaults, **kwargs}
        if self.api_key is not None:
            request["api_key"] = self.api_key
        if self.max_tokens is not None:
            request["max_tokens"] = self.max_tokens
        if response_format is not None:
            request["response_format"] = response_format

        logger.debug("Sending %d messages to %s", len(messages), model)
        return await acompletion(model=model, messages=messages, **request)
