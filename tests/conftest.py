"""Shared pytest configuration and fixtures for the test suite."""

import os
from collections.abc import Callable
from typing import Any
from unittest.mock import AsyncMock, Mock

import pytest


def make_chat_response(content: str | None, tool_calls: Any = None) -> Mock:
    """Build an OpenAI-shaped chat completion response."""
    mock_response = Mock()
    mock_response.choices = [Mock()]
    mock_response.choices[0].message.content = content
    mock_response.choices[0].message.tool_calls = tool_calls
    return mock_response


@pytest.fixture
def chat_response() -> Callable[..., Mock]:
    """Factory fixture for mock chat completion responses."""
    return make_chat_response


@pytest.fixture
def mock_client() -> Mock:
    """Chat client whose ``create`` is an AsyncMock returning '{}'."""
    client = Mock()
    client.create = AsyncMock(return_value=make_chat_response("{}"))
    return client


class SecureTestConfig:
    """Test configuration that doesn't expose API keys in repr."""

    def __init__(self, openai_key: str | None, anthropic_key: str | None) -> None:
        self._openai_key = openai_key
        self._anthropic_key = anthropic_key

    def __getitem__(self, key: str) -> Any:
        if key == "openai_api_key":
            return self._openai_key
        elif key == "anthropic_api_key":
            return self._anthropic_key
        else:
            raise KeyError(key)

    def __repr__(self) -> str:
        return "SecureTestConfig(keys_available=True)"


@pytest.fixture
def integration_test_setup() -> SecureTestConfig:
    """Setup fixture for integration tests - requires a real OpenAI API key."""
    openai_key = os.getenv("OPENAI_API_KEY")
    anthropic_key = os.getenv("ANTHROPIC_API_KEY")

    if not openai_key:
        pytest.skip("Integration tests require OPENAI_API_KEY to be set.")

    return SecureTestConfig(openai_key=openai_key, anthropic_key=anthropic_key)
