"""LLM provider abstraction layer.

This module provides a vendor-neutral interface for text completion calls
against OpenAI or Anthropic.
"""

from .client import LLMClient
from .errors import (
    AuthenticationError,
    ConfigurationError,
    ContentFilterError,
    InvalidRequestError,
    LLMError,
    ModelNotFoundError,
    ProviderError,
    RateLimitError,
    TimeoutError,
)
from .models import ChatMessage, LLMRequest, LLMResponse, ResponseFormat, Usage

__all__ = [
    "LLMClient",
    "LLMRequest",
    "LLMResponse",
    "ChatMessage",
    "ResponseFormat",
    "Usage",
    "LLMError",
    "ConfigurationError",
    "AuthenticationError",
    "RateLimitError",
    "TimeoutError",
    "InvalidRequestError",
    "ContentFilterError",
    "ProviderError",
    "ModelNotFoundError",
]
