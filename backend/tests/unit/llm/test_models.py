"""Unit tests for LLM data models and error classes.

Tests cover:
- Model instantiation and validation
- Error hierarchy and attributes
"""

import pytest
from pydantic import ValidationError

from src.llm.errors import (
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
from src.llm.models import ChatMessage, LLMRequest, LLMResponse, ResponseFormat, Usage


class TestChatMessage:
    """Tests for ChatMessage model."""

    def test_basic_user_message(self):
        msg = ChatMessage(role="user", content="Hello, world!")
        assert msg.role == "user"
        assert msg.content == "Hello, world!"

    def test_invalid_role(self):
        with pytest.raises(ValidationError):
            ChatMessage(role="tool", content="result")


class TestLLMRequest:
    """Tests for LLMRequest model."""

    def test_defaults(self):
        request = LLMRequest(messages=[ChatMessage(role="user", content="Hi")])
        assert request.model is None
        assert request.temperature == 1.0
        assert request.max_tokens is None
        assert request.response_format is None

    def test_requires_a_message(self):
        with pytest.raises(ValidationError):
            LLMRequest(messages=[])

    def test_temperature_range(self):
        with pytest.raises(ValidationError):
            LLMRequest(messages=[ChatMessage(role="user", content="Hi")], temperature=2.5)

    def test_max_tokens_positive(self):
        with pytest.raises(ValidationError):
            LLMRequest(messages=[ChatMessage(role="user", content="Hi")], max_tokens=0)

    def test_response_format(self):
        assert ResponseFormat().type == "text"
        assert ResponseFormat(type="json_object").type == "json_object"


class TestLLMResponse:
    """Tests for LLMResponse model."""

    def _response(self, finish_reason: str) -> LLMResponse:
        return LLMResponse(
            text="{}",
            finish_reason=finish_reason,
            usage=Usage(prompt_tokens=1, completion_tokens=1, total_tokens=2),
            model="gpt-4o",
            provider="openai",
            latency_ms=10,
        )

    def test_truncated_on_length(self):
        assert self._response("length").truncated is True

    def test_not_truncated_on_stop(self):
        assert self._response("stop").truncated is False


class TestErrors:
    """Tests for the LLMError hierarchy."""

    @pytest.mark.parametrize(
        "error_class",
        [
            ConfigurationError,
            AuthenticationError,
            RateLimitError,
            TimeoutError,
            InvalidRequestError,
            ContentFilterError,
            ProviderError,
            ModelNotFoundError,
        ],
    )
    def test_subclasses_llm_error(self, error_class):
        assert issubclass(error_class, LLMError)

    def test_timeout_error_shadows_builtin(self):
        """Provider timeouts are LLMErrors, not the builtin TimeoutError."""
        assert not issubclass(TimeoutError, OSError)

    def test_attributes(self):
        error = ProviderError(
            "Server error",
            provider="openai",
            request_id="req_1",
            correlation_id="corr_1",
            status_code=502,
        )
        assert error.provider == "openai"
        assert error.request_id == "req_1"
        assert error.correlation_id == "corr_1"
        assert error.status_code == 502

    def test_str_includes_context(self):
        error = RateLimitError("Rate limited", provider="anthropic", status_code=429)
        text = str(error)
        assert "Rate limited" in text
        assert "provider=anthropic" in text
        assert "status=429" in text

    def test_str_without_context(self):
        assert str(LLMError("plain")) == "plain"
