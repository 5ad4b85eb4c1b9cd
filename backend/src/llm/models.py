"""LLM data models.

Vendor-neutral request and response models for text completion calls.
"""

from typing import Any, Literal

from pydantic import BaseModel, Field


class ChatMessage(BaseModel):
    """A single role-tagged message."""

    role: Literal["system", "user", "assistant"]
    content: str


class ResponseFormat(BaseModel):
    """Output format hint. Providers without JSON mode ignore it."""

    type: Literal["text", "json_object"] = "text"


class LLMRequest(BaseModel):
    """Vendor-neutral completion request."""

    messages: list[ChatMessage] = Field(min_length=1)
    model: str | None = None
    temperature: float = Field(default=1.0, ge=0.0, le=2.0)
    max_tokens: int | None = Field(default=None, gt=0)
    response_format: ResponseFormat | None = None
    metadata: dict[str, Any] | None = None


class Usage(BaseModel):
    """Token usage statistics."""

    prompt_tokens: int
    completion_tokens: int
    total_tokens: int


class LLMResponse(BaseModel):
    """Vendor-neutral completion response."""

    text: str | None
    finish_reason: str
    usage: Usage
    model: str
    provider: str
    latency_ms: int
    request_id: str | None = None

    @property
    def truncated(self) -> bool:
        """Whether generation stopped at the token limit."""
        return self.finish_reason == "length"
