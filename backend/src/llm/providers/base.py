"""Abstract base class for LLM providers.

Defines the interface every provider implements and the shared mapping from
HTTP status codes to the LLMError hierarchy.
"""

from abc import ABC, abstractmethod

from ..errors import (
    AuthenticationError,
    ContentFilterError,
    InvalidRequestError,
    LLMError,
    ModelNotFoundError,
    ProviderError,
    RateLimitError,
)
from ..models import LLMRequest, LLMResponse


class LLMProvider(ABC):
    """Base interface for text completion providers."""

    # Substrings that mark a 400 as a safety block rather than a bad request
    CONTENT_FILTER_MARKERS: tuple[str, ...] = ("content_filter", "safety")

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider identifier: 'openai', 'anthropic'."""
        ...

    @property
    @abstractmethod
    def is_configured(self) -> bool:
        """Whether an API key is available."""
        ...

    @abstractmethod
    async def generate(self, request: LLMRequest) -> LLMResponse:
        """Send a completion request and return the response.

        Raises:
            AuthenticationError: Invalid or missing API key.
            RateLimitError: Rate limit exceeded.
            TimeoutError: Request timed out.
            InvalidRequestError: Malformed request.
            ContentFilterError: Blocked by safety filters.
            ProviderError: Provider-side failure.
        """
        ...

    @abstractmethod
    def supports(self, feature: str) -> bool:
        """Check if provider supports a capability ('json_object', 'system_message')."""
        ...

    def map_status_error(
        self,
        status_code: int,
        message: str,
        request_id: str | None = None,
    ) -> LLMError:
        """Translate an HTTP error status into an LLMError."""
        label = self.name.capitalize() if self.name != "openai" else "OpenAI"
        context = {"provider": self.name, "request_id": request_id, "status_code": status_code}

        if status_code == 401:
            return AuthenticationError(f"Invalid {label} API key", **context)
        if status_code == 403:
            return AuthenticationError(f"{label} access denied: {message}", **context)
        if status_code == 404:
            return ModelNotFoundError(f"Model not found: {message}", **context)
        if status_code == 429:
            return RateLimitError(f"{label} rate limit exceeded: {message}", **context)
        if status_code == 400:
            lowered = message.lower()
            if any(marker in lowered for marker in self.CONTENT_FILTER_MARKERS):
                return ContentFilterError(f"Content blocked by {label} safety filters: {message}", **context)
            return InvalidRequestError(f"Invalid request to {label}: {message}", **context)
        if status_code >= 500:
            return ProviderError(f"{label} server error ({status_code}): {message}", **context)
        return LLMError(f"{label} error ({status_code}): {message}", **context)
