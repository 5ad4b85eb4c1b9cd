"""LLM error hierarchy.

Custom exceptions for text completion calls with provider context. The draft
pipeline treats every LLMError as "generation unavailable"; the subclasses
exist for logging and for choosing a user-facing message.
"""


class LLMError(Exception):
    """Base exception for LLM operations."""

    def __init__(
        self,
        message: str,
        provider: str | None = None,
        request_id: str | None = None,
        correlation_id: str | None = None,
        status_code: int | None = None,
    ):
        super().__init__(message)
        self.provider = provider
        self.request_id = request_id
        self.correlation_id = correlation_id
        self.status_code = status_code

    def __str__(self) -> str:
        parts = [super().__str__()]
        if self.provider:
            parts.append(f"provider={self.provider}")
        if self.status_code:
            parts.append(f"status={self.status_code}")
        if self.request_id:
            parts.append(f"request_id={self.request_id}")
        return " ".join(parts)


class ConfigurationError(LLMError):
    """No usable provider: missing API key or unknown provider name."""

    pass


class AuthenticationError(LLMError):
    """401/403 - Invalid API key or access denied."""

    pass


class RateLimitError(LLMError):
    """429 - Rate limit or quota exceeded."""

    pass


class TimeoutError(LLMError):
    """Request exceeded the provider timeout."""

    pass


class InvalidRequestError(LLMError):
    """400 - Malformed request.

    Examples: prompt too long for the context window, invalid parameters.
    """

    pass


class ContentFilterError(LLMError):
    """Request or response blocked by the provider's safety system."""

    pass


class ProviderError(LLMError):
    """5xx or connection failure on the provider side."""

    pass


class ModelNotFoundError(LLMError):
    """404 - Model identifier not recognized."""

    pass
