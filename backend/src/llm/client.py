"""High-level LLM client with provider selection.

Resolves which provider serves a request and makes a single attempt.
Callers that need a deadline wrap generate() themselves; the draft pipeline
treats any LLMError as "generation unavailable".
"""

import logging
import os
import uuid

from .errors import ConfigurationError, LLMError
from .models import LLMRequest, LLMResponse
from .providers.anthropic import AnthropicProvider
from .providers.base import LLMProvider
from .providers.openai import OpenAIProvider

logger = logging.getLogger(__name__)


class LLMClient:
    """Vendor-neutral completion client.

    Configuration (env vars):
    - LLM_DEFAULT_PROVIDER: Default provider (default: "openai")
    - LLM_TIMEOUT_SECONDS: Request timeout (default: 60)
    """

    DEFAULT_PROVIDER = "openai"
    DEFAULT_TIMEOUT = 60.0

    def __init__(
        self,
        default_provider: str | None = None,
        timeout: float | None = None,
        openai_api_key: str | None = None,
        anthropic_api_key: str | None = None,
    ):
        """Initialize LLM client.

        Args:
            default_provider: Primary provider name. Defaults to LLM_DEFAULT_PROVIDER env var.
            timeout: Request timeout in seconds. Defaults to LLM_TIMEOUT_SECONDS env var.
            openai_api_key: OpenAI API key. Defaults to OPENAI_API_KEY env var.
            anthropic_api_key: Anthropic API key. Defaults to ANTHROPIC_API_KEY env var.
        """
        self._default_provider = (
            default_provider
            or os.environ.get("LLM_DEFAULT_PROVIDER", self.DEFAULT_PROVIDER)
        )
        self._timeout = (
            timeout
            if timeout is not None
            else float(os.environ.get("LLM_TIMEOUT_SECONDS", self.DEFAULT_TIMEOUT))
        )

        self._providers: dict[str, LLMProvider] = {
            "openai": OpenAIProvider(api_key=openai_api_key, timeout=self._timeout),
            "anthropic": AnthropicProvider(api_key=anthropic_api_key, timeout=self._timeout),
        }

        # Lookup order when the default provider has no key
        self._provider_order = ["openai", "anthropic"]

    @property
    def default_provider(self) -> str:
        return self._default_provider

    @property
    def timeout(self) -> float:
        return self._timeout

    def get_provider(self, name: str) -> LLMProvider:
        """Get a specific provider by name.

        Raises:
            ConfigurationError: If provider name is not recognized.
        """
        if name not in self._providers:
            raise ConfigurationError(
                f"Unknown provider: {name}. Available: {list(self._providers.keys())}"
            )
        return self._providers[name]

    def is_provider_available(self, name: str) -> bool:
        """Check if a provider is known and has an API key."""
        provider = self._providers.get(name)
        return provider is not None and provider.is_configured

    def resolve_provider(self, provider: str | None = None) -> LLMProvider:
        """Pick the provider for a request.

        An explicit name wins. Otherwise the default provider is used when it
        has a key, then the first configured provider in lookup order.

        Raises:
            ConfigurationError: If no usable provider exists.
        """
        if provider:
            resolved = self.get_provider(provider)
            if not resolved.is_configured:
                raise ConfigurationError(
                    f"Provider {provider} has no API key configured",
                    provider=provider,
                )
            return resolved

        if self.is_provider_available(self._default_provider):
            return self._providers[self._default_provider]

        for name in self._provider_order:
            if self.is_provider_available(name):
                return self._providers[name]

        raise ConfigurationError(
            "No LLM provider configured. Set OPENAI_API_KEY or ANTHROPIC_API_KEY."
        )

    async def generate(
        self,
        request: LLMRequest,
        provider: str | None = None,
        correlation_id: str | None = None,
    ) -> LLMResponse:
        """Send one completion request.

        Args:
            request: LLM request to send.
            provider: Specific provider to use. Defaults to the resolved default.
            correlation_id: Optional ID for tracking the call in logs.

        Returns:
            LLM response.

        Raises:
            LLMError: Configuration, transport or provider failure.
        """
        correlation_id = correlation_id or str(uuid.uuid4())
        resolved = self.resolve_provider(provider)

        try:
            response = await resolved.generate(request)
        except LLMError as e:
            e.correlation_id = correlation_id
            logger.error(
                "LLM request failed: %s",
                str(e),
                extra={
                    "correlation_id": correlation_id,
                    "provider": resolved.name,
                    "error_type": type(e).__name__,
                },
            )
            raise

        logger.info(
            "LLM request succeeded",
            extra={
                "correlation_id": correlation_id,
                "provider": response.provider,
                "model": response.model,
                "latency_ms": response.latency_ms,
                "prompt_tokens": response.usage.prompt_tokens,
                "completion_tokens": response.usage.completion_tokens,
                "finish_reason": response.finish_reason,
            },
        )
        return response
