"""Anthropic implementation of the AI provider interface."""

from typing import Optional

import anthropic
from pydantic import BaseModel, Field

from ...domain.exceptions import ProviderError
from ...domain.models.provider_call import ProviderCall


class AnthropicConfig(BaseModel):
    """Configuration for the Anthropic adapter."""

    api_key: str = Field(..., description="Anthropic API key")
    model: str = Field(default="claude-sonnet-4-5", description="Messages API model")
    temperature: float = Field(default=0.1, description="Temperature for responses")
    max_tokens: int = Field(default=1024, description="Maximum tokens per response")
    base_url: Optional[str] = Field(default=None, description="Alternative API endpoint")


class AnthropicAdapter:
    """Anthropic messages API behind the AI provider interface."""

    def __init__(self, config: Optional[AnthropicConfig] = None):
        """Initialize the adapter."""
        self._config = config or AnthropicConfig(api_key="")
        self._client: Optional[anthropic.AsyncAnthropic] = None
        self._initialized = False

    async def initialize(self) -> None:
        """Create the API client."""
        if not self._config.api_key:
            raise ConnectionError("Failed to initialize Anthropic provider: ANTHROPIC_API_KEY is not set")
        if self._client is None:
            self._client = anthropic.AsyncAnthropic(
                api_key=self._config.api_key,
                base_url=self._config.base_url,
            )
        self._initialized = True

    async def invoke(self, call: ProviderCall) -> str:
        """Send the call to the messages endpoint and join its text blocks."""
        if not self._client:
            raise ProviderError(self.provider_name, "Provider not initialized")

        request = {
            "model": self._config.model,
            "max_tokens": self._config.max_tokens,
            "temperature": self._config.temperature,
            "messages": [{"role": "user", "content": call.prompt}],
        }
        if call.system_prompt:
            request["system"] = call.system_prompt

        try:
            response = await self._client.messages.create(**request)
        except anthropic.AnthropicError as e:
            raise ProviderError(self.provider_name, f"{type(e).__name__}: {e}") from e

        text = "".join(block.text for block in response.content if getattr(block, "type", None) == "text")
        if not text.strip():
            raise ProviderError(self.provider_name, "Empty response")
        return text

    async def shutdown(self) -> None:
        """Clean up resources and shut down the provider."""
        if self._client:
            await self._client.close()
            self._client = None
        self._initialized = False

    @property
    def provider_name(self) -> str:
        """Get the name of the AI provider."""
        return "anthropic"

    @property
    def is_available(self) -> bool:
        """Check if the provider is available and ready."""
        return self._initialized and self._client is not None
