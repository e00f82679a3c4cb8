"""OpenAI implementation of the AI provider interface."""

from typing import Optional

from openai import AsyncOpenAI, OpenAIError
from pydantic import BaseModel, Field

from ...domain.exceptions import ProviderError
from ...domain.models.provider_call import ProviderCall


class OpenAIConfig(BaseModel):
    """Configuration for the OpenAI adapter."""

    api_key: str = Field(..., description="OpenAI API key")
    model: str = Field(default="gpt-4o", description="Chat completion model")
    temperature: float = Field(default=0.1, description="Temperature for responses")
    max_tokens: int = Field(default=1000, description="Maximum tokens per response")
    base_url: Optional[str] = Field(default=None, description="Alternative API endpoint")


class OpenAIAdapter:
    """OpenAI chat completions behind the AI provider interface."""

    def __init__(self, config: Optional[OpenAIConfig] = None):
        """Initialize the adapter."""
        self._config = config or OpenAIConfig(api_key="")
        self._client: Optional[AsyncOpenAI] = None
        self._initialized = False

    async def initialize(self) -> None:
        """Create the API client."""
        if not self._config.api_key:
            raise ConnectionError("Failed to initialize OpenAI provider: OPENAI_API_KEY is not set")
        if self._client is None:
            self._client = AsyncOpenAI(api_key=self._config.api_key, base_url=self._config.base_url)
        self._initialized = True

    async def invoke(self, call: ProviderCall) -> str:
        """Send the call to the chat completions endpoint."""
        if not self._client:
            raise ProviderError(self.provider_name, "Provider not initialized")

        messages = []
        if call.system_prompt:
            messages.append({"role": "system", "content": call.system_prompt})
        messages.append({"role": "user", "content": call.prompt})

        try:
            response = await self._client.chat.completions.create(
                model=self._config.model,
                messages=messages,
                temperature=self._config.temperature,
                max_tokens=self._config.max_tokens,
            )
        except OpenAIError as e:
            raise ProviderError(self.provider_name, f"{type(e).__name__}: {e}") from e

        if not response.choices or not response.choices[0].message.content:
            raise ProviderError(self.provider_name, "Empty response")
        return response.choices[0].message.content

    async def shutdown(self) -> None:
        """Clean up resources and shut down the provider."""
        if self._client:
            await self._client.close()
            self._client = None
        self._initialized = False

    @property
    def provider_name(self) -> str:
        """Get the name of the AI provider."""
        return "openai"

    @property
    def is_available(self) -> bool:
        """Check if the provider is available and ready."""
        return self._initialized and self._client is not None
