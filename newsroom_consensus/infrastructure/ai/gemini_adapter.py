"""Gemini implementation of the AI provider interface."""

from typing import Any, Dict, Optional

import httpx
from pydantic import BaseModel, Field

from ...domain.exceptions import ProviderError
from ...domain.models.provider_call import ProviderCall


class GeminiConfig(BaseModel):
    """Configuration for the Gemini adapter."""

    api_key: str = Field(..., description="Google AI Studio API key")
    model: str = Field(default="gemini-2.0-flash", description="Model to use")
    temperature: float = Field(default=0.1, description="Temperature for responses")
    max_tokens: int = Field(default=1024, description="Maximum output tokens per response")
    base_url: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta",
        description="Generative Language API root",
    )
    timeout: float = Field(default=60.0, description="HTTP timeout in seconds")


class GeminiAdapter:
    """Gemini generateContent REST endpoint behind the AI provider interface."""

    def __init__(
        self,
        config: Optional[GeminiConfig] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """Initialize the adapter.

        Args:
            config: Adapter configuration
            client: Pre-built HTTP client, created on initialize when omitted
        """
        self._config = config or GeminiConfig(api_key="")
        self._client = client
        self._initialized = False

    async def initialize(self) -> None:
        """Initialize the HTTP client."""
        if not self._config.api_key:
            raise ConnectionError("Failed to initialize Gemini provider: GEMINI_API_KEY is not set")
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._config.base_url,
                timeout=self._config.timeout,
                headers={
                    "x-goog-api-key": self._config.api_key,
                    "Content-Type": "application/json",
                },
            )
        self._initialized = True

    def _build_request(self, call: ProviderCall) -> Dict[str, Any]:
        body: Dict[str, Any] = {
            "contents": [{"role": "user", "parts": [{"text": call.prompt}]}],
            "generationConfig": {
                "temperature": self._config.temperature,
                "maxOutputTokens": self._config.max_tokens,
            },
        }
        if call.system_prompt:
            body["systemInstruction"] = {"parts": [{"text": call.system_prompt}]}
        return body

    async def invoke(self, call: ProviderCall) -> str:
        """Send the call and join the text parts of the first candidate."""
        if not self._client:
            raise ProviderError(self.provider_name, "Provider not initialized")

        try:
            response = await self._client.post(
                f"/models/{self._config.model}:generateContent",
                json=self._build_request(call),
            )
            response.raise_for_status()
            result = response.json()
        except httpx.HTTPStatusError as e:
            raise ProviderError(self.provider_name, f"HTTP {e.response.status_code}") from e
        except (httpx.HTTPError, ValueError) as e:
            raise ProviderError(self.provider_name, f"{type(e).__name__}: {e}") from e

        try:
            parts = result["candidates"][0]["content"]["parts"]
        except (KeyError, IndexError, TypeError) as e:
            raise ProviderError(self.provider_name, "Response has no candidates") from e

        text = "".join(part.get("text", "") for part in parts if isinstance(part, dict))
        if not text.strip():
            raise ProviderError(self.provider_name, "Empty response")
        return text

    async def shutdown(self) -> None:
        """Clean up resources and shut down the provider."""
        if self._client:
            await self._client.aclose()
            self._client = None
        self._initialized = False

    @property
    def provider_name(self) -> str:
        """Get the name of the AI provider."""
        return "gemini"

    @property
    def is_available(self) -> bool:
        """Check if the provider is available and ready."""
        return self._initialized and self._client is not None
