"""Protocol for AI providers."""

from typing import Protocol

from ..models.provider_call import ProviderCall


class AIProvider(Protocol):
    """Protocol defining the interface every inference backend adapter exposes.

    Adapters absorb provider-specific transport and response shapes. They
    return the raw response text and raise ``ProviderError`` on failure;
    they never retry.
    """

    async def initialize(self) -> None:
        """Initialize the AI provider."""
        ...

    async def shutdown(self) -> None:
        """Clean up resources."""
        ...

    async def invoke(self, call: ProviderCall) -> str:
        """Send the call's prompt and return the raw response text."""
        ...

    @property
    def provider_name(self) -> str:
        """Registry name of the provider."""
        ...

    @property
    def is_available(self) -> bool:
        """Whether the provider is initialized and ready."""
        ...
