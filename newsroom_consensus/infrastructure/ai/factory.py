"""Factory for creating and managing AI providers."""

import logging
from typing import Callable, Dict, Optional

from ...domain.ports.ai_provider import AIProvider
from ..config import EngineConfig
from .anthropic_adapter import AnthropicAdapter, AnthropicConfig
from .gemini_adapter import GeminiAdapter, GeminiConfig
from .openai_adapter import OpenAIAdapter, OpenAIConfig

logger = logging.getLogger(__name__)


def _openai(config: EngineConfig) -> AIProvider:
    return OpenAIAdapter(OpenAIConfig(api_key=config.openai_api_key, model=config.openai_model))


def _anthropic(config: EngineConfig) -> AIProvider:
    return AnthropicAdapter(AnthropicConfig(api_key=config.anthropic_api_key, model=config.anthropic_model))


def _gemini(config: EngineConfig) -> AIProvider:
    return GeminiAdapter(GeminiConfig(api_key=config.gemini_api_key, model=config.gemini_model))


class AIProviderFactory:
    """Factory for creating and managing AI providers."""

    def __init__(self, config: Optional[EngineConfig] = None):
        """Initialize the factory.

        Args:
            config: Engine configuration used to build default adapters
        """
        self._config = config or EngineConfig()
        self._builders: Dict[str, Callable[[EngineConfig], AIProvider]] = {}
        self._instances: Dict[str, AIProvider] = {}

        # Register default providers
        self.register_provider("openai", _openai)
        self.register_provider("anthropic", _anthropic)
        self.register_provider("gemini", _gemini)

    def register_provider(self, name: str, builder: Callable[..., AIProvider]) -> None:
        """Register a new AI provider.

        Args:
            name: Provider name
            builder: Callable taking the engine configuration and returning an adapter
        """
        self._builders[name] = builder

    async def create_provider(self, name: str) -> AIProvider:
        """Create and initialize a provider instance.

        Args:
            name: Provider name

        Returns:
            Initialized provider instance

        Raises:
            ValueError: If provider not found
            RuntimeError: If initialization fails
        """
        if name not in self._builders:
            raise ValueError(f"Provider '{name}' not found")

        if name not in self._instances:
            provider = self._builders[name](self._config)
            try:
                await provider.initialize()
            except Exception as e:
                raise RuntimeError(f"Failed to initialize provider {name}: {e}") from e
            self._instances[name] = provider
            logger.info(f"✅ AI provider ready: {name}")

        return self._instances[name]

    async def create_available(self, *names: str) -> Dict[str, AIProvider]:
        """Create every named provider that initializes, skipping the rest.

        Providers that fail to start stay out of the returned mapping; calls
        routed to them settle as unavailable instead of failing the request.
        """
        providers = {}
        for name in names:
            try:
                providers[name] = await self.create_provider(name)
            except (ValueError, RuntimeError) as e:
                logger.warning(f"⚠️ AI provider {name} unavailable: {e}")
        return providers

    def get_provider(self, name: str) -> Optional[AIProvider]:
        """Get an existing provider instance.

        Args:
            name: Provider name

        Returns:
            Provider instance if exists, None otherwise
        """
        return self._instances.get(name)

    def list_providers(self) -> Dict[str, bool]:
        """Get dictionary of registered providers and whether each is active."""
        return {name: name in self._instances for name in self._builders}

    async def remove_provider(self, name: str) -> None:
        """Shut down and forget a provider instance."""
        provider = self._instances.pop(name, None)
        if provider:
            await provider.shutdown()

    async def shutdown(self) -> None:
        """Shutdown all provider instances."""
        for provider in self._instances.values():
            await provider.shutdown()
        self._instances.clear()

    @property
    def config(self) -> EngineConfig:
        """Engine configuration the factory builds adapters from."""
        return self._config
