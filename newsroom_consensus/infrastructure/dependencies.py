"""Dependency injection configuration for hexagonal architecture."""

import logging
from typing import Any, Dict, Optional

from ..domain.ports.content_store import ContentStore
from ..domain.services.fact_checking_service import FactCheckingService
from ..domain.services.fan_out_executor import FanOutExecutor
from ..domain.services.trend_analysis_service import TrendAnalysisService
from .ai.factory import AIProviderFactory
from .config import EngineConfig
from .content.memory_store import InMemoryContentStore

logger = logging.getLogger(__name__)


class ServiceContainer:
    """Service container for dependency injection."""

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        content_store: Optional[ContentStore] = None,
        factory: Optional[AIProviderFactory] = None,
    ):
        """Initialize service container.

        Args:
            config: Engine configuration, read from the environment when omitted
            content_store: Source of trend content, an empty store when omitted
            factory: Provider factory, built from ``config`` when omitted
        """
        self._config = config or EngineConfig.from_env()
        self._content_store = content_store or InMemoryContentStore()
        self._factory = factory or AIProviderFactory(self._config)
        self._services: Dict[str, Any] = {}

    async def start(self) -> None:
        """Initialize providers and wire the domain services."""
        if self._services:
            return

        logger.info("🔧 Setting up service container...")
        providers = await self._factory.create_available(*self._config.required_providers)
        if not providers:
            logger.warning("⚠️ No AI providers could be initialized, every call will settle as unavailable")

        executor = FanOutExecutor(
            providers,
            max_retries=self._config.max_retries,
            retry_delay=self._config.retry_delay,
        )
        self._services = {
            "executor": executor,
            "fact_checking_service": FactCheckingService(
                executor,
                providers=self._config.fact_check_providers,
                timeout=self._config.provider_timeout,
            ),
            "trend_analysis_service": TrendAnalysisService(
                executor,
                self._content_store,
                topics_provider=self._config.topics_provider,
                keywords_provider=self._config.keywords_provider,
                timeout=self._config.provider_timeout,
                cache_ttl=self._config.trend_cache_ttl,
            ),
        }
        logger.info(f"✅ Service container setup completed with providers: {', '.join(providers) or 'none'}")

    async def shutdown(self) -> None:
        """Shut down every provider."""
        await self._factory.shutdown()
        self._services.clear()

    def get(self, service_name: str) -> Any:
        """Get a service by name.

        Args:
            service_name: Name of the service

        Returns:
            Service instance

        Raises:
            KeyError: If service not found
        """
        if service_name not in self._services:
            raise KeyError(f"Service '{service_name}' not found")
        return self._services[service_name]

    def get_executor(self) -> FanOutExecutor:
        """Get the shared fan-out executor."""
        return self.get("executor")

    def get_fact_checking_service(self) -> FactCheckingService:
        """Get fact checking service."""
        return self.get("fact_checking_service")

    def get_trend_analysis_service(self) -> TrendAnalysisService:
        """Get trend analysis service."""
        return self.get("trend_analysis_service")
