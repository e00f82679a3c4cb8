"""Tests for the service container."""

import pytest

from newsroom_consensus.domain.models.fact_check import Verdict
from newsroom_consensus.domain.services.fact_checking_service import FactCheckingService
from newsroom_consensus.domain.services.trend_analysis_service import TrendAnalysisService
from newsroom_consensus.infrastructure.ai.factory import AIProviderFactory
from newsroom_consensus.infrastructure.config import EngineConfig
from newsroom_consensus.infrastructure.dependencies import ServiceContainer


@pytest.fixture
def config() -> EngineConfig:
    return EngineConfig(fact_check_providers=["openai", "anthropic", "gemini"])


@pytest.fixture
def scripted_factory(config, fake_provider, verdict):
    """Factory whose providers answer from a script instead of the network."""
    factory = AIProviderFactory(config)
    factory.register_provider("openai", lambda c: fake_provider("openai", verdict("false", 90)))
    factory.register_provider("anthropic", lambda c: fake_provider("anthropic", verdict("false", 70)))
    return factory


@pytest.mark.asyncio
async def test_start_wires_services(config, scripted_factory, content_store):
    container = ServiceContainer(config, content_store=content_store, factory=scripted_factory)

    await container.start()

    assert isinstance(container.get_fact_checking_service(), FactCheckingService)
    assert isinstance(container.get_trend_analysis_service(), TrendAnalysisService)
    assert container.get_executor().provider_names == ["openai", "anthropic"]
    await container.shutdown()


@pytest.mark.asyncio
async def test_missing_provider_degrades_fact_check(config, scripted_factory):
    """Test that a provider without credentials only costs its vote."""
    container = ServiceContainer(config, factory=scripted_factory)
    await container.start()

    result = await container.get_fact_checking_service().check_fact_accuracy("The bridge closed in 1999")

    assert result.overall_verdict == Verdict.FALSE
    assert result.confidence_score == 80
    assert "1 of 3 providers returned no valid analysis" in result.consensus
    await container.shutdown()


def test_get_before_start(config, scripted_factory):
    container = ServiceContainer(config, factory=scripted_factory)

    with pytest.raises(KeyError):
        container.get_fact_checking_service()
