"""Tests for the specialist trend analysis service."""

from datetime import timedelta

import pytest

from newsroom_consensus.domain.exceptions import ProviderError, TrendAnalysisError
from newsroom_consensus.domain.models.trends import EngagementLevel, Sentiment, Timeframe
from newsroom_consensus.domain.services.fan_out_executor import FanOutExecutor
from newsroom_consensus.domain.services.trend_analysis_service import (
    KEYWORDS_FACET,
    TOPICS_FACET,
    TrendAnalysisService,
)
from newsroom_consensus.infrastructure.content.memory_store import InMemoryContentStore


@pytest.fixture
def specialists(fake_provider, topics, keywords):
    return {
        "openai": fake_provider("openai", topics()),
        "anthropic": fake_provider("anthropic", keywords()),
    }


def _service(providers, store, now, **kwargs):
    return TrendAnalysisService(FanOutExecutor(providers), store, clock=lambda: now, **kwargs)


@pytest.mark.asyncio
async def test_analyze_trends_merges_specialists(specialists, content_store, now):
    """Test a full analysis over the weekly window."""
    service = _service(specialists, content_store, now)

    result = await service.analyze_trends("week", 50)

    assert [t.relevance_score for t in result.trending_topics] == [100, 50, 10]
    assert [k.keyword for k in result.keywords] == ["strike", "budget", "festival"]
    assert result.insights.overall_sentiment == Sentiment.NEGATIVE
    assert result.insights.engagement_level == EngagementLevel.HIGH
    assert result.insights.recommendations[0] == "Run a live Q&A on the budget"
    assert result.article_count == 2
    assert result.comment_count == 2

    payload = result.to_dict()
    assert payload["timeRange"]["timeframe"] == "week"
    assert payload["timeRange"]["to"] == now.isoformat()
    assert payload["timeRange"]["from"] == (now - timedelta(days=7)).isoformat()
    assert payload["trendingTopics"][0]["mentionCount"] == 10


@pytest.mark.asyncio
async def test_each_specialist_gets_its_facet(specialists, content_store, now):
    """Test that the topics and keywords calls go to their configured providers."""
    service = _service(specialists, content_store, now)

    await service.analyze_trends(Timeframe.MONTH, 50)

    topics_call = specialists["openai"].calls[0]
    keywords_call = specialists["anthropic"].calls[0]
    assert topics_call.facet == TOPICS_FACET
    assert keywords_call.facet == KEYWORDS_FACET
    assert topics_call.prompt == keywords_call.prompt
    assert "Council approves budget cuts" in topics_call.prompt
    assert "Last month's harbour festival recap" in topics_call.prompt


@pytest.mark.asyncio
async def test_limit_caps_corpus(specialists, content_store, now):
    """Test that the limit bounds the articles sent to the specialists."""
    service = _service(specialists, content_store, now)

    result = await service.analyze_trends("month", 1)

    assert result.article_count == 1
    assert "Council approves budget cuts" in specialists["openai"].calls[0].prompt
    assert "Transit workers walk out" not in specialists["openai"].calls[0].prompt


@pytest.mark.asyncio
async def test_empty_corpus_skips_providers(specialists, sample_comments, now):
    """Test that a window without articles returns a no-data result without provider calls."""
    store = InMemoryContentStore([], sample_comments)
    service = _service(specialists, store, now)

    result = await service.analyze_trends("day", 100)

    assert result.is_empty
    assert result.insights.engagement_level == EngagementLevel.LOW
    assert result.comment_count == 2
    assert specialists["openai"].calls == []
    assert specialists["anthropic"].calls == []


@pytest.mark.asyncio
@pytest.mark.parametrize("failing", ["openai", "anthropic"])
async def test_specialist_failure_fails_request(fake_provider, topics, keywords, content_store, now, failing):
    """Test that either specialist failing fails the whole analysis."""
    providers = {
        "openai": fake_provider("openai", topics()),
        "anthropic": fake_provider("anthropic", keywords()),
    }
    providers[failing] = fake_provider(failing, ProviderError(failing, "HTTP 503"))
    service = _service(providers, content_store, now)

    with pytest.raises(TrendAnalysisError):
        await service.analyze_trends("week", 50)


@pytest.mark.asyncio
async def test_malformed_specialist_fails_request(fake_provider, topics, content_store, now):
    """Test that malformed keyword output cannot be replaced by the topics specialist."""
    providers = {
        "openai": fake_provider("openai", topics()),
        "anthropic": fake_provider("anthropic", '{"keywords": "lots"}'),
    }
    service = _service(providers, content_store, now)

    with pytest.raises(TrendAnalysisError, match="keywords"):
        await service.analyze_trends("week", 50)


@pytest.mark.asyncio
@pytest.mark.parametrize("timeframe,limit", [("year", 10), ("week", 0), ("day", -5)])
async def test_invalid_arguments(specialists, content_store, now, timeframe, limit):
    service = _service(specialists, content_store, now)

    with pytest.raises(ValueError):
        await service.analyze_trends(timeframe, limit)


@pytest.mark.asyncio
async def test_cache_disabled_by_default(specialists, content_store, now):
    """Test that repeated requests call the providers again without a cache."""
    service = _service(specialists, content_store, now)

    await service.analyze_trends("week", 50)
    await service.analyze_trends("week", 50)

    assert len(specialists["openai"].calls) == 2


@pytest.mark.asyncio
async def test_cache_reuses_result(specialists, content_store, now):
    """Test that an enabled cache serves repeated windows."""
    service = _service(specialists, content_store, now, cache_ttl=900)

    first = await service.analyze_trends("week", 50)
    second = await service.analyze_trends("week", 50)
    await service.analyze_trends("day", 50)

    assert second is not first
    assert second.to_dict() == first.to_dict()
    assert len(specialists["openai"].calls) == 2


@pytest.mark.asyncio
async def test_cached_result_is_isolated_from_callers(specialists, content_store, now):
    """Test that editing a returned result does not change later cached responses."""
    service = _service(specialists, content_store, now, cache_ttl=900)

    first = await service.analyze_trends("week", 50)
    expected = first.to_dict()
    first.trending_topics.clear()
    first.insights.recommendations.append("Injected")

    second = await service.analyze_trends("week", 50)

    assert second.to_dict() == expected
    assert len(specialists["openai"].calls) == 1
