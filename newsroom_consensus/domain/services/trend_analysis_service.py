"""Service for trend analysis split across specialist providers."""

import asyncio
import copy
import logging
from datetime import datetime, timezone
from typing import Callable, List, Optional, Union

from cachetools import TTLCache

from ...observability import bind_request, event_fields
from ..exceptions import TrendAnalysisError
from ..models.content import Corpus
from ..models.provider_call import ProviderCall, ProviderOutcome
from ..models.trends import KeywordsFacet, TimeRange, Timeframe, TopicsFacet, TrendsResult
from ..ports.content_store import ContentStore
from .fan_out_executor import FanOutExecutor
from .specialization_merger import empty_trends, merge_trends

logger = logging.getLogger(__name__)

TOPICS_FACET = "topics"
KEYWORDS_FACET = "keywords"

MAX_COMMENT_CHARS = 280

TOPICS_SYSTEM_PROMPT = """
You are a newsroom trend analyst. From the articles and reader comments you
are given, identify the trending topics.
Respond ONLY with a JSON object of the form:
{
    "topics": [{"topic": "Topic name", "category": "Section", "mentionCount": <integer>}],
    "overallSentiment": "positive" | "neutral" | "negative",
    "summary": "Two or three sentence overview of the period"
}
"""

KEYWORDS_SYSTEM_PROMPT = """
You are an audience engagement analyst. From the articles and reader comments
you are given, extract the most frequent keywords and judge engagement.
Respond ONLY with a JSON object of the form:
{
    "keywords": [{"keyword": "word", "frequency": <integer>, "sentiment": "positive" | "neutral" | "negative"}],
    "engagementLevel": "high" | "medium" | "low",
    "recommendations": ["Concrete editorial recommendation"]
}
"""


def render_corpus(corpus: Corpus) -> str:
    """Render the corpus as prompt text."""
    lines = [f"Articles ({len(corpus.articles)}):"]
    for article in corpus.articles:
        line = f"- [{article.category or 'general'}] {article.title}"
        if article.excerpt:
            line += f": {article.excerpt}"
        lines.append(line)

    lines.append("")
    lines.append(f"Reader comments ({len(corpus.comments)}):")
    for comment in corpus.comments:
        lines.append(f"- {comment.content[:MAX_COMMENT_CHARS]}")
    return "\n".join(lines)


class TrendAnalysisService:
    """Analyse newsroom trends with two specialist providers.

    One provider reports topics and sentiment, the other keywords and
    engagement. Neither can stand in for the other, so the request fails
    if either specialist does not deliver.
    """

    def __init__(
        self,
        executor: FanOutExecutor,
        content_store: ContentStore,
        topics_provider: str = "openai",
        keywords_provider: str = "anthropic",
        timeout: float = 30.0,
        cache_ttl: float = 0,
        cache_maxsize: int = 32,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """Initialize the service.

        Args:
            executor: Fan-out executor holding the provider adapters
            content_store: Source of the article and comment corpus
            topics_provider: Provider asked for topics
            keywords_provider: Provider asked for keywords
            timeout: Per-call deadline in seconds
            cache_ttl: Seconds to reuse a result for the same window, 0 disables caching
            cache_maxsize: Maximum number of cached results
            clock: Returns the current time, UTC by default
        """
        self._executor = executor
        self._store = content_store
        self._topics_provider = topics_provider
        self._keywords_provider = keywords_provider
        self._timeout = timeout
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._cache: Optional[TTLCache] = (
            TTLCache(maxsize=cache_maxsize, ttl=cache_ttl) if cache_ttl > 0 else None
        )
        logger.info(
            f"🔧 TrendAnalysisService initialized: topics={topics_provider}, keywords={keywords_provider}"
        )

    async def collect_corpus(self, time_range: TimeRange, limit: int) -> Corpus:
        """Fetch articles and comments for the window."""
        articles, comments = await asyncio.gather(
            self._store.fetch_articles(time_range.start, limit),
            self._store.fetch_comments(time_range.start, limit),
        )
        return Corpus(articles=articles, comments=comments)

    def build_calls(self, corpus: Corpus) -> List[ProviderCall]:
        """The topics and keywords specialist calls."""
        prompt = render_corpus(corpus)
        return [
            ProviderCall(
                provider=self._topics_provider,
                prompt=prompt,
                system_prompt=TOPICS_SYSTEM_PROMPT,
                timeout=self._timeout,
                facet=TOPICS_FACET,
                response_model=TopicsFacet,
            ),
            ProviderCall(
                provider=self._keywords_provider,
                prompt=prompt,
                system_prompt=KEYWORDS_SYSTEM_PROMPT,
                timeout=self._timeout,
                facet=KEYWORDS_FACET,
                response_model=KeywordsFacet,
            ),
        ]

    async def analyze_trends(self, timeframe: Union[Timeframe, str], limit: int) -> TrendsResult:
        """Analyse trends over the requested window.

        Args:
            timeframe: ``day``, ``week`` or ``month``
            limit: Maximum number of articles and of comments to analyse

        Returns:
            Merged trend analysis, or a "no data" result for an empty window

        Raises:
            ValueError: If the timeframe or limit is invalid
            TrendAnalysisError: If a specialist failed
        """
        try:
            timeframe = Timeframe(timeframe)
        except ValueError:
            raise ValueError(f"Unsupported timeframe '{timeframe}', expected day, week or month")
        if limit <= 0:
            raise ValueError("limit must be a positive integer")

        cache_key = (timeframe, limit)
        if self._cache is not None and cache_key in self._cache:
            logger.info(f"♻️ Serving cached trends for {timeframe.value} (limit {limit})")
            return copy.deepcopy(self._cache[cache_key])

        with bind_request():
            time_range = TimeRange.ending_at(timeframe, self._clock())
            logger.info(
                f"📈 Collecting corpus for {timeframe.value} since {time_range.start.isoformat()}",
                extra=event_fields("trend_corpus_requested", timeframe=timeframe.value, limit=limit),
            )
            corpus = await self.collect_corpus(time_range, limit)

            if corpus.is_empty:
                logger.info(
                    "ℹ️ No articles in window, skipping provider calls",
                    extra=event_fields("trend_corpus_empty", timeframe=timeframe.value),
                )
                result = empty_trends(time_range, comment_count=len(corpus.comments))
            else:
                outcomes = await self._executor.run(self.build_calls(corpus))
                topics = self._require(outcomes, TOPICS_FACET)
                keywords = self._require(outcomes, KEYWORDS_FACET)
                result = merge_trends(
                    topics.data,
                    keywords.data,
                    time_range,
                    article_count=len(corpus.articles),
                    comment_count=len(corpus.comments),
                )
                logger.info(
                    f"✅ Trend analysis complete: {len(result.trending_topics)} topics, "
                    f"{len(result.keywords)} keywords",
                    extra=event_fields("trend_analysis_completed"),
                )

        if self._cache is not None:
            self._cache[cache_key] = copy.deepcopy(result)
        return result

    def _require(self, outcomes: List[ProviderOutcome], facet: str) -> ProviderOutcome:
        """Return the successful outcome for a facet or fail the request."""
        for outcome in outcomes:
            if outcome.facet == facet:
                if outcome.succeeded:
                    return outcome
                logger.error(
                    f"❌ {facet.title()} specialist {outcome.provider} failed ({outcome.failure.value}): "
                    f"{outcome.error}",
                    extra=event_fields(
                        "trend_specialist_failed",
                        provider=outcome.provider,
                        facet=facet,
                        failure_kind=outcome.failure.value,
                    ),
                )
                raise TrendAnalysisError(
                    f"Trend analysis failed: the {facet} analysis could not be completed"
                )
        raise TrendAnalysisError(f"Trend analysis failed: no {facet} analysis was requested")
