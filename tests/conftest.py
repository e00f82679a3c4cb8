"""Test configuration and common fixtures."""

import asyncio
import json
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Sequence, Union

import pytest

from newsroom_consensus.domain.models.content import Article, Comment
from newsroom_consensus.domain.models.provider_call import ProviderCall
from newsroom_consensus.infrastructure.content.memory_store import InMemoryContentStore

NOW = datetime(2025, 6, 15, 12, 0, tzinfo=timezone.utc)


class FakeProvider:
    """Scripted AI provider.

    Each ``invoke`` consumes the next reply; the last reply repeats once
    the script runs out. Exceptions in the script are raised.
    """

    def __init__(
        self,
        name: str,
        replies: Union[str, Exception, Sequence[Union[str, Exception]]] = "",
        delay: float = 0.0,
    ):
        self._name = name
        self._replies: List[Union[str, Exception]] = (
            list(replies) if isinstance(replies, (list, tuple)) else [replies]
        )
        self._delay = delay
        self.calls: List[ProviderCall] = []
        self._initialized = False

    async def initialize(self) -> None:
        self._initialized = True

    async def shutdown(self) -> None:
        self._initialized = False

    async def invoke(self, call: ProviderCall) -> str:
        self.calls.append(call)
        if self._delay:
            await asyncio.sleep(self._delay)
        reply = self._replies[min(len(self.calls) - 1, len(self._replies) - 1)]
        if isinstance(reply, Exception):
            raise reply
        return reply

    @property
    def provider_name(self) -> str:
        return self._name

    @property
    def is_available(self) -> bool:
        return self._initialized


def verdict_reply(
    verdict: str,
    confidence: float,
    reasoning: str = "Checked against known sources",
    red_flags: Optional[List[str]] = None,
) -> str:
    """A well-formed fact-check reply wrapped in prose."""
    body = json.dumps({
        "verdict": verdict,
        "confidence": confidence,
        "reasoning": reasoning,
        "redFlags": red_flags or [],
    })
    return f"Here is my assessment:\n```json\n{body}\n```"


def topics_reply(**overrides: Any) -> str:
    body: Dict[str, Any] = {
        "topics": [
            {"topic": "City budget", "category": "politics", "mentionCount": 10},
            {"topic": "Transit strike", "category": "local", "mentionCount": 5},
            {"topic": "Harbour festival", "category": "culture", "mentionCount": 1},
        ],
        "overallSentiment": "negative",
        "summary": "Budget cuts dominate the week.",
    }
    body.update(overrides)
    return json.dumps(body)


def keywords_reply(**overrides: Any) -> str:
    body: Dict[str, Any] = {
        "keywords": [
            {"keyword": "budget", "frequency": 12, "sentiment": "negative"},
            {"keyword": "strike", "frequency": 30, "sentiment": "negative"},
            {"keyword": "festival", "frequency": 4, "sentiment": "positive"},
        ],
        "engagementLevel": "high",
        "recommendations": ["Run a live Q&A on the budget"],
    }
    body.update(overrides)
    return json.dumps(body)


@pytest.fixture
def fake_provider():
    """The scripted provider class."""
    return FakeProvider


@pytest.fixture
def verdict():
    """Builder for fact-check replies."""
    return verdict_reply


@pytest.fixture
def topics():
    """Builder for topics specialist replies."""
    return topics_reply


@pytest.fixture
def keywords():
    """Builder for keywords specialist replies."""
    return keywords_reply


@pytest.fixture
def now() -> datetime:
    """Fixed reference time."""
    return NOW


@pytest.fixture
def sample_articles() -> List[Article]:
    return [
        Article(
            id="a1",
            title="Council approves budget cuts",
            excerpt="Libraries and parks lose funding",
            category="politics",
            published_at=NOW - timedelta(hours=3),
            views=1200,
        ),
        Article(
            id="a2",
            title="Transit workers walk out",
            category="local",
            published_at=NOW - timedelta(days=2),
        ),
        Article(
            id="a3",
            title="Last month's harbour festival recap",
            category="culture",
            published_at=NOW - timedelta(days=20),
        ),
    ]


@pytest.fixture
def sample_comments() -> List[Comment]:
    return [
        Comment(id="c1", article_id="a1", content="This is outrageous", created_at=NOW - timedelta(hours=1)),
        Comment(id="c2", article_id="a2", content="Stay strong!", created_at=NOW - timedelta(days=1)),
        Comment(id="c3", article_id="a3", content="Great event", created_at=NOW - timedelta(days=19)),
    ]


@pytest.fixture
def content_store(sample_articles, sample_comments) -> InMemoryContentStore:
    """Content store holding the sample corpus."""
    return InMemoryContentStore(sample_articles, sample_comments)
