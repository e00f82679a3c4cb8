"""Domain models for trend analysis over the newsroom corpus."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Dict, List

from pydantic import BaseModel, Field, field_validator


class Timeframe(str, Enum):
    """Supported trend analysis windows."""

    DAY = "day"
    WEEK = "week"
    MONTH = "month"

    @property
    def window(self) -> timedelta:
        """Length of the look-back window."""
        return {
            Timeframe.DAY: timedelta(days=1),
            Timeframe.WEEK: timedelta(days=7),
            Timeframe.MONTH: timedelta(days=30),
        }[self]


class Sentiment(str, Enum):
    """Reader sentiment classes."""

    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"


class EngagementLevel(str, Enum):
    """Audience engagement classes."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


def _lower(value: Any) -> Any:
    if isinstance(value, str):
        return value.strip().lower()
    return value


class TopicEntry(BaseModel):
    """Topic reported by the topics specialist."""

    topic: str = Field(..., min_length=1)
    category: str = Field(default="general")
    mention_count: int = Field(..., ge=0, alias="mentionCount")

    class Config:
        """Pydantic model configuration."""
        populate_by_name = True
        frozen = True


class KeywordEntry(BaseModel):
    """Keyword reported by the keywords specialist."""

    keyword: str = Field(..., min_length=1)
    frequency: int = Field(..., ge=0)
    sentiment: Sentiment

    class Config:
        """Pydantic model configuration."""
        frozen = True

    normalize_sentiment = field_validator("sentiment", mode="before")(_lower)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the response contract."""
        return {
            "keyword": self.keyword,
            "frequency": self.frequency,
            "sentiment": self.sentiment.value,
        }


class TopicsFacet(BaseModel):
    """Structured answer expected from the topics specialist."""

    topics: List[TopicEntry]
    overall_sentiment: Sentiment = Field(..., alias="overallSentiment")
    summary: str = Field(default="")
    recommendations: List[str] = Field(default_factory=list)

    class Config:
        """Pydantic model configuration."""
        populate_by_name = True

    normalize_sentiment = field_validator("overall_sentiment", mode="before")(_lower)


class KeywordsFacet(BaseModel):
    """Structured answer expected from the keywords specialist."""

    keywords: List[KeywordEntry]
    engagement_level: EngagementLevel = Field(..., alias="engagementLevel")
    recommendations: List[str] = Field(default_factory=list)

    class Config:
        """Pydantic model configuration."""
        populate_by_name = True

    normalize_engagement = field_validator("engagement_level", mode="before")(_lower)


@dataclass
class ScoredTopic:
    """Topic enriched with its relevance score."""

    topic: str
    category: str
    mention_count: int
    relevance_score: int

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the response contract."""
        return {
            "topic": self.topic,
            "category": self.category,
            "mentionCount": self.mention_count,
            "relevanceScore": self.relevance_score,
        }


@dataclass
class TrendInsights:
    """Merged editorial insights."""

    overall_sentiment: Sentiment
    engagement_level: EngagementLevel
    summary: str
    recommendations: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the response contract."""
        return {
            "overallSentiment": self.overall_sentiment.value,
            "engagementLevel": self.engagement_level.value,
            "summary": self.summary,
            "recommendations": list(self.recommendations),
        }


@dataclass
class TimeRange:
    """Window the corpus was collected from."""

    timeframe: Timeframe
    start: datetime
    end: datetime

    @classmethod
    def ending_at(cls, timeframe: Timeframe, end: datetime) -> "TimeRange":
        """Build the window that closes at ``end``."""
        return cls(timeframe=timeframe, start=end - timeframe.window, end=end)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the response contract."""
        return {
            "timeframe": self.timeframe.value,
            "from": self.start.isoformat(),
            "to": self.end.isoformat(),
        }


@dataclass
class TrendsResult:
    """Unified trend analysis result."""

    trending_topics: List[ScoredTopic]
    keywords: List[KeywordEntry]
    insights: TrendInsights
    time_range: TimeRange
    article_count: int = 0
    comment_count: int = 0

    @property
    def is_empty(self) -> bool:
        """Whether the result carries no trend data."""
        return not self.trending_topics and not self.keywords

    def to_dict(self) -> Dict[str, Any]:
        """Convert TrendsResult to dictionary format for API responses."""
        return {
            "trendingTopics": [topic.to_dict() for topic in self.trending_topics],
            "keywords": [keyword.to_dict() for keyword in self.keywords],
            "insights": self.insights.to_dict(),
            "timeRange": self.time_range.to_dict(),
            "articleCount": self.article_count,
            "commentCount": self.comment_count,
        }
