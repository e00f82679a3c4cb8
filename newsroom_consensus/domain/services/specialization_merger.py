"""Merging of facet-specialised trend analyses into one result."""

from typing import List

from ..models.trends import (
    EngagementLevel,
    KeywordEntry,
    KeywordsFacet,
    ScoredTopic,
    Sentiment,
    TimeRange,
    TopicEntry,
    TopicsFacet,
    TrendInsights,
    TrendsResult,
)
from .consensus_voter import dedupe, round_half_up

MAX_KEYWORDS = 30
MAX_RECOMMENDATIONS = 5

NO_DATA_SUMMARY = "No articles were published in the selected period, so there is no trend data to analyse."
NO_DATA_RECOMMENDATION = "Publish new content to start collecting trend data"


def score_topics(topics: List[TopicEntry]) -> List[ScoredTopic]:
    """Normalise mention counts against the most mentioned topic.

    Returns topics sorted by relevance, highest first. Equal scores keep
    the order the specialist reported them in.
    """
    top = max((topic.mention_count for topic in topics), default=0)
    scored = [
        ScoredTopic(
            topic=topic.topic,
            category=topic.category,
            mention_count=topic.mention_count,
            relevance_score=round_half_up(100 * topic.mention_count / max(top, 1)),
        )
        for topic in topics
    ]
    return sorted(scored, key=lambda t: t.relevance_score, reverse=True)


def cap_keywords(keywords: List[KeywordEntry], limit: int = MAX_KEYWORDS) -> List[KeywordEntry]:
    """Keep the most frequent keywords, at most ``limit`` of them."""
    ranked = sorted(keywords, key=lambda k: k.frequency, reverse=True)
    return ranked[:limit]


def rule_recommendations(
    sentiment: Sentiment,
    engagement: EngagementLevel,
    topics: List[ScoredTopic],
) -> List[str]:
    """Editorial recommendations derived from the merged signals."""
    recommendations = []
    if sentiment == Sentiment.NEGATIVE:
        recommendations.append("Address negative reader sentiment with clarifying follow-up coverage")
    elif sentiment == Sentiment.POSITIVE:
        recommendations.append("Build on positive reader sentiment with follow-up stories")

    if engagement == EngagementLevel.LOW:
        recommendations.append("Boost engagement with interactive formats such as polls and Q&A")
    elif engagement == EngagementLevel.HIGH:
        recommendations.append("Sustain high engagement with timely updates on trending stories")

    if topics:
        recommendations.append(f"Expand coverage of the top trending topic: {topics[0].topic}")
    return recommendations


def merge_recommendations(
    topics_facet: TopicsFacet,
    keywords_facet: KeywordsFacet,
    derived: List[str],
    limit: int = MAX_RECOMMENDATIONS,
) -> List[str]:
    """Specialist recommendations first, then derived ones, deduplicated and capped."""
    combined = list(topics_facet.recommendations) + list(keywords_facet.recommendations) + list(derived)
    return dedupe(item.strip() for item in combined if item and item.strip())[:limit]


def merge_trends(
    topics_facet: TopicsFacet,
    keywords_facet: KeywordsFacet,
    time_range: TimeRange,
    article_count: int = 0,
    comment_count: int = 0,
) -> TrendsResult:
    """Combine the topics and keywords specialists into one result.

    Args:
        topics_facet: Output of the topics specialist
        keywords_facet: Output of the keywords specialist
        time_range: Window the corpus covers
        article_count: Number of articles analysed
        comment_count: Number of comments analysed

    Returns:
        The unified trend analysis
    """
    topics = score_topics(topics_facet.topics)
    derived = rule_recommendations(
        topics_facet.overall_sentiment,
        keywords_facet.engagement_level,
        topics,
    )
    insights = TrendInsights(
        overall_sentiment=topics_facet.overall_sentiment,
        engagement_level=keywords_facet.engagement_level,
        summary=topics_facet.summary,
        recommendations=merge_recommendations(topics_facet, keywords_facet, derived),
    )
    return TrendsResult(
        trending_topics=topics,
        keywords=cap_keywords(keywords_facet.keywords),
        insights=insights,
        time_range=time_range,
        article_count=article_count,
        comment_count=comment_count,
    )


def empty_trends(time_range: TimeRange, comment_count: int = 0) -> TrendsResult:
    """Well-formed result for a window with no content."""
    return TrendsResult(
        trending_topics=[],
        keywords=[],
        insights=TrendInsights(
            overall_sentiment=Sentiment.NEUTRAL,
            engagement_level=EngagementLevel.LOW,
            summary=NO_DATA_SUMMARY,
            recommendations=[NO_DATA_RECOMMENDATION],
        ),
        time_range=time_range,
        article_count=0,
        comment_count=comment_count,
    )
