"""Domain models for the newsroom content analysed for trends."""

from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


def _assume_utc(value: datetime) -> datetime:
    """Treat timestamps without an offset as UTC."""
    if value.tzinfo is None or value.utcoffset() is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class Article(BaseModel):
    """A published article."""

    id: str = Field(..., description="Article identifier")
    title: str = Field(..., description="Headline")
    excerpt: Optional[str] = Field(None, description="Short summary or lead paragraph")
    category: Optional[str] = Field(None, description="Section the article was filed under")
    published_at: datetime = Field(..., description="Publication timestamp")
    views: int = Field(default=0, ge=0, description="View count at fetch time")

    class Config:
        """Pydantic model configuration."""
        frozen = True

    normalize_published_at = field_validator("published_at")(_assume_utc)


class Comment(BaseModel):
    """A reader comment."""

    id: str = Field(..., description="Comment identifier")
    article_id: Optional[str] = Field(None, description="Article the comment belongs to")
    content: str = Field(..., description="Comment text")
    created_at: datetime = Field(..., description="Creation timestamp")

    class Config:
        """Pydantic model configuration."""
        frozen = True

    normalize_created_at = field_validator("created_at")(_assume_utc)


class Corpus(BaseModel):
    """Read-only snapshot of content in a time window."""

    articles: List[Article] = Field(default_factory=list)
    comments: List[Comment] = Field(default_factory=list)

    class Config:
        """Pydantic model configuration."""
        frozen = True

    @property
    def is_empty(self) -> bool:
        """No articles were published in the window."""
        return not self.articles
