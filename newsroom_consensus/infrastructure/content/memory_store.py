"""In-memory content store, loadable from a JSON export."""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Iterable, List, Optional, Union

from ...domain.models.content import Article, Comment

logger = logging.getLogger(__name__)


class InMemoryContentStore:
    """Content store over fixed lists of articles and comments."""

    def __init__(
        self,
        articles: Optional[Iterable[Article]] = None,
        comments: Optional[Iterable[Comment]] = None,
    ):
        self._articles = sorted(articles or [], key=lambda a: a.published_at, reverse=True)
        self._comments = sorted(comments or [], key=lambda c: c.created_at, reverse=True)

    @classmethod
    def from_json(cls, path: Union[str, Path]) -> "InMemoryContentStore":
        """Load a store from a file shaped ``{"articles": [...], "comments": [...]}``.

        Raises:
            ValueError: If the file is not a JSON object or an item is invalid
        """
        data = json.loads(Path(path).read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"Corpus file {path} must contain a JSON object")

        articles = [Article.model_validate(item) for item in data.get("articles", [])]
        comments = [Comment.model_validate(item) for item in data.get("comments", [])]
        logger.info(f"📂 Loaded {len(articles)} articles and {len(comments)} comments from {path}")
        return cls(articles, comments)

    async def fetch_articles(self, since: datetime, limit: int) -> List[Article]:
        """Articles published on or after ``since``, newest first."""
        return [a for a in self._articles if a.published_at >= since][:limit]

    async def fetch_comments(self, since: datetime, limit: int) -> List[Comment]:
        """Comments created on or after ``since``, newest first."""
        return [c for c in self._comments if c.created_at >= since][:limit]
