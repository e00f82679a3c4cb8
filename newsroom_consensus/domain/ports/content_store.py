"""Port for the content store that supplies the trend corpus."""

from datetime import datetime
from typing import List, Protocol

from ..models.content import Article, Comment


class ContentStore(Protocol):
    """Read access to newsroom content.

    Both queries return items on or after ``since``, newest first, capped
    at ``limit``.
    """

    async def fetch_articles(self, since: datetime, limit: int) -> List[Article]:
        """Fetch articles published on or after ``since``."""
        ...

    async def fetch_comments(self, since: datetime, limit: int) -> List[Comment]:
        """Fetch comments created on or after ``since``."""
        ...
