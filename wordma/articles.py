"""Article listing for Wordma."""

from __future__ import annotations

from .models import Article
from .store import Store


async def get_all_articles(store: Store) -> list[Article]:
    """Return every article, most recently created first."""
    return await store.query(
        "SELECT id, title, content, type, summary, cover, status, created_at, updated_at "
        "FROM article ORDER BY created_at DESC, id DESC",
        factory=Article.from_row,
    )
