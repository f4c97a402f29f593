"""Article stores: in-memory and SQLite."""

from .base import ArticleStore
from .memory import InMemoryArticleStore
from .sqlite import SqliteArticleStore

__all__ = ["ArticleStore", "InMemoryArticleStore", "SqliteArticleStore", "build_default_store"]


def build_default_store() -> ArticleStore:
    from news_ingest.core.config import DATABASE_PATH, STORE_BACKEND

    if STORE_BACKEND == "memory":
        return InMemoryArticleStore()
    return SqliteArticleStore(DATABASE_PATH)
