from __future__ import annotations

import datetime
from typing import Any

from news_ingest.models import ArticleRecord


class ArticleStore:
    """Persistence contract for article records, keyed by url."""

    def upsert_if_absent(self, record: ArticleRecord) -> bool:
        """Insert `record` unless its url is already stored. Returns True on insert."""
        raise NotImplementedError

    def find_recent_titles(self, window_start: datetime.datetime, language: str) -> list[str]:
        """Titles of records with publishedAt >= window_start in `language`."""
        raise NotImplementedError

    def get(self, url: str) -> ArticleRecord | None:
        raise NotImplementedError

    def update(self, url: str, changes: dict[str, Any]) -> ArticleRecord | None:
        raise NotImplementedError

    def delete(self, url: str) -> bool:
        raise NotImplementedError

    def count(self) -> int:
        raise NotImplementedError

    def close(self) -> None:
        return None
