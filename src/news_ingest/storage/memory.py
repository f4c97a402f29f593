from __future__ import annotations

import datetime
import threading
from dataclasses import replace
from typing import Any

from news_ingest.errors import DuplicateUrlError
from news_ingest.models import ArticleRecord
from news_ingest.storage.base import ArticleStore
from news_ingest.utils.common import ensure_utc, utc_now


class InMemoryArticleStore(ArticleStore):
    def __init__(self, *, now_provider=utc_now) -> None:
        self._now = now_provider
        self._records: dict[str, ArticleRecord] = {}
        self._lock = threading.Lock()

    def upsert_if_absent(self, record: ArticleRecord) -> bool:
        with self._lock:
            if record.url in self._records:
                return False
            now = self._now()
            self._records[record.url] = record.with_timestamps(created_at=now, updated_at=now)
            return True

    def find_recent_titles(self, window_start: datetime.datetime, language: str) -> list[str]:
        window_start = ensure_utc(window_start)
        with self._lock:
            return [
                r.title
                for r in self._records.values()
                if r.language == language and ensure_utc(r.published_at) >= window_start
            ]

    def get(self, url: str) -> ArticleRecord | None:
        with self._lock:
            return self._records.get(url)

    def update(self, url: str, changes: dict[str, Any]) -> ArticleRecord | None:
        with self._lock:
            current = self._records.get(url)
            if current is None:
                return None
            updated = replace(current, **changes)
            if updated.url != url:
                if updated.url in self._records:
                    raise DuplicateUrlError(f"url already stored: {updated.url}")
                self._records.pop(url)
            self._records[updated.url] = updated
            return updated

    def delete(self, url: str) -> bool:
        with self._lock:
            return self._records.pop(url, None) is not None

    def count(self) -> int:
        with self._lock:
            return len(self._records)
