from __future__ import annotations

import datetime
import logging
from dataclasses import replace
from typing import Any, Callable, Mapping, Optional

from news_ingest.core.constants import CREATED_BY_MANUAL
from news_ingest.errors import DuplicateUrlError, MalformedItemError
from news_ingest.models import ArticleRecord, MediaItem, RawItem
from news_ingest.processing.classifier import TopicClassifier
from news_ingest.processing.normalizer import ContentNormalizer
from news_ingest.storage.base import ArticleStore
from news_ingest.utils.common import parse_datetime_utc, utc_now

# editable document keys -> ArticleRecord fields
_EDITABLE_FIELDS = {
    "title": "title",
    "summary": "summary",
    "body": "body",
    "region": "region",
    "source": "source",
    "url": "url",
    "imageUrl": "image_url",
    "isPublished": "is_published",
    "blocked": "blocked",
}
_TEXT_FIELDS = {"title", "summary", "body"}


def _media_from(value: Any) -> tuple[MediaItem, ...]:
    media: list[MediaItem] = []
    for m in value or []:
        src = (m.get("src") if isinstance(m, Mapping) else str(m or "")) or ""
        kind = m.get("type") if isinstance(m, Mapping) else "image"
        if src:
            media.append(MediaItem(kind="video" if kind == "video" else "image", src=src))
    return tuple(media)


class EditorialService:
    """Manual create/update/remove. Ingestion never goes through here."""

    def __init__(
        self,
        *,
        store: ArticleStore,
        normalizer: ContentNormalizer,
        classifier: TopicClassifier,
        now_provider: Callable[[], datetime.datetime] = utc_now,
        log: Optional[logging.Logger] = None,
    ) -> None:
        self._store = store
        self._normalizer = normalizer
        self._classifier = classifier
        self._now = now_provider
        self._log = log or logging.getLogger(__name__)

    def create_manual(self, fields: Mapping[str, Any]) -> ArticleRecord:
        raw = RawItem(
            source=str(fields.get("source") or ""),
            created_by=CREATED_BY_MANUAL,
            title=str(fields.get("title") or ""),
            url=str(fields.get("url") or ""),
            summary=str(fields.get("summary") or ""),
            body=str(fields.get("body") or ""),
            published_at=fields.get("publishedAt"),
            image_url=str(fields.get("imageUrl") or ""),
            media=_media_from(fields.get("media")),
            region=str(fields.get("region") or ""),
        )
        record = self._normalizer.normalize(raw)
        result = self._classifier.classify_parts(record.title, record.body)
        record = record.with_classification(result.categories, result.top_category)
        changes: dict[str, Any] = {}
        if "isPublished" in fields:
            changes["is_published"] = bool(fields["isPublished"])
        if "blocked" in fields:
            changes["blocked"] = bool(fields["blocked"])
        if changes:
            record = replace(record, **changes)
        if not self._store.upsert_if_absent(record):
            raise DuplicateUrlError(f"url already stored: {record.url}")
        self._log.info("Manual record created: %s", record.url)
        return self._store.get(record.url) or record

    def update(self, url: str, changes: Mapping[str, Any]) -> ArticleRecord | None:
        current = self._store.get(url)
        if current is None:
            return None
        updates: dict[str, Any] = {}
        for key, value in changes.items():
            attr = _EDITABLE_FIELDS.get(key)
            if attr is None:
                continue
            if attr in ("is_published", "blocked"):
                updates[attr] = bool(value)
            elif attr in _TEXT_FIELDS:
                updates[attr] = self._normalizer.clean(str(value or ""))
            else:
                updates[attr] = str(value or "").strip()
        if "url" in updates and not updates["url"]:
            raise MalformedItemError("url cannot be empty")
        if "title" in updates and not updates["title"]:
            raise MalformedItemError("title cannot be empty")
        if "image_url" in updates and not updates["image_url"]:
            del updates["image_url"]
        if "media" in changes:
            updates["media"] = _media_from(changes["media"])
        if "publishedAt" in changes:
            published = parse_datetime_utc(changes["publishedAt"])
            if published is not None:
                updates["published_at"] = published

        title = updates.get("title", current.title)
        summary = updates.get("summary", current.summary)
        body = updates.get("body", current.body)
        if _TEXT_FIELDS & updates.keys():
            result = self._classifier.classify_parts(title, body)
            updates["categories"] = result.categories
            updates["top_category"] = result.top_category
        if _TEXT_FIELDS & updates.keys() or "source" in updates:
            updates["language"] = self._normalizer.detect_language(
                " ".join((title, summary, body)),
                updates.get("source", current.source),
            )
        updates["created_by"] = CREATED_BY_MANUAL
        updates["updated_at"] = self._now()
        updated = self._store.update(url, updates)
        if updated is not None:
            self._log.info("Record updated by editor: %s", updated.url)
        return updated

    def remove(self, url: str) -> bool:
        removed = self._store.delete(url)
        if removed:
            self._log.info("Record removed: %s", url)
        return removed
