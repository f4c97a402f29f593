from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from news_ingest.core.constants import CREATED_BY_RSS
from news_ingest.errors import SourceError
from news_ingest.models import RawItem
from news_ingest.scrapers.base import SourceAdapter
from news_ingest.scrapers.fetchers import fetch_feed
from news_ingest.scrapers.scraper_utils import dedupe_keep_order

FeedFetcher = Callable[[str], Any]


def _field(obj: Any, key: str, default: Any = None) -> Any:
    if isinstance(obj, dict):
        return obj.get(key, default)
    return getattr(obj, key, default)


def _content_parts(entry: Any) -> list[str]:
    # entry.content is a list of {type, value}; keep source order
    content_list = _field(entry, "content")
    parts: list[str] = []
    if isinstance(content_list, list):
        for content in content_list:
            value = _field(content, "value", "") or ""
            if value:
                parts.append(value)
    return parts


def _enclosure_url(entry: Any) -> str:
    for enc in _field(entry, "enclosures") or []:
        href = _field(enc, "href") or _field(enc, "url") or ""
        kind = (_field(enc, "type") or "").lower()
        if href and (not kind or kind.startswith("image/")):
            return href
    for link in _field(entry, "links") or []:
        if (_field(link, "rel") or "") != "enclosure":
            continue
        href = _field(link, "href") or ""
        kind = (_field(link, "type") or "").lower()
        if href and (not kind or kind.startswith("image/")):
            return href
    return ""


def _media_group(entry: Any) -> tuple[str, ...]:
    urls: list[str] = []
    for media in _field(entry, "media_content") or []:
        medium = (_field(media, "medium") or _field(media, "type") or "image").lower()
        if "video" in medium or "audio" in medium:
            continue
        urls.append(_field(media, "url") or "")
    for thumb in _field(entry, "media_thumbnail") or []:
        urls.append(_field(thumb, "url") or "")
    return tuple(dedupe_keep_order(urls))


class RssFeedAdapter(SourceAdapter):
    """One RSS/Atom feed URL."""

    kind = "rss"

    def __init__(
        self,
        *,
        name: str,
        url: str,
        limit: int = 50,
        timeout_sec: float = 15,
        feed_fetcher: Optional[FeedFetcher] = None,
        log: Optional[logging.Logger] = None,
    ) -> None:
        self.name = name or url
        self.url = url
        self._limit = max(0, int(limit))
        self._timeout_sec = timeout_sec
        self._feed_fetcher = feed_fetcher or self._default_fetch
        self._log = log or logging.getLogger(__name__)

    def _default_fetch(self, url: str) -> Any:
        return fetch_feed(url, source=self.name, timeout_sec=self._timeout_sec)

    def produce_items(self) -> list[RawItem]:
        feed = self._feed_fetcher(self.url)
        entries = _field(feed, "entries")
        if entries is None:
            raise SourceError("parse", self.name, "feed without entries")
        items: list[RawItem] = []
        for entry in list(entries)[: self._limit]:
            items.append(self.map_entry(entry, self.name))
        self._log.info("%s: %s feed entries", self.name, len(items))
        return items

    @staticmethod
    def map_entry(entry: Any, source_name: str) -> RawItem:
        summary = _field(entry, "summary", "") or ""
        description = _field(entry, "description", "") or ""
        parts = _content_parts(entry)
        published = (
            _field(entry, "published_parsed")
            or _field(entry, "updated_parsed")
            or _field(entry, "published")
            or _field(entry, "updated")
        )
        return RawItem(
            source=source_name,
            created_by=CREATED_BY_RSS,
            title=(_field(entry, "title", "") or "").strip(),
            url=(_field(entry, "link", "") or "").strip(),
            summary=summary,
            description=description if description != summary else "",
            content=" ".join(parts),
            published_at=published,
            enclosure_url=_enclosure_url(entry),
            media_group=_media_group(entry),
        )
