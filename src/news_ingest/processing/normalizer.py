from __future__ import annotations

import datetime
from typing import Callable, Sequence

from news_ingest.core.constants import (
    AUTOMATED_IS_PUBLISHED_DEFAULT,
    CREATED_BY_MANUAL,
    DEFAULT_TITLE,
    LANG_ENGLISH,
    LANG_TELUGU,
    MANUAL_IS_PUBLISHED_DEFAULT,
)
from news_ingest.errors import MalformedItemError
from news_ingest.models import ArticleRecord, MediaItem, RawItem
from news_ingest.scrapers.scraper_utils import find_first_img, normalize_url
from news_ingest.utils.common import (
    clean_text,
    contains_telugu,
    parse_datetime_utc,
    strip_read_more,
    utc_now,
)


class ContentNormalizer:
    def __init__(
        self,
        *,
        default_image_url: str,
        telugu_source_names: Sequence[str],
        default_region: str,
        default_title: str = DEFAULT_TITLE,
        now_provider: Callable[[], datetime.datetime] = utc_now,
        clean_text_func: Callable[[str], str] = clean_text,
        strip_read_more_func: Callable[[str], str] = strip_read_more,
        find_first_img_func: Callable[[str], str] = find_first_img,
    ) -> None:
        self._default_image_url = default_image_url
        self._telugu_source_names = tuple(n.lower() for n in telugu_source_names if n)
        self._default_region = default_region
        self._default_title = default_title
        self._now = now_provider
        self._clean_text = clean_text_func
        self._strip_read_more = strip_read_more_func
        self._find_first_img = find_first_img_func

    def clean(self, value: str) -> str:
        return self._strip_read_more(self._clean_text(value or ""))

    def extract_image(self, raw: RawItem) -> str:
        """Enclosure, then image field, then media group, then the first <img> in the HTML fields."""
        if raw.enclosure_url.strip():
            return raw.enclosure_url.strip()
        if raw.image_url.strip():
            return raw.image_url.strip()
        for src in raw.media_group:
            if src and src.strip():
                return src.strip()
        for html in (raw.body, raw.content, raw.description, raw.summary):
            src = self._find_first_img(html)
            if src:
                return src
        return ""

    def detect_language(self, text: str, source: str) -> str:
        if contains_telugu(text):
            return LANG_TELUGU
        src = (source or "").lower()
        if src and any(name in src for name in self._telugu_source_names):
            return LANG_TELUGU
        return LANG_ENGLISH

    def _resolve_media(self, raw: RawItem) -> tuple[str, tuple[MediaItem, ...]]:
        image = self.extract_image(raw)
        if image and raw.url:
            image = normalize_url(raw.url, image)
        media = tuple(m for m in raw.media if m.src)
        if not image:
            image = next((m.src for m in media if m.kind == "image"), "")
        if not media and image:
            media = (MediaItem(kind="image", src=image),)
        if not image:
            image = self._default_image_url
            if not media:
                media = (MediaItem(kind="image", src=image),)
        return image, media

    def normalize(self, raw: RawItem) -> ArticleRecord:
        url = (raw.url or "").strip()
        if not url:
            raise MalformedItemError(f"{raw.source}: item without url")
        title = self.clean(raw.title) or self._default_title
        summary = self.clean(raw.summary or raw.description)
        body = self.clean(raw.body or raw.content) or summary
        if not title:
            raise MalformedItemError(f"{raw.source}: item without title: {url}")

        published = parse_datetime_utc(raw.published_at) or self._now()
        try:
            image_url, media = self._resolve_media(raw)
        except ValueError as e:
            raise MalformedItemError(f"{raw.source}: bad url {url!r}: {e}") from e
        language = self.detect_language(" ".join((title, summary, body)), raw.source)
        is_published = (
            MANUAL_IS_PUBLISHED_DEFAULT if raw.created_by == CREATED_BY_MANUAL else AUTOMATED_IS_PUBLISHED_DEFAULT
        )
        return ArticleRecord(
            title=title,
            url=url,
            source=(raw.source or "").strip(),
            language=language,
            published_at=published,
            image_url=image_url,
            media=media,
            created_by=raw.created_by,
            summary=summary,
            body=body,
            region=(raw.region or "").strip() or self._default_region,
            is_published=is_published,
        )
