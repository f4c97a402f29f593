from __future__ import annotations

import logging
from typing import Any, Callable, ContextManager, Optional

from news_ingest.core.constants import CREATED_BY_TWITTER
from news_ingest.models import MediaItem, RawItem
from news_ingest.scrapers.base import SourceAdapter
from news_ingest.scrapers.browser import BrowserSession, browser_session
from news_ingest.scrapers.scraper_config import ScraperConfig
from news_ingest.scrapers.scraper_utils import dedupe_keep_order
from news_ingest.utils.common import clean_text_ws, parse_datetime_utc

SessionFactory = Callable[..., ContextManager[BrowserSession]]

TIMELINE_SELECTOR = '[data-testid="primaryColumn"]'
POST_SELECTOR = 'article[data-testid="tweet"]'

INTERSTITIAL_SELECTORS = (
    '[data-testid="sheetDialog"] [aria-label="Close"]',
    '[data-testid="xMigrationBottomBar"] [role="button"]',
    'div[role="dialog"] [aria-label="Close"]',
    '[data-testid="BottomBar"] [role="button"]',
)

# Returns {timestamp, link, text, images} per rendered post.
EXTRACT_POSTS_JS = """
(nodes) => nodes.map((node) => {
  const time = node.querySelector('time[datetime]');
  const anchor = time ? time.closest('a') : null;
  const textEl = node.querySelector('[data-testid="tweetText"]');
  const images = Array.from(node.querySelectorAll('img[src*="pbs.twimg.com/media"]')).map((img) => img.src);
  return {
    timestamp: time ? time.getAttribute('datetime') : '',
    link: anchor ? anchor.href : '',
    text: textEl ? textEl.innerText : '',
    images: images,
  };
})
"""

TITLE_MAX_CHARS = 120


def _post_title(text: str, handle: str) -> str:
    first_line = next((line.strip() for line in (text or "").splitlines() if line.strip()), "")
    if not first_line:
        return f"Post by @{handle}"
    if len(first_line) <= TITLE_MAX_CHARS:
        return first_line
    return first_line[: TITLE_MAX_CHARS - 1].rstrip() + "…"


class SocialTimelineAdapter(SourceAdapter):
    """Most recent posts of one public profile, read through a headless browser."""

    kind = "social"

    def __init__(
        self,
        *,
        handle: str,
        max_items: int,
        config: ScraperConfig | None = None,
        session_factory: SessionFactory = browser_session,
        log: Optional[logging.Logger] = None,
    ) -> None:
        self.handle = handle.lstrip("@").strip()
        self.name = f"@{self.handle}"
        self._max_items = max(0, int(max_items))
        self._config = config or ScraperConfig()
        self._session_factory = session_factory
        self._log = log or logging.getLogger(__name__)

    @property
    def profile_url(self) -> str:
        return f"{self._config.social_base_url.rstrip('/')}/{self.handle}"

    def produce_items(self) -> list[RawItem]:
        if self._max_items == 0:
            return []
        cfg = self._config
        with self._session_factory(cfg, source=self.name, log=self._log) as session:
            session.goto(self.profile_url)
            session.wait_for(TIMELINE_SELECTOR, cfg.timeline_wait_sec)
            session.wait(cfg.interstitial_wait_ms)
            session.dismiss(INTERSTITIAL_SELECTORS)
            session.scroll(cfg.scroll_rounds, cfg.scroll_pause_ms)
            records = session.extract_all(POST_SELECTOR, EXTRACT_POSTS_JS)
        posts = self.select_recent(records, self._max_items)
        items = [self._to_raw_item(p) for p in posts]
        self._log.info("%s: %s posts (of %s rendered)", self.name, len(items), len(records))
        return items

    @staticmethod
    def select_recent(records: list[Any], max_items: int) -> list[dict[str, Any]]:
        """Posts with a timestamp and link, newest first, one per link, at most `max_items`."""
        seen: set[str] = set()
        posts: list[dict[str, Any]] = []
        for rec in records:
            if not isinstance(rec, dict):
                continue
            ts = parse_datetime_utc(rec.get("timestamp"))
            link = (rec.get("link") or "").strip()
            if ts is None or not link or link in seen:
                continue
            seen.add(link)
            posts.append({**rec, "timestamp": ts, "link": link})
        posts.sort(key=lambda p: p["timestamp"], reverse=True)
        return posts[:max_items]

    def _to_raw_item(self, post: dict[str, Any]) -> RawItem:
        text = (post.get("text") or "").strip()
        images = dedupe_keep_order(post.get("images") or [])
        return RawItem(
            source=self.name,
            created_by=CREATED_BY_TWITTER,
            title=_post_title(text, self.handle),
            url=post["link"],
            summary=clean_text_ws(text),
            body=text,
            published_at=post["timestamp"],
            image_url=images[0] if images else "",
            media=tuple(MediaItem(kind="image", src=src) for src in images),
        )
