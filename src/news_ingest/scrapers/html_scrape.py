from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Mapping, Optional

from bs4 import BeautifulSoup

from news_ingest.core.constants import CREATED_BY_SCRAPE
from news_ingest.models import RawItem
from news_ingest.scrapers.base import SourceAdapter
from news_ingest.scrapers.fetchers import fetch_page
from news_ingest.scrapers.scraper_utils import img_src, is_http_url, normalize_url, select_text

PageFetcher = Callable[[str], str]


@dataclass(frozen=True)
class SelectorSet:
    item: str = "article"
    title: str = "h2, h3"
    link: str = "a[href]"
    summary: str = "p"
    image: str = "img"

    @classmethod
    def from_mapping(cls, raw: Mapping[str, str]) -> "SelectorSet":
        defaults = cls()
        return cls(
            item=raw.get("item") or defaults.item,
            title=raw.get("title") or defaults.title,
            link=raw.get("link") or defaults.link,
            summary=raw.get("summary") or defaults.summary,
            image=raw.get("image") or defaults.image,
        )


class HtmlScrapeAdapter(SourceAdapter):
    """Repeating article blocks on a listing page."""

    kind = "html_scrape"

    def __init__(
        self,
        *,
        name: str,
        url: str,
        selectors: SelectorSet | None = None,
        timeout_sec: float = 15,
        page_fetcher: Optional[PageFetcher] = None,
        log: Optional[logging.Logger] = None,
    ) -> None:
        self.name = name
        self.url = url
        self._selectors = selectors or SelectorSet()
        self._timeout_sec = timeout_sec
        self._page_fetcher = page_fetcher or self._default_fetch
        self._log = log or logging.getLogger(__name__)

    def _default_fetch(self, url: str) -> str:
        return fetch_page(url, source=self.name, timeout_sec=self._timeout_sec)

    def produce_items(self) -> list[RawItem]:
        html = self._page_fetcher(self.url)
        items = self.parse(html)
        self._log.info("%s: %s scraped items", self.name, len(items))
        return items

    def parse(self, html: str) -> list[RawItem]:
        soup = BeautifulSoup(html or "", "html.parser")
        sel = self._selectors
        items: list[RawItem] = []
        skipped = 0
        for node in soup.select(sel.item):
            title = select_text(node, sel.title)
            link_tag = node.select_one(sel.link)
            href = (link_tag.get("href") or "").strip() if link_tag is not None else ""
            image_tag = node.select_one(sel.image) if sel.image else None
            image = img_src(image_tag) if image_tag is not None else ""
            try:
                link = normalize_url(self.url, href) if href else ""
                image = normalize_url(self.url, image) if image else ""
            except ValueError:
                skipped += 1
                continue
            if not title or not is_http_url(link):
                skipped += 1
                continue
            items.append(
                RawItem(
                    source=self.name,
                    created_by=CREATED_BY_SCRAPE,
                    title=title,
                    url=link,
                    summary=select_text(node, sel.summary),
                    image_url=image,
                )
            )
        if skipped:
            self._log.debug("%s: skipped %s blocks without title or usable link", self.name, skipped)
        return items
