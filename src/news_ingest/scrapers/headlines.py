from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from news_ingest.core.constants import CREATED_BY_NEWSAPI
from news_ingest.errors import SourceError
from news_ingest.models import RawItem
from news_ingest.scrapers.base import SourceAdapter
from news_ingest.scrapers.fetchers import fetch_json

FetchJsonFunc = Callable[..., Any]


class HeadlineApiAdapter(SourceAdapter):
    """Top headlines from a NewsAPI-style JSON endpoint."""

    kind = "headline_api"

    def __init__(
        self,
        *,
        api_key: str,
        endpoint: str,
        country: str,
        category: str,
        page_size: int = 50,
        timeout_sec: float = 15,
        name: str = "NewsAPI",
        fetch_json_func: FetchJsonFunc = fetch_json,
        log: Optional[logging.Logger] = None,
    ) -> None:
        self.name = name
        self._api_key = api_key
        self._endpoint = endpoint
        self._country = country
        self._category = category
        self._page_size = page_size
        self._timeout_sec = timeout_sec
        self._fetch_json = fetch_json_func
        self._log = log or logging.getLogger(__name__)

    def produce_items(self) -> list[RawItem]:
        if not self._api_key:
            raise SourceError("config", self.name, "missing api key")
        params = {
            "country": self._country,
            "category": self._category,
            "pageSize": self._page_size,
        }
        data = self._fetch_json(
            self._endpoint,
            source=self.name,
            timeout_sec=self._timeout_sec,
            params=params,
            headers={"X-Api-Key": self._api_key},
        )
        if not isinstance(data, dict):
            raise SourceError("parse", self.name, "unexpected payload")
        if data.get("status") not in (None, "ok"):
            raise SourceError("api_error", self.name, str(data.get("message") or data.get("code") or "unknown"))
        articles = data.get("articles") or []
        items = [item for item in (self._map_article(a) for a in articles) if item is not None]
        self._log.info("%s: %s headlines", self.name, len(items))
        return items

    def _map_article(self, article: Any) -> RawItem | None:
        if not isinstance(article, dict):
            return None
        source = article.get("source") or {}
        source_name = source.get("name") if isinstance(source, dict) else str(source or "")
        description = article.get("description") or ""
        return RawItem(
            source=source_name or self.name,
            created_by=CREATED_BY_NEWSAPI,
            title=article.get("title") or "",
            url=article.get("url") or "",
            summary=description,
            description=description,
            body=article.get("content") or description,
            published_at=article.get("publishedAt"),
            image_url=article.get("urlToImage") or "",
        )
