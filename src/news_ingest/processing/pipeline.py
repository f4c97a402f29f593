from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from functools import partial
from typing import Callable, Optional, Sequence
from urllib.parse import urlparse

from news_ingest.core.config import (
    DEDUPE_LOOKBACK_HOURS,
    DEFAULT_IMAGE_URL,
    DEFAULT_REGION,
    INGEST_MAX_WORKERS,
    NEWSAPI_CATEGORY,
    NEWSAPI_COUNTRY,
    NEWSAPI_ENDPOINT,
    NEWSAPI_KEY,
    NEWSAPI_PAGE_SIZE,
    RSS_SOURCES,
    SCRAPE_PAGES,
    SOCIAL_ACCOUNTS,
    SOCIAL_ENABLED,
    SOCIAL_MAX_ITEMS,
    TELUGU_SOURCE_NAMES,
    TITLE_SIMILARITY_THRESHOLD,
)
from news_ingest.core.constants import CATEGORY_KEYWORDS
from news_ingest.errors import MalformedItemError, SourceError, StorageError
from news_ingest.models import AccountIngestResult, ArticleRecord, CycleResult, RawItem, SourceReport
from news_ingest.processing.classifier import TopicClassifier
from news_ingest.processing.dedupe import DuplicateGate
from news_ingest.processing.normalizer import ContentNormalizer
from news_ingest.scrapers.base import SourceAdapter
from news_ingest.scrapers.browser import render_page
from news_ingest.scrapers.headlines import HeadlineApiAdapter
from news_ingest.scrapers.html_scrape import HtmlScrapeAdapter, SelectorSet
from news_ingest.scrapers.rss import RssFeedAdapter
from news_ingest.scrapers.scraper_config import ScraperConfig
from news_ingest.scrapers.social import SocialTimelineAdapter
from news_ingest.storage import ArticleStore, build_default_store

SocialAdapterFactory = Callable[[str, int], SourceAdapter]
PageAdapterFactory = Callable[[str], SourceAdapter]

_Fetched = tuple[list[RawItem], SourceReport]


def _failure_note(exc: Exception) -> str:
    if isinstance(exc, SourceError):
        return exc.to_note()
    safe = str(exc).replace("\n", " ").strip()
    return f"source_error:{type(exc).__name__}:{safe}" if safe else f"source_error:{type(exc).__name__}"


class IngestionPipeline:
    def __init__(
        self,
        *,
        adapters: Sequence[SourceAdapter],
        normalizer: ContentNormalizer,
        classifier: TopicClassifier,
        gate: DuplicateGate,
        store: ArticleStore,
        social_adapter_factory: SocialAdapterFactory | None = None,
        social_accounts: Sequence[str] = (),
        social_max_items: int = 10,
        page_adapter_factory: PageAdapterFactory | None = None,
        max_workers: int = 4,
        log: Optional[logging.Logger] = None,
    ) -> None:
        self._adapters = list(adapters)
        self._normalizer = normalizer
        self._classifier = classifier
        self._gate = gate
        self._store = store
        self._social_adapter_factory = social_adapter_factory
        self._social_accounts = [a for a in social_accounts if a]
        self._social_max_items = social_max_items
        self._page_adapter_factory = page_adapter_factory
        self._max_workers = max(1, int(max_workers))
        self._log = log or logging.getLogger(__name__)
        self._cycle_lock = threading.Lock()

    @property
    def store(self) -> ArticleStore:
        return self._store

    # -----------------------------
    # Fetch
    # -----------------------------
    def _cycle_adapters(self) -> list[SourceAdapter]:
        adapters = list(self._adapters)
        if self._social_adapter_factory is not None:
            for handle in self._social_accounts:
                adapters.append(self._social_adapter_factory(handle, self._social_max_items))
        return adapters

    def _run_adapter(self, adapter: SourceAdapter) -> _Fetched:
        try:
            items = list(adapter.produce_items())
        except SourceError as e:
            self._log.warning("Source failed (%s): %s", adapter.name, e.to_note())
            return [], SourceReport(adapter.name, adapter.kind, ok=False, error=e.to_note())
        except Exception as e:
            self._log.exception("Unexpected source error: %s", adapter.name)
            return [], SourceReport(adapter.name, adapter.kind, ok=False, error=_failure_note(e))
        return items, SourceReport(adapter.name, adapter.kind, ok=True, item_count=len(items))

    def fetch_all(self, adapters: Sequence[SourceAdapter]) -> list[_Fetched]:
        """Run every adapter concurrently; results keep the adapters' order."""
        if not adapters:
            return []
        results: list[_Fetched | None] = [None] * len(adapters)
        workers = min(self._max_workers, len(adapters))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = {executor.submit(self._run_adapter, adapter): idx for idx, adapter in enumerate(adapters)}
            for future in as_completed(futures):
                results[futures[future]] = future.result()
        return [r for r in results if r is not None]

    # -----------------------------
    # Process
    # -----------------------------
    def prepare(self, raw: RawItem) -> ArticleRecord:
        record = self._normalizer.normalize(raw)
        result = self._classifier.classify_parts(record.title, record.body)
        return record.with_classification(result.categories, result.top_category)

    def _ingest_item(self, raw: RawItem) -> ArticleRecord | None:
        """Normalize, classify, gate and store one item. StorageError propagates."""
        try:
            record = self.prepare(raw)
        except MalformedItemError as e:
            self._log.warning("Skipping malformed item: %s", e)
            return None
        except Exception:
            self._log.exception("Skipping item that failed to normalize: %s", raw.url)
            return None
        decision = self._gate.check(record)
        if not decision.accepted:
            self._log.info("Near-duplicate rejected (%.2f): %s", decision.score, record.title)
            return None
        if not self._store.upsert_if_absent(record):
            return None
        return record

    def _ingest_items(self, items: Sequence[RawItem]) -> tuple[list[ArticleRecord], str]:
        inserted: list[ArticleRecord] = []
        for raw in items:
            try:
                record = self._ingest_item(raw)
            except StorageError as e:
                self._log.error("Storage failure, stopping writes: %s", e)
                return inserted, f"storage_error:{e}"
            if record is not None:
                inserted.append(record)
        return inserted, ""

    # -----------------------------
    # Public operations
    # -----------------------------
    def run_ingestion_cycle(self) -> CycleResult:
        if not self._cycle_lock.acquire(blocking=False):
            self._log.warning("Ingestion cycle already running; skipping this trigger")
            return CycleResult(skipped=True)
        try:
            adapters = self._cycle_adapters()
            self._log.info("Ingestion cycle start: %s sources", len(adapters))
            fetched = self.fetch_all(adapters)
            batch: list[RawItem] = []
            for items, _report in fetched:
                batch.extend(items)
            inserted, error = self._ingest_items(batch)
            reports = tuple(report for _items, report in fetched)
            failed = sum(1 for r in reports if not r.ok)
            self._log.info(
                "Ingestion cycle done: fetched %s, inserted %s, failed sources %s",
                len(batch),
                len(inserted),
                failed,
            )
            return CycleResult(inserted_records=tuple(inserted), source_reports=reports, error=error)
        finally:
            self._cycle_lock.release()

    def ingest_from_account(self, handle: str, max_items: int) -> AccountIngestResult:
        if self._social_adapter_factory is None:
            return AccountIngestResult(handle=handle, fetched_count=0, error="source_error:config:social disabled")
        adapter = self._social_adapter_factory(handle, max_items)
        with self._cycle_lock:
            items, report = self._run_adapter(adapter)
            inserted, error = self._ingest_items(items)
        self._log.info("Account %s: fetched %s, inserted %s", adapter.name, len(items), len(inserted))
        return AccountIngestResult(
            handle=handle,
            fetched_count=len(items),
            inserted_records=tuple(inserted),
            error=error or report.error,
        )

    def scrape_page(self, url: str) -> CycleResult:
        if self._page_adapter_factory is None:
            raise ValueError("page scraping is not configured")
        adapter = self._page_adapter_factory(url)
        with self._cycle_lock:
            items, report = self._run_adapter(adapter)
            inserted, error = self._ingest_items(items)
        self._log.info("Scrape %s: fetched %s, inserted %s", url, len(items), len(inserted))
        return CycleResult(inserted_records=tuple(inserted), source_reports=(report,), error=error)


# -----------------------------
# Default wiring
# -----------------------------
def build_default_normalizer() -> ContentNormalizer:
    return ContentNormalizer(
        default_image_url=DEFAULT_IMAGE_URL,
        telugu_source_names=TELUGU_SOURCE_NAMES,
        default_region=DEFAULT_REGION,
    )


def build_default_classifier() -> TopicClassifier:
    return TopicClassifier(category_keywords=CATEGORY_KEYWORDS)


def build_default_gate(store: ArticleStore) -> DuplicateGate:
    return DuplicateGate(
        store=store,
        lookback_hours=DEDUPE_LOOKBACK_HOURS,
        threshold=TITLE_SIMILARITY_THRESHOLD,
    )


def build_default_adapters(scraper_config: ScraperConfig | None = None) -> list[SourceAdapter]:
    cfg = scraper_config or ScraperConfig()
    adapters: list[SourceAdapter] = []
    if NEWSAPI_KEY:
        adapters.append(
            HeadlineApiAdapter(
                api_key=NEWSAPI_KEY,
                endpoint=NEWSAPI_ENDPOINT,
                country=NEWSAPI_COUNTRY,
                category=NEWSAPI_CATEGORY,
                page_size=NEWSAPI_PAGE_SIZE,
                timeout_sec=cfg.request_timeout_sec,
            )
        )
    for feed in RSS_SOURCES:
        adapters.append(
            RssFeedAdapter(
                name=str(feed.get("name") or ""),
                url=str(feed["url"]),
                limit=int(feed.get("limit") or 50),
                timeout_sec=cfg.request_timeout_sec,
            )
        )
    for page in SCRAPE_PAGES:
        adapters.append(
            HtmlScrapeAdapter(
                name=page["name"],
                url=page["url"],
                selectors=SelectorSet.from_mapping(page),
                timeout_sec=cfg.request_timeout_sec,
            )
        )
    return adapters


def build_social_adapter_factory(scraper_config: ScraperConfig | None = None) -> SocialAdapterFactory:
    cfg = scraper_config or ScraperConfig()

    def _factory(handle: str, max_items: int) -> SourceAdapter:
        return SocialTimelineAdapter(handle=handle, max_items=max_items, config=cfg)

    return _factory


def build_page_adapter_factory(scraper_config: ScraperConfig | None = None) -> PageAdapterFactory:
    cfg = scraper_config or ScraperConfig()

    def _factory(url: str) -> SourceAdapter:
        name = urlparse(url).netloc or url
        return HtmlScrapeAdapter(
            name=name,
            url=url,
            page_fetcher=partial(render_page, config=cfg, source=name),
        )

    return _factory


def build_default_pipeline(*, store: ArticleStore | None = None) -> IngestionPipeline:
    scraper_config = ScraperConfig()
    store = store or build_default_store()
    return IngestionPipeline(
        adapters=build_default_adapters(scraper_config),
        normalizer=build_default_normalizer(),
        classifier=build_default_classifier(),
        gate=build_default_gate(store),
        store=store,
        social_adapter_factory=build_social_adapter_factory(scraper_config),
        social_accounts=SOCIAL_ACCOUNTS if SOCIAL_ENABLED else (),
        social_max_items=SOCIAL_MAX_ITEMS,
        page_adapter_factory=build_page_adapter_factory(scraper_config),
        max_workers=INGEST_MAX_WORKERS,
    )
