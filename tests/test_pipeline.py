from __future__ import annotations

import datetime
import threading

from news_ingest.errors import SourceError, StorageError
from news_ingest.models import ArticleRecord, RawItem
from news_ingest.processing.classifier import TopicClassifier
from news_ingest.processing.dedupe import DuplicateGate
from news_ingest.processing.normalizer import ContentNormalizer
from news_ingest.processing.pipeline import IngestionPipeline
from news_ingest.scrapers.base import SourceAdapter
from news_ingest.scrapers.rss import RssFeedAdapter
from news_ingest.storage import InMemoryArticleStore

_NOW = datetime.datetime(2024, 3, 1, 12, 0, tzinfo=datetime.timezone.utc)
_PUBLISHED = "2024-03-01T10:00:00Z"


class _Entry:
    def __init__(self, *, title: str, link: str, summary: str = "") -> None:
        self.title = title
        self.link = link
        self.summary = summary
        self.published = _PUBLISHED


class _Feed:
    def __init__(self, entries: list[_Entry]) -> None:
        self.entries = entries


class _StaticAdapter(SourceAdapter):
    kind = "static"

    def __init__(self, name: str, items: list[RawItem]) -> None:
        self.name = name
        self._items = items
        self.calls = 0

    def produce_items(self) -> list[RawItem]:
        self.calls += 1
        return list(self._items)


class _FailingStore(InMemoryArticleStore):
    def __init__(self, fail_after: int) -> None:
        super().__init__(now_provider=lambda: _NOW)
        self._fail_after = fail_after

    def upsert_if_absent(self, record: ArticleRecord) -> bool:
        if self.count() >= self._fail_after:
            raise StorageError("disk full")
        return super().upsert_if_absent(record)


def _rss(name: str, entries: list[_Entry] | None = None, *, fail: bool = False) -> RssFeedAdapter:
    def _fetch(url: str) -> _Feed:
        if fail:
            raise SourceError("network", name, "connection refused")
        return _Feed(entries or [])

    return RssFeedAdapter(name=name, url=f"https://{name}.example.com/rss", feed_fetcher=_fetch)


def _build_pipeline(adapters: list[SourceAdapter], store: InMemoryArticleStore | None = None, **kwargs) -> IngestionPipeline:
    store = store if store is not None else InMemoryArticleStore(now_provider=lambda: _NOW)
    return IngestionPipeline(
        adapters=adapters,
        normalizer=ContentNormalizer(
            default_image_url="https://img.example.com/default.png",
            telugu_source_names=["sakshi"],
            default_region="AP",
            now_provider=lambda: _NOW,
        ),
        classifier=TopicClassifier(category_keywords={"politics": ["government", "tax"], "sports": ["cricket", "match"]}),
        gate=DuplicateGate(store=store, lookback_hours=12, threshold=0.6, now_provider=lambda: _NOW),
        store=store,
        max_workers=4,
        **kwargs,
    )


def test_cycle_inserts_classified_records() -> None:
    pipeline = _build_pipeline(
        [_rss("feed-a", [_Entry(title="Cricket match tonight", link="https://a.example.com/1")])]
    )
    result = pipeline.run_ingestion_cycle()
    assert result.inserted_count == 1
    record = result.inserted_records[0]
    assert record.categories == {"sports": 2}
    assert record.top_category == "sports"
    assert record.created_by == "rss"
    assert record.image_url == "https://img.example.com/default.png"
    assert result.error == ""


def test_cycle_is_idempotent() -> None:
    entries = [
        _Entry(title="Government announces new tax policy", link="https://a.example.com/1"),
        _Entry(title="Cricket team wins championship final", link="https://a.example.com/2"),
    ]
    pipeline = _build_pipeline([_rss("feed-a", entries)])
    first = pipeline.run_ingestion_cycle()
    second = pipeline.run_ingestion_cycle()
    assert first.inserted_count == 2
    assert second.inserted_count == 0
    assert pipeline.store.count() == 2


def test_near_duplicate_from_later_cycle_is_rejected() -> None:
    store = InMemoryArticleStore(now_provider=lambda: _NOW)
    _build_pipeline(
        [_rss("feed-a", [_Entry(title="Government announces new tax policy", link="https://a.example.com/1")])],
        store,
    ).run_ingestion_cycle()
    result = _build_pipeline(
        [
            _rss(
                "feed-b",
                [
                    _Entry(title="Government unveils new tax policy", link="https://b.example.com/1"),
                    _Entry(title="Cricket team wins championship final", link="https://b.example.com/2"),
                ],
            )
        ],
        store,
    ).run_ingestion_cycle()
    assert [r.url for r in result.inserted_records] == ["https://b.example.com/2"]


def test_same_batch_near_duplicates_check_against_stored_records() -> None:
    # items are stored one at a time, so the second sees the first in the window
    pipeline = _build_pipeline(
        [
            _rss("feed-a", [_Entry(title="Government announces new tax policy", link="https://a.example.com/1")]),
            _rss("feed-b", [_Entry(title="Government unveils new tax policy", link="https://b.example.com/1")]),
        ]
    )
    result = pipeline.run_ingestion_cycle()
    assert [r.url for r in result.inserted_records] == ["https://a.example.com/1"]


def test_failed_feed_is_isolated() -> None:
    pipeline = _build_pipeline(
        [
            _rss("feed-a", [_Entry(title="Cricket team wins championship final", link="https://a.example.com/1")]),
            _rss("feed-broken", fail=True),
            _rss("feed-c", [_Entry(title="Government announces new tax policy", link="https://c.example.com/1")]),
        ]
    )
    result = pipeline.run_ingestion_cycle()
    assert result.inserted_count == 2
    reports = {r.name: r for r in result.source_reports}
    assert reports["feed-broken"].ok is False
    assert reports["feed-broken"].error == "source_error:network:connection refused"
    assert reports["feed-a"].item_count == 1
    assert [r.name for r in result.source_reports] == ["feed-a", "feed-broken", "feed-c"]


def test_unexpected_adapter_exception_is_isolated() -> None:
    class _Crashing(SourceAdapter):
        name = "crashing"
        kind = "static"

        def produce_items(self) -> list[RawItem]:
            raise KeyError("boom")

    ok = _StaticAdapter("ok", [RawItem(source="ok", created_by="scrape", title="Fresh story", url="https://ok.example.com/1")])
    result = _build_pipeline([_Crashing(), ok]).run_ingestion_cycle()
    assert result.inserted_count == 1
    assert result.source_reports[0].ok is False
    assert result.source_reports[0].error.startswith("source_error:KeyError")


def test_malformed_item_is_skipped() -> None:
    adapter = _StaticAdapter(
        "static",
        [
            RawItem(source="static", created_by="scrape", title="No url"),
            RawItem(source="static", created_by="scrape", title="Has url", url="https://s.example.com/1"),
        ],
    )
    result = _build_pipeline([adapter]).run_ingestion_cycle()
    assert [r.title for r in result.inserted_records] == ["Has url"]


def test_repeated_url_in_batch_is_inserted_once() -> None:
    adapter = _StaticAdapter(
        "static",
        [
            RawItem(source="static", created_by="scrape", title="Alpha story", url="https://s.example.com/1"),
            RawItem(source="static", created_by="scrape", title="Completely different words", url="https://s.example.com/1"),
        ],
    )
    result = _build_pipeline([adapter]).run_ingestion_cycle()
    assert result.inserted_count == 1


def test_storage_failure_returns_partial_result() -> None:
    adapter = _StaticAdapter(
        "static",
        [
            RawItem(source="static", created_by="scrape", title="First story", url="https://s.example.com/1"),
            RawItem(source="static", created_by="scrape", title="Second unrelated item", url="https://s.example.com/2"),
            RawItem(source="static", created_by="scrape", title="Third one here", url="https://s.example.com/3"),
        ],
    )
    result = _build_pipeline([adapter], _FailingStore(fail_after=1)).run_ingestion_cycle()
    assert result.inserted_count == 1
    assert result.error == "storage_error:disk full"
    assert result.to_dict()["error"] == "storage_error:disk full"


def test_overlapping_cycle_is_skipped() -> None:
    started = threading.Event()
    release = threading.Event()

    class _Slow(SourceAdapter):
        name = "slow"
        kind = "static"

        def produce_items(self) -> list[RawItem]:
            started.set()
            release.wait(5)
            return []

    pipeline = _build_pipeline([_Slow()])
    results = []
    worker = threading.Thread(target=lambda: results.append(pipeline.run_ingestion_cycle()))
    worker.start()
    assert started.wait(5)
    skipped = pipeline.run_ingestion_cycle()
    release.set()
    worker.join(5)
    assert skipped.skipped is True
    assert skipped.inserted_count == 0
    assert results[0].skipped is False


def test_ingest_from_account() -> None:
    posts = [
        RawItem(source="@sakshinews", created_by="twitter", title="Rains in Vizag", url="https://x.com/s/status/1"),
        RawItem(source="@sakshinews", created_by="twitter", title="Cricket match in Vizag", url="https://x.com/s/status/2"),
    ]
    seen: list[tuple[str, int]] = []

    def _factory(handle: str, max_items: int) -> SourceAdapter:
        seen.append((handle, max_items))
        return _StaticAdapter(f"@{handle}", posts)

    pipeline = _build_pipeline([], social_adapter_factory=_factory)
    result = pipeline.ingest_from_account("sakshinews", 5)
    assert seen == [("sakshinews", 5)]
    assert result.fetched_count == 2
    assert result.inserted_count == 2
    assert all(r.language == "te" for r in result.inserted_records)
    assert result.to_dict()["insertedCount"] == 2


def test_ingest_from_account_source_failure_is_reported() -> None:
    class _Broken(SourceAdapter):
        name = "@gone"
        kind = "social"

        def produce_items(self) -> list[RawItem]:
            raise SourceError("timeout", "@gone", "timeline never rendered")

    pipeline = _build_pipeline([], social_adapter_factory=lambda _h, _n: _Broken())
    result = pipeline.ingest_from_account("gone", 3)
    assert result.fetched_count == 0
    assert result.inserted_count == 0
    assert result.error == "source_error:timeout:timeline never rendered"


def test_cycle_includes_configured_social_accounts() -> None:
    adapter = _StaticAdapter("@acct", [RawItem(source="@acct", created_by="twitter", title="Post", url="https://x.com/a/1")])
    pipeline = _build_pipeline([], social_adapter_factory=lambda _h, _n: adapter, social_accounts=["acct"])
    result = pipeline.run_ingestion_cycle()
    assert adapter.calls == 1
    assert result.inserted_count == 1


def test_scrape_page_uses_page_adapter() -> None:
    adapter = _StaticAdapter(
        "www.example.com",
        [RawItem(source="www.example.com", created_by="scrape", title="Scraped", url="https://www.example.com/s/1")],
    )
    pipeline = _build_pipeline([], page_adapter_factory=lambda _url: adapter)
    result = pipeline.scrape_page("https://www.example.com/trending")
    assert result.inserted_count == 1
    assert result.source_reports[0].name == "www.example.com"


def test_item_with_unparseable_url_is_skipped() -> None:
    adapter = _StaticAdapter(
        "static",
        [
            RawItem(source="static", created_by="scrape", title="Broken link", url="http://[broken/item", image_url="/img.png"),
            RawItem(source="static", created_by="scrape", title="Good link", url="https://ok.example.com/1"),
        ],
    )
    result = _build_pipeline([adapter]).run_ingestion_cycle()
    assert [r.url for r in result.inserted_records] == ["https://ok.example.com/1"]
    assert result.error == ""


def test_unexpected_item_error_is_logged_and_skipped(caplog) -> None:
    def _explode(html: str) -> str:
        if "boom" in html:
            raise RuntimeError("bad markup")
        return ""

    store = InMemoryArticleStore(now_provider=lambda: _NOW)
    pipeline = IngestionPipeline(
        adapters=[
            _StaticAdapter(
                "static",
                [
                    RawItem(source="static", created_by="scrape", title="First", url="https://s.example.com/1", body="<img boom>"),
                    RawItem(source="static", created_by="scrape", title="Second", url="https://s.example.com/2"),
                ],
            )
        ],
        normalizer=ContentNormalizer(
            default_image_url="https://img.example.com/default.png",
            telugu_source_names=[],
            default_region="AP",
            now_provider=lambda: _NOW,
            find_first_img_func=_explode,
        ),
        classifier=TopicClassifier(category_keywords={}),
        gate=DuplicateGate(store=store, lookback_hours=12, threshold=0.6, now_provider=lambda: _NOW),
        store=store,
    )
    result = pipeline.run_ingestion_cycle()
    assert [r.url for r in result.inserted_records] == ["https://s.example.com/2"]
    assert "failed to normalize" in caplog.text
