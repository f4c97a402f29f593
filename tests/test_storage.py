from __future__ import annotations

import datetime

import pytest

from news_ingest.errors import DuplicateUrlError
from news_ingest.models import ArticleRecord, MediaItem
from news_ingest.storage import ArticleStore, InMemoryArticleStore, SqliteArticleStore

_NOW = datetime.datetime(2024, 3, 1, 12, 0, tzinfo=datetime.timezone.utc)


def _record(title: str = "Budget passed", *, url: str = "https://example.com/a", language: str = "en", hours_ago: float = 1) -> ArticleRecord:
    return ArticleRecord(
        title=title,
        url=url,
        source="Example",
        language=language,
        published_at=_NOW - datetime.timedelta(hours=hours_ago),
        image_url="https://img.example.com/x.png",
        media=(MediaItem(kind="image", src="https://img.example.com/x.png"), MediaItem(kind="video", src="https://v.example.com/1.mp4")),
        created_by="rss",
        summary="summary",
        body="body",
        categories={"politics": 2},
        top_category="politics",
    )


@pytest.fixture(params=["memory", "sqlite"])
def store(request: pytest.FixtureRequest, tmp_path) -> ArticleStore:
    if request.param == "memory":
        return InMemoryArticleStore(now_provider=lambda: _NOW)
    return SqliteArticleStore(tmp_path / "articles.db", now_provider=lambda: _NOW)


def test_upsert_if_absent_is_idempotent(store: ArticleStore) -> None:
    assert store.upsert_if_absent(_record()) is True
    assert store.upsert_if_absent(_record(title="Changed title")) is False
    assert store.count() == 1
    stored = store.get("https://example.com/a")
    assert stored is not None
    assert stored.title == "Budget passed"


def test_record_round_trips_through_store(store: ArticleStore) -> None:
    store.upsert_if_absent(_record())
    stored = store.get("https://example.com/a")
    assert stored is not None
    assert stored.published_at == _NOW - datetime.timedelta(hours=1)
    assert stored.media[1] == MediaItem(kind="video", src="https://v.example.com/1.mp4")
    assert stored.categories == {"politics": 2}
    assert stored.top_category == "politics"
    assert stored.created_at == _NOW


def test_find_recent_titles_filters_window_and_language(store: ArticleStore) -> None:
    store.upsert_if_absent(_record("recent en", url="https://example.com/1", hours_ago=2))
    store.upsert_if_absent(_record("old en", url="https://example.com/2", hours_ago=20))
    store.upsert_if_absent(_record("recent te", url="https://example.com/3", language="te", hours_ago=2))
    titles = store.find_recent_titles(_NOW - datetime.timedelta(hours=12), "en")
    assert titles == ["recent en"]


def test_update_and_delete(store: ArticleStore) -> None:
    store.upsert_if_absent(_record())
    updated = store.update("https://example.com/a", {"title": "Edited", "created_by": "manual"})
    assert updated is not None
    assert store.get("https://example.com/a").title == "Edited"
    assert store.update("https://example.com/missing", {"title": "x"}) is None
    assert store.delete("https://example.com/a") is True
    assert store.delete("https://example.com/a") is False
    assert store.count() == 0


def test_update_to_existing_url_is_rejected(store: ArticleStore) -> None:
    store.upsert_if_absent(_record(url="https://example.com/1"))
    store.upsert_if_absent(_record(url="https://example.com/2"))
    with pytest.raises(DuplicateUrlError):
        store.update("https://example.com/2", {"url": "https://example.com/1"})


def test_document_shape_uses_camel_case() -> None:
    doc = _record().to_document()
    assert doc["imageUrl"] == "https://img.example.com/x.png"
    assert doc["topCategory"] == "politics"
    assert doc["media"][1] == {"type": "video", "src": "https://v.example.com/1.mp4"}
    assert ArticleRecord.from_document(doc) == _record()
