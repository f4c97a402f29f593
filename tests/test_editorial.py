from __future__ import annotations

import datetime

import pytest

from news_ingest.errors import DuplicateUrlError
from news_ingest.processing.classifier import TopicClassifier
from news_ingest.processing.editorial import EditorialService
from news_ingest.processing.normalizer import ContentNormalizer
from news_ingest.storage import InMemoryArticleStore

_NOW = datetime.datetime(2024, 3, 1, 12, 0, tzinfo=datetime.timezone.utc)
_LATER = _NOW + datetime.timedelta(hours=2)


def _build_service(store: InMemoryArticleStore) -> EditorialService:
    return EditorialService(
        store=store,
        normalizer=ContentNormalizer(
            default_image_url="https://img.example.com/default.png",
            telugu_source_names=["eenadu"],
            default_region="AP",
            now_provider=lambda: _NOW,
        ),
        classifier=TopicClassifier(category_keywords={"politics": ["minister"], "sports": ["cricket"]}),
        now_provider=lambda: _LATER,
    )


def test_create_manual_defaults_to_unpublished() -> None:
    store = InMemoryArticleStore(now_provider=lambda: _NOW)
    record = _build_service(store).create_manual(
        {"title": "Minister visits Guntur", "url": "https://desk.example.com/1", "body": "Minister speaks"}
    )
    assert record.created_by == "manual"
    assert record.is_published is False
    assert record.top_category == "politics"
    assert record.created_at == _NOW
    assert store.count() == 1


def test_create_manual_rejects_existing_url() -> None:
    store = InMemoryArticleStore()
    service = _build_service(store)
    service.create_manual({"title": "First", "url": "https://desk.example.com/1"})
    with pytest.raises(DuplicateUrlError):
        service.create_manual({"title": "Second", "url": "https://desk.example.com/1"})


def test_update_forces_manual_and_reclassifies() -> None:
    store = InMemoryArticleStore(now_provider=lambda: _NOW)
    service = _build_service(store)
    service.create_manual({"title": "Minister visits Guntur", "url": "https://desk.example.com/1", "isPublished": True})
    store.update("https://desk.example.com/1", {"created_by": "rss"})

    updated = service.update("https://desk.example.com/1", {"title": "Cricket final in Guntur", "unknownField": 1})
    assert updated is not None
    assert updated.created_by == "manual"
    assert updated.categories == {"sports": 1}
    assert updated.top_category == "sports"
    assert updated.updated_at == _LATER
    assert updated.is_published is True


def test_update_recomputes_language() -> None:
    store = InMemoryArticleStore()
    service = _build_service(store)
    service.create_manual({"title": "Local news", "url": "https://desk.example.com/1"})
    updated = service.update("https://desk.example.com/1", {"source": "Eenadu"})
    assert updated is not None
    assert updated.language == "te"


def test_update_missing_returns_none_and_remove() -> None:
    store = InMemoryArticleStore()
    service = _build_service(store)
    assert service.update("https://desk.example.com/missing", {"title": "x"}) is None
    service.create_manual({"title": "Temp", "url": "https://desk.example.com/1"})
    assert service.remove("https://desk.example.com/1") is True
    assert service.remove("https://desk.example.com/1") is False
