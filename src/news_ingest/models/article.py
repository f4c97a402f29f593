from __future__ import annotations

import datetime
from dataclasses import dataclass, field, replace
from typing import Any, Literal, NotRequired, TypedDict

from news_ingest.core.constants import AUTOMATED_IS_PUBLISHED_DEFAULT, DEFAULT_REGION
from news_ingest.utils.common import parse_datetime_utc

MediaKind = Literal["image", "video"]


@dataclass(frozen=True)
class MediaItem:
    kind: MediaKind
    src: str

    def to_dict(self) -> dict[str, str]:
        return {"type": self.kind, "src": self.src}


@dataclass(frozen=True)
class RawItem:
    """Source-shaped article data, before normalization."""

    source: str
    created_by: str
    title: str = ""
    url: str = ""
    summary: str = ""
    description: str = ""
    body: str = ""
    content: str = ""
    published_at: Any = None
    enclosure_url: str = ""
    image_url: str = ""
    media_group: tuple[str, ...] = ()
    media: tuple[MediaItem, ...] = ()
    region: str = ""


class MediaDocument(TypedDict):
    type: str
    src: str


class ArticleDocument(TypedDict):
    title: str
    summary: str
    body: str
    language: str
    region: str
    source: str
    url: str
    imageUrl: str
    media: list[MediaDocument]
    publishedAt: str
    categories: dict[str, int]
    topCategory: NotRequired[str]
    createdBy: str
    isPublished: bool
    blocked: bool
    createdAt: NotRequired[str]
    updatedAt: NotRequired[str]


def _iso(dt: datetime.datetime | None) -> str:
    return dt.isoformat() if dt is not None else ""


@dataclass(frozen=True)
class ArticleRecord:
    title: str
    url: str
    source: str
    language: str
    published_at: datetime.datetime
    image_url: str
    media: tuple[MediaItem, ...]
    created_by: str
    summary: str = ""
    body: str = ""
    region: str = DEFAULT_REGION
    categories: dict[str, int] = field(default_factory=dict)
    top_category: str | None = None
    is_published: bool = AUTOMATED_IS_PUBLISHED_DEFAULT
    blocked: bool = False
    created_at: datetime.datetime | None = None
    updated_at: datetime.datetime | None = None

    def with_classification(self, categories: dict[str, int], top_category: str | None) -> "ArticleRecord":
        return replace(self, categories=dict(categories), top_category=top_category)

    def with_timestamps(
        self,
        *,
        created_at: datetime.datetime | None = None,
        updated_at: datetime.datetime | None = None,
    ) -> "ArticleRecord":
        return replace(
            self,
            created_at=created_at or self.created_at,
            updated_at=updated_at or self.updated_at,
        )

    def to_document(self) -> ArticleDocument:
        doc: ArticleDocument = {
            "title": self.title,
            "summary": self.summary,
            "body": self.body,
            "language": self.language,
            "region": self.region,
            "source": self.source,
            "url": self.url,
            "imageUrl": self.image_url,
            "media": [{"type": m.kind, "src": m.src} for m in self.media],
            "publishedAt": _iso(self.published_at),
            "categories": dict(self.categories),
            "createdBy": self.created_by,
            "isPublished": self.is_published,
            "blocked": self.blocked,
        }
        if self.top_category:
            doc["topCategory"] = self.top_category
        if self.created_at is not None:
            doc["createdAt"] = _iso(self.created_at)
        if self.updated_at is not None:
            doc["updatedAt"] = _iso(self.updated_at)
        return doc

    @classmethod
    def from_document(cls, doc: dict[str, Any]) -> "ArticleRecord":
        media = tuple(
            MediaItem(kind="video" if m.get("type") == "video" else "image", src=str(m.get("src") or ""))
            for m in (doc.get("media") or [])
            if m.get("src")
        )
        published = parse_datetime_utc(doc.get("publishedAt"))
        if published is None:
            raise ValueError(f"document without publishedAt: {doc.get('url')!r}")
        return cls(
            title=str(doc.get("title") or ""),
            url=str(doc.get("url") or ""),
            source=str(doc.get("source") or ""),
            language=str(doc.get("language") or ""),
            published_at=published,
            image_url=str(doc.get("imageUrl") or ""),
            media=media,
            created_by=str(doc.get("createdBy") or ""),
            summary=str(doc.get("summary") or ""),
            body=str(doc.get("body") or ""),
            region=str(doc.get("region") or DEFAULT_REGION),
            categories={str(k): int(v) for k, v in (doc.get("categories") or {}).items()},
            top_category=doc.get("topCategory") or None,
            is_published=bool(doc.get("isPublished", AUTOMATED_IS_PUBLISHED_DEFAULT)),
            blocked=bool(doc.get("blocked", False)),
            created_at=parse_datetime_utc(doc.get("createdAt")),
            updated_at=parse_datetime_utc(doc.get("updatedAt")),
        )


@dataclass(frozen=True)
class SourceReport:
    name: str
    kind: str
    ok: bool
    item_count: int = 0
    error: str = ""


@dataclass(frozen=True)
class CycleResult:
    inserted_records: tuple[ArticleRecord, ...] = ()
    source_reports: tuple[SourceReport, ...] = ()
    error: str = ""
    skipped: bool = False

    @property
    def inserted_count(self) -> int:
        return len(self.inserted_records)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "insertedCount": self.inserted_count,
            "insertedRecords": [r.to_document() for r in self.inserted_records],
        }
        if self.error:
            out["error"] = self.error
        if self.skipped:
            out["skipped"] = True
        return out


@dataclass(frozen=True)
class AccountIngestResult:
    handle: str
    fetched_count: int
    inserted_records: tuple[ArticleRecord, ...] = ()
    error: str = ""

    @property
    def inserted_count(self) -> int:
        return len(self.inserted_records)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "fetchedCount": self.fetched_count,
            "insertedCount": self.inserted_count,
            "insertedRecords": [r.to_document() for r in self.inserted_records],
        }
        if self.error:
            out["error"] = self.error
        return out
