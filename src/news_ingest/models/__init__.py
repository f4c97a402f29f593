"""Typed models for raw items, stored articles and cycle results."""

from .article import (
    AccountIngestResult,
    ArticleDocument,
    ArticleRecord,
    CycleResult,
    MediaItem,
    RawItem,
    SourceReport,
)

__all__ = [
    "AccountIngestResult",
    "ArticleDocument",
    "ArticleRecord",
    "CycleResult",
    "MediaItem",
    "RawItem",
    "SourceReport",
]
