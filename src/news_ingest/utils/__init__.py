"""Shared text and time helpers."""

from news_ingest.utils.common import (
    clean_text,
    clean_text_ws,
    contains_telugu,
    ensure_utc,
    jaccard,
    parse_datetime_utc,
    strip_read_more,
    title_tokens,
    utc_now,
)

__all__ = [
    "clean_text",
    "clean_text_ws",
    "contains_telugu",
    "ensure_utc",
    "jaccard",
    "parse_datetime_utc",
    "strip_read_more",
    "title_tokens",
    "utc_now",
]
