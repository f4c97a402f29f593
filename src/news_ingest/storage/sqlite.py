from __future__ import annotations

import datetime
import json
import logging
import sqlite3
import threading
import time
from contextlib import contextmanager
from dataclasses import replace
from pathlib import Path
from typing import Any, Iterator

from news_ingest.errors import DuplicateUrlError, StorageError
from news_ingest.models import ArticleRecord, MediaItem
from news_ingest.storage.base import ArticleStore
from news_ingest.utils.common import ensure_utc, parse_datetime_utc, utc_now

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS articles (
    url TEXT PRIMARY KEY,
    title TEXT NOT NULL,
    summary TEXT NOT NULL DEFAULT '',
    body TEXT NOT NULL DEFAULT '',
    language TEXT NOT NULL,
    region TEXT NOT NULL,
    source TEXT NOT NULL DEFAULT '',
    image_url TEXT NOT NULL,
    media TEXT NOT NULL DEFAULT '[]',
    published_at TEXT NOT NULL,
    categories TEXT NOT NULL DEFAULT '{}',
    top_category TEXT,
    created_by TEXT NOT NULL,
    is_published INTEGER NOT NULL DEFAULT 1,
    blocked INTEGER NOT NULL DEFAULT 0,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_articles_lang_published ON articles(language, published_at);
"""

_COLUMNS = (
    "url",
    "title",
    "summary",
    "body",
    "language",
    "region",
    "source",
    "image_url",
    "media",
    "published_at",
    "categories",
    "top_category",
    "created_by",
    "is_published",
    "blocked",
    "created_at",
    "updated_at",
)


def _to_db_ts(dt: datetime.datetime) -> str:
    # fixed width so lexical order matches time order
    return ensure_utc(dt).strftime("%Y-%m-%dT%H:%M:%S.%f+00:00")


def _record_to_row(record: ArticleRecord) -> tuple[Any, ...]:
    return (
        record.url,
        record.title,
        record.summary,
        record.body,
        record.language,
        record.region,
        record.source,
        record.image_url,
        json.dumps([m.to_dict() for m in record.media], ensure_ascii=False),
        _to_db_ts(record.published_at),
        json.dumps(record.categories, ensure_ascii=False),
        record.top_category,
        record.created_by,
        int(record.is_published),
        int(record.blocked),
        _to_db_ts(record.created_at or utc_now()),
        _to_db_ts(record.updated_at or record.created_at or utc_now()),
    )


def _row_to_record(row: sqlite3.Row) -> ArticleRecord:
    media = tuple(
        MediaItem(kind="video" if m.get("type") == "video" else "image", src=m.get("src", ""))
        for m in json.loads(row["media"] or "[]")
    )
    return ArticleRecord(
        title=row["title"],
        url=row["url"],
        source=row["source"],
        language=row["language"],
        published_at=parse_datetime_utc(row["published_at"]) or utc_now(),
        image_url=row["image_url"],
        media=media,
        created_by=row["created_by"],
        summary=row["summary"],
        body=row["body"],
        region=row["region"],
        categories={k: int(v) for k, v in json.loads(row["categories"] or "{}").items()},
        top_category=row["top_category"],
        is_published=bool(row["is_published"]),
        blocked=bool(row["blocked"]),
        created_at=parse_datetime_utc(row["created_at"]),
        updated_at=parse_datetime_utc(row["updated_at"]),
    )


class SqliteArticleStore(ArticleStore):
    """SQLite-backed store; `url` is the primary key."""

    def __init__(
        self,
        db_path: str | Path,
        *,
        now_provider=utc_now,
        max_retries: int = 3,
        retry_delay: float = 0.5,
    ) -> None:
        self.db_path = str(db_path)
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self._now = now_provider
        self._write_lock = threading.Lock()
        if self.db_path != ":memory:":
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        self._init_schema()

    def _connect(self) -> sqlite3.Connection:
        last_error: Exception | None = None
        for attempt in range(self.max_retries):
            try:
                conn = sqlite3.connect(self.db_path, timeout=30.0, check_same_thread=False)
                conn.row_factory = sqlite3.Row
                conn.execute("PRAGMA journal_mode=WAL;")
                conn.execute("PRAGMA synchronous=NORMAL;")
                return conn
            except sqlite3.OperationalError as e:
                last_error = e
                if "database is locked" in str(e) and attempt < self.max_retries - 1:
                    logger.warning("Database locked, retrying in %ss (attempt %s)", self.retry_delay, attempt + 1)
                    time.sleep(self.retry_delay)
                    continue
                break
        raise StorageError(f"Database connection failed: {last_error}")

    @contextmanager
    def get_connection(self) -> Iterator[sqlite3.Connection]:
        conn = self._connect()
        try:
            yield conn
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            raise StorageError(f"Database error: {e}") from e
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _init_schema(self) -> None:
        with self.get_connection() as conn:
            conn.executescript(_SCHEMA)

    def upsert_if_absent(self, record: ArticleRecord) -> bool:
        now = self._now()
        row = _record_to_row(record.with_timestamps(created_at=now, updated_at=now))
        placeholders = ", ".join("?" for _ in _COLUMNS)
        sql = (
            f"INSERT INTO articles ({', '.join(_COLUMNS)}) VALUES ({placeholders}) "
            "ON CONFLICT(url) DO NOTHING"
        )
        with self._write_lock, self.get_connection() as conn:
            cur = conn.execute(sql, row)
            return cur.rowcount == 1

    def find_recent_titles(self, window_start: datetime.datetime, language: str) -> list[str]:
        with self.get_connection() as conn:
            rows = conn.execute(
                "SELECT title FROM articles WHERE language = ? AND published_at >= ? ORDER BY published_at DESC",
                (language, _to_db_ts(window_start)),
            ).fetchall()
        return [row["title"] for row in rows]

    def get(self, url: str) -> ArticleRecord | None:
        with self.get_connection() as conn:
            row = conn.execute("SELECT * FROM articles WHERE url = ?", (url,)).fetchone()
        return _row_to_record(row) if row is not None else None

    def update(self, url: str, changes: dict[str, Any]) -> ArticleRecord | None:
        with self._write_lock:
            current = self.get(url)
            if current is None:
                return None
            updated = replace(current, **changes)
            assignments = ", ".join(f"{col} = ?" for col in _COLUMNS)
            try:
                with self.get_connection() as conn:
                    conn.execute(
                        f"UPDATE articles SET {assignments} WHERE url = ?",
                        (*_record_to_row(updated), url),
                    )
            except StorageError as e:
                if isinstance(e.__cause__, sqlite3.IntegrityError):
                    raise DuplicateUrlError(f"url already stored: {updated.url}") from e
                raise
            return updated

    def delete(self, url: str) -> bool:
        with self._write_lock, self.get_connection() as conn:
            cur = conn.execute("DELETE FROM articles WHERE url = ?", (url,))
            return cur.rowcount > 0

    def count(self) -> int:
        with self.get_connection() as conn:
            row = conn.execute("SELECT COUNT(*) AS n FROM articles").fetchone()
        return int(row["n"])
