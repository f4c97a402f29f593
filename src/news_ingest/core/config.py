from __future__ import annotations

import os
from pathlib import Path

try:
    from dotenv import load_dotenv
except Exception:  # pragma: no cover - optional dependency
    load_dotenv = None

from news_ingest.core import constants as C

REPO_ROOT = Path(__file__).resolve().parents[3]

if load_dotenv:
    load_dotenv(dotenv_path=REPO_ROOT / ".env")


def _env_str(name: str, default: str) -> str:
    raw = os.getenv(name, "").strip()
    return raw or default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    return raw in {"1", "true", "True", "yes", "YES"}


def _parse_csv_env(name: str) -> list[str]:
    raw = os.getenv(name, "").strip()
    if not raw:
        return []
    return [x.strip() for x in raw.split(",") if x.strip()]


def _parse_feed_pairs(name: str) -> list[dict[str, object]]:
    """`name|url` pairs separated by commas."""
    feeds: list[dict[str, object]] = []
    for pair in _parse_csv_env(name):
        if "|" in pair:
            feed_name, url = pair.split("|", 1)
        else:
            feed_name, url = "", pair
        if url.strip():
            feeds.append({"name": feed_name.strip(), "url": url.strip(), "limit": MAX_ENTRIES_PER_FEED})
    return feeds


# ==========================================
# Sources
# ==========================================

NEWSAPI_KEY = os.getenv("NEWSAPI_KEY", "").strip()
NEWSAPI_ENDPOINT = _env_str("NEWSAPI_ENDPOINT", "https://newsapi.org/v2/top-headlines")
NEWSAPI_COUNTRY = _env_str("NEWSAPI_COUNTRY", "in")
NEWSAPI_CATEGORY = _env_str("NEWSAPI_CATEGORY", "business")
NEWSAPI_PAGE_SIZE = _env_int("NEWSAPI_PAGE_SIZE", 50)

MAX_ENTRIES_PER_FEED = _env_int("MAX_ENTRIES_PER_FEED", 50)

RSS_SOURCES: list[dict[str, object]] = [
    {"name": "TOI", "url": "https://timesofindia.indiatimes.com/rssfeedstopstories.cms", "limit": MAX_ENTRIES_PER_FEED},
    {"name": "TOI India", "url": "https://timesofindia.indiatimes.com/rssfeeds/-2128936835.cms", "limit": MAX_ENTRIES_PER_FEED},
    {"name": "The Hindu", "url": "https://www.thehindu.com/news/national/feeder/default.rss", "limit": MAX_ENTRIES_PER_FEED},
] + _parse_feed_pairs("RSS_FEEDS_EXTRA")

SCRAPE_PAGES: list[dict[str, str]] = [
    {
        "name": "HindustanTimes",
        "url": "https://www.hindustantimes.com/trending",
        "item": "article",
        "title": "h2, h3",
        "link": "a[href]",
        "summary": "p",
        "image": "img",
    },
]

SOCIAL_ENABLED = _env_bool("SOCIAL_ENABLED", False)
SOCIAL_ACCOUNTS = _parse_csv_env("SOCIAL_ACCOUNTS")
SOCIAL_MAX_ITEMS = _env_int("SOCIAL_MAX_ITEMS", 10)

# ==========================================
# Normalization / classification / dedupe
# ==========================================

DEFAULT_REGION = _env_str("DEFAULT_REGION", C.DEFAULT_REGION)
DEFAULT_IMAGE_URL = _env_str("DEFAULT_IMAGE_URL", C.DEFAULT_IMAGE_URL)
_telugu_sources_env = _parse_csv_env("TELUGU_SOURCE_NAMES")
TELUGU_SOURCE_NAMES = tuple(_telugu_sources_env) if _telugu_sources_env else C.TELUGU_SOURCE_NAMES

DEDUPE_LOOKBACK_HOURS = _env_float("DEDUPE_LOOKBACK_HOURS", C.DEDUPE_LOOKBACK_HOURS)
TITLE_SIMILARITY_THRESHOLD = _env_float("TITLE_SIMILARITY_THRESHOLD", C.TITLE_SIMILARITY_THRESHOLD)

# ==========================================
# Scheduling / storage
# ==========================================

INGEST_INTERVAL_MINUTES = max(1, _env_int("INGEST_INTERVAL_MINUTES", 10))
INGEST_RUN_ON_START = _env_bool("INGEST_RUN_ON_START", True)
INGEST_MAX_WORKERS = max(1, _env_int("INGEST_MAX_WORKERS", 6))

DATA_DIR = Path(os.getenv("DATA_DIR", str(REPO_ROOT / "data")))
DATABASE_PATH = os.getenv("DATABASE_PATH", str(DATA_DIR / "articles.db"))
STORE_BACKEND = (os.getenv("STORE_BACKEND", "sqlite") or "sqlite").strip().lower()
if STORE_BACKEND not in {"sqlite", "memory"}:
    STORE_BACKEND = "sqlite"
