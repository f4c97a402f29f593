from __future__ import annotations

import json
import logging
import random
from typing import Any, Mapping, Optional

import feedparser
import requests

from news_ingest.errors import SourceError
from news_ingest.scrapers.scraper_config import DEFAULT_USER_AGENTS
from news_ingest.scrapers.scraper_utils import response_body_ok

logger = logging.getLogger(__name__)


def default_headers(user_agent: Optional[str] = None) -> dict[str, str]:
    return {
        "User-Agent": user_agent or random.choice(DEFAULT_USER_AGENTS),
        "Accept": (
            "text/html,application/xhtml+xml,application/xml;"
            "q=0.9,application/rss+xml,application/json;q=0.8,*/*;q=0.7"
        ),
        "Accept-Language": "en-US,en;q=0.9,te;q=0.8",
    }


def _get(
    url: str,
    *,
    source: str,
    timeout_sec: float,
    params: Optional[Mapping[str, Any]] = None,
    headers: Optional[Mapping[str, str]] = None,
    session: Optional[requests.Session] = None,
) -> requests.Response:
    merged = default_headers()
    if headers:
        merged.update(headers)
    getter = session.get if session is not None else requests.get
    try:
        response = getter(url, params=params, headers=merged, timeout=timeout_sec)
        response.raise_for_status()
        return response
    except requests.exceptions.Timeout as e:
        raise SourceError("timeout", source, str(e)) from e
    except requests.exceptions.HTTPError as e:
        status = e.response.status_code if e.response is not None else 0
        raise SourceError(f"http_{status}", source, str(e)) from e
    except requests.exceptions.RequestException as e:
        raise SourceError("network", source, str(e)) from e


def fetch_json(
    url: str,
    *,
    source: str,
    timeout_sec: float,
    params: Optional[Mapping[str, Any]] = None,
    headers: Optional[Mapping[str, str]] = None,
    session: Optional[requests.Session] = None,
) -> Any:
    response = _get(url, source=source, timeout_sec=timeout_sec, params=params, headers=headers, session=session)
    try:
        return response.json()
    except (json.JSONDecodeError, ValueError) as e:
        raise SourceError("parse", source, f"invalid json: {e}") from e


def fetch_feed(
    url: str,
    *,
    source: str,
    timeout_sec: float,
    session: Optional[requests.Session] = None,
) -> Any:
    """Download a feed with an explicit timeout and hand the bytes to feedparser."""
    response = _get(url, source=source, timeout_sec=timeout_sec, session=session)
    feed = feedparser.parse(response.content)
    entries = getattr(feed, "entries", None) or []
    if getattr(feed, "bozo", False) and not entries:
        reason = getattr(feed, "bozo_exception", None)
        raise SourceError("parse", source, str(reason or "unparseable feed"))
    return feed


def fetch_page(
    url: str,
    *,
    source: str,
    timeout_sec: float,
    headers: Optional[Mapping[str, str]] = None,
    session: Optional[requests.Session] = None,
) -> str:
    response = _get(url, source=source, timeout_sec=timeout_sec, headers=headers, session=session)
    ok, reason = response_body_ok(response.headers.get("Content-Type", ""), response.url or url)
    if not ok:
        raise SourceError("unsupported_content", source, reason)
    return response.text
