from __future__ import annotations

import datetime
import email.utils
import html
import re
import time
from typing import Any

_WS_RE = re.compile(r"\s+")
_TAG_RE = re.compile(r"<[^>]+>")
_BLOCK_TAG_RE = re.compile(r"(?i)<\s*(?:br|/p|/div|/li|/h[1-6])\b[^>]*>")
_CONTROL_RE = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F]")
_TELUGU_RE = re.compile(r"[\u0C00-\u0C7F]")

# NewsAPI truncates content as "... [+1234 chars]"; feeds append "Read more" links or "[…]".
_READ_MORE_PATTERNS = (
    re.compile(r"\s*(?:…|\.\.\.)?\s*\[\+\d+\s*chars?\]\s*$", re.IGNORECASE),
    re.compile(r"\s*\[(?:…|\.\.\.|&#8230;)\]\s*$"),
    re.compile(r"\s*(?:…|\.\.\.)?\s*(?:read more|continue reading|read the full story|click here to read more)\s*(?:»|→|>>)?\s*$", re.IGNORECASE),
    re.compile(r"\s*(?:…|\.\.\.)?\s*(?:ఇంకా చదవండి|మరింత చదవండి)\s*$"),
)


def clean_text(s: str) -> str:
    """Unescape HTML entities, drop tags and collapse whitespace."""
    if not s:
        return ""
    s = html.unescape(s)
    s = s.replace("\u00a0", " ")
    s = _BLOCK_TAG_RE.sub(" ", s)
    s = _TAG_RE.sub("", s)
    s = _CONTROL_RE.sub(" ", s)
    return _WS_RE.sub(" ", s).strip()


def clean_text_ws(text: str) -> str:
    return _WS_RE.sub(" ", (text or "").strip())


def strip_read_more(text: str) -> str:
    if not text:
        return ""
    out = text
    # placeholders can stack ("… [+120 chars]" after "Read more")
    changed = True
    while changed:
        changed = False
        for pattern in _READ_MORE_PATTERNS:
            new = pattern.sub("", out)
            if new != out:
                out = new
                changed = True
    return out.strip()


def contains_telugu(text: str) -> bool:
    return bool(text) and bool(_TELUGU_RE.search(text))


def utc_now() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


def ensure_utc(dt: datetime.datetime) -> datetime.datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=datetime.timezone.utc)
    return dt.astimezone(datetime.timezone.utc)


def parse_datetime_utc(value: Any, *, default_tz: datetime.tzinfo | None = None) -> datetime.datetime | None:
    """Parse ISO-8601, RFC-822 strings, struct_time or datetime into aware UTC."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime.datetime):
        dt = value
    elif isinstance(value, time.struct_time):
        dt = datetime.datetime(*value[:6], tzinfo=datetime.timezone.utc)
    else:
        raw = str(value).strip()
        if not raw:
            return None
        try:
            dt = datetime.datetime.fromisoformat(raw.replace("Z", "+00:00"))
        except ValueError:
            try:
                dt = email.utils.parsedate_to_datetime(raw)
            except (TypeError, ValueError):
                return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=default_tz or datetime.timezone.utc)
    return dt.astimezone(datetime.timezone.utc)


def title_tokens(title: str) -> set[str]:
    return {tok for tok in (title or "").casefold().split() if tok}


def jaccard(a: set[str], b: set[str]) -> float:
    if not a or not b:
        return 0.0
    return len(a & b) / len(a | b)
