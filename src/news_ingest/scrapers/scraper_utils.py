from __future__ import annotations

from typing import Iterable, Sequence
from urllib.parse import urljoin, urlparse

from bs4 import BeautifulSoup

from news_ingest.core.constants import IMG_SRC_ATTRS
from news_ingest.utils.common import clean_text_ws

_MEDIA_EXTENSIONS = (
    ".png",
    ".jpg",
    ".jpeg",
    ".gif",
    ".webp",
    ".svg",
    ".ico",
    ".js",
    ".css",
    ".mp4",
    ".webm",
    ".mp3",
    ".pdf",
)

# src values that stand in for a lazy-loaded image
_PLACEHOLDER_SRC_PREFIXES = ("data:",)


def normalize_url(base: str, href: str) -> str:
    return urljoin(base, href)


def is_http_url(url: str) -> bool:
    try:
        parsed = urlparse(url or "")
    except Exception:
        return False
    return parsed.scheme in {"http", "https"} and bool(parsed.netloc)


def is_probably_media_url(url: str) -> bool:
    try:
        parsed = urlparse(url)
    except Exception:
        return False
    path = (parsed.path or "").lower()
    return any(path.endswith(ext) for ext in _MEDIA_EXTENSIONS)


def is_textual_content_type(content_type: str) -> bool:
    ct = (content_type or "").lower()
    if not ct:
        return True
    if any(x in ct for x in ["text/javascript", "application/javascript", "text/css"]):
        return False
    return any(
        x in ct
        for x in ["text/", "application/json", "application/xml", "application/rss+xml", "application/atom+xml", "application/xhtml+xml"]
    )


def response_body_ok(content_type: str, url: str) -> tuple[bool, str]:
    if content_type and not is_textual_content_type(content_type):
        return False, f"non_textual_content_type:{content_type}"
    if is_probably_media_url(url):
        return False, "media_url_detected"
    return True, ""


def img_src(tag, attrs: Sequence[str] = IMG_SRC_ATTRS) -> str:
    """First usable source attribute of an <img>, skipping data: placeholders."""
    for attr in attrs:
        value = (tag.get(attr) or "").strip()
        if value and not value.startswith(_PLACEHOLDER_SRC_PREFIXES):
            return value
    return ""


def find_first_img(html: str, attrs: Sequence[str] = IMG_SRC_ATTRS) -> str:
    if not html or "<img" not in html.lower():
        return ""
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup.find_all("img"):
        src = img_src(tag, attrs)
        if src:
            return src
    return ""


def select_text(node, selector: str) -> str:
    if not selector:
        return ""
    found = node.select_one(selector)
    if found is None:
        return ""
    return clean_text_ws(found.get_text(" ", strip=True))


def dedupe_keep_order(values: Iterable[str]) -> list[str]:
    seen = set()
    uniq: list[str] = []
    for v in values:
        if not v or v in seen:
            continue
        seen.add(v)
        uniq.append(v)
    return uniq
