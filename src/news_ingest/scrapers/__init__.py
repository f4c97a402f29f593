"""Source adapters and fetch helpers."""

from .base import SourceAdapter
from .headlines import HeadlineApiAdapter
from .html_scrape import HtmlScrapeAdapter, SelectorSet
from .rss import RssFeedAdapter
from .social import SocialTimelineAdapter

__all__ = [
    "HeadlineApiAdapter",
    "HtmlScrapeAdapter",
    "RssFeedAdapter",
    "SelectorSet",
    "SocialTimelineAdapter",
    "SourceAdapter",
]
