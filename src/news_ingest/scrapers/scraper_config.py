from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Tuple

from news_ingest.core.config import _env_bool, _env_int


DEFAULT_USER_AGENTS: Tuple[str, ...] = (
    # Chrome 121 (macOS)
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/121.0.0.0 Safari/537.36",
    # Chrome 121 (Windows)
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/121.0.0.0 Safari/537.36",
    # Safari 17 (macOS)
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 13_6_4) "
    "AppleWebKit/605.1.15 (KHTML, like Gecko) Version/17.2 Safari/605.1.15",
)


@dataclass(frozen=True)
class ScraperConfig:
    request_timeout_sec: int = _env_int("SCRAPER_REQUEST_TIMEOUT_SEC", 15)
    navigation_timeout_sec: int = _env_int("SCRAPER_NAV_TIMEOUT_SEC", 30)
    timeline_wait_sec: int = _env_int("SCRAPER_TIMELINE_WAIT_SEC", 20)
    interstitial_wait_ms: int = _env_int("SCRAPER_INTERSTITIAL_WAIT_MS", 1500)
    scroll_rounds: int = _env_int("SCRAPER_SCROLL_ROUNDS", 4)
    scroll_pause_ms: int = _env_int("SCRAPER_SCROLL_PAUSE_MS", 1200)
    browser_locale: str = os.getenv("SCRAPER_BROWSER_LOCALE", "en-US")
    headless: bool = _env_bool("SCRAPER_HEADLESS", True)
    social_base_url: str = os.getenv("SOCIAL_BASE_URL", "https://x.com")
    block_resource_types: Tuple[str, ...] = ("font", "media")
    user_agents: Tuple[str, ...] = field(default_factory=lambda: DEFAULT_USER_AGENTS)
