from __future__ import annotations

import logging
import random
from contextlib import contextmanager
from typing import Any, Iterator, Optional, Sequence

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError
from playwright.sync_api import sync_playwright

from news_ingest.errors import SourceError
from news_ingest.scrapers.scraper_config import ScraperConfig

logger = logging.getLogger(__name__)


class BrowserSession:
    """A single headless page. Use through `browser_session()` so it is always closed."""

    def __init__(self, config: ScraperConfig, source: str, log: Optional[logging.Logger] = None) -> None:
        self._config = config
        self._source = source
        self._log = log or logger
        self._pw = None
        self._browser = None
        self._context = None
        self._page = None

    def open(self) -> "BrowserSession":
        try:
            self._pw = sync_playwright().start()
            self._browser = self._pw.chromium.launch(headless=self._config.headless)
            self._context = self._browser.new_context(
                user_agent=random.choice(self._config.user_agents),
                locale=self._config.browser_locale,
                extra_http_headers=self._make_headers(),
                java_script_enabled=True,
            )
            self._context.route("**/*", self._route_filter)
            self._page = self._context.new_page()
            timeout_ms = max(1000, int(self._config.navigation_timeout_sec * 1000))
            self._page.set_default_timeout(timeout_ms)
            self._page.set_default_navigation_timeout(timeout_ms)
        except PlaywrightError as e:
            raise SourceError("browser", self._source, str(e)) from e
        return self

    def _make_headers(self) -> dict[str, str]:
        return {
            "Accept": (
                "text/html,application/xhtml+xml,application/xml;"
                "q=0.9,image/avif,image/webp,image/apng,*/*;q=0.8"
            ),
            "Accept-Language": "en-US,en;q=0.9,te;q=0.8",
            "DNT": "1",
            "Upgrade-Insecure-Requests": "1",
        }

    def _route_filter(self, route, request) -> None:
        if request.resource_type in set(self._config.block_resource_types):
            route.abort()
            return
        route.continue_()

    @property
    def page(self):
        if self._page is None:
            raise SourceError("browser", self._source, "session not open")
        return self._page

    def goto(self, url: str) -> None:
        try:
            self.page.goto(url, wait_until="domcontentloaded")
        except PlaywrightTimeoutError as e:
            raise SourceError("timeout", self._source, f"navigation: {url}") from e
        except PlaywrightError as e:
            raise SourceError("browser", self._source, str(e)) from e

    def wait_for(self, selector: str, timeout_sec: float) -> None:
        try:
            self.page.wait_for_selector(selector, timeout=max(1000, int(timeout_sec * 1000)))
        except PlaywrightTimeoutError as e:
            raise SourceError("timeout", self._source, f"waiting for {selector}") from e
        except PlaywrightError as e:
            raise SourceError("browser", self._source, str(e)) from e

    def wait(self, ms: int) -> None:
        if ms > 0:
            self.page.wait_for_timeout(ms)

    def dismiss(self, selectors: Sequence[str]) -> int:
        """Click away any visible prompt matching `selectors`. Never raises."""
        dismissed = 0
        for selector in selectors:
            try:
                handle = self.page.query_selector(selector)
                if handle is not None and handle.is_visible():
                    handle.click(timeout=2000)
                    dismissed += 1
            except PlaywrightError:
                self._log.debug("Interstitial not dismissable: %s", selector)
        return dismissed

    def scroll(self, rounds: int, pause_ms: int) -> None:
        for _ in range(max(0, rounds)):
            try:
                self.page.mouse.wheel(0, 2500)
            except PlaywrightError:
                self.page.evaluate("window.scrollBy(0, document.body.scrollHeight)")
            self.wait(pause_ms)

    def extract_all(self, selector: str, script: str) -> list[Any]:
        try:
            return list(self.page.eval_on_selector_all(selector, script) or [])
        except PlaywrightError as e:
            raise SourceError("browser", self._source, str(e)) from e

    def content(self) -> str:
        return self.page.content()

    def close(self) -> None:
        # each step closes independently so one failure does not leak the others
        for label, target, method in (
            ("page", self._page, "close"),
            ("context", self._context, "close"),
            ("browser", self._browser, "close"),
            ("playwright", self._pw, "stop"),
        ):
            if target is None:
                continue
            try:
                getattr(target, method)()
            except Exception as e:
                self._log.warning("Browser %s close failed (%s): %s", label, self._source, e)
        self._page = None
        self._context = None
        self._browser = None
        self._pw = None


@contextmanager
def browser_session(
    config: ScraperConfig,
    *,
    source: str,
    log: Optional[logging.Logger] = None,
) -> Iterator[BrowserSession]:
    session = BrowserSession(config, source, log)
    try:
        yield session.open()
    finally:
        session.close()


def render_page(url: str, *, config: ScraperConfig, source: str, settle_ms: int = 2000) -> str:
    """Full HTML of `url` after client-side rendering."""
    with browser_session(config, source=source) as session:
        session.goto(url)
        session.wait(settle_ms)
        return session.content()
