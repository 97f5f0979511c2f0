"""Playwright wrapper used to render directory pages."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from bs4 import BeautifulSoup, Tag
from playwright.sync_api import sync_playwright

from houzz_harvester.core.config import Settings, get_settings

logger = logging.getLogger(__name__)

LAUNCH_ARGS = (
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-blink-features=AutomationControlled",
)


@dataclass
class RenderedPage:
    """HTML snapshot of a rendered page, queried with BeautifulSoup."""

    url: str
    html: str
    _soup: Optional[BeautifulSoup] = field(default=None, init=False, repr=False, compare=False)

    @property
    def soup(self) -> BeautifulSoup:
        if self._soup is None:
            self._soup = BeautifulSoup(self.html, "html.parser")
        return self._soup

    def select_one(self, selector: str) -> Optional[Tag]:
        return self.soup.select_one(selector)

    def query_all(self, selector: str) -> List[Tag]:
        return self.soup.select(selector)


class PageClient:
    """Single Chromium page reused for every navigation of a run."""

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self.settings = settings or get_settings()
        self._playwright = None
        self._browser = None
        self._context = None
        self._page = None

    def _ensure_page(self):
        if self._page is None:
            self._playwright = sync_playwright().start()
            self._browser = self._playwright.chromium.launch(
                headless=self.settings.headless,
                args=list(LAUNCH_ARGS),
            )
            self._context = self._browser.new_context(
                user_agent=self.settings.user_agent,
                viewport={"width": self.settings.viewport_width, "height": self.settings.viewport_height},
            )
            self._page = self._context.new_page()
            self._page.set_default_navigation_timeout(self.settings.navigation_timeout_ms)
            logger.info("Browser started (headless=%s)", self.settings.headless)
        return self._page

    def navigate(self, url: str) -> None:
        """Load ``url`` and return as soon as the DOM is attached.

        Call ``snapshot()`` once the page has settled to read its content.
        Raises playwright's TimeoutError once the navigation timeout elapses.
        """
        self._ensure_page().goto(url, wait_until="domcontentloaded")

    def wait(self, duration_ms: int) -> None:
        self._ensure_page().wait_for_timeout(duration_ms)

    def scroll_to_bottom(self) -> None:
        self._ensure_page().evaluate("() => window.scrollTo(0, document.body.scrollHeight)")

    def snapshot(self) -> RenderedPage:
        page = self._ensure_page()
        return RenderedPage(url=page.url, html=page.content())

    def close(self) -> None:
        if self._context is not None:
            self._context.close()
            self._context = None
            self._page = None
        if self._browser is not None:
            self._browser.close()
            self._browser = None
        if self._playwright is not None:
            self._playwright.stop()
            self._playwright = None

    def __enter__(self) -> "PageClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
