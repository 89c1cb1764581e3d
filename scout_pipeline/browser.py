"""
Shared headless Chromium for every scrape and enrichment call.

One Playwright driver and one browser process are launched lazily on first use
and reused across requests. Each caller gets its own BrowserContext, so page
sessions never share cookies or storage.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from playwright.async_api import Browser, Page, Playwright, async_playwright

from .config import Settings
from .errors import ProcessLaunchError

logger = logging.getLogger(__name__)

LAUNCH_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-accelerated-2d-canvas",
    "--disable-gpu",
]


class SessionPool:
    """Owns the browser process; hands out isolated page sessions."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._lock = asyncio.Lock()

    @property
    def is_running(self) -> bool:
        return self._browser is not None

    async def acquire(self) -> Browser:
        """Return the shared browser, launching it on first call."""
        if self._browser is not None:
            return self._browser

        async with self._lock:
            if self._browser is None:
                self._browser = await self._launch()
        return self._browser

    async def _launch(self) -> Browser:
        logger.info("Launching headless Chromium (headless=%s)", self.settings.headless)
        try:
            playwright = await async_playwright().start()
        except Exception as exc:
            raise ProcessLaunchError(f"Could not start Playwright driver: {exc}") from exc
        try:
            browser = await playwright.chromium.launch(headless=self.settings.headless, args=LAUNCH_ARGS)
        except Exception as exc:
            await playwright.stop()
            raise ProcessLaunchError(f"Could not launch browser: {exc}") from exc
        self._playwright = playwright
        return browser

    @asynccontextmanager
    async def page_session(self, user_agent: Optional[str] = None) -> AsyncIterator[Page]:
        """
        Open a fresh context + page; both are closed when the block exits.

        Args:
            user_agent: Identification string for this session. None keeps
                the browser default.
        """
        browser = await self.acquire()
        context = await browser.new_context(user_agent=user_agent)
        try:
            page = await context.new_page()
            yield page
        finally:
            await context.close()

    async def close(self) -> None:
        """Terminate the browser process. Safe to call more than once."""
        async with self._lock:
            browser, self._browser = self._browser, None
            playwright, self._playwright = self._playwright, None

        if browser is not None:
            logger.info("Closing headless Chromium")
            await browser.close()
        if playwright is not None:
            await playwright.stop()
