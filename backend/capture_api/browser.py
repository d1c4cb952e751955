"""
Playwright driver lifecycle and per-capture browser launches
"""

import logging
from typing import Optional, Sequence

from playwright.async_api import Browser, Playwright, async_playwright

logger = logging.getLogger(__name__)


class BrowserLauncher:
    """Owns the Playwright driver and launches one headless Chromium per capture"""

    def __init__(self):
        self.playwright: Optional[Playwright] = None

    @property
    def is_running(self) -> bool:
        return self.playwright is not None

    async def start(self):
        """Start the Playwright driver"""
        if self.playwright:
            return
        self.playwright = await async_playwright().start()
        logger.info("Playwright driver started")

    async def stop(self):
        """Stop the Playwright driver"""
        if not self.playwright:
            return
        try:
            await self.playwright.stop()
            logger.info("Playwright driver stopped")
        except Exception as e:
            logger.error(f"Error stopping Playwright driver: {e}")
        finally:
            self.playwright = None

    async def launch(self, args: Sequence[str]) -> Browser:
        if not self.playwright:
            await self.start()
        return await self.playwright.chromium.launch(headless=True, args=list(args))
