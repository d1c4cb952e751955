"""
Screenshot and logo capture service
Tries the primary capture engine first and falls back to plain browser automation
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from playwright.async_api import Browser, Page

from .admission import AdmissionQueue
from .browser import BrowserLauncher
from .cache import LatestCaptureStore
from .logo import fetch_logo, find_logo_url
from .models import CaptureFailure, CaptureOptions, CaptureResult, CaptureSuccess
from .options import is_number, response_format
from .utils import describe_size
from .website import capture_website

logger = logging.getLogger(__name__)

NAVIGATION_TIMEOUT_MS = 60000
DEFAULT_WAIT_BEFORE_SCREENSHOT_MS = 300
NO_LOGO_MESSAGE = "No logo found"

PrimaryEngine = Callable[[str, CaptureOptions], Awaitable[bytes]]


class CaptureTimeout(Exception):
    pass


class CaptureService:
    """Captures screenshots and logos through an admission queue"""

    def __init__(
        self,
        queue: AdmissionQueue,
        cache: LatestCaptureStore,
        launcher=None,
        primary_engine: Optional[PrimaryEngine] = None,
    ):
        self.queue = queue
        self.cache = cache
        self.launcher = launcher or BrowserLauncher()
        self.primary_engine = primary_engine or self._capture_website

    async def initialize(self):
        await self.launcher.start()

    async def cleanup(self):
        await self.launcher.stop()

    def health_check(self) -> bool:
        return self.launcher.is_running

    async def capture(self, options: CaptureOptions) -> CaptureResult:
        """Capture a screenshot of options.url once a queue slot is free"""
        return await self.queue.submit(self._capture, options)

    async def extract_logo(self, options: CaptureOptions) -> CaptureResult:
        """Extract the site logo of options.url once a queue slot is free"""
        return await self.queue.submit(self._extract_logo, options)

    async def _capture(self, options: CaptureOptions) -> CaptureResult:
        url = options.url
        logger.info(f"Capturing URL: {url} ...")

        if not options.plain_puppeteer:
            primary = await self._try_primary(url, options)
            if isinstance(primary, CaptureSuccess):
                return primary
            logger.info(f"Capture website failed for URL: {url}, retrying with plain browser")

        return await self._try_fallback(url, options)

    async def _try_primary(self, url: str, options: CaptureOptions) -> CaptureResult:
        try:
            content = await self._with_deadline(self.primary_engine(url, options), options)
            return self._succeeded(url, content, options)
        except Exception as e:
            logger.warning(f"Primary capture failed for {url}: {e}")
            return CaptureFailure(status_code=500, message=str(e))

    async def _try_fallback(self, url: str, options: CaptureOptions) -> CaptureResult:
        try:
            content = await self._with_deadline(self._take_plain_screenshot(url, options), options)
            return self._succeeded(url, content, options)
        except Exception as e:
            logger.error(f"Capture failed for {url} due to: {e}")
            return CaptureFailure(status_code=500, message=str(e) or type(e).__name__)

    def _succeeded(self, url: str, content: bytes, options: CaptureOptions) -> CaptureSuccess:
        if not content:
            raise ValueError("Screenshot capture returned empty data")
        logger.info(f"Successfully captured URL: {url} ({describe_size(content)})")
        self.cache.record(content, url)
        return CaptureSuccess(image_format=response_format(options), content=content)

    async def _capture_website(self, url: str, options: CaptureOptions) -> bytes:
        return await capture_website(self.launcher.launch, url, options)

    async def _with_deadline(self, operation: Awaitable[bytes], options: CaptureOptions) -> bytes:
        """Bound an attempt by the request timeout (seconds) when one is set"""
        if not is_number(options.timeout) or options.timeout <= 0:
            return await operation
        try:
            return await asyncio.wait_for(operation, timeout=options.timeout)
        except asyncio.TimeoutError as e:
            raise CaptureTimeout(f"Capture timed out after {options.timeout} seconds") from e

    async def _open_page(self, browser: Browser, url: str, options: CaptureOptions) -> Page:
        context_options = {}
        if is_number(options.width) and is_number(options.height):
            context_options["viewport"] = {"width": int(options.width), "height": int(options.height)}
            scale_factor = options.scale_factor
            context_options["device_scale_factor"] = scale_factor if is_number(scale_factor) and scale_factor > 0 else 1
        elif options.width or options.height:
            logger.debug(f"Viewport needs numeric width and height, got {options.width!r}x{options.height!r}")

        context = await browser.new_context(**context_options)
        page = await context.new_page()
        await page.goto(url, wait_until="domcontentloaded", timeout=NAVIGATION_TIMEOUT_MS)
        return page

    async def _take_plain_screenshot(self, url: str, options: CaptureOptions) -> bytes:
        wait_ms = options.wait_before_screenshot_ms
        if not is_number(wait_ms) or wait_ms < 0:
            wait_ms = DEFAULT_WAIT_BEFORE_SCREENSHOT_MS

        browser = await self.launcher.launch(options.launch_args)
        try:
            page = await self._open_page(browser, url, options)
            await asyncio.sleep(wait_ms / 1000)
            image_type = "jpeg" if response_format(options) == "jpg" else "png"
            return await page.screenshot(type=image_type, full_page=True)
        finally:
            await browser.close()

    async def _extract_logo(self, options: CaptureOptions) -> CaptureResult:
        url = options.url
        logger.info(f"Extracting logo for URL: {url} ...")
        try:
            content = await self._with_deadline(self._find_logo(url, options), options)
        except Exception as e:
            logger.error(f"Logo extraction failed for {url} due to: {e}")
            return CaptureFailure(status_code=500, message=str(e) or type(e).__name__)

        if not content:
            logger.info(f"No logo found for URL: {url}")
            return CaptureFailure(status_code=500, message=NO_LOGO_MESSAGE)

        logger.info(f"Successfully extracted logo for URL: {url} ({describe_size(content)})")
        return CaptureSuccess(image_format="png", content=content)

    async def _find_logo(self, url: str, options: CaptureOptions) -> Optional[bytes]:
        browser = await self.launcher.launch(options.launch_args)
        try:
            context = await browser.new_context()
            page = await context.new_page()
            await page.goto(url, wait_until="domcontentloaded", timeout=NAVIGATION_TIMEOUT_MS)

            logo_url = await find_logo_url(page)
            if not logo_url:
                return None
            logger.debug(f"Logo candidate for {url}: {logo_url[:120]}")
            return await fetch_logo(page, logo_url, NAVIGATION_TIMEOUT_MS)
        finally:
            await browser.close()
