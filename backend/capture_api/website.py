"""
Primary capture engine: render a website and return the screenshot bytes.

Works like a capture-website style library: every call launches its own
browser, sizes the viewport (1280x800 at 2x unless told otherwise), waits
for the load event, optionally sleeps `delay` seconds and returns the
viewport (or the full page) as PNG or JPEG.
"""

import asyncio
from typing import Any, Awaitable, Callable, Dict, Sequence

from playwright.async_api import Browser

from .models import CaptureOptions
from .options import is_number

DEFAULT_WIDTH = 1280
DEFAULT_HEIGHT = 800
DEFAULT_SCALE_FACTOR = 2
DEFAULT_TIMEOUT_SECONDS = 60

Launch = Callable[[Sequence[str]], Awaitable[Browser]]


def _number_or(value: Any, default):
    return value if is_number(value) and value > 0 else default


def jpeg_quality(value: Any):
    """Playwright wants 0-100; fractions of 1 are read as a ratio"""
    if not is_number(value) or value <= 0:
        return None
    if value <= 1:
        value = value * 100
    return int(min(value, 100))


def screenshot_arguments(options: CaptureOptions, width: int, height: int) -> Dict[str, Any]:
    arguments: Dict[str, Any] = {"type": "jpeg" if options.image_type == "jpeg" else "png"}
    if arguments["type"] == "jpeg":
        quality = jpeg_quality(options.quality)
        if quality is not None:
            arguments["quality"] = quality

    if options.full_page:
        arguments["full_page"] = True
    elif is_number(options.offset) and options.offset > 0:
        arguments["clip"] = {"x": 0, "y": options.offset, "width": width, "height": height}
    return arguments


async def capture_website(launch: Launch, url: str, options: CaptureOptions) -> bytes:
    width = _number_or(options.width, DEFAULT_WIDTH)
    height = _number_or(options.height, DEFAULT_HEIGHT)
    scale_factor = _number_or(options.scale_factor, DEFAULT_SCALE_FACTOR)
    timeout = _number_or(options.timeout, DEFAULT_TIMEOUT_SECONDS)

    browser = await launch(options.launch_args)
    try:
        context = await browser.new_context(
            viewport={"width": int(width), "height": int(height)},
            device_scale_factor=scale_factor,
        )
        page = await context.new_page()
        page.set_default_timeout(timeout * 1000)

        response = await page.goto(url, wait_until="load", timeout=timeout * 1000)
        if response is not None and response.status >= 400:
            raise RuntimeError(f"HTTP {response.status}: failed to load {url}")

        if is_number(options.delay) and options.delay > 0:
            await asyncio.sleep(options.delay)

        return await page.screenshot(**screenshot_arguments(options, int(width), int(height)))
    finally:
        await browser.close()
