"""
In-page logo heuristics and logo byte retrieval
"""

import logging
from typing import Optional

from playwright.async_api import Page

from .utils import decode_data_url, is_data_url

logger = logging.getLogger(__name__)

ICON_LINK_SELECTORS = [
    'link[rel="icon"]',
    'link[rel="shortcut icon"]',
    'link[rel="apple-touch-icon"]',
]

LOGO_ELEMENT_SELECTORS = [
    "img.logo",
    ".logo",
    "#logo",
    'img[alt*="logo"]',
    'img[title*="logo"]',
]

# Returns the first hit of: icon links, logo images/elements, first inline
# SVG as a base64 data URL; null when nothing matches.
FIND_LOGO_SCRIPT = """
([iconSelectors, logoSelectors]) => {
    for (const selector of iconSelectors) {
        const link = document.querySelector(selector);
        if (link && link.href) {
            return link.href;
        }
    }

    for (const selector of logoSelectors) {
        const element = document.querySelector(selector);
        if (element && element.src) {
            return element.src;
        }
    }

    const svg = document.querySelector('svg');
    if (svg) {
        const markup = new XMLSerializer().serializeToString(svg);
        const utf8 = unescape(encodeURIComponent(markup));
        return `data:image/svg+xml;base64,${btoa(utf8)}`;
    }

    return null;
}
"""


async def find_logo_url(page: Page) -> Optional[str]:
    return await page.evaluate(FIND_LOGO_SCRIPT, [ICON_LINK_SELECTORS, LOGO_ELEMENT_SELECTORS])


async def fetch_logo(page: Page, logo_url: str, timeout_ms: int) -> Optional[bytes]:
    """Get the logo bytes.

    Data URLs are decoded directly. Anything else is requested through the
    page's context (sharing its cookies) rather than navigated to, since
    Chromium turns some icon responses into downloads.
    """
    if is_data_url(logo_url):
        try:
            return decode_data_url(logo_url)
        except ValueError as e:
            logger.warning(f"Could not decode inline logo: {e}")
            return None

    response = await page.context.request.get(logo_url, timeout=timeout_ms)
    if not response.ok:
        logger.info(f"Logo request for {logo_url} returned {response.status}")
        return None
    return await response.body()
