import asyncio
import base64

from capture_api.logo import ICON_LINK_SELECTORS, LOGO_ELEMENT_SELECTORS
from capture_api.models import CaptureFailure, CaptureSuccess
from fakes import FakeResponse, make_options

ICON_URL = "https://example.com/apple-touch-icon.png"


def run(coro):
    return asyncio.run(coro)


def test_apple_touch_icon_is_fetched(service, launcher, cache):
    launcher.logo_url = ICON_URL
    launcher.responses[ICON_URL] = FakeResponse(body=b"icon-bytes")

    result = run(service.extract_logo(make_options()))

    assert isinstance(result, CaptureSuccess)
    assert result.content == b"icon-bytes"
    assert result.image_format == "png"
    visited = [url for url, _ in launcher.last_page.visited]
    assert visited == ["https://example.com"]
    assert launcher.fetched == [(ICON_URL, {"timeout": 60000})]
    assert launcher.browsers[0].closed
    # Logos do not replace the latest screenshot
    assert cache.latest is None


def test_heuristics_are_evaluated_in_order(service, launcher):
    launcher.logo_url = ICON_URL
    launcher.responses[ICON_URL] = FakeResponse(body=b"icon-bytes")

    run(service.extract_logo(make_options()))

    icon_selectors, logo_selectors = launcher.evaluated[0]
    assert icon_selectors == ICON_LINK_SELECTORS
    assert 'link[rel="apple-touch-icon"]' in icon_selectors
    assert logo_selectors[0] == "img.logo"


def test_no_logo_found(service, launcher):
    launcher.logo_url = None

    result = run(service.extract_logo(make_options()))

    assert isinstance(result, CaptureFailure)
    assert result.status_code == 500
    assert result.message == "No logo found"
    assert launcher.browsers[0].closed


def test_inline_svg_is_decoded_without_navigation(service, launcher):
    svg = '<svg xmlns="http://www.w3.org/2000/svg"><circle r="4"/></svg>'
    launcher.logo_url = "data:image/svg+xml;base64," + base64.b64encode(svg.encode()).decode()

    result = run(service.extract_logo(make_options()))

    assert result.status_code == 200
    assert result.content == svg.encode()
    assert len(launcher.last_page.visited) == 1
    assert launcher.fetched == []


def test_missing_logo_resource_counts_as_not_found(service, launcher):
    launcher.logo_url = ICON_URL
    launcher.responses[ICON_URL] = FakeResponse(status=404)

    result = run(service.extract_logo(make_options()))

    assert result.message == "No logo found"


def test_navigation_failure_closes_browser(service, launcher):
    launcher.goto_error = RuntimeError("Timeout 60000ms exceeded")

    result = run(service.extract_logo(make_options()))

    assert isinstance(result, CaptureFailure)
    assert result.message == "Timeout 60000ms exceeded"
    assert launcher.browsers[0].closed


def test_logo_uses_browser_only(service, primary, launcher):
    launcher.logo_url = ICON_URL
    launcher.responses[ICON_URL] = FakeResponse(body=b"icon-bytes")

    run(service.extract_logo(make_options()))

    assert primary.calls == []


def test_logo_element_selectors_cover_alt_and_title():
    assert 'img[alt*="logo"]' in LOGO_ELEMENT_SELECTORS
    assert 'img[title*="logo"]' in LOGO_ELEMENT_SELECTORS
