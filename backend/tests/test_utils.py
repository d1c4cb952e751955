import pytest

from capture_api.utils import decode_data_url, describe_size, image_dimensions, is_data_url
from fakes import png_bytes


def test_decode_base64_data_url():
    assert decode_data_url("data:image/svg+xml;base64,PHN2Zy8+") == b"<svg/>"


def test_decode_percent_encoded_data_url():
    assert decode_data_url("data:image/svg+xml,%3Csvg%2F%3E") == b"<svg/>"


def test_decode_rejects_other_urls():
    with pytest.raises(ValueError):
        decode_data_url("https://example.com/logo.png")
    with pytest.raises(ValueError):
        decode_data_url("data:image/png;base64")


def test_is_data_url():
    assert is_data_url("DATA:image/png;base64,AAAA")
    assert not is_data_url("https://example.com")


def test_image_dimensions():
    assert image_dimensions(png_bytes(8, 6)) == (8, 6)
    assert image_dimensions(b"not an image") is None


def test_describe_size():
    content = png_bytes(8, 6)
    assert describe_size(content) == f"8x6px, {len(content)} bytes"
    assert describe_size(b"abc") == "3 bytes"
