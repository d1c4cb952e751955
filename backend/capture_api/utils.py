"""
Utility functions
"""

import base64
import binascii
import io
import logging
from typing import Optional, Tuple
from urllib.parse import unquote_to_bytes

from PIL import Image, UnidentifiedImageError

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once for the service"""
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger("capture_api").setLevel(level)


def image_dimensions(image_bytes: bytes) -> Optional[Tuple[int, int]]:
    """Return (width, height) of an encoded image, or None when Pillow cannot read it"""
    try:
        with Image.open(io.BytesIO(image_bytes)) as image:
            return image.width, image.height
    except (UnidentifiedImageError, OSError):
        return None


def is_data_url(url: str) -> bool:
    return url[:5].lower() == "data:"


def decode_data_url(url: str) -> bytes:
    """Decode the payload of a `data:` URL (base64 or percent-encoded)"""
    if not is_data_url(url) or "," not in url:
        raise ValueError("Not a data URL")

    header, payload = url[5:].split(",", 1)
    if header.lower().endswith(";base64"):
        try:
            return base64.b64decode(payload, validate=False)
        except binascii.Error as e:
            raise ValueError(f"Invalid base64 data URL: {e}") from e
    return unquote_to_bytes(payload)


def describe_size(image_bytes: bytes) -> str:
    dimensions = image_dimensions(image_bytes)
    if dimensions:
        return f"{dimensions[0]}x{dimensions[1]}px, {len(image_bytes)} bytes"
    return f"{len(image_bytes)} bytes"
