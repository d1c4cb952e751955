"""
Query string to capture options
"""

import json
import logging
import math
from typing import Any, Dict, Mapping, Optional

from .models import CaptureOptions

logger = logging.getLogger(__name__)

LAUNCH_ARGS = (
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--hide-scrollbars",
    "--mute-audio",
    "--use-fake-ui-for-media-stream",  # pages that ask for webcam/microphone access
)

NUMERIC_FIELDS = (
    "width",
    "height",
    "quality",
    "scaleFactor",
    "timeout",
    "delay",
    "offset",
    "waitBeforeScreenshotMs",
)

RECOGNIZED_KEYS = frozenset(NUMERIC_FIELDS) | {"url", "type", "fullPage", "plainPuppeteer"}

# Checked by the access gate, never copied into the options
SECRET_KEY = "secret"


def _reject_constant(name: str):
    raise ValueError(f"Unsupported JSON constant: {name}")


def parse_value(raw: Any) -> Any:
    """Read a query value as JSON, keeping the raw string when it is not JSON"""
    if not isinstance(raw, str):
        return raw
    try:
        return json.loads(raw, parse_constant=_reject_constant)
    except ValueError:
        return raw


def parse_query_parameters(query: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    return {key: parse_value(value) for key, value in (query or {}).items()}


def to_number(value: Any) -> Any:
    """Coerce a value to int/float, returning it unchanged when it is not a number"""
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value
    if not isinstance(value, str):
        return value

    text = value.strip()
    try:
        return int(text)
    except ValueError:
        pass
    try:
        number = float(text)
    except ValueError:
        return value
    return value if math.isnan(number) else number


def fields_to_number(data: Dict[str, Any], *fields: str) -> None:
    for field in fields:
        if data.get(field):
            data[field] = to_number(data[field])


def normalize_options(query: Optional[Mapping[str, Any]], default_timeout: Any) -> CaptureOptions:
    """
    Build CaptureOptions from raw query parameters.

    Values are parsed as JSON where possible, the fixed browser launch
    flags are attached, a default timeout (seconds) is applied and the
    numeric fields are coerced. Unrecognized keys are dropped.
    """
    parsed = parse_query_parameters(query)

    data = {key: value for key, value in parsed.items() if key in RECOGNIZED_KEYS}
    ignored = sorted(key for key in parsed if key not in RECOGNIZED_KEYS and key != SECRET_KEY)
    if ignored:
        logger.debug(f"Ignoring unrecognized capture options: {', '.join(ignored)}")

    if not data.get("timeout"):
        data["timeout"] = default_timeout
    fields_to_number(data, *NUMERIC_FIELDS)

    data["launch_args"] = list(LAUNCH_ARGS)
    return CaptureOptions(**data)


def response_format(options: CaptureOptions) -> str:
    if options.image_type == "jpeg":
        return "jpg"
    return "png"


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)
