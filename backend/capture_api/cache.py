from datetime import datetime, timezone
from typing import Optional

from .models import LatestCapture
from .utils import image_dimensions


class LatestCaptureStore:
    """Single-slot memory of the most recent successful capture.

    Last write wins; nothing survives a restart.
    """

    def __init__(self):
        self._latest: Optional[LatestCapture] = None

    @property
    def latest(self) -> Optional[LatestCapture]:
        return self._latest

    def record(self, content: bytes, url: Optional[str]) -> LatestCapture:
        dimensions = image_dimensions(content) or (None, None)
        self._latest = LatestCapture(
            content=content,
            url=url,
            captured_at=datetime.now(timezone.utc),
            width=dimensions[0],
            height=dimensions[1],
        )
        return self._latest

    def reset(self) -> None:
        self._latest = None
