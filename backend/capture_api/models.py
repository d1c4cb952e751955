from datetime import datetime
from typing import Any, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Numeric options hold a number after normalization, or the original value
# when it could not be read as one.
Numeric = Any

ImageFormat = Literal["png", "jpg"]


class CaptureOptions(BaseModel):
    """Normalized capture options built from the query string"""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    url: Optional[str] = None
    width: Numeric = None
    height: Numeric = None
    quality: Numeric = None
    scale_factor: Numeric = Field(None, alias="scaleFactor")
    timeout: Numeric = None  # seconds
    delay: Numeric = None  # seconds, primary engine only
    offset: Numeric = None
    wait_before_screenshot_ms: Numeric = Field(None, alias="waitBeforeScreenshotMs")
    image_type: Optional[str] = Field(None, alias="type")
    full_page: bool = Field(False, alias="fullPage")
    plain_puppeteer: bool = Field(False, alias="plainPuppeteer")
    launch_args: List[str] = Field(default_factory=list)

    @field_validator("url", "image_type", mode="before")
    @classmethod
    def _as_text(cls, value):
        if value is None:
            return None
        return value if isinstance(value, str) else str(value)

    @field_validator("plain_puppeteer", "full_page", mode="before")
    @classmethod
    def _as_flag(cls, value):
        return value is True or value == "true"


class CaptureSuccess(BaseModel):
    status_code: Literal[200] = 200
    image_format: ImageFormat = "png"
    content: bytes

    @field_validator("content")
    @classmethod
    def _not_empty(cls, value: bytes) -> bytes:
        if not value:
            raise ValueError("a successful capture must carry image bytes")
        return value


class CaptureFailure(BaseModel):
    status_code: int = 500
    message: str

    @field_validator("status_code")
    @classmethod
    def _not_ok(cls, value: int) -> int:
        if value == 200:
            raise ValueError("a failed capture cannot use status 200")
        return value

    @field_validator("message")
    @classmethod
    def _readable(cls, value: str) -> str:
        return value or "Capture failed"


CaptureResult = Union[CaptureSuccess, CaptureFailure]


class LatestCapture(BaseModel):
    content: bytes
    url: Optional[str] = None
    captured_at: datetime
    width: Optional[int] = None
    height: Optional[int] = None
