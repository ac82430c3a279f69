"""Rendered image result model."""

from pydantic import BaseModel

IMAGE_WIDTH = 1200
IMAGE_HEIGHT = 628


class ImageResult(BaseModel):
    """Binary image plus the response metadata that goes with it."""

    success: bool
    content: bytes
    media_type: str = "image/png"
    width: int = IMAGE_WIDTH
    height: int = IMAGE_HEIGHT
    headers: dict[str, str] = {}
    username: str | None = None
    error_message: str | None = None
    duration_ms: float = 0.0
