"""Decoding of the base64 drawings sent by the canvas front end."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

from .errors import ValidationError

DEFAULT_MEDIA_TYPE = "image/png"
_DATA_URI = re.compile(r"^data:([^;]+);base64,(.+)$", re.DOTALL)


@dataclass(frozen=True)
class EncodedImage:
    media_type: str
    data: str

    def as_data_url(self) -> str:
        return f"data:{self.media_type};base64,{self.data}"


def normalize_image(value: Optional[str]) -> EncodedImage:
    """Split a data URI into media type and payload.

    Bare base64 payloads are assumed to be PNG. A ``data:`` prefix that does
    not parse is passed through untouched, also as PNG.
    """
    if value is None or not value.strip():
        raise ValidationError("Image data is empty.")
    text = value.strip()
    match = _DATA_URI.match(text)
    if match:
        return EncodedImage(media_type=match.group(1), data=match.group(2))
    return EncodedImage(media_type=DEFAULT_MEDIA_TYPE, data=text)


__all__ = ["DEFAULT_MEDIA_TYPE", "EncodedImage", "normalize_image"]
