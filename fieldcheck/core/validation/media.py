"""Media collaborators for the image, dimensions and mimes rules.

The engine never decodes bytes itself: it asks an ImageDecoder for the
pixel size of a payload and asks uploaded-file objects for their MIME type.
"""
from __future__ import annotations

from io import BytesIO
from typing import Protocol, runtime_checkable

from PIL import Image, UnidentifiedImageError


@runtime_checkable
class MimeTyped(Protocol):
    """Anything that can report its MIME type (uploaded files, blobs)."""

    def mime_type(self) -> str: ...


class ImageDecoder(Protocol):
    """Returns (width, height) of an encoded image, or None if undecodable."""

    def size(self, data: bytes) -> tuple[int, int] | None: ...


class PillowDecoder:
    """Default decoder: reads the image header with Pillow, then fully loads it.

    A header that parses but a body that does not decode counts as undecodable.
    """

    __slots__ = ()

    def size(self, data: bytes) -> tuple[int, int] | None:
        try:
            with Image.open(BytesIO(data)) as img:
                img.load()
                return img.size
        except (UnidentifiedImageError, OSError, SyntaxError, ValueError, Image.DecompressionBombError):
            return None


DEFAULT_DECODER = PillowDecoder()
