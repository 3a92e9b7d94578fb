"""Decode monochrome bitmap assets into tightly packed bit planes."""
from __future__ import annotations

from pathlib import PurePath
from typing import Optional

from hdl_compiler.model.document_model import HDLDocument
from hdl_compiler.model.elements import HDLImage
from hdl_compiler.model.symbols import ColorMode
from hdl_compiler.utils.errors import ImageLoadError
from hdl_compiler.utils.file_access import MODE_BINARY, ReadCapability, resolve_read
from hdl_compiler.utils.logger import get_logger

LOGGER = get_logger(__name__)

BITMAP_EXTENSION = ".bmp"
BITMAP_SIGNATURE = b"BM"
BITMAP_HEADER_SIZE = 54

# Offsets into the file and info headers.
PIXEL_OFFSET_FIELD = 10
WIDTH_FIELD = 18
HEIGHT_FIELD = 22
BITS_PER_PIXEL_FIELD = 28

SUPPORTED_BITS_PER_PIXEL = 1


def tight_row_length(width: int) -> int:
    """Bytes per row with no alignment padding."""
    return (width + 7) // 8


def source_row_length(width: int) -> int:
    """Bytes per row in the source file, padded to a 32-bit boundary."""
    return ((width + 31) & ~31) >> 3


class BitmapLoader:
    """Reads 1-bit bitmaps through the injected read capability."""

    def __init__(self, reader: ReadCapability) -> None:
        self._reader = reader

    def load(self, path: str, image: HDLImage, document: Optional[HDLDocument] = None) -> HDLImage:
        """Populate ``image`` with the pixels stored at ``path``.

        Raises :class:`ImageLoadError` on any failure; the caller treats it as
        fatal for the whole document.
        """
        if PurePath(path).suffix.lower() != BITMAP_EXTENSION:
            raise ImageLoadError(f"Unsupported image format for {path!r}; only {BITMAP_EXTENSION} is accepted")

        try:
            data = resolve_read(self._reader(path, MODE_BINARY))
        except Exception as exc:
            raise ImageLoadError(f"Could not read image {path!r}: {exc}") from exc

        if isinstance(data, str):
            raise ImageLoadError(f"Read of image {path!r} returned text instead of bytes")
        if not data:
            raise ImageLoadError(f"Image {path!r} is missing or empty")

        self.decode(bytes(data), image, source=path)
        if document is not None and document.color_mode is ColorMode.UNKNOWN:
            document.color_mode = image.color_mode
        return image

    def decode(self, data: bytes, image: HDLImage, source: str = "<memory>") -> HDLImage:
        """Decode raw bitmap bytes into ``image``."""
        if len(data) < BITMAP_HEADER_SIZE:
            raise ImageLoadError(f"Image {source!r} is truncated ({len(data)} bytes)")
        if data[0:2] != BITMAP_SIGNATURE:
            raise ImageLoadError(f"Image {source!r} has no bitmap signature")

        bits_per_pixel = int.from_bytes(data[BITS_PER_PIXEL_FIELD : BITS_PER_PIXEL_FIELD + 2], "little")
        if bits_per_pixel != SUPPORTED_BITS_PER_PIXEL:
            raise ImageLoadError(f"Image {source!r} uses {bits_per_pixel} bits per pixel; only monochrome is supported")

        width = int.from_bytes(data[WIDTH_FIELD : WIDTH_FIELD + 4], "little", signed=True)
        height = int.from_bytes(data[HEIGHT_FIELD : HEIGHT_FIELD + 4], "little", signed=True)
        pixel_offset = int.from_bytes(data[PIXEL_OFFSET_FIELD : PIXEL_OFFSET_FIELD + 4], "little")

        if width <= 0 or height == 0:
            raise ImageLoadError(f"Image {source!r} has invalid dimensions {width}x{height}")

        # Negative heights mark top-down bitmaps whose rows are already in display order.
        bottom_up = height > 0
        height = abs(height)

        tight = tight_row_length(width)
        stride = source_row_length(width)
        if pixel_offset + stride * height > len(data):
            raise ImageLoadError(f"Image {source!r} is truncated: pixel data ends past the file")

        packed = bytearray(tight * height)
        for row in range(height):
            src_row = height - 1 - row if bottom_up else row
            start = pixel_offset + src_row * stride
            packed[row * tight : (row + 1) * tight] = data[start : start + tight]

        image.width = width
        image.height = height
        image.color_mode = ColorMode.MONO
        image.data = bytes(packed)
        if image.sprite_width is None:
            image.sprite_width = width
        if image.sprite_height is None:
            image.sprite_height = height

        LOGGER.debug("Decoded %s: %dx%d, %d bytes", source, width, height, len(packed))
        return image
