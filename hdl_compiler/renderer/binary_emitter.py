"""Serialize an :class:`HDLDocument` into the firmware's binary layout."""
from __future__ import annotations

import math
import struct
from typing import List

from hdl_compiler.model.document_model import HDLDocument
from hdl_compiler.model.elements import PRELOAD_FLAG, HDLElement, HDLImage, ResolvedValue, Scalar
from hdl_compiler.model.symbols import AttrName, ValueType
from hdl_compiler.parser.value_resolver import ValueResolver
from hdl_compiler.utils.errors import EmitError
from hdl_compiler.utils.logger import get_logger

LOGGER = get_logger(__name__)

FORMAT_VERSION_MINOR = 0x00
FORMAT_VERSION_MAJOR = 0x02
HEADER_SIZE = 16

_HEADER = struct.Struct("<BBBBH10x")
_IMAGE_HEADER = struct.Struct("<BBHHHBBB")

U8_MAX = 0xFF
U16_MAX = 0xFFFF


class BinaryEmitter:
    """Writes the header, the embedded images and the root element tree."""

    def __init__(self, document: HDLDocument) -> None:
        self._document = document
        self._resolver = ValueResolver(document)

    def emit(self) -> bytes:
        """Return the complete binary artifact for the document."""
        root = self._document.root
        if root is None:
            raise EmitError("Document has no root element")
        if any(element.is_root for element in self._document.elements[1:]):
            LOGGER.warning("Only the first top-level element is emitted; further top-level elements are skipped")

        out = bytearray(self.emit_header())
        for image in self._document.dynamic_images:
            out += self.emit_image(image)
        out += self.emit_element(root)
        return bytes(out)

    def emit_header(self) -> bytes:
        images = self._document.dynamic_images
        element_count = len(self._document.elements)
        _check_range(len(images), U8_MAX, "image count")
        _check_range(element_count, U16_MAX, "element count")
        return _HEADER.pack(FORMAT_VERSION_MINOR, FORMAT_VERSION_MAJOR, len(images), 0, element_count)

    def emit_image(self, image: HDLImage) -> bytes:
        label = f"image {image.name!r}"
        _check_range(image.id & ~PRELOAD_FLAG, 0x7FFF, f"{label} id")
        _check_range(image.size, U16_MAX, f"{label} size")
        _check_range(image.width, U16_MAX, f"{label} width")
        _check_range(image.height, U16_MAX, f"{label} height")
        sprite_width = image.width if image.sprite_width is None else image.sprite_width
        sprite_height = image.height if image.sprite_height is None else image.sprite_height
        _check_range(sprite_width, U8_MAX, f"{label} sprite width")
        _check_range(sprite_height, U8_MAX, f"{label} sprite height")

        id_high = (image.id >> 8) & 0x7F
        if image.preloaded:
            id_high |= 0x80
        header = _IMAGE_HEADER.pack(
            image.id & 0xFF,
            id_high,
            image.size,
            image.width,
            image.height,
            sprite_width,
            sprite_height,
            int(image.color_mode),
        )
        return header + image.data

    def emit_element(self, element: HDLElement) -> bytes:
        """Encode ``element`` and, recursively, all of its children."""
        out = bytearray([int(element.tag)])
        out += bytes(ord(char) & 0xFF for char in element.content)
        out.append(0)

        attributes = self._encode_attributes(element)
        out.append(len(attributes))
        for encoded in attributes:
            out += encoded

        children = self._document.children_of(element)
        _check_range(len(children), U8_MAX, f"child count of element {element.index}")
        out.append(len(children))
        for child in children:
            out += self.emit_element(child)
        return bytes(out)

    # ------------------------------------------------------------------
    def _encode_attributes(self, element: HDLElement) -> List[bytes]:
        encoded: List[bytes] = []
        for name, raw in element.attrs.items():
            attr = AttrName.lookup(name)
            if attr is None:
                LOGGER.warning("Unknown attribute name %r on <%s>", name, element.tag.markup_name)
                continue
            resolved = self._resolver.resolve(raw)
            if resolved.is_null:
                LOGGER.warning("Could not parse value %r of attribute %r", raw, name)
                continue
            values = resolved.values
            if len(values) > U8_MAX:
                LOGGER.warning("Dropping attribute %r: %d values exceed the per-attribute limit", name, len(values))
                continue
            encoded.append(self.encode_attribute(attr, resolved))
        _check_range(len(encoded), U8_MAX, f"attribute count of element {element.index}")
        return encoded

    @staticmethod
    def encode_attribute(attr: AttrName, resolved: ResolvedValue) -> bytes:
        values = resolved.values
        out = bytearray([int(attr), int(resolved.type), len(values)])
        for value in values:
            out += encode_value(resolved.type, value)
        return bytes(out)


def encode_value(value_type: ValueType, value: Scalar) -> bytes:
    """Encode a single value using the wire width of ``value_type``."""
    if value_type is ValueType.FLOAT:
        return struct.pack("<f", float(value))
    integer = int(math.floor(value))
    if value_type in (ValueType.BOOL, ValueType.I8, ValueType.BIND):
        return struct.pack("<B", integer & 0xFF)
    if value_type in (ValueType.I16, ValueType.IMG):
        return struct.pack("<H", integer & 0xFFFF)
    if value_type is ValueType.I32:
        return struct.pack("<I", integer & 0xFFFFFFFF)
    raise EmitError(f"Values of type {value_type.name} cannot be encoded")


def _check_range(value: int, maximum: int, label: str) -> None:
    if not 0 <= value <= maximum:
        raise EmitError(f"{label} {value} does not fit the binary format (max {maximum})")
