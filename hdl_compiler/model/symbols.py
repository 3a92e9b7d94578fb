"""Closed symbol tables mapping markup names onto binary identifiers."""
from __future__ import annotations

from enum import Enum, IntEnum
from typing import Optional

# Special tags handled by the document builder instead of becoming elements.
IMGDEF_TAG = "imgdef"
BIND_TAG = "bind"


class _MarkupNamed(IntEnum):
    """Integer enum whose markup spelling is the lower-cased member name."""

    @property
    def markup_name(self) -> str:
        return self.name.lower()

    @classmethod
    def lookup(cls, name: str):
        """Return the member spelled ``name`` in markup, or ``None``."""
        member = cls.__members__.get(name.upper())
        if member is None or member.markup_name != name:
            return None
        return member


class TagName(_MarkupNamed):
    """Element tags understood by the firmware."""

    # Standard middle center aligned flex element
    BOX = 0
    # Switches child disabled state according to its "value" attribute
    SWITCH = 1


class AttrName(_MarkupNamed):
    """Attribute names and their wire identifiers."""

    X = 0
    Y = 1
    WIDTH = 2
    HEIGHT = 3
    FLEX = 4
    FLEXDIR = 5
    BIND = 6
    IMG = 7
    PADDING = 8
    ALIGN = 9
    SIZE = 10
    DISABLED = 11
    VALUE = 12
    SPRITE = 13
    WIDGET = 14


class ValueType(IntEnum):
    """Type tag written in front of every encoded attribute value."""

    NULL = 0
    BOOL = 1
    FLOAT = 2
    STRING = 3
    I8 = 4
    I16 = 5
    I32 = 6
    IMG = 7
    BIND = 8

    @property
    def width(self) -> int:
        """Encoded size of a single value in bytes."""
        return _VALUE_WIDTHS[self]


_VALUE_WIDTHS = {
    ValueType.NULL: 0,
    ValueType.BOOL: 1,
    ValueType.FLOAT: 4,
    ValueType.STRING: 0,
    ValueType.I8: 1,
    ValueType.I16: 2,
    ValueType.I32: 4,
    ValueType.IMG: 2,
    ValueType.BIND: 1,
}


class ColorMode(IntEnum):
    """Pixel layout of an image payload."""

    UNKNOWN = 0
    # Black and white, one bit per pixel
    MONO = 1
    RGB24 = 2
    PALETTE = 3


class Transform(Enum):
    """Symbolic layout and alignment tokens accepted as attribute values."""

    COL = ("col", 1)
    ROW = ("row", 2)
    MIDDLE_CENTER = ("middle center", 0x00)
    MIDDLE_LEFT = ("middle left", 0x01)
    MIDDLE_RIGHT = ("middle right", 0x02)
    TOP_CENTER = ("top center", 0x10)
    TOP_LEFT = ("top left", 0x11)
    TOP_RIGHT = ("top right", 0x12)
    BOTTOM_CENTER = ("bottom center", 0x20)
    BOTTOM_LEFT = ("bottom left", 0x21)
    BOTTOM_RIGHT = ("bottom right", 0x22)

    @property
    def token(self) -> str:
        return self.value[0]

    @property
    def constant(self) -> int:
        return self.value[1]

    @classmethod
    def lookup(cls, token: str) -> Optional["Transform"]:
        """Exact-match ``token`` against the table."""
        for member in cls:
            if member.token == token:
                return member
        return None
