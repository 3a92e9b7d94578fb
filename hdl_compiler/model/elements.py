"""In-memory representation of the markup entities that make up a document."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union

from hdl_compiler.model.symbols import ColorMode, TagName, ValueType

# Bit set in the id of images already resident in firmware storage.
PRELOAD_FLAG = 0x8000


@dataclass(slots=True)
class HDLElement:
    """Element node stored in the document arena.

    ``parent`` and ``children`` are indices into ``HDLDocument.elements``.
    """

    index: int
    tag: TagName
    attrs: Dict[str, str] = field(default_factory=dict)
    content: str = ""
    parent: Optional[int] = None
    children: List[int] = field(default_factory=list)

    @property
    def is_root(self) -> bool:
        return self.parent is None


@dataclass(slots=True)
class HDLImage:
    """Image asset registered through an ``imgdef`` declaration."""

    name: str
    id: int
    width: int = 0
    height: int = 0
    sprite_width: Optional[int] = None
    sprite_height: Optional[int] = None
    color_mode: ColorMode = ColorMode.UNKNOWN
    data: bytes = b""
    preloaded: bool = False

    @property
    def size(self) -> int:
        """Byte length of the packed pixel payload."""
        return len(self.data)


@dataclass(frozen=True, slots=True)
class HDLBinding:
    """Named indirection resolved by the firmware at runtime."""

    name: str
    id: int


Scalar = Union[int, float]


@dataclass(frozen=True, slots=True)
class ResolvedValue:
    """Typed attribute value; ``ValueType.NULL`` means the attribute is dropped."""

    type: ValueType
    value: Union[Scalar, List[Scalar]] = 0

    @property
    def is_null(self) -> bool:
        return self.type is ValueType.NULL

    @property
    def values(self) -> List[Scalar]:
        """Value list as written on the wire (scalars become one-element lists)."""
        if isinstance(self.value, list):
            return list(self.value)
        return [self.value]


NULL_VALUE = ResolvedValue(ValueType.NULL)
