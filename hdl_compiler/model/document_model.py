"""Aggregate model holding the images, bindings and element arena of one markup file."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from hdl_compiler.model.elements import HDLBinding, HDLElement, HDLImage
from hdl_compiler.model.symbols import ColorMode, TagName


@dataclass(slots=True)
class HDLDocument:
    """Document built from one markup source; rebuilt from scratch on every load."""

    color_mode: ColorMode = ColorMode.UNKNOWN
    images: List[HDLImage] = field(default_factory=list)
    bindings: List[HDLBinding] = field(default_factory=list)
    elements: List[HDLElement] = field(default_factory=list)

    # ------------------------------------------------------------------
    # Elements
    def add_element(self, tag: TagName, attrs: Optional[Dict[str, str]] = None, parent: Optional[int] = None) -> HDLElement:
        """Append a new element to the arena and link it under ``parent``."""
        if parent is not None and not 0 <= parent < len(self.elements):
            raise IndexError(f"Unknown parent element index: {parent}")
        element = HDLElement(index=len(self.elements), tag=tag, attrs=dict(attrs or {}), parent=parent)
        self.elements.append(element)
        if parent is not None:
            self.elements[parent].children.append(element.index)
        return element

    @property
    def root(self) -> Optional[HDLElement]:
        """The element that gets serialized: the first one in encounter order."""
        return self.elements[0] if self.elements else None

    def children_of(self, element: HDLElement) -> List[HDLElement]:
        return [self.elements[index] for index in element.children]

    def parent_of(self, element: HDLElement) -> Optional[HDLElement]:
        if element.parent is None:
            return None
        return self.elements[element.parent]

    # ------------------------------------------------------------------
    # Images and bindings
    def find_image(self, name: str) -> Optional[HDLImage]:
        for image in self.images:
            if image.name == name:
                return image
        return None

    def find_binding(self, name: str) -> Optional[HDLBinding]:
        for binding in self.bindings:
            if binding.name == name:
                return binding
        return None

    @property
    def dynamic_images(self) -> List[HDLImage]:
        """Images whose pixel data is embedded in the output, in registration order."""
        return [image for image in self.images if not image.preloaded]

    def next_image_id(self) -> int:
        """Id for the next non-preloaded image; dense and starting at zero."""
        return len(self.dynamic_images)
