"""Build an :class:`HDLDocument` from the parsed markup node list."""
from __future__ import annotations

from typing import List, Optional, Tuple

from hdl_compiler.model.document_model import HDLDocument
from hdl_compiler.model.elements import PRELOAD_FLAG, HDLBinding, HDLImage
from hdl_compiler.model.symbols import BIND_TAG, IMGDEF_TAG, TagName
from hdl_compiler.parser.image_loader import BitmapLoader
from hdl_compiler.utils.errors import MarkupStructureError
from hdl_compiler.utils.file_access import ReadCapability
from hdl_compiler.utils.logger import get_logger
from hdl_compiler.utils.xml_utils import TEXT_KEY, MarkupNode, node_attrs, node_tags

LOGGER = get_logger(__name__)

# imgdef attributes
IMG_NAME_ATTR = "name"
IMG_SOURCE_ATTR = "src"
IMG_PRELOAD_ATTR = "preload"
IMG_SPRITE_WIDTH_ATTR = "sprite_width"
IMG_SPRITE_HEIGHT_ATTR = "sprite_height"

# bind attributes
BIND_NAME_ATTR = "name"
BIND_ID_ATTR = "id"

# Binding ids are written as a single byte.
BIND_ID_MAX = 0xFF


def parse_int(text: Optional[str]) -> Optional[int]:
    """Parse a decimal or prefixed (``0x``, ``0b``, ``0o``) integer."""
    if text is None:
        return None
    stripped = text.strip()
    try:
        return int(stripped)
    except ValueError:
        pass
    try:
        return int(stripped, 0)
    except ValueError:
        return None


class DocumentBuilder:
    """Walks markup nodes depth-first and populates a fresh document."""

    def __init__(self, reader: ReadCapability, image_loader: Optional[BitmapLoader] = None) -> None:
        self._image_loader = image_loader or BitmapLoader(reader)

    def build(self, nodes: List[MarkupNode]) -> HDLDocument:
        """Return the document described by ``nodes``.

        Structural errors and image failures raise and abort the whole build.
        """
        document = HDLDocument()
        # Each entry pairs a node with the index of its enclosing element.
        stack: List[Tuple[MarkupNode, Optional[int]]] = [(node, None) for node in reversed(nodes)]
        while stack:
            node, parent = stack.pop()
            children, context = self._visit(document, node, parent)
            stack.extend((child, context) for child in reversed(children))

        LOGGER.debug(
            "Built document: %d elements, %d images, %d bindings",
            len(document.elements),
            len(document.images),
            len(document.bindings),
        )
        return document

    # ------------------------------------------------------------------
    def _visit(
        self, document: HDLDocument, node: MarkupNode, parent: Optional[int]
    ) -> Tuple[List[MarkupNode], Optional[int]]:
        tags = node_tags(node)
        if len(tags) > 1:
            raise MarkupStructureError(f"Multiple tags on one node: {', '.join(tags)}")
        if not tags:
            raise MarkupStructureError("No tag found on markup node")
        tag = tags[0]

        if tag == TEXT_KEY:
            self._assign_text(document, str(node[TEXT_KEY]), parent)
            return [], parent
        if tag == IMGDEF_TAG:
            self._register_image(document, node_attrs(node))
            return [], parent
        if tag == BIND_TAG:
            self._register_binding(document, node_attrs(node))
            return [], parent

        tag_name = TagName.lookup(tag)
        if tag_name is None:
            LOGGER.debug("Ignoring unsupported tag: %s", tag)
            return [], parent

        element = document.add_element(tag_name, node_attrs(node), parent)
        return list(node[tag] or []), element.index

    def _assign_text(self, document: HDLDocument, text: str, parent: Optional[int]) -> None:
        if parent is None:
            LOGGER.debug("Ignoring text outside of any element: %r", text)
            return
        document.elements[parent].content += text

    def _register_image(self, document: HDLDocument, attrs: dict) -> None:
        name = attrs.get(IMG_NAME_ATTR)
        if not name:
            raise MarkupStructureError(f"{IMGDEF_TAG} requires a {IMG_NAME_ATTR!r} attribute")
        if document.find_image(name) is not None:
            raise MarkupStructureError(f"Image {name!r} is defined more than once")

        image = HDLImage(
            name=name,
            id=0,
            sprite_width=self._optional_int(attrs, IMG_SPRITE_WIDTH_ATTR, name),
            sprite_height=self._optional_int(attrs, IMG_SPRITE_HEIGHT_ATTR, name),
        )

        if IMG_PRELOAD_ATTR in attrs:
            preload_id = parse_int(attrs[IMG_PRELOAD_ATTR])
            if preload_id is None:
                raise MarkupStructureError(f"Image {name!r} has an invalid preload id {attrs[IMG_PRELOAD_ATTR]!r}")
            image.id = PRELOAD_FLAG | preload_id
            image.preloaded = True
            document.images.append(image)
            LOGGER.debug("Registered preloaded image %s (id 0x%04X)", name, image.id)
            return

        source = attrs.get(IMG_SOURCE_ATTR)
        if not source:
            raise MarkupStructureError(f"Image {name!r} requires a {IMG_SOURCE_ATTR!r} attribute")
        image.id = document.next_image_id()
        self._image_loader.load(source, image, document)
        document.images.append(image)
        LOGGER.debug("Registered image %s (id %d) from %s", name, image.id, source)

    def _register_binding(self, document: HDLDocument, attrs: dict) -> None:
        name = attrs.get(BIND_NAME_ATTR)
        raw_id = attrs.get(BIND_ID_ATTR)
        if not name or raw_id is None:
            LOGGER.warning("Skipping %s without both %r and %r attributes", BIND_TAG, BIND_NAME_ATTR, BIND_ID_ATTR)
            return
        binding_id = parse_int(raw_id)
        if binding_id is None:
            LOGGER.warning("Skipping binding %s: invalid id %r", name, raw_id)
            return
        if document.find_binding(name) is not None:
            LOGGER.warning("Skipping duplicate binding %s", name)
            return
        if not 0 <= binding_id <= BIND_ID_MAX:
            LOGGER.warning("Binding %s id %d does not fit one byte and will be truncated", name, binding_id)
        document.bindings.append(HDLBinding(name=name, id=binding_id))

    @staticmethod
    def _optional_int(attrs: dict, key: str, image_name: str) -> Optional[int]:
        if key not in attrs:
            return None
        value = parse_int(attrs[key])
        if value is None:
            raise MarkupStructureError(f"Image {image_name!r} has an invalid {key} {attrs[key]!r}")
        return value
