"""Turn markup text into the order-preserving node list consumed by the builder.

Every node is a single-entry mapping ``{tag: [child nodes]}`` with an optional
``":@"`` entry holding the attributes; text is carried by ``{"#text": str}``
nodes. Keeping nodes as plain mappings lets the builder reject nodes that
declare no tag or more than one.
"""
from __future__ import annotations

import re
from typing import Any, Dict, List, Optional
from xml.etree import ElementTree as ET

from hdl_compiler.utils.errors import MarkupValidationError

ATTRS_KEY = ":@"
TEXT_KEY = "#text"

MarkupNode = Dict[str, Any]

_CONTAINER_TAG = "hdl-markup-root"
_DECLARATION_PATTERN = re.compile(r"^\s*<\?xml[^>]*\?>", re.IGNORECASE)


def parse_markup(text: str) -> List[MarkupNode]:
    """Parse ``text`` and return its top-level nodes in document order."""
    body = _DECLARATION_PATTERN.sub("", text, count=1)
    try:
        container = ET.fromstring(f"<{_CONTAINER_TAG}>{body}</{_CONTAINER_TAG}>")
    except ET.ParseError as exc:
        raise MarkupValidationError(f"Malformed markup: {exc}") from exc
    return _convert_children(container)


def node_tags(node: MarkupNode) -> List[str]:
    """Return the tag keys of ``node`` (text nodes report ``#text``)."""
    return [key for key in node if key != ATTRS_KEY]


def node_attrs(node: MarkupNode) -> Dict[str, str]:
    return dict(node.get(ATTRS_KEY) or {})


def text_node(text: str) -> MarkupNode:
    return {TEXT_KEY: text}


def element_node(tag: str, children: Optional[List[MarkupNode]] = None, **attrs: str) -> MarkupNode:
    """Build a node by hand, mostly useful for tests and programmatic input."""
    node: MarkupNode = {tag: list(children or [])}
    if attrs:
        node[ATTRS_KEY] = dict(attrs)
    return node


def _convert(element: ET.Element) -> MarkupNode:
    node: MarkupNode = {element.tag: _convert_children(element)}
    if element.attrib:
        node[ATTRS_KEY] = dict(element.attrib)
    return node


def _convert_children(element: ET.Element) -> List[MarkupNode]:
    children: List[MarkupNode] = []
    if element.text and element.text.strip():
        children.append(text_node(element.text.strip()))
    for child in element:
        children.append(_convert(child))
        if child.tail and child.tail.strip():
            children.append(text_node(child.tail.strip()))
    return children
