"""Tests for the markup to node-list conversion."""
import unittest

from hdl_compiler.utils.errors import MarkupValidationError
from hdl_compiler.utils.xml_utils import ATTRS_KEY, TEXT_KEY, node_attrs, node_tags, parse_markup


class ParseMarkupTest(unittest.TestCase):
    def test_preserves_order_and_attributes(self) -> None:
        nodes = parse_markup('<bind name="a" id="1"/><box x="1"><switch/></box>')

        self.assertEqual(len(nodes), 2)
        self.assertEqual(node_tags(nodes[0]), ["bind"])
        self.assertEqual(node_attrs(nodes[0]), {"name": "a", "id": "1"})
        self.assertEqual(nodes[1]["box"], [{"switch": []}])

    def test_text_nodes_are_trimmed(self) -> None:
        nodes = parse_markup("<box>\n  Hello  \n<box/> tail </box>")
        children = nodes[0]["box"]
        self.assertEqual(children[0], {TEXT_KEY: "Hello"})
        self.assertEqual(children[2], {TEXT_KEY: "tail"})

    def test_whitespace_only_text_is_dropped(self) -> None:
        nodes = parse_markup("<box>\n   <box/>\n</box>")
        self.assertEqual(nodes[0]["box"], [{"box": []}])

    def test_xml_declaration_is_accepted(self) -> None:
        nodes = parse_markup('<?xml version="1.0" encoding="UTF-8"?>\n<box/>')
        self.assertEqual(nodes, [{"box": []}])

    def test_node_without_attributes_has_no_attr_entry(self) -> None:
        nodes = parse_markup("<box/>")
        self.assertNotIn(ATTRS_KEY, nodes[0])
        self.assertEqual(node_attrs(nodes[0]), {})

    def test_malformed_markup_raises(self) -> None:
        with self.assertRaises(MarkupValidationError):
            parse_markup("<box><switch></box>")

    def test_empty_source_has_no_nodes(self) -> None:
        self.assertEqual(parse_markup(""), [])


if __name__ == "__main__":
    unittest.main()
