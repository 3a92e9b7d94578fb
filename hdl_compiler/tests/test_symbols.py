"""Tests for the closed symbol tables."""
import unittest

from hdl_compiler.model.symbols import AttrName, TagName, Transform, ValueType


class SymbolTableTest(unittest.TestCase):
    def test_tag_lookup(self) -> None:
        self.assertIs(TagName.lookup("box"), TagName.BOX)
        self.assertIs(TagName.lookup("switch"), TagName.SWITCH)
        self.assertEqual(int(TagName.SWITCH), 1)

    def test_lookup_is_exact(self) -> None:
        self.assertIsNone(TagName.lookup("Box"))
        self.assertIsNone(TagName.lookup("imgdef"))
        self.assertIsNone(AttrName.lookup("X"))
        self.assertIsNone(AttrName.lookup("colour"))

    def test_attribute_ids(self) -> None:
        self.assertEqual(AttrName.lookup("x"), 0)
        self.assertEqual(AttrName.lookup("flexdir"), 5)
        self.assertEqual(AttrName.lookup("widget"), 14)
        self.assertEqual(AttrName.WIDGET.markup_name, "widget")

    def test_transform_tokens(self) -> None:
        self.assertEqual(Transform.lookup("col").constant, 1)
        self.assertEqual(Transform.lookup("top right").constant, 0x12)
        self.assertEqual(Transform.lookup("bottom center").constant, 0x20)
        self.assertIsNone(Transform.lookup("center"))
        self.assertEqual(len(list(Transform)), 11)

    def test_value_widths(self) -> None:
        self.assertEqual(ValueType.I8.width, 1)
        self.assertEqual(ValueType.IMG.width, 2)
        self.assertEqual(ValueType.FLOAT.width, 4)
        self.assertEqual(ValueType.BIND.width, 1)


if __name__ == "__main__":
    unittest.main()
