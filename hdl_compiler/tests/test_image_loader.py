"""Tests for the monochrome bitmap decoder."""
import asyncio
import unittest
from concurrent.futures import Future

from hdl_compiler.model.document_model import HDLDocument
from hdl_compiler.model.elements import HDLImage
from hdl_compiler.model.symbols import ColorMode
from hdl_compiler.parser.image_loader import BitmapLoader, source_row_length, tight_row_length
from hdl_compiler.tests.bitmap_fixtures import DIAGONAL_8X8, DIAGONAL_ROWS, DictReader, make_bitmap
from hdl_compiler.utils.errors import ImageLoadError


class RowLengthTest(unittest.TestCase):
    def test_tight_and_source_lengths(self) -> None:
        cases = [
            (1, 1, 4),
            (8, 1, 4),
            (12, 2, 4),
            (32, 4, 4),
            (33, 5, 8),
            (64, 8, 8),
        ]
        for width, tight, source in cases:
            self.assertEqual(tight_row_length(width), tight, f"tight length for width {width}")
            self.assertEqual(source_row_length(width), source, f"source length for width {width}")


class BitmapLoaderTest(unittest.TestCase):
    """Decode synthetic bitmaps through an in-memory reader."""

    def _load(self, data: bytes, path: str = "icon.bmp", image: HDLImage = None) -> HDLImage:
        loader = BitmapLoader(DictReader({path: data}))
        return loader.load(path, image or HDLImage(name="icon", id=0))

    def test_decodes_8x8_rows_top_to_bottom_without_padding(self) -> None:
        image = self._load(DIAGONAL_8X8)

        self.assertEqual(image.width, 8)
        self.assertEqual(image.height, 8)
        self.assertEqual(image.size, 8)
        self.assertEqual(image.data, bytes([0x80, 0x40, 0x20, 0x10, 0x08, 0x04, 0x02, 0x01]))
        self.assertNotIn(0xAA, image.data)
        self.assertEqual(image.color_mode, ColorMode.MONO)

    def test_wide_rows_keep_tight_length(self) -> None:
        rows = [b"\xff\xf0", b"\x0f\x00", b"\x12\x30"]
        image = self._load(make_bitmap(12, rows))

        self.assertEqual(image.size, 2 * 3)
        self.assertEqual(image.data, b"".join(rows))

    def test_rows_already_aligned_are_copied_verbatim(self) -> None:
        rows = [b"\x01\x02\x03\x04", b"\x05\x06\x07\x08"]
        image = self._load(make_bitmap(32, rows))
        self.assertEqual(image.data, b"\x01\x02\x03\x04\x05\x06\x07\x08")

    def test_top_down_bitmap_is_not_reversed(self) -> None:
        image = self._load(make_bitmap(8, DIAGONAL_ROWS, top_down=True))
        self.assertEqual(image.height, 8)
        self.assertEqual(image.data, b"".join(DIAGONAL_ROWS))

    def test_sprite_size_defaults_to_image_size(self) -> None:
        image = self._load(DIAGONAL_8X8)
        self.assertEqual((image.sprite_width, image.sprite_height), (8, 8))

    def test_sprite_size_overrides_are_kept(self) -> None:
        image = self._load(DIAGONAL_8X8, image=HDLImage(name="icon", id=0, sprite_width=4, sprite_height=2))
        self.assertEqual((image.sprite_width, image.sprite_height), (4, 2))

    def test_updates_document_color_mode(self) -> None:
        document = HDLDocument()
        loader = BitmapLoader(DictReader({"icon.bmp": DIAGONAL_8X8}))
        loader.load("icon.bmp", HDLImage(name="icon", id=0), document)
        self.assertEqual(document.color_mode, ColorMode.MONO)

    def test_extension_is_case_insensitive(self) -> None:
        image = self._load(DIAGONAL_8X8, path="ICON.BMP")
        self.assertEqual(image.size, 8)

    def test_rejects_other_extensions(self) -> None:
        reader = DictReader({"icon.png": DIAGONAL_8X8})
        with self.assertRaises(ImageLoadError):
            BitmapLoader(reader).load("icon.png", HDLImage(name="icon", id=0))
        self.assertEqual(reader.calls, [])

    def test_missing_file_fails(self) -> None:
        with self.assertRaises(ImageLoadError):
            BitmapLoader(DictReader({})).load("icon.bmp", HDLImage(name="icon", id=0))

    def test_truncated_header_fails(self) -> None:
        with self.assertRaises(ImageLoadError):
            self._load(DIAGONAL_8X8[:53])

    def test_truncated_pixel_data_fails(self) -> None:
        with self.assertRaises(ImageLoadError):
            self._load(DIAGONAL_8X8[:-4])

    def test_bad_signature_fails(self) -> None:
        with self.assertRaises(ImageLoadError):
            self._load(b"XX" + DIAGONAL_8X8[2:])

    def test_color_depth_other_than_one_fails(self) -> None:
        with self.assertRaises(ImageLoadError):
            self._load(make_bitmap(8, [b"\x00" * 3] * 2, bits_per_pixel=24))

    def test_reader_exception_becomes_load_error(self) -> None:
        def failing_reader(path: str, mode: str):
            raise OSError("disk on fire")

        with self.assertRaises(ImageLoadError):
            BitmapLoader(failing_reader).load("icon.bmp", HDLImage(name="icon", id=0))

    def test_accepts_future_results(self) -> None:
        def future_reader(path: str, mode: str) -> Future:
            future: Future = Future()
            future.set_result(DIAGONAL_8X8)
            return future

        image = BitmapLoader(future_reader).load("icon.bmp", HDLImage(name="icon", id=0))
        self.assertEqual(image.size, 8)

    def test_accepts_coroutine_results(self) -> None:
        async def read_async(path: str, mode: str) -> bytes:
            await asyncio.sleep(0)
            return DIAGONAL_8X8

        image = BitmapLoader(read_async).load("icon.bmp", HDLImage(name="icon", id=0))
        self.assertEqual(image.data, b"".join(DIAGONAL_ROWS))

    def test_rejected_future_fails(self) -> None:
        def rejected_reader(path: str, mode: str) -> Future:
            future: Future = Future()
            future.set_exception(RuntimeError("read rejected"))
            return future

        with self.assertRaises(ImageLoadError):
            BitmapLoader(rejected_reader).load("icon.bmp", HDLImage(name="icon", id=0))


if __name__ == "__main__":
    unittest.main()
