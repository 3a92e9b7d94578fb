"""Compiler facade tying markup parsing, document building and emission together."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from hdl_compiler.model.document_model import HDLDocument
from hdl_compiler.parser.document_builder import DocumentBuilder
from hdl_compiler.renderer.binary_emitter import BinaryEmitter
from hdl_compiler.utils.errors import HDLError
from hdl_compiler.utils.file_access import MODE_TEXT, ReadCapability, resolve_read
from hdl_compiler.utils.logger import get_logger
from hdl_compiler.utils.xml_utils import parse_markup

LOGGER = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class CompileResult:
    """Outcome of a public compiler operation."""

    ok: bool
    data: bytes = b""
    error: Optional[str] = None

    @classmethod
    def success(cls, data: bytes = b"") -> "CompileResult":
        return cls(ok=True, data=data)

    @classmethod
    def failure(cls, error: str) -> "CompileResult":
        return cls(ok=False, error=error)


class HDLCompiler:
    """Compiles markup into the binary UI format.

    Each instance owns at most one document; loading again discards it. The
    read capability is only used to fetch bytes and may be shared.
    """

    def __init__(self, reader: ReadCapability) -> None:
        self._reader = reader
        self._document: Optional[HDLDocument] = None

    @property
    def document(self) -> Optional[HDLDocument]:
        return self._document

    def load(self, path: str) -> CompileResult:
        """Read markup from ``path`` through the read capability and build the document."""
        self._document = None
        try:
            text = resolve_read(self._reader(path, MODE_TEXT))
        except Exception as exc:
            LOGGER.error("Could not read %s: %s", path, exc)
            return CompileResult.failure(f"Could not read {path}: {exc}")
        if text is None:
            LOGGER.error("Source file %s not found", path)
            return CompileResult.failure(f"Source file {path} not found")
        if isinstance(text, bytes):
            try:
                text = text.decode("utf-8")
            except UnicodeDecodeError as exc:
                LOGGER.error("Source file %s is not valid UTF-8: %s", path, exc)
                return CompileResult.failure(f"Source file {path} is not valid UTF-8: {exc}")
        return self.load_source(text)

    def load_source(self, text: str) -> CompileResult:
        """Parse ``text`` and build a fresh document, replacing any previous one."""
        self._document = None
        try:
            nodes = parse_markup(text)
            document = DocumentBuilder(self._reader).build(nodes)
        except HDLError as exc:
            LOGGER.error("Load failed: %s", exc)
            return CompileResult.failure(str(exc))
        except Exception as exc:
            LOGGER.exception("Unexpected failure while loading markup")
            return CompileResult.failure(f"Unexpected failure while loading markup: {exc}")
        self._document = document
        return CompileResult.success()

    def compile(self) -> CompileResult:
        """Emit the binary artifact for the loaded document."""
        if self._document is None:
            return CompileResult.failure("No document loaded")
        try:
            data = BinaryEmitter(self._document).emit()
        except HDLError as exc:
            LOGGER.error("Compile failed: %s", exc)
            return CompileResult.failure(str(exc))
        except Exception as exc:
            LOGGER.exception("Unexpected failure while emitting binary")
            return CompileResult.failure(f"Unexpected failure while emitting binary: {exc}")
        LOGGER.debug("Emitted %d bytes", len(data))
        return CompileResult.success(data)

    def compile_source(self, text: str) -> CompileResult:
        """Load ``text`` and compile it in one step."""
        loaded = self.load_source(text)
        if not loaded.ok:
            return loaded
        return self.compile()
