"""Exceptions raised by the compilation pipeline.

All of them are fatal at document level: the compiler facade turns them into
a failed :class:`~hdl_compiler.compiler.CompileResult`.
"""
from __future__ import annotations


class HDLError(ValueError):
    """Base class for document-level compile failures."""


class MarkupValidationError(HDLError):
    """Raised when the markup text is not well-formed."""


class MarkupStructureError(HDLError):
    """Raised when a markup node cannot be mapped onto the document model."""


class ImageLoadError(HDLError):
    """Raised when an image asset cannot be read or decoded."""


class EmitError(HDLError):
    """Raised when the document cannot be laid out in the binary format."""
