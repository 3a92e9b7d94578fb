"""Resolve textual attribute values into typed, width-selected wire values."""
from __future__ import annotations

import math
import re
from typing import List, Optional

from hdl_compiler.model.document_model import HDLDocument
from hdl_compiler.model.elements import NULL_VALUE, ResolvedValue, Scalar
from hdl_compiler.model.symbols import Transform, ValueType
from hdl_compiler.utils.logger import get_logger

LOGGER = get_logger(__name__)

FLOAT_EPSILON = 0.00001
I8_LIMIT = 0x7F
I16_LIMIT = 0x7FFF

ARRAY_OPEN = "["
ARRAY_CLOSE = "]"
ARRAY_SEPARATOR = ","
BINDING_SIGIL = "$"

# Longest numeric prefix, the way parseFloat-style readers accept "12px" or "100%".
_NUMBER_PREFIX = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def select_int_type(value: float) -> ValueType:
    """Narrowest integer type for the magnitude of ``value``."""
    magnitude = abs(value)
    if magnitude < I8_LIMIT:
        return ValueType.I8
    if magnitude < I16_LIMIT:
        return ValueType.I16
    return ValueType.I32


def parse_number(text: str) -> Optional[float]:
    """Return ``text`` as a finite float, or ``None`` if it is not numeric."""
    match = _NUMBER_PREFIX.match(text.lstrip())
    if match is None:
        return None
    number = float(match.group(0))
    if not math.isfinite(number):
        return None
    return number


class ValueResolver:
    """Resolves attribute strings against the images and bindings of a document."""

    def __init__(self, document: HDLDocument) -> None:
        self._document = document

    def resolve(self, raw: str) -> ResolvedValue:
        """Resolve ``raw``; ``NULL_VALUE`` tells the caller to drop the attribute."""
        if raw.startswith(ARRAY_OPEN):
            return self._resolve_array(raw)
        return self._resolve_scalar(raw)

    # ------------------------------------------------------------------
    def _resolve_array(self, raw: str) -> ResolvedValue:
        if not raw.endswith(ARRAY_CLOSE):
            LOGGER.warning("Missing %s from array value %r", ARRAY_CLOSE, raw)
            return NULL_VALUE

        # Nested brackets are not understood: the interior is split on every comma.
        values: List[Scalar] = []
        array_type = ValueType.NULL
        for token in raw[1:-1].split(ARRAY_SEPARATOR):
            resolved = self.resolve(token.strip())
            if resolved.is_null:
                LOGGER.warning("Dropping unresolved array item %r in %r", token, raw)
                continue
            values.extend(resolved.values)
            # The array is tagged with whatever the last resolved item produced.
            array_type = resolved.type

        if array_type is ValueType.NULL:
            return NULL_VALUE
        return ResolvedValue(array_type, values)

    def _resolve_scalar(self, raw: str) -> ResolvedValue:
        number = parse_number(raw)
        if number is not None:
            return self._resolve_number(number)

        if raw.startswith(BINDING_SIGIL):
            return self._resolve_binding(raw)

        transform = Transform.lookup(raw)
        if transform is not None:
            return ResolvedValue(select_int_type(transform.constant), transform.constant)

        image = self._document.find_image(raw)
        if image is not None:
            if image.preloaded:
                LOGGER.debug("Dropping reference to preloaded image %r", raw)
                return NULL_VALUE
            return ResolvedValue(ValueType.IMG, image.id)

        LOGGER.warning("String attribute values are not supported: %r", raw)
        return NULL_VALUE

    def _resolve_number(self, number: float) -> ResolvedValue:
        # The remainder is taken against floor(), so -1.000001 is a float while 1.000001 is an integer.
        if number - math.floor(number) > FLOAT_EPSILON:
            return ResolvedValue(ValueType.FLOAT, number)
        return ResolvedValue(select_int_type(number), math.floor(number))

    def _resolve_binding(self, raw: str) -> ResolvedValue:
        name = raw[len(BINDING_SIGIL) :]
        binding = self._document.find_binding(name)
        if binding is None:
            LOGGER.warning("Binding %s not found", raw)
            return NULL_VALUE
        return ResolvedValue(ValueType.BIND, binding.id)


def parse_value(raw: str, document: HDLDocument) -> ResolvedValue:
    """Convenience wrapper around :class:`ValueResolver`."""
    return ValueResolver(document).resolve(raw)
