"""Helpers to persist intermediate representations for debugging."""
from __future__ import annotations

import json
from dataclasses import asdict, is_dataclass
from enum import Enum
from pathlib import Path
from typing import Any

from hdl_compiler.model.document_model import HDLDocument


class DebugDumper:
    """Writes the built document onto disk for inspection."""

    def __init__(self, directory: Path) -> None:
        self.directory = directory

    def dump(self, document: HDLDocument) -> Path:
        """Persist the document model as JSON and return the written path."""
        self.directory.mkdir(parents=True, exist_ok=True)
        target = self.directory / "document_model.json"
        target.write_text(json.dumps(self._serialize(document), indent=2))
        return target

    def _serialize(self, value: Any) -> Any:
        if is_dataclass(value):
            return {k: self._serialize(v) for k, v in asdict(value).items()}
        if isinstance(value, Enum):
            return value.name
        if isinstance(value, (bytes, bytearray)):
            return {"length": len(value)}
        if isinstance(value, dict):
            return {k: self._serialize(v) for k, v in value.items()}
        if isinstance(value, (list, tuple)):
            return [self._serialize(v) for v in value]
        return value
