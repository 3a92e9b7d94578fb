"""Injected read capability used to fetch markup text and image bytes."""
from __future__ import annotations

import asyncio
import inspect
from concurrent.futures import Future
from pathlib import Path
from typing import Any, Awaitable, Callable, Optional, Union

from hdl_compiler.utils.logger import get_logger

LOGGER = get_logger(__name__)

MODE_TEXT = "text"
MODE_BINARY = "binary"

ReadPayload = Union[str, bytes, None]
ReadCapability = Callable[[str, str], Union[ReadPayload, Awaitable[ReadPayload], "Future[ReadPayload]"]]


class FileReader:
    """Stateless filesystem reader rooted at a base directory."""

    def __init__(self, base_dir: Optional[Path] = None, encoding: str = "utf-8") -> None:
        self.base_dir = Path(base_dir) if base_dir is not None else Path.cwd()
        self.encoding = encoding

    def __call__(self, path: str, mode: str) -> ReadPayload:
        if mode not in (MODE_TEXT, MODE_BINARY):
            raise ValueError(f"Unsupported read mode: {mode}")
        target = Path(path)
        if not target.is_absolute():
            target = self.base_dir / target
        if not target.is_file():
            LOGGER.debug("Read target missing: %s", target)
            return None
        if mode == MODE_TEXT:
            return target.read_text(encoding=self.encoding)
        return target.read_bytes()


def resolve_read(result: Any) -> ReadPayload:
    """Block until a read result is available.

    Plain values are returned unchanged, ``concurrent.futures.Future`` objects
    are waited on and awaitables are driven to completion on a fresh event
    loop. Errors raised by the read propagate to the caller.
    """
    if isinstance(result, Future):
        return result.result()
    if inspect.isawaitable(result):
        return asyncio.run(_await(result))
    return result


async def _await(awaitable: Awaitable[ReadPayload]) -> ReadPayload:
    return await awaitable
