"""Central logging configuration for the compiler."""
from __future__ import annotations

import logging
from typing import Optional

_DEFAULT_LEVEL = logging.INFO
_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a module-level logger, configuring the root handler on first use."""
    logger = logging.getLogger(name)
    if not logging.getLogger().handlers:
        logging.basicConfig(level=_DEFAULT_LEVEL, format=_FORMAT)
    return logger


def set_verbose(verbose: bool) -> None:
    """Switch the root logger between INFO and DEBUG output."""
    logging.getLogger().setLevel(logging.DEBUG if verbose else _DEFAULT_LEVEL)
