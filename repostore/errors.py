"""Unrecoverable integrity faults."""

from __future__ import annotations

import logging
from typing import NoReturn

logger = logging.getLogger(__name__)


class FatalError(RuntimeError):
    """Raised when persisted state or caller input violates a store invariant.

    This is not a "not found" condition. It means the caller handed the store
    an entity that was never persisted, or a row references another row that
    no longer exists.
    """


def fatal_error(message: str) -> NoReturn:
    """Log and abort the current operation."""
    logger.critical(message)
    raise FatalError(message)
