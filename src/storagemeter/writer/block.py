"""Payload block generation."""

from __future__ import annotations

import logging
import random
import time

logger = logging.getLogger(__name__)


def generate_block(size: int, seed: int | None = None) -> bytes:
    """Return *size* pseudo-random bytes.

    Seeded from the current time unless *seed* is given, so only the length
    is deterministic. MemoryError propagates to the caller.
    """
    if size < 0:
        raise ValueError(f"block size must not be negative, got {size}")
    rng = random.Random(time.time_ns() if seed is None else seed)
    logger.debug("Generating %d bytes of random data", size)
    block = rng.randbytes(size)
    logger.debug("Block generated")
    return block


def resize_block(block: bytes, size: int) -> bytes:
    """Truncate *block* to *size* bytes. Never grows it."""
    if size < 0:
        raise ValueError(f"block size must not be negative, got {size}")
    if size >= len(block):
        return block
    return block[:size]
