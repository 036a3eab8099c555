"""
arrayfactors/tensor/product.py

Elementwise product of aligned factors.
"""

from __future__ import annotations

import logging
from typing import Sequence, Tuple

import numpy as np

logger = logging.getLogger(__name__)


def multiply_aligned(
    aligned: Sequence[np.ndarray], size: Tuple[int, ...], dtype: np.dtype
) -> np.ndarray:
    """
    Multiply aligned factors into a new dense array.

    The accumulator starts at one and factors are multiplied in order,
    so repeated calls round identically. For bool this is logical AND.
    """
    out = np.ones(size, dtype=dtype)
    for arr in aligned:
        np.multiply(out, arr, out=out)
    logger.debug("materialized %s array of size %s from %d factors", out.dtype, size, len(aligned))
    return out
