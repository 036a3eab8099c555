"""
arrayfactors/core/dtypes.py

Numeric type promotion across factors.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

from arrayfactors.exceptions import PromotionError

# bool, signed int, unsigned int, float, complex
NUMERIC_KINDS = frozenset("biufc")


def check_numeric(dtype: np.dtype, what: str = "factor") -> None:
    if dtype.kind not in NUMERIC_KINDS:
        raise PromotionError(f"{what} has non-numeric element type {dtype}")


def promote_dtypes(arrays: Sequence[np.ndarray]) -> np.dtype:
    """
    Common element type of all arrays, following numpy promotion rules.

    Mixing integer and floating factors gives a floating type.
    """
    if not arrays:
        raise PromotionError("cannot promote element types of zero arrays")
    for i, arr in enumerate(arrays):
        check_numeric(arr.dtype, what=f"factor {i}")
    try:
        return np.result_type(*(arr.dtype for arr in arrays))
    except TypeError as e:
        raise PromotionError(f"no common element type for factors: {e}") from e


def cast_factor(arr: np.ndarray, dtype: np.dtype) -> np.ndarray:
    """Cast to dtype, refusing casts that would change the kind of number."""
    check_numeric(arr.dtype)
    if not np.can_cast(arr.dtype, dtype, casting="same_kind"):
        raise PromotionError(f"cannot store {arr.dtype} factor in {dtype} array factors")
    return arr.astype(dtype, copy=False)
