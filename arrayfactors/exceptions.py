"""
arrayfactors/exceptions.py

Errors raised while building or updating a factored array.

Every error is a configuration error detected eagerly; none is retryable.
"""

from __future__ import annotations

from typing import Optional, Tuple


class ArrayFactorsError(Exception):
    """Base class for arrayfactors exceptions."""


class DimensionMismatchError(ArrayFactorsError, ValueError):
    """Two factors (or a factor and the derived size) disagree on an extent."""

    def __init__(self, dim: int, expected: int, found: int):
        super().__init__(
            f"Dimension sizes not equal for dimension {dim}: {expected} and {found}"
        )
        self.dim = dim
        self.expected = expected
        self.found = found


class UnassignedDimensionError(ArrayFactorsError, ValueError):
    """
    Dimensions below the highest identifier that no factor owns.

    missing holds the first few unowned identifiers, count how many there are.
    """

    def __init__(self, missing: Tuple[int, ...], ndims: int, count: Optional[int] = None):
        missing = tuple(missing)
        if count is None:
            count = len(missing)
        more = f" and {count - len(missing)} more" if count > len(missing) else ""
        super().__init__(
            f"Dimensions {list(missing)}{more} of a {ndims}D array are not owned by any factor"
        )
        self.missing = missing
        self.count = count
        self.ndims = ndims


class OwnershipError(ArrayFactorsError, ValueError):
    """A factor's ownership set is malformed or does not match its rank."""

    def __init__(self, message: str, *, factor: Optional[int] = None):
        if factor is not None:
            message = f"factor {factor}: {message}"
        super().__init__(message)
        self.factor = factor


class PromotionError(ArrayFactorsError, TypeError):
    pass
