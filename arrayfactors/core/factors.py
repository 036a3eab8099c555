"""
arrayfactors/core/factors.py

Factored representation of a multidimensional array.

ArrayFactors stores F factor arrays and a DimIndices map. The full array is
the broadcast product of the factors:

    M[x_0, ..., x_{D-1}] = prod_i af[i][x_{di[i][0]}, x_{di[i][1]}, ...]

With the default map, factor i is 1-D and owns dimension i, so M is the
outer product of the factors. Only the factors are stored; the dense array
is recomputed on every request.
"""

from __future__ import annotations

import logging
from typing import Any, List, Optional, Sequence, Tuple, Union

import numpy as np

from arrayfactors.core.dim_indices import DimIndices, as_dimindices, default_dimindices
from arrayfactors.core.dtypes import cast_factor, promote_dtypes
from arrayfactors.exceptions import DimensionMismatchError, OwnershipError
from arrayfactors.tensor.align import align_margins
from arrayfactors.tensor.product import multiply_aligned

logger = logging.getLogger(__name__)

DimIndicesLike = Union[DimIndices, Sequence[Union[int, Sequence[int]]]]


def _readonly(arr: np.ndarray) -> np.ndarray:
    # Own the data so callers holding the input cannot mutate a factor
    arr = np.array(arr, copy=True)
    arr.setflags(write=False)
    return arr


def _as_factor(value: Any, i: int) -> np.ndarray:
    try:
        return np.asarray(value)
    except ValueError as e:
        # Ragged nested sequences have no array shape
        raise OwnershipError(f"not a rectangular array: {e}", factor=i) from e


def derive_size(factors: Sequence[np.ndarray], di: DimIndices) -> Tuple[int, ...]:
    """
    Size of the full array, checking every factor against every dimension it owns.

    Raises:
        OwnershipError: If a factor's rank differs from its ownership set
        DimensionMismatchError: If two factors disagree on a dimension's extent
    """
    if len(factors) != len(di):
        raise OwnershipError(f"{len(di)} ownership sets for {len(factors)} factors")

    sizes: List[Optional[int]] = [None] * di.ndims
    for i, arr in enumerate(factors):
        dims = di[i]
        if len(dims) != arr.ndim:
            raise OwnershipError(
                f"{len(dims)} dimension indices {list(dims)} for a {arr.ndim}-D factor",
                factor=i,
            )
        for j, d in enumerate(dims):
            n = arr.shape[j]
            if sizes[d] is None:
                sizes[d] = n
            elif sizes[d] != n:
                raise DimensionMismatchError(d, sizes[d], n)
    # DimIndices guarantees every dimension is owned, so no None remains
    return tuple(int(n) for n in sizes)


class ArrayFactors:
    """
    Factors of an array whose elements are the products of the factors.

    The factors can be vectors or multidimensional arrays themselves.

    Attributes:
        factors: Tuple of read-only factor arrays, all of one dtype
        di: Global dimensions owned by each factor
        size: Size of the full array along each global dimension

    Examples:
        >>> af = ArrayFactors([[1, 2, 3], [4, 5]])
        >>> af.size
        (3, 2)
        >>> af.to_array()
        array([[ 4,  5],
               [ 8, 10],
               [12, 15]])
    """

    def __init__(self, factors: Sequence[Any], di: Optional[DimIndicesLike] = None):
        arrays = [_as_factor(f, i) for i, f in enumerate(factors)]
        if not arrays:
            raise OwnershipError("ArrayFactors needs at least one factor")

        dtype = promote_dtypes(arrays)
        arrays = [_readonly(arr.astype(dtype, copy=False)) for arr in arrays]

        if di is None:
            di = default_dimindices(arrays)
        else:
            di = as_dimindices(di)

        self._size = derive_size(arrays, di)
        self._factors = arrays
        self._di = di
        self._dtype = dtype
        logger.debug(
            "built ArrayFactors: %d factors, %dD array of size %s, dtype %s",
            len(arrays), di.ndims, self._size, dtype,
        )

    @property
    def factors(self) -> Tuple[np.ndarray, ...]:
        return tuple(self._factors)

    @property
    def di(self) -> DimIndices:
        return self._di

    @property
    def size(self) -> Tuple[int, ...]:
        return self._size

    @property
    def shape(self) -> Tuple[int, ...]:
        return self._size

    @property
    def ndim(self) -> int:
        return self._di.ndims

    @property
    def dtype(self) -> np.dtype:
        """Promoted element type shared by all factors."""
        return self._dtype

    def __len__(self) -> int:
        return len(self._factors)

    def __getitem__(self, i: int) -> np.ndarray:
        return self._factors[i]

    def factor_shape(self, i: int) -> Tuple[int, ...]:
        """Shape factor i must have, implied by size and its ownership set."""
        return tuple(self._size[d] for d in self._di[i])

    def _checked(self, i: int, arr: Any) -> np.ndarray:
        arr = _as_factor(arr, i)
        expected = self.factor_shape(i)
        if arr.ndim != len(expected):
            raise OwnershipError(f"replacement is {arr.ndim}-D, expected {len(expected)}-D", factor=i)
        for d, n, m in zip(self._di[i], expected, arr.shape):
            if n != m:
                raise DimensionMismatchError(d, n, m)
        return _readonly(cast_factor(arr, self._dtype))

    def set_factor(self, i: int, arr: Any) -> None:
        """
        Replace factor i in place.

        The new factor must have the same shape as the old one and cast to
        dtype without changing kind. Ownership, size and dtype never change.
        """
        if not -len(self._factors) <= i < len(self._factors):
            raise IndexError(f"factor index {i} out of range for {len(self._factors)} factors")
        self._factors[i] = self._checked(i, arr)

    def replace_factor(self, i: int, arr: Any) -> "ArrayFactors":
        """Copy of self with factor i replaced."""
        new = ArrayFactors.__new__(ArrayFactors)
        new._factors = list(self._factors)
        new._di = self._di
        new._size = self._size
        new._dtype = self._dtype
        new.set_factor(i, arr)
        return new

    def align_margins(self) -> List[np.ndarray]:
        """Each factor broadcast to the full size, in factor order."""
        return align_margins(self._factors, self._di, self._size)

    def to_array(self) -> np.ndarray:
        """
        Dense array equal to the product of the aligned factors.

        Recomputed on every call.
        """
        return multiply_aligned(self.align_margins(), self._size, self._dtype)

    def __array__(self, dtype: Optional[np.dtype] = None, copy: Optional[bool] = None) -> np.ndarray:
        """
        Materialize for numpy.

        The dense array never exists without allocating it, so copy=False
        raises ValueError as the numpy protocol requires.
        """
        if copy is False:
            raise ValueError("ArrayFactors cannot be converted to an array without a copy")
        out = self.to_array()
        if dtype is not None:
            out = out.astype(dtype, copy=False)
        return out

    def __str__(self) -> str:
        lines = [f"Factors for {self.ndim}D array of size {self._size}:"]
        for dims, arr in zip(self._di, self._factors):
            prefix = f"  {list(dims)}: "
            body = np.array2string(arr, prefix=prefix)
            lines.append(prefix + body)
        return "\n".join(lines)

    def __repr__(self) -> str:
        return f"ArrayFactors(size={self._size}, dtype={self._dtype}, di={self._di!r})"
