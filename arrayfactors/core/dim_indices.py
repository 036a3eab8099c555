"""
arrayfactors/core/dim_indices.py

Dimension ownership map for factored arrays.

DimIndices maps each factor position to the ordered tuple of global
dimensions its axes correspond to. Entry i lists the global dimension of
axis 0, 1, ... of factor i, in that order.

Rules:
  - Identifiers are non-negative integers, 0-based like numpy axes.
  - A factor may not claim the same global dimension twice.
  - The union of all entries must be exactly {0, ..., D-1}.
  - Different factors may claim the same global dimension (sharing).
"""

from __future__ import annotations

import itertools
import numbers
from typing import Any, Iterator, Sequence, Tuple, Union

import numpy as np

from arrayfactors.exceptions import OwnershipError, UnassignedDimensionError

DimSet = Tuple[int, ...]

MAX_REPORTED_GAPS = 10


def _as_dim(value: Any, factor: int) -> int:
    if isinstance(value, (bool, np.bool_)) or not isinstance(value, numbers.Integral):
        raise OwnershipError(f"dimension identifier {value!r} is not an integer", factor=factor)
    d = int(value)
    if d < 0:
        raise OwnershipError(f"dimension identifier {d} is negative", factor=factor)
    return d


def _as_dimset(entry: Any, factor: int) -> DimSet:
    """Normalize a bare integer or a sequence of integers to a tuple."""
    if isinstance(entry, numbers.Integral) and not isinstance(entry, (bool, np.bool_)):
        return (_as_dim(entry, factor),)
    if isinstance(entry, (str, bytes)) or not isinstance(entry, (Sequence, np.ndarray)):
        raise OwnershipError(f"ownership entry {entry!r} is not a sequence of integers", factor=factor)
    dims = tuple(_as_dim(v, factor) for v in entry)
    if len(set(dims)) != len(dims):
        raise OwnershipError(f"ownership set has duplicates: {list(dims)}", factor=factor)
    return dims


class DimIndices:
    """
    Immutable mapping from factor position to owned global dimensions.

    Attributes:
        idx: One tuple of global dimension identifiers per factor
    """

    __slots__ = ("_idx", "_ndims")

    def __init__(self, idx: Sequence[Union[int, Sequence[int]]]):
        if isinstance(idx, DimIndices):
            idx = idx.idx
        sets = tuple(_as_dimset(entry, i) for i, entry in enumerate(idx))

        seen = set()
        for dims in sets:
            seen.update(dims)
        ndims = max(seen) + 1 if seen else 0

        if len(seen) < ndims:
            # Only the first few gaps; a mistyped id can make ndims huge
            gaps = (d for d in range(ndims) if d not in seen)
            missing = tuple(itertools.islice(gaps, MAX_REPORTED_GAPS))
            raise UnassignedDimensionError(missing, ndims, count=ndims - len(seen))

        self._idx = sets
        self._ndims = ndims

    @property
    def idx(self) -> Tuple[DimSet, ...]:
        return self._idx

    @property
    def ndims(self) -> int:
        """Number of global dimensions D."""
        return self._ndims

    @property
    def is_partition(self) -> bool:
        """True if no global dimension is shared between factors."""
        return sum(len(dims) for dims in self._idx) == self._ndims

    def owners(self, d: int) -> Tuple[int, ...]:
        """Factor positions whose ownership set contains dimension d."""
        if not 0 <= d < self._ndims:
            raise IndexError(f"dimension {d} out of range for {self._ndims}D array")
        return tuple(i for i, dims in enumerate(self._idx) if d in dims)

    def __getitem__(self, i: int) -> DimSet:
        return self._idx[i]

    def __len__(self) -> int:
        return len(self._idx)

    def __iter__(self) -> Iterator[DimSet]:
        return iter(self._idx)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DimIndices):
            return NotImplemented
        return self._idx == other._idx

    def __hash__(self) -> int:
        return hash(self._idx)

    def __repr__(self) -> str:
        return f"DimIndices({[list(dims) for dims in self._idx]})"


def default_dimindices(factors: Sequence[np.ndarray]) -> DimIndices:
    """
    Ownership for the plain outer product: factor i owns dimension i.

    Every factor must be one-dimensional.
    """
    for i, arr in enumerate(factors):
        ndim = np.ndim(arr)
        if ndim != 1:
            raise OwnershipError(
                f"default ownership needs 1-D factors, got {ndim}-D; pass explicit dimension indices",
                factor=i,
            )
    return DimIndices([[i] for i in range(len(factors))])


def as_dimindices(di: Union[DimIndices, Sequence[Union[int, Sequence[int]]]]) -> DimIndices:
    if isinstance(di, DimIndices):
        return di
    return DimIndices(di)
