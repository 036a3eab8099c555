"""
arrayfactors/tensor/align.py

Broadcast alignment of factors to the full dimensionality.

A factor owning global dimensions (d_0, ..., d_k) in axis order is aligned by:
  - transposing its axes into ascending global-dimension order,
  - inserting singleton axes for every dimension it does not own,
  - broadcasting to the full size (read-only view, no data copy).
"""

from __future__ import annotations

import logging
from typing import List, Sequence, Tuple

import numpy as np

from arrayfactors.core.dim_indices import DimIndices, DimSet
from arrayfactors.exceptions import DimensionMismatchError, OwnershipError

logger = logging.getLogger(__name__)


def align_factor(arr: np.ndarray, dims: DimSet, size: Tuple[int, ...]) -> np.ndarray:
    """
    Align a single factor to global dimensions 0..len(size)-1.

    Args:
        arr: Factor array, axis j belongs to global dimension dims[j]
        dims: Ownership set of the factor
        size: Full array size

    Returns:
        Read-only array of shape size

    Raises:
        OwnershipError: If dims does not match the factor rank or size
        DimensionMismatchError: If an owned axis disagrees with size
    """
    if len(dims) != arr.ndim:
        raise OwnershipError(f"{len(dims)} dimension indices for a {arr.ndim}-D factor")
    pos = {d: j for j, d in enumerate(dims)}
    if len(pos) != len(dims):
        raise OwnershipError(f"ownership set has duplicates: {list(dims)}")

    # Owned axes in the order they appear in the full array
    perm = [pos[d] for d in range(len(size)) if d in pos]
    if len(perm) != arr.ndim:
        raise OwnershipError(f"dimension indices {list(dims)} out of range for {len(size)}D array")
    data = arr
    if perm != list(range(arr.ndim)):
        data = np.transpose(arr, axes=perm)

    shape: List[int] = []
    j = 0
    for d, n in enumerate(size):
        if d in pos:
            if data.shape[j] != n:
                raise DimensionMismatchError(d, n, data.shape[j])
            shape.append(n)
            j += 1
        else:
            shape.append(1)

    return np.broadcast_to(data.reshape(shape), size)


def align_margins(
    factors: Sequence[np.ndarray], di: DimIndices, size: Tuple[int, ...]
) -> List[np.ndarray]:
    """Align every factor to size, in factor order."""
    if len(factors) != len(di):
        raise OwnershipError(f"{len(di)} ownership sets for {len(factors)} factors")
    aligned = []
    for i, (arr, dims) in enumerate(zip(factors, di)):
        try:
            aligned.append(align_factor(arr, dims, size))
        except OwnershipError as e:
            raise OwnershipError(str(e), factor=i) from e
    logger.debug("aligned %d factors to size %s", len(aligned), size)
    return aligned
