"""
ArrayFactors: factored representation of multidimensional arrays

An array is stored as a small set of factor arrays whose broadcast product
reconstructs it. Each factor owns an arbitrary subset of the array's
dimensions; factors may share a dimension if they agree on its size.

Key components:
- core: Dimension ownership map, type promotion and ArrayFactors
- tensor: Broadcast alignment and products of aligned factors
- exceptions: Construction and replacement errors
"""

__version__ = "1.0.0"

from arrayfactors.core.dim_indices import DimIndices, default_dimindices
from arrayfactors.core.factors import ArrayFactors
from arrayfactors.tensor.align import align_margins
from arrayfactors.exceptions import (
    ArrayFactorsError,
    DimensionMismatchError,
    UnassignedDimensionError,
    OwnershipError,
    PromotionError,
)

__all__ = [
    "DimIndices",
    "default_dimindices",
    "ArrayFactors",
    "align_margins",
    # Errors
    "ArrayFactorsError",
    "DimensionMismatchError",
    "UnassignedDimensionError",
    "OwnershipError",
    "PromotionError",
]
