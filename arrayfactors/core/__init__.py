"""
Core module: dimension ownership, type promotion and the factored array.
"""

from arrayfactors.core.dim_indices import DimIndices, default_dimindices, as_dimindices
from arrayfactors.core.dtypes import promote_dtypes, cast_factor
from arrayfactors.core.factors import ArrayFactors, derive_size

__all__ = [
    "DimIndices",
    "default_dimindices",
    "as_dimindices",
    "promote_dtypes",
    "cast_factor",
    "ArrayFactors",
    "derive_size",
]
