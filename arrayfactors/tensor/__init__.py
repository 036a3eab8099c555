"""
Tensor module: broadcast alignment and products of aligned factors.
"""

from arrayfactors.tensor.align import align_factor, align_margins
from arrayfactors.tensor.product import multiply_aligned

__all__ = [
    "align_factor",
    "align_margins",
    "multiply_aligned",
]
