"""
Numeric analysis layer: kernel density estimation and categorical aggregation.
"""

from .aggregation import AggregateResult, CategoryAggregator, CategoryGroup, StackSegment
from .density import estimate, evaluation_grid, normalize_curve

__all__ = [
    "AggregateResult",
    "CategoryAggregator",
    "CategoryGroup",
    "StackSegment",
    "estimate",
    "evaluation_grid",
    "normalize_curve",
]
