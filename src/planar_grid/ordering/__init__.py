"""
Canonical vertex orderings.

Example:
    from planar_grid.ordering import CanonicalOrderer

    result = CanonicalOrderer().compute(graph)
    print(result.order)
"""

from ._types import CanonicalOrder, QuadrangleRepair, RepairCase, SplitEdge
from .canonical import CanonicalOrderer, is_directly_covered_by

__all__ = [
    "CanonicalOrder",
    "CanonicalOrderer",
    "QuadrangleRepair",
    "RepairCase",
    "SplitEdge",
    "is_directly_covered_by",
]
