"""
Integer grid placement of canonically ordered plane graphs.

Example:
    from planar_grid.placement import IncrementalPlacer

    placer = IncrementalPlacer(graph).run()
    print(placer.positions_array())
"""

from ._reinsertion import reinsert_crossing_edges
from .base import GridLayout
from .incremental import IncrementalPlacer

__all__ = [
    "GridLayout",
    "IncrementalPlacer",
    "reinsert_crossing_edges",
]
