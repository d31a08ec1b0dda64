"""
Embedded planar graphs.

An EmbeddedGraph keeps a rotation system and the faces it induces in sync
under edge/vertex insertion, removal and edge splitting.

Example:
    from planar_grid.embedding import EmbeddedGraph, split_edge

    g = EmbeddedGraph()
    for v in ("a", "b", "c"):
        g.add_vertex(v)
    g.add_edge("ab", "a", 0, "b", 0)
    g.add_edge("bc", "b", 0, "c", 0)
    g.add_edge("ca", "c", 0, "a", 0)
    split_edge(g, "ab", "m", "am", "mb")
"""

from ._face import EdgeSide, Face, FaceRecord
from ._graph import EmbeddedGraph
from .operations import split_edge

__all__ = [
    "EdgeSide",
    "EmbeddedGraph",
    "Face",
    "FaceRecord",
    "split_edge",
]
