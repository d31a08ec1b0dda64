"""
Drawing quality metrics.

Provides quantitative checks of grid drawings:
- Edge crossings: Number of properly intersecting straight segments
- Grid bounds / area: Extent of the occupied grid

Crossing counts work on the floating-point view returned by
GridLayout.to_float_layout(); bounds and area read the grid layout directly.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence, Tuple, Union

from .types import Link, Node

if TYPE_CHECKING:
    from .placement import GridLayout


def edge_crossings(nodes: Sequence[Node], links: Sequence[Link]) -> int:
    """
    Count the number of edge crossings in the layout.

    Two edges cross if their line segments intersect (excluding
    shared endpoints).

    Args:
        nodes: List of positioned nodes
        links: List of links

    Returns:
        Number of edge crossings

    Time Complexity: O(m^2) where m = number of edges
    """
    crossings = 0
    n_links = len(links)

    for i in range(n_links):
        for j in range(i + 1, n_links):
            if _edges_cross(nodes, links[i], links[j]):
                crossings += 1

    return crossings


def _get_link_index(endpoint: Union[Node, int]) -> int:
    """Get index from a link endpoint (Node or int)."""
    if isinstance(endpoint, int):
        return endpoint
    return endpoint.index if endpoint.index is not None else 0


def _edges_cross(nodes: Sequence[Node], e1: Link, e2: Link) -> bool:
    s1 = _get_link_index(e1.source)
    t1 = _get_link_index(e1.target)
    s2 = _get_link_index(e2.source)
    t2 = _get_link_index(e2.target)

    # Skip if edges share an endpoint
    if s1 == s2 or s1 == t2 or t1 == s2 or t1 == t2:
        return False

    n = len(nodes)
    if not (0 <= s1 < n and 0 <= t1 < n and 0 <= s2 < n and 0 <= t2 < n):
        return False

    p1 = (nodes[s1].x, nodes[s1].y)
    p2 = (nodes[t1].x, nodes[t1].y)
    p3 = (nodes[s2].x, nodes[s2].y)
    p4 = (nodes[t2].x, nodes[t2].y)

    return _segments_intersect(p1, p2, p3, p4)


def _segments_intersect(
    p1: Tuple[float, float],
    p2: Tuple[float, float],
    p3: Tuple[float, float],
    p4: Tuple[float, float],
) -> bool:
    """Check if line segments (p1,p2) and (p3,p4) properly intersect."""

    def ccw(a: Tuple[float, float], b: Tuple[float, float], c: Tuple[float, float]) -> bool:
        return (c[1] - a[1]) * (b[0] - a[0]) > (b[1] - a[1]) * (c[0] - a[0])

    return ccw(p1, p3, p4) != ccw(p2, p3, p4) and ccw(p1, p2, p3) != ccw(p1, p2, p4)


def grid_bounds(layout: GridLayout) -> tuple[int, int, int, int]:
    """
    Bounding box of every visible vertex.

    Returns:
        (min_x, min_y, max_x, max_y); all zero for an empty drawing
    """
    points = [layout.location(v) for v in layout.graph.vertices() if layout.is_visible(v)]
    if not points:
        return (0, 0, 0, 0)
    xs = [p.x for p in points]
    ys = [p.y for p in points]
    return (min(xs), min(ys), max(xs), max(ys))


def grid_area(layout: GridLayout) -> int:
    """Number of grid cells covered by the bounding box (width * height)."""
    min_x, min_y, max_x, max_y = grid_bounds(layout)
    return (max_x - min_x) * (max_y - min_y)


__all__ = [
    "edge_crossings",
    "grid_area",
    "grid_bounds",
]
