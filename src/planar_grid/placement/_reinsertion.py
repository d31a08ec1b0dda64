"""Reinsertion of removed crossing edges into a finished NIC-planar placement."""

from __future__ import annotations

import warnings
from typing import TYPE_CHECKING, Any, Optional, Sequence

from ..ordering import CanonicalOrder, is_directly_covered_by
from ..preprocessing import (
    EdgeFactory,
    VertexFactory,
    default_edge_factory,
    default_vertex_factory,
)
from ..types import GridPoint, Quadrangle, VertexKind
from ..validation import EmbeddingWarning, PreconditionError

if TYPE_CHECKING:
    from .base import GridLayout


def _half(value: int) -> int:
    """Integer half rounded toward zero."""
    q = abs(value) // 2
    return q if value >= 0 else -q


def _add_path_edge(layout: GridLayout, edge: Any, v1: Any, index1: int, v2: Any, index2: int) -> None:
    if not layout.graph.add_edge(edge, v1, index1, v2, index2):
        warnings.warn(
            f"Could not insert crossing edge part {edge!r} between {v1!r} and {v2!r}",
            EmbeddingWarning,
            stacklevel=3,
        )


def _corners(layout: GridLayout, result: CanonicalOrder, quadrangle: Quadrangle) -> tuple[Any, Any, Any, Any]:
    """
    Name the corners A, B, C, D of a quadrangle.

    A-C is the crossing pair whose endpoints are still adjacent (through the
    dummy edge of the ordering), with A ordered first. B and D follow and
    precede A around C.
    """
    graph = layout.graph
    first, second = quadrangle
    pair = first if graph.is_neighbor(*first) else second
    if not graph.is_neighbor(*pair):
        raise PreconditionError(f"No dummy edge inside quadrangle {quadrangle!r}")
    a, c = pair
    if result.position(a) > result.position(c):
        a, c = c, a

    rotation = graph.rotation(c)
    at_c = graph.neighbor_index(a, c)
    d = rotation[(at_c - 1) % len(rotation)][0]
    b = rotation[(at_c + 1) % len(rotation)][0]
    return a, b, c, d


def reinsert_crossing_edges(
    layout: GridLayout,
    result: CanonicalOrder,
    quadrangles: Sequence[Quadrangle],
    *,
    vertex_factory: Optional[VertexFactory] = None,
    edge_factory: Optional[EdgeFactory] = None,
) -> list[Any]:
    """
    Draw every removed crossing pair through a crossing point.

    The shift vertices of ``result`` are removed from the graph first. For
    each quadrangle the dummy edge A-C is replaced by the paths
    A - bend - crossing - C and B - bend - crossing - D, with coordinates
    derived from the placed corners. Which formula applies depends on
    whether C was ordered after both B and D, and otherwise on whether C
    directly covers the lower of B and D.

    Returns:
        Inserted crossing points, one per quadrangle
    """
    graph = layout.graph
    make_vertex = vertex_factory or default_vertex_factory
    make_edge = edge_factory or default_edge_factory

    for shift in result.shift_vertices:
        if graph.has_vertex(shift):
            for edge in graph.incident_edges(shift):
                layout.forget_edge(edge)
            graph.remove_vertex(shift)
        layout.forget(shift)

    crossings: list[Any] = []
    for quadrangle in quadrangles:
        a, b, c, d = _corners(layout, result, quadrangle)
        pa, pb, pc, pd = (layout.location(v) for v in (a, b, c, d))
        lower, pl = (b, pb) if pb.y < pd.y else (d, pd)
        lower_is_b = lower == b
        covered = is_directly_covered_by(lower, c, graph, result.order)

        graph.remove_edge(graph.find_edge(a, c))
        bend_ac = make_vertex(VertexKind.BEND_POINT, f"bend({a}-{c})")
        bend_bd = make_vertex(VertexKind.BEND_POINT, f"bend({b}-{d})")
        crossing = make_vertex(VertexKind.CROSSING_POINT, f"cross({a}-{c}|{b}-{d})")
        for v in (bend_ac, bend_bd, crossing):
            graph.add_vertex(v)

        if graph.is_neighbor(a, b):
            index_a = graph.neighbor_index(b, a) + 1
        else:
            index_a = graph.neighbor_index(d, a)
        index_b = graph.neighbor_index(c, b) + 1
        index_c = graph.neighbor_index(b, c)
        index_d = graph.neighbor_index(c, d)
        ac = [make_edge(f"e({a}-{c})[{i}]") for i in range(3)]
        bd = [make_edge(f"e({b}-{d})[{i}]") for i in range(3)]

        c_last = result.position(c) > result.position(b) and result.position(c) > result.position(d)
        if c_last:
            layout.set_location(crossing, GridPoint(pa.x, pl.y))
            layout.set_location(bend_ac, GridPoint(pa.x, pl.y + 1))
            layout.set_location(bend_bd, GridPoint(pa.x - 1 if lower_is_b else pa.x + 1, pl.y))
            _add_path_edge(layout, ac[0], a, index_a, crossing, 0)
            _add_path_edge(layout, ac[1], crossing, 1, bend_ac, 0)
            _add_path_edge(layout, ac[2], bend_ac, 1, c, index_c)
        else:
            if covered:
                if lower_is_b:
                    x = _half(pc.x - pc.y + pl.x + pl.y)
                    y = _half(-pc.x + pc.y + pl.x + pl.y)
                else:
                    x = _half(pc.x + pc.y + pl.x - pl.y)
                    y = _half(pc.x + pc.y - pl.x + pl.y)
                dx = -1 if lower_is_b else 1
                layout.set_location(crossing, GridPoint(x, y))
                layout.set_location(bend_ac, GridPoint(x + dx, y - 1))
                layout.set_location(bend_bd, GridPoint(x + dx, y + 1))
            else:
                layout.set_location(crossing, GridPoint(pc.x, pl.y))
                layout.set_location(bend_ac, GridPoint(pc.x, pl.y - 1))
                if lower_is_b:
                    layout.set_location(bend_bd, GridPoint(pc.x - (pc.y - pb.y), pl.y))
                else:
                    layout.set_location(bend_bd, GridPoint(pc.x + (pc.y - pd.y), pl.y))
            _add_path_edge(layout, ac[0], a, index_a, bend_ac, 0)
            _add_path_edge(layout, ac[1], bend_ac, 1, crossing, 0)
            _add_path_edge(layout, ac[2], crossing, 1, c, index_c)

        if lower_is_b:
            _add_path_edge(layout, bd[0], b, index_b, crossing, 1)
            _add_path_edge(layout, bd[1], crossing, 3, bend_bd, 0)
            _add_path_edge(layout, bd[2], bend_bd, 1, d, index_d)
        else:
            _add_path_edge(layout, bd[0], b, index_b, bend_bd, 0)
            _add_path_edge(layout, bd[1], bend_bd, 1, crossing, 1)
            _add_path_edge(layout, bd[2], crossing, 3, d, index_d)

        # The dummy edge from A to the lower corner would cross the new path
        if not c_last and not covered:
            dummy = graph.find_edge(a, lower)
            if dummy is not None:
                graph.remove_edge(dummy)

        for v in (bend_ac, bend_bd, crossing):
            layout.set_visible(v)
        for edge in ac + bd:
            if graph.has_edge(edge):
                layout.set_edge_visible(edge)
        crossings.append(crossing)

    return crossings


__all__ = [
    "reinsert_crossing_edges",
]
