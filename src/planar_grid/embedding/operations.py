"""Compound editing operations on an EmbeddedGraph."""

from __future__ import annotations

from typing import Any

from ..validation import InvalidInsertionError, UnknownEdgeError
from ._graph import EmbeddedGraph


def split_edge(graph: EmbeddedGraph, edge: Any, via: Any, first: Any, second: Any) -> None:
    """
    Replace ``edge`` by a path of two edges through ``via``.

    ``first`` joins the first endpoint of ``edge`` to ``via`` and ``second``
    joins ``via`` to the second endpoint. Both incident faces keep their
    boundary (with one more vertex) and the outer face stays the outer face.
    ``via`` is added to the graph if it is not present yet.

    Raises:
        UnknownEdgeError: If ``edge`` is not in the graph
        InvalidInsertionError: If ``via`` already has incident edges
    """
    ends = graph.endpoints(edge)
    if ends is None:
        raise UnknownEdgeError(f"Edge {edge!r} is not in the graph")
    if not graph.has_vertex(via):
        graph.add_vertex(via)
    if graph.degree(via) != 0:
        raise InvalidInsertionError(f"Split vertex {via!r} must be isolated, has degree {graph.degree(via)}")

    v0, v1 = ends
    index_at_v0 = (graph.edge_index(edge, v0) + 1) % graph.degree(v0)
    index_at_v1 = graph.edge_index(edge, v1)
    outer_on_left = graph.is_outer_face(graph.left_face(edge, v0))
    outer_on_right = graph.is_outer_face(graph.right_face(edge, v0))

    graph.insert_edge(first, v0, index_at_v0, via, 0)
    graph.insert_edge(second, via, 1, v1, index_at_v1)
    graph.remove_edge(edge)

    if outer_on_left:
        graph.set_outer_face(graph.left_face(first, v0))
    elif outer_on_right:
        graph.set_outer_face(graph.right_face(first, v0))


__all__ = [
    "split_edge",
]
