"""
Embedded graph builders.

Small families of biconnected plane graphs with a fixed embedding, used
by tests and demos:
- cycle_graph: simple cycle v0 .. v(n-1)
- stacked_triangles: nested triangles sharing the base edge v1-v2
"""

from __future__ import annotations

from .embedding import EmbeddedGraph
from .types import Vertex
from .validation import ValidationError


def cycle_graph(n: int) -> EmbeddedGraph[Vertex, str]:
    """
    Build the cycle v0 - v1 - ... - v(n-1) - v0.

    Edge ``e{i}`` joins v(i-1) and v(i); ``e0`` closes the cycle.

    Raises:
        ValidationError: If n < 3
    """
    if n < 3:
        raise ValidationError(f"A cycle needs at least 3 vertices, got {n}")

    graph: EmbeddedGraph[Vertex, str] = EmbeddedGraph()
    vertices = [Vertex(f"v{i}") for i in range(n)]
    for v in vertices:
        graph.add_vertex(v)
    for i in range(1, n):
        graph.insert_edge(f"e{i}", vertices[i - 1], 0, vertices[i], 0)
    graph.insert_edge("e0", vertices[0], 0, vertices[-1], 0)
    return graph


def stacked_triangles(n: int) -> EmbeddedGraph[Vertex, str]:
    """
    Build ``n`` triangles stacked on the base edge v1-v2.

    Every top vertex t{i} is joined to both base vertices; each new triangle
    is nested in the inner face next to the base edge.

    Raises:
        ValidationError: If n < 1
    """
    if n < 1:
        raise ValidationError(f"Need at least one triangle, got {n}")

    graph: EmbeddedGraph[Vertex, str] = EmbeddedGraph()
    v1 = Vertex("v1")
    v2 = Vertex("v2")
    graph.add_vertex(v1)
    graph.add_vertex(v2)
    graph.insert_edge("e0", v1, 0, v2, 0)

    count = 1
    for i in range(n):
        top = Vertex(f"t{i}")
        graph.add_vertex(top)
        graph.insert_edge(f"e{count}", v1, graph.degree(v1), top, 0)
        graph.insert_edge(f"e{count + 1}", v2, 0, top, 1)
        count += 2
    return graph


__all__ = [
    "cycle_graph",
    "stacked_triangles",
]
