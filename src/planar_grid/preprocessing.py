"""
Graph preprocessing utilities.

This module provides the steps that prepare an embedded graph for the
canonical ordering and the incremental placer:
- Biconnected component detection
- Crossing removal for planarized 1-planar / NIC-planar graphs
- Empty-kite insertion around crossings
- Star triangulation of large faces

Crossings are expected in planarized form: a degree-4 vertex whose
rotation alternates between the endpoints of the two crossing edges.

Example:
    quadrangles = remove_crossings(graph, crossing_vertices)
    placer = IncrementalPlacer(graph, removed_crossings=quadrangles)
"""

from __future__ import annotations

from typing import Any, Callable, Hashable, Iterable, Mapping, Optional

from .embedding import EmbeddedGraph, split_edge
from .types import Quadrangle, Vertex, VertexKind
from .validation import PreconditionError

VertexFactory = Callable[[VertexKind, str], Hashable]
EdgeFactory = Callable[[str], Hashable]


def default_vertex_factory(kind: VertexKind, label: str) -> Vertex:
    """Create a fresh tagged vertex."""
    return Vertex(label, kind)


def default_edge_factory(label: str) -> str:
    """Use the label itself as edge key."""
    return label


# =============================================================================
# Biconnectivity
# =============================================================================


def adjacency_of(graph: EmbeddedGraph) -> dict[Any, list[Any]]:
    """Neighbor lists of every vertex, in rotation order."""
    return {v: graph.neighbors(v) for v in graph.vertices()}


def biconnected_components(adjacency: Mapping[Any, Iterable[Any]]) -> list[set[Any]]:
    """
    Decompose an undirected graph into biconnected components (Tarjan's).

    Args:
        adjacency: Neighbor collection per vertex; neighbors missing from the
            mapping are ignored

    Returns:
        Vertex set of every biconnected component. Isolated vertices form
        singleton components; a bridge forms a two-vertex component.
    """
    vertices = list(adjacency)
    position = {v: i for i, v in enumerate(vertices)}
    adj = [[position[w] for w in adjacency[v] if w in position] for v in vertices]
    n = len(vertices)

    disc = [-1] * n
    low = [0] * n
    parent = [-1] * n
    timer = 0
    edge_stack: list[tuple[int, int]] = []
    components: list[set[Any]] = []

    for root in range(n):
        if disc[root] != -1:
            continue
        if not adj[root]:
            disc[root] = timer
            timer += 1
            components.append({vertices[root]})
            continue

        disc[root] = low[root] = timer
        timer += 1
        stack: list[tuple[int, int]] = [(root, 0)]

        while stack:
            v, i = stack[-1]
            if i < len(adj[v]):
                stack[-1] = (v, i + 1)
                w = adj[v][i]
                if disc[w] == -1:
                    parent[w] = v
                    disc[w] = low[w] = timer
                    timer += 1
                    edge_stack.append((v, w))
                    stack.append((w, 0))
                elif w != parent[v] and disc[w] < disc[v]:
                    edge_stack.append((v, w))
                    low[v] = min(low[v], disc[w])
                continue

            stack.pop()
            if not stack:
                break
            u = stack[-1][0]
            low[u] = min(low[u], low[v])
            if low[v] >= disc[u]:
                # u separates the subtree of v: pop its component
                members: set[int] = set()
                while edge_stack:
                    a, b = edge_stack.pop()
                    members.update((a, b))
                    if (a, b) == (u, v):
                        break
                components.append({vertices[x] for x in members})

    return components


def is_biconnected(graph: EmbeddedGraph) -> bool:
    """
    Check whether a graph is biconnected.

    A single edge counts as biconnected; graphs with fewer than two vertices
    do not.
    """
    if graph.vertex_count < 2:
        return False
    components = biconnected_components(adjacency_of(graph))
    return len(components) == 1 and len(components[0]) == graph.vertex_count


# =============================================================================
# Crossings
# =============================================================================


def _crossing_ring(graph: EmbeddedGraph, crossing: Any) -> list[Any]:
    if graph.degree(crossing) != 4:
        raise PreconditionError(
            f"Crossing vertex {crossing!r} must have degree 4, has degree {graph.degree(crossing)}"
        )
    return graph.neighbors(crossing)


def remove_crossings(graph: EmbeddedGraph, crossing_vertices: Iterable[Any]) -> list[Quadrangle]:
    """
    Remove planarization crossing vertices from a graph.

    The two crossing edges at a vertex are the pairs of rotation neighbors
    that are not consecutive: positions 0-2 and 1-3.

    Args:
        graph: Planarized graph (modified in place)
        crossing_vertices: Degree-4 crossing vertices of ``graph``

    Returns:
        One quadrangle per removed crossing: the endpoint pairs of the two
        crossing edges

    Raises:
        PreconditionError: If a crossing vertex does not have degree 4
    """
    removed: list[Quadrangle] = []
    for crossing in crossing_vertices:
        ring = _crossing_ring(graph, crossing)
        quadrangle = ((ring[0], ring[2]), (ring[1], ring[3]))
        if quadrangle not in removed:
            removed.append(quadrangle)
        graph.remove_vertex(crossing)
    return removed


def insert_empty_kites(
    graph: EmbeddedGraph,
    crossing_vertices: Iterable[Any],
    vertex_factory: Optional[VertexFactory] = None,
    edge_factory: Optional[EdgeFactory] = None,
) -> list[Any]:
    """
    Surround every crossing with the four edges of an empty kite.

    For consecutive rotation neighbors a, b of a crossing vertex the kite
    edge a-b must run directly beside the two crossing half-edges. Missing
    kite edges are inserted as dummy edges. An existing edge a-b that runs
    elsewhere is subdivided by a bend point first so that no multi-edge
    arises. A kite face never stays the outer face.

    Args:
        graph: Planarized NIC-planar graph (modified in place)
        crossing_vertices: Degree-4 crossing vertices of ``graph``
        vertex_factory: Creates bend points (default: Vertex)
        edge_factory: Creates edge keys from labels (default: the label)

    Returns:
        Inserted dummy edges (not the halves of subdivided edges)
    """
    make_vertex = vertex_factory or default_vertex_factory
    make_edge = edge_factory or default_edge_factory
    inserted: list[Any] = []

    for crossing in crossing_vertices:
        ring = _crossing_ring(graph, crossing)
        for i in range(4):
            a, b = ring[i], ring[(i + 1) % 4]

            if graph.is_neighbor(a, b):
                beside_at_a = (graph.neighbor_index(b, a) + 1) % graph.degree(a) == graph.neighbor_index(
                    crossing, a
                )
                beside_at_b = graph.neighbor_index(a, b) == (
                    graph.neighbor_index(crossing, b) + 1
                ) % graph.degree(b)
                if beside_at_a and beside_at_b:
                    continue
                existing = graph.find_edge(a, b)
                split_edge(
                    graph,
                    existing,
                    make_vertex(VertexKind.BEND_POINT, f"bend({existing})"),
                    make_edge(f"{existing}[0]"),
                    make_edge(f"{existing}[1]"),
                )

            dummy = make_edge(f"kite({a}-{b})")
            graph.insert_edge(
                dummy,
                a,
                graph.neighbor_index(crossing, a),
                b,
                graph.neighbor_index(crossing, b) + 1,
            )
            inserted.append(dummy)

            kite = graph.face_between(a, b, crossing)
            if graph.is_outer_face(kite):
                left, right = graph.faces_of(dummy)
                graph.set_outer_face(right if left.id == kite.id else left)

    return inserted


# =============================================================================
# Triangulation
# =============================================================================


def star_triangulate(
    graph: EmbeddedGraph,
    vertex_factory: Optional[VertexFactory] = None,
    edge_factory: Optional[EdgeFactory] = None,
) -> list[Any]:
    """
    Triangulate every face larger than a triangle with a central star.

    A new vertex is placed inside each such face (the outer face included)
    and joined to every corner of the face walk. A corner that appears more
    than once on the walk would receive a multi-edge; the earlier edge is
    subdivided by a bend point instead.

    Returns:
        All added vertices (star centers and bend points)
    """
    make_vertex = vertex_factory or default_vertex_factory
    make_edge = edge_factory or default_edge_factory

    added: list[Any] = []
    centers: list[Any] = []
    plan: list[tuple[Any, Any, Any]] = []
    for face in graph.all_faces():
        if len(face) <= 3:
            continue
        center = make_vertex(VertexKind.REGULAR, f"star{len(centers)}")
        centers.append(center)
        for record in face:
            plan.append((center, record.vertex, record.edge))
    added.extend(centers)

    for center in centers:
        graph.add_vertex(center)

    for count, (center, target, boundary_edge) in enumerate(plan):
        index_at_center = graph.degree(center)
        far_end = graph.opposite(target, boundary_edge)
        index_at_target = (graph.neighbor_index(far_end, target) + 1) % graph.degree(target)
        if graph.is_neighbor(center, target):
            existing = graph.find_edge(center, target)
            bend = make_vertex(VertexKind.BEND_POINT, f"bend({existing})")
            added.append(bend)
            split_edge(graph, existing, bend, make_edge(f"{existing}[0]"), make_edge(f"{existing}[1]"))
        graph.insert_edge(make_edge(f"star-e{count}"), center, index_at_center, target, index_at_target)

    return added


__all__ = [
    "EdgeFactory",
    "VertexFactory",
    "adjacency_of",
    "biconnected_components",
    "default_edge_factory",
    "default_vertex_factory",
    "insert_empty_kites",
    "is_biconnected",
    "remove_crossings",
    "star_triangulate",
]
