"""
Canonical ordering of biconnected plane graphs.

Implements the vertex ordering of Harel and Sardas (1995): starting from
an edge of the outer face, vertices are added one at a time so that every
prefix induces a biconnected plane subgraph (a single edge for the first
two vertices). Three counters drive the choice of the next vertex:

- A(f): edges of face f already inside the prefix
- N(v): neighbors of v already inside the prefix
- F(v): "ready" faces whose only vertex outside the prefix is v

A vertex with N(v) >= 2 and N(v) == F(v) + 1 closes all of its ready faces
and is taken first. Otherwise a vertex with a single placed neighbor is
taken if that neighbor gives it legal support: the rotation neighbor
next to it (left support) or previous to it (right support) is already
placed, where the first and second ordered vertex respectively cannot
serve as anchor.

NIC-planar extension:
    If removed crossings are registered, each crossing is a quadrangle
    (a, c), (b, d) whose crossing edges a-c and b-d were deleted. When the
    first corner is ordered, a dummy edge divides the empty quadrangle
    face. When the last corner is ordered, the quadrangle is repaired by a
    shift vertex (opposite corner covered) or by splitting a quadrangle edge
    with a bend vertex (not covered). Both repairs splice the new vertex
    into the order.

Reference: D. Harel, M. Sardas. An Algorithm for Straight-Line Drawing of
Planar Graphs. Algorithmica 20, 1998.
"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, Any, Iterable, Optional, Sequence

if TYPE_CHECKING:
    from typing_extensions import Self

from ..embedding import EdgeSide, EmbeddedGraph, Face, split_edge
from ..preprocessing import (
    EdgeFactory,
    VertexFactory,
    default_edge_factory,
    default_vertex_factory,
    is_biconnected,
)
from ..types import Quadrangle, VertexKind
from ..validation import PreconditionError, validate_quadrangles
from ._types import CanonicalOrder, QuadrangleRepair, RepairCase, SplitEdge


def _order_position(order: Sequence[Any], vertex: Any) -> int:
    try:
        return order.index(vertex)
    except ValueError:
        return -1


def is_directly_covered_by(
    covered: Any,
    covering: Any,
    graph: EmbeddedGraph,
    order: Sequence[Any],
) -> bool:
    """
    Check whether ``covering`` directly covers its neighbor ``covered``.

    ``covered`` must precede ``covering`` in ``order`` and both rotation
    neighbors of ``covered`` around ``covering`` must be ordered before
    ``covering``. Vertices missing from ``order`` count as ordered last.
    """
    pos_covering = _order_position(order, covering)
    pos_covering = sys.maxsize if pos_covering < 0 else pos_covering
    pos_covered = _order_position(order, covered)
    pos_covered = sys.maxsize if pos_covered < 0 else pos_covered
    if pos_covered >= pos_covering:
        return False

    index = graph.neighbor_index(covered, covering)
    if index < 0:
        return False
    rotation = graph.rotation(covering)
    deg = len(rotation)
    before = _order_position(order, rotation[(index - 1) % deg][0])
    after = _order_position(order, rotation[(index + 1) % deg][0])
    return 0 <= before < pos_covering and 0 <= after < pos_covering


class CanonicalOrderer:
    """
    Biconnected canonical ordering with optional NIC-planar quadrangle repair.

    The graph passed to compute() must be biconnected with a consistent
    embedding. With registered crossings the graph is modified in place
    (dummy edges, shift vertices and bend vertices are added).

    Example:
        result = CanonicalOrderer().compute(graph)
        for v in result.order:
            ...

    Args:
        removed_crossings: Quadrangles ((a, c), (b, d)) of removed crossing
            edges, e.g. from preprocessing.remove_crossings()
        vertex_factory: Creates shift and bend vertices from (kind, label)
        edge_factory: Creates dummy and split edge keys from a label
    """

    def __init__(
        self,
        removed_crossings: Optional[Iterable[Quadrangle]] = None,
        *,
        vertex_factory: Optional[VertexFactory] = None,
        edge_factory: Optional[EdgeFactory] = None,
    ) -> None:
        self._removed: Optional[list[Quadrangle]] = None
        self._quadrangles_at: dict[Any, list[Quadrangle]] = {}
        self._make_vertex = vertex_factory or default_vertex_factory
        self._make_edge = edge_factory or default_edge_factory

        # Per-computation scratch state
        self._order: list[Any] = []
        self._remaining: dict[Any, None] = {}
        self._A: dict[int, int] = {}
        self._N: dict[Any, int] = {}
        self._F: dict[Any, int] = {}
        self._split_edges: dict[Any, SplitEdge] = {}
        self._shift_vertices: list[Any] = []
        self._repairs: list[QuadrangleRepair] = []

        if removed_crossings is not None:
            self.register_removed_crossings(removed_crossings)

    @property
    def removed_crossings(self) -> Optional[list[Quadrangle]]:
        """Registered quadrangles, or None when repair is disabled."""
        return self._removed

    def register_removed_crossings(self, removed_crossings: Optional[Iterable[Quadrangle]]) -> Self:
        """
        Enable quadrangle repair for the given removed crossings.

        Passing None disables repair.

        Returns:
            self (for chaining)
        """
        self._removed = list(removed_crossings) if removed_crossings is not None else None
        self._quadrangles_at = {}
        return self

    # -------------------------------------------------------------------------
    # Main loop
    # -------------------------------------------------------------------------

    def compute(self, graph: EmbeddedGraph) -> CanonicalOrder:
        """
        Compute the canonical order of ``graph``.

        Raises:
            PreconditionError: If the graph is not biconnected, a registered
                quadrangle is malformed, or no vertex can be legally added
        """
        if not is_biconnected(graph):
            raise PreconditionError(f"{graph!r} is not biconnected")
        if self._removed is not None:
            validate_quadrangles(graph, self._removed)
            self._quadrangles_at = {}
            for quadrangle in self._removed:
                for pair in quadrangle:
                    for vertex in pair:
                        self._quadrangles_at.setdefault(vertex, []).append(quadrangle)

        self._initialize(graph)

        k = 1
        while k <= graph.vertex_count:
            if k < 3:
                v_k = self._order[k - 1]
                self._remaining.pop(v_k, None)
            else:
                v_k = self._select(graph, k)
                self._order.append(v_k)
                del self._remaining[v_k]
                self._update_neighbors(graph, v_k)
                self._update_faces(graph, v_k)

            if self._removed is not None:
                k = self._repair_quadrangles(graph, k, v_k)
            k += 1

        return CanonicalOrder(
            order=list(self._order),
            split_edges=dict(self._split_edges),
            shift_vertices=list(self._shift_vertices),
            repairs=list(self._repairs),
        )

    def _initialize(self, graph: EmbeddedGraph) -> None:
        self._order = []
        self._remaining = dict.fromkeys(graph.vertices())
        self._A = {face.id: 0 for face in graph.all_faces()}
        self._N = {v: 0 for v in graph.vertices()}
        self._F = {v: 0 for v in graph.vertices()}
        self._split_edges = {}
        self._shift_vertices = []
        self._repairs = []

        first = graph.outer_face[0]
        ends = graph.endpoints(first.edge)
        left_face, right_face = graph.faces_of(first.edge)
        if first.side is EdgeSide.RIGHT:
            v1, v2 = ends
            inner = left_face
        else:
            v2, v1 = ends
            inner = right_face

        self._order.extend([v1, v2])
        self._update_neighbors(graph, v1)
        self._update_neighbors(graph, v2)
        self._A[inner.id] = 1
        if len(inner) == 3:
            for v in inner.vertices():
                if v != v1 and v != v2:
                    self._F[v] = 1

    def _select(self, graph: EmbeddedGraph, k: int) -> Any:
        for v in self._remaining:
            n = self._N[v]
            if n >= 2 and n == self._F[v] + 1:
                return v

        for v in self._remaining:
            if self._N[v] != 1:
                continue
            for neighbor in graph.neighbors(v):
                if neighbor in self._remaining:
                    continue
                if (self._has_left_support(graph, v, neighbor) and neighbor != self._order[0]) or (
                    self._has_right_support(graph, v, neighbor) and neighbor != self._order[1]
                ):
                    return v

        raise PreconditionError(
            f"No vertex can be added in step {k}; the embedding is not a valid biconnected plane graph"
        )

    def _has_left_support(self, graph: EmbeddedGraph, v: Any, neighbor: Any) -> bool:
        rotation = graph.rotation(neighbor)
        index = graph.neighbor_index(v, neighbor)
        return rotation[(index + 1) % len(rotation)][0] not in self._remaining

    def _has_right_support(self, graph: EmbeddedGraph, v: Any, neighbor: Any) -> bool:
        rotation = graph.rotation(neighbor)
        index = graph.neighbor_index(v, neighbor)
        return rotation[(index - 1) % len(rotation)][0] not in self._remaining

    def _update_neighbors(self, graph: EmbeddedGraph, v_k: Any) -> None:
        for v in graph.neighbors(v_k):
            self._N[v] = self._N.get(v, 0) + 1

    def _update_faces(self, graph: EmbeddedGraph, v_k: Any) -> None:
        affected: dict[int, Face] = {}
        for edge in graph.incident_edges(v_k):
            if graph.opposite(v_k, edge) in self._remaining:
                continue
            for face in graph.faces_of(edge):
                self._A[face.id] = self._A.get(face.id, 0) + 1
                affected[face.id] = face

        for face in affected.values():
            if self._A[face.id] + 2 == len(face) and not graph.is_outer_face(face):
                self._mark_ready(face)

    def _mark_ready(self, face: Face) -> None:
        placed = set(self._order)
        outside = None
        for record in face:
            for v in record.endpoints:
                if v in placed:
                    continue
                if outside is not None and outside != v:
                    raise PreconditionError(f"Face {face.id} has more than one vertex outside the prefix")
                outside = v
        if outside is None:
            raise PreconditionError(f"Face {face.id} has no vertex outside the prefix")
        self._F[outside] += 1

    # -------------------------------------------------------------------------
    # Quadrangle repair
    # -------------------------------------------------------------------------

    def _repair_quadrangles(self, graph: EmbeddedGraph, k: int, v_k: Any) -> int:
        for quadrangle in self._quadrangles_at.get(v_k, ()):
            case, k = self._repair(graph, k, v_k, quadrangle)
            if case is not None:
                self._repairs.append(QuadrangleRepair(quadrangle, v_k, case))
        return k

    def _repair(
        self, graph: EmbeddedGraph, k: int, v_k: Any, quadrangle: Quadrangle
    ) -> tuple[Optional[RepairCase], int]:
        is_first = True
        is_last = True
        opposite = None
        sides: Any = None
        lowest = k - 1
        for pair in quadrangle:
            for v in pair:
                if v == v_k:
                    continue
                if v in self._remaining:
                    is_last = False
                else:
                    is_first = False
                    lowest = min(lowest, self._order.index(v))
                if v_k in pair:
                    opposite = v
                else:
                    sides = pair

        if is_first:
            self._divide_quadrangle(graph, v_k, opposite, quadrangle)
            return RepairCase.FIRST, k
        if not is_last:
            return None, k

        if lowest < self._order.index(opposite):
            if is_directly_covered_by(opposite, sides[0], graph, self._order) or is_directly_covered_by(
                opposite, sides[1], graph, self._order
            ):
                self._insert_shift_vertex(graph, v_k, sides)
                return RepairCase.LAST_COVERED, k + 1
            self._split_quadrangle_edge(graph, v_k, opposite, sides)
            return RepairCase.LAST_NOT_COVERED, k + 1
        return RepairCase.LAST_CONSISTENT, k

    def _divide_quadrangle(self, graph: EmbeddedGraph, v_k: Any, opposite: Any, quadrangle: Quadrangle) -> None:
        face = self._empty_quadrangle_face(graph, quadrangle)
        if face is None:
            raise PreconditionError(f"No empty quadrangle face for removed crossing {quadrangle!r}")
        dummy = self._make_edge(f"dummy({v_k}-{opposite})")
        graph.insert_edge(
            dummy,
            v_k,
            graph.edge_index_in_face(face, v_k),
            opposite,
            graph.edge_index_in_face(face, opposite),
        )
        self._A.pop(face.id, None)
        self._N[opposite] += 1
        placed = set(self._order)
        for half in graph.faces_of(dummy):
            self._A[half.id] = sum(1 for record in half if placed.issuperset(record.endpoints))
            if self._A[half.id] + 2 == len(half) and not graph.is_outer_face(half):
                self._mark_ready(half)

    def _insert_shift_vertex(self, graph: EmbeddedGraph, v_k: Any, sides: Any) -> None:
        if graph.is_direct_predecessor(sides[0], sides[1], v_k):
            left, right = sides[0], sides[1]
        else:
            left, right = sides[1], sides[0]
        face_for_insertion = graph.left_face(graph.find_edge(v_k, left), v_k)

        shift = self._make_vertex(VertexKind.REGULAR, f"shift({left}+{right})")
        to_left = self._make_edge(f"shift({left}+{right})-{left}")
        to_right = self._make_edge(f"shift({left}+{right})-{right}")
        graph.add_vertex(shift)
        graph.insert_edge(to_left, shift, 0, left, graph.neighbor_index(v_k, left))
        graph.insert_edge(to_right, shift, 0, right, graph.neighbor_index(v_k, right) + 1)

        self._A.pop(face_for_insertion.id, None)
        self._A[graph.right_face(to_left, left).id] = 3
        self._A[graph.left_face(to_left, left).id] = 4
        self._N[shift] = 2
        self._F[shift] = 0
        self._order.insert(self._order.index(v_k), shift)
        self._shift_vertices.append(shift)

    def _split_quadrangle_edge(self, graph: EmbeddedGraph, v_k: Any, opposite: Any, sides: Any) -> None:
        if self._order.index(sides[0]) < self._order.index(sides[1]):
            lowest, second = sides[0], sides[1]
        else:
            lowest, second = sides[1], sides[0]

        edge = graph.find_edge(lowest, opposite)
        if edge is None:
            raise PreconditionError(f"Quadrangle edge {lowest!r}-{opposite!r} is missing")
        left_count = self._A.pop(graph.left_face(edge, lowest).id, 0)
        right_count = self._A.pop(graph.right_face(edge, lowest).id, 0)

        bend = self._make_vertex(VertexKind.BEND_POINT, f"bend({edge})")
        first_half = self._make_edge(f"{edge}[0]")
        second_half = self._make_edge(f"{edge}[1]")
        split_edge(graph, edge, bend, first_half, second_half)
        self._split_edges[edge] = SplitEdge(first_half, bend, second_half)

        half = first_half if lowest in graph.endpoints(first_half) else second_half
        self._A[graph.left_face(half, lowest).id] = left_count + 1
        self._A[graph.right_face(half, lowest).id] = right_count + 1
        self._N[bend] = 2
        self._F[bend] = 0
        self._order.insert(self._order.index(opposite), bend)

        # The split triangle lowest-opposite-second is now a quadrangle with the bend
        gap = None
        for face in graph.faces_of(half):
            if face.contains_vertex(second) and not graph.is_outer_face(face):
                gap = face
                break
        if gap is None:
            raise PreconditionError(f"No face between {lowest!r} and {opposite!r} after splitting {edge!r}")

        dummy = self._make_edge(f"dummy({lowest}-{opposite})")
        graph.insert_edge(
            dummy,
            lowest,
            graph.edge_index_in_face(gap, lowest),
            opposite,
            graph.edge_index_in_face(gap, opposite),
        )
        self._A.pop(gap.id, None)
        for face in graph.faces_of(dummy):
            self._A[face.id] = 3

    @staticmethod
    def _empty_quadrangle_face(graph: EmbeddedGraph, quadrangle: Quadrangle) -> Optional[Face]:
        (a, c), (b, d) = quadrangle
        counts: dict[int, int] = {}
        faces: dict[int, Face] = {}
        previous = d
        for v in (a, b, c, d):
            edge = graph.find_edge(previous, v)
            if edge is None:
                return None
            for face in graph.faces_of(edge):
                counts[face.id] = counts.get(face.id, 0) + 1
                faces[face.id] = face
            previous = v

        for face_id, count in counts.items():
            face = faces[face_id]
            if len(face) == 4 and count == 4 and not graph.is_outer_face(face):
                return face
        return None


__all__ = [
    "CanonicalOrderer",
    "is_directly_covered_by",
]
