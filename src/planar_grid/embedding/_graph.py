"""
Embedded undirected graph with an explicit face structure.

The graph stores a rotation system (circular order of incident edges at
every vertex) together with the faces that rotation system induces.
Faces are kept consistent by every topology-changing operation:
inserting an edge between two vertices of positive degree splits a face,
removing an edge between two distinct faces unites them, and inserting an
edge at a degree-0 vertex grows a face in place.

All state lives in tables owned by the graph. Faces are addressed by
integer handles, edges store the handles of their left and right face.

Orientation conventions:
    Every edge stores its endpoints as an ordered pair (first, second).
    The LEFT side of an edge is the side to the left of first -> second.
    ``left_face(edge, at)`` is the face to the left of the edge when
    walking away from ``at``; callers always pass the vertex they stand at.
"""

from __future__ import annotations

import warnings
from typing import Any, Generic, Optional

from ..types import E, V
from ..validation import (
    DuplicateVertexError,
    EmbeddingWarning,
    InconsistentEmbeddingError,
    InvalidInsertionError,
    UnknownVertexError,
    validate_rotation_position,
)
from ._face import EdgeSide, Face, FaceRecord


def _slot(side: EdgeSide) -> int:
    return 0 if side is EdgeSide.LEFT else 1


class EmbeddedGraph(Generic[V, E]):
    """
    Undirected graph with a fixed combinatorial embedding.

    Example:
        g = EmbeddedGraph()
        for v in "abc":
            g.add_vertex(v)
        g.add_edge("ab", "a", 0, "b", 0)
        g.add_edge("bc", "b", 0, "c", 0)
        g.add_edge("ca", "c", 0, "a", 0)
        len(list(g.all_faces()))  # 2
    """

    def __init__(self) -> None:
        self._rotation: dict[V, list[tuple[V, E]]] = {}
        self._endpoints: dict[E, tuple[V, V]] = {}
        self._incident: dict[E, list[int]] = {}
        self._faces: dict[int, Face] = {}
        self._next_face_id = 0
        self._outer_face_id = self._new_face().id

    def __repr__(self) -> str:
        return (
            f"EmbeddedGraph(vertices={self.vertex_count}, edges={self.edge_count}, "
            f"faces={len(self.all_faces())})"
        )

    # -------------------------------------------------------------------------
    # Vertices and edges
    # -------------------------------------------------------------------------

    @property
    def vertex_count(self) -> int:
        return len(self._rotation)

    @property
    def edge_count(self) -> int:
        return len(self._endpoints)

    def vertices(self) -> list[V]:
        """Vertices in insertion order."""
        return list(self._rotation)

    def edges(self) -> list[E]:
        """Edges in insertion order."""
        return list(self._endpoints)

    def has_vertex(self, vertex: V) -> bool:
        return vertex in self._rotation

    def has_edge(self, edge: E) -> bool:
        return edge in self._endpoints

    def add_vertex(self, vertex: V) -> None:
        """
        Add an isolated vertex.

        Raises:
            DuplicateVertexError: If the vertex is already present
        """
        if vertex in self._rotation:
            raise DuplicateVertexError(f"Vertex {vertex!r} is already in the graph")
        self._rotation[vertex] = []

    def remove_vertex(self, vertex: V) -> None:
        """
        Remove a vertex together with all incident edges.

        Raises:
            UnknownVertexError: If the vertex is not present
        """
        if vertex not in self._rotation:
            raise UnknownVertexError(f"Vertex {vertex!r} is not in the graph")
        for _, edge in reversed(list(self._rotation[vertex])):
            self.remove_edge(edge)
        del self._rotation[vertex]

    def degree(self, vertex: V) -> int:
        """Number of incident edges (0 for unknown vertices)."""
        return len(self._rotation.get(vertex, ()))

    def rotation(self, vertex: V) -> list[tuple[V, E]]:
        """(neighbor, edge) pairs around ``vertex`` in embedding order."""
        return list(self._rotation.get(vertex, ()))

    def neighbors(self, vertex: V) -> list[V]:
        return [nb for nb, _ in self._rotation.get(vertex, ())]

    def incident_edges(self, vertex: V) -> list[E]:
        return [edge for _, edge in self._rotation.get(vertex, ())]

    def endpoints(self, edge: E) -> Optional[tuple[V, V]]:
        return self._endpoints.get(edge)

    def opposite(self, vertex: V, edge: E) -> Optional[V]:
        """Endpoint of ``edge`` that is not ``vertex``; None if not incident."""
        ends = self._endpoints.get(edge)
        if ends is None or vertex not in ends:
            return None
        return ends[1] if ends[0] == vertex else ends[0]

    def find_edge(self, u: V, v: V) -> Optional[E]:
        """Edge between ``u`` and ``v``, or None."""
        for nb, edge in self._rotation.get(u, ()):
            if nb == v:
                return edge
        return None

    def is_neighbor(self, u: V, v: V) -> bool:
        return self.find_edge(u, v) is not None

    # -------------------------------------------------------------------------
    # Faces
    # -------------------------------------------------------------------------

    def face(self, face_id: int) -> Optional[Face]:
        """Resolve a face handle."""
        return self._faces.get(face_id)

    @property
    def outer_face(self) -> Face:
        return self._faces[self._outer_face_id]

    def set_outer_face(self, face: Face) -> None:
        if self._faces.get(face.id) is not face:
            raise ValueError(f"{face!r} does not belong to this graph")
        self._outer_face_id = face.id

    def is_outer_face(self, face: Optional[Face]) -> bool:
        return face is not None and face.id == self._outer_face_id

    def left_face(self, edge: E, at: V) -> Optional[Face]:
        """Face to the left of ``edge`` walking away from ``at``."""
        if edge not in self._endpoints or at not in self._endpoints[edge]:
            return None
        return self._faces[self._incident[edge][_slot(self._left_side(edge, at))]]

    def right_face(self, edge: E, at: V) -> Optional[Face]:
        """Face to the right of ``edge`` walking away from ``at``."""
        if edge not in self._endpoints or at not in self._endpoints[edge]:
            return None
        return self._faces[self._incident[edge][_slot(self._right_side(edge, at))]]

    def faces_of(self, edge: E) -> list[Face]:
        """(left, right) faces of ``edge`` relative to its stored direction."""
        if edge not in self._incident:
            return []
        return [self._faces[fid] for fid in self._incident[edge]]

    def all_faces(self) -> list[Face]:
        """Every face bounded by at least one edge."""
        seen: set[int] = set()
        faces: list[Face] = []
        for slots in self._incident.values():
            for fid in slots:
                if fid not in seen:
                    seen.add(fid)
                    faces.append(self._faces[fid])
        return faces

    # -------------------------------------------------------------------------
    # Rotation-order queries
    # -------------------------------------------------------------------------

    def neighbor_index(self, neighbor: V, at: V) -> int:
        """Position of ``neighbor`` in the rotation list of ``at``, or -1."""
        for i, (nb, _) in enumerate(self._rotation.get(at, ())):
            if nb == neighbor:
                return i
        return -1

    def edge_index(self, edge: E, at: V) -> int:
        """Position of ``edge`` in the rotation list of ``at``, or -1."""
        for i, (_, e) in enumerate(self._rotation.get(at, ())):
            if e == edge:
                return i
        return -1

    def edge_index_in_face(self, face: Face, at: V) -> int:
        """
        First rotation position at ``at`` whose edge has ``face`` on its right.

        Inserting an edge at this position places it inside ``face``.
        Returns -1 if ``face`` does not touch ``at``.
        """
        for i, (_, edge) in enumerate(self._rotation.get(at, ())):
            if self._incident[edge][_slot(self._right_side(edge, at))] == face.id:
                return i
        return -1

    def is_direct_predecessor(self, predecessor: V, successor: V, at: V) -> bool:
        """True if ``successor`` directly follows ``predecessor`` around ``at``."""
        i_pre = self.neighbor_index(predecessor, at)
        i_suc = self.neighbor_index(successor, at)
        if i_pre < 0 or i_suc < 0:
            return False
        if i_suc - i_pre == 1:
            return True
        return i_pre == self.degree(at) - 1 and i_suc == 0

    def later_bounding_index(self, neighbor0: V, neighbor1: V, at: V) -> int:
        """
        Rotation index of whichever of two consecutive neighbors comes later.

        ``neighbor0`` and ``neighbor1`` must be adjacent in the circular order
        around ``at``; the returned index is the position of the later one
        (the one following the other). Returns -1 if they are not adjacent.
        """
        i0 = self.neighbor_index(neighbor0, at)
        i1 = self.neighbor_index(neighbor1, at)
        if i0 < 0 or i1 < 0:
            return -1
        deg = self.degree(at)
        diff = i0 - i1
        if diff == 1 or diff == -(deg - 1):
            return i0
        if diff == -1 or diff == deg - 1:
            return i1
        return -1

    def face_between(self, neighbor0: V, neighbor1: V, at: V) -> Optional[Face]:
        """Face at ``at`` bounded by two consecutive neighbors, or None."""
        index = self.later_bounding_index(neighbor0, neighbor1, at)
        if index < 0:
            return None
        _, edge = self._rotation[at][index]
        return self.right_face(edge, at)

    # -------------------------------------------------------------------------
    # Edge insertion
    # -------------------------------------------------------------------------

    def add_edge(self, edge: E, v1: V, index1: int, v2: V, index2: int) -> bool:
        """
        Insert ``edge`` between ``v1`` and ``v2`` at the given rotation positions.

        Positions range over 0..degree (insert before that index). Local
        conflicts (out-of-range position, existing edge, self-loop, two
        isolated endpoints once the graph has edges, or positions that do not
        bound a common face) are reported by returning False; the graph is
        left unchanged in that case.

        Returns:
            True if the edge was inserted
        """
        problem = self._check_insertion(edge, v1, index1, v2, index2)
        if problem is not None:
            if isinstance(problem, InconsistentEmbeddingError):
                warnings.warn(str(problem), EmbeddingWarning, stacklevel=2)
            return False
        self._insert(edge, v1, index1, v2, index2)
        return True

    def insert_edge(self, edge: E, v1: V, index1: int, v2: V, index2: int) -> None:
        """
        Like add_edge(), but raise instead of returning False.

        Raises:
            InvalidInsertionError: For out-of-range positions, duplicate edges,
                self-loops or insertions between two isolated vertices
            InconsistentEmbeddingError: If the positions do not bound a common face
        """
        problem = self._check_insertion(edge, v1, index1, v2, index2)
        if problem is not None:
            raise problem
        self._insert(edge, v1, index1, v2, index2)

    def _check_insertion(
        self, edge: E, v1: V, index1: int, v2: V, index2: int
    ) -> Optional[InvalidInsertionError | InconsistentEmbeddingError]:
        for v in (v1, v2):
            if v not in self._rotation:
                return InvalidInsertionError(f"Vertex {v!r} is not in the graph")
        if v1 == v2:
            return InvalidInsertionError(f"Self-loop {edge!r} at {v1!r} is not supported")
        if edge in self._endpoints:
            return InvalidInsertionError(f"Edge {edge!r} already exists")
        if self.is_neighbor(v1, v2):
            return InvalidInsertionError(f"{v1!r} and {v2!r} are already adjacent")
        try:
            validate_rotation_position(index1, self.degree(v1))
            validate_rotation_position(index2, self.degree(v2))
        except InvalidInsertionError as exc:
            return exc

        if not self._endpoints:
            return None
        deg1, deg2 = self.degree(v1), self.degree(v2)
        if deg1 == 0 and deg2 == 0:
            return InvalidInsertionError(
                f"Cannot connect isolated vertices {v1!r} and {v2!r} in a non-empty graph"
            )
        if deg1 == 0 or deg2 == 0:
            return None

        _, prev1 = self._rotation[v1][(index1 - 1) % deg1]
        _, prev2 = self._rotation[v2][(index2 - 1) % deg2]
        face1 = self._incident[prev1][_slot(self._left_side(prev1, v1))]
        face2 = self._incident[prev2][_slot(self._left_side(prev2, v2))]
        if face1 != face2:
            return InconsistentEmbeddingError(
                f"Edge {edge!r}: position {index1} at {v1!r} and position {index2} "
                f"at {v2!r} do not bound a common face"
            )
        return None

    def _insert(self, edge: E, v1: V, index1: int, v2: V, index2: int) -> None:
        if not self._endpoints:
            self._insert_first_edge(edge, v1, v2)
            return
        deg1, deg2 = self.degree(v1), self.degree(v2)
        self._endpoints[edge] = (v1, v2)
        if deg1 == 0:
            self._insert_at_isolated(edge, v1, v2, index2)
        elif deg2 == 0:
            self._insert_at_isolated(edge, v2, v1, index1)
        else:
            prev1 = self._rotation[v1][(index1 - 1) % deg1]
            prev2 = self._rotation[v2][(index2 - 1) % deg2]
            face = self._faces[self._incident[prev1[1]][_slot(self._left_side(prev1[1], v1))]]
            self._split_face(face, edge, v1, prev1, prev2)
            self._rotation[v1].insert(index1, (v2, edge))
            self._rotation[v2].insert(index2, (v1, edge))

    def _insert_first_edge(self, edge: E, v1: V, v2: V) -> None:
        self._endpoints[edge] = (v1, v2)
        outer = self._faces[self._outer_face_id]
        outer.records = [
            self._record(edge, self._left_side(edge, v1)),
            self._record(edge, self._left_side(edge, v2)),
        ]
        self._incident[edge] = [outer.id, outer.id]
        self._rotation[v1].append((v2, edge))
        self._rotation[v2].append((v1, edge))

    def _insert_at_isolated(self, edge: E, isolated: V, other: V, index: int) -> None:
        """Insert an edge whose endpoint ``isolated`` has degree 0; no new face."""
        _, prev_edge = self._rotation[other][(index - 1) % self.degree(other)]
        face = self._faces[self._incident[prev_edge][_slot(self._left_side(prev_edge, other))]]

        right_record = self._record(edge, self._right_side(edge, other))
        face.add_before(right_record, self._record(prev_edge, self._left_side(prev_edge, other)))
        face.add_before(self._record(edge, self._left_side(edge, other)), right_record)
        self._incident[edge] = [face.id, face.id]

        self._rotation[isolated].append((other, edge))
        self._rotation[other].insert(index, (isolated, edge))

    def _split_face(
        self,
        face: Face,
        edge: E,
        v1: V,
        prev1: tuple[V, E],
        prev2: tuple[V, E],
    ) -> None:
        """Split ``face`` along the new ``edge`` starting at ``v1``."""
        neighbor1, prev_edge1 = prev1
        neighbor2, prev_edge2 = prev2
        idx1 = face.index_of(self._record(prev_edge1, self._right_side(prev_edge1, neighbor1)))
        idx2 = face.index_of(self._record(prev_edge2, self._right_side(prev_edge2, neighbor2)))
        if idx1 < 0 or idx2 < 0 or idx1 == idx2:
            raise InconsistentEmbeddingError(
                f"Face {face.id} does not contain the sides bounding edge {edge!r}"
            )

        at_prev1 = self._new_face()
        at_prev2 = self._new_face()
        current = at_prev2 if idx1 < idx2 else at_prev1
        for i, record in enumerate(face.records):
            if i == idx1:
                current.append(self._record(edge, self._left_side(edge, v1)))
                current = at_prev1
            if i == idx2:
                current.append(self._record(edge, self._right_side(edge, v1)))
                current = at_prev2
            current.append(record)
            self._incident[record.edge][_slot(record.side)] = current.id

        if self._left_side(edge, v1) is EdgeSide.LEFT:
            self._incident[edge] = [at_prev2.id, at_prev1.id]
        else:
            self._incident[edge] = [at_prev1.id, at_prev2.id]

        if face.id == self._outer_face_id:
            self._outer_face_id = at_prev2.id
        del self._faces[face.id]

    # -------------------------------------------------------------------------
    # Edge removal
    # -------------------------------------------------------------------------

    def remove_edge(self, edge: E) -> bool:
        """
        Remove ``edge``; two distinct incident faces are united.

        Returns:
            False if the edge is not in the graph
        """
        if edge not in self._endpoints:
            return False
        left_id, right_id = self._incident[edge]
        if left_id != right_id:
            self._unite_faces(self._faces[left_id], self._faces[right_id], edge)
        else:
            self._faces[left_id].remove_edge(edge)

        v1, v2 = self._endpoints[edge]
        self._rotation[v1] = [entry for entry in self._rotation[v1] if entry[1] != edge]
        self._rotation[v2] = [entry for entry in self._rotation[v2] if entry[1] != edge]
        del self._incident[edge]
        del self._endpoints[edge]
        return True

    def _unite_faces(self, face0: Face, face1: Face, edge: E) -> None:
        i0 = face0.index_of_edge(edge)
        i1 = face1.index_of_edge(edge)
        united = self._new_face(
            face0.records[:i0]
            + face1.records[i1 + 1 :]
            + face1.records[:i1]
            + face0.records[i0 + 1 :]
        )
        for record in united:
            slots = self._incident[record.edge]
            for k in (0, 1):
                if slots[k] in (face0.id, face1.id):
                    slots[k] = united.id

        if self._outer_face_id in (face0.id, face1.id):
            self._outer_face_id = united.id
        del self._faces[face0.id]
        del self._faces[face1.id]

    # -------------------------------------------------------------------------
    # Consistency
    # -------------------------------------------------------------------------

    def check_consistency(self) -> list[str]:
        """
        Check the embedding invariant.

        Every edge side must appear exactly once on the walk of the face its
        slot names, and every walk must be a closed walk that turns according
        to the rotation system: the record following a side entering vertex
        ``u`` through edge ``e`` is the side of the edge that precedes ``e``
        in the rotation of ``u``.

        Returns:
            List of problems (empty if consistent)
        """
        problems: list[str] = []
        for edge, (v1, v2) in self._endpoints.items():
            for side in (EdgeSide.LEFT, EdgeSide.RIGHT):
                face = self._faces.get(self._incident[edge][_slot(side)])
                if face is None:
                    problems.append(f"Edge {edge!r} {side.value} side names a missing face")
                    continue
                count = face.records.count(self._record(edge, side))
                if count != 1:
                    problems.append(
                        f"Edge {edge!r} {side.value} side appears {count} times on face {face.id}"
                    )
            if self.edge_index(edge, v1) < 0 or self.edge_index(edge, v2) < 0:
                problems.append(f"Edge {edge!r} missing from a rotation list")

        for face in self.all_faces():
            n = len(face)
            for i, record in enumerate(face):
                nxt = face[(i + 1) % n]
                head = record.endpoints[1] if record.side is EdgeSide.LEFT else record.endpoints[0]
                if nxt.vertex != head:
                    problems.append(f"Face {face.id} walk breaks after {record.edge!r}")
                    continue
                position = self.edge_index(record.edge, head)
                _, expected = self._rotation[head][(position - 1) % self.degree(head)]
                if nxt.edge != expected:
                    problems.append(
                        f"Face {face.id} turns from {record.edge!r} to {nxt.edge!r} at "
                        f"{head!r}, rotation expects {expected!r}"
                    )
        return problems

    def validate(self) -> None:
        """
        Raise on the first embedding inconsistency.

        Raises:
            InconsistentEmbeddingError: If check_consistency() finds a problem
        """
        problems = self.check_consistency()
        if problems:
            raise InconsistentEmbeddingError(problems[0])

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _new_face(self, records: Any = None) -> Face:
        face = Face(self._next_face_id, records)
        self._faces[face.id] = face
        self._next_face_id += 1
        return face

    def _record(self, edge: E, side: EdgeSide) -> FaceRecord:
        return FaceRecord(edge, side, self._endpoints[edge])

    def _left_side(self, edge: E, at: V) -> EdgeSide:
        return EdgeSide.LEFT if self._endpoints[edge][0] == at else EdgeSide.RIGHT

    def _right_side(self, edge: E, at: V) -> EdgeSide:
        return EdgeSide.RIGHT if self._endpoints[edge][0] == at else EdgeSide.LEFT


__all__ = [
    "EmbeddedGraph",
]
