"""Tests for the embedded graph and its face bookkeeping."""

import pytest

from planar_grid import (
    DuplicateVertexError,
    EdgeSide,
    EmbeddedGraph,
    EmbeddingWarning,
    Face,
    FaceRecord,
    InconsistentEmbeddingError,
    InvalidInsertionError,
    UnknownEdgeError,
    UnknownVertexError,
    Vertex,
    cycle_graph,
    split_edge,
    stacked_triangles,
)


def by_label(graph):
    return {v.label: v for v in graph.vertices()}


def inner_face(graph):
    return next(f for f in graph.all_faces() if not graph.is_outer_face(f))


class TestConstruction:
    """Tests for adding vertices and edges."""

    def test_empty_graph(self):
        """Empty graph has no vertices, edges or bounded faces."""
        graph = EmbeddedGraph()
        assert graph.vertex_count == 0
        assert graph.edge_count == 0
        assert graph.all_faces() == []

    def test_first_edge_bounds_outer_face(self):
        """A single edge has both sides on the outer face."""
        graph = EmbeddedGraph()
        graph.add_vertex("a")
        graph.add_vertex("b")
        graph.insert_edge("ab", "a", 0, "b", 0)

        faces = graph.all_faces()
        assert len(faces) == 1
        assert graph.is_outer_face(faces[0])
        assert len(graph.outer_face) == 2
        assert graph.check_consistency() == []

    def test_triangle(self):
        """Closing a triangle splits the outer face in two."""
        graph = EmbeddedGraph()
        for v in "abc":
            graph.add_vertex(v)
        graph.insert_edge("ab", "a", 0, "b", 0)
        graph.insert_edge("bc", "b", 1, "c", 0)
        graph.insert_edge("ca", "c", 1, "a", 1)

        faces = graph.all_faces()
        assert len(faces) == 2
        assert sorted(len(f) for f in faces) == [3, 3]
        assert graph.check_consistency() == []

    def test_cycle_faces(self):
        """A cycle has an inner and an outer face of equal length."""
        graph = cycle_graph(6)
        assert graph.vertex_count == 6
        assert graph.edge_count == 6
        assert sorted(len(f) for f in graph.all_faces()) == [6, 6]
        assert graph.check_consistency() == []

    def test_euler_formula(self):
        """V - E + F == 2 for connected plane graphs."""
        for graph in (cycle_graph(5), stacked_triangles(1), stacked_triangles(4)):
            assert graph.vertex_count - graph.edge_count + len(graph.all_faces()) == 2

    def test_duplicate_vertex_raises(self):
        """Adding a vertex twice raises."""
        graph = EmbeddedGraph()
        graph.add_vertex("a")
        with pytest.raises(DuplicateVertexError):
            graph.add_vertex("a")

    def test_vertices_compare_by_identity(self):
        """Two vertices with the same label are distinct."""
        graph = EmbeddedGraph()
        graph.add_vertex(Vertex("x"))
        graph.add_vertex(Vertex("x"))
        assert graph.vertex_count == 2


class TestChords:
    """Tests for inserting edges inside existing faces."""

    def test_chord_splits_face(self):
        """A chord of a 4-cycle splits the inner face into two triangles."""
        graph = cycle_graph(4)
        v = by_label(graph)
        face = inner_face(graph)
        graph.insert_edge(
            "chord",
            v["v0"],
            graph.edge_index_in_face(face, v["v0"]),
            v["v2"],
            graph.edge_index_in_face(face, v["v2"]),
        )

        assert sorted(len(f) for f in graph.all_faces()) == [3, 3, 4]
        assert graph.check_consistency() == []
        assert graph.is_neighbor(v["v0"], v["v2"])

    def test_remove_chord_unites_faces(self):
        """Removing an edge unites its faces: size is the sum minus two."""
        graph = cycle_graph(4)
        v = by_label(graph)
        face = inner_face(graph)
        before = Face(-1, face.records)
        graph.insert_edge(
            "chord",
            v["v0"],
            graph.edge_index_in_face(face, v["v0"]),
            v["v2"],
            graph.edge_index_in_face(face, v["v2"]),
        )

        assert graph.remove_edge("chord")
        assert sorted(len(f) for f in graph.all_faces()) == [4, 4]
        assert before in graph.all_faces()
        assert graph.check_consistency() == []

    def test_remove_cycle_edge(self):
        """Opening a cycle leaves one face walking both sides of the path."""
        graph = cycle_graph(5)
        assert graph.remove_edge("e2")

        faces = graph.all_faces()
        assert len(faces) == 1
        assert len(faces[0]) == 5 + 5 - 2
        assert graph.is_outer_face(faces[0])
        assert graph.check_consistency() == []

    def test_inconsistent_positions_raise(self):
        """Positions on different faces raise with insert_edge()."""
        graph = cycle_graph(4)
        v = by_label(graph)
        inner = inner_face(graph)
        with pytest.raises(InconsistentEmbeddingError):
            graph.insert_edge(
                "chord",
                v["v0"],
                graph.edge_index_in_face(inner, v["v0"]),
                v["v2"],
                graph.edge_index_in_face(graph.outer_face, v["v2"]),
            )

    def test_inconsistent_positions_warn(self):
        """add_edge() warns and leaves the graph unchanged."""
        graph = cycle_graph(4)
        v = by_label(graph)
        inner = inner_face(graph)
        with pytest.warns(EmbeddingWarning):
            inserted = graph.add_edge(
                "chord",
                v["v0"],
                graph.edge_index_in_face(inner, v["v0"]),
                v["v2"],
                graph.edge_index_in_face(graph.outer_face, v["v2"]),
            )

        assert inserted is False
        assert not graph.has_edge("chord")
        assert graph.edge_count == 4
        assert graph.check_consistency() == []


class TestInsertionErrors:
    """Tests for rejected insertions."""

    def test_position_out_of_range(self):
        graph = cycle_graph(3)
        v = by_label(graph)
        graph.remove_edge("e0")
        with pytest.raises(InvalidInsertionError, match="out of range"):
            graph.insert_edge("x", v["v0"], 5, v["v2"], 0)

    def test_self_loop(self):
        graph = cycle_graph(3)
        v = by_label(graph)
        with pytest.raises(InvalidInsertionError, match="Self-loop"):
            graph.insert_edge("x", v["v0"], 0, v["v0"], 1)

    def test_duplicate_edge_key(self):
        graph = cycle_graph(4)
        v = by_label(graph)
        with pytest.raises(InvalidInsertionError, match="already exists"):
            graph.insert_edge("e1", v["v0"], 0, v["v2"], 0)

    def test_multi_edge(self):
        graph = cycle_graph(3)
        v = by_label(graph)
        with pytest.raises(InvalidInsertionError, match="already adjacent"):
            graph.insert_edge("x", v["v0"], 0, v["v1"], 0)

    def test_isolated_endpoints_in_nonempty_graph(self):
        graph = cycle_graph(3)
        graph.add_vertex("p")
        graph.add_vertex("q")
        with pytest.raises(InvalidInsertionError, match="isolated"):
            graph.insert_edge("pq", "p", 0, "q", 0)

    def test_add_edge_unknown_vertex_returns_false(self):
        graph = cycle_graph(3)
        v = by_label(graph)
        assert graph.add_edge("x", v["v0"], 0, "missing", 0) is False
        assert graph.edge_count == 3

    def test_remove_unknown_edge(self):
        graph = cycle_graph(3)
        assert graph.remove_edge("missing") is False

    def test_remove_unknown_vertex(self):
        graph = cycle_graph(3)
        with pytest.raises(UnknownVertexError):
            graph.remove_vertex("missing")


class TestRemoveVertex:
    """Tests for vertex removal."""

    def test_remove_apex(self):
        """Removing the apex of a triangle leaves a single edge."""
        graph = stacked_triangles(1)
        v = by_label(graph)
        graph.remove_vertex(v["t0"])

        assert graph.vertex_count == 2
        assert graph.edge_count == 1
        assert len(graph.all_faces()) == 1
        assert graph.check_consistency() == []

    def test_remove_inner_vertex(self):
        """Removing a nested apex merges its two triangles."""
        graph = stacked_triangles(3)
        v = by_label(graph)
        graph.remove_vertex(v["t1"])

        assert graph.edge_count == 5
        assert graph.check_consistency() == []
        assert sorted(len(f) for f in graph.all_faces()) == [3, 3, 4]


class TestQueries:
    """Tests for rotation queries and lookup misses."""

    def test_rotation_order(self):
        graph = stacked_triangles(2)
        v = by_label(graph)
        assert graph.neighbors(v["v1"]) == [v["v2"], v["t0"], v["t1"]]

    def test_direct_predecessor(self):
        graph = stacked_triangles(2)
        v = by_label(graph)
        assert graph.is_direct_predecessor(v["v2"], v["t0"], v["v1"])
        assert graph.is_direct_predecessor(v["t0"], v["t1"], v["v1"])
        assert graph.is_direct_predecessor(v["t1"], v["v2"], v["v1"])
        assert not graph.is_direct_predecessor(v["v2"], v["t1"], v["v1"])

    def test_later_bounding_index(self):
        graph = stacked_triangles(2)
        v = by_label(graph)
        assert graph.later_bounding_index(v["v2"], v["t0"], v["v1"]) == 1
        assert graph.later_bounding_index(v["t0"], v["v2"], v["v1"]) == 1
        assert graph.later_bounding_index(v["t1"], v["v2"], v["v1"]) == 0

    def test_face_between(self):
        graph = stacked_triangles(2)
        v = by_label(graph)
        face = graph.face_between(v["v2"], v["t0"], v["v1"])
        assert face is not None
        assert face.contains_vertex(v["v1"])

    def test_opposite(self):
        graph = cycle_graph(3)
        v = by_label(graph)
        assert graph.opposite(v["v0"], "e1") == v["v1"]
        assert graph.opposite(v["v2"], "e1") is None

    def test_lookup_misses(self):
        """Queries on unknown elements return empty results."""
        graph = cycle_graph(3)
        v = by_label(graph)
        assert graph.rotation("missing") == []
        assert graph.degree("missing") == 0
        assert graph.neighbor_index("missing", v["v0"]) == -1
        assert graph.edge_index("missing", v["v0"]) == -1
        assert graph.endpoints("missing") is None
        assert graph.find_edge(v["v0"], "missing") is None
        assert graph.left_face("missing", v["v0"]) is None
        assert graph.right_face("e1", v["v2"]) is None
        assert graph.faces_of("missing") == []
        assert graph.later_bounding_index("missing", v["v1"], v["v0"]) == -1

    def test_set_outer_face_rejects_foreign_face(self):
        graph = cycle_graph(3)
        with pytest.raises(ValueError):
            graph.set_outer_face(Face(999))


class TestFace:
    """Tests for face walks."""

    def test_rotation_invariant_equality(self):
        """Faces are equal up to cyclic rotation of their walk."""
        records = [FaceRecord(e, EdgeSide.LEFT, (e, e + 1)) for e in range(4)]
        assert Face(0, records) == Face(1, records[2:] + records[:2])
        assert Face(0, records) != Face(1, list(reversed(records)))

    def test_unhashable(self):
        with pytest.raises(TypeError):
            hash(Face(0))

    def test_record_vertex(self):
        """The walk enters a left side at the first endpoint."""
        assert FaceRecord("e", EdgeSide.LEFT, ("a", "b")).vertex == "a"
        assert FaceRecord("e", EdgeSide.RIGHT, ("a", "b")).vertex == "b"

    def test_walk_visits_cycle(self):
        graph = cycle_graph(5)
        assert set(graph.outer_face.vertices()) == set(graph.vertices())


class TestSplitEdge:
    """Tests for subdividing an edge."""

    def test_split_keeps_faces(self):
        """Both faces gain one vertex; the outer face stays outer."""
        graph = cycle_graph(4)
        mid = Vertex("m")
        split_edge(graph, "e1", mid, "e1a", "e1b")

        assert graph.vertex_count == 5
        assert graph.edge_count == 5
        assert not graph.has_edge("e1")
        assert sorted(len(f) for f in graph.all_faces()) == [5, 5]
        assert graph.outer_face.contains_vertex(mid)
        assert graph.check_consistency() == []

    def test_split_endpoints(self):
        graph = cycle_graph(4)
        v = by_label(graph)
        mid = Vertex("m")
        split_edge(graph, "e1", mid, "e1a", "e1b")
        assert set(graph.endpoints("e1a")) == {v["v0"], mid}
        assert set(graph.endpoints("e1b")) == {mid, v["v1"]}

    def test_split_unknown_edge(self):
        graph = cycle_graph(4)
        with pytest.raises(UnknownEdgeError):
            split_edge(graph, "missing", Vertex("m"), "a", "b")

    def test_split_through_connected_vertex(self):
        graph = cycle_graph(4)
        v = by_label(graph)
        with pytest.raises(InvalidInsertionError):
            split_edge(graph, "e1", v["v2"], "a", "b")


class TestValidate:
    """Tests for the raising consistency check."""

    def test_valid_graph(self):
        stacked_triangles(3).validate()

    def test_corrupted_rotation(self):
        """A rotation that disagrees with the face walks is reported."""
        graph = stacked_triangles(2)
        v = by_label(graph)
        graph._rotation[v["v1"]].reverse()
        assert graph.check_consistency() != []
        with pytest.raises(InconsistentEmbeddingError):
            graph.validate()
