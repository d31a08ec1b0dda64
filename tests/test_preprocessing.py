"""Tests for graph preprocessing utilities."""

import pytest

from planar_grid import (
    CanonicalOrderer,
    EmbeddedGraph,
    PreconditionError,
    Vertex,
    VertexKind,
    biconnected_components,
    cycle_graph,
    insert_empty_kites,
    is_biconnected,
    remove_crossings,
    star_triangulate,
    stacked_triangles,
)


def as_sorted(components):
    return sorted(tuple(sorted(c)) for c in components)


def crossing_star():
    """Crossing vertex X with spokes to a, b, c, d in that rotation order."""
    graph = EmbeddedGraph()
    for v in "Xabcd":
        graph.add_vertex(v)
    for i, v in enumerate("abcd"):
        graph.insert_edge(f"X{v}", "X", i, v, 0)
    return graph


class TestBiconnectedComponents:
    """Tests for biconnected component detection."""

    def test_triangle(self):
        adjacency = {"a": ["b", "c"], "b": ["a", "c"], "c": ["a", "b"]}
        assert as_sorted(biconnected_components(adjacency)) == [("a", "b", "c")]

    def test_path(self):
        """Every bridge is its own component."""
        adjacency = {"a": ["b"], "b": ["a", "c"], "c": ["b"]}
        assert as_sorted(biconnected_components(adjacency)) == [("a", "b"), ("b", "c")]

    def test_bowtie(self):
        """Two triangles sharing a cut vertex."""
        adjacency = {
            "a": ["b", "c"],
            "b": ["a", "c"],
            "c": ["a", "b", "d", "e"],
            "d": ["c", "e"],
            "e": ["c", "d"],
        }
        assert as_sorted(biconnected_components(adjacency)) == [
            ("a", "b", "c"),
            ("c", "d", "e"),
        ]

    def test_isolated_vertex(self):
        assert biconnected_components({"x": []}) == [{"x"}]

    def test_empty(self):
        assert biconnected_components({}) == []

    def test_unknown_neighbors_ignored(self):
        adjacency = {"a": ["b", "zzz"], "b": ["a"]}
        assert as_sorted(biconnected_components(adjacency)) == [("a", "b")]


class TestIsBiconnected:
    """Tests for the biconnectivity check on embedded graphs."""

    def test_cycle(self):
        assert is_biconnected(cycle_graph(5))

    def test_stacked_triangles(self):
        assert is_biconnected(stacked_triangles(3))

    def test_single_edge(self):
        graph = EmbeddedGraph()
        graph.add_vertex("a")
        graph.add_vertex("b")
        graph.insert_edge("ab", "a", 0, "b", 0)
        assert is_biconnected(graph)

    def test_star_is_not_biconnected(self):
        assert not is_biconnected(crossing_star())

    def test_single_vertex(self):
        graph = EmbeddedGraph()
        graph.add_vertex("a")
        assert not is_biconnected(graph)

    def test_isolated_extra_vertex(self):
        graph = cycle_graph(3)
        graph.add_vertex("lonely")
        assert not is_biconnected(graph)


class TestEmptyKites:
    """Tests for empty-kite insertion."""

    def test_kites_around_star(self):
        """Four dummy edges turn the star into a wheel."""
        graph = crossing_star()
        inserted = insert_empty_kites(graph, ["X"])

        assert inserted == ["kite(a-b)", "kite(b-c)", "kite(c-d)", "kite(d-a)"]
        assert graph.edge_count == 8
        assert sorted(len(f) for f in graph.all_faces()) == [3, 3, 3, 3, 4]
        assert graph.check_consistency() == []

    def test_crossing_leaves_outer_face(self):
        graph = crossing_star()
        insert_empty_kites(graph, ["X"])
        assert not graph.outer_face.contains_vertex("X")
        assert len(graph.outer_face) == 4

    def test_existing_kite_kept(self):
        """A wheel already has all kite edges."""
        graph = crossing_star()
        insert_empty_kites(graph, ["X"])
        assert insert_empty_kites(graph, ["X"]) == []
        assert graph.edge_count == 8

    def test_wrong_degree(self):
        graph = cycle_graph(4)
        with pytest.raises(PreconditionError, match="degree 4"):
            insert_empty_kites(graph, graph.vertices()[:1])


class TestRemoveCrossings:
    """Tests for crossing removal."""

    def test_remove_from_wheel(self):
        graph = crossing_star()
        insert_empty_kites(graph, ["X"])
        removed = remove_crossings(graph, ["X"])

        assert removed == [(("a", "c"), ("b", "d"))]
        assert not graph.has_vertex("X")
        assert graph.vertex_count == 4
        assert graph.edge_count == 4
        assert sorted(len(f) for f in graph.all_faces()) == [4, 4]
        assert graph.check_consistency() == []

    def test_result_is_biconnected(self):
        graph = crossing_star()
        insert_empty_kites(graph, ["X"])
        remove_crossings(graph, ["X"])
        assert is_biconnected(graph)

    def test_quadrangle_accepted_by_orderer(self):
        """The removed crossing can be registered for repair."""
        graph = crossing_star()
        insert_empty_kites(graph, ["X"])
        removed = remove_crossings(graph, ["X"])
        orderer = CanonicalOrderer(removed)
        assert orderer.removed_crossings == removed

    def test_wrong_degree(self):
        graph = cycle_graph(4)
        with pytest.raises(PreconditionError, match="degree 4"):
            remove_crossings(graph, graph.vertices()[:1])

    def test_no_crossings(self):
        graph = cycle_graph(4)
        assert remove_crossings(graph, []) == []
        assert graph.edge_count == 4


class TestStarTriangulate:
    """Tests for star triangulation."""

    def test_four_cycle(self):
        """Both faces of a 4-cycle get a star center."""
        graph = cycle_graph(4)
        added = star_triangulate(graph)

        assert len(added) == 2
        assert all(v.kind is VertexKind.REGULAR for v in added)
        assert graph.vertex_count == 6
        assert graph.edge_count == 12
        faces = graph.all_faces()
        assert len(faces) == 8
        assert all(len(f) == 3 for f in faces)
        assert graph.check_consistency() == []

    def test_centers_join_every_corner(self):
        graph = cycle_graph(5)
        added = star_triangulate(graph)
        for center in added:
            assert graph.degree(center) == 5

    def test_triangles_untouched(self):
        graph = cycle_graph(3)
        assert star_triangulate(graph) == []
        assert graph.edge_count == 3

    def test_custom_factory(self):
        graph = cycle_graph(4)
        added = star_triangulate(
            graph,
            vertex_factory=lambda kind, label: Vertex(f"hub:{label}", kind),
        )
        assert [v.label for v in added] == ["hub:star0", "hub:star1"]

    def test_result_stays_biconnected(self):
        graph = cycle_graph(6)
        star_triangulate(graph)
        assert is_biconnected(graph)
