"""Tests for canonical ordering."""

import pytest

from planar_grid import (
    CanonicalOrder,
    CanonicalOrderer,
    EmbeddedGraph,
    PreconditionError,
    RepairCase,
    Vertex,
    VertexKind,
    cycle_graph,
    is_directly_covered_by,
    stacked_triangles,
)


def labels(vertices):
    return [v.label for v in vertices]


def by_label(graph):
    return {v.label: v for v in graph.vertices()}


def path_graph():
    graph = EmbeddedGraph()
    for v in "abc":
        graph.add_vertex(v)
    graph.insert_edge("ab", "a", 0, "b", 0)
    graph.insert_edge("bc", "b", 1, "c", 0)
    return graph


class TestCanonicalOrder:
    """Tests for orders of plain biconnected graphs."""

    def test_triangle(self):
        result = CanonicalOrderer().compute(cycle_graph(3))
        assert labels(result.order) == ["v2", "v0", "v1"]

    def test_four_cycle(self):
        result = CanonicalOrderer().compute(cycle_graph(4))
        assert labels(result.order) == ["v3", "v0", "v1", "v2"]

    def test_single_triangle_stack(self):
        result = CanonicalOrderer().compute(stacked_triangles(1))
        assert labels(result.order) == ["v1", "t0", "v2"]

    @pytest.mark.parametrize(
        "n,expected",
        [
            (2, ["v1", "t0", "t1", "v2"]),
            (3, ["v1", "t0", "t1", "t2", "v2"]),
        ],
    )
    def test_nested_triangles(self, n, expected):
        """Nested apexes are ordered outside-in before the closing base vertex."""
        result = CanonicalOrderer().compute(stacked_triangles(n))
        assert labels(result.order) == expected

    @pytest.mark.parametrize("n", [3, 5, 8, 12])
    def test_cycle_order_is_permutation(self, n):
        graph = cycle_graph(n)
        result = CanonicalOrderer().compute(graph)
        assert len(result) == n
        assert set(result.order) == set(graph.vertices())

    @pytest.mark.parametrize("graph", [cycle_graph(8), stacked_triangles(5)], ids=["cycle", "stack"])
    def test_each_vertex_has_earlier_neighbor(self, graph):
        """Every vertex after the first is attached to the ordered prefix."""
        result = CanonicalOrderer().compute(graph)
        for k, v in enumerate(result.order[1:], start=1):
            assert any(result.position(u) < k for u in graph.neighbors(v))

    def test_first_edge_on_outer_face(self):
        graph = stacked_triangles(3)
        result = CanonicalOrderer().compute(graph)
        assert graph.is_neighbor(result[0], result[1])
        assert graph.outer_face.contains_vertex(result[0])
        assert graph.outer_face.contains_vertex(result[1])

    def test_no_repairs_without_crossings(self):
        result = CanonicalOrderer().compute(cycle_graph(5))
        assert result.split_edges == {}
        assert result.shift_vertices == []
        assert result.repairs == []

    def test_graph_unchanged_without_crossings(self):
        graph = stacked_triangles(2)
        CanonicalOrderer().compute(graph)
        assert graph.vertex_count == 4
        assert graph.edge_count == 5


class TestCanonicalOrderResult:
    """Tests for the result container."""

    def test_position(self):
        result = CanonicalOrder(order=["a", "b", "c"])
        assert result.position("c") == 2
        assert result.index == {"a": 0, "b": 1, "c": 2}

    def test_position_miss(self):
        result = CanonicalOrderer().compute(cycle_graph(3))
        assert result.position(Vertex("v0")) == -1

    def test_sequence_protocol(self):
        result = CanonicalOrder(order=["a", "b"])
        assert len(result) == 2
        assert list(result) == ["a", "b"]
        assert result[1] == "b"


class TestPreconditions:
    """Tests for rejected inputs."""

    def test_path_graph(self):
        with pytest.raises(PreconditionError, match="biconnected"):
            CanonicalOrderer().compute(path_graph())

    def test_single_vertex(self):
        graph = EmbeddedGraph()
        graph.add_vertex("a")
        with pytest.raises(PreconditionError):
            CanonicalOrderer().compute(graph)

    def test_unknown_quadrangle_corner(self):
        graph = cycle_graph(4)
        v = by_label(graph)
        orderer = CanonicalOrderer([((v["v0"], v["v2"]), (v["v1"], "missing"))])
        with pytest.raises(PreconditionError, match="unknown"):
            orderer.compute(graph)

    def test_repeated_quadrangle_corner(self):
        graph = cycle_graph(4)
        v = by_label(graph)
        orderer = CanonicalOrderer([((v["v0"], v["v2"]), (v["v0"], v["v3"]))])
        with pytest.raises(PreconditionError, match="repeated"):
            orderer.compute(graph)

    def test_malformed_quadrangle(self):
        graph = cycle_graph(4)
        orderer = CanonicalOrderer([("not", "a", "quadrangle")])
        with pytest.raises(PreconditionError, match="pair of vertex pairs"):
            orderer.compute(graph)


class TestRegistration:
    """Tests for removed-crossing registration."""

    def test_register_returns_self(self):
        orderer = CanonicalOrderer()
        assert orderer.register_removed_crossings([]) is orderer
        assert orderer.removed_crossings == []

    def test_register_none_disables_repair(self):
        orderer = CanonicalOrderer([])
        orderer.register_removed_crossings(None)
        assert orderer.removed_crossings is None

    def test_empty_registration_matches_plain_order(self):
        plain = CanonicalOrderer().compute(cycle_graph(6))
        registered = CanonicalOrderer([]).compute(cycle_graph(6))
        assert labels(plain.order) == labels(registered.order)


class TestDirectCover:
    """Tests for the direct-cover predicate."""

    def test_apex_covers_base(self):
        graph = stacked_triangles(1)
        v = by_label(graph)
        order = [v["v1"], v["t0"], v["v2"]]
        assert is_directly_covered_by(v["v1"], v["v2"], graph, order)

    def test_not_covered_by_earlier_vertex(self):
        graph = stacked_triangles(1)
        v = by_label(graph)
        order = [v["v1"], v["t0"], v["v2"]]
        assert not is_directly_covered_by(v["v2"], v["v1"], graph, order)

    def test_not_neighbors(self):
        graph = cycle_graph(4)
        v = by_label(graph)
        order = [v["v3"], v["v0"], v["v1"], v["v2"]]
        assert not is_directly_covered_by(v["v0"], v["v2"], graph, order)

    def test_unordered_vertices_count_as_last(self):
        graph = stacked_triangles(1)
        v = by_label(graph)
        assert not is_directly_covered_by(v["v1"], v["v2"], graph, [v["v1"]])


class TestQuadrangleRepair:
    """Tests for ordering with a removed crossing."""

    def make(self):
        graph = cycle_graph(4)
        v = by_label(graph)
        quadrangle = ((v["v0"], v["v2"]), (v["v1"], v["v3"]))
        return graph, v, quadrangle

    def test_repair_cases(self):
        graph, v, quadrangle = self.make()
        result = CanonicalOrderer([quadrangle]).compute(graph)
        assert result.repair_cases == [RepairCase.FIRST, RepairCase.LAST_NOT_COVERED]
        assert all(repair.quadrangle == quadrangle for repair in result.repairs)

    def test_split_edge_recorded(self):
        graph, v, quadrangle = self.make()
        result = CanonicalOrderer([quadrangle]).compute(graph)

        assert list(result.split_edges) == ["e0"]
        split = result.split_edges["e0"]
        assert split.first == "e0[0]"
        assert split.second == "e0[1]"
        assert split.bend.kind is VertexKind.BEND_POINT
        assert not graph.has_edge("e0")
        assert graph.has_edge("e0[0]") and graph.has_edge("e0[1]")

    def test_bend_spliced_into_order(self):
        graph, v, quadrangle = self.make()
        result = CanonicalOrderer([quadrangle]).compute(graph)
        bend = result.split_edges["e0"].bend

        assert labels(result.order) == ["v3", bend.label, "v0", "v1", "v2"]
        assert len(result) == graph.vertex_count
        assert result.shift_vertices == []

    def test_embedding_stays_consistent(self):
        graph, v, quadrangle = self.make()
        CanonicalOrderer([quadrangle]).compute(graph)
        assert graph.check_consistency() == []

    def test_custom_factories(self):
        """Helper vertices and edges come from the given factories."""
        graph, v, quadrangle = self.make()
        made = []

        def make_vertex(kind, label):
            vertex = Vertex(f"custom:{label}", kind)
            made.append(vertex)
            return vertex

        result = CanonicalOrderer(
            [quadrangle],
            vertex_factory=make_vertex,
            edge_factory=lambda label: f"custom:{label}",
        ).compute(graph)

        assert made
        assert all(vertex in result.order for vertex in made)
        assert "custom:e0[0]" in graph.edges()
