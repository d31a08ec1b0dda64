"""
Incremental straight-line grid placement.

Places the vertices of a biconnected plane graph in canonical order on an
integer grid (de Fraysseix, Pach and Pollack; Harel and Sardas). The
contour is the outer boundary of the drawing placed so far, read left to
right. Every contour vertex owns a group of vertices below it that move
together whenever the contour is stretched to make room for the next
vertex.

The placement can be driven one vertex at a time (step/tick) for staged
reveal, or to completion with run().

Example:
    placer = IncrementalPlacer(graph)
    placer.run()
    nodes, links = placer.to_float_layout()
"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, Any, Callable, Iterable, Optional

if TYPE_CHECKING:
    from typing_extensions import Self

from ..embedding import EmbeddedGraph
from ..ordering import CanonicalOrder, CanonicalOrderer, SplitEdge
from ..preprocessing import EdgeFactory, VertexFactory
from ..types import Event, EventType, GridPoint, Quadrangle
from ..validation import PlacementStateError, PreconditionError
from ._reinsertion import reinsert_crossing_edges
from .base import GridLayout

_BOOTSTRAP = (GridPoint(0, 0), GridPoint(2, 0), GridPoint(1, 1))


class IncrementalPlacer(GridLayout):
    """
    Straight-line grid drawing of a biconnected plane graph.

    Every call to step() places the next vertex of the canonical order and
    makes it visible together with its edges to earlier vertices. The
    first three vertices go to (0, 0), (2, 0) and (1, 1).

    Example:
        placer = IncrementalPlacer(graph, on_tick=lambda e: print(e["vertex"]))
        placer.initialize()
        while not placer.done():
            placer.step()

    Args:
        graph: Biconnected embedded graph (modified in place when removed
            crossings are registered)
        removed_crossings: Quadrangles of removed crossing edges for the
            NIC-planar extension
        vertex_factory: Creates helper vertices (shift, bend, crossing points)
        edge_factory: Creates helper edge keys from labels
        on_start: Callback fired by initialize()
        on_tick: Callback fired after every step()
        on_end: Callback fired when the last vertex has been placed
    """

    def __init__(
        self,
        graph: EmbeddedGraph,
        *,
        removed_crossings: Optional[Iterable[Quadrangle]] = None,
        vertex_factory: Optional[VertexFactory] = None,
        edge_factory: Optional[EdgeFactory] = None,
        on_start: Optional[Callable[[Optional[Event]], None]] = None,
        on_tick: Optional[Callable[[Optional[Event]], None]] = None,
        on_end: Optional[Callable[[Optional[Event]], None]] = None,
    ) -> None:
        super().__init__(graph, on_start=on_start, on_tick=on_tick, on_end=on_end)
        self._removed: Optional[list[Quadrangle]] = None
        self._vertex_factory = vertex_factory
        self._edge_factory = edge_factory

        self._result: Optional[CanonicalOrder] = None
        self._contour: list[Any] = []
        self._groups: dict[Any, list[Any]] = {}
        self._iteration = 0
        self._repaired = False
        self._reinserted = False

        if removed_crossings is not None:
            self.removed_crossings = removed_crossings

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def removed_crossings(self) -> Optional[list[Quadrangle]]:
        """Registered removed-crossing quadrangles (None if not NIC-planar)."""
        return self._removed

    @removed_crossings.setter
    def removed_crossings(self, value: Optional[Iterable[Quadrangle]]) -> None:
        self._removed = list(value) if value is not None else None
        self._repaired = False

    @property
    def canonical_order(self) -> Optional[CanonicalOrder]:
        """Full ordering result, None before initialize()."""
        return self._result

    @property
    def order(self) -> list[Any]:
        """Vertices in canonical order (empty before initialize())."""
        return self._result.order if self._result is not None else []

    @property
    def contour(self) -> list[Any]:
        """Current contour from left to right."""
        return list(self._contour)

    @property
    def iteration(self) -> int:
        """Number of vertices placed so far."""
        return self._iteration

    @property
    def split_edges(self) -> dict[Any, SplitEdge]:
        """Edges split while repairing quadrangles, with their replacements."""
        return self._result.split_edges if self._result is not None else {}

    def group(self, vertex: Any) -> list[Any]:
        """Vertices that move together with contour vertex ``vertex``."""
        return list(self._groups.get(vertex, ()))

    def index(self, vertex: Any) -> int:
        """Position of ``vertex`` in the canonical order, or -1."""
        return self._result.position(vertex) if self._result is not None else -1

    # -------------------------------------------------------------------------
    # Lifecycle Methods
    # -------------------------------------------------------------------------

    def initialize(self) -> Self:
        """
        Compute the canonical order and reset all placement state.

        Every vertex and edge becomes invisible. Once the registered
        crossings have been repaired into the graph, later calls reorder
        the repaired graph and keep the split edges and shift vertices of
        the first ordering.

        Returns:
            self (for chaining)

        Raises:
            PreconditionError: If the graph cannot be canonically ordered
            PlacementStateError: If the crossing edges were already reinserted
        """
        if self._reinserted:
            raise PlacementStateError("initialize() called after the crossing edges were reinserted")
        if self._repaired:
            self._result = self._reorder(self._result)
        else:
            orderer = CanonicalOrderer(
                self._removed,
                vertex_factory=self._vertex_factory,
                edge_factory=self._edge_factory,
            )
            self._result = orderer.compute(self._graph)
            self._repaired = self._removed is not None
        self._contour = []
        self._groups = {}
        self._iteration = 0
        self.hide_all()

        self.trigger({"type": EventType.start, "step": 0})
        return self

    def _reorder(self, previous: CanonicalOrder) -> CanonicalOrder:
        # The quadrangles are no longer empty faces; order the repaired graph as is
        orderer = CanonicalOrderer(vertex_factory=self._vertex_factory, edge_factory=self._edge_factory)
        return CanonicalOrder(
            order=orderer.compute(self._graph).order,
            split_edges=dict(previous.split_edges),
            shift_vertices=list(previous.shift_vertices),
            repairs=list(previous.repairs),
        )

    def done(self) -> bool:
        """True once every vertex of the canonical order has been placed."""
        return self._result is not None and self._iteration >= len(self._result.order)

    def step(self) -> None:
        """
        Place the next vertex of the canonical order.

        Raises:
            PlacementStateError: If called before initialize() or after done()
        """
        if self._result is None:
            raise PlacementStateError("step() called before initialize()")
        if self.done():
            raise PlacementStateError("step() called after the last vertex was placed")

        k = self._iteration
        v_k = self._result.order[k]
        if k < 3:
            self._place_bootstrap(k, v_k)
        else:
            self._place(k, v_k)

        self.set_visible(v_k)
        for neighbor, edge in self._graph.rotation(v_k):
            if self.index(neighbor) < k:
                self.set_edge_visible(edge)
        self._iteration += 1

        self.trigger({"type": EventType.tick, "step": k, "vertex": v_k})
        if self.done():
            self.trigger({"type": EventType.end, "step": k})

    def tick(self) -> bool:
        """
        Place one vertex if any is left.

        Returns:
            True if done, False if more vertices remain.
        """
        if self._result is None:
            self.initialize()
        if not self.done():
            self.step()
        return self.done()

    def run(self, **kwargs: Any) -> Self:
        """
        Place every vertex.

        Initializes first if initialize() was not called yet.

        Returns:
            self (for chaining)
        """
        if self._result is None:
            self.initialize()
        while not self.done():
            self.step()
        return self

    # -------------------------------------------------------------------------
    # Placement
    # -------------------------------------------------------------------------

    def _place_bootstrap(self, k: int, v_k: Any) -> None:
        self.set_location(v_k, _BOOTSTRAP[k])
        self._groups[v_k] = [v_k]
        if k == 2:
            self._contour.insert(1, v_k)
        else:
            self._contour.append(v_k)

    def _place(self, k: int, v_k: Any) -> None:
        w_p, w_q = self._outermost_neighbors(k, v_k)

        merged: list[Any] = []
        kept: list[Any] = []
        insertion_index = 0
        first_reached = False
        last_reached = False
        for v in self._contour:
            if v == w_q:
                last_reached = True

            if last_reached:
                self._shift_group(v, 2)
                kept.append(v)
            elif first_reached:
                self._shift_group(v, 1)
                merged.extend(self._groups[v])
            else:
                insertion_index += 1
                kept.append(v)

            if v == w_p:
                first_reached = True

        x1, y1 = self.location(w_p)
        x2, y2 = self.location(w_q)
        self.set_location(v_k, GridPoint((x1 - y1 + x2 + y2) // 2, (-x1 + y1 + x2 + y2) // 2))

        kept.insert(insertion_index, v_k)
        self._contour = kept
        merged.append(v_k)
        self._groups[v_k] = merged

    def _outermost_neighbors(self, k: int, v_k: Any) -> tuple[Any, Any]:
        """Leftmost and rightmost earlier neighbors of v_k along the contour."""
        on_contour = {v: i for i, v in enumerate(self._contour)}
        earlier = [u for u in self._graph.neighbors(v_k) if self.index(u) < k]
        missing = [u for u in earlier if u not in on_contour]
        if not earlier or missing:
            raise PreconditionError(f"Earlier neighbors of {v_k!r} are not all on the contour")
        earlier.sort(key=on_contour.__getitem__)

        if len(earlier) > 1:
            return earlier[0], earlier[-1]

        # Single neighbor: side of the support decides the other end
        only = earlier[0]
        at_contour = on_contour[only]
        rotation = self._graph.rotation(only)
        following = rotation[(self._graph.neighbor_index(v_k, only) + 1) % len(rotation)][0]
        following_index = self.index(following)
        if following_index < 0:
            following_index = sys.maxsize
        if at_contour != 0 and following_index < k:
            return self._contour[at_contour - 1], only
        if at_contour + 1 >= len(self._contour):
            raise PreconditionError(f"{v_k!r} has no support on the contour")
        return only, self._contour[at_contour + 1]

    def _shift_group(self, vertex: Any, dx: int) -> None:
        for v in self._groups[vertex]:
            self.set_location(v, self.location(v).translated(dx=dx))

    # -------------------------------------------------------------------------
    # NIC-planar post-processing
    # -------------------------------------------------------------------------

    def reinsert_crossing_edges(self) -> list[Any]:
        """
        Draw the removed crossing edges into the finished placement.

        Shift vertices of the ordering are removed; every registered
        quadrangle gets a crossing point and two bend points on the grid.

        Returns:
            The inserted crossing points

        Raises:
            PlacementStateError: If placement is not done, no crossings are
                registered, or the crossings were already reinserted
        """
        if not self.done():
            raise PlacementStateError("reinsert_crossing_edges() requires a finished placement")
        if self._removed is None:
            raise PlacementStateError("No removed crossings registered")
        if self._reinserted:
            raise PlacementStateError("Crossing edges were already reinserted")
        self._reinserted = True
        return reinsert_crossing_edges(
            self,
            self._result,
            self._removed,
            vertex_factory=self._vertex_factory,
            edge_factory=self._edge_factory,
        )


__all__ = [
    "IncrementalPlacer",
]
