"""
Base class for grid layout algorithms.

This module provides the shared infrastructure of integer grid layouts over
an EmbeddedGraph:

- Location map: vertex -> GridPoint
- Visibility maps for vertices and edges (staged reveal)
- Event system (start/tick/end events)
- Floating-point view (nodes, links) for rendering and metrics code
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Callable, Optional

import numpy as np

if TYPE_CHECKING:
    from typing_extensions import Self

from ..embedding import EmbeddedGraph
from ..types import Event, EventType, GridPoint, Link, Node
from ..validation import validate_scale_factor


class GridLayout(ABC):
    """
    Abstract base class for grid layouts of an embedded graph.

    Missing map entries are filled with explicit defaults on read: a
    vertex without location sits at GridPoint(0, 0), and vertices and edges
    without a visibility flag are visible.

    Example:
        layout = SomeGridLayout(graph)
        layout.run()

        nodes, links = layout.to_float_layout()
        for node in nodes:
            print(f"{node.key}: ({node.x}, {node.y})")
    """

    def __init__(
        self,
        graph: EmbeddedGraph,
        *,
        on_start: Optional[Callable[[Optional[Event]], None]] = None,
        on_tick: Optional[Callable[[Optional[Event]], None]] = None,
        on_end: Optional[Callable[[Optional[Event]], None]] = None,
    ) -> None:
        """
        Initialize layout over ``graph``.

        Args:
            graph: Embedded graph to lay out (not copied)
            on_start: Callback for start event
            on_tick: Callback for tick event
            on_end: Callback for end event
        """
        self._graph = graph
        self._locations: dict[Any, GridPoint] = {}
        self._vertex_visibility: dict[Any, bool] = {}
        self._edge_visibility: dict[Any, bool] = {}
        self._events: dict[EventType, Callable[[Optional[Event]], None]] = {}

        # Register event callbacks
        if on_start:
            self._events[EventType.start] = on_start
        if on_tick:
            self._events[EventType.tick] = on_tick
        if on_end:
            self._events[EventType.end] = on_end

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def graph(self) -> EmbeddedGraph:
        """Get the embedded graph."""
        return self._graph

    # -------------------------------------------------------------------------
    # Locations
    # -------------------------------------------------------------------------

    def location(self, vertex: Any) -> GridPoint:
        """Grid point of ``vertex``; unplaced vertices are stored at (0, 0)."""
        return self._locations.setdefault(vertex, GridPoint(0, 0))

    def set_location(self, vertex: Any, point: GridPoint | tuple[int, int]) -> None:
        if not isinstance(point, GridPoint):
            point = GridPoint(*point)
        self._locations[vertex] = point

    def locations(self) -> dict[Any, GridPoint]:
        """Location of every vertex of the graph, in vertex order."""
        return {v: self.location(v) for v in self._graph.vertices()}

    def forget(self, vertex: Any) -> None:
        """Drop location and visibility entries of a removed vertex."""
        self._locations.pop(vertex, None)
        self._vertex_visibility.pop(vertex, None)

    def forget_edge(self, edge: Any) -> None:
        """Drop the visibility entry of a removed edge."""
        self._edge_visibility.pop(edge, None)

    # -------------------------------------------------------------------------
    # Visibility
    # -------------------------------------------------------------------------

    def is_visible(self, vertex: Any) -> bool:
        return self._vertex_visibility.setdefault(vertex, True)

    def set_visible(self, vertex: Any, visible: bool = True) -> None:
        self._vertex_visibility[vertex] = visible

    def is_edge_visible(self, edge: Any) -> bool:
        return self._edge_visibility.setdefault(edge, True)

    def set_edge_visible(self, edge: Any, visible: bool = True) -> None:
        self._edge_visibility[edge] = visible

    def hide_all(self) -> None:
        """Mark every vertex and edge of the graph invisible."""
        self._vertex_visibility = dict.fromkeys(self._graph.vertices(), False)
        self._edge_visibility = dict.fromkeys(self._graph.edges(), False)

    # -------------------------------------------------------------------------
    # Event System
    # -------------------------------------------------------------------------

    def on(self, event: EventType | str, callback: Callable[[Optional[Event]], None]) -> Self:
        """
        Subscribe to a layout event.

        Args:
            event: Event type (EventType enum or string name)
            callback: Function to call when event fires

        Returns:
            self (for chaining)
        """
        if isinstance(event, str):
            event = EventType[event]
        self._events[event] = callback
        return self

    def trigger(self, event: Event) -> None:
        """
        Trigger an event, calling the registered callback.

        Args:
            event: Event payload with type and optional data
        """
        event_type = event.get("type")
        if event_type is not None and event_type in self._events:
            self._events[event_type](event)

    # -------------------------------------------------------------------------
    # Views
    # -------------------------------------------------------------------------

    def to_float_layout(self) -> tuple[list[Node], list[Link]]:
        """
        Floating-point view of the visible part of the drawing.

        Invisible vertices are dropped together with every edge that is
        invisible or touches a dropped vertex.

        Returns:
            (nodes, links) with links referring to node indices
        """
        nodes: list[Node] = []
        node_index: dict[Any, int] = {}
        for v in self._graph.vertices():
            if not self.is_visible(v):
                continue
            x, y = self.location(v).to_float()
            node_index[v] = len(nodes)
            nodes.append(Node(index=len(nodes), x=x, y=y, key=v))

        links: list[Link] = []
        for edge in self._graph.edges():
            if not self.is_edge_visible(edge):
                continue
            v1, v2 = self._graph.endpoints(edge)
            if v1 in node_index and v2 in node_index:
                links.append(Link(node_index[v1], node_index[v2], key=edge))
        return nodes, links

    def positions_array(self) -> np.ndarray:
        """Integer (n, 2) array of grid coordinates in vertex order."""
        points = [tuple(self.location(v)) for v in self._graph.vertices()]
        return np.array(points, dtype=np.int64).reshape(len(points), 2)

    def scale(self, factor: int) -> Self:
        """
        Refine the grid by multiplying every coordinate by ``factor``.

        Returns:
            self (for chaining)

        Raises:
            ValidationError: If factor is not a positive integer
        """
        factor = validate_scale_factor(factor)
        for v, point in list(self._locations.items()):
            self._locations[v] = GridPoint(point.x * factor, point.y * factor)
        return self

    # -------------------------------------------------------------------------
    # Lifecycle Methods
    # -------------------------------------------------------------------------

    @abstractmethod
    def run(self, **kwargs: Any) -> Self:
        """
        Run the layout algorithm to completion.

        Returns:
            self (for chaining)
        """
        pass


__all__ = [
    "GridLayout",
]
