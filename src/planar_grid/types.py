"""
Common types for planar grid drawing.

This module provides the small value types shared by every stage of the
pipeline:
- GridPoint: Integer grid coordinate with value semantics
- VertexKind / Vertex: Tagged vertex identity (regular, bend point, crossing point)
- EventType / Event: Lifecycle events of the incremental placer
- Node / Link: Floating-point view handed to rendering and metrics code
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Any, Hashable, Optional, TypedDict, TypeVar, Union

V = TypeVar("V", bound=Hashable)
E = TypeVar("E", bound=Hashable)


@dataclass(frozen=True)
class GridPoint:
    """Integer point on the drawing grid."""

    x: int
    y: int

    def translated(self, dx: int = 0, dy: int = 0) -> GridPoint:
        """Return a copy moved by (dx, dy)."""
        return GridPoint(self.x + dx, self.y + dy)

    def to_float(self) -> tuple[float, float]:
        return (float(self.x), float(self.y))

    def __iter__(self):
        yield self.x
        yield self.y


class VertexKind(Enum):
    """
    Closed set of vertex roles.

    - REGULAR: vertex of the input graph (or a helper vertex of the same role)
    - BEND_POINT: subdivision vertex that becomes a bend of a drawn edge
    - CROSSING_POINT: vertex standing for the crossing of two edges
    """

    REGULAR = "regular"
    BEND_POINT = "bend"
    CROSSING_POINT = "crossing"


class Vertex:
    """
    Vertex identity tagged with its kind.

    Vertices compare by identity: two bend points carrying the same label are
    still distinct vertices of the graph. The label is a free-form payload
    used for display only.

    Attributes:
        kind: Role of the vertex in the drawing
        label: Optional display name
    """

    __slots__ = ("kind", "label")

    def __init__(self, label: Optional[str] = None, kind: VertexKind = VertexKind.REGULAR) -> None:
        self.kind = kind
        self.label = label

    @property
    def is_dummy(self) -> bool:
        """True for bend and crossing points."""
        return self.kind is not VertexKind.REGULAR

    def __repr__(self) -> str:
        if self.label is not None:
            return self.label
        return f"{self.kind.value}@{id(self):x}"


class EventType(IntEnum):
    """
    Placement lifecycle events.

    - start: Ordering computed, stepping may begin
    - tick: Fired once per placed vertex
    - end: Every vertex of the canonical order has been placed
    """

    start = 0
    tick = 1
    end = 2


class Event(TypedDict, total=False):
    """Event payload passed to event listeners."""

    type: EventType
    step: int
    vertex: Any


class Node:
    """
    Positioned vertex of the floating-point view.

    Attributes:
        index: Index in the nodes list
        x: X coordinate
        y: Y coordinate
        key: Vertex of the embedded graph this node stands for
    """

    def __init__(self, **kwargs: Any) -> None:
        """Initialize node with optional properties."""
        self.index: Optional[int] = kwargs.get("index")
        self.x: float = kwargs.get("x", 0.0)
        self.y: float = kwargs.get("y", 0.0)
        self.key: Any = kwargs.get("key")

        # Copy any additional custom properties
        for key, value in kwargs.items():
            if not hasattr(self, key):
                setattr(self, key, value)

    def __repr__(self) -> str:
        return f"Node(index={self.index}, x={self.x:.2f}, y={self.y:.2f})"


class Link:
    """
    Straight segment between two nodes of the floating-point view.

    Attributes:
        source: Source node or node index
        target: Target node or node index
        key: Edge of the embedded graph this link stands for
    """

    def __init__(
        self,
        source: Union[Node, int],
        target: Union[Node, int],
        key: Any = None,
        **kwargs: Any,
    ) -> None:
        """
        Initialize link between two nodes.

        Raises:
            ValueError: If source or target is None
        """
        if source is None:
            raise ValueError("Link source cannot be None")
        if target is None:
            raise ValueError("Link target cannot be None")

        self.source = source
        self.target = target
        self.key = key

        for name, value in kwargs.items():
            if not hasattr(self, name):
                setattr(self, name, value)

    def __repr__(self) -> str:
        src = self.source if isinstance(self.source, int) else self.source.index
        tgt = self.target if isinstance(self.target, int) else self.target.index
        return f"Link({src} -> {tgt})"


# Type aliases
VertexPair = tuple[Any, Any]
Quadrangle = tuple[VertexPair, VertexPair]


__all__ = [
    "E",
    "Event",
    "EventType",
    "GridPoint",
    "Link",
    "Node",
    "Quadrangle",
    "V",
    "Vertex",
    "VertexKind",
    "VertexPair",
]
