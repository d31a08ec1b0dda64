"""Face records and boundary walks of an embedded graph."""

from __future__ import annotations

from enum import Enum
from typing import Any, Iterable, Iterator, NamedTuple, Optional


class EdgeSide(Enum):
    """Side of an edge relative to its stored (first, second) direction."""

    LEFT = "left"
    RIGHT = "right"


class FaceRecord(NamedTuple):
    """One edge-side on a face boundary walk."""

    edge: Any
    side: EdgeSide
    endpoints: tuple[Any, Any]

    @property
    def vertex(self) -> Any:
        """Vertex at which the walk enters this edge-side."""
        return self.endpoints[0] if self.side is EdgeSide.LEFT else self.endpoints[1]


class Face:
    """
    Closed boundary walk of one region of the embedding.

    The walk is a circular sequence of FaceRecord entries. Equality is
    rotation-invariant: two faces are equal when one walk is a cyclic
    rotation of the other. Faces are owned by an EmbeddedGraph and
    addressed there by their integer ``id``; they are mutable and
    therefore unhashable.
    """

    __slots__ = ("id", "records")

    __hash__ = None  # type: ignore[assignment]

    def __init__(self, face_id: int, records: Optional[Iterable[FaceRecord]] = None) -> None:
        self.id = face_id
        self.records: list[FaceRecord] = list(records) if records is not None else []

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[FaceRecord]:
        return iter(self.records)

    def __getitem__(self, index: int) -> FaceRecord:
        return self.records[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Face):
            return NotImplemented
        n = len(self.records)
        if n != len(other.records):
            return False
        if n == 0:
            return True
        head = self.records[0]
        for offset, record in enumerate(other.records):
            if record != head:
                continue
            if all(self.records[i] == other.records[(offset + i) % n] for i in range(n)):
                return True
        return False

    def __repr__(self) -> str:
        walk = ", ".join(f"{r.edge}:{r.side.value}" for r in self.records)
        return f"Face(id={self.id}, [{walk}])"

    @property
    def size(self) -> int:
        """Number of edge-sides on the walk."""
        return len(self.records)

    def vertices(self) -> list[Any]:
        """Vertices of the walk in order (repeated vertices appear repeatedly)."""
        return [record.vertex for record in self.records]

    def contains_vertex(self, vertex: Any) -> bool:
        return any(record.vertex == vertex for record in self.records)

    def index_of(self, record: FaceRecord) -> int:
        """Index of ``record`` in the walk, or -1."""
        try:
            return self.records.index(record)
        except ValueError:
            return -1

    def index_of_edge(self, edge: Any) -> int:
        """Index of the first side of ``edge`` on the walk, or -1."""
        for i, record in enumerate(self.records):
            if record.edge == edge:
                return i
        return -1

    def append(self, record: FaceRecord) -> None:
        self.records.append(record)

    def add_before(self, record: FaceRecord, anchor: FaceRecord) -> bool:
        """Insert ``record`` directly before ``anchor``; False if anchor is absent."""
        i = self.index_of(anchor)
        if i < 0:
            return False
        self.records.insert(i, record)
        return True

    def remove_edge(self, edge: Any) -> int:
        """Remove every side of ``edge`` from the walk; returns how many were removed."""
        before = len(self.records)
        self.records = [record for record in self.records if record.edge != edge]
        return before - len(self.records)


__all__ = [
    "EdgeSide",
    "Face",
    "FaceRecord",
]
