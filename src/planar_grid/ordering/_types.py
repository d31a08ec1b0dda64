"""Data types for canonical orderings."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator, NamedTuple

from ..types import Quadrangle


class RepairCase(Enum):
    """
    How a removed-crossing quadrangle was handled when its vertex was ordered.

    - FIRST: first corner ordered; a dummy edge divides the empty quadrangle
    - LAST_COVERED: last corner ordered, opposite corner covered; shift vertex added
    - LAST_NOT_COVERED: last corner ordered, not covered; quadrangle edge split
    - LAST_CONSISTENT: last corner ordered, nothing to repair
    """

    FIRST = "first"
    LAST_COVERED = "last-covered"
    LAST_NOT_COVERED = "last-not-covered"
    LAST_CONSISTENT = "last-consistent"


class SplitEdge(NamedTuple):
    """Replacement of an edge by a two-edge path through a bend vertex."""

    first: Any
    bend: Any
    second: Any


class QuadrangleRepair(NamedTuple):
    """Observation of one quadrangle classification."""

    quadrangle: Quadrangle
    vertex: Any
    case: RepairCase


@dataclass
class CanonicalOrder:
    """
    Result of a canonical ordering.

    Attributes:
        order: Vertices in canonical order
        index: Inverse of ``order`` (vertex -> position)
        split_edges: Original edge -> (first half, bend vertex, second half)
            for every edge split during quadrangle repair
        shift_vertices: Helper vertices added for covered quadrangles; they
            carry no meaning in the final drawing
        repairs: Quadrangle classifications in the order they happened
    """

    order: list[Any]
    split_edges: dict[Any, SplitEdge] = field(default_factory=dict)
    shift_vertices: list[Any] = field(default_factory=list)
    repairs: list[QuadrangleRepair] = field(default_factory=list)
    index: dict[Any, int] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.index = {v: i for i, v in enumerate(self.order)}

    def __len__(self) -> int:
        return len(self.order)

    def __iter__(self) -> Iterator[Any]:
        return iter(self.order)

    def __getitem__(self, position: int) -> Any:
        return self.order[position]

    def position(self, vertex: Any) -> int:
        """Position of ``vertex`` in the order, or -1."""
        return self.index.get(vertex, -1)

    @property
    def repair_cases(self) -> list[RepairCase]:
        return [repair.case for repair in self.repairs]


__all__ = [
    "CanonicalOrder",
    "QuadrangleRepair",
    "RepairCase",
    "SplitEdge",
]
