"""
Input validation utilities for planar grid drawing.

Provides the exception hierarchy of the package together with small
validation functions for rotation positions, quadrangle registrations and
scale factors. Raises descriptive exceptions on invalid input.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Iterable, Sequence

if TYPE_CHECKING:
    from .embedding import EmbeddedGraph


class ValidationError(ValueError):
    """Base exception for planar grid validation errors."""

    pass


class DuplicateVertexError(ValidationError):
    """Raised when a vertex is added twice."""

    pass


class UnknownVertexError(ValidationError):
    """Raised when an operation requires a vertex that is not in the graph."""

    pass


class UnknownEdgeError(ValidationError):
    """Raised when an operation requires an edge that is not in the graph."""

    pass


class InvalidInsertionError(ValidationError):
    """Raised when an edge cannot be inserted at the requested positions."""

    pass


class InconsistentEmbeddingError(ValidationError):
    """Raised when rotation positions do not bound a common face."""

    pass


class PreconditionError(ValidationError):
    """Raised when the input graph violates an algorithm precondition."""

    pass


class PlacementStateError(RuntimeError):
    """Raised when the incremental placer is driven out of order."""

    pass


class EmbeddingWarning(UserWarning):
    """Warning for recoverable problems while editing an embedding."""

    pass


def validate_rotation_position(position: int, degree: int) -> int:
    """
    Validate an insertion position in a rotation list.

    Positions range over 0..degree inclusive (insert before that index).

    Args:
        position: Requested position
        degree: Current degree of the vertex

    Returns:
        The validated position

    Raises:
        InvalidInsertionError: If the position is out of range
    """
    if not isinstance(position, int) or isinstance(position, bool):
        raise InvalidInsertionError(f"Rotation position must be an int, got {type(position).__name__}")
    if position < 0 or position > degree:
        raise InvalidInsertionError(f"Rotation position {position} out of range [0, {degree}]")
    return position


def validate_quadrangles(
    graph: EmbeddedGraph,
    quadrangles: Iterable[Any],
    strict: bool = True,
) -> list[str]:
    """
    Validate removed-crossing registrations against a graph.

    Each quadrangle is a pair of vertex pairs (the endpoints of the two
    removed crossing edges). All four corners must be distinct vertices of
    the graph.

    Args:
        graph: Embedded graph the quadrangles refer to
        quadrangles: Registered quadrangles
        strict: If True, raise on first error. If False, return all errors.

    Returns:
        List of error messages (empty if valid)

    Raises:
        PreconditionError: If strict=True and a quadrangle is malformed
    """
    errors: list[str] = []

    for i, quadrangle in enumerate(quadrangles):
        corners = _flatten_quadrangle(quadrangle)
        if corners is None:
            errors.append(f"Quadrangle {i} is not a pair of vertex pairs: {quadrangle!r}")
        elif len(set(corners)) != 4:
            errors.append(f"Quadrangle {i} has repeated corners: {quadrangle!r}")
        else:
            missing = [v for v in corners if not graph.has_vertex(v)]
            if missing:
                errors.append(f"Quadrangle {i} references unknown vertices {missing!r}")

        if strict and errors:
            raise PreconditionError(errors[0])

    return errors


def _flatten_quadrangle(quadrangle: Any) -> Sequence[Any] | None:
    try:
        (a, c), (b, d) = quadrangle
    except (TypeError, ValueError):
        return None
    return (a, c, b, d)


def validate_scale_factor(factor: int) -> int:
    """
    Validate a grid refinement factor.

    Raises:
        ValidationError: If factor is not a positive integer
    """
    if not isinstance(factor, int) or isinstance(factor, bool) or factor < 1:
        raise ValidationError(f"scale factor must be a positive int, got {factor!r}")
    return factor


__all__ = [
    "DuplicateVertexError",
    "EmbeddingWarning",
    "InconsistentEmbeddingError",
    "InvalidInsertionError",
    "PlacementStateError",
    "PreconditionError",
    "UnknownEdgeError",
    "UnknownVertexError",
    "ValidationError",
    "validate_quadrangles",
    "validate_rotation_position",
    "validate_scale_factor",
]
