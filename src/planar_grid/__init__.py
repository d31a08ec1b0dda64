"""
planar-grid-layout: Straight-line grid drawings of planar graphs in Python.

This package draws biconnected plane graphs (and NIC-planar graphs with
their crossings removed) on an integer grid:

- embedding: Embedded graph with a rotation system and consistent faces
- ordering: Harel-Sardas canonical ordering with quadrangle repair
- placement: Incremental contour-based placement and crossing reinsertion
- preprocessing: Biconnectivity, crossing removal, kites, triangulation
"""

__version__ = "0.1.0"

# Embedded graphs
from .embedding import (
    EdgeSide,
    EmbeddedGraph,
    Face,
    FaceRecord,
    split_edge,
)

# Graph builders
from .generators import cycle_graph, stacked_triangles

# Metrics for drawing quality
from .metrics import edge_crossings, grid_area, grid_bounds

# Canonical ordering
from .ordering import (
    CanonicalOrder,
    CanonicalOrderer,
    QuadrangleRepair,
    RepairCase,
    SplitEdge,
    is_directly_covered_by,
)

# Grid placement
from .placement import GridLayout, IncrementalPlacer, reinsert_crossing_edges

# Preprocessing utilities
from .preprocessing import (
    biconnected_components,
    insert_empty_kites,
    is_biconnected,
    remove_crossings,
    star_triangulate,
)
from .types import (
    Event,
    EventType,
    GridPoint,
    Link,
    Node,
    Quadrangle,
    Vertex,
    VertexKind,
)

# Validation utilities
from .validation import (
    DuplicateVertexError,
    EmbeddingWarning,
    InconsistentEmbeddingError,
    InvalidInsertionError,
    PlacementStateError,
    PreconditionError,
    UnknownEdgeError,
    UnknownVertexError,
    ValidationError,
    validate_quadrangles,
)

__all__ = [
    # Version
    "__version__",
    # Shared types
    "GridPoint",
    "Vertex",
    "VertexKind",
    "EventType",
    "Event",
    "Node",
    "Link",
    "Quadrangle",
    # Embedding
    "EmbeddedGraph",
    "EdgeSide",
    "Face",
    "FaceRecord",
    "split_edge",
    # Ordering
    "CanonicalOrderer",
    "CanonicalOrder",
    "QuadrangleRepair",
    "RepairCase",
    "SplitEdge",
    "is_directly_covered_by",
    # Placement
    "GridLayout",
    "IncrementalPlacer",
    "reinsert_crossing_edges",
    # Generators
    "cycle_graph",
    "stacked_triangles",
    # Metrics
    "edge_crossings",
    "grid_bounds",
    "grid_area",
    # Validation
    "ValidationError",
    "DuplicateVertexError",
    "UnknownVertexError",
    "UnknownEdgeError",
    "InvalidInsertionError",
    "InconsistentEmbeddingError",
    "PreconditionError",
    "PlacementStateError",
    "EmbeddingWarning",
    "validate_quadrangles",
    # Preprocessing
    "biconnected_components",
    "is_biconnected",
    "remove_crossings",
    "insert_empty_kites",
    "star_triangulate",
]
