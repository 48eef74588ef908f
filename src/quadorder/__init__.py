"""quadorder package.

This package checks that a process-local vertex numbering of a quadtree or
octree forest is consistent with the forest's physical geometry: distinct
local vertex identifiers must not reconstruct to the same point.

Public API:
    - Quadrant, Tree, Forest, Connectivity, LocalVertexNumbering
    - quadrant_corners, tree_quadrant_corners
    - aggregate_vertices
    - compare_vertices, sort_vertices
    - analyze_local_order, check_local_order
"""

from __future__ import annotations

from .__about__ import __version__

from .coordinates import (
    MAX_LEVEL,
    ROOT_LEN,
    Quadrant,
    last_offset,
    quadrant_length,
    reference_params,
)
from .connectivity import RHR_TO_PIXEL, Connectivity
from .forest import Forest, LocalVertexNumbering, NumberingProvider, Tree
from .geometry import (
    bilinear,
    corner_offsets,
    interpolate,
    quadrant_corners,
    tree_quadrant_corners,
    trilinear,
)
from .aggregate import VertexBuffer, aggregate_vertices
from .ordering import (
    DEFAULT_EPS,
    DuplicateVertexPair,
    compare_vertices,
    find_adjacent_duplicates,
    sort_vertices,
)
from .verify import (
    LocalOrderDiagnostics,
    LocalOrderError,
    LocalOrderIssue,
    analyze_local_order,
    check_local_order,
)

__all__ = [
    'MAX_LEVEL',
    'ROOT_LEN',
    'Quadrant',
    'last_offset',
    'quadrant_length',
    'reference_params',
    'RHR_TO_PIXEL',
    'Connectivity',
    'Forest',
    'LocalVertexNumbering',
    'NumberingProvider',
    'Tree',
    'bilinear',
    'corner_offsets',
    'interpolate',
    'quadrant_corners',
    'tree_quadrant_corners',
    'trilinear',
    'VertexBuffer',
    'aggregate_vertices',
    'DEFAULT_EPS',
    'DuplicateVertexPair',
    'compare_vertices',
    'find_adjacent_duplicates',
    'sort_vertices',
    'LocalOrderDiagnostics',
    'LocalOrderError',
    'LocalOrderIssue',
    'analyze_local_order',
    'check_local_order',
    '__version__',
]
