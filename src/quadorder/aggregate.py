"""Scatter reconstructed corners into a buffer indexed by local vertex id.

The buffer has one row per local vertex identifier and is allocated once with
the size announced by the numbering. Every local quadrant writes each of its
corner positions into the row named by that corner's identifier. When several
corners share a row one of them is kept, and which one is unspecified.
Nothing here checks that writers agree, that is what :mod:`quadorder.verify`
is for.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from ._util import num_corners
from .forest import Forest, LocalVertexNumbering
from .geometry import tree_quadrant_corners


@dataclass(frozen=True, eq=False)
class VertexBuffer:
    """Aggregated physical vertex records.

    Attributes:
        locations: float64 array of shape (num_vertices, 3). Rows that were
            never written hold NaN.
        written: bool array of shape (num_vertices,).
        num_trees: Number of local trees visited.
        num_quadrants: Number of local quadrants visited.
    """

    locations: np.ndarray
    written: np.ndarray
    num_trees: int
    num_quadrants: int


def aggregate_vertices(forest: Forest, numbering: LocalVertexNumbering) -> VertexBuffer:
    """Reconstruct every local corner and scatter it by local vertex id.

    Args:
        forest: Locally owned forest slice.
        numbering: Local vertex numbering of the same forest.

    Returns:
        VertexBuffer

    Raises:
        ValueError: If the numbering does not match the forest shape or holds
            identifiers outside `[0, num_vertices)`.
    """

    conn = forest.connectivity
    nc = num_corners(forest.dim)
    q2v = numbering.quadrant_to_vertex
    n_local = forest.local_num_quadrants

    if n_local == 0 and q2v.size == 0:
        # An empty numbering carries no corner count of its own.
        q2v = q2v.reshape(0, nc)
    if q2v.shape != (n_local, nc):
        raise ValueError(
            f'quadrant_to_vertex has shape {q2v.shape}, expected ({n_local}, {nc})'
        )
    n_vert = numbering.num_vertices
    if q2v.size and (int(q2v.min()) < 0 or int(q2v.max()) >= n_vert):
        raise ValueError('local vertex identifiers must lie in [0, num_vertices)')

    locations = np.full((n_vert, 3), np.nan, dtype=np.float64)
    written = np.zeros(n_vert, dtype=bool)

    quad_count = 0
    n_trees = 0
    for tree in forest.local_trees():
        n_trees += 1
        nq = len(tree)
        if nq == 0:
            continue
        corners = tree_quadrant_corners(
            conn.tree_corners(tree.index), tree.quadrants, dim=forest.dim
        )
        ids = q2v[quad_count : quad_count + nq]
        # Which writer of a repeated identifier survives is unspecified.
        locations[ids.reshape(-1)] = corners.reshape(-1, 3)
        written[ids.reshape(-1)] = True
        quad_count += nq

    return VertexBuffer(
        locations=locations,
        written=written,
        num_trees=n_trees,
        num_quadrants=quad_count,
    )
