"""Macro-level connectivity of a forest.

A connectivity lists the physical coordinates of the macro vertices and, for
every tree, the indices of its corner vertices. quadorder supports:
- two-dimensional forests (quadtrees): 4 corners per tree
- three-dimensional forests (octrees): 8 corners per tree

Corner ordering
---------------
Geometry inside quadorder is evaluated in *pixel* (z-) order: corner `c` sits
at offset bit `k` equal to `(c >> k) & 1` along axis `k`, so in 2-D

    2 --- 3
    |     |
    0 --- 1

Connectivities built by mesh generators frequently list tree corners in
*right-hand-rule* (counter-clockwise) order instead. The permutation to pixel
order is fixed per dimension:

- 2-D: the ring 0, 1, 2, 3 maps to pixel corners (0, 1, 3, 2).
- 3-D: the bottom face ring (corners 0..3) is followed by the top face ring
  (corners 4..7), each counter-clockwise seen from +z, giving
  (0, 1, 3, 2, 4, 5, 7, 6).

`Connectivity.corner_order` states which convention `tree_to_vertex` uses.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal

import numpy as np

from ._util import check_dim, num_corners


RHR_TO_PIXEL: dict[int, tuple[int, ...]] = {
    2: (0, 1, 3, 2),
    3: (0, 1, 3, 2, 4, 5, 7, 6),
}


@dataclass(frozen=True, eq=False)
class Connectivity:
    """Macro vertices and tree-to-vertex table of a forest.

    Args:
        vertices: Array-like of shape (n_vertices, 3). Two-dimensional forests
            still carry a z coordinate (usually 0).
        tree_to_vertex: Integer array-like of shape (n_trees, 2**dim).
        dim: 2 or 3.
        corner_order: 'rhr' (right-hand-rule rings) or 'pixel'.
        periodic: Per-axis periodicity flags. quadorder does not interpret
            them; they are forwarded to vertex numbering collaborators.

    Raises:
        ValueError: If shapes are inconsistent, coordinates are not finite or
            a tree references a vertex that does not exist.
    """

    vertices: Any
    tree_to_vertex: Any
    dim: int = 2
    corner_order: Literal['rhr', 'pixel'] = 'rhr'
    periodic: tuple[bool, bool, bool] = (False, False, False)

    def __post_init__(self) -> None:
        d = check_dim(self.dim)
        if self.corner_order not in ('rhr', 'pixel'):
            raise ValueError('corner_order must be \'rhr\' or \'pixel\'')

        verts = np.array(self.vertices, dtype=np.float64)
        if verts.ndim != 2 or verts.shape[1] != 3:
            raise ValueError('vertices must have shape (n, 3)')
        if not np.all(np.isfinite(verts)):
            raise ValueError('vertices must contain only finite values')

        ttv = np.array(self.tree_to_vertex, dtype=np.int64)
        if ttv.ndim != 2 or ttv.shape[1] != num_corners(d):
            raise ValueError(f'tree_to_vertex must have shape (n_trees, {num_corners(d)})')
        if ttv.size and (ttv.min() < 0 or ttv.max() >= verts.shape[0]):
            raise ValueError('tree_to_vertex references an unknown vertex')

        if len(self.periodic) != 3:
            raise ValueError('periodic must have length 3')

        verts.setflags(write=False)
        ttv.setflags(write=False)
        object.__setattr__(self, 'vertices', verts)
        object.__setattr__(self, 'tree_to_vertex', ttv)
        object.__setattr__(self, 'dim', d)
        object.__setattr__(
            self,
            'periodic',
            (bool(self.periodic[0]), bool(self.periodic[1]), bool(self.periodic[2])),
        )

    @property
    def num_trees(self) -> int:
        return int(self.tree_to_vertex.shape[0])

    @property
    def num_vertices(self) -> int:
        return int(self.vertices.shape[0])

    @property
    def is_periodic(self) -> bool:
        return any(self.periodic)

    def tree_vertex_indices(self, tree: int) -> np.ndarray:
        """Vertex indices of one tree's corners, in pixel order."""

        t = int(tree)
        if t < 0 or t >= self.num_trees:
            raise IndexError(f'tree index {t} out of range')
        idx = self.tree_to_vertex[t]
        if self.corner_order == 'rhr':
            idx = idx[list(RHR_TO_PIXEL[self.dim])]
        return idx

    def tree_corners(self, tree: int) -> np.ndarray:
        """Physical coordinates of one tree's corners, shape (2**dim, 3).

        Rows are in pixel order regardless of `corner_order`.
        """

        return self.vertices[self.tree_vertex_indices(tree)]

    # ------------------------------------------------------------------
    # Builders
    # ------------------------------------------------------------------

    @classmethod
    def unit_square(cls) -> 'Connectivity':
        """One tree covering [0, 1]^2 in the z=0 plane."""
        return cls(
            vertices=((0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (1.0, 1.0, 0.0), (0.0, 1.0, 0.0)),
            tree_to_vertex=((0, 1, 2, 3),),
            dim=2,
        )

    @classmethod
    def periodic_square(cls) -> 'Connectivity':
        """Unit square with periodic identification in x and y."""
        sq = cls.unit_square()
        return cls(
            vertices=sq.vertices,
            tree_to_vertex=sq.tree_to_vertex,
            dim=2,
            periodic=(True, True, False),
        )

    @classmethod
    def star(cls, r1: float = 1.0, r2: float = 1.5) -> 'Connectivity':
        """Six trees arranged around one shared centre vertex.

        Vertex 0 is the centre; vertices 1..6 are spokes at radius `r1` and
        angles k*60 degrees; vertices 7..12 lie on the rim at radius `r2` and
        angles k*60 + 30 degrees. Tree k is the quadrilateral
        (centre, spoke k, rim k, spoke k+1) in right-hand-rule order.
        """
        if not (0.0 < float(r1) < float(r2)):
            raise ValueError('star radii must satisfy 0 < r1 < r2')
        verts = np.zeros((13, 3), dtype=np.float64)
        for k in range(6):
            a = k * np.pi / 3.0
            verts[1 + k] = (r1 * np.cos(a), r1 * np.sin(a), 0.0)
            verts[7 + k] = (r2 * np.cos(a + np.pi / 6.0), r2 * np.sin(a + np.pi / 6.0), 0.0)
        ttv = [(0, 1 + k, 7 + k, 1 + (k + 1) % 6) for k in range(6)]
        return cls(vertices=verts, tree_to_vertex=ttv, dim=2)

    @classmethod
    def unit_cube(cls) -> 'Connectivity':
        """One tree covering [0, 1]^3."""
        return cls(
            vertices=(
                (0.0, 0.0, 0.0),
                (1.0, 0.0, 0.0),
                (1.0, 1.0, 0.0),
                (0.0, 1.0, 0.0),
                (0.0, 0.0, 1.0),
                (1.0, 0.0, 1.0),
                (1.0, 1.0, 1.0),
                (0.0, 1.0, 1.0),
            ),
            tree_to_vertex=((0, 1, 2, 3, 4, 5, 6, 7),),
            dim=3,
        )
