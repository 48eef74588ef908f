"""Canonical integer coordinates of quadrants and octants.

Every tree of a forest carries its own integer coordinate system covering
[0, ROOT_LEN) per axis. A quadrant at refinement level `l` has side length
`ROOT_LEN >> l` and its origin is a multiple of that length.

The dimensionless reference parameters used by the geometric mapper are:

    eta = origin / ROOT_LEN        (per axis, in [0, 1))
    h   = side_length / ROOT_LEN   (in (0, 1])

Both are exact in float64 because ROOT_LEN is a power of two.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from ._util import check_dim, num_corners


MAX_LEVEL: dict[int, int] = {2: 30, 3: 19}
ROOT_LEN: dict[int, int] = {d: 1 << lvl for d, lvl in MAX_LEVEL.items()}


def quadrant_length(level: int, dim: int = 2) -> int:
    """Side length of a quadrant at `level`, in integer coordinates."""

    d = check_dim(dim)
    lvl = int(level)
    if lvl < 0 or lvl > MAX_LEVEL[d]:
        raise ValueError(f'level must be in [0, {MAX_LEVEL[d]}] for dim={d}')
    return ROOT_LEN[d] >> lvl


def last_offset(level: int, dim: int = 2) -> int:
    """Largest valid origin coordinate for a quadrant at `level`."""

    d = check_dim(dim)
    return ROOT_LEN[d] - quadrant_length(level, d)


@dataclass(frozen=True, slots=True)
class Quadrant:
    """A quadrant (dim=2) or octant (dim=3) in a tree's integer space.

    Args:
        x, y, z: Integer origin. `z` must stay 0 for quadrants.
        level: Refinement level, 0 is the whole tree.
        dim: 2 or 3.

    Raises:
        ValueError: If the level is out of range, a coordinate is outside the
            tree, or the origin is not aligned to the quadrant length.
    """

    x: int
    y: int
    z: int = 0
    level: int = 0
    dim: int = 2

    def __post_init__(self) -> None:
        d = check_dim(self.dim)
        length = quadrant_length(self.level, d)
        coords = (self.x, self.y, self.z) if d == 3 else (self.x, self.y)
        if d == 2 and int(self.z) != 0:
            raise ValueError('z must be 0 for two-dimensional quadrants')
        for c in coords:
            ci = int(c)
            if ci < 0 or ci >= ROOT_LEN[d]:
                raise ValueError(f'quadrant coordinates must be in [0, {ROOT_LEN[d]})')
            if ci % length:
                raise ValueError(
                    'quadrant coordinates must be multiples of the quadrant length '
                    f'(level={self.level}, length={length})'
                )
        # Normalize numpy integers to plain ints.
        object.__setattr__(self, 'x', int(self.x))
        object.__setattr__(self, 'y', int(self.y))
        object.__setattr__(self, 'z', int(self.z))
        object.__setattr__(self, 'level', int(self.level))
        object.__setattr__(self, 'dim', d)

    @property
    def length(self) -> int:
        return quadrant_length(self.level, self.dim)

    @property
    def origin(self) -> tuple[int, ...]:
        if self.dim == 3:
            return self.x, self.y, self.z
        return self.x, self.y

    @property
    def child_id(self) -> int:
        """Position of this quadrant among its siblings, in z-order.

        The root quadrant (level 0) has child id 0.
        """
        if self.level == 0:
            return 0
        length = self.length
        cid = 0
        for k, c in enumerate(self.origin):
            if c & length:
                cid |= 1 << k
        return cid

    def children(self) -> tuple['Quadrant', ...]:
        """Return the `2**dim` children of this quadrant in z-order."""

        d = self.dim
        if self.level >= MAX_LEVEL[d]:
            raise ValueError('cannot split a quadrant at the maximum level')
        half = self.length >> 1
        out = []
        for c in range(num_corners(d)):
            out.append(
                Quadrant(
                    x=self.x + half * (c & 1),
                    y=self.y + half * ((c >> 1) & 1),
                    z=self.z + half * ((c >> 2) & 1),
                    level=self.level + 1,
                    dim=d,
                )
            )
        return tuple(out)


def reference_params(quadrant: Quadrant) -> tuple[np.ndarray, float]:
    """Return `(eta, h)` of a quadrant in the unit reference square/cube.

    Returns:
        eta: float64 array of length `dim` with `origin / ROOT_LEN`.
        h: `quadrant_length / ROOT_LEN`.
    """

    intsize = 1.0 / ROOT_LEN[quadrant.dim]
    eta = np.asarray(quadrant.origin, dtype=np.float64) * intsize
    h = float(quadrant.length) * intsize
    return eta, h
