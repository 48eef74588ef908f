"""Internal shared helpers.

This module exists to avoid duplicating small pieces of argument checking
across `coordinates`, `connectivity`, `geometry` and `verify`.

The helpers here are intentionally lightweight and depend only on numpy.
"""

from __future__ import annotations

import numpy as np


def check_dim(dim: int) -> int:
    """Return `dim` as an int, raising ValueError unless it is 2 or 3."""

    d = int(dim)
    if d not in (2, 3):
        raise ValueError('dim must be 2 (quadtrees) or 3 (octrees)')
    return d


def num_corners(dim: int) -> int:
    """Number of corners of a quadrant (4) or octant (8)."""

    return 1 << check_dim(dim)


def check_eps(eps: float) -> float:
    """Return a validated comparison tolerance."""

    e = float(eps)
    if not np.isfinite(e) or e <= 0:
        raise ValueError('eps must be a positive finite number')
    return e


def check_max_pairs(max_pairs: int) -> int:
    m = int(max_pairs)
    if m <= 0:
        raise ValueError('max_pairs must be > 0')
    return m
