"""Reconstruction of physical corner positions.

Each tree maps the unit reference square (cube) onto physical space by
multilinear interpolation of its macro corners. In 2-D, with corners in pixel
order V0 (bottom-left), V1 (bottom-right), V2 (top-left), V3 (top-right):

    P(u, v) = V0 (1-u)(1-v) + V1 u (1-v) + V2 (1-u) v + V3 u v

and the 3-D map adds a third factor in w with corners V4..V7 on the top
layer. A quadrant with reference parameters (eta, h) has corner `c` at

    params(c) = eta + h * offset(c)

where offset(c) is the 0/1 pixel offset of the corner.

The map is continuous across quadrant boundaries inside a tree, so a corner
shared by several quadrants reconstructs to the same point up to round-off.
All evaluation below is elementwise and uses a fixed accumulation order;
the vectorized and per-quadrant paths are bit-identical.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

from ._util import check_dim, num_corners
from .coordinates import ROOT_LEN, Quadrant, reference_params


def corner_offsets(dim: int) -> np.ndarray:
    """Return the (2**dim, dim) table of pixel corner offsets.

    Row `c` holds bit `k` of `c` in column `k`.
    """

    d = check_dim(dim)
    c = np.arange(num_corners(d), dtype=np.int64)
    return np.stack([(c >> k) & 1 for k in range(d)], axis=1)


def interpolation_weights(params: np.ndarray) -> np.ndarray:
    """Multilinear weights of the macro corners at reference points.

    Args:
        params: Array of shape (..., dim) with reference coordinates.

    Returns:
        Array of shape (..., 2**dim).
    """

    p = np.asarray(params, dtype=np.float64)
    d = check_dim(p.shape[-1])
    offsets = corner_offsets(d)
    cols = []
    for v in range(num_corners(d)):
        w = np.ones(p.shape[:-1], dtype=np.float64)
        for k in range(d):
            u = p[..., k]
            w = w * (u if offsets[v, k] else 1.0 - u)
        cols.append(w)
    return np.stack(cols, axis=-1)


def interpolate(corners: np.ndarray, params: np.ndarray) -> np.ndarray:
    """Map reference points to physical space.

    Args:
        corners: Macro corners of one tree in pixel order, shape (2**dim, 3).
        params: Reference coordinates, shape (..., dim).

    Returns:
        Physical coordinates, shape (..., 3).
    """

    V = np.asarray(corners, dtype=np.float64)
    w = interpolation_weights(params)
    if V.shape != (w.shape[-1], 3):
        raise ValueError(f'corners must have shape ({w.shape[-1]}, 3)')
    out = np.zeros(w.shape[:-1] + (3,), dtype=np.float64)
    for v in range(V.shape[0]):
        out = out + V[v] * w[..., v : v + 1]
    return out


def bilinear(corners: np.ndarray, u: float, v: float) -> np.ndarray:
    """Evaluate the bilinear map of four pixel-ordered corners at (u, v)."""
    return interpolate(corners, np.array([u, v], dtype=np.float64))


def trilinear(corners: np.ndarray, u: float, v: float, w: float) -> np.ndarray:
    """Evaluate the trilinear map of eight pixel-ordered corners at (u, v, w)."""
    return interpolate(corners, np.array([u, v, w], dtype=np.float64))


def quadrant_corner_params(quadrant: Quadrant) -> np.ndarray:
    """Reference coordinates of a quadrant's corners, shape (2**dim, dim)."""

    eta, h = reference_params(quadrant)
    return eta[None, :] + h * corner_offsets(quadrant.dim)


def quadrant_corners(tree_corners: np.ndarray, quadrant: Quadrant) -> np.ndarray:
    """Physical positions of a quadrant's corners, shape (2**dim, 3)."""

    return interpolate(tree_corners, quadrant_corner_params(quadrant))


def tree_quadrant_corners(
    tree_corners: np.ndarray, quadrants: Sequence[Quadrant], *, dim: int = 2
) -> np.ndarray:
    """Physical corner positions of many quadrants of one tree.

    Args:
        tree_corners: Macro corners of the tree, pixel order, (2**dim, 3).
        quadrants: Quadrants of the tree.
        dim: Dimension, used when `quadrants` is empty.

    Returns:
        Array of shape (len(quadrants), 2**dim, 3).
    """

    d = check_dim(quadrants[0].dim if len(quadrants) else dim)
    n = len(quadrants)
    if n == 0:
        return np.zeros((0, num_corners(d), 3), dtype=np.float64)

    origins = np.empty((n, d), dtype=np.int64)
    lengths = np.empty(n, dtype=np.int64)
    for i, q in enumerate(quadrants):
        origins[i] = q.origin
        lengths[i] = q.length

    intsize = 1.0 / ROOT_LEN[d]
    eta = origins.astype(np.float64) * intsize
    h = lengths.astype(np.float64) * intsize
    params = eta[:, None, :] + h[:, None, None] * corner_offsets(d)[None, :, :]
    return interpolate(tree_corners, params)
