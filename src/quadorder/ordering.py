"""Tolerance-based ordering of 3-D points and adjacent duplicate scan.

Two coordinates are treated as equal when they differ by less than `eps`.
Points are compared lexicographically: x first, then y only if the x values
are equal, then z only if both x and y are equal. A non-equal axis decides by
the sign of the difference.

The relation is not transitive for chains of points closer than `eps`, so it
is only a total order on inputs whose distinct points are well separated.
That is exactly the case a valid vertex numbering produces; for anything else
the adjacent scan still reports at least one offending pair.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import cmp_to_key
from typing import Sequence

import numpy as np

from ._util import check_eps, check_max_pairs


DEFAULT_EPS = 1e-15


@dataclass(frozen=True, slots=True)
class DuplicateVertexPair:
    """Two local vertices that compare equal under the tolerance order.

    Attributes:
        position: Index of the first vertex in the sorted sequence; the second
            one sits at `position + 1`.
        first: Local vertex identifier at `position`.
        second: Local vertex identifier at `position + 1`.
        first_location: Coordinates of `first`.
        second_location: Coordinates of `second`.
    """

    position: int
    first: int
    second: int
    first_location: tuple[float, float, float]
    second_location: tuple[float, float, float]


def compare_vertices(
    a: Sequence[float], b: Sequence[float], eps: float = DEFAULT_EPS
) -> int:
    """Compare two points; return -1, 0 or 1.

    The result is 0 only if all three axes differ by less than `eps`.
    """

    for k in range(3):
        diff = float(a[k]) - float(b[k])
        if abs(diff) < eps:
            continue
        return -1 if diff < 0 else 1
    return 0


def sort_vertices(
    locations: np.ndarray,
    *,
    eps: float = DEFAULT_EPS,
    indices: Sequence[int] | None = None,
) -> np.ndarray:
    """Return the permutation that sorts `locations` by :func:`compare_vertices`.

    Args:
        locations: Array of shape (n, 3).
        eps: Comparison tolerance.
        indices: Optional subset of row indices to sort. Defaults to all rows.

    Returns:
        int64 array of row indices in sorted order.
    """

    e = check_eps(eps)
    pts = np.asarray(locations, dtype=np.float64)
    if pts.ndim != 2 or pts.shape[1] != 3:
        raise ValueError('locations must have shape (n, 3)')
    rows = pts.tolist()
    idx = list(range(len(rows))) if indices is None else [int(i) for i in indices]

    key = cmp_to_key(lambda i, j: compare_vertices(rows[i], rows[j], e))
    return np.asarray(sorted(idx, key=key), dtype=np.int64)


def find_adjacent_duplicates(
    locations: np.ndarray,
    order: Sequence[int],
    *,
    eps: float = DEFAULT_EPS,
    max_pairs: int = 10,
) -> tuple[tuple[DuplicateVertexPair, ...], int]:
    """Scan neighbours of a sorted sequence for equal points.

    Args:
        locations: Array of shape (n, 3).
        order: Row indices in sorted order (see :func:`sort_vertices`).
        eps: Comparison tolerance; should match the one used for sorting.
        max_pairs: Maximum number of pairs to report.

    Returns:
        (pairs, n_duplicates): the first `max_pairs` offending pairs and the
        total number of adjacent positions that compare equal.
    """

    e = check_eps(eps)
    m = check_max_pairs(max_pairs)
    rows = np.asarray(locations, dtype=np.float64).tolist()
    ordered = [int(i) for i in order]

    found: list[DuplicateVertexPair] = []
    count = 0
    for pos in range(len(ordered) - 1):
        i, j = ordered[pos], ordered[pos + 1]
        if compare_vertices(rows[i], rows[j], e) != 0:
            continue
        count += 1
        if len(found) < m:
            found.append(
                DuplicateVertexPair(
                    position=pos,
                    first=i,
                    second=j,
                    first_location=(rows[i][0], rows[i][1], rows[i][2]),
                    second_location=(rows[j][0], rows[j][1], rows[j][2]),
                )
            )
    return tuple(found), count
