"""Consistency check of a local vertex numbering.

Given the locally owned slice of a forest and a local vertex numbering, the
check reconstructs every quadrant corner in physical space, scatters the
positions into a buffer indexed by local vertex identifier, sorts that buffer
with the tolerance order of :mod:`quadorder.ordering` and scans adjacent
entries. The numbering is consistent if no two distinct identifiers land on
the same physical point.

Only the local numbering space is inspected; identifiers shared across
processes are out of reach by construction.

The public entry points are :func:`analyze_local_order` (always returns
diagnostics) and :func:`check_local_order` (raises in strict mode).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal

import logging
import warnings

import numpy as np

from ._util import check_eps, check_max_pairs
from .aggregate import aggregate_vertices
from .forest import Forest, LocalVertexNumbering, NumberingProvider
from .ordering import (
    DEFAULT_EPS,
    DuplicateVertexPair,
    find_adjacent_duplicates,
    sort_vertices,
)


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class LocalOrderIssue:
    code: str
    severity: Literal['info', 'warning', 'error']
    message: str
    examples: tuple[Any, ...] = ()


@dataclass(frozen=True, slots=True)
class LocalOrderDiagnostics:
    dim: int
    num_trees_checked: int
    num_quadrants: int
    num_vertices: int
    eps: float
    identify_periodic: bool

    n_duplicates: int
    duplicates: tuple[DuplicateVertexPair, ...]
    unassigned: tuple[int, ...]

    issues: tuple[LocalOrderIssue, ...]
    ok: bool


class LocalOrderError(ValueError):
    """Raised when a local vertex numbering is not geometrically unique."""

    def __init__(self, message: str, diagnostics: LocalOrderDiagnostics):
        super().__init__(message)
        self.diagnostics = diagnostics


def _resolve_numbering(
    forest: Forest,
    numbering: LocalVertexNumbering | NumberingProvider,
    identify_periodic: bool,
) -> LocalVertexNumbering:
    if isinstance(numbering, LocalVertexNumbering):
        return numbering
    if not callable(numbering):
        raise TypeError(
            'numbering must be a LocalVertexNumbering or a callable '
            '(forest, identify_periodic) -> LocalVertexNumbering'
        )
    out = numbering(forest, identify_periodic)
    if not isinstance(out, LocalVertexNumbering):
        raise TypeError('numbering provider must return a LocalVertexNumbering')
    return out


def analyze_local_order(
    forest: Forest,
    numbering: LocalVertexNumbering | NumberingProvider,
    *,
    identify_periodic: bool = True,
    eps: float = DEFAULT_EPS,
    max_pairs: int = 10,
) -> LocalOrderDiagnostics:
    """Check that distinct local vertex ids map to distinct physical points.

    Args:
        forest: Locally owned forest slice.
        numbering: Either a ready :class:`LocalVertexNumbering` or a provider
            called as `numbering(forest, identify_periodic)`.
        identify_periodic: Forwarded to a numbering provider. Ignored when a
            ready numbering is passed.
        eps: Per-axis tolerance below which coordinates compare equal. The
            default suits unit-sized trees; scale it with the mesh.
        max_pairs: Maximum number of duplicate pairs to report.

    Returns:
        LocalOrderDiagnostics
    """

    e = check_eps(eps)
    m = check_max_pairs(max_pairs)
    num = _resolve_numbering(forest, numbering, bool(identify_periodic))

    buf = aggregate_vertices(forest, num)
    logger.debug(
        'aggregated %d local quadrants from %d trees into %d vertices',
        buf.num_quadrants,
        buf.num_trees,
        num.num_vertices,
    )

    issues: list[LocalOrderIssue] = []

    unassigned = tuple(int(i) for i in np.flatnonzero(~buf.written))
    if unassigned:
        issues.append(
            LocalOrderIssue(
                code='UNASSIGNED_VERTEX',
                severity='warning',
                message=(
                    f'{len(unassigned)} local vertex id(s) are not used by any '
                    'local quadrant corner; the numbering is not dense.'
                ),
                examples=unassigned[:m],
            )
        )

    written_ids = np.flatnonzero(buf.written)
    order = sort_vertices(buf.locations, eps=e, indices=written_ids)
    pairs, n_dup = find_adjacent_duplicates(
        buf.locations, order, eps=e, max_pairs=m
    )
    if pairs:
        first = pairs[0]
        issues.append(
            LocalOrderIssue(
                code='DUPLICATE_VERTEX_LOCATION',
                severity='error',
                message=(
                    'local ordering not unique: sorted vertices '
                    f'{first.position} and {first.position + 1} '
                    f'(local ids {first.first} and {first.second}) coincide at '
                    f'{first.first_location} within eps={e:g}'
                ),
                examples=tuple((p.position, p.first, p.second) for p in pairs),
            )
        )
    logger.debug('uniqueness scan found %d duplicate neighbour(s)', n_dup)

    return LocalOrderDiagnostics(
        dim=int(forest.dim),
        num_trees_checked=int(buf.num_trees),
        num_quadrants=int(buf.num_quadrants),
        num_vertices=int(num.num_vertices),
        eps=e,
        identify_periodic=bool(identify_periodic),
        n_duplicates=int(n_dup),
        duplicates=pairs,
        unassigned=unassigned,
        issues=tuple(issues),
        ok=not any(i.severity == 'error' for i in issues),
    )


def check_local_order(
    forest: Forest,
    numbering: LocalVertexNumbering | NumberingProvider,
    *,
    identify_periodic: bool = True,
    eps: float = DEFAULT_EPS,
    max_pairs: int = 10,
    level: Literal['basic', 'warn', 'strict'] = 'strict',
) -> LocalOrderDiagnostics:
    """Validate a local vertex numbering, raising in strict mode.

    This is a convenience wrapper around :func:`analyze_local_order`.

    Args:
        forest: Locally owned forest slice.
        numbering: Ready numbering or numbering provider.
        identify_periodic: Forwarded to a numbering provider.
        eps: Per-axis comparison tolerance.
        max_pairs: Maximum number of duplicate pairs to report.
        level: Behavior when the numbering is not unique:
            - 'strict' (default): raise :class:`LocalOrderError`
            - 'warn': emit a RuntimeWarning and return the diagnostics
            - 'basic': return the diagnostics without warnings

    Returns:
        LocalOrderDiagnostics
    """

    if level not in ('basic', 'warn', 'strict'):
        raise ValueError('level must be one of: \'basic\', \'warn\', \'strict\'')

    diag = analyze_local_order(
        forest,
        numbering,
        identify_periodic=identify_periodic,
        eps=eps,
        max_pairs=max_pairs,
    )
    if diag.ok:
        return diag

    err = next(x for x in diag.issues if x.severity == 'error')
    if level == 'strict':
        raise LocalOrderError(err.message, diag)
    if level == 'warn':
        warnings.warn(err.message, RuntimeWarning, stacklevel=2)
    return diag
