from __future__ import annotations

import os
from typing import Any, Callable

import numpy as np
import pytest

import quadorder as qo


def pytest_addoption(parser: pytest.Parser) -> None:
    parser.addoption(
        '--fuzz-n',
        action='store',
        type=int,
        default=10,
        help='Number of iterations per fuzz test (default: 10).',
    )
    parser.addoption(
        '--fuzz-seed',
        action='store',
        type=int,
        default=None,
        help=(
            'Optional base seed for fuzz tests. If not set, a deterministic seed is '
            'chosen.'
        ),
    )


@pytest.fixture(scope='session')
def fuzz_settings(request: pytest.FixtureRequest) -> dict[str, Any]:
    """Settings shared by fuzz tests.

    The goal is to make fuzz tests reproducible by default while still allowing
    a user to override the number of iterations and seed.
    """
    n: int = int(request.config.getoption('--fuzz-n'))
    seed = request.config.getoption('--fuzz-seed')
    if seed is None:
        # Environment variable is a last-resort escape hatch.
        env_seed = os.environ.get('QUADORDER_FUZZ_SEED')
        seed = int(env_seed) if env_seed is not None else 0
    return {'n': n, 'seed': int(seed)}


def _integer_numbering(
    forest: qo.Forest, identify_periodic: bool = False
) -> qo.LocalVertexNumbering:
    """Number corners by their exact integer position inside each tree.

    Only correct for forests whose local trees share no boundaries (e.g. a
    single tree). Periodic axes of the connectivity wrap ROOT_LEN to 0 when
    `identify_periodic` is set.
    """
    dim = forest.dim
    root = qo.ROOT_LEN[dim]
    offsets = qo.corner_offsets(dim)
    periodic = forest.connectivity.periodic
    key_to_id: dict[tuple[int, ...], int] = {}
    rows: list[list[int]] = []
    for tree in forest.local_trees():
        for q in tree.quadrants:
            row = []
            for off in offsets:
                pos = [int(c) + q.length * int(b) for c, b in zip(q.origin, off)]
                if identify_periodic:
                    pos = [p % root if periodic[k] else p for k, p in enumerate(pos)]
                key = (tree.index,) + tuple(pos)
                row.append(key_to_id.setdefault(key, len(key_to_id)))
            rows.append(row)
    q2v = np.asarray(rows, dtype=np.int64).reshape(-1, 1 << dim)
    return qo.LocalVertexNumbering(num_vertices=len(key_to_id), quadrant_to_vertex=q2v)


def _rounded_numbering(
    forest: qo.Forest, identify_periodic: bool = False, decimals: int = 10
) -> qo.LocalVertexNumbering:
    """Number corners by their physical position rounded to `decimals`.

    Works across tree boundaries; ignores periodicity.
    """
    conn = forest.connectivity
    key_to_id: dict[tuple[float, ...], int] = {}
    rows: list[list[int]] = []
    for tree in forest.local_trees():
        if not len(tree):
            continue
        corners = qo.tree_quadrant_corners(conn.tree_corners(tree.index), tree.quadrants)
        for qc in corners:
            row = []
            for p in np.round(qc, decimals):
                key = (float(p[0]), float(p[1]), float(p[2]))
                row.append(key_to_id.setdefault(key, len(key_to_id)))
            rows.append(row)
    q2v = np.asarray(rows, dtype=np.int64).reshape(-1, 1 << forest.dim)
    return qo.LocalVertexNumbering(num_vertices=len(key_to_id), quadrant_to_vertex=q2v)


@pytest.fixture
def integer_numbering() -> Callable[..., qo.LocalVertexNumbering]:
    return _integer_numbering


@pytest.fixture
def rounded_numbering() -> Callable[..., qo.LocalVertexNumbering]:
    return _rounded_numbering
