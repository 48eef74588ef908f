from __future__ import annotations

import numpy as np
import pytest

import quadorder as qo


def test_compare_is_lexicographic() -> None:
    assert qo.compare_vertices((0, 5, 5), (1, 0, 0)) == -1
    assert qo.compare_vertices((1, 0, 0), (0, 5, 5)) == 1
    assert qo.compare_vertices((1, 0, 9), (1, 2, 0)) == -1
    assert qo.compare_vertices((1, 2, 3), (1, 2, 0)) == 1
    assert qo.compare_vertices((1, 2, 3), (1, 2, 3)) == 0


@pytest.mark.parametrize('axis', [0, 1, 2])
def test_compare_tolerance_boundary(axis: int) -> None:
    a = [0.0, 0.0, 0.0]
    at_eps = [0.0, 0.0, 0.0]
    below_eps = [0.0, 0.0, 0.0]
    at_eps[axis] = 1e-15
    below_eps[axis] = 0.5e-15

    assert qo.compare_vertices(a, at_eps, 1e-15) == -1
    assert qo.compare_vertices(at_eps, a, 1e-15) == 1
    assert qo.compare_vertices(a, below_eps, 1e-15) == 0
    assert qo.compare_vertices(below_eps, a, 1e-15) == 0


def test_compare_equal_axis_defers_to_next() -> None:
    # x differs by less than eps, so y decides
    assert qo.compare_vertices((1e-16, 1.0, 0.0), (0.0, 2.0, 0.0)) == -1
    assert qo.compare_vertices((0.0, 0.0, 0.0), (1e-3, -1.0, 0.0), eps=1e-2) == 1


def test_sort_vertices_grid() -> None:
    grid = np.array(
        [[x, y, 0.0] for y in (0.0, 0.5, 1.0) for x in (0.0, 0.5, 1.0)], dtype=float
    )
    rng = np.random.default_rng(0)
    perm = rng.permutation(len(grid))
    shuffled = grid[perm]
    order = qo.sort_vertices(shuffled)
    got = shuffled[order]
    expected = np.array(
        [[x, y, 0.0] for x in (0.0, 0.5, 1.0) for y in (0.0, 0.5, 1.0)], dtype=float
    )
    np.testing.assert_array_equal(got, expected)


def test_sort_vertices_subset() -> None:
    pts = np.array([[2, 0, 0], [np.nan, 0, 0], [1, 0, 0]], dtype=float)
    order = qo.sort_vertices(pts, indices=[0, 2])
    assert order.tolist() == [2, 0]


def test_sort_vertices_rejects_bad_input() -> None:
    with pytest.raises(ValueError):
        qo.sort_vertices(np.zeros((3, 2)))
    with pytest.raises(ValueError):
        qo.sort_vertices(np.zeros((3, 3)), eps=0.0)
    with pytest.raises(ValueError):
        qo.sort_vertices(np.zeros((3, 3)), eps=float('inf'))


def test_find_adjacent_duplicates_reports_pair() -> None:
    pts = np.array(
        [[0.0, 0.0, 0.0], [0.5, 0.0, 0.0], [1.0, 0.0, 0.0], [0.5, 0.0, 0.0]],
        dtype=float,
    )
    order = qo.sort_vertices(pts)
    pairs, n = qo.find_adjacent_duplicates(pts, order)
    assert n == 1
    assert len(pairs) == 1
    p = pairs[0]
    assert p.position == 1
    assert {p.first, p.second} == {1, 3}
    assert p.first_location == (0.5, 0.0, 0.0)
    assert p.second_location == (0.5, 0.0, 0.0)


def test_find_adjacent_duplicates_caps_pairs() -> None:
    pts = np.zeros((6, 3))
    order = qo.sort_vertices(pts)
    pairs, n = qo.find_adjacent_duplicates(pts, order, max_pairs=2)
    assert n == 5
    assert len(pairs) == 2
    with pytest.raises(ValueError):
        qo.find_adjacent_duplicates(pts, order, max_pairs=0)


def test_find_adjacent_duplicates_small_inputs() -> None:
    assert qo.find_adjacent_duplicates(np.zeros((0, 3)), []) == ((), 0)
    assert qo.find_adjacent_duplicates(np.zeros((1, 3)), [0]) == ((), 0)
