from __future__ import annotations

import math
import threading

import numpy as np
import pytest
from numpy.testing import assert_allclose, assert_array_equal

from ndslice.config import config
from ndslice.errors import BoundsCheckError
from ndslice.functional import (
    _chunk_bounds,
    for_each,
    make_list,
    map_values,
    parallel_for_each,
    parallel_map,
    range_exclusive,
    range_inclusive,
    select,
    sort,
    sort_indices,
    take,
    unique,
)


def test_range_inclusive() -> None:
    assert_array_equal(range_inclusive(0, 6, 2), [0, 2, 4, 6])
    assert_array_equal(range_inclusive(0, 7, 2), [0, 2, 4, 6])
    assert_array_equal(range_inclusive(3, 3), [3])
    assert_array_equal(range_inclusive(3, 2), [])
    assert len(range_inclusive(0.0, 6.28, 0.5)) == 13
    assert_allclose(range_inclusive(0.0, 1.0, 0.25), [0.0, 0.25, 0.5, 0.75, 1.0])


def test_range_exclusive() -> None:
    assert_array_equal(range_exclusive(0, 16), np.arange(16))
    assert_array_equal(range_exclusive(0, 6, 2), [0, 2, 4])
    assert_array_equal(range_exclusive(5, 5), [])


def test_range_zero_step() -> None:
    with pytest.raises(ValueError, match="step"):
        range_inclusive(0, 1, 0)
    with pytest.raises(ValueError, match="step"):
        range_exclusive(0, 1, 0)


def test_make_list() -> None:
    values = make_list(1, 1, 5, 6)
    assert values.shape == (4,)
    assert_array_equal(values, [1, 1, 5, 6])


def test_take() -> None:
    values = np.arange(10)
    assert_array_equal(take(values, 2, 5), [2, 3, 4, 5])
    assert_array_equal(take(values, 2, -2, 3), [2, 5, 8])
    assert_array_equal(take(values, -3, -1), [7, 8, 9])
    with pytest.raises(BoundsCheckError):
        take(values, 0, 10)
    with pytest.raises(ValueError):
        take(values, 0, 5, 0)


def test_map_values() -> None:
    vals = range_inclusive(0.0, 6.28, 0.5)
    sins = map_values(math.sin, vals)
    assert_allclose(sins, np.sin(vals))
    assert_array_equal(map_values(lambda a, b: a * b, [1, 2, 3], [4, 5, 6]), [4, 10, 18])


def test_map_values_length_mismatch() -> None:
    with pytest.raises(ValueError, match="same length"):
        map_values(lambda a, b: a + b, [1, 2], [1, 2, 3])
    with pytest.raises(TypeError):
        map_values(abs)


def test_for_each() -> None:
    seen: list[tuple[int, int]] = []
    for_each(lambda a, b: seen.append((int(a), int(b))), [1, 2], [3, 4])
    assert seen == [(1, 3), (2, 4)]


@pytest.mark.parametrize(
    ("njobs", "nthreads", "expected"),
    [
        (11, 4, [(0, 2), (2, 4), (4, 6), (6, 11)]),
        (8, 4, [(0, 2), (2, 4), (4, 6), (6, 8)]),
        (3, 4, [(0, 0), (0, 0), (0, 0), (0, 3)]),
        (5, 1, [(0, 5)]),
        (0, 2, [(0, 0), (0, 0)]),
    ],
)
def test_chunk_bounds(njobs: int, nthreads: int, expected: list[tuple[int, int]]) -> None:
    assert list(_chunk_bounds(njobs, nthreads)) == expected


@pytest.mark.parametrize("nthreads", [1, 2, 4, 7, 16])
def test_parallel_map_matches_map(nthreads: int) -> None:
    first = range_inclusive(0.0, 1.0, 0.1)
    second = range_inclusive(0.0, 10.0, 1.0)
    third = range_inclusive(0.0, 100.0, 10.0)

    def func(a: float, b: float, c: float) -> float:
        return (a + b) * c

    expected = map_values(func, first, second, third)
    assert_allclose(parallel_map(nthreads, func, first, second, third), expected)


def test_parallel_map_uses_worker_threads() -> None:
    names = parallel_map(4, lambda _: threading.current_thread().name, np.arange(40))
    assert len(set(names)) <= 4
    assert all(name.startswith("ndslice_pool") for name in names)
    # each contiguous chunk runs on a single worker
    for begin, end in _chunk_bounds(40, 4):
        assert len(set(names[begin:end])) == 1


def test_parallel_map_default_workers() -> None:
    with config.set_max_workers(2):
        assert_array_equal(parallel_map(None, lambda x: x * 2, np.arange(5)), [0, 2, 4, 6, 8])
    assert_array_equal(parallel_map(None, lambda x: x + 1, [1, 2]), [2, 3])


def test_parallel_map_propagates_errors() -> None:
    def fail_on_three(x: int) -> int:
        if x == 3:
            raise ZeroDivisionError("three")
        return x

    with pytest.raises(ZeroDivisionError, match="three"):
        parallel_map(2, fail_on_three, np.arange(10))


def test_parallel_map_invalid_nthreads() -> None:
    with pytest.raises(ValueError, match="nthreads"):
        parallel_map(0, abs, [1, 2])


def test_parallel_for_each() -> None:
    out = np.zeros(10, dtype="int64")

    def write(i: int, v: int) -> None:
        out[i] = v * v

    parallel_for_each(3, write, np.arange(10), np.arange(10))
    assert_array_equal(out, np.arange(10) ** 2)


def test_sort() -> None:
    assert_array_equal(sort([3, 1, 2]), [1, 2, 3])
    assert_array_equal(sort([3, 1, 2], less=lambda a, b: a > b), [3, 2, 1])
    values = np.array([3, 1, 2])
    sort(values)
    assert_array_equal(values, [3, 1, 2])


def test_sort_indices() -> None:
    assert_array_equal(sort_indices([3, 1, 2]), [1, 2, 0])
    assert_array_equal(sort_indices([3, 1, 2], less=lambda a, b: a > b), [0, 2, 1])
    # ties keep their input order
    assert_array_equal(sort_indices([2, 1, 2, 1]), [1, 3, 0, 2])


def test_select() -> None:
    assert_array_equal(select(lambda v: v > 0, [-1, 2, -3, 4]), [2, 4])
    sins = map_values(math.sin, range_inclusive(0.0, 6.28, 0.5))
    assert np.all(select(lambda v: v > 0.0, sins) > 0.0)


def test_unique() -> None:
    dups = make_list(1, 1, 5, 6, 2, 4, 1, 5, 1, 4, 2, 5, 3, 7)
    assert_array_equal(unique(dups), [1, 2, 3, 4, 5, 6, 7])


def test_unique_custom_comparisons() -> None:
    close = unique([1.0, 2.0, 1.05, 2.01], equal=lambda a, b: abs(a - b) < 0.1)
    assert_allclose(close, [1.0, 2.0])

    descending = unique([1, 3, 3, 2, 1], less=lambda a, b: a > b)
    assert_array_equal(descending, [3, 2, 1])
