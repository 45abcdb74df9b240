"""Generic sequence combinators.

Every function here is value-in/value-out: inputs are read as numpy arrays (any sequence
is accepted) and results are returned as new numpy arrays. Functions taking several
sequences apply ``func`` element-wise across them, so the sequences must share a length.
"""

from __future__ import annotations

import functools
import logging
import math
import operator
import os
from concurrent.futures import ThreadPoolExecutor, wait
from typing import TYPE_CHECKING, Any

import numpy as np
import numpy.typing as npt

from ndslice.config import config
from ndslice.errors import BoundsCheckError

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator, Sequence

logger = logging.getLogger(__name__)

__all__ = [
    "for_each",
    "make_list",
    "map_values",
    "parallel_for_each",
    "parallel_map",
    "range_exclusive",
    "range_inclusive",
    "select",
    "sort",
    "sort_indices",
    "take",
    "unique",
]


def _check_step(step: float) -> None:
    if step == 0:
        raise ValueError("step must not be zero")


def range_inclusive(start: float, stop: float, step: float = 1) -> npt.NDArray[Any]:
    """Values from ``start`` up to and including ``stop`` in increments of ``step``.

    The last value is ``<= stop`` within the precision of ``step``.

    Examples
    --------
    >>> range_inclusive(0, 6, 2)
    array([0, 2, 4, 6])
    >>> range_inclusive(0.0, 1.0, 0.5)
    array([0. , 0.5, 1. ])
    """
    _check_step(step)
    count = math.floor((stop - start) / step) + 1
    return start + step * np.arange(max(count, 0))


def range_exclusive(start: float, stop: float, step: float = 1) -> npt.NDArray[Any]:
    """Values from ``start`` up to but excluding ``stop`` in increments of ``step``."""
    _check_step(step)
    count = math.floor((stop - start) / step)
    return start + step * np.arange(max(count, 0))


def make_list(*values: Any) -> npt.NDArray[Any]:
    """Collect the arguments into a 1-dimensional array."""
    return np.array(values)


def take(values: npt.ArrayLike, start: int, stop: int, step: int = 1) -> npt.NDArray[Any]:
    """Inclusive sub-sequence ``values[start], values[start + step], ...`` up to ``stop``.

    Negative bounds count from the end of the sequence, ``-1`` being the last element.
    """
    arr = np.asarray(values)
    size = len(arr)
    if step < 1:
        raise ValueError(f"step must be >= 1, got {step}")
    if start < 0:
        start += size
    if stop < 0:
        stop += size
    if not (0 <= start < size) or not (0 <= stop < size):
        raise BoundsCheckError(f"index out of bounds for sequence with length {size}")
    return arr[start : stop + 1 : step].copy()


def _as_arrays(seqs: Sequence[npt.ArrayLike]) -> list[npt.NDArray[Any]]:
    if not seqs:
        raise TypeError("at least one sequence is required")
    arrays = [np.asarray(seq) for seq in seqs]
    lengths = {len(arr) for arr in arrays}
    if len(lengths) > 1:
        raise ValueError(f"sequences must have the same length, got lengths {sorted(lengths)}")
    return arrays


def map_values(func: Callable[..., Any], *seqs: npt.ArrayLike) -> npt.NDArray[Any]:
    """Apply ``func`` to each set of arguments taken sequentially from ``seqs``."""
    arrays = _as_arrays(seqs)
    return np.asarray([func(*args) for args in zip(*arrays, strict=True)])


def for_each(func: Callable[..., Any], *seqs: npt.ArrayLike) -> None:
    """Call ``func`` on each set of arguments taken sequentially from ``seqs``."""
    arrays = _as_arrays(seqs)
    for args in zip(*arrays, strict=True):
        func(*args)


def _resolve_nthreads(nthreads: int | None) -> int:
    if nthreads is None:
        nthreads = config.get("threading.max_workers", None) or os.cpu_count() or 1
    if nthreads < 1:
        raise ValueError(f"nthreads must be >= 1, got {nthreads}")
    return int(nthreads)


def _chunk_bounds(njobs: int, nthreads: int) -> Iterator[tuple[int, int]]:
    # contiguous chunks of equal size; the last chunk absorbs the remainder
    jobs_per_thread = njobs // nthreads
    for i in range(nthreads):
        begin = jobs_per_thread * i
        end = njobs if i == nthreads - 1 else jobs_per_thread * (i + 1)
        yield begin, end


def _run_chunks(nthreads: int, worker: Callable[[int, int], None], njobs: int) -> None:
    logger.debug("Dispatching %d items over %d worker threads", njobs, nthreads)
    with ThreadPoolExecutor(max_workers=nthreads, thread_name_prefix="ndslice_pool") as executor:
        futures = [
            executor.submit(worker, begin, end) for begin, end in _chunk_bounds(njobs, nthreads)
        ]
        wait(futures)
    for future in futures:
        # re-raise the first failure in chunk order
        future.result()


def parallel_map(
    nthreads: int | None, func: Callable[..., Any], *seqs: npt.ArrayLike
) -> npt.NDArray[Any]:
    """Apply ``func`` element-wise across ``seqs`` using ``nthreads`` worker threads.

    The input is split into ``nthreads`` contiguous chunks, each handled by its own
    worker, and the call blocks until every chunk is done. Each worker only writes its
    own slice of the output, so ``func`` must not mutate state shared between elements.

    Parameters
    ----------
    nthreads : int or None
        Number of workers. ``None`` uses the ``threading.max_workers`` config value,
        falling back to the number of CPUs.
    func : callable
        Called once per position with one argument per sequence.
    *seqs : array-like
        Sequences of equal length.

    Returns
    -------
    numpy.ndarray
        Results in input order.
    """
    arrays = _as_arrays(seqs)
    nthreads = _resolve_nthreads(nthreads)
    njobs = len(arrays[0])
    out: list[Any] = [None] * njobs

    def worker(begin: int, end: int) -> None:
        for i in range(begin, end):
            out[i] = func(*(arr[i] for arr in arrays))

    _run_chunks(nthreads, worker, njobs)
    return np.asarray(out)


def parallel_for_each(nthreads: int | None, func: Callable[..., Any], *seqs: npt.ArrayLike) -> None:
    """Like `parallel_map`, discarding the results."""
    arrays = _as_arrays(seqs)
    nthreads = _resolve_nthreads(nthreads)

    def worker(begin: int, end: int) -> None:
        for i in range(begin, end):
            func(*(arr[i] for arr in arrays))

    _run_chunks(nthreads, worker, len(arrays[0]))


def _sort_key(less: Callable[[Any, Any], bool]) -> Callable[[Any], Any]:
    def compare(a: Any, b: Any) -> int:
        if less(a, b):
            return -1
        if less(b, a):
            return 1
        return 0

    return functools.cmp_to_key(compare)


def sort(values: npt.ArrayLike, less: Callable[[Any, Any], bool] | None = None) -> npt.NDArray[Any]:
    """Return a sorted copy of ``values``, ordered by ``less`` when given."""
    arr = np.asarray(values)
    if less is None:
        return np.sort(arr, kind="stable")
    return np.asarray(sorted(arr, key=_sort_key(less)), dtype=arr.dtype)


def sort_indices(
    values: npt.ArrayLike, less: Callable[[Any, Any], bool] | None = None
) -> npt.NDArray[np.intp]:
    """Return the positions of ``values`` in sorted order."""
    arr = np.asarray(values)
    if less is None:
        return np.argsort(arr, kind="stable")
    key = _sort_key(less)
    return np.asarray(sorted(range(len(arr)), key=lambda i: key(arr[i])), dtype=np.intp)


def select(test: Callable[[Any], bool], values: npt.ArrayLike) -> npt.NDArray[Any]:
    """Return the elements of ``values`` for which ``test`` is true, in order."""
    arr = np.asarray(values)
    mask = np.fromiter((bool(test(v)) for v in arr), dtype=bool, count=len(arr))
    return arr[mask]


def unique(
    values: npt.ArrayLike,
    equal: Callable[[Any, Any], bool] | None = None,
    less: Callable[[Any, Any], bool] | None = None,
) -> npt.NDArray[Any]:
    """Return the distinct elements of ``values`` in sorted order.

    Values are sorted with ``less`` and runs of consecutive elements that compare
    ``equal`` to the first element of the run are reduced to that element.

    Examples
    --------
    >>> unique([1, 1, 5, 6, 2, 4, 1, 5, 1, 4, 2, 5, 3, 7])
    array([1, 2, 3, 4, 5, 6, 7])
    """
    ordered = sort(values, less)
    if equal is None and less is None:
        return np.unique(ordered)
    if equal is None:
        equal = operator.eq
    kept: list[Any] = []
    for value in ordered:
        if not kept or not equal(kept[-1], value):
            kept.append(value)
    return np.asarray(kept, dtype=ordered.dtype)
