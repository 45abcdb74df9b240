from __future__ import annotations

import functools
import itertools
import numbers
import operator
from collections.abc import Iterable

from ndslice.errors import InvalidShapeError

ShapeLike = Iterable[int] | int
ChunkCoords = tuple[int, ...]


def product(tup: Iterable[int]) -> int:
    return functools.reduce(operator.mul, tup, 1)


def parse_shapelike(data: ShapeLike) -> ChunkCoords:
    """Normalize ``data`` to a tuple of positive integers.

    A bare integer is the 1-dimensional convenience form.
    """
    if isinstance(data, numbers.Integral) and not isinstance(data, bool):
        data = (int(data),)
    try:
        data_tuple = tuple(data)
    except TypeError as e:
        msg = f"Expected an integer or an iterable of integers. Got {data} instead."
        raise TypeError(msg) from e

    if not all(isinstance(v, numbers.Integral) and not isinstance(v, bool) for v in data_tuple):
        msg = f"Expected an iterable of integers. Got {data} instead."
        raise TypeError(msg)
    if len(data_tuple) == 0 or not all(v > 0 for v in data_tuple):
        raise InvalidShapeError(data_tuple)
    return tuple(int(v) for v in data_tuple)


def strides_for_shape(shape: ChunkCoords) -> ChunkCoords:
    """Row-major element strides: the last dimension varies fastest.

    Examples
    --------
    >>> strides_for_shape((2, 3, 4))
    (12, 4, 1)
    """
    return tuple(itertools.accumulate(reversed(shape[1:]), operator.mul, initial=1))[::-1]
