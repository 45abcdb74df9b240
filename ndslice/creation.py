from __future__ import annotations

from typing import Any

import numpy.typing as npt

from ndslice.array import Array, View
from ndslice.common import ShapeLike
from ndslice.config import config

__all__ = [
    "array",
    "empty",
    "full",
    "full_like",
    "ones",
    "ones_like",
    "zeros",
    "zeros_like",
]


def array(
    data: npt.ArrayLike | Array | View,
    shape: ShapeLike | None = None,
    *,
    dtype: npt.DTypeLike | None = None,
) -> Array:
    """Create an array filled with ``data``.

    Parameters
    ----------
    data : array-like, Array or View
        The elements of the new array, flattened in row-major order.
    shape : int or tuple of int, optional
        Shape of the new array. Defaults to the number of elements, ``(data.size,)``,
        or to the shape of ``data`` when it is an `Array` or `View`.
    dtype : str or numpy.dtype, optional
        Element type. Inferred from ``data`` when not given.

    Returns
    -------
    Array
        The new array.
    """
    return Array(data, shape, dtype=dtype)


def full(shape: ShapeLike, fill_value: Any, *, dtype: npt.DTypeLike | None = None) -> Array:
    """Create an array with every element set to ``fill_value``.

    Parameters
    ----------
    shape : int or tuple of int
        Shape of the new array.
    fill_value : scalar
        Fill value.
    dtype : str or numpy.dtype, optional
        Element type. Defaults to the type of ``fill_value``.

    Returns
    -------
    Array
        The new array.
    """
    return Array.full(fill_value, shape, dtype=dtype)


def _default_dtype(dtype: npt.DTypeLike | None) -> npt.DTypeLike:
    if dtype is None:
        return config.get("array.dtype")
    return dtype


def empty(shape: ShapeLike, *, dtype: npt.DTypeLike | None = None) -> Array:
    """Create an array without caring about its initial contents.

    Unlike ``numpy.empty`` the elements are zeroed, since every buffer is initialized.
    """
    return Array.full(None, shape, dtype=_default_dtype(dtype))


def zeros(shape: ShapeLike, *, dtype: npt.DTypeLike | None = None) -> Array:
    """Create an array with a fill value of zero."""
    return Array.full(0, shape, dtype=_default_dtype(dtype))


def ones(shape: ShapeLike, *, dtype: npt.DTypeLike | None = None) -> Array:
    """Create an array with a fill value of one."""
    return Array.full(1, shape, dtype=_default_dtype(dtype))


def full_like(a: Array, fill_value: Any, *, dtype: npt.DTypeLike | None = None) -> Array:
    """Create a filled array with the shape and, unless given, the dtype of ``a``."""
    return Array.full(fill_value, a.shape, dtype=a.dtype if dtype is None else dtype)


def zeros_like(a: Array, *, dtype: npt.DTypeLike | None = None) -> Array:
    """Create an array of zeros like another array."""
    return full_like(a, 0, dtype=dtype)


def ones_like(a: Array, *, dtype: npt.DTypeLike | None = None) -> Array:
    """Create an array of ones like another array."""
    return full_like(a, 1, dtype=dtype)
