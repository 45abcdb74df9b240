from __future__ import annotations

import logging
import numbers
from collections.abc import Sequence
from dataclasses import dataclass
from types import EllipsisType
from typing import Any, Final, TypeAlias, TypeGuard

import numpy as np
import numpy.typing as npt

from ndslice.common import ChunkCoords
from ndslice.errors import BoundsCheckError, NegativeStepError, RankMismatchError
from ndslice.functional import range_exclusive, range_inclusive

logger = logging.getLogger(__name__)

__all__ = [
    "ALL",
    "All",
    "Index",
    "IndexList",
    "Range",
    "SliceIndexer",
    "Specifier",
    "flat_index",
    "normalize_integer_selection",
    "replace_ellipsis",
]


@dataclass(frozen=True)
class Index:
    """Select a single position along a dimension. Negative values count from the end."""

    value: int

    def __init__(self, value: int) -> None:
        if not is_integer(value):
            raise TypeError(f"Index expects an integer, got {value!r}")
        object.__setattr__(self, "value", int(value))


@dataclass(frozen=True)
class IndexList:
    """Select explicit positions along a dimension, in the order given.

    Duplicates are kept and negative values count from the end.

    Examples
    --------
    >>> IndexList(0, 3)
    IndexList(indexes=(0, 3))
    """

    indexes: tuple[int, ...]

    def __init__(self, *indexes: int) -> None:
        if len(indexes) == 1 and not is_integer(indexes[0]):
            # a single sequence argument
            indexes = tuple(indexes[0])
        if len(indexes) == 0:
            raise IndexError("an index list must contain at least one index")
        if not all(is_integer(i) for i in indexes):
            raise TypeError(f"IndexList expects integers, got {indexes!r}")
        object.__setattr__(self, "indexes", tuple(int(i) for i in indexes))


@dataclass(frozen=True)
class Range:
    """Select ``begin, begin + step, ...`` up to and including ``end`` along a dimension.

    Both bounds count from the end of the dimension when negative, so ``Range(0, -1)``
    spans the whole dimension.
    """

    begin: int
    end: int
    step: int = 1

    def __post_init__(self) -> None:
        if not (is_integer(self.begin) and is_integer(self.end) and is_integer(self.step)):
            raise TypeError(f"Range bounds and step must be integers, got {self!r}")
        if self.step < 1:
            raise NegativeStepError("only ranges with step >= 1 are supported")


@dataclass(frozen=True)
class All:
    """Select every position along a dimension."""

    def __repr__(self) -> str:
        return "ALL"


ALL: Final = All()

Specifier: TypeAlias = Index | IndexList | Range | All
Selector: TypeAlias = Specifier | int | slice | EllipsisType | Sequence[int] | npt.NDArray[np.intp]
Selection: TypeAlias = Selector | tuple[Selector, ...]


def is_integer(x: Any) -> TypeGuard[int]:
    """True if x is an integer (both pure Python or NumPy)."""
    return isinstance(x, numbers.Integral) and type(x) not in (bool, np.bool_)


def is_integer_list(x: Any) -> TypeGuard[list[int]]:
    """True if x is a list of integers."""
    return isinstance(x, list) and len(x) > 0 and all(is_integer(i) for i in x)


def is_integer_array(x: Any, ndim: int | None = None) -> TypeGuard[npt.NDArray[np.intp]]:
    t = not np.isscalar(x) and hasattr(x, "shape") and hasattr(x, "dtype") and x.dtype.kind in "ui"
    if ndim is not None:
        t = t and len(x.shape) == ndim
    return t


def is_slice(s: Any) -> TypeGuard[slice]:
    return isinstance(s, slice)


def is_specifier(s: Any) -> TypeGuard[Specifier]:
    return isinstance(s, Index | IndexList | Range | All)


def normalize_integer_selection(dim_sel: int, dim_len: int) -> int:
    # normalize type to int
    dim_sel = int(dim_sel)

    # handle wraparound
    if dim_sel < 0:
        dim_sel = dim_len + dim_sel

    # handle out of bounds
    if dim_sel >= dim_len or dim_sel < 0:
        raise BoundsCheckError(f"index out of bounds for dimension with length {dim_len}")

    return dim_sel


def wraparound_indices(x: npt.NDArray[np.intp], dim_len: int) -> None:
    loc_neg = x < 0
    if np.any(loc_neg):
        x[loc_neg] += dim_len


def boundscheck_indices(x: npt.NDArray[np.intp], dim_len: int) -> None:
    if np.any(x < 0) or np.any(x >= dim_len):
        raise BoundsCheckError(f"index out of bounds for dimension with length {dim_len}")


@dataclass(frozen=True)
class IntDimIndexer:
    dim_sel: int
    dim_len: int
    nitems: int = 1

    def __init__(self, dim_sel: int, dim_len: int) -> None:
        object.__setattr__(self, "dim_sel", normalize_integer_selection(dim_sel, dim_len))
        object.__setattr__(self, "dim_len", dim_len)

    @property
    def positions(self) -> npt.NDArray[np.intp]:
        return np.array([self.dim_sel], dtype=np.intp)


@dataclass(frozen=True)
class IntArrayDimIndexer:
    """Integer array selection against a single dimension."""

    dim_sel: npt.NDArray[np.intp]
    dim_len: int
    nitems: int

    def __init__(self, dim_sel: Sequence[int] | npt.NDArray[np.intp], dim_len: int) -> None:
        # copy, wraparound modifies in place
        dim_sel = np.array(dim_sel, dtype=np.intp)
        if dim_sel.ndim != 1:
            raise IndexError("integer arrays in a selection must be 1-dimensional only")
        if dim_sel.size == 0:
            raise IndexError("an index list must contain at least one index")
        wraparound_indices(dim_sel, dim_len)
        boundscheck_indices(dim_sel, dim_len)

        object.__setattr__(self, "dim_sel", dim_sel)
        object.__setattr__(self, "dim_len", dim_len)
        object.__setattr__(self, "nitems", len(dim_sel))

    @property
    def positions(self) -> npt.NDArray[np.intp]:
        return self.dim_sel


@dataclass(frozen=True)
class RangeDimIndexer:
    """Inclusive range selection against a single dimension."""

    start: int
    end: int
    step: int
    dim_len: int
    nitems: int

    def __init__(self, start: int, end: int, step: int, dim_len: int) -> None:
        if step < 1:
            raise NegativeStepError("only ranges with step >= 1 are supported")
        start = normalize_integer_selection(start, dim_len)
        end = normalize_integer_selection(end, dim_len)
        if end < start:
            raise BoundsCheckError(
                f"range end {end} precedes range begin {start} for dimension with length {dim_len}"
            )

        object.__setattr__(self, "start", start)
        object.__setattr__(self, "end", end)
        object.__setattr__(self, "step", step)
        object.__setattr__(self, "dim_len", dim_len)
        object.__setattr__(self, "nitems", (end - start) // step + 1)

    @classmethod
    def from_slice(cls, dim_sel: slice, dim_len: int) -> RangeDimIndexer:
        """Convert a Python slice, whose stop is exclusive, to an inclusive range."""
        start, stop, step = dim_sel.indices(dim_len)
        if step < 1:
            raise NegativeStepError("only slices with step >= 1 are supported")
        if stop <= start:
            raise BoundsCheckError(f"slice {dim_sel!r} selects nothing from dimension with length {dim_len}")
        last = start + ((stop - start - 1) // step) * step
        return cls(start, last, step, dim_len)

    @property
    def positions(self) -> npt.NDArray[np.intp]:
        return range_inclusive(self.start, self.end, self.step).astype(np.intp)


@dataclass(frozen=True)
class AllDimIndexer:
    dim_len: int

    @property
    def nitems(self) -> int:
        return self.dim_len

    @property
    def positions(self) -> npt.NDArray[np.intp]:
        return range_exclusive(0, self.dim_len).astype(np.intp)


DimIndexer: TypeAlias = IntDimIndexer | IntArrayDimIndexer | RangeDimIndexer | AllDimIndexer


def make_dim_indexer(dim_sel: Any, dim_len: int) -> DimIndexer:
    """Resolve one selection item against a dimension of length ``dim_len``."""
    if isinstance(dim_sel, All):
        return AllDimIndexer(dim_len)
    elif isinstance(dim_sel, Index):
        return IntDimIndexer(dim_sel.value, dim_len)
    elif is_integer(dim_sel):
        return IntDimIndexer(dim_sel, dim_len)
    elif isinstance(dim_sel, Range):
        return RangeDimIndexer(dim_sel.begin, dim_sel.end, dim_sel.step, dim_len)
    elif is_slice(dim_sel):
        return RangeDimIndexer.from_slice(dim_sel, dim_len)
    elif isinstance(dim_sel, IndexList):
        return IntArrayDimIndexer(dim_sel.indexes, dim_len)
    elif is_integer_list(dim_sel) or is_integer_array(dim_sel, ndim=1):
        return IntArrayDimIndexer(dim_sel, dim_len)
    else:
        raise TypeError(
            "unsupported selection item; expected an integer, Index, IndexList, Range, ALL, "
            f"slice or list of integers, got {dim_sel!r}"
        )


def ensure_tuple(v: Any) -> tuple[Any, ...]:
    if not isinstance(v, tuple):
        v = (v,)
    return v


def replace_ellipsis(selection: Any, shape: ChunkCoords) -> tuple[tuple[Any, ...], tuple[bool, ...]]:
    """Expand ``selection`` to one item per dimension of ``shape``.

    An ellipsis stands for as many ``ALL`` items as are needed, and a selection shorter
    than the rank is padded with ``ALL`` on the right. Returns the expanded selection and,
    for each dimension, whether the item was given by the caller (``True``) or filled in
    (``False``).

    Examples
    --------
    >>> replace_ellipsis((0,), (4, 4))
    ((0, ALL), (True, False))
    >>> replace_ellipsis((Ellipsis, 1), (2, 3, 4))
    ((ALL, ALL, 1), (False, False, True))
    """
    selection = ensure_tuple(selection)
    ellipsis_positions = [i for i, item in enumerate(selection) if item is Ellipsis]

    if len(ellipsis_positions) > 1:
        # more than 1 is an error
        raise IndexError("an index can only have a single ellipsis ('...')")

    # number of items that select along a dimension
    n_items = len(selection) - len(ellipsis_positions)
    if n_items > len(shape):
        raise RankMismatchError(len(shape), n_items)

    explicit = (True,) * len(selection)
    if ellipsis_positions:
        # replace ellipsis with as many ALL items as are needed for number of dims
        n_items_l = ellipsis_positions[0]
        n_fill = len(shape) - n_items
        selection = selection[:n_items_l] + (ALL,) * n_fill + selection[n_items_l + 1 :]
        explicit = (True,) * n_items_l + (False,) * n_fill + (True,) * (n_items - n_items_l)

    # fill out selection if not completely specified
    n_pad = len(shape) - len(selection)
    return selection + (ALL,) * n_pad, explicit + (False,) * n_pad


def flat_index(selection: Sequence[Any], shape: ChunkCoords, strides: ChunkCoords) -> int:
    """Flat buffer position of a single element, one integer per dimension."""
    if len(selection) != len(shape):
        raise RankMismatchError(len(shape), len(selection))
    position = 0
    for dim_sel, dim_len, stride in zip(selection, shape, strides, strict=True):
        if isinstance(dim_sel, Index):
            dim_sel = dim_sel.value
        if not is_integer(dim_sel):
            raise TypeError(f"direct indexing expects integers for every dimension, got {dim_sel!r}")
        position += normalize_integer_selection(dim_sel, dim_len) * stride
    return position


@dataclass(frozen=True)
class SliceIndexer:
    """Resolve a multi-dimensional selection to flat buffer positions.

    Each dimension is resolved to an ordered list of positions ``P_d``; the flat
    positions are the row-major cartesian combination of those lists, so the leftmost
    dimension varies slowest::

        combine(d) = [p * strides[d] + q for p in P_d for q in combine(d + 1)]
        combine(rank) = [0]

    The result shape keeps every dimension selected with more than one position, plus
    every dimension that was filled in rather than given, at its full size. A selection
    that collapses every dimension has shape ``(1,)``.

    Attributes
    ----------
    dim_indexers
        One resolved indexer per array dimension.
    shape
        Shape of the selected region after collapsing.
    positions
        Flat buffer positions of the selected elements, in row-major order of the region.
    """

    dim_indexers: tuple[DimIndexer, ...]
    shape: ChunkCoords
    positions: npt.NDArray[np.intp]

    def __init__(self, selection: Selection, shape: ChunkCoords, strides: ChunkCoords) -> None:
        selection_normalized, explicit = replace_ellipsis(selection, shape)

        # setup per-dimension indexers
        dim_indexers = tuple(
            make_dim_indexer(dim_sel, dim_len)
            for dim_sel, dim_len in zip(selection_normalized, shape, strict=True)
        )

        out_shape = tuple(
            ix.nitems
            for ix, given in zip(dim_indexers, explicit, strict=True)
            if ix.nitems > 1 or not given
        )
        if not out_shape:
            out_shape = (1,)

        positions = np.zeros(1, dtype=np.intp)
        for ix, stride in zip(reversed(dim_indexers), reversed(strides), strict=True):
            positions = np.add.outer(ix.positions * stride, positions).reshape(-1)

        logger.debug(
            "Resolved selection %r against shape %s to %d positions with shape %s",
            selection,
            shape,
            positions.size,
            out_shape,
        )

        object.__setattr__(self, "dim_indexers", dim_indexers)
        object.__setattr__(self, "shape", out_shape)
        object.__setattr__(self, "positions", positions)
