from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Any

import numpy as np
import numpy.typing as npt

from ndslice._info import ArrayInfo
from ndslice.buffer import Buffer
from ndslice.common import ChunkCoords, ShapeLike, parse_shapelike, product, strides_for_shape
from ndslice.config import config
from ndslice.errors import (
    NotScalarError,
    ShapeMismatchError,
    SizeMismatchError,
    StaleViewError,
)
from ndslice.indexing import SliceIndexer, ensure_tuple, flat_index

if TYPE_CHECKING:
    from typing import Self

    from ndslice.indexing import Selection, Selector

logger = getLogger(__name__)

__all__ = ["Array", "View"]


class Array:
    """An n-dimensional array over a contiguous, row-major buffer.

    Parameters
    ----------
    data : array-like, Array or View
        The elements of the array. Nested input is flattened in row-major order.
    shape : int or tuple of int, optional
        Shape of the array. Defaults to the shape of ``data`` when it is an `Array` or
        `View`, and to the number of elements, ``(data.size,)``, otherwise. The product of
        the shape must equal the number of elements.
    dtype : str or numpy.dtype, optional
        Element type. Inferred from ``data`` when not given.

    Examples
    --------
    >>> arr = Array(range(16), shape=(4, 4))
    >>> arr.index(1, 2)
    6
    >>> arr.slice(ALL, 1).materialize().to_numpy()
    array([ 1,  5,  9, 13])
    """

    _buffer: Buffer
    _shape: ChunkCoords
    _strides: ChunkCoords
    _generation: int

    def __init__(
        self,
        data: npt.ArrayLike | Array | View,
        shape: ShapeLike | None = None,
        *,
        dtype: npt.DTypeLike | None = None,
    ) -> None:
        if isinstance(data, View):
            data = data.materialize()
        if isinstance(data, Array):
            if shape is None:
                shape = data.shape
            data = data._buffer.as_numpy_array()

        buffer = Buffer.from_array_like(data, dtype=dtype)
        if shape is None:
            shape = (len(buffer),)
        self._init_from_buffer(buffer, shape)

    def _init_from_buffer(self, buffer: Buffer, shape: ShapeLike) -> None:
        shape_parsed = parse_shapelike(shape)
        if product(shape_parsed) != len(buffer):
            raise ShapeMismatchError(shape_parsed, product(shape_parsed), len(buffer))
        self._buffer = buffer
        self._shape = shape_parsed
        self._strides = strides_for_shape(shape_parsed)
        self._generation = 0

    @classmethod
    def _from_buffer(cls, buffer: Buffer, shape: ShapeLike) -> Self:
        obj = cls.__new__(cls)
        obj._init_from_buffer(buffer, shape)
        return obj

    @classmethod
    def full(cls, fill_value: Any, shape: ShapeLike, *, dtype: npt.DTypeLike | None = None) -> Self:
        """Create an array of the given shape with every element set to ``fill_value``.

        When ``dtype`` is not given, it is taken from ``fill_value``. A ``fill_value`` of
        ``None`` zero-fills the buffer using the ``array.dtype`` config value.
        """
        shape_parsed = parse_shapelike(shape)
        if dtype is None:
            if fill_value is None:
                dtype = config.get("array.dtype")
            else:
                dtype = np.asarray(fill_value).dtype
        buffer = Buffer.create(size=product(shape_parsed), dtype=dtype, fill_value=fill_value)
        return cls._from_buffer(buffer, shape_parsed)

    @property
    def shape(self) -> ChunkCoords:
        """Returns the shape of the Array.

        Returns
        -------
        tuple
            The shape of the Array.
        """
        return self._shape

    @property
    def strides(self) -> ChunkCoords:
        """Element strides of the row-major layout, one per dimension."""
        return self._strides

    @property
    def ndim(self) -> int:
        return len(self._shape)

    @property
    def size(self) -> int:
        return len(self._buffer)

    @property
    def dtype(self) -> np.dtype[Any]:
        return self._buffer.dtype

    @property
    def nbytes(self) -> int:
        return self._buffer.nbytes

    @property
    def info(self) -> ArrayInfo:
        """
        Return a summary of the array.

        Examples
        --------
        >>> zeros((3, 4), dtype="float32").info
        Type               : Array
        Data type          : float32
        Shape              : (3, 4)
        Strides            : (4, 1)
        Order              : C
        No. bytes          : 48
        """
        return ArrayInfo(
            _data_type=self.dtype,
            _shape=self.shape,
            _strides=self.strides,
            _count_bytes=self.nbytes,
        )

    def reshape(self, shape: ShapeLike) -> None:
        """Change the shape of the array in place.

        The buffer is left untouched, so the new shape must describe the same number of
        elements. Views taken before the reshape can no longer be used.

        Raises
        ------
        ShapeMismatchError
            If the new shape does not describe ``self.size`` elements.
        """
        shape_parsed = parse_shapelike(shape)
        if product(shape_parsed) != self.size:
            raise ShapeMismatchError(shape_parsed, product(shape_parsed), self.size)
        logger.debug("Reshaping array from %s to %s", self._shape, shape_parsed)
        self._shape = shape_parsed
        self._strides = strides_for_shape(shape_parsed)
        self._generation += 1

    def index(self, *selection: int) -> Any:
        """Retrieve a single element, given one integer per dimension.

        Negative integers count from the end of their dimension.

        Raises
        ------
        RankMismatchError
            If the number of integers differs from the rank of the array.
        BoundsCheckError
            If an integer is outside its dimension.
        """
        return self._buffer[flat_index(selection, self._shape, self._strides)]

    def slice(self, *selection: Selector) -> View:
        """Select a region of the array, returning a view onto it.

        Parameters
        ----------
        *selection
            One item per leading dimension: an integer or `Index`, an `IndexList` or list
            of integers, a `Range` or slice, `ALL`, or a single ellipsis. Dimensions
            without an item are selected in full.

        Returns
        -------
        View
            A view sharing this array's buffer.

        Examples
        --------
        >>> arr = Array(range(16), shape=(4, 4))
        >>> arr.slice(1).materialize().to_numpy()
        array([4, 5, 6, 7])
        >>> arr.slice(Range(1, 2), Range(1, 2)).materialize().to_numpy()
        array([[ 5,  6],
               [ 9, 10]])
        """
        return View(self, SliceIndexer(selection, self._shape, self._strides))

    def take(self, *selection: Selector) -> npt.NDArray[Any]:
        """Copy the selected elements into a flat numpy array, in selection order."""
        indexer = SliceIndexer(selection, self._shape, self._strides)
        return self._buffer[indexer.positions]

    def to_numpy(self) -> npt.NDArray[Any]:
        """Return a copy of the array as a numpy array of the same shape."""
        return self._buffer.as_numpy_array().reshape(self._shape).copy()

    def __array__(self, dtype: npt.DTypeLike | None = None, copy: bool | None = None) -> npt.NDArray[Any]:
        out = self.to_numpy()
        if dtype is not None:
            out = out.astype(dtype, copy=False)
        return out

    def __getitem__(self, selection: Selection) -> Array:
        return self.slice(*ensure_tuple(selection)).materialize()

    def __setitem__(self, selection: Selection, value: Any) -> None:
        self.slice(*ensure_tuple(selection)).assign(value)

    def __len__(self) -> int:
        return self._shape[0]

    def __repr__(self) -> str:
        return f"<Array shape={self.shape} dtype={self.dtype}>"


class View:
    """A shaped reference to selected elements of an `Array`.

    Views are created by `Array.slice`. They keep their owner alive but do not copy any
    data: `materialize` reads the selected elements into a new array and `assign` writes
    into the owner's buffer. A view taken before its owner was reshaped raises
    `StaleViewError` on use.
    """

    def __init__(self, owner: Array, indexer: SliceIndexer) -> None:
        self._owner = owner
        self._indexer = indexer
        self._generation = owner._generation
        self._owner_shape = owner.shape

    def _check_fresh(self) -> None:
        if self._owner._generation != self._generation:
            raise StaleViewError(self._owner_shape, self._owner.shape)

    @property
    def owner(self) -> Array:
        return self._owner

    @property
    def shape(self) -> ChunkCoords:
        return self._indexer.shape

    @property
    def positions(self) -> npt.NDArray[np.intp]:
        """Flat buffer positions of the selected elements, in view order."""
        return self._indexer.positions.copy()

    @property
    def size(self) -> int:
        return self._indexer.positions.size

    def materialize(self) -> Array:
        """Copy the selected elements into a new array with the view's shape."""
        self._check_fresh()
        buffer = Buffer(self._owner._buffer[self._indexer.positions])
        return Array._from_buffer(buffer, self.shape)

    def assign(self, value: Any) -> None:
        """Write ``value`` into the selected elements of the owner.

        A scalar is only accepted by a view of shape ``(1,)``. Anything else is flattened
        in row-major order and must hold exactly one value per selected element; its shape
        is otherwise not compared with the view's. A position selected more than once
        receives the last of its values.

        Raises
        ------
        NotScalarError
            If a scalar is assigned to a view selecting more than one element.
        SizeMismatchError
            If the number of values differs from the number of selected elements.
        """
        self._check_fresh()
        positions = self._indexer.positions

        if isinstance(value, View):
            value = value.materialize()
        if isinstance(value, Array):
            values = value._buffer.as_numpy_array()
        elif np.isscalar(value) or np.ndim(value) == 0:
            if self.shape != (1,):
                raise NotScalarError(self.shape)
            self._owner._buffer[positions] = value
            return
        else:
            values = np.asarray(value).reshape(-1)

        if values.size != positions.size:
            raise SizeMismatchError(values.size, positions.size)
        # a position selected more than once receives its last value
        _, first_from_end = np.unique(positions[::-1], return_index=True)
        keep = positions.size - 1 - first_from_end
        self._owner._buffer[positions[keep]] = values[keep]

    def __array__(self, dtype: npt.DTypeLike | None = None, copy: bool | None = None) -> npt.NDArray[Any]:
        return self.materialize().__array__(dtype)

    def __len__(self) -> int:
        return self.size

    def __repr__(self) -> str:
        return f"<View shape={self.shape} of {self._owner!r}>"
