from __future__ import annotations

from typing import TYPE_CHECKING, Any

import numpy as np
import numpy.typing as npt

if TYPE_CHECKING:
    from typing import Self


class Buffer:
    """A flat contiguous block of elements

    We use Buffer as the storage behind every Array. It owns a 1-dimensional,
    C-contiguous numpy array whose length never changes after construction.
    All indexing is by flat position: a single integer, or an integer array of
    positions, in which case reads and writes follow the order of the positions.

    Parameters
    ----------
    array_like
        array-like object that must be 1-dim and contiguous.
    """

    _data: npt.NDArray[Any]

    def __init__(self, array_like: npt.NDArray[Any]) -> None:
        if array_like.ndim != 1:
            raise ValueError("array_like: only 1-dim allowed")
        if not array_like.flags.c_contiguous:
            raise ValueError("array_like: must be contiguous")
        self._data = array_like

    @classmethod
    def create(cls, *, size: int, dtype: npt.DTypeLike, fill_value: Any | None = None) -> Self:
        if fill_value is None:
            return cls(np.zeros(size, dtype=dtype))
        return cls(np.full(size, fill_value, dtype=dtype))

    @classmethod
    def from_array_like(cls, array_like: npt.ArrayLike, dtype: npt.DTypeLike | None = None) -> Self:
        """Create a new buffer owning a flat copy of ``array_like``

        Multi-dimensional input is flattened in C order.
        """
        return cls(np.array(array_like, dtype=dtype, order="C").reshape(-1))

    @property
    def dtype(self) -> np.dtype[Any]:
        return self._data.dtype

    @property
    def nbytes(self) -> int:
        return int(self._data.nbytes)

    def as_numpy_array(self) -> npt.NDArray[Any]:
        """Returns the buffer as a NumPy array.

        Notes
        -----
        This is not a copy; writes to the returned array modify the buffer.
        """
        return self._data

    def __len__(self) -> int:
        return self._data.size

    def __getitem__(self, key: int | npt.NDArray[np.intp]) -> Any:
        return self._data[key]

    def __setitem__(self, key: int | npt.NDArray[np.intp], value: Any) -> None:
        self._data[key] = value

    def __repr__(self) -> str:
        return f"<Buffer {self._data!r}>"
