import dataclasses
import textwrap
from typing import Any, Literal

import numpy as np


def human_readable_size(size: int) -> str:
    if size < 2**10:
        return f"{size}"
    elif size < 2**20:
        return f"{size / float(2**10):.1f}K"
    elif size < 2**30:
        return f"{size / float(2**20):.1f}M"
    elif size < 2**40:
        return f"{size / float(2**30):.1f}G"
    else:
        return f"{size / float(2**40):.1f}T"


def byte_info(size: int) -> str:
    if size < 2**10:
        return str(size)
    else:
        return f"{size} ({human_readable_size(size)})"


@dataclasses.dataclass(kw_only=True)
class ArrayInfo:
    """
    Visual summary for an Array.

    Note that this class and its properties are not part of
    ndslice's public API.
    """

    _type: Literal["Array"] = "Array"
    _data_type: np.dtype[Any]
    _shape: tuple[int, ...]
    _strides: tuple[int, ...]
    _order: Literal["C"] = "C"
    _count_bytes: int | None = None

    def __repr__(self) -> str:
        template = textwrap.dedent("""\
        Type               : {_type}
        Data type          : {_data_type}
        Shape              : {_shape}
        Strides            : {_strides}
        Order              : {_order}""")

        kwargs = dataclasses.asdict(self)
        if self._count_bytes is not None:
            template += "\nNo. bytes          : {_count_bytes}"
            kwargs["_count_bytes"] = byte_info(self._count_bytes)

        return template.format(**kwargs)
