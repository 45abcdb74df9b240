from ndslice.array import Array, View
from ndslice.config import config
from ndslice.creation import (
    array,
    empty,
    full,
    full_like,
    ones,
    ones_like,
    zeros,
    zeros_like,
)
from ndslice.errors import (
    BoundsCheckError,
    InvalidShapeError,
    NegativeStepError,
    NotScalarError,
    RankMismatchError,
    ShapeMismatchError,
    SizeMismatchError,
    StaleViewError,
)
from ndslice.indexing import ALL, All, Index, IndexList, Range
from ndslice.version import version as __version__

__all__ = [
    "ALL",
    "All",
    "Array",
    "BoundsCheckError",
    "Index",
    "IndexList",
    "InvalidShapeError",
    "NegativeStepError",
    "NotScalarError",
    "Range",
    "RankMismatchError",
    "ShapeMismatchError",
    "SizeMismatchError",
    "StaleViewError",
    "View",
    "__version__",
    "array",
    "config",
    "empty",
    "full",
    "full_like",
    "ones",
    "ones_like",
    "zeros",
    "zeros_like",
]
