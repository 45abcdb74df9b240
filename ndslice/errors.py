__all__ = [
    "BaseNDSliceError",
    "BoundsCheckError",
    "InvalidShapeError",
    "NegativeStepError",
    "NotScalarError",
    "RankMismatchError",
    "ShapeMismatchError",
    "SizeMismatchError",
    "StaleViewError",
]


class BaseNDSliceError(ValueError):
    """
    Base error which most ndslice errors are sub-classed from.
    """

    _msg: str = "{}"

    def __init__(self, *args: object) -> None:
        """
        If a single argument is passed, treat it as a pre-formatted message.

        If multiple arguments are passed, they are used as arguments for the template string
        class variable.
        """
        if len(args) == 1:
            super().__init__(args[0])
        else:
            super().__init__(self._msg.format(*args))


class InvalidShapeError(BaseNDSliceError):
    """Raised when a shape has no dimensions or a dimension that is not positive."""

    _msg = "Invalid shape {!r}. Expected at least one dimension, all of them positive."

    def __init__(self, shape: object) -> None:
        super().__init__(self._msg.format(shape))


class ShapeMismatchError(BaseNDSliceError):
    """Raised when a shape does not describe the number of elements it is applied to."""

    _msg = "Shape {!r} describes {} elements, but the data has {}."


class NotScalarError(BaseNDSliceError):
    """Raised when a scalar is assigned to a view selecting more than one element."""

    _msg = "Cannot assign a scalar to a view of shape {!r}."

    def __init__(self, shape: object) -> None:
        super().__init__(self._msg.format(shape))


class SizeMismatchError(BaseNDSliceError):
    """Raised when the number of values assigned differs from the number of selected elements."""

    _msg = "Cannot assign {} values to a view selecting {} elements."


class StaleViewError(BaseNDSliceError):
    """Raised when a view is used after its owning array was reshaped."""

    _msg = "View was taken on an array of shape {!r}, which has since been reshaped to {!r}."


class RankMismatchError(IndexError):
    _msg = "Wrong number of indices for array of rank {}; got {}."

    def __init__(self, expected: int, got: int) -> None:
        super().__init__(self._msg.format(expected, got))


class BoundsCheckError(IndexError): ...


class NegativeStepError(IndexError): ...
