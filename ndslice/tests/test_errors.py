"""Test errors"""

import pytest

from ndslice.errors import (
    BaseNDSliceError,
    BoundsCheckError,
    InvalidShapeError,
    NegativeStepError,
    NotScalarError,
    RankMismatchError,
    ShapeMismatchError,
    SizeMismatchError,
    StaleViewError,
)


def test_invalid_shape_error() -> None:
    err = InvalidShapeError((2, 0))
    assert str(err) == "Invalid shape (2, 0). Expected at least one dimension, all of them positive."


def test_shape_mismatch_error() -> None:
    """
    Test that calling ShapeMismatchError with multiple arguments returns a formatted string.
    """
    err = ShapeMismatchError((2, 2), 4, 5)
    assert str(err) == "Shape (2, 2) describes 4 elements, but the data has 5."


def test_shape_mismatch_error_preformatted() -> None:
    err = ShapeMismatchError("custom message")
    assert str(err) == "custom message"


def test_not_scalar_error() -> None:
    err = NotScalarError((4,))
    assert str(err) == "Cannot assign a scalar to a view of shape (4,)."


def test_size_mismatch_error() -> None:
    err = SizeMismatchError(3, 4)
    assert str(err) == "Cannot assign 3 values to a view selecting 4 elements."


def test_stale_view_error() -> None:
    err = StaleViewError((4, 4), (2, 8))
    assert str(err) == (
        "View was taken on an array of shape (4, 4), which has since been reshaped to (2, 8)."
    )


def test_rank_mismatch_error() -> None:
    err = RankMismatchError(2, 3)
    assert str(err) == "Wrong number of indices for array of rank 2; got 3."


@pytest.mark.parametrize(
    ("error_type", "base"),
    [
        (InvalidShapeError, BaseNDSliceError),
        (ShapeMismatchError, BaseNDSliceError),
        (NotScalarError, BaseNDSliceError),
        (SizeMismatchError, BaseNDSliceError),
        (StaleViewError, BaseNDSliceError),
        (BaseNDSliceError, ValueError),
        (RankMismatchError, IndexError),
        (BoundsCheckError, IndexError),
        (NegativeStepError, IndexError),
    ],
)
def test_error_hierarchy(error_type: type[Exception], base: type[Exception]) -> None:
    assert issubclass(error_type, base)
