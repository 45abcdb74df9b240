from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
import pytest

from ndslice import Array
from ndslice.config import config

if TYPE_CHECKING:
    from collections.abc import Generator


@pytest.fixture
def arr16() -> Array:
    """The 4x4 array holding 0..15 in row-major order."""
    arr = Array(np.arange(16))
    arr.reshape((4, 4))
    return arr


@pytest.fixture(autouse=True)
def reset_config() -> Generator[None, None, None]:
    config.reset()
    yield
    config.reset()
