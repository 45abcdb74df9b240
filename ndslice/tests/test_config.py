import numpy as np
import pytest

from ndslice import zeros
from ndslice.config import BadConfigError, config
from ndslice.functional import _resolve_nthreads


def test_config_defaults_set() -> None:
    # regression test for available defaults
    assert config.defaults == [
        {
            "array": {"dtype": "float64"},
            "threading": {"max_workers": None},
        }
    ]
    assert config.get("array.dtype") == "float64"
    assert config.get("threading.max_workers") is None


def test_config_default_dtype() -> None:
    assert zeros((2, 2)).dtype == np.float64
    with config.set({"array.dtype": "int32"}):
        assert zeros((2, 2)).dtype == np.int32
    assert zeros((2, 2)).dtype == np.float64


def test_config_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("NDSLICE_ARRAY__DTYPE", "int16")
    config.refresh()
    try:
        assert config.get("array.dtype") == "int16"
        assert zeros(3).dtype == np.int16
    finally:
        monkeypatch.delenv("NDSLICE_ARRAY__DTYPE")
        config.refresh()
    assert config.get("array.dtype") == "float64"


def test_set_max_workers() -> None:
    with config.set_max_workers(3):
        assert config.get("threading.max_workers") == 3
        assert _resolve_nthreads(None) == 3
    assert config.get("threading.max_workers") is None
    assert _resolve_nthreads(None) >= 1
    assert _resolve_nthreads(2) == 2


@pytest.mark.parametrize("max_workers", [0, -2])
def test_set_max_workers_invalid(max_workers: int) -> None:
    msg = f"max_workers must be a positive integer or None, got {max_workers}"
    with pytest.raises(BadConfigError, match=msg):
        config.set_max_workers(max_workers)
    assert config.get("threading.max_workers") is None
