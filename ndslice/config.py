"""
The config module is responsible for managing the configuration of ndslice and is based on the
Donfig python library.

Example:
    The default element type for arrays created with ``full``, ``zeros``, ``ones`` and ``empty``
    is read from ``array.dtype``::

        from ndslice.config import config

        with config.set({"array.dtype": "int32"}):
            arr = ndslice.zeros((4, 4))

    Instead of setting the value programmatically with ``config.set``, you can also set the value
    with an environment variable. The environment variable ``NDSLICE_ARRAY__DTYPE`` can be set to
    ``int32``. The double underscore ``__`` is used to indicate nested access.

    ```bash
    export NDSLICE_THREADING__MAX_WORKERS=8
    ```

For more information, see the Donfig documentation at https://github.com/pytroll/donfig.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from donfig import Config as DConfig

if TYPE_CHECKING:
    from donfig.config_obj import ConfigSet


class BadConfigError(ValueError):
    """Raised when a configuration value is out of range."""


class Config(DConfig):  # type: ignore[misc]
    """The Config will collect configuration from config files and environment variables

    Example environment variables:
    Grabs environment variables of the form "NDSLICE_FOO__BAR_BAZ=123" and
    turns these into config variables of the form ``{"foo": {"bar-baz": 123}}``
    It transforms the key and value in the following way:

    -  Lower-cases the key text
    -  Treats ``__`` (double-underscore) as nested access
    -  Calls ``ast.literal_eval`` on the value

    """

    def reset(self) -> None:
        self.clear()
        self.refresh()

    def set_max_workers(self, max_workers: int | None) -> ConfigSet:
        """
        Set the default number of worker threads used by the parallel combinators.
        """
        if max_workers is not None and max_workers < 1:
            raise BadConfigError(f"max_workers must be a positive integer or None, got {max_workers!r}")
        return self.set({"threading.max_workers": max_workers})


# The default configuration for ndslice
config = Config(
    "ndslice",
    defaults=[
        {
            "array": {"dtype": "float64"},
            "threading": {"max_workers": None},
        }
    ],
)
