"""
Engine configuration.

`EngineConfig` is an immutable record of the process-wide knobs the engine
consults: the default element type for factories, the worker count and size
threshold for parallel kernels, and the log level. The initial value is read
from environment variables once, at import time:

- ``STRIDEGRAD_DEFAULT_DTYPE``      (e.g. ``float64``, ``float32``)
- ``STRIDEGRAD_NUM_WORKERS``        (int >= 1)
- ``STRIDEGRAD_PARALLEL_THRESHOLD`` (int >= 1)
- ``STRIDEGRAD_LOG_LEVEL``          (``DEBUG``, ``INFO``, ``WARNING``, ...)

Runtime overrides go through `set_config` or the `config_context` context
manager. Random state is deliberately not part of the configuration: every
random factory takes an explicit generator.
"""

from __future__ import annotations

import logging
import os
from contextlib import contextmanager
from dataclasses import dataclass, replace
from typing import Any, Iterator, Mapping, Optional

from ..domain._dtype import DType

ENV_PREFIX = "STRIDEGRAD_"


@dataclass(frozen=True)
class EngineConfig:
    """
    Immutable engine settings.

    Attributes
    ----------
    default_dtype : DType
        Element type used by factories when none is requested.
    num_workers : int
        Number of threads elementwise and reduction kernels may use.
    parallel_threshold : int
        Minimum element count before a kernel is split across workers.
    log_level : str
        Level name applied to the ``stridegrad`` logger.
    """

    default_dtype: DType = DType.FLOAT64
    num_workers: int = 1
    parallel_threshold: int = 1 << 16
    log_level: str = "WARNING"

    def __post_init__(self) -> None:
        object.__setattr__(self, "default_dtype", DType.parse(self.default_dtype))
        object.__setattr__(self, "num_workers", int(self.num_workers))
        object.__setattr__(self, "parallel_threshold", int(self.parallel_threshold))
        object.__setattr__(self, "log_level", str(self.log_level).upper())
        if self.num_workers < 1:
            raise ValueError(f"num_workers must be >= 1, got {self.num_workers}")
        if self.parallel_threshold < 1:
            raise ValueError(
                f"parallel_threshold must be >= 1, got {self.parallel_threshold}"
            )
        if not isinstance(logging.getLevelName(self.log_level), int):
            raise ValueError(f"Unknown log level: {self.log_level!r}")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "EngineConfig":
        """Build a configuration from ``STRIDEGRAD_*`` environment variables."""
        env = os.environ if environ is None else environ
        kwargs: dict[str, Any] = {}
        for field_name in ("default_dtype", "num_workers", "parallel_threshold", "log_level"):
            raw = env.get(ENV_PREFIX + field_name.upper())
            if raw is not None and raw.strip() != "":
                kwargs[field_name] = raw.strip()
        return cls(**kwargs)


_CONFIG = EngineConfig.from_env()


def get_config() -> EngineConfig:
    return _CONFIG


def set_config(**changes: Any) -> EngineConfig:
    """
    Replace selected fields of the active configuration.

    Returns
    -------
    EngineConfig
        The previous configuration, so callers can restore it.
    """
    global _CONFIG
    previous = _CONFIG
    _CONFIG = replace(_CONFIG, **changes)
    if "log_level" in changes:
        logging.getLogger("stridegrad").setLevel(_CONFIG.log_level)
    return previous


@contextmanager
def config_context(**changes: Any) -> Iterator[EngineConfig]:
    """Temporarily override configuration fields inside a ``with`` block."""
    previous = set_config(**changes)
    try:
        yield _CONFIG
    finally:
        set_config(**{f: getattr(previous, f) for f in changes})
