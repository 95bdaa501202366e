"""
rng.py
------

Seedable random source for the RSR estimator.

The estimator draws two kinds of values: spray geometry (angles and radii)
and spray indices. Both come from one `RNG` instance so that a single seed
reproduces an estimate bit for bit.

- Backed by `numpy.random.Generator` (vectorized draws).
- Unseeded instances take PID/time entropy.
- `as_rng()` accepts None, an int seed, an `RNG` or a numpy Generator,
  which is how callers inject their own source.
"""

from __future__ import annotations

__all__ = ["RNGSource", "RNG", "as_rng"]

import os
import time
import random
from typing import Any, Optional, TypeAlias, Union

import numpy as np

from .rsr_errors import require_seed


# ---------------------------------------------------------------------
# Type alias
# ---------------------------------------------------------------------
RNGSource: TypeAlias = Union[None, int, np.random.Generator, "RNG"]


def _entropy_seed() -> int:
    return os.getpid() ^ (time.time_ns() & 0xFFFFFFFF) ^ random.getrandbits(32)


# ---------------------------------------------------------------------
# RNG class
# ---------------------------------------------------------------------
class RNG:
    """Encapsulated numpy random generator with explicit seeding.

    Attributes:
        _rng:  Backend `numpy.random.Generator`.
        _seed: Seed the backend was last initialized with.
    """

    def __init__(self, seed: Optional[int] = None):
        self._seed = _entropy_seed() if seed is None else require_seed(seed)
        self._rng = np.random.default_rng(self._seed)

    @classmethod
    def from_generator(cls, generator: np.random.Generator) -> "RNG":
        """Wrap an existing numpy Generator without reseeding it."""
        obj = cls.__new__(cls)
        obj._seed = None
        obj._rng = generator
        return obj

    # -----------------------------------------------------------------
    # Core seeding
    # -----------------------------------------------------------------
    def seed(self, seed: Optional[int] = None) -> None:
        """Reinitialize the RNG in place (preserves object identity)."""
        self._seed = _entropy_seed() if seed is None else require_seed(seed)
        self._rng = np.random.default_rng(self._seed)

    @property
    def initial_seed(self) -> Optional[int]:
        return self._seed

    # -----------------------------------------------------------------
    # Draws
    # -----------------------------------------------------------------
    def random(self, size: Any = None) -> Union[float, np.ndarray]:
        out = self._rng.random(size)
        if size is None:
            return float(out)
        return out

    def uniform(self, low: float = 0.0, high: float = 1.0,
                size: Any = None) -> Union[float, np.ndarray]:
        """Uniform draw(s) from [low, high)."""
        out = self._rng.uniform(low, high, size)
        if size is None:
            return float(out)
        return out

    def integers(self, low: int, high: Optional[int] = None,
                 size: Any = None) -> Union[int, np.ndarray]:
        """Integer draw(s) from [low, high)."""
        out = self._rng.integers(low, high, size)
        if size is None:
            return int(out)
        return out

    # -----------------------------------------------------------------
    # Utility & Introspection
    # -----------------------------------------------------------------
    def getstate(self) -> dict:
        return self._rng.bit_generator.state

    def setstate(self, state: dict) -> None:
        self._rng.bit_generator.state = state

    def as_numpy(self) -> np.random.Generator:
        """Return the underlying numpy Generator."""
        return self._rng

    def __repr__(self) -> str:
        return f"<RNG backend=numpy seed={self._seed} pid={os.getpid()} id={id(self)}>"


def as_rng(source: RNGSource = None) -> RNG:
    """Coerce a seed, Generator or RNG into an `RNG` instance."""
    if isinstance(source, RNG):
        return source
    if isinstance(source, np.random.Generator):
        return RNG.from_generator(source)
    if source is None or isinstance(source, (int, np.integer)):
        return RNG(seed=source)
    raise TypeError(f"Unsupported random source: {type(source).__name__}")
