"""Random source helpers.

Every generator in :mod:`tremas` takes an explicit ``numpy.random.Generator``
so that results become reproducible as soon as a seed is supplied.
"""
from __future__ import annotations

from typing import Union

import numpy as np

SeedLike = Union[None, int, np.random.SeedSequence, np.random.Generator]


def make_rng(seed: SeedLike = None) -> np.random.Generator:
    """Return a generator for ``seed``; ``None`` draws fresh OS entropy.

    An existing generator is passed through unchanged so callers can thread
    one stream through several steps.
    """
    if isinstance(seed, np.random.Generator):
        return seed
    return np.random.default_rng(seed)


def uniform_square(rng: np.random.Generator, n: int, half: float = 1.0) -> np.ndarray:
    """``(n,2)`` points drawn uniformly from ``[-half, half)^2``, x then y per row."""
    u = rng.random((int(n), 2))
    return (2.0 * u - 1.0) * half


__all__ = ["SeedLike", "make_rng", "uniform_square"]
