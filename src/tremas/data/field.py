"""Multi-level exclusion-circle (trema) generator."""
from __future__ import annotations

import logging
import math
from typing import Optional

import numpy as np

from ..types import ExclusionField
from .random import make_rng

logger = logging.getLogger(__name__)

LEVEL_SCALE = 0.5  # linear shrink per level
COUNT_FACTOR = 30  # circles per unit density at level 0, before the 2^(L+1) growth
JITTER_LOW = 0.8
JITTER_SPAN = 0.4  # radius factor in [0.8, 1.2)


def level_radius(level: int, base_radius: float) -> float:
    """Nominal radius of circles at ``level`` (before jitter)."""
    return float(base_radius) * LEVEL_SCALE ** int(level)


def level_count(level: int, density: float) -> int:
    """Number of circles generated at ``level``; never less than one."""
    return max(1, int(math.floor(density * 2 ** (level + 1) * COUNT_FACTOR)))


def expected_field_size(depth: int, density: float) -> int:
    """Total circle count a build with these parameters produces."""
    return sum(level_count(L, density) for L in range(max(0, int(depth))))


def build_exclusion_field(
    depth: int,
    density: float,
    base_radius: float,
    rng: Optional[np.random.Generator] = None,
) -> ExclusionField:
    """Scatter exclusion circles over ``[-1,1]^2`` for levels ``0..depth-1``.

    Each level halves the nominal radius and doubles the circle count.  Per
    circle three uniforms are consumed in order: centre x, centre y and the
    radius jitter.  Circles are allowed to overlap and nest.
    """
    rng = make_rng(rng)
    depth = int(depth)
    if depth <= 0:
        return ExclusionField.empty()

    centers, radii, levels = [], [], []
    for L in range(depth):
        n = level_count(L, density)
        r0 = level_radius(L, base_radius)
        u = rng.random((n, 3))
        centers.append(2.0 * u[:, :2] - 1.0)
        radii.append(r0 * (JITTER_LOW + JITTER_SPAN * u[:, 2]))
        levels.append(np.full(n, L, dtype=np.int64))
        logger.debug("level %d: %d circles, r0=%.4f", L, n, r0)

    field = ExclusionField(
        np.concatenate(centers),
        np.concatenate(radii),
        np.concatenate(levels),
        depth=depth,
    )
    logger.info(
        "built exclusion field: depth=%d density=%.3f base_radius=%.3f circles=%d",
        depth, density, base_radius, len(field),
    )
    return field


__all__ = [
    "LEVEL_SCALE",
    "level_radius",
    "level_count",
    "expected_field_size",
    "build_exclusion_field",
]
