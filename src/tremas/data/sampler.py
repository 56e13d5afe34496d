"""Rejection sampling of points outside an exclusion field."""
from __future__ import annotations

import logging
from typing import Optional

import numpy as np

from ..types import ExclusionField, SampleBatch
from .random import make_rng, uniform_square

logger = logging.getLogger(__name__)

ATTEMPTS_PER_SAMPLE = 10
COLOR_LOW = np.array([0.20, 0.35, 0.40])
COLOR_SPAN = np.array([0.60, 0.55, 0.60])
_BLOCK_CELLS = 1 << 22  # upper bound on candidate x circle matrix size
_BLOCK_MIN, _BLOCK_MAX = 64, 8192


def max_attempts(requested: int) -> int:
    return max(0, int(requested)) * ATTEMPTS_PER_SAMPLE


def _block_size(n_circles: int) -> int:
    return int(np.clip(_BLOCK_CELLS // max(1, n_circles), _BLOCK_MIN, _BLOCK_MAX))


def squared_distances(points: np.ndarray, centers: np.ndarray) -> np.ndarray:
    """``(P,C)`` squared distances between ``points`` and circle ``centers``."""
    dx = points[:, 0, None] - centers[None, :, 0]
    dy = points[:, 1, None] - centers[None, :, 1]
    return dx * dx + dy * dy


def inside_any(points: np.ndarray, field: ExclusionField) -> np.ndarray:
    """Boolean mask of ``points`` lying strictly inside at least one circle."""
    points = np.asarray(points, float).reshape(-1, 2)
    if len(field) == 0:
        return np.zeros(points.shape[0], dtype=bool)
    d2 = squared_distances(points, field.centers)
    return np.any(d2 < field.radii[None, :] ** 2, axis=1)


def nearest_levels(points: np.ndarray, field: ExclusionField) -> np.ndarray:
    """Level of the circle whose centre is closest to each point.

    Ties go to the circle created first.  Returns zeros for an empty field.
    """
    points = np.asarray(points, float).reshape(-1, 2)
    if len(field) == 0:
        return np.zeros(points.shape[0], dtype=np.int64)
    d2 = squared_distances(points, field.centers)
    return field.levels[np.argmin(d2, axis=1)]


def level_factors(levels: np.ndarray, field: ExclusionField) -> np.ndarray:
    """Normalise circle levels into ``[0,1]`` by the deepest level of ``field``."""
    return np.asarray(levels, float) / float(max(1, field.max_level))


def draw_colors(rng: np.random.Generator, n: int) -> np.ndarray:
    """Decorative per-point RGB, independent of geometry."""
    return COLOR_LOW + COLOR_SPAN * rng.random((int(n), 3))


def sample_points(
    field: ExclusionField,
    requested: int,
    rng: Optional[np.random.Generator] = None,
    *,
    block: Optional[int] = None,
) -> SampleBatch:
    """Draw up to ``requested`` points in ``[-1,1]^2`` outside every circle.

    Candidates are tested in blocks against all circles at once; every
    candidate up to the last one needed counts as an attempt, and at most
    ``10 * requested`` attempts are made.  When the budget runs out first the
    batch is simply shorter than requested.

    Candidates are rounded to float32 before testing so the stored positions
    are exactly the ones that passed.
    """
    rng = make_rng(rng)
    requested = max(0, int(requested))
    budget = max_attempts(requested)
    if requested == 0:
        return SampleBatch.empty()

    n_circles = len(field)
    r2 = field.radii ** 2
    step = int(block) if block else _block_size(n_circles)

    pos_parts, col_parts, lvl_parts = [], [], []
    accepted = 0
    attempts = 0
    while accepted < requested and attempts < budget:
        b = min(step, budget - attempts)
        cand = uniform_square(rng, b).astype(np.float32).astype(float)
        if n_circles:
            d2 = squared_distances(cand, field.centers)
            ok = np.flatnonzero(~np.any(d2 < r2[None, :], axis=1))
        else:
            d2 = None
            ok = np.arange(b)

        need = requested - accepted
        if ok.size >= need:
            ok = ok[:need]
            attempts += int(ok[-1]) + 1
        else:
            attempts += b
        if ok.size == 0:
            continue

        pos_parts.append(cand[ok])
        col_parts.append(draw_colors(rng, ok.size))
        if d2 is None:
            lvl_parts.append(np.zeros(ok.size))
        else:
            nearest = field.levels[np.argmin(d2[ok], axis=1)]
            lvl_parts.append(level_factors(nearest, field))
        accepted += ok.size

    if not pos_parts:
        batch = SampleBatch.empty(requested=requested, attempts=attempts)
    else:
        batch = SampleBatch(
            np.concatenate(pos_parts),
            np.concatenate(col_parts),
            np.concatenate(lvl_parts),
            requested=requested,
            attempts=attempts,
        )

    if batch.underfilled:
        logger.info(
            "sampler under-filled: %d/%d points after %d attempts (%d circles)",
            batch.count, requested, attempts, n_circles,
        )
    else:
        logger.debug("sampled %d points in %d attempts", batch.count, attempts)
    return batch


__all__ = [
    "ATTEMPTS_PER_SAMPLE",
    "max_attempts",
    "squared_distances",
    "inside_any",
    "nearest_levels",
    "level_factors",
    "draw_colors",
    "sample_points",
]
