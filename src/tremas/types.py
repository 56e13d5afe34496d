"""Value types shared by the generator, the sampler and the renderer.

Both containers are columnar and frozen: the arrays are flagged read-only on
construction so a published batch can be handed to other threads without
copies.  Row views (:class:`ExclusionCircle`, :class:`SamplePoint`) are
produced on demand for callers that prefer per-item access.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, NamedTuple, Tuple

import numpy as np

Array2 = np.ndarray  # shape == (N, 2)


def _frozen(a, dtype, shape_tail: Tuple[int, ...], name: str) -> np.ndarray:
    arr = np.array(a, dtype=dtype, copy=True)
    if arr.size == 0:
        arr = arr.reshape((0,) + shape_tail)
    if arr.shape[1:] != shape_tail:
        raise ValueError(f"{name} must be (N,{','.join(map(str, shape_tail))}), got shape={arr.shape}")
    arr.setflags(write=False)
    return arr


class ExclusionCircle(NamedTuple):
    """One forbidden disk."""

    center: Tuple[float, float]
    radius: float
    level: int


class SamplePoint(NamedTuple):
    """One accepted point."""

    position: Tuple[float, float]
    color: Tuple[float, float, float]
    level_factor: float


@dataclass(frozen=True, eq=False)
class ExclusionField:
    """All circles produced by one build, in creation order."""

    centers: Array2  # (C,2)
    radii: np.ndarray  # (C,)
    levels: np.ndarray  # (C,) int
    depth: int = 0  # requested depth, may exceed max_level + 1

    def __post_init__(self):
        centers = _frozen(self.centers, float, (2,), "centers")
        radii = _frozen(self.radii, float, (), "radii").reshape(-1)
        levels = _frozen(self.levels, np.int64, (), "levels").reshape(-1)
        if not (centers.shape[0] == radii.shape[0] == levels.shape[0]):
            raise ValueError(
                f"column length mismatch: centers={centers.shape[0]} "
                f"radii={radii.shape[0]} levels={levels.shape[0]}"
            )
        object.__setattr__(self, "centers", centers)
        object.__setattr__(self, "radii", radii)
        object.__setattr__(self, "levels", levels)

    @classmethod
    def empty(cls) -> "ExclusionField":
        return cls(np.zeros((0, 2)), np.zeros(0), np.zeros(0, dtype=np.int64))

    @classmethod
    def from_circles(cls, circles, depth: int | None = None) -> "ExclusionField":
        """Build a field from an iterable of :class:`ExclusionCircle`."""
        circles = list(circles)
        if not circles:
            return cls.empty()
        centers = np.asarray([c.center for c in circles], float)
        radii = np.asarray([c.radius for c in circles], float)
        levels = np.asarray([c.level for c in circles], np.int64)
        if depth is None:
            depth = int(levels.max()) + 1
        return cls(centers, radii, levels, depth=depth)

    def __len__(self) -> int:
        return int(self.radii.shape[0])

    def __iter__(self) -> Iterator[ExclusionCircle]:
        for (x, y), r, lv in zip(self.centers.tolist(), self.radii.tolist(), self.levels.tolist()):
            yield ExclusionCircle((x, y), r, lv)

    @property
    def max_level(self) -> int:
        return int(self.levels.max()) if len(self) else 0

    def per_level_counts(self) -> dict[int, int]:
        lv, n = np.unique(self.levels, return_counts=True)
        return {int(a): int(b) for a, b in zip(lv, n)}


@dataclass(frozen=True, eq=False)
class SampleBatch:
    """Accepted points of one generation request.

    ``count`` may be smaller than ``requested``; consumers size their buffers
    from ``count`` only.
    """

    positions: Array2  # (N,2) float32
    colors: np.ndarray  # (N,3) float32
    level_factors: np.ndarray  # (N,) float32
    requested: int = 0
    attempts: int = 0

    def __post_init__(self):
        positions = _frozen(self.positions, np.float32, (2,), "positions")
        colors = _frozen(self.colors, np.float32, (3,), "colors")
        levels = _frozen(self.level_factors, np.float32, (), "level_factors").reshape(-1)
        n = positions.shape[0]
        if colors.shape[0] != n or levels.shape[0] != n:
            raise ValueError(
                f"parallel arrays differ in length: positions={n} "
                f"colors={colors.shape[0]} level_factors={levels.shape[0]}"
            )
        object.__setattr__(self, "positions", positions)
        object.__setattr__(self, "colors", colors)
        object.__setattr__(self, "level_factors", levels)

    @classmethod
    def empty(cls, requested: int = 0, attempts: int = 0) -> "SampleBatch":
        return cls(np.zeros((0, 2)), np.zeros((0, 3)), np.zeros(0), requested, attempts)

    @property
    def count(self) -> int:
        return int(self.positions.shape[0])

    @property
    def underfilled(self) -> bool:
        return self.count < self.requested

    def __len__(self) -> int:
        return self.count

    def __iter__(self) -> Iterator[SamplePoint]:
        for p, c, lf in zip(self.positions.tolist(), self.colors.tolist(), self.level_factors.tolist()):
            yield SamplePoint(tuple(p), tuple(c), lf)

    def summary(self) -> dict:
        return {
            "count": self.count,
            "requested": int(self.requested),
            "attempts": int(self.attempts),
            "underfilled": self.underfilled,
        }


__all__ = ["Array2", "ExclusionCircle", "ExclusionField", "SamplePoint", "SampleBatch"]
