"""Batch persistence helpers."""
from __future__ import annotations

from pathlib import Path

import numpy as np

from ..types import SampleBatch


def save_batch(path: str | Path, batch: SampleBatch) -> Path:
    """Save ``batch`` to ``path`` using ``np.savez_compressed``."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    np.savez_compressed(
        path,
        positions=batch.positions,
        colors=batch.colors,
        level_factors=batch.level_factors,
        requested=np.int64(batch.requested),
        attempts=np.int64(batch.attempts),
    )
    # numpy appends .npz when missing
    return path if path.suffix == ".npz" else path.with_name(path.name + ".npz")


def load_batch(path: str | Path) -> SampleBatch:
    """Load a batch written by :func:`save_batch`."""
    with np.load(path) as data:
        return SampleBatch(
            data["positions"],
            data["colors"],
            data["level_factors"],
            requested=int(data["requested"]),
            attempts=int(data["attempts"]),
        )
