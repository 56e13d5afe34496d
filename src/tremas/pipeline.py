"""One-shot regeneration: exclusion field, then sampled batch."""
from __future__ import annotations

import logging
import time
from typing import Tuple, Union

import numpy as np

from .config.schema import GenerationRequest
from .data.field import build_exclusion_field
from .data.random import SeedLike, make_rng
from .data.sampler import sample_points
from .types import ExclusionField, SampleBatch

logger = logging.getLogger(__name__)


def regenerate(
    request: GenerationRequest,
    rng: SeedLike = None,
    *,
    return_field: bool = False,
) -> Union[SampleBatch, Tuple[SampleBatch, ExclusionField]]:
    """Build a fresh exclusion field for ``request`` and sample points from it.

    Both steps draw from the same generator, field first.  Pass a seed (or a
    generator) for reproducible output; ``None`` uses fresh entropy.
    """
    gen: np.random.Generator = make_rng(rng)
    t0 = time.perf_counter()
    field = build_exclusion_field(request.depth, request.density, request.base_radius, gen)
    batch = sample_points(field, request.samples, gen)
    logger.info(
        "regenerated %d/%d points over %d circles in %.3fs",
        batch.count, request.samples, len(field), time.perf_counter() - t0,
    )
    if return_field:
        return batch, field
    return batch


__all__ = ["regenerate"]
