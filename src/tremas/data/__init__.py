"""Exclusion-field generation and point sampling."""

from .field import build_exclusion_field, expected_field_size, level_count, level_radius
from .io import load_batch, save_batch
from .random import make_rng
from .sampler import sample_points

__all__ = [
    "build_exclusion_field",
    "expected_field_size",
    "level_count",
    "level_radius",
    "load_batch",
    "save_batch",
    "make_rng",
    "sample_points",
]
