"""Tremas: point clouds that avoid a hierarchy of random exclusion circles.

External users can simply ``from tremas import regenerate, GenerationRequest``.
"""

from .config.schema import GenerationRequest, RenderParams
from .data.field import build_exclusion_field
from .data.sampler import sample_points
from .pipeline import regenerate
from .publisher import BatchPublisher
from .types import ExclusionCircle, ExclusionField, SampleBatch, SamplePoint

__all__ = [
    "GenerationRequest",
    "RenderParams",
    "build_exclusion_field",
    "sample_points",
    "regenerate",
    "BatchPublisher",
    "ExclusionCircle",
    "ExclusionField",
    "SampleBatch",
    "SamplePoint",
]
