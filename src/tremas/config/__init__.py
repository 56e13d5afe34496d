"""Configuration loading utilities."""
from .loader import load_config
from .schema import GenerationRequest, RenderParams, TremasConfig, needs_regeneration

__all__ = ["load_config", "GenerationRequest", "RenderParams", "TremasConfig", "needs_regeneration"]
