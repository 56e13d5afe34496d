"""Pydantic models for generation and render configuration."""
from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

# keys whose change requires a new field and batch
REGENERATE_KEYS = ("depth", "density", "base_radius", "samples")


class GenerationRequest(BaseModel):
    depth: int = Field(default=4, ge=1)
    density: float = Field(default=0.4, gt=0)
    base_radius: float = Field(default=0.18, gt=0, le=1)
    samples: int = Field(default=20000, ge=1)

    model_config = ConfigDict(extra="forbid", frozen=True)


class RenderParams(BaseModel):
    speed: float = 0.6
    point_size: float = Field(default=6.0, gt=0)
    paused: bool = False

    model_config = ConfigDict(extra="forbid", frozen=True)


class LoggingCfg(BaseModel):
    level: Literal["debug", "info", "warning", "error", "none"] = "none"

    model_config = ConfigDict(extra="forbid")


class TremasConfig(BaseModel):
    generation: GenerationRequest = Field(default_factory=GenerationRequest)
    render: RenderParams = Field(default_factory=RenderParams)
    logging: LoggingCfg = Field(default_factory=LoggingCfg)
    seed: int | None = Field(default=None, ge=0)

    model_config = ConfigDict(extra="forbid")


def needs_regeneration(old: GenerationRequest | None, new: GenerationRequest) -> bool:
    """True when any field that shapes the batch differs."""
    if old is None:
        return True
    return any(getattr(old, k) != getattr(new, k) for k in REGENERATE_KEYS)


__all__ = [
    "REGENERATE_KEYS",
    "GenerationRequest",
    "RenderParams",
    "LoggingCfg",
    "TremasConfig",
    "needs_regeneration",
]
