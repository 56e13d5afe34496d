"""Visualisation helpers (matplotlib)."""

from .backend import setup_matplotlib_backend
from .transform import apply_transform, build_transform, frame_uniforms

__all__ = ["setup_matplotlib_backend", "apply_transform", "build_transform", "frame_uniforms"]
