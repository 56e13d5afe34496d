"""Per-frame animation uniforms."""
from __future__ import annotations

import math
from typing import Any, Dict

import numpy as np

from ..config.schema import RenderParams

ROTATION_RATE = 0.25  # rad/s at speed 1
ZOOM_RATE = 0.4
ZOOM_AMPLITUDE = 0.05


def build_transform(angle: float, zoom: float, aspect: float) -> np.ndarray:
    """Rotation composed with zoom and aspect correction, as ``p' = M @ (x, y, 1)``."""
    c, s = math.cos(angle), math.sin(angle)
    sx, sy = zoom / aspect, zoom
    return np.array(
        [
            [c * sx, s * sx, 0.0],
            [-s * sy, c * sy, 0.0],
            [0.0, 0.0, 1.0],
        ]
    )


def frame_uniforms(t: float, params: RenderParams, aspect: float) -> Dict[str, Any]:
    """Uniform values for elapsed time ``t`` seconds."""
    speed = float(params.speed)
    angle = t * ROTATION_RATE * speed
    zoom = 1.0 + ZOOM_AMPLITUDE * math.sin(t * ZOOM_RATE * speed)
    aspect = float(aspect) if aspect > 0 else 1.0
    return {
        "time": float(t),
        "transform": build_transform(angle, zoom, aspect),
        "point_size": float(params.point_size),
        "speed": speed,
    }


def apply_transform(M: np.ndarray, positions: np.ndarray) -> np.ndarray:
    """Map ``(N,2)`` positions through the 3x3 matrix ``M``."""
    P = np.asarray(positions, float).reshape(-1, 2)
    return P @ M[:2, :2].T + M[:2, 2]


__all__ = ["build_transform", "frame_uniforms", "apply_transform"]
