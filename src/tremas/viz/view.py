"""Animated point-cloud viewer.

The viewer only reads published batches.  Every frame it asks its source for
the current batch; when the object differs from the one last uploaded, all
three buffers are replaced at once and the draw count follows ``batch.count``.
Regeneration is requested through callbacks (sliders, the regenerate key)
and never runs on the frame timer.
"""

from __future__ import annotations

import logging
import time
from pathlib import Path
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional

import numpy as np

from ..config.schema import GenerationRequest, RenderParams, needs_regeneration
from ..types import SampleBatch
from .transform import apply_transform, frame_uniforms

logger = logging.getLogger(__name__)

BACKGROUND = (0.01, 0.02, 0.03)
BatchSource = Callable[[], Optional[SampleBatch]]

# keys left unbound by matplotlib's default keymap
PAUSE_KEY = " "
REGENERATE_KEY = "n"

# name -> (min, max, step); step None means continuous
SLIDERS = {
    "depth": (1, 8, 1),
    "density": (0.01, 2.0, None),
    "base_radius": (0.01, 1.0, None),
    "samples": (1000, 100000, 1000),
    "speed": (0.0, 3.0, None),
    "point_size": (0.5, 20.0, None),
}
RENDER_KEYS = ("speed", "point_size")


def shade(colors: np.ndarray, level_factors: np.ndarray) -> np.ndarray:
    """RGBA per point: deeper-level neighbourhoods fade and cool slightly."""
    rgb = np.asarray(colors, float).reshape(-1, 3)
    lf = np.asarray(level_factors, float).reshape(-1, 1)
    rgba = np.empty((rgb.shape[0], 4))
    rgba[:, :3] = np.clip(rgb * (1.0 - 0.25 * lf) + 0.15 * lf * np.array([0.0, 0.3, 0.6]), 0.0, 1.0)
    rgba[:, 3] = 0.9 - 0.45 * lf[:, 0]
    return rgba


@dataclass
class RenderState:
    params: RenderParams = field(default_factory=RenderParams)
    elapsed: float = 0.0  # animation clock, frozen while paused
    last_tick: Optional[float] = None

    def tick(self, now: float) -> float:
        if self.last_tick is not None and not self.params.paused:
            self.elapsed += max(0.0, now - self.last_tick)
        self.last_tick = now
        return self.elapsed

    def toggle_pause(self) -> bool:
        self.params = self.params.model_copy(update={"paused": not self.params.paused})
        return self.params.paused


class PointCloudView:
    """Matplotlib scatter driven by :func:`frame_uniforms`.

    When a ``request`` is given the figure grows a slider per control in
    :data:`SLIDERS`.  Generation sliders hand a new :class:`GenerationRequest`
    to ``on_request`` only when it differs from the current one; render
    sliders go through :meth:`set_params` and never regenerate.
    """

    def __init__(
        self,
        source: BatchSource,
        params: RenderParams | None = None,
        on_regenerate: Optional[Callable[[], None]] = None,
        figsize=(8.0, 8.0),
        request: GenerationRequest | None = None,
        on_request: Optional[Callable[[GenerationRequest], None]] = None,
    ):
        import matplotlib.pyplot as plt

        self.source = source
        self.state = RenderState(params or RenderParams())
        self.on_regenerate = on_regenerate
        self.request = request
        self.on_request = on_request
        self.sliders: Dict[str, object] = {}
        self.fig = plt.figure(figsize=figsize, facecolor=BACKGROUND)
        bottom = 0.04 * len(SLIDERS) + 0.04 if request is not None else 0.0
        self.ax = self.fig.add_axes((0.0, bottom, 1.0, 1.0 - bottom), facecolor=BACKGROUND)
        self.ax.set_xlim(-1.0, 1.0)
        self.ax.set_ylim(-1.0, 1.0)
        self.ax.set_axis_off()
        self.scatter = self.ax.scatter(np.zeros(0), np.zeros(0), s=[], linewidths=0)
        self._batch: Optional[SampleBatch] = None
        self._positions = np.zeros((0, 2))
        self.count = 0
        self._anim = None
        if request is not None:
            self._add_sliders()
        self.fig.canvas.mpl_connect("key_press_event", self._on_key)

    def _add_sliders(self) -> None:
        from matplotlib.widgets import Slider

        current = dict(self.request.model_dump(), **self.state.params.model_dump())
        for i, (name, (lo, hi, step)) in enumerate(reversed(list(SLIDERS.items()))):
            slider_ax = self.fig.add_axes((0.22, 0.02 + 0.04 * i, 0.6, 0.025))
            slider_ax.set_xticks([])
            slider_ax.set_yticks([])
            slider = Slider(slider_ax, name.replace("_", " "), lo, hi, valinit=current[name], valstep=step)
            slider.label.set_color("0.85")
            slider.valtext.set_color("0.85")
            slider.on_changed(lambda val, name=name: self.apply_control(name, val))
            self.sliders[name] = slider

    # ------------------------------------------------------------------
    @property
    def aspect(self) -> float:
        w, h = self.fig.get_size_inches()
        box = self.ax.get_position()
        h = float(h) * box.height
        return float(w) * box.width / h if h > 0 else 1.0

    def set_params(self, **changes) -> None:
        """Update speed/point size; this never triggers regeneration."""
        self.state.params = self.state.params.model_copy(update=changes)

    def apply_control(self, name: str, value) -> None:
        """Route one control change to render params or a new request."""
        if name in RENDER_KEYS:
            self.set_params(**{name: float(value)})
            return
        if self.request is None:
            return
        value = int(round(value)) if name in ("depth", "samples") else float(value)
        new = GenerationRequest.model_validate(dict(self.request.model_dump(), **{name: value}))
        if not needs_regeneration(self.request, new):
            return
        logger.debug("control %s -> %s", name, value)
        self.request = new
        if self.on_request is not None:
            self.on_request(new)

    def upload(self, batch: Optional[SampleBatch]) -> None:
        """Replace positions, colors and level buffers from ``batch``."""
        self._batch = batch
        if batch is None:
            self._positions = np.zeros((0, 2))
            rgba = np.zeros((0, 4))
            self.count = 0
        else:
            self.count = batch.count
            self._positions = np.asarray(batch.positions[: self.count], float)
            rgba = shade(batch.colors[: self.count], batch.level_factors[: self.count])
        self.scatter.set_facecolors(rgba)
        logger.debug("uploaded %d points", self.count)

    def step(self, now: Optional[float] = None):
        """Advance the clock and redraw with fresh uniforms."""
        now = time.perf_counter() if now is None else now
        batch = self.source()
        if batch is not self._batch:
            self.upload(batch)
        t = self.state.tick(now)
        u = frame_uniforms(t, self.state.params, self.aspect)
        self.scatter.set_offsets(apply_transform(u["transform"], self._positions))
        self.scatter.set_sizes(np.full(self.count, u["point_size"] ** 2))
        return (self.scatter,)

    # ------------------------------------------------------------------
    def _on_key(self, event) -> None:
        if event.key == PAUSE_KEY:
            paused = self.state.toggle_pause()
            logger.info("animation %s", "paused" if paused else "resumed")
        elif event.key == REGENERATE_KEY and self.on_regenerate is not None:
            self.on_regenerate()

    def run(self, interval_ms: int = 16) -> None:
        import matplotlib.pyplot as plt
        from matplotlib.animation import FuncAnimation

        self._anim = FuncAnimation(
            self.fig, lambda _i: self.step(), interval=interval_ms, cache_frame_data=False
        )
        plt.show()

    def save(self, path, t: float = 0.0, dpi: int = 100) -> None:
        """Render the current batch at animation time ``t`` into an image file."""
        self.state.elapsed = float(t)
        self.state.last_tick = None
        self.step(now=0.0)
        self.fig.savefig(path, dpi=dpi, facecolor=BACKGROUND)


def render_snapshot(batch: SampleBatch, path, params: RenderParams | None = None, t: float = 0.0,
                    figsize=(6.0, 6.0), dpi: int = 100) -> None:
    """Write one frame of ``batch`` to ``path`` without opening a window."""
    import matplotlib.pyplot as plt

    Path(path).parent.mkdir(parents=True, exist_ok=True)
    view = PointCloudView(lambda: batch, params=params, figsize=figsize)
    try:
        view.save(path, t=t, dpi=dpi)
    finally:
        plt.close(view.fig)


__all__ = [
    "BACKGROUND",
    "PAUSE_KEY",
    "REGENERATE_KEY",
    "SLIDERS",
    "RenderState",
    "PointCloudView",
    "render_snapshot",
    "shade",
]
