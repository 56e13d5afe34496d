"""Generate one batch with the reference parameters and save a frame."""

from tremas import GenerationRequest, regenerate
from tremas.logging import init_logging
from tremas.viz.backend import setup_matplotlib_backend

init_logging("info")
setup_matplotlib_backend(force="Agg")
from tremas.viz.view import render_snapshot  # noqa: E402

req = GenerationRequest(depth=4, density=0.4, base_radius=0.18, samples=20000)
batch, field = regenerate(req, 0, return_field=True)
print("circles:", len(field), "per level:", field.per_level_counts())
print("points:", batch.count, "attempts:", batch.attempts, "underfilled:", batch.underfilled)
render_snapshot(batch, "out/tremas_t0.png")
