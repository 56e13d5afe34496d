from types import SimpleNamespace

import numpy as np
import matplotlib.pyplot as plt
import pytest

from tremas.config.schema import GenerationRequest, RenderParams
from tremas.types import SampleBatch
from tremas.viz.backend import setup_matplotlib_backend
from tremas.viz.view import (
    PAUSE_KEY,
    REGENERATE_KEY,
    SLIDERS,
    PointCloudView,
    RenderState,
    render_snapshot,
    shade,
)


def _batch(n, requested=None):
    rng = np.random.default_rng(n)
    return SampleBatch(rng.uniform(-1, 1, (n, 2)), rng.random((n, 3)), rng.random(n),
                       requested=requested or n, attempts=n)


def test_backend_falls_back_to_agg():
    bk = setup_matplotlib_backend(prefer="NonExistingBackend123", fallback="Agg")
    assert bk.lower() == "agg"


def test_view_reuploads_when_batch_swapped():
    current = {"b": _batch(10)}
    view = PointCloudView(lambda: current["b"], params=RenderParams(point_size=3.0))
    try:
        view.step(now=0.0)
        assert view.count == 10
        assert view.scatter.get_offsets().shape == (10, 2)
        current["b"] = _batch(4, requested=9)
        view.step(now=0.1)
        assert view.count == 4
        assert view.scatter.get_offsets().shape == (4, 2)
        assert np.allclose(view.scatter.get_sizes(), 9.0)
    finally:
        plt.close(view.fig)


def test_view_handles_missing_batch():
    view = PointCloudView(lambda: None)
    try:
        view.step(now=0.0)
        assert view.count == 0
    finally:
        plt.close(view.fig)


def test_render_params_change_does_not_regenerate():
    calls = []
    view = PointCloudView(lambda: _batch(3), on_regenerate=lambda: calls.append(1))
    try:
        view.set_params(speed=2.0, point_size=9.0)
        view.step(now=0.0)
        assert view.state.params.speed == 2.0
        assert calls == []
    finally:
        plt.close(view.fig)


def test_pause_freezes_clock():
    st = RenderState(RenderParams(speed=1.0))
    st.tick(0.0)
    st.tick(1.0)
    assert st.elapsed == 1.0
    assert st.toggle_pause()
    st.tick(5.0)
    assert st.elapsed == 1.0
    assert not st.toggle_pause()
    st.tick(5.5)
    assert st.elapsed == 1.5


def test_shade_alpha_range():
    rgba = shade(np.full((3, 3), 0.5), np.array([0.0, 0.5, 1.0]))
    assert rgba.shape == (3, 4)
    assert np.all(rgba >= 0.0) and np.all(rgba <= 1.0)
    assert rgba[0, 3] > rgba[2, 3]


def test_snapshot_file(tmp_path):
    out = tmp_path / "nested" / "snap.png"
    render_snapshot(_batch(50), out, t=2.0)
    assert out.exists()


def test_view_keys_not_in_default_keymap():
    import matplotlib as mpl

    view = PointCloudView(lambda: None)
    try:
        bound = {k for name, keys in mpl.rcParams.items() if name.startswith("keymap.") for k in keys}
        assert PAUSE_KEY not in bound
        assert REGENERATE_KEY not in bound
    finally:
        plt.close(view.fig)


def test_view_keys_pause_and_regenerate():
    calls = []
    view = PointCloudView(lambda: None, on_regenerate=lambda: calls.append(1))
    try:
        view._on_key(SimpleNamespace(key=PAUSE_KEY))
        assert view.state.params.paused
        view._on_key(SimpleNamespace(key=REGENERATE_KEY))
        assert calls == [1]
        view._on_key(SimpleNamespace(key=PAUSE_KEY))
        assert not view.state.params.paused
    finally:
        plt.close(view.fig)


def _controlled_view(submitted):
    return PointCloudView(lambda: None, request=GenerationRequest(), on_request=submitted.append)


def test_density_slider_submits_one_request():
    submitted = []
    view = _controlled_view(submitted)
    try:
        assert set(view.sliders) == set(SLIDERS)
        view.sliders["density"].set_val(0.7)
        assert len(submitted) == 1
        assert submitted[0].density == pytest.approx(0.7)
        assert view.request is submitted[0]
        view.sliders["density"].set_val(0.7)
        assert len(submitted) == 1
    finally:
        plt.close(view.fig)


def test_depth_slider_submits_integer_depth():
    submitted = []
    view = _controlled_view(submitted)
    try:
        view.sliders["depth"].set_val(6)
        assert len(submitted) == 1
        assert submitted[0].depth == 6 and isinstance(submitted[0].depth, int)
    finally:
        plt.close(view.fig)


def test_render_sliders_never_submit():
    submitted = []
    view = _controlled_view(submitted)
    try:
        view.sliders["speed"].set_val(2.0)
        view.sliders["point_size"].set_val(12.0)
        assert submitted == []
        assert view.state.params.speed == pytest.approx(2.0)
        assert view.state.params.point_size == pytest.approx(12.0)
    finally:
        plt.close(view.fig)


def test_view_without_request_has_no_sliders():
    view = PointCloudView(lambda: None, figsize=(8.0, 4.0))
    try:
        assert view.sliders == {}
        assert view.aspect == pytest.approx(2.0)
    finally:
        plt.close(view.fig)
