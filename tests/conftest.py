import os

os.environ.setdefault("MPLBACKEND", "Agg")

import numpy as np
import pytest

from tremas.types import ExclusionCircle, ExclusionField


@pytest.fixture
def rng(): return np.random.default_rng(0)

@pytest.fixture
def example_field(rng):
    from tremas.data.field import build_exclusion_field
    return build_exclusion_field(1, 0.4, 0.18, rng)

@pytest.fixture
def make_field():
    """Build a field from ``(cx, cy, r, level)`` tuples, in order."""
    def _fn(rows):
        return ExclusionField.from_circles(ExclusionCircle((cx, cy), r, lv) for cx, cy, r, lv in rows)
    return _fn

def assert_outside_all(positions, field):
    P = np.asarray(positions, float)
    if len(field) == 0 or P.size == 0:
        return
    dx = P[:, 0, None] - field.centers[None, :, 0]
    dy = P[:, 1, None] - field.centers[None, :, 1]
    assert np.all(dx * dx + dy * dy >= field.radii[None, :] ** 2)
