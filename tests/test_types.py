import numpy as np
import pytest

from tremas.types import ExclusionCircle, ExclusionField, SampleBatch, SamplePoint


def test_field_iterates_circles_in_order(make_field):
    field = make_field([(0.1, 0.2, 0.3, 0), (-0.4, 0.5, 0.05, 1)])
    circles = list(field)
    assert circles[0] == ExclusionCircle((0.1, 0.2), 0.3, 0)
    assert circles[1].level == 1
    assert field.depth == 2 and field.max_level == 1


def test_field_rejects_mismatched_columns():
    with pytest.raises(ValueError):
        ExclusionField(np.zeros((2, 2)), np.ones(3), np.zeros(2, dtype=int))


def test_batch_parallel_arrays_must_agree():
    with pytest.raises(ValueError):
        SampleBatch(np.zeros((3, 2)), np.zeros((2, 3)), np.zeros(3))


def test_batch_is_immutable_and_iterable():
    b = SampleBatch(np.array([[0.5, -0.5]]), np.array([[0.3, 0.4, 0.5]]), np.array([0.25]), requested=2, attempts=7)
    assert b.count == 1 and b.underfilled
    with pytest.raises(ValueError):
        b.positions[0, 0] = 0.0
    (pt,) = list(b)
    assert isinstance(pt, SamplePoint)
    assert pt.position == (0.5, -0.5)
    assert pt.level_factor == 0.25
    assert b.summary() == {"count": 1, "requested": 2, "attempts": 7, "underfilled": True}


def test_empty_batch_shapes():
    b = SampleBatch.empty(requested=5)
    assert b.positions.shape == (0, 2) and b.colors.shape == (0, 3) and b.level_factors.shape == (0,)
    assert b.positions.dtype == np.float32
