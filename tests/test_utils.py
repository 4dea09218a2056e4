"""
Tests for utils
"""

import numpy as np

from complementary_suppression.utils import SuppressCallbacks, count_true_by_axis


def test_count_true_by_axis():
    per_row, per_col = count_true_by_axis(
        np.array([[True, False, True], [False, False, False], [True, True, True]])
    )
    np.testing.assert_array_equal(per_row, [2, 0, 3])
    np.testing.assert_array_equal(per_col, [2, 1, 2])


def test_count_true_by_axis_matches_sum():
    x = np.random.default_rng(0).random((17, 9)) < 0.4
    per_row, per_col = count_true_by_axis(x)
    np.testing.assert_array_equal(per_row, x.sum(axis=1))
    np.testing.assert_array_equal(per_col, x.sum(axis=0))


def test_count_true_by_axis_empty():
    per_row, per_col = count_true_by_axis(np.zeros((0, 4), dtype=np.bool_))
    assert per_row.shape == (0,)
    np.testing.assert_array_equal(per_col, [0, 0, 0, 0])


def test_suppress_callbacks():
    callbacks = SuppressCallbacks()
    assert callbacks.timestamps == {}
    callbacks.suppress_bm()
    callbacks.suppress_am()
    assert callbacks.timestamps["suppress_bm"] <= callbacks.timestamps["suppress_am"]
    assert "compute_metrics_bm" not in callbacks.timestamps
