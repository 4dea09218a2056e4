"""
Tests for threshold masking
"""

import numpy as np
import pytest

from complementary_suppression.exceptions import ConfigurationError
from complementary_suppression.suppression.threshold import threshold_mask, validate_cell_bound
from complementary_suppression.table import MASKED, SuppressionTable, Value


class TestThresholdMask:
    """
    Tests for threshold_mask.
    """

    def test_masks_small_nonzero_counts(self):
        """row [10, 3, 20] with bound 5 masks only the 3"""
        table = SuppressionTable(np.array([[10, 3, 20]]), ["a", "b", "c"])
        threshold_mask(table, 5)
        assert table.row_cells(0) == [Value(10), MASKED, Value(20)]

    def test_bound_is_inclusive(self):
        table = SuppressionTable(np.array([[5, 6]]), ["a", "b"])
        threshold_mask(table, 5)
        assert table.row_cells(0) == [MASKED, Value(6)]

    def test_zero_never_masked(self):
        """column [0, 0, 8] with bound 5 is unchanged"""
        table = SuppressionTable(np.array([[0], [0], [8]]), ["a"])
        threshold_mask(table, 5)
        assert table.n_masked() == 0

    def test_bound_zero_masks_nothing(self):
        table = SuppressionTable(np.array([[0, 1, 2]]), ["a", "b", "c"])
        threshold_mask(table, 0)
        assert table.n_masked() == 0

    def test_keeps_existing_masks(self):
        table = SuppressionTable(
            np.array([[0, 50]]), ["a", "b"], masked=np.array([[True, False]])
        )
        threshold_mask(table, 5)
        assert table.row_cells(0) == [MASKED, Value(50)]

    def test_postcondition(self):
        rng = np.random.default_rng(7)
        counts = rng.integers(0, 20, size=(15, 6))
        table = SuppressionTable(counts, [f"c{j}" for j in range(6)])
        threshold_mask(table, 9)
        visible = counts[~table.masked]
        assert ((visible == 0) | (visible > 9)).all()


class TestValidateCellBound:
    """
    Tests for validate_cell_bound.
    """

    @pytest.mark.parametrize("cell_bound", [0, 5, np.int64(11)])
    def test_valid(self, cell_bound):
        validate_cell_bound(cell_bound)

    @pytest.mark.parametrize("cell_bound", [-1, 2.5, "5", True, None])
    def test_invalid(self, cell_bound):
        with pytest.raises(ConfigurationError):
            validate_cell_bound(cell_bound)
