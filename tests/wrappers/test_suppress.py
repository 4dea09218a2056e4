"""
Tests for complementary_suppress
"""

import logging

import numpy as np
import pandas as pd
import pytest

from complementary_suppression import (
    ConfigurationError,
    NoRepairCandidateError,
    NonTerminationGuard,
    complementary_suppress,
)
from complementary_suppression.utils import SuppressCallbacks
from tests.shared import assert_suppression_invariants, masked_positions

_LOGGER = logging.getLogger(__name__)


class TestComplementarySuppress:
    """
    Tests for complementary_suppress.
    """

    def test_complementary_suppress_1(self):
        """test case 1: one small count per row, row repair masks the next smallest"""
        input_df = pd.DataFrame(
            {
                "area": ["north", "south"],
                "a": [10, 10],
                "b": [3, 3],
                "c": [20, 20],
            }
        )
        sensitive_cols = ["a", "b", "c"]
        actual_output_df, dq_metrics, disclosure_metrics = complementary_suppress(
            _LOGGER, input_df, sensitive_cols, cell_bound=5, seed=0
        )
        assert list(actual_output_df.columns) == ["area", "a", "b", "c"]
        assert actual_output_df["area"].tolist() == ["north", "south"]
        assert actual_output_df["a"].tolist() == ["*", "*"]
        assert actual_output_df["b"].tolist() == ["*", "*"]
        assert actual_output_df["c"].tolist() == ["20", "20"]

        assert dq_metrics["n_cells"] == 6.0
        assert dq_metrics["n_masked"] == 4.0
        assert dq_metrics["n_primary_masked"] == 2.0
        assert dq_metrics["n_complementary_masked"] == 2.0
        assert dq_metrics["pct_masked"] == pytest.approx(4 / 6)
        assert dq_metrics["pct_count_masked"] == pytest.approx(26 / 66)
        assert dq_metrics["n_iterations"] == 1.0
        assert disclosure_metrics == {
            "n_lone_masked_rows": 0.0,
            "n_lone_masked_cols": 0.0,
            "minimum_unmasked_count": 20.0,
        }

    def test_complementary_suppress_2(self):
        """test case 2: zeros are never masked"""
        input_df = pd.DataFrame({"a": [2, 2], "b": [50, 50], "c": [0, 0]})
        actual_output_df, _, _ = complementary_suppress(
            _LOGGER, input_df, ["a", "b", "c"], cell_bound=5, seed=0
        )
        assert actual_output_df.values.tolist() == [["*", "*", "0"], ["*", "*", "0"]]

    def test_complementary_suppress_3(self):
        """test case 3: no change needed"""
        input_df = pd.DataFrame({"a": [0, 0, 8]})
        actual_output_df, dq_metrics, disclosure_metrics = complementary_suppress(
            _LOGGER, input_df, ["a"], cell_bound=5
        )
        assert actual_output_df["a"].tolist() == ["0", "0", "8"]
        assert dq_metrics["n_masked"] == 0.0
        assert dq_metrics["n_iterations"] == 0.0
        assert disclosure_metrics["minimum_unmasked_count"] == 8.0

    def test_complementary_suppress_4(self):
        """test case 4: a lone small count in a single row can't be protected"""
        input_df = pd.DataFrame({"a": [2], "b": [0], "c": [0]})
        with pytest.raises(NoRepairCandidateError, match="row 0"):
            complementary_suppress(_LOGGER, input_df, ["a", "b", "c"], cell_bound=5)

    def test_complementary_suppress_5(self):
        """test case 5: cells masked on input are kept masked and protected"""
        input_df = pd.DataFrame(
            {
                "a": ["*", "12"],
                "b": ["*", "30"],
                "c": ["40", "50"],
            }
        )
        actual_output_df, dq_metrics, _ = complementary_suppress(
            _LOGGER, input_df, ["a", "b", "c"], cell_bound=5, seed=0
        )
        assert actual_output_df.values.tolist() == [["*", "*", "40"], ["*", "*", "50"]]
        assert dq_metrics["n_primary_masked"] == 2.0
        assert dq_metrics["n_complementary_masked"] == 2.0
        assert dq_metrics["pct_count_masked"] == pytest.approx(42 / 132)

    def test_integer_column_labels(self):
        """columns labelled 0, 1, 2 as in pd.DataFrame(array)"""
        input_df = pd.DataFrame([[10, 3, 20], [10, 3, 20]])
        actual_output_df, dq_metrics, _ = complementary_suppress(
            _LOGGER, input_df, [0, 1, 2], cell_bound=5, seed=0
        )
        assert list(actual_output_df.columns) == [0, 1, 2]
        assert actual_output_df.values.tolist() == [["*", "*", "20"], ["*", "*", "20"]]
        assert dq_metrics["n_masked"] == 4.0
        with pytest.raises(ConfigurationError, match="not a column"):
            complementary_suppress(_LOGGER, input_df, ["0", "1", "2"], cell_bound=5)

    def test_large_counts_kept_exact(self):
        input_df = pd.DataFrame({"a": [2**53 + 1, 2**53 + 1], "b": [40, 50]})
        actual_output_df, _, _ = complementary_suppress(_LOGGER, input_df, ["a", "b"], cell_bound=5)
        assert actual_output_df["a"].tolist() == ["9007199254740993", "9007199254740993"]

    def test_custom_mask_symbol(self):
        input_df = pd.DataFrame({"a": [10, 10], "b": [3, 3], "c": [20, 20]})
        actual_output_df, _, _ = complementary_suppress(
            _LOGGER, input_df, ["a", "b", "c"], cell_bound=5, mask_symbol="(S)", seed=0
        )
        assert actual_output_df["b"].tolist() == ["(S)", "(S)"]
        assert masked_positions(actual_output_df, ["a", "b", "c"], "(S)") == {
            (0, 0),
            (0, 1),
            (1, 0),
            (1, 1),
        }

    def test_input_not_modified_and_index_kept(self):
        input_df = pd.DataFrame(
            {"a": [10, 10], "b": [3, 3], "c": [20, 20]}, index=["x", "y"]
        )
        expected_input_df = input_df.copy()
        actual_output_df, _, _ = complementary_suppress(
            _LOGGER, input_df, ["a", "b", "c"], cell_bound=5, seed=0
        )
        pd.testing.assert_frame_equal(input_df, expected_input_df)
        assert list(actual_output_df.index) == ["x", "y"]

    def test_idempotent(self):
        input_df = pd.DataFrame(
            np.random.default_rng(8).integers(1, 20, size=(10, 4)),
            columns=["a", "b", "c", "d"],
        )
        first_output_df, _, _ = complementary_suppress(
            _LOGGER, input_df, ["a", "b", "c", "d"], cell_bound=6, seed=1
        )
        second_output_df, dq_metrics, _ = complementary_suppress(
            _LOGGER, first_output_df, ["a", "b", "c", "d"], cell_bound=6, seed=2
        )
        assert second_output_df.values.tolist() == first_output_df.values.tolist()
        assert dq_metrics["n_iterations"] == 0.0
        assert dq_metrics["n_complementary_masked"] == 0.0

    @pytest.mark.parametrize("seed", range(10))
    def test_invariants(self, seed):
        rng = np.random.default_rng(seed)
        counts = rng.integers(1, 30, size=(int(rng.integers(2, 12)), int(rng.integers(2, 6))))
        sensitive_cols = [f"count_{j}" for j in range(counts.shape[1])]
        input_df = pd.DataFrame(counts, columns=sensitive_cols)
        input_df.insert(0, "label", [f"row_{i}" for i in range(len(input_df))])
        actual_output_df, _, disclosure_metrics = complementary_suppress(
            _LOGGER, input_df, sensitive_cols, cell_bound=10, seed=seed
        )
        masked = np.zeros(counts.shape, dtype=bool)
        for i, j in masked_positions(actual_output_df, sensitive_cols):
            masked[i, j] = True
        assert_suppression_invariants(counts, masked, 10)
        # visible cells keep their counts
        for j, col in enumerate(sensitive_cols):
            for i, value in enumerate(actual_output_df[col]):
                if not masked[i, j]:
                    assert value == str(counts[i, j])
        assert disclosure_metrics["n_lone_masked_rows"] == 0.0
        assert disclosure_metrics["n_lone_masked_cols"] == 0.0

    def test_deterministic_for_seed(self):
        input_df = pd.DataFrame({"a": [3] * 6, "b": [10] * 6, "c": [10] * 6, "d": [10] * 6})
        outputs = [
            complementary_suppress(_LOGGER, input_df, ["a", "b", "c", "d"], cell_bound=5, seed=17)[
                0
            ].values.tolist()
            for _ in range(3)
        ]
        assert outputs[0] == outputs[1] == outputs[2]

    def test_empty_sensitive_cols(self):
        input_df = pd.DataFrame({"a": [1, 2]})
        actual_output_df, dq_metrics, disclosure_metrics = complementary_suppress(
            _LOGGER, input_df, [], cell_bound=5
        )
        pd.testing.assert_frame_equal(actual_output_df, input_df)
        assert dq_metrics["n_cells"] == 0.0
        assert np.isnan(dq_metrics["pct_masked"])
        assert np.isnan(disclosure_metrics["minimum_unmasked_count"])

    def test_empty_input(self):
        input_df = pd.DataFrame({"a": pd.Series([], dtype="int64"), "b": pd.Series([], dtype="int64")})
        actual_output_df, dq_metrics, _ = complementary_suppress(
            _LOGGER, input_df, ["a", "b"], cell_bound=5
        )
        assert len(actual_output_df) == 0
        assert list(actual_output_df.columns) == ["a", "b"]
        assert dq_metrics["n_masked"] == 0.0

    def test_callbacks(self):
        input_df = pd.DataFrame({"a": [10, 10], "b": [3, 3]})
        suppress_callbacks = SuppressCallbacks()
        complementary_suppress(
            _LOGGER, input_df, ["a", "b"], cell_bound=5, suppress_callbacks=suppress_callbacks
        )
        assert set(suppress_callbacks.timestamps) == {
            "suppress_bm",
            "suppress_am",
            "compute_metrics_bm",
            "compute_metrics_am",
        }
        assert suppress_callbacks.timestamps["suppress_bm"] <= suppress_callbacks.timestamps["suppress_am"]

    def test_iteration_cap(self):
        input_df = pd.DataFrame({"a": [10, 10], "b": [3, 3], "c": [20, 20]})
        with pytest.raises(NonTerminationGuard):
            complementary_suppress(_LOGGER, input_df, ["a", "b", "c"], cell_bound=5, max_iterations=0)

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"sensitive_cols": ["missing"]},
            {"sensitive_cols": ["a", "a"]},
            {"cell_bound": -1},
            {"cell_bound": 2.5},
            {"mask_symbol": ""},
            {"mask_symbol": "0"},
            {"mask_symbol": "1e3"},
        ],
    )
    def test_invalid_configuration(self, kwargs):
        input_df = pd.DataFrame({"a": [10, 10], "b": [3, 3]})
        call_kwargs = {"sensitive_cols": ["a", "b"], "cell_bound": 5, "mask_symbol": "*"}
        call_kwargs.update(kwargs)
        with pytest.raises(ConfigurationError):
            complementary_suppress(_LOGGER, input_df, **call_kwargs)

    @pytest.mark.parametrize("bad_value", [-1, np.nan, "many", 2.5])
    def test_invalid_counts(self, bad_value):
        input_df = pd.DataFrame({"a": [10, bad_value], "b": [3, 3]})
        with pytest.raises(ConfigurationError):
            complementary_suppress(_LOGGER, input_df, ["a", "b"], cell_bound=5)
