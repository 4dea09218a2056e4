"""
Tests for masking data quality metrics
"""

import numpy as np
import pandas as pd
import pytest

from complementary_suppression.data_quality_metrics import compute_masking_metrics


def test__compute_masking_metrics():
    input_df = pd.DataFrame({"a": [10, 10], "b": [3, 3], "c": [20, 20]})
    output_df = pd.DataFrame({"a": ["*", "*"], "b": ["*", "*"], "c": ["20", "20"]})
    metrics = compute_masking_metrics(input_df, output_df, ["a", "b", "c"], 5)
    assert metrics == {
        "n_cells": 6.0,
        "n_masked": 4.0,
        "n_primary_masked": 2.0,
        "n_complementary_masked": 2.0,
        "pct_masked": pytest.approx(4 / 6),
        "pct_count_masked": pytest.approx(26 / 66),
    }


def test__compute_masking_metrics_no_masking():
    input_df = pd.DataFrame({"a": [0, 0, 8]})
    output_df = pd.DataFrame({"a": ["0", "0", "8"]})
    metrics = compute_masking_metrics(input_df, output_df, ["a"], 5)
    assert metrics["n_masked"] == 0.0
    assert metrics["pct_masked"] == 0.0
    assert metrics["pct_count_masked"] == 0.0


def test__compute_masking_metrics_pre_masked():
    input_df = pd.DataFrame({"a": ["#", "12"], "b": ["#", "30"]})
    output_df = pd.DataFrame({"a": ["#", "#"], "b": ["#", "#"]})
    metrics = compute_masking_metrics(input_df, output_df, ["a", "b"], 5, mask_symbol="#")
    assert metrics["n_primary_masked"] == 2.0
    assert metrics["n_complementary_masked"] == 2.0
    # counts masked on input are unknown and left out
    assert metrics["pct_count_masked"] == 1.0


def test__compute_masking_metrics_undefined():
    input_df = pd.DataFrame({"a": [0, 0]})
    output_df = pd.DataFrame({"a": ["0", "0"]})
    metrics = compute_masking_metrics(input_df, output_df, ["a"], 5)
    assert metrics["pct_masked"] == 0.0
    assert np.isnan(metrics["pct_count_masked"])

    metrics = compute_masking_metrics(input_df, output_df, [], 5)
    assert metrics["n_cells"] == 0.0
    assert np.isnan(metrics["pct_masked"])
