"""
Tests for table_io
"""

import logging

import pandas as pd

from complementary_suppression.table_io import read_table, render_table, write_table

_LOGGER = logging.getLogger(__name__)


def test_write_then_read(tmp_path):
    path = tmp_path / "table.csv"
    table_df = pd.DataFrame(
        {
            "code": ["007", "010"],
            "note": ["", "n/a"],
            "a": ["*", "12"],
        }
    )
    write_table(_LOGGER, table_df, path)
    actual_df = read_table(_LOGGER, path)
    assert list(actual_df.columns) == ["code", "note", "a"]
    assert actual_df["code"].tolist() == ["007", "010"]
    # empty cells and NA-like strings stay strings
    assert actual_df["note"].tolist() == ["", "n/a"]
    assert actual_df["a"].tolist() == ["*", "12"]


def test_write_omits_index(tmp_path):
    path = tmp_path / "table.csv"
    write_table(_LOGGER, pd.DataFrame({"a": ["1"]}, index=["row"]), path)
    assert path.read_text().splitlines() == ["a", "1"]


def test_render_table():
    rendered = render_table(pd.DataFrame({"area": ["north"], "a": ["*"]}, index=[42]))
    assert rendered.splitlines()[0].split() == ["area", "a"]
    assert rendered.splitlines()[1].split() == ["north", "*"]
    assert "42" not in rendered
