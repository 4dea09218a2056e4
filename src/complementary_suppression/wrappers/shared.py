"""
Shared utility functions for suppression wrappers.

This module contains input and output validation shared by the single-table
and grouped suppression wrappers.
"""

import pandas as pd

from complementary_suppression.disclosure_risk_metrics import (
    find_lone_masks,
    find_threshold_violations,
)
from complementary_suppression.exceptions import ConfigurationError


def validate_mask_symbol(mask_symbol: str) -> None:
    """
    Check that a mask symbol can't be confused with a count.

    Parameters
    ----------
    mask_symbol : str
        Marker for masked cells

    Raises
    ------
    ConfigurationError
        If the symbol isn't a string, is blank, or parses as a number
    """
    if not isinstance(mask_symbol, str) or mask_symbol.strip() == "":
        raise ConfigurationError(f"mask_symbol ({mask_symbol!r}) must be a non-blank string")
    try:
        float(mask_symbol)
    except ValueError:
        return
    raise ConfigurationError(
        f"mask_symbol ({mask_symbol!r}) parses as a number and would be ambiguous with counts"
    )


def validate_sensitive_cols(input_df: pd.DataFrame, sensitive_cols: list[str]) -> list[str]:
    """
    Check that sensitive columns are unique and present in the input dataframe.

    Parameters
    ----------
    input_df : pd.DataFrame
        Input dataframe
    sensitive_cols : List[str]
        Sensitive column names; may be a tuple or other iterable

    Returns
    -------
    List[str]
        The sensitive columns as a list

    Raises
    ------
    ConfigurationError
        If a column is missing or named more than once
    """
    sensitive_cols = list(sensitive_cols)
    if len(set(sensitive_cols)) != len(sensitive_cols):
        raise ConfigurationError(f"Sensitive columns named more than once: {sensitive_cols}")
    for col in sensitive_cols:
        if col not in input_df.columns:
            raise ConfigurationError(
                f"Sensitive col ({col}) is not a column in the input dataframe"
            )
    return sensitive_cols


def validate_suppression_output(
    input_df: pd.DataFrame,
    output_df: pd.DataFrame,
    sensitive_cols: list[str],
    cell_bound: int,
    mask_symbol: str,
) -> None:
    """
    Validate that a suppressed table has the input's shape and satisfies both invariants.

    Parameters
    ----------
    input_df : pd.DataFrame
        Original input dataframe
    output_df : pd.DataFrame
        Suppressed output dataframe
    sensitive_cols : List[str]
        Sensitive column names
    cell_bound : int
        Bound used for the threshold pass
    mask_symbol : str
        Marker used for masked cells

    Raises
    ------
    RuntimeError
        If a visible count is at or below the bound, or a row or column has a
        lone masked cell
    AssertionError
        If the output's shape or columns differ from the input's
    """
    assert list(input_df.columns) == list(output_df.columns), (
        f"input_df.columns ({' '.join(map(str, input_df.columns))}) != output_df.columns ({' '.join(map(str, output_df.columns))})"
    )
    assert len(input_df) == len(output_df), (
        f"number of output rows ({len(output_df)}) != number of input rows ({len(input_df)})"
    )
    n_small_visible = find_threshold_violations(output_df, sensitive_cols, cell_bound, mask_symbol)
    if n_small_visible > 0:
        raise RuntimeError(
            f"Result has {n_small_visible} visible nonzero counts <= cell bound ({cell_bound})"
        )
    lone_rows, lone_cols = find_lone_masks(output_df, sensitive_cols, mask_symbol)
    if len(lone_rows) > 0 or len(lone_cols) > 0:
        raise RuntimeError(
            f"Result has lone masked cells in rows {lone_rows} and cols {lone_cols}"
        )

