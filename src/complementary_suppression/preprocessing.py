"""
Derived ratio and total columns for count tables.

These are computed from the raw counts before complementary suppression and
are masked by a single, non-recursive rule: a derived value is masked when it
(or, for a ratio, either of its inputs) is a small nonzero count. Derived
columns are not sensitive columns and are never touched by the fixed-point
repair.
"""

import logging

import numpy as np
import pandas as pd

from complementary_suppression.constants import (
    DEFAULT_CELL_BOUND,
    DEFAULT_MASK_SYMBOL,
    NOT_DEFINED_NA,
)


def _numeric_counts(input_df: pd.DataFrame, col: str) -> pd.Series:
    if col not in input_df.columns:
        raise ValueError(f"Column ({col}) is not a column in the input dataframe")
    counts = pd.to_numeric(input_df[col], errors="coerce")
    if counts.isna().any():
        raise ValueError(f"Column ({col}) has missing or non-numeric values")
    return counts


def _is_small(counts: pd.Series, cell_bound: int) -> pd.Series:
    return (counts != 0) & (counts <= cell_bound)


def derive_ratio_column(
    logger: logging.Logger,
    input_df: pd.DataFrame,
    numerator_col: str,
    denominator_col: str,
    ratio_col: str,
    cell_bound: int = DEFAULT_CELL_BOUND,
    mask_symbol: str = DEFAULT_MASK_SYMBOL,
    scale: float = 100.0,
    decimals: int = 1,
) -> pd.DataFrame:
    """
    Add a formatted ratio (by default a percentage) of two count columns.

    Parameters
    ----------
    logger : logging.Logger
        Logger for recording how many ratios were masked
    input_df : pd.DataFrame
        Input dataframe with raw (unsuppressed) counts; it is not modified
    numerator_col : str
        Count column used as numerator
    denominator_col : str
        Count column used as denominator
    ratio_col : str
        Name of the new column
    cell_bound : int, default=10
        Ratios whose numerator or denominator is nonzero and at or below this
        bound are masked
    mask_symbol : str, default="*"
        Marker for masked ratios
    scale : float, default=100.0
        Multiplier applied to the ratio; 100 gives percentages
    decimals : int, default=1
        Number of decimal places in the formatted ratio

    Returns
    -------
    pd.DataFrame
        Copy of input_df with ``ratio_col`` holding formatted strings, the mask
        symbol, or NaN where the denominator is zero

    Raises
    ------
    ValueError
        If a count column is missing or non-numeric
    """
    numerator = _numeric_counts(input_df, numerator_col)
    denominator = _numeric_counts(input_df, denominator_col)
    masked = _is_small(numerator, cell_bound) | _is_small(denominator, cell_bound)
    undefined = denominator == 0

    ratio_values = []
    for num, denom, is_masked, is_undefined in zip(numerator, denominator, masked, undefined):
        if is_masked:
            ratio_values.append(mask_symbol)
        elif is_undefined:
            ratio_values.append(NOT_DEFINED_NA)
        else:
            ratio_values.append(f"{scale * num / denom:.{decimals}f}")

    output_df = input_df.copy()
    output_df[ratio_col] = pd.Series(ratio_values, index=output_df.index, dtype="object")
    logger.debug(
        "Masked %d of %d values of %s (%s / %s)",
        int(masked.sum()),
        len(output_df),
        ratio_col,
        numerator_col,
        denominator_col,
    )
    return output_df


def derive_total_column(
    logger: logging.Logger,
    input_df: pd.DataFrame,
    count_cols: list[str],
    total_col: str,
    cell_bound: int = DEFAULT_CELL_BOUND,
    mask_symbol: str = DEFAULT_MASK_SYMBOL,
) -> pd.DataFrame:
    """
    Add a row total over count columns, masked when it is a small nonzero count.

    Parameters
    ----------
    logger : logging.Logger
        Logger for recording how many totals were masked
    input_df : pd.DataFrame
        Input dataframe with raw (unsuppressed) counts; it is not modified
    count_cols : List[str]
        Count columns to add up
    total_col : str
        Name of the new column
    cell_bound : int, default=10
        Totals that are nonzero and at or below this bound are masked
    mask_symbol : str, default="*"
        Marker for masked totals

    Returns
    -------
    pd.DataFrame
        Copy of input_df with ``total_col`` holding decimal strings or the mask symbol
    """
    if len(count_cols) == 0:
        totals = pd.Series(np.zeros(len(input_df), dtype=np.int64), index=input_df.index)
    else:
        totals = sum(_numeric_counts(input_df, col) for col in count_cols)
    masked = _is_small(totals, cell_bound)

    output_df = input_df.copy()
    output_df[total_col] = pd.Series(
        [
            mask_symbol if is_masked else str(int(total))
            for total, is_masked in zip(totals, masked)
        ],
        index=output_df.index,
        dtype="object",
    )
    logger.debug("Masked %d of %d values of %s", int(masked.sum()), len(output_df), total_col)
    return output_df
