"""
Masking data quality metrics for complementary suppression evaluation.

Functions:
- compute_masking_metrics: masked cell counts and percentages, split into
  threshold (primary) and complementary masking
"""

import numpy as np
import pandas as pd

from complementary_suppression.constants import DEFAULT_MASK_SYMBOL, NOT_DEFINED_NA
from complementary_suppression.pandas_utils import is_mask_cell
from complementary_suppression.table import SuppressionTable


def compute_masking_metrics(
    input_df: pd.DataFrame,
    output_df: pd.DataFrame,
    sensitive_cols: list[str],
    cell_bound: int,
    mask_symbol: str = DEFAULT_MASK_SYMBOL,
) -> dict[str, float]:
    """
    Compute masking metrics for a suppressed table.

    Parameters
    ----------
    input_df : pd.DataFrame
        Original input dataframe before suppression.
    output_df : pd.DataFrame
        Suppressed output dataframe, row-aligned with input_df.
    sensitive_cols : List[str]
        Sensitive column names.
    cell_bound : int
        Bound used for the threshold pass.
    mask_symbol : str, default="*"
        Marker used for masked cells.

    Returns
    -------
    Dict[str, float]
        Dictionary containing:
        - "n_cells": Number of sensitive cells
        - "n_masked": Number of masked sensitive cells in the output
        - "n_primary_masked": Masked cells that were masked on input or fall at or below the bound
        - "n_complementary_masked": Masked cells added to protect primary ones
        - "pct_masked": Share of sensitive cells masked
        - "pct_count_masked": Share of the total count hidden by masking; cells masked
          on input are excluded since their counts are unknown

    Notes
    -----
    Percentages are np.nan when there are no sensitive cells, or for
    pct_count_masked when the known total count is zero.
    """
    input_table = SuppressionTable.from_dataframe(input_df, sensitive_cols, mask_symbol)
    counts = np.array(input_table.counts)
    pre_masked = np.array(input_table.masked)
    if len(sensitive_cols) > 0 and len(output_df) > 0:
        output_masked = np.column_stack(
            [is_mask_cell(output_df[col], mask_symbol).to_numpy() for col in sensitive_cols]
        )
    else:
        output_masked = np.zeros(counts.shape, dtype=bool)

    primary = pre_masked | ((counts != 0) & (counts <= cell_bound))
    n_cells = int(counts.size)
    n_masked = int(output_masked.sum())
    n_primary_masked = int((output_masked & primary).sum())
    n_complementary_masked = n_masked - n_primary_masked

    known = ~pre_masked
    total_count = int(counts[known].sum())
    masked_count = int(counts[known & output_masked].sum())

    return {
        "n_cells": float(n_cells),
        "n_masked": float(n_masked),
        "n_primary_masked": float(n_primary_masked),
        "n_complementary_masked": float(n_complementary_masked),
        "pct_masked": (n_masked / n_cells) if n_cells > 0 else NOT_DEFINED_NA,
        "pct_count_masked": (masked_count / total_count) if total_count > 0 else NOT_DEFINED_NA,
    }
