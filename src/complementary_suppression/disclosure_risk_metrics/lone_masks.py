"""
Disclosure risk metrics for suppressed count tables.

These metrics are computed on the rendered output table (sensitive cells as
decimal strings or the mask symbol), so they check exactly what a reader of
the published table sees.

Functions:
- find_lone_masks: rows and columns with exactly one masked cell
- find_threshold_violations: visible counts that should have been masked
- compute_minimum_unmasked_count: smallest visible nonzero count
"""

import numpy as np
import pandas as pd

from complementary_suppression.constants import NOT_DEFINED_NA
from complementary_suppression.pandas_utils import is_mask_cell


def _masked_frame(output_df: pd.DataFrame, sensitive_cols: list[str], mask_symbol: str) -> pd.DataFrame:
    return pd.DataFrame(
        {col: is_mask_cell(output_df[col], mask_symbol).to_numpy() for col in sensitive_cols},
        columns=list(sensitive_cols),
    )


def _visible_counts(
    output_df: pd.DataFrame, sensitive_cols: list[str], mask_symbol: str
) -> np.ndarray:
    values = []
    for col in sensitive_cols:
        series = output_df[col][~is_mask_cell(output_df[col], mask_symbol)]
        values.append(pd.to_numeric(series, errors="raise").to_numpy(dtype=np.float64))
    if len(values) == 0:
        return np.array([], dtype=np.float64)
    return np.concatenate(values)


def find_lone_masks(
    output_df: pd.DataFrame,
    sensitive_cols: list[str],
    mask_symbol: str,
) -> tuple[list[int], list[str]]:
    """
    Find the rows and sensitive columns with exactly one masked cell.

    A lone masked cell is recoverable by subtraction from its row or column
    total, so a correctly suppressed table has none.

    Parameters
    ----------
    output_df : pd.DataFrame
        Suppressed table.
    sensitive_cols : List[str]
        Sensitive column names.
    mask_symbol : str
        Marker used for masked cells.

    Returns
    -------
    Tuple[List[int], List[str]]
        A tuple containing:
        1. 0-based positions of rows with a lone masked cell
        2. Names of sensitive columns with a lone masked cell
    """
    if len(output_df) == 0 or len(sensitive_cols) == 0:
        return [], []
    masked_df = _masked_frame(output_df, sensitive_cols, mask_symbol)
    per_row = masked_df.sum(axis=1).to_numpy()
    per_col = masked_df.sum(axis=0)
    lone_rows = [int(i) for i in np.flatnonzero(per_row == 1)]
    lone_cols = [col for col in sensitive_cols if per_col[col] == 1]
    return lone_rows, lone_cols


def find_threshold_violations(
    output_df: pd.DataFrame,
    sensitive_cols: list[str],
    cell_bound: int,
    mask_symbol: str,
) -> int:
    """
    Count visible nonzero counts at or below the cell bound.

    Returns
    -------
    int
        Number of such cells; 0 for a correctly suppressed table.
    """
    visible = _visible_counts(output_df, sensitive_cols, mask_symbol)
    return int(((visible != 0) & (visible <= cell_bound)).sum())


def compute_minimum_unmasked_count(
    output_df: pd.DataFrame,
    sensitive_cols: list[str],
    mask_symbol: str,
) -> float:
    """
    Compute the smallest visible nonzero count.

    Higher values mean lower disclosure risk; after suppression with cell bound
    b it is always > b.

    Returns
    -------
    float
        The minimum, or NOT_DEFINED_NA when there are no visible nonzero counts.
    """
    visible = _visible_counts(output_df, sensitive_cols, mask_symbol)
    visible = visible[visible != 0]
    if len(visible) == 0:
        return NOT_DEFINED_NA
    return float(visible.min())
