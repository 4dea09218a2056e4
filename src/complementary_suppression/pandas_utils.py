"""
Pandas utility functions.

We call this pandas_utils instead of pandas to avoid mistakes in import statements.
"""

import re

import numpy as np
import pandas as pd

from complementary_suppression.constants import MAX_RANDOM_STATE


def get_temp_col(
    input_df: pd.DataFrame,
    col_prefix: str = "id_col_",
    random_seed: int = 42,
    max_attempts: int = 10_000,
) -> str:
    """
    Get a unique temporary column name not in the given dataframe.

    Parameters
    ----------
    input_df : pd.DataFrame
        DataFrame to check for column name conflicts.
    col_prefix : str, optional
        Prefix for column name, defaults to ``id_col_``.
    random_seed : int, optional
        Random seed for reproducible column names, defaults to 42.
    max_attempts : int, optional
        Maximum number of attempts to find a unique name, defaults to 10,000.

    Returns
    -------
    str
        Unique column name not present in input_df.

    Raises
    ------
    RuntimeError
        If unable to generate a unique column name after max_attempts.
    """
    cols = set(str(col_name) for col_name in input_df.columns)
    rng = np.random.default_rng(seed=random_seed)
    for _ in range(max_attempts):
        id_col = f"{col_prefix}_{rng.integers(0, MAX_RANDOM_STATE)}"
        if id_col not in cols:
            return id_col
    raise RuntimeError(
        f"Unable to generate unique column name after {max_attempts} attempts. "
        f"DataFrame may have too many existing columns with prefix '{col_prefix}_'."
    )


def make_temp_id_col(input_df: pd.DataFrame) -> str:
    """
    Insert a temporary column with row numbers (0-indexed) to the dataframe.

    Parameters
    ----------
    input_df : pd.DataFrame
        DataFrame to modify in-place.

    Returns
    -------
    str
        Name of the inserted column.
    """
    id_col = get_temp_col(input_df)
    input_df.insert(0, id_col, list(range(len(input_df))))  # type: ignore[reportArgumentType]  # pandas accepts list[int] but stubs are overly restrictive
    return id_col


def escape_mask_symbol(mask_symbol: str) -> str:
    """
    Escape a mask symbol so it can be embedded in a regular expression.

    Mask symbols such as ``*``, ``+`` or ``(S)`` are regex metacharacters, so they
    must be escaped before matching cells against them.

    Parameters
    ----------
    mask_symbol : str
        The marker used for masked cells.

    Returns
    -------
    str
        The escaped pattern.

    Examples
    --------
    >>> escape_mask_symbol("*")
    '\\\\*'
    """
    return re.escape(mask_symbol)


def is_mask_cell(series: pd.Series, mask_symbol: str) -> pd.Series:
    """
    Flag the cells of a series that hold the mask symbol.

    Surrounding whitespace is tolerated, since tables read back from storage
    often carry padded cells. Missing values never match.

    Parameters
    ----------
    series : pd.Series
        Column to check; any dtype.
    mask_symbol : str
        The marker used for masked cells.

    Returns
    -------
    pd.Series
        Boolean series aligned with the input.
    """
    pattern = rf"\s*{escape_mask_symbol(mask_symbol)}\s*"
    matches = series.astype(str).str.fullmatch(pattern)
    return (matches & series.notna()).astype(bool)


def pivot_long_to_wide(
    input_df: pd.DataFrame,
    index_cols: list[str],
    columns_col: str,
    value_col: str,
    fill_value: int = 0,
) -> tuple[pd.DataFrame, list[str]]:
    """
    Pivot a long table of counts into a wide table with one count column per category.

    Parameters
    ----------
    input_df : pd.DataFrame
        Long table with one row per (index_cols, columns_col) combination.
    index_cols : List[str]
        Columns identifying a row of the wide table.
    columns_col : str
        Column whose values become the wide table's count columns.
    value_col : str
        Column holding the counts.
    fill_value : int, default=0
        Count used for combinations absent from the long table; absent
        combinations are true zeros.

    Returns
    -------
    Tuple[pd.DataFrame, List[str]]
        A tuple containing:
        1. The wide dataframe, index columns first, then count columns
        2. The names of the count columns, in order

    Raises
    ------
    ValueError
        If a named column is missing, a combination appears more than once, or a
        category collides with an index column name.
    """
    index_cols = list(index_cols)
    for col in index_cols + [columns_col, value_col]:
        if col not in input_df.columns:
            raise ValueError(f"Column ({col}) is not a column in the input dataframe")
    if input_df.duplicated(subset=index_cols + [columns_col]).any():
        raise ValueError(
            f"Input dataframe has duplicate ({', '.join(index_cols)}, {columns_col}) combinations"
        )

    wide_df = input_df.pivot(index=index_cols, columns=columns_col, values=value_col)
    wide_df = wide_df.fillna(fill_value)
    if pd.api.types.is_integer_dtype(input_df[value_col].dtype):
        wide_df = wide_df.astype(np.int64)
    count_cols = [str(col_name) for col_name in wide_df.columns]
    colliding = set(count_cols) & set(index_cols)
    if colliding:
        raise ValueError(f"Categories collide with index columns: {sorted(colliding)}")
    wide_df.columns = count_cols
    wide_df = wide_df.reset_index()
    return wide_df, count_cols


def melt_wide_to_long(
    wide_df: pd.DataFrame,
    index_cols: list[str],
    count_cols: list[str],
    columns_col: str,
    value_col: str,
) -> pd.DataFrame:
    """
    Inverse of pivot_long_to_wide, e.g. for writing a suppressed table back out.

    Parameters
    ----------
    wide_df : pd.DataFrame
        Wide table.
    index_cols : List[str]
        Columns identifying a row of the wide table.
    count_cols : List[str]
        Count columns to unpivot.
    columns_col : str
        Name of the output category column.
    value_col : str
        Name of the output count column.

    Returns
    -------
    pd.DataFrame
        Long dataframe with one row per (index_cols, category).
    """
    return wide_df.melt(
        id_vars=list(index_cols),
        value_vars=list(count_cols),
        var_name=columns_col,
        value_name=value_col,
    )
