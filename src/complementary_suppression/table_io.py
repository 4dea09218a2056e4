"""
Reading, writing and printing count tables.

Tables are stored as CSV. Every column is read as a string so that mask symbols
and identifiers with leading zeros survive the round trip; sensitive columns
are parsed into counts by SuppressionTable.from_dataframe.
"""

import logging
import os
from typing import Union

import pandas as pd


def read_table(logger: logging.Logger, path: Union[str, os.PathLike]) -> pd.DataFrame:
    """
    Read a CSV table with every column as a string.

    Parameters
    ----------
    logger : logging.Logger
        Logger for recording the read
    path : str or os.PathLike
        CSV file to read

    Returns
    -------
    pd.DataFrame
        The table; empty cells are read as empty strings, not NaN
    """
    table_df = pd.read_csv(path, dtype=str, keep_default_na=False)
    logger.debug("Read %d rows x %d cols from %s", len(table_df), len(table_df.columns), path)
    return table_df


def write_table(
    logger: logging.Logger, table_df: pd.DataFrame, path: Union[str, os.PathLike]
) -> None:
    """
    Write a table to CSV without its index.

    Parameters
    ----------
    logger : logging.Logger
        Logger for recording the write
    table_df : pd.DataFrame
        Table to write
    path : str or os.PathLike
        Destination CSV file
    """
    table_df.to_csv(path, index=False)
    logger.debug("Wrote %d rows x %d cols to %s", len(table_df), len(table_df.columns), path)


def render_table(table_df: pd.DataFrame) -> str:
    """Render a table as aligned text for printing, without its index."""
    return table_df.to_string(index=False)
