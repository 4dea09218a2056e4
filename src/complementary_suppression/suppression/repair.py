"""
Repair selection for rows and columns with a lone masked cell.

A repair masks one more cell in the violating row or column: the smallest
unmasked nonzero count, so that the largest, most informative counts stay
visible. Ties are broken uniformly at random with the run's random generator.
"""

import logging
from typing import Optional

import numpy as np

from complementary_suppression.exceptions import NoRepairCandidateError
from complementary_suppression.table import SuppressionTable


def select_repair_position(
    counts: np.ndarray, masked: np.ndarray, rng: np.random.Generator
) -> Optional[int]:
    """
    Choose the position to mask along a single row or column.

    Parameters
    ----------
    counts : np.ndarray
        1-d counts along the row or column.
    masked : np.ndarray
        1-d masked flags along the row or column.
    rng : np.random.Generator
        Random number generator used only when candidates tie.

    Returns
    -------
    Optional[int]
        0-based position of the minimum unmasked nonzero count, or None if there
        is no such cell.
    """
    candidates = np.flatnonzero(~masked & (counts != 0))
    if len(candidates) == 0:
        return None
    candidate_counts = counts[candidates]
    tied = candidates[candidate_counts == candidate_counts.min()]
    if len(tied) == 1:
        return int(tied[0])
    return int(rng.choice(tied))


def repair_row(
    logger: logging.Logger,
    table: SuppressionTable,
    row: int,
    rng: np.random.Generator,
) -> SuppressionTable:
    """
    Mask one additional cell in a row.

    Parameters
    ----------
    logger : logging.Logger
        Logger for recording the repair
    table : SuppressionTable
        Table to repair in place
    row : int
        0-based row index
    rng : np.random.Generator
        Random number generator for tie-breaking

    Returns
    -------
    SuppressionTable
        The same table, with exactly one more masked cell

    Raises
    ------
    NoRepairCandidateError
        If the row has no unmasked nonzero cell
    """
    col = select_repair_position(table.counts[row, :], table.masked[row, :], rng)
    if col is None:
        raise NoRepairCandidateError("row", row)
    logger.debug("Repairing row %d by masking col %d (%s)", row, col, table.sensitive_cols[col])
    table.mask_cell(row, col)
    return table


def repair_col(
    logger: logging.Logger,
    table: SuppressionTable,
    col: int,
    rng: np.random.Generator,
) -> SuppressionTable:
    """
    Mask one additional cell in a sensitive column.

    Candidates are defined exactly as in repair_row, and rows are addressed by
    the same 0-based index.

    Parameters
    ----------
    logger : logging.Logger
        Logger for recording the repair
    table : SuppressionTable
        Table to repair in place
    col : int
        0-based sensitive column index
    rng : np.random.Generator
        Random number generator for tie-breaking

    Returns
    -------
    SuppressionTable
        The same table, with exactly one more masked cell

    Raises
    ------
    NoRepairCandidateError
        If the column has no unmasked nonzero cell
    """
    row = select_repair_position(table.counts[:, col], table.masked[:, col], rng)
    if row is None:
        raise NoRepairCandidateError("column", col, label=table.sensitive_cols[col])
    logger.debug("Repairing col %d (%s) by masking row %d", col, table.sensitive_cols[col], row)
    table.mask_cell(row, col)
    return table
