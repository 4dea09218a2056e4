"""
Mask census and violation detection.

The census is recomputed from the table every time it is needed; repairs change
it, so it is never cached.
"""

from typing import NamedTuple

import numpy as np

from complementary_suppression.table import SuppressionTable
from complementary_suppression.utils import count_true_by_axis


class Census(NamedTuple):
    """Masked-cell counts per row and per sensitive column."""

    per_row: np.ndarray
    per_col: np.ndarray


class Violations(NamedTuple):
    """0-based indices of rows and sensitive columns with exactly one masked cell."""

    rows: frozenset[int]
    cols: frozenset[int]

    def is_empty(self) -> bool:
        return len(self.rows) == 0 and len(self.cols) == 0


def compute_census(table: SuppressionTable) -> Census:
    per_row, per_col = count_true_by_axis(np.array(table.masked, dtype=np.bool_))
    return Census(per_row, per_col)


def find_violations(census: Census) -> Violations:
    """
    Find the rows and columns with exactly one masked cell.

    A lone masked cell can be recovered by subtracting the visible cells from the
    row or column total; zero, or two or more, masked cells cannot.

    Parameters
    ----------
    census : Census
        Output of compute_census.

    Returns
    -------
    Violations
        Empty when the table is compliant.
    """
    return Violations(
        rows=frozenset(int(i) for i in np.flatnonzero(census.per_row == 1)),
        cols=frozenset(int(j) for j in np.flatnonzero(census.per_col == 1)),
    )
