"""
Complementary suppression fixed-point driver.

After the threshold pass has masked every small nonzero count, a row or column
with exactly one masked cell still leaks that cell: anyone holding the row or
column total recovers it by subtraction. The driver repeatedly repairs such rows
and columns until none remain:

1. Scanning: compute the mask census and the violating rows and columns.
2. If there are none, the table is at its fixed point and is returned.
3. Otherwise repair every violating row, then every column that violates in
   the table as mutated by the row repairs, and go back to 1.

Each non-terminal pass masks at least one more cell and a cell is never
unmasked, so the loop ends after at most one pass per sensitive cell. A pass
that cannot find a cell to mask raises NoRepairCandidateError; the iteration
cap and the optional timeout raise NonTerminationGuard.
"""

import logging
import time
from typing import Optional

import numpy as np

from complementary_suppression.exceptions import NonTerminationGuard
from complementary_suppression.suppression.census import compute_census, find_violations
from complementary_suppression.suppression.repair import repair_col, repair_row
from complementary_suppression.suppression.threshold import threshold_mask
from complementary_suppression.table import SuppressionTable


class FixedPointDriver:
    """
    Drives a table to the point where no row or column has a lone masked cell.

    Parameters
    ----------
    logger : logging.Logger
        Logger for recording iterations and repairs.
    rng : np.random.Generator
        The run's single random source, used for every tie-break.
    max_iterations : Optional[int], default=None
        Maximum number of repair passes; defaults to one more than the number of
        cells in the table.
    timeout_s : Optional[float], default=None
        Optional wall-clock limit in seconds for a single run.

    Attributes
    ----------
    n_iterations : int
        Number of repair passes made by the last run.
    n_row_repairs : int
        Number of cells masked by row repairs in the last run.
    n_col_repairs : int
        Number of cells masked by column repairs in the last run.
    """

    def __init__(
        self,
        logger: logging.Logger,
        rng: np.random.Generator,
        max_iterations: Optional[int] = None,
        timeout_s: Optional[float] = None,
    ) -> None:
        if max_iterations is not None and max_iterations < 0:
            raise ValueError(f"max_iterations ({max_iterations}) must be >= 0")
        self.logger = logger
        self.rng = rng
        self.max_iterations = max_iterations
        self.timeout_s = timeout_s
        self.n_iterations = 0
        self.n_row_repairs = 0
        self.n_col_repairs = 0

    def step(self, table: SuppressionTable) -> bool:
        """
        Run one Scanning pass and, if needed, one round of repairs.

        Parameters
        ----------
        table : SuppressionTable
            Table to repair in place.

        Returns
        -------
        bool
            False if the table was already at its fixed point (nothing changed),
            True if repairs were made.
        """
        violations = find_violations(compute_census(table))
        if violations.is_empty():
            return False
        self.logger.debug(
            "Iteration %d: %d violating rows, %d violating cols",
            self.n_iterations + 1,
            len(violations.rows),
            len(violations.cols),
        )
        for row in sorted(violations.rows):
            repair_row(self.logger, table, row, self.rng)
            self.n_row_repairs += 1
        # columns are judged against the table as it stands after the row repairs,
        # so a column the row repairs gave a second mask is not masked again
        col_violations = find_violations(compute_census(table)).cols
        for col in sorted(col_violations):
            repair_col(self.logger, table, col, self.rng)
            self.n_col_repairs += 1
        self.n_iterations += 1
        return True

    def run(self, table: SuppressionTable) -> SuppressionTable:
        """
        Repair the table until every row and column has zero or at least two masked cells.

        Parameters
        ----------
        table : SuppressionTable
            Table to repair in place; normally the output of threshold_mask.

        Returns
        -------
        SuppressionTable
            The same table, at its fixed point.

        Raises
        ------
        NoRepairCandidateError
            If a violating row or column has nothing left to mask.
        NonTerminationGuard
            If the iteration cap or timeout is exceeded.
        """
        self.n_iterations = 0
        self.n_row_repairs = 0
        self.n_col_repairs = 0
        max_iterations = (
            self.max_iterations
            if self.max_iterations is not None
            else table.n_rows * table.n_cols + 1
        )
        start_s = time.monotonic()
        while True:
            if self.timeout_s is not None and time.monotonic() - start_s > self.timeout_s:
                raise NonTerminationGuard(
                    f"Complementary suppression exceeded timeout of {self.timeout_s}s "
                    f"after {self.n_iterations} iterations"
                )
            if self.n_iterations >= max_iterations:
                if find_violations(compute_census(table)).is_empty():
                    break
                raise NonTerminationGuard(
                    f"Complementary suppression did not reach a fixed point within {max_iterations} iterations"
                )
            if not self.step(table):
                break
        self.logger.debug(
            "Fixed point reached after %d iterations (%d row repairs, %d col repairs)",
            self.n_iterations,
            self.n_row_repairs,
            self.n_col_repairs,
        )
        return table


def suppress_table(
    logger: logging.Logger,
    table: SuppressionTable,
    cell_bound: int,
    rng: np.random.Generator,
    max_iterations: Optional[int] = None,
    timeout_s: Optional[float] = None,
) -> tuple[SuppressionTable, FixedPointDriver]:
    """
    Apply threshold masking followed by complementary suppression.

    Parameters
    ----------
    logger : logging.Logger
        Logger for recording the suppression process.
    table : SuppressionTable
        Table to suppress in place.
    cell_bound : int
        Inclusive upper bound of nonzero counts masked by the threshold pass.
    rng : np.random.Generator
        Random number generator for tie-breaking.
    max_iterations : Optional[int], default=None
        See FixedPointDriver.
    timeout_s : Optional[float], default=None
        See FixedPointDriver.

    Returns
    -------
    Tuple[SuppressionTable, FixedPointDriver]
        A tuple containing:
        1. The suppressed table
        2. The driver, whose attributes describe the run

    Notes
    -----
    This is an internal implementation function. For external use, please use
    complementary_suppression.wrappers.suppress.complementary_suppress instead.
    """
    n_masked_before = table.n_masked()
    threshold_mask(table, cell_bound)
    logger.debug(
        "Threshold pass masked %d cells at or below %d",
        table.n_masked() - n_masked_before,
        cell_bound,
    )
    driver = FixedPointDriver(logger, rng, max_iterations=max_iterations, timeout_s=timeout_s)
    driver.run(table)
    return table, driver
