"""
First-pass threshold masking.

Masks every sensitive cell whose count is small enough to identify individuals.
A zero count is never masked: it carries no disclosure risk and must stay
distinguishable from a masked cell.
"""

import numbers

from complementary_suppression.exceptions import ConfigurationError
from complementary_suppression.table import SuppressionTable


def validate_cell_bound(cell_bound: int) -> None:
    """
    Check that a cell bound is a nonnegative integer.

    Raises
    ------
    ConfigurationError
        If ``cell_bound`` is not an integer or is negative.
    """
    if isinstance(cell_bound, bool) or not isinstance(cell_bound, numbers.Integral):
        raise ConfigurationError(f"cell_bound ({cell_bound!r}) must be an integer")
    if cell_bound < 0:
        raise ConfigurationError(f"cell_bound ({cell_bound}) must be >= 0")


def threshold_mask(table: SuppressionTable, cell_bound: int) -> SuppressionTable:
    """
    Mask every nonzero sensitive cell with a count at or below the bound.

    Parameters
    ----------
    table : SuppressionTable
        Table to mask in place; it only holds sensitive columns.
    cell_bound : int
        Inclusive upper bound of counts to mask.

    Returns
    -------
    SuppressionTable
        The same table, after which every unmasked count is 0 or > cell_bound.
    """
    validate_cell_bound(cell_bound)
    counts = table.counts
    table.mask_where((counts != 0) & (counts <= cell_bound))
    return table
