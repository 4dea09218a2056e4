"""
Complementary suppression algorithm.

Modules:
- threshold: first-pass masking of small nonzero counts
- census: masked-cell counts and lone-mask violations
- repair: minimum-count repair of a violating row or column
- core: the fixed-point driver tying the above together
"""

from .census import Census, Violations, compute_census, find_violations
from .core import FixedPointDriver, suppress_table
from .repair import repair_col, repair_row, select_repair_position
from .threshold import threshold_mask, validate_cell_bound

__all__ = [
    "Census",
    "Violations",
    "compute_census",
    "find_violations",
    "FixedPointDriver",
    "suppress_table",
    "repair_row",
    "repair_col",
    "select_repair_position",
    "threshold_mask",
    "validate_cell_bound",
]
