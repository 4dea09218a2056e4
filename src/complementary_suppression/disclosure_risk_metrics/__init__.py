"""
Disclosure risk metrics for evaluating suppressed count tables.

Validating the suppression invariants IS disclosure risk calculation: a
visible small count identifies individuals directly, and a lone masked cell
in a row or column can be recovered from the marginal total.

Functions
---------
find_lone_masks : Tuple[List[int], List[str]]
    Rows and sensitive columns whose single masked cell is recoverable.

find_threshold_violations : int
    Number of visible small nonzero counts.

compute_minimum_unmasked_count : float
    Smallest visible nonzero count.
"""

from .lone_masks import (
    compute_minimum_unmasked_count,
    find_lone_masks,
    find_threshold_violations,
)

__all__ = [
    "find_lone_masks",
    "find_threshold_violations",
    "compute_minimum_unmasked_count",
]
