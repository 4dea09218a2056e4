"""
Data quality metrics package for complementary suppression evaluation.

Every masked cell is information lost to readers of the table; these metrics
measure how much was lost, and how much of it was the price of complementary
(rather than threshold) masking.

Modules:
- misc: masked cell counts and percentages
"""

from .misc import compute_masking_metrics

__all__ = [
    "compute_masking_metrics",
]
