"""
Complementary Suppression - Statistical disclosure control for count tables.

This package masks small counts in tables of counts, then masks further cells
so that no masked count can be recovered by subtraction from a row or column
total.
"""

from complementary_suppression._version import __version__
from complementary_suppression.exceptions import (
    ConfigurationError,
    NonTerminationGuard,
    NoRepairCandidateError,
)
from complementary_suppression.wrappers.suppress import (
    complementary_suppress,
    complementary_suppress_by_group,
)

__all__ = [
    "__version__",
    "complementary_suppress",
    "complementary_suppress_by_group",
    "ConfigurationError",
    "NoRepairCandidateError",
    "NonTerminationGuard",
]
