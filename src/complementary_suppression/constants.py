"""
Shared constants for complementary suppression.

This module defines constants used across the suppression components for
consistency in operations like masking, random number generation and
metric computation.
"""

import numpy as np

DEFAULT_MASK_SYMBOL: str = "*"
DEFAULT_CELL_BOUND: int = 10

MAX_RANDOM_STATE: int = 2**31 - 1
NOT_DEFINED_NA: float = np.nan
