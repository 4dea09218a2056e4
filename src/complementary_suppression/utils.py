"""
Shared utility functions for complementary suppression.

This module provides utility functions that support the core suppression
functionality. It includes:

- Callbacks for timing and instrumentation of suppression runs
- Single-pass array helpers used by the mask census
"""

import time

import numba
import numpy as np


class SuppressCallbacks:
    """
    Callback mechanism for tracking and instrumentation of suppression operations.

    This class provides a simple way to track timing and execution flow during a
    suppression run by recording timestamps at key points in the process.

    Users can extend this class to add custom tracking or instrumentation by
    overriding the callback methods.

    Attributes
    ----------
    timestamps : dict
        Dictionary storing timestamps for different stages of the suppression
        process. Keys include 'suppress_bm', 'suppress_am', 'compute_metrics_bm'
        and 'compute_metrics_am', where 'bm' stands for "before method" and 'am'
        for "after method".

    Examples
    --------
    >>> class CustomCallbacks(SuppressCallbacks):
    ...     def suppress_am(self):
    ...         super().suppress_am()
    ...         duration = self.timestamps["suppress_am"] - self.timestamps["suppress_bm"]
    ...         print(f"Suppression completed in {duration:.2f} seconds")
    """

    def __init__(self) -> None:
        self.timestamps: dict[str, float] = {}

    def suppress_bm(self) -> None:
        self.timestamps["suppress_bm"] = time.time()

    def suppress_am(self) -> None:
        self.timestamps["suppress_am"] = time.time()

    def compute_metrics_bm(self) -> None:
        self.timestamps["compute_metrics_bm"] = time.time()

    def compute_metrics_am(self) -> None:
        self.timestamps["compute_metrics_am"] = time.time()


@numba.jit(nopython=True)
def count_true_by_axis(x: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """
    Count True entries of a 2-d boolean array per row and per column.

    Both counts are computed in a single pass over the array, which is cheaper
    than two separate ``sum`` calls for the small, frequently recomputed arrays
    of the mask census.

    Parameters
    ----------
    x : np.ndarray
        2-d boolean array of shape (n_rows, n_cols).

    Returns
    -------
    Tuple[np.ndarray, np.ndarray]
        A tuple containing (per_row, per_col) int64 counts.

    Examples
    --------
    >>> count_true_by_axis(np.array([[True, False], [True, True]]))
    (array([1, 2]), array([2, 1]))
    """
    n_rows, n_cols = x.shape
    per_row = np.zeros(n_rows, dtype=np.int64)
    per_col = np.zeros(n_cols, dtype=np.int64)
    for i in range(n_rows):
        for j in range(n_cols):
            if x[i, j]:
                per_row[i] += 1
                per_col[j] += 1
    return per_row, per_col
