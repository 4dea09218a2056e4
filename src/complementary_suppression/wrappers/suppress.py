"""
Complementary suppression wrapper functions for count tables.

This module provides the public entry points: suppressing a single table, and
suppressing many independent tables held in one long dataframe, one per group.
"""

import concurrent.futures as cf
import logging
import multiprocessing as mp
from typing import Optional

import numpy as np
import pandas as pd

from complementary_suppression.constants import (
    DEFAULT_CELL_BOUND,
    DEFAULT_MASK_SYMBOL,
    MAX_RANDOM_STATE,
)
from complementary_suppression.data_quality_metrics import compute_masking_metrics
from complementary_suppression.disclosure_risk_metrics import (
    compute_minimum_unmasked_count,
    find_lone_masks,
)
from complementary_suppression.exceptions import ConfigurationError
from complementary_suppression.futures import collect_results, make_future
from complementary_suppression.pandas_utils import make_temp_id_col
from complementary_suppression.suppression import suppress_table, validate_cell_bound
from complementary_suppression.table import SuppressionTable
from complementary_suppression.utils import SuppressCallbacks

from .shared import validate_mask_symbol, validate_sensitive_cols, validate_suppression_output

_LOGGER = logging.getLogger(__name__)


def compute_disclosure_metrics(
    output_df: pd.DataFrame,
    sensitive_cols: list[str],
    mask_symbol: str,
) -> dict[str, float]:
    """
    Compute disclosure risk metrics for a suppressed table.

    Returns
    -------
    Dict[str, float]
        Dictionary containing "n_lone_masked_rows", "n_lone_masked_cols" and
        "minimum_unmasked_count".
    """
    lone_rows, lone_cols = find_lone_masks(output_df, sensitive_cols, mask_symbol)
    return {
        "n_lone_masked_rows": float(len(lone_rows)),
        "n_lone_masked_cols": float(len(lone_cols)),
        "minimum_unmasked_count": compute_minimum_unmasked_count(
            output_df, sensitive_cols, mask_symbol
        ),
    }


def complementary_suppress(
    logger: logging.Logger,
    input_df: pd.DataFrame,
    sensitive_cols: list[str],
    cell_bound: int = DEFAULT_CELL_BOUND,
    mask_symbol: str = DEFAULT_MASK_SYMBOL,
    seed: Optional[int] = None,
    max_iterations: Optional[int] = None,
    timeout_s: Optional[float] = None,
    suppress_callbacks: Optional[SuppressCallbacks] = None,
) -> tuple[pd.DataFrame, dict[str, float], dict[str, float]]:
    """
    Apply complementary suppression to a table of counts.

    Every nonzero count at or below ``cell_bound`` is masked, then further cells
    are masked until no row and no sensitive column has exactly one masked cell,
    always choosing the smallest remaining count.

    Parameters
    ----------
    logger : logging.Logger
        Logger for recording the suppression process
    input_df : pd.DataFrame
        Input table; one row per table row, sensitive columns holding
        nonnegative integer counts (or the mask symbol, for cells that are
        already suppressed). It is not modified.
    sensitive_cols : List[str]
        Count columns subject to suppression; all other columns pass through
    cell_bound : int, default=10
        Inclusive upper bound of nonzero counts masked by the threshold pass
    mask_symbol : str, default="*"
        Marker written to masked cells
    seed : Optional[int], default=None
        Seed for the tie-breaking random number generator; None makes the
        process non-deterministic when counts tie
    max_iterations : Optional[int], default=None
        Cap on repair passes; None uses one more than the number of sensitive cells
    timeout_s : Optional[float], default=None
        Optional wall-clock limit in seconds
    suppress_callbacks : Optional[SuppressCallbacks], default=None
        Optional callback object for tracking performance

    Returns
    -------
    Tuple[pd.DataFrame, Dict[str, float], Dict[str, float]]
        A tuple containing:
        1. The suppressed table, same shape and order as the input, with every
           sensitive cell the decimal string of its count or the mask symbol
        2. A dictionary of data quality metrics
        3. A dictionary of disclosure risk metrics

    Raises
    ------
    ConfigurationError
        If a sensitive column is missing or holds invalid values, or the bound
        or mask symbol is invalid
    NoRepairCandidateError
        If a row or column with a lone masked cell has nothing left to mask
    NonTerminationGuard
        If the iteration cap or timeout is exceeded
    RuntimeError
        If the result fails validation (should never happen)
    """
    validate_cell_bound(cell_bound)
    validate_mask_symbol(mask_symbol)
    sensitive_cols = validate_sensitive_cols(input_df, sensitive_cols)

    table = SuppressionTable.from_dataframe(input_df, sensitive_cols, mask_symbol)
    logger.debug(
        "Suppressing table of %d rows x %d sensitive cols with cell bound %d",
        table.n_rows,
        table.n_cols,
        cell_bound,
    )
    if table.n_rows == 0:
        logger.debug("Not modifying empty input dataset")

    rng = np.random.default_rng(seed)
    if suppress_callbacks is not None:
        suppress_callbacks.suppress_bm()
    table, driver = suppress_table(
        logger, table, cell_bound, rng, max_iterations=max_iterations, timeout_s=timeout_s
    )
    if suppress_callbacks is not None:
        suppress_callbacks.suppress_am()

    output_df = table.to_dataframe(input_df, mask_symbol)
    validate_suppression_output(input_df, output_df, sensitive_cols, cell_bound, mask_symbol)

    if suppress_callbacks is not None:
        suppress_callbacks.compute_metrics_bm()
    dq_metrics = compute_masking_metrics(
        input_df, output_df, sensitive_cols, cell_bound, mask_symbol
    )
    dq_metrics["n_iterations"] = float(driver.n_iterations)
    disclosure_metrics = compute_disclosure_metrics(output_df, sensitive_cols, mask_symbol)
    if suppress_callbacks is not None:
        suppress_callbacks.compute_metrics_am()
    return output_df, dq_metrics, disclosure_metrics


def _suppress_group(
    group_df: pd.DataFrame,
    sensitive_cols: list[str],
    cell_bound: int,
    mask_symbol: str,
    seed: int,
    max_iterations: Optional[int],
    timeout_s: Optional[float],
) -> tuple[pd.DataFrame, dict[str, float]]:
    # runs in worker processes, so uses the module logger rather than the caller's
    output_df, dq_metrics, _ = complementary_suppress(
        _LOGGER,
        group_df,
        sensitive_cols,
        cell_bound=cell_bound,
        mask_symbol=mask_symbol,
        seed=seed,
        max_iterations=max_iterations,
        timeout_s=timeout_s,
    )
    return output_df, dq_metrics


def complementary_suppress_by_group(
    logger: logging.Logger,
    input_df: pd.DataFrame,
    group_cols: list[str],
    sensitive_cols: list[str],
    cell_bound: int = DEFAULT_CELL_BOUND,
    mask_symbol: str = DEFAULT_MASK_SYMBOL,
    seed: Optional[int] = None,
    max_iterations: Optional[int] = None,
    timeout_s: Optional[float] = None,
    parallelism: Optional[int] = 10,
) -> tuple[pd.DataFrame, dict[str, float], dict[str, float]]:
    """
    Apply complementary suppression independently to each group of rows.

    Each distinct combination of ``group_cols`` values is its own table (for
    instance one table per region), with its own row and column totals.

    Parameters
    ----------
    logger : logging.Logger
        Logger for recording the suppression process
    input_df : pd.DataFrame
        Input rows of all groups; it is not modified
    group_cols : List[str]
        Columns identifying a group; missing values form their own group
    sensitive_cols : List[str]
        Count columns subject to suppression
    cell_bound : int, default=10
        Inclusive upper bound of nonzero counts masked by the threshold pass
    mask_symbol : str, default="*"
        Marker written to masked cells
    seed : Optional[int], default=None
        Seed from which each group's own seed is drawn; results for a given seed
        don't depend on parallelism
    max_iterations : Optional[int], default=None
        Cap on repair passes per group
    timeout_s : Optional[float], default=None
        Optional wall-clock limit in seconds per group
    parallelism : Optional[int], default=10
        Number of worker processes; None or 1 suppresses groups in this process

    Returns
    -------
    Tuple[pd.DataFrame, Dict[str, float], Dict[str, float]]
        A tuple containing:
        1. The suppressed rows, in input order and with the input index
        2. A dictionary of data quality metrics over all groups
        3. A dictionary of disclosure risk metrics over all groups

    Raises
    ------
    ConfigurationError
        If a group column is missing or also named as a sensitive column, or for
        any reason complementary_suppress raises it
    NoRepairCandidateError
        If any group can't be suppressed
    NonTerminationGuard
        If any group exceeds its iteration cap or timeout
    """
    validate_cell_bound(cell_bound)
    validate_mask_symbol(mask_symbol)
    sensitive_cols = validate_sensitive_cols(input_df, sensitive_cols)
    group_cols = list(group_cols)
    if len(group_cols) == 0:
        raise ConfigurationError("group_cols must name at least one column")
    for col in group_cols:
        if col not in input_df.columns:
            raise ConfigurationError(f"Group col ({col}) is not a column in the input dataframe")
        if col in sensitive_cols:
            raise ConfigurationError(f"Group col ({col}) is also a sensitive col")

    if len(input_df) == 0:
        logger.debug("Not modifying empty input dataset")
        return complementary_suppress(
            logger,
            input_df,
            sensitive_cols,
            cell_bound=cell_bound,
            mask_symbol=mask_symbol,
            seed=seed,
            max_iterations=max_iterations,
            timeout_s=timeout_s,
        )

    work_df = input_df.reset_index(drop=True)
    position_col = make_temp_id_col(work_df)
    groups = [
        group_df
        for _, group_df in work_df.groupby(
            group_cols if len(group_cols) > 1 else group_cols[0], dropna=False, sort=True
        )
    ]
    rng = np.random.default_rng(seed)
    group_seeds = rng.integers(0, MAX_RANDOM_STATE, size=len(groups))
    logger.debug("Suppressing %d groups by %s", len(groups), group_cols)

    executor = (
        cf.ProcessPoolExecutor(max_workers=parallelism, mp_context=mp.get_context("spawn"))
        if parallelism is not None and parallelism > 1 and len(groups) > 1
        else None
    )
    try:
        group_results = collect_results(
            {
                idx: make_future(
                    executor,
                    _suppress_group,
                    group_df,
                    sensitive_cols,
                    cell_bound,
                    mask_symbol,
                    int(group_seed),
                    max_iterations,
                    timeout_s,
                )
                for idx, (group_df, group_seed) in enumerate(zip(groups, group_seeds))
            }
        )
    finally:
        if executor is not None:
            executor.shutdown()

    output_df = pd.concat([group_output_df for group_output_df, _ in group_results.values()])
    output_df = output_df.sort_values(position_col)
    output_df = output_df.drop(columns=[position_col])
    output_df.index = input_df.index
    validate_suppression_output(input_df, output_df, sensitive_cols, cell_bound, mask_symbol)

    dq_metrics = compute_masking_metrics(
        input_df, output_df, sensitive_cols, cell_bound, mask_symbol
    )
    dq_metrics["n_groups"] = float(len(groups))
    dq_metrics["n_iterations"] = float(
        sum(group_dq_metrics["n_iterations"] for _, group_dq_metrics in group_results.values())
    )
    disclosure_metrics = {
        "n_lone_masked_rows": 0.0,
        "n_lone_masked_cols": 0.0,
        "minimum_unmasked_count": compute_minimum_unmasked_count(
            output_df, sensitive_cols, mask_symbol
        ),
    }
    for group_output_df, _ in group_results.values():
        lone_rows, lone_cols = find_lone_masks(group_output_df, sensitive_cols, mask_symbol)
        disclosure_metrics["n_lone_masked_rows"] += float(len(lone_rows))
        disclosure_metrics["n_lone_masked_cols"] += float(len(lone_cols))
    return output_df, dq_metrics, disclosure_metrics
