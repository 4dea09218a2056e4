"""
In-memory table of sensitive counts used by complementary suppression.

A table is a fixed grid of rows by sensitive columns. Every cell is either a
``Value(n)`` holding a nonnegative integer count, or ``Masked``. Cells only ever
move from ``Value`` to ``Masked``; there is no way to unmask a cell.

Columns that are not sensitive are never held here: they pass through untouched
from the input dataframe to the output dataframe (see ``to_dataframe``).
"""

from dataclasses import dataclass
from typing import Optional, Union

import numpy as np
import pandas as pd

from complementary_suppression.constants import DEFAULT_MASK_SYMBOL
from complementary_suppression.exceptions import ConfigurationError
from complementary_suppression.pandas_utils import is_mask_cell


@dataclass(frozen=True)
class Value:
    """An unmasked, nonnegative integer count."""

    n: int


@dataclass(frozen=True)
class Masked:
    """A suppressed cell; its count is not visible to the rest of the system."""


MASKED = Masked()

_MAX_EXACT_FLOAT_INT = 2**53

Cell = Union[Value, Masked]


class SuppressionTable:
    """
    Rows by sensitive columns of counts, plus which of them are masked.

    Parameters
    ----------
    counts : np.ndarray
        2-d array of nonnegative integer counts, shape (n_rows, n_cols).
    sensitive_cols : List[str]
        Names of the sensitive columns, in order; ``len(sensitive_cols)`` must
        equal ``n_cols``.
    masked : Optional[np.ndarray], default=None
        2-d boolean array of cells that are already masked; defaults to none.

    Notes
    -----
    Rows and columns are addressed by 0-based position.
    """

    def __init__(
        self,
        counts: np.ndarray,
        sensitive_cols: list[str],
        masked: Optional[np.ndarray] = None,
    ) -> None:
        counts = np.array(counts, dtype=np.int64)
        if counts.ndim != 2:
            raise ValueError(f"counts must be 2-d, got {counts.ndim}-d")
        if counts.shape[1] != len(sensitive_cols):
            raise ValueError(
                f"counts has {counts.shape[1]} columns but {len(sensitive_cols)} sensitive columns were named"
            )
        if (counts < 0).any():
            raise ConfigurationError("Sensitive counts must be nonnegative")
        if masked is None:
            masked = np.zeros(counts.shape, dtype=bool)
        else:
            masked = np.array(masked, dtype=bool)
            if masked.shape != counts.shape:
                raise ValueError(
                    f"masked shape {masked.shape} does not match counts shape {counts.shape}"
                )
        self.sensitive_cols = list(sensitive_cols)
        self._counts = counts
        self._masked = masked

    @property
    def n_rows(self) -> int:
        return int(self._counts.shape[0])

    @property
    def n_cols(self) -> int:
        return int(self._counts.shape[1])

    @property
    def masked(self) -> np.ndarray:
        """Read-only view of the masked flags."""
        view = self._masked.view()
        view.flags.writeable = False
        return view

    @property
    def counts(self) -> np.ndarray:
        """
        Read-only view of the underlying counts.

        Masked cells keep their original count here (0 for cells that were
        already masked on input); callers outside the repair logic should use
        ``cell`` instead.
        """
        view = self._counts.view()
        view.flags.writeable = False
        return view

    def cell(self, row: int, col: int) -> Cell:
        if self._masked[row, col]:
            return MASKED
        return Value(int(self._counts[row, col]))

    def row_cells(self, row: int) -> list[Cell]:
        return [self.cell(row, col) for col in range(self.n_cols)]

    def col_cells(self, col: int) -> list[Cell]:
        return [self.cell(row, col) for row in range(self.n_rows)]

    def is_masked(self, row: int, col: int) -> bool:
        return bool(self._masked[row, col])

    def n_masked(self) -> int:
        return int(self._masked.sum())

    def mask_cell(self, row: int, col: int) -> None:
        """Mask a single cell; masking an already masked cell is a no-op."""
        self._masked[row, col] = True

    def mask_where(self, selection: np.ndarray) -> int:
        """
        Mask every cell flagged in a boolean selection.

        Parameters
        ----------
        selection : np.ndarray
            2-d boolean array with the table's shape.

        Returns
        -------
        int
            Number of cells that were newly masked.
        """
        newly_masked = selection & ~self._masked
        self._masked |= newly_masked
        return int(newly_masked.sum())

    def copy(self) -> "SuppressionTable":
        return SuppressionTable(self._counts, self.sensitive_cols, masked=self._masked)

    @classmethod
    def from_dataframe(
        cls,
        input_df: pd.DataFrame,
        sensitive_cols: list[str],
        mask_symbol: str = DEFAULT_MASK_SYMBOL,
    ) -> "SuppressionTable":
        """
        Build a table from the sensitive columns of a dataframe.

        Sensitive cells may be integers, integral floats, decimal strings, or the
        mask symbol; the latter are read as already masked.

        Parameters
        ----------
        input_df : pd.DataFrame
            Input dataframe; only ``sensitive_cols`` are read.
        sensitive_cols : List[str]
            Names of the sensitive columns, in order.
        mask_symbol : str, default="*"
            Marker for cells that are already masked.

        Returns
        -------
        SuppressionTable
            A new table; the dataframe is not modified.

        Raises
        ------
        ConfigurationError
            If a sensitive column is missing or named twice, or holds a missing,
            non-integer or negative value.
        """
        sensitive_cols = list(sensitive_cols)
        if len(set(sensitive_cols)) != len(sensitive_cols):
            raise ConfigurationError(f"Sensitive columns named more than once: {sensitive_cols}")
        for col in sensitive_cols:
            if col not in input_df.columns:
                raise ConfigurationError(
                    f"Sensitive col ({col}) is not a column in the input dataframe"
                )

        counts = np.zeros((len(input_df), len(sensitive_cols)), dtype=np.int64)
        masked = np.zeros((len(input_df), len(sensitive_cols)), dtype=bool)
        for j, col in enumerate(sensitive_cols):
            series = input_df[col].astype("object")
            mask_flags = is_mask_cell(series, mask_symbol)
            raw = series.where(~mask_flags, 0).map(
                lambda v: v.strip() if isinstance(v, str) else v
            )
            numeric = pd.to_numeric(raw, errors="coerce")
            if numeric.isna().any():
                raise ConfigurationError(
                    f"Sensitive col ({col}) has missing or non-numeric values"
                )
            if (numeric < 0).any():
                raise ConfigurationError(f"Sensitive col ({col}) has negative values")
            if pd.api.types.is_integer_dtype(numeric.dtype):
                # kept integral so counts past 2**53 aren't rounded through float64
                if (numeric > np.iinfo(np.int64).max).any():
                    raise ConfigurationError(f"Sensitive col ({col}) has values above the int64 range")
                counts[:, j] = numeric.to_numpy(dtype=np.int64)
            else:
                values = numeric.to_numpy(dtype=np.float64)
                if not np.all(np.mod(values, 1) == 0):
                    raise ConfigurationError(f"Sensitive col ({col}) has non-integer values")
                if (values >= _MAX_EXACT_FLOAT_INT).any():
                    raise ConfigurationError(
                        f"Sensitive col ({col}) has float values too large to be exact counts"
                    )
                counts[:, j] = values.astype(np.int64)
            masked[:, j] = mask_flags.to_numpy(dtype=bool)
        return cls(counts, sensitive_cols, masked=masked)

    def to_dataframe(
        self, input_df: pd.DataFrame, mask_symbol: str = DEFAULT_MASK_SYMBOL
    ) -> pd.DataFrame:
        """
        Render the table over a copy of the dataframe it was built from.

        Every sensitive cell becomes its count's decimal string or the mask
        symbol; all other columns, and the row and column order, are unchanged.

        Parameters
        ----------
        input_df : pd.DataFrame
            The dataframe the table was built from.
        mask_symbol : str, default="*"
            Marker for masked cells.

        Returns
        -------
        pd.DataFrame
            A new dataframe of the same shape as ``input_df``.
        """
        if len(input_df) != self.n_rows:
            raise ValueError(
                f"input_df has {len(input_df)} rows but the table has {self.n_rows}"
            )
        output_df = input_df.copy()
        for j, col in enumerate(self.sensitive_cols):
            output_df[col] = pd.Series(
                [
                    mask_symbol if is_masked else str(int(count))
                    for count, is_masked in zip(self._counts[:, j], self._masked[:, j])
                ],
                index=output_df.index,
                dtype="object",
            )
        return output_df
