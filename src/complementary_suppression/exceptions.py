"""
Exceptions raised by complementary suppression.

None of these are recovered from inside a suppression run: a table either
satisfies both the threshold and the complementary invariants, or the run
fails outright.
"""

from typing import Hashable, Optional


class ConfigurationError(ValueError):
    """
    Invalid run configuration or input table.

    Raised before any masking begins, e.g. when a sensitive column is absent
    from the input dataframe, the cell bound is negative, or a sensitive column
    holds values that are not nonnegative integers.
    """


class NoRepairCandidateError(RuntimeError):
    """
    A violating row or column has no unmasked nonzero cell left to mask.

    Parameters
    ----------
    axis : str
        Either ``"row"`` or ``"column"``.
    index : int
        0-based index of the offending row or sensitive column.
    label : Optional[Hashable], default=None
        Column name, when the offending axis is a column.
    """

    def __init__(self, axis: str, index: int, label: Optional[Hashable] = None) -> None:
        self.axis = axis
        self.index = index
        self.label = label
        where = f"{axis} {index}" if label is None else f"{axis} {index} ({label})"
        super().__init__(
            f"{where} has exactly one masked cell and no unmasked nonzero cell to mask alongside it"
        )

    def __reduce__(self) -> tuple[type, tuple[str, int, Optional[Hashable]]]:
        # raised in worker processes during grouped runs, so must survive pickling
        return (type(self), (self.axis, self.index, self.label))


class NonTerminationGuard(RuntimeError):
    """
    The fixed-point loop exceeded its iteration cap or timeout.

    This should never happen on well-formed input, since every iteration that
    doesn't terminate masks at least one additional cell.
    """
