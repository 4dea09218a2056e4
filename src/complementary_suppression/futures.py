"""
Deferred or process-parallel execution of independent suppression runs.

Grouped suppression hands each group's table to ``make_future``; with an
executor the run happens in a worker process, without one it happens in this
process when its result is collected.
"""

from concurrent.futures import Future
from concurrent.futures.process import ProcessPoolExecutor
from typing import Any, Callable, Hashable, Optional, Union


class InProcessResult:
    """
    Stand-in for concurrent.futures.Future that runs its function lazily, in process.

    Parameters
    ----------
    func : callable
        Function to run when result() is first called
    args : tuple
        Positional arguments for func
    kwargs : dict
        Keyword arguments for func
    """

    def __init__(
        self, func: Callable[..., Any], args: tuple[Any, ...], kwargs: dict[str, Any]
    ) -> None:
        self.func = func
        self.args = args
        self.kwargs = kwargs

    def result(self) -> Any:
        return self.func(*self.args, **self.kwargs)

    def cancel(self) -> bool:
        # nothing has started, so there is nothing to stop
        return True


def make_future(
    executor: Optional[ProcessPoolExecutor], func: Callable[..., Any], *args: Any, **kwargs: Any
) -> Union[Future, InProcessResult]:
    """
    Submit func to the executor, or defer it in process when there is no executor.

    Parameters
    ----------
    executor : ProcessPoolExecutor or None
        Pool to submit to; None defers execution until result() is called.
    func : callable
        Function to run; must be picklable when an executor is given.
    *args : Any
        Positional arguments for func.
    **kwargs : Any
        Keyword arguments for func.

    Returns
    -------
    Union[Future, InProcessResult]
        Object whose result() returns func's return value or raises its exception.
    """
    if executor is not None:
        return executor.submit(func, *args, **kwargs)
    return InProcessResult(func, args, kwargs)


def collect_results(
    key_to_future: dict[Hashable, Union[Future, InProcessResult]],
) -> dict[Hashable, Any]:
    """
    Collect every result, in key order, cancelling the rest on the first failure.

    Parameters
    ----------
    key_to_future : Dict[Hashable, Union[Future, InProcessResult]]
        Futures from make_future, keyed by caller-chosen identifiers.

    Returns
    -------
    Dict[Hashable, Any]
        Results keyed like the input.

    Raises
    ------
    Exception
        Whatever the first failing function raised.
    """
    results: dict[Hashable, Any] = {}
    try:
        for key, future in key_to_future.items():
            results[key] = future.result()
    except BaseException:
        for key, future in key_to_future.items():
            if key not in results:
                future.cancel()
        raise
    return results
