"""Run an operation over the values of an iterator on a pool of threads."""

from __future__ import annotations

from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from typing import Any, Callable, Iterable, TypeVar

from .errors import ValOutsideRangeError
from .iterators import CONTINUE, Iter, IteratorFeedback

T = TypeVar("T")
U = TypeVar("U")

_Outcome = tuple[Any, Any, "BaseException | None"]


def no_op(value: Any, result: Any, error: BaseException | None) -> None:
    """A result handler that ignores everything it is given."""


def _check_num_threads(num_threads: int) -> None:
    if num_threads < 1:
        raise ValOutsideRangeError(f"Expected >0 | Got: {num_threads}")


def parallel(
    source: Iter[T],
    worker_op: Callable[[T], U],
    result_op: Callable[[T, U | None, BaseException | None], None],
    num_threads: int,
) -> None:
    """Apply ``worker_op`` to every value using at most ``num_threads`` threads.

    ``result_op(value, result, error)`` is called on the calling thread once
    for each value, in completion order. When ``worker_op`` raises, the
    result is None and the exception is passed as ``error``.
    """
    try:
        _check_num_threads(num_threads)
    except ValOutsideRangeError:
        source.close()
        raise

    def run(value: T) -> _Outcome:
        try:
            return value, worker_op(value), None
        except Exception as exc:  # noqa: BLE001 - handed to result_op
            return value, None, exc

    def deliver(done: Iterable[Future]) -> None:
        for future in done:
            result_op(*future.result())

    pending: set[Future] = set()
    with ThreadPoolExecutor(max_workers=num_threads) as pool:

        def submit(index: int, value: T) -> IteratorFeedback:
            nonlocal pending
            if len(pending) >= num_threads:
                done, pending = wait(pending, return_when=FIRST_COMPLETED)
                deliver(done)
            pending.add(pool.submit(run, value))
            return CONTINUE

        try:
            source.for_each(submit)
        finally:
            remaining, _ = wait(pending)
            pending = set()
        deliver(remaining)


def filter_parallel(
    source: Iter[T], op: Callable[[T], bool], num_threads: int
) -> list[T]:
    """Return the values for which ``op`` is true, testing them in parallel.

    The order of the returned values follows completion order.
    """
    kept: list[T] = []

    def keep(value: T, result: bool | None, error: BaseException | None) -> None:
        if error is not None:
            raise error
        if result:
            kept.append(value)

    parallel(source, op, keep, num_threads)
    return kept