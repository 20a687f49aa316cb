"""Error types shared across the package and helpers for combining errors."""

from __future__ import annotations

from typing import Any, Callable, Sized


class UtilError(Exception):
    """Base error whose message is a fixed description plus an addendum."""

    base = "An unspecified error occurred."

    def __init__(self, addendum: str = "") -> None:
        self.addendum = addendum
        super().__init__(f"{self.base} | {addendum}")


class ValOutsideRangeError(UtilError):
    base = "The specified value is outside the allowed range."


class DimensionsDoNotAgreeError(UtilError):
    base = "Dimensions do not agree."


class InvalidValueError(UtilError):
    base = "The supplied value is not valid in the supplied context."


class CombinedError(Exception):
    """Two errors that were raised for the same operation."""

    def __init__(self, first: BaseException, second: BaseException) -> None:
        self.first = first
        self.second = second
        super().__init__(
            f"{first} \nThe following error was also generated: {second}"
        )


def append_error(
    first: BaseException | None, second: BaseException | None
) -> BaseException | None:
    """Merge two optional errors into one, or return None if both are None."""
    if second is None:
        return first
    if first is None:
        return second
    return CombinedError(first, second)


def check_dims_agree(one: Sized, two: Sized, message: str) -> None:
    """Raise DimensionsDoNotAgreeError unless both sequences have equal length."""
    len_one, len_two = len(one), len(two)
    if len_one != len_two:
        raise DimensionsDoNotAgreeError(
            f"{message} | len(one)={len_one} len(two)={len_two}"
        )


def chained_error_ops(*args: Callable[..., Any]) -> list[Any]:
    """Run operations in order, passing each the results of those before it.

    The first operation that raises stops the chain; its exception propagates.
    """
    results: list[Any] = []
    for op in args:
        results.append(op(*results))
    return results


def raise_unless(condition: bool, error: BaseException) -> None:
    """Raise ``error`` when ``condition`` is false."""
    if not condition:
        raise error