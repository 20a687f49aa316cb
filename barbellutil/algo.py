"""Small helpers over sequences plus simple filter predicates."""

from __future__ import annotations

from itertools import chain
from typing import Any, Callable, Hashable, Iterable, Sequence, TypeVar

from .errors import UtilError, check_dims_agree

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class SliceZippingError(UtilError):
    base = "The given slices could not be zipped."


def slices_equal(one: Sequence[Any], two: Sequence[Any]) -> bool:
    """Return True if both sequences hold equal elements in the same order."""
    return len(one) == len(two) and all(a == b for a, b in zip(one, two))


def zip_slices(keys: Sequence[K], vals: Sequence[V]) -> dict[K, V]:
    """Build a dict from parallel key and value sequences.

    Raises DimensionsDoNotAgreeError on a length mismatch and
    SliceZippingError on a duplicate key.
    """
    check_dims_agree(keys, vals, "Keys and values are different lengths.")
    result: dict[K, V] = {}
    for key, val in zip(keys, vals):
        if key in result:
            raise SliceZippingError(f"Keys have duplicate values | {key}")
        result[key] = val
    return result


def append_with_preallocation(*args: Iterable[V]) -> list[V]:
    """Concatenate all given sequences into one new list."""
    return list(chain.from_iterable(args))


def gen_filter(inverse: bool, *args: Any) -> Callable[[Any], bool]:
    """Return a predicate keeping the given values, or all others if inverse."""
    things = tuple(args)

    def predicate(thing: Any) -> bool:
        present = any(thing == t for t in things)
        return not present if inverse else present

    return predicate


def no_filter(thing: Any) -> bool:
    """Keep everything."""
    return gen_filter(True)(thing)


def all_filter(thing: Any) -> bool:
    """Keep nothing."""
    return gen_filter(False)(thing)


def no_none(thing: Any) -> bool:
    """Keep everything that is not None."""
    return thing is not None


def is_error(err: Any) -> bool:
    """Keep only values that hold an error."""
    return err is not None