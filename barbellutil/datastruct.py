"""A fixed-capacity circular queue and a two-way variant value."""

from __future__ import annotations

import enum
from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from typing import Any, Generic, Iterator, TypeVar

from .errors import InvalidValueError, UtilError, ValOutsideRangeError

T = TypeVar("T")


class QueueFullError(UtilError):
    base = "The capacity of the queue has been reached."


class QueueEmptyError(UtilError):
    base = "The queue is empty."


class Queue(ABC, Generic[T]):
    """Interface of a bounded FIFO queue."""

    @abstractmethod
    def push(self, value: T) -> None: ...

    @abstractmethod
    def pop(self) -> T: ...

    @abstractmethod
    def peek(self, idx: int) -> T: ...

    @abstractmethod
    def capacity(self) -> int: ...

    @abstractmethod
    def __len__(self) -> int: ...


class CircularQueue(Queue[T]):
    """A FIFO queue backed by a fixed-size ring buffer."""

    def __init__(self, size: int) -> None:
        if size <= 0:
            raise ValOutsideRangeError(f"Size of queue must be >=0 | Have: {size}")
        self._vals: list[Any] = [None] * size
        self._count = 0
        self._start = 0
        self._end = -1

    def __len__(self) -> int:
        return self._count

    def capacity(self) -> int:
        return len(self._vals)

    def _advance(self, idx: int) -> int:
        return 0 if idx + 1 >= len(self._vals) else idx + 1

    def _slot(self, idx: int) -> int:
        if not 0 <= idx < self._count:
            raise ValOutsideRangeError(
                "Index must be >0 and <num elems in queue. | "
                f"Num Elems: {self._count} Index: {idx}"
            )
        return (idx + self._start) % len(self._vals)

    def push(self, value: T) -> None:
        if self._count >= len(self._vals):
            raise QueueFullError(f"Queue size: {len(self._vals)}")
        self._count += 1
        self._end = self._advance(self._end)
        self._vals[self._end] = value

    def peek(self, idx: int) -> T:
        return self._vals[self._slot(idx)]

    def __getitem__(self, idx: int) -> T:
        return self.peek(idx)

    def __setitem__(self, idx: int, value: T) -> None:
        self._vals[self._slot(idx)] = value

    def pop(self) -> T:
        if self._count == 0:
            raise QueueEmptyError("Nothing to pop!")
        value = self._vals[self._start]
        self._start = self._advance(self._start)
        self._count -= 1
        return value

    def __iter__(self) -> Iterator[T]:
        i = 0
        while i < self._count:
            yield self.peek(i)
            i += 1


class VariantFlag(enum.Enum):
    A = 0
    B = 1


@dataclass(frozen=True)
class Variant:
    """A value that is either of kind A or of kind B."""

    value: Any = None
    flag: VariantFlag = VariantFlag.A

    def set_a(self, value: Any) -> "Variant":
        return replace(self, value=value, flag=VariantFlag.A)

    def set_b(self, value: Any) -> "Variant":
        return replace(self, value=value, flag=VariantFlag.B)

    def has_a(self) -> bool:
        return self.flag is VariantFlag.A

    def has_b(self) -> bool:
        return self.flag is VariantFlag.B

    def value_a(self) -> Any:
        if not self.has_a():
            raise InvalidValueError("Variant does not hold an A value.")
        return self.value

    def value_b(self) -> Any:
        if not self.has_b():
            raise InvalidValueError("Variant does not hold a B value.")
        return self.value

    def value_a_or(self, default: Any) -> Any:
        return self.value if self.has_a() else default

    def value_b_or(self, default: Any) -> Any:
        return self.value if self.has_b() else default