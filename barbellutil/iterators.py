"""Lazy iterator pipelines with explicit clean-up.

An ``Iter`` wraps an iterable and an optional clean-up action. Producers
create them, intermediaries wrap them, and consumers drain them. Every
consumer closes the pipeline when it finishes. Closing runs each clean-up
action from the producer down to the consumer, and errors raised along
the way are merged into one.
"""

from __future__ import annotations

import enum
from typing import Any, Callable, Generic, Iterable, Iterator, TypeVar

from .datastruct import Queue, Variant
from .errors import append_error

T = TypeVar("T")
U = TypeVar("U")

_MISSING = object()


class IteratorFeedback(enum.Enum):
    """Instruction returned by callbacks to steer iteration."""

    CONTINUE = 0
    BREAK = 1
    ITERATE = 2


CONTINUE = IteratorFeedback.CONTINUE
BREAK = IteratorFeedback.BREAK
ITERATE = IteratorFeedback.ITERATE


def _capture(action: Callable[[], Any]) -> BaseException | None:
    try:
        action()
    except Exception as exc:  # noqa: BLE001 - errors are merged and re-raised
        return exc
    return None


class Iter(Generic[T]):
    """A lazy sequence of values with a clean-up action run on close."""

    def __init__(
        self,
        source: Iterable[T],
        cleanup: Callable[[], None] | None = None,
    ) -> None:
        self._iterator: Iterator[T] = iter(source)
        self._cleanup = cleanup
        self._closed = False

    def __iter__(self) -> Iterator[T]:
        try:
            yield from self._iterator
        finally:
            self.close()

    def close(self) -> None:
        """Release the resources of this iterator and all of its parents."""
        if self._closed:
            return
        self._closed = True
        closer = getattr(self._iterator, "close", None)
        if closer is not None:
            closer()
        if self._cleanup is not None:
            self._cleanup()

    def stop(self) -> None:
        """Stop iterating without pulling another value, then clean up."""
        self.close()

    # Consumers

    def for_each(self, op: Callable[[int, T], IteratorFeedback]) -> None:
        """Call ``op(index, value)`` for each value.

        Iteration goes on only while ``op`` returns CONTINUE. The pipeline is
        always closed afterwards; an error from iteration and one from the
        clean-up are merged and raised.
        """
        error: BaseException | None = None
        try:
            for index, value in enumerate(self._iterator):
                if op(index, value) is not CONTINUE:
                    break
        except Exception as exc:  # noqa: BLE001
            error = exc
        error = append_error(error, _capture(self.close))
        if error is not None:
            raise error

    def consume(self) -> None:
        """Drain every value, discarding them."""
        self.for_each(lambda index, value: CONTINUE)

    def to_queue(self, target: Any) -> None:
        """Put every value into ``target`` with its ``put`` method."""

        def visit(index: int, value: T) -> IteratorFeedback:
            target.put(value)
            return CONTINUE

        self.for_each(visit)

    def to_file(self, path: str, add_newline: bool) -> None:
        """Write each value's text to a new file, one per line if asked."""
        with open(path, "w", encoding="utf-8") as handle:

            def visit(index: int, value: T) -> IteratorFeedback:
                handle.write(str(value))
                if add_newline:
                    handle.write("\n")
                return CONTINUE

            self.for_each(visit)

    def count(self) -> int:
        """Return the number of values."""
        total = 0

        def visit(index: int, value: T) -> IteratorFeedback:
            nonlocal total
            total += 1
            return CONTINUE

        self.for_each(visit)
        return total

    def collect(self) -> list[T]:
        """Return all values as a list."""
        result: list[T] = []

        def visit(index: int, value: T) -> IteratorFeedback:
            result.append(value)
            return CONTINUE

        self.for_each(visit)
        return result

    def collect_into(self, buffer: list[T]) -> int:
        """Fill ``buffer`` from the front and return how many slots were set."""
        filled = 0

        def visit(index: int, value: T) -> IteratorFeedback:
            nonlocal filled
            if filled >= len(buffer):
                return BREAK
            buffer[filled] = value
            filled += 1
            return CONTINUE if filled < len(buffer) else BREAK

        if not buffer:
            self.close()
            return 0
        self.for_each(visit)
        return filled

    def append_to(self, target: list[T]) -> int:
        """Append every value to ``target`` and return how many were added."""
        added = 0

        def visit(index: int, value: T) -> IteratorFeedback:
            nonlocal added
            target.append(value)
            added += 1
            return CONTINUE

        self.for_each(visit)
        return added

    def all(self, op: Callable[[T], bool]) -> bool:
        """Return True if ``op`` holds for every value."""
        result = True

        def visit(index: int, value: T) -> IteratorFeedback:
            nonlocal result
            if not op(value):
                result = False
                return BREAK
            return CONTINUE

        self.for_each(visit)
        return result

    def any(self, op: Callable[[T], bool]) -> bool:
        """Return True if ``op`` holds for at least one value."""
        result = False

        def visit(index: int, value: T) -> IteratorFeedback:
            nonlocal result
            if op(value):
                result = True
                return BREAK
            return CONTINUE

        self.for_each(visit)
        return result

    def find(self, op: Callable[[T], bool]) -> tuple[T | None, bool]:
        """Return the first value matching ``op`` and whether one was found."""
        found: Any = _MISSING

        def visit(index: int, value: T) -> IteratorFeedback:
            nonlocal found
            if op(value):
                found = value
                return BREAK
            return CONTINUE

        self.for_each(visit)
        if found is _MISSING:
            return None, False
        return found, True

    def index(self, op: Callable[[T], bool]) -> int:
        """Return the position of the first value matching ``op``, or -1."""
        position = -1

        def visit(index: int, value: T) -> IteratorFeedback:
            nonlocal position
            if op(value):
                position = index
                return BREAK
            return CONTINUE

        self.for_each(visit)
        return position

    def nth(self, idx: int) -> tuple[T | None, bool]:
        """Return the value at position ``idx`` and whether it exists."""
        found: Any = _MISSING

        def visit(index: int, value: T) -> IteratorFeedback:
            nonlocal found
            if index == idx:
                found = value
                return BREAK
            return CONTINUE

        self.for_each(visit)
        if found is _MISSING:
            return None, False
        return found, True

    def reduce(self, start: U, op: Callable[[U, T], U]) -> U:
        """Fold the values into an accumulator starting at ``start``."""
        accum = start

        def visit(index: int, value: T) -> IteratorFeedback:
            nonlocal accum
            accum = op(accum, value)
            return CONTINUE

        self.for_each(visit)
        return accum

    # Intermediaries

    def next(
        self,
        op: Callable[[int, Any, IteratorFeedback], tuple[IteratorFeedback, Any]],
    ) -> "Iter[Any]":
        """Transform the stream with ``op(index, value, status)``.

        ``op`` returns ``(feedback, result)``: CONTINUE emits ``result``,
        ITERATE skips the value and BREAK ends the stream. On close ``op`` is
        called once more with status BREAK and value None, after the parent
        has been closed.
        """
        calls = 0

        def generate() -> Iterator[Any]:
            nonlocal calls
            for value in self._iterator:
                index = calls
                calls += 1
                feedback, result = op(index, value, ITERATE)
                if feedback is CONTINUE:
                    yield result
                elif feedback is BREAK:
                    return

        def cleanup() -> None:
            error = _capture(self.close)
            error = append_error(error, _capture(lambda: op(calls, None, BREAK)))
            if error is not None:
                raise error

        return Iter(generate(), cleanup)

    def inject(self, op: Callable[[int, T | None], tuple[T, bool]]) -> "Iter[T]":
        """Insert extra values where ``op(index, value)`` asks for them.

        ``op`` is consulted before each parent value and once more at the end
        (with value None); when it returns ``(new, True)`` then ``new`` is
        emitted ahead of the parent value.
        """

        def generate() -> Iterator[T]:
            index = 0
            for value in self._iterator:
                extra, wanted = op(index, value)
                if wanted:
                    yield extra
                    index += 1
                yield value
                index += 1
            extra, wanted = op(index, None)
            if wanted:
                yield extra

        return Iter(generate(), self.close)

    def take(self, num: int) -> "Iter[T]":
        """Keep at most the first ``num`` values."""
        taken = 0

        def step(index: int, value: T, status: IteratorFeedback):
            nonlocal taken
            if status is not BREAK and taken < num:
                taken += 1
                return CONTINUE, value
            return BREAK, value

        return self.next(step)

    def take_while(self, op: Callable[[T], bool]) -> "Iter[T]":
        """Keep values until the first one for which ``op`` is false."""

        def step(index: int, value: T, status: IteratorFeedback):
            if status is not BREAK and op(value):
                return CONTINUE, value
            return BREAK, value

        return self.next(step)

    def skip(self, num: int) -> "Iter[T]":
        """Drop the first ``num`` values."""
        return self.filter(filter_to_index(num))

    def map(self, op: Callable[[int, T], Any]) -> "Iter[Any]":
        """Replace each value with ``op(index, value)``."""

        def step(index: int, value: T, status: IteratorFeedback):
            if status is BREAK:
                return BREAK, None
            return CONTINUE, op(index, value)

        return self.next(step)

    def filter(self, op: Callable[[int, T], bool]) -> "Iter[T]":
        """Keep only values for which ``op(index, value)`` is true."""

        def step(index: int, value: T, status: IteratorFeedback):
            if status is not BREAK and op(index, value):
                return CONTINUE, value
            return ITERATE, value

        return self.next(step)


# Producers


def no_elem() -> Iter[Any]:
    """An iterator with no values."""
    return Iter(())


def val_elem(value: T, error: BaseException | None, repeat: int) -> Iter[T]:
    """Yield ``value`` ``repeat`` times, or raise ``error`` if one is given."""

    def generate() -> Iterator[T]:
        for _ in range(repeat):
            if error is not None:
                raise error
            yield value

    return Iter(generate())


def slice_elems(values: Iterable[T]) -> Iter[T]:
    """Yield the elements of a sequence in order."""
    return Iter(values)


def str_elems(text: str) -> Iter[str]:
    """Yield each character of ``text``."""
    return Iter(text)


def queue_elems(source: Any, sentinel: Any = None) -> Iter[Any]:
    """Yield items taken from a queue until ``sentinel`` is received."""
    return Iter(iter(source.get, sentinel))


def file_lines(path: str) -> Iter[str]:
    """Yield the lines of a text file without their line endings."""
    handle = None

    def generate() -> Iterator[str]:
        nonlocal handle
        handle = open(path, encoding="utf-8")
        for line in handle:
            yield line[:-1] if line.endswith("\n") else line

    def cleanup() -> None:
        if handle is not None:
            handle.close()

    return Iter(generate(), cleanup)


def join(
    left: Iter[T], right: Iter[U], decider: Callable[[T, U], bool]
) -> Iter[Variant]:
    """Merge two iterators, taking from ``left`` while ``decider`` is true.

    Values from ``left`` come out as A variants and values from ``right`` as
    B variants. Once one side is exhausted the other is emptied in order.
    """
    base = Variant()

    def generate() -> Iterator[Variant]:
        left_val: Any = next(left._iterator, _MISSING)
        right_val: Any = next(right._iterator, _MISSING)
        while left_val is not _MISSING and right_val is not _MISSING:
            if decider(left_val, right_val):
                yield base.set_a(left_val)
                left_val = next(left._iterator, _MISSING)
            else:
                yield base.set_b(right_val)
                right_val = next(right._iterator, _MISSING)
        while left_val is not _MISSING:
            yield base.set_a(left_val)
            left_val = next(left._iterator, _MISSING)
        while right_val is not _MISSING:
            yield base.set_b(right_val)
            right_val = next(right._iterator, _MISSING)

    def cleanup() -> None:
        error = append_error(_capture(left.close), _capture(right.close))
        if error is not None:
            raise error

    return Iter(generate(), cleanup)


def join_same(
    left: Iter[T], right: Iter[T], decider: Callable[[T, T], bool]
) -> Iter[T]:
    """Merge two iterators of the same kind into one stream of plain values."""
    return join(left, right, decider).map(
        lambda index, variant: variant.value_a() if variant.has_a() else variant.value_b()
    )


def window(source: Iter[T], queue: Queue, allow_partials: bool) -> Iter[Queue]:
    """Slide ``queue`` over the values, yielding it after each push.

    The oldest value is dropped when the queue is full. Unless
    ``allow_partials`` is set, nothing is yielded until the queue is full.
    """

    def step(index: int, value: T, status: IteratorFeedback):
        if status is BREAK:
            return BREAK, queue
        if len(queue) == queue.capacity():
            queue.pop()
        queue.push(value)
        if not allow_partials and len(queue) != queue.capacity():
            return ITERATE, queue
        return CONTINUE, queue

    return source.next(step)


def filter_to_index(num: int) -> Callable[[int, Any], bool]:
    """A filter predicate that keeps values from position ``num`` on."""

    def predicate(index: int, value: Any) -> bool:
        return not index < num

    return predicate