# barbellutil

A small library of general-purpose utilities. It has no third-party dependencies.

## Modules

- **`barbellutil.iterators`**: lazy, chainable pipelines built on `Iter`. Each `Iter`
  wraps an iterable and an optional clean-up action. Every consumer closes the
  pipeline when it finishes. Errors raised by iteration and by clean-up are merged
  into one exception.
  - Producers: `slice_elems`, `str_elems`, `val_elem`, `no_elem`, `file_lines`, and
    `queue_elems`, which reads from any object with a `get` method until it receives
    a sentinel.
  - Intermediaries: `Iter.next`, `Iter.inject`, `Iter.take`, `Iter.take_while`,
    `Iter.skip`, `Iter.map` and `Iter.filter`.
  - Merging and windows: `join` / `join_same` merge two iterators in order. `window`
    slides a queue over the values.
  - Consumers: `Iter.for_each`, `Iter.consume`, `Iter.collect`, `Iter.collect_into`,
    `Iter.append_to`, `Iter.count`, `Iter.all`, `Iter.any`, `Iter.find`, `Iter.index`,
    `Iter.nth`, `Iter.reduce`, `Iter.to_file`, and `Iter.to_queue`, which calls
    `put` on its target.
  - Control: `Iter.close` / `Iter.stop` end iteration and run clean-up.
    `IteratorFeedback` (`CONTINUE`, `BREAK`, `ITERATE`) steers the callbacks.
- **`barbellutil.parallel`**: `parallel` runs a worker function over an iterator's
  values on a thread pool. It hands each `(value, result, error)` to a handler on the
  calling thread. `filter_parallel` keeps the values for which a predicate holds, in
  completion order. `no_op` is a handler that ignores its input.
- **`barbellutil.datastruct`**:
  - `CircularQueue`, a fixed-capacity FIFO that supports `push`, `pop`, `peek`,
    indexing, `len()` and iteration.
  - `Queue`, the abstract interface that `CircularQueue` implements.
  - `Variant`, an immutable value that holds either an A or a B value.
- **`barbellutil.csvio`**:
  - `csv_file_splitter` reads CSV records from a file. It skips comment lines and
    blank lines.
  - `csv_to_struct` turns rows, with a header row first, into dataclass instances.
  - `struct_to_csv` turns dataclass instances into rows of their public fields, with
    an optional header row.
  - `flatten` joins the columns of each row.
  - `csv_generator` joins strings produced by a callback.
  - Supported field types are `int`, `float`, `str`, `bool`, `datetime` and `date`.
- **`barbellutil.logfile`**: `Logger` writes lines of the form
  `Status | timestamp | message | JSON value`. `Logger.blank()` discards everything.
  `log_elems` reads a logger's file back as `LogEntry` records. `join_log_by_time`
  orders entries when two logs are merged with `join_same`.
- **`barbellutil.algo`**: `slices_equal`, `zip_slices`, `append_with_preallocation`,
  and the predicates `gen_filter`, `no_filter`, `all_filter`, `no_none` and `is_error`.
- **`barbellutil.fileio`**:
  - `file_exists` is true only for an existing path that is not a directory.
  - `yn_question` prompts on stdin until it gets a single Y or N.
  - `split_tokens` splits text on a separator.
- **`barbellutil.errors`**: the base `UtilError`, plus `ValOutsideRangeError`,
  `DimensionsDoNotAgreeError`, `InvalidValueError` and `CombinedError`. It also has the
  helpers `append_error`, `check_dims_agree`, `chained_error_ops` and `raise_unless`.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Examples

```python
from barbellutil.iterators import slice_elems

total = slice_elems([1, 2, 3, 4]).filter(lambda i, v: v < 3).reduce(0, lambda acc, v: acc + v)
assert total == 3
```

```python
from barbellutil.datastruct import CircularQueue
from barbellutil.iterators import slice_elems, window

q = CircularQueue(2)
pairs = window(slice_elems(range(4)), q, False).map(lambda i, w: list(w)).collect()
assert pairs == [[0, 1], [1, 2], [2, 3]]
```

## Errors

Failures are raised as exceptions.

- The package's own error classes derive from `barbellutil.errors.UtilError`. These
  include `QueueFullError`, `MalformedCSVFileError` and `LogLineMalformedError`.
- `CombinedError` holds two errors that occurred together, such as an iteration error
  and a clean-up error.
- Errors from the standard library pass through unchanged. Examples are `OSError`
  from file access and `csv.Error` from a malformed CSV file.

## Limits

This is a library only. It provides no command-line program, and it does not store
anything beyond the CSV and log files that you point it at.