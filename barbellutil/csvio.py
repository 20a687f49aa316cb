"""Read and write CSV rows and convert them to and from dataclass records.

Only basic field types are supported: int, float, str, bool, datetime and
date. A CSV stream converted into records must start with a header row whose
names match the dataclass fields. Missing columns and blank values leave the
field at its default, or at the zero value of its type when it has none.
"""

from __future__ import annotations

import csv
import dataclasses
import re
from datetime import date, datetime
from typing import Any, Callable, Iterator

from .errors import UtilError
from .iterators import BREAK, CONTINUE, ITERATE, Iter, IteratorFeedback


class MalformedCSVFileError(UtilError):
    base = "The CSV file cannot be converted to the requested struct."


class NonStructValueError(UtilError):
    base = "A struct value was expected but was not recieved."


class UnsupportedTypeError(UtilError):
    base = "The supplied type is not supported."


_INT_RE = re.compile(r"[+-]?[0-9]+")
_TRUE_WORDS = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE_WORDS = frozenset({"0", "f", "F", "FALSE", "false", "False"})
_ZERO_VALUES: dict[Any, Any] = {
    int: 0,
    float: 0.0,
    str: "",
    bool: False,
    datetime: datetime(1, 1, 1),
    date: date(1, 1, 1),
}
_NAMED_TYPES: dict[str, Any] = {
    "int": int,
    "float": float,
    "str": str,
    "bool": bool,
    "datetime": datetime,
    "date": date,
    "datetime.datetime": datetime,
    "datetime.date": date,
}


def _require_dataclass(cls: Any, source: Iter[Any]) -> None:
    if not (isinstance(cls, type) and dataclasses.is_dataclass(cls)):
        source.close()
        raise NonStructValueError(f"'{getattr(cls, '__name__', cls)}'")


def _field_type(field: dataclasses.Field) -> Any:
    tp = field.type
    if isinstance(tp, str):
        return _NAMED_TYPES.get(tp.strip(), tp)
    return tp


def _field_types(cls: type) -> dict[str, Any]:
    return {field.name: _field_type(field) for field in dataclasses.fields(cls)}


def _type_name(tp: Any) -> str:
    return getattr(tp, "__name__", str(tp))


def _parse_bool(text: str) -> bool:
    if text in _TRUE_WORDS:
        return True
    if text in _FALSE_WORDS:
        return False
    raise ValueError(f"invalid boolean: '{text}'")


def _strip_quotes(text: str) -> str:
    start = 1 if text.startswith('"') else 0
    end = len(text) - 1 if text.endswith('"') else len(text)
    return text[start:end]


def _parse_value(tp: Any, text: str, time_format: str) -> Any:
    if tp is datetime:
        return datetime.strptime(text, time_format)
    if tp is date:
        return datetime.strptime(text, time_format).date()
    if tp is bool:
        return _parse_bool(text)
    if tp is int:
        if not _INT_RE.fullmatch(text):
            raise ValueError(f"invalid integer: '{text}'")
        return int(text)
    if tp is float:
        return float(text)
    if tp is str:
        return _strip_quotes(text)
    raise UnsupportedTypeError(f"'{_type_name(tp)}'")


def _default_for(field: dataclasses.Field, tp: Any) -> Any:
    if field.default is not dataclasses.MISSING:
        return field.default
    if field.default_factory is not dataclasses.MISSING:
        return field.default_factory()
    return _ZERO_VALUES.get(tp)


def _record_from_row(
    cls: type,
    hints: dict[str, Any],
    headers: list[str],
    row: list[str],
    time_format: str,
) -> Any:
    if len(headers) != len(row):
        raise ValueError(f"Expected {len(headers)} cols, have {len(row)}")
    fields = {field.name: field for field in dataclasses.fields(cls)}
    values: dict[str, Any] = {}
    for name, text in zip(headers, row):
        if not text:
            continue
        field = fields.get(name)
        if field is None or not field.init or name.startswith("_"):
            raise ValueError(
                "Requested header value not in struct or is not settable. | "
                f"Header: '{name}'"
            )
        values[name] = _parse_value(hints.get(name), text, time_format)
    for field in fields.values():
        if field.init and field.name not in values:
            values[field.name] = _default_for(field, hints.get(field.name))
    return cls(**values)


def csv_to_struct(source: Iter[list[str]], cls: type, time_format: str) -> Iter[Any]:
    """Turn CSV rows into instances of the dataclass ``cls``.

    The first row holds the headers. Time fields are parsed with
    ``time_format`` in ``strptime`` notation. A row that cannot be converted
    raises MalformedCSVFileError; a ``cls`` that is not a dataclass raises
    NonStructValueError.
    """
    _require_dataclass(cls, source)
    hints = _field_types(cls)
    headers: list[str] = []

    def step(index: int, row: Any, status: IteratorFeedback):
        nonlocal headers
        if status is BREAK:
            return BREAK, None
        if index == 0:
            headers = list(row)
            return ITERATE, None
        try:
            record = _record_from_row(cls, hints, headers, row, time_format)
        except (ValueError, UtilError) as exc:
            raise MalformedCSVFileError(f"Line {index + 1}: {exc}") from exc
        return CONTINUE, record

    return source.next(step)


def _format_value(value: Any, time_format: str) -> str:
    if isinstance(value, (datetime, date)):
        return value.strftime(time_format)
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float, str)):
        return str(value)
    raise UnsupportedTypeError(f"'{type(value).__name__}'")


def struct_to_csv(
    elems: Iter[Any], cls: type, add_headers: bool, time_format: str
) -> Iter[list[str]]:
    """Turn dataclass instances into CSV rows of their public fields.

    A header row of field names comes first when ``add_headers`` is set.
    Fields whose names start with an underscore are left out.
    """
    _require_dataclass(cls, elems)
    names = [f.name for f in dataclasses.fields(cls) if not f.name.startswith("_")]

    def to_row(index: int, value: Any) -> list[str]:
        return [_format_value(getattr(value, name), time_format) for name in names]

    return elems.map(to_row).inject(
        lambda idx, value: (list(names), idx == 0 and add_headers)
    )


def csv_generator(sep: str, callback: Callable[[int], tuple[str, bool]]) -> str:
    """Join the strings produced by ``callback(0)``, ``callback(1)``, ...

    Generation stops after the first call whose second result is False.
    """
    parts: list[str] = []
    index = 0
    while True:
        text, cont = callback(index)
        parts.append(text)
        if not cont:
            return sep.join(parts)
        index += 1


def flatten(elems: Iter[list[str]], sep: str) -> Iter[str]:
    """Join the columns of each row with ``sep``."""
    return elems.map(lambda index, row: sep.join(row))


def csv_file_splitter(
    path: str, delim: str = ",", comment: str | None = "#"
) -> Iter[list[str]]:
    """Yield the records of a CSV file as lists of strings.

    Lines starting with ``comment`` and blank lines are skipped. Every record
    must have as many fields as the first; otherwise ``csv.Error`` is raised.
    """
    handle = None

    def lines() -> Iterator[str]:
        for line in handle:
            if comment and line.startswith(comment):
                continue
            yield line

    def generate() -> Iterator[list[str]]:
        nonlocal handle
        handle = open(path, newline="", encoding="utf-8")
        reader = csv.reader(lines(), delimiter=delim, strict=True)
        expected: int | None = None
        for row in reader:
            if not row:
                continue
            if expected is None:
                expected = len(row)
            elif len(row) != expected:
                raise csv.Error(
                    f"record on line {reader.line_num}: wrong number of fields"
                )
            yield row

    def cleanup() -> None:
        if handle is not None:
            handle.close()

    return Iter(generate(), cleanup)