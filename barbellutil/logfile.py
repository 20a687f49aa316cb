"""Line-oriented log files whose entries carry a JSON encoded value.

Each line has four parts separated by ``|``: the status, a timestamp with
microseconds, the message and the JSON encoding of the value, e.g.::

    Error | 2024/01/02 15:04:05.123456 | Started | {"id": 1}
"""

from __future__ import annotations

import enum
import json
import os
from dataclasses import dataclass
from datetime import datetime
from typing import IO, Any

from .errors import InvalidValueError, UtilError, append_error
from .iterators import Iter, file_lines

LOG_PART_SEPARATOR = "|"
TIME_FORMAT = "%Y/%m/%d %H:%M:%S.%f"


class LogFileNotSpecifiedError(UtilError):
    base = "The log file was not specified."


class LogLineMalformedError(UtilError):
    base = "Log line malformed."


class LogStatus(enum.IntEnum):
    """Severity of a log line."""

    ERROR = 0
    WARNING = 1
    DEPRECATION = 2
    INFO = 3
    DEBUG = 4
    INVALID = 5

    @property
    def label(self) -> str:
        return self.name.capitalize()

    def __str__(self) -> str:
        return f"{self.label} {LOG_PART_SEPARATOR} "


def log_status_from_string(text: str) -> LogStatus:
    """Return the status whose label is ``text``; INVALID is not accepted."""
    for status in LogStatus:
        if status is not LogStatus.INVALID and status.label == text:
            return status
    raise InvalidValueError(f"Invalid log status. | Got: '{text}'")


@dataclass(frozen=True)
class LogEntry:
    """One parsed line of a log file."""

    status: LogStatus
    time: datetime
    message: str
    value: Any


class Logger:
    """Writes log lines to a file, or discards them when it has no file."""

    def __init__(
        self, status: LogStatus, path: str | os.PathLike[str] | None, append: bool
    ) -> None:
        self.path = os.fspath(path) if path is not None else None
        self._status = status
        self._append = append
        self._handle: IO[str] | None = None
        if self.path is not None:
            self._handle = open(self.path, "a" if append else "w", encoding="utf-8")

    @classmethod
    def blank(cls) -> "Logger":
        """A logger with no file that discards everything."""
        return cls(LogStatus.ERROR, None, False)

    def log(self, message: str, value: Any) -> None:
        """Write one line; values that cannot be JSON encoded are dropped."""
        if self._handle is None:
            return
        try:
            encoded = json.dumps(value)
        except (TypeError, ValueError):
            return
        stamp = datetime.now().strftime(TIME_FORMAT)
        sep = LOG_PART_SEPARATOR
        self._handle.write(f"{self._status}{stamp} {sep} {message} {sep} {encoded}\n")
        self._handle.flush()

    def set_status(self, status: LogStatus) -> None:
        """Use ``status`` for the lines written from now on."""
        self._status = status

    def close(self) -> None:
        """Close the file; later calls to ``log`` do nothing."""
        if self._handle is not None:
            self._handle.close()
            self._handle = None

    def clear(self) -> None:
        """Empty the log file."""
        if not self.path:
            raise LogFileNotSpecifiedError("Nothing to clear.")
        os.truncate(self.path, 0)
        if self._handle is not None and not self._append:
            self._handle.seek(0)

    def __enter__(self) -> "Logger":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()


def _parse_line(path: str, index: int, line: str) -> LogEntry:
    parts = line.split(LOG_PART_SEPARATOR, 3)
    error: BaseException | None = None

    status = LogStatus.INVALID
    try:
        status = log_status_from_string(parts[0].strip())
    except InvalidValueError as exc:
        error = append_error(error, exc)

    stamp = datetime.min
    if len(parts) > 1:
        try:
            stamp = datetime.strptime(parts[1].strip(), TIME_FORMAT)
        except ValueError as exc:
            error = append_error(error, exc)
    else:
        error = append_error(error, ValueError("No log time present"))

    message = parts[2].strip() if len(parts) > 2 else ""

    value: Any = None
    if len(parts) > 3:
        try:
            value = json.loads(parts[3])
        except ValueError as exc:
            error = append_error(error, exc)
    else:
        error = append_error(error, ValueError("No object present"))

    if error is not None:
        raise LogLineMalformedError(f"File '{path}': Line {index + 1} | {error}")
    return LogEntry(status=status, time=stamp, message=message, value=value)


def log_elems(logger: Logger) -> Iter[LogEntry]:
    """Iterate over the entries in the file of ``logger``."""
    path = logger.path
    if not path:
        raise LogFileNotSpecifiedError("Nothing to iterate over.")
    return file_lines(path).map(lambda index, line: _parse_line(path, index, line))


def join_log_by_time(left: LogEntry, right: LogEntry) -> bool:
    """Join decider that takes the left entry when it is strictly older."""
    return left.time < right.time