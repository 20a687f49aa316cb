import re
import time
from datetime import datetime

import pytest

from barbellutil.datastruct import CircularQueue
from barbellutil.errors import InvalidValueError
from barbellutil.iterators import join_same, window
from barbellutil.logfile import (
    LogEntry,
    LogFileNotSpecifiedError,
    Logger,
    LogLineMalformedError,
    LogStatus,
    join_log_by_time,
    log_elems,
    log_status_from_string,
)


def generate_log(logger, num_lines):
    for i in range(num_lines):
        logger.log(f"Line {i}", i)


@pytest.mark.parametrize(
    "text,expected",
    [
        ("Error", "Error | "),
        ("Deprecation", "Deprecation | "),
        ("Debug", "Debug | "),
    ],
)
def test_status_strings(text, expected):
    assert str(log_status_from_string(text)) == expected


@pytest.mark.parametrize(
    "text,expected",
    [
        ("Error", LogStatus.ERROR),
        ("Warning", LogStatus.WARNING),
        ("Deprecation", LogStatus.DEPRECATION),
        ("Info", LogStatus.INFO),
        ("Debug", LogStatus.DEBUG),
    ],
)
def test_status_from_string(text, expected):
    assert log_status_from_string(text) is expected


@pytest.mark.parametrize("text", ["Invalid", "error", "", "Bogus"])
def test_status_from_bad_string(text):
    with pytest.raises(InvalidValueError):
        log_status_from_string(text)


def test_new_log_bad_path(tmp_path):
    with pytest.raises(OSError):
        Logger(LogStatus.ERROR, tmp_path / "non" / "existant" / "file.txt", False)


def test_line_format(tmp_path):
    path = tmp_path / "format.log"
    with Logger(LogStatus.ERROR, path, False) as logger:
        logger.log("Hello", {"a": 1})
        entries = log_elems(logger).collect()
    assert [(e.status, e.message, e.value) for e in entries] == [
        (LogStatus.ERROR, "Hello", {"a": 1})
    ]
    line = path.read_text(encoding="utf-8")
    assert re.fullmatch(
        r'Error \| \d{4}/\d{2}/\d{2} \d{2}:\d{2}:\d{2}\.\d{6} \| Hello \| \{"a": 1\}\n',
        line,
    )


def test_log_iteration(tmp_path):
    with Logger(LogStatus.ERROR, tmp_path / "gen.log", False) as logger:
        generate_log(logger, 1000)
        entries = log_elems(logger).collect()
    assert len(entries) == 1000
    for index, entry in enumerate(entries):
        assert entry.status is LogStatus.ERROR
        assert entry.message == f"Line {index}"
        assert entry.value == index


def test_log_iteration_time(tmp_path):
    with Logger(LogStatus.ERROR, tmp_path / "gen.log", False) as logger:
        generate_log(logger, 1000)
        pairs = (
            window(log_elems(logger), CircularQueue(2), False)
            .map(lambda index, q: (q.peek(0).time, q.peek(1).time))
            .collect()
        )
    assert len(pairs) == 999
    assert all(first <= second for first, second in pairs)


def test_log_append(tmp_path):
    path = tmp_path / "gen.log"
    with Logger(LogStatus.ERROR, path, False) as logger:
        generate_log(logger, 100)
    with Logger(LogStatus.ERROR, path, True) as logger:
        generate_log(logger, 100)
        entries = log_elems(logger).collect()
    assert len(entries) == 200
    for index, entry in enumerate(entries):
        assert entry.status is LogStatus.ERROR
        assert entry.message == f"Line {index % 100}"
        assert entry.value == index % 100


def test_log_truncates_without_append(tmp_path):
    path = tmp_path / "gen.log"
    with Logger(LogStatus.ERROR, path, False) as logger:
        generate_log(logger, 10)
    with Logger(LogStatus.ERROR, path, False) as logger:
        generate_log(logger, 3)
        assert log_elems(logger).count() == 3


def test_log_join_generated(tmp_path):
    path1, path2 = tmp_path / "part1.log", tmp_path / "part2.log"
    with Logger(LogStatus.ERROR, path1, False) as l1, Logger(
        LogStatus.ERROR, path2, False
    ) as l2:
        counter = 0
        for _ in range(50):
            counter += 1
            l1.log(f"L1 Line {counter}", counter)
            time.sleep(0.002)
            counter += 1
            l2.log(f"L2 Line {counter}", counter)
            time.sleep(0.002)
    reader1 = Logger(LogStatus.ERROR, path1, True)
    reader2 = Logger(LogStatus.ERROR, path2, True)
    entries = join_same(log_elems(reader1), log_elems(reader2), join_log_by_time).collect()
    reader1.close()
    reader2.close()
    assert len(entries) == 100
    for index, entry in enumerate(entries):
        assert entry.status is LogStatus.ERROR
        assert entry.message == f"L{index % 2 + 1} Line {index + 1}"
        assert entry.value == index + 1


def test_log_join_handwritten(tmp_path):
    path1, path2 = tmp_path / "a.log", tmp_path / "b.log"
    path1.write_text(
        "Error | 2020/01/01 00:00:00.000001 | first | 1\n"
        "Error | 2020/01/01 00:00:00.000003 | third | 3\n",
        encoding="utf-8",
    )
    path2.write_text(
        "Info | 2020/01/01 00:00:00.000002 | second | 2\n"
        "Info | 2020/01/01 00:00:00.000004 | fourth | 4\n",
        encoding="utf-8",
    )
    reader1 = Logger(LogStatus.ERROR, path1, True)
    reader2 = Logger(LogStatus.ERROR, path2, True)
    entries = join_same(log_elems(reader1), log_elems(reader2), join_log_by_time).collect()
    reader1.close()
    reader2.close()
    assert [e.message for e in entries] == ["first", "second", "third", "fourth"]
    assert [e.value for e in entries] == [1, 2, 3, 4]
    assert entries[1].status is LogStatus.INFO
    assert entries[0].time == datetime(2020, 1, 1, 0, 0, 0, 1)


def test_malformed_line(tmp_path):
    path = tmp_path / "bad.log"
    path.write_text(
        "Error | 2020/01/01 00:00:00.000001 | ok | 1\nnot a log line\n",
        encoding="utf-8",
    )
    reader = Logger(LogStatus.ERROR, path, True)
    with pytest.raises(LogLineMalformedError, match="Line 2"):
        log_elems(reader).collect()
    reader.close()


def test_malformed_value(tmp_path):
    path = tmp_path / "bad.log"
    path.write_text(
        "Error | 2020/01/01 00:00:00.000001 | msg | {not json\n", encoding="utf-8"
    )
    reader = Logger(LogStatus.ERROR, path, True)
    with pytest.raises(LogLineMalformedError):
        log_elems(reader).collect()
    reader.close()


def test_set_status(tmp_path):
    with Logger(LogStatus.ERROR, tmp_path / "s.log", False) as logger:
        logger.log("one", 1)
        logger.set_status(LogStatus.WARNING)
        logger.log("two", 2)
        statuses = [e.status for e in log_elems(logger).collect()]
    assert statuses == [LogStatus.ERROR, LogStatus.WARNING]


def test_structured_values(tmp_path):
    with Logger(LogStatus.INFO, tmp_path / "v.log", False) as logger:
        logger.log("dict", {"name": "x", "items": [1, 2]})
        logger.log("unencodable", object())
        entries = log_elems(logger).collect()
    assert len(entries) == 1
    assert entries[0].value == {"name": "x", "items": [1, 2]}


def test_clear(tmp_path):
    with Logger(LogStatus.ERROR, tmp_path / "c.log", False) as logger:
        generate_log(logger, 5)
        logger.clear()
        assert log_elems(logger).count() == 0
        logger.log("after", 7)
        entries = log_elems(logger).collect()
    assert [(e.message, e.value) for e in entries] == [("after", 7)]


def test_close_stops_logging(tmp_path):
    path = tmp_path / "closed.log"
    logger = Logger(LogStatus.ERROR, path, False)
    logger.log("kept", 1)
    logger.close()
    logger.log("dropped", 2)
    assert [e.message for e in log_elems(logger).collect()] == ["kept"]


def test_blank_logger():
    logger = Logger.blank()
    logger.log("nothing", 1)
    assert logger.path is None
    with pytest.raises(LogFileNotSpecifiedError):
        logger.clear()
    with pytest.raises(LogFileNotSpecifiedError):
        log_elems(logger)


def test_join_log_by_time():
    early = LogEntry(LogStatus.ERROR, datetime(2020, 1, 1), "a", 1)
    late = LogEntry(LogStatus.ERROR, datetime(2020, 1, 2), "b", 2)
    assert join_log_by_time(early, late) is True
    assert join_log_by_time(late, early) is False
    assert join_log_by_time(early, early) is False