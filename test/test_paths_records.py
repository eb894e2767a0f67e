# test/test_paths_records.py

from __future__ import annotations

import errno
import logging

import pytest

from teacup_report.errors import (
    DirectoryCreateFailure,
    DirectoryExists,
    FileCreateFailure,
    FileOpenFailure,
    ReportErrorCode,
    RootConflict,
)
from teacup_report.paths import create_log_file, create_node_directory, create_root, is_valid_node_name
from teacup_report.records import RecordFormatter, append_record, make_record


@pytest.mark.parametrize("name", ["test", "test_one[param]", "with space", ".hidden", "a..b"])
def test_valid_node_names(name):
    assert is_valid_node_name(name) is True


@pytest.mark.parametrize("name", ["", ".", "..", "a/b", "a\\b", "nul\x00"])
def test_invalid_node_names(name):
    assert is_valid_node_name(name) is False


def test_create_root_conflict(tmp_path):
    with pytest.raises(RootConflict) as info:
        create_root(tmp_path)

    assert info.value.code is ReportErrorCode.ROOT_CONFLICT
    assert info.value.path == tmp_path


def test_create_root_under_file_fails(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("", encoding="utf-8")

    with pytest.raises(DirectoryCreateFailure) as info:
        create_root(blocker / "run")

    assert isinstance(info.value.__cause__, OSError)


def test_create_node_directory_exists(tmp_path):
    (tmp_path / "node").mkdir()

    with pytest.raises(DirectoryExists) as info:
        create_node_directory(tmp_path, "node")

    assert info.value.code is ReportErrorCode.DIRECTORY_CREATE_FAILURE
    assert "does already exist" in str(info.value)


def test_create_node_directory_missing_parent(tmp_path):
    with pytest.raises(DirectoryCreateFailure):
        create_node_directory(tmp_path / "missing", "node")


def test_create_log_file_refuses_existing(tmp_path):
    log = create_log_file(tmp_path / ".log")
    assert log.read_text(encoding="utf-8") == ""

    with pytest.raises(FileCreateFailure) as info:
        create_log_file(log)

    assert info.value.code is ReportErrorCode.FILE_CREATE_FAILURE


def test_make_record_fields():
    record = make_record(logging.WARNING, "hello")

    assert record.levelno == logging.WARNING
    assert record.levelname == "WARNING"
    assert record.getMessage() == "hello"
    assert record.created > 0


def test_formatter_is_single_line():
    record = make_record(logging.INFO, "a\r\nb")
    text = RecordFormatter().format(record)

    assert "\n" not in text
    assert text.endswith("INFO a\\r\\nb")


def test_append_record_appends(tmp_path):
    log = tmp_path / ".log"
    append_record(log, make_record(logging.INFO, "one"))
    append_record(log, make_record(logging.INFO, "two"))

    lines = log.read_text(encoding="utf-8").splitlines()
    assert [line.split(" ", 3)[3] for line in lines] == ["one", "two"]


def test_append_record_closes_handler(monkeypatch, tmp_path):
    closed = []
    real_close = logging.FileHandler.close

    def _close(self):
        closed.append(self.baseFilename)
        real_close(self)

    monkeypatch.setattr(logging.FileHandler, "close", _close)

    append_record(tmp_path / ".log", make_record(logging.INFO, "x"))

    assert closed == [str(tmp_path / ".log")]


def test_append_record_to_directory_fails(tmp_path):
    with pytest.raises(FileOpenFailure) as info:
        append_record(tmp_path, make_record(logging.INFO, "x"))

    assert info.value.code is ReportErrorCode.FILE_OPEN_FAILURE
    assert info.value.path == tmp_path


class _NoSpaceFormatter(logging.Formatter):
    def format(self, record):
        raise OSError(errno.ENOSPC, "No space left on device")


def test_append_record_write_failure_raises(tmp_path, capsys):
    log = tmp_path / ".log"

    with pytest.raises(FileOpenFailure) as info:
        append_record(log, make_record(logging.INFO, "x"), formatter=_NoSpaceFormatter())

    assert info.value.path == log
    assert info.value.__cause__.errno == errno.ENOSPC
    assert "Traceback" not in capsys.readouterr().err


def test_overlong_node_directory_name(tmp_path):
    with pytest.raises(DirectoryCreateFailure) as info:
        create_node_directory(tmp_path, "x" * 300)

    assert info.value.path == tmp_path / ("x" * 300)
    assert info.value.__cause__.errno == errno.ENAMETOOLONG


def test_overlong_root(tmp_path):
    with pytest.raises(DirectoryCreateFailure):
        create_root(tmp_path / ("y" * 300) / "run")
