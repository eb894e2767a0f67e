"""Record construction and single-shot appends to report log files."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

from .errors import FileOpenFailure, ReportErrorContext

RECORD_FORMAT = "%(asctime)s %(levelname)s %(message)s"
RECORD_LOGGER_NAME = "teacup.report"


class RecordFormatter(logging.Formatter):
    """
    One line per record, identical for the root log and node logs.

    Timestamps come from the record itself (LogRecord.created), so a record
    handed in by the host keeps the moment it was produced.
    """

    def __init__(self, fmt: str = RECORD_FORMAT) -> None:
        super().__init__(fmt)

    def format(self, record: logging.LogRecord) -> str:
        text = super().format(record)
        return text.replace("\r", "\\r").replace("\n", "\\n")


def _write_failure(path: Path, exc: BaseException) -> FileOpenFailure:
    return FileOpenFailure(
        path,
        context=ReportErrorContext(path=path, detail=str(exc)),
        cause=exc,
    )


class _ReportFileHandler(logging.FileHandler):
    """FileHandler that raises write failures instead of printing them to stderr."""

    def handleError(self, record: logging.LogRecord) -> None:
        exc = sys.exc_info()[1]
        raise _write_failure(Path(self.baseFilename), exc) from exc


def make_record(level: int, message: str, *, name: str = RECORD_LOGGER_NAME) -> logging.LogRecord:
    """Build a record stamped with the current time."""
    return logging.makeLogRecord(
        {
            "name": name,
            "levelno": level,
            "levelname": logging.getLevelName(level),
            "msg": message,
        }
    )


def append_record(
    path: Path,
    record: logging.LogRecord,
    *,
    formatter: Optional[logging.Formatter] = None,
) -> None:
    """
    Append a single record to `path`.

    The handler is opened, used once and closed before returning; no file
    handle outlives the call. Raises FileOpenFailure if the file cannot be
    opened for append, or if writing or flushing the record fails.
    """
    try:
        handler = _ReportFileHandler(path, mode="a", encoding="utf-8")
    except OSError as exc:
        raise _write_failure(path, exc) from exc

    try:
        handler.setFormatter(formatter or RecordFormatter())
        handler.handle(record)
    finally:
        try:
            handler.close()
        except OSError as exc:
            raise _write_failure(path, exc) from exc
