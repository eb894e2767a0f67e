"""
Report error contract for the file reporter.

This module defines structured exceptions raised by the filesystem helpers.
They never leave the reporter: FileReporter catches them at the failing call,
logs them and degrades to "no output for this node".

Taxonomy:
- ROOT_CONFLICT: run root already exists at initialize time (run produces no files)
- DIRECTORY_CREATE_FAILURE: root or node directory could not be created
- FILE_CREATE_FAILURE: log file could not be created after its directory was
- FILE_OPEN_FAILURE: log file could not be opened for append (single record dropped)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional


class ReportErrorCode(str, Enum):
    """Stable error codes for logging."""
    ROOT_CONFLICT = "root_conflict"
    DIRECTORY_CREATE_FAILURE = "directory_create_failure"
    FILE_CREATE_FAILURE = "file_create_failure"
    FILE_OPEN_FAILURE = "file_open_failure"


@dataclass(frozen=True, slots=True)
class ReportErrorContext:
    """
    Optional structured context for diagnostics.
    """
    path: Optional[Path] = None
    node: Optional[str] = None
    phase: Optional[str] = None  # e.g. "initialize", "initialized", "started", "finished"
    detail: Optional[str] = None


class ReportError(OSError):
    """
    Base exception for reporter filesystem failures.

    `message` should be clear English suitable for logs.
    `code` is a stable identifier suitable for programmatic mapping.
    """

    def __init__(
        self,
        message: str,
        *,
        code: ReportErrorCode,
        context: Optional[ReportErrorContext] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.code: ReportErrorCode = code
        self.context: Optional[ReportErrorContext] = context
        self.__cause__ = cause

    @property
    def path(self) -> Optional[Path]:
        return self.context.path if self.context is not None else None


class RootConflict(ReportError):
    """Raised when the run root directory already exists."""

    def __init__(
        self,
        path: Path,
        *,
        context: Optional[ReportErrorContext] = None,
    ) -> None:
        super().__init__(
            f"The directory {path} does already exist. "
            "All logs belonging to this directory will not be saved.",
            code=ReportErrorCode.ROOT_CONFLICT,
            context=context or ReportErrorContext(path=path),
        )


class DirectoryCreateFailure(ReportError):
    """
    Raised when a directory could not be created.

    For a node directory this also covers the "already exists" case: the node
    and its whole subtree get no output.
    """

    def __init__(
        self,
        path: Path,
        *,
        context: Optional[ReportErrorContext] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(
            f"The directory {path} could not be created. "
            "All logs belonging to this directory will not be saved.",
            code=ReportErrorCode.DIRECTORY_CREATE_FAILURE,
            context=context or ReportErrorContext(path=path),
            cause=cause,
        )


class FileCreateFailure(ReportError):
    """Raised when a log file could not be created."""

    def __init__(
        self,
        path: Path,
        *,
        context: Optional[ReportErrorContext] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(
            f"The file {path} could not be created. The logs will not be saved.",
            code=ReportErrorCode.FILE_CREATE_FAILURE,
            context=context or ReportErrorContext(path=path),
            cause=cause,
        )


class FileOpenFailure(ReportError):
    """Raised when a log file could not be opened for append."""

    def __init__(
        self,
        path: Path,
        *,
        context: Optional[ReportErrorContext] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(
            f"The file {path} could not be written to. The logs will not be saved.",
            code=ReportErrorCode.FILE_OPEN_FAILURE,
            context=context or ReportErrorContext(path=path),
            cause=cause,
        )


class DirectoryExists(DirectoryCreateFailure):
    """Raised when a node directory is already present; the subtree is not attempted."""

    def __init__(
        self,
        path: Path,
        *,
        context: Optional[ReportErrorContext] = None,
    ) -> None:
        ReportError.__init__(
            self,
            f"The directory {path} does already exist. "
            "All logs belonging to this directory will not be saved.",
            code=ReportErrorCode.DIRECTORY_CREATE_FAILURE,
            context=context or ReportErrorContext(path=path),
        )
