"""
teacup_report/paths.py

Filesystem helpers for the report tree.

Every helper either returns the created path or raises a ReportError
subclass carrying the target path. Nothing here logs; the caller decides how
to degrade.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from .errors import (
    DirectoryCreateFailure,
    DirectoryExists,
    FileCreateFailure,
    ReportErrorContext,
    RootConflict,
)

_SEPARATORS = tuple(s for s in ("/", "\\", os.sep, os.altsep) if s)


def is_valid_node_name(name: str) -> bool:
    """A node name must map to exactly one directory level."""
    if not isinstance(name, str) or name in ("", ".", ".."):
        return False
    if "\x00" in name:
        return False
    return not any(sep in name for sep in _SEPARATORS)


def _occupied(path: Path) -> bool:
    """True if anything (file, directory, dangling symlink) sits at `path`."""
    try:
        os.lstat(path)
    except (FileNotFoundError, NotADirectoryError):
        return False
    return True


def _directory_failure(path: Path, exc: OSError, *, node: Optional[str], phase: str) -> DirectoryCreateFailure:
    return DirectoryCreateFailure(
        path,
        context=ReportErrorContext(path=path, node=node, phase=phase, detail=str(exc)),
        cause=exc,
    )


def create_root(root: Path) -> Path:
    """Create the run root (and missing parents). An existing root is a conflict."""
    try:
        occupied = _occupied(root)
    except OSError as exc:
        raise _directory_failure(root, exc, node=None, phase="initialize") from exc
    if occupied:
        raise RootConflict(root, context=ReportErrorContext(path=root, phase="initialize"))

    try:
        root.mkdir(parents=True)
    except OSError as exc:
        raise _directory_failure(root, exc, node=None, phase="initialize") from exc
    return root


def create_node_directory(parent: Path, name: str) -> Path:
    """Create `parent/name` for one node; its parent must already exist."""
    if not is_valid_node_name(name):
        target = parent / str(name)
        raise DirectoryCreateFailure(
            target,
            context=ReportErrorContext(
                path=target, node=str(name), phase="initialized", detail="invalid node name"
            ),
        )

    target = parent / name
    try:
        occupied = _occupied(target)
    except OSError as exc:
        raise _directory_failure(target, exc, node=name, phase="initialized") from exc
    if occupied:
        raise DirectoryExists(target, context=ReportErrorContext(path=target, node=name, phase="initialized"))

    try:
        target.mkdir()
    except OSError as exc:
        raise _directory_failure(target, exc, node=name, phase="initialized") from exc
    return target


def create_log_file(path: Path) -> Path:
    """Create an empty log file; fails if anything is already there."""
    try:
        path.touch(exist_ok=False)
    except OSError as exc:
        raise FileCreateFailure(
            path,
            context=ReportErrorContext(path=path, detail=str(exc)),
            cause=exc,
        ) from exc
    return path
