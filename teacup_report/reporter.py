"""
FileReporter: saves test logs into a file hierarchy mirroring the test tree.

Layout:
    <root>/
      .log                 run summary + records with no node-specific file
      <node-name>/
        .log
        <child-node-name>/
          .log

Lifecycle (called by the host test engine, one call at a time):
    initialize -> initialized(nodes) -> started/log/skipped/finished ... -> terminated

Rules:
- No lifecycle call raises. Filesystem failures are logged and degrade to
  "no output for this node"; one unwritable node never stops its siblings.
- Event lookup is "node log, else root log". Only skipped/finished remove the
  node from the path table.
- Ancestor node logs are never used as a fallback, only the root log.
- finished() always counts the result, even when nothing can be written.
- Every record is written with a short-lived handler closed before the call returns.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Tuple, Union

from .config import ReporterConfig
from .errors import DirectoryExists, ReportError, RootConflict
from .model import Node, Result, Status
from .paths import create_log_file, create_node_directory, create_root
from .records import RecordFormatter, append_record, make_record

logger = logging.getLogger(__name__)

STARTED = "Started"


class ReporterState(str, Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZED = "initialized"  # root directory exists, node tree not built yet
    ACTIVE = "active"


@dataclass(frozen=True, slots=True)
class RunSummary:
    aborted: int = 0
    failed: int = 0
    skipped: int = 0
    successful: int = 0

    @property
    def total(self) -> int:
        return self.aborted + self.failed + self.skipped + self.successful

    def describe(self, *, legacy: bool = False) -> str:
        skipped_word = "skipper" if legacy else "skipped"
        return (
            f"{self.total} tests executed, {self.aborted} aborted, "
            f"{self.skipped} {skipped_word}, {self.failed} failed"
        )


@dataclass(slots=True)
class RunCounters:
    aborted: int = 0
    failed: int = 0
    skipped: int = 0
    successful: int = 0

    def count(self, status: Union[Status, str]) -> None:
        if status == Status.ABORTED:
            self.aborted += 1
        elif status == Status.FAILED:
            self.failed += 1
        else:
            self.successful += 1

    def snapshot(self) -> RunSummary:
        return RunSummary(
            aborted=self.aborted,
            failed=self.failed,
            skipped=self.skipped,
            successful=self.successful,
        )

    def reset(self) -> None:
        self.aborted = 0
        self.failed = 0
        self.skipped = 0
        self.successful = 0


def _describe_cause(cause: Optional[BaseException]) -> str:
    if cause is None:
        return ""
    text = str(cause)
    name = type(cause).__name__
    return f" {name}: {text}" if text else f" {name}"


class FileReporter:
    """
    Reporter that saves the logs into a file hierarchy. Each node gets its own
    directory together with a log file.

    Typical usage:
        r = FileReporter()                 # ~/.teacup/logs/<yyyyMMdd-HHmmssSSS>
        r.initialize()
        r.initialized(root_nodes)
        r.started(node); r.log(record, node); r.finished(node, result)
        r.terminated()

    Not thread-safe; see SynchronizedReporter for hosts that report from
    several worker threads.
    """

    def __init__(
        self,
        root_path: Optional[Union[Path, str]] = None,
        *,
        config: Optional[ReporterConfig] = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.config = config or ReporterConfig()
        if root_path is not None:
            self._real_path = Path(root_path).expanduser()
        else:
            self._real_path = self.config.resolve_root(clock())

        self._formatter = RecordFormatter()
        # id(node) -> (node, log path); the node is held so its id stays unique
        self._paths: Dict[int, Tuple[Node, Path]] = {}
        self._counters = RunCounters()
        self._root_path: Optional[Path] = None
        self._root_log: Optional[Path] = None
        self._state = ReporterState.UNINITIALIZED

    # --------------------------
    # Introspection
    # --------------------------

    @property
    def real_path(self) -> Path:
        """The run root this reporter will create on initialize()."""
        return self._real_path

    @property
    def state(self) -> ReporterState:
        return self._state

    @property
    def root_path(self) -> Optional[Path]:
        return self._root_path

    @property
    def root_log(self) -> Optional[Path]:
        return self._root_log

    @property
    def counters(self) -> RunSummary:
        return self._counters.snapshot()

    @property
    def active_nodes(self) -> Tuple[Node, ...]:
        """Nodes that still have a log file, in creation order."""
        return tuple(node for node, _ in self._paths.values())

    def path_for(self, node: Node) -> Optional[Path]:
        entry = self._paths.get(id(node))
        return entry[1] if entry is not None else None

    # --------------------------
    # Lifecycle
    # --------------------------

    def initialize(self) -> None:
        logger.debug("Initialize")

        try:
            root = create_root(self._real_path)
        except RootConflict as exc:
            self._report_failure(exc, level=logging.WARNING)
            return
        except ReportError as exc:
            self._report_failure(exc)
            return

        self._root_path = root
        self._state = ReporterState.INITIALIZED

        try:
            self._root_log = create_log_file(root / self.config.log_name)
        except ReportError as exc:
            self._report_failure(exc)

    def initialized(self, nodes: Iterable[Node]) -> None:
        logger.debug("Initialized")

        if self._root_path is None:
            return

        self._create_directories(nodes, self._root_path)
        self._state = ReporterState.ACTIVE

    def started(self, node: Node) -> None:
        logger.debug(STARTED)

        path = self._resolve(node, remove=False)
        if path is not None:
            self._write(path, make_record(logging.INFO, STARTED))

    def log(self, record: Union[logging.LogRecord, str], node: Node) -> None:
        logger.debug("Log")

        path = self._resolve(node, remove=False)
        if path is None:
            return
        if not isinstance(record, logging.LogRecord):
            record = make_record(logging.INFO, str(record))
        self._write(path, record)

    def skipped(self, node: Node, reason: str) -> None:
        logger.info("Skipped")

        path = self._resolve(node, remove=True)
        if path is not None:
            self._counters.skipped += 1
            self._write(path, make_record(logging.INFO, f"Skipped with reason: {reason}"))

    def finished(self, node: Node, result: Result) -> None:
        logger.debug("Finished")

        status = result.status
        self._counters.count(status)

        path = self._resolve(node, remove=True)
        if path is None:
            return

        elapsed = node.time_finished - node.time_started
        message = (
            f"Finished with status: {getattr(status, 'value', status)} after {elapsed} ms."
            + _describe_cause(result.cause)
        )
        self._write(path, make_record(logging.INFO, message))

    def terminated(self) -> RunSummary:
        logger.debug("Terminated")

        self._paths.clear()
        summary = self._counters.snapshot()

        if self._root_log is not None:
            self._write(
                self._root_log,
                make_record(logging.INFO, summary.describe(legacy=self.config.legacy_summary_text)),
            )

        self._counters.reset()
        self._root_log = None
        self._root_path = None
        self._state = ReporterState.UNINITIALIZED
        return summary

    # --------------------------
    # Internals
    # --------------------------

    def _create_directories(self, nodes: Iterable[Node], root: Path) -> None:
        """
        Build node directories depth first with an explicit worklist.

        A node whose directory or log file cannot be created gets no table entry
        and its children are not attempted; siblings carry on.
        """
        # nodes are held in `seen` so no id is reused during the walk
        seen: Dict[int, Node] = {key: n for key, (n, _) in self._paths.items()}
        stack: List[Tuple[Node, Path]] = [(n, root) for n in reversed(list(nodes))]

        while stack:
            node, parent = stack.pop()
            if id(node) in seen:
                logger.debug("Node %r already has a directory, ignoring duplicate", node.name)
                continue
            seen[id(node)] = node

            try:
                directory = create_node_directory(parent, node.name)
            except DirectoryExists as exc:
                self._report_failure(exc, level=logging.WARNING)
                continue
            except ReportError as exc:
                self._report_failure(exc)
                continue

            try:
                log_file = create_log_file(directory / self.config.log_name)
            except ReportError as exc:
                self._report_failure(exc)
                continue

            self._paths[id(node)] = (node, log_file)
            stack.extend((child, directory) for child in reversed(list(node.children)))

    def _resolve(self, node: Node, *, remove: bool) -> Optional[Path]:
        """Node log if present (optionally removing the entry), else the root log."""
        entry = self._paths.pop(id(node), None) if remove else self._paths.get(id(node))
        return entry[1] if entry is not None else self._root_log

    def _write(self, path: Path, record: logging.LogRecord) -> None:
        try:
            append_record(path, record, formatter=self._formatter)
        except ReportError as exc:
            self._report_failure(exc)

    @staticmethod
    def _report_failure(exc: ReportError, *, level: int = logging.ERROR) -> None:
        logger.log(
            level,
            "%s (code=%s, path=%s)",
            exc,
            exc.code.value,
            exc.path,
            exc_info=exc.__cause__,
        )
