"""
Lock wrapper for hosts that fire reporter callbacks from several worker threads.

FileReporter keeps its path table and counters as plain instance state; this
wrapper serialises every lifecycle call through one lock so each call still
runs to completion before the next starts.
"""

from __future__ import annotations

import logging
import threading
from typing import Iterable, Union

from .model import Node, Result
from .reporter import FileReporter, RunSummary


class SynchronizedReporter:
    def __init__(self, reporter: FileReporter) -> None:
        self.reporter = reporter
        self._lock = threading.Lock()

    def initialize(self) -> None:
        with self._lock:
            self.reporter.initialize()

    def initialized(self, nodes: Iterable[Node]) -> None:
        # Materialise outside the lock; a generator may be slow.
        nodes = list(nodes)
        with self._lock:
            self.reporter.initialized(nodes)

    def started(self, node: Node) -> None:
        with self._lock:
            self.reporter.started(node)

    def log(self, record: Union[logging.LogRecord, str], node: Node) -> None:
        with self._lock:
            self.reporter.log(record, node)

    def skipped(self, node: Node, reason: str) -> None:
        with self._lock:
            self.reporter.skipped(node, reason)

    def finished(self, node: Node, result: Result) -> None:
        with self._lock:
            self.reporter.finished(node, result)

    def terminated(self) -> RunSummary:
        with self._lock:
            return self.reporter.terminated()
