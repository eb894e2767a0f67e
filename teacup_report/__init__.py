"""File-hierarchy test reporter."""

from .config import ConfigError, ReporterConfig, load_config
from .errors import ReportError, ReportErrorCode
from .model import BasicNode, BasicResult, Node, Result, Status
from .reporter import FileReporter, ReporterState, RunSummary
from .synchronized import SynchronizedReporter

__all__ = [
    "BasicNode",
    "BasicResult",
    "ConfigError",
    "FileReporter",
    "Node",
    "ReportError",
    "ReportErrorCode",
    "ReporterConfig",
    "ReporterState",
    "Result",
    "RunSummary",
    "Status",
    "SynchronizedReporter",
    "load_config",
]
