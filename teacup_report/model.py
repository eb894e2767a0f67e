"""
teacup_report/model.py

Host-engine collaborator contract.

The test engine owns nodes and results; the reporter only reads them:
- Node: name, children, time_started / time_finished (epoch milliseconds)
- Result: status and an optional failure cause

BasicNode / BasicResult are plain implementations for hosts without their own
types (and for tests). The reporter tracks nodes by identity, so host nodes need
not be hashable and two nodes with the same name are still different nodes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Protocol, Sequence, runtime_checkable


class Status(str, Enum):
    SUCCESSFUL = "SUCCESSFUL"
    FAILED = "FAILED"
    ABORTED = "ABORTED"


@runtime_checkable
class Node(Protocol):
    """A test or test group in the engine's tree."""

    @property
    def name(self) -> str: ...

    @property
    def children(self) -> Sequence["Node"]: ...

    @property
    def time_started(self) -> int: ...

    @property
    def time_finished(self) -> int: ...


@runtime_checkable
class Result(Protocol):
    """Outcome of a finished node."""

    @property
    def status(self) -> Status: ...

    @property
    def cause(self) -> Optional[BaseException]: ...


@dataclass(eq=False)
class BasicNode:
    name: str
    children: List["BasicNode"] = field(default_factory=list)
    time_started: int = 0
    time_finished: int = 0


@dataclass(frozen=True)
class BasicResult:
    status: Status = Status.SUCCESSFUL
    cause: Optional[BaseException] = None
