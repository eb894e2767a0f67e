# test/conftest.py

from __future__ import annotations

import logging

import pytest

from teacup_report.config import ENV_BASE_DIR, ENV_LEGACY_SUMMARY, ENV_ROOT
from teacup_report.model import BasicNode, BasicResult, Status
from teacup_report.reporter import FileReporter


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for key in (ENV_ROOT, ENV_BASE_DIR, ENV_LEGACY_SUMMARY):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def root(tmp_path):
    return tmp_path / "run"


@pytest.fixture
def reporter(root):
    return FileReporter(root)


@pytest.fixture
def node():
    return BasicNode(name="name")


@pytest.fixture
def tree():
    """A(C), B"""
    c = BasicNode(name="C")
    a = BasicNode(name="A", children=[c])
    b = BasicNode(name="B")
    return a, b, c


@pytest.fixture
def result_factory():
    def _make(status: Status = Status.SUCCESSFUL, cause: BaseException | None = None) -> BasicResult:
        return BasicResult(status=status, cause=cause)

    return _make


@pytest.fixture
def report_log(caplog):
    caplog.set_level(logging.WARNING, logger="teacup_report")
    return caplog
