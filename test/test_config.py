# test/test_config.py

from __future__ import annotations

from datetime import datetime
from pathlib import Path

import pytest

from teacup_report.config import (
    ENV_BASE_DIR,
    ENV_LEGACY_SUMMARY,
    ENV_ROOT,
    ConfigError,
    ReporterConfig,
    load_config,
)
from teacup_report.reporter import FileReporter

NOW = datetime(2026, 10, 19, 8, 5, 3, 45_678)


def test_run_id_has_milliseconds():
    assert ReporterConfig().run_id(NOW) == "20261019-080503045"


def test_default_root_is_under_home(monkeypatch, tmp_path):
    monkeypatch.setenv("HOME", str(tmp_path))
    assert ReporterConfig().resolve_root(NOW) == tmp_path / ".teacup" / "logs" / "20261019-080503045"


def test_explicit_root_wins():
    cfg = ReporterConfig(root_path=Path("/somewhere/run"), base_dir=Path("/ignored"))
    assert cfg.resolve_root(NOW) == Path("/somewhere/run")


def test_reporter_resolves_root_once_at_construction(tmp_path):
    calls = []

    def clock():
        calls.append(1)
        return NOW

    r = FileReporter(config=ReporterConfig(base_dir=tmp_path), clock=clock)
    r.initialize()
    r.terminated()

    assert r.real_path == tmp_path / "20261019-080503045"
    assert len(calls) == 1


def test_root_argument_overrides_config(tmp_path):
    r = FileReporter(tmp_path / "arg", config=ReporterConfig(root_path=tmp_path / "cfg"))
    assert r.real_path == tmp_path / "arg"


def test_custom_log_name(tmp_path):
    r = FileReporter(tmp_path / "run", config=ReporterConfig(log_name="report.txt"))
    r.initialize()
    assert r.root_log == tmp_path / "run" / "report.txt"


def test_load_config_defaults_without_file():
    assert load_config(env={}) == ReporterConfig()


def test_load_config_from_yaml(tmp_path):
    cfg_file = tmp_path / "reporter.yaml"
    cfg_file.write_text(
        "base_dir: /var/log/teacup\n"
        "log_name: run.log\n"
        "legacy_summary_text: yes\n",
        encoding="utf-8",
    )

    cfg = load_config(cfg_file, env={})

    assert cfg.base_dir == Path("/var/log/teacup")
    assert cfg.log_name == "run.log"
    assert cfg.legacy_summary_text is True
    assert cfg.root_path is None


def test_empty_yaml_is_defaults(tmp_path):
    cfg_file = tmp_path / "empty.yaml"
    cfg_file.write_text("", encoding="utf-8")
    assert load_config(cfg_file, env={}) == ReporterConfig()


def test_environment_overrides_file(tmp_path):
    cfg_file = tmp_path / "reporter.yaml"
    cfg_file.write_text("root_path: /from/file\nlegacy_summary_text: true\n", encoding="utf-8")

    cfg = load_config(
        cfg_file,
        env={ENV_ROOT: "/from/env", ENV_BASE_DIR: "/base/env", ENV_LEGACY_SUMMARY: "0"},
    )

    assert cfg.root_path == Path("/from/env")
    assert cfg.base_dir == Path("/base/env")
    assert cfg.legacy_summary_text is False


def test_process_environment_is_default(monkeypatch, tmp_path):
    monkeypatch.setenv(ENV_ROOT, str(tmp_path / "env-root"))
    assert load_config().root_path == tmp_path / "env-root"


@pytest.mark.parametrize(
    "content, match",
    [
        ("- a\n- b\n", "mapping"),
        ("colour: blue\n", "Unknown config keys"),
        ("legacy_summary_text: maybe\n", "boolean"),
        ("log_name: a/b\n", "plain file name"),
        ("base_dir: [unclosed\n", "Could not read"),
    ],
)
def test_invalid_config_raises(tmp_path, content, match):
    cfg_file = tmp_path / "bad.yaml"
    cfg_file.write_text(content, encoding="utf-8")

    with pytest.raises(ConfigError, match=match):
        load_config(cfg_file, env={})


def test_missing_config_file_raises(tmp_path):
    with pytest.raises(ConfigError, match="Could not read"):
        load_config(tmp_path / "missing.yaml", env={})


def test_root_argument_is_expanded(monkeypatch, tmp_path):
    monkeypatch.setenv("HOME", str(tmp_path))

    assert FileReporter("~/run").real_path == tmp_path / "run"
    assert FileReporter(config=ReporterConfig(root_path=Path("~/run"))).real_path == tmp_path / "run"
