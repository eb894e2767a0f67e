#!/usr/bin/env python3
"""
File reporter smoke test tool

Drives a FileReporter through a whole lifecycle from a scenario file and
prints what ended up on disk.

Scenario (YAML or JSON):
    nodes:
      - name: suite
        children:
          - name: case
    events:
      - {event: started, node: suite/case}
      - {event: log, node: suite/case, message: "hello", level: INFO}
      - {event: finished, node: suite/case, status: FAILED, elapsed_ms: 12, cause: "boom"}
      - {event: skipped, node: suite, reason: "not today"}

Nodes are referenced by their slash-joined path from the top of the tree.
A node path that is not in the tree still gets a detached node, so events
for unknown nodes exercise the root log fallback.
"""
from __future__ import annotations

import argparse
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping

import yaml

from teacup_report.config import ConfigError, load_config
from teacup_report.model import BasicNode, BasicResult, Status
from teacup_report.records import make_record
from teacup_report.reporter import FileReporter

EVENTS = ("started", "log", "skipped", "finished")


class ScenarioError(ValueError):
    """Raised when a scenario file is malformed."""


@dataclass
class Args:
    scenario: Path
    root: Path | None
    config: Path | None
    verbose: bool


def _emit_event(events: list[dict[str, Any]], event: str, **kwargs: Any) -> None:
    obj = {"event": event, **kwargs}
    events.append(obj)
    print(json.dumps(obj, indent=2, sort_keys=True, default=str))


def _build_nodes(specs: Iterable[Mapping[str, Any]], prefix: str, index: Dict[str, BasicNode]) -> List[BasicNode]:
    nodes = []
    for spec in specs:
        if not isinstance(spec, Mapping) or "name" not in spec:
            raise ScenarioError(f"Node entry needs a name: {spec!r}")
        name = str(spec["name"])
        path = f"{prefix}/{name}" if prefix else name
        node = BasicNode(name=name)
        node.children = _build_nodes(spec.get("children") or [], path, index)
        index.setdefault(path, node)
        nodes.append(node)
    return nodes


def load_scenario(path: Path) -> tuple[List[BasicNode], Dict[str, BasicNode], List[Mapping[str, Any]]]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as exc:
        raise ScenarioError(f"Could not read scenario {path}: {exc}") from exc
    if not isinstance(data, Mapping):
        raise ScenarioError("Scenario must be a mapping with 'nodes' and 'events'")

    index: Dict[str, BasicNode] = {}
    roots = _build_nodes(data.get("nodes") or [], "", index)

    events = data.get("events") or []
    for evt in events:
        if not isinstance(evt, Mapping) or evt.get("event") not in EVENTS:
            raise ScenarioError(f"Unknown event entry: {evt!r}")
        if "node" not in evt:
            raise ScenarioError(f"Event needs a node: {evt!r}")
        if evt["event"] == "log" and not isinstance(_level(evt), int):
            raise ScenarioError(f"Unknown log level in {evt!r}")
        if evt["event"] == "finished":
            try:
                _status(evt)
            except ValueError as exc:
                raise ScenarioError(f"Unknown status in {evt!r}") from exc
    return roots, index, events


def _level(evt: Mapping[str, Any]) -> Any:
    return logging.getLevelName(str(evt.get("level", "INFO")).upper())


def _status(evt: Mapping[str, Any]) -> Status:
    return Status(str(evt.get("status", "SUCCESSFUL")).upper())


def _node(index: Dict[str, BasicNode], ref: Any) -> BasicNode:
    key = str(ref)
    if key not in index:
        index[key] = BasicNode(name=key.rsplit("/", 1)[-1])
    return index[key]


def run_scenario(reporter: FileReporter, roots: List[BasicNode], index: Dict[str, BasicNode], events: List[Mapping[str, Any]]):
    reporter.initialize()
    reporter.initialized(roots)

    for evt in events:
        node = _node(index, evt["node"])
        kind = evt["event"]
        if kind == "started":
            reporter.started(node)
        elif kind == "log":
            reporter.log(make_record(_level(evt), str(evt.get("message", ""))), node)
        elif kind == "skipped":
            reporter.skipped(node, str(evt.get("reason", "")))
        else:
            node.time_finished = node.time_started + int(evt.get("elapsed_ms", 0))
            cause = RuntimeError(str(evt["cause"])) if evt.get("cause") else None
            reporter.finished(node, BasicResult(status=_status(evt), cause=cause))

    return reporter.terminated()


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(prog="teacup-report-smoketest")

    p.add_argument("scenario", type=Path, help="YAML/JSON scenario file")
    p.add_argument("--root", type=Path, default=None, help="Run root (must not exist yet)")
    p.add_argument("--config", type=Path, default=None, help="Reporter config YAML")
    p.add_argument("--verbose", action="store_true")

    ns = p.parse_args(argv)
    args = Args(scenario=ns.scenario, root=ns.root, config=ns.config, verbose=bool(ns.verbose))

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    events: list[dict[str, Any]] = []
    try:
        config = load_config(args.config)
        roots, index, scenario_events = load_scenario(args.scenario)
    except (ConfigError, ScenarioError) as e:
        _emit_event(events, "error", message=str(e))
        return 2

    reporter = FileReporter(args.root, config=config)
    real_path = reporter.real_path
    summary = run_scenario(reporter, roots, index, scenario_events)

    files = sorted(str(f.relative_to(real_path)) for f in real_path.rglob("*") if f.is_file()) if real_path.is_dir() else []
    _emit_event(
        events,
        "ok",
        root=real_path,
        total=summary.total,
        aborted=summary.aborted,
        failed=summary.failed,
        skipped=summary.skipped,
        successful=summary.successful,
        files=files,
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
