"""Reporter configuration: defaults, optional YAML file, environment overrides."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace
from datetime import datetime
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml

logger = logging.getLogger(__name__)

DEFAULT_BASE_DIR = Path("~/.teacup/logs")
DEFAULT_RUN_ID_FORMAT = "%Y%m%d-%H%M%S"
LOG_NAME = ".log"

ENV_ROOT = "TEACUP_REPORT_ROOT"
ENV_BASE_DIR = "TEACUP_REPORT_BASE_DIR"
ENV_LEGACY_SUMMARY = "TEACUP_REPORT_LEGACY_SUMMARY"

_TRUE = ("1", "true", "yes", "on")
_FALSE = ("0", "false", "no", "off", "")


class ConfigError(ValueError):
    """Raised when a config file or override cannot be used."""


@dataclass(frozen=True)
class ReporterConfig:
    root_path: Optional[Path] = None        # explicit run root; None -> base_dir / run id
    base_dir: Path = DEFAULT_BASE_DIR
    run_id_format: str = DEFAULT_RUN_ID_FORMAT  # milliseconds are appended
    log_name: str = LOG_NAME
    legacy_summary_text: bool = False       # "skipper" wording of the old summary line

    def run_id(self, now: datetime) -> str:
        """yyyyMMdd-HHmmssSSS with the default format."""
        return now.strftime(self.run_id_format) + f"{now.microsecond // 1000:03d}"

    def resolve_root(self, now: datetime) -> Path:
        if self.root_path is not None:
            return Path(self.root_path).expanduser()
        return Path(self.base_dir).expanduser() / self.run_id(now)


def _as_bool(key: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise ConfigError(f"{key}: expected a boolean, got {value!r}")


def _from_mapping(data: Mapping[str, Any], base: ReporterConfig) -> ReporterConfig:
    known = {"root_path", "base_dir", "run_id_format", "log_name", "legacy_summary_text"}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(f"Unknown config keys: {', '.join(unknown)}")

    changes: dict[str, Any] = {}
    if data.get("root_path") is not None:
        changes["root_path"] = Path(str(data["root_path"]))
    if data.get("base_dir") is not None:
        changes["base_dir"] = Path(str(data["base_dir"]))
    if data.get("run_id_format") is not None:
        changes["run_id_format"] = str(data["run_id_format"])
    if data.get("log_name") is not None:
        log_name = str(data["log_name"])
        if not log_name or "/" in log_name or "\\" in log_name:
            raise ConfigError(f"log_name must be a plain file name, got {log_name!r}")
        changes["log_name"] = log_name
    if "legacy_summary_text" in data:
        changes["legacy_summary_text"] = _as_bool("legacy_summary_text", data["legacy_summary_text"])
    return replace(base, **changes)


def load_config(
    path: Optional[os.PathLike[str] | str] = None,
    *,
    env: Optional[Mapping[str, str]] = None,
) -> ReporterConfig:
    """Load config from an optional YAML file, then apply environment overrides.

    Environment variables take precedence over file values.
    """
    env = os.environ if env is None else env
    config = ReporterConfig()

    if path is not None:
        p = Path(path)
        try:
            data = yaml.safe_load(p.read_text(encoding="utf-8"))
        except (OSError, yaml.YAMLError) as exc:
            raise ConfigError(f"Could not read config file {p}: {exc}") from exc
        if data is None:
            data = {}
        if not isinstance(data, Mapping):
            raise ConfigError(f"Config file {p} must contain a mapping at top level")
        config = _from_mapping(data, config)
        logger.debug("Loaded reporter config from %s", p)

    overrides: dict[str, Any] = {}
    if env.get(ENV_ROOT):
        overrides["root_path"] = env[ENV_ROOT]
    if env.get(ENV_BASE_DIR):
        overrides["base_dir"] = env[ENV_BASE_DIR]
    if ENV_LEGACY_SUMMARY in env:
        overrides["legacy_summary_text"] = env[ENV_LEGACY_SUMMARY]
    if overrides:
        config = _from_mapping(overrides, config)

    return config
