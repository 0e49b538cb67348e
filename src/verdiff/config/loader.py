"""Load and merge configuration from .verdiff.toml, CLI flags, and env vars."""

from __future__ import annotations

import dataclasses
import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from verdiff.config.schema import (
    DIFF_ALGORITHMS,
    DIFF_STYLES,
    REPORT_FORMATS,
    RISK_ORDER,
    STRATEGY_NAMES,
    ChangesConfig,
    CustomSection,
    DiffConfig,
    ReportConfig,
    TimestampSection,
    VerdiffConfig,
    VersioningConfig,
)
from verdiff.errors import ConfigError

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".verdiff.toml"


def find_config_file(project_root: Path, override: Optional[str] = None) -> Optional[Path]:
    """Locate the config file. *override* takes precedence."""
    if override:
        p = Path(override)
        if not p.is_file():
            raise ConfigError(f"Config file not found: {override}")
        return p
    candidate = project_root / CONFIG_FILENAME
    return candidate if candidate.is_file() else None


def _parse_toml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"Failed to parse {path}: {exc}") from exc


def _build_section(data: Dict[str, Any], cls: type, section: str):
    """Build a dataclass from a TOML section dict, ignoring unknown keys and sub-tables."""
    raw = data.get(section, {})
    if not isinstance(raw, dict):
        raise ConfigError(f"[{section}] must be a table")
    valid_fields = {f.name for f in dataclasses.fields(cls)}
    filtered = {
        k: v for k, v in raw.items() if k in valid_fields and not isinstance(v, dict)
    }
    try:
        return cls(**filtered)
    except TypeError as exc:
        raise ConfigError(f"Invalid [{section}] section: {exc}") from exc


def _build_versioning(raw: Dict[str, Any]) -> VersioningConfig:
    section = raw.get("versioning", {})
    if not isinstance(section, dict):
        raise ConfigError("[versioning] must be a table")
    cfg = _build_section(raw, VersioningConfig, "versioning")
    cfg.timestamp = _build_section(section, TimestampSection, "timestamp")
    cfg.custom = _build_section(section, CustomSection, "custom")
    return cfg


def _check_choice(value: Any, allowed, key: str) -> None:
    if value not in allowed:
        raise ConfigError(
            f"Invalid value for {key}: {value!r}", {"allowed": ", ".join(allowed)}
        )


def _check_count(value: Any, key: str, minimum: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value < minimum:
        raise ConfigError(f"{key} must be an integer >= {minimum}, got {value!r}")


def _validate(cfg: VerdiffConfig) -> None:
    """Range-check values the dataclasses accept untyped."""
    _check_choice(cfg.versioning.strategy, STRATEGY_NAMES, "versioning.strategy")
    _check_choice(cfg.diff.style, DIFF_STYLES, "diff.style")
    _check_choice(cfg.diff.algorithm, DIFF_ALGORITHMS, "diff.algorithm")
    _check_count(cfg.diff.context_lines, "diff.context_lines", 0)
    _check_count(cfg.diff.column_width, "diff.column_width", 1)
    _check_choice(cfg.report.format, REPORT_FORMATS, "report.format")
    if cfg.report.fail_on is not None:
        _check_choice(cfg.report.fail_on, tuple(RISK_ORDER), "report.fail_on")
    for key in ("include_patterns", "exclude_patterns"):
        patterns = getattr(cfg.changes, key)
        if not isinstance(patterns, list) or not all(isinstance(p, str) for p in patterns):
            raise ConfigError(f"changes.{key} must be a list of strings")


def _merge_env_overrides(cfg: VerdiffConfig) -> None:
    """Apply VERDIFF_* environment variable overrides."""
    if val := os.environ.get("VERDIFF_STRATEGY"):
        if val in STRATEGY_NAMES:
            cfg.versioning.strategy = val  # type: ignore[assignment]
    if val := os.environ.get("VERDIFF_FORMAT"):
        if val in REPORT_FORMATS:
            cfg.report.format = val  # type: ignore[assignment]
    if val := os.environ.get("VERDIFF_DIFF_STYLE"):
        if val in DIFF_STYLES:
            cfg.diff.style = val  # type: ignore[assignment]
    if val := os.environ.get("VERDIFF_FAIL_ON"):
        if val in RISK_ORDER:
            cfg.report.fail_on = val  # type: ignore[assignment]
    if val := os.environ.get("VERDIFF_CONTEXT_LINES"):
        try:
            cfg.diff.context_lines = max(0, int(val))
        except ValueError:
            logger.warning("Ignoring non-integer VERDIFF_CONTEXT_LINES=%r", val)


def load_config(
    project_root: Path,
    config_override: Optional[str] = None,
) -> VerdiffConfig:
    """Load, validate, and return a VerdiffConfig."""
    config_path = find_config_file(project_root, config_override)

    if config_path is None:
        cfg = VerdiffConfig()
    else:
        logger.debug("Loading config from %s", config_path)
        raw = _parse_toml(config_path)
        cfg = VerdiffConfig(
            version=str(raw.get("version", "1.0")),
            versioning=_build_versioning(raw),
            diff=_build_section(raw, DiffConfig, "diff"),
            changes=_build_section(raw, ChangesConfig, "changes"),
            report=_build_section(raw, ReportConfig, "report"),
        )
        _validate(cfg)

    _merge_env_overrides(cfg)
    return cfg
