"""Configuration schema: dataclasses for every config section."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Literal, Optional

RiskLevelName = Literal["low", "medium", "high", "critical"]
ReportFormat = Literal["terminal", "json", "markdown", "html"]
DiffStyle = Literal["unified", "context", "side-by-side"]

RISK_ORDER: dict[str, int] = {
    "low": 0,
    "medium": 1,
    "high": 2,
    "critical": 3,
}

REPORT_FORMATS = ("terminal", "json", "markdown", "html")
DIFF_STYLES = ("unified", "context", "side-by-side")
DIFF_ALGORITHMS = ("simple", "sequence")
STRATEGY_NAMES = ("semantic", "timestamp", "custom", "branch")


def risk_at_or_above(level: str, threshold: str) -> bool:
    """Return True if risk *level* is at or above *threshold*."""
    return RISK_ORDER.get(level, 0) >= RISK_ORDER.get(threshold, 0)


@dataclass
class TimestampSection:
    format: Literal["iso", "unix", "readable"] = "iso"
    precision: str = "second"  # day | hour | minute | second | millisecond | microsecond
    timezone: str = "UTC"
    prefix: str = ""
    suffix: str = ""


@dataclass
class CustomSection:
    pattern: str = ""
    validation: Optional[str] = None


@dataclass
class VersioningConfig:
    strategy: Literal["semantic", "timestamp", "custom", "branch"] = "semantic"
    timestamp: TimestampSection = field(default_factory=TimestampSection)
    custom: CustomSection = field(default_factory=CustomSection)


@dataclass
class DiffConfig:
    style: DiffStyle = "unified"
    context_lines: int = 3
    algorithm: Literal["simple", "sequence"] = "simple"
    column_width: int = 40  # side-by-side column width


@dataclass
class ChangesConfig:
    include_patterns: List[str] = field(default_factory=list)  # empty = everything
    exclude_patterns: List[str] = field(default_factory=list)


@dataclass
class ReportConfig:
    format: ReportFormat = "terminal"
    fail_on: Optional[RiskLevelName] = None  # exit 1 when risk is at or above
    include_diff: bool = False


@dataclass
class VerdiffConfig:
    version: str = "1.0"
    versioning: VersioningConfig = field(default_factory=VersioningConfig)
    diff: DiffConfig = field(default_factory=DiffConfig)
    changes: ChangesConfig = field(default_factory=ChangesConfig)
    report: ReportConfig = field(default_factory=ReportConfig)
