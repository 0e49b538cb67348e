"""Comparison result data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

from verdiff.changes.models import ChangeReport, RiskLevel
from verdiff.diff.models import DiffReport
from verdiff.snapshot.models import ExportedSymbol


class ApiChangeType(str, Enum):
    ADDED = "added"
    REMOVED = "removed"
    MODIFIED = "modified"


@dataclass(frozen=True)
class ApiChange:
    change_type: ApiChangeType
    name: str
    file: str
    breaking: bool = False
    old_value: Optional[ExportedSymbol] = None
    new_value: Optional[ExportedSymbol] = None


@dataclass(frozen=True)
class MetricDelta:
    old: float
    new: float

    @property
    def difference(self) -> float:
        return self.new - self.old


@dataclass(frozen=True)
class QualityMetricDiff:
    cyclomatic: MetricDelta
    cognitive: MetricDelta
    maintainability: MetricDelta
    score: MetricDelta
    issues: MetricDelta


@dataclass(frozen=True)
class ComparisonSummary:
    total_changes: int = 0
    new_features: int = 0
    breaking_changes: int = 0
    bug_fixes: int = 0


@dataclass(frozen=True)
class ComparisonRecommendations:
    migration_guide: str = ""
    testing_strategy: str = ""
    documentation_updates: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ComparisonResult:
    """Aggregate view of one snapshot pair. Built once, never mutated."""

    project: str
    version_a: str
    version_b: str
    generated_at: str
    summary: ComparisonSummary
    files_added: Tuple[str, ...]
    files_modified: Tuple[str, ...]
    files_deleted: Tuple[str, ...]
    api_changes: Tuple[ApiChange, ...]
    quality: QualityMetricDiff
    change_report: ChangeReport
    recommendations: ComparisonRecommendations = field(default_factory=ComparisonRecommendations)
    diff: Optional[DiffReport] = None

    @property
    def risk_level(self) -> RiskLevel:
        return self.change_report.impact.risk_level

    @property
    def breaking_api_changes(self) -> Tuple[ApiChange, ...]:
        return tuple(c for c in self.api_changes if c.breaking)


@dataclass(frozen=True)
class ReportMetadata:
    generated_at: str
    version_a: str
    version_b: str
    total_changes: int


@dataclass(frozen=True)
class RenderedReport:
    format: str
    content: str
    metadata: ReportMetadata
