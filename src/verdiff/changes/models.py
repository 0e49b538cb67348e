"""Change detection data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple


class ChangeType(str, Enum):
    ADDED = "added"
    DELETED = "deleted"
    MODIFIED = "modified"


class ChangeCategory(str, Enum):
    FEATURE = "feature"
    BREAKING = "breaking"
    BUGFIX = "bugfix"


class RiskLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return _RISK_RANK[self]


_RISK_RANK = {
    RiskLevel.LOW: 0,
    RiskLevel.MEDIUM: 1,
    RiskLevel.HIGH: 2,
    RiskLevel.CRITICAL: 3,
}


Severity = RiskLevel


class BreakingKind(str, Enum):
    REMOVED_EXPORT = "removed_export"
    CHANGED_SIGNATURE = "changed_signature"
    # reserved for finer-grained signature diffing
    CHANGED_RETURN_TYPE = "changed_return_type"
    CHANGED_PARAMETER = "changed_parameter"
    DEPRECATED = "deprecated"


@dataclass(frozen=True)
class ChangeInfo:
    """File-level delta between two snapshots.

    ``files_changed``, ``change_types`` and ``categories`` are parallel
    tuples: entry *i* of each describes the same file.
    """

    files_changed: Tuple[str, ...] = ()
    change_types: Tuple[ChangeType, ...] = ()
    categories: Tuple[ChangeCategory, ...] = ()
    change_hash: str = ""

    @property
    def change_count(self) -> int:
        return len(self.files_changed)

    def files_of(self, change_type: ChangeType) -> Tuple[str, ...]:
        return tuple(
            path for path, kind in zip(self.files_changed, self.change_types) if kind is change_type
        )


@dataclass(frozen=True)
class BreakingChangeInfo:
    kind: BreakingKind
    symbol_name: str
    file: str
    description: str
    severity: Severity = Severity.HIGH
    migration_hint: Optional[str] = None
    affected_files: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ChangeImpact:
    affected_files: Tuple[str, ...] = ()
    dependency_chains: Tuple[Tuple[str, ...], ...] = ()
    risk_level: RiskLevel = RiskLevel.LOW
    categories: Tuple[ChangeCategory, ...] = ()
    impact_score: int = 0
    recommendations: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ChangeSummary:
    total_changes: int = 0
    breaking_changes: int = 0
    new_features: int = 0
    bug_fixes: int = 0
    risk_level: RiskLevel = RiskLevel.LOW


@dataclass(frozen=True)
class ChangeRecommendations:
    migration_guide: Tuple[str, ...] = ()
    testing_strategy: Tuple[str, ...] = ()
    documentation_updates: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ChangeReport:
    """Everything the detector knows about one snapshot pair."""

    summary: ChangeSummary
    changes: ChangeInfo
    breaking_changes: Tuple[BreakingChangeInfo, ...] = ()
    impact: ChangeImpact = field(default_factory=ChangeImpact)
    recommendations: ChangeRecommendations = field(default_factory=ChangeRecommendations)
