"""File deltas, breaking API changes and dependency impact."""

from verdiff.changes.detector import ChangeDetectionConfig, ChangeDetector, compute_change_hash
from verdiff.changes.models import (
    BreakingChangeInfo,
    BreakingKind,
    ChangeCategory,
    ChangeImpact,
    ChangeInfo,
    ChangeRecommendations,
    ChangeReport,
    ChangeSummary,
    ChangeType,
    RiskLevel,
    Severity,
)

__all__ = [
    "BreakingChangeInfo",
    "BreakingKind",
    "ChangeCategory",
    "ChangeDetectionConfig",
    "ChangeDetector",
    "ChangeImpact",
    "ChangeInfo",
    "ChangeRecommendations",
    "ChangeReport",
    "ChangeSummary",
    "ChangeType",
    "RiskLevel",
    "Severity",
    "compute_change_hash",
]
