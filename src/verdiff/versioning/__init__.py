"""Versioning strategies: semantic, timestamp, custom and branch."""

from verdiff.versioning.base import VersioningStrategy
from verdiff.versioning.branch import BranchVersioning
from verdiff.versioning.custom import CustomConfig, CustomVersioning
from verdiff.versioning.models import (
    BranchInfo,
    BranchType,
    ComparisonOutcome,
    CustomInfo,
    SemanticInfo,
    TimestampInfo,
    VersionComparison,
    VersionMetadata,
)
from verdiff.versioning.registry import (
    STRATEGIES,
    available_strategies,
    build_strategy,
    strategy_from_config,
)
from verdiff.versioning.semantic import SemanticVersioning
from verdiff.versioning.timestamp import TimestampConfig, TimestampVersioning

__all__ = [
    "STRATEGIES",
    "BranchInfo",
    "BranchType",
    "BranchVersioning",
    "ComparisonOutcome",
    "CustomConfig",
    "CustomInfo",
    "CustomVersioning",
    "SemanticInfo",
    "SemanticVersioning",
    "TimestampConfig",
    "TimestampInfo",
    "TimestampVersioning",
    "VersionComparison",
    "VersionMetadata",
    "VersioningStrategy",
    "available_strategies",
    "build_strategy",
    "strategy_from_config",
]
