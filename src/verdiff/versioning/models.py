"""Versioning value objects."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Optional, Tuple, Union


class ComparisonOutcome(str, Enum):
    GREATER = "greater"
    LESS = "less"
    EQUAL = "equal"
    INCOMPATIBLE = "incompatible"


class BranchType(str, Enum):
    MAIN = "main"
    DEVELOP = "develop"
    FEATURE = "feature"
    RELEASE = "release"
    HOTFIX = "hotfix"
    CUSTOM = "custom"


@dataclass(frozen=True)
class SemanticInfo:
    major: int
    minor: int
    patch: int
    prerelease: Optional[str] = None
    build: Optional[str] = None


@dataclass(frozen=True)
class TimestampInfo:
    iso: str
    unix_seconds: int
    readable: str
    timezone: str = "UTC"


@dataclass(frozen=True)
class CustomInfo:
    """Opaque property bag for caller-defined version schemes."""

    properties: Mapping[str, Any] = field(default_factory=dict, hash=False)


@dataclass(frozen=True)
class BranchInfo:
    name: str
    build: int = 0
    branch_type: BranchType = BranchType.CUSTOM
    commit: Optional[str] = None


StrategyInfo = Union[SemanticInfo, TimestampInfo, CustomInfo, BranchInfo]


@dataclass(frozen=True)
class VersionMetadata:
    """A parsed version. Never mutated; bumping returns a new value."""

    version_string: str
    created_at: str
    tags: Tuple[str, ...] = ()
    strategy_specific: Optional[StrategyInfo] = None


@dataclass(frozen=True)
class VersionComparison:
    """Result of comparing version *a* against version *b*."""

    result: ComparisonOutcome
    difference: float = 0
    compatible: bool = False
    breaking_changes: bool = False
    new_features: bool = False
    bug_fixes: bool = False
    explanation: str = ""
