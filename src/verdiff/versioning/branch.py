"""Branch versioning: ``<branch>-b<build>[+<commit>]`` identifiers.

Versions are only ordered within one branch; identifiers from different
branches compare as incompatible.
"""

from __future__ import annotations

import logging
import re
from dataclasses import replace
from typing import Dict, List, Optional, cast

from verdiff.errors import (
    InvalidComponentsError,
    InvalidVersionFormatError,
    MissingStrategyInfoError,
)
from verdiff.versioning.base import VersioningStrategy, describe, incompatible, utc_now_iso
from verdiff.versioning.models import (
    BranchInfo,
    BranchType,
    ComparisonOutcome,
    VersionComparison,
    VersionMetadata,
)

logger = logging.getLogger(__name__)

BRANCH_VERSION_RE = re.compile(
    r"^(?P<branch>[a-z0-9](?:[a-z0-9.\-]*[a-z0-9])?)"
    r"-b(?P<build>0|[1-9]\d*)"
    r"(?:\+(?P<commit>[0-9a-f]{7,8}))?$",
    re.ASCII,
)
_COMMIT_RE = re.compile(r"^[0-9a-fA-F]{7,40}$", re.ASCII)

_BRANCH_TYPE_PATTERNS = [
    (BranchType.MAIN, re.compile(r"^(main|master)$", re.IGNORECASE)),
    (BranchType.DEVELOP, re.compile(r"^(develop|dev)$", re.IGNORECASE)),
    (BranchType.FEATURE, re.compile(r"^feature", re.IGNORECASE)),
    (BranchType.RELEASE, re.compile(r"^release", re.IGNORECASE)),
    (BranchType.HOTFIX, re.compile(r"^hotfix", re.IGNORECASE)),
]

BRANCH_PRIORITY: Dict[BranchType, int] = {
    BranchType.MAIN: 100,
    BranchType.RELEASE: 90,
    BranchType.HOTFIX: 80,
    BranchType.DEVELOP: 70,
    BranchType.FEATURE: 60,
    BranchType.CUSTOM: 50,
}

_PROMOTION_ORDER = [
    BranchType.CUSTOM,
    BranchType.FEATURE,
    BranchType.DEVELOP,
    BranchType.RELEASE,
    BranchType.MAIN,
]


def slugify_branch(name: str) -> str:
    """``Feature/Auth_Login`` -> ``feature-auth-login``."""
    slug = re.sub(r"[^a-z0-9.\-]", "-", name.lower())
    slug = re.sub(r"-+", "-", slug).strip("-.")
    return slug or "unknown"


def detect_branch_type(name: str) -> BranchType:
    for branch_type, pattern in _BRANCH_TYPE_PATTERNS:
        if pattern.search(name):
            return branch_type
    return BranchType.CUSTOM


def should_promote(from_type: BranchType, to_type: BranchType) -> bool:
    """True when *to_type* ranks above *from_type*."""
    return BRANCH_PRIORITY[to_type] > BRANCH_PRIORITY[from_type]


def promotion_path(branch_type: BranchType) -> List[BranchType]:
    """Branch types a version on *branch_type* is promoted through, in order."""
    if branch_type not in _PROMOTION_ORDER:
        return []
    return _PROMOTION_ORDER[_PROMOTION_ORDER.index(branch_type) + 1:]


class BranchVersioning(VersioningStrategy):
    name = "branch"

    def is_valid_version(self, version: str) -> bool:
        return isinstance(version, str) and BRANCH_VERSION_RE.match(version) is not None

    def generate_version(self, metadata: VersionMetadata) -> str:
        self._require_metadata(metadata)
        info = metadata.strategy_specific
        if not isinstance(info, BranchInfo):
            raise MissingStrategyInfoError("Branch information is required", {"strategy": self.name})
        if isinstance(info.build, bool) or not isinstance(info.build, int) or info.build < 0:
            raise InvalidComponentsError(
                "Build counter must be a non-negative integer", {"build": str(info.build)}
            )

        version = f"{slugify_branch(info.name)}-b{info.build}"
        if info.commit:
            if not _COMMIT_RE.match(info.commit):
                raise InvalidComponentsError("Commit must be a hex hash", {"commit": info.commit})
            version += f"+{info.commit[:8].lower()}"
        return self._checked(version)

    def parse_version(self, version: str) -> VersionMetadata:
        match = BRANCH_VERSION_RE.match(version) if isinstance(version, str) else None
        if match is None:
            raise InvalidVersionFormatError(f"Invalid branch version: {version}", {"strategy": self.name})
        branch = match.group("branch")
        return VersionMetadata(
            version_string=version,
            created_at=utc_now_iso(),
            strategy_specific=BranchInfo(
                name=branch,
                build=int(match.group("build")),
                branch_type=detect_branch_type(branch),
                commit=match.group("commit"),
            ),
        )

    def compare_versions(self, a: str, b: str) -> VersionComparison:
        if not self.is_valid_version(a) or not self.is_valid_version(b):
            return incompatible(a, b, f"Cannot compare versions: {a} and {b}")

        left = self._info(a)
        right = self._info(b)
        if left.name != right.name:
            logger.debug("Branch versions %r and %r come from different branches", a, b)
            return incompatible(
                a,
                b,
                f"Versions from different branches: {left.name} vs {right.name}",
                breaking=True,
            )

        delta = left.build - right.build
        if delta > 0:
            result = ComparisonOutcome.GREATER
        elif delta < 0:
            result = ComparisonOutcome.LESS
        else:
            result = ComparisonOutcome.EQUAL

        return VersionComparison(
            result=result,
            difference=delta,
            compatible=True,
            new_features=result is ComparisonOutcome.GREATER,
            bug_fixes=result is ComparisonOutcome.GREATER,
            explanation=describe(a, b, result),
        )

    def bump_build(self, metadata: VersionMetadata, commit: Optional[str] = None) -> VersionMetadata:
        """Return a new VersionMetadata with the build counter incremented."""
        self._require_metadata(metadata)
        info = metadata.strategy_specific
        if not isinstance(info, BranchInfo):
            raise MissingStrategyInfoError("Branch information is required for bumping")
        bumped = replace(info, build=info.build + 1, commit=commit)
        draft = replace(metadata, strategy_specific=bumped)
        return replace(draft, version_string=self.generate_version(draft), created_at=utc_now_iso())

    def _info(self, version: str) -> BranchInfo:
        return cast(BranchInfo, self.parse_version(version).strategy_specific)
