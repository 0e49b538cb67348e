"""Semantic versioning: MAJOR.MINOR.PATCH[-PRERELEASE][+BUILD].

Precedence follows SemVer 2.0: numeric core first, then a release outranks
any prerelease of the same core, then prerelease identifiers are compared
dot-segment by dot-segment. Build metadata never affects ordering.
"""

from __future__ import annotations

import re
from dataclasses import replace
from typing import List, Optional, Tuple, cast

from verdiff.errors import (
    InvalidBumpTypeError,
    InvalidComponentsError,
    InvalidVersionFormatError,
    MissingStrategyInfoError,
)
from verdiff.versioning.base import VersioningStrategy, describe, utc_now_iso
from verdiff.versioning.models import (
    ComparisonOutcome,
    SemanticInfo,
    VersionComparison,
    VersionMetadata,
)

_NUM = r"0|[1-9]\d*"
_PRE_IDENT = r"(?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*)"
_BUILD_IDENT = r"[0-9a-zA-Z-]+"

SEMVER_RE = re.compile(
    rf"^(?P<major>{_NUM})\.(?P<minor>{_NUM})\.(?P<patch>{_NUM})"
    rf"(?:-(?P<prerelease>{_PRE_IDENT}(?:\.{_PRE_IDENT})*))?"
    rf"(?:\+(?P<build>{_BUILD_IDENT}(?:\.{_BUILD_IDENT})*))?$",
    re.ASCII,
)

BUMP_KINDS = ("major", "minor", "patch", "prerelease")
DEFAULT_PRERELEASE_ID = "alpha"


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


def compare_prerelease(left: Optional[str], right: Optional[str]) -> int:
    """Return -1 / 0 / 1 ordering two prerelease strings (``None`` = release)."""
    if left is None and right is None:
        return 0
    if left is None:
        return 1
    if right is None:
        return -1

    left_ids = left.split(".")
    right_ids = right.split(".")
    for l_id, r_id in zip(left_ids, right_ids):
        l_num, r_num = l_id.isdigit(), r_id.isdigit()
        if l_num and r_num:
            cmp = _sign(int(l_id) - int(r_id))
        elif l_num:
            cmp = -1  # numeric identifiers sort below alphanumeric ones
        elif r_num:
            cmp = 1
        else:
            cmp = (l_id > r_id) - (l_id < r_id)
        if cmp:
            return cmp
    return _sign(len(left_ids) - len(right_ids))


def increment_prerelease(prerelease: str) -> str:
    """``alpha.1`` -> ``alpha.2``; ``beta`` -> ``beta.1``."""
    identifiers = prerelease.split(".")
    if identifiers[-1].isdigit():
        identifiers[-1] = str(int(identifiers[-1]) + 1)
    else:
        identifiers.append("1")
    return ".".join(identifiers)


class SemanticVersioning(VersioningStrategy):
    """SemVer 2.0 strategy with version bumping."""

    name = "semantic"

    def is_valid_version(self, version: str) -> bool:
        return isinstance(version, str) and SEMVER_RE.match(version) is not None

    def generate_version(self, metadata: VersionMetadata) -> str:
        self._require_metadata(metadata)
        info = metadata.strategy_specific
        if not isinstance(info, SemanticInfo):
            raise MissingStrategyInfoError(
                "Semantic version information is required", {"strategy": self.name}
            )

        components = (info.major, info.minor, info.patch)
        if any(isinstance(c, bool) or not isinstance(c, int) for c in components):
            raise InvalidComponentsError("Major, minor, and patch must be integers")
        if any(c < 0 for c in components):
            raise InvalidComponentsError(
                "Version components must be non-negative",
                {"major": str(info.major), "minor": str(info.minor), "patch": str(info.patch)},
            )

        version = f"{info.major}.{info.minor}.{info.patch}"
        if info.prerelease:
            version += f"-{info.prerelease}"
        if info.build:
            version += f"+{info.build}"
        return self._checked(version)

    def parse_version(self, version: str) -> VersionMetadata:
        match = SEMVER_RE.match(version) if isinstance(version, str) else None
        if match is None:
            raise InvalidVersionFormatError(
                f"Invalid semantic version: {version}", {"strategy": self.name}
            )
        return VersionMetadata(
            version_string=version,
            created_at=utc_now_iso(),
            strategy_specific=SemanticInfo(
                major=int(match.group("major")),
                minor=int(match.group("minor")),
                patch=int(match.group("patch")),
                prerelease=match.group("prerelease"),
                build=match.group("build"),
            ),
        )

    def compare_versions(self, a: str, b: str) -> VersionComparison:
        left = self._info(a)
        right = self._info(b)

        result, difference, level = self._order(left, right)
        return VersionComparison(
            result=result,
            difference=difference,
            compatible=left.major == right.major,
            breaking_changes=left.major != right.major,
            new_features=result is ComparisonOutcome.GREATER and level in ("major", "minor"),
            bug_fixes=result is ComparisonOutcome.GREATER,
            explanation=describe(a, b, result),
        )

    def bump_version(
        self,
        metadata: VersionMetadata,
        kind: str,
        prerelease_id: Optional[str] = None,
    ) -> VersionMetadata:
        """Return a new VersionMetadata bumped by *kind*.

        ``prerelease`` bumps the patch number and then either applies
        *prerelease_id*, increments the existing prerelease, or starts at
        ``alpha``. Build metadata is carried over unchanged.
        """
        self._require_metadata(metadata)
        info = metadata.strategy_specific
        if not isinstance(info, SemanticInfo):
            raise MissingStrategyInfoError(
                "Semantic version information is required for bumping", {"strategy": self.name}
            )
        if kind not in BUMP_KINDS:
            raise InvalidBumpTypeError(f"Invalid bump type: {kind}", {"allowed": ", ".join(BUMP_KINDS)})

        if kind == "major":
            bumped = replace(info, major=info.major + 1, minor=0, patch=0, prerelease=None)
        elif kind == "minor":
            bumped = replace(info, minor=info.minor + 1, patch=0, prerelease=None)
        elif kind == "patch":
            bumped = replace(info, patch=info.patch + 1, prerelease=None)
        else:
            if prerelease_id:
                prerelease = prerelease_id
            elif info.prerelease:
                prerelease = increment_prerelease(info.prerelease)
            else:
                prerelease = DEFAULT_PRERELEASE_ID
            bumped = replace(info, patch=info.patch + 1, prerelease=prerelease)

        draft = replace(metadata, strategy_specific=bumped)
        return replace(draft, version_string=self.generate_version(draft), created_at=utc_now_iso())

    # ---- internals ----

    def _info(self, version: str) -> SemanticInfo:
        return cast(SemanticInfo, self.parse_version(version).strategy_specific)

    @staticmethod
    def _order(left: SemanticInfo, right: SemanticInfo) -> Tuple[ComparisonOutcome, int, str]:
        pairs: List[Tuple[str, int]] = [
            ("major", left.major - right.major),
            ("minor", left.minor - right.minor),
            ("patch", left.patch - right.patch),
            ("prerelease", compare_prerelease(left.prerelease, right.prerelease)),
        ]
        for level, delta in pairs:
            if delta:
                outcome = ComparisonOutcome.GREATER if delta > 0 else ComparisonOutcome.LESS
                return outcome, delta, level
        return ComparisonOutcome.EQUAL, 0, ""
