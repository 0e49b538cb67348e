"""Custom versioning: caller-supplied hooks with pattern fallbacks.

Every hook is an explicit, optional field on :class:`CustomConfig`. When a
hook is absent the strategy falls back to:

* generate: ``{key}`` placeholder substitution from ``CustomInfo.properties``
* parse: reverse-matching the same pattern into properties
* compare: plain lexicographic string comparison
* validate: the ``validation`` regex, else the pattern, else "non-empty"
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional

from verdiff.errors import (
    InvalidGeneratedVersionError,
    InvalidMetadataError,
    InvalidVersionFormatError,
    MissingStrategyInfoError,
)
from verdiff.versioning.base import VersioningStrategy, describe, incompatible, utc_now_iso
from verdiff.versioning.models import (
    ComparisonOutcome,
    CustomInfo,
    VersionComparison,
    VersionMetadata,
)

logger = logging.getLogger(__name__)

_PLACEHOLDER_RE = re.compile(r"\{(\w+)\}")

GenerateHook = Callable[[VersionMetadata], str]
ParseHook = Callable[[str], Mapping[str, Any]]
CompareHook = Callable[[str, str], Optional[int]]  # cmp-style; None = incompatible
ValidateHook = Callable[[str], bool]


@dataclass(frozen=True)
class CustomConfig:
    pattern: str = ""
    validation: Optional[str] = None  # regex, matched against the whole version
    generate_function: Optional[GenerateHook] = field(default=None, compare=False)
    parse_function: Optional[ParseHook] = field(default=None, compare=False)
    compare_function: Optional[CompareHook] = field(default=None, compare=False)
    validation_function: Optional[ValidateHook] = field(default=None, compare=False)


def pattern_keys(pattern: str) -> List[str]:
    return _PLACEHOLDER_RE.findall(pattern)


def pattern_to_regex(pattern: str) -> "re.Pattern[str]":
    """Turn ``v{major}-{env}`` into an anchored regex with named groups."""
    parts: List[str] = []
    seen: set[str] = set()
    pos = 0
    for match in _PLACEHOLDER_RE.finditer(pattern):
        parts.append(re.escape(pattern[pos:match.start()]))
        key = match.group(1)
        parts.append(f"(?P={key})" if key in seen else f"(?P<{key}>.+?)")
        seen.add(key)
        pos = match.end()
    parts.append(re.escape(pattern[pos:]))
    return re.compile("^" + "".join(parts) + "$", re.DOTALL)


def substitute(pattern: str, properties: Mapping[str, Any]) -> str:
    """Replace ``{key}`` tokens; raises MissingStrategyInfoError on unknown keys."""
    missing = [k for k in pattern_keys(pattern) if properties.get(k) is None]
    if missing:
        raise MissingStrategyInfoError(
            "Pattern placeholders have no value", {"missing": ", ".join(sorted(set(missing)))}
        )
    return _PLACEHOLDER_RE.sub(lambda m: str(properties[m.group(1)]), pattern)


class CustomVersioning(VersioningStrategy):
    name = "custom"

    def __init__(self, config: Optional[CustomConfig] = None) -> None:
        self.config = config or CustomConfig()
        self._pattern_re = pattern_to_regex(self.config.pattern) if self.config.pattern else None
        self._validation_re = (
            re.compile(self.config.validation) if self.config.validation else None
        )

    def is_valid_version(self, version: str) -> bool:
        if not isinstance(version, str) or not version.strip():
            return False
        if self.config.validation_function is not None:
            try:
                return bool(self.config.validation_function(version))
            except Exception:
                logger.debug("Custom validation hook failed for %r", version, exc_info=True)
                return False
        if self._validation_re is not None:
            return self._validation_re.fullmatch(version) is not None
        if self._pattern_re is not None:
            return self._pattern_re.match(version) is not None
        return True

    def generate_version(self, metadata: VersionMetadata) -> str:
        self._require_metadata(metadata)

        if self.config.generate_function is not None:
            try:
                version = self.config.generate_function(metadata)
            except Exception as exc:
                raise InvalidGeneratedVersionError(
                    f"Custom generate hook failed: {exc}", {"strategy": self.name}
                ) from exc
            if not isinstance(version, str):
                raise InvalidGeneratedVersionError(
                    "Custom generate hook must return a string", {"got": type(version).__name__}
                )
            return self._checked(version)

        if self.config.pattern:
            info = metadata.strategy_specific
            if not isinstance(info, CustomInfo):
                raise MissingStrategyInfoError(
                    "Custom properties are required for pattern generation",
                    {"pattern": self.config.pattern},
                )
            return self._checked(substitute(self.config.pattern, info.properties))

        if not metadata.version_string:
            raise InvalidMetadataError("Metadata carries no version string", {"strategy": self.name})
        return self._checked(metadata.version_string)

    def parse_version(self, version: str) -> VersionMetadata:
        if not self.is_valid_version(version):
            raise InvalidVersionFormatError(f"Invalid custom version: {version}", {"strategy": self.name})

        properties: Dict[str, Any] = {}
        if self.config.parse_function is not None:
            try:
                properties = dict(self.config.parse_function(version) or {})
            except Exception as exc:
                raise InvalidVersionFormatError(
                    f"Custom parse hook failed: {exc}", {"strategy": self.name}
                ) from exc
        elif self._pattern_re is not None:
            match = self._pattern_re.match(version)
            if match is not None:
                properties = match.groupdict()

        return VersionMetadata(
            version_string=version,
            created_at=utc_now_iso(),
            strategy_specific=CustomInfo(properties=properties),
        )

    def compare_versions(self, a: str, b: str) -> VersionComparison:
        if not self.is_valid_version(a) or not self.is_valid_version(b):
            return incompatible(a, b, f"Cannot compare versions: {a} and {b}")

        if self.config.compare_function is not None:
            try:
                cmp = self.config.compare_function(a, b)
            except Exception:
                logger.debug("Custom compare hook failed for %r vs %r", a, b, exc_info=True)
                return incompatible(a, b, f"Error comparing versions: {a} and {b}")
            if cmp is None:
                return incompatible(a, b)
        else:
            cmp = (a > b) - (a < b)

        if cmp > 0:
            result = ComparisonOutcome.GREATER
        elif cmp < 0:
            result = ComparisonOutcome.LESS
        else:
            result = ComparisonOutcome.EQUAL

        return VersionComparison(
            result=result,
            difference=cmp,
            compatible=True,
            new_features=result is ComparisonOutcome.GREATER,
            explanation=describe(a, b, result),
        )
