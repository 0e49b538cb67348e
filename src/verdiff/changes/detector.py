"""Change detector: file deltas, breaking API changes and impact analysis.

Every operation is a pure function of its snapshot arguments; the detector
itself only holds the path filters it was configured with.
"""

from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass, field, replace
from fnmatch import fnmatch
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

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
from verdiff.errors import InvalidVersionsError
from verdiff.snapshot.models import ExportedSymbol, FileEntry, ProjectSnapshot

logger = logging.getLogger(__name__)

IMPORT_RELATION = "import"


@dataclass(frozen=True)
class ChangeDetectionConfig:
    """Path filters applied to both snapshots before any comparison.

    An empty include list means "every path".
    """

    include_patterns: Tuple[str, ...] = ()
    exclude_patterns: Tuple[str, ...] = ()

    @classmethod
    def from_patterns(
        cls, include: Iterable[str] = (), exclude: Iterable[str] = ()
    ) -> "ChangeDetectionConfig":
        return cls(include_patterns=tuple(include), exclude_patterns=tuple(exclude))

    def accepts(self, path: str) -> bool:
        if self.include_patterns and not any(fnmatch(path, p) for p in self.include_patterns):
            return False
        return not any(fnmatch(path, p) for p in self.exclude_patterns)


def compute_change_hash(files_changed: Sequence[str], change_types: Sequence[ChangeType]) -> str:
    """Digest of the change set, independent of snapshot file order."""
    pairs = sorted(zip(files_changed, (t.value for t in change_types)))
    payload = "\n".join(f"{path}\t{kind}" for path, kind in pairs)
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()[:16]


def has_file_changed(old: FileEntry, new: FileEntry) -> bool:
    return old.fingerprint != new.fingerprint


def has_signature_changed(old: ExportedSymbol, new: ExportedSymbol) -> bool:
    if not old.signature and not new.signature:
        return False
    return old.signature != new.signature


def _require(snapshot: Optional[ProjectSnapshot], side: str) -> ProjectSnapshot:
    if not isinstance(snapshot, ProjectSnapshot):
        raise InvalidVersionsError("Both snapshots are required", {"missing": side})
    return snapshot


def _unique(items: Iterable[str]) -> List[str]:
    return list(dict.fromkeys(items))


class ChangeDetector:
    """Analyse the difference between an old and a new snapshot."""

    def __init__(self, config: Optional[ChangeDetectionConfig] = None) -> None:
        self.config = config or ChangeDetectionConfig()

    def _files(self, snapshot: ProjectSnapshot) -> Dict[str, FileEntry]:
        return {f.path: f for f in snapshot.files if self.config.accepts(f.path)}

    def filter_snapshot(self, snapshot: ProjectSnapshot) -> ProjectSnapshot:
        """Return *snapshot* restricted to the paths this detector accepts."""
        return replace(snapshot, files=tuple(self._files(snapshot).values()))

    # ---- file level ----

    def detect_changes(
        self, old: Optional[ProjectSnapshot], new: Optional[ProjectSnapshot]
    ) -> ChangeInfo:
        """Classify every path as added, deleted or modified.

        Order: additions, then deletions, then modifications, each in the
        owning snapshot's file order.
        """
        old_files = self._files(_require(old, "old"))
        new_files = self._files(_require(new, "new"))

        entries: List[Tuple[str, ChangeType, ChangeCategory]] = []
        for path in new_files:
            if path not in old_files:
                entries.append((path, ChangeType.ADDED, ChangeCategory.FEATURE))
        for path in old_files:
            if path not in new_files:
                entries.append((path, ChangeType.DELETED, ChangeCategory.BREAKING))
        for path, entry in new_files.items():
            previous = old_files.get(path)
            if previous is not None and has_file_changed(previous, entry):
                entries.append((path, ChangeType.MODIFIED, ChangeCategory.BUGFIX))

        files_changed = tuple(e[0] for e in entries)
        change_types = tuple(e[1] for e in entries)
        logger.debug(
            "Detected %d file change(s) between %s and %s",
            len(entries),
            old.version_label,
            new.version_label,
        )
        return ChangeInfo(
            files_changed=files_changed,
            change_types=change_types,
            categories=tuple(e[2] for e in entries),
            change_hash=compute_change_hash(files_changed, change_types),
        )

    # ---- API level ----

    def detect_breaking_changes(
        self, old: Optional[ProjectSnapshot], new: Optional[ProjectSnapshot]
    ) -> Tuple[BreakingChangeInfo, ...]:
        old_exports = _require(old, "old").symbol_map()
        new_exports = _require(new, "new").symbol_map()

        found: List[BreakingChangeInfo] = []
        for name, symbol in old_exports.items():
            if name not in new_exports:
                found.append(
                    BreakingChangeInfo(
                        kind=BreakingKind.REMOVED_EXPORT,
                        symbol_name=name,
                        file=symbol.file,
                        description=f"Public export '{name}' was removed",
                        severity=Severity.HIGH,
                        migration_hint=f"Remove usage of '{name}' or find alternative implementation",
                        affected_files=(symbol.file,),
                    )
                )
        for name, symbol in old_exports.items():
            current = new_exports.get(name)
            if current is not None and has_signature_changed(symbol, current):
                found.append(
                    BreakingChangeInfo(
                        kind=BreakingKind.CHANGED_SIGNATURE,
                        symbol_name=name,
                        file=current.file,
                        description=f"Signature of '{name}' has changed",
                        severity=Severity.HIGH,
                        migration_hint=f"Update calls to '{name}' to match new signature",
                        affected_files=(current.file,),
                    )
                )
        return tuple(found)

    # ---- impact ----

    def find_dependent_files(self, path: str, snapshot: ProjectSnapshot) -> List[str]:
        """One-hop neighbours of *path* over ``import`` relations, both directions."""
        neighbours: List[str] = []
        for relation in snapshot.relations:
            if relation.kind != IMPORT_RELATION:
                continue
            if relation.target == path:
                neighbours.append(relation.source)
            if relation.source == path:
                neighbours.append(relation.target)
        return _unique(n for n in neighbours if n != path)

    def analyze_impact(
        self,
        changes: ChangeInfo,
        snapshot: Optional[ProjectSnapshot],
        breaking_changes: Sequence[BreakingChangeInfo] = (),
    ) -> ChangeImpact:
        """Propagate *changes* one hop through *snapshot*'s import graph.

        Breaking API changes count toward the Breaking category, so adding
        one can only raise the resulting risk level.
        """
        snapshot = _require(snapshot, "new")

        affected: Dict[str, None] = {}
        chains: List[Tuple[str, ...]] = []
        for path in changes.files_changed:
            dependents = self.find_dependent_files(path, snapshot)
            for dependent in dependents:
                affected.setdefault(dependent, None)
            if dependents:
                chains.append((path, *dependents))

        categories = list(dict.fromkeys(changes.categories))
        if breaking_changes and ChangeCategory.BREAKING not in categories:
            categories.append(ChangeCategory.BREAKING)

        risk = calculate_risk_level(categories, changes.change_count, len(affected))
        score = calculate_impact_score(changes.change_count, len(affected), len(chains))
        logger.debug("Impact: risk=%s score=%d affected=%d", risk.value, score, len(affected))
        return ChangeImpact(
            affected_files=tuple(affected),
            dependency_chains=tuple(chains),
            risk_level=risk,
            categories=tuple(categories),
            impact_score=score,
            recommendations=tuple(impact_recommendations(categories, risk)),
        )

    # ---- report ----

    def generate_change_report(
        self, old: Optional[ProjectSnapshot], new: Optional[ProjectSnapshot]
    ) -> ChangeReport:
        changes = self.detect_changes(old, new)
        breaking = self.detect_breaking_changes(old, new)
        impact = self.analyze_impact(changes, new, breaking)

        summary = ChangeSummary(
            total_changes=changes.change_count,
            breaking_changes=len(breaking),
            new_features=changes.categories.count(ChangeCategory.FEATURE),
            bug_fixes=changes.categories.count(ChangeCategory.BUGFIX),
            risk_level=impact.risk_level,
        )
        recommendations = ChangeRecommendations(
            migration_guide=tuple(migration_guide(breaking)),
            testing_strategy=tuple(testing_strategy(changes, breaking)),
            documentation_updates=tuple(documentation_updates(changes, breaking)),
        )
        return ChangeReport(
            summary=summary,
            changes=changes,
            breaking_changes=breaking,
            impact=impact,
            recommendations=recommendations,
        )


def calculate_risk_level(
    categories: Sequence[ChangeCategory], change_count: int, affected_count: int
) -> RiskLevel:
    if ChangeCategory.BREAKING in categories or affected_count > 10:
        return RiskLevel.CRITICAL
    if affected_count > 5:
        return RiskLevel.HIGH
    if change_count > 5 or affected_count > 2:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


def calculate_impact_score(change_count: int, affected_count: int, chain_count: int) -> int:
    return min(100, change_count * 10 + affected_count * 5 + chain_count * 15)


def impact_recommendations(categories: Sequence[ChangeCategory], risk: RiskLevel) -> List[str]:
    recs: List[str] = []
    if risk.rank >= RiskLevel.HIGH.rank:
        recs += [
            "Run comprehensive test suite",
            "Review all dependent code",
            "Update documentation",
        ]
    if ChangeCategory.BREAKING in categories:
        recs += ["Create migration guide", "Notify users of breaking changes"]
    if ChangeCategory.FEATURE in categories:
        recs += ["Update feature documentation", "Add usage examples"]
    return recs


def migration_guide(breaking: Sequence[BreakingChangeInfo]) -> List[str]:
    return [f"{b.symbol_name}: {b.migration_hint or b.description}" for b in breaking]


def testing_strategy(changes: ChangeInfo, breaking: Sequence[BreakingChangeInfo]) -> List[str]:
    strategy: List[str] = []
    if breaking:
        strategy += ["Focus testing on affected APIs", "Test backward compatibility"]
    if ChangeCategory.FEATURE in changes.categories:
        strategy.append("Add tests for new features")
    if ChangeCategory.BUGFIX in changes.categories:
        strategy.append("Verify bug fixes with regression tests")
    return strategy


def documentation_updates(changes: ChangeInfo, breaking: Sequence[BreakingChangeInfo]) -> List[str]:
    updates: List[str] = []
    if breaking:
        updates += ["Update API documentation", "Create changelog entry"]
    if ChangeCategory.FEATURE in changes.categories:
        updates += ["Document new features", "Add usage examples"]
    return updates
