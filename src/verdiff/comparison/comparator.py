"""Version comparator: ties change detection, diffing and metric deltas together.

The comparator builds one :class:`ComparisonResult` per snapshot pair and
every serializer renders from that single value.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import List, Optional, Sequence, Tuple

from verdiff.changes.detector import ChangeDetector
from verdiff.changes.models import ChangeType
from verdiff.comparison.models import (
    ApiChange,
    ApiChangeType,
    ComparisonRecommendations,
    ComparisonResult,
    ComparisonSummary,
    MetricDelta,
    QualityMetricDiff,
    RenderedReport,
    ReportMetadata,
)
from verdiff.diff.generator import DiffGenerator
from verdiff.errors import InvalidFormatError, InvalidVersionsError
from verdiff.snapshot.models import ExportedSymbol, ProjectSnapshot

logger = logging.getLogger(__name__)

REPORT_ENCODINGS = ("json", "markdown", "html")


def _signature(symbol: ExportedSymbol) -> Optional[str]:
    return symbol.signature or symbol.metadata.get("signature")


def is_export_modified(old: ExportedSymbol, new: ExportedSymbol) -> bool:
    return (
        old.kind != new.kind
        or old.file != new.file
        or old.is_default != new.is_default
        or old.is_exported != new.is_exported
        or old.signature != new.signature
        or dict(old.metadata) != dict(new.metadata)
    )


def is_breaking_change(old: ExportedSymbol, new: ExportedSymbol) -> bool:
    if old.kind != new.kind or old.file != new.file or old.is_default != new.is_default:
        return True
    if old.is_exported and not new.is_exported:
        return True
    return _signature(old) != _signature(new)


def _require(a: Optional[ProjectSnapshot], b: Optional[ProjectSnapshot]) -> None:
    if not isinstance(a, ProjectSnapshot) or not isinstance(b, ProjectSnapshot):
        raise InvalidVersionsError("Both versions must be provided")


class VersionComparator:
    def __init__(
        self,
        detector: Optional[ChangeDetector] = None,
        diff_generator: Optional[DiffGenerator] = None,
        *,
        include_diff: bool = False,
    ) -> None:
        self.detector = detector or ChangeDetector()
        self.diff_generator = diff_generator or DiffGenerator()
        self.include_diff = include_diff

    # ---- public API ----

    def compare_versions(
        self,
        a: Optional[ProjectSnapshot],
        b: Optional[ProjectSnapshot],
        *,
        include_diff: Optional[bool] = None,
    ) -> ComparisonResult:
        """Compare snapshot *a* (old) with *b* (new)."""
        _require(a, b)
        report = self.detector.generate_change_report(a, b)
        changes = report.changes
        api_changes = self.detect_api_changes(a, b)

        files_added = changes.files_of(ChangeType.ADDED)
        files_modified = changes.files_of(ChangeType.MODIFIED)
        files_deleted = changes.files_of(ChangeType.DELETED)

        breaking = sum(1 for c in api_changes if c.breaking)
        new_features = sum(1 for c in api_changes if c.change_type is ApiChangeType.ADDED)
        bug_fixes = sum(
            1 for c in api_changes if c.change_type is ApiChangeType.MODIFIED and not c.breaking
        )
        summary = ComparisonSummary(
            total_changes=len(files_added) + len(files_modified) + len(files_deleted) + len(api_changes),
            new_features=new_features,
            breaking_changes=breaking,
            bug_fixes=bug_fixes,
        )

        want_diff = self.include_diff if include_diff is None else include_diff
        result = ComparisonResult(
            project=b.name or a.name,
            version_a=a.version_label,
            version_b=b.version_label,
            generated_at=datetime.now(timezone.utc).isoformat(),
            summary=summary,
            files_added=files_added,
            files_modified=files_modified,
            files_deleted=files_deleted,
            api_changes=api_changes,
            quality=self.compare_quality_metrics(a, b),
            change_report=report,
            recommendations=ComparisonRecommendations(
                migration_guide=migration_guide(api_changes),
                testing_strategy=testing_strategy(breaking, new_features),
                documentation_updates=tuple(documentation_updates(api_changes)),
            ),
            diff=(
                self.diff_generator.generate_diff(
                    self.detector.filter_snapshot(a), self.detector.filter_snapshot(b)
                )
                if want_diff
                else None
            ),
        )
        logger.info(
            "Compared %s -> %s: %d change(s), %d breaking, risk %s",
            result.version_a,
            result.version_b,
            summary.total_changes,
            breaking,
            result.risk_level.value,
        )
        return result

    def detect_api_changes(
        self, a: Optional[ProjectSnapshot], b: Optional[ProjectSnapshot]
    ) -> Tuple[ApiChange, ...]:
        """Removed, then added, then modified exports."""
        _require(a, b)
        old = a.symbol_map()
        new = b.symbol_map()
        changes: List[ApiChange] = []

        for name, symbol in old.items():
            if name not in new:
                changes.append(
                    ApiChange(ApiChangeType.REMOVED, name, symbol.file, breaking=True, old_value=symbol)
                )
        for name, symbol in new.items():
            if name not in old:
                changes.append(ApiChange(ApiChangeType.ADDED, name, symbol.file, new_value=symbol))
        for name, symbol in old.items():
            current = new.get(name)
            if current is not None and is_export_modified(symbol, current):
                changes.append(
                    ApiChange(
                        ApiChangeType.MODIFIED,
                        name,
                        symbol.file,
                        breaking=is_breaking_change(symbol, current),
                        old_value=symbol,
                        new_value=current,
                    )
                )
        return tuple(changes)

    def detect_breaking_changes(
        self, a: Optional[ProjectSnapshot], b: Optional[ProjectSnapshot]
    ) -> Tuple[ApiChange, ...]:
        return tuple(c for c in self.detect_api_changes(a, b) if c.breaking)

    def compare_quality_metrics(
        self, a: Optional[ProjectSnapshot], b: Optional[ProjectSnapshot]
    ) -> QualityMetricDiff:
        _require(a, b)
        return QualityMetricDiff(
            cyclomatic=MetricDelta(a.complexity.cyclomatic, b.complexity.cyclomatic),
            cognitive=MetricDelta(a.complexity.cognitive, b.complexity.cognitive),
            maintainability=MetricDelta(a.complexity.maintainability, b.complexity.maintainability),
            score=MetricDelta(a.quality.score, b.quality.score),
            issues=MetricDelta(len(a.quality.issues), len(b.quality.issues)),
        )

    def generate_diff_report(
        self,
        a: Optional[ProjectSnapshot],
        b: Optional[ProjectSnapshot],
        fmt: str = "json",
    ) -> RenderedReport:
        """Render the comparison of *a* and *b* as json, markdown or html."""
        _require(a, b)
        if fmt not in REPORT_ENCODINGS:
            raise InvalidFormatError(
                f"Unsupported diff format: {fmt}", {"allowed": ", ".join(REPORT_ENCODINGS)}
            )
        result = self.compare_versions(a, b)
        return RenderedReport(
            format=fmt,
            content=render_result(result, fmt),
            metadata=ReportMetadata(
                generated_at=result.generated_at,
                version_a=result.version_a,
                version_b=result.version_b,
                total_changes=result.summary.total_changes,
            ),
        )


def render_result(result: ComparisonResult, fmt: str) -> str:
    # Deferred: the output package imports the comparison models.
    from verdiff.output import html, json_report, markdown

    if fmt == "json":
        return json_report.render(result)
    if fmt == "markdown":
        return markdown.render(result)
    if fmt == "html":
        return html.render(result)
    raise InvalidFormatError(f"Unsupported diff format: {fmt}", {"allowed": ", ".join(REPORT_ENCODINGS)})


def migration_guide(api_changes: Sequence[ApiChange]) -> str:
    breaking = [c for c in api_changes if c.breaking]
    if not breaking:
        return "No breaking changes detected. This update should be safe to apply."

    lines = ["Migration Guide:", ""]
    for change in breaking:
        lines.append(f"- {change.name}: {change.change_type.value} in {change.file}")
        if change.change_type is ApiChangeType.REMOVED:
            lines.append("  - This API has been removed. Please update your code to use an alternative.")
        else:
            lines.append("  - The signature of this API has changed. Please update your code accordingly.")
    return "\n".join(lines)


def testing_strategy(breaking: int, new_features: int) -> str:
    lines = ["Testing Strategy:"]
    if breaking:
        lines += [
            "- Run full regression tests",
            "- Test all affected APIs",
            "- Verify backward compatibility",
        ]
    elif new_features:
        lines += ["- Test new features", "- Run existing test suite"]
    else:
        lines.append("- Run existing test suite")
    return "\n".join(lines)


def documentation_updates(api_changes: Sequence[ApiChange]) -> List[str]:
    updates: List[str] = []
    for change in api_changes:
        if change.change_type is ApiChangeType.ADDED:
            updates.append(f"Document new API: {change.name}")
        elif change.change_type is ApiChangeType.REMOVED:
            updates.append(f"Remove documentation for: {change.name}")
        else:
            updates.append(f"Update documentation for: {change.name}")
    return updates
