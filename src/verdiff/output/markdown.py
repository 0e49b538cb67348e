"""Markdown reporter: line-oriented text report with headed sections."""

from __future__ import annotations

from typing import List, Sequence

from verdiff.changes.models import ChangeReport
from verdiff.comparison.models import ComparisonResult, MetricDelta


def _file_section(lines: List[str], title: str, files: Sequence[str]) -> None:
    if not files:
        return
    lines.append(f"## {title}")
    lines.append("")
    lines.extend(f"- `{path}`" for path in files)
    lines.append("")


def _metric_row(name: str, delta: MetricDelta) -> str:
    return f"| {name} | {delta.old:g} | {delta.new:g} | {delta.difference:+g} |"


def render(result: ComparisonResult) -> str:
    """Return the comparison as a Markdown document."""
    summary = result.summary
    lines: List[str] = [
        "# Version Comparison Report",
        "",
        f"**Project:** {result.project}",
        f"**From:** {result.version_a}",
        f"**To:** {result.version_b}",
        f"**Generated:** {result.generated_at}",
        "",
        "## Summary",
        "",
        f"- **Total Changes:** {summary.total_changes}",
        f"- **New Features:** {summary.new_features}",
        f"- **Breaking Changes:** {summary.breaking_changes}",
        f"- **Bug Fixes:** {summary.bug_fixes}",
        f"- **Risk Level:** {result.risk_level.value}",
        f"- **Impact Score:** {result.change_report.impact.impact_score}",
        "",
    ]

    _file_section(lines, "Files Added", result.files_added)
    _file_section(lines, "Files Modified", result.files_modified)
    _file_section(lines, "Files Deleted", result.files_deleted)

    if result.api_changes:
        lines.append("## API Changes")
        lines.append("")
        for change in result.api_changes:
            icon = "⚠️" if change.breaking else "✅"
            lines.append(
                f"- {icon} **{change.name}** ({change.change_type.value}) in `{change.file}`"
            )
        lines.append("")

    quality = result.quality
    lines += [
        "## Quality Metrics",
        "",
        "| Metric | Old | New | Difference |",
        "| --- | --- | --- | --- |",
        _metric_row("Cyclomatic complexity", quality.cyclomatic),
        _metric_row("Cognitive complexity", quality.cognitive),
        _metric_row("Maintainability", quality.maintainability),
        _metric_row("Quality score", quality.score),
        _metric_row("Issues", quality.issues),
        "",
        "## Recommendations",
        "",
        result.recommendations.migration_guide,
        "",
        result.recommendations.testing_strategy,
        "",
    ]
    if result.recommendations.documentation_updates:
        lines.append("Documentation Updates:")
        lines.extend(f"- {item}" for item in result.recommendations.documentation_updates)
        lines.append("")

    return "\n".join(lines)


def render_change_report(report: ChangeReport, title: str = "Change Report") -> str:
    s = report.summary
    lines: List[str] = [
        f"# {title}",
        "",
        "## Summary",
        "",
        f"- **Total Changes:** {s.total_changes}",
        f"- **Breaking Changes:** {s.breaking_changes}",
        f"- **New Features:** {s.new_features}",
        f"- **Bug Fixes:** {s.bug_fixes}",
        f"- **Risk Level:** {s.risk_level.value}",
        f"- **Change Hash:** `{report.changes.change_hash}`",
        "",
    ]
    if report.changes.files_changed:
        lines += ["## Changed Files", ""]
        for path, kind in zip(report.changes.files_changed, report.changes.change_types):
            lines.append(f"- `{path}` ({kind.value})")
        lines.append("")
    if report.breaking_changes:
        lines += ["## Breaking Changes", ""]
        for b in report.breaking_changes:
            lines.append(f"- **{b.symbol_name}** ({b.kind.value}, {b.severity.value}): {b.description}")
        lines.append("")
    for heading, items in (
        ("Migration Guide", report.recommendations.migration_guide),
        ("Testing Strategy", report.recommendations.testing_strategy),
        ("Documentation Updates", report.recommendations.documentation_updates),
    ):
        if items:
            lines += [f"## {heading}", ""]
            lines.extend(f"- {item}" for item in items)
            lines.append("")
    return "\n".join(lines)
