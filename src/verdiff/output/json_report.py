"""JSON reporter: structured encoding with camelCase field names."""

from __future__ import annotations

import dataclasses
import json
from typing import Any, Dict, List, Optional

from verdiff import __version__
from verdiff.changes.models import (
    BreakingChangeInfo,
    ChangeImpact,
    ChangeInfo,
    ChangeReport,
)
from verdiff.comparison.models import ApiChange, ComparisonResult, MetricDelta
from verdiff.diff.models import DiffReport, FileDiff, Hunk
from verdiff.snapshot.models import ExportedSymbol
from verdiff.versioning.models import VersionComparison, VersionMetadata


def _symbol(symbol: Optional[ExportedSymbol]) -> Optional[Dict[str, Any]]:
    if symbol is None:
        return None
    return {
        "name": symbol.name,
        "file": symbol.file,
        "signature": symbol.signature,
        "isDefault": symbol.is_default,
        "isExported": symbol.is_exported,
        **({"kind": symbol.kind} if symbol.kind else {}),
        **({"metadata": dict(symbol.metadata)} if symbol.metadata else {}),
    }


def _delta(delta: MetricDelta) -> Dict[str, float]:
    return {"old": delta.old, "new": delta.new, "difference": delta.difference}


def changes_to_dict(changes: ChangeInfo) -> Dict[str, Any]:
    return {
        "filesChanged": list(changes.files_changed),
        "changeTypes": [t.value for t in changes.change_types],
        "changeCount": changes.change_count,
        "changeHash": changes.change_hash,
        "categories": [c.value for c in changes.categories],
    }


def breaking_to_dict(info: BreakingChangeInfo) -> Dict[str, Any]:
    return {
        "kind": info.kind.value,
        "symbolName": info.symbol_name,
        "file": info.file,
        "description": info.description,
        "severity": info.severity.value,
        **({"migrationHint": info.migration_hint} if info.migration_hint else {}),
        "affectedFiles": list(info.affected_files),
    }


def impact_to_dict(impact: ChangeImpact) -> Dict[str, Any]:
    return {
        "affectedFiles": list(impact.affected_files),
        "dependencyChains": [list(chain) for chain in impact.dependency_chains],
        "riskLevel": impact.risk_level.value,
        "categories": [c.value for c in impact.categories],
        "impactScore": impact.impact_score,
        "recommendations": list(impact.recommendations),
    }


def change_report_to_dict(report: ChangeReport) -> Dict[str, Any]:
    return {
        "summary": {
            "totalChanges": report.summary.total_changes,
            "breakingChanges": report.summary.breaking_changes,
            "newFeatures": report.summary.new_features,
            "bugFixes": report.summary.bug_fixes,
            "riskLevel": report.summary.risk_level.value,
        },
        "changes": changes_to_dict(report.changes),
        "breakingChanges": [breaking_to_dict(b) for b in report.breaking_changes],
        "impact": impact_to_dict(report.impact),
        "recommendations": {
            "migrationGuide": list(report.recommendations.migration_guide),
            "testingStrategy": list(report.recommendations.testing_strategy),
            "documentationUpdates": list(report.recommendations.documentation_updates),
        },
    }


def _hunk(hunk: Hunk) -> Dict[str, Any]:
    return {
        "oldStart": hunk.old_start,
        "oldLines": hunk.old_lines,
        "newStart": hunk.new_start,
        "newLines": hunk.new_lines,
        "changes": [
            {"kind": c.kind.value, "text": c.text, "lineNumber": c.line_number}
            for c in hunk.changes
        ],
    }


def _file_diff(file: FileDiff, include_text: bool) -> Dict[str, Any]:
    data: Dict[str, Any] = {
        "path": file.path,
        "changeType": file.change_type.value,
        "linesAdded": file.lines_added,
        "linesRemoved": file.lines_removed,
        "hunks": [_hunk(h) for h in file.hunks],
    }
    if include_text:
        if file.old_text is not None:
            data["oldText"] = file.old_text
        if file.new_text is not None:
            data["newText"] = file.new_text
    return data


def diff_report_to_dict(report: DiffReport, *, include_text: bool = False) -> Dict[str, Any]:
    return {
        "summary": {
            "totalFiles": report.summary.total_files,
            "added": report.summary.added,
            "modified": report.summary.modified,
            "deleted": report.summary.deleted,
            "linesAdded": report.summary.lines_added,
            "linesRemoved": report.summary.lines_removed,
        },
        "files": [_file_diff(f, include_text) for f in report.files],
        "metadata": {
            "generatedAt": report.metadata.generated_at,
            "versionA": report.metadata.version_a,
            "versionB": report.metadata.version_b,
        },
    }


def _api_change(change: ApiChange) -> Dict[str, Any]:
    data: Dict[str, Any] = {
        "type": change.change_type.value,
        "name": change.name,
        "file": change.file,
        "breaking": change.breaking,
    }
    if change.old_value is not None:
        data["oldValue"] = _symbol(change.old_value)
    if change.new_value is not None:
        data["newValue"] = _symbol(change.new_value)
    return data


def to_dict(result: ComparisonResult) -> Dict[str, Any]:
    """Convert a ComparisonResult to a JSON-serialisable dict."""
    api_changes: List[Dict[str, Any]] = [_api_change(c) for c in result.api_changes]
    quality = result.quality
    data: Dict[str, Any] = {
        "version": "1.0",
        "generator": f"verdiff {__version__}",
        "project": result.project,
        "versionA": result.version_a,
        "versionB": result.version_b,
        "generatedAt": result.generated_at,
        "summary": {
            "totalChanges": result.summary.total_changes,
            "newFeatures": result.summary.new_features,
            "breakingChanges": result.summary.breaking_changes,
            "bugFixes": result.summary.bug_fixes,
            "riskLevel": result.risk_level.value,
        },
        "details": {
            "filesAdded": list(result.files_added),
            "filesModified": list(result.files_modified),
            "filesDeleted": list(result.files_deleted),
            "apiChanges": api_changes,
            "qualityMetrics": {
                "complexity": {
                    "cyclomatic": _delta(quality.cyclomatic),
                    "cognitive": _delta(quality.cognitive),
                    "maintainability": _delta(quality.maintainability),
                },
                "quality": {
                    "score": _delta(quality.score),
                    "issues": _delta(quality.issues),
                },
            },
        },
        "changeReport": change_report_to_dict(result.change_report),
        "recommendations": {
            "migrationGuide": result.recommendations.migration_guide,
            "testingStrategy": result.recommendations.testing_strategy,
            "documentationUpdates": list(result.recommendations.documentation_updates),
        },
    }
    if result.diff is not None:
        data["diff"] = diff_report_to_dict(result.diff)
    return data


def render(result: ComparisonResult) -> str:
    """Return formatted JSON string."""
    return json.dumps(to_dict(result), indent=2)


def render_change_report(report: ChangeReport) -> str:
    return json.dumps(change_report_to_dict(report), indent=2)


def render_diff(report: DiffReport, *, include_text: bool = False) -> str:
    return json.dumps(diff_report_to_dict(report, include_text=include_text), indent=2)


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def version_metadata_to_dict(metadata: VersionMetadata) -> Dict[str, Any]:
    info = metadata.strategy_specific
    specific: Optional[Dict[str, Any]] = None
    if info is not None:
        specific = {_camel(k): v for k, v in dataclasses.asdict(info).items()}
    return {
        "versionString": metadata.version_string,
        "createdAt": metadata.created_at,
        "tags": list(metadata.tags),
        "strategySpecific": specific,
    }


def version_comparison_to_dict(comparison: VersionComparison) -> Dict[str, Any]:
    return {
        "result": comparison.result.value,
        "difference": comparison.difference,
        "compatible": comparison.compatible,
        "breakingChanges": comparison.breaking_changes,
        "newFeatures": comparison.new_features,
        "bugFixes": comparison.bug_fixes,
        "explanation": comparison.explanation,
    }
