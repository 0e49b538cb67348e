"""Tests for the version comparator."""

import json

import pytest

from verdiff.changes.detector import ChangeDetectionConfig, ChangeDetector
from verdiff.changes.models import RiskLevel
from verdiff.comparison import ApiChangeType, VersionComparator
from verdiff.comparison.comparator import is_breaking_change, is_export_modified
from verdiff.errors import InvalidFormatError, InvalidVersionsError
from verdiff.snapshot.models import ExportedSymbol


@pytest.fixture
def comparator():
    return VersionComparator()


class TestCompareVersions:
    def test_reference_scenario(self, comparator, snapshot_a, snapshot_b):
        result = comparator.compare_versions(snapshot_a, snapshot_b)
        assert result.files_added == ("c.x",)
        assert result.files_modified == ("a.x",)
        assert result.files_deleted == ("b.x",)
        assert [(c.change_type, c.name, c.breaking) for c in result.api_changes] == [
            (ApiChangeType.REMOVED, "foo", True)
        ]
        assert result.summary.total_changes == 4
        assert result.risk_level is RiskLevel.CRITICAL

    def test_api_changes(self, comparator, snapshot_old, snapshot_new):
        result = comparator.compare_versions(snapshot_old, snapshot_new)
        assert [(c.change_type, c.name, c.breaking) for c in result.api_changes] == [
            (ApiChangeType.ADDED, "search", False),
            (ApiChangeType.MODIFIED, "checkout", True),
        ]
        assert result.summary.new_features == 1
        assert result.summary.breaking_changes == 1
        assert result.summary.bug_fixes == 0
        assert result.summary.total_changes == 4
        assert [c.name for c in result.breaking_api_changes] == ["checkout"]

    def test_quality_deltas(self, comparator, snapshot_old, snapshot_new):
        quality = comparator.compare_quality_metrics(snapshot_old, snapshot_new)
        assert quality.cyclomatic.difference == 3
        assert quality.cognitive.difference == -2
        assert quality.maintainability.difference == 2.5
        assert quality.score.difference == 5
        assert (quality.issues.old, quality.issues.new) == (3, 1)

    def test_recommendations(self, comparator, snapshot_old, snapshot_new):
        recs = comparator.compare_versions(snapshot_old, snapshot_new).recommendations
        assert recs.migration_guide.startswith("Migration Guide:")
        assert "- checkout: modified in src/api.py" in recs.migration_guide
        assert recs.testing_strategy.splitlines()[1] == "- Run full regression tests"
        assert recs.documentation_updates == (
            "Document new API: search",
            "Update documentation for: checkout",
        )

    def test_no_changes(self, comparator, snapshot_old):
        result = comparator.compare_versions(snapshot_old, snapshot_old)
        assert result.summary.total_changes == 0
        assert result.api_changes == ()
        assert result.recommendations.migration_guide == (
            "No breaking changes detected. This update should be safe to apply."
        )
        assert result.recommendations.testing_strategy == "Testing Strategy:\n- Run existing test suite"

    def test_diff_attached_on_request(self, comparator, snapshot_a, snapshot_b):
        assert comparator.compare_versions(snapshot_a, snapshot_b).diff is None
        result = comparator.compare_versions(snapshot_a, snapshot_b, include_diff=True)
        assert result.diff is not None
        assert result.diff.summary.total_files == 3

    def test_embedded_diff_honours_path_filters(self, snapshot_a, snapshot_b):
        detector = ChangeDetector(ChangeDetectionConfig.from_patterns(exclude=["b.*"]))
        result = VersionComparator(detector, include_diff=True).compare_versions(snapshot_a, snapshot_b)
        assert result.files_deleted == ()
        assert [f.path for f in result.diff.files] == ["c.x", "a.x"]

    def test_missing_snapshot(self, comparator, snapshot_a):
        with pytest.raises(InvalidVersionsError):
            comparator.compare_versions(None, snapshot_a)


class TestExportRules:
    def test_metadata_signature_change_is_breaking(self):
        old = ExportedSymbol("render", "v.py", metadata={"signature": "render(req)"})
        new = ExportedSymbol("render", "v.py", metadata={"signature": "render(req, ctx)"})
        assert is_export_modified(old, new)
        assert is_breaking_change(old, new)

    def test_unexporting_is_breaking(self):
        old = ExportedSymbol("f", "a.py")
        new = ExportedSymbol("f", "a.py", is_exported=False)
        assert is_breaking_change(old, new)

    def test_exporting_is_not_breaking(self):
        old = ExportedSymbol("f", "a.py", is_exported=False)
        new = ExportedSymbol("f", "a.py")
        assert is_export_modified(old, new)
        assert not is_breaking_change(old, new)

    def test_moved_file_is_breaking(self):
        assert is_breaking_change(ExportedSymbol("f", "a.py"), ExportedSymbol("f", "b.py"))

    def test_unchanged(self):
        symbol = ExportedSymbol("f", "a.py", signature="f()")
        assert not is_export_modified(symbol, symbol)

    def test_breaking_subset(self, comparator, snapshot_old, snapshot_new):
        breaking = comparator.detect_breaking_changes(snapshot_old, snapshot_new)
        assert [c.name for c in breaking] == ["checkout"]


class TestGenerateDiffReport:
    def test_json(self, comparator, snapshot_old, snapshot_new):
        rendered = comparator.generate_diff_report(snapshot_old, snapshot_new, "json")
        data = json.loads(rendered.content)
        assert data["versionA"] == "2.0.0"
        assert data["versionB"] == "2.1.0"
        assert rendered.format == "json"
        assert rendered.metadata.total_changes == 4

    def test_markdown(self, comparator, snapshot_old, snapshot_new):
        rendered = comparator.generate_diff_report(snapshot_old, snapshot_new, "markdown")
        assert rendered.content.startswith("# Version Comparison Report")

    def test_html(self, comparator, snapshot_old, snapshot_new):
        rendered = comparator.generate_diff_report(snapshot_old, snapshot_new, "html")
        assert rendered.content.startswith("<!DOCTYPE html>")

    def test_unknown_format(self, comparator, snapshot_old, snapshot_new):
        with pytest.raises(InvalidFormatError):
            comparator.generate_diff_report(snapshot_old, snapshot_new, "pdf")

    def test_missing_snapshot(self, comparator, snapshot_old):
        with pytest.raises(InvalidVersionsError):
            comparator.generate_diff_report(snapshot_old, None, "json")
