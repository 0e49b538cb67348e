"""Tests for file deltas, breaking API changes and impact analysis."""

from dataclasses import replace

import pytest

from verdiff.changes import (
    BreakingKind,
    ChangeCategory,
    ChangeDetectionConfig,
    ChangeDetector,
    ChangeType,
    RiskLevel,
)
from verdiff.changes.detector import (
    calculate_impact_score,
    calculate_risk_level,
    has_signature_changed,
)
from verdiff.errors import InvalidVersionsError
from verdiff.snapshot.models import ExportedSymbol


@pytest.fixture
def detector():
    return ChangeDetector()


class TestDetectChanges:
    def test_reference_scenario(self, detector, snapshot_a, snapshot_b):
        info = detector.detect_changes(snapshot_a, snapshot_b)
        assert info.files_changed == ("c.x", "b.x", "a.x")
        assert info.change_types == (ChangeType.ADDED, ChangeType.DELETED, ChangeType.MODIFIED)
        assert info.categories == (
            ChangeCategory.FEATURE,
            ChangeCategory.BREAKING,
            ChangeCategory.BUGFIX,
        )
        assert len(info.change_hash) == 16

    def test_files_of(self, detector, snapshot_old, snapshot_new):
        info = detector.detect_changes(snapshot_old, snapshot_new)
        assert info.files_of(ChangeType.ADDED) == ("src/search.py",)
        assert info.files_of(ChangeType.MODIFIED) == ("src/api.py",)
        assert info.files_of(ChangeType.DELETED) == ()

    def test_identical_snapshots(self, detector, snapshot_a):
        info = detector.detect_changes(snapshot_a, snapshot_a)
        assert info.change_count == 0
        assert info.files_changed == ()

    def test_hash_is_deterministic(self, detector, snapshot_a, snapshot_b):
        first = detector.detect_changes(snapshot_a, snapshot_b)
        second = detector.detect_changes(snapshot_a, snapshot_b)
        assert first.change_hash == second.change_hash

    def test_hash_ignores_file_order(self, detector, snapshot_old, snapshot_new):
        shuffled = replace(snapshot_new, files=tuple(reversed(snapshot_new.files)))
        baseline = detector.detect_changes(snapshot_old, snapshot_new)
        assert detector.detect_changes(snapshot_old, shuffled).change_hash == baseline.change_hash

    def test_hash_differs_for_different_changes(self, detector, snapshot_a, snapshot_b):
        assert (
            detector.detect_changes(snapshot_a, snapshot_b).change_hash
            != detector.detect_changes(snapshot_b, snapshot_a).change_hash
        )

    def test_missing_snapshot(self, detector, snapshot_b):
        with pytest.raises(InvalidVersionsError):
            detector.detect_changes(None, snapshot_b)

    def test_exclude_filter(self, snapshot_a, snapshot_b):
        detector = ChangeDetector(ChangeDetectionConfig.from_patterns(exclude=["b.*"]))
        assert detector.detect_changes(snapshot_a, snapshot_b).files_changed == ("c.x", "a.x")

    def test_include_filter(self, snapshot_old, snapshot_new):
        detector = ChangeDetector(ChangeDetectionConfig.from_patterns(include=["src/api.py"]))
        info = detector.detect_changes(snapshot_old, snapshot_new)
        assert info.files_changed == ("src/api.py",)

    def test_filter_snapshot(self, snapshot_a):
        detector = ChangeDetector(ChangeDetectionConfig.from_patterns(exclude=["b.*"]))
        filtered = detector.filter_snapshot(snapshot_a)
        assert filtered.paths() == ("a.x",)
        assert filtered.exported_symbols == snapshot_a.exported_symbols


class TestBreakingChanges:
    def test_removed_export(self, detector, snapshot_a, snapshot_b):
        breaking = detector.detect_breaking_changes(snapshot_a, snapshot_b)
        assert len(breaking) == 1
        item = breaking[0]
        assert item.kind is BreakingKind.REMOVED_EXPORT
        assert item.symbol_name == "foo"
        assert item.file == "a.x"
        assert item.description == "Public export 'foo' was removed"

    def test_changed_signature(self, detector, snapshot_old, snapshot_new):
        breaking = detector.detect_breaking_changes(snapshot_old, snapshot_new)
        assert [(b.kind, b.symbol_name) for b in breaking] == [
            (BreakingKind.CHANGED_SIGNATURE, "checkout")
        ]
        assert breaking[0].migration_hint == "Update calls to 'checkout' to match new signature"

    def test_added_export_is_not_breaking(self, detector, snapshot_b, snapshot_a):
        assert detector.detect_breaking_changes(snapshot_b, snapshot_a) == ()

    def test_missing_signatures_are_not_a_change(self):
        assert not has_signature_changed(ExportedSymbol("f", "a"), ExportedSymbol("f", "a", signature=""))
        assert has_signature_changed(ExportedSymbol("f", "a"), ExportedSymbol("f", "a", signature="f()"))


class TestImpact:
    def test_dependents_follow_imports_both_ways(self, detector, snapshot_old):
        assert detector.find_dependent_files("src/api.py", snapshot_old) == [
            "src/models.py",
            "src/views.py",
        ]

    def test_non_import_relations_ignored(self, detector, snapshot_old):
        assert "src/api.py" not in detector.find_dependent_files("src/utils.py", snapshot_old)

    def test_chains_and_score(self, detector, snapshot_old, snapshot_new):
        changes = detector.detect_changes(snapshot_old, snapshot_new)
        impact = detector.analyze_impact(changes, snapshot_new)
        assert impact.affected_files == ("src/models.py", "src/views.py")
        assert impact.dependency_chains == (
            ("src/search.py", "src/models.py"),
            ("src/api.py", "src/models.py", "src/views.py"),
        )
        assert impact.impact_score == 2 * 10 + 2 * 5 + 2 * 15
        assert impact.risk_level is RiskLevel.LOW

    def test_breaking_changes_only_raise_risk(self, detector, snapshot_old, snapshot_new):
        changes = detector.detect_changes(snapshot_old, snapshot_new)
        breaking = detector.detect_breaking_changes(snapshot_old, snapshot_new)
        without = detector.analyze_impact(changes, snapshot_new)
        with_breaking = detector.analyze_impact(changes, snapshot_new, breaking)
        assert with_breaking.risk_level.rank >= without.risk_level.rank
        assert with_breaking.risk_level is RiskLevel.CRITICAL
        assert ChangeCategory.BREAKING in with_breaking.categories

    @pytest.mark.parametrize("categories, count, affected, expected", [
        ([ChangeCategory.BREAKING], 1, 0, RiskLevel.CRITICAL),
        ([], 0, 11, RiskLevel.CRITICAL),
        ([], 0, 6, RiskLevel.HIGH),
        ([], 6, 0, RiskLevel.MEDIUM),
        ([], 0, 3, RiskLevel.MEDIUM),
        ([ChangeCategory.FEATURE], 5, 2, RiskLevel.LOW),
    ])
    def test_risk_ladder(self, categories, count, affected, expected):
        assert calculate_risk_level(categories, count, affected) is expected

    def test_score_is_capped(self):
        assert calculate_impact_score(10, 10, 10) == 100
        assert calculate_impact_score(0, 0, 0) == 0

    def test_missing_snapshot(self, detector, snapshot_a, snapshot_b):
        changes = detector.detect_changes(snapshot_a, snapshot_b)
        with pytest.raises(InvalidVersionsError):
            detector.analyze_impact(changes, None)


class TestChangeReport:
    def test_reference_scenario(self, detector, snapshot_a, snapshot_b):
        report = detector.generate_change_report(snapshot_a, snapshot_b)
        assert report.summary.total_changes == 3
        assert report.summary.breaking_changes == 1
        assert report.summary.risk_level.rank >= RiskLevel.HIGH.rank
        assert report.impact.risk_level is RiskLevel.CRITICAL

    def test_recommendations(self, detector, snapshot_old, snapshot_new):
        report = detector.generate_change_report(snapshot_old, snapshot_new)
        assert report.summary.new_features == 1
        assert report.summary.bug_fixes == 1
        assert report.recommendations.migration_guide == (
            "checkout: Update calls to 'checkout' to match new signature",
        )
        assert report.recommendations.testing_strategy == (
            "Focus testing on affected APIs",
            "Test backward compatibility",
            "Add tests for new features",
            "Verify bug fixes with regression tests",
        )
        assert "Create changelog entry" in report.recommendations.documentation_updates
        assert "Notify users of breaking changes" in report.impact.recommendations
        assert "Run comprehensive test suite" in report.impact.recommendations

    def test_empty_diff(self, detector, snapshot_a):
        report = detector.generate_change_report(snapshot_a, snapshot_a)
        assert report.summary.total_changes == 0
        assert report.impact.risk_level is RiskLevel.LOW
        assert report.impact.impact_score == 0
        assert report.recommendations.migration_guide == ()
        assert report.impact.recommendations == ()
