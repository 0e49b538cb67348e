"""Tests for the JSON, Markdown, HTML and terminal reporters."""

import json
from dataclasses import replace

import pytest
from rich.console import Console

from verdiff.changes import ChangeDetector
from verdiff.comparison import VersionComparator
from verdiff.output import html, json_report, markdown, terminal
from verdiff.snapshot.models import ExportedSymbol, FileEntry
from verdiff.versioning import SemanticVersioning


@pytest.fixture
def result(snapshot_old, snapshot_new):
    return VersionComparator().compare_versions(snapshot_old, snapshot_new)


class TestJsonReport:
    def test_top_level_keys(self, result):
        data = json.loads(json_report.render(result))
        assert data["version"] == "1.0"
        assert data["generator"].startswith("verdiff ")
        assert data["project"] == "shop"
        assert "diff" not in data

    def test_summary_uses_camel_case(self, result):
        summary = json.loads(json_report.render(result))["summary"]
        assert summary == {
            "totalChanges": 4,
            "newFeatures": 1,
            "breakingChanges": 1,
            "bugFixes": 0,
            "riskLevel": "critical",
        }

    def test_details(self, result):
        details = json.loads(json_report.render(result))["details"]
        assert details["filesAdded"] == ["src/search.py"]
        assert details["filesModified"] == ["src/api.py"]
        modified = details["apiChanges"][1]
        assert modified["type"] == "modified"
        assert modified["breaking"] is True
        assert modified["oldValue"]["signature"] == "checkout(cart)"
        assert modified["newValue"]["isExported"] is True
        metrics = details["qualityMetrics"]
        assert metrics["complexity"]["maintainability"]["difference"] == 2.5
        assert metrics["quality"]["issues"] == {"old": 3, "new": 1, "difference": -2}

    def test_change_report_section(self, result):
        report = json.loads(json_report.render(result))["changeReport"]
        assert report["changes"]["changeTypes"] == ["added", "modified"]
        assert report["breakingChanges"][0]["kind"] == "changed_signature"
        assert report["impact"]["riskLevel"] == "critical"

    def test_diff_included(self, snapshot_a, snapshot_b):
        result = VersionComparator(include_diff=True).compare_versions(snapshot_a, snapshot_b)
        diff = json.loads(json_report.render(result))["diff"]
        assert diff["summary"]["totalFiles"] == 3
        assert [f["changeType"] for f in diff["files"]] == ["added", "modified", "deleted"]

    def test_version_metadata(self):
        meta = SemanticVersioning().parse_version("1.2.3-rc.1")
        data = json_report.version_metadata_to_dict(meta)
        assert data["versionString"] == "1.2.3-rc.1"
        assert data["strategySpecific"]["prerelease"] == "rc.1"

    def test_version_comparison(self):
        comparison = SemanticVersioning().compare_versions("2.0.0", "1.0.0")
        data = json_report.version_comparison_to_dict(comparison)
        assert data["result"] == "greater"
        assert data["breakingChanges"] is True


class TestMarkdown:
    def test_sections(self, result):
        text = markdown.render(result)
        assert text.startswith("# Version Comparison Report")
        for heading in ("## Summary", "## Files Added", "## Files Modified", "## API Changes",
                        "## Quality Metrics", "## Recommendations"):
            assert heading in text
        assert "## Files Deleted" not in text
        assert "- **Risk Level:** critical" in text

    def test_api_icons(self, result):
        text = markdown.render(result)
        assert "- ⚠️ **checkout** (modified) in `src/api.py`" in text
        assert "- ✅ **search** (added) in `src/search.py`" in text

    def test_metric_rows(self, result):
        text = markdown.render(result)
        assert "| Maintainability | 70 | 72.5 | +2.5 |" in text
        assert "| Issues | 3 | 1 | -2 |" in text

    def test_change_report(self, snapshot_a, snapshot_b):
        report = ChangeDetector().generate_change_report(snapshot_a, snapshot_b)
        text = markdown.render_change_report(report)
        assert text.startswith("# Change Report")
        assert "- `b.x` (deleted)" in text
        assert "- **foo** (removed_export, high): Public export 'foo' was removed" in text


class TestHtml:
    def test_document(self, result):
        page = html.render(result)
        assert page.startswith("<!DOCTYPE html>")
        assert page.rstrip().endswith("</html>")
        assert '<li class="breaking"><strong>checkout</strong>' in page

    def test_escaping(self, snapshot_old, snapshot_new):
        hostile = replace(
            snapshot_new,
            name="<script>alert(1)</script>",
            exported_symbols=snapshot_new.exported_symbols
            + (ExportedSymbol("a<b", "src/x&y.py"),),
        )
        page = html.render(VersionComparator().compare_versions(snapshot_old, hostile))
        assert "<script>" not in page
        assert "&lt;script&gt;" in page
        assert "a&lt;b" in page
        assert "src/x&amp;y.py" in page


class TestTerminal:
    def _console(self):
        return Console(record=True, width=120, force_terminal=False)

    def test_comparison(self, result):
        console = self._console()
        terminal.render(result, console=console)
        text = console.export_text()
        assert "CRITICAL" in text
        assert "src/search.py" in text
        assert "checkout" in text

    def test_empty_change_report(self, snapshot_a):
        console = self._console()
        report = ChangeDetector().generate_change_report(snapshot_a, snapshot_a)
        terminal.render_change_report(report, console=console)
        assert "No changes detected." in console.export_text()

    def test_version_comparison(self):
        console = self._console()
        comparison = SemanticVersioning().compare_versions("1.0.0", "1.1.0")
        terminal.render_version_comparison("1.0.0", "1.1.0", comparison, console=console)
        text = console.export_text()
        assert "1.0.0 < 1.1.0" in text
        assert "(less)" in text

    def test_bracketed_names_kept_verbatim(self, snapshot_a):
        routed = replace(
            snapshot_a,
            version_label="[next]",
            files=snapshot_a.files + (FileEntry("app/[id]/page.tsx", 10, 1, "t"),),
            exported_symbols=(ExportedSymbol("[slot]", "app/[id]/page.tsx"),),
        )
        result = VersionComparator().compare_versions(snapshot_a, routed)
        console = self._console()
        terminal.render(result, console=console)
        terminal.render_change_report(result.change_report, console=console)
        text = console.export_text()
        assert "app/[id]/page.tsx" in text
        assert "[slot]" in text
        assert "[next]" in text

    def test_bracketed_version_strings(self):
        console = self._console()
        comparison = SemanticVersioning().compare_versions("1.0.0", "1.1.0")
        terminal.render_version_comparison("[bold]1.0.0", "1.1.0", comparison, console=console)
        assert "[bold]1.0.0 < 1.1.0" in console.export_text()
