"""HTML reporter: a single self-contained styled page."""

from __future__ import annotations

from html import escape
from typing import List, Sequence

from verdiff.comparison.models import ComparisonResult, MetricDelta

_STYLE = """\
    body { font-family: Arial, sans-serif; margin: 20px; }
    .summary { background: #f5f5f5; padding: 15px; border-radius: 5px; }
    .breaking { color: #d32f2f; }
    .added { color: #388e3c; }
    .removed { color: #d32f2f; }
    table { border-collapse: collapse; }
    td, th { border: 1px solid #ddd; padding: 4px 8px; }"""


def _list(lines: List[str], title: str, items: Sequence[str], css: str = "") -> None:
    if not items:
        return
    cls = f' class="{css}"' if css else ""
    lines.append(f"  <h2>{escape(title)}</h2>")
    lines.append(f"  <ul{cls}>")
    lines.extend(f"    <li><code>{escape(item)}</code></li>" for item in items)
    lines.append("  </ul>")


def _metric(name: str, delta: MetricDelta) -> str:
    return (
        f"    <tr><td>{escape(name)}</td><td>{delta.old:g}</td>"
        f"<td>{delta.new:g}</td><td>{delta.difference:+g}</td></tr>"
    )


def render(result: ComparisonResult) -> str:
    """Return the comparison as an HTML document. All data is escaped."""
    s = result.summary
    lines: List[str] = [
        "<!DOCTYPE html>",
        "<html>",
        "<head>",
        '  <meta charset="utf-8">',
        "  <title>Version Comparison Report</title>",
        "  <style>",
        _STYLE,
        "  </style>",
        "</head>",
        "<body>",
        "  <h1>Version Comparison Report</h1>",
        '  <div class="summary">',
        f"    <p><strong>Project:</strong> {escape(result.project)}</p>",
        f"    <p><strong>From:</strong> {escape(result.version_a)}</p>",
        f"    <p><strong>To:</strong> {escape(result.version_b)}</p>",
        f"    <p><strong>Generated:</strong> {escape(result.generated_at)}</p>",
        "  </div>",
        "  <h2>Summary</h2>",
        "  <ul>",
        f"    <li><strong>Total Changes:</strong> {s.total_changes}</li>",
        f"    <li><strong>New Features:</strong> {s.new_features}</li>",
        f"    <li><strong>Breaking Changes:</strong> {s.breaking_changes}</li>",
        f"    <li><strong>Bug Fixes:</strong> {s.bug_fixes}</li>",
        f"    <li><strong>Risk Level:</strong> {escape(result.risk_level.value)}</li>",
        "  </ul>",
    ]

    _list(lines, "Files Added", result.files_added, "added")
    _list(lines, "Files Modified", result.files_modified)
    _list(lines, "Files Deleted", result.files_deleted, "removed")

    if result.api_changes:
        lines.append("  <h2>API Changes</h2>")
        lines.append("  <ul>")
        for change in result.api_changes:
            css = ' class="breaking"' if change.breaking else ""
            lines.append(
                f"    <li{css}><strong>{escape(change.name)}</strong> "
                f"({escape(change.change_type.value)}) in <code>{escape(change.file)}</code></li>"
            )
        lines.append("  </ul>")

    q = result.quality
    lines += [
        "  <h2>Quality Metrics</h2>",
        "  <table>",
        "    <tr><th>Metric</th><th>Old</th><th>New</th><th>Difference</th></tr>",
        _metric("Cyclomatic complexity", q.cyclomatic),
        _metric("Cognitive complexity", q.cognitive),
        _metric("Maintainability", q.maintainability),
        _metric("Quality score", q.score),
        _metric("Issues", q.issues),
        "  </table>",
        "  <h2>Recommendations</h2>",
        f"  <pre>{escape(result.recommendations.migration_guide)}</pre>",
        f"  <pre>{escape(result.recommendations.testing_strategy)}</pre>",
    ]
    _list(lines, "Documentation Updates", result.recommendations.documentation_updates)

    lines += ["</body>", "</html>"]
    return "\n".join(lines)
