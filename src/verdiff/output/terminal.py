"""Rich terminal reporter: risk pills, file and API tables."""

from __future__ import annotations

from typing import Optional

from rich.console import Console
from rich.table import Table
from rich.text import Text

from verdiff.changes.models import ChangeReport, RiskLevel
from verdiff.comparison.models import ComparisonResult, MetricDelta
from verdiff.versioning.models import ComparisonOutcome, VersionComparison

_RISK_STYLE = {
    RiskLevel.CRITICAL: "bold white on red",
    RiskLevel.HIGH: "bold white on dark_orange",
    RiskLevel.MEDIUM: "bold black on yellow",
    RiskLevel.LOW: "bold black on bright_cyan",
}

_RISK_ICON = {
    RiskLevel.CRITICAL: "🔴",
    RiskLevel.HIGH: "🟠",
    RiskLevel.MEDIUM: "🟡",
    RiskLevel.LOW: "🔵",
}

_CHANGE_STYLE = {
    "added": "green",
    "deleted": "red",
    "removed": "red",
    "modified": "yellow",
}

_OUTCOME_SYMBOL = {
    ComparisonOutcome.GREATER: ">",
    ComparisonOutcome.LESS: "<",
    ComparisonOutcome.EQUAL: "=",
    ComparisonOutcome.INCOMPATIBLE: "≠",
}


def risk_pill(level: RiskLevel) -> Text:
    return Text(
        f" {_RISK_ICON.get(level, '')} {level.value.upper()} ",
        style=_RISK_STYLE.get(level, ""),
    )


def _delta_text(delta: MetricDelta, higher_is_better: bool) -> Text:
    diff = delta.difference
    if diff == 0:
        return Text("±0", style="dim")
    good = (diff > 0) == higher_is_better
    return Text(f"{diff:+g}", style="green" if good else "red")


def render(result: ComparisonResult, console: Optional[Console] = None) -> None:
    """Print a comparison to the terminal using Rich."""
    console = console or Console(stderr=True)
    s = result.summary

    console.print()
    console.print(
        Text.assemble(
            (f"{result.project} ", "bold"),
            (result.version_a, "cyan"),
            " → ",
            (result.version_b, "cyan"),
            "  ",
            risk_pill(result.risk_level),
        )
    )

    files = Table(title="Files", title_style="bold", border_style="dim")
    files.add_column("Change", justify="center", width=10)
    files.add_column("Path", style="magenta")
    for kind, paths in (
        ("added", result.files_added),
        ("modified", result.files_modified),
        ("deleted", result.files_deleted),
    ):
        for path in paths:
            files.add_row(Text(kind, style=_CHANGE_STYLE[kind]), Text(path))
    if files.row_count:
        console.print(files)

    if result.api_changes:
        api = Table(title="API Changes", title_style="bold", border_style="dim")
        api.add_column("Change", justify="center", width=10)
        api.add_column("Symbol", style="cyan")
        api.add_column("File", style="magenta")
        api.add_column("Breaking", justify="center")
        for change in result.api_changes:
            kind = change.change_type.value
            api.add_row(
                Text(kind, style=_CHANGE_STYLE.get(kind, "")),
                Text(change.name),
                Text(change.file),
                Text("yes", style="bold red") if change.breaking else Text("no", style="dim"),
            )
        console.print(api)

    q = result.quality
    metrics = Table(title="Quality Metrics", title_style="bold", border_style="dim")
    metrics.add_column("Metric")
    metrics.add_column("Old", justify="right")
    metrics.add_column("New", justify="right")
    metrics.add_column("Δ", justify="right")
    for name, delta, higher_is_better in (
        ("Cyclomatic", q.cyclomatic, False),
        ("Cognitive", q.cognitive, False),
        ("Maintainability", q.maintainability, True),
        ("Quality score", q.score, True),
        ("Issues", q.issues, False),
    ):
        metrics.add_row(name, f"{delta.old:g}", f"{delta.new:g}", _delta_text(delta, higher_is_better))
    console.print(metrics)

    console.print()
    console.print(f"[dim]Total changes:[/dim]    {s.total_changes}")
    console.print(f"[dim]New features:[/dim]     {s.new_features}")
    console.print(f"[dim]Breaking changes:[/dim] {s.breaking_changes}")
    console.print(f"[dim]Bug fixes:[/dim]        {s.bug_fixes}")
    console.print(f"[dim]Impact score:[/dim]     {result.change_report.impact.impact_score}")

    for rec in result.change_report.impact.recommendations:
        console.print(Text(f"  • {rec}"))


def render_change_report(report: ChangeReport, console: Optional[Console] = None) -> None:
    console = console or Console(stderr=True)
    s = report.summary

    console.print()
    if not report.changes.files_changed and not report.breaking_changes:
        console.print("[bold green]✅ No changes detected.[/bold green]")
        return

    table = Table(title="Changes", title_style="bold", border_style="dim")
    table.add_column("Change", justify="center", width=10)
    table.add_column("Path", style="magenta")
    table.add_column("Category", style="dim")
    for path, kind, category in zip(
        report.changes.files_changed, report.changes.change_types, report.changes.categories
    ):
        table.add_row(Text(kind.value, style=_CHANGE_STYLE[kind.value]), Text(path), category.value)
    console.print(table)

    if report.breaking_changes:
        breaking = Table(title="Breaking Changes", title_style="bold red", border_style="dim")
        breaking.add_column("Severity", justify="center", width=12)
        breaking.add_column("Symbol", style="cyan")
        breaking.add_column("Kind")
        breaking.add_column("Migration")
        for b in report.breaking_changes:
            breaking.add_row(
                risk_pill(b.severity), Text(b.symbol_name), b.kind.value, Text(b.migration_hint or "")
            )
        console.print(breaking)

    console.print()
    console.print(Text.assemble(("Risk: ", "dim"), risk_pill(s.risk_level)))
    console.print(f"[dim]Change hash:[/dim]  {report.changes.change_hash}")
    console.print(f"[dim]Impact score:[/dim] {report.impact.impact_score}")
    for rec in report.impact.recommendations:
        console.print(Text(f"  • {rec}"))


def render_version_comparison(
    a: str, b: str, comparison: VersionComparison, console: Optional[Console] = None
) -> None:
    console = console or Console(stderr=True)
    symbol = _OUTCOME_SYMBOL[comparison.result]
    console.print(
        Text.assemble(
            (a, "cyan"), f" {symbol} ", (b, "cyan"), ("  (" + comparison.result.value + ")", "dim")
        )
    )
    console.print(Text(comparison.explanation, style="dim"))
    flags = [
        name
        for name, on in (
            ("compatible", comparison.compatible),
            ("breaking", comparison.breaking_changes),
            ("features", comparison.new_features),
            ("fixes", comparison.bug_fixes),
        )
        if on
    ]
    if flags:
        console.print(f"[dim]Flags:[/dim] {', '.join(flags)}")
