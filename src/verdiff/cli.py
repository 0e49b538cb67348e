"""verdiff CLI: Typer application with compare, changes, diff, version and init commands."""

from __future__ import annotations

import json
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape

from verdiff import __version__
from verdiff.errors import VerdiffError

app = typer.Typer(
    name="verdiff",
    help="Version identifiers and change-impact reports for project snapshots.",
    add_completion=False,
    no_args_is_help=True,
)
version_app = typer.Typer(
    help="Parse, compare, bump and validate version identifiers.",
    no_args_is_help=True,
)
app.add_typer(version_app, name="version")

console = Console(stderr=True)

_RISK_LEVELS = ("low", "medium", "high", "critical")


def _fail(label: str, exc: Exception) -> typer.Exit:
    console.print(f"[bold red]{label}:[/bold red] {escape(str(exc))}")
    return typer.Exit(code=2)


def _load_config(config: Optional[str]):
    from verdiff.config.loader import load_config

    try:
        return load_config(Path.cwd(), config)
    except VerdiffError as exc:
        raise _fail("Config error", exc) from exc


def _load_pair(old: Path, new: Path):
    from verdiff.snapshot.loader import load_snapshot

    try:
        return load_snapshot(old), load_snapshot(new)
    except VerdiffError as exc:
        raise _fail("Snapshot error", exc) from exc


def _check_choice(value: Optional[str], allowed, label: str) -> None:
    if value is not None and value not in allowed:
        console.print(f"[bold red]Invalid {label}:[/bold red] {escape(value)}")
        raise typer.Exit(code=2)


def _emit(report_text: str, output: Optional[str]) -> None:
    if output:
        Path(output).write_text(report_text, encoding="utf-8")
        console.print(f"[dim]Report written to {escape(output)}[/dim]")
    else:
        print(report_text)


def _gate(risk: str, fail_on: Optional[str]) -> None:
    from verdiff.config.schema import risk_at_or_above

    if fail_on and risk_at_or_above(risk, fail_on):
        console.print(
            f"[bold red]❌ Risk level {risk.upper()} is at or above {fail_on.upper()}.[/bold red]"
        )
        raise typer.Exit(code=1)


# ── compare ───────────────────────────────────────────────────────────────────


@app.command()
def compare(
    old: Path = typer.Argument(..., help="Snapshot of the older version (.json / .yaml)"),
    new: Path = typer.Argument(..., help="Snapshot of the newer version (.json / .yaml)"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .verdiff.toml"),
    format: Optional[str] = typer.Option(None, "--format", "-f", help="Output format: terminal | json | markdown | html"),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Write report to file"),
    fail_on: Optional[str] = typer.Option(None, "--fail-on", help="Risk threshold: low | medium | high | critical"),
    include_diff: bool = typer.Option(False, "--diff", help="Embed the line diff in JSON output"),
) -> None:
    """Compare two snapshots and report file, API and quality changes."""
    from verdiff.changes.detector import ChangeDetectionConfig, ChangeDetector
    from verdiff.comparison.comparator import VersionComparator, render_result
    from verdiff.config.schema import REPORT_FORMATS
    from verdiff.diff.generator import DiffGenerator
    from verdiff.output import json_report, terminal

    _check_choice(format, REPORT_FORMATS, "format")
    _check_choice(fail_on, _RISK_LEVELS, "fail-on level")

    cfg = _load_config(config)
    if format:
        cfg.report.format = format  # type: ignore[assignment]
    if fail_on:
        cfg.report.fail_on = fail_on  # type: ignore[assignment]
    if include_diff:
        cfg.report.include_diff = True

    a, b = _load_pair(old, new)
    comparator = VersionComparator(
        ChangeDetector(
            ChangeDetectionConfig.from_patterns(
                cfg.changes.include_patterns, cfg.changes.exclude_patterns
            )
        ),
        DiffGenerator(cfg.diff),
        include_diff=cfg.report.include_diff,
    )

    try:
        result = comparator.compare_versions(a, b)
    except VerdiffError as exc:
        raise _fail("Comparison error", exc) from exc

    if cfg.report.format == "terminal":
        terminal.render(result)
        if output:
            _emit(json_report.render(result), output)
    else:
        _emit(render_result(result, cfg.report.format), output)

    _gate(result.risk_level.value, cfg.report.fail_on)


# ── changes ───────────────────────────────────────────────────────────────────


@app.command()
def changes(
    old: Path = typer.Argument(..., help="Snapshot of the older version"),
    new: Path = typer.Argument(..., help="Snapshot of the newer version"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .verdiff.toml"),
    format: Optional[str] = typer.Option(None, "--format", "-f", help="Output format: terminal | json | markdown"),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Write report to file"),
    fail_on: Optional[str] = typer.Option(None, "--fail-on", help="Risk threshold: low | medium | high | critical"),
) -> None:
    """Classify file changes, breaking API changes and their impact."""
    from verdiff.changes.detector import ChangeDetectionConfig, ChangeDetector
    from verdiff.output import json_report, markdown, terminal

    _check_choice(format, ("terminal", "json", "markdown"), "format")
    _check_choice(fail_on, _RISK_LEVELS, "fail-on level")

    cfg = _load_config(config)
    fmt = format or ("terminal" if cfg.report.format == "html" else cfg.report.format)
    threshold = fail_on or cfg.report.fail_on

    a, b = _load_pair(old, new)
    detector = ChangeDetector(
        ChangeDetectionConfig.from_patterns(cfg.changes.include_patterns, cfg.changes.exclude_patterns)
    )
    report = detector.generate_change_report(a, b)

    if fmt == "json":
        _emit(json_report.render_change_report(report), output)
    elif fmt == "markdown":
        _emit(markdown.render_change_report(report, f"Changes {a.version_label} → {b.version_label}"), output)
    else:
        terminal.render_change_report(report)
        if output:
            _emit(json_report.render_change_report(report), output)

    _gate(report.summary.risk_level.value, threshold)


# ── diff ──────────────────────────────────────────────────────────────────────


@app.command()
def diff(
    old: Path = typer.Argument(..., help="Snapshot of the older version"),
    new: Path = typer.Argument(..., help="Snapshot of the newer version"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .verdiff.toml"),
    style: Optional[str] = typer.Option(None, "--style", "-s", help="unified | context | side-by-side"),
    context: Optional[int] = typer.Option(None, "--context", "-U", min=0, help="Context lines around each change"),
    algorithm: Optional[str] = typer.Option(None, "--algorithm", help="Hunking algorithm: simple | sequence"),
    root_old: Optional[Path] = typer.Option(None, "--root-old", help="Checkout directory for the older version"),
    root_new: Optional[Path] = typer.Option(None, "--root-new", help="Checkout directory for the newer version"),
    as_json: bool = typer.Option(False, "--json", help="Emit the structured diff as JSON"),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Write diff to file"),
) -> None:
    """Render a line-level diff between two snapshots."""
    from verdiff.config.schema import DIFF_ALGORITHMS, DIFF_STYLES
    from verdiff.diff.formatters import render
    from verdiff.diff.generator import DiffGenerator, DirectoryContentLookup
    from verdiff.diff.models import DiffOptions
    from verdiff.output import json_report

    _check_choice(style, DIFF_STYLES, "diff style")
    _check_choice(algorithm, DIFF_ALGORITHMS, "diff algorithm")

    cfg = _load_config(config)
    a, b = _load_pair(old, new)

    # one lookup per side so equal version labels still read separate trees
    old_lookup = new_lookup = None
    if root_old or root_new:
        old_lookup = DirectoryContentLookup({a.version_label: root_old} if root_old else {})
        new_lookup = DirectoryContentLookup({b.version_label: root_new} if root_new else {})

    generator = DiffGenerator(cfg.diff, old_lookup, new_content_lookup=new_lookup)
    try:
        report = generator.generate_diff(a, b, DiffOptions(context_lines=context, algorithm=algorithm))
        text = (
            json_report.render_diff(report)
            if as_json
            else render(report, style or cfg.diff.style, cfg.diff.column_width)
        )
    except VerdiffError as exc:
        raise _fail("Diff error", exc) from exc

    _emit(text, output)


# ── version ───────────────────────────────────────────────────────────────────


def _strategy(strategy: Optional[str], config: Optional[str]):
    from verdiff.versioning.registry import strategy_from_config

    cfg = _load_config(config)
    try:
        return strategy_from_config(cfg, strategy)
    except VerdiffError as exc:
        raise _fail("Strategy error", exc) from exc


_STRATEGY_OPTION = typer.Option(None, "--strategy", "-S", help="semantic | timestamp | custom | branch")
_CONFIG_OPTION = typer.Option(None, "--config", "-c", help="Path to .verdiff.toml")


@version_app.command("parse")
def version_parse(
    version: str = typer.Argument(..., help="Version string to parse"),
    strategy: Optional[str] = _STRATEGY_OPTION,
    config: Optional[str] = _CONFIG_OPTION,
) -> None:
    """Parse a version string and print its metadata as JSON."""
    from verdiff.output.json_report import version_metadata_to_dict

    impl = _strategy(strategy, config)
    try:
        metadata = impl.parse_version(version)
    except VerdiffError as exc:
        raise _fail("Invalid version", exc) from exc
    print(json.dumps(version_metadata_to_dict(metadata), indent=2))


@version_app.command("compare")
def version_compare(
    a: str = typer.Argument(..., help="First version"),
    b: str = typer.Argument(..., help="Second version"),
    strategy: Optional[str] = _STRATEGY_OPTION,
    config: Optional[str] = _CONFIG_OPTION,
    as_json: bool = typer.Option(False, "--json", help="Emit the comparison as JSON"),
) -> None:
    """Order two versions."""
    from verdiff.output.json_report import version_comparison_to_dict
    from verdiff.output.terminal import render_version_comparison

    impl = _strategy(strategy, config)
    try:
        comparison = impl.compare_versions(a, b)
    except VerdiffError as exc:
        raise _fail("Invalid version", exc) from exc

    if as_json:
        print(json.dumps(version_comparison_to_dict(comparison), indent=2))
    else:
        print(comparison.result.value)
        render_version_comparison(a, b, comparison, console)


@version_app.command("bump")
def version_bump(
    version: str = typer.Argument(..., help="Version to bump"),
    kind: str = typer.Argument("patch", help="major | minor | patch | prerelease (semantic), build (branch)"),
    strategy: Optional[str] = _STRATEGY_OPTION,
    config: Optional[str] = _CONFIG_OPTION,
    pre_id: Optional[str] = typer.Option(None, "--pre-id", help="Prerelease identifier"),
    commit: Optional[str] = typer.Option(None, "--commit", help="Commit hash for branch builds"),
) -> None:
    """Print the next version."""
    from verdiff.versioning.branch import BranchVersioning
    from verdiff.versioning.semantic import SemanticVersioning

    impl = _strategy(strategy, config)
    try:
        metadata = impl.parse_version(version)
        if isinstance(impl, SemanticVersioning):
            bumped = impl.bump_version(metadata, kind, pre_id)
        elif isinstance(impl, BranchVersioning) and kind == "build":
            bumped = impl.bump_build(metadata, commit)
        else:
            console.print(
                f"[bold red]Cannot bump:[/bold red] {impl.get_strategy_name()} does not support '{escape(kind)}'"
            )
            raise typer.Exit(code=2)
    except VerdiffError as exc:
        raise _fail("Bump error", exc) from exc
    print(bumped.version_string)


@version_app.command("validate")
def version_validate(
    versions: List[str] = typer.Argument(..., help="Version strings to check"),
    strategy: Optional[str] = _STRATEGY_OPTION,
    config: Optional[str] = _CONFIG_OPTION,
) -> None:
    """Exit 1 if any version is invalid for the strategy."""
    impl = _strategy(strategy, config)
    invalid = 0
    for candidate in versions:
        if impl.is_valid_version(candidate):
            console.print(f"[green]✓[/green] {escape(candidate)}")
        else:
            invalid += 1
            console.print(f"[red]✗[/red] {escape(candidate)}")
    if invalid:
        raise typer.Exit(code=1)


# ── init ──────────────────────────────────────────────────────────────────────


@app.command()
def init(
    full: bool = typer.Option(False, "--full", help="Include all config options with comments"),
) -> None:
    """Generate a starter .verdiff.toml in the current directory."""
    from verdiff.config.defaults import DEFAULT_TOML, FULL_TOML
    from verdiff.config.loader import CONFIG_FILENAME

    config_path = Path.cwd() / CONFIG_FILENAME

    if config_path.exists():
        console.print(f"[yellow]⚠[/yellow]  {CONFIG_FILENAME} already exists at {escape(str(config_path))}")
        raise typer.Exit(code=1)

    template = FULL_TOML if full else DEFAULT_TOML
    config_path.write_text(template, encoding="utf-8")
    console.print(f"[green]✓[/green] Created {escape(str(config_path))}")


# ── root ──────────────────────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        print(f"verdiff {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", "-V", callback=_version_callback,
        is_eager=True, help="Show version and exit",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only log errors"),
    log_file: Optional[str] = typer.Option(None, "--log-file", help="Also write logs to this file"),
) -> None:
    """verdiff: version identifiers and change-impact reports for project snapshots."""
    from verdiff.logging_config import setup_logging

    setup_logging(verbose=verbose, quiet=quiet, log_file=log_file)
