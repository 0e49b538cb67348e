"""Text layouts for a :class:`DiffReport`: unified, context, side-by-side."""

from __future__ import annotations

from typing import Iterator, List, Optional, Tuple

from verdiff.changes.models import ChangeType
from verdiff.config.schema import DIFF_STYLES
from verdiff.diff.models import DiffReport, Hunk, LineKind
from verdiff.errors import InvalidFormatError

DEV_NULL = "/dev/null"

_PREFIX = {
    LineKind.ADDED: "+",
    LineKind.REMOVED: "-",
    LineKind.UNCHANGED: " ",
}


def format_unified(report: DiffReport) -> str:
    lines: List[str] = [
        f"--- {report.metadata.version_a}",
        f"+++ {report.metadata.version_b}",
    ]
    for file in report.files:
        lines.append(f"diff --git a/{file.path} b/{file.path}")
        lines.append(f"--- {DEV_NULL if file.change_type is ChangeType.ADDED else 'a/' + file.path}")
        lines.append(f"+++ {DEV_NULL if file.change_type is ChangeType.DELETED else 'b/' + file.path}")
        for hunk in file.hunks:
            lines.append(hunk.header)
            lines.extend(f"{_PREFIX[c.kind]}{c.text}" for c in hunk.changes)
    return "\n".join(lines)


def _context_range(start: int, count: int) -> str:
    if count <= 1:
        return str(start)
    return f"{start},{start + count - 1}"


def format_context(report: DiffReport) -> str:
    lines: List[str] = []
    for file in report.files:
        lines.append(f"*** {file.path} {report.metadata.version_a}")
        lines.append(f"--- {file.path} {report.metadata.version_b}")
        for hunk in file.hunks:
            lines.append("***************")
            lines.append(f"*** {_context_range(hunk.old_start, hunk.old_lines)} ****")
            for change in hunk.changes:
                if change.kind is LineKind.REMOVED:
                    lines.append(f"- {change.text}")
                elif change.kind is LineKind.UNCHANGED:
                    lines.append(f"  {change.text}")
            lines.append(f"--- {_context_range(hunk.new_start, hunk.new_lines)} ----")
            for change in hunk.changes:
                if change.kind is LineKind.ADDED:
                    lines.append(f"+ {change.text}")
                elif change.kind is LineKind.UNCHANGED:
                    lines.append(f"  {change.text}")
    return "\n".join(lines)


def _rows(hunk: Hunk) -> Iterator[Tuple[Optional[str], Optional[str]]]:
    """Pair each run of removed lines with the run of added lines after it."""
    removed: List[str] = []
    added: List[str] = []

    def flush() -> Iterator[Tuple[Optional[str], Optional[str]]]:
        for k in range(max(len(removed), len(added))):
            yield (
                removed[k] if k < len(removed) else None,
                added[k] if k < len(added) else None,
            )
        removed.clear()
        added.clear()

    for change in hunk.changes:
        if change.kind is LineKind.UNCHANGED:
            yield from flush()
            yield change.text, change.text
        elif change.kind is LineKind.REMOVED:
            if added:
                yield from flush()
            removed.append(change.text)
        else:
            added.append(change.text)
    yield from flush()


def _marker(left: Optional[str], right: Optional[str]) -> str:
    if left is None:
        return ">"
    if right is None:
        return "<"
    return " " if left == right else "|"


def format_side_by_side(report: DiffReport, width: int = 40) -> str:
    """Two fixed-width columns; ``<`` old only, ``>`` new only, ``|`` changed."""
    width = max(1, width)
    lines: List[str] = [
        f"{report.metadata.version_a[:width].ljust(width)}   {report.metadata.version_b}",
        "=" * (width * 2 + 3),
    ]
    for file in report.files:
        lines.append(f"{file.path} ({file.change_type.value})")
        lines.append(f"{'-' * width} | {'-' * width}")
        for hunk in file.hunks:
            for left, right in _rows(hunk):
                text = (left or "")[:width].ljust(width)
                lines.append(f"{text} {_marker(left, right)} {(right or '')[:width]}".rstrip())
    return "\n".join(lines)


def render(report: DiffReport, style: str = "unified", width: int = 40) -> str:
    """Render *report* in the named layout."""
    if style == "unified":
        return format_unified(report)
    if style == "context":
        return format_context(report)
    if style == "side-by-side":
        return format_side_by_side(report, width)
    raise InvalidFormatError(f"Unsupported diff style: {style}", {"allowed": ", ".join(DIFF_STYLES)})

